"""Helpers shared by the CLI sub-commands."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import typer

from ramlconsole.exceptions import InvalidUsageError, RamlConsoleError
from ramlconsole.models import Api, Method, Resource
from ramlconsole.output import debug, error


@contextmanager
def reported_errors() -> Iterator[None]:
    """Report a :class:`RamlConsoleError` on stderr and exit with its code."""
    try:
        yield
    except RamlConsoleError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def load_api(document: str) -> Api:
    """Load and inspect the parsed RAML document at *document*."""
    from ramlconsole.inspector import create
    from ramlconsole.loader import load_document

    debug(f"Loading document from {document}")
    return create(load_document(document))


def find_resource(api: Api, path: str) -> Resource:
    """Return the resource whose full path template equals *path*.

    Raises:
        InvalidUsageError: If no resource matches.
    """
    for resource in api.resources:
        if resource.path == path:
            return resource
    raise InvalidUsageError(f"No resource with path '{path}' in {api.title or 'the API'}")


def find_method(api: Api, verb: str, path: str) -> tuple[Resource, Method]:
    """Return the resource at *path* and its *verb* method.

    Raises:
        InvalidUsageError: If the resource or the method does not exist.
    """
    resource = find_resource(api, path)
    for method in resource.methods:
        if method.method.upper() == verb.upper():
            return resource, method
    available = ", ".join(m.method.upper() for m in resource.methods) or "(none)"
    raise InvalidUsageError(
        f"{path} has no {verb.upper()} method. Available methods: {available}"
    )


def parse_pairs(values: Optional[list[str]], option: str) -> dict[str, str]:
    """Parse repeated ``name=value`` options into a mapping.

    Raises:
        InvalidUsageError: If an entry has no ``=``.
    """
    pairs: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise InvalidUsageError(f"Expected NAME=VALUE for {option}, got: {item}")
        pairs[name] = value
    return pairs
