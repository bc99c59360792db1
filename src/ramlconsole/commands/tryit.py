"""The ``ramlconsole try`` command -- send a real request for one method.

Collects parameter values from repeated ``NAME=VALUE`` options, selects a
security scheme and its credentials, and runs
:class:`~ramlconsole.console.TryIt`. Credential options accept the
``env:``, ``file:`` and ``prompt`` sources of
:func:`~ramlconsole.config.resolve_credential`.
"""

from __future__ import annotations

import asyncio
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Optional

import typer

from ramlconsole.commands.common import find_method, load_api, parse_pairs, reported_errors
from ramlconsole.exceptions import InvalidUsageError, RamlConsoleError
from ramlconsole.exit_codes import EXIT_INVALID_USAGE
from ramlconsole.models import (
    BasicCredentials,
    Method,
    OAuth2Credentials,
    SchemeKind,
    SecurityScheme,
)
from ramlconsole.output import error, get_output, warning


def _read_body(body: Optional[str]) -> Optional[str]:
    if body is None or not body.startswith("@"):
        return body
    path = Path(body[1:]).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidUsageError(f"Cannot read body file {path}: {exc}") from exc


def _select_scheme(
    method: Method,
    scheme_name: Optional[str],
    wants_credentials: bool,
) -> Optional[SecurityScheme]:
    """Pick the scheme to authenticate with.

    Without ``--scheme``, the method's only scheme is used when credentials
    were supplied.
    """
    schemes = method.security_schemes()
    if scheme_name is None or scheme_name == "anonymous":
        if scheme_name is None and wants_credentials and len(schemes) == 1:
            return next(iter(schemes.values()))
        return None
    if scheme_name not in schemes:
        available = ", ".join(schemes) or "(none)"
        raise InvalidUsageError(
            f"Scheme '{scheme_name}' does not secure this method. Available: {available}"
        )
    return schemes[scheme_name]


def _credentials_for(
    scheme: SecurityScheme,
    username: Optional[str],
    password: Optional[str],
    client_id: Optional[str],
    client_secret: Optional[str],
) -> Any:
    from ramlconsole.config import resolve_credential

    if scheme.kind is SchemeKind.BASIC:
        return BasicCredentials(
            username=resolve_credential(username or "prompt", "username"),
            password=resolve_credential(password or "prompt", "password"),
        )
    if scheme.kind is SchemeKind.OAUTH2:
        return OAuth2Credentials(
            client_id=resolve_credential(client_id or "prompt", "client id"),
            client_secret=resolve_credential(client_secret or "prompt", "client secret"),
        )
    return None


def try_command(
    document: str = typer.Argument(help="Parsed RAML document: file path, URL, or '-'."),
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    path: str = typer.Argument(help="Full resource path, e.g. /users/{userId}."),
    base_params: Optional[list[str]] = typer.Option(
        None, "--base-param", help="Base URI parameter NAME=VALUE (repeatable)."
    ),
    uri_params: Optional[list[str]] = typer.Option(
        None, "--uri-param", "-u", help="URI parameter NAME=VALUE (repeatable)."
    ),
    query: Optional[list[str]] = typer.Option(
        None, "--query", "-Q", help="Query parameter NAME=VALUE (repeatable)."
    ),
    headers: Optional[list[str]] = typer.Option(
        None, "--header", "-H", help="Header NAME=VALUE (repeatable)."
    ),
    form: Optional[list[str]] = typer.Option(
        None, "--form", "-F", help="Form parameter NAME=VALUE (repeatable)."
    ),
    body: Optional[str] = typer.Option(
        None, "--body", "-d", help="Raw request body, or @FILE to read it from a file."
    ),
    example_body: bool = typer.Option(
        False, "--example-body", help="Send the documented body example."
    ),
    media_type: Optional[str] = typer.Option(
        None, "--media-type", "-m", help="Request media type (defaults to the first declared)."
    ),
    scheme: Optional[str] = typer.Option(
        None, "--scheme", "-s", help="Security scheme name, or 'anonymous'."
    ),
    username: Optional[str] = typer.Option(
        None, "--username", help="Basic auth username (or env:/file:/prompt source)."
    ),
    password: Optional[str] = typer.Option(
        None, "--password", help="Basic auth password (or env:/file:/prompt source)."
    ),
    client_id: Optional[str] = typer.Option(
        None, "--client-id", help="OAuth 2.0 client id (or env:/file:/prompt source)."
    ),
    client_secret: Optional[str] = typer.Option(
        None, "--client-secret", help="OAuth 2.0 client secret (or env:/file:/prompt source)."
    ),
    no_listener: bool = typer.Option(
        False,
        "--no-listener",
        help="Do not serve the OAuth 2.0 redirect URI locally.",
    ),
    show_headers: bool = typer.Option(
        False, "--show-headers", "-i", help="Print response headers to stderr."
    ),
) -> None:
    """Send a request for METHOD PATH and print the response.

    Example::

        ramlconsole try api.json GET /users/{userId} -u userId=42
        ramlconsole try api.json POST /users -F name=Ada --scheme basic \\
            --username env:API_USER --password env:API_PASSWORD
    """
    from ramlconsole.auth.keychain import Keychain
    from ramlconsole.config import get_settings
    from ramlconsole.console import ExecutionState, TryIt
    from ramlconsole.strategies.oauth2 import RedirectListener

    with reported_errors():
        api = load_api(document)
        resource, selected = find_method(api, method, path)
        settings = get_settings()

        wants_credentials = any(v is not None for v in (username, password, client_id, client_secret))
        chosen = _select_scheme(selected, scheme, wants_credentials)

        keychain = Keychain()
        if chosen is not None:
            keychain.select(chosen.name)
            keychain.set_credentials(
                chosen.name,
                _credentials_for(chosen, username, password, client_id, client_secret),
            )

        tryit = TryIt(api, resource, selected, keychain=keychain, settings=settings)
        if media_type is not None:
            if media_type not in selected.body:
                warning(f"{media_type} is not a declared media type of this method")
            tryit.media_type = media_type
        for name, value in parse_pairs(base_params, "--base-param").items():
            tryit.set_base_uri_parameter(name, value)
        for name, value in parse_pairs(uri_params, "--uri-param").items():
            tryit.set_uri_parameter(name, value)
        tryit.query_parameters.update(parse_pairs(query, "--query"))
        tryit.headers.update(parse_pairs(headers, "--header"))
        tryit.form_parameters.update(parse_pairs(form, "--form"))
        if example_body:
            tryit.fill_body()
        if body is not None:
            tryit.body = _read_body(body)

        listen = chosen is not None and chosen.kind is SchemeKind.OAUTH2 and not no_listener
        with RedirectListener(settings.oauth2_redirect_uri) if listen else nullcontext():
            asyncio.run(tryit.execute())

    if tryit.disallowed_anonymous_request:
        warning(f"{selected.method.upper()} {resource.path} does not allow anonymous access")

    if tryit.state is ExecutionState.MISSING_URI_PARAMETERS:
        error(f"Required URI parameters must be entered: {tryit.error}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    if tryit.state is ExecutionState.FAILED:
        failure: Optional[RamlConsoleError] = tryit.error
        error(str(failure))
        raise typer.Exit(code=failure.exit_code if failure else 1)

    if tryit.response is not None:
        get_output().print_response(tryit.response, show_headers)
