"""The ``ramlconsole validate`` command -- check values without sending.

Looks up each ``NAME=VALUE`` among the method's headers, URI parameters,
query parameters and form parameters, then runs the
:class:`~ramlconsole.client.validator.Validator` built from its definition.
"""

from __future__ import annotations

from typing import Optional

import typer

from ramlconsole.commands.common import find_method, load_api, parse_pairs, reported_errors
from ramlconsole.exit_codes import EXIT_INVALID_USAGE
from ramlconsole.models import NamedParameter
from ramlconsole.output import get_output, success, warning


def validate_command(
    document: str = typer.Argument(help="Parsed RAML document: file path, URL, or '-'."),
    method: str = typer.Argument(help="HTTP method, e.g. POST."),
    path: str = typer.Argument(help="Full resource path, e.g. /users."),
    params: Optional[list[str]] = typer.Option(
        None, "--param", "-P", help="Value to check, NAME=VALUE (repeatable)."
    ),
) -> None:
    """Validate parameter values against the method's definitions.

    Required parameters that were not supplied are checked as empty.

    Example::

        ramlconsole validate api.json GET /users -P limit=500 -P sort=name
    """
    from ramlconsole.client.validator import Validator
    from ramlconsole.inspector import parameter_groups

    with reported_errors():
        api = load_api(document)
        resource, selected = find_method(api, method, path)
        values = parse_pairs(params, "--param")

    definitions: dict[str, tuple[str, NamedParameter]] = {}
    for label, parameters in parameter_groups(resource, selected):
        for name, parameter in parameters.items():
            definitions.setdefault(name, (label, parameter))

    for name in values:
        if name not in definitions:
            warning(f"'{name}' is not a declared parameter of {selected.method.upper()} {path}")

    rows: list[list[str]] = []
    invalid = 0
    for name, (label, parameter) in definitions.items():
        if name not in values and not parameter.required:
            continue
        value = values.get(name, "")
        errors = Validator.from_definition(parameter).validate(value)
        if errors:
            invalid += 1
        rows.append([label, name, value, ", ".join(errors) if errors else "ok"])

    get_output().print_table(
        ["Group", "Parameter", "Value", "Result"],
        rows,
        title=f"{selected.method.upper()} {resource.path}",
    )

    if invalid:
        raise typer.Exit(code=EXIT_INVALID_USAGE)
    success("All values are valid.")
