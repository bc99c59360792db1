"""Inspect commands -- examine a parsed RAML document.

Provides the ``ramlconsole inspect`` sub-command group with read-only
commands for viewing the inspected API: grouped resources, methods with
their security requirements, the parameters of one method, security
schemes, and general API info.
"""

from __future__ import annotations

from typing import Optional

import typer

from ramlconsole.commands.common import find_method, load_api, reported_errors
from ramlconsole.models import SchemeKind
from ramlconsole.output import format_response, get_output, info

inspect_app = typer.Typer(no_args_is_help=True)

DOCUMENT_HELP = "Parsed RAML document: file path, URL, or '-' for stdin."


@inspect_app.command("resources")
def inspect_resources(
    document: str = typer.Argument(help=DOCUMENT_HELP),
) -> None:
    """List resources grouped by their top-level path.

    Example::

        ramlconsole inspect resources api.json
    """
    with reported_errors():
        api = load_api(document)

    rows: list[list[str]] = []
    for index, group in enumerate(api.resource_groups, start=1):
        for resource in group:
            rows.append([
                str(index),
                resource.path,
                resource.display_name or "-",
                ", ".join(m.method.upper() for m in resource.methods) or "-",
            ])

    get_output().print_table(
        ["Group", "Path", "Name", "Methods"],
        rows,
        title=f"{api.title} -- Resources ({len(rows)})",
    )


@inspect_app.command("methods")
def inspect_methods(
    document: str = typer.Argument(help=DOCUMENT_HELP),
    path: Optional[str] = typer.Option(
        None, "--path", help="Only show methods of this resource path."
    ),
) -> None:
    """List methods with their security requirements.

    Example::

        ramlconsole inspect methods api.json
        ramlconsole inspect methods api.json --path /users/{userId}
    """
    from ramlconsole.inspector import scheme_name

    with reported_errors():
        api = load_api(document)

    rows: list[list[str]] = []
    for resource in api.resources:
        if path is not None and resource.path != path:
            continue
        for method in resource.methods:
            secured_by = [scheme_name(entry) or "anonymous" for entry in method.secured_by]
            rows.append([
                method.method.upper(),
                resource.path,
                ", ".join(secured_by) or "-",
                "Yes" if method.allows_anonymous_access() else "No",
            ])

    get_output().print_table(
        ["Method", "Path", "Secured By", "Anonymous"],
        rows,
        title=f"{api.title} -- Methods ({len(rows)})",
    )


@inspect_app.command("parameters")
def inspect_parameters(
    document: str = typer.Argument(help=DOCUMENT_HELP),
    method: str = typer.Argument(help="HTTP method, e.g. GET."),
    path: str = typer.Argument(help="Full resource path, e.g. /users/{userId}."),
) -> None:
    """Document the parameters of one method.

    Example::

        ramlconsole inspect parameters api.json POST /users
    """
    from ramlconsole.inspector import describe_constraints, parameter_groups

    with reported_errors():
        api = load_api(document)
        resource, selected = find_method(api, method, path)

    rows: list[list[str]] = []
    for label, parameters in parameter_groups(resource, selected):
        for name, parameter in parameters.items():
            rows.append([
                label,
                parameter.display_name or name,
                describe_constraints(parameter),
                parameter.description or "",
            ])

    if not rows:
        info(f"{selected.method.upper()} {resource.path} declares no parameters.")
        return

    get_output().print_table(
        ["Group", "Parameter", "Constraints", "Description"],
        rows,
        title=f"{selected.method.upper()} {resource.path}",
    )


@inspect_app.command("auth")
def inspect_auth(
    document: str = typer.Argument(help=DOCUMENT_HELP),
) -> None:
    """Show the security schemes declared by the API.

    Example::

        ramlconsole inspect auth api.json
    """
    with reported_errors():
        api = load_api(document)

    if not api.security_schemes:
        info("No security schemes declared.")
        return

    rows: list[list[str]] = []
    for name, scheme in api.security_schemes.items():
        delivery = "-"
        if scheme.kind is SchemeKind.OAUTH2:
            delivery = "query parameter" if scheme.delivers_token_in_query else "header"
        rows.append([
            name,
            scheme.type or "-",
            scheme.kind.name.lower(),
            delivery,
            scheme.settings.authorization_uri or "-",
        ])

    get_output().print_table(
        ["Name", "Type", "Kind", "Token Delivery", "Authorization URI"],
        rows,
        title="Security Schemes",
    )


@inspect_app.command("info")
def inspect_info(
    document: str = typer.Argument(help=DOCUMENT_HELP),
) -> None:
    """Show general API information.

    Example::

        ramlconsole inspect info api.json --json
    """
    with reported_errors():
        api = load_api(document)

    data = {
        "title": api.title,
        "version": api.version,
        "base_uri": str(api.base_uri) if api.base_uri is not None else None,
        "media_type": api.media_type,
        "protocols": api.protocols,
        "resources": len(api.resources),
        "resource_groups": len(api.resource_groups),
        "methods": sum(len(r.methods) for r in api.resources),
        "security_schemes": list(api.security_schemes),
        "documentation": [item.title for item in api.documentation],
    }
    format_response(data)
