"""Parameter documentation helpers used by the CLI listings."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ramlconsole.models import Method, NamedParameter, Resource

FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART_FORM_DATA = "multipart/form-data"


def parameter_groups(
    resource: Resource, method: Method
) -> list[tuple[str, dict[str, NamedParameter]]]:
    """Ordered ``(label, parameters)`` pairs documenting *method*.

    Empty groups are skipped.
    """
    groups: list[tuple[str, dict[str, NamedParameter]]] = []
    if method.headers:
        groups.append(("Headers", method.headers))
    if resource.uri_parameters:
        groups.append(("URI Parameters", resource.uri_parameters))
    if method.query_parameters:
        groups.append(("Query Parameters", method.query_parameters))

    normal_form = method.body.get(FORM_URLENCODED)
    multipart_form = method.body.get(MULTIPART_FORM_DATA)
    if normal_form is not None and normal_form.form_parameters:
        groups.append(("Form Parameters", normal_form.form_parameters))
    if multipart_form is not None and multipart_form.form_parameters:
        groups.append(("Multipart Form Parameters", multipart_form.form_parameters))
    return groups


def describe_constraints(parameter: NamedParameter) -> str:
    """One-line summary such as ``"required, integer ≥ 1, default: 10"``."""
    result = "required, " if parameter.required else ""

    if parameter.enum:
        result += "one of (" + ", ".join(str(item) for item in parameter.enum) + ")"
    else:
        result += parameter.type

    if parameter.pattern:
        result += f" matching {parameter.pattern}"

    shortest, longest = parameter.min_length, parameter.max_length
    if shortest and longest:
        result += f", {shortest}-{longest} characters"
    elif shortest:
        result += f", at least {shortest} characters"
    elif longest:
        result += f", at most {longest} characters"

    lower, upper = parameter.minimum, parameter.maximum
    if lower and upper:
        result += f" between {lower}-{upper}"
    elif lower:
        result += f" ≥ {lower}"
    elif upper:
        result += f" ≤ {upper}"

    if parameter.repeat:
        result += ", repeatable"
    if parameter.default:
        result += f", default: {parameter.default}"
    return result


def scheme_name(entry: Any) -> Optional[str]:
    """Name of a ``securedBy`` entry; ``None`` stands for anonymous access."""
    if entry is None:
        return None
    if isinstance(entry, Mapping):
        return next(iter(entry), None)
    return str(entry)
