"""Resource extraction, method ordering and resource grouping."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ramlconsole.client.factory import create_base_uri, create_path_segment
from ramlconsole.client.uri_template import URITemplate
from ramlconsole.exceptions import DocumentError
from ramlconsole.models import Api, Method, Resource, SecurityScheme
from ramlconsole.output import get_output

METHOD_ORDERING = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "TRACE", "CONNECT")


def method_order(verb: str) -> int:
    """Position of *verb* in :data:`METHOD_ORDERING`; unknown verbs sort last."""
    try:
        return METHOD_ORDERING.index(verb.upper())
    except ValueError:
        return len(METHOD_ORDERING)


def sort_methods(methods: Iterable[Method]) -> list[Method]:
    """Stable sort of *methods* by verb precedence."""
    return sorted(methods, key=lambda m: method_order(m.method))


def security_schemes_from(raw: Any) -> dict[str, SecurityScheme]:
    """Build the ordered scheme map of a document.

    Accepts the parser's list of single-key mappings
    (``[{"basic": {...}}, ...]``) or a plain mapping.
    """
    if not raw:
        return {}

    entries: list[tuple[str, Any]] = []
    if isinstance(raw, Mapping):
        entries.extend(raw.items())
    elif isinstance(raw, list):
        for item in raw:
            if not isinstance(item, Mapping):
                raise DocumentError(f"Invalid securitySchemes entry: {item!r}")
            entries.extend(item.items())
    else:
        raise DocumentError("securitySchemes must be a list or a mapping")

    schemes: dict[str, SecurityScheme] = {}
    for name, definition in entries:
        data = dict(definition or {})
        data["name"] = name
        schemes[name] = SecurityScheme.model_validate(data)
    return schemes


def _resource(
    raw: Mapping[str, Any],
    path_segments: list[URITemplate],
    schemes: Mapping[str, SecurityScheme],
) -> Resource:
    methods = [Method.create(dict(m), dict(schemes)) for m in (raw.get("methods") or [])]
    return Resource(
        relative_uri=raw.get("relativeUri", ""),
        display_name=raw.get("displayName"),
        description=raw.get("description"),
        uri_parameters=raw.get("uriParameters"),
        methods=sort_methods(methods),
        traits=raw.get("is"),
        resource_type=raw.get("type"),
        path_segments=path_segments,
    )


def extract_resources(
    base_segments: Sequence[URITemplate],
    node: Mapping[str, Any],
    schemes: Mapping[str, SecurityScheme],
) -> list[Resource]:
    """Flatten the resource tree below *node*, depth-first and pre-order.

    Each resource's ``path_segments`` is *base_segments* followed by one
    template per level down to the resource itself.
    """
    resources: list[Resource] = []
    for raw in node.get("resources") or []:
        if "relativeUri" not in raw:
            raise DocumentError(f"Resource without relativeUri: {raw!r}")
        segments = [*base_segments, create_path_segment(raw)]
        resources.append(_resource(raw, segments, schemes))
        resources.extend(extract_resources(segments, raw, schemes))
    return resources


def group_resources(resources: Iterable[Resource]) -> list[list[Resource]]:
    """Group consecutive resources by their top-level path segment.

    A resource starts a new group when its first segment does not start
    with the current prefix; the prefix then becomes that segment.
    String prefixes are compared, so ``/ab`` joins the group of ``/a``.
    """
    groups: list[list[Resource]] = []
    current_prefix: Optional[str] = None
    for resource in resources:
        top = str(resource.path_segments[0])
        if current_prefix is None or not top.startswith(current_prefix):
            current_prefix = top
            groups.append([])
        groups[-1].append(resource)
    return groups


def create(document: Mapping[str, Any]) -> Api:
    """Build the inspected :class:`~ramlconsole.models.Api` from parser output.

    The input mapping is not modified.

    Raises:
        DocumentError: If *document* is not a mapping or its resource tree
            is malformed.
    """
    if not isinstance(document, Mapping):
        raise DocumentError("The API document must be a mapping")

    schemes = security_schemes_from(document.get("securitySchemes"))
    resources = extract_resources([], document, schemes)
    base_uri = create_base_uri(document) if document.get("baseUri") else None

    get_output().debug(
        f"Inspected {len(resources)} resources and {len(schemes)} security schemes"
    )

    return Api(
        title=document.get("title") or "",
        version=document.get("version"),
        base_uri=base_uri,
        base_uri_parameters=document.get("baseUriParameters"),
        media_type=document.get("mediaType"),
        protocols=document.get("protocols"),
        documentation=document.get("documentation"),
        security_schemes=schemes,
        resources=resources,
        resource_groups=group_resources(resources),
    )
