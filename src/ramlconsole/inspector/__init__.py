"""Resource inspector: turns parser output into the inspected API model.

:func:`create` walks the nested resource tree, builds each resource's
chain of URI templates, binds the API's security schemes to every method,
orders methods by verb and groups resources by their top-level segment.

Example::

    from ramlconsole.inspector import create

    api = create(document)
    [[r.path for r in group] for group in api.resource_groups]
"""

from ramlconsole.inspector.parameters import describe_constraints, parameter_groups, scheme_name
from ramlconsole.inspector.resources import (
    METHOD_ORDERING,
    create,
    extract_resources,
    group_resources,
    method_order,
    security_schemes_from,
    sort_methods,
)

__all__ = [
    "METHOD_ORDERING",
    "create",
    "describe_constraints",
    "extract_resources",
    "group_resources",
    "method_order",
    "parameter_groups",
    "scheme_name",
    "security_schemes_from",
    "sort_methods",
]
