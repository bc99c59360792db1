"""Parameterized URI templates with ``{name}`` placeholders.

Only literal ``{name}`` substitution is supported; RFC 6570 operators
(``{+path}``, ``{?query}``, ...) are treated as plain names.

A template knows which of its parameters are required. Rendering checks all
of them before substituting anything and raises
:class:`~ramlconsole.exceptions.MissingURIParameterError` for the first one
missing, so a half-rendered URL is never produced. Optional placeholders
without a value render as the empty string.

Example::

    segment = URITemplate("/users/{id}", {"id": {"required": True}})
    segment.tokens            # ["/users/", "id"]
    segment.render({"id": 42})  # "/users/42"
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from ramlconsole.exceptions import MissingURIParameterError

_TEMPLATE_RE = re.compile(r"\{([^}]*)\}")


def _is_required(definition: Any) -> bool:
    if isinstance(definition, Mapping):
        return bool(definition.get("required"))
    return bool(getattr(definition, "required", False))


def tokenize(template: str) -> list[str]:
    """Split *template* into literal text and placeholder names.

    Braces are removed from placeholders and empty fragments are dropped, so
    ``"/{a}{b}"`` yields ``["/", "a", "b"]``.
    """
    return [token for token in _TEMPLATE_RE.split(template) if token]


class URITemplate:
    """An immutable path fragment with named placeholders.

    Args:
        template: Template text such as ``"/users/{userId}"``.
        parameters: Parameter definitions keyed by placeholder name; only
            their ``required`` flag matters here. Placeholders without a
            definition are optional.
        parameter_values: Fixed values substituted into the template text
            up front (e.g. the API ``version``). Falsy values leave the
            placeholder in place.
    """

    def __init__(
        self,
        template: str,
        parameters: Optional[Mapping[str, Any]] = None,
        parameter_values: Optional[Mapping[str, Any]] = None,
    ) -> None:
        values = parameter_values or {}

        def _pre_resolve(match: re.Match[str]) -> str:
            value = values.get(match.group(1))
            if value:
                return str(value)
            return match.group(0)

        self._template = _TEMPLATE_RE.sub(_pre_resolve, template)
        self._parameters = dict(parameters or {})
        self._tokens = tuple(tokenize(self._template))
        self._required = tuple(
            name for name, definition in self._parameters.items() if _is_required(definition)
        )

    @property
    def template(self) -> str:
        return self._template

    @property
    def parameters(self) -> dict[str, Any]:
        return dict(self._parameters)

    @property
    def tokens(self) -> list[str]:
        return list(self._tokens)

    @property
    def placeholders(self) -> list[str]:
        """Placeholder names in the order they appear."""
        return _TEMPLATE_RE.findall(self._template)

    @property
    def required_parameters(self) -> list[str]:
        return list(self._required)

    def render(self, context: Optional[Mapping[str, Any]] = None) -> str:
        """Substitute *context* values into the template.

        Args:
            context: Placeholder values. ``None`` behaves like ``{}``.

        Returns:
            The rendered string.

        Raises:
            MissingURIParameterError: If a required parameter has no (or an
                empty) value in *context*.
        """
        context = context or {}

        for name in self._required:
            if not context.get(name):
                raise MissingURIParameterError(name)

        def _substitute(match: re.Match[str]) -> str:
            value = context.get(match.group(1))
            return str(value) if value else ""

        return _TEMPLATE_RE.sub(_substitute, self._template)

    def __str__(self) -> str:
        return self._template

    def __repr__(self) -> str:
        return f"URITemplate({self._template!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URITemplate):
            return NotImplemented
        return self._template == other._template and self._required == other._required

    def __hash__(self) -> int:
        return hash((self._template, self._required))
