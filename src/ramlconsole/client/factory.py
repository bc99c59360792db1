"""Client factory: renders an API's base URI from user-supplied values."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Union

from ramlconsole.client.uri_template import URITemplate
from ramlconsole.exceptions import DefinitionError
from ramlconsole.models import Api, Resource

Parsed = Union[Api, Mapping[str, Any]]


def _field(parsed: Any, name: str, alias: str) -> Any:
    if isinstance(parsed, Mapping):
        return parsed.get(alias)
    return getattr(parsed, name, None)


def create_base_uri(root: Parsed) -> URITemplate:
    """Build the base URI template of *root* with ``{version}`` pre-resolved.

    Raises:
        DefinitionError: If the API declares no base URI.
    """
    base_uri = _field(root, "base_uri", "baseUri")
    if base_uri is None:
        raise DefinitionError("The API does not declare a baseUri")
    version = _field(root, "version", "version")
    return URITemplate(
        str(base_uri),
        _field(root, "base_uri_parameters", "baseUriParameters"),
        parameter_values={"version": version},
    )


def create_path_segment(resource: Union[Resource, Mapping[str, Any]]) -> URITemplate:
    """Build the URI template of one resource's relative URI."""
    return URITemplate(
        _field(resource, "relative_uri", "relativeUri"),
        _field(resource, "uri_parameters", "uriParameters"),
    )


class Configuration:
    """Collects client options before the base URI is rendered."""

    def __init__(self, parsed: Parsed) -> None:
        self._parsed = parsed
        self._base_uri_parameters: dict[str, Any] = {}

    def base_uri_parameters(self, values: Optional[Mapping[str, Any]]) -> None:
        """Replace the values used to render the base URI."""
        self._base_uri_parameters = dict(values or {})

    def get_base_uri(self) -> str:
        """Render a freshly built base URI template.

        The document's ``version`` always overrides a user-supplied
        ``version`` value.

        Raises:
            MissingURIParameterError: If a required base URI parameter has
                no value.
        """
        template = create_base_uri(self._parsed)
        context = {
            **self._base_uri_parameters,
            "version": _field(self._parsed, "version", "version"),
        }
        return template.render(context)


class Client:
    """Carries the rendered base URI of an API."""

    def __init__(self, configuration: Configuration) -> None:
        self.base_uri = configuration.get_base_uri()

    def __repr__(self) -> str:
        return f"Client(base_uri={self.base_uri!r})"


def create(
    parsed: Parsed,
    configure: Optional[Callable[[Configuration], None]] = None,
) -> Client:
    """Create a :class:`Client` for *parsed*.

    Args:
        parsed: An inspected :class:`~ramlconsole.models.Api` or the raw
            parser mapping.
        configure: Optional callback receiving the :class:`Configuration`
            before the base URI is rendered.

    Example::

        client = create(api, lambda c: c.base_uri_parameters({"region": "eu"}))
        client.base_uri   # "https://eu.example.com/v1"
    """
    configuration = Configuration(parsed)
    if configure is not None:
        configure(configuration)
    return Client(configuration)
