"""Canonical Pydantic models shared across all ramlconsole modules.

The models fall into three groups:

**Inspected API models** -- built by :func:`ramlconsole.inspector.create`
from the raw parser output: :class:`NamedParameter`, :class:`SecurityScheme`,
:class:`BodyDefinition`, :class:`Method`, :class:`Resource` and :class:`Api`.
They are frozen; inspection constructs new objects and leaves the parser's
mapping untouched. Field aliases accept the camelCase keys the RAML parser
emits (``minLength``, ``securedBy``, ``relativeUri``, ...).

**Credential models** -- :class:`BasicCredentials` and
:class:`OAuth2Credentials`, stored per scheme in the
:class:`~ramlconsole.auth.keychain.Keychain`.

**Settings and results** -- :class:`RequestSettings`,
:class:`ConsoleSettings` (persisted as JSON in the config directory) and
:class:`ConsoleResponse` (what a "try it" execution produces).
"""

from __future__ import annotations

import enum
import re
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
    model_validator,
)

from ramlconsole.client.uri_template import URITemplate

_PLACEHOLDER_RE = re.compile(r"\{[^}]*\}")


def _parameter_map(value: Any) -> Any:
    """Normalise a RAML named-parameter map (``null`` map or ``null`` entries)."""
    if value is None:
        return {}
    if isinstance(value, dict):
        return {name: ({} if definition is None else definition) for name, definition in value.items()}
    return value


# --- Named parameters ---


class NamedParameter(BaseModel):
    """A RAML named parameter (URI, query, header or form parameter).

    The validator reads ``type``, ``required`` and the constraint fields;
    the inspector renders them into a one-line summary for documentation.
    RAML allows a parameter to list several alternative definitions; the
    first one is used.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    display_name: Optional[str] = Field(default=None, alias="displayName")
    description: Optional[str] = None
    type: str = "string"
    required: bool = False
    enum: Optional[list[Any]] = None
    pattern: Optional[str] = None
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    default: Any = None
    example: Any = None
    repeat: bool = False

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if data is None:
            return {}
        if isinstance(data, list):
            data = data[0] if data else {}
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


# --- Security schemes ---


class SchemeKind(str, enum.Enum):
    """Authentication variant of a security scheme, decided once at load time."""

    ANONYMOUS = "anonymous"
    BASIC = "Basic Authentication"
    OAUTH2 = "OAuth 2.0"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_type(cls, scheme_type: Optional[str]) -> SchemeKind:
        if scheme_type == cls.BASIC.value:
            return cls.BASIC
        if scheme_type == cls.OAUTH2.value:
            return cls.OAUTH2
        return cls.UNSUPPORTED


class SchemeSettings(BaseModel):
    """The ``settings`` block of a scheme; only OAuth 2.0 populates it."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    authorization_uri: Optional[str] = Field(default=None, alias="authorizationUri")
    access_token_uri: Optional[str] = Field(default=None, alias="accessTokenUri")
    authorization_grants: list[str] = Field(default_factory=list, alias="authorizationGrants")
    scopes: list[str] = Field(default_factory=list)


class DescribedBy(BaseModel):
    """How requests secured by a scheme carry their credentials."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    headers: dict[str, NamedParameter] = Field(default_factory=dict)
    query_parameters: dict[str, NamedParameter] = Field(
        default_factory=dict, alias="queryParameters"
    )
    responses: dict[str, Any] = Field(default_factory=dict)

    @field_validator("headers", "query_parameters", mode="before")
    @classmethod
    def _parameters(cls, value: Any) -> Any:
        return _parameter_map(value)

    @field_validator("responses", mode="before")
    @classmethod
    def _responses(cls, value: Any) -> Any:
        return value or {}


class SecurityScheme(BaseModel):
    """A named, reusable authentication mechanism declared by the API.

    ``kind`` is derived from ``type`` when the scheme is loaded, so strategy
    resolution dispatches on an enum instead of comparing strings.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    settings: SchemeSettings = Field(default_factory=SchemeSettings)
    described_by: DescribedBy = Field(default_factory=DescribedBy, alias="describedBy")
    kind: SchemeKind = SchemeKind.UNSUPPORTED

    @model_validator(mode="before")
    @classmethod
    def _derive_kind(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = dict(data)
            data.setdefault("kind", SchemeKind.from_type(data.get("type")))
            for key in ("settings", "describedBy", "described_by"):
                if key in data and data[key] is None:
                    del data[key]
        return data

    @property
    def delivers_token_in_query(self) -> bool:
        """True when the scheme declares an ``access_token`` query parameter."""
        return "access_token" in self.described_by.query_parameters


# --- Methods and resources ---


class BodyDefinition(BaseModel):
    """A request body declared for one media type."""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    form_parameters: dict[str, NamedParameter] = Field(
        default_factory=dict, alias="formParameters"
    )
    example: Optional[str] = None
    schema_: Optional[Any] = Field(default=None, alias="schema")

    @field_validator("form_parameters", mode="before")
    @classmethod
    def _parameters(cls, value: Any) -> Any:
        return _parameter_map(value)


class Method(BaseModel):
    """One HTTP-verb operation on a resource.

    Use :meth:`create` to bind the API's security schemes; the two security
    helpers read them. Header names holding a ``{...}`` placeholder (e.g.
    ``x-placeholder-{*}``) describe header families rather than concrete
    headers and are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    method: str
    description: Optional[str] = None
    headers: dict[str, NamedParameter] = Field(default_factory=dict)
    query_parameters: dict[str, NamedParameter] = Field(
        default_factory=dict, alias="queryParameters"
    )
    body: dict[str, BodyDefinition] = Field(default_factory=dict)
    responses: dict[str, Any] = Field(default_factory=dict)
    secured_by: list[Optional[Union[str, dict[str, Any]]]] = Field(
        default_factory=list, alias="securedBy"
    )
    traits: list[Any] = Field(default_factory=list, alias="is")

    _security_schemes: dict[str, SecurityScheme] = PrivateAttr(default_factory=dict)

    @field_validator("headers", mode="before")
    @classmethod
    def _concrete_headers(cls, value: Any) -> Any:
        value = _parameter_map(value)
        if isinstance(value, dict):
            return {name: d for name, d in value.items() if not _PLACEHOLDER_RE.search(name)}
        return value

    @field_validator("query_parameters", mode="before")
    @classmethod
    def _parameters(cls, value: Any) -> Any:
        return _parameter_map(value)

    @field_validator("body", mode="before")
    @classmethod
    def _bodies(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {media: ({} if body is None else body) for media, body in value.items()}
        return value

    @field_validator("responses", mode="before")
    @classmethod
    def _responses(cls, value: Any) -> Any:
        return value or {}

    @field_validator("secured_by", "traits", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> Any:
        return [] if value is None else value

    @classmethod
    def create(
        cls,
        data: dict[str, Any],
        security_schemes: Optional[dict[str, SecurityScheme]] = None,
    ) -> Method:
        """Build a method and bind the API's security schemes to it."""
        method = cls.model_validate(data)
        method._security_schemes = dict(security_schemes or {})
        return method

    def security_schemes(self) -> dict[str, SecurityScheme]:
        """Scheme definitions this method references by plain name.

        ``None`` (anonymous) entries and parameterized entries such as
        ``{"oauth_2": {"scopes": [...]}}`` are not included, nor are names
        the API does not define.
        """
        names = {entry for entry in self.secured_by if isinstance(entry, str)}
        return {
            name: scheme
            for name, scheme in self._security_schemes.items()
            if name in names
        }

    def allows_anonymous_access(self) -> bool:
        """True when ``secured_by`` lists ``None`` or declares nothing at all."""
        if not self.secured_by:
            return True
        return any(entry is None for entry in self.secured_by)


class Resource(BaseModel):
    """A node of the API's path hierarchy, flattened by the inspector.

    ``path_segments`` holds one :class:`URITemplate` per ancestor followed by
    the resource's own relative URI.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, arbitrary_types_allowed=True)

    relative_uri: str = Field(alias="relativeUri")
    display_name: Optional[str] = Field(default=None, alias="displayName")
    description: Optional[str] = None
    uri_parameters: dict[str, NamedParameter] = Field(
        default_factory=dict, alias="uriParameters"
    )
    methods: list[Method] = Field(default_factory=list)
    traits: list[Any] = Field(default_factory=list)
    resource_type: Any = Field(default=None, alias="resourceType")
    path_segments: list[URITemplate] = Field(default_factory=list, alias="pathSegments")

    @field_validator("uri_parameters", mode="before")
    @classmethod
    def _parameters(cls, value: Any) -> Any:
        return _parameter_map(value)

    @field_validator("traits", mode="before")
    @classmethod
    def _traits(cls, value: Any) -> Any:
        return value or []

    @property
    def path(self) -> str:
        """Full (unrendered) path template of this resource."""
        return "".join(str(segment) for segment in self.path_segments)


class DocumentationItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    content: str = ""


class Api(BaseModel):
    """The inspected API: a flattened, ordered and grouped resource model.

    See Also:
        :func:`ramlconsole.inspector.create`: Builds this from the parser
        output.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, arbitrary_types_allowed=True)

    title: str
    version: Optional[str] = None
    base_uri: Optional[URITemplate] = Field(default=None, alias="baseUri")
    base_uri_parameters: dict[str, NamedParameter] = Field(
        default_factory=dict, alias="baseUriParameters"
    )
    media_type: Optional[str] = Field(default=None, alias="mediaType")
    protocols: list[str] = Field(default_factory=list)
    documentation: list[DocumentationItem] = Field(default_factory=list)
    security_schemes: dict[str, SecurityScheme] = Field(
        default_factory=dict, alias="securitySchemes"
    )
    resources: list[Resource] = Field(default_factory=list)
    resource_groups: list[list[Resource]] = Field(
        default_factory=list, alias="resourceGroups"
    )

    @field_validator("version", mode="before")
    @classmethod
    def _version(cls, value: Any) -> Any:
        return None if value is None else str(value)

    @field_validator("base_uri_parameters", mode="before")
    @classmethod
    def _parameters(cls, value: Any) -> Any:
        return _parameter_map(value)

    @field_validator("protocols", "documentation", mode="before")
    @classmethod
    def _lists(cls, value: Any) -> Any:
        return value or []


# --- Credentials ---


class BasicCredentials(BaseModel):
    """Username and password entered for an HTTP Basic scheme."""

    username: str = ""
    password: str = ""


class OAuth2Credentials(BaseModel):
    """Client registration entered for an OAuth 2.0 scheme."""

    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(default="", alias="clientId")
    client_secret: str = Field(default="", alias="clientSecret")


# --- Settings ---


class RequestSettings(BaseModel):
    """HTTP settings applied to every request the console sends."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class ConsoleSettings(BaseModel):
    """Process-wide console settings persisted at ``~/.config/ramlconsole/config.json``.

    See :func:`~ramlconsole.config.load_settings` for the precedence chain.
    """

    oauth2_redirect_uri: str = Field(
        default="http://127.0.0.1:8765/oauth2/callback",
        description="Redirect URI registered with OAuth 2.0 providers",
    )
    proxy: Optional[str] = Field(
        default=None,
        description="URL prefix applied to token exchanges and outgoing requests",
    )
    authorization_timeout: float = Field(
        default=300.0,
        description="Seconds to wait for an OAuth 2.0 authorization code",
    )
    request: RequestSettings = Field(default_factory=RequestSettings)


# --- Results ---


class ConsoleResponse(BaseModel):
    """The outcome of one "try it" request, whatever its HTTP status."""

    request_url: str
    status: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""
    content_type: Optional[str] = None
