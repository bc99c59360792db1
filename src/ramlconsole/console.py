"""The "try it" executor: fires one real request for one method.

:class:`TryIt` holds what the user entered for a method (URI, query, form
and header parameters, a raw body, the media type and the selected
security scheme) and runs the execution pipeline:

1. Render the base URI and the resource path; a missing required URI
   parameter stops here in the ``MISSING_URI_PARAMETERS`` state.
2. Build the request options from the entered values.
3. Resolve the authentication strategy of the selected scheme. A scheme of
   an unsupported kind falls back to anonymous access with a warning; any
   other resolution error propagates.
4. Authenticate, sign and send. Authentication and network errors end in
   the ``FAILED`` state with the error kept on :attr:`TryIt.error`.

Example::

    tryit = TryIt(api, resource, method)
    tryit.path_builder.set_parameter("id", "42")
    response = asyncio.run(tryit.execute())
"""

from __future__ import annotations

import enum
from typing import Any, Mapping, Optional

import httpx

from ramlconsole.auth.base import AuthStrategy
from ramlconsole.auth.keychain import Keychain
from ramlconsole.auth.resolver import AuthStrategyResolver, create_default_resolver
from ramlconsole.client.factory import create as create_client
from ramlconsole.client.path_builder import PathBuilder
from ramlconsole.client.request import RequestBuilder
from ramlconsole.client.request import create as create_request
from ramlconsole.client.transport import send
from ramlconsole.config import get_settings
from ramlconsole.exceptions import (
    DefinitionError,
    MissingURIParameterError,
    RamlConsoleError,
    UnknownAuthStrategyError,
)
from ramlconsole.models import Api, ConsoleResponse, ConsoleSettings, Method, Resource
from ramlconsole.output import get_output
from ramlconsole.strategies.anonymous import anonymous

FORM_URLENCODED = "application/x-www-form-urlencoded"
FORM_DATA = "multipart/form-data"


class ExecutionState(str, enum.Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    MISSING_URI_PARAMETERS = "missing_uri_parameters"
    FAILED = "failed"


def filter_empty(values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop falsy values and blank strings."""
    return {
        key: value
        for key, value in values.items()
        if value and (not isinstance(value, str) or value.strip())
    }


class TryIt:
    """Per-method request state and executor.

    Args:
        api: The inspected API.
        resource: The resource owning *method*.
        method: The method to execute.
        keychain: Credentials and selected scheme; a fresh anonymous
            keychain when omitted.
        settings: Console settings; the process-wide settings when omitted.
        resolver: Strategy resolver; the default resolver when omitted.
        http_client: Client used for the request and the OAuth 2.0 token
            exchange.
    """

    def __init__(
        self,
        api: Api,
        resource: Resource,
        method: Method,
        keychain: Optional[Keychain] = None,
        settings: Optional[ConsoleSettings] = None,
        resolver: Optional[AuthStrategyResolver] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api = api
        self.resource = resource
        self.method = method
        self.http_method = method.method.upper()
        self.keychain = keychain or Keychain()
        self.settings = settings or get_settings()
        self._http_client = http_client
        self.resolver = resolver or create_default_resolver(
            settings=self.settings, http_client=http_client
        )
        self.path_builder = PathBuilder(resource.path_segments)
        self.security_schemes = method.security_schemes()

        self.headers: dict[str, Any] = {}
        self.query_parameters: dict[str, Any] = {}
        self.form_parameters: dict[str, Any] = {}
        self.body: Optional[str] = None

        self.media_type: Optional[str] = None
        self.supports_media_type = False
        self.supports_custom_body = False
        self.supports_form_urlencoded = False
        self.supports_form_data = False
        for media_type in method.body:
            self.media_type = self.media_type or media_type
            self.supports_media_type = True
            if media_type == FORM_URLENCODED:
                self.supports_form_urlencoded = True
            elif media_type == FORM_DATA:
                self.supports_form_data = True
            else:
                self.supports_custom_body = True

        self.state = ExecutionState.IDLE
        self.response: Optional[ConsoleResponse] = None
        self.error: Optional[RamlConsoleError] = None
        self.request_url: Optional[str] = None
        self.missing_uri_parameters = False
        self.disallowed_anonymous_request = False

    # ------------------------------------------------------------------ #
    # Media type helpers
    # ------------------------------------------------------------------ #

    def show_body(self) -> bool:
        return (
            self.supports_custom_body
            and not self.show_urlencoded_form()
            and not self.show_multipart_form()
        )

    def show_urlencoded_form(self) -> bool:
        if self.media_type:
            return self.media_type == FORM_URLENCODED
        return not self.supports_custom_body and self.supports_form_urlencoded

    def show_multipart_form(self) -> bool:
        if self.media_type:
            return self.media_type == FORM_DATA
        return (
            not self.supports_custom_body
            and not self.supports_form_urlencoded
            and self.supports_form_data
        )

    def body_has_example(self) -> bool:
        body = self.method.body.get(self.media_type or "")
        return body is not None and bool(body.example)

    def fill_body(self) -> None:
        """Replace the body with the example of the current media type."""
        body = self.method.body.get(self.media_type or "")
        if body is not None:
            self.body = body.example

    @property
    def in_progress(self) -> bool:
        return self.state is ExecutionState.IN_PROGRESS

    # ------------------------------------------------------------------ #
    # URI parameters
    # ------------------------------------------------------------------ #

    def set_uri_parameter(self, name: str, value: Any) -> None:
        """Store a resource URI parameter value."""
        if not self.path_builder.set_parameter(name, value):
            get_output().warning(f"'{name}' is not a URI parameter of {self.resource.path}")

    def set_base_uri_parameter(self, name: str, value: Any) -> None:
        self.path_builder.base_uri_context[name] = value

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #

    def build_request(self) -> RequestBuilder:
        """Render the URL and collect the entered values.

        Raises:
            MissingURIParameterError: If a required base URI or resource
                URI parameter has no value.
        """
        path_builder = self.path_builder
        client = create_client(
            self.api,
            lambda configuration: configuration.base_uri_parameters(
                path_builder.base_uri_context
            ),
        )
        url = self.request_url = client.base_uri + path_builder(path_builder.segment_contexts)
        if self.settings.proxy:
            url = self.settings.proxy + url

        request = create_request(url, self.http_method)

        query = filter_empty(self.query_parameters)
        if query:
            request.data(query)
        form = filter_empty(self.form_parameters)
        if form:
            request.data(form)
        headers = filter_empty(self.headers)
        if headers:
            request.headers(headers)
        if self.media_type:
            request.header("Content-Type", self.media_type)
        if self.show_body():
            request.data(self.body)
        return request

    def resolve_strategy(self) -> AuthStrategy:
        """Resolve the strategy of the selected scheme.

        Sets :attr:`disallowed_anonymous_request` when anonymous access is
        selected but the method does not allow it.
        """
        selected = self.keychain.selected_scheme
        if self.keychain.is_anonymous and not self.method.allows_anonymous_access():
            self.disallowed_anonymous_request = True

        scheme = self.security_schemes.get(selected)
        credentials = self.keychain.get_credentials(selected)
        try:
            return self.resolver.for_scheme(scheme, credentials)
        except UnknownAuthStrategyError as exc:
            get_output().warning(f"{exc}; sending the request without credentials")
            return anonymous()

    async def execute(self) -> Optional[ConsoleResponse]:
        """Run the pipeline and return the response, if one was received.

        The outcome is also recorded on :attr:`state`, :attr:`response` and
        :attr:`error`. HTTP error statuses are responses, not failures.
        """
        self.state = ExecutionState.IN_PROGRESS
        self.response = None
        self.error = None
        self.missing_uri_parameters = False
        self.disallowed_anonymous_request = False

        try:
            request = self.build_request()
        except MissingURIParameterError as exc:
            self.state = ExecutionState.MISSING_URI_PARAMETERS
            self.missing_uri_parameters = True
            self.error = exc
            return None
        except DefinitionError as exc:
            self.state = ExecutionState.FAILED
            self.error = exc
            return None

        strategy = self.resolve_strategy()
        get_output().debug(f"Authenticating with {strategy.kind.value} strategy")

        try:
            token = await strategy.authenticate()
            options = request.to_options()
            token.sign(options)
            response = await send(options, self._http_client, self.settings.request)
        except RamlConsoleError as exc:
            self.state = ExecutionState.FAILED
            self.error = exc
            get_output().debug(f"Execution failed: {exc}")
            return None

        self.response = response.model_copy(update={"request_url": self.request_url})
        self.state = ExecutionState.COMPLETED
        return self.response
