"""OAuth 2.0 authorization code strategy.

This module provides :class:`OAuth2Strategy`, which performs the OAuth 2.0
authorization code grant in two chained steps:

1. **Authorization request** -- a correlation id is registered with the
   :class:`~ramlconsole.auth.callbacks.AuthorizationCallbackRegistry` and
   the authorization URL (``client_id``, ``response_type=code``,
   ``redirect_uri`` and ``state``) is opened in the user's browser. The
   strategy then waits for the redirect target to call
   :func:`~ramlconsole.auth.callbacks.authorization_success`, up to the
   configured timeout.
2. **Token exchange** -- the code is POSTed as a form to the access token
   URI (behind the configured proxy prefix, if any) and the returned
   ``access_token`` is wrapped in a token.

How the token travels is decided from the scheme before the flow starts:
a scheme whose ``describedBy.queryParameters`` declares ``access_token``
gets a :class:`QueryParameterToken`, every other scheme a
:class:`HeaderToken` (``Authorization: Bearer``).
"""

from __future__ import annotations

import webbrowser
from typing import Any, Callable, Optional
from urllib.parse import urlencode

import httpx

from ramlconsole.auth.base import AuthStrategy, Token
from ramlconsole.auth.callbacks import AuthorizationCallbackRegistry, get_registry
from ramlconsole.client.request import RequestOptions
from ramlconsole.config import get_settings
from ramlconsole.exceptions import AuthError
from ramlconsole.models import ConsoleSettings, OAuth2Credentials, SchemeKind, SecurityScheme
from ramlconsole.output import get_output

Opener = Callable[[str], Any]


class HeaderToken(Token):
    """Signs requests with ``Authorization: Bearer <access token>``."""

    def __init__(self, access_token: str) -> None:
        self.access_token = access_token

    def sign(self, request: RequestOptions) -> None:
        request.set_header("Authorization", f"Bearer {self.access_token}")


class QueryParameterToken(Token):
    """Signs requests with an ``access_token`` query parameter."""

    def __init__(self, access_token: str) -> None:
        self.access_token = access_token

    def sign(self, request: RequestOptions) -> None:
        request.add_query_parameter("access_token", self.access_token)


class OAuth2Strategy(AuthStrategy):
    """Authenticate via the OAuth 2.0 authorization code grant.

    Args:
        scheme: The ``OAuth 2.0`` scheme definition; its settings provide
            ``authorizationUri`` and ``accessTokenUri``.
        credentials: An :class:`~ramlconsole.models.OAuth2Credentials` or a
            mapping with ``clientId`` / ``clientSecret``.
        settings: Console settings supplying the redirect URI, the proxy
            prefix and the authorization timeout; defaults to the
            process-wide settings.
        opener: Called with the authorization URL; defaults to
            :func:`webbrowser.open`.
        registry: Callback registry; defaults to the process-wide one.
        http_client: Client for the token exchange; a short-lived one is
            created when omitted.
    """

    def __init__(
        self,
        scheme: SecurityScheme,
        credentials: Any = None,
        settings: Optional[ConsoleSettings] = None,
        opener: Optional[Opener] = None,
        registry: Optional[AuthorizationCallbackRegistry] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.scheme = scheme
        if not isinstance(credentials, OAuth2Credentials):
            credentials = OAuth2Credentials.model_validate(credentials or {})
        self.credentials = credentials
        self.settings = settings or get_settings()
        self._opener = opener or webbrowser.open
        self._registry = registry or get_registry()
        self._http_client = http_client
        self.token_factory: Callable[[str], Token] = (
            QueryParameterToken if scheme.delivers_token_in_query else HeaderToken
        )

    @property
    def kind(self) -> SchemeKind:
        return SchemeKind.OAUTH2

    @property
    def redirect_uri(self) -> str:
        return self.settings.oauth2_redirect_uri

    async def authenticate(self) -> Token:
        code = await self.request_authorization()
        access_token = await self.request_access_token(code)
        return self.token_factory(access_token)

    def authorization_url(self, state: str) -> str:
        """Build the provider URL the user is sent to."""
        authorization_uri = self.scheme.settings.authorization_uri
        if not authorization_uri:
            raise AuthError(f"Scheme '{self.scheme.name}' declares no authorizationUri")
        params = {
            "client_id": self.credentials.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "state": state,
        }
        separator = "&" if "?" in authorization_uri else "?"
        return f"{authorization_uri}{separator}{urlencode(params)}"

    async def request_authorization(self) -> str:
        """Open the authorization page and wait for the code.

        Raises:
            AuthorizationTimeoutError: If no code arrives within
                ``settings.authorization_timeout`` seconds.
            AuthError: If the provider reports an error.
        """
        state = self._registry.register()
        try:
            url = self.authorization_url(state)
        except AuthError:
            self._registry.discard(state)
            raise

        get_output().info(f"Opening the authorization page for '{self.scheme.name}'")
        get_output().debug(f"Authorization URL: {url}")
        try:
            self._opener(url)
        except Exception as exc:
            self._registry.discard(state)
            raise AuthError(f"Cannot open the authorization page: {exc}") from exc
        return await self._registry.wait(state, self.settings.authorization_timeout)

    def access_token_url(self) -> str:
        access_token_uri = self.scheme.settings.access_token_uri
        if not access_token_uri:
            raise AuthError(f"Scheme '{self.scheme.name}' declares no accessTokenUri")
        if self.settings.proxy:
            return f"{self.settings.proxy}{access_token_uri}"
        return access_token_uri

    async def request_access_token(self, code: str) -> str:
        """Exchange *code* for an access token.

        Raises:
            AuthError: On HTTP errors or if ``access_token`` is missing
                from the response.
        """
        url = self.access_token_url()
        data = {
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
        }
        get_output().debug(f"Exchanging authorization code at {url}")

        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    url, data=data, headers={"Accept": "application/json"}
                )
            else:
                async with httpx.AsyncClient(timeout=self.settings.request.timeout) as client:
                    response = await client.post(
                        url, data=data, headers={"Accept": "application/json"}
                    )
            response.raise_for_status()
            token_data: dict[str, Any] = response.json()
        except httpx.HTTPStatusError as exc:
            raise AuthError(
                f"Token exchange failed with status {exc.response.status_code}: "
                f"{exc.response.text}"
            ) from exc
        except httpx.HTTPError as exc:
            raise AuthError(f"Token exchange failed: {exc}") from exc
        except ValueError as exc:
            raise AuthError(f"Token exchange returned invalid JSON: {exc}") from exc

        if not isinstance(token_data, dict) or "access_token" not in token_data:
            raise AuthError("Token response missing 'access_token' field")
        return token_data["access_token"]
