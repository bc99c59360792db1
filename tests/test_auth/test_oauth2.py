"""Tests for the OAuth 2.0 authorization code strategy and redirect listener."""

from __future__ import annotations

import asyncio
import webbrowser
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from ramlconsole.auth.callbacks import AuthorizationCallbackRegistry
from ramlconsole.client.request import RequestOptions
from ramlconsole.exceptions import AuthError, AuthorizationTimeoutError
from ramlconsole.models import Api, ConsoleSettings, OAuth2Credentials
from ramlconsole.strategies.oauth2 import (
    HeaderToken,
    OAuth2Strategy,
    QueryParameterToken,
    RedirectListener,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FakeBrowser:
    """Opener that "approves" the authorization by resolving the registry."""

    def __init__(self, registry: AuthorizationCallbackRegistry, code: Optional[str] = "the-code"):
        self.registry = registry
        self.code = code
        self.urls: list[str] = []

    def __call__(self, url: str) -> None:
        self.urls.append(url)
        if self.code is not None:
            state = parse_qs(urlparse(url).query)["state"][0]
            self.registry.resolve(self.code, state)

    @property
    def query(self) -> dict[str, list[str]]:
        return parse_qs(urlparse(self.urls[-1]).query)


class TokenEndpoint:
    def __init__(self, status: int = 200, payload: Any = None) -> None:
        self.status = status
        self.payload = {"access_token": "tok-123", "token_type": "bearer"} if payload is None else payload
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.payload)

    @property
    def form(self) -> dict[str, list[str]]:
        return parse_qs(self.requests[-1].content.decode())


def _authenticate(
    api: Api,
    scheme: str = "oauth_2",
    settings: Optional[ConsoleSettings] = None,
    endpoint: Optional[TokenEndpoint] = None,
    code: Optional[str] = "the-code",
):
    registry = AuthorizationCallbackRegistry()
    browser = FakeBrowser(registry, code)
    endpoint = endpoint or TokenEndpoint()

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(endpoint)) as client:
            strategy = OAuth2Strategy(
                api.security_schemes[scheme],
                OAuth2Credentials(client_id="client", client_secret="shh"),
                settings=settings or ConsoleSettings(),
                opener=browser,
                registry=registry,
                http_client=client,
            )
            return await strategy.authenticate()

    return asyncio.run(run()), browser, endpoint, registry


# ---------------------------------------------------------------------------
# Authorization code flow
# ---------------------------------------------------------------------------


class TestAuthorizationCodeFlow:
    def test_header_token(self, api: Api, quiet_output) -> None:
        token, _, _, _ = _authenticate(api)
        assert isinstance(token, HeaderToken)
        assert token.access_token == "tok-123"

    def test_query_parameter_token(self, api: Api, quiet_output) -> None:
        token, _, _, _ = _authenticate(api, scheme="oauth_query")
        assert isinstance(token, QueryParameterToken)
        options = RequestOptions(url="https://api.example.com/users", type="GET")
        token.sign(options)
        assert options.url == "https://api.example.com/users?access_token=tok-123"

    def test_authorization_url(self, api: Api, quiet_output) -> None:
        settings = ConsoleSettings(oauth2_redirect_uri="http://127.0.0.1:9999/cb")
        _, browser, _, _ = _authenticate(api, settings=settings)
        url = urlparse(browser.urls[0])
        assert f"{url.scheme}://{url.netloc}{url.path}" == "https://auth.example.com/authorize"
        assert browser.query["client_id"] == ["client"]
        assert browser.query["response_type"] == ["code"]
        assert browser.query["redirect_uri"] == ["http://127.0.0.1:9999/cb"]
        assert browser.query["state"][0]

    def test_token_exchange_form(self, api: Api, quiet_output) -> None:
        _, _, endpoint, _ = _authenticate(api)
        request = endpoint.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "https://auth.example.com/token"
        assert endpoint.form == {
            "client_id": ["client"],
            "client_secret": ["shh"],
            "code": ["the-code"],
            "grant_type": ["authorization_code"],
            "redirect_uri": [ConsoleSettings().oauth2_redirect_uri],
        }

    def test_proxy_prefix_applies_to_token_exchange(self, api: Api, quiet_output) -> None:
        settings = ConsoleSettings(proxy="https://proxy.example.com/")
        _, _, endpoint, _ = _authenticate(api, settings=settings)
        assert str(endpoint.requests[0].url) == (
            "https://proxy.example.com/https://auth.example.com/token"
        )

    def test_registry_is_empty_afterwards(self, api: Api, quiet_output) -> None:
        _, _, _, registry = _authenticate(api)
        assert registry.pending() == []


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_timeout(self, api: Api, quiet_output) -> None:
        settings = ConsoleSettings(authorization_timeout=0.05)
        with pytest.raises(AuthorizationTimeoutError):
            _authenticate(api, settings=settings, code=None)

    def test_token_endpoint_error_status(self, api: Api, quiet_output) -> None:
        with pytest.raises(AuthError, match="status 400"):
            _authenticate(api, endpoint=TokenEndpoint(400, {"error": "invalid_grant"}))

    def test_missing_access_token(self, api: Api, quiet_output) -> None:
        with pytest.raises(AuthError, match="access_token"):
            _authenticate(api, endpoint=TokenEndpoint(200, {"token_type": "bearer"}))

    def test_missing_authorization_uri_discards_state(self, quiet_output, isolated_config) -> None:
        from ramlconsole.models import SecurityScheme

        scheme = SecurityScheme.model_validate({"name": "bare", "type": "OAuth 2.0"})
        registry = AuthorizationCallbackRegistry()
        strategy = OAuth2Strategy(scheme, registry=registry, opener=lambda url: None)

        with pytest.raises(AuthError, match="authorizationUri"):
            asyncio.run(strategy.authenticate())
        assert registry.pending() == []

    def test_browser_failure_is_an_auth_error(self, api: Api, quiet_output) -> None:
        registry = AuthorizationCallbackRegistry()

        def broken_browser(url: str) -> None:
            raise webbrowser.Error("no runnable browser")

        strategy = OAuth2Strategy(
            api.security_schemes["oauth_2"],
            OAuth2Credentials(client_id="client"),
            settings=ConsoleSettings(),
            opener=broken_browser,
            registry=registry,
        )
        with pytest.raises(AuthError, match="no runnable browser"):
            asyncio.run(strategy.authenticate())
        assert registry.pending() == []

    def test_missing_access_token_uri(self, quiet_output, isolated_config) -> None:
        from ramlconsole.models import SecurityScheme

        scheme = SecurityScheme.model_validate({"name": "bare", "type": "OAuth 2.0"})
        with pytest.raises(AuthError, match="accessTokenUri"):
            OAuth2Strategy(scheme).access_token_url()


# ---------------------------------------------------------------------------
# Redirect listener
# ---------------------------------------------------------------------------


class TestRedirectListener:
    def test_code_redirect_resolves_pending_authorization(self) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> str:
            with RedirectListener("http://127.0.0.1:0/oauth2/callback", registry) as listener:
                state = registry.register()
                url = f"{listener.redirect_uri}?code=abc&state={state}"
                loop = asyncio.get_running_loop()
                response = await loop.run_in_executor(
                    None, lambda: httpx.get(url, trust_env=False)
                )
                assert response.status_code == 200
                return await registry.wait(state, timeout=5)

        assert asyncio.run(run()) == "abc"

    def test_error_redirect_fails_pending_authorization(self) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> str:
            with RedirectListener("http://127.0.0.1:0/cb", registry) as listener:
                state = registry.register()
                url = f"{listener.redirect_uri}?error=access_denied&state={state}"
                loop = asyncio.get_running_loop()
                await loop.run_in_executor(None, lambda: httpx.get(url, trust_env=False))
                return await registry.wait(state, timeout=5)

        with pytest.raises(AuthError, match="access_denied"):
            asyncio.run(run())

    def test_other_paths_are_not_found(self) -> None:
        with RedirectListener("http://127.0.0.1:0/cb") as listener:
            base = listener.redirect_uri.rsplit("/", 1)[0]
            response = httpx.get(f"{base}/elsewhere", trust_env=False)
        assert response.status_code == 404

    def test_rejects_non_http_redirect(self) -> None:
        with pytest.raises(AuthError):
            RedirectListener("https://127.0.0.1/cb")
