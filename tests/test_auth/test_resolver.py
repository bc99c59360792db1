"""Tests for strategy resolution, the keychain and the simple strategies."""

from __future__ import annotations

import asyncio
import base64

import pytest

from ramlconsole.auth import (
    ANONYMOUS,
    NO_OP_TOKEN,
    AuthStrategyResolver,
    Keychain,
    create_default_resolver,
    for_scheme,
)
from ramlconsole.client.request import RequestOptions
from ramlconsole.config import set_settings
from ramlconsole.exceptions import UnknownAuthStrategyError
from ramlconsole.models import Api, BasicCredentials, ConsoleSettings, SchemeKind
from ramlconsole.strategies.anonymous import AnonymousStrategy, anonymous
from ramlconsole.strategies.basic import BasicStrategy, BasicToken
from ramlconsole.strategies.oauth2 import HeaderToken, OAuth2Strategy, QueryParameterToken


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class TestResolver:
    def test_no_scheme_is_anonymous(self) -> None:
        assert for_scheme(None) is anonymous()

    def test_basic(self, api: Api) -> None:
        strategy = for_scheme(api.security_schemes["basic"], {"username": "u", "password": "p"})
        assert isinstance(strategy, BasicStrategy)
        assert strategy.kind is SchemeKind.BASIC

    def test_oauth2(self, api: Api, isolated_config) -> None:
        strategy = for_scheme(api.security_schemes["oauth_2"], {"clientId": "id"})
        assert isinstance(strategy, OAuth2Strategy)
        assert strategy.credentials.client_id == "id"

    def test_oauth2_uses_process_settings(self, api: Api, isolated_config) -> None:
        set_settings(
            ConsoleSettings(
                proxy="http://proxy.local/",
                oauth2_redirect_uri="http://127.0.0.1:9000/cb",
            )
        )
        strategy = for_scheme(api.security_schemes["oauth_2"], {"clientId": "c"})
        assert strategy.access_token_url() == "http://proxy.local/https://auth.example.com/token"
        assert strategy.redirect_uri == "http://127.0.0.1:9000/cb"

    def test_unsupported_kind(self, api: Api) -> None:
        with pytest.raises(UnknownAuthStrategyError) as exc_info:
            for_scheme(api.security_schemes["custom"])
        assert exc_info.value.scheme_type == "x-custom"

    def test_unregistered_kind(self, api: Api) -> None:
        with pytest.raises(UnknownAuthStrategyError):
            AuthStrategyResolver().for_scheme(api.security_schemes["basic"])

    def test_register_replaces_factory(self, api: Api) -> None:
        resolver = create_default_resolver()
        resolver.register(SchemeKind.BASIC, lambda scheme, credentials: anonymous())
        assert resolver.for_scheme(api.security_schemes["basic"]) is anonymous()

    def test_default_kinds(self) -> None:
        assert set(create_default_resolver().list_kinds()) == {
            SchemeKind.ANONYMOUS,
            SchemeKind.BASIC,
            SchemeKind.OAUTH2,
        }

    def test_oauth2_options_are_forwarded(self, api: Api, isolated_config) -> None:
        opened: list[str] = []
        resolver = create_default_resolver(opener=opened.append)
        strategy = resolver.for_scheme(api.security_schemes["oauth_2"])
        strategy._opener("https://example.com")
        assert opened == ["https://example.com"]


# ---------------------------------------------------------------------------
# Anonymous and Basic strategies
# ---------------------------------------------------------------------------


class TestAnonymous:
    def test_singleton(self) -> None:
        assert anonymous() is anonymous()
        assert isinstance(anonymous(), AnonymousStrategy)

    def test_token_signs_nothing(self) -> None:
        token = asyncio.run(anonymous().authenticate())
        assert token is NO_OP_TOKEN
        options = RequestOptions(url="http://x", type="GET")
        token.sign(options)
        assert options.headers == {}
        assert options.url == "http://x"


class TestBasic:
    def test_authorization_header(self, api: Api) -> None:
        strategy = BasicStrategy(
            api.security_schemes["basic"], BasicCredentials(username="ada", password="secret")
        )
        options = RequestOptions(url="http://x", type="GET")
        asyncio.run(strategy.authenticate()).sign(options)
        expected = base64.b64encode(b"ada:secret").decode()
        assert options.headers["Authorization"] == f"Basic {expected}"

    def test_token_is_computed_once(self, api: Api) -> None:
        strategy = BasicStrategy(api.security_schemes["basic"], {"username": "a", "password": "b"})
        first = asyncio.run(strategy.authenticate())
        assert asyncio.run(strategy.authenticate()) is first
        assert isinstance(first, BasicToken)

    def test_missing_credentials_are_empty(self) -> None:
        strategy = BasicStrategy(None, None)
        assert strategy.token.encoded == base64.b64encode(b":").decode()


class TestTokens:
    def test_header_token(self) -> None:
        options = RequestOptions(url="http://x", type="GET")
        HeaderToken("abc").sign(options)
        assert options.headers == {"Authorization": "Bearer abc"}

    def test_query_parameter_token(self) -> None:
        options = RequestOptions(url="http://x/users?page=2", type="GET")
        QueryParameterToken("abc").sign(options)
        assert options.url == "http://x/users?page=2&access_token=abc"
        assert options.headers == {}


# ---------------------------------------------------------------------------
# Keychain
# ---------------------------------------------------------------------------


class TestKeychain:
    def test_defaults_to_anonymous(self) -> None:
        keychain = Keychain()
        assert keychain.selected_scheme == ANONYMOUS
        assert keychain.is_anonymous
        assert keychain.selected_credentials() is None

    def test_select_and_store(self) -> None:
        keychain = Keychain()
        credentials = BasicCredentials(username="u", password="p")
        keychain.set_credentials("basic", credentials)
        keychain.select("basic")
        assert not keychain.is_anonymous
        assert keychain.selected_credentials() is credentials

    def test_select_none_is_anonymous(self) -> None:
        keychain = Keychain()
        keychain.select("basic")
        keychain.select(None)
        assert keychain.is_anonymous

    def test_clear(self) -> None:
        keychain = Keychain()
        keychain.set_credentials("basic", {"username": "u"})
        keychain.select("basic")
        keychain.clear()
        assert keychain.is_anonymous
        assert keychain.get_credentials("basic") is None
