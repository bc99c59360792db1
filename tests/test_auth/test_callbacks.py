"""Tests for the authorization callback registry."""

from __future__ import annotations

import asyncio
import threading

import pytest

from ramlconsole.auth.callbacks import (
    AuthorizationCallbackRegistry,
    authorization_failure,
    authorization_success,
    get_registry,
)
from ramlconsole.exceptions import AuthError, AuthorizationTimeoutError


class TestRegistry:
    def test_resolve_delivers_code(self) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> str:
            state = registry.register()
            assert registry.resolve("abc", state)
            return await registry.wait(state, timeout=1)

        assert asyncio.run(run()) == "abc"
        assert registry.pending() == []

    def test_resolve_from_another_thread(self) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> str:
            state = registry.register()
            threading.Thread(target=registry.resolve, args=("xyz", state)).start()
            return await registry.wait(state, timeout=5)

        assert asyncio.run(run()) == "xyz"

    def test_state_none_resolves_single_pending(self) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> str:
            state = registry.register()
            registry.resolve("only", None)
            return await registry.wait(state, timeout=1)

        assert asyncio.run(run()) == "only"

    def test_state_none_is_ambiguous_with_several_pending(self, quiet_output) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> bool:
            registry.register()
            registry.register()
            return registry.resolve("code", None)

        assert asyncio.run(run()) is False

    def test_unknown_state_is_ignored(self, plain_output, capfd) -> None:
        registry = AuthorizationCallbackRegistry()
        assert registry.resolve("code", "nope") is False
        assert "matches no pending authorization" in capfd.readouterr().err

    def test_reject_fails_the_wait(self) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> str:
            state = registry.register()
            registry.reject("access_denied", state)
            return await registry.wait(state, timeout=1)

        with pytest.raises(AuthError, match="access_denied"):
            asyncio.run(run())
        assert registry.pending() == []

    def test_timeout_discards_entry(self) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> str:
            state = registry.register()
            return await registry.wait(state, timeout=0.01)

        with pytest.raises(AuthorizationTimeoutError):
            asyncio.run(run())
        assert registry.pending() == []

    def test_late_callback_after_timeout_is_ignored(self, quiet_output) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> str:
            state = registry.register()
            with pytest.raises(AuthorizationTimeoutError):
                await registry.wait(state, timeout=0.01)
            return state

        state = asyncio.run(run())
        assert registry.resolve("late", state) is False

    def test_wait_for_unknown_state(self) -> None:
        registry = AuthorizationCallbackRegistry()
        with pytest.raises(AuthError, match="No pending authorization"):
            asyncio.run(registry.wait("missing", timeout=1))

    def test_states_are_unique(self) -> None:
        registry = AuthorizationCallbackRegistry()

        async def run() -> set[str]:
            return {registry.register() for _ in range(20)}

        assert len(asyncio.run(run())) == 20


class TestModuleEntryPoints:
    def test_authorization_success_uses_process_registry(self) -> None:
        registry = get_registry()

        async def run() -> str:
            state = registry.register()
            assert authorization_success("global", state)
            return await registry.wait(state, timeout=1)

        assert asyncio.run(run()) == "global"

    def test_authorization_failure(self) -> None:
        registry = get_registry()

        async def run() -> str:
            state = registry.register()
            assert authorization_failure("denied", state)
            return await registry.wait(state, timeout=1)

        with pytest.raises(AuthError, match="denied"):
            asyncio.run(run())
