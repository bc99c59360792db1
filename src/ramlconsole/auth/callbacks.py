"""Delivery of OAuth 2.0 authorization codes to pending authentications.

Each authorization attempt registers a correlation id with an
:class:`AuthorizationCallbackRegistry` and sends it to the provider as the
``state`` parameter. Whatever receives the redirect (the loopback
:class:`~ramlconsole.strategies.oauth2.redirect.RedirectListener`, a test,
or an embedding application) calls :func:`authorization_success` with the
code and the returned state, which resolves the matching pending future.

Entries are removed when they resolve, fail or time out, so a late
callback for an expired attempt is ignored instead of resolving a newer
one. Delivery is thread-safe: results are handed to the owning event loop
with :meth:`asyncio.AbstractEventLoop.call_soon_threadsafe`.

Example::

    registry = AuthorizationCallbackRegistry()
    state = registry.register()
    ...  # open the browser with state=<state>
    code = await registry.wait(state, timeout=300)
"""

from __future__ import annotations

import asyncio
import secrets
import threading
from dataclasses import dataclass
from typing import Optional

from ramlconsole.exceptions import AuthError, AuthorizationTimeoutError
from ramlconsole.output import get_output


@dataclass
class PendingAuthorization:
    state: str
    future: asyncio.Future[str]
    loop: asyncio.AbstractEventLoop


def _set_result(future: asyncio.Future[str], code: str) -> None:
    if not future.done():
        future.set_result(code)


def _set_exception(future: asyncio.Future[str], error: BaseException) -> None:
    if not future.done():
        future.set_exception(error)


class AuthorizationCallbackRegistry:
    """Maps authorization correlation ids to pending futures."""

    def __init__(self) -> None:
        self._pending: dict[str, PendingAuthorization] = {}
        self._lock = threading.Lock()

    def register(self) -> str:
        """Register a new pending authorization on the running event loop.

        Returns:
            The correlation id to send as the OAuth 2.0 ``state``.
        """
        loop = asyncio.get_running_loop()
        state = secrets.token_urlsafe(16)
        with self._lock:
            self._pending[state] = PendingAuthorization(state, loop.create_future(), loop)
        return state

    async def wait(self, state: str, timeout: Optional[float] = None) -> str:
        """Wait for the code of attempt *state*.

        Args:
            state: Correlation id returned by :meth:`register`.
            timeout: Seconds to wait; ``None`` waits indefinitely.

        Raises:
            AuthorizationTimeoutError: If no code arrives within *timeout*.
            AuthError: If the provider reported an error or *state* is
                unknown.
        """
        with self._lock:
            entry = self._pending.get(state)
        if entry is None:
            raise AuthError(f"No pending authorization for state '{state}'")

        try:
            return await asyncio.wait_for(entry.future, timeout)
        except asyncio.TimeoutError as exc:
            raise AuthorizationTimeoutError(
                f"No authorization code received within {timeout:g} seconds"
            ) from exc
        finally:
            self.discard(state)

    def resolve(self, code: str, state: Optional[str] = None) -> bool:
        """Deliver *code* to the attempt identified by *state*.

        With ``state=None`` the code goes to the only pending attempt; it is
        ignored when zero or several attempts are pending.

        Returns:
            ``True`` if a pending attempt received the code.
        """
        entry = self._lookup(state)
        if entry is None:
            return False
        entry.loop.call_soon_threadsafe(_set_result, entry.future, code)
        return True

    def reject(self, error: str, state: Optional[str] = None) -> bool:
        """Fail the attempt identified by *state* with an :class:`AuthError`."""
        entry = self._lookup(state)
        if entry is None:
            return False
        exc = AuthError(f"OAuth2 authorization failed: {error}")
        entry.loop.call_soon_threadsafe(_set_exception, entry.future, exc)
        return True

    def discard(self, state: str) -> None:
        with self._lock:
            self._pending.pop(state, None)

    def pending(self) -> list[str]:
        with self._lock:
            return list(self._pending)

    def _lookup(self, state: Optional[str]) -> Optional[PendingAuthorization]:
        with self._lock:
            if state is not None:
                entry = self._pending.get(state)
            elif len(self._pending) == 1:
                entry = next(iter(self._pending.values()))
            else:
                entry = None
        if entry is None:
            get_output().warning(
                "Ignoring authorization callback that matches no pending authorization"
            )
        return entry


_registry = AuthorizationCallbackRegistry()


def get_registry() -> AuthorizationCallbackRegistry:
    """Return the process-wide registry."""
    return _registry


def authorization_success(code: str, state: Optional[str] = None) -> bool:
    """Well-known entry point for the redirect target.

    Args:
        code: Authorization code from the provider redirect.
        state: The ``state`` echoed by the provider.

    Returns:
        ``True`` if a pending authorization received the code.
    """
    return _registry.resolve(code, state)


def authorization_failure(error: str, state: Optional[str] = None) -> bool:
    """Report a provider-side authorization error (``?error=...``)."""
    return _registry.reject(error, state)
