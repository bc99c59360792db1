"""Abstract base classes for authentication strategies.

This module defines the two foundational types of the auth subsystem:

- :class:`Token` -- the runtime credential artifact. Its only capability
  is :meth:`~Token.sign`, which adds a header or query parameter to an
  outgoing :class:`~ramlconsole.client.request.RequestOptions`.
- :class:`AuthStrategy` -- the abstract base class every authentication
  strategy extends. :meth:`~AuthStrategy.authenticate` is a coroutine
  resolving to a :class:`Token`; it completes immediately for anonymous
  and Basic access and suspends on the browser and the network for
  OAuth 2.0.

To support a new scheme kind, subclass :class:`AuthStrategy`, implement
:meth:`~AuthStrategy.authenticate` and register a factory with
:class:`~ramlconsole.auth.resolver.AuthStrategyResolver`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ramlconsole.client.request import RequestOptions
from ramlconsole.models import SchemeKind


class Token(ABC):
    """A credential that can sign a request."""

    @abstractmethod
    def sign(self, request: RequestOptions) -> None:
        """Add this credential to *request* in place."""
        ...


class NoOpToken(Token):
    """Token of anonymous access; signing leaves the request untouched."""

    def sign(self, request: RequestOptions) -> None:
        return None


NO_OP_TOKEN = NoOpToken()


class AuthStrategy(ABC):
    """Produces a :class:`Token` for one security scheme.

    Strategies are created per execution by
    :meth:`~ramlconsole.auth.resolver.AuthStrategyResolver.for_scheme` with
    the scheme definition and the credentials the user entered.
    """

    @property
    @abstractmethod
    def kind(self) -> SchemeKind:
        """The scheme kind this strategy handles."""
        ...

    @abstractmethod
    async def authenticate(self) -> Token:
        """Resolve to a token that signs the outgoing request.

        Raises:
            AuthError: If credentials are rejected or the flow fails.
        """
        ...
