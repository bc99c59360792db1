"""Strategy-based authentication for ramlconsole.

The main entry points are:

- :class:`AuthStrategy` -- abstract base class of authentication strategies.
- :class:`Token` -- what a strategy produces; signs outgoing requests.
- :class:`AuthStrategyResolver` -- maps a scheme kind to a strategy.
- :func:`create_default_resolver` -- resolver with the built-in strategies.
- :class:`Keychain` -- per-console credentials and selected scheme.
- :func:`authorization_success` -- delivers OAuth 2.0 authorization codes.

Typical usage::

    from ramlconsole.auth import create_default_resolver

    strategy = create_default_resolver().for_scheme(scheme, credentials)
    token = await strategy.authenticate()
    token.sign(options)
"""

from ramlconsole.auth.base import NO_OP_TOKEN, AuthStrategy, NoOpToken, Token
from ramlconsole.auth.callbacks import (
    AuthorizationCallbackRegistry,
    authorization_failure,
    authorization_success,
    get_registry,
)
from ramlconsole.auth.keychain import ANONYMOUS, Keychain
from ramlconsole.auth.resolver import AuthStrategyResolver, create_default_resolver, for_scheme

__all__ = [
    "ANONYMOUS",
    "NO_OP_TOKEN",
    "AuthStrategy",
    "AuthStrategyResolver",
    "AuthorizationCallbackRegistry",
    "Keychain",
    "NoOpToken",
    "Token",
    "authorization_failure",
    "authorization_success",
    "create_default_resolver",
    "for_scheme",
    "get_registry",
]
