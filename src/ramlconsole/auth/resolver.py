"""Strategy resolver -- registry and dispatcher for authentication strategies.

The :class:`AuthStrategyResolver` maps a
:class:`~ramlconsole.models.SchemeKind` to a factory building the matching
:class:`~ramlconsole.auth.base.AuthStrategy`. Dispatch happens on the kind
decided when the scheme was loaded, never on the raw ``type`` string.

For most use cases, call :func:`create_default_resolver` to get a resolver
pre-loaded with the built-in strategies, or the module-level
:func:`for_scheme`.

See Also:
    :class:`~ramlconsole.auth.base.AuthStrategy` -- the strategy interface.
    :class:`~ramlconsole.console.TryIt` -- resolves a strategy per execution.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

from ramlconsole.auth.base import AuthStrategy
from ramlconsole.exceptions import UnknownAuthStrategyError
from ramlconsole.models import SchemeKind, SecurityScheme

StrategyFactory = Callable[[SecurityScheme, Any], AuthStrategy]


class AuthStrategyResolver:
    """Registry and dispatcher for authentication strategies.

    Example::

        resolver = AuthStrategyResolver()
        resolver.register(SchemeKind.BASIC, BasicStrategy)
        strategy = resolver.for_scheme(scheme, {"username": "u", "password": "p"})
        token = await strategy.authenticate()
    """

    def __init__(self) -> None:
        self._factories: dict[SchemeKind, StrategyFactory] = {}

    def register(self, kind: SchemeKind, factory: StrategyFactory) -> None:
        """Register *factory* for *kind*, replacing any previous one."""
        self._factories[kind] = factory

    def for_scheme(self, scheme: Optional[SecurityScheme], credentials: Any = None) -> AuthStrategy:
        """Return the strategy for *scheme* bound to *credentials*.

        Args:
            scheme: The selected scheme, or ``None`` for anonymous access.
            credentials: Credential model or mapping the user entered.

        Raises:
            UnknownAuthStrategyError: If the scheme kind is unsupported or
                no factory is registered for it.
        """
        from ramlconsole.strategies.anonymous import anonymous

        if scheme is None:
            return anonymous()

        factory = self._factories.get(scheme.kind)
        if scheme.kind is SchemeKind.UNSUPPORTED or factory is None:
            raise UnknownAuthStrategyError(scheme.type or scheme.name)
        return factory(scheme, credentials)

    def list_kinds(self) -> list[SchemeKind]:
        return list(self._factories)


def create_default_resolver(**oauth2_options: Any) -> AuthStrategyResolver:
    """Create a resolver with the built-in Basic and OAuth 2.0 strategies.

    Args:
        **oauth2_options: Forwarded to
            :class:`~ramlconsole.strategies.oauth2.OAuth2Strategy` (e.g.
            ``settings``, ``opener``, ``registry``, ``http_client``).
    """
    from ramlconsole.strategies.anonymous import anonymous
    from ramlconsole.strategies.basic import BasicStrategy
    from ramlconsole.strategies.oauth2 import OAuth2Strategy

    resolver = AuthStrategyResolver()
    resolver.register(SchemeKind.ANONYMOUS, lambda scheme, credentials: anonymous())
    resolver.register(SchemeKind.BASIC, BasicStrategy)
    resolver.register(
        SchemeKind.OAUTH2,
        lambda scheme, credentials: OAuth2Strategy(scheme, credentials, **oauth2_options),
    )
    return resolver


def for_scheme(scheme: Optional[SecurityScheme], credentials: Any = None) -> AuthStrategy:
    """Resolve *scheme* with a default resolver."""
    return create_default_resolver().for_scheme(scheme, credentials)
