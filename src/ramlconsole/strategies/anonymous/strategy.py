"""Anonymous access strategy."""

from __future__ import annotations

from typing import Optional

from ramlconsole.auth.base import NO_OP_TOKEN, AuthStrategy, Token
from ramlconsole.models import SchemeKind


class AnonymousStrategy(AuthStrategy):
    """Resolves immediately to the no-op token.

    Use :func:`anonymous` rather than instantiating this class.
    """

    @property
    def kind(self) -> SchemeKind:
        return SchemeKind.ANONYMOUS

    async def authenticate(self) -> Token:
        return NO_OP_TOKEN


_instance: Optional[AnonymousStrategy] = None


def anonymous() -> AnonymousStrategy:
    """Return the shared :class:`AnonymousStrategy`."""
    global _instance
    if _instance is None:
        _instance = AnonymousStrategy()
    return _instance
