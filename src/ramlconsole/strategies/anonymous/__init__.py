"""Anonymous access: a shared strategy whose token signs nothing.

See Also:
    :class:`~ramlconsole.strategies.anonymous.strategy.AnonymousStrategy`
"""

from ramlconsole.strategies.anonymous.strategy import AnonymousStrategy, anonymous

__all__ = ["AnonymousStrategy", "anonymous"]
