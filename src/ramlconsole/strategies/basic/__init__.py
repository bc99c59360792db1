"""HTTP Basic authentication strategy.

Encodes a ``username:password`` pair using Base64 and sends it as an
``Authorization: Basic`` header per :rfc:`7617`.

See Also:
    :class:`~ramlconsole.strategies.basic.strategy.BasicStrategy`
"""

from ramlconsole.strategies.basic.strategy import BasicStrategy, BasicToken

__all__ = ["BasicStrategy", "BasicToken"]
