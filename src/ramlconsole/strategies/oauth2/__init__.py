"""OAuth 2.0 authorization code strategy.

Opens the provider's authorization page in a browser, waits for the code
delivered through :func:`~ramlconsole.auth.callbacks.authorization_success`
and exchanges it for an access token.

Exports:
    :class:`OAuth2Strategy` -- the strategy class.
    :class:`HeaderToken` / :class:`QueryParameterToken` -- the two token
    delivery conventions.
    :class:`RedirectListener` -- loopback server for the redirect URI.
"""

from ramlconsole.strategies.oauth2.redirect import RedirectListener
from ramlconsole.strategies.oauth2.strategy import (
    HeaderToken,
    OAuth2Strategy,
    QueryParameterToken,
)

__all__ = ["HeaderToken", "OAuth2Strategy", "QueryParameterToken", "RedirectListener"]
