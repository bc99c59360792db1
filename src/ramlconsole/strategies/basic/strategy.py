"""HTTP Basic authentication strategy.

The token is computed once, when the strategy is created, from the
``username`` and ``password`` the user entered for the scheme.
"""

from __future__ import annotations

from typing import Any, Optional

from ramlconsole.auth.base import AuthStrategy, Token
from ramlconsole.auth.codec import encode
from ramlconsole.client.request import RequestOptions
from ramlconsole.models import BasicCredentials, SchemeKind, SecurityScheme


class BasicToken(Token):
    """Signs requests with ``Authorization: Basic <encoded>``."""

    def __init__(self, encoded: str) -> None:
        self.encoded = encoded

    def sign(self, request: RequestOptions) -> None:
        request.set_header("Authorization", f"Basic {self.encoded}")


class BasicStrategy(AuthStrategy):
    """Authenticate via HTTP Basic authentication.

    Args:
        scheme: The ``Basic Authentication`` scheme definition.
        credentials: A :class:`~ramlconsole.models.BasicCredentials` or a
            mapping with ``username`` and ``password``. Missing values
            count as empty strings.
    """

    def __init__(self, scheme: Optional[SecurityScheme], credentials: Any = None) -> None:
        self.scheme = scheme
        if not isinstance(credentials, BasicCredentials):
            credentials = BasicCredentials.model_validate(credentials or {})
        self.credentials = credentials
        self.token = BasicToken(encode(f"{credentials.username}:{credentials.password}"))

    @property
    def kind(self) -> SchemeKind:
        return SchemeKind.BASIC

    async def authenticate(self) -> Token:
        return self.token
