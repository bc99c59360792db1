"""Per-console credential storage and scheme selection."""

from __future__ import annotations

from typing import Any, Optional

ANONYMOUS = "anonymous"


class Keychain:
    """Credentials entered by the user, keyed by security scheme name.

    ``selected_scheme`` is ``"anonymous"`` or the name of a scheme; it is
    read when a request executes, so changes apply to the next execution.
    """

    def __init__(self) -> None:
        self.selected_scheme: str = ANONYMOUS
        self._credentials: dict[str, Any] = {}

    @property
    def is_anonymous(self) -> bool:
        return self.selected_scheme == ANONYMOUS

    def select(self, scheme_name: Optional[str]) -> None:
        self.selected_scheme = scheme_name or ANONYMOUS

    def set_credentials(self, scheme_name: str, credentials: Any) -> None:
        self._credentials[scheme_name] = credentials

    def get_credentials(self, scheme_name: str) -> Any:
        return self._credentials.get(scheme_name)

    def selected_credentials(self) -> Any:
        if self.is_anonymous:
            return None
        return self._credentials.get(self.selected_scheme)

    def clear(self) -> None:
        self._credentials.clear()
        self.selected_scheme = ANONYMOUS
