"""Request options builder.

:class:`RequestBuilder` accumulates query, body and header data in any
order and finalises it into a transport-ready :class:`RequestOptions`.
Multipart requests are never given an explicit ``Content-Type``: the
transport computes the boundary when it serialises the
:class:`MultipartForm`.

Example::

    builder = create("https://api.example.com/users", "POST")
    builder.header("Content-Type", "multipart/form-data")
    builder.data({"name": "Ada"})
    options = builder.to_options()
    options.process_data   # False
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping, Optional
from urllib.parse import urlencode

from ramlconsole.exceptions import InvalidUsageError

MULTIPART_FORM_DATA = "multipart/form-data"


class MultipartForm:
    """An ordered collection of multipart form parts."""

    def __init__(self) -> None:
        self._parts: list[tuple[str, Any]] = []

    def append(self, name: str, value: Any) -> None:
        self._parts.append((name, value))

    @property
    def parts(self) -> list[tuple[str, Any]]:
        return list(self._parts)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self._parts)

    def __len__(self) -> int:
        return len(self._parts)

    def __repr__(self) -> str:
        return f"MultipartForm({self._parts!r})"


@dataclass
class RequestOptions:
    """A finalised request, signed by a token and handed to the transport.

    ``process_data`` is ``True`` when the transport should serialise
    ``data`` itself, ``False`` for a pre-built :class:`MultipartForm`, and
    ``None`` when the request has no body.
    """

    url: str
    type: str
    headers: dict[str, str] = field(default_factory=dict)
    content_type: Optional[str] = None
    data: Any = None
    process_data: Optional[bool] = None

    def set_header(self, name: str, value: str) -> None:
        self.headers[name] = value

    def add_query_parameter(self, name: str, value: Any) -> None:
        """Append ``name=value`` to the URL query string."""
        separator = "&" if "?" in self.url else "?"
        self.url = f"{self.url}{separator}{urlencode({name: value})}"


class RequestBuilder:
    """Accumulates request data for one execution.

    Args:
        url: Fully rendered request URL.
        method: HTTP verb; stored upper-cased.
    """

    def __init__(self, url: str, method: str) -> None:
        self._url = url
        self._method = method.upper()
        self._data: Any = None
        self._headers: dict[str, str] = {}
        self._content_type: Optional[str] = None
        self._multipart = False
        self._query_suffix: list[tuple[str, Any]] = []

    @property
    def is_multipart(self) -> bool:
        return self._multipart

    def data(self, value: Any) -> RequestBuilder:
        """Set or replace the raw payload."""
        self._data = value
        return self

    def query_param(self, name: str, value: Any) -> RequestBuilder:
        """Merge one query parameter into the data map.

        When the payload is already a raw (non-mapping) body the parameter
        is appended to the URL query string instead.
        """
        if self._data is None:
            self._data = {}
        if isinstance(self._data, Mapping):
            self._data = {**self._data, name: value}
        else:
            self._query_suffix.append((name, value))
        return self

    def header(self, name: str, value: str) -> RequestBuilder:
        if name.lower() == "content-type":
            if str(value).lower() == MULTIPART_FORM_DATA:
                self._multipart = True
                return self
            self._content_type = value
            self._multipart = False
        self._headers[name] = value
        return self

    def headers(self, values: Mapping[str, str]) -> RequestBuilder:
        """Replace all headers, re-applying each entry through :meth:`header`."""
        self._headers = {}
        self._content_type = None
        self._multipart = False
        for name, value in values.items():
            self.header(name, value)
        return self

    def to_options(self) -> RequestOptions:
        url = self._url
        if self._query_suffix:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{urlencode(self._query_suffix)}"

        options = RequestOptions(
            url=url,
            type=self._method,
            headers=dict(self._headers),
            content_type=self._content_type,
        )

        if self._data is None or self._data == "":
            return options

        if self._multipart:
            form = MultipartForm()
            if isinstance(self._data, Mapping):
                for name, value in self._data.items():
                    form.append(name, value)
            else:
                raise InvalidUsageError("A multipart request needs form fields, not a raw body")
            options.data = form
            options.process_data = False
        else:
            options.data = self._data
            options.process_data = True
        return options


def create(url: str, method: str) -> RequestBuilder:
    """Return a :class:`RequestBuilder` for *method* on *url*."""
    return RequestBuilder(url, method)
