"""Asynchronous transport: sends a finalised :class:`RequestOptions`.

A thin pass-through to :class:`httpx.AsyncClient`. Every HTTP status,
including 4xx and 5xx, comes back as a :class:`ConsoleResponse` so the
console can display it; only network-level failures raise.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx

from ramlconsole.client.request import MultipartForm, RequestOptions
from ramlconsole.exceptions import ConnectionError_
from ramlconsole.models import ConsoleResponse, RequestSettings
from ramlconsole.output import get_output

# Verbs whose serialised data travels in the query string.
QUERY_STRING_METHODS = frozenset({"GET", "HEAD", "DELETE", "OPTIONS"})


def _request_kwargs(options: RequestOptions) -> dict[str, Any]:
    headers = dict(options.headers)
    kwargs: dict[str, Any] = {"method": options.type, "url": options.url}

    data = options.data
    if isinstance(data, MultipartForm):
        # httpx picks the boundary when no Content-Type header is set
        headers = {k: v for k, v in headers.items() if k.lower() != "content-type"}
        kwargs["files"] = [(name, (None, str(value))) for name, value in data]
    elif isinstance(data, dict) and options.process_data:
        if options.type in QUERY_STRING_METHODS:
            kwargs["params"] = data
        else:
            kwargs["data"] = data
    elif data is not None:
        kwargs["content"] = data if isinstance(data, (str, bytes)) else str(data)

    if options.content_type and not isinstance(data, MultipartForm):
        headers.setdefault("Content-Type", options.content_type)

    kwargs["headers"] = headers
    return kwargs


def to_console_response(response: httpx.Response, request_url: str) -> ConsoleResponse:
    """Convert an :class:`httpx.Response` into a :class:`ConsoleResponse`.

    Header names are lower-cased and repeated headers joined with ``", "``.
    ``content_type`` is the media type without parameters.
    """
    headers: dict[str, str] = {}
    for name, value in response.headers.multi_items():
        key = name.lower()
        headers[key] = f"{headers[key]}, {value}" if key in headers else value

    content_type = headers.get("content-type")
    if content_type:
        content_type = content_type.split(";")[0].strip()

    return ConsoleResponse(
        request_url=request_url,
        status=response.status_code,
        headers=headers,
        body=response.text,
        content_type=content_type,
    )


async def send(
    options: RequestOptions,
    http_client: Optional[httpx.AsyncClient] = None,
    settings: Optional[RequestSettings] = None,
) -> ConsoleResponse:
    """Send *options* and return the response, whatever its status.

    Args:
        options: The signed request.
        http_client: Client to send through; a short-lived one is created
            from *settings* when omitted.
        settings: Timeout and SSL verification for the short-lived client.

    Raises:
        ConnectionError_: On connection, timeout or other transport errors.
    """
    settings = settings or RequestSettings()
    kwargs = _request_kwargs(options)
    get_output().debug(f"{options.type} {options.url}")

    try:
        if http_client is not None:
            response = await http_client.request(**kwargs)
        else:
            async with httpx.AsyncClient(
                timeout=settings.timeout,
                verify=settings.verify_ssl,
                follow_redirects=True,
            ) as client:
                response = await client.request(**kwargs)
    except httpx.HTTPError as exc:
        raise ConnectionError_(f"Request to {options.url} failed: {exc}") from exc

    get_output().debug(f"HTTP {response.status_code} from {options.url}")
    return to_console_response(response, str(response.request.url))
