"""Loopback HTTP server for the OAuth 2.0 redirect URI.

:class:`RedirectListener` serves the host and port of the configured
redirect URI in a background thread. Each redirect is forwarded to the
callback registry: ``?code=...&state=...`` resolves the matching pending
authorization and ``?error=...`` fails it.
"""

from __future__ import annotations

import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

from ramlconsole.auth.callbacks import AuthorizationCallbackRegistry, get_registry
from ramlconsole.exceptions import AuthError


class RedirectListener:
    """Receives provider redirects on the loopback interface.

    Args:
        redirect_uri: The registered redirect URI, e.g.
            ``http://127.0.0.1:8765/oauth2/callback``. Port ``0`` picks a
            free port (see :attr:`redirect_uri` after :meth:`start`).
        registry: Registry receiving codes; defaults to the process-wide one.

    Example::

        with RedirectListener(settings.oauth2_redirect_uri):
            token = await strategy.authenticate()
    """

    def __init__(
        self,
        redirect_uri: str,
        registry: Optional[AuthorizationCallbackRegistry] = None,
    ) -> None:
        parsed = urlparse(redirect_uri)
        if parsed.scheme != "http" or not parsed.hostname:
            raise AuthError(
                f"Redirect URI '{redirect_uri}' must be an http:// loopback address"
            )
        self._host = parsed.hostname
        self._port = parsed.port if parsed.port is not None else 80
        self._path = parsed.path or "/"
        self._registry = registry or get_registry()
        self._server: Optional[HTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def redirect_uri(self) -> str:
        port = self._server.server_address[1] if self._server else self._port
        return f"http://{self._host}:{port}{self._path}"

    def start(self) -> RedirectListener:
        registry = self._registry
        path = self._path

        class _RedirectHandler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                target = urlparse(self.path)
                if target.path != path:
                    self.send_error(404)
                    return

                query = {name: values[0] for name, values in parse_qs(target.query).items()}
                state = query.get("state")

                if "error" in query:
                    registry.reject(query["error"], state)
                    message = f"The provider refused access: {query['error']}"
                elif "code" in query:
                    registry.resolve(query["code"], state)
                    message = "Access granted. ramlconsole has the code; this tab can be closed."
                else:
                    message = "This redirect carried neither a code nor an error."

                self.send_response(200)
                self.send_header("Content-Type", "text/plain; charset=utf-8")
                self.end_headers()
                self.wfile.write(message.encode("utf-8"))

            def log_message(self, format: str, *args: Any) -> None:
                return None

        try:
            self._server = HTTPServer((self._host, self._port), _RedirectHandler)
        except OSError as exc:
            raise AuthError(f"Cannot listen on {self._host}:{self._port}: {exc}") from exc

        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        return self

    def stop(self) -> None:
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    def __enter__(self) -> RedirectListener:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
