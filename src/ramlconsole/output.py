"""Console output for ramlconsole: data on stdout, diagnostics on stderr.

Streams are split the usual way for command line tools:

* **stdout** carries what the user asked for: resource tables, parameter
  listings and the body of a "try it" response.
* **stderr** carries everything else: the response status line, warnings
  from the inspector and the base64 codec, errors, and ``--verbose``
  traces of the authentication pipeline.

The format is chosen once per process. ``AUTO`` means Rich when stdout is
a terminal and colour is allowed (``NO_COLOR``, ``TERM=dumb`` and
``--no-color`` all disable it), plain text otherwise.

Library modules never print directly. They call the module-level helpers
(:func:`warning`, :func:`debug`, ...) which delegate to the process-wide
:class:`OutputManager` installed by :func:`set_output`.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from ramlconsole.models import ConsoleResponse

# Media type fragment -> Pygments lexer used to highlight response bodies.
_BODY_LEXERS = (
    ("json", "json"),
    ("xml", "xml"),
    ("html", "html"),
    ("yaml", "yaml"),
    ("javascript", "javascript"),
)


class OutputFormat(str, Enum):
    """How data written to stdout is rendered."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Renders data to stdout and diagnostics to stderr.

    Args:
        format: Desired output format; ``AUTO`` is resolved on creation.
        no_color: Disable colour and Rich markup.
        quiet: Drop ``info`` and ``success`` messages.
        verbose: Show ``debug`` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    @property
    def is_quiet(self) -> bool:
        return self._quiet

    @property
    def is_verbose(self) -> bool:
        return self._verbose

    def print_data(self, text: str) -> None:
        sys.stdout.write(text + "\n")
        sys.stdout.flush()

    def format_response(self, data: Any, content_type: str = "application/json") -> None:
        """Render *data* (a mapping, a list or a body string) to stdout.

        JSON mode re-indents JSON text and passes other text through. Rich
        mode highlights bodies whose *content_type* has a known lexer.
        """
        if self._format == OutputFormat.JSON:
            self._render_json(data)
        elif self._format == OutputFormat.PLAIN:
            self._render_plain(data)
        else:
            self._render_rich(data, content_type)

    def print_response(self, response: ConsoleResponse, show_headers: bool = False) -> None:
        """Show a "try it" response.

        The status line and, with *show_headers*, the headers go to stderr;
        the body goes to stdout. Error statuses are reported as warnings,
        since the request itself went through.
        """
        status_line = f"HTTP {response.status} {response.request_url}"
        if response.status >= 400:
            self.warning(status_line)
        else:
            self.success(status_line)
        if show_headers:
            for name, value in response.headers.items():
                self.info(f"{name}: {value}")
        if response.body:
            self.format_response(response.body, response.content_type or "text/plain")

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Print rows as a Rich table, JSON records, or tab-separated lines."""
        if self._format == OutputFormat.JSON:
            self._render_json([dict(zip(headers, row)) for row in rows])
            return

        if self._format == OutputFormat.PLAIN:
            for line in [headers, *rows]:
                self.print_data("\t".join(line))
            return

        table = Table(title=title, header_style="bold cyan")
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*row)
        self._stdout.print(table)

    def info(self, message: str) -> None:
        if not self._quiet:
            self._emit(message)

    def success(self, message: str) -> None:
        if not self._quiet:
            self._emit(message, style="green")

    def warning(self, message: str) -> None:
        """Shown even with ``--quiet``."""
        self._emit(message, prefix="Warning:", prefix_style="yellow")

    def error(self, message: str) -> None:
        self._emit(message, prefix="Error:", prefix_style="bold red")

    def debug(self, message: str) -> None:
        if self._verbose:
            self._emit(f"[debug] {message}", style="dim")

    def _emit(
        self,
        message: str,
        style: Optional[str] = None,
        prefix: Optional[str] = None,
        prefix_style: Optional[str] = None,
    ) -> None:
        if self._no_color:
            text = f"{prefix} {message}" if prefix else message
            print(text, file=sys.stderr, flush=True)
            return

        # user text may hold brackets, so it is never parsed as markup
        if prefix:
            self._stderr.print(f"[{prefix_style}]{prefix}[/{prefix_style}]", end=" ")
        self._stderr.print(message, style=style, markup=False, highlight=False)

    def _render_json(self, data: Any) -> None:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except ValueError:
                self.print_data(data)
                return
        self.print_data(json.dumps(data, indent=2, ensure_ascii=False, default=str))

    def _render_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            rows = [[key, value] for key, value in data.items()]
        elif isinstance(data, list):
            rows = [list(item.values()) if isinstance(item, dict) else [item] for item in data]
        else:
            rows = [[data]]
        for row in rows:
            self.print_data("\t".join(str(cell) for cell in row))

    def _render_rich(self, data: Any, content_type: str) -> None:
        if isinstance(data, (dict, list)):
            data = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            content_type = "application/json"
        elif "json" in content_type:
            try:
                data = json.dumps(json.loads(data), indent=2, ensure_ascii=False)
            except (TypeError, ValueError):
                pass

        lexer = _lexer_for(content_type)
        if lexer is None:
            self._stdout.print(str(data), markup=False, highlight=False)
        else:
            self._stdout.print(Syntax(str(data), lexer, theme="monokai", word_wrap=True))


def _lexer_for(content_type: str) -> Optional[str]:
    for fragment, lexer in _BODY_LEXERS:
        if fragment in content_type:
            return lexer
    return None


def _is_tty() -> bool:
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the process-wide :class:`OutputManager`, creating one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Forget the process-wide manager so the next call builds a fresh one."""
    global _output
    _output = None


def format_response(data: Any, content_type: str = "application/json") -> None:
    get_output().format_response(data, content_type)


def print_table(headers: list[str], rows: list[list[str]], title: Optional[str] = None) -> None:
    get_output().print_table(headers, rows, title)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def warning(message: str) -> None:
    get_output().warning(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
