"""Read a parsed RAML document from a file, a URL or stdin.

The input is the JSON or YAML serialisation of a RAML parser's output: a
mapping with ``title``, ``baseUri``, ``securitySchemes`` and a nested
``resources`` list. Raw RAML source (resources keyed by ``/path``) is
rejected with a hint, since parsing RAML itself is the parser's job.

Pass the loaded mapping to :func:`ramlconsole.inspector.create`.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from ramlconsole.exceptions import DocumentError
from ramlconsole.output import debug

_SUFFIX_FORMATS = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def load_document(source: str) -> dict[str, Any]:
    """Load the document at *source*: a path, an ``http(s)://`` URL or ``-``.

    The format comes from the file suffix or the response content type;
    without one, JSON is tried first and YAML second.

    Raises:
        DocumentError: If the source cannot be read or parsed, or does not
            hold parser output.
    """
    if source == "-":
        text, fmt = _read_stdin(), None
    elif source.startswith(("http://", "https://")):
        text, fmt = _fetch(source)
    else:
        text, fmt = _read_file(Path(source))

    if not text.strip():
        raise DocumentError(f"The document at {_describe(source)} is empty")

    document = _parse(text, fmt)
    check_document(document)
    return document


def _describe(source: str) -> str:
    return "stdin" if source == "-" else source


def _read_stdin() -> str:
    try:
        return sys.stdin.read()
    except OSError as exc:
        raise DocumentError(f"Cannot read the document from stdin: {exc}") from exc


def _fetch(url: str) -> tuple[str, Optional[str]]:
    try:
        response = httpx.get(url, timeout=30.0, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise DocumentError(
            f"Fetching {url} returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise DocumentError(f"Cannot fetch {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "").lower()
    fmt = None
    if "json" in content_type:
        fmt = "json"
    elif "yaml" in content_type or "yml" in content_type:
        fmt = "yaml"
    return response.text, fmt


def _read_file(path: Path) -> tuple[str, Optional[str]]:
    if not path.is_file():
        raise DocumentError(f"Document file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DocumentError(f"Cannot read {path}: {exc}") from exc
    return text, _SUFFIX_FORMATS.get(path.suffix.lower())


def _parse(text: str, fmt: Optional[str]) -> dict[str, Any]:
    """Decode *text* as *fmt*, or sniff JSON then YAML when *fmt* is ``None``."""
    if fmt == "json":
        try:
            return _expect_mapping(json.loads(text))
        except json.JSONDecodeError as exc:
            raise DocumentError(f"Invalid JSON: {exc}") from exc

    if fmt is None:
        try:
            return _expect_mapping(json.loads(text))
        except json.JSONDecodeError:
            debug("Document is not JSON, trying YAML")

    try:
        return _expect_mapping(yaml.safe_load(text))
    except yaml.YAMLError as exc:
        raise DocumentError(f"Document is neither JSON nor YAML: {exc}") from exc


def _expect_mapping(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        kind = "an empty document" if result is None else type(result).__name__
        raise DocumentError(f"Expected a JSON/YAML object at the top level, got {kind}")
    return result


def check_document(document: dict[str, Any]) -> None:
    """Reject mappings that are not RAML parser output.

    Raises:
        DocumentError: If the mapping still has raw ``/path`` resource keys,
            lacks ``title``, or has a ``resources`` value that is not a list.
    """
    if any(isinstance(key, str) and key.startswith("/") for key in document):
        raise DocumentError(
            "This looks like RAML source. Run it through a RAML parser "
            "and load the parser's JSON output instead."
        )
    if "title" not in document:
        raise DocumentError("Missing 'title' field. Is this a parsed RAML document?")
    resources = document.get("resources")
    if resources is not None and not isinstance(resources, list):
        raise DocumentError("'resources' must be a list of resource objects")
