"""Base64 encoding of credential strings.

Decoding is lenient: characters outside the base64 alphabet are dropped
with a warning and the remainder is decoded best effort.
"""

from __future__ import annotations

import base64
import binascii
import re

from ramlconsole.output import get_output

_INVALID_RE = re.compile(r"[^A-Za-z0-9+/=]")


def encode(text: str) -> str:
    """Base64-encode the UTF-8 bytes of *text*."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode(text: str) -> str:
    """Decode base64 *text*, ignoring characters outside the alphabet.

    Padding is restored when missing. Bytes that are not valid UTF-8 are
    replaced rather than raising.
    """
    sanitized = _INVALID_RE.sub("", text)
    if sanitized != text:
        get_output().warning(
            "There were invalid base64 characters in the input text. "
            "Valid base64 characters are A-Z, a-z, 0-9, '+', '/', and '='. "
            "Expect errors in decoding."
        )

    stripped = sanitized.rstrip("=")
    if len(stripped) % 4 == 1:
        # A lone trailing character carries no complete byte
        stripped = stripped[:-1]
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        raw = base64.b64decode(padded)
    except binascii.Error as exc:
        get_output().warning(f"Could not decode base64 input: {exc}")
        return ""
    return raw.decode("utf-8", errors="replace")
