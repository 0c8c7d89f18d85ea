"""Subscription body decoding.

Subscription endpoints serve either a base64 blob or the plain link list.
We try base64 first and fall back to the raw body on any failure; garbage
that happens to decode is filtered out later by the link parser.
"""

from __future__ import annotations

import base64
import binascii
import re

_WHITESPACE = re.compile(r"[\t\n\f\r ]+")


def _pad(data: str) -> str:
    missing_padding = len(data) % 4
    if missing_padding:
        data += "=" * (4 - missing_padding)
    return data


def try_b64decode(body: str) -> str:
    """Decode standard base64 text, raising ValueError when it is not base64."""

    compact = _WHITESPACE.sub("", body)
    if len(compact) % 4 == 1:
        raise ValueError("Truncated base64 input")
    try:
        raw = base64.b64decode(_pad(compact), validate=True)
    except binascii.Error as exc:
        raise ValueError(str(exc)) from exc
    # Invalid UTF-8 bytes become U+FFFD; the other lines still parse.
    return raw.decode("utf-8", errors="replace")


def decode_content(body: str) -> str:
    """Return the plain-text form of a fetched subscription body."""

    try:
        return try_b64decode(body)
    except ValueError:
        return body
