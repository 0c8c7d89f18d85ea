"""vless:// link parsing.

Only two fields matter downstream: the uuid right after the scheme and the
``sni`` query parameter, which doubles as the node's dedup key.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional
from urllib.parse import parse_qs, urlsplit

from core.models import NodeEntry

VLESS_PREFIX = "vless://"
UUID_LENGTH = 36

_UUID_START = len(VLESS_PREFIX)
_UUID_END = _UUID_START + UUID_LENGTH
_LINE_BREAK = re.compile(r"\r?\n")


def split_lines(text: str) -> list[str]:
    return _LINE_BREAK.split(text)


def _sni_from_link(link: str) -> Optional[str]:
    parts = urlsplit(link)
    # Raises ValueError for a non-numeric or out-of-range port.
    parts.port
    values = parse_qs(parts.query, keep_blank_values=True).get("sni")
    return values[0] if values else None


def parse_node_link(line: str) -> Optional[NodeEntry]:
    """Parse one subscription line into a NodeEntry, or None if unusable.

    The uuid is validated by length only; hyphen positions and hex digits
    are not checked.
    """

    link = line.strip()
    if not link.startswith(VLESS_PREFIX):
        return None

    uuid = link[_UUID_START:_UUID_END]
    try:
        host = _sni_from_link(link)
    except ValueError:
        # Malformed netloc: unbalanced IPv6 bracket or bad port.
        return None

    if len(uuid) != UUID_LENGTH or not host:
        return None
    return NodeEntry(host=host, uuid=uuid)


def parse_node_links(text: str) -> list[NodeEntry]:
    """Return accepted entries from a decoded body, in line order."""

    return list(_iter_entries(split_lines(text)))


def _iter_entries(lines: Iterable[str]) -> Iterable[NodeEntry]:
    for line in lines:
        entry = parse_node_link(line)
        if entry is not None:
            yield entry
