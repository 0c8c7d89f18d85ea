"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

# Pause between consecutive fetch batches. Never applied after the last one.
FETCH_DELAY_SECONDS = 2.0

# Keys read by the downstream rotation consumer.
NODE_LIST_KEY = "NODE_CONFIG_LIST"
NODE_INDEX_KEY = "node_index"
NODE_INDEX_RESET = "0"

DEFAULT_FETCH_COUNT = 1

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def coerce_fetch_count(raw: Union[int, str, None]) -> int:
    """Return a positive fetch count, falling back to 1.

    Strings are read leniently: leading digits count, trailing junk is
    ignored ("3 batches" -> 3). Missing, non-numeric, zero or negative values
    all fall back to the default.
    """

    if raw is None or isinstance(raw, bool):
        return DEFAULT_FETCH_COUNT
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(str(raw))
        if not match:
            return DEFAULT_FETCH_COUNT
        value = int(match.group(1))
    return value if value > 0 else DEFAULT_FETCH_COUNT


@dataclass(frozen=True)
class RunConfig:
    """Per-run settings passed into the pipeline at call time."""

    source_url: Optional[str]
    fetch_count: int = DEFAULT_FETCH_COUNT

    @classmethod
    def from_raw(cls, source_url: Optional[str], fetch_count: Union[int, str, None]) -> "RunConfig":
        url = (source_url or "").strip() or None
        return cls(source_url=url, fetch_count=coerce_fetch_count(fetch_count))
