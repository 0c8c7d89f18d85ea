"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the subscription source and the
key-value store so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import Protocol


class SourceFetcherPort(Protocol):
    """Fetch operations required by the core pipeline."""

    async def fetch_text(self, url: str) -> str:
        """Return the response body, or raise FetchError."""
        ...


class KeyValueStorePort(Protocol):
    """Storage operations required by the core pipeline.

    The pipeline only ever writes; readers live outside the core.
    """

    def put(self, key: str, value: str) -> None:
        ...
