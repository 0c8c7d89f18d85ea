"""Host-keyed deduplication (core domain)."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from core.models import NodeEntry


class NodeMap:
    """Ordered host -> uuid map where the first uuid seen for a host wins.

    One instance lives for a single pipeline run and spans every fetch batch,
    so iteration order is batch order, then line order within a batch.
    """

    def __init__(self) -> None:
        self._uuids: dict[str, str] = {}
        self._order: list[str] = []

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, host: object) -> bool:
        return host in self._uuids

    def __iter__(self) -> Iterator[NodeEntry]:
        return iter(self.entries())

    def get(self, host: str) -> Optional[str]:
        return self._uuids.get(host)

    def add(self, entry: NodeEntry) -> bool:
        """Insert the entry unless its host is known. Returns True if inserted."""

        if entry.host in self._uuids:
            return False
        self._uuids[entry.host] = entry.uuid
        self._order.append(entry.host)
        return True

    def merge(self, entries: Iterable[NodeEntry]) -> int:
        """Add a batch of entries and return how many hosts were new."""

        return sum(1 for entry in entries if self.add(entry))

    def entries(self) -> list[NodeEntry]:
        return [NodeEntry(host=host, uuid=self._uuids[host]) for host in self._order]
