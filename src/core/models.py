"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NodeEntry:
    """One deduplicated proxy node: the SNI host and the link's uuid."""

    host: str
    uuid: str

    def to_dict(self) -> dict[str, str]:
        return {"host": self.host, "uuid": self.uuid}


@dataclass(frozen=True)
class UpdateSummary:
    """Outcome of one pipeline run, reported back to whoever triggered it."""

    batches_attempted: int = 0
    batches_succeeded: int = 0
    batches_failed: int = 0
    unique_nodes: int = 0
    persisted: bool = False
    aborted_reason: Optional[str] = None
