"""Persistence of the deduplicated node list."""

from __future__ import annotations

import json
import logging
from typing import Iterable

from core.config import NODE_INDEX_KEY, NODE_INDEX_RESET, NODE_LIST_KEY
from core.dedup import NodeMap
from core.models import NodeEntry
from core.ports import KeyValueStorePort

LOGGER = logging.getLogger(__name__)


def serialize_nodes(entries: Iterable[NodeEntry]) -> str:
    """Pretty-print the node list so it stays readable in a store dashboard."""

    return json.dumps([entry.to_dict() for entry in entries], indent=2, ensure_ascii=False)


def persist_nodes(store: KeyValueStorePort, node_map: NodeMap) -> bool:
    """Write the node list, then reset the rotation index.

    Returns False without touching the store when the map is empty. The two
    writes are not atomic: a reader can briefly see the new list together
    with the old index.
    """

    if not len(node_map):
        LOGGER.warning("No valid nodes found across all fetches. Store will not be updated.")
        return False

    entries = node_map.entries()
    store.put(NODE_LIST_KEY, serialize_nodes(entries))
    LOGGER.info("Update complete. Stored %s unique nodes under %s", len(entries), NODE_LIST_KEY)

    # Consumers rotate through the list from this index; start over at the first new node.
    store.put(NODE_INDEX_KEY, NODE_INDEX_RESET)
    LOGGER.info("Node index %s has been reset to %s", NODE_INDEX_KEY, NODE_INDEX_RESET)
    return True
