from __future__ import annotations

import json

from core.config import NODE_INDEX_KEY, NODE_LIST_KEY
from core.dedup import NodeMap
from core.models import NodeEntry
from core.persister import persist_nodes, serialize_nodes

UUID_1 = "11111111-1111-1111-1111-111111111111"


class FakeStore:
    def __init__(self) -> None:
        self.puts: list[tuple[str, str]] = []

    def put(self, key: str, value: str) -> None:
        self.puts.append((key, value))


def test_empty_map_writes_nothing() -> None:
    store = FakeStore()
    assert persist_nodes(store, NodeMap()) is False
    assert store.puts == []


def test_writes_list_then_resets_index() -> None:
    store = FakeStore()
    node_map = NodeMap()
    node_map.add(NodeEntry(host="a.com", uuid=UUID_1))

    assert persist_nodes(store, node_map) is True
    assert [key for key, _ in store.puts] == [NODE_LIST_KEY, NODE_INDEX_KEY]
    assert json.loads(store.puts[0][1]) == [{"host": "a.com", "uuid": UUID_1}]
    assert store.puts[1][1] == "0"


def test_serialization_is_pretty_printed_with_host_first() -> None:
    text = serialize_nodes([NodeEntry(host="例え.jp", uuid=UUID_1)])
    assert text == '[\n  {\n    "host": "例え.jp",\n    "uuid": "' + UUID_1 + '"\n  }\n]'
