"""Core node list update pipeline.

This module is integration-agnostic. It only relies on ports for fetching
and storage, so the same run can be driven by a timer, an HTTP trigger or
the command line.

Each run follows a strict order:
1) Validate the store binding and source URL
2) Fetch the source ``fetch_count`` times, sequentially
3) Decode, parse and merge every successful body into one NodeMap
4) Persist the list and reset the rotation index once, at the end
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from core.config import FETCH_DELAY_SECONDS, RunConfig
from core.decoder import decode_content
from core.dedup import NodeMap
from core.errors import FetchError
from core.link_parser import parse_node_links
from core.models import UpdateSummary
from core.persister import persist_nodes
from core.ports import KeyValueStorePort, SourceFetcherPort

LOGGER = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class NodeListUpdater:
    """Orchestrates fetching, decoding, parsing, dedup and persistence."""

    def __init__(
        self,
        fetcher: SourceFetcherPort,
        store: Optional[KeyValueStorePort],
        *,
        delay_seconds: float = FETCH_DELAY_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    async def run(self, config: RunConfig) -> UpdateSummary:
        """Run the pipeline once. Never raises; outcomes are logged and summarised."""

        if self._store is None:
            LOGGER.error("Key-value store is not bound.")
            return UpdateSummary(aborted_reason="store")
        if not config.source_url:
            LOGGER.error("SOURCE_URL is not set.")
            return UpdateSummary(aborted_reason="source_url")

        LOGGER.info(
            "Starting sequential fetch process: %s requests to %s",
            config.fetch_count,
            config.source_url,
        )

        node_map = NodeMap()
        succeeded = 0
        failed = 0
        try:
            for index in range(config.fetch_count):
                batch = index + 1
                if await self._fetch_batch(config, batch, node_map):
                    succeeded += 1
                else:
                    failed += 1

                if batch < config.fetch_count:
                    LOGGER.info("Waiting for %s seconds before next fetch...", self._delay_seconds)
                    await self._sleep(self._delay_seconds)

            persisted = persist_nodes(self._store, node_map)
        except Exception:
            LOGGER.exception("Update process failed with an unexpected error")
            return UpdateSummary(
                batches_attempted=succeeded + failed,
                batches_succeeded=succeeded,
                batches_failed=failed,
                unique_nodes=len(node_map),
                aborted_reason="unexpected",
            )

        return UpdateSummary(
            batches_attempted=config.fetch_count,
            batches_succeeded=succeeded,
            batches_failed=failed,
            unique_nodes=len(node_map),
            persisted=persisted,
        )

    async def _fetch_batch(self, config: RunConfig, batch: int, node_map: NodeMap) -> bool:
        LOGGER.info("Fetching batch %s of %s...", batch, config.fetch_count)
        try:
            body = await self._fetcher.fetch_text(config.source_url)
        except FetchError as exc:
            if exc.status is not None:
                LOGGER.warning("Fetch for batch %s failed with status: %s", batch, exc.status)
            else:
                LOGGER.error("Fetch for batch %s threw an error: %s", batch, exc)
            return False
        except Exception:
            LOGGER.exception("Fetch for batch %s threw an unexpected error", batch)
            return False

        entries = parse_node_links(decode_content(body))
        found = node_map.merge(entries)
        LOGGER.info("Batch %s successful, found %s new unique nodes.", batch, found)
        return True
