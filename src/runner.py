"""Background execution of pipeline runs.

Triggers return to their caller immediately; the run itself is a tracked
asyncio task so its outcome is still logged and shutdown can wait for it.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from typing import Any, AsyncContextManager, Awaitable, Callable, Optional

from core.config import FETCH_DELAY_SECONDS, RunConfig
from core.models import UpdateSummary
from core.ports import KeyValueStorePort, SourceFetcherPort
from core.updater import NodeListUpdater

LOGGER = logging.getLogger(__name__)

Job = Callable[[], Awaitable[UpdateSummary]]


def build_update_job(
    store: Optional[KeyValueStorePort],
    load_run_config: Callable[[], RunConfig],
    fetcher_factory: Callable[[], AsyncContextManager[SourceFetcherPort]],
    delay_seconds: float = FETCH_DELAY_SECONDS,
) -> Job:
    """Return a coroutine function that performs one full pipeline run.

    Config and the HTTP session are rebuilt for every run so overlapping
    runs never share mutable state; only the store is shared.
    """

    async def job() -> UpdateSummary:
        config = load_run_config()
        async with fetcher_factory() as fetcher:
            updater = NodeListUpdater(fetcher, store, delay_seconds=delay_seconds)
            return await updater.run(config)

    return job


class BackgroundRunner:
    """Spawn pipeline runs as tracked tasks.

    There is no mutual exclusion: a scheduled run and a manual run may
    overlap, and the last writer wins in the store.
    """

    def __init__(self, job: Job) -> None:
        self._job = job
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def active(self) -> int:
        return len(self._tasks)

    def trigger(self, label: str) -> asyncio.Task[Any]:
        """Start a run in the background and return its task."""

        task = asyncio.get_running_loop().create_task(self._job(), name=f"nodesync-{label}")
        self._tasks.add(task)
        task.add_done_callback(functools.partial(self._on_done, label))
        LOGGER.info("Run triggered (%s), %s in flight", label, len(self._tasks))
        return task

    def _on_done(self, label: str, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            LOGGER.warning("Run (%s) was cancelled", label)
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("Run (%s) crashed", label, exc_info=exc)
            return
        summary = task.result()
        LOGGER.info(
            "Run (%s) finished: batches=%s/%s, nodes=%s, persisted=%s",
            label,
            summary.batches_succeeded,
            summary.batches_attempted,
            summary.unique_nodes,
            summary.persisted,
        )

    async def wait_closed(self) -> None:
        """Wait for every in-flight run to finish."""

        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
