"""Interval timer trigger."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from runner import BackgroundRunner

LOGGER = logging.getLogger(__name__)


class IntervalScheduler:
    """Fire a background run every ``interval_seconds`` until cancelled."""

    def __init__(
        self,
        runner: BackgroundRunner,
        interval_seconds: float,
        run_on_start: bool = False,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._runner = runner
        self._interval = interval_seconds
        self._run_on_start = run_on_start
        self._sleep = sleep

    async def run_forever(self) -> None:
        LOGGER.info("Scheduler started, interval=%ss", self._interval)
        if self._run_on_start:
            self._fire()
        while True:
            await self._sleep(self._interval)
            self._fire()

    def _fire(self) -> None:
        LOGGER.info("Scheduled trigger activated: starting node update process.")
        self._runner.trigger("scheduled")
