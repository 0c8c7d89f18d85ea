from __future__ import annotations

import asyncio
import logging

import pytest

from core.config import RunConfig
from core.models import UpdateSummary
from runner import BackgroundRunner, build_update_job
from scheduler import IntervalScheduler

UUID = "b831381d-6324-4d53-ad4f-8cda48b30811"


class FakeFetcher:
    def __init__(self) -> None:
        self.closed = False

    async def __aenter__(self) -> "FakeFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    async def fetch_text(self, url: str) -> str:
        return f"vless://{UUID}@1.1.1.1:443?sni=a.com"


class FakeStore:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def put(self, key: str, value: str) -> None:
        self.data[key] = value


def test_update_job_builds_fresh_fetcher_and_closes_it() -> None:
    fetchers: list[FakeFetcher] = []

    def factory() -> FakeFetcher:
        fetchers.append(FakeFetcher())
        return fetchers[-1]

    store = FakeStore()
    job = build_update_job(store, lambda: RunConfig(source_url="https://x.test", fetch_count=1), factory)

    summary = asyncio.run(job())
    asyncio.run(job())

    assert summary.persisted
    assert store.data["node_index"] == "0"
    assert len(fetchers) == 2
    assert all(fetcher.closed for fetcher in fetchers)


def test_background_runner_logs_crashed_runs(caplog: pytest.LogCaptureFixture) -> None:
    async def job() -> UpdateSummary:
        raise RuntimeError("boom")

    async def scenario() -> int:
        runner = BackgroundRunner(job)
        runner.trigger("manual")
        in_flight = runner.active
        await runner.wait_closed()
        # Let done-callbacks run.
        await asyncio.sleep(0)
        return in_flight

    with caplog.at_level(logging.INFO):
        in_flight = asyncio.run(scenario())

    assert in_flight == 1
    assert "Run (manual) crashed" in caplog.text


def test_background_runner_allows_overlapping_runs() -> None:
    started: list[int] = []
    release = None

    async def job() -> UpdateSummary:
        started.append(1)
        await release.wait()
        return UpdateSummary()

    async def scenario() -> int:
        nonlocal release
        release = asyncio.Event()
        runner = BackgroundRunner(job)
        runner.trigger("scheduled")
        runner.trigger("manual")
        await asyncio.sleep(0)
        overlapping = runner.active
        release.set()
        await runner.wait_closed()
        await asyncio.sleep(0)
        assert runner.active == 0
        return overlapping

    assert asyncio.run(scenario()) == 2
    assert len(started) == 2


class _StopScheduler(Exception):
    pass


class CountingRunner:
    def __init__(self) -> None:
        self.labels: list[str] = []

    def trigger(self, label: str) -> None:
        self.labels.append(label)


def test_scheduler_fires_every_interval_until_stopped() -> None:
    runner = CountingRunner()
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        if len(sleeps) == 3:
            raise _StopScheduler

    scheduler = IntervalScheduler(runner, 60, run_on_start=True, sleep=fake_sleep)

    with pytest.raises(_StopScheduler):
        asyncio.run(scheduler.run_forever())

    assert sleeps == [60, 60, 60]
    # One run on start plus one after each completed sleep.
    assert runner.labels == ["scheduled", "scheduled", "scheduled"]


def test_scheduler_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        IntervalScheduler(CountingRunner(), 0)
