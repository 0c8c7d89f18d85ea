from __future__ import annotations

import asyncio

from aiohttp.test_utils import TestClient, TestServer

from core.models import UpdateSummary
from runner import BackgroundRunner
from trigger_server import ACK_TEXT, USAGE_TEXT, create_app


def _request(path: str) -> tuple[int, str, str, int]:
    runs: list[int] = []

    async def job() -> UpdateSummary:
        runs.append(1)
        return UpdateSummary()

    async def scenario() -> tuple[int, str, str]:
        runner = BackgroundRunner(job)
        async with TestClient(TestServer(create_app(runner))) as client:
            response = await client.get(path)
            text = await response.text()
            await runner.wait_closed()
        return response.status, text, response.content_type

    status, text, content_type = asyncio.run(scenario())
    return status, text, content_type, len(runs)


def test_run_true_triggers_background_run() -> None:
    status, text, content_type, runs = _request("/?run=true")
    assert status == 200
    assert text == ACK_TEXT
    assert content_type == "text/plain"
    assert runs == 1


def test_any_path_accepts_the_trigger() -> None:
    status, _, _, runs = _request("/update?run=true")
    assert status == 200
    assert runs == 1


def test_missing_or_wrong_flag_is_forbidden() -> None:
    for path in ("/", "/?run=TRUE", "/?run=1"):
        status, text, content_type, runs = _request(path)
        assert status == 403
        assert text == USAGE_TEXT
        assert content_type == "text/plain"
        assert runs == 0
