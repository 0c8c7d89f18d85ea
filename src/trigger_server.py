"""HTTP trigger for manual runs.

Any request with ``?run=true`` starts a background run and gets an immediate
200; everything else gets a 403 usage hint. The response never reflects how
the run itself turns out.
"""

from __future__ import annotations

import logging

from aiohttp import web

from runner import BackgroundRunner

LOGGER = logging.getLogger(__name__)

ACK_TEXT = "Update process triggered successfully in the background. Check the logs for details."
USAGE_TEXT = "This is an updater service. To trigger an update manually, add '?run=true' to the URL."

RUNNER_KEY = web.AppKey("runner", BackgroundRunner)


async def handle_trigger(request: web.Request) -> web.Response:
    if request.query.get("run") == "true":
        LOGGER.info("Manual trigger via HTTP received from %s", request.remote)
        request.app[RUNNER_KEY].trigger("manual")
        return web.Response(text=ACK_TEXT, status=200)
    return web.Response(text=USAGE_TEXT, status=403)


async def _drain_runs(app: web.Application) -> None:
    runner = app[RUNNER_KEY]
    if runner.active:
        LOGGER.info("Waiting for %s in-flight runs before shutdown", runner.active)
    await runner.wait_closed()


def create_app(runner: BackgroundRunner) -> web.Application:
    app = web.Application()
    app[RUNNER_KEY] = runner
    app.router.add_route("*", "/{tail:.*}", handle_trigger)
    app.on_shutdown.append(_drain_runs)
    return app
