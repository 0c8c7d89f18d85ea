"""Application entry point for the nodesync updater."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Optional

from aiohttp import web
from art import tprint
from dotenv import load_dotenv

import settings
from adapters.sqlite_kv_store import SQLiteKeyValueStore
from client import build_fetcher, build_store, load_run_config
from core.config import NODE_INDEX_KEY, NODE_LIST_KEY
from core.errors import ConfigError
from log_setup import configure_logging
from runner import BackgroundRunner, build_update_job
from scheduler import IntervalScheduler
from trigger_server import create_app

NAME = "NODESYNC"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


def _configure_logging() -> None:
    # Secrets live in .env; load it before resolving redaction values.
    load_dotenv()
    configure_logging(settings.LOGGING, settings.PROJECT_ROOT)


def _build_runner() -> BackgroundRunner:
    store = build_store()
    job = build_update_job(store, load_run_config, build_fetcher)
    return BackgroundRunner(job)


def _run_once() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    try:
        store = build_store()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return

    job = build_update_job(store, load_run_config, build_fetcher)
    summary = asyncio.run(job())
    logger.info(
        "Run finished: batches=%s/%s, nodes=%s, persisted=%s",
        summary.batches_succeeded,
        summary.batches_attempted,
        summary.unique_nodes,
        summary.persisted,
    )


async def _serve_forever(runner: BackgroundRunner) -> None:
    logger = logging.getLogger(__name__)
    app_runner = web.AppRunner(create_app(runner))
    await app_runner.setup()
    site = web.TCPSite(app_runner, settings.SERVER_HOST, settings.SERVER_PORT)
    await site.start()
    logger.info("Trigger server listening on http://%s:%s/?run=true", settings.SERVER_HOST, settings.SERVER_PORT)

    try:
        if settings.SCHEDULE_ENABLED:
            scheduler = IntervalScheduler(
                runner,
                settings.SCHEDULE_INTERVAL_SECONDS,
                run_on_start=settings.SCHEDULE_RUN_ON_START,
            )
            await scheduler.run_forever()
        else:
            await asyncio.Event().wait()
    finally:
        # AppRunner.cleanup triggers on_shutdown, which drains in-flight runs.
        await app_runner.cleanup()


def _serve() -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    try:
        runner = _build_runner()
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return

    try:
        asyncio.run(_serve_forever(runner))
    except KeyboardInterrupt:
        logger.info("Stopped")


def _show() -> None:
    if settings.STORE_BACKEND != "sqlite":
        print("show only supports store.backend=sqlite")
        return
    store = SQLiteKeyValueStore(settings.DB_PATH)
    store.init_db()
    node_list = store.get(NODE_LIST_KEY)
    if node_list is None:
        print(f"{NODE_LIST_KEY} is not set.")
        return
    print(node_list)
    print(f"{NODE_INDEX_KEY} = {store.get(NODE_INDEX_KEY)}")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="nodesync")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Fetch the subscription and update the store once")
    subparsers.add_parser("serve", help="Start the HTTP trigger and the interval scheduler")
    subparsers.add_parser("show", help="Print the stored node list and rotation index")

    args = parser.parse_args(argv)
    if args.command == "serve":
        _serve()
        return
    if args.command == "show":
        _show()
        return
    _run_once()


if __name__ == "__main__":
    main()
