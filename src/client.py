"""Per-run factories for nodesync.

A run gets a fresh RunConfig and HTTP session every time, so values edited
in .env are picked up by the next scheduled run without a restart.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

import settings
from adapters.cloudflare_kv_store import CloudflareKVStore
from adapters.http_source import AiohttpSourceFetcher
from adapters.sqlite_kv_store import SQLiteKeyValueStore
from core.config import RunConfig
from core.errors import ConfigError

LOGGER = logging.getLogger(__name__)


def load_run_config() -> RunConfig:
    """Read SOURCE_URL and FETCH_COUNT from the environment.

    We read them via python-dotenv to keep the subscription URL out of the
    repo. A missing URL is not raised here; the pipeline logs and aborts.
    """

    load_dotenv()
    return RunConfig.from_raw(os.getenv("SOURCE_URL"), os.getenv("FETCH_COUNT"))


def build_fetcher() -> AiohttpSourceFetcher:
    return AiohttpSourceFetcher(
        timeout_seconds=settings.HTTP_TIMEOUT_SECONDS,
        user_agent=settings.HTTP_USER_AGENT,
    )


def build_store():
    """Select the store adapter based on configuration."""

    if settings.STORE_BACKEND == "sqlite":
        store = SQLiteKeyValueStore(settings.DB_PATH)
        store.init_db()
        LOGGER.info("Using SQLite store at %s", settings.DB_PATH)
        return store

    if settings.STORE_BACKEND == "cloudflare":
        load_dotenv()
        account_id = os.getenv("CF_ACCOUNT_ID")
        namespace_id = os.getenv("CF_NAMESPACE_ID")
        api_token = os.getenv("CF_API_TOKEN")
        # Fail fast on missing credentials instead of failing on the first put.
        if not account_id or not namespace_id or not api_token:
            raise ConfigError("CF_ACCOUNT_ID, CF_NAMESPACE_ID and CF_API_TOKEN are required for store.backend=cloudflare")
        LOGGER.info("Using Cloudflare KV namespace %s", namespace_id)
        return CloudflareKVStore(account_id, namespace_id, api_token)

    raise ConfigError("store.backend must be 'sqlite' or 'cloudflare'")
