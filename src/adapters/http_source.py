"""aiohttp source adapter.

Implements the core SourceFetcherPort with one ClientSession per run.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from core.errors import FetchError

LOGGER = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "nodesync/0.1"


class AiohttpSourceFetcher:
    """Async HTTP GET wrapper that satisfies the SourceFetcherPort contract."""

    def __init__(self, timeout_seconds: float = 30.0, user_agent: str = DEFAULT_USER_AGENT) -> None:
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._headers = {"User-Agent": user_agent}
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "AiohttpSourceFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout, headers=self._headers)
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def fetch_text(self, url: str) -> str:
        """GET the url and return its body decoded as UTF-8.

        Any status outside 2xx and any transport failure become FetchError so
        the core can log the batch and move on.
        """

        session = self._ensure_session()
        try:
            async with session.get(url) as response:
                # aiohttp's response.ok accepts 3xx; only 2xx counts as success here.
                if not 200 <= response.status < 300:
                    raise FetchError(f"HTTP {response.status} from {url}", status=response.status)
                payload = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise FetchError(f"{type(exc).__name__}: {exc}") from exc

        LOGGER.debug("Fetched %s bytes from %s", len(payload), url)
        return payload.decode("utf-8", errors="replace")
