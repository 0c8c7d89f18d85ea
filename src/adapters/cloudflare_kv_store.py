"""Cloudflare Workers KV adapter.

Writes through the Cloudflare REST API so the node list lands in the same
namespace a Worker-side consumer reads from.
"""

from __future__ import annotations

import urllib.error
import urllib.parse
import urllib.request
from typing import Optional

API_BASE = "https://api.cloudflare.com/client/v4"


class CloudflareKVStore:
    """KV adapter that satisfies the KeyValueStorePort contract."""

    def __init__(self, account_id: str, namespace_id: str, api_token: str, timeout: float = 10.0) -> None:
        self._account_id = account_id
        self._namespace_id = namespace_id
        self._api_token = api_token
        self._timeout = timeout

    def _endpoint(self, key: str) -> str:
        quoted = urllib.parse.quote(key, safe="")
        return (
            f"{API_BASE}/accounts/{self._account_id}/storage/kv/namespaces/"
            f"{self._namespace_id}/values/{quoted}"
        )

    def _request(self, key: str, method: str, data: Optional[bytes] = None) -> urllib.request.Request:
        request = urllib.request.Request(self._endpoint(key), data=data, method=method)
        request.add_header("Authorization", f"Bearer {self._api_token}")
        if data is not None:
            request.add_header("Content-Type", "text/plain; charset=utf-8")
        return request

    def put(self, key: str, value: str) -> None:
        """Write a value under key."""

        request = self._request(key, "PUT", value.encode("utf-8"))
        # Blocking call: the pipeline performs two small writes per run.
        try:
            with urllib.request.urlopen(request, timeout=self._timeout):
                pass
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"Cloudflare KV error {e.code}: {body}") from e

    def get(self, key: str) -> Optional[str]:
        """Read a value, returning None when the key does not exist."""

        request = self._request(key, "GET")
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                return response.read().decode("utf-8")
        except urllib.error.HTTPError as e:
            if e.code == 404:
                return None
            body = e.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"Cloudflare KV error {e.code}: {body}") from e
