"""Static configuration for nodesync.

Deployment settings (store backend, HTTP, server, schedule, logging) live in
a single JSON file for quick edits without touching Python. The source URL,
fetch count and credentials come from the environment instead.
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


def _resolve_path(path: str) -> str:
    if os.path.isabs(path):
        return path
    return os.path.join(PROJECT_ROOT, path)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Store backend: "sqlite" keeps everything local, "cloudflare" writes to a
# Workers KV namespace (credentials from CF_* environment variables).
_store = _CONFIG.get("store", {})
STORE_BACKEND = _store.get("backend", "sqlite")
DB_PATH = _resolve_path(_store.get("sqlite_path", "nodesync.db"))

# Source HTTP client settings.
_http = _CONFIG.get("http", {})
HTTP_TIMEOUT_SECONDS = float(_http.get("timeout_seconds", 30))
HTTP_USER_AGENT = _http.get("user_agent", "nodesync/0.1")

# Trigger server bind address for `nodesync serve`.
_server = _CONFIG.get("server", {})
SERVER_HOST = _server.get("host", "127.0.0.1")
SERVER_PORT = int(_server.get("port", 8787))

# Timer trigger settings for `nodesync serve`.
_schedule = _CONFIG.get("schedule", {})
SCHEDULE_ENABLED = bool(_schedule.get("enabled", True))
SCHEDULE_INTERVAL_SECONDS = float(_schedule.get("interval_minutes", 60)) * 60
SCHEDULE_RUN_ON_START = bool(_schedule.get("run_on_start", False))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
