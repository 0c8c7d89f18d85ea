"""Logging setup for nodesync.

Subscription URLs usually carry an access token, and the Cloudflare API
token is a credential, so every handler masks the values of the env vars
listed under ``logging.redact.patterns`` before a line is written.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MASK = "***"


class RedactingFormatter(logging.Formatter):
    """Formatter that replaces known secret values in the rendered line."""

    def __init__(self, secrets: Iterable[str]) -> None:
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
        # Longest first so a secret that contains another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        for secret in self._secrets:
            line = line.replace(secret, MASK)
        return line


def secret_values(redact: Optional[dict]) -> list[str]:
    """Resolve the env var names under ``redact.patterns`` to their values."""

    if not redact or not redact.get("enabled", False):
        return []
    return [os.environ[name] for name in redact.get("patterns", []) if os.environ.get(name)]


def _rotating_file_handler(file_cfg: dict, project_root: str) -> logging.Handler:
    path = file_cfg.get("path", "logs/nodesync.log")
    if not os.path.isabs(path):
        path = os.path.join(project_root, path)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
        backupCount=int(file_cfg.get("backup_count", 5)),
        encoding="utf-8",
    )


def build_handlers(config: dict, project_root: str) -> list[logging.Handler]:
    """Create the console and rotating-file handlers the config asks for."""

    handlers: list[logging.Handler] = []
    if config.get("console", True):
        handlers.append(logging.StreamHandler())
    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        handlers.append(_rotating_file_handler(file_cfg, project_root))

    formatter = RedactingFormatter(secret_values(config.get("redact")))
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(config: Optional[dict], project_root: str) -> None:
    """Install handlers on the root logger when ``logging.enabled`` is set."""

    if not config or not config.get("enabled", False):
        return
    handlers = build_handlers(config, project_root)
    if not handlers:
        return
    level = getattr(logging, str(config.get("level", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, handlers=handlers)
