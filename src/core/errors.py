"""Exceptions shared by the core pipeline and its adapters."""

from __future__ import annotations

from typing import Optional


class ConfigError(RuntimeError):
    """Raised when a required setting is missing while wiring adapters."""


class FetchError(RuntimeError):
    """A single fetch attempt failed.

    ``status`` carries the HTTP status for non-success responses and is None
    when the request never produced a response (DNS, connection, timeout).
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status
