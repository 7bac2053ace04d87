# site_mirror/exceptions.py
"""
Error kinds raised by the per-URL mirroring pipeline.

Every error carries the offending URL and the underlying cause, and renders
as ``"<action> <url>: <cause>"`` so that a single log line is enough to tell
what went wrong and where.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "MirrorError",
    "InvalidURLError",
    "NetworkError",
    "HTTPStatusError",
    "ParseError",
    "StorageError",
)


class MirrorError(Exception):
    """Base class for errors raised while processing a single URL."""

    action = "processing"

    def __init__(self, url: str, cause: object = None, action: Optional[str] = None) -> None:
        self.url = url
        self.cause = cause
        if action is not None:
            self.action = action
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.cause is None:
            return f"{self.action} {self.url}"
        return f"{self.action} {self.url}: {self.cause}"


class InvalidURLError(MirrorError):
    action = "parsing url"


class NetworkError(MirrorError):
    action = "making get request to"


class HTTPStatusError(NetworkError):
    """Non-2xx response while error pages are not being saved."""

    action = "unexpected status from"

    def __init__(self, url: str, status: int) -> None:
        self.status = status
        super().__init__(url, f"HTTP {status}")


class ParseError(MirrorError):
    action = "parsing response from url"


class StorageError(MirrorError):
    """Directory creation or file write failure."""

    action = "saving"
