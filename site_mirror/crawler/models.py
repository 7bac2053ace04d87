# site_mirror/crawler/models.py
"""
Data models for the SiteMirror crawler.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bs4 import BeautifulSoup


@dataclass(slots=True, frozen=True)
class RawResponse:
    """Fully read HTTP response; the connection is already released."""

    url: str
    status: int
    content_type: str
    body: bytes


@dataclass(slots=True)
class Page:
    """Parsed document owned by the task that fetched it."""

    url: str
    document: BeautifulSoup

    def html(self) -> str:
        return str(self.document)


class PageStatus(str, enum.Enum):
    """Fate of one URL; the persistence gate answers with WRITTEN or SKIPPED."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class PageResult:
    """What happened to one URL during a run."""

    url: str
    status: PageStatus
    path: Optional[Path] = None
    error: Optional[str] = None
    links: int = 0

    @property
    def ok(self) -> bool:
        return self.status is not PageStatus.FAILED
