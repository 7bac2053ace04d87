# site_mirror/crawler/visited.py
"""
Shared record of URLs already scheduled during a mirroring session.
"""
from __future__ import annotations

import threading
from typing import Set


class VisitedSet:
    """URL membership guarded by a single lock.

    The only mutating operation is :meth:`mark_if_unvisited`, an atomic
    check-and-set: for a given URL it returns ``True`` exactly once, no matter
    how many threads or tasks race on it.
    """

    def __init__(self) -> None:
        self._urls: Set[str] = set()
        self._lock = threading.Lock()

    def mark_if_unvisited(self, url: str) -> bool:
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)
