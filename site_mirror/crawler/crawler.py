# === FILE: site_mirror/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from pathlib import Path
from typing import List, Optional, Tuple, Union

from site_mirror.crawler.fetcher import (
    DEFAULT_USER_AGENT,
    HttpFetcher,
    PageFetcher,
    PageParser,
    SoupParser,
)
from site_mirror.crawler.link_extractor import extract_links
from site_mirror.crawler.models import PageResult, PageStatus, RawResponse
from site_mirror.crawler.visited import VisitedSet
from site_mirror.exceptions import MirrorError
from site_mirror.logger import LOGGER_NAME
from site_mirror.storage import FileSystemStore, PageStore

__all__ = ("MirrorSession",)


class MirrorSession:
    """Рекурсивное зеркалирование сайта уровнями (BFS) с возобновлением.

    Каждый уровень обрабатывается конкурентно: одна задача на URL, все задачи
    уровня завершаются до начала следующего. Ошибка одного URL только
    логируется и обрывает его ветку.
    """

    def __init__(
        self,
        start_url: str,
        dest_dir: Union[str, Path],
        timeout: float = 10.0,
        logger: Optional[logging.Logger] = None,
        *,
        fetcher: Optional[PageFetcher] = None,
        parser: Optional[PageParser] = None,
        store: Optional[PageStore] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        max_concurrency: Optional[int] = None,
        save_error_pages: bool = True,
    ) -> None:
        if not start_url:
            raise ValueError("missing start url")
        if dest_dir is None or str(dest_dir) == "":
            raise ValueError("missing dest dir")
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._start_url = start_url
        self._dest_dir = Path(dest_dir)
        self.timeout = timeout
        self.logger = logger or logging.getLogger(LOGGER_NAME)
        self.fetcher: PageFetcher = fetcher or HttpFetcher(
            timeout, user_agent=user_agent, save_error_pages=save_error_pages
        )
        self.parser: PageParser = parser or SoupParser()
        self.store: PageStore = store or FileSystemStore(self._dest_dir)
        self.max_concurrency = max_concurrency
        self.visited = VisitedSet()
        self._stop_requested = False

    @classmethod
    def from_config(cls, config, logger: Optional[logging.Logger] = None) -> MirrorSession:
        return cls(
            config.start_url,
            config.dest_dir,
            config.timeout,
            logger,
            user_agent=config.user_agent,
            max_concurrency=config.max_concurrency,
            save_error_pages=config.save_error_pages,
        )

    @property
    def start_url(self) -> str:
        return self._start_url

    @property
    def dest_dir(self) -> Path:
        return self._dest_dir

    async def __aenter__(self) -> MirrorSession:
        if isinstance(self.fetcher, HttpFetcher):
            await self.fetcher.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if isinstance(self.fetcher, HttpFetcher):
            await self.fetcher.close()

    def request_stop(self) -> None:
        """Stop after the level currently in flight; its tasks run to completion."""
        self._stop_requested = True

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    async def run(self) -> List[PageResult]:
        """Mirror everything reachable from the start URL; returns per-URL results.

        Outside ``async with`` the HTTP client is opened for this run only.
        """
        transient = isinstance(self.fetcher, HttpFetcher) and not self.fetcher.is_open
        if transient:
            await self.fetcher.open()
        try:
            return await self._traverse()
        finally:
            if transient:
                await self.fetcher.close()

    async def _traverse(self) -> List[PageResult]:
        self._stop_requested = False
        self.logger.info("Mirroring %s into %s", self.start_url, self.dest_dir)
        started = time.monotonic()
        limit = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None

        self.visited.mark_if_unvisited(self.start_url)
        level = [self.start_url]
        depth = 0
        results: List[PageResult] = []
        while level:
            if self._stop_requested:
                self.logger.info("Stop requested: %d urls of level %d left unprocessed", len(level), depth)
                break
            self.logger.debug("Level %d: %d urls", depth, len(level))
            outcomes = await asyncio.gather(*(self._process(url, limit) for url in level))
            next_level: List[str] = []
            for result, children in outcomes:
                results.append(result)
                next_level.extend(children)
            level = next_level
            depth += 1

        duration = time.monotonic() - started
        failed = sum(1 for r in results if not r.ok)
        self.logger.info(
            "Completed: %d urls in %d levels, %d failed, %.2f s", len(results), depth, failed, duration
        )
        return results

    async def _process(
        self, url: str, limit: Optional[asyncio.Semaphore]
    ) -> Tuple[PageResult, List[str]]:
        async with limit if limit is not None else contextlib.nullcontext():
            try:
                raw = await asyncio.to_thread(self.store.load, url)
                if raw is None:
                    raw = await self.fetcher.fetch(url)
                status, children = await asyncio.to_thread(self._digest, url, raw)
                path = self.store.local_path(url)
            except MirrorError as exc:
                self.logger.warning("%s", exc)
                return PageResult(url, PageStatus.FAILED, error=str(exc)), []

        if status is PageStatus.SKIPPED:
            self.logger.info("%s already exists, skipping", url)
        else:
            self.logger.info("Saved %s -> %s", url, path)
        return PageResult(url, status, path=path, links=len(children)), children

    def _digest(self, url: str, raw: RawResponse) -> Tuple[PageStatus, List[str]]:
        # runs in a worker thread: parse, persist, then claim children
        page = self.parser.parse(raw)
        status = self.store.ensure_persisted(url, page)
        return status, extract_links(self.start_url, page, self.visited)
