# site_mirror/crawler/fetcher.py
"""
Fetcher module: one-shot HTTP retrieval and HTML parsing of a single URL.

Neither stage keeps shared state; both are injected into the session through
the :class:`PageFetcher` and :class:`PageParser` protocols so tests can swap
them for fakes.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout
from bs4 import BeautifulSoup

from site_mirror.crawler.models import Page, RawResponse
from site_mirror.exceptions import HTTPStatusError, NetworkError, ParseError

DEFAULT_USER_AGENT = "SiteMirror/0.1"


class PageFetcher(Protocol):
    async def fetch(self, url: str) -> RawResponse: ...


class PageParser(Protocol):
    def parse(self, raw: RawResponse) -> Page: ...


class HttpFetcher:
    """aiohttp-backed fetcher with a per-request timeout.

    Must be used as an async context manager (or :meth:`open`/:meth:`close`
    called explicitly) since the client session needs a running loop.
    """

    def __init__(
        self,
        timeout: float,
        user_agent: str = DEFAULT_USER_AGENT,
        save_error_pages: bool = True,
        session: Optional[ClientSession] = None,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.save_error_pages = save_error_pages
        self.session = session
        self._owns_session = session is None

    @property
    def is_open(self) -> bool:
        return self.session is not None and not self.session.closed

    async def open(self) -> None:
        if self.session is None or self.session.closed:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
                raise_for_status=False,
            )
            self._owns_session = True

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def __aenter__(self) -> HttpFetcher:
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch(self, url: str) -> RawResponse:
        """
        GET *url* and read the whole body.

        Status codes are not inspected unless ``save_error_pages`` is off, in
        which case a non-2xx answer raises :class:`HTTPStatusError`.
        """
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url) as resp:
                body = await resp.read()
                status = resp.status
                ctype = resp.headers.get("Content-Type", "")
        except (ClientError, asyncio.TimeoutError, ValueError) as exc:
            raise NetworkError(url, str(exc) or type(exc).__name__) from exc
        if not self.save_error_pages and not 200 <= status < 300:
            raise HTTPStatusError(url, status)
        return RawResponse(url=url, status=status, content_type=ctype, body=body)


class SoupParser:
    """Parses response bodies into BeautifulSoup documents."""

    def __init__(self, features: str = "html.parser") -> None:
        self.features = features

    def parse(self, raw: RawResponse) -> Page:
        try:
            document = BeautifulSoup(raw.body, self.features)
        except Exception as exc:
            raise ParseError(raw.url, exc) from exc
        return Page(url=raw.url, document=document)
