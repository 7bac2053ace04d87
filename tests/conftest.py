# File: tests/conftest.py
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from pathlib import Path
from typing import Dict, List, Union

import pytest_asyncio
from aiohttp import web
from bs4 import BeautifulSoup

from site_mirror.crawler.models import Page, RawResponse
from site_mirror.exceptions import NetworkError

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def make_page(html: str, url: str = "http://d.com/") -> Page:
    """Build a parsed Page straight from markup."""
    return Page(url=url, document=BeautifulSoup(html, "html.parser"))


def html_handler(text: str, status: int = 200) -> Handler:
    async def handler(_):
        return web.Response(text=text, status=status, content_type="text/html")

    return handler


def snapshot(root: Path) -> Dict[str, tuple[bytes, int]]:
    """Map every file below *root* to (content, mtime_ns)."""
    return {
        str(p.relative_to(root)): (p.read_bytes(), p.stat().st_mtime_ns)
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


class FakeFetcher:
    """In-memory fetcher: url -> markup, or an exception to raise."""

    def __init__(self, pages: Dict[str, Union[str, Exception]], delay: float = 0.0) -> None:
        self.pages = pages
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url: str) -> RawResponse:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            body = self.pages.get(url)
            if body is None:
                raise NetworkError(url, "no such page")
            if isinstance(body, Exception):
                raise body
            return RawResponse(url=url, status=200, content_type="text/html", body=body.encode())
        finally:
            self.in_flight -= 1


@pytest_asyncio.fixture
async def serve(unused_tcp_port: int) -> AsyncIterator[Callable[[Dict[str, Union[str, Handler]]], Awaitable[str]]]:
    """Start a local aiohttp site from a path -> markup/handler mapping, yield its base URL."""
    runners: List[web.AppRunner] = []

    async def _serve(routes: Dict[str, Union[str, Handler]]) -> str:
        app = web.Application()
        for path, body in routes.items():
            app.router.add_get(path, body if callable(body) else html_handler(body))
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", unused_tcp_port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{unused_tcp_port}"

    yield _serve
    for runner in runners:
        await runner.cleanup()
