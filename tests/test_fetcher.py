# File: tests/test_fetcher.py
"""HTTP fetching against a local aiohttp app, and HTML parsing."""
from __future__ import annotations

import asyncio

import pytest
from aiohttp import web

import site_mirror.crawler.fetcher as fetcher_module
from site_mirror.crawler.fetcher import HttpFetcher, SoupParser
from site_mirror.crawler.models import RawResponse
from site_mirror.exceptions import HTTPStatusError, NetworkError, ParseError


@pytest.mark.asyncio()
async def test_fetch_reads_body(serve):
    base = await serve({"/": '<a href="/page1">Page1</a>'})
    async with HttpFetcher(timeout=2.0) as fetcher:
        raw = await fetcher.fetch(base + "/")

    assert raw.url == base + "/"
    assert raw.status == 200
    assert raw.content_type.startswith("text/html")
    assert raw.body == b'<a href="/page1">Page1</a>'


@pytest.mark.asyncio()
async def test_fetch_sends_user_agent(serve):
    seen = {}

    async def echo(request):
        seen["ua"] = request.headers.get("User-Agent")
        return web.Response(text="<p>ok</p>", content_type="text/html")

    base = await serve({"/": echo})
    async with HttpFetcher(timeout=2.0, user_agent="TestAgent/1.0") as fetcher:
        await fetcher.fetch(base + "/")
    assert seen["ua"] == "TestAgent/1.0"


@pytest.mark.asyncio()
async def test_error_status_is_returned_by_default(serve):
    base = await serve({"/": "<p>root</p>"})
    async with HttpFetcher(timeout=2.0) as fetcher:
        raw = await fetcher.fetch(base + "/missing")
    assert raw.status == 404
    assert raw.body


@pytest.mark.asyncio()
async def test_error_status_raises_when_error_pages_are_not_saved(serve):
    base = await serve({"/": "<p>root</p>"})
    async with HttpFetcher(timeout=2.0, save_error_pages=False) as fetcher:
        with pytest.raises(HTTPStatusError) as info:
            await fetcher.fetch(base + "/missing")
    assert info.value.status == 404
    assert isinstance(info.value, NetworkError)
    assert "HTTP 404" in str(info.value)


@pytest.mark.asyncio()
async def test_connection_refused(unused_tcp_port):
    url = f"http://127.0.0.1:{unused_tcp_port}/"
    async with HttpFetcher(timeout=2.0) as fetcher:
        with pytest.raises(NetworkError) as info:
            await fetcher.fetch(url)
    assert info.value.url == url
    assert str(info.value).startswith(f"making get request to {url}: ")


@pytest.mark.asyncio()
async def test_timeout_is_a_network_error(serve):
    async def slow(_):
        await asyncio.sleep(1.0)
        return web.Response(text="<p>late</p>", content_type="text/html")

    base = await serve({"/slow": slow})
    async with HttpFetcher(timeout=0.2) as fetcher:
        with pytest.raises(NetworkError):
            await fetcher.fetch(base + "/slow")


@pytest.mark.asyncio()
async def test_fetch_without_open_session():
    with pytest.raises(RuntimeError):
        await HttpFetcher(timeout=1.0).fetch("http://d.com/")


def test_parse_builds_document():
    raw = RawResponse("http://d.com/", 200, "text/html", b"<html><body><a href='/x'>x</a></body></html>")
    page = SoupParser().parse(raw)
    assert page.url == "http://d.com/"
    assert page.document.find("a")["href"] == "/x"
    assert page.html() == '<html><body><a href="/x">x</a></body></html>'


def test_parse_empty_body():
    page = SoupParser().parse(RawResponse("http://d.com/", 200, "text/html", b""))
    assert page.html() == ""


def test_parse_error_wraps_cause(monkeypatch):
    def broken(*args, **kwargs):
        raise ValueError("random error")

    monkeypatch.setattr(fetcher_module, "BeautifulSoup", broken)
    with pytest.raises(ParseError) as info:
        SoupParser().parse(RawResponse("someurl", 200, "text/html", b"<p>"))
    assert str(info.value) == "parsing response from url someurl: random error"
    assert isinstance(info.value.cause, ValueError)
