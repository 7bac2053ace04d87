# site_mirror/crawler/link_extractor.py
"""
Link extraction for SiteMirror: in-scope anchors of a parsed page that
have not been scheduled yet.
"""
from __future__ import annotations

from typing import List

from bs4.element import Tag
from site_mirror.crawler.models import Page
from site_mirror.crawler.visited import VisitedSet
from site_mirror.utils import is_in_scope, resolve


def extract_links(start_url: str, page: Page, visited: VisitedSet) -> List[str]:
    """
    Return newly discovered in-scope URLs of *page*, in document order.

    Anchors without ``href`` are ignored. Every in-scope link is claimed in
    *visited*; only links claimed by this call are returned.
    """
    links: List[str] = []
    for tag in page.document.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href = tag.get("href")
        if not isinstance(href, str):
            continue
        if not is_in_scope(start_url, href):
            continue
        absolute = resolve(start_url, href)
        if visited.mark_if_unvisited(absolute):
            links.append(absolute)
    return links
