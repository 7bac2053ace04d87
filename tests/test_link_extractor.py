# File: tests/test_link_extractor.py
"""Extraction of in-scope, not yet scheduled links from parsed pages."""
import pytest

from conftest import make_page
from site_mirror.crawler.link_extractor import extract_links
from site_mirror.crawler.visited import VisitedSet

ALL_LINKS_FROM_SAME_DOMAIN = """
<html><head></head><body>
<a href="/some_section/2023/01/19/page1.html">Page 1</a>
<a href="/some_section/2023/02/13/page2.html">Page 2</a>
</body></html>
"""

ONE_LINK_WITHOUT_HREF = """
<html><head></head><body>
<a>Page 1</a>
<a href="/some_section/2023/02/13/page2.html">Page 2</a>
</body></html>
"""

LINKS_WITH_MIXED_DOMAINS = """
<html><head></head><body>
<a href="http://somesite.com/some_section/2023/01/19/page1.html">Page 1</a>
<a href="/some_section/2023/02/13/page2.html">Page 2</a>
</body></html>
"""


@pytest.mark.parametrize(
    "fixture,already_visited,expected",
    [
        (
            ALL_LINKS_FROM_SAME_DOMAIN,
            [],
            ["someurl/some_section/2023/01/19/page1.html", "someurl/some_section/2023/02/13/page2.html"],
        ),
        (
            ALL_LINKS_FROM_SAME_DOMAIN,
            ["someurl/some_section/2023/01/19/page1.html"],
            ["someurl/some_section/2023/02/13/page2.html"],
        ),
        (ONE_LINK_WITHOUT_HREF, [], ["someurl/some_section/2023/02/13/page2.html"]),
        (LINKS_WITH_MIXED_DOMAINS, [], ["someurl/some_section/2023/02/13/page2.html"]),
    ],
    ids=["same-domain", "one-already-visited", "link-without-href", "mixed-domains"],
)
def test_extract_links(fixture, already_visited, expected):
    visited = VisitedSet()
    for url in already_visited:
        visited.mark_if_unvisited(url)
    page = make_page(fixture, url="http://somedomain.com/")
    assert extract_links("someurl", page, visited) == expected


def test_scope_filtering_scenario():
    page = make_page(
        '<a href="/x.html">x</a><a href="http://other.com/y.html">y</a><a>no href</a>',
        url="http://d.com/",
    )
    assert extract_links("http://d.com/", page, VisitedSet()) == ["http://d.com/x.html"]


def test_absolute_same_origin_links_are_kept():
    page = make_page('<a href="http://d.com/docs/a.html">a</a><a href="https://d.com/b">b</a>')
    assert extract_links("http://d.com", page, VisitedSet()) == ["http://d.com/docs/a.html"]


def test_duplicates_are_claimed_once_per_session():
    visited = VisitedSet()
    first = make_page('<a href="/a">1</a><a href="/b">2</a><a href="/a">again</a>')
    second = make_page('<a href="/b">2</a><a href="/c">3</a>')
    assert extract_links("http://d.com", first, visited) == ["http://d.com/a", "http://d.com/b"]
    assert extract_links("http://d.com", second, visited) == ["http://d.com/c"]


def test_non_navigational_hrefs_are_ignored():
    page = make_page(
        '<a href="#top">top</a><a href="mailto:a@d.com">mail</a>'
        '<a href="javascript:void(0)">js</a><a href="//cdn.d.com/x">cdn</a><a href="rel.html">rel</a>'
    )
    assert extract_links("http://d.com", page, VisitedSet()) == []


def test_start_url_link_is_not_returned_when_start_was_premarked():
    visited = VisitedSet()
    visited.mark_if_unvisited("http://d.com")
    page = make_page('<a href="http://d.com">home</a><a href="/about">about</a>')
    assert extract_links("http://d.com", page, visited) == ["http://d.com/about"]
