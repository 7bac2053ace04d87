# File: site_mirror/utils.py
"""site_mirror.utils: сопоставление URL с локальными путями и проверка области обхода."""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Sequence, Union
from urllib.parse import urlsplit

from site_mirror.exceptions import InvalidURLError
from site_mirror.logger import logger

__all__: Sequence[str] = (
    "INDEX_FILE",
    "url_to_local_path",
    "is_in_scope",
    "resolve",
)

INDEX_FILE = "index.html"


def url_to_local_path(dest_dir: Union[str, Path], url: str) -> Path:
    """
    Map *url* to its file under *dest_dir*: ``dest_dir/host/path``.

    A path ending in ``/`` (or the empty path of a bare origin) is stored as
    ``index.html`` inside that directory. The path is taken verbatim, without
    percent-decoding; query and fragment do not take part. Dot segments are
    collapsed so the result always stays below ``dest_dir/host``.
    """
    try:
        parsed = urlsplit(url)
    except (TypeError, ValueError) as exc:
        raise InvalidURLError(url, exc) from exc
    if "\x00" in url:
        # NUL cannot appear in a filesystem path
        raise InvalidURLError(url, "embedded null byte")

    host = parsed.netloc.rpartition("@")[2]
    raw = parsed.path
    is_dir = raw == "" or raw.endswith(("/", "/.", "/.."))
    clean = posixpath.normpath("/" + raw.lstrip("/"))
    parts = [p for p in clean.split("/") if p]
    if is_dir or not parts:
        parts.append(INDEX_FILE)

    local = Path(dest_dir, host, *parts)
    logger.debug("Local path: %s -> %s", url, local)
    return local


def is_in_scope(start_url: str, link: str) -> bool:
    """Host-relative links and links prefixed by *start_url* belong to the mirror."""
    if link.startswith("//"):
        return False
    return link.startswith("/") or link.startswith(start_url)


def resolve(start_url: str, link: str) -> str:
    """Turn a host-relative *link* into an absolute URL; other links pass through."""
    if link.startswith("/") and not link.startswith("//"):
        return start_url.rstrip("/") + link
    return link
