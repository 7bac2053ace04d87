"""
File storage for mirrored pages: URL -> local file, written at most once.

A file that already exists at the mapped path means the page is mirrored;
it is never re-fetched or re-written, so its contents and modification time
survive any number of later runs. Its links are read back from the saved
copy instead.

Every filesystem failure surfaces as :class:`~site_mirror.exceptions.StorageError`
carrying the URL, so one unusable path fails only its own page.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Union

from site_mirror.crawler.models import Page, PageStatus, RawResponse
from site_mirror.exceptions import StorageError
from site_mirror.utils import url_to_local_path

__all__ = ("PageStore", "FileSystemStore")

SAVED_CONTENT_TYPE = "text/html; charset=utf-8"

# ValueError: paths the OS refuses outright (e.g. unencodable names)
_FS_ERRORS = (OSError, ValueError)


class PageStore(Protocol):
    def local_path(self, url: str) -> Path: ...

    def load(self, url: str) -> Optional[RawResponse]: ...

    def ensure_persisted(self, url: str, page: Page) -> PageStatus: ...


class FileSystemStore:
    """Stores pages under ``dest_dir/host/path``."""

    def __init__(self, dest_dir: Union[str, Path]) -> None:
        self.dest_dir = Path(dest_dir)

    def local_path(self, url: str) -> Path:
        return url_to_local_path(self.dest_dir, url)

    def exists(self, url: str) -> bool:
        path = self.local_path(url)
        try:
            return path.exists()
        except _FS_ERRORS as exc:
            raise StorageError(url, exc, action="checking saved copy of") from exc

    def load(self, url: str) -> Optional[RawResponse]:
        """Saved copy of *url* as a response, or None when it was never mirrored."""
        path = self.local_path(url)
        try:
            if not path.is_file():
                return None
            body = path.read_bytes()
        except _FS_ERRORS as exc:
            raise StorageError(url, exc, action="reading saved copy of") from exc
        return RawResponse(url=url, status=200, content_type=SAVED_CONTENT_TYPE, body=body)

    def ensure_persisted(self, url: str, page: Page) -> PageStatus:
        """Write *page* unless its file is already there.

        Returns ``PageStatus.WRITTEN`` or ``PageStatus.SKIPPED``. Raises
        :class:`~site_mirror.exceptions.InvalidURLError` for an unmappable URL
        and :class:`~site_mirror.exceptions.StorageError` when the path cannot
        be checked or the directory or file cannot be created.
        """
        if self.exists(url):
            return PageStatus.SKIPPED
        path = self.local_path(url)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except _FS_ERRORS as exc:
            raise StorageError(url, exc, action="creating directory for") from exc

        html = page.html()
        try:
            fh = path.open("x", encoding="utf-8")
        except FileExistsError:
            # another task got there between the check and the create
            return PageStatus.SKIPPED
        except _FS_ERRORS as exc:
            raise StorageError(url, exc, action="creating file for") from exc

        try:
            with fh:
                fh.write(html)
        except _FS_ERRORS as exc:
            # no truncated page may stay behind
            path.unlink(missing_ok=True)
            raise StorageError(url, exc, action="writing HTML file for") from exc
        return PageStatus.WRITTEN
