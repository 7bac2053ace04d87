# File: site_mirror/aggregator.py
"""site_mirror.aggregator: сводный отчёт по результатам зеркалирования."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, List, Optional, TypedDict

from site_mirror.crawler.models import PageResult, PageStatus


class SavedPageInfo(TypedDict):
    """Страница, записанная или уже лежащая на диске."""

    url: str
    path: str
    links: int


class FailedPageInfo(TypedDict):
    """URL, обработка которого завершилась ошибкой."""

    url: str
    error: str


@dataclass(slots=True)
class MirrorReport:
    """Итоги одного запуска: записанные, пропущенные и неудачные URL."""

    start_url: str
    dest_dir: str
    written: List[SavedPageInfo] = field(default_factory=list)
    skipped: List[SavedPageInfo] = field(default_factory=list)
    failed: List[FailedPageInfo] = field(default_factory=list)
    stopped: bool = False

    @property
    def total(self) -> int:
        return len(self.written) + len(self.skipped) + len(self.failed)

    def summary(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "written": len(self.written),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["summary"] = self.summary()
        return data

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _saved(result: PageResult) -> SavedPageInfo:
    return {"url": result.url, "path": str(result.path or ""), "links": result.links}


def aggregate_results(
    start_url: str,
    dest_dir: Any,
    results: Iterable[PageResult],
    stopped: Optional[bool] = False,
) -> MirrorReport:
    """Раскладывает PageResult по группам отчёта, сохраняя порядок обхода."""
    report = MirrorReport(start_url=start_url, dest_dir=str(dest_dir), stopped=bool(stopped))
    for result in results:
        if result.status is PageStatus.WRITTEN:
            report.written.append(_saved(result))
        elif result.status is PageStatus.SKIPPED:
            report.skipped.append(_saved(result))
        else:
            report.failed.append({"url": result.url, "error": result.error or ""})
    return report
