# File: site_mirror/aggregator.py
"""site_mirror.aggregator: Модуль агрегатора итогов зеркалирования."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, TypedDict


class FileInfo(TypedDict):
    """Информация о сохранённом файле."""

    url: str
    path: str
    size: int
    binary: bool


class FailureInfo(TypedDict):
    """Информация об отброшенной ветке обхода."""

    url: str
    kind: str
    detail: str


@dataclass(slots=True)
class MirrorReport:
    """Итоги одного запуска: посещённые URL, сохранённые файлы и ошибки."""

    site: str = ""
    output_dir: str = ""
    visited: List[str] = field(default_factory=list)
    files: List[FileInfo] = field(default_factory=list)
    failures: List[FailureInfo] = field(default_factory=list)
    rejected: int = 0
    duration: float = 0.0

    @property
    def failure_counts(self) -> Dict[str, int]:
        return dict(Counter(f["kind"] for f in self.failures))

    def summary(self) -> Dict[str, Any]:
        """Короткая сводка для вывода в консоль."""
        return {
            "site": self.site,
            "output_dir": self.output_dir,
            "visited": len(self.visited),
            "files": len(self.files),
            "failures": self.failure_counts,
            "rejected": self.rejected,
            "duration": round(self.duration, 3),
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление MirrorReport."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)


def aggregate_results(mirror: Any) -> MirrorReport:
    """Собирает отчёт из завершённого SiteMirror."""
    return MirrorReport(
        site=mirror.config.site_root,
        output_dir=str(mirror.writer.root),
        visited=list(mirror.visited),
        files=[
            {"url": e.url, "path": str(e.path), "size": e.size, "binary": e.binary}
            for e in sorted(mirror.persisted, key=lambda e: e.url)
        ],
        failures=[
            {"url": f.url, "kind": f.kind, "detail": f.detail} for f in mirror.failures
        ],
        rejected=mirror.rejected,
        duration=mirror.duration,
    )
