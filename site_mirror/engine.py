# File: site_mirror/engine.py
"""site_mirror.engine: Orchestration layer для запуска зеркалирования и сборки отчёта."""

from __future__ import annotations

from site_mirror.aggregator import MirrorReport, aggregate_results
from site_mirror.config import MirrorConfig
from site_mirror.crawler.crawler import ROOT_REFERENCE, SiteMirror
from site_mirror.logger import attach_run_log, detach_run_log
from site_mirror.utils import remove_duplicates

__all__ = ["start_mirror"]


async def start_mirror(cfg: MirrorConfig) -> MirrorReport:
    """
    Зеркалирует сайт до исчерпания очереди и возвращает MirrorReport.

    Журнал запуска (``cfg.log_file``) очищается перед стартом.
    """
    handler = attach_run_log(cfg.log_file) if cfg.log_file is not None else None
    try:
        seeds = remove_duplicates([ROOT_REFERENCE, *cfg.other_urls])
        async with SiteMirror(cfg) as mirror:
            await mirror.crawl(seeds)
        return aggregate_results(mirror)
    finally:
        detach_run_log(handler)

