# === FILE: site_mirror/crawler/crawler.py ===
from __future__ import annotations

import asyncio
import logging
import time
from typing import Iterable, List, Optional

from aiohttp import ClientSession, ClientTimeout

from site_mirror.config import MirrorConfig
from site_mirror.crawler.content import decode_text, document_kind, encode_text, is_binary
from site_mirror.crawler.fetcher import Fetcher
from site_mirror.crawler.frontier import Frontier
from site_mirror.crawler.link_extractor import extract_links
from site_mirror.crawler.models import (
    ClientOrServerError,
    FailureRecord,
    FetchOutcome,
    MalformedReference,
    MirrorEntry,
    Redirect,
    ResolvedUrl,
    Success,
    TransportError,
    WorkItem,
)
from site_mirror.crawler.normalizer import UrlNormalizer
from site_mirror.crawler.rewriter import LinkRewriter
from site_mirror.crawler.writer import MirrorWriter

__all__ = ("SiteMirror",)

ROOT_REFERENCE = "/"


class SiteMirror:
    """
    Асинхронный зеркальщик сайта: очередь ссылок, ограниченный пул воркеров
    и барьер завершения ``queue.join()``.

    Каждая ссылка путешествует по очереди вместе с URL документа, в котором
    она найдена, поэтому относительные пути разрешаются независимо от
    параллельно работающих веток.
    """

    def __init__(self, config: MirrorConfig) -> None:
        self.config = config
        self.normalizer = UrlNormalizer(config.host, config.protocol)
        self.frontier = Frontier()
        self.rewriter = LinkRewriter(config.host)
        self.writer = MirrorWriter(config.output_dir)
        self.session: Optional[ClientSession] = None
        self.fetcher: Optional[Fetcher] = None
        self.logger = logging.getLogger("SiteMirror")
        self.persisted: List[MirrorEntry] = []
        self.failures: List[FailureRecord] = []
        self.rejected: int = 0
        self.duration: float = 0.0
        self._last_fetch_ts = time.monotonic()
        self._in_flight = 0
        self.peak_in_flight = 0

    async def __aenter__(self) -> SiteMirror:
        timeout = ClientTimeout(total=self.config.timeout)
        self.session = ClientSession(
            timeout=timeout,
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        self.fetcher = Fetcher(self.session, self.config)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def crawl(self, seeds: Optional[Iterable[str]] = None) -> List[MirrorEntry]:
        """Mirror everything reachable from ``/`` and the seed list; return written files."""
        if seeds is None:
            seeds = [ROOT_REFERENCE, *self.config.other_urls]
        self.logger.info("Старт зеркалирования: %s -> %s", self.config.site_root, self.writer.root)
        start = time.monotonic()
        self._last_fetch_ts = start
        queue: asyncio.Queue[WorkItem] = asyncio.Queue()
        for seed in seeds:
            queue.put_nowait(WorkItem(seed))
        workers = [
            asyncio.create_task(self._worker(queue)) for _ in range(self.config.concurrency)
        ]
        await queue.join()
        for w in workers:
            w.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        self.duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d URL, %d файлов, %d ошибок за %.2f с",
            len(self.frontier),
            len(self.persisted),
            len(self.failures),
            self.duration,
        )
        return self.persisted

    async def _worker(self, queue: asyncio.Queue[WorkItem]) -> None:
        while True:
            try:
                item = await queue.get()
            except asyncio.CancelledError:
                break
            try:
                for child in await self._process(item):
                    queue.put_nowait(child)
            except asyncio.CancelledError:
                queue.task_done()
                break
            except Exception:
                self.logger.exception("Unexpected error while processing %s", item.reference)
                self._fail(item.reference, "unexpected", "see log for traceback")
            queue.task_done()

    async def _process(self, item: WorkItem) -> List[WorkItem]:
        """Handle one reference; return the references it produced."""
        try:
            url = self.normalizer.resolve(item.reference, item.parent)
        except MalformedReference as exc:
            self.logger.warning("Malformed reference %r: %s", item.reference, exc)
            self._fail(item.reference, "malformed", str(exc))
            return []
        if url is None:
            self.rejected += 1
            self.logger.debug("Rejected reference %r (parent %s)", item.reference, item.parent)
            return []
        if not self.frontier.admit(url):
            return []

        outcome = await self._fetch(url)

        if isinstance(outcome, Redirect):
            if not outcome.location:
                self.logger.warning("%s -> HTTP %s without Location", url, outcome.status)
                self._fail(url.href, "redirect", f"HTTP {outcome.status} without Location")
                return []
            self.logger.info("Redirect %s -> %s", url, outcome.location)
            return [WorkItem(outcome.location, parent=url.href)]
        if isinstance(outcome, ClientOrServerError):
            self.logger.warning("url: %s\nstatus: %s %s", url, outcome.status, outcome.reason)
            self._fail(url.href, "status", f"{outcome.status} {outcome.reason}".strip())
            return []
        if isinstance(outcome, TransportError):
            self.logger.warning("url: %s\nerror: %s", url, outcome.cause)
            self._fail(url.href, "transport", outcome.cause)
            return []
        return await self._store(url, outcome)

    async def _fetch(self, url: ResolvedUrl) -> FetchOutcome:
        if self.fetcher is None:
            raise RuntimeError("Session not initialized")
        self._in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self._in_flight)
        try:
            outcome = await self.fetcher.fetch(url.href)
        finally:
            self._in_flight -= 1
        now = time.monotonic()
        self.logger.info("url: %s\ntake time: %.3fs", url.key, now - self._last_fetch_ts)
        self._last_fetch_ts = now
        return outcome

    async def _store(self, url: ResolvedUrl, page: Success) -> List[WorkItem]:
        binary = is_binary(url.path)
        kind = None if binary else document_kind(url.path)
        if binary:
            data = page.body
        else:
            text = self.rewriter.rewrite(decode_text(page.body), kind)
            data = encode_text(text)

        target = await asyncio.to_thread(self.writer.persist, url.local_path, data)
        if target is None:
            self._fail(url.href, "persist", f"cannot write {url.local_path}")
            return []
        self.persisted.append(MirrorEntry(url.href, target, len(data), binary))

        if binary or kind is None:
            return []
        return [WorkItem(ref, parent=url.href) for ref in extract_links(text, kind)]

    def _fail(self, url: str, kind: str, detail: str) -> None:
        self.failures.append(FailureRecord(url, kind, detail))

    @property
    def visited(self) -> List[str]:
        return list(self.frontier)
