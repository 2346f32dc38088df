# site_mirror/crawler/fetcher.py
"""
Fetcher module: issues GET requests and maps every response, or the lack of
one, onto a :data:`FetchOutcome`. Redirects are never followed here.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from aiohttp import ClientError, ClientSession

from site_mirror.config import MirrorConfig
from site_mirror.crawler.models import (
    ClientOrServerError,
    FetchOutcome,
    Redirect,
    Success,
    TransportError,
)

RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)
_MAX_BACKOFF = 60.0

logger = logging.getLogger("SiteMirror")


class Fetcher:
    """Handles HTTP fetching with retries/backoff and timeout."""

    def __init__(
        self,
        session: ClientSession,
        config: MirrorConfig,
        retry_status: Sequence[int] = RETRY_STATUS,
    ) -> None:
        self.session = session
        self.config = config
        self._retry_status = retry_status

    async def fetch(self, url: str) -> FetchOutcome:
        """
        GET *url* once, retrying 429/5xx and connection errors.

        200 gives :class:`Success`, 3xx gives :class:`Redirect` with the raw
        ``Location`` header, any other status gives
        :class:`ClientOrServerError`; network failures give
        :class:`TransportError`.
        """
        attempts = 0
        while True:
            try:
                async with self.session.get(url, allow_redirects=False) as resp:
                    status = resp.status
                    if status == 200:
                        body = await resp.read()
                        return Success(url, body)
                    if 300 <= status < 400:
                        return Redirect(url, status, resp.headers.get("Location"))
                    if status not in self._retry_status or attempts >= self.config.retry_times:
                        return ClientOrServerError(url, status, resp.reason or "")
            except asyncio.TimeoutError:
                # no retry on timeout
                return TransportError(url, f"timed out after {self.config.timeout}s")
            except ClientError as exc:
                if attempts >= self.config.retry_times:
                    return TransportError(url, str(exc) or type(exc).__name__)

            attempts += 1
            backoff = min(self.config.retry_backoff * 2 ** (attempts - 1), _MAX_BACKOFF)
            logger.debug(
                "Retry %d/%d for %s after %.2f s", attempts, self.config.retry_times, url, backoff
            )
            await asyncio.sleep(backoff)
