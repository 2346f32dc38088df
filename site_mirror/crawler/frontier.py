# site_mirror/crawler/frontier.py
"""
At-most-once admission of URLs into the crawl.
"""
from __future__ import annotations

import threading
from typing import Iterator, Set, Union
from urllib.parse import unquote

from site_mirror.crawler.models import ResolvedUrl


class Frontier:
    """Set of every URL admitted during a run. Entries are never evicted."""

    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def admit(self, url: Union[str, ResolvedUrl]) -> bool:
        """Record *url* and return True only the first time it is presented."""
        key = url.key if isinstance(url, ResolvedUrl) else unquote(url)
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def __contains__(self, url: object) -> bool:
        if isinstance(url, ResolvedUrl):
            return url.key in self._seen
        return isinstance(url, str) and unquote(url) in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._seen))
