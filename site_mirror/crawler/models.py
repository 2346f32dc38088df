# site_mirror/crawler/models.py
"""
Data models for the SiteMirror crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import unquote


class MalformedReference(ValueError):
    """A reference that cannot be parsed into a URL at all."""


@dataclass(frozen=True, slots=True)
class WorkItem:
    """A raw reference waiting in the queue, with the document it came from."""

    reference: str
    parent: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ResolvedUrl:
    """An absolute, in-site URL. The path is already canonical and quoted."""

    scheme: str
    host: str
    path: str

    @property
    def href(self) -> str:
        return f"{self.scheme}://{self.host}{self.path}"

    @property
    def key(self) -> str:
        """Percent-decoded form used for de-duplication."""
        return unquote(self.href)

    @property
    def local_path(self) -> str:
        return unquote(self.path)

    def __str__(self) -> str:
        return self.href


@dataclass(slots=True)
class Success:
    url: str
    body: bytes


@dataclass(slots=True)
class Redirect:
    url: str
    status: int
    location: Optional[str]


@dataclass(slots=True)
class ClientOrServerError:
    url: str
    status: int
    reason: str = ""


@dataclass(slots=True)
class TransportError:
    url: str
    cause: str


FetchOutcome = Union[Success, Redirect, ClientOrServerError, TransportError]


@dataclass(slots=True)
class MirrorEntry:
    """A file written under the mirror root."""

    url: str
    path: Path
    size: int
    binary: bool


@dataclass(slots=True)
class FailureRecord:
    """A dropped branch: ``kind`` is one of malformed, transport, status, redirect, persist, unexpected."""

    url: str
    kind: str
    detail: str
