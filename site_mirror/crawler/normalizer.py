# site_mirror/crawler/normalizer.py
"""
Reference resolution for SiteMirror.

A reference is whatever string was found in a seed list or inside a fetched
document. :class:`UrlNormalizer` turns it into an absolute in-site
:class:`ResolvedUrl`, or returns ``None`` when the reference is out of scope.

Accepted shapes::

    http://host/example.html      https://host/example.html
    //host/example.html           /example.html
    ./example.html                ../example.html
    example.html

Rejected shapes::

    http://otherhost/example.html //otherhost/example.html
    /search?q=1                   #top
    mailto:someone@host           javascript:void(0)
"""
from __future__ import annotations

import logging
import posixpath
import re
from typing import Optional
from urllib.parse import SplitResult, quote, unquote, urlsplit, urlunsplit

from site_mirror.crawler.models import MalformedReference, ResolvedUrl

__all__ = ("DEFAULT_DOCUMENT", "UrlNormalizer")

DEFAULT_DOCUMENT = "index.html"

_EXTENSION_RE = re.compile(r"\.\w+$")
_ABSOLUTE_RE = re.compile(r"^https?:", re.IGNORECASE)
_WORD_RE = re.compile(r"^\w")
_NON_NAVIGABLE = ("mailto:", "javascript:", "tel:", "data:", "sms:", "about:", "blob:")
_DEFAULT_PORTS = {"http": "80", "https": "443"}
# RFC 3986 pchar minus "%", which unquote() has already consumed
_PATH_SAFE = "/:@!$&'()*+,;="

logger = logging.getLogger("SiteMirror")


class UrlNormalizer:
    """Resolve raw references against a fixed site identity."""

    def __init__(self, host: str, protocol: str) -> None:
        self.host = host.lower()
        self.protocol = protocol.lower()
        self._site_netloc = self._strip_default_port(self.host, self.protocol)

    def resolve(self, reference: str, parent: Optional[str] = None) -> Optional[ResolvedUrl]:
        """
        Resolve *reference* found inside the document *parent*.

        Returns ``None`` for references that are simply out of scope and
        raises :class:`MalformedReference` when the reference cannot be parsed.
        """
        ref = reference.strip().split("#", 1)[0]
        if not ref or "?" in ref:
            return None
        if ref.lower().startswith(_NON_NAVIGABLE):
            return None

        ref = self._with_default_document(ref)

        if _ABSOLUTE_RE.match(ref):
            parts = self._split(ref)
            if not self._same_site(parts.netloc, parts.scheme):
                return None
            return self._build(parts.scheme, parts.path)

        if ref.startswith("//"):
            parts = self._split(f"{self.protocol}:{ref}")
            if not self._same_site(parts.netloc, self.protocol):
                return None
            return self._build(self.protocol, parts.path)

        if ref.startswith("/"):
            return self._build(self.protocol, ref)

        if ref.startswith(("./", "../")):
            if parent is None:
                logger.debug("No parent context for %s, skipped", reference)
                return None
            return self._build(self.protocol, self._join_relative(ref, parent))

        if _WORD_RE.match(ref):
            return self._build(self.protocol, f"/{ref}")

        return None

    # ------------------------------------------------------------------ #

    @staticmethod
    def _split(ref: str) -> SplitResult:
        try:
            return urlsplit(ref)
        except ValueError as exc:
            raise MalformedReference(f"{ref}: {exc}") from exc

    def _with_default_document(self, ref: str) -> str:
        parts = self._split(ref)
        last = parts.path.rsplit("/", 1)[-1]
        if _EXTENSION_RE.search(last):
            return ref
        suffix = DEFAULT_DOCUMENT if parts.path.endswith("/") else f"/{DEFAULT_DOCUMENT}"
        return urlunsplit(parts._replace(path=parts.path + suffix))

    @staticmethod
    def _strip_default_port(netloc: str, scheme: str) -> str:
        host, sep, port = netloc.rpartition(":")
        if sep and "]" not in port and port == _DEFAULT_PORTS.get(scheme):
            return host
        return netloc

    def _same_site(self, netloc: str, scheme: str) -> bool:
        # userinfo is never part of the site identity
        netloc = netloc.rpartition("@")[2].lower()
        return self._strip_default_port(netloc, scheme.lower()) == self._site_netloc

    @staticmethod
    def _join_relative(ref: str, parent: str) -> str:
        segments = urlsplit(parent).path.split("/")[1:]
        if ref.startswith("./"):
            drop, rest = 1, ref[2:]
        else:
            drop, rest = 2, ref[3:]
        base = "/".join(segments[: max(len(segments) - drop, 0)])
        return f"/{base}/{rest}" if base else f"/{rest}"

    def _build(self, scheme: str, path: str) -> ResolvedUrl:
        decoded = unquote(path or "/")
        collapsed = posixpath.normpath(decoded)
        if collapsed.startswith("//"):
            collapsed = "/" + collapsed.lstrip("/")
        if not collapsed.startswith("/"):
            collapsed = "/" + collapsed
        if decoded.endswith("/") and not collapsed.endswith("/"):
            collapsed += "/"
        return ResolvedUrl(
            scheme=scheme.lower(),
            host=self._site_netloc,
            path=quote(collapsed, safe=_PATH_SAFE),
        )
