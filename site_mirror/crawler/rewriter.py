# site_mirror/crawler/rewriter.py
"""
Host stripping for mirrored documents.

Only the spans that link extraction looks at are touched: ``href``, ``src``
and ``data-src`` attribute values, and ``url(...)`` values in CSS (including
inline styles and ``<style>`` blocks of HTML). Prose that happens to mention
the host is left alone.
"""
from __future__ import annotations

import re
from typing import Optional

__all__ = ("ATTR_RE", "CSS_URL_RE", "LinkRewriter")

ATTR_RE = re.compile(
    r"""(?P<prefix>(?<![\w:-])(?:data-src|href|src)\s*=\s*)(?P<quote>["'])(?P<value>.*?)(?P=quote)""",
    re.IGNORECASE | re.DOTALL,
)
CSS_URL_RE = re.compile(
    r"""(?P<prefix>url\(\s*)(?P<quote>["']?)(?P<value>[^"')]+?)\s*(?P=quote)\s*\)""",
    re.IGNORECASE,
)


class LinkRewriter:
    """Turn ``protocol://host/x``, ``//host/x`` and ``host/x`` into ``/x``."""

    def __init__(self, host: str) -> None:
        self.host = host
        self._prefix_re = re.compile(
            rf"^(?:https?:)?(?://)?{re.escape(host)}(?=[/?#]|$)", re.IGNORECASE
        )

    def strip_host(self, value: str) -> str:
        """Return *value* without a leading scheme+host, or unchanged."""
        stripped, count = self._prefix_re.subn("", value.strip(), count=1)
        if not count:
            return value
        if not stripped.startswith("/"):
            stripped = "/" + stripped
        return stripped

    def rewrite(self, text: str, kind: Optional[str]) -> str:
        """
        Rewrite link spans of an ``"html"`` or ``"css"`` document.

        Any other kind (``.js``, ``.xml``, ...) is returned as-is, absolute
        links to the site included.
        """
        if kind == "html":
            text = ATTR_RE.sub(self._replace_attr, text)
            return CSS_URL_RE.sub(self._replace_css_url, text)
        if kind == "css":
            return CSS_URL_RE.sub(self._replace_css_url, text)
        return text

    def _replace_attr(self, match: re.Match[str]) -> str:
        quote = match["quote"]
        return f"{match['prefix']}{quote}{self.strip_host(match['value'])}{quote}"

    def _replace_css_url(self, match: re.Match[str]) -> str:
        quote = match["quote"]
        return f"{match['prefix']}{quote}{self.strip_host(match['value'])}{quote})"
