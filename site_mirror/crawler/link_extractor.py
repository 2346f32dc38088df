# site_mirror/crawler/link_extractor.py
"""
Link extraction for SiteMirror.

References are returned raw, in document order, without de-duplication:
resolving and filtering them is the normalizer's job.
"""
from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from site_mirror.crawler.rewriter import CSS_URL_RE

LINK_ATTRS = ("href", "src", "data-src")


def extract_css_urls(text: str) -> List[str]:
    """Values of every ``url(...)`` in a stylesheet, quoted or not."""
    return [m["value"].strip() for m in CSS_URL_RE.finditer(text)]


def extract_html_links(text: str) -> List[str]:
    """
    ``href``, ``src`` and ``data-src`` of any tag, plus ``url(...)`` found in
    inline ``style`` attributes and ``<style>`` blocks.
    """
    soup = BeautifulSoup(text, "html.parser")
    links: List[str] = []
    for tag in soup.find_all(True):
        if not isinstance(tag, Tag):
            continue
        for attr in LINK_ATTRS:
            value = tag.get(attr)
            if isinstance(value, str) and value.strip():
                links.append(value.strip())
        style = tag.get("style")
        if isinstance(style, str):
            links.extend(extract_css_urls(style))
    for block in soup.find_all("style"):
        links.extend(extract_css_urls(block.get_text()))
    return links


def extract_links(text: str, kind: Optional[str]) -> List[str]:
    """Dispatch on the document kind returned by :func:`document_kind`."""
    if kind == "html":
        return extract_html_links(text)
    if kind == "css":
        return extract_css_urls(text)
    return []
