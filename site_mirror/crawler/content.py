# site_mirror/crawler/content.py
"""
Content classification: which payloads are rewritten and parsed, which are
stored byte for byte.
"""
from __future__ import annotations

import posixpath
from typing import Optional

__all__ = ("TEXT_SUFFIXES", "decode_text", "document_kind", "encode_text", "is_binary")

TEXT_SUFFIXES = (".html", ".htm", ".css", ".js", ".xml", ".php", ".jsp", ".asp")

_HTML_SUFFIXES = (".html", ".htm", ".php", ".jsp", ".asp")

# surrogateescape keeps undecodable bytes intact through a decode/encode pair
_CODEC = "utf-8"
_ERRORS = "surrogateescape"


def is_binary(url: str) -> bool:
    """True unless *url* ends in ``/`` or one of :data:`TEXT_SUFFIXES`."""
    lowered = url.lower()
    return not (lowered.endswith("/") or lowered.endswith(TEXT_SUFFIXES))


def document_kind(url: str) -> Optional[str]:
    """``"html"``, ``"css"`` or None for documents that carry no links we follow."""
    suffix = posixpath.splitext(url.lower())[1]
    if url.endswith("/") or suffix in _HTML_SUFFIXES:
        return "html"
    if suffix == ".css":
        return "css"
    return None


def decode_text(data: bytes) -> str:
    return data.decode(_CODEC, errors=_ERRORS)


def encode_text(text: str) -> bytes:
    return text.encode(_CODEC, errors=_ERRORS)
