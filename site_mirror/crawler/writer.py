# site_mirror/crawler/writer.py
"""
Persisting fetched payloads under the mirror root.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger("SiteMirror")


class MirrorWriter:
    """Map URL paths onto files below ``root`` and write them, overwriting."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root).expanduser().resolve()

    def local_path(self, url_path: str) -> Path:
        """Decoded URL path → file path. Raises ValueError when it escapes the root."""
        target = (self.root / url_path.lstrip("/")).resolve()
        if target != self.root and self.root not in target.parents:
            raise ValueError(f"{url_path} resolves outside of {self.root}")
        return target

    def persist(self, url_path: str, data: bytes) -> Optional[Path]:
        """Write *data* for *url_path*. Returns the file path, or None on failure."""
        try:
            target = self.local_path(url_path)
        except ValueError as exc:
            logger.warning("Refusing to write %s: %s", url_path, exc)
            return None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.warning("Cannot create directory %s: %s", target.parent, exc)
            return None
        try:
            target.write_bytes(data)
        except OSError as exc:
            logger.warning("Cannot write %s: %s", target, exc)
            return None
        return target
