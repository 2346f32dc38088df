# File: site_mirror/utils.py
"""site_mirror.utils: Утилитарные функции для работы со списками стартовых ссылок."""

from __future__ import annotations

from pathlib import Path
from typing import Collection, List, Sequence, Union

from site_mirror.logger import logger

__all__: Sequence[str] = (
    "read_url_list",
    "remove_duplicates",
)


def read_url_list(path: Union[str, Path]) -> List[str]:
    """Читает список ссылок: по одной на строку, пустые строки и `#`-комментарии пропускаются."""
    p = Path(path).expanduser()
    if not p.exists():
        logger.error("URL list not found: %s", p)
        raise FileNotFoundError(f"URL list file not found: {p}")
    urls = [
        line.strip()
        for line in p.read_text(encoding="utf-8").splitlines()
        if line.strip() and not line.lstrip().startswith("#")
    ]
    logger.debug("Loaded %d entries from URL list %s", len(urls), p)
    return urls


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
