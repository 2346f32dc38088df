"""site_mirror.crawler: обход сайта, загрузка и сохранение зеркала."""

from .crawler import SiteMirror
from .frontier import Frontier
from .normalizer import UrlNormalizer

__all__ = ["Frontier", "SiteMirror", "UrlNormalizer"]
