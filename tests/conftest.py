# File: tests/conftest.py
from pathlib import Path

import pytest

from site_mirror.config import MirrorConfig
from site_mirror.crawler.normalizer import UrlNormalizer


@pytest.fixture()
def mirror_dir(tmp_path) -> Path:
    """
    Mirror root inside the per-test temporary directory.
    """
    return tmp_path / "public"


@pytest.fixture()
def basic_config(mirror_dir) -> MirrorConfig:
    """
    Return a basic valid MirrorConfig for offline tests.
    """
    return MirrorConfig(
        host="example.com",
        protocol="https",
        output_dir=mirror_dir,
        log_file=None,
        retry_times=0,
    )


@pytest.fixture()
def normalizer(basic_config) -> UrlNormalizer:
    return UrlNormalizer(basic_config.host, basic_config.protocol)


@pytest.fixture()
def sample_html() -> str:
    """
    Provide a small page with every kind of reference the extractor follows.
    """
    return (
        "<html><head>"
        '<link rel="stylesheet" href="https://example.com/css/site.css">'
        "<style>body { background: url('/img/bg.png'); }</style>"
        "</head><body>"
        "<p>Mirrored from example.com</p>"
        "<a href='/about'>About</a>"
        '<img src="//example.com/img/logo.png" data-src="./lazy.jpg">'
        '<div style="background-image: url(../tile.gif)"></div>'
        '<a href="mailto:admin@example.com">Mail</a>'
        "</body></html>"
    )
