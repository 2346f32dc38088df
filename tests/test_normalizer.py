# File: tests/test_normalizer.py
import pytest

from site_mirror.crawler.models import MalformedReference
from site_mirror.crawler.normalizer import UrlNormalizer

PARENT = "https://example.com/dir1/dir2/page.html"


@pytest.mark.parametrize(
    "reference,expected",
    [
        ("/about", "/about/index.html"),
        ("/about/", "/about/index.html"),
        ("/", "/index.html"),
        ("about.html", "/about.html"),
        ("blog/post", "/blog/post/index.html"),
        ("https://example.com", "/index.html"),
        ("https://example.com/css/site.css", "/css/site.css"),
        ("//example.com/img/logo.png", "/img/logo.png"),
        ("/docs/page.html#section", "/docs/page.html"),
    ],
)
def test_resolves_in_site_references(normalizer, reference, expected):
    url = normalizer.resolve(reference)
    assert url is not None
    assert url.host == "example.com"
    assert url.path == expected


@pytest.mark.parametrize(
    "reference",
    [
        "/a?x=1",
        "page.html?utm_source=x",
        "http://otherhost/x.html",
        "//otherhost/x.html",
        "https://example.com.evil.net/x.html",
        "https://notexample.com/x.html",
        "mailto:admin@example.com",
        "javascript:void(0)",
        "tel:+100200300",
        "data:image/png;base64,AAAA",
        "#",
        "#top",
        "",
        "   ",
        "./relative.html",
        "../relative.html",
        "?page=2",
    ],
)
def test_rejects_out_of_scope_references(normalizer, reference):
    assert normalizer.resolve(reference) is None


def test_parent_relative_references(normalizer):
    assert normalizer.resolve("../b.css", PARENT).path == "/dir1/b.css"
    assert normalizer.resolve("./c.js", PARENT).path == "/dir1/dir2/c.js"
    assert normalizer.resolve("./", PARENT).path == "/dir1/dir2/index.html"


def test_nested_parent_segments_never_climb_above_root(normalizer):
    assert normalizer.resolve("../../x.css", PARENT).path == "/x.css"
    assert normalizer.resolve("../x.css", "https://example.com/page.html").path == "/x.css"


def test_parent_does_not_affect_root_relative(normalizer):
    assert normalizer.resolve("/top.html", PARENT).path == "/top.html"


def test_scheme_handling(normalizer):
    assert normalizer.resolve("/x.html").scheme == "https"
    assert normalizer.resolve("//example.com/x.html").scheme == "https"
    # an explicit scheme is kept as written
    assert normalizer.resolve("http://example.com/x.html").scheme == "http"
    assert normalizer.resolve("HTTPS://EXAMPLE.COM/Page.html").href == (
        "https://example.com/Page.html"
    )


def test_host_variants_with_default_port_and_userinfo(normalizer):
    assert normalizer.resolve("https://example.com:443/x.html") is not None
    assert normalizer.resolve("https://user@example.com/x.html") is not None
    assert normalizer.resolve("https://example.com:8443/x.html") is None


def test_default_port_in_host_is_dropped_from_urls():
    explicit = UrlNormalizer("example.com:443", "https")
    assert explicit.resolve("https://example.com/x.html").href == "https://example.com/x.html"
    assert explicit.resolve("/x.html").href == "https://example.com/x.html"


def test_host_with_port():
    local = UrlNormalizer("localhost:8080", "http")
    assert local.resolve("http://localhost:8080/a.html").href == "http://localhost:8080/a.html"
    assert local.resolve("http://localhost/a.html") is None
    assert local.resolve("/a.html").href == "http://localhost:8080/a.html"


@pytest.mark.parametrize(
    "reference",
    ["/about", "https://example.com/a/b/c.png", "//example.com/x/", "../b.css", "é.html"],
)
def test_normalization_is_idempotent(normalizer, reference):
    first = normalizer.resolve(reference, PARENT)
    again = normalizer.resolve(first.href, PARENT)
    assert again == first


def test_percent_encoding_is_canonical(normalizer):
    encoded = normalizer.resolve("/a%20b.html")
    raw = normalizer.resolve("/a b.html")
    assert encoded == raw
    assert encoded.path == "/a%20b.html"
    assert encoded.key == "https://example.com/a b.html"
    assert encoded.local_path == "/a b.html"


def test_malformed_reference_raises(normalizer):
    with pytest.raises(MalformedReference):
        normalizer.resolve("http://[::1/index.html")
