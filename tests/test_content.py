# File: tests/test_content.py
"""Classifier, rewriter, link extraction and frontier behaviour."""
import pytest

from site_mirror.config import MirrorConfig
from site_mirror.crawler.content import decode_text, document_kind, encode_text, is_binary
from site_mirror.crawler.frontier import Frontier
from site_mirror.crawler.link_extractor import extract_css_urls, extract_links
from site_mirror.crawler.rewriter import LinkRewriter


# --------------------------------------------------------------------------- #
#                              Classifier                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    "url,binary",
    [
        ("/img/pic.png", True),
        ("/files/report.pdf", True),
        ("/fonts/a.woff2", True),
        ("/page.html", False),
        ("/page.HTM", False),
        ("/dir/", False),
        ("/css/site.css", False),
        ("/app.js", False),
        ("/feed.xml", False),
        ("/index.php", False),
        ("/index.jsp", False),
        ("/default.asp", False),
    ],
)
def test_is_binary(url, binary):
    assert is_binary(url) is binary


def test_document_kind():
    assert document_kind("/a/index.html") == "html"
    assert document_kind("/a/index.php") == "html"
    assert document_kind("/a/") == "html"
    assert document_kind("/css/site.css") == "css"
    assert document_kind("/app.js") is None
    assert document_kind("/feed.xml") is None


def test_text_codec_is_lossless():
    raw = b"caf\xe9 \xff <a href='/x'>"
    assert encode_text(decode_text(raw)) == raw


# --------------------------------------------------------------------------- #
#                               Rewriter                                      #
# --------------------------------------------------------------------------- #


def test_strip_host_variants():
    rewriter = LinkRewriter("host")
    assert rewriter.strip_host("https://host/x") == "/x"
    assert rewriter.strip_host("http://host/x") == "/x"
    assert rewriter.strip_host("//host/x") == "/x"
    assert rewriter.strip_host("host/x") == "/x"
    assert rewriter.strip_host("https://host") == "/"
    assert rewriter.strip_host("https://hostile.net/x") == "https://hostile.net/x"
    assert rewriter.strip_host("/already/relative") == "/already/relative"


def test_rewrite_html_only_touches_link_spans(sample_html):
    rewritten = LinkRewriter("example.com").rewrite(sample_html, "html")
    assert '<link rel="stylesheet" href="/css/site.css">' in rewritten
    assert '<img src="/img/logo.png" data-src="./lazy.jpg">' in rewritten
    # prose and non-link attributes keep the host
    assert "<p>Mirrored from example.com</p>" in rewritten
    assert 'href="mailto:admin@example.com"' in rewritten


def test_rewrite_keeps_quote_style():
    html = "<a href='https://example.com/a.html'>a</a><img SRC=\"http://example.com/b.png\">"
    rewritten = LinkRewriter("example.com").rewrite(html, "html")
    assert rewritten == "<a href='/a.html'>a</a><img SRC=\"/b.png\">"


def test_rewrite_css():
    css = (
        "a { background: url('https://example.com/bg.png'); }\n"
        'b { background: url("//example.com/b.png"); }\n'
        "c { background: url(/c.png); }\n"
    )
    rewritten = LinkRewriter("example.com").rewrite(css, "css")
    assert "url('/bg.png')" in rewritten
    assert 'url("/b.png")' in rewritten
    assert "url(/c.png)" in rewritten


def test_rewrite_ignores_attributes_that_only_end_in_href():
    html = (
        '<div data-href="https://example.com/a.html"></div>'
        '<use xlink:href="https://example.com/sprite.svg#i"/>'
        '<a class="x" href="https://example.com/b.html">b</a>'
    )
    rewritten = LinkRewriter("example.com").rewrite(html, "html")
    assert 'data-href="https://example.com/a.html"' in rewritten
    assert 'xlink:href="https://example.com/sprite.svg#i"' in rewritten
    assert 'href="/b.html"' in rewritten


def test_rewrite_with_default_port_in_configured_host():
    cfg = MirrorConfig(host="example.com:443")
    rewritten = LinkRewriter(cfg.host).rewrite('<a href="https://example.com/x.html">', "html")
    assert rewritten == '<a href="/x.html">'


def test_rewrite_leaves_other_documents_alone():
    script = "fetch('https://example.com/api.json')"
    assert LinkRewriter("example.com").rewrite(script, None) == script
    feed = "<link>https://example.com/feed.xml</link>"
    assert LinkRewriter("example.com").rewrite(feed, document_kind("/feed.xml")) == feed


# --------------------------------------------------------------------------- #
#                            Link extraction                                  #
# --------------------------------------------------------------------------- #


def test_extract_html_links(sample_html):
    links = extract_links(sample_html, "html")
    assert links == [
        "https://example.com/css/site.css",
        "/about",
        "//example.com/img/logo.png",
        "./lazy.jpg",
        "../tile.gif",
        "mailto:admin@example.com",
        "/img/bg.png",
    ]


def test_extract_css_urls():
    css = "a{background:url( 'x.png' )} b{src:url(\"../f.woff\")} c{background:url(/y.gif)}"
    assert extract_css_urls(css) == ["x.png", "../f.woff", "/y.gif"]
    assert extract_links(css, "css") == ["x.png", "../f.woff", "/y.gif"]


def test_extract_ignores_documents_without_links():
    assert extract_links("var a = '<a href=\"/x\">';", None) == []


# --------------------------------------------------------------------------- #
#                               Frontier                                      #
# --------------------------------------------------------------------------- #


def test_frontier_admits_once(normalizer):
    frontier = Frontier()
    url = normalizer.resolve("/about")
    assert frontier.admit(url) is True
    assert frontier.admit(url) is False
    assert frontier.admit(normalizer.resolve("https://example.com/about/")) is False
    assert len(frontier) == 1
    assert url in frontier


def test_frontier_keys_are_percent_decoded():
    frontier = Frontier()
    assert frontier.admit("https://example.com/a%20b.html")
    assert not frontier.admit("https://example.com/a b.html")
    assert list(frontier) == ["https://example.com/a b.html"]
