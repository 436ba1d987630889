"""Тесты для извлечения данных страницы (`site_crawl.crawler.extractor`)."""
import pytest
from bs4.builder import ParserRejectedMarkup

import site_crawl.crawler.extractor as extractor_module
from site_crawl.crawler.extractor import (
    extract_page_data,
    get_first_paragraph,
    get_h1,
    get_images,
    get_urls,
)
from site_crawl.crawler.models import PageRecord


def test_h1_first_of_many():
    html = "<html><body><h1>Test Title 1</h1><h1>Test Title 2</h1></body></html>"
    assert get_h1(html) == "Test Title 1"


def test_h1_missing():
    assert get_h1("<html><body><p>This is a paragraph</p></body></html>") == ""


def test_h1_nested_markup_text():
    assert get_h1("<h1>  Hello <em>big</em> world \n</h1>") == "Hello big world"


def test_first_paragraph_prefers_main():
    html = """
    <html><body>
      <p>Outside paragraph.</p>
      <main>
        <p>Main paragraph.</p>
      </main>
    </body></html>
    """
    assert get_first_paragraph(html) == "Main paragraph."


def test_first_paragraph_falls_back_to_document():
    html = "<html><body><p>Outside paragraph 1.</p><p>Outside paragraph 2.</p></body></html>"
    assert get_first_paragraph(html) == "Outside paragraph 1."


def test_first_paragraph_when_main_has_none():
    html = "<html><body><main><div>no paragraph</div></main><p>Later.</p></body></html>"
    assert get_first_paragraph(html) == "Later."


def test_first_paragraph_missing():
    assert get_first_paragraph("<html><body><h1>Test Title</h1></body></html>") == ""


def test_urls_absolute_and_relative():
    html = (
        '<html><body>'
        '<a href="https://blog.boot.dev"><span>Boot.dev</span></a>'
        '<a href="/path/one">One</a>'
        '<a>Link without href</a>'
        '</body></html>'
    )
    assert get_urls(html, "https://blog.boot.dev") == [
        "https://blog.boot.dev/",
        "https://blog.boot.dev/path/one",
    ]


def test_urls_none_found():
    assert get_urls("<html><body><p>I am not a link</p></body></html>", "https://blog.boot.dev") == []


def test_urls_skip_unresolvable_targets():
    html = '<a href="http://[broken">x</a><a href="/ok">ok</a>'
    assert get_urls(html, "https://example.com/") == ["https://example.com/ok"]


def test_urls_respect_base_element():
    html = (
        '<html><head><base href="https://cdn.example.com/docs/"></head>'
        '<body><a href="page">p</a><img src="img/logo.png"></body></html>'
    )
    assert get_urls(html, "https://example.com/x") == ["https://cdn.example.com/docs/page"]
    assert get_images(html, "https://example.com/x") == ["https://cdn.example.com/docs/img/logo.png"]


def test_relative_base_element_resolves_against_page():
    html = '<head><base href="/sub/"></head><a href="leaf">l</a>'
    assert get_urls(html, "https://example.com/a/b") == ["https://example.com/sub/leaf"]


def test_images_in_document_order():
    html = (
        '<html><body>'
        '<img src="/logo.png" alt="Logo">'
        '<img alt="Image without src">'
        '<img src="https://cdn.boot.dev/banner.jpg">'
        '</body></html>'
    )
    assert get_images(html, "https://blog.boot.dev") == [
        "https://blog.boot.dev/logo.png",
        "https://cdn.boot.dev/banner.jpg",
    ]


def test_extract_page_data():
    html = """
    <html><body>
      <h1>Blog Post</h1>
      <p>Introduction text.</p>
      <a href="/valid-link">Valid Link</a>
      <a>Invalid Link without href</a>
      <img src="/valid-image.png" alt="Valid">
      <img alt="Invalid without src">
    </body></html>
    """
    assert extract_page_data(html, "https://blog.boot.dev") == PageRecord(
        url="https://blog.boot.dev",
        h1="Blog Post",
        first_paragraph="Introduction text.",
        outgoing_links=("https://blog.boot.dev/valid-link",),
        image_urls=("https://blog.boot.dev/valid-image.png",),
    )


def test_extract_empty_document():
    record = extract_page_data("<html><body></body></html>", "https://example.com")
    assert record == PageRecord(url="https://example.com")
    assert record.h1 == ""
    assert record.first_paragraph == ""
    assert record.outgoing_links == ()
    assert record.image_urls == ()


def test_extract_broken_markup_does_not_raise():
    record = extract_page_data("<html><body><h1>Unclosed <p>text <a href='/x'", "https://example.com/")
    assert isinstance(record, PageRecord)
    assert record.url == "https://example.com/"


def test_extract_degrades_when_parser_rejects_markup(monkeypatch):
    def reject(*args, **kwargs):
        raise ParserRejectedMarkup("boom")

    monkeypatch.setattr(extractor_module, "BeautifulSoup", reject)
    assert extract_page_data("<h1>x</h1>", "https://example.com/") == PageRecord(url="https://example.com/")
    assert get_h1("<h1>x</h1>") == ""
    assert get_urls("<a href='/a'>a</a>", "https://example.com/") == []


def test_page_record_is_immutable():
    record = PageRecord(url="https://example.com/")
    with pytest.raises(AttributeError):
        record.h1 = "changed"  # type: ignore[misc]
