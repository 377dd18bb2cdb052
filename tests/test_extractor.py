"""Tests for listing parsing and article text extraction."""

from news_digest.config import DEFAULT_CONTENT_SELECTORS
from news_digest.core.types import today_iso
from news_digest.fetch.extractor import extract_article_text, looks_blocked, parse_listing

from conftest import listing_html


BASE_URL = "https://udn.com/news/breaknews/1"


def _parse(html):
    return parse_listing(
        html,
        base_url=BASE_URL,
        item_selector=".article-list__item",
        link_selector=".article-list__text h2 a",
        time_selector=".article-list__time",
    )


def test_parse_listing_drops_incomplete_entries():
    html = listing_html(
        [
            ("Valid story", "/news/story/1/123", "2024-01-03 10:00"),
            ("", "/news/story/1/456", None),
            ("No link", "", None),
        ]
    )

    entries = _parse(html)

    assert len(entries) == 1
    assert entries[0].title == "Valid story"
    assert entries[0].url == "https://udn.com/news/story/1/123"
    assert entries[0].published_date == "2024-01-03 10:00"


def test_parse_listing_defaults_missing_time_to_today():
    html = listing_html([("Story", "https://other.example.com/a", None)])

    entries = _parse(html)

    assert entries[0].url == "https://other.example.com/a"
    assert entries[0].published_date == today_iso()


def test_parse_listing_without_items_is_empty():
    assert _parse("<html><body><p>Access denied</p></body></html>") == []


def test_first_configured_selector_wins_over_document_order():
    html = (
        "<html><body>"
        '<div class="story-content"><p>Story content paragraph.</p></div>'
        '<div id="article-body"><p>Article body paragraph.</p><p></p><p>Second.</p></div>'
        "</body></html>"
    )

    text = extract_article_text(html, DEFAULT_CONTENT_SELECTORS)

    assert text == "Article body paragraph.\nSecond."


def test_empty_region_falls_through_to_next_selector():
    html = (
        '<html><body><div id="article-body"><p> </p></div>'
        '<div class="article-content"><p>Real content lives here.</p></div></body></html>'
    )

    assert extract_article_text(html, DEFAULT_CONTENT_SELECTORS) == "Real content lives here."


def test_region_without_paragraphs_uses_element_text():
    html = "<html><body><article>Plain   body text\n here</article></body></html>"

    assert extract_article_text(html, DEFAULT_CONTENT_SELECTORS) == "Plain body text here"


def test_page_wide_fallback_skips_short_paragraphs():
    html = (
        "<html><body><div class='main'>"
        "<p>Menu</p>"
        "<p>Exactly twenty chars</p>"
        "<p>This paragraph is long enough to keep around.</p>"
        "<p>So is this second descriptive paragraph.</p>"
        "</div></body></html>"
    )

    text = extract_article_text(html, DEFAULT_CONTENT_SELECTORS)

    assert text == (
        "This paragraph is long enough to keep around.\n"
        "So is this second descriptive paragraph."
    )


def test_scripts_and_inline_markup_are_handled():
    html = (
        '<html><body><div id="article-body">'
        "<script>var tracking = 1;</script>"
        "<p>Hello <b>world</b>, this is <a href='#'>news</a>.</p>"
        "</div></body></html>"
    )

    assert extract_article_text(html, DEFAULT_CONTENT_SELECTORS) == "Hello world, this is news."


def test_no_content_returns_empty_string():
    assert extract_article_text("<html><body></body></html>", DEFAULT_CONTENT_SELECTORS) == ""


def test_looks_blocked_detects_interstitials():
    assert looks_blocked("Please enable JavaScript to view this page")
    assert looks_blocked("Verifying you are human. This may take a few seconds.")
    assert not looks_blocked("市長今日宣布新的交通政策，預計明年上路。")
