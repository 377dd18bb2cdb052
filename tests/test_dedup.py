"""Tests for listing deduplication."""

from news_digest.core.dedup import dedup_entries
from news_digest.core.types import ListingEntry


def _entry(title, url):
    return ListingEntry(title=title, url=url, published_date="2024-01-01")


def test_exact_url_duplicates_removed():
    entries = [_entry("First", "https://a/1"), _entry("Different", "https://a/1")]

    assert dedup_entries(entries) == [entries[0]]


def test_titles_are_not_compared_without_threshold():
    entries = [
        _entry("台股收盤上漲120點 電子股領漲", "https://a/1"),
        _entry("台股收盤下跌120點 電子股領跌", "https://a/2"),
        _entry("Story number 1", "https://a/3"),
        _entry("Story number 2", "https://a/4"),
    ]

    assert dedup_entries(entries) == entries


def test_near_identical_titles_removed_when_threshold_set():
    entries = [
        _entry("颱風明日登陸 全台嚴防豪雨", "https://a/1"),
        _entry("颱風明日登陸 全台嚴防豪雨！", "https://a/2"),
        _entry("股市今日收盤創新高", "https://a/3"),
    ]

    kept = dedup_entries(entries, title_threshold=92)

    assert [e.url for e in kept] == ["https://a/1", "https://a/3"]


def test_order_preserved_for_distinct_entries():
    entries = [_entry("Alpha story", "https://a/1"), _entry("Completely other", "https://a/2")]

    assert dedup_entries(entries, title_threshold=92) == entries
