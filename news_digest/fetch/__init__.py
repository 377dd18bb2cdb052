"""
Page loading and content extraction.

This package handles rendering pages, parsing the listing, and
extracting article text.
"""

from .fetcher import BrowserFetcher, FetchResult, HttpxFetcher, PageFetcher, build_fetcher
from .extractor import extract_article_text, looks_blocked, parse_listing
from .source import NewsSource

__all__ = [
    "BrowserFetcher",
    "HttpxFetcher",
    "PageFetcher",
    "FetchResult",
    "build_fetcher",
    "extract_article_text",
    "looks_blocked",
    "parse_listing",
    "NewsSource",
]
