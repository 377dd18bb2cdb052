"""Shared fixtures: an in-memory page backend and HTML builders."""

from __future__ import annotations

import asyncio
import logging

import pytest

from news_digest.config import AppConfig
from news_digest.fetch.fetcher import FetchResult
from news_digest.utils.logging import LOGGER_NAME


LISTING_URL = "https://news.example.com/breaknews/1"


class FakeFetcher:
    """Page backend serving canned HTML keyed by URL.

    URLs missing from ``pages`` fail like a refused connection. ``delays``
    holds per-URL sleep times so tests can exercise timeouts and the
    worker pool bound.
    """

    def __init__(self, pages, delays=None, screenshot=None, raise_on=None):
        self.pages = dict(pages)
        self.delays = dict(delays or {})
        self.screenshot = screenshot
        self.raise_on = raise_on or {}
        self.requested: list[str] = []
        self.entered = False
        self.closed = False
        self.active = 0
        self.max_active = 0

    async def __aenter__(self):
        self.entered = True
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.closed = True

    async def fetch_html(self, url, screenshot=False):
        self.requested.append(url)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            await asyncio.sleep(self.delays.get(url, 0))
            if url in self.raise_on:
                raise self.raise_on[url]
            page = self.pages.get(url)
            if page is None:
                return FetchResult(
                    url=url, status_code=None, text=None, error="ConnectError: connection refused"
                )
            return FetchResult(
                url=url,
                status_code=200,
                text=page,
                error=None,
                screenshot=self.screenshot if screenshot else None,
            )
        finally:
            self.active -= 1


def listing_html(entries) -> str:
    """Build a listing page from (title, href, time) tuples; time may be None."""
    items = []
    for title, href, time in entries:
        time_html = f'<time class="article-list__time">{time}</time>' if time else ""
        items.append(
            '<div class="article-list__item">'
            f'<div class="article-list__text"><h2><a href="{href}">{title}</a></h2></div>'
            f"{time_html}</div>"
        )
    return f"<html><body><section>{''.join(items)}</section></body></html>"


def article_html(*paragraphs: str, container: str = 'id="article-body"') -> str:
    body = "".join(f"<p>{p}</p>" for p in paragraphs)
    return f"<html><body><nav><p>Home</p></nav><div {container}>{body}</div></body></html>"


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    cfg = AppConfig()
    cfg.source.listing_url = LISTING_URL
    cfg.source.source_name = "Example News"
    cfg.output.output_dir = str(tmp_path / "public")
    cfg.pipeline.run_timeout_seconds = 10.0
    return cfg


@pytest.fixture(autouse=True)
def _reset_package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate
