"""
Page loading with multiple backend support.

This module provides two backends behind the same async interface:
1. crawl4ai: Headless Chromium (Playwright) rendering for script-driven pages (default)
2. httpx: Plain HTTP client for pages that render server-side

Both are async context managers. The underlying browser or connection
pool is acquired on enter and released on exit, including when the
surrounding task is cancelled. Load failures are returned as a
FetchResult with ``error`` set, never raised.
"""

from __future__ import annotations

import asyncio
import base64
from dataclasses import dataclass
from typing import Protocol

import httpx

from ..config import FetchConfig
from ..core.errors import ConfigurationError


@dataclass
class FetchResult:
    """Result of a page load.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was loaded
        status_code: HTTP status code, or None if the load failed before a response
        text: The rendered HTML, or None on error
        error: Error message if the load failed, None on success
        screenshot: PNG bytes when a screenshot was requested and captured
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None
    screenshot: bytes | None = None


class PageFetcher(Protocol):
    """Interface shared by the page loading backends."""

    async def __aenter__(self) -> "PageFetcher": ...

    async def __aexit__(self, exc_type, exc, tb) -> None: ...

    async def fetch_html(self, url: str, screenshot: bool = False) -> FetchResult: ...


class BrowserFetcher:
    """Load pages through one headless browser shared by the whole run.

    Every ``fetch_html`` call opens its own page, so cookies, scripts or a
    crash on one page do not leak into another.
    """

    def __init__(self, cfg: FetchConfig):
        self.cfg = cfg
        self._crawler = None

    async def __aenter__(self) -> "BrowserFetcher":
        from crawl4ai import AsyncWebCrawler, BrowserConfig

        browser_cfg = BrowserConfig(
            headless=self.cfg.headless,
            user_agent=self.cfg.user_agent,
            extra_args=["--no-sandbox", "--disable-setuid-sandbox"],
            verbose=False,
        )
        crawler = AsyncWebCrawler(config=browser_cfg)
        await crawler.start()
        self._crawler = crawler
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        crawler, self._crawler = self._crawler, None
        if crawler is not None:
            await crawler.close()

    async def fetch_html(self, url: str, screenshot: bool = False) -> FetchResult:
        """Render a page and return its HTML.

        Waits for network activity to settle before reading the DOM.

        Args:
            url: The URL to load
            screenshot: Capture a PNG of the rendered page as well

        Returns:
            FetchResult with HTML on success or error message on failure
        """
        if self._crawler is None:
            raise RuntimeError("BrowserFetcher must be used as an async context manager")

        from crawl4ai import CacheMode, CrawlerRunConfig

        run_cfg = CrawlerRunConfig(
            page_timeout=self.cfg.navigation_timeout_ms,
            wait_until="networkidle",
            cache_mode=CacheMode.BYPASS,
            screenshot=screenshot,
            verbose=False,
        )
        last_error: str | None = None
        status_code: int | None = None

        for attempt in range(self.cfg.retries + 1):
            try:
                result = await self._crawler.arun(url=url, config=run_cfg)
            except asyncio.CancelledError:
                raise
            except Exception as exc:  # noqa: BLE001
                last_error = f"{type(exc).__name__}: {exc}"
            else:
                status_code = getattr(result, "status_code", None)
                html = getattr(result, "html", None)
                if getattr(result, "success", True) and html and html.strip():
                    return FetchResult(
                        url=url,
                        status_code=status_code,
                        text=html,
                        error=None,
                        screenshot=_decode_screenshot(getattr(result, "screenshot", None)),
                    )
                error_message = getattr(result, "error_message", None) or "empty page"
                last_error = f"Crawl4AIError: {error_message}"
            if attempt < self.cfg.retries:
                await asyncio.sleep(0.5 * (attempt + 1))

        return FetchResult(url=url, status_code=status_code, text=None, error=last_error)


class HttpxFetcher:
    """Load pages with a plain async HTTP client.

    Suitable when the listing and article pages are rendered server-side.
    Screenshots are never available from this backend.
    """

    def __init__(self, cfg: FetchConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.cfg = cfg
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "HttpxFetcher":
        self._client = httpx.AsyncClient(
            timeout=self.cfg.navigation_timeout_ms / 1000,
            headers={"User-Agent": self.cfg.user_agent},
            follow_redirects=True,
            trust_env=self.cfg.trust_env,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def fetch_html(self, url: str, screenshot: bool = False) -> FetchResult:
        if self._client is None:
            raise RuntimeError("HttpxFetcher must be used as an async context manager")

        last_error: str | None = None
        status_code: int | None = None

        for attempt in range(self.cfg.retries + 1):
            try:
                resp = await self._client.get(url)
            except httpx.HTTPError as exc:
                last_error = f"{type(exc).__name__}: {exc}"
            else:
                status_code = resp.status_code
                if resp.status_code < 400:
                    return FetchResult(url=url, status_code=status_code, text=resp.text, error=None)
                last_error = f"HTTPStatusError: {resp.status_code}"
                # Client errors will not change on retry
                if resp.status_code < 500 and resp.status_code != 429:
                    break
            if attempt < self.cfg.retries:
                await asyncio.sleep(0.5 * (attempt + 1))

        return FetchResult(url=url, status_code=status_code, text=None, error=last_error)


def build_fetcher(cfg: FetchConfig) -> BrowserFetcher | HttpxFetcher:
    """Build the page loading backend named in the configuration.

    Raises:
        ConfigurationError: If the backend name is not supported
    """
    if cfg.backend == "crawl4ai":
        return BrowserFetcher(cfg)
    if cfg.backend == "httpx":
        return HttpxFetcher(cfg)
    raise ConfigurationError(f"Unsupported fetch backend: {cfg.backend}")


def _decode_screenshot(data: str | bytes | None) -> bytes | None:
    if not data:
        return None
    if isinstance(data, bytes):
        return data
    try:
        return base64.b64decode(data)
    except ValueError:
        return None
