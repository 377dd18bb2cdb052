"""Tests for the page loading backends."""

from __future__ import annotations

import asyncio
import base64
from types import SimpleNamespace

import httpx
import pytest

from news_digest.config import FetchConfig
from news_digest.core.errors import ConfigurationError
from news_digest.fetch.fetcher import BrowserFetcher, HttpxFetcher, build_fetcher


URL = "https://news.example.com/story/1"


def _run_httpx(handler, **cfg_overrides):
    cfg = FetchConfig(backend="httpx", **cfg_overrides)

    async def _go():
        async with HttpxFetcher(cfg, transport=httpx.MockTransport(handler)) as fetcher:
            return await fetcher.fetch_html(URL)

    return asyncio.run(_go())


def test_httpx_fetch_sends_user_agent():
    seen = {}

    def handler(request):
        seen["ua"] = request.headers["User-Agent"]
        return httpx.Response(200, text="<html>ok</html>")

    result = _run_httpx(handler)

    assert result.text == "<html>ok</html>"
    assert result.error is None
    assert result.status_code == 200
    assert seen["ua"] == FetchConfig().user_agent


def test_httpx_client_error_is_not_retried():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(404, text="missing")

    result = _run_httpx(handler, retries=2)

    assert result.text is None
    assert result.status_code == 404
    assert result.error == "HTTPStatusError: 404"
    assert len(calls) == 1


def test_httpx_server_error_is_retried():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(503)
        return httpx.Response(200, text="<html>second try</html>")

    result = _run_httpx(handler, retries=1)

    assert result.text == "<html>second try</html>"
    assert len(calls) == 2


def test_httpx_network_error_becomes_result():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    result = _run_httpx(handler, retries=0)

    assert result.text is None
    assert result.status_code is None
    assert result.error.startswith("ConnectError")


def test_httpx_fetcher_requires_context():
    with pytest.raises(RuntimeError):
        asyncio.run(HttpxFetcher(FetchConfig()).fetch_html(URL))


class _FakeCrawler:
    instances: list["_FakeCrawler"] = []

    def __init__(self, config=None):
        self.browser_config = config
        self.started = False
        self.closed = False
        self.run_configs = []
        self.results = []
        _FakeCrawler.instances.append(self)

    async def start(self):
        self.started = True

    async def close(self):
        self.closed = True

    async def arun(self, url, config=None):
        self.run_configs.append(config)
        return self.results.pop(0)


@pytest.fixture
def fake_crawler(monkeypatch):
    import crawl4ai

    _FakeCrawler.instances = []
    monkeypatch.setattr(crawl4ai, "AsyncWebCrawler", _FakeCrawler)
    return _FakeCrawler


def test_browser_fetcher_returns_html_and_screenshot(fake_crawler):
    cfg = FetchConfig(retries=0)
    png = b"\x89PNG\r\n"

    async def _go():
        async with BrowserFetcher(cfg) as fetcher:
            crawler = fake_crawler.instances[0]
            crawler.results.append(
                SimpleNamespace(
                    success=True,
                    html="<html><p>rendered</p></html>",
                    status_code=200,
                    screenshot=base64.b64encode(png).decode(),
                    error_message=None,
                )
            )
            return await fetcher.fetch_html(URL, screenshot=True)

    result = asyncio.run(_go())
    crawler = fake_crawler.instances[0]

    assert result.text == "<html><p>rendered</p></html>"
    assert result.screenshot == png
    assert crawler.started and crawler.closed
    assert crawler.browser_config.user_agent == cfg.user_agent
    run_cfg = crawler.run_configs[0]
    assert run_cfg.page_timeout == 30000
    assert run_cfg.wait_until == "networkidle"
    assert run_cfg.screenshot is True


def test_browser_fetcher_failure_after_retries(fake_crawler):
    cfg = FetchConfig(retries=1)
    failure = SimpleNamespace(
        success=False, html="", status_code=None, screenshot=None,
        error_message="net::ERR_NAME_NOT_RESOLVED",
    )

    async def _go():
        async with BrowserFetcher(cfg) as fetcher:
            fake_crawler.instances[0].results.extend([failure, failure])
            return await fetcher.fetch_html(URL)

    result = asyncio.run(_go())

    assert result.text is None
    assert result.error == "Crawl4AIError: net::ERR_NAME_NOT_RESOLVED"
    assert len(fake_crawler.instances[0].run_configs) == 2
    assert fake_crawler.instances[0].closed


def test_browser_closed_when_body_raises(fake_crawler):
    async def _go():
        async with BrowserFetcher(FetchConfig()):
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(_go())

    assert fake_crawler.instances[0].closed


def test_build_fetcher_selects_backend():
    assert isinstance(build_fetcher(FetchConfig(backend="crawl4ai")), BrowserFetcher)
    assert isinstance(build_fetcher(FetchConfig(backend="httpx")), HttpxFetcher)
    with pytest.raises(ConfigurationError):
        build_fetcher(FetchConfig(backend="selenium"))
