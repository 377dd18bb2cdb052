"""
Listing and article retrieval for one news portal.

NewsSource ties a page loading backend to the extractor and maps
outcomes onto the pipeline's error model:
- load failure -> TransientFetchError
- too little usable text -> None (an expected miss, not an error)
"""

from __future__ import annotations

from ..config import ExtractConfig, SourceConfig
from ..core.errors import TransientFetchError
from ..core.types import ListingEntry
from ..utils.diagnostics import Diagnostics
from .extractor import extract_article_text, looks_blocked, parse_listing
from .fetcher import PageFetcher


class NewsSource:
    """Fetch the listing and individual articles of a configured portal."""

    def __init__(
        self,
        fetcher: PageFetcher,
        source_cfg: SourceConfig,
        extract_cfg: ExtractConfig,
        diagnostics: Diagnostics,
        debug_artifacts: bool = True,
    ):
        self.fetcher = fetcher
        self.source_cfg = source_cfg
        self.extract_cfg = extract_cfg
        self.diagnostics = diagnostics
        self.debug_artifacts = debug_artifacts

    async def fetch_listing(self) -> list[ListingEntry]:
        """Load the listing page and parse its entries.

        An empty listing is returned as an empty list. When debug
        artifacts are enabled the page HTML (and screenshot, if the
        backend took one) is saved for later inspection.

        Raises:
            TransientFetchError: If the listing page could not be loaded
        """
        url = self.source_cfg.listing_url
        result = await self.fetcher.fetch_html(url, screenshot=self.debug_artifacts)
        if result.text is None:
            raise TransientFetchError(url, result.error, result.status_code)

        entries = parse_listing(
            result.text,
            base_url=url,
            item_selector=self.source_cfg.listing_item_selector,
            link_selector=self.source_cfg.listing_link_selector,
            time_selector=self.source_cfg.listing_time_selector,
        )
        if entries:
            self.diagnostics.event(
                "Listing fetched", event="listing_fetched", url=url, count=len(entries)
            )
            return entries

        self.diagnostics.warning(
            "No listing entries found; page may be blocked or its structure changed",
            event="listing_empty",
            url=url,
            status_code=result.status_code,
        )
        if self.debug_artifacts:
            self.diagnostics.write_artifact("listing-debug.html", result.text)
            if result.screenshot:
                self.diagnostics.write_artifact("listing-debug.png", result.screenshot)
        return []

    async def fetch_article(self, url: str) -> str | None:
        """Load an article page and extract its body text.

        Args:
            url: Absolute article URL

        Returns:
            The extracted text, or None when it is shorter than the
            configured minimum or the page is a bot-challenge interstitial

        Raises:
            TransientFetchError: If the article page could not be loaded
        """
        result = await self.fetcher.fetch_html(url)
        if result.text is None:
            raise TransientFetchError(url, result.error, result.status_code)

        text = extract_article_text(
            result.text,
            self.extract_cfg.content_selectors,
            self.extract_cfg.min_paragraph_length,
        )
        if len(text) < self.extract_cfg.min_content_length or looks_blocked(text):
            return None
        return text
