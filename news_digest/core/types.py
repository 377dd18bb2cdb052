"""
Core data types for the news digest pipeline.

This module defines the data structures passed between pipeline stages:
- ListingEntry: A title/link pair parsed from the listing page
- NewsItem: The summarized, categorized output unit
- FetchStats: Per-run counters for the article stage
- RunResult: What a pipeline run hands back to its caller
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


def today_iso() -> str:
    """Return the current UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


@dataclass(frozen=True)
class ListingEntry:
    """A candidate article found on the listing page.

    Attributes:
        title: The headline text, never empty
        url: Absolute URL of the article
        published_date: Timestamp text from the listing, or today's date if absent
    """
    title: str
    url: str
    published_date: str = field(default_factory=today_iso)


@dataclass(frozen=True)
class NewsItem:
    """A processed article.

    Attributes:
        title: The headline text
        source_name: Display name of the news portal
        url: Absolute URL of the article
        summary: Extractive summary, or the fallback placeholder
        published_date: Timestamp text carried over from the listing
        category: One of the category labels
        raw_content_sample: Truncated extracted text, kept for diagnostics
    """
    title: str
    source_name: str
    url: str
    summary: str
    published_date: str
    category: str
    raw_content_sample: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the snapshot field names."""
        payload: dict[str, Any] = {
            "title": self.title,
            "source": self.source_name,
            "url": self.url,
            "summary": self.summary,
            "publishedAt": self.published_date,
            "category": self.category,
        }
        if self.raw_content_sample is not None:
            payload["fullContent"] = self.raw_content_sample
        return payload


@dataclass
class FetchStats:
    """Statistics collected during the article stage.

    Attributes:
        total: Number of listing entries selected for processing
        success: Articles whose content was extracted and summarized
        failed: Articles that could not be fetched
        extract_miss: Articles fetched but with too little usable text
        filtered: Items dropped by the summary quality filter
    """
    total: int = 0
    success: int = 0
    failed: int = 0
    extract_miss: int = 0
    filtered: int = 0


@dataclass
class RunResult:
    """Outcome of a pipeline run.

    Attributes:
        success: True when at least one item survived filtering
        items: Filtered items, newest first
        message: Human readable status for unsuccessful or degraded runs
        stats: Article stage counters
        timed_out: Whether the run deadline cut the article stage short
        snapshot_path: Where the snapshot was written, if it was
    """
    success: bool
    items: list[NewsItem] = field(default_factory=list)
    message: str | None = None
    stats: FetchStats = field(default_factory=FetchStats)
    timed_out: bool = False
    snapshot_path: Path | None = None

    def to_envelope(self) -> dict[str, Any]:
        """Build the ``{success, data?, message?}`` payload for consumers."""
        envelope: dict[str, Any] = {"success": self.success}
        if self.success:
            envelope["data"] = [item.to_dict() for item in self.items]
        if self.message:
            envelope["message"] = self.message
        return envelope
