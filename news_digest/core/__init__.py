"""
Core domain models and error types.

This package contains data types and logic that are independent of
any specific pipeline stage.
"""

from .types import FetchStats, ListingEntry, NewsItem, RunResult, today_iso
from .errors import ConfigurationError, NewsDigestError, TransientFetchError, categorize_error
from .dedup import dedup_entries

__all__ = [
    "ListingEntry",
    "NewsItem",
    "FetchStats",
    "RunResult",
    "today_iso",
    "NewsDigestError",
    "ConfigurationError",
    "TransientFetchError",
    "categorize_error",
    "dedup_entries",
]
