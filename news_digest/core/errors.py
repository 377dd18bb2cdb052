"""
Exception hierarchy for the ingestion pipeline.

Only configuration problems escape a run. Fetch failures are raised by the
source layer and absorbed by the orchestrator, which turns them into
fallback items (per article) or an unsuccessful result (listing).
"""

from __future__ import annotations


class NewsDigestError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(NewsDigestError, ValueError):
    """Raised when the run configuration is missing or invalid."""


class TransientFetchError(NewsDigestError):
    """A page could not be loaded (timeout, network failure, render crash).

    Attributes:
        url: The URL that failed to load
        status_code: HTTP status code if one was received
        category: Coarse error class: "timeout", "blocked", "network_failed" or "unknown"
    """

    def __init__(self, url: str, error: str | None, status_code: int | None = None):
        super().__init__(f"{url}: {error or 'unknown error'}")
        self.url = url
        self.error = error
        self.status_code = status_code
        self.category = categorize_error(error, status_code)


def categorize_error(error: str | None, status_code: int | None) -> str:
    """Categorize fetch errors for better logging.

    Args:
        error: Error message from fetch attempt
        status_code: HTTP status code if available

    Returns:
        Error category: "network_failed", "blocked", "timeout", "unknown"
    """
    if not error:
        return "unknown"
    error_lower = error.lower()
    if "timeout" in error_lower or "timed out" in error_lower:
        return "timeout"
    if status_code in (401, 403, 429) or "blocked" in error_lower:
        return "blocked"
    if "connect" in error_lower or "connection" in error_lower:
        return "network_failed"
    return "unknown"
