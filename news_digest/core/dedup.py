"""
Optional cleanup of repeated listing entries.

A listing can show the same article twice, for example a pinned story that
also appears in the time-ordered list. Collapsing those repeats is opt-in
and matches on URL only. Fuzzy title matching is a second opt-in, because
breaking-news headlines for different stories (a market rise and a market
fall, numbered updates) are often near-identical.
"""

from __future__ import annotations

from rapidfuzz import fuzz, process

from .types import ListingEntry


def dedup_entries(
    entries: list[ListingEntry], title_threshold: int | None = None
) -> list[ListingEntry]:
    """Drop repeated entries, keeping the first occurrence and page order.

    Args:
        entries: Listing entries in page order
        title_threshold: When set, an entry whose title scores at or above
            this ``fuzz.ratio`` (0-100) against an earlier kept title is
            dropped as well

    Returns:
        The entries that survive, in their original order
    """
    kept: list[ListingEntry] = []
    seen_urls: set[str] = set()

    for entry in entries:
        if entry.url in seen_urls:
            continue
        if title_threshold is not None and kept:
            match = process.extractOne(
                entry.title,
                [other.title for other in kept],
                scorer=fuzz.ratio,
                score_cutoff=title_threshold,
            )
            if match is not None:
                continue
        seen_urls.add(entry.url)
        kept.append(entry)

    return kept
