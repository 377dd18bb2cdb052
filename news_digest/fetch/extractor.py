"""
HTML parsing for listing pages and article bodies.

Article text is located with an ordered chain of content selectors:
1. The first configured selector whose element yields text wins
2. Otherwise, every sufficiently long paragraph on the page (last resort)
"""

from __future__ import annotations

from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..core.types import ListingEntry, today_iso


_NOISE_TAGS = ["script", "style", "noscript"]

_BLOCKED_MARKERS = (
    "javascript is disabled",
    "please enable javascript",
    "enable javascript to continue",
    "verifying you are human",
    "checking your browser before accessing",
)


def parse_listing(
    html: str,
    base_url: str,
    item_selector: str,
    link_selector: str,
    time_selector: str,
) -> list[ListingEntry]:
    """Parse repeated listing entries out of a listing page.

    Entries without a title or link are dropped. Relative links are
    resolved against ``base_url``. A missing timestamp falls back to
    today's date.

    Args:
        html: Rendered listing page HTML
        base_url: URL the page was loaded from
        item_selector: Selector for one repeated listing element
        link_selector: Selector (within an item) for the title link
        time_selector: Selector (within an item) for the timestamp

    Returns:
        Listing entries in page order
    """
    soup = BeautifulSoup(html, "html.parser")
    entries: list[ListingEntry] = []
    for node in soup.select(item_selector):
        link = node.select_one(link_selector)
        if link is None:
            continue
        title = _node_text(link)
        href = (link.get("href") or "").strip()
        if not title or not href:
            continue
        time_node = node.select_one(time_selector)
        published = _node_text(time_node) if time_node is not None else ""
        entries.append(
            ListingEntry(
                title=title,
                url=urljoin(base_url, href),
                published_date=published or today_iso(),
            )
        )
    return entries


def extract_article_text(
    html: str,
    content_selectors: list[str],
    min_paragraph_length: int = 20,
) -> str:
    """Extract the article body from a rendered page.

    Args:
        html: Rendered article page HTML
        content_selectors: Content region selectors, highest priority first
        min_paragraph_length: Page-wide fallback ignores paragraphs at or under this length

    Returns:
        Paragraph texts joined by newlines, or an empty string
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NOISE_TAGS):
        tag.decompose()

    for selector in content_selectors:
        element = soup.select_one(selector)
        if element is None:
            continue
        text = _region_text(element)
        if text:
            return text

    # Last resort: page-wide paragraphs, skipping captions and navigation
    paragraphs = [_node_text(p) for p in soup.find_all("p")]
    return "\n".join(text for text in paragraphs if len(text) > min_paragraph_length)


def looks_blocked(text: str) -> bool:
    """Detect bot-challenge and script-required interstitials."""
    lowered = text.lower()
    return any(marker in lowered for marker in _BLOCKED_MARKERS)


def _region_text(element: Tag) -> str:
    paragraphs = [_node_text(p) for p in element.find_all("p")]
    paragraphs = [text for text in paragraphs if text]
    if paragraphs:
        return "\n".join(paragraphs)
    return _node_text(element)


def _node_text(node: Tag) -> str:
    # textContent with runs of whitespace collapsed
    return " ".join(node.get_text().split())
