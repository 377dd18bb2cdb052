"""
Keyword categorization.

Categories are checked in table order and the first one with any keyword
present in the text wins; there is no scoring. Reordering the table
changes results.
"""

from __future__ import annotations


CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "行銷": ("行銷", "marketing", "社群", "social media", "品牌", "brand", "廣告", "ad", "ads", "advertising"),
    "商業": ("商業", "business", "創業", "startup", "企業", "enterprise", "經營", "management"),
    "科技": ("科技", "tech", "technology", "AI", "人工智能", "人工智慧", "機器學習", "machine learning"),
    "財經": ("金融", "finance", "投資", "investment", "股市", "stock", "基金", "fund"),
}

DEFAULT_CATEGORY = "其他"


def categorize(text: str) -> str:
    """Assign a category label by case-insensitive keyword match.

    Args:
        text: Title, or title and summary, of an article

    Returns:
        The first matching label from CATEGORY_KEYWORDS, or DEFAULT_CATEGORY
    """
    folded = text.casefold()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(keyword.casefold() in folded for keyword in keywords):
            return category
    return DEFAULT_CATEGORY
