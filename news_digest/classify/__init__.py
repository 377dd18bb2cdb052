"""Keyword-based article categorization."""

from .categorizer import CATEGORY_KEYWORDS, DEFAULT_CATEGORY, categorize

__all__ = ["CATEGORY_KEYWORDS", "DEFAULT_CATEGORY", "categorize"]
