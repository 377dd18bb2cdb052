"""
News Digest - breaking news scraper and extractive summarizer.

This package loads a news portal's listing page in a headless browser,
extracts and summarizes the newest articles, assigns each a category by
keyword, and returns the result as NewsItem objects plus a JSON snapshot.

Main entry point is the CLI via `news-digest run` command, or
`run_pipeline()` for library use.

Example:
    $ news-digest run -o public/
"""

__all__ = [
    "__version__",
    "AppConfig",
    "load_config",
    "NewsItem",
    "RunResult",
    "run_pipeline",
    "summarize",
    "categorize",
]
__version__ = "0.1.0"

from .classify.categorizer import categorize
from .config import AppConfig, load_config
from .core.types import NewsItem, RunResult
from .runner import run_pipeline
from .summarize.summarizer import summarize
