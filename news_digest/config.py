"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- SourceConfig: Listing page URL and listing selectors
- FetchConfig: Page loading backend settings
- ExtractConfig: Article content selectors and length thresholds
- PipelineConfig: Run bounds, summary filter and fallback text
- DedupConfig: Listing deduplication settings
- OutputConfig: Snapshot and debug artifact locations
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .core.errors import ConfigurationError


DEFAULT_CONTENT_SELECTORS = [
    "#article-body",
    ".article-content__paragraph",
    ".article-content",
    ".story-content",
    "article",
    ".article-body",
    ".news-content",
    "#story-body",
]


@dataclass
class SourceConfig:
    """Configuration for the news portal being scraped.

    Attributes:
        listing_url: Absolute URL of the listing page
        source_name: Display name attached to every item
        listing_item_selector: CSS selector for one repeated listing entry
        listing_link_selector: CSS selector (within an entry) for the title link
        listing_time_selector: CSS selector (within an entry) for the timestamp
        timezone: IANA zone of the portal's listing timestamps, used when they carry no offset
    """

    listing_url: str = "https://udn.com/news/breaknews/1"
    source_name: str = "聯合新聞網"
    listing_item_selector: str = ".article-list__item"
    listing_link_selector: str = ".article-list__text h2 a"
    listing_time_selector: str = ".article-list__time"
    timezone: str = "Asia/Taipei"


@dataclass
class FetchConfig:
    """Configuration for page loading.

    Attributes:
        backend: "crawl4ai" for headless browser rendering, "httpx" for plain HTTP
        user_agent: Client identity string sent with every page load
        navigation_timeout_ms: Per-page navigation timeout in milliseconds
        retries: Number of retry attempts for failed loads
        concurrency: Maximum number of article pages loaded at once
        trust_env: Whether to respect system proxy settings (httpx backend)
        headless: Run the browser without a window (crawl4ai backend)
    """

    backend: str = "crawl4ai"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/96.0.4664.110 Safari/537.36"
    )
    navigation_timeout_ms: int = 30000
    retries: int = 1
    concurrency: int = 3
    trust_env: bool = True
    headless: bool = True


@dataclass
class ExtractConfig:
    """Configuration for article text extraction.

    Attributes:
        content_selectors: Content region selectors, highest priority first
        min_paragraph_length: Paragraphs at or under this length are skipped in the page-wide fallback
        min_content_length: Extracted text shorter than this counts as a miss
        raw_sample_chars: Characters of extracted text kept on each item
    """

    content_selectors: list[str] = field(default_factory=lambda: list(DEFAULT_CONTENT_SELECTORS))
    min_paragraph_length: int = 20
    min_content_length: int = 50
    raw_sample_chars: int = 1000


@dataclass
class PipelineConfig:
    """Configuration for the orchestrator.

    Attributes:
        max_articles_per_run: Upper bound on articles fetched in full per run
        min_summary_length: Summaries at or under this length are filtered out
        fallback_summary_template: Placeholder summary, formatted with ``title``
        run_timeout_seconds: Wall-clock budget for a whole run, None to disable
    """

    max_articles_per_run: int = 10
    min_summary_length: int = 20
    fallback_summary_template: str = "{title}. Click to view original."
    run_timeout_seconds: float | None = 300.0


@dataclass
class DedupConfig:
    """Configuration for listing deduplication.

    Off by default so every listing entry up to the article bound is fetched.

    Attributes:
        enabled: Whether to drop entries whose URL already appeared
        title_similarity_threshold: Also drop entries whose title scores at or
            above this fuzzy ratio (0-100) against an earlier one; None compares
            URLs only
    """

    enabled: bool = False
    title_similarity_threshold: int | None = None


@dataclass
class OutputConfig:
    """Configuration for run artifacts.

    Attributes:
        output_dir: Directory for the snapshot, logs and debug artifacts
        snapshot_filename: Name of the snapshot JSON file
        snapshot_mode: "fixed", "timestamp" or "input_timestamp" file naming
        write_snapshot: Whether to write the snapshot at all
        debug_artifacts: Whether to dump HTML/screenshots when the listing is empty
    """

    output_dir: str = "public"
    snapshot_filename: str = "scraped-news.json"
    snapshot_mode: str = "fixed"
    write_snapshot: bool = True
    debug_artifacts: bool = True


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "run.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    source: SourceConfig = field(default_factory=SourceConfig)
    fetch: FetchConfig = field(default_factory=FetchConfig)
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    dedup: DedupConfig = field(default_factory=DedupConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS = {
    "source": SourceConfig,
    "fetch": FetchConfig,
    "extract": ExtractConfig,
    "pipeline": PipelineConfig,
    "dedup": DedupConfig,
    "output": OutputConfig,
    "logging": LoggingConfig,
}

SUPPORTED_BACKENDS = ("crawl4ai", "httpx")
SNAPSHOT_MODES = ("fixed", "timestamp", "input_timestamp")


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults."""
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            unknown = set(value) - set(data[key])
            if unknown:
                raise ConfigurationError(
                    f"Unknown {key} option(s): {', '.join(sorted(unknown))}"
                )
            data[key].update(value)
        else:
            data[key] = value
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})


def validate_config(cfg: AppConfig) -> None:
    """Check the values a run cannot start without.

    Raises:
        ConfigurationError: If the listing URL, a run bound or an option's type is invalid
    """
    _check_types(cfg)
    url = (cfg.source.listing_url or "").strip()
    if not url:
        raise ConfigurationError("source.listing_url is required")
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(f"source.listing_url must be an absolute http(s) URL: {url!r}")
    if cfg.fetch.backend not in SUPPORTED_BACKENDS:
        raise ConfigurationError(
            f"Unsupported fetch backend: {cfg.fetch.backend!r}. "
            f"Use one of: {', '.join(SUPPORTED_BACKENDS)}."
        )
    if cfg.fetch.navigation_timeout_ms <= 0:
        raise ConfigurationError("fetch.navigation_timeout_ms must be positive")
    if cfg.fetch.concurrency < 1:
        raise ConfigurationError("fetch.concurrency must be at least 1")
    if cfg.pipeline.max_articles_per_run < 1:
        raise ConfigurationError("pipeline.max_articles_per_run must be at least 1")
    if not cfg.extract.content_selectors:
        raise ConfigurationError("extract.content_selectors must not be empty")
    if cfg.output.snapshot_mode not in SNAPSHOT_MODES:
        raise ConfigurationError(
            f"Unsupported output.snapshot_mode: {cfg.output.snapshot_mode!r}. "
            f"Use one of: {', '.join(SNAPSHOT_MODES)}."
        )
    if "{title}" not in cfg.pipeline.fallback_summary_template:
        raise ConfigurationError("pipeline.fallback_summary_template must contain {title}")
    if cfg.fetch.retries < 0:
        raise ConfigurationError("fetch.retries must not be negative")
    timeout = cfg.pipeline.run_timeout_seconds
    if timeout is not None and timeout <= 0:
        raise ConfigurationError("pipeline.run_timeout_seconds must be positive or null")
    threshold = cfg.dedup.title_similarity_threshold
    if threshold is not None and not 0 <= threshold <= 100:
        raise ConfigurationError("dedup.title_similarity_threshold must be between 0 and 100")
    try:
        ZoneInfo(cfg.source.timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown source.timezone: {cfg.source.timezone!r}") from exc


# (section, option) -> accepted value types
_OPTION_TYPES: dict[tuple[str, str], tuple[type, ...]] = {
    ("source", "listing_url"): (str, type(None)),
    ("source", "timezone"): (str,),
    ("fetch", "navigation_timeout_ms"): (int, float),
    ("fetch", "retries"): (int,),
    ("fetch", "concurrency"): (int,),
    ("extract", "min_paragraph_length"): (int,),
    ("extract", "min_content_length"): (int,),
    ("extract", "raw_sample_chars"): (int,),
    ("pipeline", "max_articles_per_run"): (int,),
    ("pipeline", "min_summary_length"): (int,),
    ("pipeline", "fallback_summary_template"): (str,),
    ("pipeline", "run_timeout_seconds"): (int, float, type(None)),
    ("dedup", "title_similarity_threshold"): (int, float, type(None)),
}


def _check_types(cfg: AppConfig) -> None:
    for (section, option), types in _OPTION_TYPES.items():
        value = getattr(getattr(cfg, section), option)
        # bool is an int subclass but never a valid count or duration
        if isinstance(value, bool) or not isinstance(value, types):
            expected = " or ".join("null" if t is type(None) else t.__name__ for t in types)
            raise ConfigurationError(
                f"{section}.{option} must be {expected}, got {type(value).__name__}: {value!r}"
            )
