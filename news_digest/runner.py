"""
Main pipeline orchestration.

This module coordinates one ingestion run:
1. Validate configuration
2. Fetch and parse the listing page
3. Deduplicate and bound the candidate entries
4. Fetch, summarize and categorize articles in a bounded worker pool
5. Drop items without a meaningful summary
6. Sort newest first and write the snapshot

Failures of a single article degrade to a fallback item and never abort
the batch. A page backend that cannot start, or a failed or empty
listing, ends the run unsuccessfully. Only configuration errors are
raised to the caller.

When the run deadline passes during the article stage, unfinished
fetches are cancelled and the items completed so far are returned as a
partial result flagged with ``timed_out``.
"""

from __future__ import annotations

import asyncio
from contextlib import AsyncExitStack
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeRemainingColumn,
)

from .classify.categorizer import categorize
from .config import AppConfig, validate_config
from .core.dedup import dedup_entries
from .core.errors import TransientFetchError
from .core.types import FetchStats, ListingEntry, NewsItem, RunResult
from .fetch.fetcher import PageFetcher, build_fetcher
from .fetch.source import NewsSource
from .output.snapshot import snapshot_path, write_snapshot
from .summarize.summarizer import summarize
from .utils.diagnostics import Diagnostics
from .utils.logging import truncate_text


FAILED_MESSAGE = "Failed to fetch news data"
TIMEOUT_MESSAGE = "Run timed out; returning partial results"


def run_pipeline(
    cfg: AppConfig,
    diagnostics: Diagnostics | None = None,
    fetcher: PageFetcher | None = None,
    show_progress: bool = False,
    console: Console | None = None,
) -> RunResult:
    """Run one ingestion pass synchronously.

    Args:
        cfg: Application configuration
        diagnostics: Event and artifact sink; defaults to the package logger
            with artifacts under the output directory
        fetcher: Page loading backend; built from cfg.fetch when omitted
        show_progress: Whether to display a progress bar
        console: Rich console for the progress bar

    Returns:
        RunResult with the filtered, sorted items

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    if not show_progress:
        return asyncio.run(run_pipeline_async(cfg, diagnostics, fetcher))

    console = console or Console(stderr=True)
    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console,
    )
    with progress:
        return asyncio.run(run_pipeline_async(cfg, diagnostics, fetcher, progress))


async def run_pipeline_async(
    cfg: AppConfig,
    diagnostics: Diagnostics | None = None,
    fetcher: PageFetcher | None = None,
    progress: Progress | None = None,
) -> RunResult:
    """Async implementation of run_pipeline.

    The fetcher is entered once for the whole run and closed on every
    exit path, including cancellation by the caller.
    """
    validate_config(cfg)
    if diagnostics is None:
        artifacts_dir = Path(cfg.output.output_dir) if cfg.output.debug_artifacts else None
        diagnostics = Diagnostics.default(artifacts_dir)
    if fetcher is None:
        fetcher = build_fetcher(cfg.fetch)

    loop = asyncio.get_running_loop()
    started_at = datetime.now(timezone.utc)
    deadline = None
    if cfg.pipeline.run_timeout_seconds is not None:
        deadline = loop.time() + cfg.pipeline.run_timeout_seconds

    diagnostics.event(
        "Pipeline start",
        event="pipeline_start",
        listing_url=cfg.source.listing_url,
        backend=cfg.fetch.backend,
        max_articles=cfg.pipeline.max_articles_per_run,
        concurrency=cfg.fetch.concurrency,
    )

    async with AsyncExitStack() as stack:
        try:
            await stack.enter_async_context(fetcher)
        except Exception as exc:  # noqa: BLE001
            diagnostics.warning(
                "Page backend failed to start",
                event="listing_failed",
                stage="startup",
                url=cfg.source.listing_url,
                backend=cfg.fetch.backend,
                error=f"{type(exc).__name__}: {exc}",
            )
            return RunResult(success=False, message=FAILED_MESSAGE)

        source = NewsSource(
            fetcher, cfg.source, cfg.extract, diagnostics, cfg.output.debug_artifacts
        )
        try:
            entries = await asyncio.wait_for(source.fetch_listing(), _remaining(deadline, loop))
        except TransientFetchError as exc:
            diagnostics.warning(
                "Listing fetch failed",
                event="listing_failed",
                url=exc.url,
                error=exc.error,
                status_code=exc.status_code,
                error_category=exc.category,
            )
            return RunResult(success=False, message=FAILED_MESSAGE)
        except asyncio.TimeoutError:
            diagnostics.warning(
                "Run deadline reached while loading listing",
                event="run_timeout",
                stage="listing",
            )
            return RunResult(success=False, message=FAILED_MESSAGE, timed_out=True)
        except Exception as exc:  # noqa: BLE001
            diagnostics.warning(
                "Error scraping listing",
                event="listing_failed",
                url=cfg.source.listing_url,
                error=f"{type(exc).__name__}: {exc}",
            )
            return RunResult(success=False, message=FAILED_MESSAGE)

        if not entries:
            return RunResult(success=False, message=FAILED_MESSAGE)

        if cfg.dedup.enabled:
            entries = dedup_entries(entries, cfg.dedup.title_similarity_threshold)
        candidates = entries[: cfg.pipeline.max_articles_per_run]
        stats = FetchStats(total=len(candidates))

        processed, timed_out = await _process_entries(
            candidates, source, cfg, stats, diagnostics, deadline, progress
        )

    template = cfg.pipeline.fallback_summary_template
    items = filter_items(processed, template, cfg.pipeline.min_summary_length)
    stats.filtered = len(processed) - len(items)
    for item in processed:
        if item not in items:
            diagnostics.event(
                "Item dropped by summary filter",
                event="item_filtered",
                url=item.url,
                title=item.title,
            )
    items = sort_items(items, fallback=started_at, tz=ZoneInfo(cfg.source.timezone))

    result = RunResult(success=bool(items), items=items, stats=stats, timed_out=timed_out)
    if timed_out:
        result.message = TIMEOUT_MESSAGE if items else FAILED_MESSAGE
    elif not items:
        result.message = FAILED_MESSAGE

    if items and cfg.output.write_snapshot:
        result.snapshot_path = _persist_snapshot(items, cfg, started_at, diagnostics)

    diagnostics.event(
        "Pipeline complete",
        event="pipeline_complete",
        total=len(items),
        candidates=stats.total,
        fetched=stats.success,
        failed=stats.failed,
        extract_miss=stats.extract_miss,
        filtered=stats.filtered,
        timed_out=timed_out,
    )
    return result


async def _process_entries(
    candidates: list[ListingEntry],
    source: NewsSource,
    cfg: AppConfig,
    stats: FetchStats,
    diagnostics: Diagnostics,
    deadline: float | None,
    progress: Progress | None = None,
) -> tuple[list[NewsItem], bool]:
    """Build one item per candidate with at most ``fetch.concurrency`` in flight.

    Returns:
        Tuple of (items in listing order, whether the deadline cut the stage short)
    """
    loop = asyncio.get_running_loop()
    semaphore = asyncio.Semaphore(cfg.fetch.concurrency)
    progress_task = None
    if progress is not None:
        progress_task = progress.add_task("Fetch + Summarize", total=len(candidates))

    async def _process(index: int, entry: ListingEntry) -> tuple[int, NewsItem]:
        async with semaphore:
            item = await _build_item(entry, source, cfg, stats, diagnostics)
        if progress is not None and progress_task is not None:
            progress.advance(progress_task, 1)
        return index, item

    tasks = [asyncio.create_task(_process(i, entry)) for i, entry in enumerate(candidates)]
    try:
        done, pending = await asyncio.wait(tasks, timeout=_remaining(deadline, loop))
    except asyncio.CancelledError:
        await _cancel_all(tasks)
        raise

    if pending:
        await _cancel_all(pending)
        diagnostics.warning(
            "Run deadline reached; abandoning unfinished articles",
            event="run_timeout",
            stage="articles",
            completed=len(done),
            abandoned=len(pending),
        )

    completed = sorted((task.result() for task in done), key=lambda pair: pair[0])
    return [item for _, item in completed], bool(pending)


async def _build_item(
    entry: ListingEntry,
    source: NewsSource,
    cfg: AppConfig,
    stats: FetchStats,
    diagnostics: Diagnostics,
) -> NewsItem:
    """Fetch, summarize and categorize a single entry, falling back on failure."""
    diagnostics.event("Fetch start", event="fetch_start", url=entry.url, title=entry.title)
    try:
        text = await source.fetch_article(entry.url)
    except TransientFetchError as exc:
        stats.failed += 1
        diagnostics.warning(
            "Fetch failed",
            event="fetch_failed",
            url=entry.url,
            title=entry.title,
            error=exc.error,
            status_code=exc.status_code,
            error_category=exc.category,
        )
        return fallback_item(entry, cfg)
    except Exception as exc:  # noqa: BLE001
        stats.failed += 1
        diagnostics.warning(
            "Article processing error",
            event="article_error",
            url=entry.url,
            title=entry.title,
            error=f"{type(exc).__name__}: {exc}",
        )
        return fallback_item(entry, cfg)

    if text is None:
        stats.extract_miss += 1
        diagnostics.event(
            "Couldn't extract meaningful content",
            event="extract_miss",
            url=entry.url,
            title=entry.title,
        )
        return fallback_item(entry, cfg)

    summary = summarize(text, entry.title)
    if not summary:
        summary = cfg.pipeline.fallback_summary_template.format(title=entry.title)
    stats.success += 1
    return NewsItem(
        title=entry.title,
        source_name=cfg.source.source_name,
        url=entry.url,
        summary=summary,
        published_date=entry.published_date,
        category=categorize(f"{entry.title} {summary}"),
        raw_content_sample=truncate_text(text, cfg.extract.raw_sample_chars),
    )


def fallback_item(entry: ListingEntry, cfg: AppConfig) -> NewsItem:
    """Placeholder item for an article whose content could not be used."""
    return NewsItem(
        title=entry.title,
        source_name=cfg.source.source_name,
        url=entry.url,
        summary=cfg.pipeline.fallback_summary_template.format(title=entry.title),
        published_date=entry.published_date,
        category=categorize(entry.title),
    )


def filter_items(items: list[NewsItem], template: str, min_summary_length: int) -> list[NewsItem]:
    """Keep items whose summary is longer than the minimum and not the placeholder.

    Applying the filter to its own output returns the same list.
    """
    return [
        item
        for item in items
        if item.summary
        and len(item.summary) > min_summary_length
        and item.summary != template.format(title=item.title)
    ]


def sort_items(
    items: list[NewsItem], fallback: datetime, tz: tzinfo | None = None
) -> list[NewsItem]:
    """Sort items newest first.

    The sort is stable, so items with equal dates keep their listing
    order. Unparseable dates sort as ``fallback`` (the run start time).
    Timestamps without an offset, including a naive ``fallback``, are read
    in ``tz`` (UTC when omitted) so every key is a comparable instant.
    """
    fallback_key = _as_aware(fallback, tz)
    return sorted(
        items,
        key=lambda item: parse_published(item.published_date, tz) or fallback_key,
        reverse=True,
    )


def parse_published(text: str, tz: tzinfo | None = None) -> datetime | None:
    """Parse a listing timestamp such as ``2024-01-03 10:25`` or ``2024/01/03``.

    Args:
        text: Timestamp as shown on the listing
        tz: Zone of timestamps that carry no offset; UTC when omitted

    Returns:
        A timezone-aware datetime, or None if the text is not a recognizable date
    """
    cleaned = (text or "").strip().replace("/", "-")
    if not cleaned:
        return None
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(cleaned)
    except ValueError:
        return None
    return _as_aware(parsed, tz)


def _as_aware(value: datetime, tz: tzinfo | None) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=tz or timezone.utc)
    return value


async def _cancel_all(tasks) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


def _remaining(deadline: float | None, loop: asyncio.AbstractEventLoop) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - loop.time())


def _persist_snapshot(
    items: list[NewsItem],
    cfg: AppConfig,
    started_at: datetime,
    diagnostics: Diagnostics,
) -> Path | None:
    path = snapshot_path(cfg.output, started_at.astimezone())
    try:
        write_snapshot(items, path, started_at)
    except OSError as exc:
        diagnostics.warning(
            "Error saving snapshot",
            event="snapshot_failed",
            path=str(path),
            error=f"{type(exc).__name__}: {exc}",
        )
        return None
    diagnostics.event("Snapshot written", event="snapshot_written", path=str(path), total=len(items))
    return path
