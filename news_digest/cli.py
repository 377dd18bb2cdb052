"""
Command-line interface for news-digest.

Uses Typer to provide a CLI with options for the main configuration
settings. The run result is printed to stdout as the JSON envelope
``{success, data?, message?}``; logs and the fetch summary go to stderr.
"""

from __future__ import annotations

import json
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console

from .config import load_config
from .core.errors import ConfigurationError
from .core.types import FetchStats
from .runner import run_pipeline
from .utils.diagnostics import Diagnostics
from .utils.logging import setup_logging

app = typer.Typer(add_completion=False)
console = Console(stderr=True)


@app.callback()
def main() -> None:
    """Scrape, summarize and categorize breaking news."""


@app.command()
def run(
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Directory for the snapshot, logs and debug artifacts."
    ),
    listing_url: str | None = typer.Option(None, "--listing-url", help="Listing page URL."),
    backend: str | None = typer.Option(None, "--backend", help="Page backend: crawl4ai or httpx."),
    max_articles: int | None = typer.Option(
        None, "--max-articles", help="Maximum articles fetched in full."
    ),
    concurrency: int | None = typer.Option(
        None, "--concurrency", help="Article pages loaded at once."
    ),
    timeout: float | None = typer.Option(None, "--timeout", help="Run timeout in seconds."),
    progress: bool = typer.Option(False, "--progress/--no-progress"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_format: str | None = typer.Option(
        None, "--log-format", help="Log file format: jsonl or plain."
    ),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
):
    """Run the scrape-summarize-categorize pipeline once.

    Exits with 0 on success, 1 when no items could be produced and 2 on
    a configuration error.
    """
    load_dotenv()

    try:
        cfg = load_config(str(config) if config else None)
    except ConfigurationError as exc:
        _emit({"success": False, "message": str(exc)})
        raise typer.Exit(code=2)

    # Override with CLI options
    if output is not None:
        cfg.output.output_dir = str(output)
    if listing_url is not None:
        cfg.source.listing_url = listing_url
    if backend:
        cfg.fetch.backend = backend
    if max_articles is not None:
        cfg.pipeline.max_articles_per_run = max_articles
    if concurrency is not None:
        cfg.fetch.concurrency = concurrency
    if timeout is not None:
        cfg.pipeline.run_timeout_seconds = timeout
    if log_level:
        cfg.logging.level = log_level
    if log_format:
        cfg.logging.format = log_format
    if log_file is not None:
        cfg.logging.file = log_file

    output_dir = Path(cfg.output.output_dir)
    try:
        logger = setup_logging(cfg.logging, output_dir)
        diagnostics = Diagnostics(logger, output_dir if cfg.output.debug_artifacts else None)
        result = run_pipeline(cfg, diagnostics, show_progress=progress, console=console)
    except ConfigurationError as exc:
        _emit({"success": False, "message": str(exc)})
        raise typer.Exit(code=2)

    _render_fetch_stats(result.stats, console)
    _emit(result.to_envelope())
    if not result.success:
        raise typer.Exit(code=1)


def _emit(payload: dict) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _render_fetch_stats(stats: FetchStats, console: Console) -> None:
    console.print(
        "[bold]Fetch summary[/bold]: "
        f"total={stats.total}, success={stats.success}, failed={stats.failed}, "
        f"extract_miss={stats.extract_miss}, filtered={stats.filtered}"
    )


if __name__ == "__main__":
    app()
