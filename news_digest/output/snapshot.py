"""
Snapshot persistence.

A snapshot is a write-once JSON dump of one run's result set for
external inspection. Its shape is ``{timestamp, total, articles}`` and the
article field names follow NewsItem.to_dict().
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any

from ..config import OutputConfig
from ..core.errors import ConfigurationError
from ..core.types import NewsItem


def build_snapshot(items: list[NewsItem], timestamp: datetime | None = None) -> dict[str, Any]:
    """Assemble the snapshot payload.

    Args:
        items: Items in result order
        timestamp: Run time, defaults to now (UTC)
    """
    timestamp = timestamp or datetime.now(timezone.utc)
    return {
        "timestamp": timestamp.isoformat(),
        "total": len(items),
        "articles": [item.to_dict() for item in items],
    }


def snapshot_path(cfg: OutputConfig, started_at: datetime | None = None) -> Path:
    """Build the snapshot file path based on the configured naming mode.

    Args:
        cfg: Output configuration
        started_at: Run start time used for timestamped names

    Returns:
        Path to the snapshot file

    Raises:
        ConfigurationError: If snapshot_mode is not supported
    """
    filename = Path(cfg.snapshot_filename)
    stem = filename.stem or "scraped-news"
    suffix = filename.suffix or ".json"
    mode = (cfg.snapshot_mode or "fixed").lower()
    stamp = (started_at or datetime.now()).strftime("%Y%m%d-%H%M%S")
    if mode == "fixed":
        name = f"{stem}{suffix}"
    elif mode == "timestamp":
        name = f"{stamp}-{stem}{suffix}"
    elif mode == "input_timestamp":
        name = f"{stem}-{stamp}{suffix}"
    else:
        raise ConfigurationError(
            "Unsupported snapshot_mode. Use 'fixed', 'timestamp', or 'input_timestamp'."
        )
    return Path(cfg.output_dir) / name


def write_snapshot(items: list[NewsItem], path: Path, timestamp: datetime | None = None) -> Path:
    """Write the snapshot file, creating parent directories as needed.

    Raises:
        OSError: If the file cannot be written
    """
    payload = build_snapshot(items, timestamp)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
