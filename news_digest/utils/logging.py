"""
Logging setup for pipeline runs.

Every stage reports through the ``news_digest`` logger with an ``event``
name and flat keyword fields (see ``log_event``). The console gets a Rich
handler on stderr, leaving stdout to the CLI's JSON envelope. The optional
run log file keeps the fields either as one JSON object per line or as
``key=value`` pairs after the message.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from ..config import LoggingConfig
from ..core.errors import ConfigurationError


LOGGER_NAME = "news_digest"
LOG_FORMATS = ("jsonl", "plain")

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def setup_logging(cfg: LoggingConfig, output_dir: Path | None) -> logging.Logger:
    """Configure the package logger for one run, replacing earlier handlers.

    Args:
        cfg: Logging section of the app config
        output_dir: Directory for the run log file; no file is written when None

    Raises:
        ConfigurationError: If the level or file format is not recognized
    """
    level = parse_level(cfg.level)
    if cfg.format not in LOG_FORMATS:
        raise ConfigurationError(
            f"Unsupported logging.format: {cfg.format!r}. Use one of: {', '.join(LOG_FORMATS)}."
        )

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
    logger.propagate = False

    if cfg.console:
        _attach(
            logger,
            RichHandler(console=Console(stderr=True), show_time=False, rich_tracebacks=True),
            logging.Formatter("%(message)s"),
        )
    if cfg.file and output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        formatter = JsonlFormatter() if cfg.format == "jsonl" else FieldsFormatter()
        _attach(logger, logging.FileHandler(output_dir / cfg.filename, encoding="utf-8"), formatter)

    return logger


def parse_level(name: str) -> int:
    """Map a level name such as ``"info"`` to its logging constant."""
    upper = str(name).strip().upper()
    if upper not in _LEVELS:
        raise ConfigurationError(
            f"Unsupported logging.level: {name!r}. Use one of: {', '.join(_LEVELS)}."
        )
    return getattr(logging, upper)


def log_event(
    logger: logging.Logger | None,
    message: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit ``message`` with ``fields`` attached to the record; a None logger drops it."""
    if logger is None:
        return
    logger.log(level, message, extra=fields)


def truncate_text(text: str, max_chars: int = 1000) -> str:
    return text if len(text) <= max_chars else text[:max_chars]


class JsonlFormatter(logging.Formatter):
    """One JSON object per record, with ``event`` and the extra fields at top level."""

    def format(self, record: logging.LogRecord) -> str:
        fields = record_fields(record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "event": fields.pop("event", None),
            "message": record.getMessage(),
        }
        payload.update(fields)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class FieldsFormatter(logging.Formatter):
    """Plain text line: time, level, message, then the extra fields as key=value."""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)s %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{line} {pairs}"


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """The ``extra`` fields a record was logged with."""
    return {key: value for key, value in vars(record).items() if key not in _RESERVED}


def _attach(logger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setLevel(logger.level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
