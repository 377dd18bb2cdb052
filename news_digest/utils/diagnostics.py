"""
Injected diagnostics sink.

Pipeline stages report structured events and debug artifacts through a
Diagnostics instance handed to them by the caller, instead of writing to
module-level loggers or fixed debug paths.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .logging import LOGGER_NAME, log_event


class Diagnostics:
    """Structured event log plus an optional artifact directory.

    Attributes:
        logger: Logger receiving structured events, or None to discard them
        artifacts_dir: Directory for debug files, or None to skip writing them
    """

    def __init__(self, logger: logging.Logger | None, artifacts_dir: Path | None = None):
        self.logger = logger
        self.artifacts_dir = artifacts_dir

    @classmethod
    def null(cls) -> "Diagnostics":
        """A sink that drops every event and artifact."""
        return cls(None, None)

    @classmethod
    def default(cls, artifacts_dir: Path | None = None) -> "Diagnostics":
        return cls(logging.getLogger(LOGGER_NAME), artifacts_dir)

    def event(self, message: str, event: str, **fields: Any) -> None:
        log_event(self.logger, message, event=event, **fields)

    def warning(self, message: str, event: str, **fields: Any) -> None:
        log_event(self.logger, message, level=logging.WARNING, event=event, **fields)

    def write_artifact(self, name: str, data: str | bytes) -> Path | None:
        """Write a debug file, best-effort.

        Args:
            name: File name inside the artifacts directory
            data: Text (written as UTF-8) or raw bytes

        Returns:
            Path of the written file, or None if artifacts are disabled or the write failed
        """
        if self.artifacts_dir is None:
            return None
        path = self.artifacts_dir / name
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(data, bytes):
                path.write_bytes(data)
            else:
                path.write_text(data, encoding="utf-8")
        except OSError as exc:
            self.warning(
                "Artifact write failed",
                event="artifact_failed",
                path=str(path),
                error=f"{type(exc).__name__}: {exc}",
            )
            return None
        self.event("Artifact written", event="artifact_written", path=str(path))
        return path
