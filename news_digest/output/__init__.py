"""Run artifacts written to disk."""

from .snapshot import build_snapshot, snapshot_path, write_snapshot

__all__ = ["build_snapshot", "snapshot_path", "write_snapshot"]
