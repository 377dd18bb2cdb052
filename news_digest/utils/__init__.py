"""
Shared utility functions.

This package contains logging and diagnostics helpers used across
multiple pipeline stages.
"""

from .logging import FieldsFormatter, JsonlFormatter, LOGGER_NAME, log_event, setup_logging, truncate_text
from .diagnostics import Diagnostics

__all__ = [
    "setup_logging",
    "log_event",
    "truncate_text",
    "JsonlFormatter",
    "FieldsFormatter",
    "LOGGER_NAME",
    "Diagnostics",
]
