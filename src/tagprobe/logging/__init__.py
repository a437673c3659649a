"""Structured logging module for tagprobe.

Provides configurable logging with JSON format support and file rotation.
Includes per-file context so log lines name the file they concern.
"""

from tagprobe.logging.config import configure_logging
from tagprobe.logging.context import (
    FileContextFilter,
    clear_file_context,
    file_context,
    get_file_context,
    set_file_context,
)
from tagprobe.logging.handlers import JSONFormatter

__all__ = [
    "FileContextFilter",
    "JSONFormatter",
    "clear_file_context",
    "configure_logging",
    "file_context",
    "get_file_context",
    "set_file_context",
]
