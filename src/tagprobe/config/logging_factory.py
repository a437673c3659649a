"""Command-line overrides for the logging section."""

from __future__ import annotations

import dataclasses
from pathlib import Path

from tagprobe.config.models import LoggingConfig


def build_logging_config(
    base: LoggingConfig,
    *,
    level: str | None = None,
    file: Path | None = None,
    format: str | None = None,
) -> LoggingConfig:
    """Return a copy of ``base`` with the given overrides applied.

    None means "not given on the command line" and keeps the base value.
    The copy is validated again, so an invalid override raises ValueError.
    """
    overrides = {
        name: value
        for name, value in (("level", level), ("file", file), ("format", format))
        if value is not None
    }
    return dataclasses.replace(base, **overrides)
