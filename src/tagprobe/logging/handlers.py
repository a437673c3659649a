"""JSON log formatting for tagprobe."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}

# Set by FileContextFilter; file_tag only exists for the text format
_FILE_CONTEXT_ATTRS = ("file_id", "file_path")


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Keys: ``timestamp`` (UTC, ISO-8601), ``level``, ``message``, ``logger``,
    and, when present, ``context`` (extra fields plus the current file)
    and ``exception``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if record.name != "root":
            entry["logger"] = record.name

        context = self._context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)

    @staticmethod
    def _context(record: logging.LogRecord) -> dict[str, Any]:
        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS
            and key not in _FILE_CONTEXT_ATTRS
            and key != "file_tag"
            and not key.startswith("_")
        }
        for key in _FILE_CONTEXT_ATTRS:
            value = getattr(record, key, None)
            if value:
                context[key] = value
        return context
