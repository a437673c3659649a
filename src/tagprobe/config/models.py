"""Configuration models for tagprobe."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

VALID_LOG_LEVELS = ("debug", "info", "warning", "error")
VALID_LOG_FORMATS = ("text", "json")


def _require_type(name: str, value: object, expected: type) -> None:
    # bool is an int subclass; never accept it where a str or int is wanted
    if not isinstance(value, expected) or (
        expected is not bool and isinstance(value, bool)
    ):
        raise ValueError(
            f"{name} must be of type {expected.__name__}, "
            f"got {type(value).__name__} {value!r}"
        )


@dataclass
class LoggingConfig:
    """Configuration for structured logging."""

    # Log level: debug, info, warning, error
    level: str = "warning"

    # Log file path (None = stderr only)
    file: Path | None = None

    # Log format: text or json
    format: str = "text"

    # Also log to stderr when file is set
    include_stderr: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        _require_type("level", self.level, str)
        if self.level.lower() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"level must be one of {', '.join(VALID_LOG_LEVELS)}, "
                f"got {self.level}"
            )
        _require_type("format", self.format, str)
        if self.format.lower() not in VALID_LOG_FORMATS:
            raise ValueError(
                f"format must be one of {', '.join(VALID_LOG_FORMATS)}, "
                f"got {self.format}"
            )
        if self.file is not None:
            _require_type("file", self.file, Path)
        _require_type("include_stderr", self.include_stderr, bool)


@dataclass
class PipelineConfig:
    """GStreamer element factories used to build the decode graph."""

    source_element: str = "filesrc"
    decoder_element: str = "decodebin"
    sink_element: str = "fakesink"

    def __post_init__(self) -> None:
        """Validate configuration."""
        for name in ("source_element", "decoder_element", "sink_element"):
            value = getattr(self, name)
            _require_type(name, value, str)
            if not value.strip():
                raise ValueError(f"{name} must be a non-empty element name")


@dataclass
class TagsConfig:
    """How tag values are turned into strings."""

    # Serialize booleans, numbers and dates instead of failing on them
    serialize_non_string: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        _require_type("serialize_non_string", self.serialize_non_string, bool)


@dataclass
class TagProbeConfig:
    """Main configuration for tagprobe."""

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    tags: TagsConfig = field(default_factory=TagsConfig)
