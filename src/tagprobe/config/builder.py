"""Configuration builder with explicit layering.

This module provides ConfigBuilder for building TagProbeConfig by composing
multiple configuration sources with explicit precedence handling.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from tagprobe.config.env import EnvReader
from tagprobe.config.models import (
    LoggingConfig,
    PipelineConfig,
    TagProbeConfig,
    TagsConfig,
)


@dataclass
class ConfigSource:
    """Configuration values from a single source.

    None values indicate "not specified in this source" and will not
    override values from lower-precedence sources.
    """

    # Logging config
    logging_level: str | None = None
    logging_file: Path | None = None
    logging_format: str | None = None
    logging_include_stderr: bool | None = None

    # Pipeline config
    source_element: str | None = None
    decoder_element: str | None = None
    sink_element: str | None = None

    # Tags config
    serialize_non_string: bool | None = None


class ConfigBuilder:
    """Builds TagProbeConfig by layering ConfigSources with precedence.

    Later sources override earlier ones (for non-None values). The name
    of the source that last set each value is kept for diagnostics.

    Example:
        builder = ConfigBuilder()
        builder.apply(source_from_file(file_config), source_name="file")
        builder.apply(source_from_env(reader), source_name="env")
        builder.apply(cli_source, source_name="cli")
        config = builder.build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._sources: dict[str, str] = {}

    def apply(self, source: ConfigSource, source_name: str = "unknown") -> None:
        """Apply configuration source, overriding existing values.

        Args:
            source: Configuration source to apply.
            source_name: Label recorded for every value this source sets.
        """
        for field_obj in fields(source):
            value = getattr(source, field_obj.name)
            if value is not None:
                self._values[field_obj.name] = value
                self._sources[field_obj.name] = source_name

    def source_of(self, key: str) -> str:
        """Name of the source that set a value, or "default"."""
        return self._sources.get(key, "default")

    def _get(self, key: str, default: Any) -> Any:
        return self._values.get(key, default)

    def build(self) -> TagProbeConfig:
        """Build the final TagProbeConfig with defaults for unset values.

        Raises:
            ValueError: If a resulting value fails model validation.
        """
        defaults = TagProbeConfig()

        logging_config = LoggingConfig(
            level=self._get("logging_level", defaults.logging.level),
            file=self._get("logging_file", defaults.logging.file),
            format=self._get("logging_format", defaults.logging.format),
            include_stderr=self._get(
                "logging_include_stderr", defaults.logging.include_stderr
            ),
        )

        pipeline = PipelineConfig(
            source_element=self._get(
                "source_element", defaults.pipeline.source_element
            ),
            decoder_element=self._get(
                "decoder_element", defaults.pipeline.decoder_element
            ),
            sink_element=self._get("sink_element", defaults.pipeline.sink_element),
        )

        tags = TagsConfig(
            serialize_non_string=self._get(
                "serialize_non_string", defaults.tags.serialize_non_string
            ),
        )

        return TagProbeConfig(logging=logging_config, pipeline=pipeline, tags=tags)


def _section(file_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = file_config.get(name, {})
    if not isinstance(section, dict):
        raise ValueError(
            f"[{name}] must be a table, got {type(section).__name__} {section!r}"
        )
    return section


def source_from_file(file_config: dict[str, Any]) -> ConfigSource:
    """Create ConfigSource from a parsed TOML config file.

    Args:
        file_config: Parsed configuration dictionary from TOML file.

    Returns:
        ConfigSource with values from the config file. Value types are
        checked later, when the models are built.

    Raises:
        ValueError: If a section is not a table or the log file is not
            a string.
    """
    logging_conf = _section(file_config, "logging")
    pipeline = _section(file_config, "pipeline")
    tags = _section(file_config, "tags")

    log_file_str = logging_conf.get("file")
    if log_file_str is not None and not isinstance(log_file_str, str):
        raise ValueError(f"[logging] file must be a string, got {log_file_str!r}")
    log_file = Path(log_file_str).expanduser() if log_file_str else None

    return ConfigSource(
        # Logging
        logging_level=logging_conf.get("level"),
        logging_file=log_file,
        logging_format=logging_conf.get("format"),
        logging_include_stderr=logging_conf.get("include_stderr"),
        # Pipeline
        source_element=pipeline.get("source_element"),
        decoder_element=pipeline.get("decoder_element"),
        sink_element=pipeline.get("sink_element"),
        # Tags
        serialize_non_string=tags.get("serialize_non_string"),
    )


def source_from_env(reader: EnvReader) -> ConfigSource:
    """Create ConfigSource from TAGPROBE_* environment variables.

    Args:
        reader: EnvReader instance for reading environment variables.

    Returns:
        ConfigSource with values from environment variables.
    """
    return ConfigSource(
        # Logging
        logging_level=reader.get_str("TAGPROBE_LOG_LEVEL"),
        logging_file=reader.get_path("TAGPROBE_LOG_FILE"),
        logging_format=reader.get_str("TAGPROBE_LOG_FORMAT"),
        logging_include_stderr=reader.get_bool("TAGPROBE_LOG_INCLUDE_STDERR"),
        # Pipeline
        source_element=reader.get_str("TAGPROBE_SOURCE_ELEMENT"),
        decoder_element=reader.get_str("TAGPROBE_DECODER_ELEMENT"),
        sink_element=reader.get_str("TAGPROBE_SINK_ELEMENT"),
        # Tags
        serialize_non_string=reader.get_bool("TAGPROBE_SERIALIZE_NON_STRING"),
    )
