"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (passed directly to functions)
2. Environment variables (TAGPROBE_*)
3. Config file (~/.tagprobe/config.toml)
4. Default values

Environment variables:
- TAGPROBE_CONFIG_PATH: Path to config file (overrides default location)
- TAGPROBE_LOG_LEVEL: Log level (debug, info, warning, error)
- TAGPROBE_LOG_FILE: Log file path
- TAGPROBE_LOG_FORMAT: Log format (text, json)
- TAGPROBE_LOG_INCLUDE_STDERR: Also log to stderr when a log file is set
- TAGPROBE_SOURCE_ELEMENT: GStreamer source element factory (default filesrc)
- TAGPROBE_DECODER_ELEMENT: GStreamer decoder element factory (default decodebin)
- TAGPROBE_SINK_ELEMENT: GStreamer sink element factory (default fakesink)
- TAGPROBE_SERIALIZE_NON_STRING: Serialize non-string tag values (true/false)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from tagprobe.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from tagprobe.config.env import EnvReader
from tagprobe.config.models import TagProbeConfig
from tagprobe.config.toml_parser import load_toml_file

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".tagprobe"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path() -> Path:
    """Get the default config file path.

    Can be overridden by TAGPROBE_CONFIG_PATH environment variable.
    """
    env_path = os.environ.get("TAGPROBE_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None, *, strict: bool = False) -> dict:
    """Load configuration from TOML file.

    Args:
        path: Path to config file. If None, uses default location.
        strict: If True, raise TomlParseError on parse failures.

    Returns:
        Parsed configuration dict. Empty dict if file doesn't exist.
    """
    if path is None:
        path = get_default_config_path()
    return load_toml_file(path, strict=strict)


def load_config(
    config_path: Path | None = None,
    # CLI override (highest precedence)
    serialize_non_string: bool | None = None,
    # Optional dependency injection for testing
    env_reader: EnvReader | None = None,
    *,
    strict: bool = False,
) -> tuple[TagProbeConfig, ConfigBuilder]:
    """Build tagprobe configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides TAGPROBE_CONFIG_PATH).
        serialize_non_string: CLI override for tag value serialization.
        env_reader: Optional EnvReader for testing (uses os.environ if None).
        strict: If True, raise TomlParseError on config file parse failures.

    Returns:
        Tuple of (config, builder); builder.source_of(key) names the
        winning source for a value.

    Raises:
        TomlParseError: When strict=True and the config file cannot be parsed.
        ValueError: If a section or merged value is invalid.
    """
    reader = env_reader or EnvReader()

    file_config = load_config_file(config_path, strict=strict)

    cli_source = ConfigSource(serialize_non_string=serialize_non_string)

    builder = ConfigBuilder()
    builder.apply(source_from_file(file_config), source_name="file")
    builder.apply(source_from_env(reader), source_name="env")
    builder.apply(cli_source, source_name="cli")

    return builder.build(), builder
