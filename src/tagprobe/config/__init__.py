"""Configuration management for tagprobe.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (TAGPROBE_*)
3. Config file (~/.tagprobe/config.toml)
4. Default values (lowest priority)
"""

from tagprobe.config.builder import (
    ConfigBuilder,
    ConfigSource,
    source_from_env,
    source_from_file,
)
from tagprobe.config.env import EnvReader
from tagprobe.config.loader import (
    get_default_config_path,
    load_config,
    load_config_file,
)
from tagprobe.config.logging_factory import build_logging_config
from tagprobe.config.models import (
    LoggingConfig,
    PipelineConfig,
    TagProbeConfig,
    TagsConfig,
)
from tagprobe.config.toml_parser import TomlParseError, load_toml_file

__all__ = [
    # Models
    "LoggingConfig",
    "PipelineConfig",
    "TagProbeConfig",
    "TagsConfig",
    # Loader
    "get_default_config_path",
    "load_config",
    "load_config_file",
    # Layering
    "EnvReader",
    "ConfigBuilder",
    "ConfigSource",
    "source_from_env",
    "source_from_file",
    "build_logging_config",
    # TOML
    "TomlParseError",
    "load_toml_file",
]
