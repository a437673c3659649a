"""Tests for configuration loading with precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from tagprobe.config.env import EnvReader
from tagprobe.config.loader import (
    DEFAULT_CONFIG_FILE,
    get_default_config_path,
    load_config,
)
from tagprobe.config.toml_parser import TomlParseError


def _config(*args, **kwargs):
    config, _ = load_config(*args, **kwargs)
    return config


CONFIG_TOML = """
[logging]
level = "info"
format = "json"

[pipeline]
decoder_element = "decodebin3"

[tags]
serialize_non_string = true
"""


class TestGetDefaultConfigPath:
    """Tests for get_default_config_path()."""

    def test_honours_env_override(self, isolated_config: Path) -> None:
        assert get_default_config_path() == isolated_config

    def test_falls_back_to_home(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TAGPROBE_CONFIG_PATH")
        assert get_default_config_path() == DEFAULT_CONFIG_FILE


class TestLoadConfig:
    """Tests for load_config() precedence handling."""

    def test_defaults_without_file(self) -> None:
        config = _config(env_reader=EnvReader(env={}))

        assert config.logging.level == "warning"
        assert config.pipeline.decoder_element == "decodebin"
        assert config.tags.serialize_non_string is False

    def test_reads_default_file(self, isolated_config: Path) -> None:
        """The file named by TAGPROBE_CONFIG_PATH is used when present."""
        isolated_config.write_text(CONFIG_TOML)

        config = _config(env_reader=EnvReader(env={}))

        assert config.logging.level == "info"
        assert config.logging.format == "json"
        assert config.pipeline.decoder_element == "decodebin3"
        assert config.tags.serialize_non_string is True

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = tmp_path / "other.toml"
        path.write_text('[pipeline]\nsink_element = "appsink"\n')

        config = _config(path, env_reader=EnvReader(env={}))

        assert config.pipeline.sink_element == "appsink"

    def test_env_overrides_file(self, isolated_config: Path) -> None:
        isolated_config.write_text(CONFIG_TOML)
        reader = EnvReader(
            env={
                "TAGPROBE_LOG_LEVEL": "error",
                "TAGPROBE_DECODER_ELEMENT": "parsebin",
            }
        )

        config = _config(env_reader=reader)

        assert config.logging.level == "error"
        assert config.pipeline.decoder_element == "parsebin"
        # Values not in env still come from the file
        assert config.logging.format == "json"

    def test_cli_overrides_env_and_file(self, isolated_config: Path) -> None:
        isolated_config.write_text(CONFIG_TOML)
        reader = EnvReader(env={"TAGPROBE_SERIALIZE_NON_STRING": "true"})

        config, builder = load_config(
            serialize_non_string=False, env_reader=reader
        )

        assert config.tags.serialize_non_string is False
        assert builder.source_of("serialize_non_string") == "cli"
        assert builder.source_of("logging_level") == "file"
        assert builder.source_of("sink_element") == "default"

    def test_reads_os_environ_by_default(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TAGPROBE_SINK_ELEMENT", "appsink")

        assert _config().pipeline.sink_element == "appsink"

    def test_unparseable_file_strict(self, isolated_config: Path) -> None:
        isolated_config.write_text("not = [valid")

        with pytest.raises(TomlParseError):
            _config(env_reader=EnvReader(env={}), strict=True)

    def test_unparseable_file_lenient(self, isolated_config: Path) -> None:
        """Without strict, a broken file is ignored."""
        isolated_config.write_text("not = [valid")

        config = _config(env_reader=EnvReader(env={}))

        assert config.logging.level == "warning"

    def test_quoted_bool_is_rejected(self, isolated_config: Path) -> None:
        """A string "false" does not turn serialization on."""
        isolated_config.write_text('[tags]\nserialize_non_string = "false"\n')

        with pytest.raises(ValueError, match="serialize_non_string"):
            load_config(env_reader=EnvReader(env={}), strict=True)

    def test_invalid_value_raises(self, isolated_config: Path) -> None:
        isolated_config.write_text('[pipeline]\nsink_element = ""\n')

        with pytest.raises(ValueError, match="sink_element"):
            _config(env_reader=EnvReader(env={}))
