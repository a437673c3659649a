"""Unit tests for output formatters."""

import json

import pytest

from tagprobe.driver import FileTags
from tagprobe.formatters import (
    OUTPUT_FORMATS,
    format_debug,
    format_human,
    format_json,
    format_result,
)


@pytest.fixture
def result() -> FileTags:
    return FileTags(
        path="/media/song.mp3",
        tags={"title": "Song", "artist": "Someone", "container-format": "ID3"},
    )


class TestFormatDebug:
    def test_matches_map_repr(self) -> None:
        assert format_debug({"title": "X"}) == "Tags: {'title': 'X'}"

    def test_empty(self) -> None:
        assert format_debug({}) == "Tags: {}"


class TestFormatHuman:
    """Tests for format_human()."""

    def test_header_and_sorted_aligned_lines(self, result) -> None:
        lines = format_human(result).splitlines()

        assert lines[0] == "File: /media/song.mp3"
        assert lines[1:] == [
            "  artist           : Someone",
            "  container-format : ID3",
            "  title            : Song",
        ]

    def test_no_tags(self) -> None:
        text = format_human(FileTags(path="a.wav", tags={}))

        assert text == "File: a.wav\n  (no tags found)"


class TestFormatJson:
    """Tests for format_json()."""

    def test_is_single_line_json(self, result) -> None:
        text = format_json(result)

        assert "\n" not in text
        assert json.loads(text) == {
            "file": "/media/song.mp3",
            "tags": {
                "title": "Song",
                "artist": "Someone",
                "container-format": "ID3",
            },
        }

    def test_keeps_non_ascii(self) -> None:
        text = format_json(FileTags(path="b.mkv", tags={"title": "Café"}))

        assert "Café" in text


class TestFormatResult:
    @pytest.mark.parametrize("output_format", OUTPUT_FORMATS)
    def test_known_formats(self, result, output_format) -> None:
        assert format_result(result, output_format)

    def test_debug_uses_tags_only(self, result) -> None:
        assert format_result(result, "debug") == format_debug(result.tags)

    def test_unknown_format(self, result) -> None:
        with pytest.raises(ValueError, match="Unknown output format"):
            format_result(result, "yaml")
