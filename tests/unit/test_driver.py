"""Unit tests for the tag extraction driver."""

from pathlib import Path

import pytest

from tagprobe.driver import FileTags, extract_tags, iter_file_tags
from tagprobe.engine import ErrorMessage
from tagprobe.errors import NodeError

SRC_PATH = "/GstPipeline:tagprobe/GstFileSrc:src"


class TestIterFileTags:
    """Tests for iter_file_tags()."""

    def test_yields_results_in_input_order(
        self, stub_graph, session, settled_script
    ) -> None:
        stub_graph.add_script("b.mkv", settled_script({"title": "B"}))
        stub_graph.add_script("a.mkv", settled_script({"title": "A"}))

        results = list(iter_file_tags(session, ["b.mkv", "a.mkv"]))

        assert results == [
            FileTags(path="b.mkv", tags={"title": "B"}),
            FileTags(path="a.mkv", tags={"title": "A"}),
        ]

    def test_stops_at_first_failure(
        self, stub_graph, session, settled_script
    ) -> None:
        """Files after the failing one are never started."""
        stub_graph.add_script("a.mkv", settled_script({"title": "A"}))
        stub_graph.add_script("b.mkv", [ErrorMessage(SRC_PATH, "Broken")])
        stub_graph.add_script("c.mkv", settled_script({"title": "C"}))

        seen = []
        with pytest.raises(NodeError) as exc_info:
            for result in iter_file_tags(session, ["a.mkv", "b.mkv", "c.mkv"]):
                seen.append(result.path)

        assert seen == ["a.mkv"]
        assert exc_info.value.path == "b.mkv"
        assert stub_graph.locations == ["a.mkv", "b.mkv"]

    def test_is_lazy(self, stub_graph, session, settled_script) -> None:
        """Nothing is read until the iterator is consumed."""
        stub_graph.add_script("a.mkv", settled_script({"title": "A"}))

        iterator = iter_file_tags(session, ["a.mkv"])
        assert stub_graph.locations == []

        next(iterator)
        assert stub_graph.locations == ["a.mkv"]

    def test_accepts_path_objects(
        self, stub_graph, session, settled_script
    ) -> None:
        stub_graph.add_script("media/a.mkv", settled_script({"title": "A"}))

        [result] = iter_file_tags(session, [Path("media/a.mkv")])

        assert result.path == "media/a.mkv"
        assert result.tags == {"title": "A"}

    def test_same_file_twice(self, stub_graph, session, settled_script) -> None:
        """Repeated paths are processed again with identical results."""
        stub_graph.add_script("a.mkv", settled_script({"title": "A"}, pads=2))

        first, second = iter_file_tags(session, ["a.mkv", "a.mkv"])

        assert first == second


class TestExtractTags:
    """Tests for extract_tags()."""

    def test_returns_list(self, stub_graph, session, settled_script) -> None:
        stub_graph.add_script("a.mkv", settled_script({"title": "A"}))
        stub_graph.add_script("b.mkv", settled_script())

        results = extract_tags(session, ["a.mkv", "b.mkv"])

        assert [r.path for r in results] == ["a.mkv", "b.mkv"]
        assert results[1].tags == {}

    def test_empty_input(self, session) -> None:
        assert extract_tags(session, []) == []

    def test_failure_propagates(self, stub_graph, session) -> None:
        stub_graph.add_script("a.mkv", [ErrorMessage(SRC_PATH, "Broken")])

        with pytest.raises(NodeError):
            extract_tags(session, ["a.mkv"])
