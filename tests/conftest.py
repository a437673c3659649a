"""Shared test fixtures for tagprobe."""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from tagprobe.engine import (
    AsyncDoneMessage,
    BusMessage,
    PadAddedMessage,
    StubMediaGraph,
    TagEntry,
    TagMessage,
)
from tagprobe.session import PipelineSession


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path):
    """Keep tests away from the user's config file and TAGPROBE_* variables.

    Points TAGPROBE_CONFIG_PATH at a (missing) file in the test's temp dir,
    which tests may create to exercise config loading.
    """
    env = {k: v for k, v in os.environ.items() if not k.startswith("TAGPROBE_")}
    config_path = tmp_path / "config.toml"
    env["TAGPROBE_CONFIG_PATH"] = str(config_path)
    with patch.dict(os.environ, env, clear=True):
        yield config_path


@pytest.fixture
def tag_message() -> Callable[[dict[str, Any]], TagMessage]:
    """Factory for a TagMessage from a {name: value} mapping."""

    def _make(tags: dict[str, Any]) -> TagMessage:
        return TagMessage(
            entries=tuple(
                TagEntry(
                    name,
                    value,
                    "gchararray" if isinstance(value, str) else type(value).__name__,
                )
                for name, value in tags.items()
            )
        )

    return _make


@pytest.fixture
def settled_script(tag_message) -> Callable[..., list[BusMessage]]:
    """Factory for the messages of a file that prerolls successfully.

    Usage:
        settled_script({"title": "X"}, {"artist": "Y"}, pads=2)
    """

    def _make(*tag_maps: dict[str, Any], pads: int = 1) -> list[BusMessage]:
        messages: list[BusMessage] = [
            PadAddedMessage(pad_id=i, pad_name=f"src_{i - 1}")
            for i in range(1, pads + 1)
        ]
        messages.extend(tag_message(tags) for tags in tag_maps)
        messages.append(AsyncDoneMessage())
        return messages

    return _make


@pytest.fixture
def stub_graph() -> StubMediaGraph:
    """An empty stub graph; tests add scripts per path."""
    return StubMediaGraph()


@pytest.fixture
def session(stub_graph: StubMediaGraph) -> PipelineSession:
    """A session over the stub graph with default (strict) tag coercion."""
    return PipelineSession(stub_graph)
