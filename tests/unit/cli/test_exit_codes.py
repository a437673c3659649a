"""Tests for cli/exit_codes.py module and error-to-exit-code mapping."""

import pytest

from tagprobe.cli import exit_code_for
from tagprobe.cli.exit_codes import ExitCode
from tagprobe.engine import PlaybackState
from tagprobe.errors import (
    BusFailureError,
    NodeError,
    PrematureEndOfStreamError,
    StateChangeError,
    TagExtractionError,
    TagValueDecodeError,
)


class TestExitCode:
    """Tests for ExitCode enum."""

    def test_success_is_zero(self) -> None:
        assert ExitCode.SUCCESS == 0

    def test_exit_codes_are_unique(self) -> None:
        """All exit codes should have unique values."""
        values = [int(code) for code in ExitCode]
        assert len(values) == len(set(values))

    def test_exit_code_ranges(self) -> None:
        """Exit codes should be within expected ranges."""
        assert 10 <= ExitCode.CONFIG_ERROR <= 19
        assert 30 <= ExitCode.ENGINE_NOT_AVAILABLE <= 39
        for code in (
            ExitCode.BUS_FAILURE,
            ExitCode.NODE_ERROR,
            ExitCode.PREMATURE_EOS,
            ExitCode.TAG_DECODE_ERROR,
            ExitCode.STATE_CHANGE_FAILED,
        ):
            assert 40 <= code <= 49


class TestExitCodeFor:
    """Tests for exit_code_for()."""

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (BusFailureError("No message from bus"), ExitCode.BUS_FAILURE),
            (NodeError("/pipeline/src", "Not found"), ExitCode.NODE_ERROR),
            (PrematureEndOfStreamError("eos"), ExitCode.PREMATURE_EOS),
            (TagValueDecodeError("bitrate", 1, "int"), ExitCode.TAG_DECODE_ERROR),
            (StateChangeError(PlaybackState.PAUSED), ExitCode.STATE_CHANGE_FAILED),
        ],
        ids=["bus", "node", "eos", "decode", "state"],
    )
    def test_maps_each_error(
        self, error: TagExtractionError, expected: ExitCode
    ) -> None:
        assert exit_code_for(error) is expected

    def test_unknown_subclass_is_general_error(self) -> None:
        assert exit_code_for(TagExtractionError("odd")) is ExitCode.GENERAL_ERROR
