"""Centralized exit codes for the tagprobe CLI.

Exit code ranges:
    0: Success
    1-9: General errors
    10-19: Configuration errors
    30-39: Engine/dependency errors
    40-49: Extraction errors
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes for the tagprobe CLI."""

    # Success (0)
    SUCCESS = 0

    # General errors (1-9)
    GENERAL_ERROR = 1

    # Configuration errors (10-19)
    CONFIG_ERROR = 11

    # Engine/dependency errors (30-39)
    ENGINE_NOT_AVAILABLE = 30

    # Extraction errors (40-49)
    BUS_FAILURE = 40
    NODE_ERROR = 41
    PREMATURE_EOS = 42
    TAG_DECODE_ERROR = 43
    STATE_CHANGE_FAILED = 44
