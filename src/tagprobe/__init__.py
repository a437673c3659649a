"""tagprobe - print the metadata tags embedded in media files."""

from tagprobe.driver import FileTags, extract_tags, iter_file_tags
from tagprobe.errors import (
    BusFailureError,
    EngineUnavailableError,
    NodeError,
    PrematureEndOfStreamError,
    ProtocolViolationError,
    StateChangeError,
    TagExtractionError,
    TagValueDecodeError,
)
from tagprobe.session import PipelineSession, SessionState, SinkLink, TagMap

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Session
    "PipelineSession",
    "SessionState",
    "SinkLink",
    "TagMap",
    # Driver
    "FileTags",
    "extract_tags",
    "iter_file_tags",
    # Errors
    "TagExtractionError",
    "BusFailureError",
    "NodeError",
    "PrematureEndOfStreamError",
    "TagValueDecodeError",
    "StateChangeError",
    "EngineUnavailableError",
    "ProtocolViolationError",
]
