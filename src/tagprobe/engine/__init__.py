"""Media engine boundary for tagprobe.

This module provides the graph abstraction the session drives:

- MediaGraph: Protocol defining the engine interface
- GstMediaGraph: Production implementation using GStreamer
- StubMediaGraph: Scripted implementation for testing

Bus messages delivered by a MediaGraph:
- TagMessage, ErrorMessage, EndOfStreamMessage, AsyncDoneMessage
- PadAddedMessage: a decoder pad waiting for a link decision
"""

from tagprobe.engine.gstreamer import GstMediaGraph, is_available
from tagprobe.engine.interface import (
    SESSION_MESSAGE_KINDS,
    AsyncDoneMessage,
    BusMessage,
    EndOfStreamMessage,
    ErrorMessage,
    MediaGraph,
    MessageKind,
    PadAddedMessage,
    PlaybackState,
    StateChange,
    TagEntry,
    TagMessage,
)
from tagprobe.engine.stub import StubMediaGraph, StubScript

__all__ = [
    "MediaGraph",
    "GstMediaGraph",
    "StubMediaGraph",
    "StubScript",
    "is_available",
    # Messages
    "BusMessage",
    "TagMessage",
    "TagEntry",
    "ErrorMessage",
    "EndOfStreamMessage",
    "AsyncDoneMessage",
    "PadAddedMessage",
    "MessageKind",
    "SESSION_MESSAGE_KINDS",
    # States
    "PlaybackState",
    "StateChange",
]
