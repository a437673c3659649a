"""MediaGraph interface for the media engine boundary.

The session never talks to GStreamer directly. It drives a MediaGraph,
which exposes exactly the capabilities tag extraction needs: a mutable
source location, playback state transitions, dynamic pad linking, and a
blocking filtered receive over an ordered message bus.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Union


class PlaybackState(Enum):
    """Playback states of a media graph."""

    NULL = "null"
    READY = "ready"
    PAUSED = "paused"
    PLAYING = "playing"


class StateChange(Enum):
    """Outcome of a playback state transition request."""

    SUCCESS = "success"
    ASYNC = "async"
    NO_PREROLL = "no-preroll"
    FAILURE = "failure"


class MessageKind(Enum):
    """Bus message kinds the session filters for."""

    TAG = "tag"
    ERROR = "error"
    EOS = "eos"
    ASYNC_DONE = "async-done"
    PAD_ADDED = "pad-added"


@dataclass(frozen=True)
class TagEntry:
    """A single tag as reported by the engine.

    ``value`` is the engine's native Python value; the session decides
    whether it can be represented as a string.
    """

    name: str
    value: Any
    type_name: str = "gchararray"


@dataclass(frozen=True)
class TagMessage:
    entries: tuple[TagEntry, ...] = field(default_factory=tuple)

    kind = MessageKind.TAG


@dataclass(frozen=True)
class ErrorMessage:
    source_path: str | None
    description: str
    details: str | None = None

    kind = MessageKind.ERROR


@dataclass(frozen=True)
class EndOfStreamMessage:
    kind = MessageKind.EOS


@dataclass(frozen=True)
class AsyncDoneMessage:
    kind = MessageKind.ASYNC_DONE


@dataclass(frozen=True)
class PadAddedMessage:
    """A decoder exposed a new output pad.

    The pad stays blocked until the session either links it or releases it.
    """

    pad_id: int
    pad_name: str
    caps: str | None = None

    kind = MessageKind.PAD_ADDED


BusMessage = Union[
    TagMessage, ErrorMessage, EndOfStreamMessage, AsyncDoneMessage, PadAddedMessage
]

# Every kind the session's drain loop receives.
SESSION_MESSAGE_KINDS: frozenset[MessageKind] = frozenset(MessageKind)


class MediaGraph(Protocol):
    """Protocol for a source -> decoder -> discard-sink graph.

    Implementations build the graph once and are reused for every file.
    The dynamic decoder -> sink link is never made by the implementation
    itself: new decoder pads are announced as PadAddedMessage on the bus
    and the caller decides which one to link.
    """

    def set_location(self, path: str) -> None:
        """Point the source element at a new file path."""
        ...

    def set_state(self, state: PlaybackState) -> StateChange:
        """Request a playback state transition."""
        ...

    def pop_message(
        self,
        kinds: frozenset[MessageKind],
        timeout: float | None = None,
    ) -> BusMessage | None:
        """Receive the next bus message whose kind is in ``kinds``.

        Args:
            kinds: Message kinds to receive; others are dropped.
            timeout: Seconds to wait. None blocks indefinitely, 0 polls.

        Returns:
            The next matching message, or None if none arrived.
        """
        ...

    def link_pad(self, pad_id: int) -> bool:
        """Link an announced decoder pad to the sink input pad.

        Returns:
            True if the link succeeded.
        """
        ...

    def release_pad(self, pad_id: int) -> None:
        """Let data flow through an announced pad, linked or not."""
        ...

    def close(self) -> None:
        """Tear the graph down. The graph is unusable afterwards."""
        ...
