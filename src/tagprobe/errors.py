"""Exceptions raised while extracting tags."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tagprobe.engine.interface import PlaybackState


class TagExtractionError(Exception):
    """Raised when tags cannot be resolved for a file.

    Attributes:
        path: The file being processed, once known.
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class BusFailureError(TagExtractionError):
    """The blocking bus receive returned without a message."""


class NodeError(TagExtractionError):
    """A graph element posted an error message."""

    def __init__(
        self,
        source_path: str | None,
        description: str,
        details: str | None = None,
        path: str | None = None,
    ) -> None:
        super().__init__(
            f"Error from {source_path or '<unknown element>'}: {description}"
            + (f" ({details})" if details else ""),
            path=path,
        )
        self.source_path = source_path
        self.description = description
        self.details = details


class PrematureEndOfStreamError(TagExtractionError):
    """End of stream arrived before the pipeline finished prerolling."""


class TagValueDecodeError(TagExtractionError):
    """A tag value has no string representation."""

    def __init__(
        self,
        tag_name: str,
        raw_value: Any,
        reason: str,
        path: str | None = None,
    ) -> None:
        super().__init__(
            f"Failed to get string value from tag({tag_name}): {raw_value!r} "
            f"({reason})",
            path=path,
        )
        self.tag_name = tag_name
        self.raw_value = raw_value


class StateChangeError(TagExtractionError):
    """The engine refused a playback state transition."""

    def __init__(self, state: PlaybackState, path: str | None = None) -> None:
        super().__init__(
            f"Failed to change pipeline state to {state.value}", path=path
        )
        self.state = state


class EngineUnavailableError(Exception):
    """Raised when the media engine or one of its elements is missing."""

    pass


class ProtocolViolationError(RuntimeError):
    """An unexpected message kind came off the bus.

    Signals a bug in the engine binding rather than a bad input file.
    Not a TagExtractionError, so per-file error handling never sees it.
    """

    pass
