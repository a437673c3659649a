"""Pipeline session: one reusable decode graph, driven once per file.

A session owns a single source -> decoder -> discard-sink graph for its
whole lifetime. For each file it re-targets the source, pauses the graph
so it prerolls, and drains the bus until the graph settles (success) or
reports an error, end of stream, or a bus failure. Whatever happens, the
graph is returned to NULL before the call returns, so the next file starts
from a clean state.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import TYPE_CHECKING

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
from tagprobe.errors import (
    BusFailureError,
    NodeError,
    PrematureEndOfStreamError,
    ProtocolViolationError,
    StateChangeError,
    TagExtractionError,
    TagValueDecodeError,
)

if TYPE_CHECKING:
    from tagprobe.config.models import TagProbeConfig

logger = logging.getLogger(__name__)

# Tag name -> string value; the last value seen for a name wins
TagMap = dict[str, str]


class SessionState(Enum):
    """Where a session is in its per-file cycle."""

    IDLE = "idle"
    PAUSED = "paused"


class SinkLink(Enum):
    """Whether a decoder pad currently feeds the discard sink."""

    UNLINKED = "unlinked"
    LINKED = "linked"


def coerce_tag_value(entry: TagEntry, serialize_non_string: bool = False) -> str:
    """Convert a tag value to its string representation.

    Args:
        entry: Tag entry from the engine.
        serialize_non_string: Also accept booleans, numbers and date-times,
            serialized to text. Other types are still rejected.

    Returns:
        The tag value as a string.

    Raises:
        TagValueDecodeError: If the value has no string representation.
    """
    value = entry.value
    if isinstance(value, str):
        return value

    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise TagValueDecodeError(entry.name, value, str(e)) from e

    if serialize_non_string:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        # GstDateTime, datetime.date and friends
        for method_name in ("to_iso8601_string", "isoformat"):
            method = getattr(value, method_name, None)
            if callable(method):
                text = method()
                if isinstance(text, str):
                    return text
        # GLib.Date, used for the "date" tag
        if all(
            callable(getattr(value, name, None))
            for name in ("get_year", "get_month", "get_day")
        ):
            return (
                f"{int(value.get_year()):04d}-{int(value.get_month()):02d}-"
                f"{int(value.get_day()):02d}"
            )

    raise TagValueDecodeError(
        entry.name, value, f"value of type {entry.type_name} is not a string"
    )


class PipelineSession:
    """Reusable tag-extraction session over a MediaGraph.

    Not safe for concurrent use: the graph's source location and the sink
    link state are shared by every call, so calls must be sequential.

    Example:
        with PipelineSession.create() as session:
            tags = session.resolve_tags("movie.mkv")
    """

    def __init__(
        self,
        graph: MediaGraph,
        *,
        serialize_non_string: bool = False,
        receive_timeout: float | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            graph: The media graph to drive. Built once by the caller.
            serialize_non_string: Accept non-string tag values by
                serializing them (see coerce_tag_value).
            receive_timeout: Seconds to wait for each bus message. None,
                the default, blocks indefinitely.
        """
        self._graph = graph
        self._serialize_non_string = serialize_non_string
        self._receive_timeout = receive_timeout
        self._state = SessionState.IDLE
        self._sink_link = SinkLink.UNLINKED
        self._path: str | None = None

    @classmethod
    def create(cls, config: TagProbeConfig | None = None) -> PipelineSession:
        """Build a session over a GStreamer graph.

        Args:
            config: Configuration for element names and tag coercion.
                Defaults apply if None.

        Raises:
            EngineUnavailableError: If GStreamer or an element is missing.
        """
        from tagprobe.config.models import TagProbeConfig
        from tagprobe.engine.gstreamer import GstMediaGraph

        config = config or TagProbeConfig()
        graph = GstMediaGraph(
            source_element=config.pipeline.source_element,
            decoder_element=config.pipeline.decoder_element,
            sink_element=config.pipeline.sink_element,
        )
        return cls(graph, serialize_non_string=config.tags.serialize_non_string)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def sink_link(self) -> SinkLink:
        return self._sink_link

    @property
    def path(self) -> str | None:
        """The file the source currently points at."""
        return self._path

    def set_input(self, path: str | os.PathLike[str]) -> None:
        """Point the source element at a new file."""
        self._path = os.fspath(path)
        self._graph.set_location(self._path)

    def run_to_settle(self) -> TagMap:
        """Preroll the graph and collect tags until it settles.

        Blocks until the graph settles or fails; there is no timeout
        unless one was given at construction.

        Returns:
            Tags seen before the graph settled.

        Raises:
            TagExtractionError: Any failure for the current file. The
                ``path`` attribute is set to that file.
            ProtocolViolationError: An unexpected message kind arrived.
        """
        if self._path is None:
            raise RuntimeError("set_input() must be called before run_to_settle()")

        path = self._path
        try:
            self._pause()
            tags = self._drain()
        except TagExtractionError as e:
            if e.path is None:
                e.path = path
            raise
        finally:
            self.reset()

        logger.debug("Resolved %d tags for %s", len(tags), path)
        return tags

    def resolve_tags(self, path: str | os.PathLike[str]) -> TagMap:
        """Resolve the tags of a single file.

        Args:
            path: File to read.

        Returns:
            Mapping of tag name to string value.

        Raises:
            TagExtractionError: If the file's tags cannot be resolved.
        """
        self.set_input(path)
        return self.run_to_settle()

    def reset(self) -> None:
        """Return the graph to NULL so it can take the next file."""
        result = self._graph.set_state(PlaybackState.NULL)
        if result is StateChange.FAILURE:
            logger.warning(
                "Pipeline refused to return to NULL after %s; "
                "later files may fail",
                self._path,
            )
        self._state = SessionState.IDLE
        self._sink_link = SinkLink.UNLINKED

    def close(self) -> None:
        """Tear down the graph. The session is unusable afterwards."""
        self._graph.close()
        self._state = SessionState.IDLE

    def __enter__(self) -> PipelineSession:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _pause(self) -> None:
        result = self._graph.set_state(PlaybackState.PAUSED)
        logger.debug("Requested PAUSED for %s: %s", self._path, result.value)
        if result is not StateChange.FAILURE:
            self._state = SessionState.PAUSED
            return

        # The element that refused the transition normally posted why
        message = self._graph.pop_message(frozenset({MessageKind.ERROR}), timeout=0)
        if isinstance(message, ErrorMessage):
            raise self._node_error(message)
        raise StateChangeError(PlaybackState.PAUSED)

    def _receive(self) -> BusMessage | None:
        return self._graph.pop_message(
            SESSION_MESSAGE_KINDS, timeout=self._receive_timeout
        )

    def _drain(self) -> TagMap:
        tags: TagMap = {}
        while True:
            message = self._receive()
            if message is None:
                raise BusFailureError("No message from bus")

            if isinstance(message, TagMessage):
                self._merge_tags(tags, message)
            elif isinstance(message, PadAddedMessage):
                self._on_pad_added(message)
            elif isinstance(message, AsyncDoneMessage):
                logger.debug("Pipeline settled for %s", self._path)
                return tags
            elif isinstance(message, ErrorMessage):
                raise self._node_error(message)
            elif isinstance(message, EndOfStreamMessage):
                raise PrematureEndOfStreamError(
                    "Reached end of stream before the pipeline settled"
                )
            else:
                raise ProtocolViolationError(f"Unexpected bus message: {message!r}")

    def _merge_tags(self, tags: TagMap, message: TagMessage) -> None:
        for entry in message.entries:
            value = coerce_tag_value(entry, self._serialize_non_string)
            if entry.name in tags and tags[entry.name] != value:
                logger.debug(
                    "Tag %s changed from %r to %r", entry.name, tags[entry.name], value
                )
            tags[entry.name] = value

    def _on_pad_added(self, message: PadAddedMessage) -> None:
        try:
            if self._sink_link is SinkLink.LINKED:
                logger.debug(
                    "Sink already linked, leaving pad %s unlinked", message.pad_name
                )
            elif self._graph.link_pad(message.pad_id):
                self._sink_link = SinkLink.LINKED
                logger.debug(
                    "Linked pad %s to sink (caps: %s)", message.pad_name, message.caps
                )
            else:
                logger.debug("Pad %s could not be linked to sink", message.pad_name)
        finally:
            self._graph.release_pad(message.pad_id)

    @staticmethod
    def _node_error(message: ErrorMessage) -> NodeError:
        return NodeError(
            source_path=message.source_path,
            description=message.description,
            details=message.details,
        )
