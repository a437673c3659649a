"""GStreamer-based implementation of the MediaGraph protocol."""

from __future__ import annotations

import functools
import itertools
import logging
import operator
import threading
from collections.abc import Iterator
from typing import Any

from tagprobe.engine.interface import (
    AsyncDoneMessage,
    BusMessage,
    EndOfStreamMessage,
    ErrorMessage,
    MessageKind,
    PadAddedMessage,
    PlaybackState,
    StateChange,
    TagEntry,
    TagMessage,
)
from tagprobe.errors import EngineUnavailableError, ProtocolViolationError

logger = logging.getLogger(__name__)

# Name of the application message structure posted for each new decoder pad
PAD_ADDED_STRUCTURE = "tagprobe-pad-added"


def load_gstreamer() -> tuple[Any, Any]:
    """Import and initialize GStreamer through PyGObject.

    Returns:
        Tuple of the (Gst, GObject) introspection modules.

    Raises:
        EngineUnavailableError: If PyGObject or the GStreamer typelib is missing.
    """
    try:
        import gi

        gi.require_version("Gst", "1.0")
        from gi.repository import GObject, Gst
    except (ImportError, ValueError) as e:
        raise EngineUnavailableError(
            "GStreamer is not available. Install PyGObject and the GStreamer 1.x "
            f"introspection data to extract tags ({e})."
        ) from e

    if not Gst.is_initialized():
        Gst.init(None)
    return Gst, GObject


def is_available() -> bool:
    """Check whether GStreamer can be loaded.

    Returns:
        True if PyGObject and GStreamer are importable, False otherwise.
    """
    try:
        load_gstreamer()
    except EngineUnavailableError:
        return False
    return True


class GstMediaGraph:
    """filesrc -> decodebin -> fakesink graph built on GStreamer.

    New decoder pads are blocked with a pad probe and announced on the
    pipeline bus as an application message, so the decision to link them
    is made by whoever drains the bus, in bus order.
    """

    def __init__(
        self,
        source_element: str = "filesrc",
        decoder_element: str = "decodebin",
        sink_element: str = "fakesink",
    ) -> None:
        """Build the graph.

        Args:
            source_element: Factory name of the source element.
            decoder_element: Factory name of the auto-plugging decoder.
            sink_element: Factory name of the discarding sink.

        Raises:
            EngineUnavailableError: If GStreamer or any element is missing,
                or the static source -> decoder link fails.
        """
        Gst, GObject = load_gstreamer()
        self._gst = Gst
        self._gobject = GObject

        self._pipeline = Gst.Pipeline.new("tagprobe")
        self._source = self._make_element(source_element, "src")
        self._decoder = self._make_element(decoder_element, "decoder")
        self._sink = self._make_element(sink_element, "sink")
        for element in (self._source, self._decoder, self._sink):
            self._pipeline.add(element)

        self._sink_pad = self._sink.get_static_pad("sink")
        if self._sink_pad is None:
            raise EngineUnavailableError(
                f"Element '{sink_element}' has no static sink pad"
            )
        if not self._source.link(self._decoder):
            raise EngineUnavailableError(
                f"Could not link '{source_element}' to '{decoder_element}'"
            )

        # pad_id -> (pad, blocking probe id); written from streaming threads
        self._pads: dict[int, tuple[Any, int]] = {}
        self._pads_lock = threading.Lock()
        self._pad_ids = itertools.count(1)
        self._pad_added_handler = self._decoder.connect(
            "pad-added", self._on_pad_added
        )

        self._bus = self._pipeline.get_bus()
        self._states = {
            PlaybackState.NULL: Gst.State.NULL,
            PlaybackState.READY: Gst.State.READY,
            PlaybackState.PAUSED: Gst.State.PAUSED,
            PlaybackState.PLAYING: Gst.State.PLAYING,
        }
        self._state_changes = {
            Gst.StateChangeReturn.SUCCESS: StateChange.SUCCESS,
            Gst.StateChangeReturn.ASYNC: StateChange.ASYNC,
            Gst.StateChangeReturn.NO_PREROLL: StateChange.NO_PREROLL,
            Gst.StateChangeReturn.FAILURE: StateChange.FAILURE,
        }
        self._message_types = {
            MessageKind.TAG: Gst.MessageType.TAG,
            MessageKind.ERROR: Gst.MessageType.ERROR,
            MessageKind.EOS: Gst.MessageType.EOS,
            MessageKind.ASYNC_DONE: Gst.MessageType.ASYNC_DONE,
            MessageKind.PAD_ADDED: Gst.MessageType.APPLICATION,
        }
        self._closed = False

        logger.debug(
            "Built pipeline %s ! %s ! %s",
            source_element,
            decoder_element,
            sink_element,
        )

    def _make_element(self, factory_name: str, name: str) -> Any:
        element = self._gst.ElementFactory.make(factory_name, name)
        if element is None:
            raise EngineUnavailableError(
                f"GStreamer element '{factory_name}' is not available. "
                "Check that the GStreamer plugins providing it are installed."
            )
        return element

    def set_location(self, path: str) -> None:
        self._source.set_property("location", path)

    def set_state(self, state: PlaybackState) -> StateChange:
        result = self._pipeline.set_state(self._states[state])
        if state is PlaybackState.NULL:
            self._release_all_pads()
        return self._state_changes[result]

    def pop_message(
        self,
        kinds: frozenset[MessageKind],
        timeout: float | None = None,
    ) -> BusMessage | None:
        Gst = self._gst
        mask = functools.reduce(
            operator.or_, (self._message_types[kind] for kind in kinds)
        )
        if timeout is None:
            gst_timeout = Gst.CLOCK_TIME_NONE
        else:
            gst_timeout = int(timeout * Gst.SECOND)

        while True:
            msg = self._bus.timed_pop_filtered(gst_timeout, mask)
            if msg is None:
                return None
            message = self._convert_message(msg)
            if message is not None:
                return message

    def link_pad(self, pad_id: int) -> bool:
        with self._pads_lock:
            entry = self._pads.get(pad_id)
        if entry is None:
            return False
        pad, _ = entry
        if self._sink_pad.is_linked():
            return False

        result = pad.link(self._sink_pad)
        if result != self._gst.PadLinkReturn.OK:
            logger.warning(
                "Could not link decoder pad %s to sink: %s",
                pad.get_name(),
                result.value_nick,
            )
            return False
        return True

    def release_pad(self, pad_id: int) -> None:
        with self._pads_lock:
            entry = self._pads.pop(pad_id, None)
        if entry is not None:
            pad, probe_id = entry
            pad.remove_probe(probe_id)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._pipeline.set_state(self._gst.State.NULL)
        self._release_all_pads()
        self._decoder.disconnect(self._pad_added_handler)

    def _release_all_pads(self) -> None:
        with self._pads_lock:
            entries = list(self._pads.values())
            self._pads.clear()
        for pad, probe_id in entries:
            pad.remove_probe(probe_id)

    def _on_pad_added(self, element: Any, pad: Any) -> None:
        """Block a new decoder pad and announce it on the bus.

        Runs on a GStreamer streaming thread.
        """
        Gst = self._gst
        probe_id = pad.add_probe(
            Gst.PadProbeType.BLOCK_DOWNSTREAM, self._hold_pad
        )
        with self._pads_lock:
            pad_id = next(self._pad_ids)
            self._pads[pad_id] = (pad, probe_id)

        caps = pad.get_current_caps() or pad.query_caps(None)
        structure = Gst.Structure.new_empty(PAD_ADDED_STRUCTURE)
        structure.set_value("pad-id", str(pad_id))
        structure.set_value("pad-name", pad.get_name())
        structure.set_value("caps", caps.to_string() if caps is not None else "")
        element.post_message(Gst.Message.new_application(element, structure))

    def _convert_message(self, msg: Any) -> BusMessage | None:
        Gst = self._gst
        msg_type = msg.type

        if msg_type == Gst.MessageType.TAG:
            return TagMessage(entries=tuple(self._tag_entries(msg.parse_tag())))

        if msg_type == Gst.MessageType.ERROR:
            err, debug = msg.parse_error()
            return ErrorMessage(
                source_path=msg.src.get_path_string() if msg.src else None,
                description=err.message,
                details=debug,
            )

        if msg_type == Gst.MessageType.EOS:
            return EndOfStreamMessage()

        if msg_type == Gst.MessageType.ASYNC_DONE:
            return AsyncDoneMessage()

        if msg_type == Gst.MessageType.APPLICATION:
            structure = msg.get_structure()
            if structure is None or structure.get_name() != PAD_ADDED_STRUCTURE:
                logger.debug("Ignoring foreign application message")
                return None
            return PadAddedMessage(
                pad_id=int(structure.get_value("pad-id")),
                pad_name=structure.get_value("pad-name"),
                caps=structure.get_value("caps") or None,
            )

        raise ProtocolViolationError(
            f"Unexpected bus message type: {Gst.message_type_get_name(msg_type)}"
        )

    def _tag_entries(self, taglist: Any) -> Iterator[TagEntry]:
        """Yield one entry per tag name in a GstTagList.

        String tags with several values are merged by GStreamer into one
        comma-separated string; other tags report their first value.
        """
        Gst = self._gst
        for index in range(taglist.n_tags()):
            name = taglist.nth_tag_name(index)
            tag_type = Gst.tag_get_type(name)
            if tag_type == self._gobject.TYPE_STRING:
                found, value = taglist.get_string(name)
                yield TagEntry(name, value if found else None, tag_type.name)
            else:
                yield TagEntry(name, taglist.get_value_index(name, 0), tag_type.name)

    def _hold_pad(self, pad: Any, info: Any) -> Any:
        return self._gst.PadProbeReturn.OK
