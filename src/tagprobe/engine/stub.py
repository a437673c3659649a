"""Stub implementation of MediaGraph for testing."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from tagprobe.engine.interface import (
    BusMessage,
    MessageKind,
    PlaybackState,
    StateChange,
)


@dataclass
class StubScript:
    """What the stub graph does for one file path.

    Attributes:
        messages: Bus messages delivered, in order, once the graph pauses.
        state_change: Result returned for the PAUSED transition.
    """

    messages: list[BusMessage] = field(default_factory=list)
    state_change: StateChange = StateChange.ASYNC


class StubMediaGraph:
    """Scripted in-memory MediaGraph.

    Each file path maps to a StubScript. Requesting PAUSED loads the
    script for the current location onto the bus; requesting NULL clears
    the bus and the sink link, the same way a real pipeline flushes on
    teardown (with refuse_null it still flushes but reports FAILURE).
    Every call is recorded so tests can assert on the protocol.
    """

    def __init__(
        self,
        scripts: dict[str, StubScript | Iterable[BusMessage]] | None = None,
        failing_pads: Iterable[int] = (),
        refuse_null: bool = False,
    ) -> None:
        self._scripts: dict[str, StubScript] = {}
        for path, script in (scripts or {}).items():
            self.add_script(path, script)
        self._failing_pads = set(failing_pads)
        self._refuse_null = refuse_null
        self._bus: deque[BusMessage] = deque()

        self.location: str | None = None
        self.state = PlaybackState.NULL
        self.linked_pad: int | None = None
        self.state_history: list[PlaybackState] = []
        self.locations: list[str] = []
        self.link_attempts: list[int] = []
        self.released_pads: list[int] = []
        self.closed = False

    def add_script(
        self, path: str, script: StubScript | Iterable[BusMessage]
    ) -> None:
        if not isinstance(script, StubScript):
            script = StubScript(messages=list(script))
        self._scripts[path] = script

    def set_location(self, path: str) -> None:
        self.location = path
        self.locations.append(path)

    def set_state(self, state: PlaybackState) -> StateChange:
        self.state_history.append(state)
        if state is PlaybackState.NULL:
            self._bus.clear()
            self.linked_pad = None
            if self._refuse_null:
                return StateChange.FAILURE
            self.state = state
            return StateChange.SUCCESS

        script = self._scripts.get(self.location or "", StubScript())
        if script.state_change is StateChange.FAILURE:
            # A failed transition leaves only error messages behind
            self._bus.extend(
                m for m in script.messages if m.kind is MessageKind.ERROR
            )
            return StateChange.FAILURE

        self.state = state
        self._bus.extend(script.messages)
        return script.state_change

    def pop_message(
        self,
        kinds: frozenset[MessageKind],
        timeout: float | None = None,
    ) -> BusMessage | None:
        while self._bus:
            message = self._bus.popleft()
            if message.kind in kinds:
                return message
        return None

    def link_pad(self, pad_id: int) -> bool:
        self.link_attempts.append(pad_id)
        if self.linked_pad is not None or pad_id in self._failing_pads:
            return False
        self.linked_pad = pad_id
        return True

    def release_pad(self, pad_id: int) -> None:
        self.released_pads.append(pad_id)

    def close(self) -> None:
        self.closed = True
        self.state = PlaybackState.NULL
