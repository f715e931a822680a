"""Observer that records every engine event for later analysis."""

from __future__ import annotations

from typing import Optional

from engine_verifier.models.events import Event
from engine_verifier.models.state import GameState
from engine_verifier.trace import ObservedEvent


class ObserverRecorder:
    """Records (state, event) pairs verbatim, in emission order.

    One recorder serves exactly one game.
    """

    def __init__(self) -> None:
        self._events: list[ObservedEvent] = []

    def notify_event(self, state: Optional[GameState], event: Event) -> None:
        self._events.append(ObservedEvent(state=state, event=event))

    @property
    def events(self) -> tuple[ObservedEvent, ...]:
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)
