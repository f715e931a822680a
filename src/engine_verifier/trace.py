"""Trace records for verified games.

Records everything one game revealed to the verifier:
- Every decision each player was asked to make (DecisionRecord)
- Every event the engine emitted (ObservedEvent)
- The final result, or the error the engine raised instead
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from engine_verifier.models.decisions import Decision
from engine_verifier.models.events import Event
from engine_verifier.models.state import GameResult, GameState


@dataclass(frozen=True)
class DecisionRecord:
    """A single make_decision call captured by a VerifierPlayer."""

    state: GameState
    options: tuple[Decision, ...]
    chosen: Decision
    triggering_event: Optional[Event] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.model_dump(mode="json"),
            "options": [o.model_dump(mode="json") for o in self.options],
            "chosen": self.chosen.model_dump(mode="json"),
            "triggering_event": (
                self.triggering_event.model_dump(mode="json")
                if self.triggering_event is not None
                else None
            ),
        }


@dataclass(frozen=True)
class ObservedEvent:
    """A single event captured by the recorder, with the state at that moment."""

    state: Optional[GameState]
    event: Event

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.model_dump(mode="json") if self.state is not None else None,
            "event": self.event.model_dump(mode="json"),
        }


@dataclass(frozen=True)
class GameTrace:
    """Complete trace of a single game execution.

    Attributes:
        game_index: Which game (0-based) this trace belongs to
        num_players: Number of players seated
        observer_events: Events in emission order
        player_decisions: Player name -> decisions in call order
        result: Final result (None if the game failed)
        error: Exception the engine raised (None if the game completed)
    """

    game_index: int
    num_players: int
    observer_events: tuple[ObservedEvent, ...] = ()
    player_decisions: Mapping[str, tuple[DecisionRecord, ...]] = field(default_factory=dict)
    result: Optional[GameResult] = None
    error: Optional[BaseException] = None

    def __post_init__(self) -> None:
        # Read-only copy so the trace cannot change once built.
        object.__setattr__(self, "player_decisions", MappingProxyType(dict(self.player_decisions)))

    @property
    def completed_successfully(self) -> bool:
        """Whether the game finished with a result and no error."""
        return self.error is None and self.result is not None

    def events_of(self, kind: type) -> list[Any]:
        """All events of the given class, in emission order."""
        return [oe.event for oe in self.observer_events if isinstance(oe.event, kind)]

    def first_event_of(self, kind: type) -> Optional[Any]:
        for oe in self.observer_events:
            if isinstance(oe.event, kind):
                return oe.event
        return None

    def last_event_of(self, kind: type) -> Optional[Any]:
        for oe in reversed(self.observer_events):
            if isinstance(oe.event, kind):
                return oe.event
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "game_index": self.game_index,
            "num_players": self.num_players,
            "completed": self.completed_successfully,
            "error": (
                {"type": type(self.error).__name__, "message": str(self.error)}
                if self.error is not None
                else None
            ),
            "result": self.result.model_dump(mode="json") if self.result is not None else None,
            "events": [oe.to_dict() for oe in self.observer_events],
            "decisions": {
                name: [record.to_dict() for record in records]
                for name, records in self.player_decisions.items()
            },
        }
