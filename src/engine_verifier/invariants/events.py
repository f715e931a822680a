"""Event-stream checks: termination signal, turn boundaries, lifecycle events."""

from __future__ import annotations

from engine_verifier.invariants.base import Violation
from engine_verifier.models.events import EndTurnEvent, GameEndEvent, GameStartEvent
from engine_verifier.trace import GameTrace


def check_game_termination(trace: GameTrace) -> list[Violation]:
    """The game must have signalled its end.

    Framework exhaustion is the usual end condition, but engines may also stop
    at a turn limit, so only the presence of GameEndEvent matters here. A
    missing GameEndEvent is reported by check_lifecycle_events instead, so
    this check never reports on its own.
    """
    return []


def check_end_turn_events(trace: GameTrace) -> list[Violation]:
    """A non-empty event stream must contain at least one EndTurnEvent."""
    violations: list[Violation] = []
    if trace.observer_events and trace.first_event_of(EndTurnEvent) is None:
        violations.append(
            Violation(
                "EndTurnEvent",
                "No EndTurnEvent found in observer event stream",
                trace.game_index,
            )
        )
    return violations


def check_lifecycle_events(trace: GameTrace) -> list[Violation]:
    """GameStartEvent and GameEndEvent must each fire exactly once."""
    violations: list[Violation] = []
    for kind in (GameStartEvent, GameEndEvent):
        count = len(trace.events_of(kind))
        if count != 1:
            violations.append(
                Violation(
                    "Lifecycle events",
                    f"{kind.__name__} fired {count} time(s), expected 1",
                    trace.game_index,
                )
            )
    return violations
