"""Violation record and shared helpers for invariant checks.

Every check is a plain function ``check_x(trace) -> list[Violation]``. Checks
share no state; each builds its own list and returns it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Sequence

from engine_verifier.models.state import MAIN_PHASE_ORDER, TurnPhase, main_phase_ordinal
from engine_verifier.trace import DecisionRecord, GameTrace

_PHASE_BY_ORDINAL = {ordinal: phase for phase, ordinal in MAIN_PHASE_ORDER.items()}


@dataclass(frozen=True)
class Violation:
    """A single invariant violation found during verification.

    Attributes:
        check_name: Name of the invariant check that failed
        description: Human-readable description of the violation
        game_index: Game (0-based) the violation occurred in
        turn: Turn the violation occurred in, if turn-specific
        player_name: Player involved, if player-specific
        context: Extra debugging detail (e.g. resource counts)
    """

    check_name: str
    description: str
    game_index: int
    turn: Optional[int] = None
    player_name: Optional[str] = None
    context: Optional[str] = None

    def __str__(self) -> str:
        header = f"[Game {self.game_index}"
        if self.turn is not None:
            header += f", Turn {self.turn}"
        if self.player_name is not None:
            header += f", Player: {self.player_name}"
        text = f"{header}] {self.check_name}: {self.description}"
        if self.context is not None:
            text += f"\n  {self.context}"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "check_name": self.check_name,
            "description": self.description,
            "game_index": self.game_index,
            "turn": self.turn,
            "player_name": self.player_name,
            "context": self.context,
        }


InvariantCheck = Callable[[GameTrace], list[Violation]]


def iter_phase_steps(
    records: Sequence[DecisionRecord],
) -> Iterator[tuple[int, DecisionRecord, Optional[TurnPhase]]]:
    """Yield (turn, record, stepped_back_from) for one player's decisions.

    The turn counter starts at 0 and advances whenever a main-phase decision
    falls back to ACTION from a later main phase. Sub-phase decisions keep
    the current turn. ``stepped_back_from`` is the latest main phase when a
    record falls back to a main phase other than ACTION, else None; such a
    step neither starts a turn nor moves the current phase.
    """
    current = -1
    turn = 0
    for record in records:
        stepped_back_from: Optional[TurnPhase] = None
        ordinal = main_phase_ordinal(record.state.phase)
        if ordinal is not None:
            if ordinal >= current:
                current = ordinal
            elif ordinal == 0:
                turn += 1
                current = ordinal
            else:
                stepped_back_from = _PHASE_BY_ORDINAL[current]
        yield turn, record, stepped_back_from


def iter_turns(records: Sequence[DecisionRecord]) -> Iterator[tuple[int, DecisionRecord]]:
    """Yield (turn, record) for one player's decisions (see iter_phase_steps)."""
    for turn, record, _ in iter_phase_steps(records):
        yield turn, record
