"""Game state snapshots and end-of-game results.

A GameState is what an engine hands to a player (or an observer) at one
moment. Snapshots are frozen: a verifier record owns its snapshot and nothing
mutates it after capture.

Turn structure from the rules contract:
- Main phases, in order: ACTION -> MONEY -> BUY -> CLEANUP
- Sub-phases interrupt a main phase: REACTION, GAIN, DISCARD
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from engine_verifier.models.cards import Card, CardStacks


class TurnPhase(str, Enum):
    """Phase a decision or event happened in."""

    ACTION = "action"
    MONEY = "money"
    BUY = "buy"
    CLEANUP = "cleanup"
    REACTION = "reaction"
    GAIN = "gain"
    DISCARD = "discard"


# Ordinals of the main phases; sub-phases are absent.
MAIN_PHASE_ORDER: dict[TurnPhase, int] = {
    TurnPhase.ACTION: 0,
    TurnPhase.MONEY: 1,
    TurnPhase.BUY: 2,
    TurnPhase.CLEANUP: 3,
}


def main_phase_ordinal(phase: TurnPhase) -> int | None:
    """Return the ordinal of a main phase, or None for a sub-phase."""
    return MAIN_PHASE_ORDER.get(phase)


class Hand(BaseModel):
    """The current player's hand, split into played and unplayed cards."""

    model_config = ConfigDict(frozen=True)

    played_cards: tuple[Card, ...] = Field(default=())
    unplayed_cards: tuple[Card, ...] = Field(default=())

    def all_cards(self) -> tuple[Card, ...]:
        return self.played_cards + self.unplayed_cards


class GameState(BaseModel):
    """Snapshot of the game as seen by the deciding (or current) player.

    Attributes:
        phase: Phase the game is in
        spendable_money: Money available to spend this turn
        available_actions: Action plays remaining this turn
        available_buys: Buys remaining this turn
        current_player_hand: Played/unplayed partition of the hand
        buyable_cards: Supply remaining per card type (None if not exposed)
        current_player_name: Whose turn (or reaction) this snapshot belongs to
    """

    model_config = ConfigDict(frozen=True)

    phase: TurnPhase
    spendable_money: int = Field(default=0, ge=0)
    available_actions: int = Field(default=0, ge=0)
    available_buys: int = Field(default=0, ge=0)
    current_player_hand: Hand = Field(default_factory=Hand)
    buyable_cards: CardStacks | None = Field(default=None)
    current_player_name: str = Field(default="")

    def resource_summary(self) -> str:
        """One-line resource summary used as violation context."""
        return (
            f"State: actions={self.available_actions}, "
            f"money={self.spendable_money}, buys={self.available_buys}"
        )


class PlayerResult(BaseModel):
    """Final standing of one player.

    Attributes:
        player_name: Name the player reported to the engine
        ending_deck: Every card the player owns at game end
        score: Score the engine computed
    """

    model_config = ConfigDict(frozen=True)

    player_name: str
    ending_deck: tuple[Card, ...] = Field(default=())
    score: int


class GameResult(BaseModel):
    """Outcome of a completed game, in the engine's ranking order."""

    model_config = ConfigDict(frozen=True)

    player_results: tuple[PlayerResult, ...] = Field(default=())
