"""Decision variants a player can be offered.

Decisions form a closed tagged union discriminated by ``kind``. They are
frozen and value-comparable, so "is this choice one of the offered options"
is a plain ``in`` test.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from engine_verifier.models.cards import Card, CardType
from engine_verifier.models.state import TurnPhase


class _DecisionBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class BuyDecision(_DecisionBase):
    """Buy one card of the given type from the supply."""

    kind: Literal["buy"] = "buy"
    card_type: CardType

    @property
    def description(self) -> str:
        return f"Buy {self.card_type.description}"


class PlayCardDecision(_DecisionBase):
    """Play a specific card from hand."""

    kind: Literal["play_card"] = "play_card"
    card: Card

    @property
    def description(self) -> str:
        return f"Play {self.card.description}"


class GainCardDecision(_DecisionBase):
    """Gain (without paying) one card of the given type."""

    kind: Literal["gain_card"] = "gain_card"
    card_type: CardType

    @property
    def description(self) -> str:
        return f"Gain {self.card_type.description}"


class DiscardCardDecision(_DecisionBase):
    """Discard a specific card from hand."""

    kind: Literal["discard_card"] = "discard_card"
    card: Card

    @property
    def description(self) -> str:
        return f"Discard {self.card.description}"


class TrashCardDecision(_DecisionBase):
    """Trash a specific card from hand."""

    kind: Literal["trash_card"] = "trash_card"
    card: Card

    @property
    def description(self) -> str:
        return f"Trash {self.card.description}"


class EndPhaseDecision(_DecisionBase):
    """Finish the current phase (or sub-phase) without doing anything more."""

    kind: Literal["end_phase"] = "end_phase"
    phase: TurnPhase

    @property
    def description(self) -> str:
        return f"End {self.phase.value} phase"


Decision = Annotated[
    Union[
        BuyDecision,
        PlayCardDecision,
        GainCardDecision,
        DiscardCardDecision,
        TrashCardDecision,
        EndPhaseDecision,
    ],
    Field(discriminator="kind"),
]

DECISION_TYPES: tuple[type[_DecisionBase], ...] = (
    BuyDecision,
    PlayCardDecision,
    GainCardDecision,
    DiscardCardDecision,
    TrashCardDecision,
    EndPhaseDecision,
)

decision_adapter: TypeAdapter[Decision] = TypeAdapter(Decision)
