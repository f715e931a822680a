"""Event variants an engine emits to its observer.

Like decisions, events are a closed tagged union discriminated by ``kind``.
Every event has a ``description`` used for verbose trace output.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from engine_verifier.models.cards import Card, CardStacks, CardType


class _EventBase(BaseModel):
    model_config = ConfigDict(frozen=True)


class GameStartEvent(_EventBase):
    """The game has been set up; supply is as dealt."""

    kind: Literal["game_start"] = "game_start"
    initial_supply: CardStacks

    @property
    def description(self) -> str:
        return f"Game started with {self.initial_supply.total()} cards in supply"


class GameEndEvent(_EventBase):
    """The game is over."""

    kind: Literal["game_end"] = "game_end"
    final_supply: CardStacks

    @property
    def description(self) -> str:
        return f"Game ended with {self.final_supply.total()} cards in supply"


class EndTurnEvent(_EventBase):
    """A player's turn finished."""

    kind: Literal["end_turn"] = "end_turn"
    player_name: str = ""
    turn: int = 0

    @property
    def description(self) -> str:
        return f"{self.player_name} ended turn {self.turn}"


class PlayCardEvent(_EventBase):
    kind: Literal["play_card"] = "play_card"
    player_name: str = ""
    card: Card

    @property
    def description(self) -> str:
        return f"{self.player_name} played {self.card.description}"


class GainCardEvent(_EventBase):
    """A card moved from the supply to a player (bought or gained)."""

    kind: Literal["gain_card"] = "gain_card"
    player_name: str = ""
    card_type: CardType

    @property
    def description(self) -> str:
        return f"{self.player_name} gained {self.card_type.description}"


class TrashCardEvent(_EventBase):
    """A card left the game permanently."""

    kind: Literal["trash_card"] = "trash_card"
    player_name: str = ""
    card: Card

    @property
    def description(self) -> str:
        return f"{self.player_name} trashed {self.card.description}"


class DiscardCardEvent(_EventBase):
    kind: Literal["discard_card"] = "discard_card"
    player_name: str = ""
    card: Card

    @property
    def description(self) -> str:
        return f"{self.player_name} discarded {self.card.description}"


Event = Annotated[
    Union[
        GameStartEvent,
        GameEndEvent,
        EndTurnEvent,
        PlayCardEvent,
        GainCardEvent,
        TrashCardEvent,
        DiscardCardEvent,
    ],
    Field(discriminator="kind"),
]

EVENT_TYPES: tuple[type[_EventBase], ...] = (
    GameStartEvent,
    GameEndEvent,
    EndTurnEvent,
    PlayCardEvent,
    GainCardEvent,
    TrashCardEvent,
    DiscardCardEvent,
)

event_adapter: TypeAdapter[Event] = TypeAdapter(Event)
