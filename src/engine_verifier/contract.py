"""Engine-facing contract for the verifier.

An engine under test is a black box. It is built from an ordered list of
players (plus, optionally, the selected action card types), accepts one
observer, and plays a game to completion. These protocols describe exactly
the surface the verifier relies on.

Failure types:
- EngineConstructionError: the engine cannot be loaded or built (fatal)
- GameLogicError: any failure an engine raises during play
- PlayerViolationError: a player returned a decision outside the offered menu
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from engine_verifier.models.cards import CardType
from engine_verifier.models.decisions import Decision
from engine_verifier.models.events import Event
from engine_verifier.models.state import GameResult, GameState


class EngineConstructionError(Exception):
    """The engine could not be located or constructed."""


class GameLogicError(Exception):
    """An engine failed while playing a game."""


class PlayerViolationError(GameLogicError):
    """A player made a decision the engine did not offer.

    Attributes:
        player_name: The offending player
        decision: The rejected decision, if the engine reports it
    """

    def __init__(
        self,
        message: str,
        player_name: str = "",
        decision: Optional[Decision] = None,
    ):
        super().__init__(message)
        self.player_name = player_name
        self.decision = decision


@runtime_checkable
class GameObserver(Protocol):
    """Receives every event an engine emits, with the state at emission time."""

    def notify_event(self, state: Optional[GameState], event: Event) -> None: ...


@runtime_checkable
class Player(Protocol):
    """A participant the engine asks for decisions."""

    @property
    def name(self) -> str: ...

    @property
    def observer(self) -> Optional[GameObserver]: ...

    def make_decision(
        self,
        state: GameState,
        options: Sequence[Decision],
        event: Optional[Event],
    ) -> Decision: ...


@runtime_checkable
class Engine(Protocol):
    """A running engine instance bound to one game."""

    def set_observer(self, observer: GameObserver) -> None: ...

    def play(self) -> GameResult: ...


class EngineFactory(Protocol):
    """Builds an engine for the given players and selected action types."""

    def __call__(
        self,
        players: Sequence[Player],
        action_types: Sequence[CardType],
    ) -> Engine: ...
