"""Players the harness seats at the engine.

- VerifierPlayer: delegates to a DecisionStrategy and logs every call
- CheatingPlayer: plays legally for two calls, then answers off-menu to
  confirm the engine rejects illegal decisions
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from engine_verifier.contract import GameObserver
from engine_verifier.models.cards import CardType
from engine_verifier.models.decisions import BuyDecision, Decision
from engine_verifier.models.events import Event
from engine_verifier.models.state import GameState
from engine_verifier.strategies.base import DecisionStrategy
from engine_verifier.trace import DecisionRecord

logger = logging.getLogger(__name__)

# Calls answered legally before CheatingPlayer starts cheating.
HONEST_WARMUP_CALLS = 2


class VerifierPlayer:
    """An instrumented player that records all make_decision calls.

    Decision-making is delegated to a pluggable DecisionStrategy. The log is
    append-only: one record per call, in call order.
    """

    def __init__(self, name: str, strategy: DecisionStrategy):
        """Initialize the player.

        Args:
            name: Name reported to the engine
            strategy: Strategy that picks among offered options
        """
        self._name = name
        self.strategy = strategy
        self._decision_log: list[DecisionRecord] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def observer(self) -> Optional[GameObserver]:
        return None

    def make_decision(
        self,
        state: GameState,
        options: Sequence[Decision],
        event: Optional[Event] = None,
    ) -> Decision:
        offered = tuple(options)
        chosen = self.strategy.choose(state, offered, event)
        self._decision_log.append(
            DecisionRecord(
                state=state,
                options=offered,
                chosen=chosen,
                triggering_event=event,
            )
        )
        logger.debug(f"{self._name} [{state.phase.value}] chose {chosen.description}")
        return chosen

    @property
    def decision_log(self) -> tuple[DecisionRecord, ...]:
        return tuple(self._decision_log)


class CheatingPlayer:
    """A player that returns a decision outside the offered options.

    The first two calls take the first offered option so the game reaches a
    steady state. Every later call asks to buy a Framework whether or not it
    was offered.
    """

    def __init__(self, name: str = "Cheater"):
        self._name = name
        self.call_count = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def observer(self) -> Optional[GameObserver]:
        return None

    def make_decision(
        self,
        state: GameState,
        options: Sequence[Decision],
        event: Optional[Event] = None,
    ) -> Decision:
        self.call_count += 1
        if self.call_count <= HONEST_WARMUP_CALLS:
            return options[0]
        logger.debug(f"{self._name} returning off-menu decision on call {self.call_count}")
        return BuyDecision(card_type=CardType.FRAMEWORK)
