"""Randomized decision strategy.

RandomLegalStrategy picks uniformly among the offered options. Over many games
this reaches engine paths the scripted strategies never touch. Each instance
owns its own random source, so two instances built from the same seed make
identical choices given identical menus.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence

from engine_verifier.models.decisions import Decision
from engine_verifier.models.events import Event
from engine_verifier.models.state import GameState
from engine_verifier.strategies.base import DecisionStrategy, require_options


class RandomLegalStrategy(DecisionStrategy):
    """Uniformly random choice among the offered options."""

    name = "RandomLegal"

    def __init__(self, seed: int):
        """Initialize the strategy.

        Args:
            seed: Seed for this strategy's private random source
        """
        self.seed = seed
        self._rng = random.Random(seed)

    def choose(
        self,
        state: GameState,
        options: Sequence[Decision],
        event: Optional[Event],
    ) -> Decision:
        require_options(options)
        return options[self._rng.randrange(len(options))]
