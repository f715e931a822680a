"""Base decision strategy interface for the verifier.

A strategy maps (state, offered options, triggering event) to one of the
offered options. Strategies are trusted: they never return anything outside
the menu. Deliberately illegal play lives in CheatingPlayer, not here.

This module also holds the option-scanning helpers shared by the built-in
strategies and the strategy factory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, TypeVar

from engine_verifier.models.cards import CardCategory
from engine_verifier.models.decisions import (
    Decision,
    EndPhaseDecision,
    PlayCardDecision,
)
from engine_verifier.models.events import Event
from engine_verifier.models.state import GameState

D = TypeVar("D")


class DecisionStrategy(ABC):
    """Abstract base class for all decision strategies."""

    name: str = "Strategy"

    @abstractmethod
    def choose(
        self,
        state: GameState,
        options: Sequence[Decision],
        event: Optional[Event],
    ) -> Decision:
        """Choose one decision from the offered options.

        Args:
            state: Game state at the moment of the decision
            options: Decisions the engine offered, in engine order
            event: Event that triggered the decision (reactions), if any

        Returns:
            One element of ``options``
        """
        pass


def require_options(options: Sequence[Decision]) -> None:
    """Raise ValueError if an engine offered an empty menu."""
    if not options:
        raise ValueError("Cannot choose a decision from an empty option list")


def find_end_phase_or_first(options: Sequence[Decision]) -> Decision:
    """Return the first EndPhaseDecision if one is offered, else the first option."""
    require_options(options)
    for option in options:
        if isinstance(option, EndPhaseDecision):
            return option
    return options[0]


def find_first(options: Sequence[Decision], kind: type[D]) -> Optional[D]:
    """Return the first option of the given decision class, or None."""
    for option in options:
        if isinstance(option, kind):
            return option
    return None


def find_play_of_category(
    options: Sequence[Decision], category: CardCategory
) -> Optional[PlayCardDecision]:
    """Return the first PlayCardDecision whose card is in ``category``."""
    for option in options:
        if isinstance(option, PlayCardDecision) and option.card.category == category:
            return option
    return None


def find_highest(
    options: Sequence[Decision],
    kind: type[D],
    score: Callable[[D], int],
    accept: Callable[[D], bool] = lambda _: True,
) -> Optional[D]:
    """Return the accepted option of ``kind`` with the highest score.

    Ties go to whichever qualifying option appears first: a later option
    replaces the current best only when its score is strictly greater.
    """
    best: Optional[D] = None
    best_score: Optional[int] = None
    for option in options:
        if not isinstance(option, kind) or not accept(option):
            continue
        option_score = score(option)
        if best_score is None or option_score > best_score:
            best = option
            best_score = option_score
    return best


def get_strategy_by_name(name: str, seed: Optional[int] = None) -> DecisionStrategy:
    """Create a strategy by name.

    Args:
        name: Strategy name, e.g. "big_money", "BigMoney", "random"
        seed: Seed for randomized strategies (ignored by deterministic ones)

    Returns:
        DecisionStrategy instance

    Raises:
        ValueError: If the strategy name is unknown
    """
    # Import here to avoid circular imports
    from engine_verifier.strategies.deterministic import (
        ActionHeavyStrategy,
        BigMoneyStrategy,
        PassiveStrategy,
    )
    from engine_verifier.strategies.randomized import RandomLegalStrategy

    type_name = name.lower().replace("-", "_").replace(" ", "_")

    deterministic_map: dict[str, type[DecisionStrategy]] = {
        "big_money": BigMoneyStrategy,
        "bigmoney": BigMoneyStrategy,
        "action_heavy": ActionHeavyStrategy,
        "actionheavy": ActionHeavyStrategy,
        "passive": PassiveStrategy,
    }
    if type_name in deterministic_map:
        return deterministic_map[type_name]()

    if type_name in ("random", "random_legal", "randomlegal"):
        return RandomLegalStrategy(seed if seed is not None else 0)

    raise ValueError(
        f"Unknown strategy: {name}. "
        f"Valid strategies: {list_strategy_names()}"
    )


def list_strategy_names() -> list[str]:
    """List the canonical names of the built-in strategies."""
    return ["big_money", "action_heavy", "passive", "random_legal"]
