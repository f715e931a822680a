"""Decision strategies for verifier players.

1. Deterministic strategies - BigMoney, ActionHeavy, Passive
2. Randomized strategy - RandomLegal, seeded per instance

All strategies implement the DecisionStrategy base class interface.
"""

from engine_verifier.strategies.base import (
    DecisionStrategy,
    find_end_phase_or_first,
    get_strategy_by_name,
    list_strategy_names,
)
from engine_verifier.strategies.deterministic import (
    ActionHeavyStrategy,
    BigMoneyStrategy,
    PassiveStrategy,
)
from engine_verifier.strategies.randomized import RandomLegalStrategy

__all__ = [
    # Base class and helpers
    "DecisionStrategy",
    "find_end_phase_or_first",
    # Factory functions
    "get_strategy_by_name",
    "list_strategy_names",
    # Built-in strategies
    "BigMoneyStrategy",
    "ActionHeavyStrategy",
    "PassiveStrategy",
    "RandomLegalStrategy",
]
