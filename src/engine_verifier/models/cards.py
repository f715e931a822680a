"""Card catalog for the deck-building rules contract.

This module is fixed configuration data: card types, their cost, value and
category, and the supply counts an engine is expected to start with. The
invariant checks consult these numbers but never derive them.

Starting deck (per player): 7 Bitcoin + 3 Method.

Expected supply after dealing starting decks (p = player count):
- Bitcoin 60, Ethereum 40, Dogecoin 30
- Method 14, Module 8, Framework 8, Bug 10 * p
- Each selected action type: 10
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Mapping

from pydantic import BaseModel, ConfigDict, Field


class CardCategory(str, Enum):
    """Broad category of a card type.

    Inherits from str for proper JSON serialization.
    """

    MONEY = "money"
    VICTORY = "victory"
    ACTION = "action"


class CardType(str, Enum):
    """Every card type in the catalog.

    Cost, value and category live in _CARD_SPECS below; use the properties.
    """

    # Money
    BITCOIN = "bitcoin"
    ETHEREUM = "ethereum"
    DOGECOIN = "dogecoin"

    # Victory
    METHOD = "method"
    MODULE = "module"
    FRAMEWORK = "framework"
    BUG = "bug"

    # Action (kingdom) cards
    BACKLOG = "backlog"
    DAILY_SCRUM = "daily_scrum"
    IPO = "ipo"
    HACK = "hack"
    MONITORING = "monitoring"
    TECH_DEBT = "tech_debt"
    REFACTOR = "refactor"
    PARALLELIZATION = "parallelization"
    CODE_REVIEW = "code_review"
    EVERGREEN_TEST = "evergreen_test"
    UNIT_TEST = "unit_test"
    SPRINT_PLANNING = "sprint_planning"
    HOTFIX = "hotfix"
    PAIR_PROGRAMMING = "pair_programming"
    RETROSPECTIVE = "retrospective"

    @property
    def description(self) -> str:
        return _CARD_SPECS[self][0]

    @property
    def cost(self) -> int:
        return _CARD_SPECS[self][1]

    @property
    def points(self) -> int:
        """Victory points for victory cards, coin value for money cards."""
        return _CARD_SPECS[self][2]

    @property
    def category(self) -> CardCategory:
        return _CARD_SPECS[self][3]

    def __str__(self) -> str:
        return self.description


# (description, cost, value, category)
_CARD_SPECS: dict[CardType, tuple[str, int, int, CardCategory]] = {
    CardType.BITCOIN: ("Bitcoin", 0, 1, CardCategory.MONEY),
    CardType.ETHEREUM: ("Ethereum", 3, 2, CardCategory.MONEY),
    CardType.DOGECOIN: ("Dogecoin", 6, 3, CardCategory.MONEY),
    CardType.METHOD: ("Method", 2, 1, CardCategory.VICTORY),
    CardType.MODULE: ("Module", 5, 3, CardCategory.VICTORY),
    CardType.FRAMEWORK: ("Framework", 8, 6, CardCategory.VICTORY),
    CardType.BUG: ("Bug", 0, -1, CardCategory.VICTORY),
    CardType.BACKLOG: ("Backlog", 2, 0, CardCategory.ACTION),
    CardType.DAILY_SCRUM: ("Daily Scrum", 5, 0, CardCategory.ACTION),
    CardType.IPO: ("IPO", 5, 0, CardCategory.ACTION),
    CardType.HACK: ("Hack", 5, 0, CardCategory.ACTION),
    CardType.MONITORING: ("Monitoring", 2, 0, CardCategory.ACTION),
    CardType.TECH_DEBT: ("Tech Debt", 4, 0, CardCategory.ACTION),
    CardType.REFACTOR: ("Refactor", 4, 0, CardCategory.ACTION),
    CardType.PARALLELIZATION: ("Parallelization", 5, 0, CardCategory.ACTION),
    CardType.CODE_REVIEW: ("Code Review", 3, 0, CardCategory.ACTION),
    CardType.EVERGREEN_TEST: ("Evergreen Test", 5, 0, CardCategory.ACTION),
    CardType.UNIT_TEST: ("Unit Test", 3, 0, CardCategory.ACTION),
    CardType.SPRINT_PLANNING: ("Sprint Planning", 4, 0, CardCategory.ACTION),
    CardType.HOTFIX: ("Hotfix", 3, 0, CardCategory.ACTION),
    CardType.PAIR_PROGRAMMING: ("Pair Programming", 4, 0, CardCategory.ACTION),
    CardType.RETROSPECTIVE: ("Retrospective", 2, 0, CardCategory.ACTION),
}


# =============================================================================
# Catalog constants
# =============================================================================

ACTION_CARD_TYPES: tuple[CardType, ...] = tuple(
    t for t in CardType if t.category == CardCategory.ACTION
)

BASIC_STARTING_TYPES: frozenset[CardType] = frozenset({CardType.BITCOIN, CardType.METHOD})

TOP_TIER_CARD = CardType.FRAMEWORK

STARTING_DECK: tuple[tuple[CardType, int], ...] = (
    (CardType.BITCOIN, 7),
    (CardType.METHOD, 3),
)
STARTING_DECK_SIZE = sum(count for _, count in STARTING_DECK)

ACTION_PILE_SIZE = 10
NUM_SELECTED_ACTION_TYPES = 10
BUGS_PER_PLAYER = 10


def expected_basic_supply(num_players: int) -> dict[CardType, int]:
    """Expected basic-card supply once starting decks are dealt.

    Args:
        num_players: Number of players in the game

    Returns:
        Mapping of basic card type to its expected pile size
    """
    return {
        CardType.BITCOIN: 60,
        CardType.ETHEREUM: 40,
        CardType.DOGECOIN: 30,
        CardType.METHOD: 14,
        CardType.MODULE: 8,
        CardType.FRAMEWORK: 8,
        CardType.BUG: BUGS_PER_PLAYER * num_players,
    }


# =============================================================================
# Card instances and stacks
# =============================================================================


class Card(BaseModel):
    """A single physical card.

    Two cards of the same type are distinguished by ``id``; engines assign ids.
    """

    model_config = ConfigDict(frozen=True)

    type: CardType
    id: int = Field(default=0, ge=0)

    @property
    def category(self) -> CardCategory:
        return self.type.category

    @property
    def cost(self) -> int:
        return self.type.cost

    @property
    def value(self) -> int:
        return self.type.points

    @property
    def description(self) -> str:
        return self.type.description


class CardStacks(BaseModel):
    """Remaining count per card type in a supply.

    Types that are absent from ``counts`` have zero cards available.
    """

    model_config = ConfigDict(frozen=True)

    counts: dict[CardType, int] = Field(default_factory=dict)

    @classmethod
    def of(cls, counts: Mapping[CardType, int]) -> CardStacks:
        return cls(counts=dict(counts))

    def get_num_available(self, card_type: CardType) -> int:
        return self.counts.get(card_type, 0)

    def total(self) -> int:
        return sum(self.counts.values())

    def types(self) -> Iterator[CardType]:
        return iter(self.counts)
