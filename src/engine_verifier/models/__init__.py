"""Rules-contract data models.

This module exports the card catalog, state snapshots, decisions and events
shared by engines, players and the verifier.
"""

from .cards import (
    ACTION_CARD_TYPES,
    ACTION_PILE_SIZE,
    BASIC_STARTING_TYPES,
    BUGS_PER_PLAYER,
    NUM_SELECTED_ACTION_TYPES,
    STARTING_DECK,
    STARTING_DECK_SIZE,
    TOP_TIER_CARD,
    Card,
    CardCategory,
    CardStacks,
    CardType,
    expected_basic_supply,
)
from .decisions import (
    DECISION_TYPES,
    BuyDecision,
    Decision,
    DiscardCardDecision,
    EndPhaseDecision,
    GainCardDecision,
    PlayCardDecision,
    TrashCardDecision,
    decision_adapter,
)
from .events import (
    EVENT_TYPES,
    DiscardCardEvent,
    EndTurnEvent,
    Event,
    GainCardEvent,
    GameEndEvent,
    GameStartEvent,
    PlayCardEvent,
    TrashCardEvent,
    event_adapter,
)
from .state import (
    MAIN_PHASE_ORDER,
    GameResult,
    GameState,
    Hand,
    PlayerResult,
    TurnPhase,
    main_phase_ordinal,
)

__all__ = [
    # Enums
    "CardCategory",
    "CardType",
    "TurnPhase",
    # Cards
    "Card",
    "CardStacks",
    # State
    "GameState",
    "Hand",
    "PlayerResult",
    "GameResult",
    # Decisions
    "Decision",
    "BuyDecision",
    "PlayCardDecision",
    "GainCardDecision",
    "DiscardCardDecision",
    "TrashCardDecision",
    "EndPhaseDecision",
    "DECISION_TYPES",
    "decision_adapter",
    # Events
    "Event",
    "GameStartEvent",
    "GameEndEvent",
    "EndTurnEvent",
    "PlayCardEvent",
    "GainCardEvent",
    "TrashCardEvent",
    "DiscardCardEvent",
    "EVENT_TYPES",
    "event_adapter",
    # Catalog constants
    "ACTION_CARD_TYPES",
    "ACTION_PILE_SIZE",
    "BASIC_STARTING_TYPES",
    "BUGS_PER_PLAYER",
    "NUM_SELECTED_ACTION_TYPES",
    "STARTING_DECK",
    "STARTING_DECK_SIZE",
    "TOP_TIER_CARD",
    "MAIN_PHASE_ORDER",
    # Functions
    "expected_basic_supply",
    "main_phase_ordinal",
]
