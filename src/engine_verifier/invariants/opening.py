"""Game-setup checks: starting hands and the initial supply."""

from __future__ import annotations

from typing import Iterable, Optional

from engine_verifier.invariants.base import Violation
from engine_verifier.models.cards import (
    ACTION_CARD_TYPES,
    ACTION_PILE_SIZE,
    BASIC_STARTING_TYPES,
    NUM_SELECTED_ACTION_TYPES,
    Card,
    expected_basic_supply,
)
from engine_verifier.models.events import GameStartEvent
from engine_verifier.trace import GameTrace


def _first_foreign_card(cards: Iterable[Card]) -> Optional[Card]:
    for card in cards:
        if card.type not in BASIC_STARTING_TYPES:
            return card
    return None


def check_starting_hands(trace: GameTrace) -> list[Violation]:
    """Each player's first decision must show a hand of only Bitcoin/Method.

    Reports at most one offending card per hand partition per player.
    """
    violations: list[Violation] = []
    for player, records in trace.player_decisions.items():
        if not records:
            continue
        hand = records[0].state.current_player_hand
        for partition, cards in (
            ("starting hand", hand.unplayed_cards),
            ("starting played cards", hand.played_cards),
        ):
            card = _first_foreign_card(cards)
            if card is not None:
                violations.append(
                    Violation(
                        "Starting hands",
                        f'Player "{player}" has {card.description} in {partition}, '
                        f"expected only Bitcoin/Method",
                        trace.game_index,
                        turn=0,
                        player_name=player,
                    )
                )
    return violations


def check_initial_supply(trace: GameTrace) -> list[Violation]:
    """Initial supply from GameStartEvent must match the dealing formula.

    Basic piles must match expected_basic_supply(num_players). At least ten
    action types must be present, each with exactly ten cards.
    """
    violations: list[Violation] = []
    start_event: Optional[GameStartEvent] = trace.first_event_of(GameStartEvent)
    if start_event is None:
        # Reported by the lifecycle check
        return violations

    supply = start_event.initial_supply
    for card_type, expected in expected_basic_supply(trace.num_players).items():
        actual = supply.get_num_available(card_type)
        if actual != expected:
            violations.append(
                Violation(
                    "Initial supply",
                    f"{card_type.description}: expected {expected} but found {actual}",
                    trace.game_index,
                )
            )

    # Whatever action types are present must have full piles.
    action_types_in_supply = 0
    for card_type in ACTION_CARD_TYPES:
        count = supply.get_num_available(card_type)
        if count > 0:
            action_types_in_supply += 1
            if count != ACTION_PILE_SIZE:
                violations.append(
                    Violation(
                        "Initial supply",
                        f"{card_type.description}: expected {ACTION_PILE_SIZE} but found {count}",
                        trace.game_index,
                    )
                )
    if action_types_in_supply < NUM_SELECTED_ACTION_TYPES:
        violations.append(
            Violation(
                "Initial supply",
                f"Expected at least {NUM_SELECTED_ACTION_TYPES} action card types in supply "
                f"but found {action_types_in_supply}",
                trace.game_index,
            )
        )
    return violations
