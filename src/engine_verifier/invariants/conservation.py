"""Card-count checks: global conservation and per-gain supply depletion.

Conservation:
    initial = players * STARTING_DECK_SIZE + sum(initial supply)
    final   = sum(ending deck sizes) + sum(final supply) + TrashCardEvents
"""

from __future__ import annotations

from typing import Optional

from engine_verifier.invariants.base import Violation
from engine_verifier.models.cards import STARTING_DECK_SIZE, CardStacks, CardType
from engine_verifier.models.events import (
    GainCardEvent,
    GameEndEvent,
    GameStartEvent,
    TrashCardEvent,
)
from engine_verifier.trace import GameTrace


def _supply_total(supply: CardStacks) -> int:
    return sum(supply.get_num_available(card_type) for card_type in CardType)


def check_card_conservation(trace: GameTrace) -> list[Violation]:
    """Cards are neither created nor destroyed except by trashing."""
    violations: list[Violation] = []
    start_event: Optional[GameStartEvent] = trace.last_event_of(GameStartEvent)
    end_event: Optional[GameEndEvent] = trace.last_event_of(GameEndEvent)
    if start_event is None or end_event is None:
        return violations

    initial_total = trace.num_players * STARTING_DECK_SIZE + _supply_total(
        start_event.initial_supply
    )

    trashed_count = len(trace.events_of(TrashCardEvent))
    final_total = (
        sum(len(pr.ending_deck) for pr in trace.result.player_results)
        + _supply_total(end_event.final_supply)
        + trashed_count
    )

    if final_total > initial_total:
        violations.append(
            Violation(
                "Card conservation",
                f"Final total {final_total} > initial total {initial_total}: cards appeared "
                f"(ending decks + final supply + {trashed_count} trashed)",
                trace.game_index,
            )
        )
    elif final_total < initial_total and trashed_count == 0:
        violations.append(
            Violation(
                "Card conservation",
                f"Initial total {initial_total} > final total {final_total} with 0 "
                f"TrashCardEvents: engine may not be firing TrashCardEvents",
                trace.game_index,
            )
        )
    elif final_total != initial_total:
        violations.append(
            Violation(
                "Card conservation",
                f"Initial total {initial_total} != final total {final_total} "
                f"(ending decks + final supply + {trashed_count} trashed)",
                trace.game_index,
            )
        )
    return violations


def check_supply_depletion(trace: GameTrace) -> list[Violation]:
    """A gained card's supply count must not rise across a GainCardEvent.

    Compares the state at the gain with the next later event whose state
    carries supply information. Gains hidden between two such snapshots are
    not examined individually.
    """
    violations: list[Violation] = []
    events = trace.observer_events
    for i, current in enumerate(events):
        if not isinstance(current.event, GainCardEvent):
            continue
        card_type = current.event.card_type
        for following in events[i + 1:]:
            if following.state is None or following.state.buyable_cards is None:
                continue
            if current.state is not None and current.state.buyable_cards is not None:
                before = current.state.buyable_cards.get_num_available(card_type)
                after = following.state.buyable_cards.get_num_available(card_type)
                if after > before:
                    violations.append(
                        Violation(
                            "Supply depletion",
                            f"{card_type.description} supply increased from {before} "
                            f"to {after} after GainCardEvent",
                            trace.game_index,
                        )
                    )
            break
    return violations
