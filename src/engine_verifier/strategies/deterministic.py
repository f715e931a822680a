"""Deterministic decision strategies.

Each strategy dispatches on ``state.phase``. None of them try to win; they
exist to push an engine down particular code paths:

- BigMoney: plays money, buys Framework or the best money card
- ActionHeavy: plays and buys action cards to exercise reactions, gains,
  discards and trashing
- Passive: ends every phase as soon as it can

Whenever a rule says "highest", ties go to the first qualifying option in
the engine's order.
"""

from __future__ import annotations

from typing import Optional, Sequence, assert_never

from engine_verifier.models.cards import TOP_TIER_CARD, CardCategory
from engine_verifier.models.decisions import (
    BuyDecision,
    Decision,
    DiscardCardDecision,
    GainCardDecision,
)
from engine_verifier.models.events import Event
from engine_verifier.models.state import GameState, TurnPhase
from engine_verifier.strategies.base import (
    DecisionStrategy,
    find_end_phase_or_first,
    find_first,
    find_highest,
    find_play_of_category,
    require_options,
)


def play_money_or_end(options: Sequence[Decision]) -> Decision:
    """Play the first money card offered, else end the phase."""
    play = find_play_of_category(options, CardCategory.MONEY)
    if play is not None:
        return play
    return find_end_phase_or_first(options)


def gain_highest_cost(options: Sequence[Decision]) -> Decision:
    """Gain the most expensive card offered, else take the first option."""
    require_options(options)
    best = find_highest(options, GainCardDecision, lambda g: g.card_type.cost)
    return best if best is not None else options[0]


def find_top_tier_buy(options: Sequence[Decision]) -> Optional[BuyDecision]:
    for option in options:
        if isinstance(option, BuyDecision) and option.card_type == TOP_TIER_CARD:
            return option
    return None


class BigMoneyStrategy(DecisionStrategy):
    """Buys Framework when it can, otherwise the most valuable money card.

    Plays all money, skips actions, takes the most expensive gain.
    """

    name = "BigMoney"

    def choose(
        self,
        state: GameState,
        options: Sequence[Decision],
        event: Optional[Event],
    ) -> Decision:
        phase = state.phase
        if phase in (TurnPhase.ACTION, TurnPhase.REACTION, TurnPhase.DISCARD, TurnPhase.CLEANUP):
            return find_end_phase_or_first(options)
        elif phase == TurnPhase.MONEY:
            return play_money_or_end(options)
        elif phase == TurnPhase.BUY:
            return self._buy_best(options)
        elif phase == TurnPhase.GAIN:
            return gain_highest_cost(options)
        else:
            assert_never(phase)

    def _buy_best(self, options: Sequence[Decision]) -> Decision:
        framework = find_top_tier_buy(options)
        if framework is not None:
            return framework
        best_money = find_highest(
            options,
            BuyDecision,
            lambda b: b.card_type.points,
            accept=lambda b: b.card_type.category == CardCategory.MONEY,
        )
        if best_money is not None:
            return best_money
        return find_end_phase_or_first(options)


class ActionHeavyStrategy(DecisionStrategy):
    """Plays every action it can and buys the priciest action card.

    Falls back to Framework when no action card is for sale.
    """

    name = "ActionHeavy"

    def choose(
        self,
        state: GameState,
        options: Sequence[Decision],
        event: Optional[Event],
    ) -> Decision:
        phase = state.phase
        if phase == TurnPhase.ACTION:
            return self._play_action_or_end(options)
        elif phase == TurnPhase.MONEY:
            return play_money_or_end(options)
        elif phase == TurnPhase.BUY:
            return self._buy_action_or_framework(options)
        elif phase == TurnPhase.GAIN:
            return gain_highest_cost(options)
        elif phase == TurnPhase.DISCARD:
            return self._discard_first(options)
        elif phase in (TurnPhase.REACTION, TurnPhase.CLEANUP):
            return find_end_phase_or_first(options)
        else:
            assert_never(phase)

    def _play_action_or_end(self, options: Sequence[Decision]) -> Decision:
        play = find_play_of_category(options, CardCategory.ACTION)
        if play is not None:
            return play
        return find_end_phase_or_first(options)

    def _buy_action_or_framework(self, options: Sequence[Decision]) -> Decision:
        best_action = find_highest(
            options,
            BuyDecision,
            lambda b: b.card_type.cost,
            accept=lambda b: b.card_type.category == CardCategory.ACTION,
        )
        if best_action is not None:
            return best_action
        framework = find_top_tier_buy(options)
        if framework is not None:
            return framework
        return find_end_phase_or_first(options)

    def _discard_first(self, options: Sequence[Decision]) -> Decision:
        discard = find_first(options, DiscardCardDecision)
        if discard is not None:
            return discard
        return find_end_phase_or_first(options)


class PassiveStrategy(DecisionStrategy):
    """Always ends the phase if it may; otherwise takes the first option.

    Exercises the degenerate game where nobody does anything optional.
    """

    name = "Passive"

    def choose(
        self,
        state: GameState,
        options: Sequence[Decision],
        event: Optional[Event],
    ) -> Decision:
        return find_end_phase_or_first(options)
