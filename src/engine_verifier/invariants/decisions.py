"""Decision-log checks: offered menus and per-player phase order.

Both checks read the players' decision logs, never the event stream.
"""

from __future__ import annotations

from typing import assert_never

from engine_verifier.invariants.base import Violation, iter_phase_steps, iter_turns
from engine_verifier.models.cards import CardCategory
from engine_verifier.models.decisions import (
    BuyDecision,
    Decision,
    DiscardCardDecision,
    EndPhaseDecision,
    GainCardDecision,
    PlayCardDecision,
    TrashCardDecision,
)
from engine_verifier.models.state import TurnPhase
from engine_verifier.trace import DecisionRecord, GameTrace


def _option_violations(
    option: Decision,
    record: DecisionRecord,
    trace: GameTrace,
    turn: int,
    player: str,
) -> list[Violation]:
    state = record.state
    context = state.resource_summary()
    found: list[Violation] = []

    if isinstance(option, BuyDecision):
        card_type = option.card_type
        if card_type.cost > state.spendable_money:
            found.append(
                Violation(
                    "Legal decisions",
                    f"BuyDecision({card_type.description}, cost={card_type.cost}) offered "
                    f"but spendableMoney={state.spendable_money}",
                    trace.game_index,
                    turn,
                    player,
                    context,
                )
            )
        supply = state.buyable_cards
        if supply is not None and supply.get_num_available(card_type) <= 0:
            found.append(
                Violation(
                    "Legal decisions",
                    f"BuyDecision({card_type.description}) offered but supply is empty",
                    trace.game_index,
                    turn,
                    player,
                    context,
                )
            )
    elif isinstance(option, PlayCardDecision):
        if (
            state.phase == TurnPhase.ACTION
            and option.card.category == CardCategory.ACTION
            and state.available_actions <= 0
        ):
            found.append(
                Violation(
                    "Legal decisions",
                    f"PlayCardDecision({option.card.description}) offered in ACTION phase "
                    f"but availableActions=0",
                    trace.game_index,
                    turn,
                    player,
                    context,
                )
            )
    elif isinstance(
        option,
        (GainCardDecision, DiscardCardDecision, TrashCardDecision, EndPhaseDecision),
    ):
        pass
    else:
        assert_never(option)
    return found


def check_legal_decisions_offered(trace: GameTrace) -> list[Violation]:
    """Every offered option, not only the chosen one, must be legal.

    - A Buy must be affordable and its supply pile non-empty
    - An action-card PlayCard in the ACTION phase needs an available action
    """
    violations: list[Violation] = []
    for player, records in trace.player_decisions.items():
        for turn, record in iter_turns(records):
            for option in record.options:
                violations.extend(_option_violations(option, record, trace, turn, player))
    return violations


def check_phase_ordering(trace: GameTrace) -> list[Violation]:
    """Main phases must run ACTION -> MONEY -> BUY -> CLEANUP within a turn.

    REACTION, GAIN and DISCARD are sub-phases and are skipped. Falling back to
    ACTION starts a new turn; any other backward step is a violation.
    """
    violations: list[Violation] = []
    for player, records in trace.player_decisions.items():
        for turn, record, stepped_back_from in iter_phase_steps(records):
            if stepped_back_from is None:
                continue
            violations.append(
                Violation(
                    "Phase ordering",
                    f"{record.state.phase.name} phase after {stepped_back_from.name} phase",
                    trace.game_index,
                    turn,
                    player,
                )
            )
    return violations
