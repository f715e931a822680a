"""Invariant checks run against completed game traces.

Each check is a stateless function over one GameTrace returning zero or more
Violations. Checks are independent of one another; ALL_CHECKS fixes the order
their findings appear in.

Usage:
    from engine_verifier.invariants import check_trace

    violations = check_trace(trace)
"""

from engine_verifier.invariants.base import InvariantCheck, Violation, iter_phase_steps, iter_turns
from engine_verifier.invariants.conservation import (
    check_card_conservation,
    check_supply_depletion,
)
from engine_verifier.invariants.decisions import (
    check_legal_decisions_offered,
    check_phase_ordering,
)
from engine_verifier.invariants.events import (
    check_end_turn_events,
    check_game_termination,
    check_lifecycle_events,
)
from engine_verifier.invariants.opening import check_initial_supply, check_starting_hands
from engine_verifier.invariants.scoring import check_results_sorted, check_score_calculation
from engine_verifier.trace import GameTrace

ALL_CHECKS: tuple[InvariantCheck, ...] = (
    check_score_calculation,
    check_results_sorted,
    check_starting_hands,
    check_initial_supply,
    check_game_termination,
    check_legal_decisions_offered,
    check_phase_ordering,
    check_end_turn_events,
    check_card_conservation,
    check_supply_depletion,
    check_lifecycle_events,
)


def check_trace(trace: GameTrace) -> list[Violation]:
    """Run every invariant check against a trace.

    A game that did not complete has nothing to check; its failure shows up
    only in the passed-game count.
    """
    violations: list[Violation] = []
    if not trace.completed_successfully:
        return violations
    for check in ALL_CHECKS:
        violations.extend(check(trace))
    return violations


__all__ = [
    "ALL_CHECKS",
    "InvariantCheck",
    "Violation",
    "check_trace",
    "iter_phase_steps",
    "iter_turns",
    "check_score_calculation",
    "check_results_sorted",
    "check_starting_hands",
    "check_initial_supply",
    "check_game_termination",
    "check_legal_decisions_offered",
    "check_phase_ordering",
    "check_end_turn_events",
    "check_card_conservation",
    "check_supply_depletion",
    "check_lifecycle_events",
]
