"""End-of-game result checks: score arithmetic and ranking order."""

from __future__ import annotations

from engine_verifier.invariants.base import Violation
from engine_verifier.models.cards import CardCategory
from engine_verifier.trace import GameTrace


def check_score_calculation(trace: GameTrace) -> list[Violation]:
    """Sum of victory card values in each ending deck must equal the reported score."""
    violations: list[Violation] = []
    for pr in trace.result.player_results:
        computed = sum(
            card.value for card in pr.ending_deck if card.category == CardCategory.VICTORY
        )
        if computed != pr.score:
            violations.append(
                Violation(
                    "Score calculation",
                    f'Player "{pr.player_name}" reported score {pr.score} '
                    f"but ending deck victory cards sum to {computed}",
                    trace.game_index,
                )
            )
    return violations


def check_results_sorted(trace: GameTrace) -> list[Violation]:
    """Player results must be ordered by non-increasing score."""
    violations: list[Violation] = []
    results = trace.result.player_results
    for previous, current in zip(results, results[1:]):
        if current.score > previous.score:
            violations.append(
                Violation(
                    "Results sorted",
                    f'Player "{current.player_name}" (score {current.score}) ranked after '
                    f'"{previous.player_name}" (score {previous.score})',
                    trace.game_index,
                )
            )
    return violations
