"""Tests for VerificationResult reporting."""

import json

from engine_verifier.harness.results import VerificationResult
from engine_verifier.invariants import Violation


def violation(game_index: int = 0, **kwargs) -> Violation:
    return Violation("Score calculation", "Alice: reported 3 but computed 4", game_index, **kwargs)


class TestVerificationResult:
    """Tests for VerificationResult."""

    def test_compliant_report(self):
        report = VerificationResult(games_played=11, games_passed=11).format_report("my.Engine")
        assert report == "Engine: my.Engine\nGames: 11 played, 11 passed\nResult: FULLY COMPLIANT\n"

    def test_non_compliant_report(self):
        result = VerificationResult(
            games_played=3,
            games_passed=2,
            violations=(violation(1, turn=4, player_name="Alice", context="State: actions=0, money=2, buys=1"),),
        )
        lines = result.format_report("my.Engine").splitlines()

        assert lines[1] == "Games: 3 played, 2 passed, 1 failed"
        assert lines[2] == "Result: NON-COMPLIANT (1 violation)"
        assert lines[4] == "--- [Game 1, Turn 4, Player: Alice] Score calculation: Alice: reported 3 but computed 4"
        assert lines[5] == "  State: actions=0, money=2, buys=1"

    def test_plural_violations(self):
        result = VerificationResult(3, 1, (violation(0), violation(1)))
        assert "NON-COMPLIANT (2 violations)" in result.format_report("e")
        assert result.games_failed == 2

    def test_to_json(self):
        result = VerificationResult(2, 1, (violation(0),))
        data = json.loads(result.to_json())
        assert data["compliant"] is False
        assert data["games_failed"] == 1
        assert data["violations"][0]["check_name"] == "Score calculation"
        assert data["violations"][0]["turn"] is None
