"""Aggregate outcome of a verification run."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from engine_verifier.invariants.base import Violation


@dataclass(frozen=True)
class VerificationResult:
    """The result of verifying a set of games against invariants.

    Attributes:
        games_played: Games attempted, including the adversarial game
        games_passed: Completed games with no violations, plus the
            adversarial game if the engine rejected the illegal decision
        violations: Every violation found, in game order
    """

    games_played: int
    games_passed: int
    violations: tuple[Violation, ...] = ()

    @property
    def is_compliant(self) -> bool:
        return not self.violations

    @property
    def games_failed(self) -> int:
        return self.games_played - self.games_passed

    def format_report(self, engine_name: str) -> str:
        """Format a human-readable report."""
        lines = [f"Engine: {engine_name}"]
        games_line = f"Games: {self.games_played} played, {self.games_passed} passed"
        if self.games_failed:
            games_line += f", {self.games_failed} failed"
        lines.append(games_line)

        if self.is_compliant:
            lines.append("Result: FULLY COMPLIANT")
        else:
            count = len(self.violations)
            plural = "" if count == 1 else "s"
            lines.append(f"Result: NON-COMPLIANT ({count} violation{plural})")
            lines.append("")
            for violation in self.violations:
                lines.append(f"--- {violation}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "games_played": self.games_played,
            "games_passed": self.games_passed,
            "games_failed": self.games_failed,
            "compliant": self.is_compliant,
            "violations": [v.to_dict() for v in self.violations],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)
