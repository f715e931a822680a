"""Verification harness for deck-building game engines.

Key classes:
- VerifierHarness: Runs N normal games plus one adversarial game
- VerifierPlayer / CheatingPlayer: Players seated at the engine
- ObserverRecorder: Captures the engine's event stream
- VerificationResult: Aggregate outcome and report
- TraceWriter: Per-game JSON export

Usage:
    from engine_verifier.harness import VerifierHarness
    from engine_verifier.loader import EngineLoader

    harness = VerifierHarness(EngineLoader.from_target("my_engine:Engine"))
    result = harness.verify()
    print(result.format_report("my_engine:Engine"))
"""

from engine_verifier.harness.recorder import ObserverRecorder
from engine_verifier.harness.players import CheatingPlayer, VerifierPlayer
from engine_verifier.harness.results import VerificationResult
from engine_verifier.harness.export import TraceWriter
from engine_verifier.harness.runner import (
    PLAYER_TEMPLATES,
    VerifierHarness,
    derive_seed,
    verify_engine,
)

__all__ = [
    "ObserverRecorder",
    "CheatingPlayer",
    "VerifierPlayer",
    "VerificationResult",
    "TraceWriter",
    "PLAYER_TEMPLATES",
    "VerifierHarness",
    "derive_seed",
    "verify_engine",
]
