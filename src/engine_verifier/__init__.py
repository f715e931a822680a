"""Conformance verifier for deck-building game engines.

Drives an engine under test through many games with scripted and randomized
players, records every state, event and decision, checks the traces against
the rules-contract invariants and confirms the engine rejects an illegal
decision.

Usage:
    from engine_verifier import EngineLoader, VerifierHarness

    loader = EngineLoader.from_target("my_engine:Engine")
    result = VerifierHarness(loader, num_games=10, seed=42).verify()
    print(result.format_report(loader.name))
"""

from engine_verifier.config import VerifierConfig
from engine_verifier.contract import (
    Engine,
    EngineConstructionError,
    EngineFactory,
    GameLogicError,
    GameObserver,
    Player,
    PlayerViolationError,
)
from engine_verifier.harness import VerificationResult, VerifierHarness, verify_engine
from engine_verifier.invariants import Violation, check_trace
from engine_verifier.loader import EngineLoader
from engine_verifier.trace import GameTrace

__version__ = "0.1.0"

__all__ = [
    "VerifierConfig",
    "Engine",
    "EngineConstructionError",
    "EngineFactory",
    "GameLogicError",
    "GameObserver",
    "Player",
    "PlayerViolationError",
    "VerificationResult",
    "VerifierHarness",
    "verify_engine",
    "Violation",
    "check_trace",
    "EngineLoader",
    "GameTrace",
]
