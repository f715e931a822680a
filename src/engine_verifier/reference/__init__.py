"""Reference engine used as a known-good verification target.

Usage:
    from engine_verifier.loader import EngineLoader
    from engine_verifier.reference import ReferenceEngine

    loader = EngineLoader.from_class(ReferenceEngine)
"""

from engine_verifier.reference.engine import (
    ACTION_EFFECTS,
    DEFAULT_MAX_TURNS,
    HAND_SIZE,
    ActionEffect,
    PlayerZones,
    ReferenceEngine,
)

__all__ = [
    "ACTION_EFFECTS",
    "DEFAULT_MAX_TURNS",
    "HAND_SIZE",
    "ActionEffect",
    "PlayerZones",
    "ReferenceEngine",
]
