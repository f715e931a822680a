"""Configuration for the engine verifier.

Settings come from environment variables, each with a default:

    ENGINE_VERIFIER_SEED: Root random seed (default: 42)
    ENGINE_VERIFIER_NUM_GAMES: Normal games per run (default: 10)
    ENGINE_VERIFIER_TRACE_DIR: Directory for per-game JSON traces (default: unset, no export)
    ENGINE_VERIFIER_LOG_LEVEL: Logging level name (default: "WARNING")
    ENGINE_VERIFIER_CHECK_WORKERS: Threads used for invariant checking (default: 1)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_SEED = 42
DEFAULT_NUM_GAMES = 10
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_CHECK_WORKERS = 1
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def get_seed() -> int:
    """Get configured root seed from environment."""
    return _get_int("ENGINE_VERIFIER_SEED", DEFAULT_SEED)


def get_num_games() -> int:
    """Get configured number of normal games from environment."""
    num_games = _get_int("ENGINE_VERIFIER_NUM_GAMES", DEFAULT_NUM_GAMES)
    if num_games < 0:
        raise ValueError(f"ENGINE_VERIFIER_NUM_GAMES must be >= 0, got {num_games}")
    return num_games


def get_trace_dir() -> Optional[Path]:
    """Get configured trace export directory, or None to skip export."""
    raw = os.environ.get("ENGINE_VERIFIER_TRACE_DIR", "").strip()
    return Path(raw) if raw else None


def get_log_level() -> str:
    """Get configured logging level name from environment."""
    level = os.environ.get("ENGINE_VERIFIER_LOG_LEVEL", "").strip().upper() or DEFAULT_LOG_LEVEL
    if level not in LOG_LEVELS:
        raise ValueError(
            f"ENGINE_VERIFIER_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {level!r}"
        )
    return level


def get_check_workers() -> int:
    """Get configured invariant-checking thread count from environment."""
    workers = _get_int("ENGINE_VERIFIER_CHECK_WORKERS", DEFAULT_CHECK_WORKERS)
    if workers < 1:
        raise ValueError(f"ENGINE_VERIFIER_CHECK_WORKERS must be >= 1, got {workers}")
    return workers


@dataclass
class VerifierConfig:
    """Settings for one verification run."""

    seed: int = DEFAULT_SEED
    num_games: int = DEFAULT_NUM_GAMES
    trace_dir: Optional[Path] = None
    log_level: str = DEFAULT_LOG_LEVEL
    check_workers: int = DEFAULT_CHECK_WORKERS
    verbose: bool = False

    @classmethod
    def from_env(cls) -> VerifierConfig:
        """Build a config from environment variables."""
        return cls(
            seed=get_seed(),
            num_games=get_num_games(),
            trace_dir=get_trace_dir(),
            log_level=get_log_level(),
            check_workers=get_check_workers(),
        )
