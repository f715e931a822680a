"""Command-line entry point for the engine verifier.

Usage:
    engine-verifier my_package.engine:Engine --games 20 --seed 7
    engine-verifier path/to/engine.py:Engine --verbose
    engine-verifier reference

Exit status:
    0: Every game passed every check
    1: At least one violation was found
    2: The engine could not be loaded or constructed
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from engine_verifier.config import LOG_LEVELS, VerifierConfig
from engine_verifier.contract import EngineConstructionError
from engine_verifier.harness.runner import VerifierHarness
from engine_verifier.loader import EngineLoader
from engine_verifier.reference import ReferenceEngine

logger = logging.getLogger(__name__)

REFERENCE_TARGET = "reference"

EXIT_COMPLIANT = 0
EXIT_VIOLATIONS = 1
EXIT_CONSTRUCTION_ERROR = 2


def build_parser(defaults: VerifierConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="engine-verifier",
        description="Verify a deck-building game engine against the rules contract",
    )
    parser.add_argument(
        "engine",
        help="Engine class as 'module:Class', 'file.py:Class', or 'reference'",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=defaults.num_games,
        help=f"Number of normal games to run (default: {defaults.num_games})",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=defaults.seed,
        help=f"Root random seed (default: {defaults.seed})",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print the event stream of every game with violations",
    )
    parser.add_argument(
        "--trace-dir",
        type=Path,
        default=defaults.trace_dir,
        help="Write one JSON trace per game into this directory",
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        choices=LOG_LEVELS,
        type=str.upper,
        help=f"Logging level (default: {defaults.log_level})",
    )
    parser.add_argument(
        "--check-workers",
        type=int,
        default=defaults.check_workers,
        help=f"Threads used for invariant checking (default: {defaults.check_workers})",
    )
    return parser


def load_engine(target: str) -> EngineLoader:
    if target == REFERENCE_TARGET:
        return EngineLoader.from_class(ReferenceEngine)
    return EngineLoader.from_target(target)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the verifier and return the process exit status."""
    try:
        defaults = VerifierConfig.from_env()
    except ValueError as e:
        print(f"engine-verifier: {e}", file=sys.stderr)
        return EXIT_CONSTRUCTION_ERROR

    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    if args.games < 0:
        parser.error("--games must be >= 0")
    if args.check_workers < 1:
        parser.error("--check-workers must be >= 1")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = VerifierConfig(
        seed=args.seed,
        num_games=args.games,
        trace_dir=args.trace_dir,
        log_level=args.log_level,
        check_workers=args.check_workers,
        verbose=args.verbose,
    )

    try:
        loader = load_engine(args.engine)
        harness = VerifierHarness.from_config(loader, config)
        result = harness.verify()
    except EngineConstructionError as e:
        logger.error(f"Cannot construct engine {args.engine!r}: {e}")
        print(f"Engine construction failed: {e}", file=sys.stderr)
        return EXIT_CONSTRUCTION_ERROR

    print(result.format_report(args.engine), end="")
    return EXIT_COMPLIANT if result.is_compliant else EXIT_VIOLATIONS


if __name__ == "__main__":
    sys.exit(main())
