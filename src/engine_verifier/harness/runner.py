"""Verification harness: runs games against an engine and checks them.

The harness seats instrumented players, drives the engine under test through
N games plus one adversarial game, packages each game into a GameTrace, runs
the invariant checks and aggregates a VerificationResult.

Key principle: one engine factory, many player configurations.
The engine handles all game mechanics; the harness only observes.

Seat templates cycle by ``game_index % 5``:
    0: BigMoney x2
    1: ActionHeavy x2
    2: BigMoney + ActionHeavy + Passive
    3: RandomLegal x4 (independently seeded)
    4: Passive x2

Randomness never comes from a shared stream. Every random choice uses a seed
derived from the root seed and fixed labels (see derive_seed), so a run is
reproducible regardless of how many draws earlier games made.
"""

from __future__ import annotations

import hashlib
import logging
import random
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence, TextIO

from engine_verifier.config import DEFAULT_NUM_GAMES, DEFAULT_SEED, VerifierConfig
from engine_verifier.contract import (
    EngineConstructionError,
    EngineFactory,
    PlayerViolationError,
)
from engine_verifier.harness.export import TraceWriter
from engine_verifier.harness.players import CheatingPlayer, VerifierPlayer
from engine_verifier.harness.recorder import ObserverRecorder
from engine_verifier.harness.results import VerificationResult
from engine_verifier.invariants import Violation, check_trace
from engine_verifier.models.cards import (
    ACTION_CARD_TYPES,
    NUM_SELECTED_ACTION_TYPES,
    CardType,
)
from engine_verifier.models.state import GameResult
from engine_verifier.strategies.base import DecisionStrategy, get_strategy_by_name
from engine_verifier.strategies.deterministic import BigMoneyStrategy
from engine_verifier.strategies.randomized import RandomLegalStrategy
from engine_verifier.trace import GameTrace

logger = logging.getLogger(__name__)

# (player name, strategy name) per seat, indexed by game_index % len(PLAYER_TEMPLATES)
PLAYER_TEMPLATES: tuple[tuple[tuple[str, str], ...], ...] = (
    (("BigMoney-1", "big_money"), ("BigMoney-2", "big_money")),
    (("ActionHeavy-1", "action_heavy"), ("ActionHeavy-2", "action_heavy")),
    (("BigMoney", "big_money"), ("ActionHeavy", "action_heavy"), ("Passive", "passive")),
    (
        ("Random-1", "random_legal"),
        ("Random-2", "random_legal"),
        ("Random-3", "random_legal"),
        ("Random-4", "random_legal"),
    ),
    (("Passive-1", "passive"), ("Passive-2", "passive")),
)

ADVERSARIAL_CHECK_NAME = "PlayerViolationError"


def derive_seed(root_seed: int, *labels: object) -> int:
    """Derive an independent 64-bit seed from the root seed and labels.

    The seed is the first 8 bytes (big-endian) of SHA-256 over
    ``"root:label1:label2..."``. Equal inputs always give equal seeds.
    """
    material = ":".join(str(part) for part in (root_seed, *labels))
    digest = hashlib.sha256(material.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


class VerifierHarness:
    """Runs verification games against an engine factory.

    Usage:
        loader = EngineLoader.from_target("my_engine:Engine")
        harness = VerifierHarness(loader, num_games=10, seed=42)
        result = harness.verify()
        print(result.format_report(loader.name))
    """

    def __init__(
        self,
        engine_factory: EngineFactory,
        num_games: int = DEFAULT_NUM_GAMES,
        seed: int = DEFAULT_SEED,
        verbose: bool = False,
        trace_writer: Optional[TraceWriter] = None,
        check_workers: int = 1,
        verbose_stream: Optional[TextIO] = None,
    ):
        """Initialize the harness.

        Args:
            engine_factory: Builds an engine from (players, action_types)
            num_games: Normal games to run before the adversarial game
            seed: Root seed every random choice is derived from
            verbose: Echo the event stream of every game with violations
            trace_writer: Optional exporter receiving every trace
            check_workers: Threads for invariant checking (1 = inline)
            verbose_stream: Where verbose output goes (default: stderr)
        """
        if num_games < 0:
            raise ValueError(f"num_games must be >= 0, got {num_games}")
        if check_workers < 1:
            raise ValueError(f"check_workers must be >= 1, got {check_workers}")
        self.engine_factory = engine_factory
        self.num_games = num_games
        self.seed = seed
        self.verbose = verbose
        self.trace_writer = trace_writer
        self.check_workers = check_workers
        self.verbose_stream = verbose_stream

    @classmethod
    def from_config(cls, engine_factory: EngineFactory, config: VerifierConfig) -> VerifierHarness:
        trace_writer = TraceWriter(config.trace_dir) if config.trace_dir is not None else None
        return cls(
            engine_factory,
            num_games=config.num_games,
            seed=config.seed,
            verbose=config.verbose,
            trace_writer=trace_writer,
            check_workers=config.check_workers,
        )

    # -------------------------------------------------------------------------
    # Run
    # -------------------------------------------------------------------------

    def verify(self) -> VerificationResult:
        """Run all verification games and return the result.

        Raises:
            EngineConstructionError: If the engine cannot be built at all
        """
        traces: list[GameTrace] = []
        for game_index in range(self.num_games):
            players = self.create_players(game_index)
            action_types = self.select_action_types(game_index)
            trace = self.run_game(game_index, players, action_types)
            if self.trace_writer is not None:
                self.trace_writer.write(trace)
            traces.append(trace)

        all_violations: list[Violation] = []
        passed = 0
        for trace, violations in zip(traces, self._check_traces(traces)):
            all_violations.extend(violations)
            if not violations and trace.completed_successfully:
                passed += 1
            if self.verbose and violations:
                self.print_verbose_trace(trace)

        adversarial = self.run_violation_test(self.num_games)
        if adversarial is not None:
            all_violations.append(adversarial)
        else:
            passed += 1

        logger.info(
            f"Verification finished: {self.num_games + 1} played, {passed} passed, "
            f"{len(all_violations)} violation(s)"
        )
        return VerificationResult(
            games_played=self.num_games + 1,
            games_passed=passed,
            violations=tuple(all_violations),
        )

    def run_game(
        self,
        game_index: int,
        players: Sequence[VerifierPlayer],
        action_types: Sequence[CardType],
    ) -> GameTrace:
        """Play one game and package everything observed into a trace.

        Engine failures during play are captured in the trace; only
        EngineConstructionError escapes.
        """
        recorder = ObserverRecorder()
        result: Optional[GameResult] = None
        error: Optional[BaseException] = None
        logger.info(
            f"Game {game_index}: {', '.join(p.name for p in players)} "
            f"with {', '.join(t.description for t in action_types)}"
        )
        try:
            engine = self.engine_factory(list(players), list(action_types))
            engine.set_observer(recorder)
            result = engine.play()
        except EngineConstructionError:
            raise
        except Exception as e:
            logger.warning(f"Game {game_index} failed: {type(e).__name__}: {e}")
            error = e

        decisions = {player.name: player.decision_log for player in players}
        return GameTrace(
            game_index=game_index,
            num_players=len(players),
            observer_events=recorder.events,
            player_decisions=decisions,
            result=result,
            error=error,
        )

    def run_violation_test(self, game_index: int) -> Optional[Violation]:
        """Check that the engine rejects an off-menu decision.

        Returns:
            None if the engine raised (PlayerViolationError or otherwise),
            a Violation if the game completed without complaint
        """
        recorder = ObserverRecorder()
        cheater = CheatingPlayer("Cheater")
        honest = VerifierPlayer("Honest", BigMoneyStrategy())
        try:
            engine = self.engine_factory([cheater, honest], self.select_action_types(game_index))
            engine.set_observer(recorder)
            engine.play()
        except EngineConstructionError:
            raise
        except PlayerViolationError as e:
            logger.info(f"Adversarial game: engine rejected illegal decision ({e})")
            return None
        except Exception as e:
            logger.warning(
                f"Adversarial game: engine failed with {type(e).__name__} "
                f"instead of PlayerViolationError: {e}"
            )
            return None

        logger.warning("Adversarial game: engine accepted an illegal decision")
        return Violation(
            ADVERSARIAL_CHECK_NAME,
            "Engine did not raise PlayerViolationError for invalid decision",
            game_index,
        )

    # -------------------------------------------------------------------------
    # Configuration selection
    # -------------------------------------------------------------------------

    def create_players(self, game_index: int) -> list[VerifierPlayer]:
        """Seat the players for a game according to its template."""
        template = PLAYER_TEMPLATES[game_index % len(PLAYER_TEMPLATES)]
        return [
            VerifierPlayer(name, self._make_strategy(strategy_name, game_index, slot))
            for slot, (name, strategy_name) in enumerate(template)
        ]

    def _make_strategy(self, strategy_name: str, game_index: int, slot: int) -> DecisionStrategy:
        if strategy_name == "random_legal":
            return RandomLegalStrategy(derive_seed(self.seed, "agent", game_index, slot))
        return get_strategy_by_name(strategy_name)

    def select_action_types(self, game_index: int) -> list[CardType]:
        """Pick 10 of the action card types for a game, without replacement."""
        rng = random.Random(derive_seed(self.seed, "actions", game_index))
        return rng.sample(list(ACTION_CARD_TYPES), NUM_SELECTED_ACTION_TYPES)

    # -------------------------------------------------------------------------
    # Checking and output
    # -------------------------------------------------------------------------

    def _check_traces(self, traces: Sequence[GameTrace]) -> list[list[Violation]]:
        """Run the checker over every trace, keeping game order."""
        if self.check_workers == 1 or len(traces) < 2:
            return [check_trace(trace) for trace in traces]
        with ThreadPoolExecutor(max_workers=self.check_workers) as executor:
            return list(executor.map(check_trace, traces))

    def print_verbose_trace(self, trace: GameTrace) -> None:
        stream = self.verbose_stream or sys.stderr
        print(f"--- Verbose trace for Game {trace.game_index} ---", file=stream)
        for observed in trace.observer_events:
            print(f"  EVENT: {observed.event.description}", file=stream)
        print("---", file=stream)


def verify_engine(
    engine_factory: EngineFactory,
    config: Optional[VerifierConfig] = None,
) -> VerificationResult:
    """Synchronous convenience wrapper: build a harness and run it.

    Args:
        engine_factory: Builds an engine from (players, action_types)
        config: Run settings (defaults to VerifierConfig())

    Returns:
        VerificationResult for the run
    """
    harness = VerifierHarness.from_config(engine_factory, config or VerifierConfig())
    return harness.verify()
