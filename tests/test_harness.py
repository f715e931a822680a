"""Tests for the verification harness.

Runs the harness against the reference engine and against faulty engines
derived from it. Each faulty engine breaks exactly one rule so the expected
violation is unambiguous.
"""

import io
import json

import pytest

from engine_verifier.contract import EngineConstructionError, GameLogicError
from engine_verifier.harness.players import VerifierPlayer
from engine_verifier.harness.results import VerificationResult
from engine_verifier.harness.runner import (
    ADVERSARIAL_CHECK_NAME,
    PLAYER_TEMPLATES,
    VerifierHarness,
    derive_seed,
    verify_engine,
)
from engine_verifier.config import VerifierConfig
from engine_verifier.harness.export import TraceWriter
from engine_verifier.invariants import check_trace
from engine_verifier.loader import EngineLoader
from engine_verifier.models.cards import ACTION_CARD_TYPES, CardType
from engine_verifier.models.events import TrashCardEvent
from engine_verifier.reference import ReferenceEngine
from engine_verifier.strategies import (
    ActionHeavyStrategy,
    BigMoneyStrategy,
    PassiveStrategy,
    RandomLegalStrategy,
)


# =============================================================================
# Faulty engines
# =============================================================================


class ExtraBugEngine(ReferenceEngine):
    """Deals one Bug too many."""

    def initial_supply(self):
        supply = super().initial_supply()
        supply[CardType.BUG] += 1
        return supply


class SilentTrashEngine(ReferenceEngine):
    """Trashes cards without telling the observer."""

    def notify(self, state, event):
        if isinstance(event, TrashCardEvent):
            return
        super().notify(state, event)


class PermissiveEngine(ReferenceEngine):
    """Quietly replaces off-menu decisions with the last offered option."""

    def on_illegal_decision(self, player, decision, options):
        return options[-1]


class CrashingEngine(ReferenceEngine):
    def play(self):
        raise GameLogicError("deck exploded")


class UnrelatedFailureEngine(ReferenceEngine):
    def play(self):
        raise RuntimeError("not a legality failure")


def harness_for(engine_class, **kwargs) -> VerifierHarness:
    return VerifierHarness(EngineLoader.from_class(engine_class), **kwargs)


# =============================================================================
# Seeds and configuration selection
# =============================================================================


class TestDeriveSeed:
    def test_deterministic(self):
        assert derive_seed(42, "actions", 0) == derive_seed(42, "actions", 0)

    def test_labels_matter(self):
        seeds = {
            derive_seed(42, "actions", 0),
            derive_seed(42, "actions", 1),
            derive_seed(42, "agent", 0, 0),
            derive_seed(43, "actions", 0),
        }
        assert len(seeds) == 4

    def test_fits_in_64_bits(self):
        assert 0 <= derive_seed(7, "agent", 3, 2) < 2**64


class TestConfigurationSelection:
    """Tests for player templates and action-type selection."""

    def setup_method(self):
        self.harness = harness_for(ReferenceEngine, seed=42)

    def test_template_cycle(self):
        names = [[p.name for p in self.harness.create_players(i)] for i in range(6)]
        assert names[0] == ["BigMoney-1", "BigMoney-2"]
        assert names[1] == ["ActionHeavy-1", "ActionHeavy-2"]
        assert names[2] == ["BigMoney", "ActionHeavy", "Passive"]
        assert names[3] == ["Random-1", "Random-2", "Random-3", "Random-4"]
        assert names[4] == ["Passive-1", "Passive-2"]
        assert names[5] == names[0]

    def test_template_strategies(self):
        strategies = [type(p.strategy) for p in self.harness.create_players(2)]
        assert strategies == [BigMoneyStrategy, ActionHeavyStrategy, PassiveStrategy]

    def test_random_players_seeded_independently(self):
        players = self.harness.create_players(3)
        assert all(isinstance(p.strategy, RandomLegalStrategy) for p in players)
        assert len({p.strategy.seed for p in players}) == 4
        assert players[0].strategy.seed == derive_seed(42, "agent", 3, 0)

    def test_ten_distinct_action_types(self):
        selected = self.harness.select_action_types(0)
        assert len(selected) == 10
        assert len(set(selected)) == 10
        assert set(selected) <= set(ACTION_CARD_TYPES)

    def test_selection_reproducible(self):
        again = harness_for(ReferenceEngine, seed=42)
        for i in range(5):
            assert self.harness.select_action_types(i) == again.select_action_types(i)

    def test_selection_depends_on_seed(self):
        other = harness_for(ReferenceEngine, seed=43)
        assert self.harness.select_action_types(0) != other.select_action_types(0)

    def test_five_templates(self):
        assert len(PLAYER_TEMPLATES) == 5

    def test_rejects_negative_game_count(self):
        with pytest.raises(ValueError):
            harness_for(ReferenceEngine, num_games=-1)


# =============================================================================
# Single games
# =============================================================================


class TestRunGame:
    """Tests for VerifierHarness.run_game."""

    def setup_method(self):
        self.harness = harness_for(ReferenceEngine, seed=42)

    def _run(self, game_index: int):
        players = self.harness.create_players(game_index)
        action_types = self.harness.select_action_types(game_index)
        return self.harness.run_game(game_index, players, action_types)

    def test_big_money_pair_is_clean(self):
        trace = self._run(0)
        assert trace.completed_successfully
        assert trace.num_players == 2
        assert set(trace.player_decisions) == {"BigMoney-1", "BigMoney-2"}
        assert check_trace(trace) == []

    def test_passive_game_terminates(self):
        trace = self._run(4)
        assert trace.completed_successfully
        assert check_trace(trace) == []

    @pytest.mark.parametrize("game_index", [1, 2, 3])
    def test_other_templates_are_clean(self, game_index):
        trace = self._run(game_index)
        assert trace.completed_successfully
        assert check_trace(trace) == []

    def test_same_seed_same_trace(self):
        first = self._run(3)
        second = harness_for(ReferenceEngine, seed=42)
        players = second.create_players(3)
        again = second.run_game(3, players, second.select_action_types(3))
        assert first.player_decisions == again.player_decisions
        assert first.result == again.result

    def test_engine_failure_captured(self):
        harness = harness_for(CrashingEngine)
        trace = harness.run_game(0, harness.create_players(0), harness.select_action_types(0))
        assert not trace.completed_successfully
        assert isinstance(trace.error, GameLogicError)
        assert check_trace(trace) == []

    def test_construction_error_propagates(self):
        def factory(players, action_types):
            raise EngineConstructionError("no usable constructor")

        harness = VerifierHarness(factory)
        with pytest.raises(EngineConstructionError):
            harness.run_game(0, harness.create_players(0), harness.select_action_types(0))


class TestFaultyEngines:
    """Each faulty engine trips exactly the check it was built to trip."""

    def test_extra_bug_is_an_initial_supply_violation(self):
        harness = harness_for(ExtraBugEngine)
        trace = harness.run_game(0, harness.create_players(0), harness.select_action_types(0))
        violations = check_trace(trace)

        assert len(violations) == 1
        assert violations[0].check_name == "Initial supply"
        assert violations[0].description == "Bug: expected 20 but found 21"

    def test_silent_trash_breaks_conservation(self):
        harness = harness_for(SilentTrashEngine)
        players = [
            VerifierPlayer("ActionHeavy-1", ActionHeavyStrategy()),
            VerifierPlayer("ActionHeavy-2", ActionHeavyStrategy()),
        ]
        trace = harness.run_game(0, players, [CardType.REFACTOR])

        assert trace.completed_successfully
        conservation = [v for v in check_trace(trace) if v.check_name == "Card conservation"]
        assert len(conservation) == 1
        assert "0 TrashCardEvents" in conservation[0].description

    def test_permissive_engine_fails_adversarial_check(self):
        violation = harness_for(PermissiveEngine).run_violation_test(10)
        assert violation is not None
        assert violation.check_name == ADVERSARIAL_CHECK_NAME
        assert violation.game_index == 10


class TestViolationTest:
    """Tests for the adversarial game."""

    def test_reference_engine_rejects_cheater(self):
        assert harness_for(ReferenceEngine).run_violation_test(10) is None

    def test_unrelated_failure_counts_as_pass(self):
        assert harness_for(UnrelatedFailureEngine).run_violation_test(10) is None


# =============================================================================
# Full verification runs
# =============================================================================


@pytest.mark.slow
class TestVerify:
    """Tests for VerifierHarness.verify."""

    def test_reference_engine_is_compliant(self):
        result = harness_for(ReferenceEngine, num_games=10, seed=42).verify()
        assert result.is_compliant
        assert result.games_played == 11
        assert result.games_passed == 11

    def test_reproducible(self):
        first = harness_for(ExtraBugEngine, num_games=5, seed=9).verify()
        second = harness_for(ExtraBugEngine, num_games=5, seed=9).verify()
        assert first == second

    def test_violations_in_game_order(self):
        result = harness_for(ExtraBugEngine, num_games=5).verify()
        assert [v.game_index for v in result.violations] == [0, 1, 2, 3, 4]
        assert result.games_passed == 1
        assert not result.is_compliant

    def test_failed_games_not_passed(self):
        result = harness_for(CrashingEngine, num_games=3).verify()
        assert result.violations == ()
        assert result.games_played == 4
        assert result.games_passed == 1

    def test_adversarial_violation_is_last(self):
        result = harness_for(PermissiveEngine, num_games=2).verify()
        assert [v.check_name for v in result.violations] == [ADVERSARIAL_CHECK_NAME]
        assert result.violations[0].game_index == 2
        assert result.games_passed == 2

    def test_zero_games_runs_only_adversarial(self):
        result = harness_for(ReferenceEngine, num_games=0).verify()
        assert result == VerificationResult(games_played=1, games_passed=1, violations=())

    def test_parallel_checking_matches_sequential(self):
        sequential = harness_for(ExtraBugEngine, num_games=5, check_workers=1).verify()
        parallel = harness_for(ExtraBugEngine, num_games=5, check_workers=3).verify()
        assert sequential == parallel

    def test_verbose_prints_failing_games(self):
        stream = io.StringIO()
        harness_for(ExtraBugEngine, num_games=1, verbose=True, verbose_stream=stream).verify()
        output = stream.getvalue()
        assert "--- Verbose trace for Game 0 ---" in output
        assert "  EVENT: Game started" in output

    def test_trace_export(self, tmp_path):
        writer = TraceWriter(tmp_path)
        harness_for(ReferenceEngine, num_games=2, trace_writer=writer).verify()
        files = sorted(p.name for p in tmp_path.iterdir())
        assert files == ["game_0.json", "game_1.json"]
        assert json.loads((tmp_path / "game_1.json").read_text())["completed"] is True

    def test_verify_engine_with_config(self):
        config = VerifierConfig(num_games=1, seed=3)
        result = verify_engine(EngineLoader.from_class(ReferenceEngine), config)
        assert result.games_played == 2
        assert result.is_compliant
