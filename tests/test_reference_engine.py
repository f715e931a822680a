"""Tests for the reference engine.

The engine runs against real strategies; the recorder and every invariant
check are applied to the resulting games.
"""

import pytest

from engine_verifier.contract import Engine, GameLogicError, PlayerViolationError
from engine_verifier.harness.players import CheatingPlayer, VerifierPlayer
from engine_verifier.harness.recorder import ObserverRecorder
from engine_verifier.invariants import check_trace
from engine_verifier.models.cards import (
    ACTION_CARD_TYPES,
    STARTING_DECK_SIZE,
    CardType,
    expected_basic_supply,
)
from engine_verifier.models.decisions import BuyDecision, EndPhaseDecision
from engine_verifier.models.events import GameEndEvent, GameStartEvent, TrashCardEvent
from engine_verifier.models.state import TurnPhase
from engine_verifier.reference import ACTION_EFFECTS, HAND_SIZE, ReferenceEngine
from engine_verifier.strategies import (
    ActionHeavyStrategy,
    BigMoneyStrategy,
    PassiveStrategy,
    RandomLegalStrategy,
)
from engine_verifier.trace import GameTrace

SELECTED = list(ACTION_CARD_TYPES[:10])


class StubbornPlayer:
    """Answers every menu by ending the phase."""

    name = "Stubborn"
    observer = None

    def make_decision(self, state, options, event):
        return EndPhaseDecision(phase=state.phase)


class PassThroughEngine(ReferenceEngine):
    """Hands off-menu decisions back unchanged."""

    def on_illegal_decision(self, player, decision, options):
        return decision


def run(players, action_types=None, **kwargs):
    engine = ReferenceEngine(players, action_types or SELECTED, **kwargs)
    recorder = ObserverRecorder()
    engine.set_observer(recorder)
    result = engine.play()
    trace = GameTrace(
        game_index=0,
        num_players=len(players),
        observer_events=recorder.events,
        player_decisions={p.name: p.decision_log for p in players},
        result=result,
    )
    return engine, trace


# =============================================================================
# Setup
# =============================================================================


class TestSetup:
    def test_satisfies_engine_protocol(self):
        assert isinstance(ReferenceEngine([VerifierPlayer("A", PassiveStrategy())]), Engine)

    def test_requires_players(self):
        with pytest.raises(ValueError):
            ReferenceEngine([])

    def test_default_action_types(self):
        engine = ReferenceEngine([VerifierPlayer("A", PassiveStrategy())])
        assert engine.action_types == SELECTED

    def test_initial_supply(self):
        engine = ReferenceEngine([VerifierPlayer(n, PassiveStrategy()) for n in "ABC"], SELECTED)
        supply = engine.initial_supply()
        for card_type, count in expected_basic_supply(3).items():
            assert supply[card_type] == count
        assert all(supply[t] == 10 for t in SELECTED)
        assert supply[CardType.BUG] == 30

    def test_every_action_type_has_an_effect(self):
        assert set(ACTION_EFFECTS) == set(ACTION_CARD_TYPES)


# =============================================================================
# Full games
# =============================================================================


class TestPlay:
    """Tests for ReferenceEngine.play."""

    def test_big_money_game_passes_every_check(self):
        players = [VerifierPlayer("A", BigMoneyStrategy()), VerifierPlayer("B", BigMoneyStrategy())]
        _, trace = run(players)
        assert check_trace(trace) == []

    def test_first_decision_sees_starting_hand(self):
        players = [VerifierPlayer("A", PassiveStrategy()), VerifierPlayer("B", PassiveStrategy())]
        run(players, max_turns=2)
        first = players[0].decision_log[0]
        assert first.state.phase == TurnPhase.ACTION
        assert len(first.state.current_player_hand.unplayed_cards) == HAND_SIZE
        assert first.options == (EndPhaseDecision(phase=TurnPhase.ACTION),)

    def test_passive_game_hits_turn_cap(self):
        players = [VerifierPlayer("A", PassiveStrategy()), VerifierPlayer("B", PassiveStrategy())]
        engine, trace = run(players, max_turns=20)
        assert engine.turn_number == 20
        assert all(len(pr.ending_deck) == STARTING_DECK_SIZE for pr in trace.result.player_results)
        assert check_trace(trace) == []

        for records in trace.player_decisions.values():
            assert records
            for record in records:
                if any(isinstance(o, EndPhaseDecision) for o in record.options):
                    assert isinstance(record.chosen, EndPhaseDecision)

    def test_lifecycle_events_bracket_the_game(self):
        players = [VerifierPlayer("A", PassiveStrategy())]
        _, trace = run(players, max_turns=3)
        assert isinstance(trace.observer_events[0].event, GameStartEvent)
        assert isinstance(trace.observer_events[-1].event, GameEndEvent)
        assert trace.observer_events[0].state is None

    def test_results_sorted_by_score(self):
        players = [VerifierPlayer("Passive", PassiveStrategy()), VerifierPlayer("Money", BigMoneyStrategy())]
        _, trace = run(players, max_turns=60)
        scores = [pr.score for pr in trace.result.player_results]
        assert scores == sorted(scores, reverse=True)
        assert trace.result.player_results[0].player_name == "Money"

    def test_refactor_trashes_with_events(self):
        players = [VerifierPlayer("A", ActionHeavyStrategy()), VerifierPlayer("B", ActionHeavyStrategy())]
        _, trace = run(players, action_types=[CardType.REFACTOR], max_turns=30)
        assert trace.events_of(TrashCardEvent)
        conservation = [v for v in check_trace(trace) if v.check_name == "Card conservation"]
        assert conservation == []

    @pytest.mark.parametrize("seed", [1, 2, 3])
    def test_random_players_pass_every_check(self, seed):
        players = [VerifierPlayer(f"R{i}", RandomLegalStrategy(seed * 10 + i)) for i in range(4)]
        _, trace = run(players, seed=seed)
        assert check_trace(trace) == []

    def test_same_seed_same_game(self):
        def decisions(seed):
            players = [VerifierPlayer(f"R{i}", RandomLegalStrategy(i)) for i in range(2)]
            _, trace = run(players, seed=seed, max_turns=30)
            return trace.player_decisions

        assert decisions(5) == decisions(5)


# =============================================================================
# Illegal decisions
# =============================================================================


class TestIllegalDecisions:
    def test_cheater_rejected_on_third_call(self):
        cheater = CheatingPlayer("Cheater")
        engine = ReferenceEngine([cheater, VerifierPlayer("Honest", BigMoneyStrategy())], SELECTED)

        with pytest.raises(PlayerViolationError) as exc_info:
            engine.play()

        assert cheater.call_count == 3
        assert exc_info.value.player_name == "Cheater"
        assert exc_info.value.decision == BuyDecision(card_type=CardType.FRAMEWORK)

    @pytest.mark.parametrize(
        "resolve",
        [
            lambda engine, zones: engine._choose_gain(zones, 4),
            lambda engine, zones: engine._resolve_refactor(zones, zones.hand[0]),
        ],
        ids=["gain", "refactor"],
    )
    def test_mandatory_choice_answered_with_end_phase(self, resolve):
        engine = PassThroughEngine([StubbornPlayer()], [CardType.REFACTOR])
        engine._setup()

        with pytest.raises(GameLogicError):
            resolve(engine, engine.zones[0])
