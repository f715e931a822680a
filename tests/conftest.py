"""Shared pytest fixtures and markers for all tests."""

import pytest


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture
def sample_game_state():
    """Provide an ACTION-phase state with a starting hand."""
    from engine_verifier.models.cards import Card, CardStacks, CardType
    from engine_verifier.models.state import GameState, Hand, TurnPhase

    return GameState(
        phase=TurnPhase.ACTION,
        spendable_money=0,
        available_actions=1,
        available_buys=1,
        current_player_hand=Hand(
            unplayed_cards=(
                Card(type=CardType.BITCOIN, id=1),
                Card(type=CardType.BITCOIN, id=2),
                Card(type=CardType.BITCOIN, id=3),
                Card(type=CardType.METHOD, id=4),
                Card(type=CardType.METHOD, id=5),
            )
        ),
        buyable_cards=CardStacks.of({CardType.FRAMEWORK: 8, CardType.BITCOIN: 60}),
        current_player_name="Alice",
    )


@pytest.fixture
def reference_loader():
    """Provide an EngineLoader for the bundled reference engine."""
    from engine_verifier.loader import EngineLoader
    from engine_verifier.reference import ReferenceEngine

    return EngineLoader.from_class(ReferenceEngine)
