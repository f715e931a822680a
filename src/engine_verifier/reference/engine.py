"""Reference engine for the deck-building rules contract.

A small, correct engine used as a known-good target: the CLI can verify it
with ``engine-verifier reference`` and the test suite derives faulty engines
from it by overriding the hook methods.

Turn Sequence:
1. ACTION - Play action cards while actions remain (always asked once)
2. MONEY - Play money cards for spendable money (always asked once)
3. BUY - Buy affordable cards while buys remain (always asked once)
4. CLEANUP - Hand and played cards go to discard, draw 5 (no decision)
5. CHECK ENDING - Framework pile empty, three piles empty, or turn cap

Card effects that need more input open a sub-phase:
- GAIN: choose a card to gain (Sprint Planning, Refactor)
- DISCARD: discard for Backlog; trash for Refactor (mandatory) and Tech Debt
- REACTION: players holding Monitoring may reveal it to block a Hack
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from engine_verifier.contract import GameLogicError, GameObserver, Player, PlayerViolationError
from engine_verifier.models.cards import (
    ACTION_CARD_TYPES,
    ACTION_PILE_SIZE,
    NUM_SELECTED_ACTION_TYPES,
    STARTING_DECK,
    TOP_TIER_CARD,
    Card,
    CardCategory,
    CardStacks,
    CardType,
    expected_basic_supply,
)
from engine_verifier.models.decisions import (
    DECISION_TYPES,
    BuyDecision,
    Decision,
    DiscardCardDecision,
    EndPhaseDecision,
    GainCardDecision,
    PlayCardDecision,
    TrashCardDecision,
)
from engine_verifier.models.events import (
    DiscardCardEvent,
    EndTurnEvent,
    Event,
    GainCardEvent,
    GameEndEvent,
    GameStartEvent,
    PlayCardEvent,
    TrashCardEvent,
)
from engine_verifier.models.state import (
    GameResult,
    GameState,
    Hand,
    PlayerResult,
    TurnPhase,
)

logger = logging.getLogger(__name__)

HAND_SIZE = 5
DEFAULT_MAX_TURNS = 100
EMPTY_PILES_TO_END = 3


@dataclass(frozen=True)
class ActionEffect:
    """Fixed bonuses an action card grants when played."""

    cards: int = 0
    actions: int = 0
    buys: int = 0
    money: int = 0


ACTION_EFFECTS: dict[CardType, ActionEffect] = {
    CardType.BACKLOG: ActionEffect(actions=1),
    CardType.DAILY_SCRUM: ActionEffect(cards=1, actions=1, buys=1, money=1),
    CardType.IPO: ActionEffect(actions=2, buys=1, money=2),
    CardType.HACK: ActionEffect(cards=2),
    CardType.MONITORING: ActionEffect(cards=2),
    CardType.TECH_DEBT: ActionEffect(),
    CardType.REFACTOR: ActionEffect(),
    CardType.PARALLELIZATION: ActionEffect(cards=2, actions=1),
    CardType.CODE_REVIEW: ActionEffect(cards=1, actions=2),
    CardType.EVERGREEN_TEST: ActionEffect(cards=2, actions=1, money=1),
    CardType.UNIT_TEST: ActionEffect(money=2),
    CardType.SPRINT_PLANNING: ActionEffect(),
    CardType.HOTFIX: ActionEffect(cards=1, actions=1, money=1),
    CardType.PAIR_PROGRAMMING: ActionEffect(cards=3),
    CardType.RETROSPECTIVE: ActionEffect(buys=1, money=1),
}

# Sprint Planning gains a card costing up to this much
SPRINT_PLANNING_GAIN_LIMIT = 4
# Refactor gains a card costing up to the trashed card's cost plus this much
REFACTOR_COST_BONUS = 2
TECH_DEBT_TRASH_LIMIT = 2


@dataclass
class PlayerZones:
    """Where one player's cards are."""

    player: Player
    deck: list[Card] = field(default_factory=list)
    hand: list[Card] = field(default_factory=list)
    discard: list[Card] = field(default_factory=list)
    in_play: list[Card] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.player.name

    def all_cards(self) -> list[Card]:
        return self.deck + self.hand + self.discard + self.in_play


class ReferenceEngine:
    """Plays one game to completion with the given players.

    Hook methods for subclasses:
        initial_supply: Supply counts dealt at game start
        notify: Delivers every event to the observers
        on_illegal_decision: Called when a player answers off-menu
    """

    def __init__(
        self,
        players: Sequence[Player],
        action_types: Optional[Sequence[CardType]] = None,
        max_turns: int = DEFAULT_MAX_TURNS,
        seed: int = 0,
    ):
        """Initialize the engine.

        Args:
            players: Players in seating order
            action_types: Action card types in the supply (default: first 10)
            max_turns: Total turns after which the game stops
            seed: Seed for deck shuffling
        """
        if not players:
            raise ValueError("At least one player is required")
        self.players = list(players)
        self.action_types = (
            list(action_types)
            if action_types is not None
            else list(ACTION_CARD_TYPES[:NUM_SELECTED_ACTION_TYPES])
        )
        self.max_turns = max_turns
        self.rng = random.Random(seed)
        self.observer: Optional[GameObserver] = None

        self.supply: dict[CardType, int] = {}
        self.zones: list[PlayerZones] = []
        self.turn_number = 0
        self.current: Optional[PlayerZones] = None
        self.actions = 0
        self.buys = 0
        self.money = 0
        self._next_card_id = 1
        self._special_effects: dict[CardType, Callable[[PlayerZones, Card], None]] = {
            CardType.BACKLOG: self._resolve_backlog,
            CardType.HACK: self._resolve_hack,
            CardType.TECH_DEBT: self._resolve_tech_debt,
            CardType.REFACTOR: self._resolve_refactor,
            CardType.SPRINT_PLANNING: self._resolve_sprint_planning,
        }

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def initial_supply(self) -> dict[CardType, int]:
        """Supply counts once starting decks have been dealt."""
        supply = expected_basic_supply(len(self.players))
        for card_type in self.action_types:
            supply[card_type] = ACTION_PILE_SIZE
        return supply

    def notify(self, state: Optional[GameState], event: Event) -> None:
        if self.observer is not None:
            self.observer.notify_event(state, event)
        for zones in self.zones:
            player_observer = zones.player.observer
            if player_observer is not None:
                player_observer.notify_event(state, event)

    def on_illegal_decision(
        self,
        player: Player,
        decision: Decision,
        options: Sequence[Decision],
    ) -> Decision:
        """Handle a decision that was not offered.

        Overrides must return one of ``options``.

        Raises:
            PlayerViolationError: Always
        """
        description = getattr(decision, "description", repr(decision))
        raise PlayerViolationError(
            f"{player.name} chose {description}, "
            f"which was not among {len(options)} offered options",
            player_name=player.name,
            decision=decision if isinstance(decision, DECISION_TYPES) else None,
        )

    # -------------------------------------------------------------------------
    # Game loop
    # -------------------------------------------------------------------------

    def set_observer(self, observer: GameObserver) -> None:
        self.observer = observer

    def play(self) -> GameResult:
        """Play the game to completion and return the ranked results."""
        self._setup()
        self.notify(None, GameStartEvent(initial_supply=CardStacks.of(self.supply)))

        seat = 0
        while True:
            self.current = self.zones[seat]
            self.turn_number += 1
            self._play_turn(self.current)
            if self._is_game_over():
                break
            seat = (seat + 1) % len(self.zones)

        self.notify(
            self._snapshot(TurnPhase.CLEANUP, self.current),
            GameEndEvent(final_supply=CardStacks.of(self.supply)),
        )
        logger.debug(f"Game over after {self.turn_number} turns")
        return self._result()

    def _setup(self) -> None:
        self.supply = self.initial_supply()
        self.zones = []
        for player in self.players:
            zones = PlayerZones(player=player)
            for card_type, count in STARTING_DECK:
                zones.deck.extend(self._new_card(card_type) for _ in range(count))
            self.rng.shuffle(zones.deck)
            self._draw(zones, HAND_SIZE)
            self.zones.append(zones)

    def _play_turn(self, zones: PlayerZones) -> None:
        self.actions = 1
        self.buys = 1
        self.money = 0
        self._action_phase(zones)
        self._money_phase(zones)
        self._buy_phase(zones)
        self._cleanup(zones)
        self.notify(
            self._snapshot(TurnPhase.CLEANUP, zones),
            EndTurnEvent(player_name=zones.name, turn=self.turn_number),
        )

    def _action_phase(self, zones: PlayerZones) -> None:
        while self.actions > 0:
            options: list[Decision] = [
                PlayCardDecision(card=card)
                for card in zones.hand
                if card.category == CardCategory.ACTION
            ]
            options.append(EndPhaseDecision(phase=TurnPhase.ACTION))
            decision = self._ask(zones, TurnPhase.ACTION, options)
            if not isinstance(decision, PlayCardDecision):
                return
            self.actions -= 1
            self._play_action(zones, decision.card)

    def _money_phase(self, zones: PlayerZones) -> None:
        while True:
            options: list[Decision] = [
                PlayCardDecision(card=card)
                for card in zones.hand
                if card.category == CardCategory.MONEY
            ]
            options.append(EndPhaseDecision(phase=TurnPhase.MONEY))
            decision = self._ask(zones, TurnPhase.MONEY, options)
            if not isinstance(decision, PlayCardDecision):
                return
            card = decision.card
            self._move_to_play(zones, card)
            self.money += card.value
            self.notify(
                self._snapshot(TurnPhase.MONEY, zones),
                PlayCardEvent(player_name=zones.name, card=card),
            )

    def _buy_phase(self, zones: PlayerZones) -> None:
        while self.buys > 0:
            options: list[Decision] = [
                BuyDecision(card_type=card_type)
                for card_type, count in self.supply.items()
                if count > 0 and card_type.cost <= self.money
            ]
            options.append(EndPhaseDecision(phase=TurnPhase.BUY))
            decision = self._ask(zones, TurnPhase.BUY, options)
            if not isinstance(decision, BuyDecision):
                return
            self.buys -= 1
            self.money -= decision.card_type.cost
            self._gain(zones, decision.card_type, TurnPhase.BUY)

    def _cleanup(self, zones: PlayerZones) -> None:
        zones.discard.extend(zones.in_play)
        zones.discard.extend(zones.hand)
        zones.in_play.clear()
        zones.hand.clear()
        self._draw(zones, HAND_SIZE)

    def _is_game_over(self) -> bool:
        if self.supply.get(TOP_TIER_CARD, 0) == 0:
            return True
        empty_piles = sum(1 for count in self.supply.values() if count == 0)
        if empty_piles >= EMPTY_PILES_TO_END:
            return True
        return self.turn_number >= self.max_turns

    def _result(self) -> GameResult:
        player_results = []
        for zones in self.zones:
            ending_deck = tuple(zones.all_cards())
            score = sum(c.value for c in ending_deck if c.category == CardCategory.VICTORY)
            player_results.append(
                PlayerResult(player_name=zones.name, ending_deck=ending_deck, score=score)
            )
        player_results.sort(key=lambda pr: pr.score, reverse=True)
        return GameResult(player_results=tuple(player_results))

    # -------------------------------------------------------------------------
    # Action cards
    # -------------------------------------------------------------------------

    def _play_action(self, zones: PlayerZones, card: Card) -> None:
        self._move_to_play(zones, card)
        event = PlayCardEvent(player_name=zones.name, card=card)
        self.notify(self._snapshot(TurnPhase.ACTION, zones), event)

        effect = ACTION_EFFECTS[card.type]
        self.actions += effect.actions
        self.buys += effect.buys
        self.money += effect.money
        self._draw(zones, effect.cards)

        special = self._special_effects.get(card.type)
        if special is not None:
            special(zones, card)

    def _resolve_backlog(self, zones: PlayerZones, card: Card) -> None:
        """Discard any number of cards, then draw that many."""
        discarded = 0
        while zones.hand:
            options: list[Decision] = [DiscardCardDecision(card=c) for c in zones.hand]
            options.append(EndPhaseDecision(phase=TurnPhase.DISCARD))
            decision = self._ask(zones, TurnPhase.DISCARD, options)
            if not isinstance(decision, DiscardCardDecision):
                break
            zones.hand.remove(decision.card)
            zones.discard.append(decision.card)
            discarded += 1
            self.notify(
                self._snapshot(TurnPhase.DISCARD, zones),
                DiscardCardEvent(player_name=zones.name, card=decision.card),
            )
        self._draw(zones, discarded)

    def _resolve_hack(self, zones: PlayerZones, card: Card) -> None:
        """Every other player gains a Bug unless they reveal Monitoring."""
        trigger = PlayCardEvent(player_name=zones.name, card=card)
        for victim in self.zones:
            if victim is zones:
                continue
            if self._reveals_monitoring(victim, trigger):
                logger.debug(f"{victim.name} blocked Hack with Monitoring")
                continue
            if self.supply.get(CardType.BUG, 0) > 0:
                self._gain(victim, CardType.BUG, TurnPhase.REACTION)

    def _reveals_monitoring(self, victim: PlayerZones, trigger: PlayCardEvent) -> bool:
        monitoring = [c for c in victim.hand if c.type == CardType.MONITORING]
        if not monitoring:
            return False
        options: list[Decision] = [PlayCardDecision(card=c) for c in monitoring]
        options.append(EndPhaseDecision(phase=TurnPhase.REACTION))
        decision = self._ask(victim, TurnPhase.REACTION, options, trigger)
        return isinstance(decision, PlayCardDecision)

    def _resolve_tech_debt(self, zones: PlayerZones, card: Card) -> None:
        """Trash up to two cards from hand."""
        for _ in range(TECH_DEBT_TRASH_LIMIT):
            if not zones.hand:
                return
            options: list[Decision] = [TrashCardDecision(card=c) for c in zones.hand]
            options.append(EndPhaseDecision(phase=TurnPhase.DISCARD))
            decision = self._ask(zones, TurnPhase.DISCARD, options)
            if not isinstance(decision, TrashCardDecision):
                return
            self._trash(zones, decision.card)

    def _resolve_refactor(self, zones: PlayerZones, card: Card) -> None:
        """Trash a card from hand, then gain one costing up to 2 more."""
        if not zones.hand:
            return
        options: list[Decision] = [TrashCardDecision(card=c) for c in zones.hand]
        decision = self._ask(zones, TurnPhase.DISCARD, options)
        if not isinstance(decision, TrashCardDecision):
            raise GameLogicError(f"Refactor requires a trash, got {decision.description}")
        self._trash(zones, decision.card)
        self._choose_gain(zones, decision.card.cost + REFACTOR_COST_BONUS)

    def _resolve_sprint_planning(self, zones: PlayerZones, card: Card) -> None:
        self._choose_gain(zones, SPRINT_PLANNING_GAIN_LIMIT)

    def _choose_gain(self, zones: PlayerZones, max_cost: int) -> None:
        options: list[Decision] = [
            GainCardDecision(card_type=card_type)
            for card_type, count in self.supply.items()
            if count > 0 and card_type.cost <= max_cost
        ]
        if not options:
            return
        decision = self._ask(zones, TurnPhase.GAIN, options)
        if not isinstance(decision, GainCardDecision):
            raise GameLogicError(f"Expected a gain, got {decision.description}")
        self._gain(zones, decision.card_type, TurnPhase.GAIN)

    # -------------------------------------------------------------------------
    # Card movement
    # -------------------------------------------------------------------------

    def _new_card(self, card_type: CardType) -> Card:
        card = Card(type=card_type, id=self._next_card_id)
        self._next_card_id += 1
        return card

    def _draw(self, zones: PlayerZones, count: int) -> None:
        for _ in range(count):
            if not zones.deck:
                if not zones.discard:
                    return
                zones.deck = zones.discard
                zones.discard = []
                self.rng.shuffle(zones.deck)
            zones.hand.append(zones.deck.pop())

    def _move_to_play(self, zones: PlayerZones, card: Card) -> None:
        zones.hand.remove(card)
        zones.in_play.append(card)

    def _gain(self, zones: PlayerZones, card_type: CardType, phase: TurnPhase) -> None:
        self.supply[card_type] -= 1
        zones.discard.append(self._new_card(card_type))
        self.notify(
            self._snapshot(phase, zones),
            GainCardEvent(player_name=zones.name, card_type=card_type),
        )

    def _trash(self, zones: PlayerZones, card: Card) -> None:
        zones.hand.remove(card)
        self.notify(
            self._snapshot(TurnPhase.DISCARD, zones),
            TrashCardEvent(player_name=zones.name, card=card),
        )

    # -------------------------------------------------------------------------
    # Decisions and snapshots
    # -------------------------------------------------------------------------

    def _snapshot(self, phase: TurnPhase, zones: PlayerZones) -> GameState:
        return GameState(
            phase=phase,
            spendable_money=self.money,
            available_actions=self.actions,
            available_buys=self.buys,
            current_player_hand=Hand(
                played_cards=tuple(zones.in_play),
                unplayed_cards=tuple(zones.hand),
            ),
            buyable_cards=CardStacks.of(self.supply),
            current_player_name=zones.name,
        )

    def _ask(
        self,
        zones: PlayerZones,
        phase: TurnPhase,
        options: list[Decision],
        event: Optional[Event] = None,
    ) -> Decision:
        state = self._snapshot(phase, zones)
        decision = zones.player.make_decision(state, tuple(options), event)
        if decision not in options:
            decision = self.on_illegal_decision(zones.player, decision, options)
        return decision
