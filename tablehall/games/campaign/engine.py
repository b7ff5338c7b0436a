"""
Campaign Engine - Turn and phase state machine for the cooperative game.

Phases:
    ATTACK          -> SUFFER_DAMAGE (boss survives and hits back)
                    -> ATTACK (boss beaten, or boss attack is 0: turn passes)
                    -> SPECIAL_SELECT (multiplayer Special played)
    SUFFER_DAMAGE   -> ATTACK (next player)
    SPECIAL_SELECT  -> ATTACK (chosen player)

Design principles:
- The engine owns the decks; the roster owns the hands
- Validate everything before mutating anything
- Rule violations are returned as REJECTED results, never raised
- One action at a time: callers serialize access per game
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Callable

from ...engine_core.action import (
    Action,
    ActionResult,
    ActionType,
    BossOutcome,
    BossState,
    GameOverInfo,
    GameOverReason,
    Outcome,
    RejectionKind,
    Victory,
)
from ...engine_core.roster import SessionRoster
from .cards import Card, CardKind, Suit, SUIT_ORDER, build_boss_cards, build_shared_cards
from .decks import HostileDeck, SharedDeck, Shuffler, fisher_yates
from .hand import PlayerHand, max_hand_size

logger = logging.getLogger(__name__)

MIN_PLAYERS = 1
MAX_PLAYERS = 4
SOLO_SPECIAL_PLAYS = 2
MAX_COMBO_RANK = 5
MAX_COMBO_TOTAL = 10


class TurnPhase(Enum):
    ATTACK = "attack"
    SUFFER_DAMAGE = "suffer_damage"
    SPECIAL_SELECT = "special_select"


def is_legal_combination(cards: list[Card]) -> bool:
    """
    Check whether cards may be played together.

    A single card is always fine. Two cards are fine if either is a
    Companion. Otherwise every card must be a Number card of the same
    rank, rank 5 or less, totalling 10 or less.
    """
    if len(cards) <= 1:
        return True
    if len(cards) == 2 and any(card.kind == CardKind.COMPANION for card in cards):
        return True
    first = cards[0]
    same_rank = all(
        card.rank == first.rank and card.kind == CardKind.NUMBER and card.rank <= MAX_COMBO_RANK
        for card in cards
    )
    return same_rank and sum(card.rank for card in cards) <= MAX_COMBO_TOTAL


class CampaignEngine:
    """
    One running cooperative game.

    Usage:
        engine = CampaignEngine.for_players(["alice", "bob"])
        engine.start()
        result = engine.play_cards("alice", [0])
        if result.outcome == Outcome.GAME_OVER:
            ...
    """

    def __init__(
        self,
        roster: SessionRoster[PlayerHand],
        shuffler: Shuffler | None = None,
        boss_cards: list[Card] | None = None,
        shared_cards: list[Card] | None = None,
        on_activity: Callable[[], None] | None = None,
    ):
        if not MIN_PLAYERS <= roster.size <= MAX_PLAYERS:
            raise ValueError(f"Campaign needs {MIN_PLAYERS}-{MAX_PLAYERS} players, got {roster.size}")

        self.roster = roster
        self.shuffler = shuffler or fisher_yates
        self.on_activity = on_activity
        self._refresh_hand_limits()

        if boss_cards is None:
            boss_cards = build_boss_cards(self.shuffler)
        self.hostile = HostileDeck(boss_cards)
        # A built deck follows the table size until the game starts
        self.builds_shared_deck = shared_cards is None
        if self.builds_shared_deck:
            shared_cards = self._fresh_shared_cards()
        self.shared = SharedDeck(shared_cards, shuffler=self.shuffler)

        self.phase = TurnPhase.ATTACK
        self.cards_in_play: list[Card] = []
        self.specials_remaining = SOLO_SPECIAL_PLAYS
        self.consecutive_yields = 0
        self.special_selector_id: str | None = None
        self.removed_cards: list[Card] = []

        self.started = False
        self.ended = False
        self.game_over: GameOverInfo | None = None
        self.initial_total = self.total_cards()

    @classmethod
    def for_players(cls, player_ids: list[str], **kwargs) -> CampaignEngine:
        """Seat the given players in order and build a fresh game."""
        roster = SessionRoster([PlayerHand(player_id=pid) for pid in player_ids])
        return cls(roster, **kwargs)

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def boss(self) -> Card:
        return self.hostile.active

    @property
    def is_multiplayer(self) -> bool:
        return self.roster.is_multiplayer

    @property
    def is_over(self) -> bool:
        return self.ended or self.game_over is not None

    def hand_for(self, player_id: str) -> PlayerHand | None:
        return self.roster.get(player_id)

    def total_cards(self) -> int:
        """Every card still in the game, wherever it is."""
        hands = sum(hand.size for hand in self.roster)
        active = 1 if self.hostile.active.health > 0 else 0
        return (
            self.shared.size
            + len(self.shared.discard)
            + hands
            + len(self.cards_in_play)
            + len(self.hostile.stack)
            + active
        )

    def can_yield(self, player_id: str) -> bool:
        if self.is_over or not self.roster.is_current(player_id):
            return False
        if self.phase != TurnPhase.ATTACK:
            return False
        return self._yield_allowed()

    def can_play_special(self, player_id: str) -> bool:
        if self.is_over or not self.roster.is_current(player_id):
            return False
        if not self.is_multiplayer:
            return self.specials_remaining > 0 and self.phase in (TurnPhase.ATTACK, TurnPhase.SUFFER_DAMAGE)
        return self.phase == TurnPhase.ATTACK and self.roster.current.has_special

    def available_actions(self, player_id: str) -> list[ActionType]:
        """Actions the player could legally attempt right now."""
        if self.is_over or player_id not in self.roster:
            return []
        actions = [ActionType.SELECT_CARDS]
        if self.roster.is_current(player_id):
            if self.phase == TurnPhase.ATTACK:
                actions.append(ActionType.PLAY_CARDS)
            elif self.phase == TurnPhase.SUFFER_DAMAGE:
                actions.append(ActionType.SUFFER_DAMAGE)
            else:
                actions.append(ActionType.SELECT_NEXT_PLAYER)
            if self.can_yield(player_id):
                actions.append(ActionType.YIELD)
            if self.can_play_special(player_id):
                actions.append(ActionType.PLAY_SPECIAL)
        actions.append(ActionType.LEAVE)
        return actions

    def check_game_over(self) -> GameOverInfo | None:
        """
        Decide whether the game has ended. Does not change state.

        Won when the hostile deck is cleared. Lost when the active player
        cannot cover the damage (a solo player with Specials left still
        has a way out), when a solo player has no cards and no way to get
        more, or when every multiplayer hand is worth nothing.
        """
        if not self.started or not self.roster.seats:
            return None
        if self.hostile.is_cleared:
            return GameOverInfo(won=True, reason=GameOverReason.CASTLE_CLEARED, victory=self._victory())

        hand = self.roster.current
        solo = not self.is_multiplayer
        if self.phase == TurnPhase.SUFFER_DAMAGE and hand.health < self.boss.attack_value:
            if not (solo and self.specials_remaining > 0):
                return GameOverInfo(won=False, reason=GameOverReason.CANNOT_PAY)
        if solo and hand.size == 0 and (self.specials_remaining == 0 or self.shared.is_empty):
            return GameOverInfo(won=False, reason=GameOverReason.OUT_OF_CARDS)
        if not solo and all(h.health == 0 for h in self.roster):
            return GameOverInfo(won=False, reason=GameOverReason.NO_HEALTH)
        return None

    # =========================================================================
    # Dispatch
    # =========================================================================

    def apply(self, action: Action) -> ActionResult:
        """Apply an action and return its resolution."""
        handler = self._get_handler(action.action_type)
        if not handler:
            return self._reject(
                RejectionKind.INVALID_ACTION,
                f"No handler for action type: {action.action_type}",
            )
        return handler(action)

    def _get_handler(self, action_type: ActionType):
        payload_handlers = {
            ActionType.SELECT_CARDS: lambda a: self.select_cards(a.payload.player_id, a.payload.indices or []),
            ActionType.PLAY_CARDS: lambda a: self.play_cards(a.payload.player_id, a.payload.indices),
            ActionType.YIELD: lambda a: self.yield_turn(a.payload.player_id),
            ActionType.SUFFER_DAMAGE: lambda a: self.suffer_damage(a.payload.player_id, a.payload.indices),
            ActionType.PLAY_SPECIAL: lambda a: self.play_special(a.payload.player_id, a.payload.indices),
            ActionType.SELECT_NEXT_PLAYER: lambda a: self.select_next_player(
                a.payload.player_id, a.payload.target_index
            ),
            ActionType.LEAVE: lambda a: self.remove_player(a.payload.player_id),
            ActionType.END_GAME: lambda a: self.end(a.payload.is_inactive),
        }
        return payload_handlers.get(action_type)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> ActionResult:
        """Deal every player a full hand, starting with the first seat."""
        if self.started or self.is_over:
            return self._reject(RejectionKind.INVALID_ACTION, "Game has already started")
        self.started = True
        hands = self.roster.seats
        dealt = self.shared.deal(max_hand_size(len(hands)) * len(hands), self.roster.current_index, hands)
        logger.info(
            "Campaign started with %d player(s), first boss %s",
            len(hands), self.boss.name,
        )
        result = ActionResult(outcome=Outcome.CONTINUE, cards_drawn=dealt)
        return self._finish(result)

    def end(self, is_inactive: bool = False) -> ActionResult:
        """
        Finish the game. Safe in any phase and idempotent.

        Touches no deck or hand, so ending never leaves state half-changed.
        """
        if not self.ended:
            self.ended = True
            if self.game_over is None:
                if is_inactive:
                    self.game_over = GameOverInfo(won=False, reason=GameOverReason.INACTIVE)
                elif self.hostile.is_cleared:
                    self.game_over = GameOverInfo(
                        won=True, reason=GameOverReason.CASTLE_CLEARED, victory=self._victory()
                    )
                else:
                    self.game_over = GameOverInfo(won=False, reason=GameOverReason.CANCELLED)
            logger.info("Campaign ended: %s", self.game_over.reason.value)
        result = ActionResult(outcome=Outcome.GAME_OVER, game_over=self.game_over)
        self._snapshot(result)
        return result

    # =========================================================================
    # Player moves
    # =========================================================================

    def select_cards(self, player_id: str, indices: list[int]) -> ActionResult:
        """Remember which cards a player has picked. Allowed any time."""
        if self.is_over:
            return self._reject(RejectionKind.INVALID_ACTION, "Game is over")
        hand = self.roster.get(player_id)
        if hand is None:
            return self._reject(RejectionKind.INVALID_ACTION, f"{player_id} is not in this game")
        if not hand.valid_indices(indices):
            return self._reject(
                RejectionKind.STRUCTURAL_INCONSISTENCY,
                f"Selection {indices} does not match {player_id}'s hand",
            )
        hand.select(indices)
        result = ActionResult(outcome=Outcome.CONTINUE)
        self._snapshot(result)
        return result

    def play_cards(self, player_id: str, indices: list[int] | None = None) -> ActionResult:
        """
        Attack the active boss with one or more cards.

        Suit powers resolve once per distinct suit, hearts, diamonds,
        spades, then clubs. Hearts, diamonds and spades use the total
        before clubs doubles it.
        """
        rejection = self._check_turn(player_id, (TurnPhase.ATTACK,), "play cards")
        if rejection:
            return rejection
        hand = self.roster.current
        chosen, rejection = self._resolve_selection(hand, indices)
        if rejection:
            return rejection
        if not chosen:
            return self._reject(RejectionKind.INVALID_ACTION, "Select at least one card to play")

        cards = hand.cards_at(chosen)
        if any(card.is_special for card in cards):
            return self.play_special(player_id, chosen)
        if not is_legal_combination(cards):
            return self._reject(
                RejectionKind.INVALID_COMBINATION,
                "Cards can be combined in sets of the same number totalling 10 or less, "
                "or paired with one Companion",
            )

        hand.remove(chosen)
        boss = self.boss
        total = sum(card.attack_value for card in cards)
        suits = {card.suit for card in cards}
        result = ActionResult(outcome=Outcome.CONTINUE, cards_played=[card.name for card in cards])

        damage = total
        for suit in SUIT_ORDER:
            if suit not in suits:
                continue
            if boss.is_immune(suit):
                result.suit_powers_blocked.add(suit.value)
                continue
            result.suit_powers_activated.add(suit.value)
            if suit == Suit.HEARTS:
                result.cards_healed = self.shared.heal_from_discard(total)
            elif suit == Suit.DIAMONDS:
                result.cards_drawn = self.shared.deal(total, self.roster.current_index, self.roster.seats)
            elif suit == Suit.SPADES:
                boss.reduce_attack(total)
            elif suit == Suit.CLUBS:
                damage = total * 2

        self.consecutive_yields = 0
        result.damage_dealt = damage
        overkill = boss.apply_damage(damage)
        if boss.health == 0:
            self._defeat_boss(boss, overkill, cards, result)
        else:
            self.cards_in_play.extend(cards)
            self._boss_strikes_back()
        return self._finish(result, hand)

    def yield_turn(self, player_id: str) -> ActionResult:
        """
        Skip the attack and go straight to suffering damage.

        A solo player cannot yield twice in a row; at a bigger table
        somebody must attack once everyone else has yielded.
        """
        rejection = self._check_turn(player_id, (TurnPhase.ATTACK,), "yield")
        if rejection:
            return rejection
        if not self._yield_allowed():
            return self._reject(
                RejectionKind.INVALID_ACTION,
                "You cannot yield: everyone else has already yielded",
            )
        self.consecutive_yields += 1
        result = ActionResult(outcome=Outcome.CONTINUE)
        self._boss_strikes_back()
        return self._finish(result, self.roster.current)

    def suffer_damage(self, player_id: str, indices: list[int] | None = None) -> ActionResult:
        """Discard cards worth at least the boss's attack value."""
        rejection = self._check_turn(player_id, (TurnPhase.SUFFER_DAMAGE,), "discard cards")
        if rejection:
            return rejection
        hand = self.roster.current
        chosen, rejection = self._resolve_selection(hand, indices)
        if rejection:
            return rejection

        required = self.boss.attack_value
        total = sum(card.attack_value for card in hand.cards_at(chosen))
        if total < required:
            return self._reject(
                RejectionKind.INSUFFICIENT_PAYMENT,
                f"Discard cards worth at least {required}; selected cards are worth {total}",
            )

        discarded = hand.remove(chosen)
        self.shared.add_to_discard(discarded)
        result = ActionResult(
            outcome=Outcome.CONTINUE,
            cards_played=[card.name for card in discarded],
            damage_suffered=required,
        )
        self.phase = TurnPhase.ATTACK
        self.roster.advance()
        return self._finish(result, hand)

    def play_special(self, player_id: str, indices: list[int] | None = None) -> ActionResult:
        """
        Play a Special.

        Solo: discard the whole hand, draw a fresh one, use up one of the
        Special plays. Allowed while attacking or suffering damage.

        Multiplayer: the Special card goes into play, the boss loses its
        immunity (once), and the player picks who goes next.
        """
        phases = (TurnPhase.ATTACK,) if self.is_multiplayer else (TurnPhase.ATTACK, TurnPhase.SUFFER_DAMAGE)
        rejection = self._check_turn(player_id, phases, "play a Special")
        if rejection:
            return rejection
        hand = self.roster.current

        if not self.is_multiplayer:
            if self.specials_remaining <= 0:
                return self._reject(RejectionKind.INVALID_ACTION, "No Special plays left")
            self.shared.add_to_discard(hand.take_all())
            drawn = self.shared.deal(hand.max_size, self.roster.current_index, self.roster.seats)
            self.specials_remaining -= 1
            result = ActionResult(outcome=Outcome.CONTINUE, cards_drawn=drawn)
            return self._finish(result, hand)

        chosen, rejection = self._resolve_selection(hand, indices)
        if rejection:
            return rejection
        if chosen:
            specials = [i for i in sorted(chosen) if hand.cards[i].is_special]
            if not specials:
                return self._reject(RejectionKind.INVALID_ACTION, "Selection holds no Special card")
        else:
            specials = [i for i, card in enumerate(hand.cards) if card.is_special]
            if not specials:
                return self._reject(RejectionKind.INVALID_ACTION, "You hold no Special card")

        special = hand.remove([specials[0]])[0]
        self.cards_in_play.append(special)
        self.consecutive_yields = 0
        result = ActionResult(outcome=Outcome.CONTINUE, cards_played=[special.name])
        result.immunity_negated = self._negate_boss_immunity()
        self._open_special_select(player_id, result)
        return self._finish(result, hand)

    def select_next_player(self, player_id: str, target_index: int | None) -> ActionResult:
        """Resolve a pending Special: hand the turn to the chosen player."""
        rejection = self._check_turn(player_id, (TurnPhase.SPECIAL_SELECT,), "choose the next player")
        if rejection:
            return rejection
        if target_index is None or not 0 <= target_index < self.roster.size:
            return self._reject(
                RejectionKind.STRUCTURAL_INCONSISTENCY,
                f"No player at position {target_index}",
            )
        self.roster.set_current(target_index)
        self.phase = TurnPhase.ATTACK
        self.special_selector_id = None
        result = ActionResult(outcome=Outcome.CONTINUE)
        return self._finish(result)

    # =========================================================================
    # Departure
    # =========================================================================

    def remove_player(self, player_id: str) -> ActionResult:
        """
        Take a player out of a running game.

        At a table that still has several players one Special card leaves
        the game with them (searched in the shared deck, the discard, the
        cards in play, then each hand; a hand that loses one draws a
        replacement). Then every remaining player draws one card.
        """
        if self.is_over:
            return self._reject(RejectionKind.INVALID_ACTION, "Game is over")
        if player_id not in self.roster:
            return self._reject(RejectionKind.INVALID_ACTION, f"{player_id} is not in this game")

        departure = self.roster.remove(player_id)
        self._refresh_hand_limits()
        result = ActionResult(outcome=Outcome.CONTINUE, departed_player_id=player_id)
        logger.info("Player %s left the campaign", player_id)

        if not self.roster.seats:
            self.shared.add_to_discard(departure.seat.take_all())
            self.ended = True
            self.game_over = GameOverInfo(won=False, reason=GameOverReason.CANCELLED)
            result.outcome = Outcome.GAME_OVER
            result.game_over = self.game_over
            return result

        if not self.started:
            if self.builds_shared_deck:
                self.shared = SharedDeck(self._fresh_shared_cards(), shuffler=self.shuffler)
                self.initial_total = self.total_cards()
            return self._finish(result)

        if self.is_multiplayer:
            result.removed_special = self._remove_one_special(result)
        self.shared.add_to_discard(departure.seat.take_all())
        result.cards_drawn += self.shared.deal(
            self.roster.size, self.roster.current_index, self.roster.seats
        )

        if departure.was_current:
            self.phase = TurnPhase.ATTACK
            self.special_selector_id = None
        elif self.phase == TurnPhase.SPECIAL_SELECT:
            if self.is_multiplayer:
                result.player_left = True
                self._open_special_select(self.roster.current.player_id, result)
            else:
                self.phase = TurnPhase.ATTACK
                self.special_selector_id = None
        return self._finish(result)

    def _remove_one_special(self, result: ActionResult) -> bool:
        for pile in (self.shared.cards, self.shared.discard, self.cards_in_play):
            for card in pile:
                if card.is_special:
                    pile.remove(card)
                    self.removed_cards.append(card)
                    return True
        for index, hand in enumerate(self.roster.seats):
            for card in hand.cards:
                if card.is_special:
                    hand.remove_card(card)
                    self.removed_cards.append(card)
                    result.cards_drawn += self.shared.deal(1, index, self.roster.seats)
                    return True
        return False

    # =========================================================================
    # Internals
    # =========================================================================

    def _check_turn(self, player_id: str, phases: tuple[TurnPhase, ...], verb: str) -> ActionResult | None:
        if self.is_over:
            return self._reject(RejectionKind.INVALID_ACTION, "Game is over")
        if not self.started:
            return self._reject(RejectionKind.INVALID_ACTION, "Game has not started")
        if player_id not in self.roster:
            return self._reject(RejectionKind.INVALID_ACTION, f"{player_id} is not in this game")
        if not self.roster.is_current(player_id):
            return self._reject(RejectionKind.INVALID_ACTION, f"Not {player_id}'s turn")
        if self.phase not in phases:
            return self._reject(
                RejectionKind.INVALID_ACTION,
                f"Cannot {verb} during the {self.phase.value} phase",
            )
        if self.phase == TurnPhase.SPECIAL_SELECT and player_id != self.special_selector_id:
            return self._reject(
                RejectionKind.INVALID_ACTION,
                f"Only {self.special_selector_id} may choose the next player",
            )
        return None

    def _resolve_selection(self, hand: PlayerHand, indices: list[int] | None):
        chosen = sorted(hand.selected) if indices is None else list(indices)
        if not hand.valid_indices(chosen):
            return None, self._reject(
                RejectionKind.STRUCTURAL_INCONSISTENCY,
                f"Selection {chosen} does not match {hand.player_id}'s hand",
            )
        return chosen, None

    def _yield_allowed(self) -> bool:
        if not self.is_multiplayer:
            return self.consecutive_yields == 0
        return self.consecutive_yields < self.roster.size - 1

    def _boss_strikes_back(self) -> None:
        """After a surviving attack: suffer damage, or pass if it hits for 0."""
        if self.boss.attack_value > 0:
            self.phase = TurnPhase.SUFFER_DAMAGE
        else:
            self.phase = TurnPhase.ATTACK
            self.roster.advance()

    def _defeat_boss(self, boss: Card, overkill: int, played: list[Card], result: ActionResult) -> None:
        """
        Move a beaten boss out and bring on the next one.

        Exact damage converts the boss onto the top of the shared deck;
        overkill discards it. The attacker keeps the turn.
        """
        result.defeated_boss = boss.name
        self.shared.add_to_discard(self.cards_in_play)
        self.shared.add_to_discard(played)
        self.cards_in_play = []

        if overkill == 0:
            self.shared.add_to_top(boss)
            result.boss_outcome = BossOutcome.CONVERTED
        else:
            self.shared.add_to_discard([boss])
            result.boss_outcome = BossOutcome.DEFEATED

        next_boss = self.hostile.advance()
        if next_boss is not None and overkill == 0:
            boss.convert_to_ally()
        self.phase = TurnPhase.ATTACK
        logger.info(
            "%s %s; next boss: %s",
            boss.name, result.boss_outcome.value, next_boss.name if next_boss else "none",
        )

    def _negate_boss_immunity(self) -> bool:
        """
        Strip the active boss's immunity, once per boss.

        Against a spade boss, spades already in play now count.
        """
        boss = self.boss
        if boss.immunity_negated:
            return False
        boss.negate_suit_immunity()
        if boss.suit == Suit.SPADES:
            for card in self.cards_in_play:
                if card.suit == Suit.SPADES:
                    boss.reduce_attack(card.attack_value)
        return True

    def _open_special_select(self, selector_id: str, result: ActionResult) -> None:
        self.phase = TurnPhase.SPECIAL_SELECT
        self.special_selector_id = selector_id
        result.pending_choice = self.roster.player_ids

    def _refresh_hand_limits(self) -> None:
        limit = max_hand_size(max(1, self.roster.size))
        for hand in self.roster:
            hand.max_size = limit

    def _fresh_shared_cards(self) -> list[Card]:
        cards = build_shared_cards(self.roster.size)
        self.shuffler(cards)
        return cards

    def _victory(self) -> Victory:
        if self.roster.size >= 3:
            return Victory.GOLD
        return {2: Victory.GOLD, 1: Victory.SILVER}.get(self.specials_remaining, Victory.BRONZE)

    def _reject(self, kind: RejectionKind, error: str) -> ActionResult:
        if kind == RejectionKind.STRUCTURAL_INCONSISTENCY:
            logger.warning("Ignoring action: %s", error)
        return ActionResult.rejected(kind, error)

    def _snapshot(self, result: ActionResult) -> None:
        result.phase = self.phase.value
        result.specials_remaining = self.specials_remaining
        if self.roster.seats:
            result.active_player_id = self.roster.current.player_id
        boss = self.boss
        result.boss = BossState(
            rank=boss.rank,
            suit=boss.suit.value,
            name=boss.name,
            health=boss.health,
            max_health=boss.max_health,
            attack_value=boss.attack_value,
            immunity_negated=boss.immunity_negated,
            remaining=self.hostile.remaining_count,
        )

    def _finish(self, result: ActionResult, hand: PlayerHand | None = None) -> ActionResult:
        """Close out a successful action: clear selection, check the end."""
        if hand is not None:
            hand.clear_selection()
        over = self.check_game_over()
        if over is not None:
            self.game_over = over
            result.outcome = Outcome.GAME_OVER
            result.game_over = over
            logger.info("Campaign over: %s (won=%s)", over.reason.value, over.won)
        self._snapshot(result)
        if self.on_activity:
            self.on_activity()
        return result
