"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player moves (play, yield, suffer damage, play a Special)
2. Decisions the engine is waiting on (choose the next player)
3. Table changes (a player leaves, the game ends)

All state changes flow through actions. Every action produces an
ActionResult: a plain resolution descriptor the presentation layer
renders. The engine never formats text.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    # Player moves
    SELECT_CARDS = "select_cards"
    PLAY_CARDS = "play_cards"
    YIELD = "yield"
    SUFFER_DAMAGE = "suffer_damage"
    PLAY_SPECIAL = "play_special"
    SELECT_NEXT_PLAYER = "select_next_player"

    # Table actions
    LEAVE = "leave"
    END_GAME = "end_game"


class Outcome(Enum):
    """Tag of an ActionResult."""
    CONTINUE = "continue"
    GAME_OVER = "game_over"
    REJECTED = "rejected"


class RejectionKind(Enum):
    """Why an action was refused. A refusal never changes state."""
    INVALID_ACTION = "invalid_action"  # out of turn, out of phase, not a participant
    INVALID_COMBINATION = "invalid_combination"  # illegal card grouping
    INSUFFICIENT_PAYMENT = "insufficient_payment"  # discard total below damage
    STRUCTURAL_INCONSISTENCY = "structural_inconsistency"  # stale or bad indices


class GameOverReason(Enum):
    CASTLE_CLEARED = "castle_cleared"
    CANNOT_PAY = "cannot_pay"
    OUT_OF_CARDS = "out_of_cards"
    NO_HEALTH = "no_health"
    INACTIVE = "inactive"
    CANCELLED = "cancelled"


class Victory(Enum):
    GOLD = "gold"
    SILVER = "silver"
    BRONZE = "bronze"


@dataclass
class GameOverInfo:
    won: bool
    reason: GameOverReason
    victory: Victory | None = None


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Different action types use different fields; validation happens in
    the rules engine.
    """
    player_id: str | None = None
    indices: list[int] | None = None  # None means "use the stored selection"
    target_index: int | None = None
    is_inactive: bool = False

    # Generic params
    params: dict[str, Any] = field(default_factory=dict)


@dataclass
class Action:
    """A complete action to be applied to a running game."""
    action_type: ActionType
    payload: ActionPayload
    timestamp: float | None = None
    action_id: str | None = None

    @classmethod
    def select_cards(cls, player_id: str, indices: list[int]) -> Action:
        return cls(
            action_type=ActionType.SELECT_CARDS,
            payload=ActionPayload(player_id=player_id, indices=list(indices)),
        )

    @classmethod
    def play_cards(cls, player_id: str, indices: list[int] | None = None) -> Action:
        return cls(
            action_type=ActionType.PLAY_CARDS,
            payload=ActionPayload(player_id=player_id, indices=indices),
        )

    @classmethod
    def yield_turn(cls, player_id: str) -> Action:
        return cls(action_type=ActionType.YIELD, payload=ActionPayload(player_id=player_id))

    @classmethod
    def suffer_damage(cls, player_id: str, indices: list[int] | None = None) -> Action:
        return cls(
            action_type=ActionType.SUFFER_DAMAGE,
            payload=ActionPayload(player_id=player_id, indices=indices),
        )

    @classmethod
    def play_special(cls, player_id: str, indices: list[int] | None = None) -> Action:
        return cls(
            action_type=ActionType.PLAY_SPECIAL,
            payload=ActionPayload(player_id=player_id, indices=indices),
        )

    @classmethod
    def select_next_player(cls, player_id: str, target_index: int) -> Action:
        return cls(
            action_type=ActionType.SELECT_NEXT_PLAYER,
            payload=ActionPayload(player_id=player_id, target_index=target_index),
        )

    @classmethod
    def leave(cls, player_id: str) -> Action:
        return cls(action_type=ActionType.LEAVE, payload=ActionPayload(player_id=player_id))

    @classmethod
    def end_game(cls, player_id: str | None = None, is_inactive: bool = False) -> Action:
        return cls(
            action_type=ActionType.END_GAME,
            payload=ActionPayload(player_id=player_id, is_inactive=is_inactive),
        )


@dataclass
class BossState:
    """Snapshot of the active boss."""
    rank: int
    suit: str
    name: str
    health: int
    max_health: int
    attack_value: int
    immunity_negated: bool
    remaining: int


class BossOutcome(Enum):
    CONVERTED = "converted"  # exact kill, card goes on top of the shared deck
    DEFEATED = "defeated"  # overkill, card goes to the discard pile


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - The tag (continue, game over, rejected)
    - The rejection kind and message, if refused
    - The facts of the resolution, for the presentation layer
    """
    outcome: Outcome
    rejection: RejectionKind | None = None
    error: str | None = None

    # Table state after the action
    phase: str | None = None
    active_player_id: str | None = None
    boss: BossState | None = None

    # What happened
    cards_played: list[str] = field(default_factory=list)
    damage_dealt: int = 0
    damage_suffered: int = 0
    cards_drawn: int = 0
    cards_healed: int = 0
    suit_powers_activated: set[str] = field(default_factory=set)
    suit_powers_blocked: set[str] = field(default_factory=set)
    boss_outcome: BossOutcome | None = None
    defeated_boss: str | None = None
    immunity_negated: bool = False
    specials_remaining: int | None = None
    departed_player_id: str | None = None
    player_left: bool = False
    removed_special: bool = False

    # Waiting on a decision (choose next player)
    pending_choice: list[str] | None = None

    game_over: GameOverInfo | None = None

    @property
    def success(self) -> bool:
        return self.outcome != Outcome.REJECTED

    @classmethod
    def rejected(cls, kind: RejectionKind, error: str) -> ActionResult:
        """Create a rejection result."""
        return cls(outcome=Outcome.REJECTED, rejection=kind, error=error)
