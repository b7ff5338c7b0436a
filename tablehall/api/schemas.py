"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between chat front-ends and the
engine. All responses include explicit types for OpenAPI schema generation.

Error Codes:
- SESSION_NOT_FOUND: No session under that key
- NOT_A_PARTICIPANT: Player is not seated in the session
- INVALID_ACTION: Out of turn, wrong phase, or nothing left to do it with
- INVALID_COMBINATION: Cards cannot be played together
- INSUFFICIENT_PAYMENT: Discarded cards do not cover the damage
- STRUCTURAL_INCONSISTENCY: Indices do not match the hand
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    LOBBY = "lobby"
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class ErrorCode(str, Enum):
    """Structured error codes."""
    # Session and lobby
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_EXISTS = "SESSION_EXISTS"
    SESSION_FULL = "SESSION_FULL"
    ALREADY_JOINED = "ALREADY_JOINED"
    NOT_A_PARTICIPANT = "NOT_A_PARTICIPANT"
    NOT_HOST = "NOT_HOST"
    HOST_CANNOT_LEAVE = "HOST_CANNOT_LEAVE"
    GAME_ALREADY_STARTED = "GAME_ALREADY_STARTED"
    GAME_NOT_STARTED = "GAME_NOT_STARTED"
    # Rule rejections
    INVALID_ACTION = "INVALID_ACTION"
    INVALID_COMBINATION = "INVALID_COMBINATION"
    INSUFFICIENT_PAYMENT = "INSUFFICIENT_PAYMENT"
    STRUCTURAL_INCONSISTENCY = "STRUCTURAL_INCONSISTENCY"
    # Misc
    INVALID_PREFIX = "INVALID_PREFIX"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """Card information for display."""
    name: str
    rank: int
    suit: Optional[str] = None
    kind: str = Field(description="special, companion, number, boss")
    attack_value: int = 0

    model_config = {"from_attributes": True}


class BossInfo(BaseModel):
    """The boss currently being fought."""
    rank: int
    suit: str
    name: str
    health: int
    max_health: int
    attack_value: int
    immunity_negated: bool = False
    remaining: int = Field(0, description="Bosses left, this one included")

    model_config = {"from_attributes": True}


class PlayerInfo(BaseModel):
    """Player information for display. Only the viewer's hand is filled in."""
    player_id: str
    is_host: bool = False
    is_current_turn: bool = False
    hand_size: int = 0
    max_hand_size: int = 0
    hand: Optional[list[CardInfo]] = None
    selected: list[int] = Field(default_factory=list)


class GameOverInfo(BaseModel):
    """How the game ended."""
    won: bool
    reason: str = Field(description="castle_cleared, cannot_pay, out_of_cards, no_health, inactive, cancelled")
    victory: Optional[str] = Field(None, description="gold, silver, bronze (wins only)")


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to open a new lobby."""
    session_key: str = Field(..., min_length=1, description="Channel or table identifier")
    host_id: str = Field(..., min_length=1, description="Player opening the lobby")


class PlayerRequest(BaseModel):
    """A request made by one player (join, start, yield, special)."""
    player_id: str = Field(..., min_length=1)


class CardsRequest(BaseModel):
    """A request naming cards in the player's hand by position."""
    player_id: str = Field(..., min_length=1)
    indices: Optional[list[int]] = Field(
        None, description="Hand positions; omit to use the stored selection"
    )


class NextPlayerRequest(BaseModel):
    """Choose who goes next after a Special."""
    player_id: str = Field(..., min_length=1)
    target_index: int = Field(..., ge=0, description="Seat position of the next player")


class PrefixRequest(BaseModel):
    """Set a guild's command prefix."""
    prefix: str = Field(..., description="1 to 5 characters, no spaces")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_key: str
    status: SessionStatus
    host_id: str
    player_ids: list[str] = Field(default_factory=list)
    created_at: float = 0.0
    last_activity: float = 0.0
    api_version: str = "v1"


class ActionResponse(BaseModel):
    """
    Resolution of one action.

    Everything the front-end needs to describe what just happened.
    `session_closed` is true when the game ended and the session was dropped.
    """
    session_key: str
    outcome: str = Field(description="continue, game_over")
    phase: Optional[str] = None
    active_player_id: Optional[str] = None
    boss: Optional[BossInfo] = None

    cards_played: list[str] = Field(default_factory=list)
    damage_dealt: int = 0
    damage_suffered: int = 0
    cards_drawn: int = 0
    cards_healed: int = 0
    suit_powers_activated: list[str] = Field(default_factory=list)
    suit_powers_blocked: list[str] = Field(default_factory=list)
    boss_outcome: Optional[str] = Field(None, description="converted, defeated")
    defeated_boss: Optional[str] = None
    immunity_negated: bool = False
    specials_remaining: Optional[int] = None
    departed_player_id: Optional[str] = None
    player_left: bool = False
    removed_special: bool = False
    pending_choice: Optional[list[str]] = Field(
        None, description="Players the current player may hand the turn to"
    )

    game_over: Optional[GameOverInfo] = None
    session_closed: bool = False
    api_version: str = "v1"


class GameStateResponse(BaseModel):
    """Complete table state for display."""
    session_key: str
    status: SessionStatus
    phase: str
    active_player_id: Optional[str] = None
    boss: BossInfo
    players: list[PlayerInfo] = Field(default_factory=list)
    deck_size: int = 0
    discard_size: int = 0
    cards_in_play: list[CardInfo] = Field(default_factory=list)
    specials_remaining: int = 0
    consecutive_yields: int = 0
    available_actions: list[str] = Field(
        default_factory=list, description="Actions the viewer may attempt now"
    )
    game_over: Optional[GameOverInfo] = None
    api_version: str = "v1"


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_key: str
    game_over: Optional[GameOverInfo] = None


class PrefixResponse(BaseModel):
    """A guild's command prefix."""
    guild_id: str
    prefix: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
