"""
API Module - Front-end interface.

Exposes the engine via REST API for chat front-ends. A front-end:
1. Opens a lobby for a channel
2. Lets players join, then the host starts
3. Submits player actions and renders the results
4. Fetches the table state for each viewer

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    PlayerRequest,
    CardsRequest,
    NextPlayerRequest,
    PrefixRequest,
    # Responses
    ActionResponse,
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    PrefixResponse,
    SessionResponse,
    # Shared
    BossInfo,
    CardInfo,
    GameOverInfo,
    PlayerInfo,
    # Enums
    ErrorCode,
    SessionStatus,
)
from .service import CampaignService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "PlayerRequest",
    "CardsRequest",
    "NextPlayerRequest",
    "PrefixRequest",
    # Responses
    "ActionResponse",
    "EndSessionResponse",
    "ErrorResponse",
    "GameStateResponse",
    "PrefixResponse",
    "SessionResponse",
    # Shared
    "BossInfo",
    "CardInfo",
    "GameOverInfo",
    "PlayerInfo",
    # Enums
    "ErrorCode",
    "SessionStatus",
    # Service
    "CampaignService",
    "create_app",
]
