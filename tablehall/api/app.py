"""
FastAPI Application - REST API for chat front-ends.

Endpoints:
    POST   /api/v1/sessions                       Open a lobby
    GET    /api/v1/sessions                       List active sessions
    GET    /api/v1/sessions/{key}                 Get session status
    DELETE /api/v1/sessions/{key}                 End session (host only)
    POST   /api/v1/sessions/{key}/players         Join the lobby
    DELETE /api/v1/sessions/{key}/players/{id}    Leave (lobby or mid-game)
    POST   /api/v1/sessions/{key}/start           Start the game (host only)
    POST   /api/v1/sessions/{key}/select          Store a card selection
    POST   /api/v1/sessions/{key}/play            Attack the boss
    POST   /api/v1/sessions/{key}/yield           Skip the attack
    POST   /api/v1/sessions/{key}/discard         Suffer damage
    POST   /api/v1/sessions/{key}/special         Play a Special
    POST   /api/v1/sessions/{key}/next-player     Choose who goes next
    GET    /api/v1/sessions/{key}/state           Get table state
    GET    /api/v1/guilds/{id}/prefix             Get command prefix
    PUT    /api/v1/guilds/{id}/prefix             Set command prefix

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union

from ..config import ALLOWED_ORIGINS, TABLEHALL_ENV
from .schemas import ErrorCode

# HTTP status for each error code
ERROR_STATUS = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.NOT_A_PARTICIPANT: 404,
    ErrorCode.SESSION_EXISTS: 409,
    ErrorCode.SESSION_FULL: 409,
    ErrorCode.ALREADY_JOINED: 409,
    ErrorCode.HOST_CANNOT_LEAVE: 409,
    ErrorCode.GAME_ALREADY_STARTED: 409,
    ErrorCode.GAME_NOT_STARTED: 409,
    ErrorCode.NOT_HOST: 403,
    ErrorCode.INVALID_ACTION: 409,
    ErrorCode.INVALID_COMBINATION: 422,
    ErrorCode.INSUFFICIENT_PAYMENT: 422,
    ErrorCode.STRUCTURAL_INCONSISTENCY: 400,
    ErrorCode.INVALID_PREFIX: 422,
    ErrorCode.VALIDATION_ERROR: 400,
    ErrorCode.INTERNAL_ERROR: 500,
}


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional CampaignService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install fastapi uvicorn"
        )

    from .. import __version__
    from .service import CampaignService
    from .schemas import (
        # Request models
        CreateSessionRequest,
        PlayerRequest,
        CardsRequest,
        NextPlayerRequest,
        PrefixRequest,
        # Response models
        ActionResponse,
        EndSessionResponse,
        ErrorResponse,
        GameStateResponse,
        HealthResponse,
        PrefixResponse,
        SessionListResponse,
        SessionResponse,
    )

    app = FastAPI(
        title="Tablehall API",
        description="""
Cooperative card-game campaign engine.

## Turn Flow

1. `POST /play` attacks the boss (or `POST /yield` skips the attack)
2. If the boss survives with attack left, `POST /discard` absorbs the hit
3. A multiplayer `POST /special` is followed by `POST /next-player`

Rejected actions never change the game.

## Error Codes

| Code | Status | Description |
|------|--------|-------------|
| `SESSION_NOT_FOUND` | 404 | No session under that key |
| `NOT_A_PARTICIPANT` | 404 | Player is not in the session |
| `INVALID_ACTION` | 409 | Out of turn, wrong phase, or not allowed now |
| `INVALID_COMBINATION` | 422 | Cards cannot be played together |
| `INSUFFICIENT_PAYMENT` | 422 | Discard does not cover the damage |
| `STRUCTURAL_INCONSISTENCY` | 400 | Indices do not match the hand |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or CampaignService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code or ERROR_STATUS.get(error_code, 400),
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def respond(response):
        if isinstance(response, ErrorResponse):
            return make_error_response(response.error_code, response.error, details=response.details)
        return response

    error_responses = {
        400: {"model": ErrorResponse, "description": "Indices do not match the hand"},
        404: {"model": ErrorResponse, "description": "Session or player not found"},
        409: {"model": ErrorResponse, "description": "Action not allowed now"},
        422: {"model": ErrorResponse, "description": "Illegal cards or payment"},
    }

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        status_code=201,
        responses={409: {"model": ErrorResponse, "description": "Session key already in use"}},
        tags=["Sessions"],
        summary="Open a new lobby",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """Open a lobby under `session_key`. The host is seated first."""
        return respond(api_service.create_session(body))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session keys."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_key}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_key: str) -> Union[SessionResponse, JSONResponse]:
        """Get the lobby and status of a session."""
        return respond(api_service.get_session(session_key))

    @app.delete(
        "/api/v1/sessions/{session_key}",
        response_model=EndSessionResponse,
        responses={
            403: {"model": ErrorResponse, "description": "Requester is not the host"},
            404: {"model": ErrorResponse},
        },
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_key: str,
        requester_id: Annotated[str, Query(description="Must be the host")],
    ) -> Union[EndSessionResponse, JSONResponse]:
        """End a game session and release it."""
        return respond(api_service.end_session(session_key, requester_id))

    @app.post(
        "/api/v1/sessions/{session_key}/players",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Join a lobby",
    )
    async def join_session(session_key: str, body: PlayerRequest) -> Union[SessionResponse, JSONResponse]:
        """Join before the host starts the game. Tables seat up to four."""
        return respond(api_service.join(session_key, body))

    @app.delete(
        "/api/v1/sessions/{session_key}/players/{player_id}",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Sessions"],
        summary="Leave a lobby or a running game",
    )
    async def leave_session(session_key: str, player_id: str) -> Union[ActionResponse, JSONResponse]:
        """
        Leave the table.

        Mid-game, one Special card leaves with the player and every
        remaining player draws a card.
        """
        return respond(api_service.leave(session_key, player_id))

    @app.post(
        "/api/v1/sessions/{session_key}/start",
        response_model=ActionResponse,
        responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Start the game",
    )
    async def start_game(session_key: str, body: PlayerRequest) -> Union[ActionResponse, JSONResponse]:
        """Deal opening hands. Only the host may start."""
        return respond(api_service.start(session_key, body))

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions/{session_key}/select",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Store a card selection",
    )
    async def select_cards(session_key: str, body: CardsRequest) -> Union[ActionResponse, JSONResponse]:
        """Remember the player's chosen cards for the next action."""
        return respond(api_service.select(session_key, body))

    @app.post(
        "/api/v1/sessions/{session_key}/play",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Attack the boss",
    )
    async def play_cards(session_key: str, body: CardsRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Play cards against the active boss.

        **Legal plays:** one card; a Companion plus one card; or a set of
        the same number (5 or less) totalling 10 or less.
        """
        return respond(api_service.play(session_key, body))

    @app.post(
        "/api/v1/sessions/{session_key}/yield",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Yield the attack",
    )
    async def yield_turn(session_key: str, body: PlayerRequest) -> Union[ActionResponse, JSONResponse]:
        """Skip attacking and take the boss's hit."""
        return respond(api_service.yield_turn(session_key, body))

    @app.post(
        "/api/v1/sessions/{session_key}/discard",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Suffer damage",
    )
    async def suffer_damage(session_key: str, body: CardsRequest) -> Union[ActionResponse, JSONResponse]:
        """Discard cards worth at least the boss's attack value."""
        return respond(api_service.discard(session_key, body))

    @app.post(
        "/api/v1/sessions/{session_key}/special",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Play a Special",
    )
    async def play_special(session_key: str, body: CardsRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Solo: replace the whole hand (twice per game).

        Multiplayer: cancel the boss's immunity and choose who goes next.
        """
        return respond(api_service.play_special(session_key, body))

    @app.post(
        "/api/v1/sessions/{session_key}/next-player",
        response_model=ActionResponse,
        responses=error_responses,
        tags=["Game"],
        summary="Choose the next player",
    )
    async def select_next_player(
        session_key: str,
        body: NextPlayerRequest,
    ) -> Union[ActionResponse, JSONResponse]:
        """Hand the turn to the player at `target_index` after a Special."""
        return respond(api_service.select_next_player(session_key, body))

    @app.get(
        "/api/v1/sessions/{session_key}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get table state",
    )
    async def get_state(
        session_key: str,
        viewer_id: Annotated[Optional[str], Query(description="Reveal this player's hand")] = None,
    ) -> Union[GameStateResponse, JSONResponse]:
        """Get the table. Only the viewer's own hand is included."""
        return respond(api_service.get_game_state(session_key, viewer_id))

    # =========================================================================
    # Guild Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/guilds/{guild_id}/prefix",
        response_model=PrefixResponse,
        tags=["Guilds"],
        summary="Get command prefix",
    )
    async def get_prefix(guild_id: str) -> PrefixResponse:
        return api_service.get_prefix(guild_id)

    @app.put(
        "/api/v1/guilds/{guild_id}/prefix",
        response_model=PrefixResponse,
        responses={422: {"model": ErrorResponse}},
        tags=["Guilds"],
        summary="Set command prefix",
    )
    async def set_prefix(guild_id: str, body: PrefixRequest) -> Union[PrefixResponse, JSONResponse]:
        """Set the prefix (1 to 5 characters) a guild uses for commands."""
        return respond(api_service.set_prefix(guild_id, body.prefix))

    # =========================================================================
    # Health
    # =========================================================================

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service=f"tablehall-{TABLEHALL_ENV}", version=__version__)

    return app


# For running directly: uvicorn tablehall.api.app:app
app = None
try:
    app = create_app()
except ImportError:
    # FastAPI not installed
    pass
