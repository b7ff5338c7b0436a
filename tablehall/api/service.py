"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to session and engine calls
2. Converts rejections and lobby failures into ErrorResponse
3. Drops sessions whose game is over
4. Formats responses for chat front-ends

This layer is framework-agnostic (can be used with FastAPI, a chat bot,
or the terminal game).
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreateSessionRequest,
    PlayerRequest,
    CardsRequest,
    NextPlayerRequest,
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
from ..engine_core.action import Action, ActionResult, Outcome
from ..engine_core.action import GameOverInfo as EngineGameOver
from ..games.campaign.cards import Card
from ..games.campaign.decks import Shuffler
from ..session import PrefixRegistry, Session, SessionError, SessionManager


@dataclass
class CampaignService:
    """
    Main API service.

    Usage:
        service = CampaignService()

        service.create_session(CreateSessionRequest(session_key="c1", host_id="alice"))
        service.join("c1", PlayerRequest(player_id="bob"))
        service.start("c1", PlayerRequest(player_id="alice"))
        response = service.play("c1", CardsRequest(player_id="alice", indices=[0]))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    prefixes: PrefixRegistry = field(default_factory=PrefixRegistry)

    # Shuffle used for new games; None means a fresh random shuffle
    shuffler: Shuffler | None = None

    # =========================================================================
    # Lobby
    # =========================================================================

    def create_session(self, request: CreateSessionRequest) -> SessionResponse | ErrorResponse:
        """Open a new lobby under a session key."""
        try:
            session = self.session_manager.create_session(request.session_key, request.host_id)
        except SessionError as e:
            return self._session_error(e)
        return self._session_to_response(session)

    def get_session(self, session_key: str) -> SessionResponse | ErrorResponse:
        """Get session status."""
        session = self.session_manager.get_session(session_key)
        if not session:
            return ErrorResponse(
                error="Session not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )
        return self._session_to_response(session)

    def list_sessions(self) -> list[str]:
        """List active session keys."""
        return self.session_manager.list_active_sessions()

    def join(self, session_key: str, request: PlayerRequest) -> SessionResponse | ErrorResponse:
        try:
            session = self.session_manager.require_session(session_key)
            session.add_player(request.player_id)
        except SessionError as e:
            return self._session_error(e)
        return self._session_to_response(session)

    def leave(self, session_key: str, player_id: str) -> ActionResponse | ErrorResponse:
        """
        Remove a player from the lobby or the running game.

        Mid-game this redistributes cards exactly as the engine decides.
        """
        try:
            session = self.session_manager.require_session(session_key)
            result = session.remove_player(player_id)
        except SessionError as e:
            return self._session_error(e)
        if result is None:
            return ActionResponse(
                session_key=session_key,
                outcome=Outcome.CONTINUE.value,
                departed_player_id=player_id,
            )
        return self._result_to_response(session_key, session, result)

    def start(self, session_key: str, request: PlayerRequest) -> ActionResponse | ErrorResponse:
        """Start the game. Only the host may do this."""
        try:
            session = self.session_manager.require_session(session_key)
            result = session.start(request.player_id, shuffler=self.shuffler)
        except SessionError as e:
            return self._session_error(e)
        return self._result_to_response(session_key, session, result)

    def end_session(self, session_key: str, requester_id: str | None = None) -> EndSessionResponse | ErrorResponse:
        """End a session. Only the host may end it."""
        try:
            result = self.session_manager.end_session(session_key, requester_id=requester_id)
        except SessionError as e:
            return self._session_error(e)
        return EndSessionResponse(
            success=True,
            session_key=session_key,
            game_over=self._convert_game_over(result.game_over) if result else None,
        )

    def expire_inactive(self, now: float | None = None) -> list[str]:
        """End idle sessions. Returns the keys that were expired."""
        return list(self.session_manager.expire_inactive(now))

    # =========================================================================
    # Game actions
    # =========================================================================

    def select(self, session_key: str, request: CardsRequest) -> ActionResponse | ErrorResponse:
        return self._run(session_key, Action.select_cards(request.player_id, request.indices or []))

    def play(self, session_key: str, request: CardsRequest) -> ActionResponse | ErrorResponse:
        return self._run(session_key, Action.play_cards(request.player_id, request.indices))

    def yield_turn(self, session_key: str, request: PlayerRequest) -> ActionResponse | ErrorResponse:
        return self._run(session_key, Action.yield_turn(request.player_id))

    def discard(self, session_key: str, request: CardsRequest) -> ActionResponse | ErrorResponse:
        return self._run(session_key, Action.suffer_damage(request.player_id, request.indices))

    def play_special(self, session_key: str, request: CardsRequest) -> ActionResponse | ErrorResponse:
        return self._run(session_key, Action.play_special(request.player_id, request.indices))

    def select_next_player(self, session_key: str, request: NextPlayerRequest) -> ActionResponse | ErrorResponse:
        return self._run(
            session_key,
            Action.select_next_player(request.player_id, request.target_index),
        )

    def get_game_state(self, session_key: str, viewer_id: str | None = None) -> GameStateResponse | ErrorResponse:
        """
        Get the current table. Only `viewer_id`'s own hand is revealed.
        """
        session = self.session_manager.get_session(session_key)
        if not session:
            return ErrorResponse(
                error="Session not found",
                error_code=ErrorCode.SESSION_NOT_FOUND,
            )
        if session.engine is None:
            return ErrorResponse(
                error="The game has not started",
                error_code=ErrorCode.GAME_NOT_STARTED,
            )
        if viewer_id is not None and viewer_id not in session.player_ids:
            return ErrorResponse(
                error=f"{viewer_id} is not in this game",
                error_code=ErrorCode.NOT_A_PARTICIPANT,
            )
        return self._build_game_state(session, viewer_id)

    # =========================================================================
    # Prefixes
    # =========================================================================

    def get_prefix(self, guild_id: str) -> PrefixResponse:
        return PrefixResponse(guild_id=guild_id, prefix=self.prefixes.get(guild_id))

    def set_prefix(self, guild_id: str, prefix: str) -> PrefixResponse | ErrorResponse:
        try:
            stored = self.prefixes.set(guild_id, prefix)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.INVALID_PREFIX)
        return PrefixResponse(guild_id=guild_id, prefix=stored)

    # =========================================================================
    # Helper methods
    # =========================================================================

    def _run(self, session_key: str, action: Action) -> ActionResponse | ErrorResponse:
        try:
            session = self.session_manager.require_session(session_key)
            result = session.apply(action)
        except SessionError as e:
            return self._session_error(e)
        return self._result_to_response(session_key, session, result)

    def _session_error(self, error: SessionError) -> ErrorResponse:
        return ErrorResponse(error=error.message, error_code=ErrorCode(error.code))

    def _session_to_response(self, session: Session) -> SessionResponse:
        return SessionResponse(
            session_key=session.session_key,
            status=SessionStatus(session.state.value),
            host_id=session.host_id,
            player_ids=list(session.player_ids),
            created_at=session.created_at,
            last_activity=session.last_activity,
        )

    def _result_to_response(self, session_key: str, session: Session, result: ActionResult) -> ActionResponse | ErrorResponse:
        if not result.success:
            return ErrorResponse(
                error=result.error or "Action rejected",
                error_code=ErrorCode(result.rejection.name),
            )
        closed = self.session_manager.discard_if_over(session_key)
        return ActionResponse(
            session_key=session_key,
            outcome=result.outcome.value,
            phase=result.phase,
            active_player_id=result.active_player_id,
            boss=BossInfo.model_validate(result.boss) if result.boss else None,
            cards_played=result.cards_played,
            damage_dealt=result.damage_dealt,
            damage_suffered=result.damage_suffered,
            cards_drawn=result.cards_drawn,
            cards_healed=result.cards_healed,
            suit_powers_activated=sorted(result.suit_powers_activated),
            suit_powers_blocked=sorted(result.suit_powers_blocked),
            boss_outcome=result.boss_outcome.value if result.boss_outcome else None,
            defeated_boss=result.defeated_boss,
            immunity_negated=result.immunity_negated,
            specials_remaining=result.specials_remaining,
            departed_player_id=result.departed_player_id,
            player_left=result.player_left,
            removed_special=result.removed_special,
            pending_choice=result.pending_choice,
            game_over=self._convert_game_over(result.game_over),
            session_closed=closed,
        )

    def _convert_game_over(self, info: EngineGameOver | None) -> GameOverInfo | None:
        if info is None:
            return None
        return GameOverInfo(
            won=info.won,
            reason=info.reason.value,
            victory=info.victory.value if info.victory else None,
        )

    def _convert_card(self, card: Card) -> CardInfo:
        return CardInfo(
            name=card.name,
            rank=card.rank,
            suit=card.suit.value if card.suit else None,
            kind=card.kind.value,
            attack_value=card.attack_value,
        )

    def _build_game_state(self, session: Session, viewer_id: str | None) -> GameStateResponse:
        engine = session.engine
        boss = engine.boss
        players = []
        for hand in engine.roster:
            is_viewer = hand.player_id == viewer_id
            players.append(
                PlayerInfo(
                    player_id=hand.player_id,
                    is_host=hand.player_id == session.host_id,
                    is_current_turn=engine.roster.is_current(hand.player_id),
                    hand_size=hand.size,
                    max_hand_size=hand.max_size,
                    hand=[self._convert_card(c) for c in hand.cards] if is_viewer else None,
                    selected=sorted(hand.selected) if is_viewer else [],
                )
            )

        return GameStateResponse(
            session_key=session.session_key,
            status=SessionStatus(session.state.value),
            phase=engine.phase.value,
            active_player_id=engine.roster.current.player_id if engine.roster.seats else None,
            boss=BossInfo(
                rank=boss.rank,
                suit=boss.suit.value,
                name=boss.name,
                health=boss.health,
                max_health=boss.max_health,
                attack_value=boss.attack_value,
                immunity_negated=boss.immunity_negated,
                remaining=engine.hostile.remaining_count,
            ),
            players=players,
            deck_size=engine.shared.size,
            discard_size=len(engine.shared.discard),
            cards_in_play=[self._convert_card(c) for c in engine.cards_in_play],
            specials_remaining=engine.specials_remaining,
            consecutive_yields=engine.consecutive_yields,
            available_actions=(
                [a.value for a in engine.available_actions(viewer_id)] if viewer_id else []
            ),
            game_over=self._convert_game_over(engine.game_over),
        )
