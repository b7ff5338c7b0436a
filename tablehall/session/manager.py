"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. A host opens a session under a key (one per channel)
2. Players join the lobby (1 to 4 players in total)
3. The host starts the game: the lobby becomes a CampaignEngine
4. Actions run one at a time through the session
5. Game over (or host ends, or inactivity) -> session removed from the store

PERSISTENCE RULES:
- Sessions live in memory only
- A finished session is dropped; nothing is kept about it
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable
import logging
import time

from ..config import INACTIVITY_TIMEOUT_SECONDS
from ..engine_core.action import Action, ActionResult, ActionType, Outcome
from ..engine_core.rules import apply_action
from ..games.campaign.decks import Shuffler
from ..games.campaign.engine import MAX_PLAYERS, CampaignEngine

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """A lobby or lookup failure. `code` is machine-readable."""

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.message = message
        self.code = code


class SessionState(Enum):
    """State of a game session."""
    LOBBY = "lobby"  # Waiting for players, host has not started
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Game completed (won or lost)
    ABANDONED = "abandoned"  # Ended before the game started


@dataclass
class Session:
    """
    One table: its lobby, then its running game.

    The session is destroyed when the game ends.
    """
    session_key: str
    host_id: str
    created_at: float
    player_ids: list[str] = field(default_factory=list)
    state: SessionState = SessionState.LOBBY
    last_activity: float = 0.0
    engine: CampaignEngine | None = None
    clock: Callable[[], float] = time.time

    def __post_init__(self):
        if self.host_id not in self.player_ids:
            self.player_ids.insert(0, self.host_id)
        if not self.last_activity:
            self.last_activity = self.created_at

    def is_active(self) -> bool:
        return self.state in {SessionState.LOBBY, SessionState.ACTIVE}

    def touch(self) -> None:
        """Refresh the inactivity timer."""
        self.last_activity = self.clock()

    def idle_for(self, now: float) -> float:
        return now - self.last_activity

    def add_player(self, player_id: str) -> None:
        if self.state != SessionState.LOBBY:
            raise SessionError("The game has already started", code="GAME_ALREADY_STARTED")
        if player_id in self.player_ids:
            raise SessionError(f"{player_id} has already joined", code="ALREADY_JOINED")
        if len(self.player_ids) >= MAX_PLAYERS:
            raise SessionError(f"The game is full ({MAX_PLAYERS} players)", code="SESSION_FULL")
        self.player_ids.append(player_id)
        self.touch()

    def remove_player(self, player_id: str) -> ActionResult | None:
        """
        Take a player out of the lobby or the running game.

        Returns the engine's result when a game is running, None in the lobby.
        """
        if player_id not in self.player_ids:
            raise SessionError(f"{player_id} is not in this game", code="NOT_A_PARTICIPANT")
        if player_id == self.host_id:
            raise SessionError("The host cannot leave; end the game instead", code="HOST_CANNOT_LEAVE")

        if self.state != SessionState.ACTIVE:
            self.player_ids.remove(player_id)
            self.touch()
            return None
        result = self.engine.remove_player(player_id)
        if result.success:
            self.player_ids.remove(player_id)
        return self._record(result)

    def start(self, requester_id: str, shuffler: Shuffler | None = None) -> ActionResult:
        """Turn the lobby into a running game and deal opening hands."""
        self._require_host(requester_id, "start")
        if self.state != SessionState.LOBBY:
            raise SessionError("The game has already started", code="GAME_ALREADY_STARTED")
        self.engine = CampaignEngine.for_players(
            list(self.player_ids),
            shuffler=shuffler,
            on_activity=self.touch,
        )
        self.state = SessionState.ACTIVE
        logger.info("Session %s started with %d player(s)", self.session_key, len(self.player_ids))
        return self._record(self.engine.start())

    def apply(self, action: Action) -> ActionResult:
        """
        Run a player action against the running game.

        Leaving and ending go through remove_player and end, so the lobby
        rules hold whichever way they arrive.
        """
        if self.state != SessionState.ACTIVE or self.engine is None:
            raise SessionError("No game is running", code="GAME_NOT_STARTED")
        player_id = action.payload.player_id
        if action.action_type == ActionType.END_GAME:
            self._require_host(player_id, "end")
            return self.end(requester_id=player_id, is_inactive=action.payload.is_inactive)
        if player_id is not None and player_id not in self.player_ids:
            raise SessionError(f"{player_id} is not in this game", code="NOT_A_PARTICIPANT")
        if action.action_type == ActionType.LEAVE:
            return self.remove_player(player_id)
        return self._record(apply_action(self.engine, action))

    def end(self, requester_id: str | None = None, is_inactive: bool = False) -> ActionResult | None:
        """
        End the session. `requester_id` None means the system is ending it.

        Returns the engine's final result, or None if no game had started.
        """
        if requester_id is not None:
            self._require_host(requester_id, "end")
        if self.engine is None:
            self.state = SessionState.ABANDONED
            return None
        result = self.engine.end(is_inactive=is_inactive)
        self.state = SessionState.GAME_OVER
        return result

    def _require_host(self, requester_id: str | None, verb: str) -> None:
        if requester_id != self.host_id:
            raise SessionError(f"Only the host can {verb} the game", code="NOT_HOST")

    def _record(self, result: ActionResult) -> ActionResult:
        if result.outcome == Outcome.GAME_OVER:
            self.state = SessionState.GAME_OVER
        return result


class SessionManager:
    """
    Session-keyed store of running tables.

    Responsibilities:
    - Create sessions, one per key
    - Look sessions up
    - Drop finished and idle sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        inactivity_timeout: float = INACTIVITY_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.inactivity_timeout = inactivity_timeout
        self.clock = clock
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_key: str) -> bool:
        return session_key in self._sessions

    def create_session(self, session_key: str, host_id: str) -> Session:
        """Open a new lobby hosted by `host_id`."""
        existing = self._sessions.get(session_key)
        if existing is not None:
            if existing.host_id == host_id:
                raise SessionError("You are already hosting a game here", code="SESSION_EXISTS")
            raise SessionError("A game is already running here", code="SESSION_EXISTS")

        now = self.clock()
        session = Session(
            session_key=session_key,
            host_id=host_id,
            created_at=now,
            clock=self.clock,
        )
        self._sessions[session_key] = session
        logger.info("Session %s created by %s", session_key, host_id)
        return session

    def get_session(self, session_key: str) -> Session | None:
        return self._sessions.get(session_key)

    def require_session(self, session_key: str) -> Session:
        session = self._sessions.get(session_key)
        if session is None:
            raise SessionError(f"No game is running in {session_key}", code="SESSION_NOT_FOUND")
        return session

    def end_session(
        self,
        session_key: str,
        requester_id: str | None = None,
        is_inactive: bool = False,
    ) -> ActionResult | None:
        """
        End a session and drop it from the store.

        Raises SessionError if the session is unknown or the requester
        is not the host.
        """
        session = self.require_session(session_key)
        result = session.end(requester_id=requester_id, is_inactive=is_inactive)
        self._sessions.pop(session_key, None)
        logger.info("Session %s ended%s", session_key, " (inactive)" if is_inactive else "")
        return result

    def discard_if_over(self, session_key: str) -> bool:
        """Drop the session if its game has finished. Returns True if dropped."""
        session = self._sessions.get(session_key)
        if session is None or session.is_active():
            return False
        del self._sessions[session_key]
        logger.info("Session %s removed after game over", session_key)
        return True

    def list_active_sessions(self) -> list[str]:
        """List keys of active sessions."""
        return [
            key for key, session in self._sessions.items()
            if session.is_active()
        ]

    def expire_inactive(self, now: float | None = None) -> dict[str, ActionResult | None]:
        """
        End every session idle for longer than the inactivity timeout.

        Called periodically. Returns the final result of each expired
        session, keyed by session key.
        """
        current_time = self.clock() if now is None else now
        stale = [
            key for key, session in self._sessions.items()
            if session.idle_for(current_time) > self.inactivity_timeout
        ]
        expired = {}
        for key in stale:
            expired[key] = self.end_session(key, is_inactive=True)
            logger.info("Session %s expired after inactivity", key)
        return expired
