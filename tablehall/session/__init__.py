"""
Session Module - Manages ephemeral game sessions.

A session represents one table:
- Created when a host opens a lobby
- Holds the running CampaignEngine once started
- Expires after a period of inactivity
- Destroyed when the game ends

Sessions are EPHEMERAL: no persistence to database.
"""

from .manager import SessionManager, Session, SessionError, SessionState
from .prefixes import MAX_PREFIX_LENGTH, PrefixRegistry

__all__ = [
    "SessionManager",
    "Session",
    "SessionError",
    "SessionState",
    "MAX_PREFIX_LENGTH",
    "PrefixRegistry",
]
