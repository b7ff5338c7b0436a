"""
Engine Core - Game-agnostic pieces shared by every rules engine.

The core provides:
1. Actions and their payloads
2. ActionResult, the explicit outcome of every action
3. SessionRoster, the turn order over seats
4. The RulesEngine interface and apply_action
"""

from .action import (
    Action,
    ActionType,
    ActionPayload,
    ActionResult,
    BossOutcome,
    BossState,
    GameOverInfo,
    GameOverReason,
    Outcome,
    RejectionKind,
    Victory,
)
from .roster import Departure, SessionRoster
from .rules import RulesEngine, apply_action

__all__ = [
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "BossOutcome",
    "BossState",
    "GameOverInfo",
    "GameOverReason",
    "Outcome",
    "RejectionKind",
    "Victory",
    "Departure",
    "SessionRoster",
    "RulesEngine",
    "apply_action",
]
