"""
Rules Engine - The action-resolution interface shared by all games.

A rules engine owns the state of one running game and applies actions
to it one at a time. Callers must serialize actions per game; engines
do no locking.
"""

from __future__ import annotations
from typing import Protocol

from .action import Action, ActionResult


class RulesEngine(Protocol):
    """Anything that resolves actions into results."""

    def apply(self, action: Action) -> ActionResult:
        ...


def apply_action(engine: RulesEngine, action: Action) -> ActionResult:
    """
    Convenience function to apply an action.

    Usage:
        result = apply_action(engine, Action.play_cards("alice", [0]))
    """
    return engine.apply(action)
