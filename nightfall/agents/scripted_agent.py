"""
Scripted agent: replays pre-programmed choices.
"""

from collections import deque
from typing import Deque, Dict, Iterable, Optional

from .base_agent import ActionType, BaseAgent, DecisionContext
from ..core import Player


class ScriptedAgent(BaseAgent):
    """
    Answers each decision from a per-action queue of player ids.

    A queued None means "no choice"; an empty queue also yields None.
    Used for tests and for replaying a known game.
    """

    def __init__(self, player: Player, script: Optional[Dict[ActionType, Iterable[Optional[int]]]] = None):
        super().__init__(player)
        self.script: Dict[ActionType, Deque[Optional[int]]] = {
            action: deque(choices) for action, choices in (script or {}).items()
        }
        self.asked: Dict[ActionType, int] = {}

    def queue(self, action: ActionType, *choices: Optional[int]) -> "ScriptedAgent":
        """Append choices for an action."""
        self.script.setdefault(action, deque()).extend(choices)
        return self

    def choose_target(self, context: DecisionContext) -> Optional[int]:
        self.asked[context.action] = self.asked.get(context.action, 0) + 1
        choices = self.script.get(context.action)
        if not choices:
            return None
        return choices.popleft()
