"""
Base agent interface: the decision source behind every player.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..core import Player, GameState


class ActionType(Enum):
    """Decisions an agent can be asked to make."""
    ASSASSIN_KILL = "assassin_kill"
    ALCHEMIST_SAVE = "alchemist_save"
    ALCHEMIST_KILL = "alchemist_kill"
    PROPHET_INSPECT = "prophet_inspect"
    VOTE = "vote"


@dataclass
class DecisionContext:
    """Context information provided to an agent."""
    player: Player
    action: ActionType
    candidates: List[int]  # eligible player ids, all alive
    game_state: GameState


class BaseAgent(ABC):
    """
    Abstract base class for all player agents.

    An agent receives a list of eligible player ids and answers with one
    of them, or None for "no choice".
    """

    # Interactive agents may change their vote while the voting window is open
    interactive: bool = False

    def __init__(self, player: Player):
        """
        Initialize the agent.

        Args:
            player: The player this agent represents
        """
        self.player = player

    @abstractmethod
    def choose_target(self, context: DecisionContext) -> Optional[int]:
        """
        Pick a target.

        Args:
            context: Current decision context

        Returns:
            Player id from context.candidates, or None for no choice
        """
        pass

    async def choose_target_async(self, context: DecisionContext) -> Optional[int]:
        """Async version used by the phase handlers; defaults to the sync choice."""
        return self.choose_target(context)

    def reset(self) -> None:
        """Called when a phase closes. Agents holding per-phase input drop it here."""
        pass

    def build_context(self, game_state: GameState, action: ActionType,
                      candidates: List[int]) -> DecisionContext:
        return DecisionContext(
            player=self.player,
            action=action,
            candidates=list(candidates),
            game_state=game_state,
        )
