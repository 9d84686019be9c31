"""
Human agent: decisions come from real input pushed by the interface.
"""

import asyncio
import logging
from typing import Callable, Optional, Tuple

from .base_agent import ActionType, BaseAgent, DecisionContext
from ..core import Player

logger = logging.getLogger(__name__)


class HumanAgent(BaseAgent):
    """
    Waits for the interface to submit a player id.

    Every submission is tagged with the action it answers. Input meant for
    another action is ignored, and whatever is still buffered when a phase
    closes is dropped. The phase handler bounds the wait with its own
    deadline; an unanswered decision counts as "no choice".
    """

    interactive = True

    def __init__(self, player: Player,
                 on_decision: Optional[Callable[[DecisionContext], None]] = None):
        super().__init__(player)
        self._choices: "asyncio.Queue[Tuple[ActionType, Optional[int]]]" = asyncio.Queue()
        self._waiting_for: Optional[ActionType] = None
        self.last_context: Optional[DecisionContext] = None
        # Called whenever a decision opens, e.g. to prompt the person
        self.on_decision = on_decision

    @property
    def waiting_for(self) -> Optional[ActionType]:
        """Action of the decision currently open, if any."""
        return self._waiting_for

    @property
    def has_pending_input(self) -> bool:
        return not self._choices.empty()

    def submit(self, target_id: Optional[int], action: Optional[ActionType] = None) -> bool:
        """
        Push a choice (e.g. a vote button click).

        Without an explicit action the choice answers the decision open
        right now; with no decision open it is dropped.
        Returns True if the choice was buffered.
        """
        action = action or self._waiting_for
        if action is None:
            logger.warning("Human player %s submitted %s with no decision open, ignored",
                           self.player.player_id, target_id)
            return False
        logger.debug("Human player %s submitted %s for %s", self.player.player_id, target_id, action.value)
        self._choices.put_nowait((action, target_id))
        return True

    def _take(self, entry: Tuple[ActionType, Optional[int]], action: ActionType) -> bool:
        entry_action, target_id = entry
        if entry_action != action:
            logger.info("Human player %s: ignoring %s input %s during %s",
                        self.player.player_id, entry_action.value, target_id, action.value)
            return False
        return True

    def _open(self, context: DecisionContext) -> None:
        self.last_context = context
        if self.on_decision is not None:
            self.on_decision(context)

    def choose_target(self, context: DecisionContext) -> Optional[int]:
        self._open(context)
        while True:
            try:
                entry = self._choices.get_nowait()
            except asyncio.QueueEmpty:
                return None
            if self._take(entry, context.action):
                return entry[1]

    async def choose_target_async(self, context: DecisionContext) -> Optional[int]:
        self._waiting_for = context.action
        self._open(context)
        try:
            while True:
                entry = await self._choices.get()
                if self._take(entry, context.action):
                    return entry[1]
        finally:
            self._waiting_for = None

    def reset(self) -> None:
        """Drop input buffered for a phase that has closed."""
        dropped = self._choices.qsize()
        # A fresh queue is not tied to the event loop of the closed phase
        self._choices = asyncio.Queue()
        if dropped:
            logger.info("Human player %s: dropped %d late input(s)", self.player.player_id, dropped)
        self._waiting_for = None
