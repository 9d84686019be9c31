"""
Random agent: uniform choice among the eligible targets.
"""

import random
from typing import Optional

from .base_agent import BaseAgent, DecisionContext
from ..core import Player


class RandomAgent(BaseAgent):
    """
    Picks uniformly at random from the candidates for every decision:
    - Assassin: random living player other than itself
    - Alchemist: random save (self allowed) and random kill
    - Prophet: random living player other than itself
    - Voting: random living player other than itself
    """

    def __init__(self, player: Player, random_seed: Optional[int] = None):
        super().__init__(player)
        if random_seed is not None:
            # Combine seed with player id so each player is different but reproducible
            self.random = random.Random(random_seed + player.player_id)
        else:
            self.random = random.Random()

    def choose_target(self, context: DecisionContext) -> Optional[int]:
        if not context.candidates:
            return None
        return self.random.choice(context.candidates)
