"""
Random role distribution at game start.
"""

import logging
import random
from typing import Dict, List, Optional

from .exceptions import InsufficientPlayers
from .roles import RoleType, get_special_roles
from .roster import Roster

logger = logging.getLogger(__name__)

MIN_PLAYERS = 4


class RoleAssigner:
    """
    Seats one Assassin, one Prophet and one Alchemist (and optionally a
    Jester) by sampling roster indices without replacement. Every other
    player is Townfolk.
    """

    def __init__(self, rng: Optional[random.Random] = None, include_jester: bool = False):
        self.rng = rng or random.Random()
        self.include_jester = include_jester

    def special_roles(self, player_count: int) -> List[RoleType]:
        # A Jester needs a spare seat so that at least one Townfolk remains
        with_jester = self.include_jester and player_count > MIN_PLAYERS
        if self.include_jester and not with_jester:
            logger.warning("Jester needs at least %d players, got %d; no Jester seated",
                           MIN_PLAYERS + 1, player_count)
        return get_special_roles(include_jester=with_jester)

    def assign(self, roster: Roster) -> Dict[int, RoleType]:
        """
        Assign roles in place and return {player_id: role}.

        Raises:
            InsufficientPlayers: If the roster has fewer than four players
        """
        living = [index for index, player in enumerate(roster) if player.is_alive]
        if len(living) < MIN_PLAYERS:
            raise InsufficientPlayers(len(living), MIN_PLAYERS)

        for player in roster:
            player.reset_role()

        roles = self.special_roles(len(living))
        seats = self.rng.sample(living, len(roles))
        for index, role_type in zip(seats, roles):
            roster[index].assign_role(role_type)

        assignment = {p.player_id: p.role for p in roster}
        logger.debug("Roles assigned: %s", {pid: r.value for pid, r in assignment.items()})
        return assignment
