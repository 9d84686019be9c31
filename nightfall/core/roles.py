"""
Role definitions and team mapping for the game.
"""

from enum import Enum
from typing import List


class Team(Enum):
    """Player team affiliation."""
    TOWN = "town"
    ASSASSIN = "assassin"
    NEUTRAL = "neutral"  # Jester


class RoleType(Enum):
    """Player role types."""
    TOWNFOLK = "townfolk"
    ASSASSIN = "assassin"
    PROPHET = "prophet"
    ALCHEMIST = "alchemist"
    JESTER = "jester"

    @property
    def team(self) -> Team:
        return team_for_role(self)

    @property
    def title(self) -> str:
        return self.value.title()


def team_for_role(role_type: RoleType) -> Team:
    """Team is fully determined by role."""
    if role_type == RoleType.ASSASSIN:
        return Team.ASSASSIN
    if role_type == RoleType.JESTER:
        return Team.NEUTRAL
    return Team.TOWN


def get_special_roles(include_jester: bool = False) -> List[RoleType]:
    """
    Get the roles drawn at setup, in draw order.
    Every seat not drawn stays Townfolk.
    """
    roles = [RoleType.ASSASSIN, RoleType.PROPHET, RoleType.ALCHEMIST]
    if include_jester:
        roles.append(RoleType.JESTER)
    return roles
