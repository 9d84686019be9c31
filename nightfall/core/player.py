"""
Player class representing a game participant.
"""

from dataclasses import dataclass
from enum import Enum

from .roles import RoleType, Team, team_for_role


class PlayerStatus(Enum):
    """Player status in the game."""
    ALIVE = "alive"
    ELIMINATED = "eliminated"


@dataclass(eq=False)
class Player:
    """
    Represents a player in the game.

    Players compare by identity: two players may share a name.
    """
    player_id: int
    name: str
    role: RoleType = RoleType.TOWNFOLK
    team: Team = Team.TOWN
    status: PlayerStatus = PlayerStatus.ALIVE

    # Alchemist abilities, each usable once per game
    has_saved_ability_used: bool = False
    has_killed_ability_used: bool = False

    def __str__(self) -> str:
        return f"{self.name} (#{self.player_id})"

    @property
    def is_alive(self) -> bool:
        """Check if player is alive."""
        return self.status == PlayerStatus.ALIVE

    @property
    def is_assassin(self) -> bool:
        return self.team == Team.ASSASSIN

    @property
    def is_town(self) -> bool:
        return self.team == Team.TOWN

    @property
    def can_save(self) -> bool:
        """Alchemist with the save ability still unused."""
        return self.role == RoleType.ALCHEMIST and not self.has_saved_ability_used

    @property
    def can_kill(self) -> bool:
        """Alchemist with the kill ability still unused."""
        return self.role == RoleType.ALCHEMIST and not self.has_killed_ability_used

    def assign_role(self, role_type: RoleType) -> None:
        """Set role and the team derived from it."""
        self.role = role_type
        self.team = team_for_role(role_type)

    def reset_role(self) -> None:
        """Return to the pre-assignment state (Townfolk, abilities unused)."""
        self.assign_role(RoleType.TOWNFOLK)
        self.has_saved_ability_used = False
        self.has_killed_ability_used = False

    def use_save(self) -> None:
        if self.has_saved_ability_used:
            raise RuntimeError(f"{self} has already used the save ability")
        self.has_saved_ability_used = True

    def use_kill(self) -> None:
        if self.has_killed_ability_used:
            raise RuntimeError(f"{self} has already used the kill ability")
        self.has_killed_ability_used = True

    def eliminate(self) -> bool:
        """
        Mark player as eliminated.
        Returns True if the player was alive before the call.
        """
        if not self.is_alive:
            return False
        self.status = PlayerStatus.ELIMINATED
        return True
