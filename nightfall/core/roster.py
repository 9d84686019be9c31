"""
Roster owning the fixed, seat-ordered set of players.
"""

from typing import Iterable, Iterator, List, Optional

from .player import Player
from .roles import RoleType, Team


class Roster:
    """Ordered collection of players. Insertion order is seating order."""

    def __init__(self, players: Iterable[Player]):
        self._players: List[Player] = list(players)
        seen = set()
        for player in self._players:
            if player.player_id in seen:
                raise ValueError(f"Duplicate player id: {player.player_id}")
            seen.add(player.player_id)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "Roster":
        """Create a roster seating players 1..N in the given order."""
        return cls(Player(player_id=i, name=name) for i, name in enumerate(names, start=1))

    def __iter__(self) -> Iterator[Player]:
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)

    def __getitem__(self, index: int) -> Player:
        return self._players[index]

    @property
    def players(self) -> List[Player]:
        return list(self._players)

    def get_player(self, player_id: int) -> Optional[Player]:
        """Get player by id."""
        for player in self._players:
            if player.player_id == player_id:
                return player
        return None

    def alive_players(self) -> List[Player]:
        """Get all alive players in seating order."""
        return [p for p in self._players if p.is_alive]

    def eliminated_players(self) -> List[Player]:
        return [p for p in self._players if not p.is_alive]

    def find_alive_by_role(self, role_type: RoleType) -> Optional[Player]:
        """First living holder of a role, or None if absent or dead."""
        return next((p for p in self._players if p.is_alive and p.role == role_type), None)

    def living_count(self, team: Team) -> int:
        return sum(1 for p in self._players if p.is_alive and p.team == team)
