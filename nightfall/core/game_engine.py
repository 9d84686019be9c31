"""
Core game state: phase tracking, win evaluation and the action log.
"""

from enum import Enum
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from .roles import RoleType, Team
from .player import Player
from .roster import Roster


class GamePhase(Enum):
    """Current game phase."""
    SETUP = "setup"
    NIGHT = "night"
    DAY = "day"
    GAME_OVER = "game_over"
    ABORTED = "aborted"  # Stopped between phases before a winner was found


class EndReason(Enum):
    """Why the game ended."""
    WIN_CONDITION = "win_condition"
    JESTER_VOTED_OUT = "jester_voted_out"
    MAX_ROUNDS = "max_rounds"
    ABORTED = "aborted"


@dataclass
class GameState:
    """Complete game state shared by the phase handlers."""
    roster: Roster
    phase: GamePhase = GamePhase.SETUP
    night_number: int = 0
    day_number: int = 0

    # History
    action_log: List[Dict[str, Any]] = field(default_factory=list)

    # Outcome
    winner: Optional[Team] = None
    end_reason: Optional[EndReason] = None
    max_rounds: Optional[int] = None

    @property
    def players(self) -> List[Player]:
        return self.roster.players

    @property
    def is_over(self) -> bool:
        return self.phase in (GamePhase.GAME_OVER, GamePhase.ABORTED)

    def get_alive_players(self) -> List[Player]:
        """Get all alive players."""
        return self.roster.alive_players()

    def get_player(self, player_id: int) -> Optional[Player]:
        """Get player by id."""
        return self.roster.get_player(player_id)

    def get_assassin_players(self) -> List[Player]:
        """Get all alive Assassin-team players."""
        return [p for p in self.get_alive_players() if p.is_assassin]

    def get_town_players(self) -> List[Player]:
        """Get all alive Town-team players."""
        return [p for p in self.get_alive_players() if p.is_town]

    def find_alive_by_role(self, role_type: RoleType) -> Optional[Player]:
        return self.roster.find_alive_by_role(role_type)

    def start_night(self) -> None:
        """Transition to night phase."""
        self.phase = GamePhase.NIGHT
        self.night_number += 1
        self._log_action("night_start", {"night_number": self.night_number})

    def start_day(self) -> None:
        """Transition to day phase."""
        self.phase = GamePhase.DAY
        self.day_number += 1
        self._log_action("day_start", {"day_number": self.day_number})

    def check_win_condition(self) -> Optional[Team]:
        """
        Check if game has ended and return winning team.
        Returns None if game continues.

        Neutral players count for neither side.
        """
        alive_assassins = self.roster.living_count(Team.ASSASSIN)
        alive_town = self.roster.living_count(Team.TOWN)

        # Town wins: all assassins eliminated
        if alive_assassins == 0:
            return Team.TOWN

        # Assassins win: parity or majority
        if alive_assassins >= alive_town:
            return Team.ASSASSIN

        return None

    def max_rounds_reached(self) -> bool:
        return self.max_rounds is not None and self.day_number >= self.max_rounds

    def eliminate_player(self, player_id: int, reason: str,
                         night_number: Optional[int] = None,
                         day_number: Optional[int] = None,
                         voters: Optional[List[int]] = None) -> bool:
        """
        Eliminate a player. Win conditions are not evaluated here; the game
        loop checks them only once a phase has fully completed.

        Returns True if the player was alive.
        """
        player = self.get_player(player_id)
        if player is None or not player.eliminate():
            return False
        self._log_action("player_eliminated", {
            "player": player_id,
            "role": player.role.value,
            "reason": reason,
            "night_number": night_number,
            "day_number": day_number,
            "voters": voters,
        })
        return True

    def end_game(self, winner: Optional[Team], reason: EndReason) -> None:
        """End the game with a winner (or None for max rounds / abort)."""
        self.phase = GamePhase.ABORTED if reason == EndReason.ABORTED else GamePhase.GAME_OVER
        self.winner = winner
        self.end_reason = reason
        self._log_action("game_over", {
            "winner": winner.value if winner else None,
            "reason": reason.value,
            "day_number": self.day_number,
            "night_number": self.night_number,
        })

    def _log_action(self, action_type: str, data: Dict[str, Any]) -> None:
        """Log a game action."""
        self.action_log.append({
            "type": action_type,
            "phase": self.phase.value,
            "day": self.day_number,
            "night": self.night_number,
            "data": data,
        })

    def get_game_summary(self) -> Dict[str, Any]:
        """Get a summary of the current game state."""
        return {
            "phase": self.phase.value,
            "day": self.day_number,
            "night": self.night_number,
            "alive_players": len(self.get_alive_players()),
            "alive_assassins": len(self.get_assassin_players()),
            "alive_town": len(self.get_town_players()),
            "winner": self.winner.value if self.winner else None,
            "end_reason": self.end_reason.value if self.end_reason else None,
        }
