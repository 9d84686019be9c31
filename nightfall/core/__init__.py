"""
Core game components: players, roster, roles, state, clock and the judge.
"""

from .exceptions import GameError, InsufficientPlayers, InvalidVote, NoEligibleTarget
from .roles import RoleType, Team, team_for_role, get_special_roles
from .player import Player, PlayerStatus
from .roster import Roster
from .role_assigner import RoleAssigner, MIN_PLAYERS
from .clock import Clock, SystemClock, ManualClock, wait_with_deadline
from .game_engine import GameState, GamePhase, EndReason
from .judge import Judge

__all__ = [
    'GameError',
    'InsufficientPlayers',
    'InvalidVote',
    'NoEligibleTarget',
    'RoleType',
    'Team',
    'team_for_role',
    'get_special_roles',
    'Player',
    'PlayerStatus',
    'Roster',
    'RoleAssigner',
    'MIN_PLAYERS',
    'Clock',
    'SystemClock',
    'ManualClock',
    'wait_with_deadline',
    'GameState',
    'GamePhase',
    'EndReason',
    'Judge',
]
