"""
Pytest fixtures for Nightfall game tests.
"""

import pytest
from typing import Dict, List, Optional

from nightfall.core import GameState, Judge, ManualClock, Roster, RoleType
from nightfall.agents import BaseAgent, DecisionContext, ScriptedAgent
from nightfall.config.game_config import GameConfig
from nightfall.display import EventEmitter, MemorySink


# Seating used by most tests: seat id -> role
STANDARD_ROLES = {
    1: RoleType.ASSASSIN,
    2: RoleType.TOWNFOLK,
    3: RoleType.PROPHET,
    4: RoleType.TOWNFOLK,
    5: RoleType.ALCHEMIST,
}


class RecordingAgent(BaseAgent):
    """Test agent that remembers every context and picks the first candidate."""

    def __init__(self, player, pick: Optional[int] = None):
        super().__init__(player)
        self.pick = pick
        self.contexts: List[DecisionContext] = []

    def choose_target(self, context: DecisionContext) -> Optional[int]:
        self.contexts.append(context)
        if self.pick is not None:
            return self.pick
        return context.candidates[0] if context.candidates else None


def seat_roles(roster: Roster, roles: Dict[int, RoleType]) -> Roster:
    """Give players fixed roles instead of random ones."""
    for player_id, role_type in roles.items():
        roster.get_player(player_id).assign_role(role_type)
    return roster


def make_roster(count: int = 5, roles: Optional[Dict[int, RoleType]] = None) -> Roster:
    roster = Roster.from_names([f"Player {i}" for i in range(1, count + 1)])
    return seat_roles(roster, roles or {})


@pytest.fixture
def game_config():
    """Test game configuration."""
    return GameConfig(
        night_action_timeout=5.0,
        voting_window=10.0,
        clock_tick=0.5,
        random_seed=1234,
        use_judge_announcements=False,
    )


@pytest.fixture
def roster() -> Roster:
    """Five players with the standard seating."""
    return make_roster(5, STANDARD_ROLES)


@pytest.fixture
def game_state(roster) -> GameState:
    """Create a fresh game state."""
    return GameState(roster=roster)


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def judge(game_state, sink) -> Judge:
    """Create a judge instance recording events in memory."""
    return Judge(game_state, EventEmitter([sink]))


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scripted_agents(roster) -> Dict[int, ScriptedAgent]:
    """Scripted agents for all players; every decision is 'no choice' until queued."""
    return {player.player_id: ScriptedAgent(player) for player in roster}
