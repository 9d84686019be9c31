"""
Integration tests for the full game loop.
"""

import pytest
from unittest.mock import patch

from nightfall import GameLoop
from nightfall.core import (
    EndReason, GamePhase, GameState, InsufficientPlayers, ManualClock, RoleType, Team,
)
from nightfall.agents import ActionType, HumanAgent, RandomAgent, ScriptedAgent
from nightfall.config.game_config import GameConfig
from nightfall.display import EventEmitter, MemorySink

from conftest import RecordingAgent, STANDARD_ROLES, make_roster

JESTER_ROLES = {
    1: RoleType.ASSASSIN,
    2: RoleType.PROPHET,
    3: RoleType.ALCHEMIST,
    4: RoleType.JESTER,
    5: RoleType.TOWNFOLK,
}


def make_game(game_config, roles, count=None, agents=None):
    """Game with fixed roles, scripted agents and a manual clock."""
    roster = make_roster(count or len(roles), roles)
    sink = MemorySink()
    if agents is None:
        agents = {p.player_id: ScriptedAgent(p) for p in roster}
    game = GameLoop(
        config=game_config,
        roster=roster,
        agents=agents,
        event_emitter=EventEmitter([sink]),
        clock=ManualClock(),
        assign_roles=False,
    )
    return game, agents, sink


def test_assassins_win_at_parity(game_state):
    for player_id in (2, 3, 4):
        game_state.eliminate_player(player_id, "test")
    assert game_state.check_win_condition() == Team.ASSASSIN


def test_town_wins_without_assassins(game_state):
    game_state.eliminate_player(1, "test")
    assert game_state.check_win_condition() == Team.TOWN


def test_no_winner_while_town_outnumbers(game_state):
    assert game_state.check_win_condition() is None


def test_jester_counts_for_neither_side():
    state = GameState(roster=make_roster(5, JESTER_ROLES))
    assert state.check_win_condition() is None

    # Assassin, Jester and one Townfolk: 1 vs 1
    state.eliminate_player(2, "test")
    state.eliminate_player(3, "test")
    assert state.check_win_condition() == Team.ASSASSIN


def test_jester_voted_out_wins_immediately(game_config):
    game, agents, sink = make_game(game_config, JESTER_ROLES)
    for voter in (1, 2, 3, 5):
        agents[voter].queue(ActionType.VOTE, 4)

    winner = game.run_game()

    assert winner == Team.NEUTRAL
    assert game.game_state.end_reason == EndReason.JESTER_VOTED_OUT
    assert game.jester_winner.player_id == 4
    assert game.phase == GamePhase.GAME_OVER
    game_over = sink.of_kind("game_over")[0]
    assert game_over.subject == 4
    assert game_over.detail["variant"] == "neutral"


def test_town_wins_by_voting_out_assassin(game_config):
    game, agents, sink = make_game(game_config, STANDARD_ROLES)
    for voter in (2, 3, 4, 5):
        agents[voter].queue(ActionType.VOTE, 1)

    winner = game.run_game()

    assert winner == Team.TOWN
    assert game.game_state.end_reason == EndReason.WIN_CONDITION
    assert game.game_state.day_number == 1
    assert sink.kinds()[-1] == "game_over"
    assert sink.kinds()[:2] == ["game_start", "roles_assigned"]
    assert sink.of_kind("roles_assigned")[0].detail["roles"] == {
        "Assassin": 1, "Townfolk": 2, "Prophet": 1, "Alchemist": 1,
    }


def test_win_checked_only_at_phase_ends(game_config):
    """One check after the night, one after the day; none while a phase runs."""
    game, agents, _ = make_game(game_config, STANDARD_ROLES)
    agents[1].queue(ActionType.ASSASSIN_KILL, 2)
    for voter in (3, 4, 5):
        agents[voter].queue(ActionType.VOTE, 1)

    state = game.game_state
    with patch.object(state, "check_win_condition", wraps=state.check_win_condition) as check:
        game.run_game()

    assert check.call_count == 2
    assert state.winner == Team.TOWN


def test_assassins_win_after_night(game_config):
    """Win conditions are checked once the night is fully applied."""
    roles = {1: RoleType.ASSASSIN, 2: RoleType.PROPHET, 3: RoleType.ALCHEMIST, 4: RoleType.TOWNFOLK}
    game, agents, sink = make_game(game_config, roles)
    agents[1].queue(ActionType.ASSASSIN_KILL, 4)
    agents[3].queue(ActionType.ALCHEMIST_KILL, 2)

    winner = game.run_game()

    assert winner == Team.ASSASSIN
    assert game.game_state.night_number == 1
    assert game.game_state.day_number == 0
    assert [p.player_id for p in game.game_state.get_alive_players()] == [1, 3]
    assert len(sink.of_kind("death")) == 2


def test_alchemist_kills_assassin(game_config):
    game, agents, _ = make_game(game_config, STANDARD_ROLES)
    agents[1].queue(ActionType.ASSASSIN_KILL, 2)
    agents[5].queue(ActionType.ALCHEMIST_KILL, 1)

    winner = game.run_game()

    assert winner == Team.TOWN
    assert game.game_state.day_number == 0
    assert not game.game_state.get_player(2).is_alive


@pytest.mark.parametrize("seed", range(20))
@pytest.mark.parametrize("include_jester", [False, True])
def test_random_games_terminate(seed, include_jester):
    config = GameConfig(
        player_names=[f"P{i}" for i in range(1, 8)],
        random_seed=seed,
        include_jester=include_jester,
        use_judge_announcements=False,
    )
    game = GameLoop(config=config, clock=ManualClock())

    winner = game.run_game()

    state = game.game_state
    assert state.is_over
    assert state.end_reason in (EndReason.WIN_CONDITION, EndReason.JESTER_VOTED_OUT)
    assert winner in (Team.TOWN, Team.ASSASSIN, Team.NEUTRAL)
    # Every completed day removes exactly one player under the random tie policy
    assert len(state.roster.eliminated_players()) >= state.day_number
    assert all(isinstance(agent, RandomAgent) for agent in game.agents.values())


def test_same_seed_same_roles():
    first = GameLoop(config=GameConfig(random_seed=42), clock=ManualClock())
    second = GameLoop(config=GameConfig(random_seed=42), clock=ManualClock())
    assert [p.role for p in first.roster] == [p.role for p in second.roster]


def test_seed_is_generated_when_missing():
    config = GameConfig()
    game = GameLoop(config=config, clock=ManualClock())
    assert isinstance(game.config.random_seed, int)


def test_too_few_players_cannot_start():
    with pytest.raises(InsufficientPlayers):
        GameLoop(config=GameConfig(player_names=["A", "B", "C"]))


def test_max_rounds_ends_without_winner(game_config):
    game_config.tie_break = "no_elimination"
    game_config.max_rounds = 2
    game, _, sink = make_game(game_config, STANDARD_ROLES)

    winner = game.run_game()

    assert winner is None
    assert game.game_state.end_reason == EndReason.MAX_ROUNDS
    assert game.game_state.day_number == 2
    assert len(game.game_state.get_alive_players()) == 5
    assert sink.of_kind("game_over")[0].detail["variant"] == "none"


def test_abort_before_start(game_config):
    game, _, sink = make_game(game_config, STANDARD_ROLES)
    game.abort()

    winner = game.run_game()

    assert winner is None
    assert game.phase == GamePhase.ABORTED
    assert game.game_state.end_reason == EndReason.ABORTED
    assert game.game_state.night_number == 0
    assert sink.kinds()[-1] == "aborted"


class AbortingAgent(RecordingAgent):
    """Requests an abort whenever it is asked for a target."""

    def __init__(self, player, game):
        super().__init__(player)
        self.game = game

    def choose_target(self, context):
        self.game.abort()
        return super().choose_target(context)


def test_abort_lets_current_phase_finish(game_config):
    game, _, sink = make_game(game_config, STANDARD_ROLES)
    game.agents[1] = AbortingAgent(game.roster.get_player(1), game)

    game.run_game()

    assert game.phase == GamePhase.ABORTED
    assert game.game_state.night_number == 1
    assert game.game_state.day_number == 0
    # The Assassin's kill still lands because the night completes
    assert not game.game_state.get_player(2).is_alive


def test_agents_built_from_config():
    config = GameConfig(
        human_player=1,
        agent_types={2: "scripted_agent"},
        random_seed=5,
    )
    game = GameLoop(config=config, clock=ManualClock())

    assert isinstance(game.agents[1], HumanAgent)
    assert game.human_agent is game.agents[1]
    assert isinstance(game.agents[2], ScriptedAgent)
    assert isinstance(game.agents[3], RandomAgent)


def test_game_summary(game_config):
    game, agents, _ = make_game(game_config, STANDARD_ROLES)
    for voter in (2, 3, 4, 5):
        agents[voter].queue(ActionType.VOTE, 1)
    game.run_game()

    summary = game.get_game_summary()

    assert summary["winner"] == "town"
    assert summary["end_reason"] == "win_condition"
    assert summary["random_seed"] == 1234
    assert summary["players"][0] == {
        "id": 1, "name": "Player 1", "role": "assassin", "team": "assassin", "is_alive": False,
    }
