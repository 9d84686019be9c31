"""
Tests for the vote ledger, vote resolution and the day voting window.
"""

import random
import pytest

from nightfall.core import GamePhase, GameState, InvalidVote, Judge, RoleType, SystemClock
from nightfall.agents import ActionType, HumanAgent
from nightfall.phases import (
    NoEliminationTieBreak, RandomTieBreak, VoteLedger, VoteResolver, VotingHandler, create_tie_break,
)

from conftest import STANDARD_ROLES, RecordingAgent, make_roster


class FixedTieBreak(RandomTieBreak):
    """Always picks the last tied player."""

    def choose(self, tied):
        return tied[-1]


@pytest.fixture
def resolver(game_state, judge):
    return VoteResolver(game_state, judge, tie_break=FixedTieBreak())


@pytest.fixture
def handler(game_state, judge, clock):
    return VotingHandler(game_state, judge, clock, tie_break=FixedTieBreak(),
                         voting_window=10.0, clock_tick=0.5)


def test_ledger_keeps_latest_vote():
    ledger = VoteLedger()
    assert ledger.cast(1, 2) is None
    assert ledger.cast(1, 3) == 2
    ledger.cast(4, 3)

    assert ledger.votes == {1: 3, 4: 3}
    assert ledger.tally() == {3: 2}
    assert ledger.voters_for(3) == [1, 4]
    assert len(ledger) == 2

    ledger.clear()
    assert len(ledger) == 0


def test_plurality_eliminates_top_target(resolver, game_state, sink):
    resolver.cast_vote(3, 1)
    resolver.cast_vote(4, 1)
    resolver.cast_vote(5, 2)

    result = resolver.resolve()

    assert result.counts == {1: 2, 2: 1}
    assert result.eliminated == 1
    assert result.tied == [1]
    assert not result.jester_win
    assert not game_state.get_player(1).is_alive
    voted_out = sink.of_kind("voted_out")
    assert voted_out[0].subject == 1
    assert voted_out[0].detail["role"] == "Assassin"
    assert voted_out[0].detail["voters"] == [3, 4]
    assert not sink.of_kind("tie")


def test_revote_overwrites(resolver):
    resolver.cast_vote(3, 1)
    resolver.cast_vote(3, 2)
    resolver.cast_vote(4, 2)

    result = resolver.resolve()

    assert result.votes == {3: 2, 4: 2}
    assert result.eliminated == 2


@pytest.mark.parametrize("voter_id, target_id", [(2, 99), (99, 2), (2, 4), (4, 2)])
def test_invalid_vote_leaves_prior_vote(resolver, game_state, voter_id, target_id):
    """Unknown or dead voters and targets are rejected; earlier votes stand."""
    resolver.cast_vote(2, 3)
    resolver.cast_vote(4, 3)
    game_state.eliminate_player(4, "test")

    with pytest.raises(InvalidVote) as exc_info:
        resolver.cast_vote(voter_id, target_id)

    assert exc_info.value.voter_id == voter_id
    assert exc_info.value.target_id == target_id
    assert resolver.ledger.votes == {2: 3, 4: 3}


def test_zero_votes_means_no_elimination(resolver, game_state, sink):
    result = resolver.resolve()

    assert result.eliminated is None
    assert result.counts == {}
    assert len(game_state.get_alive_players()) == 5
    assert sink.of_kind("no_elimination")[0].detail["reason"] == "no_votes"


def test_tie_uses_policy(resolver, game_state, sink):
    resolver.cast_vote(1, 2)
    resolver.cast_vote(2, 1)
    resolver.cast_vote(3, 4)

    result = resolver.resolve()

    assert result.tied == [1, 2, 4]
    assert result.eliminated == 4
    tie = sink.of_kind("tie")[0]
    assert tie.detail["tied"] == [1, 2, 4]


def test_no_elimination_tie_break(game_state, judge, sink):
    resolver = VoteResolver(game_state, judge, tie_break=NoEliminationTieBreak())
    resolver.cast_vote(1, 2)
    resolver.cast_vote(2, 1)

    result = resolver.resolve()

    assert result.tied == [1, 2]
    assert result.eliminated is None
    assert len(game_state.get_alive_players()) == 5
    assert sink.of_kind("no_elimination")[0].detail["reason"] == "tie"


def test_random_tie_break_is_uniform():
    policy = RandomTieBreak(random.Random(0))
    counts = {1: 0, 2: 0, 3: 0}
    for _ in range(1000):
        counts[policy.choose([1, 2, 3])] += 1
    for count in counts.values():
        assert 250 < count < 420


def test_two_way_tie_resolves_to_either_player():
    """Votes split one each between P1 and P2: both outcomes occur over many days."""
    policy = RandomTieBreak(random.Random(7))
    eliminated = {1: 0, 2: 0}
    for _ in range(200):
        game_state = GameState(roster=make_roster(5, STANDARD_ROLES))
        resolver = VoteResolver(game_state, Judge(game_state), tie_break=policy)
        resolver.cast_vote(3, 1)
        resolver.cast_vote(4, 2)

        result = resolver.resolve()

        assert result.tied == [1, 2]
        eliminated[result.eliminated] += 1
    assert 60 < eliminated[1] < 140
    assert 60 < eliminated[2] < 140


def test_create_tie_break():
    assert isinstance(create_tie_break("random"), RandomTieBreak)
    assert isinstance(create_tie_break("no_elimination"), NoEliminationTieBreak)
    with pytest.raises(ValueError):
        create_tie_break("coin_flip")


def test_jester_voted_out_flags_win(resolver, game_state):
    game_state.get_player(4).assign_role(RoleType.JESTER)
    resolver.cast_vote(1, 4)
    resolver.cast_vote(2, 4)

    result = resolver.resolve()

    assert result.eliminated == 4
    assert result.jester_win


def test_window_collects_agent_votes(handler, game_state, scripted_agents, sink):
    scripted_agents[1].queue(ActionType.VOTE, 2)
    scripted_agents[3].queue(ActionType.VOTE, 1)
    scripted_agents[4].queue(ActionType.VOTE, 1)
    scripted_agents[5].queue(ActionType.VOTE, 1)

    result = handler.run_voting_phase(scripted_agents)

    assert game_state.phase == GamePhase.DAY
    assert game_state.day_number == 1
    assert result.votes == {1: 2, 3: 1, 4: 1, 5: 1}
    assert result.eliminated == 1
    assert not handler.is_open
    assert len(sink.of_kind("vote")) == 4


def test_window_closes_early_when_everyone_answered(handler, clock, scripted_agents):
    handler.run_voting_phase(scripted_agents)
    assert clock.now() < handler.voting_window


def test_vote_candidates_exclude_self_and_dead(handler, game_state, roster):
    game_state.eliminate_player(3, "test")
    agents = {p.player_id: RecordingAgent(p) for p in roster}

    handler.run_voting_phase(agents)

    assert agents[3].contexts == []
    for player_id in (1, 2, 4, 5):
        context = agents[player_id].contexts[0]
        assert context.action == ActionType.VOTE
        assert player_id not in context.candidates
        assert 3 not in context.candidates


def test_human_can_change_vote_until_deadline(handler, clock, roster, scripted_agents):
    human = HumanAgent(roster.get_player(1))
    human.submit(2, ActionType.VOTE)
    human.submit(4, ActionType.VOTE)
    assert human.has_pending_input
    agents = dict(scripted_agents)
    agents[1] = human

    result = handler.run_voting_phase(agents)

    assert clock.now() >= handler.voting_window
    assert result.votes == {1: 4}
    assert result.eliminated == 4
    assert not human.has_pending_input


def test_window_without_input_closes_at_deadline(handler, clock, roster, scripted_agents, sink):
    agents = dict(scripted_agents)
    agents[2] = HumanAgent(roster.get_player(2))

    result = handler.run_voting_phase(agents)

    assert clock.now() >= handler.voting_window
    assert result.eliminated is None
    assert sink.of_kind("no_elimination")


def test_invalid_agent_vote_is_announced(handler, game_state, scripted_agents, sink):
    game_state.eliminate_player(4, "test")
    scripted_agents[1].queue(ActionType.VOTE, 4)
    scripted_agents[2].queue(ActionType.VOTE, 3)

    result = handler.run_voting_phase(scripted_agents)

    assert result.votes == {2: 3}
    invalid = sink.of_kind("invalid_vote")
    assert len(invalid) == 1
    assert invalid[0].detail["voter"] == 1
    assert invalid[0].detail["target"] == 4


def test_submit_vote_requires_open_window(handler):
    with pytest.raises(RuntimeError):
        handler.submit_vote(1, 2)


def test_ledger_is_fresh_each_day(handler, judge, scripted_agents):
    scripted_agents[3].queue(ActionType.VOTE, 2)

    first = handler.run_voting_phase(scripted_agents)
    judge.start_night()
    second = handler.run_voting_phase(scripted_agents)

    assert first.eliminated == 2
    assert second.votes == {}
    assert second.eliminated is None


def test_default_clock_is_system_clock(game_state, judge):
    assert isinstance(VotingHandler(game_state, judge).clock, SystemClock)
