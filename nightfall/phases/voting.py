"""
Voting system: vote ledger, tally, tie-breaking and the day voting window.
"""

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core import (
    Clock, GamePhase, GameState, InvalidVote, Judge, Player, RoleType, SystemClock,
)
from ..agents import ActionType, BaseAgent

logger = logging.getLogger(__name__)


class VoteLedger:
    """Current vote of each voter for one day. A new vote overwrites the old one."""

    def __init__(self):
        self._votes: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._votes)

    @property
    def votes(self) -> Dict[int, int]:
        return dict(self._votes)

    def cast(self, voter_id: int, target_id: int) -> Optional[int]:
        """Record a vote; returns the voter's previous target, if any."""
        previous = self._votes.get(voter_id)
        self._votes[voter_id] = target_id
        return previous

    def tally(self) -> Dict[int, int]:
        """Vote count per target."""
        counts: Dict[int, int] = {}
        for target_id in self._votes.values():
            counts[target_id] = counts.get(target_id, 0) + 1
        return counts

    def voters_for(self, target_id: int) -> List[int]:
        return [voter for voter, target in self._votes.items() if target == target_id]

    def clear(self) -> None:
        self._votes.clear()


class TieBreakPolicy(ABC):
    """Decides the outcome when several players share the top vote count."""

    name: str = ""

    @abstractmethod
    def choose(self, tied: List[int]) -> Optional[int]:
        """Return the eliminated player id, or None for no elimination."""
        pass


class RandomTieBreak(TieBreakPolicy):
    """Uniform random choice among the tied players."""

    name = "random"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def choose(self, tied: List[int]) -> Optional[int]:
        return self.rng.choice(tied)


class NoEliminationTieBreak(TieBreakPolicy):
    """Nobody leaves on a tie."""

    name = "no_elimination"

    def choose(self, tied: List[int]) -> Optional[int]:
        return None


def create_tie_break(name: str, rng: Optional[random.Random] = None) -> TieBreakPolicy:
    """Build a tie-break policy from its config name."""
    if name == RandomTieBreak.name:
        return RandomTieBreak(rng)
    if name == NoEliminationTieBreak.name:
        return NoEliminationTieBreak()
    raise ValueError(f"Unknown tie_break: {name}. Must be 'random' or 'no_elimination'")


@dataclass
class VoteResult:
    """Outcome of one day's vote."""
    counts: Dict[int, int] = field(default_factory=dict)
    votes: Dict[int, int] = field(default_factory=dict)
    tied: List[int] = field(default_factory=list)
    eliminated: Optional[int] = None
    jester_win: bool = False


class VoteResolver:
    """Validates votes into the ledger and resolves the day's elimination."""

    def __init__(self, game_state: GameState, judge: Judge,
                 tie_break: Optional[TieBreakPolicy] = None,
                 ledger: Optional[VoteLedger] = None):
        self.game_state = game_state
        self.judge = judge
        self.tie_break = tie_break or RandomTieBreak()
        self.ledger = ledger if ledger is not None else VoteLedger()

    def _living(self, player_id: Optional[int], role: str, voter_id: Optional[int],
                target_id: Optional[int]) -> Player:
        player = self.game_state.get_player(player_id) if player_id is not None else None
        if player is None:
            raise InvalidVote(voter_id, target_id, f"unknown {role} {player_id}")
        if not player.is_alive:
            raise InvalidVote(voter_id, target_id, f"{role} {player_id} is dead")
        return player

    def cast_vote(self, voter_id: int, target_id: int) -> None:
        """
        Record a vote, overwriting the voter's previous vote.

        Raises:
            InvalidVote: If voter or target is unknown or dead. The voter's
                prior vote stands.
        """
        voter = self._living(voter_id, "voter", voter_id, target_id)
        target = self._living(target_id, "target", voter_id, target_id)
        self.ledger.cast(voter_id, target_id)
        self.judge.announce("vote", target, voter=voter_id, voter_name=voter.name)

    def tally(self) -> Dict[int, int]:
        return self.ledger.tally()

    def get_tied_players(self) -> List[int]:
        """Targets sharing the strictly highest count, in seating order."""
        counts = self.tally()
        if not counts:
            return []
        max_votes = max(counts.values())
        return [p.player_id for p in self.game_state.players if counts.get(p.player_id) == max_votes]

    def resolve(self) -> VoteResult:
        """Tally, break ties, and eliminate the day's victim."""
        counts = self.tally()
        result = VoteResult(counts=counts, votes=self.ledger.votes)

        if not counts:
            self.judge.announce("no_elimination", reason="no_votes")
            return result

        summary = ", ".join(
            f"{self.game_state.get_player(pid).name}: {count}" for pid, count in counts.items()
        )
        self.judge.announce("vote_results", counts=counts, votes=result.votes, summary=summary)

        result.tied = self.get_tied_players()
        if len(result.tied) == 1:
            victim_id = result.tied[0]
        else:
            names = ", ".join(self.game_state.get_player(pid).name for pid in result.tied)
            self.judge.announce("tie", tied=result.tied, names=names, policy=self.tie_break.name)
            victim_id = self.tie_break.choose(result.tied)

        if victim_id is None:
            self.judge.announce("no_elimination", reason="tie")
            return result

        victim = self.game_state.get_player(victim_id)
        self.game_state.eliminate_player(
            victim_id,
            "voting",
            day_number=self.game_state.day_number,
            voters=self.ledger.voters_for(victim_id),
        )
        result.eliminated = victim_id
        result.jester_win = victim.role == RoleType.JESTER
        self.judge.announce("voted_out", victim, role=victim.role.title,
                            voters=self.ledger.voters_for(victim_id))
        logger.info("Day %d: %s voted out (jester_win=%s)", self.game_state.day_number, victim, result.jester_win)
        return result


class VotingHandler:
    """
    Runs the day voting window.

    Every living player's agent is asked for a vote at once. Votes are
    recorded as they arrive; the window closes at the deadline or when no
    further input is expected. Ties are resolved only when it closes.
    """

    def __init__(self, game_state: GameState, judge: Judge, clock: Optional[Clock] = None,
                 tie_break: Optional[TieBreakPolicy] = None,
                 voting_window: float = 30.0, clock_tick: float = 0.5):
        self.game_state = game_state
        self.judge = judge
        self.clock = clock or SystemClock()
        self.tie_break = tie_break or RandomTieBreak()
        self.voting_window = voting_window
        self.clock_tick = clock_tick
        self.resolver: Optional[VoteResolver] = None

    @property
    def is_open(self) -> bool:
        return self.resolver is not None

    def vote_candidates(self, voter: Player) -> List[int]:
        """Living players other than the voter."""
        return [p.player_id for p in self.game_state.get_alive_players() if p.player_id != voter.player_id]

    def submit_vote(self, voter_id: Optional[int], target_id: Optional[int]) -> bool:
        """
        Cast a vote while the window is open.
        Returns True if the vote was recorded.
        """
        if self.resolver is None:
            raise RuntimeError("Voting window is not open")
        try:
            self.resolver.cast_vote(voter_id, target_id)
        except InvalidVote as e:
            logger.warning(e.message)
            self.judge.announce("invalid_vote", voter=voter_id, target=target_id, reason=e.reason)
            return False
        return True

    def _ask(self, voter: Player, agent: BaseAgent) -> "asyncio.Task":
        context = agent.build_context(self.game_state, ActionType.VOTE, self.vote_candidates(voter))
        return asyncio.ensure_future(agent.choose_target_async(context))

    async def collect_votes_async(self, agents: Dict[int, BaseAgent]) -> None:
        """Collect votes from all alive players until the window closes."""
        pending: Dict[asyncio.Task, Player] = {}
        for player in self.game_state.get_alive_players():
            agent = agents.get(player.player_id)
            if agent is None:
                logger.warning("No agent for %s, no vote", player)
                continue
            pending[self._ask(player, agent)] = player

        start = self.clock.now()
        # Let agents that answer immediately do so before the first tick
        await asyncio.sleep(0)
        try:
            while True:
                for task in [t for t in pending if t.done()]:
                    voter = pending.pop(task)
                    choice = task.result()
                    if choice is not None:
                        self.submit_vote(voter.player_id, choice)
                    agent = agents[voter.player_id]
                    if agent.interactive and voter.is_alive:
                        # Interactive voters may change their mind until the deadline
                        pending[self._ask(voter, agent)] = voter

                if not pending or self.clock.now() - start >= self.voting_window:
                    break
                await self.clock.sleep(self.clock_tick)
        finally:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    async def run_voting_phase_async(self, agents: Dict[int, BaseAgent]) -> VoteResult:
        """Run a complete day: open the window, collect votes, resolve."""
        if self.game_state.phase != GamePhase.DAY:
            self.judge.start_day()

        # Fresh ledger for each day; nothing survives between phases
        self.resolver = VoteResolver(self.game_state, self.judge, self.tie_break)
        try:
            await self.collect_votes_async(agents)
            return self.resolver.resolve()
        finally:
            self.resolver = None
            for agent in agents.values():
                agent.reset()

    def run_voting_phase(self, agents: Dict[int, BaseAgent]) -> VoteResult:
        """Run a complete day (synchronous version, uses async internally)."""
        return asyncio.run(self.run_voting_phase_async(agents))
