"""
Game loop: role assignment, then Night and Day alternating until a win.
"""

import asyncio
import logging
import random
from typing import Any, Dict, Optional

from .core import (
    Clock, EndReason, GamePhase, GameState, InsufficientPlayers, Judge, MIN_PLAYERS,
    Player, RoleAssigner, Roster, SystemClock, Team,
)
from .agents import BaseAgent, HumanAgent, RandomAgent, ScriptedAgent
from .config.game_config import GameConfig
from .display import EventEmitter
from .phases import NightReport, NightResolver, VoteResult, VotingHandler, create_tie_break

logger = logging.getLogger(__name__)


class GameLoop:
    """
    Main game controller.

    Init -> (Night <-> Day) -> Terminal. Win conditions are evaluated only
    after a whole night or a whole day; a Jester voted out ends the game
    at once.
    """

    def __init__(self, config: Optional[GameConfig] = None, roster: Optional[Roster] = None,
                 agents: Optional[Dict[int, BaseAgent]] = None,
                 event_emitter: Optional[EventEmitter] = None,
                 clock: Optional[Clock] = None, assign_roles: bool = True):
        self.config = config or GameConfig()
        self.config.validate()

        # Generate seed if not provided
        if self.config.random_seed is None:
            self.config.random_seed = random.randint(0, 2**31 - 1)
        self.rng = random.Random(self.config.random_seed)

        self.roster = roster if roster is not None else Roster.from_names(self.config.player_names)
        if len(self.roster) < MIN_PLAYERS:
            raise InsufficientPlayers(len(self.roster), MIN_PLAYERS)

        self.game_state = GameState(roster=self.roster, max_rounds=self.config.max_rounds)
        self.event_emitter = event_emitter or EventEmitter()
        self.judge = Judge(self.game_state, self.event_emitter)
        self.clock = clock or SystemClock()

        self.role_assigner = RoleAssigner(rng=self.rng, include_jester=self.config.include_jester)
        if assign_roles:
            self.role_assigner.assign(self.roster)

        self.agents: Dict[int, BaseAgent] = dict(agents or {})
        self._initialize_agents()

        self.night_resolver = NightResolver(
            self.game_state, self.judge, self.clock,
            night_action_timeout=self.config.night_action_timeout,
            clock_tick=self.config.clock_tick,
        )
        self.voting_handler = VotingHandler(
            self.game_state, self.judge, self.clock,
            tie_break=create_tie_break(self.config.tie_break, self.rng),
            voting_window=self.config.voting_window,
            clock_tick=self.config.clock_tick,
        )

        self.night_reports: list[NightReport] = []
        self.vote_results: list[VoteResult] = []
        self.jester_winner: Optional[Player] = None
        self._abort_requested = False

    def _initialize_agents(self) -> None:
        """Create agents for every seat the caller did not provide one for."""
        for player in self.roster:
            if player.player_id in self.agents:
                continue
            if self.config.human_player == player.player_id:
                agent_type = "human_agent"
            elif self.config.agent_types:
                agent_type = self.config.agent_types.get(player.player_id, self.config.agent_type)
            else:
                agent_type = self.config.agent_type
            self.agents[player.player_id] = self._create_agent(player, agent_type.lower())

    def _create_agent(self, player: Player, agent_type: str) -> BaseAgent:
        """Create an agent of the specified type for a player."""
        if agent_type == "random_agent":
            return RandomAgent(player, self.config.random_seed)
        elif agent_type == "human_agent":
            return HumanAgent(player)
        elif agent_type == "scripted_agent":
            return ScriptedAgent(player)
        else:
            raise ValueError(
                f"Unknown agent_type: {agent_type}. "
                f"Must be 'random_agent', 'human_agent' or 'scripted_agent'"
            )

    @property
    def human_agent(self) -> Optional[HumanAgent]:
        return next((a for a in self.agents.values() if isinstance(a, HumanAgent)), None)

    def abort(self) -> None:
        """Stop the game at the next phase boundary. The current phase completes."""
        logger.info("Abort requested")
        self._abort_requested = True

    def _finish(self, winner: Optional[Team], reason: EndReason) -> None:
        self.game_state.end_game(winner, reason)
        if reason == EndReason.ABORTED:
            self.judge.announce("aborted")
            return
        variant = winner.value if winner else "none"
        subject = self.jester_winner if reason == EndReason.JESTER_VOTED_OUT else None
        self.judge.announce("game_over", subject, variant=variant, reason=reason.value,
                            day_number=self.game_state.day_number,
                            night_number=self.game_state.night_number)
        logger.info("Game over: winner=%s reason=%s", variant, reason.value)

    def _check_end(self, after_day: bool) -> bool:
        """Evaluate win conditions at a phase boundary."""
        winner = self.game_state.check_win_condition()
        if winner:
            self._finish(winner, EndReason.WIN_CONDITION)
            return True
        if after_day and self.game_state.max_rounds_reached():
            self._finish(None, EndReason.MAX_ROUNDS)
            return True
        if self._abort_requested:
            self._finish(None, EndReason.ABORTED)
            return True
        return False

    def _announce_start(self) -> None:
        self.judge.announce(
            "game_start",
            player_count=len(self.roster),
            players=[p.player_id for p in self.roster],
            seed=self.config.random_seed,
        )
        # Role counts only; who holds what stays hidden
        roles: Dict[str, int] = {}
        for player in self.roster:
            roles[player.role.title] = roles.get(player.role.title, 0) + 1
        summary = ", ".join(f"{count} {title}" for title, count in roles.items())
        self.judge.announce("roles_assigned", roles=roles, summary=summary)
        human = self.human_agent
        if human is not None:
            self.judge.announce("your_role", human.player, role=human.player.role.title)

    async def run(self) -> Optional[Team]:
        """
        Run the complete game until a win condition, max rounds or abort.
        Returns the winning team (NEUTRAL for a Jester win), or None.
        """
        self._announce_start()

        while not self.game_state.is_over:
            if self._abort_requested:
                self._finish(None, EndReason.ABORTED)
                break

            # Night Phase
            report = await self.night_resolver.run_night_phase_async(self.agents)
            self.night_reports.append(report)
            if self._check_end(after_day=False):
                break

            # Day Phase
            result = await self.voting_handler.run_voting_phase_async(self.agents)
            self.vote_results.append(result)
            if result.jester_win:
                self.jester_winner = self.game_state.get_player(result.eliminated)
                self._finish(Team.NEUTRAL, EndReason.JESTER_VOTED_OUT)
                break
            if self._check_end(after_day=True):
                break

        return self.game_state.winner

    def run_game(self) -> Optional[Team]:
        """Run the complete game (synchronous version, uses async internally)."""
        return asyncio.run(self.run())

    def get_game_summary(self) -> Dict[str, Any]:
        """Get final game summary as dictionary."""
        return {
            "winner": self.game_state.winner.value if self.game_state.winner else None,
            "end_reason": self.game_state.end_reason.value if self.game_state.end_reason else None,
            "days": self.game_state.day_number,
            "nights": self.game_state.night_number,
            "random_seed": self.config.random_seed,
            "final_state": self.game_state.get_game_summary(),
            "players": [
                {
                    "id": p.player_id,
                    "name": p.name,
                    "role": p.role.value,
                    "team": p.team.value,
                    "is_alive": p.is_alive,
                }
                for p in self.roster
            ],
            "action_log": self.game_state.action_log[-10:],  # Last 10 actions
        }

    @property
    def phase(self) -> GamePhase:
        return self.game_state.phase
