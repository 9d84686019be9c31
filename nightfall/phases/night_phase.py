"""
Night phase: Assassin kill, Alchemist save/kill, Prophet inspection.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core import (
    Clock, GamePhase, GameState, Judge, NoEligibleTarget, Player, RoleType,
    SystemClock, wait_with_deadline,
)
from ..agents import ActionType, BaseAgent

logger = logging.getLogger(__name__)


@dataclass
class NightTargets:
    """Targets chosen during one night. Never carried over to the next."""
    assassin_kill: Optional[int] = None
    alchemist_save: Optional[int] = None
    alchemist_kill: Optional[int] = None
    prophet_inspect: Optional[int] = None


@dataclass
class NightReport:
    """What happened during a night, once results are applied."""
    night_number: int
    targets: NightTargets
    deaths: List[Tuple[int, str]] = field(default_factory=list)  # (player_id, cause)
    saved: Optional[int] = None
    revealed_role: Optional[RoleType] = None

    @property
    def killed(self) -> List[int]:
        return [player_id for player_id, _ in self.deaths]


class NightResolver:
    """
    Runs the ordered night sub-phases against the shared game state.

    Sequence: Assassin select -> Alchemist select -> Prophet select -> Apply results.
    Targets are only collected during the select sub-phases; every state
    change happens in apply_results, so an interrupted night leaves no trace.
    """

    def __init__(self, game_state: GameState, judge: Judge, clock: Optional[Clock] = None,
                 night_action_timeout: float = 10.0, clock_tick: float = 0.5):
        self.game_state = game_state
        self.judge = judge
        self.clock = clock or SystemClock()
        self.night_action_timeout = night_action_timeout
        self.clock_tick = clock_tick
        self._alive_at_dusk: List[int] = []

    def eligible_targets(self, actor: Player, include_self: bool = False) -> List[int]:
        """
        Living players (as of the start of the night) the actor may target.

        Raises:
            NoEligibleTarget: If nobody can be targeted
        """
        candidates = [
            player_id for player_id in self._alive_at_dusk
            if include_self or player_id != actor.player_id
        ]
        if not candidates:
            raise NoEligibleTarget(actor.role.value, actor.player_id)
        return candidates

    async def _decide(self, actor: Player, action: ActionType, candidates: List[int],
                      agents: Dict[int, BaseAgent]) -> Optional[int]:
        """Ask the actor's agent for a target; None if it gives no valid answer in time."""
        agent = agents.get(actor.player_id)
        if agent is None:
            logger.warning("No agent for %s, %s skipped", actor, action.value)
            self.judge.announce("no_choice", actor, role=actor.role.title, action=action.value,
                                reason="no_agent")
            return None

        context = agent.build_context(self.game_state, action, candidates)
        choice = await wait_with_deadline(
            self.clock,
            agent.choose_target_async(context),
            self.night_action_timeout,
            self.clock_tick,
        )

        if choice is None:
            logger.info("%s made no choice for %s", actor, action.value)
            self.judge.announce("no_choice", actor, role=actor.role.title, action=action.value,
                                reason="timeout")
            return None
        if choice not in candidates:
            logger.warning("%s chose ineligible target %s for %s", actor, choice, action.value)
            self.judge.announce("no_choice", actor, role=actor.role.title, action=action.value,
                                reason="ineligible", choice=choice)
            return None

        logger.debug("%s chose %s for %s", actor, choice, action.value)
        self.judge.announce("target_chosen", actor, role=actor.role.title, action=action.value, target=choice)
        return choice

    async def _select(self, actor: Player, action: ActionType, agents: Dict[int, BaseAgent],
                      include_self: bool = False) -> Optional[int]:
        try:
            candidates = self.eligible_targets(actor, include_self=include_self)
        except NoEligibleTarget as e:
            logger.info("%s: %s", e.message, actor)
            self.judge.announce("skip", actor, role=actor.role.title, action=action.value)
            return None
        return await self._decide(actor, action, candidates, agents)

    async def process_assassin_kill(self, agents: Dict[int, BaseAgent], targets: NightTargets) -> None:
        """Assassin picks a victim. Skipped if the Assassin is dead or absent."""
        assassin = self.game_state.find_alive_by_role(RoleType.ASSASSIN)
        if assassin is None:
            return

        self.judge.announce("wake", variant="assassin")
        targets.assassin_kill = await self._select(assassin, ActionType.ASSASSIN_KILL, agents)

    async def process_alchemist(self, agents: Dict[int, BaseAgent], targets: NightTargets) -> None:
        """
        Alchemist may save anyone alive (self included) and kill anyone else
        alive. Each ability fires at most once per game.
        """
        alchemist = self.game_state.find_alive_by_role(RoleType.ALCHEMIST)
        if alchemist is None or not (alchemist.can_save or alchemist.can_kill):
            return

        self.judge.announce("wake", variant="alchemist")
        if alchemist.can_save:
            targets.alchemist_save = await self._select(
                alchemist, ActionType.ALCHEMIST_SAVE, agents, include_self=True
            )
        if alchemist.can_kill:
            targets.alchemist_kill = await self._select(alchemist, ActionType.ALCHEMIST_KILL, agents)

    async def process_prophet_inspect(self, agents: Dict[int, BaseAgent], targets: NightTargets) -> Optional[RoleType]:
        """
        Prophet inspects a player; the true role is revealed to the display.
        No game state changes.
        """
        prophet = self.game_state.find_alive_by_role(RoleType.PROPHET)
        if prophet is None:
            return None

        self.judge.announce("wake", variant="prophet")
        targets.prophet_inspect = await self._select(prophet, ActionType.PROPHET_INSPECT, agents)
        if targets.prophet_inspect is None:
            return None

        inspected = self.game_state.get_player(targets.prophet_inspect)
        self.judge.announce("reveal", inspected, role=inspected.role.title, prophet=prophet.player_id)
        return inspected.role

    def apply_results(self, targets: NightTargets) -> NightReport:
        """
        Apply the night's effects atomically.

        The Assassin's kill is negated when it matches the Alchemist's save;
        this is decided before any death is applied. The Alchemist's kill
        always lands.
        """
        report = NightReport(night_number=self.game_state.night_number, targets=targets)

        alchemist = self.game_state.find_alive_by_role(RoleType.ALCHEMIST)
        if alchemist is not None:
            if targets.alchemist_save is not None:
                alchemist.use_save()
            if targets.alchemist_kill is not None:
                alchemist.use_kill()

        if targets.assassin_kill is not None:
            if targets.assassin_kill == targets.alchemist_save:
                report.saved = targets.assassin_kill
            else:
                report.deaths.append((targets.assassin_kill, ActionType.ASSASSIN_KILL.value))

        if targets.alchemist_kill is not None and targets.alchemist_kill not in report.killed:
            report.deaths.append((targets.alchemist_kill, ActionType.ALCHEMIST_KILL.value))

        for player_id, cause in report.deaths:
            self.game_state.eliminate_player(player_id, cause, night_number=self.game_state.night_number)

        if report.saved is not None:
            self.judge.announce("saved", self.game_state.get_player(report.saved))
        for player_id, cause in report.deaths:
            victim = self.game_state.get_player(player_id)
            self.judge.announce("death", victim, variant=cause, role=victim.role.title)

        return report

    async def run_night_phase_async(self, agents: Dict[int, BaseAgent]) -> NightReport:
        """Run a complete night phase."""
        if self.game_state.phase != GamePhase.NIGHT:
            self.judge.start_night()

        targets = NightTargets()
        self._alive_at_dusk = [p.player_id for p in self.game_state.get_alive_players()]

        try:
            await self.process_assassin_kill(agents, targets)
            await self.process_alchemist(agents, targets)
            revealed = await self.process_prophet_inspect(agents, targets)
        finally:
            # Input that arrived too late never carries into the next phase
            for agent in agents.values():
                agent.reset()

        report = self.apply_results(targets)
        report.revealed_role = revealed
        logger.info("Night %d resolved: deaths=%s saved=%s", report.night_number, report.killed, report.saved)
        self.judge.announce("night_end", deaths=report.killed)
        return report

    def run_night_phase(self, agents: Dict[int, BaseAgent]) -> NightReport:
        """Run a complete night phase (synchronous version, uses async internally)."""
        return asyncio.run(self.run_night_phase_async(agents))
