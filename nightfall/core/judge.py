"""
Judge/Moderator: narrates the game to the display as structured events.
"""

import logging
from typing import Optional

from .game_engine import GameState
from .player import Player
from ..display.event_emitter import EventEmitter, GameEvent

logger = logging.getLogger(__name__)


class Judge:
    """Moderator that stamps the current phase on every announcement."""

    def __init__(self, game_state: GameState, event_emitter: Optional[EventEmitter] = None):
        self.game_state = game_state
        self.event_emitter = event_emitter

    def announce(self, kind: str, subject: Optional[Player] = None, **detail) -> None:
        """
        Make a judge announcement.

        Args:
            kind: Event kind (e.g. "death", "reveal", "vote")
            subject: Player the event is about, if any
            **detail: Structured event data; the subject's name is added
        """
        if subject is not None:
            detail.setdefault("name", subject.name)
        event = GameEvent(
            phase=self.game_state.phase.value,
            kind=kind,
            subject=subject.player_id if subject is not None else None,
            detail=detail,
        )
        logger.debug("Event %s", event.to_dict())
        if self.event_emitter:
            self.event_emitter.emit(event)

    def start_night(self) -> None:
        """Announce night phase start."""
        self.game_state.start_night()
        logger.info("Night %d begins", self.game_state.night_number)
        self.announce("phase_change", variant="night", number=self.game_state.night_number)

    def start_day(self) -> None:
        """Announce day phase start."""
        self.game_state.start_day()
        alive = [p.player_id for p in self.game_state.get_alive_players()]
        logger.info("Day %d begins, players alive: %s", self.game_state.day_number, alive)
        self.announce("phase_change", variant="day", number=self.game_state.day_number, alive=alive)

