"""
Console display: turns structured events into narrative lines.
"""

from typing import Callable, Dict

from .event_emitter import DisplaySink, GameEvent

# Narrative templates keyed by event kind, or "kind:variant" when the
# event carries a variant. Fields come from event.detail.
MESSAGES: Dict[str, str] = {
    "game_start": "{player_count} players take their seats. Game starts...",
    "roles_assigned": "Roles assigned! In play: {summary}.",
    "your_role": "You are {name}, the {role}.",
    "phase_change:night": "Night {number} falls. Shadows creep over the village...",
    "phase_change:day": "Day {number}: Vote for a player!",
    "wake:assassin": "Assassin, choose your victim from the shadows...",
    "wake:alchemist": "Alchemist, choose someone to protect or eliminate...",
    "wake:prophet": "Prophet, choose a player to investigate...",
    "skip": "{role} has no eligible target for {action}.",
    "no_choice": "{role} made no choice for {action}.",
    "target_chosen": "The {role} has made a choice.",
    "saved": "{name} was saved by the Alchemist!",
    "death:assassin_kill": "Night kill: {name} ({role}).",
    "death:alchemist_kill": "Alchemist eliminated {name} ({role}).",
    "reveal": "Prophet sees that {name} is a {role}.",
    "night_end": "Night ends...",
    "vote": "{voter_name} votes for {name}.",
    "invalid_vote": "Vote rejected: {reason}.",
    "vote_results": "Votes: {summary}.",
    "tie": "Tie between {names}.",
    "voted_out": "Voted out: {name} (Role: {role}).",
    "no_elimination": "No one was voted out!",
    "game_over:town": "Town wins!",
    "game_over:assassin": "Assassins win!",
    "game_over:neutral": "Jester ({name}) wins immediately!",
    "game_over:none": "Game over without a winner ({reason}).",
    "aborted": "Game aborted.",
}


class ConsoleSink(DisplaySink):
    """Prints announcements the way a game moderator would read them."""

    def __init__(self, write: Callable[[str], None] = print, prefix: str = "[JUDGE]"):
        self.write = write
        self.prefix = prefix

    def format(self, event: GameEvent) -> str:
        variant = event.detail.get("variant")
        template = MESSAGES.get(f"{event.kind}:{variant}") if variant else None
        if template is None:
            template = MESSAGES.get(event.kind)
        if template is None:
            return f"{event.kind}: {event.detail}"
        try:
            return template.format(**event.detail)
        except KeyError:
            return f"{event.kind}: {event.detail}"

    def emit(self, event: GameEvent) -> None:
        self.write(f"{self.prefix} {self.format(event)}")
