"""
Game configuration and constants.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, List

TIE_BREAK_POLICIES = ("random", "no_elimination")
AGENT_TYPES = ("random_agent", "scripted_agent", "human_agent")


def default_player_names() -> List[str]:
    return [f"Player {i}" for i in range(1, 6)]


@dataclass
class GameConfig:
    """Configuration for game parameters."""

    # Seating
    player_names: List[str] = field(default_factory=default_player_names)
    human_player: Optional[int] = None  # seat id driven by HumanAgent

    # Time limits (seconds on the game clock)
    night_action_timeout: float = 10.0
    voting_window: float = 30.0
    clock_tick: float = 0.5

    # Rules
    include_jester: bool = False  # seat a Jester when there are at least 5 players
    tie_break: str = "random"  # Options: "random" or "no_elimination"
    max_rounds: Optional[int] = None  # Maximum number of days before the game ends without a winner

    # Agent settings
    agent_type: str = "random_agent"  # used if agent_types does not name the seat
    agent_types: Optional[Dict[int, str]] = field(default=None)  # Per-player agent types: {player_id: "agent_type"}
    random_seed: Optional[int] = None  # Seed for role assignment, tie breaks and random agents

    # Output
    log_level: str = "INFO"
    use_judge_announcements: bool = True

    def validate(self) -> None:
        """
        Check values that would otherwise fail deep inside a game.

        Raises:
            ValueError: If a value is out of range or unknown
        """
        if self.tie_break not in TIE_BREAK_POLICIES:
            raise ValueError(f"Unknown tie_break: {self.tie_break}. Must be one of {TIE_BREAK_POLICIES}")
        for name in ("night_action_timeout", "voting_window"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.clock_tick <= 0:
            raise ValueError("clock_tick must be positive")
        for agent_type in [self.agent_type, *(self.agent_types or {}).values()]:
            if agent_type.lower() not in AGENT_TYPES:
                raise ValueError(f"Unknown agent_type: {agent_type}. Must be one of {AGENT_TYPES}")
        if self.max_rounds is not None and self.max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")
