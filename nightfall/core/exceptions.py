"""
Exceptions for rule violations and recoverable game conditions.
"""

from typing import Optional


class GameError(Exception):
    """Base class for all game rule errors."""


class InsufficientPlayers(GameError):
    """Raised when a game is created with too few players."""

    def __init__(self, player_count: int, minimum: int, message: str = ""):
        self.player_count = player_count
        self.minimum = minimum
        self.message = message or f"At least {minimum} players are required, got {player_count}"
        super().__init__(self.message)


class InvalidVote(GameError):
    """Raised when a vote is cast by or for a dead or unknown player."""

    def __init__(self, voter_id: Optional[int], target_id: Optional[int], reason: str):
        self.voter_id = voter_id
        self.target_id = target_id
        self.reason = reason
        self.message = f"Vote {voter_id} -> {target_id} rejected: {reason}"
        super().__init__(self.message)


class NoEligibleTarget(GameError):
    """Raised when a night sub-phase has no candidate targets."""

    def __init__(self, action: str, actor_id: Optional[int] = None):
        self.action = action
        self.actor_id = actor_id
        self.message = f"No eligible target for {action}"
        super().__init__(self.message)
