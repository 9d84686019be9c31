"""
Nightfall: rules engine for a five-role social-deduction party game.
"""

from .game import GameLoop

__all__ = ['GameLoop']
