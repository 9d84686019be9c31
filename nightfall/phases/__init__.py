"""
Phase handlers for night actions and day voting.
"""

from .night_phase import NightResolver, NightTargets, NightReport
from .voting import (
    VoteLedger, VoteResolver, VoteResult, VotingHandler,
    TieBreakPolicy, RandomTieBreak, NoEliminationTieBreak, create_tie_break,
)

__all__ = [
    'NightResolver',
    'NightTargets',
    'NightReport',
    'VoteLedger',
    'VoteResolver',
    'VoteResult',
    'VotingHandler',
    'TieBreakPolicy',
    'RandomTieBreak',
    'NoEliminationTieBreak',
    'create_tie_break',
]
