"""
Agent implementations (decision sources) for game players.
"""

from .base_agent import BaseAgent, DecisionContext, ActionType
from .random_agent import RandomAgent
from .scripted_agent import ScriptedAgent
from .human_agent import HumanAgent

__all__ = ['BaseAgent', 'DecisionContext', 'ActionType', 'RandomAgent', 'ScriptedAgent', 'HumanAgent']
