"""Game configuration module."""

from .game_config import GameConfig, TIE_BREAK_POLICIES, AGENT_TYPES
from .config_loader import config_from_dict, load_config, load_config_from_yaml

__all__ = [
    'GameConfig',
    'TIE_BREAK_POLICIES',
    'AGENT_TYPES',
    'config_from_dict',
    'load_config',
    'load_config_from_yaml',
]
