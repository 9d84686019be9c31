"""
Configuration loader for YAML-based game configurations.
"""

import logging
import yaml
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional

from .game_config import GameConfig

logger = logging.getLogger(__name__)

# Keys YAML may give as ints ("voting_window: 30")
_SECONDS_KEYS = ("night_action_timeout", "voting_window", "clock_tick")


def config_from_dict(data: Dict[str, Any], source: str = "<dict>") -> GameConfig:
    """
    Build a validated GameConfig from a mapping of overrides.

    Unknown keys are logged and ignored; missing keys keep their defaults.

    Raises:
        ValueError: If a value is invalid
    """
    known = {f.name for f in fields(GameConfig)}
    overrides = {}
    for key, value in data.items():
        if key in known:
            overrides[key] = value
        else:
            logger.warning("Unknown config key '%s' in %s", key, source)

    for key in _SECONDS_KEYS:
        if key in overrides:
            overrides[key] = float(overrides[key])
    if overrides.get("agent_types"):
        # YAML mapping keys may arrive as strings
        overrides["agent_types"] = {int(seat): agent for seat, agent in overrides["agent_types"].items()}

    config = GameConfig(**overrides)
    config.validate()
    return config


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load game configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValueError: If the file is not a mapping or a value is invalid
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        data = yaml.safe_load(f)

    if data is None:
        return GameConfig()
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    logger.debug("Loaded config keys %s from %s", sorted(data), config_path)
    return config_from_dict(data, source=config_path)


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """Load configuration from a YAML file, or a fresh default config if no path is given."""
    if config_path is None:
        return GameConfig()
    return load_config_from_yaml(config_path)
