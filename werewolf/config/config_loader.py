"""
Configuration loader for YAML-based game configurations.
"""

import yaml
from pathlib import Path
from typing import Optional

from .game_config import GameConfig


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
        ValueError: If a value is out of range
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    # Fresh instance so callers can mutate it without touching default_config
    config = GameConfig()

    if config_dict is None:
        return config

    for key, value in config_dict.items():
        if hasattr(config, key) and not isinstance(getattr(type(config), key, None), property):
            setattr(config, key, value)
        else:
            # Warn about unknown keys but don't fail
            print(f"Warning: Unknown config key '{key}' in YAML file")

    # YAML mappings come back with int keys already, but be lenient with quoted seats
    if config.agent_types:
        config.agent_types = {int(seat): agent for seat, agent in config.agent_types.items()}

    config.validate()
    return config


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from YAML file or return a default one.

    Args:
        config_path: Optional path to YAML config file. If None, returns default values.

    Returns:
        GameConfig instance
    """
    if config_path is None:
        return GameConfig()

    return load_config_from_yaml(config_path)
