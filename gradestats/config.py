#!/usr/bin/env python3
"""
Configuration loading for the statistics engine.

Defaults live in DEFAULT_CONFIG; a YAML file (by default the packaged
analytics/stats_config.yaml) overrides them key by key.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from gradestats.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "analytics" / "stats_config.yaml"

PREVIOUS_PERIOD_STRATEGIES = ("previous_semester", "previous_year")
LEVELS = ("group", "spe", "filiere", "cursus")

DEFAULT_CONFIG: Dict[str, Any] = {
    'LEADERBOARD_SIZE': 10,
    'PREVIOUS_PERIOD': 'previous_semester',
    'ANONYMOUS_NAME': 'John Doe',
    'MAX_WORKERS': 4,
    'SUBJECT_STATS_LEVELS': ['group', 'spe', 'filiere', 'cursus'],
    'DERIVE_SUBJECT_AVERAGE': True,
}


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to YAML file

    Returns:
        Configuration dictionary (empty for an empty file)
    """
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping")
    return data


def apply_overrides(base_cfg: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply parameter overrides to base configuration.

    Args:
        base_cfg: Base configuration dictionary
        overrides: Override parameters

    Returns:
        New configuration with overrides applied
    """
    config = base_cfg.copy()
    config.update(overrides)
    return config


def validate_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """Check value ranges and enumerations, raising ConfigError on the first problem."""
    size = config['LEADERBOARD_SIZE']
    if not isinstance(size, int) or size <= 0:
        raise ConfigError(f"LEADERBOARD_SIZE must be a positive integer, got {size!r}")

    workers = config['MAX_WORKERS']
    if not isinstance(workers, int) or workers <= 0:
        raise ConfigError(f"MAX_WORKERS must be a positive integer, got {workers!r}")

    if config['PREVIOUS_PERIOD'] not in PREVIOUS_PERIOD_STRATEGIES:
        raise ConfigError(
            f"PREVIOUS_PERIOD must be one of {PREVIOUS_PERIOD_STRATEGIES}, "
            f"got {config['PREVIOUS_PERIOD']!r}"
        )

    unknown_levels = [lvl for lvl in config['SUBJECT_STATS_LEVELS'] if lvl not in LEVELS]
    if unknown_levels:
        raise ConfigError(f"Unknown SUBJECT_STATS_LEVELS entries: {unknown_levels}")

    return config


def load_config(path: Optional[Union[str, Path]] = None,
                overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build the effective configuration.

    Args:
        path: YAML file to load; the packaged default is used when None
        overrides: Final key/value overrides (e.g. from the CLI)

    Returns:
        Validated configuration dictionary
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    config = DEFAULT_CONFIG.copy()

    if config_path.exists():
        config = apply_overrides(config, load_yaml(config_path))
        logger.debug(f"Loaded configuration from {config_path}")
    elif path:
        raise ConfigError(f"Configuration file not found: {config_path}")

    if overrides:
        config = apply_overrides(config, overrides)

    return validate_config(config)
