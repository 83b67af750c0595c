"""
config_loader.py
- Loads the optional YAML configuration file for the shifter.
- Keys mirror the command-line flags (node-pool-from, interval, ...).
"""

import os

import yaml
from loguru import logger

from node_pool_shifter.core.errors import ConfigurationError


def load_yaml(path):
    """
    Load a YAML mapping from disk.

    Returns {} when no path is given. A missing or malformed file is a
    configuration error, since the operator explicitly asked for it.
    """
    if not path:
        return {}

    if not os.path.exists(path):
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    logger.debug(f"[config] Loaded {len(data)} key(s) from {path}")
    return {str(key).replace("-", "_"): value for key, value in data.items()}
