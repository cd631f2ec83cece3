"""
Configuration loading for hipdf

The packaged config.json holds the defaults for every module. A user file
only needs the keys it wants to change; sections are merged one level deep.

Usage:
    from hipdf.config import load_config

    config = load_config()                       # packaged defaults
    config = load_config(Path("hipdf.json"))     # defaults + overrides
"""

import json
from pathlib import Path
from typing import Optional

from ..utilities import Print

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.json"


def _read_json(config_path: Path) -> dict:
    if not config_path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            f"Create the file or omit config_path to use the packaged defaults."
        )

    with open(config_path) as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid configuration file {config_path}: {e}") from e


def load_config(config_path: Optional[Path] = None) -> dict:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to a JSON file with overrides. If None, only the
                     packaged defaults are returned.

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config_path does not exist
        ValueError: If the file is not valid JSON
    """
    config = _read_json(DEFAULT_CONFIG_PATH)

    if config_path is not None:
        overrides = _read_json(Path(config_path))
        for key, value in overrides.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key] = {**config[key], **value}
            else:
                config[key] = value

    Print("DEBUG", f"Loaded configuration v{config.get('version', 'unknown')}")
    return config
