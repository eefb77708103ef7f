"""Configuration loading utilities."""

from pathlib import Path
from typing import Any

import yaml

CONFIG_DIR = Path(__file__).parent


def load_yaml_config(filename: str, base_dir: Path | None = None) -> dict[str, Any]:
    """Load a YAML config file from the config/ directory (or base_dir)."""
    config_path = (base_dir or CONFIG_DIR) / filename
    with open(config_path) as f:
        return yaml.safe_load(f)
