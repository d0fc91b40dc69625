"""Configuration loader from YAML."""

from pathlib import Path
from typing import Optional, Union

import yaml

from .schema import Config

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"


def load_config(yaml_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load the engine configuration (fee schedule, timestamp and view settings).

    Sections missing from the file keep their built-in defaults, so a file
    overriding only ``time.legacy_seconds_digits`` is valid. An empty file
    yields the defaults.

    Args:
        yaml_path: Path to YAML file (defaults to the packaged defaults.yaml)

    Returns:
        Config object
    """
    if yaml_path is None:
        yaml_path = DEFAULTS_PATH

    with open(yaml_path, 'r') as f:
        data = yaml.safe_load(f)

    return Config.from_dict(data)
