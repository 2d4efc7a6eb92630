from pathlib import Path
from typing import Optional

from distributor.models import Config


def load_conf(config_path: str) -> Config:
    """Loads an existing config from file"""
    return Config.model_validate_json(Path(config_path).read_text())


def default_conf(name: str, config_path: Optional[str] = None) -> Config:
    """Loads the config file if one is passed, otherwise builds one from the environment defaults"""
    if config_path:
        return load_conf(config_path)
    return Config(name=name)
