"""
Simple config loader for the optional TOML settings file.

Example config-server.toml:

    [storage]
    data_dir = "/data"

    [monitoring]
    log_level = "INFO"
    log_retention_count = 14

    [server]
    bind_port = 24025
"""

import toml
from pathlib import Path
from typing import Any, Dict, Optional, Union

from config_server.monitoring import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_FILE = "config-server.toml"

SECTIONS = ("storage", "monitoring", "server")


def load_config(config_file: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load configuration from a TOML file.

    A missing file yields an empty dict. Only the known sections and
    top-level scalar keys are returned.

    Args:
        config_file: Path to the TOML file (defaults to config-server.toml)

    Raises:
        ValueError: If the file exists but is not valid TOML
    """
    path = Path(config_file or DEFAULT_CONFIG_FILE)
    if not path.is_file():
        return {}

    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = toml.load(f)
    except toml.TomlDecodeError as e:
        raise ValueError(f"Invalid TOML in {path}: {e}") from e

    logger.debug(f"Loaded config file {path}")

    config: Dict[str, Any] = {}
    for key, value in raw.items():
        if key in SECTIONS and isinstance(value, dict):
            config[key] = dict(value)
        elif not isinstance(value, dict):
            config[key] = value
    return config
