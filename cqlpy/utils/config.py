"""Configuration management for cqlpy."""
from __future__ import annotations
from typing import Dict, Any, Optional
import os
import json
import logging

from cqlpy.utils.constants import (
    DEFAULT_HISTORY_FILE, DEFAULT_HISTORY_SIZE, DEFAULT_HOSTS, DEFAULT_OUTPUT_FORMAT, DEFAULT_PORT
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = os.path.join("~", ".cqlpy", "config.json")

# Values used when neither the config file nor a CLI flag sets them
DEFAULT_CONFIG = {
    "hosts": DEFAULT_HOSTS,
    "port": DEFAULT_PORT,
    "output_format": DEFAULT_OUTPUT_FORMAT,
    "history_file": DEFAULT_HISTORY_FILE,
    "history_size": DEFAULT_HISTORY_SIZE,
    "color": True,
    "ssl_verify": False,
}


class Config:
    """Persistent settings stored as JSON in the user's home directory."""

    def __init__(self, config_file: Optional[str] = None):
        self.settings: Dict[str, Any] = DEFAULT_CONFIG.copy()
        self.config_file = os.path.expanduser(config_file or DEFAULT_CONFIG_FILE)
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file if it exists."""
        if not os.path.exists(self.config_file):
            return
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load config %s: %s", self.config_file, e)
            return
        if isinstance(data, dict):
            self.settings.update(data)
        else:
            logger.warning("Ignoring config %s: expected a JSON object", self.config_file)

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            os.makedirs(os.path.dirname(self.config_file), exist_ok=True)
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            logger.warning("Failed to save config: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.settings[key] = value


def coerce_value(raw: str) -> Any:
    """Interpret a ``config --set`` value typed on the command line."""
    lower = raw.lower()
    if lower == 'true':
        return True
    if lower == 'false':
        return False
    if lower == 'none':
        return None
    if raw.isdigit():
        return int(raw)
    return raw


# Global config instance
config = Config()
