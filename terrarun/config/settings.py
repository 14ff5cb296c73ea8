"""
Settings management for terrarun.

Handles loading, saving, and accessing configuration.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .defaults import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class Settings:
    """
    Settings manager.

    Settings are stored as JSON.

    Path:
        Linux/macOS: ~/.config/terrarun/settings.json
        Windows: %APPDATA%\\terrarun\\settings.json
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_dir: Directory holding settings.json; defaults to the
                platform config directory
        """
        self.config_dir = Path(config_dir) if config_dir else self._get_config_dir()
        self.config_file = self.config_dir / "settings.json"
        self._settings: Dict[str, Any] = {}
        self.load()

    @staticmethod
    def _get_config_dir() -> Path:
        """Get platform-specific configuration directory."""
        if os.name == 'nt':
            base = os.environ.get('APPDATA', os.path.expanduser('~'))
        else:
            base = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))
        return Path(base) / 'terrarun'

    def load(self):
        """
        Load settings from file.

        If file doesn't exist or is invalid, uses default settings.
        """
        self._settings = copy.deepcopy(DEFAULT_SETTINGS)

        if not self.config_file.exists():
            logger.debug("No config file found, using defaults")
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded_settings = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Failed to load settings: {e}, using defaults")
            return

        if not isinstance(loaded_settings, dict):
            logger.error(f"Ignoring {self.config_file}: top level is not an object")
            return

        # Merge with defaults (in case new settings were added)
        self._deep_update(self._settings, loaded_settings)
        logger.info(f"Loaded settings from {self.config_file}")

    def save(self):
        """
        Save current settings to file.

        Creates parent directories if needed.
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)

            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self._settings, f, indent=2)

            logger.info(f"Saved settings to {self.config_file}")

        except IOError as e:
            logger.error(f"Failed to save settings: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value.

        Supports nested keys with dot notation: "modules.version"
        """
        value = self._settings

        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set setting value.

        Supports nested keys with dot notation: "modules.version"
        """
        keys = key.split('.')
        target = self._settings

        for k in keys[:-1]:
            if k not in target or not isinstance(target[k], dict):
                target[k] = {}
            target = target[k]

        target[keys[-1]] = value

    @staticmethod
    def _deep_update(base: dict, updates: dict):
        """Recursively update base dict with values from updates dict."""
        for key, value in updates.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                Settings._deep_update(base[key], value)
            else:
                base[key] = value
