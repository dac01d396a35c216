"""
Minimal Configuration Reader for Quake Log Tools

A lightweight configuration system for the Quake log tools that provides:
- Profile-based configuration management
- JSON-based configuration storage with read-only access
- Secrets management for sensitive information (download tokens)
- Built-in defaults for every key the tools read
- Hierarchical configuration with dot-notation access

Usage:
    from config import Config
    config = Config(profile='my_server')
    world_name = config.get('parser.world_name')

The configuration is assembled in this order (later overrides earlier):
1. Built-in defaults (DEFAULTS below)
2. Default or specified profile (profiles/<profile>.json)
3. Profile-specific secrets (secrets/<profile>_secrets.json)
"""

import copy
from typing import Dict, Any, Optional
from pathlib import Path

from quake_log_tools.base import JSONTool, logger


DEFAULTS: Dict[str, Any] = {
    "general": {
        "log_level": "INFO",
        "output_path": "output",
        "log_download_path": "logs",
    },
    "parser": {
        "world_name": "<world>",
        "indent": 2,
    },
    "download": {
        "url": "",
        "timeout": 30,
        "ssl_verify": True,
    },
    "plot": {
        "dpi": 150,
        "top_n": 15,
        "bar_color": "firebrick",
    },
}


class Config(JSONTool):
    """
    A minimal JSON-based configuration reader for the Quake log tools.

    Attributes:
        config_dir (str): Directory containing profile JSON files
        secrets_dir (str): Directory containing secrets JSON files
        profile (str): Currently active profile name
        data (dict): Loaded configuration data
    """

    DEFAULT_CONFIG_DIR = str(Path(__file__).parent / 'profiles')
    DEFAULT_SECRETS_DIR = str(Path(__file__).parent / 'secrets')
    DEFAULT_PROFILE = "default"

    def __init__(self, config_dir: str = None, secrets_dir: str = None, profile: str = None,
                 config: Optional[Dict[str, Any]] = None):
        """
        Initialize the Config instance.

        Args:
            config_dir (str, optional): Directory for config profiles.
                Defaults to 'profiles' subdirectory relative to this file.
            secrets_dir (str, optional): Directory for secrets files.
                Defaults to 'secrets' subdirectory relative to this file.
            profile (str, optional): Profile name to use. Defaults to 'default'.
            config (dict, optional): Base configuration dictionary for JSONTool compatibility.
        """
        super().__init__(config)

        self.config_dir = config_dir or self.DEFAULT_CONFIG_DIR
        self.secrets_dir = secrets_dir or self.DEFAULT_SECRETS_DIR
        self.profile = profile or self.DEFAULT_PROFILE
        self.data = {}

        self._load()

    def run(self) -> Dict[str, Any]:
        """
        Run the config tool (implementation of abstract method from QuakeTool).

        Returns:
            The full configuration dictionary.
        """
        return self.data

    def _load(self):
        """
        Load the defaults, then merge the profile and its secrets on top.

        A missing default profile is not an error, the built-in defaults
        apply. A missing named profile is logged and leaves the defaults.
        Unreadable profile files are logged and ignored.
        """
        self.data = copy.deepcopy(DEFAULTS)

        profile_path = Path(self.config_dir) / f"{self.profile}.json"
        if not profile_path.exists():
            if self.profile != self.DEFAULT_PROFILE:
                logger.warning(f"Profile '{self.profile}' not found. Using default configuration.")
            return

        try:
            profile_data = self.read_json(str(profile_path))
            if isinstance(profile_data, dict):
                self._deep_merge(self.data, profile_data)
            logger.info(f"Loaded configuration from '{self.profile}'")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading configuration: {e}")
            return

        self._load_secrets()

    def _load_secrets(self):
        """
        Merge secrets from '<profile>_secrets.json' in the secrets directory.

        Secrets override profile settings with the same keys. Profiles
        without a secrets file are normal and only logged at debug level.
        """
        profile_secrets_path = Path(self.secrets_dir) / f"{self.profile}_secrets.json"
        if not profile_secrets_path.exists():
            logger.debug(f"No secrets file found for profile '{self.profile}'")
            return

        try:
            profile_secrets = self.read_json(str(profile_secrets_path))
            if isinstance(profile_secrets, dict):
                self._deep_merge(self.data, profile_secrets)
                logger.info(f"Loaded and merged secrets from '{profile_secrets_path}'")
        except (OSError, ValueError) as e:
            logger.error(f"Error loading profile-specific secrets: {e}")

    def _deep_merge(self, target: Dict[str, Any], source: Dict[str, Any]):
        """
        Deep merge two dictionaries.

        Args:
            target (dict): The target dictionary to merge into
            source (dict): The source dictionary to merge from
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._deep_merge(target[key], value)
            else:
                target[key] = value

    def get(self, path: str = None, default: Any = None) -> Any:
        """
        Get a configuration value by path using dot notation.

        Args:
            path (str, optional): Dot notation path to the value
                (e.g., "parser.world_name", "download.api_token").
                If None, returns the entire configuration dictionary.
            default (Any, optional): Value to return if path not found.

        Returns:
            Any: The configuration value at the specified path, or default if not found.

        Examples:
            >>> config.get('parser.world_name')
            '<world>'
            >>> config.get('general.log_level')
            'INFO'
        """
        if path is None:
            return self.data

        current = self.data
        for key in path.split('.'):
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default

        return current
