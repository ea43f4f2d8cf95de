"""
phpsorter User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.phpsorter/config.json (cross-project settings)
- Local: .phpsorter/config.json (project-specific overrides)

Config structure:
{
  "sorter": {
    "sort_properties": true,
    "sort_traits": true,
    "sort_namespace_uses": true,
    "sort_constants": true,
    "remove_unused_imports": true,
    "add_visibility_spacing": true,
    "add_newline_between_const_and_properties": true,
    "default_visibility": "public"   // public | protected | private
  },
  "files": {
    "extensions": [".php"],
    "backup": false                   // copy files to .phpsorter/backups first
  }
}
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError

from phpsorter.exceptions import ConfigError
from phpsorter.logging_config import logger
from phpsorter.paths import get_paths
from phpsorter.schemas import SorterConfig


# Default configuration
DEFAULT_CONFIG = {
    "sorter": SorterConfig().model_dump(),
    "files": {
        "extensions": [".php"],
        "backup": False,
    },
}


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.phpsorter/config.json)
    3. Local config (.phpsorter/config.json)
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            project_root: Project root directory (defaults to CWD)
        """
        paths = get_paths(project_root) if project_root is not None else get_paths()
        self.project_root = paths.project_root
        self.global_config_path = paths.global_config
        self.local_config_path = paths.local_config

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration with hierarchical override.

        Returns:
            Merged configuration dictionary
        """
        config = copy.deepcopy(DEFAULT_CONFIG)

        for label, path in (("global", self.global_config_path), ("local", self.local_config_path)):
            if not path.exists():
                continue
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load {label} config: {e}")
                continue
            if not isinstance(loaded, dict):
                logger.warning(f"Ignoring {label} config at {path}: expected a JSON object")
                continue
            config = self._deep_merge(config, loaded)
            logger.debug(f"Loaded {label} config from {path}")

        return config

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., "sorter.default_visibility")
            default: Default value if key not found

        Returns:
            Config value

        Examples:
            config.get("sorter.sort_traits")  # True
            config.get("files.extensions")  # [".php"]
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set_global(self, key: str, value: Any) -> bool:
        """Set a global config value and save to disk."""
        return self._set_and_save(key, value, is_global=True)

    def set_local(self, key: str, value: Any) -> bool:
        """Set a local config value and save to disk."""
        return self._set_and_save(key, value, is_global=False)

    def _set_and_save(self, key: str, value: Any, is_global: bool) -> bool:
        """
        Set a config value and save to appropriate file.

        Args:
            key: Dot-separated key
            value: Value to set
            is_global: True for global config, False for local

        Returns:
            True if successful, False otherwise
        """
        config_path = self.global_config_path if is_global else self.local_config_path

        if config_path.exists():
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    config = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load config from {config_path}: {e}")
                return False
        else:
            config = {}

        keys = key.split(".")
        current = config
        for k in keys[:-1]:
            current = current.setdefault(k, {})
        current[keys[-1]] = value

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save config to {config_path}: {e}")
            return False

        self._config = self._load_config()
        logger.info(f"Saved {'global' if is_global else 'local'} config: {key}={value}")
        return True

    def get_all(self) -> Dict[str, Any]:
        """Get the entire merged configuration."""
        return copy.deepcopy(self._config)

    def reload(self) -> None:
        """Reload configuration from disk."""
        self._config = self._load_config()

    def sorter_config(self, overrides: Optional[Dict[str, Any]] = None) -> SorterConfig:
        """
        Build the validated sorter settings.

        Args:
            overrides: Values that win over every config file (CLI flags)

        Raises:
            ConfigError: If a value is invalid, e.g. an unknown default_visibility
        """
        section = dict(self.get("sorter", {}) or {})
        section.update({k: v for k, v in (overrides or {}).items() if v is not None})
        try:
            return SorterConfig(**section)
        except ValidationError as e:
            raise ConfigError(f"Invalid sorter configuration: {e}") from e


# Global singleton
_config: Optional[UserConfig] = None


def get_user_config(project_root: Optional[Path] = None) -> UserConfig:
    """
    Get the user configuration singleton.

    Args:
        project_root: Optional project root override

    Returns:
        UserConfig instance
    """
    global _config
    if project_root is not None:
        return UserConfig(project_root)
    if _config is None:
        _config = UserConfig()
    return _config


def reset_user_config() -> None:
    """Reset the global config singleton (for testing)."""
    global _config
    _config = None


def load_sorter_config(
    project_root: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SorterConfig:
    """Shortcut: merged config files + overrides, validated."""
    return get_user_config(project_root).sorter_config(overrides)
