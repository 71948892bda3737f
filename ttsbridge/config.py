"""Configuration manager for TTS adapters.

Implements hybrid configuration with precedence:
1. Constructor arguments (highest priority)
2. Environment variables
3. Configuration file (YAML)
4. Defaults (lowest priority)

Adapter option defaults are left as None here so that each adapter's own
fallbacks apply to anything not configured.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


class TTSConfig:
    """
    Manages TTS adapter configuration with multiple sources.

    Configuration precedence (highest to lowest):
    1. Constructor arguments
    2. Environment variables
    3. Configuration file
    4. Built-in defaults
    """

    DEFAULTS = {
        "adapter": "json",
        "json": {
            "request_path": None,
            "voice": None,
            "speed": None,
            "pitch": None,
            "style": None,
        },
        "edge": {
            "voice_name": None,
        },
    }

    ENV_VAR_MAP = {
        "adapter": "TTS_ADAPTER",
        "json.request_path": "TTS_REQUEST_PATH",
        "json.voice": "TTS_VOICE",
        "json.speed": "TTS_SPEED",
        "json.pitch": "TTS_PITCH",
        "json.style": "TTS_STYLE",
        "edge.voice_name": "EDGE_VOICE_NAME",
    }

    def __init__(
        self,
        config_file: Optional[str] = None,
        **overrides
    ):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to YAML config file (optional)
            **overrides: Direct configuration overrides (highest priority)
        """
        self.config_file = config_file
        self.overrides = overrides
        self._config = None

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value with precedence resolution.

        Args:
            key: Configuration key (supports dot notation, e.g., 'json.voice')
            default: Default value if not found

        Returns:
            Configuration value with precedence applied
        """
        if self._config is None:
            self._config = self._build_config()

        value = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value if value is not None else default

    def get_provider_config(self, adapter: str) -> Dict[str, Any]:
        """
        Get the options configured for one adapter, without unset keys.

        Args:
            adapter: Adapter name (e.g., 'json', 'edge')

        Returns:
            Dictionary of adapter options
        """
        if self._config is None:
            self._config = self._build_config()

        section = self._config.get(adapter, {})
        if not isinstance(section, dict):
            return {}
        return {k: v for k, v in section.items() if v is not None}

    def _build_config(self) -> Dict[str, Any]:
        config = self._deep_copy(self.DEFAULTS)

        if self.config_file:
            file_config = self._load_config_file(self.config_file)
            config = self._deep_merge(config, file_config)

        env_config = self._load_env_config()
        config = self._deep_merge(config, env_config)

        config = self._deep_merge(config, self.overrides)

        return config

    def _load_config_file(self, config_file: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_file: Path to config file

        Returns:
            Configuration dictionary from file, empty if missing or unreadable
        """
        path = Path(config_file)
        if not path.exists():
            logger.warning("TTS config file %s not found; ignoring", config_file)
            return {}

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning("Failed to load TTS config file %s: %s", config_file, e)
            return {}

        if config and not isinstance(config, dict):
            logger.warning("TTS config file %s is not a mapping; ignoring", config_file)
            return {}
        return config or {}

    def _load_env_config(self) -> Dict[str, Any]:
        config = {}

        for config_key, env_var in self.ENV_VAR_MAP.items():
            value = os.environ.get(env_var)
            if value is not None:
                keys = config_key.split(".")
                current = config
                for key in keys[:-1]:
                    current = current.setdefault(key, {})
                current[keys[-1]] = value

        return config

    def _deep_copy(self, d: Dict) -> Dict:
        """Create a deep copy of a dictionary."""
        result = {}
        for key, value in d.items():
            if isinstance(value, dict):
                result[key] = self._deep_copy(value)
            else:
                result[key] = value
        return result

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.

        None values in ``override`` never replace a value from ``base``.
        """
        result = self._deep_copy(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            elif value is not None:
                result[key] = value

        return result

    def to_dict(self) -> Dict[str, Any]:
        """
        Get the complete configuration as a dictionary.

        Returns:
            Full configuration dictionary
        """
        if self._config is None:
            self._config = self._build_config()
        return self._deep_copy(self._config)


_global_config: Optional[TTSConfig] = None


def get_config(**overrides) -> TTSConfig:
    """
    Get the global configuration instance.

    Args:
        **overrides: Configuration overrides; passing any rebuilds the instance

    Returns:
        Global TTSConfig instance
    """
    global _global_config
    if _global_config is None or overrides:
        _global_config = TTSConfig(**overrides)
    return _global_config


def reset_config():
    """Reset the global configuration (mainly for testing)."""
    global _global_config
    _global_config = None
