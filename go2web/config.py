"""
load the go2web config from ~/.go2web.yaml (or $GO2WEB_CONFIG) and the environment
"""

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from go2web.cache import CACHE_DIR, CACHE_TTL
from go2web.fetcher import MAX_REDIRECTS
from go2web.search import SEARCH_URL
from go2web.wire import USER_AGENT

DEFAULT_CONFIG_PATH = Path.home() / ".go2web.yaml"

DEFAULTS = {
    "cache": {"dir": CACHE_DIR, "ttl": CACHE_TTL, "enabled": True},
    "http": {"timeout": None, "max_redirects": MAX_REDIRECTS, "user_agent": USER_AGENT},
    "search": {"url": SEARCH_URL},
    "logging": {"level": "WARNING"},
}


class Config:
    """Configuration loader that reads an optional YAML file and environment variables."""

    def __init__(self, config_path=None):
        """Initialize configuration loader.

        Args:
            config_path: Path to a YAML file. If None, $GO2WEB_CONFIG or
                        ~/.go2web.yaml is used; a missing file means defaults.
        """
        if config_path is None:
            config_path = os.getenv("GO2WEB_CONFIG") or DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        config = {section: dict(values) for section, values in DEFAULTS.items()}

        try:
            with open(self.config_path, 'r') as f:
                loaded = yaml.safe_load(f) or {}
        except FileNotFoundError:
            loaded = {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        for section, values in loaded.items():
            if isinstance(values, dict):
                config.setdefault(section, {}).update(values)

        return self._apply_env_overrides(config)

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        env_mappings = {
            'GO2WEB_CACHE_DIR': ('cache', 'dir'),
            'GO2WEB_CACHE_TTL': ('cache', 'ttl'),
            'GO2WEB_CACHE_ENABLED': ('cache', 'enabled'),
            'GO2WEB_TIMEOUT': ('http', 'timeout'),
            'GO2WEB_MAX_REDIRECTS': ('http', 'max_redirects'),
            'GO2WEB_USER_AGENT': ('http', 'user_agent'),
            'GO2WEB_SEARCH_URL': ('search', 'url'),
            'GO2WEB_LOG_LEVEL': ('logging', 'level'),
        }

        for env_var, (section, key) in env_mappings.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                config.setdefault(section, {})[key] = self._convert_env_value(env_value)

        return config

    def _convert_env_value(self, value: str):
        """Convert environment variable string to appropriate Python type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    def get(self, *keys, default=None):
        """Get configuration value by nested keys, e.g. get('cache', 'ttl')."""
        current = self._config
        for key in keys:
            if isinstance(current, dict) and key in current:
                current = current[key]
            else:
                return default
        return current

    @property
    def cache(self) -> Dict[str, Any]:
        return self.get('cache', default={})

    @property
    def http(self) -> Dict[str, Any]:
        return self.get('http', default={})

    @property
    def search(self) -> Dict[str, Any]:
        return self.get('search', default={})

    @property
    def logging(self) -> Dict[str, Any]:
        return self.get('logging', default={})
