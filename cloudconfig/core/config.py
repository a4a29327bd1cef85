"""Refresher settings management.

The refresh core itself only ever receives a ``RefreshSettings`` instance; the
compiled-in defaults are enough to run it. The runner may override them from a
YAML file, with ``${VAR}`` placeholders expanded from the environment.
"""
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from cloudconfig.models.config import RefreshSettings

load_dotenv()


_PLACEHOLDER = re.compile(r'\$\{([^}:]+)(?::?-([^}]*))?\}')


def expand_env_vars(value: str) -> str:
    """Substitute ``${NAME}`` and ``${NAME:-fallback}`` from the environment.

    An unset name without a fallback becomes the empty string. Non-string
    values come back untouched.
    """
    if not isinstance(value, str):
        return value
    return _PLACEHOLDER.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ''), value)


def expand_config_env_vars(config: Any) -> Any:
    """Apply ``expand_env_vars`` to every string inside nested dicts and lists"""
    if isinstance(config, dict):
        return {k: expand_config_env_vars(v) for k, v in config.items()}
    if isinstance(config, list):
        return [expand_config_env_vars(item) for item in config]
    return expand_env_vars(config)


def str_to_bool(value: Any) -> bool:
    # Environment-expanded flags arrive as text such as "false" or "0"
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def load_settings(settings_path: Optional[str] = None) -> RefreshSettings:
    """Load refresher settings, falling back to the compiled-in defaults.

    Args:
        settings_path: Optional YAML file overriding some or all settings

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValueError: If the file does not hold a mapping
    """
    if settings_path is None:
        return RefreshSettings()

    with open(settings_path, 'r') as f:
        raw_settings = yaml.safe_load(f) or {}

    if not isinstance(raw_settings, dict):
        raise ValueError(f"Settings file {settings_path} must contain a mapping")

    expanded = expand_config_env_vars(raw_settings)
    if 'verify_ssl' in expanded:
        expanded['verify_ssl'] = str_to_bool(expanded['verify_ssl'])

    return RefreshSettings(**expanded)


@lru_cache
def get_settings() -> RefreshSettings:
    """Get cached settings instance.

    ``CLOUDCONFIG_SETTINGS`` may point at a settings file for the runner; it is
    ignored when the file does not exist.
    """
    settings_path = os.environ.get('CLOUDCONFIG_SETTINGS')
    if settings_path and Path(settings_path).is_file():
        return load_settings(settings_path)
    return load_settings()


def clear_settings_cache() -> None:
    """Clear the cached settings"""
    get_settings.cache_clear()
