"""
Central configuration for nebula paths and settings.

Lookup order for the config file:
    1. $NEBULA_CONFIG if set
    2. $XDG_CONFIG_HOME/nebula-dnf/config.yaml (~/.config/... by default)

The file is optional. Missing keys fall back to the defaults below.

Structure:
    $XDG_CACHE_HOME/nebula-dnf/user_packages.json       - Aggregated package cache
    $XDG_CACHE_HOME/nebula-dnf/user_packages.json.lock  - Save lock

config.yaml format:
    concurrency_limit: 5          # parallel dnf/rpm queries during refresh
    cache_path: ~/.cache/nebula-dnf/user_packages.json
    escalation: [pkexec]          # prefix for privileged commands
    dependency_source: requires   # 'requires' (per package) or 'deplist' (batched)
    command_timeout: 300          # seconds, null for no limit
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

APP_NAME = "nebula-dnf"
CONFIG_ENV = "NEBULA_CONFIG"
CONFIG_FILE_NAME = "config.yaml"
CACHE_FILE_NAME = "user_packages.json"

DEFAULT_CONCURRENCY = 5
DEFAULT_ESCALATION = ["pkexec"]
DEFAULT_COMMAND_TIMEOUT = 300
DEPENDENCY_SOURCES = ("requires", "deplist")

# Cache for loaded settings (avoid re-reading the file on every call)
_cached_settings: Optional['Settings'] = None


def _xdg_dir(env_var: str, fallback: str) -> Path:
    value = os.environ.get(env_var)
    if value and os.path.isabs(value):
        return Path(value)
    return Path.home() / fallback


def get_cache_dir() -> Path:
    """Per-user cache directory for nebula."""
    return _xdg_dir("XDG_CACHE_HOME", ".cache") / APP_NAME


def get_config_path() -> Path:
    """Path of the YAML config file (may not exist)."""
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return _xdg_dir("XDG_CONFIG_HOME", ".config") / APP_NAME / CONFIG_FILE_NAME


def get_cache_path() -> Path:
    """Default location of the aggregated package cache."""
    return get_cache_dir() / CACHE_FILE_NAME


@dataclass
class Settings:
    """Runtime settings, defaults overridden by config.yaml."""
    concurrency_limit: int = DEFAULT_CONCURRENCY
    cache_path: Path = field(default_factory=get_cache_path)
    escalation: List[str] = field(default_factory=lambda: list(DEFAULT_ESCALATION))
    dependency_source: str = "requires"
    command_timeout: Optional[int] = DEFAULT_COMMAND_TIMEOUT


def _read_config_file(path: Path) -> Dict[str, Any]:
    """Read config.yaml.

    Returns:
        Mapping of settings, empty if the file is absent or unusable
    """
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Ignoring unreadable config {path}: {e}")
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: top level must be a mapping")
        return {}
    return data


def settings_from_mapping(data: Dict[str, Any]) -> Settings:
    """Build Settings from a config mapping, dropping invalid values."""
    settings = Settings()

    limit = data.get('concurrency_limit')
    if limit is not None:
        if isinstance(limit, int) and not isinstance(limit, bool) and limit >= 1:
            settings.concurrency_limit = limit
        else:
            logger.warning(f"Invalid concurrency_limit {limit!r}, using {DEFAULT_CONCURRENCY}")

    cache_path = data.get('cache_path')
    if cache_path:
        settings.cache_path = Path(str(cache_path)).expanduser()

    escalation = data.get('escalation')
    if escalation is not None:
        if isinstance(escalation, str):
            escalation = escalation.split()
        if isinstance(escalation, list) and all(isinstance(e, str) for e in escalation):
            settings.escalation = escalation
        else:
            logger.warning(f"Invalid escalation {escalation!r}, using {DEFAULT_ESCALATION}")

    source = data.get('dependency_source')
    if source is not None:
        if source in DEPENDENCY_SOURCES:
            settings.dependency_source = source
        else:
            logger.warning(f"Unknown dependency_source {source!r}, using 'requires'")

    if 'command_timeout' in data:
        timeout = data['command_timeout']
        if timeout is None or (isinstance(timeout, int) and timeout > 0):
            settings.command_timeout = timeout
        else:
            logger.warning(f"Invalid command_timeout {timeout!r}, using {DEFAULT_COMMAND_TIMEOUT}")

    return settings


def load_settings(path: Path = None) -> Settings:
    """Load settings from config.yaml.

    Args:
        path: Explicit config file (bypasses the cache), auto-detected if None
    """
    global _cached_settings
    if path is not None:
        return settings_from_mapping(_read_config_file(path))
    if _cached_settings is None:
        _cached_settings = settings_from_mapping(_read_config_file(get_config_path()))
    return _cached_settings


def reset_settings_cache():
    """Forget loaded settings (tests, config reload)."""
    global _cached_settings
    _cached_settings = None
