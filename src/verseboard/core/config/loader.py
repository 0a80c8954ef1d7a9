"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import VerseboardConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per process
_config_cache: VerseboardConfig | None = None

PROJECT_CONFIG_NAME = ".verseboard.json"


def get_xdg_config_home() -> Path:
    """
    Get XDG config home directory.

    Returns:
        Path to config directory (defaults to ~/.config)
    """
    if xdg_home := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_home)
    return Path.home() / ".config"


def get_user_config_path() -> Path:
    """
    Get path to user configuration file.

    Returns:
        Path to ~/.config/verseboard/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "verseboard" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .verseboard.json in the project root
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / PROJECT_CONFIG_NAME


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Example:
        >>> deep_merge({"a": 1, "b": {"x": 10}}, {"b": {"y": 20}})
        {'a': 1, 'b': {'x': 10, 'y': 20}}
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_json_file(path: Path) -> dict[str, Any] | None:
    """
    Load a JSON file, returning None if it doesn't exist or is invalid.

    Args:
        path: Path to JSON file

    Returns:
        Parsed JSON as dict, or None if file doesn't exist or can't be parsed
    """
    if not path.exists():
        return None

    try:
        with path.open() as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        # Config system should be resilient
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None

    if isinstance(data, dict):
        return data
    logger.warning("Ignoring config at %s: top level is not an object", path)
    return None


def _set_section(result: dict[str, Any], section: str, key: str, value: Any) -> None:
    result.setdefault(section, {})
    result[section] = {**result[section], key: value}


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        VERSEBOARD_DB_PATH - overrides store.db_path
        VERSEBOARD_ACTIVITY_LIMIT - overrides dashboard.activity_limit
        VERSEBOARD_CACHE_TTL - overrides dashboard.progress_ttl_seconds
        VERSEBOARD_PORT - overrides server.port

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    if db_path := os.environ.get("VERSEBOARD_DB_PATH"):
        _set_section(result, "store", "db_path", db_path)

    if limit_str := os.environ.get("VERSEBOARD_ACTIVITY_LIMIT"):
        try:
            _set_section(result, "dashboard", "activity_limit", int(limit_str))
        except ValueError:
            logger.warning("Invalid VERSEBOARD_ACTIVITY_LIMIT value '%s', ignoring", limit_str)

    if ttl_str := os.environ.get("VERSEBOARD_CACHE_TTL"):
        try:
            ttl = float(ttl_str)
        except ValueError:
            logger.warning("Invalid VERSEBOARD_CACHE_TTL value '%s', ignoring", ttl_str)
        else:
            if ttl < 0:
                logger.warning("VERSEBOARD_CACHE_TTL must be >= 0, got %s, ignoring", ttl)
            else:
                _set_section(result, "dashboard", "progress_ttl_seconds", ttl)

    if port_str := os.environ.get("VERSEBOARD_PORT"):
        try:
            _set_section(result, "server", "port", int(port_str))
        except ValueError:
            logger.warning("Invalid VERSEBOARD_PORT value '%s', ignoring", port_str)

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Returns:
        Dictionary with default configuration values
    """
    return VerseboardConfig().model_dump(mode="json")


def resolve_paths(config: VerseboardConfig, project_dir: Path) -> VerseboardConfig:
    """Resolve a relative store path against the project directory."""
    if config.store.db_path.is_absolute():
        return config
    store = config.store.model_copy(update={"db_path": project_dir / config.store.db_path})
    return config.model_copy(update={"store": store})


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> VerseboardConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (VERSEBOARD_*)
        2. Project config (.verseboard.json)
        3. User config (~/.config/verseboard/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Project directory to load .verseboard.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated VerseboardConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    if project_dir is None:
        project_dir = Path.cwd()

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = resolve_paths(VerseboardConfig(**merged), project_dir)

    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
