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

from pydantic import ValidationError

from .models import HideSyncConfig

logger = logging.getLogger(__name__)

# Global cache to avoid reloading config multiple times per process
_config_cache: HideSyncConfig | None = None


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
        Path to ~/.config/hide-sync/config.json (or XDG equivalent)
    """
    return get_xdg_config_home() / "hide-sync" / "config.json"


def get_project_config_path(cwd: Path | None = None) -> Path:
    """
    Get path to project configuration file.

    Args:
        cwd: Working directory to search from (defaults to current directory)

    Returns:
        Path to .hide-sync.json in the given directory
    """
    if cwd is None:
        cwd = Path.cwd()
    return cwd / ".hide-sync.json"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Values in `override` take precedence over values in `base`.
    Nested dicts are merged, not replaced.

    Args:
        base: Base dictionary (lower priority)
        override: Override dictionary (higher priority)

    Returns:
        Merged dictionary with override values taking precedence
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
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
            if isinstance(data, dict):
                return data
            return None
    except (json.JSONDecodeError, OSError) as e:
        # Config problems should never stop the engine from starting
        logger.warning("Failed to parse config at %s: %s", path, e)
        return None


# env var -> (config key, converter)
_ENV_OVERRIDES: dict[str, tuple[str, type]] = {
    "HIDE_SYNC_API_URL": ("api_base_url", str),
    "HIDE_SYNC_BOARD_LIMIT": ("board_limit", int),
    "HIDE_SYNC_DEBOUNCE_SECONDS": ("debounce_seconds", float),
    "HIDE_SYNC_TIMEOUT": ("request_timeout", float),
    "HIDE_SYNC_STATE_PATH": ("state_path", str),
}


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Env vars have the highest precedence and override all config files.

    Supported env vars:
        HIDE_SYNC_API_URL - overrides api_base_url
        HIDE_SYNC_BOARD_LIMIT - overrides board_limit (must be >= 1)
        HIDE_SYNC_DEBOUNCE_SECONDS - overrides debounce_seconds (must be >= 0)
        HIDE_SYNC_TIMEOUT - overrides request_timeout (must be > 0)
        HIDE_SYNC_STATE_PATH - overrides state_path

    Args:
        config_dict: Configuration dictionary to override

    Returns:
        Configuration dictionary with env var overrides applied
    """
    result = config_dict.copy()

    for env_name, (key, convert) in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if not raw:
            continue
        try:
            value = convert(raw)
            # Validate the single field so one bad variable can't sink the whole config
            HideSyncConfig.model_validate({key: value})
        except (ValueError, ValidationError):
            logger.warning("Invalid %s value '%s', ignoring", env_name, raw)
            continue
        result[key] = value

    return result


def get_default_config() -> dict[str, Any]:
    """
    Get hardcoded default configuration.

    Only values that differ from the model defaults need to appear here;
    the rest are filled in by HideSyncConfig itself.

    Returns:
        Dictionary with default configuration values
    """
    return {
        "api_base_url": "https://api.github.com",
        "gist_filename": "hide-sync.json",
        "board_limit": 150,
        "debounce_seconds": 5.0,
    }


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> HideSyncConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (HIDE_SYNC_*)
        2. Project config (.hide-sync.json)
        3. User config (~/.config/hide-sync/config.json)
        4. Hardcoded defaults

    Args:
        project_dir: Directory to load .hide-sync.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated HideSyncConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    merged = get_default_config()

    if user_config := load_json_file(get_user_config_path()):
        merged = deep_merge(merged, user_config)

    if project_config := load_json_file(get_project_config_path(project_dir)):
        merged = deep_merge(merged, project_config)

    merged = apply_env_overrides(merged)

    config = HideSyncConfig(**merged)
    _config_cache = config

    return config


def clear_cache() -> None:
    """
    Clear the cached configuration.

    Useful for testing or when config files change during execution.
    """
    global _config_cache
    _config_cache = None
