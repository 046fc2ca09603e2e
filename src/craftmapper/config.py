"""craftmapper Configuration

Configuration loading with environment variable support and sensible defaults.

Environment Variables:
    CRAFTMAPPER_CONFIG_PATH: Path to config file (default: craftmapper.yaml in cwd)
    CRAFTMAPPER_DB_PATH: Override store path from config
    CRAFTMAPPER_API_URL: Override combine endpoint URL from config
    CRAFTMAPPER_LOG_LEVEL: Override logging level from config

Configuration Schema:
    store:
        path: str - SQLite file (relative paths resolve against the config dir)
    api:
        url: str - Combine endpoint
        referer: str - Referer header
        user_agent: str - User-Agent header
        timeout: float - Per-request timeout in seconds
        default_retry_after: int - Seconds to wait on 429 without Retry-After
        max_rate_limit_retries: int | None - Cap on 429 retries (None = unbounded)
    exploration:
        max_successes: int - Stop after this many new combinations
        max_attempts: int - Stop after this many draws
        pacing_ms: int - Pause between attempts
    logging:
        level: str - Logging level (default: "INFO")
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from .combine_client import (
    DEFAULT_API_URL,
    DEFAULT_REFERER,
    DEFAULT_RETRY_AFTER,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "craftmapper.yaml"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    "store": {
        "path": "items.db",
    },
    "api": {
        "url": DEFAULT_API_URL,
        "referer": DEFAULT_REFERER,
        "user_agent": DEFAULT_USER_AGENT,
        "timeout": DEFAULT_TIMEOUT,
        "default_retry_after": DEFAULT_RETRY_AFTER,
        "max_rate_limit_retries": None,
    },
    "exploration": {
        "max_successes": 500000,
        "max_attempts": 2500000,
        "pacing_ms": 50,
    },
    "logging": {
        "level": "INFO",
    },
}

# env var -> (section, key)
ENV_OVERRIDES = {
    "CRAFTMAPPER_DB_PATH": ("store", "path"),
    "CRAFTMAPPER_API_URL": ("api", "url"),
    "CRAFTMAPPER_LOG_LEVEL": ("logging", "level"),
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_path(path: str | None, base_dir: Path) -> Path | None:
    """
    Resolve a path, making relative paths absolute from base_dir.

    Args:
        path: Path string (absolute or relative) or None
        base_dir: Base directory for relative path resolution

    Returns:
        Resolved absolute Path or None if path was None
    """
    if path is None:
        return None

    path_obj = Path(path).expanduser()
    if path_obj.is_absolute():
        return path_obj
    return (base_dir / path_obj).resolve()


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"top level must be a mapping, got {type(data).__name__}")
    return data


def load_config(
    config_path: str | Path | None = None,
    base_dir: Path | None = None,
) -> dict[str, Any]:
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (from CRAFTMAPPER_CONFIG_PATH or config_path parameter)
    3. Environment variable overrides (CRAFTMAPPER_DB_PATH, ...)

    Args:
        config_path: Explicit config file path (overrides CRAFTMAPPER_CONFIG_PATH)
        base_dir: Directory for the default config file and relative paths
                  (default: current working directory)

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicit config file is invalid YAML or
            the merged values are out of range
    """
    if base_dir is None:
        base_dir = Path.cwd()

    config = copy.deepcopy(DEFAULT_CONFIG)
    path_base = base_dir

    file_path = config_path or os.environ.get("CRAFTMAPPER_CONFIG_PATH")

    if file_path:
        # Explicit config path - must be valid if it exists
        resolved_path = _resolve_path(str(file_path), base_dir)
        if resolved_path and resolved_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(resolved_path))
                path_base = resolved_path.parent
                logger.info(f"Loaded configuration from: {resolved_path}")
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file: {e}") from e
            except OSError as e:
                raise ConfigurationError(f"Cannot read config file: {e}") from e
        else:
            logger.warning(f"Config file not found (using defaults): {file_path}")
    else:
        default_config_path = base_dir / DEFAULT_CONFIG_FILENAME
        if default_config_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(default_config_path))
                logger.info(f"Loaded configuration from: {default_config_path}")
            except yaml.YAMLError as e:
                logger.warning(f"Invalid YAML in default config (ignoring): {e}")
            except OSError as e:
                logger.warning(f"Cannot read default config (ignoring): {e}")
        else:
            logger.debug("No config file found, using defaults")

    for env_var, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            config.setdefault(section, {})[key] = value
            logger.info(f"{section}.{key} override from env: {value}")

    resolved = _resolve_path(config["store"].get("path"), path_base)
    config["store"]["path"] = str(resolved) if resolved else None

    _validate(config)
    return config


def _validate(config: dict[str, Any]) -> None:
    """Check numeric settings are in range."""
    exploration = config["exploration"]
    for key in ("max_successes", "max_attempts"):
        value = exploration.get(key)
        if not isinstance(value, int) or value < 0:
            raise ConfigurationError(
                f"exploration.{key} must be a non-negative integer, got {value!r}"
            )

    pacing = exploration.get("pacing_ms")
    if not isinstance(pacing, (int, float)) or pacing < 0:
        raise ConfigurationError(
            f"exploration.pacing_ms must be a non-negative number, got {pacing!r}"
        )

    retries = config["api"].get("max_rate_limit_retries")
    if retries is not None and (not isinstance(retries, int) or retries < 0):
        raise ConfigurationError(
            f"api.max_rate_limit_retries must be null or a non-negative integer, got {retries!r}"
        )


def get_store_path(config: dict[str, Any]) -> Path:
    """Get the SQLite store path from config."""
    path_str = config.get("store", {}).get("path")
    return Path(path_str) if path_str else Path.cwd() / "items.db"


def get_api_config(config: dict[str, Any]) -> dict[str, Any]:
    """
    Extract combine client settings.

    Returns:
        Keyword arguments suitable for CombineClient(...)
    """
    api = config.get("api", {})
    return {
        "api_url": api.get("url", DEFAULT_API_URL),
        "referer": api.get("referer", DEFAULT_REFERER),
        "user_agent": api.get("user_agent", DEFAULT_USER_AGENT),
        "timeout": float(api.get("timeout", DEFAULT_TIMEOUT)),
        "default_retry_after": int(api.get("default_retry_after", DEFAULT_RETRY_AFTER)),
        "max_rate_limit_retries": api.get("max_rate_limit_retries"),
    }


def get_exploration_config(config: dict[str, Any]) -> dict[str, Any]:
    """Extract exploration budgets; pacing is converted to seconds."""
    exploration = config.get("exploration", {})
    return {
        "max_successes": exploration["max_successes"],
        "max_attempts": exploration["max_attempts"],
        "pacing_interval": exploration["pacing_ms"] / 1000.0,
    }


def get_log_level(config: dict[str, Any]) -> int:
    """Resolve the configured log level name to a logging constant."""
    name = str(config.get("logging", {}).get("level", "INFO")).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
