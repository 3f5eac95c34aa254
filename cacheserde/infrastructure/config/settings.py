"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
YAML configuration file (``~/.cacheserde/config.yaml``). Settings are read
when an operation is wrapped, never per call.
"""

import logging
import math
import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Optional, Dict, Union

import yaml
from dotenv import load_dotenv

from cacheserde.domain.errors import CacheConfigError
from cacheserde.domain.models.common import DEFAULT_CACHE_ROOT, DEFAULT_INVALIDATE_RATE_SECONDS

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path("~/.cacheserde")
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "CACHESERDE_"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def expand_home(path: str, template: bool = False) -> str:
    """Replaces a leading ``~`` with the HOME directory.

    If HOME is not set the path is returned unchanged, which leaves it
    relative to the working directory instead of failing. With
    ``template=True`` braces in HOME are escaped so they stay literal when
    the result is later filled with ``str.format``.
    """
    home_dir = os.environ.get("HOME")
    if home_dir and path.startswith("~"):
        if template:
            home_dir = home_dir.replace("{", "{{").replace("}", "}}")
        return home_dir + path[1:]
    return path


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from the YAML file and the .env file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values

    Args:
        config_file: Path to the YAML configuration file.
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_path = Path(expand_home(str(config_file or DEFAULT_CONFIG_FILE)))

    # 1. YAML file (lowest priority)
    if config_path.is_file():
        try:
            with open(config_path, "r") as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CacheConfigError(f"Failed to load or parse YAML config {config_path}: {e}") from e
        if isinstance(yaml_config, dict):
            _config.update(yaml_config)
            logger.info(f"Loaded configuration from YAML: {config_path}")
        elif yaml_config is not None:
            logger.warning(f"YAML config file {config_path} did not contain a dictionary.")
    else:
        logger.debug(f"YAML config file not found: {config_path}")

    # 2. .env file; override=False keeps real environment variables on top
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("Skipping .env file loading (no .env found).")

    _loaded = True


def reset_configuration() -> None:
    """Forgets loaded configuration so the next lookup reloads it."""
    global _config, _loaded
    _config = {}
    _loaded = False


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None


def _coerce(value: str) -> Any:
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        if "." in value:
            return float(value)
        return int(value)
    except (ValueError, TypeError):
        return value


def get_config(key: str, default: Any = None) -> Any:
    """Get a configuration value by key.

    Priority:
    1. Test configuration
    2. Environment variable ``CACHESERDE_<KEY>``
    3. YAML config
    4. Default value
    """
    if key in _test_config:
        return _test_config[key]

    if not _loaded:
        load_configuration()

    env_key = ENV_PREFIX + key.upper().replace(".", "_")
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    return default


def validate_invalidate_rate(value: Union[int, float, timedelta]) -> float:
    """Checks a TTL and returns it in seconds.

    Raises:
        CacheConfigError: If the value is not a finite, non-negative duration.
    """
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CacheConfigError(f"invalidate_rate must be a number of seconds, got {value!r}")
    else:
        seconds = float(value)
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        raise CacheConfigError(f"invalidate_rate must be a finite value >= 0, got {value!r}")
    return seconds


def validate_cache_root(value: Any) -> str:
    """Checks a cache root template and returns it as a string.

    Raises:
        CacheConfigError: If the value is empty or not path-like.
    """
    if isinstance(value, Path):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise CacheConfigError(f"cache_root must be a non-empty path, got {value!r}")
    return value


def get_default_cache_root() -> str:
    """Default cache root, from config or ``~/.cache/cache_serde``."""
    return validate_cache_root(str(get_config("cache_root", DEFAULT_CACHE_ROOT)))


def get_default_invalidate_rate() -> float:
    """Default TTL in seconds, from config or 3600."""
    return validate_invalidate_rate(get_config("invalidate_rate", DEFAULT_INVALIDATE_RATE_SECONDS))


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """Set configuration values that override every other source."""
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
