"""Locating the config file and the data directory."""

import logging
import os
from pathlib import Path

from feedburst.errors import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "feedburst"
CONFIG_FILENAME = "config.feeds"
FEEDS_SUBDIR = "feeds"

CONFIG_PATH_ENV = "FEEDBURST_CONFIG_PATH"
DATA_DIR_ENV = "FEEDBURST_DATA_DIR"
LOG_LEVEL_ENV = "FEEDBURST_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def resolve_config_path(cli_path: str | None = None) -> Path:
    """Pick the config file: command line, then environment, then XDG config dir."""
    if cli_path:
        logger.debug("Using config specified on command line: %s", cli_path)
        return Path(cli_path)

    env_path = os.environ.get(CONFIG_PATH_ENV)
    if env_path:
        logger.debug("Using config specified as %s: %s", CONFIG_PATH_ENV, env_path)
        return Path(env_path)

    path = _xdg_dir("XDG_CONFIG_HOME", ".config") / APP_NAME / CONFIG_FILENAME
    logger.debug("Using config found from the XDG config dir: %s", path)
    return path


def resolve_data_dir() -> Path:
    """Directory holding one record file per feed."""
    env_dir = os.environ.get(DATA_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    return _xdg_dir("XDG_DATA_HOME", ".local/share") / APP_NAME / FEEDS_SUBDIR


def read_config_text(path: Path) -> str:
    """Read the config file as UTF-8 text.

    Raises:
        ConfigError: If the file is missing, unreadable, or not UTF-8.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"config file not found: {path}")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"could not read config file {path}: {e}") from e


def log_level() -> str:
    """Log level name from the environment; unknown names fall back to the default."""
    name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(name), int):
        return DEFAULT_LOG_LEVEL
    return name


def _xdg_dir(env_var: str, fallback: str) -> Path:
    # XDG says relative paths in these variables are to be ignored.
    value = os.environ.get(env_var)
    if value and os.path.isabs(value):
        return Path(value)
    return Path.home() / fallback
