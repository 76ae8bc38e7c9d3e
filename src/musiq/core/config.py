"""
Configuration management for musiq
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


@dataclass
class DatabaseConfig:
    """Configuration for the song/tag store."""

    path: Optional[str] = None  # Default: ~/.local/share/musiq/music.db


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Default: ~/.local/share/musiq/musiq.log
    console_output: bool = False  # Also log to stderr
    rotation: str = "10 MB"
    retention: int = 5  # Number of rotated files to keep


@dataclass
class Config:
    """Main configuration object."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "musiq"
    return Path.home() / ".config" / "musiq"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "musiq"
    return Path.home() / ".local" / "share" / "musiq"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/musiq (or ~/.config/musiq)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """# musiq configuration

[database]
# Path to the SQLite store (default: ~/.local/share/musiq/music.db)
# path = "~/Music/music.db"

[logging]
# Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL
level = "INFO"

# Custom log file path (default: ~/.local/share/musiq/musiq.log)
# log_file = "~/musiq.log"

# Also write logs to stderr
console_output = false

# Rotate the log file at this size and keep this many old files
rotation = "10 MB"
retention = 5
"""


def write_default_config(config_path: Optional[Path] = None) -> Optional[Path]:
    """Write the default config file unless one already exists.

    Returns:
        The path written, or None if a config file was already there
    """
    path = config_path if config_path else get_config_dir() / "config.toml"
    if path.exists():
        return None

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(create_default_config())
    logger.info(f"Created default configuration at: {path}")
    return path


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, falling back to defaults.

    Environment variables override TOML values:
    - MUSIQ_DB_PATH
    - MUSIQ_LOG_LEVEL

    Args:
        config_path: Explicit config file (default: see get_config_path)

    Returns:
        Parsed configuration. Missing or unreadable files yield defaults.
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    path = config_path if config_path else get_config_path()
    config = Config()

    if path.exists():
        try:
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Error loading configuration from {path}: {e}")
            logger.warning("Using default configuration.")
            toml_data = {}

        database_data = _section(toml_data, "database", path)
        if database_data:
            db_path = database_data.get("path")
            config.database = DatabaseConfig(
                path=str(Path(db_path).expanduser()) if db_path else None
            )

        logging_data = _section(toml_data, "logging", path)
        if logging_data:
            log_file = logging_data.get("log_file")
            if log_file:
                log_file = str(Path(log_file).expanduser())
            config.logging = LoggingConfig(
                level=_log_level(logging_data.get("level", config.logging.level)),
                log_file=log_file,
                console_output=logging_data.get(
                    "console_output", config.logging.console_output
                ),
                rotation=logging_data.get("rotation", config.logging.rotation),
                retention=logging_data.get("retention", config.logging.retention),
            )

    # Environment overrides
    env_db_path = os.environ.get("MUSIQ_DB_PATH")
    if env_db_path:
        config.database.path = str(Path(env_db_path).expanduser())

    env_log_level = os.environ.get("MUSIQ_LOG_LEVEL")
    if env_log_level:
        config.logging.level = _log_level(env_log_level)

    return config


def _section(toml_data: dict, name: str, path: Path) -> dict:
    section = toml_data.get(name, {})
    if not isinstance(section, dict):
        logger.warning(f"Ignoring [{name}] in {path}: expected a table")
        return {}
    return section


def _log_level(value) -> str:
    level = str(value).upper()
    if level not in LOG_LEVELS:
        logger.warning(f"Unknown log level {value!r}, using INFO")
        return "INFO"
    return level

