"""Core infrastructure layer - no domain dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Database connection and schema (SQLite)
- Error taxonomy
"""

# Configuration
from .config import (
    Config,
    DatabaseConfig,
    LoggingConfig,
    load_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    create_default_config,
    write_default_config,
)

# Database
from .database import (
    SCHEMA_TABLES,
    connect,
    get_database_path,
    get_db_connection,
    init_database,
    set_database_path,
)

# Errors
from .exceptions import (
    MusiqError,
    StorageUnavailableError,
    NotFoundError,
    SongNotFoundError,
    TagNotFoundError,
    ConstraintViolationError,
    ConditionParseError,
    EmptyTagNameError,
    ValueOutOfRangeError,
    NonNumericValueError,
    NoOperatorFoundError,
    InvalidOperatorError,
    QueryError,
)

__all__ = [
    # Config
    "Config",
    "DatabaseConfig",
    "LoggingConfig",
    "load_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "create_default_config",
    "write_default_config",
    # Database
    "SCHEMA_TABLES",
    "connect",
    "get_database_path",
    "get_db_connection",
    "init_database",
    "set_database_path",
    # Errors
    "MusiqError",
    "StorageUnavailableError",
    "NotFoundError",
    "SongNotFoundError",
    "TagNotFoundError",
    "ConstraintViolationError",
    "ConditionParseError",
    "EmptyTagNameError",
    "ValueOutOfRangeError",
    "NonNumericValueError",
    "NoOperatorFoundError",
    "InvalidOperatorError",
    "QueryError",
]
