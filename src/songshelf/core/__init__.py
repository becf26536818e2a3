"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Catalog schema and connections (SQLite)
- Logging setup (Loguru)
- Console management (Rich)
"""

from .config import (
    Config,
    DatabaseConfig,
    LibraryConfig,
    LoggingConfig,
    create_default_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_database_path,
    get_log_file_path,
    load_config,
    parse_config,
)
from .console import confirm, get_console, print_error, safe_print
from .database import SCHEMA_VERSION, connect, init_schema
from .output import setup_loguru

__all__ = [
    # Config
    "Config",
    "DatabaseConfig",
    "LibraryConfig",
    "LoggingConfig",
    "create_default_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_database_path",
    "get_log_file_path",
    "load_config",
    "parse_config",
    # Database
    "SCHEMA_VERSION",
    "connect",
    "init_schema",
    # Output
    "setup_loguru",
    # Console
    "get_console",
    "safe_print",
    "print_error",
    "confirm",
]
