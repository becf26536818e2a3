"""
Configuration management for Songshelf
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from loguru import logger


@dataclass
class LibraryConfig:
    """Configuration for library scanning."""

    library_paths: List[str] = field(
        default_factory=lambda: [
            str(Path.home() / "Music"),
            str(Path.home() / "Download"),
            str(Path.home() / "Downloads"),
        ]
    )
    supported_formats: List[str] = field(
        default_factory=lambda: [".mp3", ".m4a", ".wav"]
    )
    case_sensitive_extensions: bool = False
    placeholder_artist: str = "Unknown Artist"

    def validate(self) -> None:
        """Validate library configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        bad_formats = [f for f in self.supported_formats if not f.startswith(".")]
        if bad_formats:
            raise ValueError(
                f"Supported formats must start with '.': {bad_formats}"
            )


@dataclass
class DatabaseConfig:
    """Configuration for the catalog database."""

    path: Optional[str] = None  # Default: ~/.local/share/songshelf/songshelf.db


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = None  # Default: ~/.local/share/songshelf/songshelf.log
    console_output: bool = False


@dataclass
class Config:
    """Main configuration object."""

    library: LibraryConfig = field(default_factory=LibraryConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "songshelf"
    return Path.home() / ".config" / "songshelf"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks the current working directory first, then
    XDG_CONFIG_HOME/songshelf (or ~/.config/songshelf).
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "songshelf"
    return Path.home() / ".local" / "share" / "songshelf"


def get_database_path(config: Config) -> Path:
    """Resolve the catalog database path.

    SONGSHELF_DATABASE overrides the configured path.
    """
    override = os.environ.get("SONGSHELF_DATABASE")
    if override:
        return Path(override).expanduser()
    if config.database.path:
        return Path(config.database.path).expanduser()
    return get_data_dir() / "songshelf.db"


def get_log_file_path(config: Config) -> Path:
    """Resolve the log file path."""
    if config.logging.log_file:
        return Path(config.logging.log_file).expanduser()
    return get_data_dir() / "songshelf.log"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Songshelf Configuration

[library]
# Directories scanned for audio files, in order (only their immediate entries)
library_paths = ["~/Music", "~/Download", "~/Downloads"]

# Recognised audio file extensions
supported_formats = [".mp3", ".m4a", ".wav"]

# Match extensions exactly (".MP3" is skipped when true)
case_sensitive_extensions = false

# Artist text given to newly scanned songs
placeholder_artist = "Unknown Artist"

[database]
# Custom catalog location (default: ~/.local/share/songshelf/songshelf.db)
# path = "/path/to/songshelf.db"

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/songshelf/songshelf.log)
# log_file = "/path/to/songshelf.log"

# Also output logs to stderr
console_output = false
""".strip()


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, keeping defaults for missing keys."""
    config = Config()

    if "library" in toml_data:
        library_data = toml_data["library"]
        config.library = LibraryConfig(
            library_paths=[
                str(Path(p).expanduser())
                for p in library_data.get(
                    "library_paths", config.library.library_paths
                )
            ],
            supported_formats=library_data.get(
                "supported_formats", config.library.supported_formats
            ),
            case_sensitive_extensions=library_data.get(
                "case_sensitive_extensions", config.library.case_sensitive_extensions
            ),
            placeholder_artist=library_data.get(
                "placeholder_artist", config.library.placeholder_artist
            ),
        )
        try:
            config.library.validate()
        except ValueError as e:
            logger.warning(f"Invalid library configuration: {e}. Using defaults.")
            config.library = LibraryConfig()

    if "database" in toml_data:
        config.database = DatabaseConfig(path=toml_data["database"].get("path"))

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        log_file = logging_data.get("log_file")
        if log_file:
            log_file = str(Path(log_file).expanduser())
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=log_file,
            console_output=logging_data.get(
                "console_output", config.logging.console_output
            ),
        )

    return config


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - SONGSHELF_DATABASE (resolved by get_database_path)
    - SONGSHELF_LOG_LEVEL
    """
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = config_path or get_config_path()

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        logger.info(f"Created default configuration at: {config_path}")
        config = Config()
    else:
        try:
            with open(config_path, "rb") as f:
                toml_data = tomllib.load(f)
            config = parse_config(toml_data)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(
                f"Error loading configuration from {config_path}: {e}. Using defaults."
            )
            config = Config()

    log_level = os.environ.get("SONGSHELF_LOG_LEVEL")
    if log_level:
        config.logging.level = log_level.upper()

    return config
