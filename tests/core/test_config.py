"""Tests for configuration loading and path resolution."""

from pathlib import Path

import pytest

from songshelf.core import config as config_module
from songshelf.core.config import (
    Config,
    LibraryConfig,
    get_database_path,
    load_config,
    parse_config,
)


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Point XDG dirs and cwd at a temp directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("SONGSHELF_DATABASE", raising=False)
    monkeypatch.delenv("SONGSHELF_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_defaults():
    config = Config()
    assert config.library.supported_formats == [".mp3", ".m4a", ".wav"]
    assert config.library.placeholder_artist == "Unknown Artist"
    assert not config.library.case_sensitive_extensions
    assert [Path(p).name for p in config.library.library_paths] == [
        "Music",
        "Download",
        "Downloads",
    ]


def test_load_config_creates_default_file(isolated_dirs):
    config = load_config()

    config_file = isolated_dirs / "config" / "songshelf" / "config.toml"
    assert config_file.exists()
    assert config == Config()


def test_load_config_from_cwd(isolated_dirs):
    (isolated_dirs / "config.toml").write_text(
        """
[library]
library_paths = ["~/Tunes"]
supported_formats = [".mp3", ".flac"]
case_sensitive_extensions = true

[logging]
level = "debug"
"""
    )

    config = load_config()

    assert config.library.library_paths == [str(Path("~/Tunes").expanduser())]
    assert config.library.supported_formats == [".mp3", ".flac"]
    assert config.library.case_sensitive_extensions
    assert config.library.placeholder_artist == "Unknown Artist"
    assert config.logging.level == "DEBUG"


def test_malformed_config_falls_back_to_defaults(isolated_dirs):
    (isolated_dirs / "config.toml").write_text("[library\nbroken = ")
    assert load_config() == Config()


def test_invalid_formats_fall_back_to_library_defaults():
    config = parse_config({"library": {"supported_formats": ["mp3"]}})
    assert config.library == LibraryConfig()


def test_log_level_env_override(isolated_dirs, monkeypatch):
    monkeypatch.setenv("SONGSHELF_LOG_LEVEL", "warning")
    assert load_config().logging.level == "WARNING"


def test_database_path_default(isolated_dirs):
    expected = isolated_dirs / "data" / "songshelf" / "songshelf.db"
    assert get_database_path(Config()) == expected


def test_database_path_from_config_and_env(isolated_dirs, monkeypatch):
    config = parse_config({"database": {"path": str(isolated_dirs / "lib.db")}})
    assert get_database_path(config) == isolated_dirs / "lib.db"

    monkeypatch.setenv("SONGSHELF_DATABASE", str(isolated_dirs / "env.db"))
    assert get_database_path(config) == isolated_dirs / "env.db"


def test_default_config_text_parses(isolated_dirs):
    """Should write a default file that loads back to the defaults."""
    path = isolated_dirs / "written.toml"
    path.write_text(config_module.create_default_config())
    config = load_config(path)
    assert config.library.supported_formats == [".mp3", ".m4a", ".wav"]
    assert config.logging.level == "INFO"
