"""
SQLite schema and connection helpers for the Songshelf catalog
"""

import sqlite3
from pathlib import Path
from typing import Union

from loguru import logger

# Database schema version for migrations
SCHEMA_VERSION = 2


def connect(db_path: Union[str, Path]) -> sqlite3.Connection:
    """Open a catalog connection.

    The connection may be shared between threads; callers serialize access.
    ``":memory:"`` opens a private in-memory catalog.
    """
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path), timeout=30.0, check_same_thread=False)
    conn.row_factory = sqlite3.Row  # Enable dict-like access

    if str(db_path) != ":memory:":
        # WAL mode allows reads during writes
        conn.execute("PRAGMA journal_mode=WAL")

    return conn


def migrate_database(conn: sqlite3.Connection, current_version: int) -> None:
    """Migrate database from current_version to latest schema."""
    if current_version < 2:
        # Migration from v1 to v2: timestamps on genres
        try:
            conn.execute("ALTER TABLE genres ADD COLUMN updated_at TIMESTAMP")
        except sqlite3.OperationalError as e:
            if "duplicate column name" not in str(e).lower():
                raise


def init_schema(conn: sqlite3.Connection) -> None:
    """Create the catalog tables and run pending migrations."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS songs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            path TEXT NOT NULL UNIQUE,
            duration INTEGER NOT NULL DEFAULT 0, -- milliseconds, 0 = unknown
            artist_name_string TEXT NOT NULL DEFAULT '',
            genre_string TEXT NOT NULL DEFAULT '', -- free text, not a genres FK
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_songs_genre ON songs (genre_string)"
    )

    conn.execute("""
        CREATE TABLE IF NOT EXISTS genres (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE, -- BINARY collation: case-sensitive
            cover_image_path TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor = conn.execute("SELECT MAX(version) as version FROM schema_version")
    row = cursor.fetchone()
    current_version = row["version"] if row and row["version"] else 0
    cursor.close()

    if 0 < current_version < SCHEMA_VERSION:
        logger.info(
            f"Migrating catalog schema from v{current_version} to v{SCHEMA_VERSION}"
        )
        migrate_database(conn, current_version)

    # Set schema version (delete old rows to prevent duplicates)
    conn.execute("DELETE FROM schema_version")
    conn.execute(
        "INSERT INTO schema_version (version) VALUES (?)",
        (SCHEMA_VERSION,),
    )

    conn.commit()
