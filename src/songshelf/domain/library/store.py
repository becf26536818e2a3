"""
Catalog store for songs and genres.

The store is the only component that reads or writes persisted catalog
state. It is opened once, injected into whatever needs it, and closed at
shutdown. Every operation runs its invariant checks and its write as one
step under a lock, so it can be called from several threads at once.
"""

import os
import sqlite3
import threading
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

from songshelf.core.database import connect, init_schema

from .exceptions import (
    DuplicateError,
    DuplicateNameError,
    InvalidNameError,
    NotFoundError,
)
from .models import Genre, Song, SongDraft

# Python field name -> songs column
SONG_COLUMNS = {
    "title": "title",
    "path": "path",
    "duration": "duration",
    "artist_name": "artist_name_string",
    "genre_name": "genre_string",
}


def _row_to_song(row: sqlite3.Row) -> Song:
    return Song(
        id=row["id"],
        title=row["title"],
        path=row["path"],
        duration=row["duration"],
        artist_name=row["artist_name_string"],
        genre_name=row["genre_string"],
    )


def _row_to_genre(row: sqlite3.Row) -> Genre:
    return Genre(
        id=row["id"],
        name=row["name"],
        cover_image_path=row["cover_image_path"],
    )


def _is_unique_violation(error: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(error)


def _clean_path(path: Optional[str]) -> str:
    """Absolute form of a song path; empty paths are rejected."""
    if not path:
        raise ValueError("Song path must not be empty")
    return os.path.abspath(str(path))


def _clean_name(name: Optional[str], what: str) -> str:
    """Trim a title/name and reject blank input."""
    if name is None or not str(name).strip():
        raise InvalidNameError(f"{what} must not be empty")
    return str(name).strip()


class CatalogStore:
    """SQLite-backed catalog of songs and genres.

    Usage:
        with CatalogStore(path) as store:
            song_id = store.insert_song(draft)

    Pass ``":memory:"`` for a throwaway in-memory catalog.
    """

    def __init__(self, db_path: Union[str, Path] = ":memory:") -> None:
        self.db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    # Lifecycle

    def open(self) -> "CatalogStore":
        """Open the connection and create or migrate the schema."""
        with self._lock:
            if self._conn is None:
                self._conn = connect(self.db_path)
                init_schema(self._conn)
                logger.debug(f"Catalog opened: {self.db_path}")
        return self

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.debug(f"Catalog closed: {self.db_path}")

    def __enter__(self) -> "CatalogStore":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("Catalog store is not open")
        return self._conn

    # Songs

    def list_songs(self) -> list[Song]:
        """All songs in insertion order."""
        with self._lock:
            cursor = self._connection().execute("SELECT * FROM songs ORDER BY id")
            return [_row_to_song(row) for row in cursor.fetchall()]

    def get_song(self, song_id: int) -> Song:
        """Get a song by id.

        Raises:
            NotFoundError: If no song has this id
        """
        with self._lock:
            row = (
                self._connection()
                .execute("SELECT * FROM songs WHERE id = ?", (song_id,))
                .fetchone()
            )
        if row is None:
            raise NotFoundError("song", song_id)
        return _row_to_song(row)

    def count_songs(self) -> int:
        with self._lock:
            row = self._connection().execute("SELECT COUNT(*) AS n FROM songs").fetchone()
        return row["n"]

    def insert_song(self, draft: SongDraft) -> int:
        """Store a new song and return its id.

        Args:
            draft: Song fields without an id

        Returns:
            The new song id

        Raises:
            DuplicateError: If a song with the same path already exists
            InvalidNameError: If the title is blank
        """
        title = _clean_name(draft.title, "Song title")
        path = _clean_path(draft.path)

        with self._lock:
            conn = self._connection()
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO songs (title, path, duration, artist_name_string, genre_string)
                    VALUES (?, ?, ?, ?, ?)
                """,
                    (
                        title,
                        path,
                        draft.duration or 0,
                        draft.artist_name or "",
                        draft.genre_name or "",
                    ),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if _is_unique_violation(e):
                    raise DuplicateError(path) from e
                raise

        logger.debug(f"Inserted song #{cursor.lastrowid}: {path}")
        return cursor.lastrowid

    def update_song(self, song_id: int, **fields: Any) -> None:
        """Update song fields.

        Args:
            song_id: Song to update
            **fields: Any of title, artist_name, genre_name, duration, path

        Raises:
            NotFoundError: If the song does not exist
            DuplicateError: If path is changed to one used by another song
            InvalidNameError: If title is blank
            ValueError: For unknown fields or a negative duration
        """
        invalid_fields = set(fields) - set(SONG_COLUMNS)
        if invalid_fields:
            raise ValueError(f"Invalid fields: {invalid_fields}")

        validated = {}
        for name, value in fields.items():
            if name == "title":
                validated[name] = _clean_name(value, "Song title")
            elif name == "path":
                validated[name] = _clean_path(value)
            elif name == "duration":
                duration = int(value or 0)
                if duration < 0:
                    raise ValueError(f"Duration must not be negative, got {duration}")
                validated[name] = duration
            else:
                validated[name] = "" if value is None else str(value).strip()

        with self._lock:
            conn = self._connection()
            exists = conn.execute(
                "SELECT 1 FROM songs WHERE id = ?", (song_id,)
            ).fetchone()
            if not exists:
                raise NotFoundError("song", song_id)
            if not validated:
                return

            set_clause = ", ".join(
                f"{SONG_COLUMNS[name]} = ?" for name in validated
            )
            values = list(validated.values()) + [song_id]
            try:
                conn.execute(
                    f"""
                    UPDATE songs
                    SET {set_clause}, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                """,
                    values,
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if _is_unique_violation(e):
                    raise DuplicateError(validated["path"]) from e
                raise

        logger.debug(f"Updated song #{song_id}: {sorted(validated)}")

    def delete_song(self, song_id: int) -> None:
        """Delete a song.

        Raises:
            NotFoundError: If the song does not exist (including a second delete)
        """
        with self._lock:
            conn = self._connection()
            cursor = conn.execute("DELETE FROM songs WHERE id = ?", (song_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("song", song_id)

        logger.debug(f"Deleted song #{song_id}")

    # Genres

    def list_genres(self) -> list[Genre]:
        """All genres in creation order."""
        with self._lock:
            cursor = self._connection().execute("SELECT * FROM genres ORDER BY id")
            return [_row_to_genre(row) for row in cursor.fetchall()]

    def get_genre(self, genre_id: int) -> Genre:
        """Get a genre by id.

        Raises:
            NotFoundError: If no genre has this id
        """
        with self._lock:
            row = (
                self._connection()
                .execute("SELECT * FROM genres WHERE id = ?", (genre_id,))
                .fetchone()
            )
        if row is None:
            raise NotFoundError("genre", genre_id)
        return _row_to_genre(row)

    def create_genre(self, name: str, cover_image_path: Optional[str] = None) -> int:
        """Create a genre and return its id.

        Raises:
            InvalidNameError: If the name is empty or whitespace-only
            DuplicateNameError: If a genre with exactly this name exists
        """
        name = _clean_name(name, "Genre name")

        with self._lock:
            conn = self._connection()
            try:
                cursor = conn.execute(
                    "INSERT INTO genres (name, cover_image_path) VALUES (?, ?)",
                    (name, cover_image_path),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if _is_unique_violation(e):
                    raise DuplicateNameError(name) from e
                raise

        logger.debug(f"Created genre #{cursor.lastrowid}: {name}")
        return cursor.lastrowid

    def update_genre(
        self, genre_id: int, name: str, cover_image_path: Optional[str] = None
    ) -> None:
        """Rename a genre and set its cover image.

        Raises:
            NotFoundError: If the genre does not exist
            DuplicateNameError: If another genre already uses the name
            InvalidNameError: If the name is blank
        """
        name = _clean_name(name, "Genre name")

        with self._lock:
            conn = self._connection()
            try:
                cursor = conn.execute(
                    """
                    UPDATE genres
                    SET name = ?, cover_image_path = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                """,
                    (name, cover_image_path, genre_id),
                )
                conn.commit()
            except sqlite3.IntegrityError as e:
                conn.rollback()
                if _is_unique_violation(e):
                    raise DuplicateNameError(name) from e
                raise
            if cursor.rowcount == 0:
                raise NotFoundError("genre", genre_id)

        logger.debug(f"Updated genre #{genre_id}: {name}")

    def delete_genre(self, genre_id: int) -> None:
        """Delete a genre. Songs carrying its name as text are left alone.

        Raises:
            NotFoundError: If the genre does not exist
        """
        with self._lock:
            conn = self._connection()
            cursor = conn.execute("DELETE FROM genres WHERE id = ?", (genre_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("genre", genre_id)

        logger.debug(f"Deleted genre #{genre_id}")
