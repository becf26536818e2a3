"""
Music library domain models.

Contains data structures for songs and genres in the catalog.
"""

from typing import NamedTuple, Optional


class Song(NamedTuple):
    """A stored song.

    artist_name and genre_name are free display text. genre_name is not a
    reference to a Genre record and may name a genre that does not exist.
    """

    id: int
    title: str
    path: str  # Absolute file path, unique in the catalog
    duration: int = 0  # milliseconds, 0 = unknown
    artist_name: str = ""
    genre_name: str = ""


class SongDraft(NamedTuple):
    """A song that has not been stored yet (no id)."""

    title: str
    path: str
    duration: int = 0
    artist_name: str = ""
    genre_name: str = ""


class Genre(NamedTuple):
    """A managed genre collection, optionally with cover art."""

    id: int
    name: str
    cover_image_path: Optional[str] = None
