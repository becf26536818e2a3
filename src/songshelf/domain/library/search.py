"""
Catalog search and library statistics.

Searches are recomputed from the live catalog on every call: matching is a
case-insensitive (casefolded) substring test and results keep catalog order.
"""

from pathlib import Path
from typing import Any

from .models import Genre, Song
from .store import CatalogStore


def _matches(query: str, *fields: str) -> bool:
    return any(query in (field or "").casefold() for field in fields)


def search_songs(store: CatalogStore, query: str) -> list[Song]:
    """Search songs by title, artist, or genre text."""
    query = query.casefold()
    return [
        song
        for song in store.list_songs()
        if _matches(query, song.title, song.artist_name, song.genre_name)
    ]


def search_genres(store: CatalogStore, query: str) -> list[Genre]:
    """Search genres by name."""
    query = query.casefold()
    return [genre for genre in store.list_genres() if _matches(query, genre.name)]


def filter_songs(store: CatalogStore, query: str) -> list[Song]:
    """Songs for a search box: blank query shows the whole catalog."""
    if not query.strip():
        return store.list_songs()
    return search_songs(store, query)


def filter_genres(store: CatalogStore, query: str) -> list[Genre]:
    """Genres for a search box: blank query shows every genre."""
    if not query.strip():
        return store.list_genres()
    return search_genres(store, query)


def songs_in_genre(store: CatalogStore, genre: Genre) -> list[Song]:
    """Songs whose genre text is exactly the genre's name."""
    return [song for song in store.list_songs() if song.genre_name == genre.name]


def get_library_stats(store: CatalogStore) -> dict[str, Any]:
    """Get statistics about the catalog."""
    songs = store.list_songs()

    formats: dict[str, int] = {}
    artists = set()
    for song in songs:
        suffix = Path(song.path).suffix.lower()
        if suffix:
            formats[suffix] = formats.get(suffix, 0) + 1
        if song.artist_name:
            artists.add(song.artist_name)

    return {
        "total_songs": len(songs),
        "total_duration": sum(song.duration for song in songs),
        "songs_without_duration": sum(1 for song in songs if not song.duration),
        "genres": len(store.list_genres()),
        "artists": len(artists),
        "formats": formats,
    }
