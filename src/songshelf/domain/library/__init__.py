"""Library domain - catalog storage, scanning and search.

This domain handles:
- Song and genre data models
- The catalog store and its invariants
- Scanning local storage for audio files
- Substring search and library statistics
- Duration resolution from audio metadata
"""

# Models
from .models import Genre, Song, SongDraft

# Errors
from .exceptions import (
    CatalogError,
    DuplicateError,
    DuplicateNameError,
    InvalidNameError,
    NotFoundError,
)

# Store
from .store import CatalogStore

# Search
from .search import (
    filter_genres,
    filter_songs,
    get_library_stats,
    search_genres,
    search_songs,
    songs_in_genre,
)

# Scanning
from .scanner import (
    DirEntry,
    FileSystem,
    LocalFileSystem,
    LocalPermissionService,
    PermissionService,
    ScanOutcome,
    ScanResult,
    scan_library,
)

# Metadata
from .metadata import (
    AudioMetadata,
    ResolveSummary,
    read_audio_metadata,
    resolve_durations,
)

__all__ = [
    # Models
    "Genre",
    "Song",
    "SongDraft",
    # Errors
    "CatalogError",
    "DuplicateError",
    "DuplicateNameError",
    "InvalidNameError",
    "NotFoundError",
    # Store
    "CatalogStore",
    # Search
    "filter_genres",
    "filter_songs",
    "get_library_stats",
    "search_genres",
    "search_songs",
    "songs_in_genre",
    # Scanner
    "DirEntry",
    "FileSystem",
    "LocalFileSystem",
    "LocalPermissionService",
    "PermissionService",
    "ScanOutcome",
    "ScanResult",
    "scan_library",
    # Metadata
    "AudioMetadata",
    "ResolveSummary",
    "read_audio_metadata",
    "resolve_durations",
]
