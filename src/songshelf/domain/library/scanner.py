"""
Music library scanning.

Walks the configured library roots, picks out audio files and adds the ones
the catalog has not seen yet. A bad root or a bad file only shrinks the
result; the only thing that stops a scan is being denied storage access.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, NamedTuple, Optional, Protocol

from loguru import logger

from songshelf.core.config import LibraryConfig

from .exceptions import DuplicateError
from .models import SongDraft
from .store import CatalogStore


class DirEntry(NamedTuple):
    """One entry of a directory listing."""

    name: str
    is_file: bool
    path: str


class PermissionService(Protocol):
    def request_audio_storage_access(self) -> bool: ...


class FileSystem(Protocol):
    def exists(self, path: str) -> bool: ...

    def list_directory(self, path: str) -> list[DirEntry]: ...


class LocalPermissionService:
    """Grants storage access when the home directory is readable."""

    def __init__(self, home: Optional[Path] = None) -> None:
        self.home = home or Path.home()

    def request_audio_storage_access(self) -> bool:
        return os.access(self.home, os.R_OK)


class LocalFileSystem:
    """Local disk access; listings are sorted by name."""

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def list_directory(self, path: str) -> list[DirEntry]:
        with os.scandir(path) as entries:
            listing = [
                DirEntry(
                    name=entry.name,
                    is_file=entry.is_file(),
                    path=os.path.abspath(entry.path),
                )
                for entry in entries
            ]
        return sorted(listing, key=lambda entry: entry.name)


class ScanOutcome(Enum):
    PERMISSION_DENIED = "permission_denied"
    NO_FILES_FOUND = "no_files_found"
    COMPLETED = "completed"


@dataclass
class ScanResult:
    """Summary of one scan."""

    outcome: ScanOutcome
    found: int = 0
    inserted: int = 0
    duplicates: int = 0
    root_errors: list[tuple[str, str]] = field(default_factory=list)
    file_errors: list[tuple[str, str]] = field(default_factory=list)

    def message(self) -> str:
        """User-facing text for the outcome."""
        if self.outcome is ScanOutcome.PERMISSION_DENIED:
            return "Storage permission is required to scan music files."
        if self.outcome is ScanOutcome.NO_FILES_FOUND:
            return "No music files found in Music or Download folders."
        return f"Found and added {self.inserted} songs."


def matching_extension(
    name: str, supported_formats: list[str], case_sensitive: bool = False
) -> Optional[str]:
    """Return the recognised extension that name ends with, if any."""
    candidate = name if case_sensitive else name.lower()
    for ext in supported_formats:
        wanted = ext if case_sensitive else ext.lower()
        if candidate.endswith(wanted):
            return name[len(name) - len(wanted):]
    return None


def list_root_candidates(
    root: str, fs: FileSystem, config: LibraryConfig
) -> list[DirEntry]:
    """Audio files directly inside root. Raises whatever the file system raises."""
    if not fs.exists(root):
        logger.debug(f"Library path does not exist: {root}")
        return []

    return [
        entry
        for entry in fs.list_directory(root)
        if entry.is_file
        and matching_extension(
            entry.name, config.supported_formats, config.case_sensitive_extensions
        )
    ]


def draft_from_entry(entry: DirEntry, config: LibraryConfig) -> SongDraft:
    """Minimal song record for a discovered file."""
    ext = matching_extension(
        entry.name, config.supported_formats, config.case_sensitive_extensions
    )
    title = entry.name[: -len(ext)] if ext else entry.name
    return SongDraft(
        title=title,
        path=entry.path,
        duration=0,
        artist_name=config.placeholder_artist,
        genre_name="",
    )


def scan_library(
    store: CatalogStore,
    permissions: PermissionService,
    fs: FileSystem,
    config: LibraryConfig,
    roots: Optional[list[str]] = None,
    progress_callback: Optional[Callable[[str, bool], None]] = None,
) -> ScanResult:
    """Scan library roots and add unseen audio files to the catalog.

    Args:
        store: Open catalog store
        permissions: Storage permission collaborator, asked once
        fs: File system collaborator
        config: Library configuration
        roots: Root directories in scan order (default: config.library_paths)
        progress_callback: Optional callback(path, inserted) per candidate

    Returns:
        ScanResult describing the outcome
    """
    try:
        granted = permissions.request_audio_storage_access()
    except Exception as e:
        logger.warning(f"Permission request failed: {e}")
        granted = False

    if not granted:
        logger.warning("Storage access denied, scan aborted")
        return ScanResult(outcome=ScanOutcome.PERMISSION_DENIED)

    roots = config.library_paths if roots is None else roots
    root_errors: list[tuple[str, str]] = []
    candidates: list[DirEntry] = []

    for root in roots:
        try:
            found = list_root_candidates(root, fs, config)
        except Exception as e:
            logger.warning(f"Error scanning {root}: {e}")
            root_errors.append((root, str(e)))
            continue
        logger.debug(f"Scanning {root}: {len(found)} audio files")
        candidates.extend(found)

    if not candidates:
        logger.info("Scan found no audio files")
        return ScanResult(outcome=ScanOutcome.NO_FILES_FOUND, root_errors=root_errors)

    result = ScanResult(
        outcome=ScanOutcome.COMPLETED, found=len(candidates), root_errors=root_errors
    )

    for entry in candidates:
        inserted = False
        try:
            store.insert_song(draft_from_entry(entry, config))
            inserted = True
            result.inserted += 1
        except DuplicateError:
            result.duplicates += 1
        except Exception as e:
            logger.warning(f"Error inserting {entry.name}: {e}")
            result.file_errors.append((entry.path, str(e)))

        if progress_callback:
            progress_callback(entry.path, inserted)

    logger.info(
        f"Scan complete: {result.found} found, {result.inserted} added, "
        f"{result.duplicates} already known, {len(result.file_errors)} failed"
    )
    return result
