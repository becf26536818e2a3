"""
Audio metadata reading and duration resolution.

Scanning stores placeholder metadata only. This module fills in what the
audio files themselves know, using Mutagen, as a separate explicit step.
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError

from .exceptions import CatalogError
from .store import CatalogStore


class AudioMetadata(NamedTuple):
    duration: int  # milliseconds
    title: Optional[str] = None
    artist: Optional[str] = None
    genre: Optional[str] = None


@dataclass
class ResolveSummary:
    checked: int = 0
    updated: int = 0
    failed: int = 0


def get_tag_value(audio_file, tag_names: list[str]) -> Optional[str]:
    """Get tag value, trying multiple possible tag names."""
    tags = getattr(audio_file, "tags", None)
    if not tags:
        return None
    for tag_name in tag_names:
        try:
            value = tags.get(tag_name)
        except (KeyError, ValueError):
            # Some formats raise ValueError for keys they can't hold
            continue
        if value:
            if isinstance(value, list):
                value = value[0]
            text = str(value).strip()
            if text:
                return text
    return None


def read_audio_metadata(path: str) -> Optional[AudioMetadata]:
    """Read duration and basic tags from an audio file.

    Returns:
        AudioMetadata, or None if the file can't be read
    """
    try:
        audio_file = MutagenFile(path)
    except (MutagenError, OSError) as e:
        logger.warning(f"Could not read {path}: {e}")
        return None

    if audio_file is None:
        return None

    length = getattr(getattr(audio_file, "info", None), "length", None) or 0
    return AudioMetadata(
        duration=int(round(length * 1000)),
        # ID3 (MP3), MP4 and Vorbis-style keys
        title=get_tag_value(audio_file, ["TIT2", "\xa9nam", "title"]),
        artist=get_tag_value(audio_file, ["TPE1", "\xa9ART", "artist"]),
        genre=get_tag_value(audio_file, ["TCON", "\xa9gen", "genre"]),
    )


def resolve_durations(
    store: CatalogStore,
    overwrite_tags: bool = False,
    placeholder_artist: str = "Unknown Artist",
) -> ResolveSummary:
    """Fill in unknown durations from the audio files.

    Args:
        store: Open catalog store
        overwrite_tags: Also take the title tag, and replace placeholder
            artist and empty genre text with tag values
        placeholder_artist: Artist text considered a placeholder

    Returns:
        ResolveSummary with counts
    """
    summary = ResolveSummary()

    for song in store.list_songs():
        if song.duration:
            continue
        summary.checked += 1

        metadata = read_audio_metadata(song.path)
        if metadata is None:
            summary.failed += 1
            continue

        fields = {}
        if metadata.duration:
            fields["duration"] = metadata.duration
        if overwrite_tags:
            if metadata.title and metadata.title != song.title:
                fields["title"] = metadata.title
            if metadata.artist and song.artist_name in ("", placeholder_artist):
                fields["artist_name"] = metadata.artist
            if metadata.genre and not song.genre_name:
                fields["genre_name"] = metadata.genre
        if not fields:
            continue

        try:
            store.update_song(song.id, **fields)
            summary.updated += 1
        except CatalogError as e:
            # Song deleted while resolving
            logger.warning(f"Could not update song #{song.id}: {e}")
            summary.failed += 1

    logger.info(
        f"Resolved durations: {summary.checked} checked, "
        f"{summary.updated} updated, {summary.failed} failed"
    )
    return summary
