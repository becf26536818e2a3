"""
Songshelf CLI - Entry point

Scans local storage into the catalog, manages songs and genres, and builds
play queues. Audio output itself is left to an external player; playback
commands print the queue they would hand over.
"""

import argparse
import sys
from typing import Optional

from loguru import logger
from rich.markup import escape

from songshelf.core import config as config_module
from songshelf.core.console import confirm, print_error, safe_print
from songshelf.core.output import setup_loguru
from songshelf.domain.library import (
    CatalogError,
    CatalogStore,
    LocalFileSystem,
    LocalPermissionService,
    ScanOutcome,
    filter_genres,
    filter_songs,
    get_library_stats,
    resolve_durations,
    scan_library,
    songs_in_genre,
)
from songshelf.domain.library.models import Genre, Song
from songshelf.domain.playback import Queue, QueueController


def format_duration(milliseconds: int) -> str:
    """Format milliseconds as M:SS, or '--:--' when unknown."""
    if not milliseconds:
        return "--:--"
    seconds = milliseconds // 1000
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def format_song(song: Song) -> str:
    line = f"#{song.id}  {escape(song.title)} - {escape(song.artist_name)}"
    if song.genre_name:
        line += " " + escape(f"[{song.genre_name}]")
    return f"{line}  {format_duration(song.duration)}"


def format_genre(genre: Genre) -> str:
    line = f"#{genre.id}  {escape(genre.name)}"
    if genre.cover_image_path:
        line += f"  (cover: {escape(genre.cover_image_path)})"
    return line


class ConsoleEngine:
    """Stands in for the audio player: prints each queue it receives."""

    def start(self, queue: Queue) -> None:
        label = "Shuffled queue" if queue.shuffled else "Queue"
        safe_print(f"{label} ({len(queue)} songs):", style="cyan")
        for position, song in enumerate(queue, start=1):
            safe_print(f"{position:>4}. {format_song(song)}")


def cmd_scan(store: CatalogStore, config: config_module.Config, args) -> int:
    result = scan_library(
        store,
        LocalPermissionService(),
        LocalFileSystem(),
        config.library,
        roots=args.roots or None,
    )
    for root, error in result.root_errors:
        safe_print(f"Skipped {escape(root)}: {escape(error)}", style="yellow")

    if result.outcome is ScanOutcome.PERMISSION_DENIED:
        safe_print(f"Permission Denied: {result.message()}", style="red")
        return 1
    if result.outcome is ScanOutcome.NO_FILES_FOUND:
        safe_print(f"No Music Found: {result.message()}", style="yellow")
        return 0

    safe_print(f"Scan Complete: {result.message()}", style="green")
    safe_print(f"Catalog now holds {store.count_songs()} songs", style="dim")
    if result.file_errors:
        safe_print(
            f"{len(result.file_errors)} files could not be added", style="yellow"
        )
    return 0


def cmd_songs(store: CatalogStore, config: config_module.Config, args) -> int:
    songs = filter_songs(store, args.query)
    for song in songs:
        safe_print(format_song(song))
    safe_print(f"{len(songs)} songs", style="dim")
    return 0


def cmd_genres(store: CatalogStore, config: config_module.Config, args) -> int:
    genres = filter_genres(store, args.query)
    for genre in genres:
        safe_print(format_genre(genre))
    safe_print(f"{len(genres)} genres", style="dim")
    return 0


def cmd_genre_add(store: CatalogStore, config: config_module.Config, args) -> int:
    genre_id = store.create_genre(args.name, args.cover)
    safe_print(f"Created genre #{genre_id}", style="green")
    return 0


def cmd_genre_edit(store: CatalogStore, config: config_module.Config, args) -> int:
    genre = store.get_genre(args.id)
    cover = args.cover if args.cover is not None else genre.cover_image_path
    store.update_genre(args.id, args.name, cover)
    safe_print(f"Updated genre #{args.id}", style="green")
    return 0


def cmd_genre_delete(store: CatalogStore, config: config_module.Config, args) -> int:
    genre = store.get_genre(args.id)
    if not confirm(f'Delete genre "{escape(genre.name)}"?', args.yes):
        return 0
    store.delete_genre(args.id)
    safe_print(f"Deleted genre #{args.id}", style="green")
    return 0


def cmd_genre_songs(store: CatalogStore, config: config_module.Config, args) -> int:
    songs = songs_in_genre(store, store.get_genre(args.id))
    for song in songs:
        safe_print(format_song(song))
    safe_print(f"{len(songs)} songs", style="dim")
    return 0


def cmd_song_edit(store: CatalogStore, config: config_module.Config, args) -> int:
    fields = {}
    if args.title is not None:
        fields["title"] = args.title
    if args.artist is not None:
        fields["artist_name"] = args.artist
    if args.genre is not None:
        fields["genre_name"] = args.genre
    store.update_song(args.id, **fields)
    safe_print(f"Updated song #{args.id}", style="green")
    return 0


def cmd_song_delete(store: CatalogStore, config: config_module.Config, args) -> int:
    store.get_song(args.id)
    if not confirm("Are you sure you want to delete this song?", args.yes):
        return 0
    store.delete_song(args.id)
    safe_print(f"Deleted song #{args.id}", style="green")
    return 0


def cmd_play(store: CatalogStore, config: config_module.Config, args) -> int:
    controller = QueueController(engine=ConsoleEngine())
    controller.play_from(store.get_song(args.id), filter_songs(store, args.query))
    return 0


def cmd_play_all(store: CatalogStore, config: config_module.Config, args) -> int:
    queue = QueueController(engine=ConsoleEngine()).play_all(
        filter_songs(store, args.query)
    )
    if queue.is_empty:
        safe_print("Nothing to play", style="yellow")
    return 0


def cmd_shuffle(store: CatalogStore, config: config_module.Config, args) -> int:
    queue = QueueController(engine=ConsoleEngine()).play_shuffled(
        filter_songs(store, args.query)
    )
    if queue.is_empty:
        safe_print("Nothing to play", style="yellow")
    return 0


def cmd_resolve(store: CatalogStore, config: config_module.Config, args) -> int:
    summary = resolve_durations(
        store,
        overwrite_tags=args.tags,
        placeholder_artist=config.library.placeholder_artist,
    )
    safe_print(
        f"Checked {summary.checked} songs: {summary.updated} updated, "
        f"{summary.failed} unreadable",
        style="green",
    )
    return 0


def cmd_stats(store: CatalogStore, config: config_module.Config, args) -> int:
    stats = get_library_stats(store)
    safe_print(f"Songs:    {stats['total_songs']}")
    safe_print(f"Duration: {format_duration(stats['total_duration'])}")
    safe_print(f"Unknown durations: {stats['songs_without_duration']}")
    safe_print(f"Genres:   {stats['genres']}")
    safe_print(f"Artists:  {stats['artists']}")
    for suffix, count in sorted(stats["formats"].items()):
        safe_print(f"  {suffix}: {count}")
    return 0


COMMANDS = {
    "scan": cmd_scan,
    "songs": cmd_songs,
    "genres": cmd_genres,
    "genre-add": cmd_genre_add,
    "genre-edit": cmd_genre_edit,
    "genre-delete": cmd_genre_delete,
    "genre-songs": cmd_genre_songs,
    "song-edit": cmd_song_edit,
    "song-delete": cmd_song_delete,
    "play": cmd_play,
    "play-all": cmd_play_all,
    "shuffle": cmd_shuffle,
    "resolve": cmd_resolve,
    "stats": cmd_stats,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="songshelf",
        description="Songshelf - local audio library manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="subcommand", help="Available commands")
    subparsers.required = True

    scan_parser = subparsers.add_parser(
        "scan", help="Add new audio files to the catalog"
    )
    scan_parser.add_argument(
        "roots",
        nargs="*",
        help="Directories to scan (default: configured library paths)",
    )

    for name, what in (("songs", "songs"), ("genres", "genres")):
        list_parser = subparsers.add_parser(name, help=f"List or search {what}")
        list_parser.add_argument("query", nargs="?", default="", help="Search text")

    genre_add = subparsers.add_parser("genre-add", help="Create a genre")
    genre_add.add_argument("name")
    genre_add.add_argument("--cover", help="Cover image path")

    genre_edit = subparsers.add_parser("genre-edit", help="Rename a genre")
    genre_edit.add_argument("id", type=int)
    genre_edit.add_argument("name")
    genre_edit.add_argument("--cover", help="Cover image path")

    genre_delete = subparsers.add_parser("genre-delete", help="Delete a genre")
    genre_delete.add_argument("id", type=int)
    genre_delete.add_argument("--yes", action="store_true", help="Skip confirmation")

    genre_songs = subparsers.add_parser("genre-songs", help="Songs labelled with a genre")
    genre_songs.add_argument("id", type=int)

    song_edit = subparsers.add_parser("song-edit", help="Edit song info")
    song_edit.add_argument("id", type=int)
    song_edit.add_argument("--title")
    song_edit.add_argument("--artist")
    song_edit.add_argument("--genre")

    song_delete = subparsers.add_parser("song-delete", help="Delete a song")
    song_delete.add_argument("id", type=int)
    song_delete.add_argument("--yes", action="store_true", help="Skip confirmation")

    play = subparsers.add_parser("play", help="Play a song, then the rest of the list")
    play.add_argument("id", type=int)
    play.add_argument("query", nargs="?", default="", help="Search text for the list")

    for name, help_text in (
        ("play-all", "Play the list in order"),
        ("shuffle", "Play the list shuffled"),
    ):
        queue_parser = subparsers.add_parser(name, help=help_text)
        queue_parser.add_argument(
            "query", nargs="?", default="", help="Search text for the list"
        )

    resolve = subparsers.add_parser("resolve", help="Read durations from audio files")
    resolve.add_argument(
        "--tags", action="store_true", help="Also take title, artist and genre tags"
    )

    subparsers.add_parser("stats", help="Show library statistics")
    return parser


def run(argv: Optional[list[str]] = None) -> int:
    """Run one command and return the exit code."""
    args = build_parser().parse_args(argv)

    config = config_module.load_config()
    setup_loguru(
        config_module.get_log_file_path(config),
        level=config.logging.level,
        console_output=config.logging.console_output,
    )

    try:
        with CatalogStore(config_module.get_database_path(config)) as store:
            return COMMANDS[args.subcommand](store, config, args)
    except CatalogError as e:
        logger.warning(f"{args.subcommand} failed: {e}")
        print_error(str(e))
        return 1
    except ValueError as e:
        print_error(str(e))
        return 1


def main() -> None:
    """Main entry point for the songshelf command."""
    sys.exit(run())


if __name__ == "__main__":
    main()
