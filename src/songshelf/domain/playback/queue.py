"""Playback queue construction.

Turns a play request on a list of songs (usually the currently visible,
possibly filtered list) into the ordered queue handed to the playback
engine. Advancing, repeating and skipping belong to the engine.
"""

import random
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol, Sequence

from loguru import logger

from songshelf.domain.library.models import Song


@dataclass(frozen=True)
class Queue:
    """An ordered, immutable play sequence."""

    songs: tuple[Song, ...] = ()
    shuffled: bool = False

    def __len__(self) -> int:
        return len(self.songs)

    def __iter__(self) -> Iterator[Song]:
        return iter(self.songs)

    @property
    def is_empty(self) -> bool:
        return not self.songs

    @property
    def first(self) -> Optional[Song]:
        return self.songs[0] if self.songs else None


class PlaybackEngine(Protocol):
    def start(self, queue: Queue) -> None: ...


def rotate_to(song: Song, context: Sequence[Song]) -> list[Song]:
    """Reorder context to start at song, keeping the others' relative order.

    The song is located by id. If it isn't in context it is put in front of
    the unchanged list.
    """
    for index, candidate in enumerate(context):
        if candidate.id == song.id:
            return list(context[index:]) + list(context[:index])
    return [song] + list(context)


class QueueController:
    """Builds queues from play requests and hands them to the engine.

    Args:
        engine: Playback engine that receives every new non-empty queue
        rng: Random source for shuffling (default: a fresh random.Random)
    """

    def __init__(
        self,
        engine: Optional[PlaybackEngine] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.engine = engine
        self.rng = rng or random.Random()
        self.current: Optional[Queue] = None

    def _start(self, queue: Queue) -> Queue:
        self.current = queue
        logger.info(
            f"Starting {'shuffled ' if queue.shuffled else ''}queue of "
            f"{len(queue)} songs at #{queue.first.id} {queue.first.title}"
        )
        if self.engine is not None:
            self.engine.start(queue)
        return queue

    def play_from(self, song: Song, context: Sequence[Song]) -> Queue:
        """Play song, then the rest of context in order, wrapping around."""
        return self._start(Queue(songs=tuple(rotate_to(song, context))))

    def play_all(self, context: Sequence[Song]) -> Queue:
        """Play context from its first song. Empty context does nothing."""
        if not context:
            return Queue()
        return self.play_from(context[0], context)

    def play_shuffled(self, context: Sequence[Song]) -> Queue:
        """Play a uniformly random permutation of context.

        The caller's sequence is not modified. Empty context does nothing.
        """
        if not context:
            return Queue(shuffled=True)
        songs = list(context)
        self.rng.shuffle(songs)
        return self._start(Queue(songs=tuple(songs), shuffled=True))
