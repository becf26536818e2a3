"""Playback domain - play queue construction.

This domain handles:
- Sequential queues rotated to start at the chosen song
- Shuffled queues
- Handing new queues to the external playback engine
"""

from .queue import PlaybackEngine, Queue, QueueController, rotate_to

__all__ = [
    "PlaybackEngine",
    "Queue",
    "QueueController",
    "rotate_to",
]
