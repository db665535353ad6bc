"""
Playback domain models.

Contains the track value, repeat modes and the immutable playback state
the controller transitions between.
"""

from enum import Enum
from typing import Any, NamedTuple, Optional


class Track(NamedTuple):
    """A playable track as returned by search and stored in playlists.

    `id` is the external provider (YouTube video) id. It is unique within a
    queue instance but the same video may appear in many playlists.
    """

    id: str
    title: str
    artist: str
    thumbnail: str = ""
    duration: int = 0  # seconds

    def to_dict(self) -> dict[str, Any]:
        return self._asdict()


class RepeatMode(str, Enum):
    """Repeat policy applied when advancing the queue."""

    NONE = "none"
    ALL = "all"
    ONE = "one"

    def next(self) -> "RepeatMode":
        """Cycle none -> all -> one -> none."""
        return _REPEAT_CYCLE[self]


_REPEAT_CYCLE = {
    RepeatMode.NONE: RepeatMode.ALL,
    RepeatMode.ALL: RepeatMode.ONE,
    RepeatMode.ONE: RepeatMode.NONE,
}


class PlaybackState(NamedTuple):
    """Immutable controller state.

    shuffle_order holds the queue indices not yet played in the current
    shuffle pass, consumed front to back. It is empty when shuffle is off.
    """

    current_track: Optional[Track] = None
    is_playing: bool = False
    queue: tuple[Track, ...] = ()
    current_index: int = 0
    shuffle: bool = False
    shuffle_order: tuple[int, ...] = ()
    repeat: RepeatMode = RepeatMode.NONE
    volume: int = 70

    @property
    def has_current(self) -> bool:
        return self.current_track is not None and len(self.queue) > 0

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view for API responses."""
        return {
            "current_track": self.current_track.to_dict() if self.current_track else None,
            "is_playing": self.is_playing,
            "queue": [track.to_dict() for track in self.queue],
            "current_index": self.current_index,
            "shuffle": self.shuffle,
            "repeat": self.repeat.value,
            "volume": self.volume,
        }
