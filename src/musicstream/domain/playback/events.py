"""Inbound media player events consumed by the PlayerAdapter."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union


class PlayerStatus(IntEnum):
    """Player states, numbered like the YouTube IFrame API."""

    UNSTARTED = -1
    ENDED = 0
    PLAYING = 1
    PAUSED = 2
    BUFFERING = 3
    CUED = 5


@dataclass(frozen=True)
class Ready:
    """The player finished its asynchronous initialization."""


@dataclass(frozen=True)
class StateChanged:
    """The player moved to a new status."""

    status: PlayerStatus


@dataclass(frozen=True)
class EndOfMedia:
    """The loaded media played to its natural end."""


PlayerEvent = Union[Ready, StateChanged, EndOfMedia]
