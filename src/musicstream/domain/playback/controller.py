"""
PlaybackController - owns the playback state and tells listeners about it.

Thin stateful wrapper around the pure transitions in state.py. The
controller never references the media player; the PlayerAdapter subscribes
as a listener and derives player commands from the state it is handed.
"""

import random
from typing import Optional, Protocol, Sequence

from loguru import logger

from . import state as transitions
from .models import PlaybackState, RepeatMode, Track


class PlaybackListener(Protocol):
    """Receives every state change and seek request from the controller."""

    def on_state_changed(self, previous: PlaybackState, current: PlaybackState) -> None:
        ...

    def on_seek(self, seconds: float) -> None:
        ...


class PlaybackController:
    """Queue and play-state owner driven from a single event context.

    Operations are synchronous and never raise. Listener failures are
    logged and do not roll back the new state.
    """

    def __init__(
        self,
        initial_state: Optional[PlaybackState] = None,
        rng: Optional[random.Random] = None,
    ):
        self._state = initial_state or PlaybackState()
        self._rng = rng
        self._listeners: list[PlaybackListener] = []

    @property
    def state(self) -> PlaybackState:
        return self._state

    # Convenience accessors mirroring the state fields
    @property
    def current_track(self) -> Optional[Track]:
        return self._state.current_track

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    @property
    def queue(self) -> tuple[Track, ...]:
        return self._state.queue

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def shuffle(self) -> bool:
        return self._state.shuffle

    @property
    def repeat(self) -> RepeatMode:
        return self._state.repeat

    @property
    def volume(self) -> int:
        return self._state.volume

    def subscribe(self, listener: PlaybackListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: PlaybackListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _commit(self, new_state: PlaybackState) -> None:
        previous, self._state = self._state, new_state
        for listener in list(self._listeners):
            try:
                listener.on_state_changed(previous, new_state)
            except Exception:
                logger.exception(f"Playback listener {listener!r} failed on state change")

    # Operations

    def play(self, track: Track, queue: Optional[Sequence[Track]] = None) -> None:
        logger.debug(
            f"play: track={track.id} queue={'given' if queue is not None else 'kept'}"
        )
        self._commit(transitions.play(self._state, track, queue, rng=self._rng))

    def pause(self) -> None:
        self._commit(transitions.pause(self._state))

    def resume(self) -> None:
        self._commit(transitions.resume(self._state))

    def toggle_play(self) -> None:
        if self._state.is_playing:
            self.pause()
        else:
            self.resume()

    def play_next(self) -> None:
        self._commit(transitions.play_next(self._state, rng=self._rng))

    def play_previous(self) -> None:
        self._commit(transitions.play_previous(self._state))

    def add_to_queue(self, track: Track) -> None:
        self._commit(transitions.add_to_queue(self._state, track, rng=self._rng))

    def clear_queue(self) -> None:
        self._commit(transitions.clear_queue(self._state))

    def toggle_shuffle(self) -> None:
        self._commit(transitions.toggle_shuffle(self._state, rng=self._rng))

    def toggle_repeat(self) -> None:
        self._commit(transitions.toggle_repeat(self._state))

    def set_volume(self, volume: int) -> None:
        self._commit(transitions.set_volume(self._state, volume))

    def seek_to(self, seconds: float) -> None:
        """Ask listeners to reposition playback; state is unchanged."""
        position = transitions.clamp_seek_position(seconds)
        for listener in list(self._listeners):
            try:
                listener.on_seek(position)
            except Exception:
                logger.exception(f"Playback listener {listener!r} failed on seek")
