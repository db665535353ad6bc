"""
PlayerAdapter - bridges PlaybackController state to an external media player.

The player becomes ready asynchronously and reports status changes out of
band. The adapter turns controller state into player commands and player
events back into controller actions:

- track change   -> load_track_by_id, progress reset, history re-armed
- is_playing     -> play / pause
- volume / mute  -> set_volume
- PLAYING status -> duration mirror, history report, progress polling
- end of media   -> controller.play_next()

Nothing is queued while the player is not ready. When Ready arrives the
adapter re-derives every command from the current controller state.
"""

from typing import Any, Optional, Protocol

from loguru import logger

from .controller import PlaybackController
from .events import EndOfMedia, PlayerEvent, PlayerStatus, Ready, StateChanged
from .history import HistoryReporter
from .models import PlaybackState
from .scheduler import Scheduler, TaskHandle

DEFAULT_POLL_INTERVAL = 0.1  # seconds


class MediaPlayer(Protocol):
    """Commands the adapter issues to the external player."""

    def load_track_by_id(self, track_id: str) -> None:
        ...

    def play(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def seek_to(self, seconds: float) -> None:
        ...

    def set_volume(self, volume: int) -> None:
        ...

    def get_current_time(self) -> float:
        ...

    def get_duration(self) -> float:
        ...


class PlayerAdapter:
    """Single-writer owner of the media player handle."""

    def __init__(
        self,
        controller: PlaybackController,
        player: MediaPlayer,
        reporter: HistoryReporter,
        scheduler: Scheduler,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self._controller = controller
        self._player = player
        self._reporter = reporter
        self._scheduler = scheduler
        self._poll_interval = poll_interval

        self.ready = False
        self.closed = False
        self.muted = False
        self.current_time = 0.0
        self.duration = 0.0

        self._loaded_track_id: Optional[str] = None
        self._poll_handle: Optional[TaskHandle] = None

    @property
    def loaded_track_id(self) -> Optional[str]:
        return self._loaded_track_id

    @property
    def polling(self) -> bool:
        return self._poll_handle is not None and self._poll_handle.active

    def attach(self) -> None:
        """Start listening to controller changes."""
        self._controller.subscribe(self)

    def close(self) -> None:
        """Tear down: stop polling, stop listening, ignore later events."""
        if self.closed:
            return
        self.closed = True
        self._stop_polling()
        self._controller.unsubscribe(self)
        logger.debug("Player adapter closed")

    # Inbound player events

    def handle(self, event: PlayerEvent) -> None:
        """Single entry point for events coming from the player."""
        if self.closed:
            return

        if isinstance(event, Ready):
            self._on_ready()
        elif isinstance(event, StateChanged):
            self._on_status(event.status)
        elif isinstance(event, EndOfMedia):
            self._stop_polling()
            self._on_end_of_media()
        else:
            logger.warning(f"Ignoring unknown player event: {event!r}")

    def _on_ready(self) -> None:
        if self.ready:
            return
        self.ready = True
        logger.info("Media player ready")
        self._sync(None, self._controller.state)

    def _on_status(self, status: PlayerStatus) -> None:
        if status == PlayerStatus.PLAYING:
            duration = self._query("get_duration")
            if duration:
                self.duration = duration

            track = self._controller.current_track
            if track is not None and track.id == self._loaded_track_id:
                self._reporter.on_playing(track)

            self._start_polling()
        elif status == PlayerStatus.ENDED:
            self._stop_polling()
            self._on_end_of_media()
        else:
            self._stop_polling()

    def _on_end_of_media(self) -> None:
        self._reporter.reset()
        finished_id = self._loaded_track_id

        self._controller.play_next()

        # repeat one (or a one-track repeat all) lands on the same id, so no
        # load happens; restart the media instead
        state = self._controller.state
        if (
            state.is_playing
            and state.current_track is not None
            and state.current_track.id == finished_id
            and self.ready
        ):
            self.current_time = 0.0
            self._command("seek_to", 0.0)
            self._command("play")

    # Controller listener

    def on_state_changed(self, previous: PlaybackState, current: PlaybackState) -> None:
        if self.closed or not self.ready:
            # Dropped; Ready re-syncs from whatever the state is by then
            return
        self._sync(previous, current)

    def on_seek(self, seconds: float) -> None:
        if self.closed or not self.ready:
            return
        self.current_time = seconds
        self._command("seek_to", seconds)

    def set_muted(self, muted: bool) -> None:
        """Local mute; controller volume is left alone."""
        if self.muted == muted:
            return
        self.muted = muted
        if self.ready and not self.closed:
            self._apply_volume(self._controller.state)

    # Reactions

    def _sync(self, previous: Optional[PlaybackState], current: PlaybackState) -> None:
        full = previous is None

        # Load first so play/pause never targets the previous track
        track_changed = self._apply_track(current)

        if full or track_changed or previous.is_playing != current.is_playing:
            self._apply_play_state(current)

        if full or previous.volume != current.volume:
            self._apply_volume(current)

    def _apply_track(self, state: PlaybackState) -> bool:
        track = state.current_track
        if track is None or track.id == self._loaded_track_id:
            return False

        # Re-arm history before the load so the new track is never missed
        self._reporter.reset()
        self.current_time = 0.0
        self.duration = float(track.duration)

        if self._command("load_track_by_id", track.id):
            self._loaded_track_id = track.id
            logger.info(f"Loaded track {track.id}: {track.artist} - {track.title}")
            return True
        return False

    def _apply_play_state(self, state: PlaybackState) -> None:
        if state.current_track is None:
            return
        if state.is_playing:
            self._command("play")
        else:
            self._command("pause")

    def _apply_volume(self, state: PlaybackState) -> None:
        self._command("set_volume", 0 if self.muted else state.volume)

    # Progress polling

    def _start_polling(self) -> None:
        if self.polling:
            return
        self._poll_handle = self._scheduler.call_every(
            self._poll_interval, self._poll_tick
        )

    def _stop_polling(self) -> None:
        if self._poll_handle is not None:
            self._poll_handle.cancel()
            self._poll_handle = None

    def _poll_tick(self) -> None:
        if self.closed:
            return
        position = self._query("get_current_time")
        if position is not None:
            self.current_time = position

    # Guarded player access

    def _command(self, name: str, *args: Any) -> bool:
        """Issue a player command; failures are logged and dropped."""
        if self.closed:
            return False
        try:
            getattr(self._player, name)(*args)
            return True
        except Exception:
            logger.exception(f"Player command {name}{args!r} failed")
            return False

    def _query(self, name: str) -> Optional[float]:
        if self.closed:
            return None
        try:
            value = getattr(self._player, name)()
        except Exception:
            logger.exception(f"Player query {name} failed")
            return None
        try:
            return float(value) if value is not None else None
        except (TypeError, ValueError):
            logger.warning(f"Player query {name} returned non-numeric {value!r}")
            return None
