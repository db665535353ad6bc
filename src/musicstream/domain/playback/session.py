"""
PlayerSession - composition root for one playback session.

Builds the controller, history reporter and adapter and wires them
together explicitly, so consumers receive the session by reference instead
of looking up global player state.
"""

import random
from typing import Any, Callable, Optional

from loguru import logger

from .adapter import DEFAULT_POLL_INTERVAL, MediaPlayer, PlayerAdapter
from .controller import PlaybackController
from .history import HistoryReporter
from .models import PlaybackState, Track
from .player import MpvPlayer
from .scheduler import Scheduler, TaskHandle

# (user_id, track) -> persist a recently-played row
HistorySink = Callable[[str, Track], None]


class PlayerSession:
    """Controller + adapter + reporter for a single listener."""

    def __init__(
        self,
        player: MediaPlayer,
        scheduler: Scheduler,
        history_sink: Optional[HistorySink] = None,
        volume: int = 70,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        rng: Optional[random.Random] = None,
    ):
        self.player = player
        self.scheduler = scheduler
        self.listener_user_id: Optional[str] = None
        self._history_sink = history_sink
        self._pump_handle: Optional[TaskHandle] = None

        self.controller = PlaybackController(PlaybackState(volume=volume), rng=rng)
        self.reporter = HistoryReporter(self._record_history)
        self.adapter = PlayerAdapter(
            self.controller,
            player,
            self.reporter,
            scheduler,
            poll_interval=poll_interval,
        )
        self.adapter.attach()

    def _record_history(self, track: Track) -> None:
        if self._history_sink is None:
            return
        if self.listener_user_id is None:
            logger.debug(f"No listener for session, skipping history for {track.id}")
            return
        self._history_sink(self.listener_user_id, track)

    def set_muted(self, muted: bool) -> None:
        self.adapter.set_muted(muted)

    def toggle_mute(self) -> bool:
        self.adapter.set_muted(not self.adapter.muted)
        return self.adapter.muted

    def snapshot(self) -> dict[str, Any]:
        """Controller state plus the adapter's display mirrors."""
        data = self.controller.state.to_dict()
        data.update(
            current_time=self.adapter.current_time,
            duration=self.adapter.duration,
            muted=self.adapter.muted,
            player_ready=self.adapter.ready,
        )
        return data

    def start_pump(self, pump: Callable[[], Any], interval: float) -> None:
        """Drive a polling player's event pump on the session scheduler."""
        if self._pump_handle is None or not self._pump_handle.active:
            self._pump_handle = self.scheduler.call_every(interval, pump)

    def close(self) -> None:
        self.adapter.close()
        if self._pump_handle is not None:
            self._pump_handle.cancel()
            self._pump_handle = None
        stop = getattr(self.player, "stop", None)
        if callable(stop):
            stop()


def create_mpv_session(
    scheduler: Scheduler,
    history_sink: Optional[HistorySink] = None,
    socket_path: Optional[str] = None,
    volume: int = 70,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> PlayerSession:
    """Session backed by a local mpv process.

    mpv is spawned immediately; its readiness arrives later through
    pump_async(), which keeps socket I/O off the event loop.
    """
    player = MpvPlayer(socket_path=socket_path, volume=volume)
    session = PlayerSession(
        player,
        scheduler,
        history_sink=history_sink,
        volume=volume,
        poll_interval=poll_interval,
    )
    player.on_event = session.adapter.handle
    if player.start():
        session.start_pump(player.pump_async, poll_interval)
    return session
