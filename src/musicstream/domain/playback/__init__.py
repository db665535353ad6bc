"""Playback domain - queue controller and media player coordination.

This domain handles:
- Queue navigation with shuffle and repeat modes
- Play/pause/seek/volume state
- Driving an asynchronously-ready media player (mpv over JSON IPC)
- One-shot play history reporting
"""

from .adapter import MediaPlayer, PlayerAdapter
from .controller import PlaybackController, PlaybackListener
from .events import EndOfMedia, PlayerEvent, PlayerStatus, Ready, StateChanged
from .history import HistoryRecorder, HistoryReporter
from .models import PlaybackState, RepeatMode, Track
from .player import MpvPlayer, PlayerCommandError, check_mpv_available
from .scheduler import AsyncioScheduler, Scheduler, TaskHandle
from .session import HistorySink, PlayerSession, create_mpv_session

__all__ = [
    # Models
    "Track",
    "RepeatMode",
    "PlaybackState",
    # Controller
    "PlaybackController",
    "PlaybackListener",
    # Adapter
    "PlayerAdapter",
    "MediaPlayer",
    "PlayerEvent",
    "PlayerStatus",
    "Ready",
    "StateChanged",
    "EndOfMedia",
    # History
    "HistoryReporter",
    "HistoryRecorder",
    # Scheduling
    "Scheduler",
    "TaskHandle",
    "AsyncioScheduler",
    # mpv
    "MpvPlayer",
    "PlayerCommandError",
    "check_mpv_available",
    # Session
    "PlayerSession",
    "HistorySink",
    "create_mpv_session",
]
