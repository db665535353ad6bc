"""
HistoryReporter - records a track as played once per load.
"""

from typing import Callable, Optional

from loguru import logger

from .models import Track

HistoryRecorder = Callable[[Track], None]


class HistoryReporter:
    """One-shot "track started" side effect.

    The adapter re-arms the reporter when a new track is loaded or the
    current one ends; pause/resume of the same load never re-fires it.
    """

    def __init__(self, recorder: HistoryRecorder):
        self._recorder = recorder
        self.reported = False

    def reset(self) -> None:
        self.reported = False

    def on_playing(self, track: Optional[Track]) -> bool:
        """Record the track if this load has not been reported yet.

        Returns:
            True if the recorder was invoked
        """
        if self.reported or track is None:
            return False

        # Marked before recording so a failing recorder is not retried on every resume
        self.reported = True
        try:
            self._recorder(track)
            logger.debug(f"Recorded play of {track.id} ({track.title})")
        except Exception:
            logger.exception(f"Failed to record play history for track {track.id}")
        return True
