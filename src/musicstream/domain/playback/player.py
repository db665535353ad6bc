"""
MPV media player over JSON IPC.

mpv runs as a child process in idle mode and plays YouTube ids through its
yt-dlp hook. Startup is asynchronous: the IPC socket appears some time after
the process is spawned. pump_async() is called periodically from the event
loop; it reads mpv properties in a worker thread, then emits Ready once the
socket answers and afterwards translates those properties into player events
back on the loop. Position and duration are served from the last read, so
queries never block.
"""

import asyncio
import json
import os
import socket
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from .events import EndOfMedia, PlayerEvent, PlayerStatus, Ready, StateChanged

YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

# Log once if mpv has not answered after this long; playback stays deferred
READY_WARNING_SECONDS = 10.0

# Properties read on every pump once media is loaded
POLLED_PROPERTIES = (
    "eof-reached",
    "idle-active",
    "pause",
    "core-idle",
    "time-pos",
    "duration",
)


class PlayerCommandError(Exception):
    """Raised when mpv rejects or cannot receive a command."""

    pass


def check_mpv_available() -> bool:
    """Check if MPV is available on the system."""
    try:
        result = subprocess.run(
            ["mpv", "--version"], capture_output=True, text=True, timeout=5
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


def default_socket_path() -> str:
    return str(Path(tempfile.gettempdir()) / f"musicstream-mpv-{os.getpid()}")


def send_mpv_command(socket_path: Optional[str], command: dict[str, Any]) -> bool:
    """Send JSON IPC command to MPV."""
    if not socket_path or not os.path.exists(socket_path):
        return False

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(2.0)
        sock.connect(socket_path)

        command_json = json.dumps(command) + "\n"
        sock.send(command_json.encode("utf-8"))

        response = sock.recv(4096).decode("utf-8").strip()
        sock.close()

        if response:
            try:
                # mpv may interleave event lines; the reply is the one with "error"
                for line in response.splitlines():
                    data = json.loads(line)
                    if "error" in data:
                        return data["error"] == "success"
            except json.JSONDecodeError:
                return False

        return True

    except (socket.error, OSError):
        return False


def get_mpv_property(socket_path: Optional[str], property_name: str) -> Any:
    """Get a property value from MPV."""
    if not socket_path or not os.path.exists(socket_path):
        return None

    try:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(2.0)
        sock.connect(socket_path)

        command = {"command": ["get_property", property_name]}
        sock.send((json.dumps(command) + "\n").encode("utf-8"))

        response = sock.recv(4096).decode("utf-8").strip()
        sock.close()

        for line in response.splitlines():
            try:
                data = json.loads(line)
            except json.JSONDecodeError:
                continue
            if "error" in data:
                return data.get("data") if data["error"] == "success" else None

        return None

    except (socket.error, OSError):
        return None


class MpvPlayer:
    """MediaPlayer implementation driving a local mpv process.

    Commands raise PlayerCommandError on failure; the adapter contains them.
    """

    def __init__(
        self,
        socket_path: Optional[str] = None,
        volume: int = 70,
        on_event: Optional[Callable[[PlayerEvent], None]] = None,
    ):
        self.socket_path = socket_path or default_socket_path()
        self.volume = volume
        self.on_event = on_event

        self.process: Optional[subprocess.Popen] = None
        self.ready = False
        self._started_at: Optional[float] = None
        self._ready_warning_logged = False
        self._media_loaded = False
        self._last_status: Optional[PlayerStatus] = None
        self._end_reported = False
        # Bumped on every load so a read taken before it is discarded
        self._load_generation = 0
        self._time_pos = 0.0
        self._duration = 0.0

    # Lifecycle

    def start(self) -> bool:
        """Spawn mpv without waiting for its socket; pump() detects readiness."""
        if self.process is not None:
            return True

        logger.info(f"Starting MPV player with socket: {self.socket_path}")

        try:
            if os.path.exists(self.socket_path):
                logger.debug(f"Removing existing socket: {self.socket_path}")
                os.unlink(self.socket_path)

            cmd = [
                "mpv",
                "--idle=yes",
                "--no-video",
                "--no-terminal",
                f"--input-ipc-server={self.socket_path}",
                f"--volume={self.volume}",
                "--keep-open=yes",
                "--load-scripts=no",
                "--ytdl-format=bestaudio/best",
            ]
            self.process = subprocess.Popen(
                cmd,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                stdin=subprocess.DEVNULL,
            )
            self._started_at = time.time()
            return True
        except (subprocess.SubprocessError, OSError) as e:
            logger.error(f"Failed to start MPV: {e}")
            return False

    def stop(self) -> None:
        """Stop MPV process and cleanup."""
        if self.process:
            try:
                self.process.kill()
                self.process.wait(timeout=2.0)
            except (OSError, subprocess.TimeoutExpired):
                pass  # Process already terminated or couldn't be killed
            self.process = None

        if os.path.exists(self.socket_path):
            try:
                os.unlink(self.socket_path)
            except OSError:
                pass

    def is_running(self) -> bool:
        if not self.process or self.process.poll() is not None:
            return False
        return os.path.exists(self.socket_path)

    # Event pump

    def _emit(self, event: PlayerEvent) -> None:
        if self.on_event is not None:
            self.on_event(event)

    def pump(self) -> None:
        """Poll mpv once and emit whatever events changed since last call."""
        self._apply(self._read())

    async def pump_async(self) -> None:
        """pump() with the blocking IPC round trips moved off the event loop."""
        snapshot = await asyncio.to_thread(self._read)
        self._apply(snapshot)

    def _read(self) -> dict[str, Any]:
        """Blocking property reads for one pump. Safe to run in a worker thread."""
        snapshot: dict[str, Any] = {"generation": self._load_generation}
        if not self.ready:
            snapshot["running"] = self.is_running()
            if snapshot["running"]:
                snapshot["idle-active"] = get_mpv_property(self.socket_path, "idle-active")
            return snapshot

        if self._media_loaded:
            for name in POLLED_PROPERTIES:
                snapshot[name] = get_mpv_property(self.socket_path, name)
        return snapshot

    def _apply(self, snapshot: dict[str, Any]) -> None:
        if not self.ready:
            if not snapshot.get("running") or snapshot.get("idle-active") is None:
                self._warn_if_slow()
                return
            self.ready = True
            logger.info("MPV started successfully")
            self._emit(Ready())
            return

        if not self._media_loaded or snapshot["generation"] != self._load_generation:
            return
        if "eof-reached" not in snapshot:
            return

        self._time_pos = float(snapshot["time-pos"] or 0.0)
        if snapshot["duration"]:
            self._duration = float(snapshot["duration"])

        if snapshot["eof-reached"]:
            if not self._end_reported:
                self._end_reported = True
                self._last_status = PlayerStatus.ENDED
                self._emit(EndOfMedia())
            return

        status = self._status_from(snapshot)
        if status is not None and status != self._last_status:
            self._last_status = status
            self._emit(StateChanged(status))

    def _warn_if_slow(self) -> None:
        if (
            self._started_at is not None
            and not self._ready_warning_logged
            and time.time() - self._started_at > READY_WARNING_SECONDS
        ):
            self._ready_warning_logged = True
            logger.warning(
                f"MPV not ready after {READY_WARNING_SECONDS:.0f}s; playback commands stay deferred"
            )

    @staticmethod
    def _status_from(snapshot: dict[str, Any]) -> Optional[PlayerStatus]:
        if snapshot["idle-active"]:
            return PlayerStatus.UNSTARTED
        paused = snapshot["pause"]
        if paused is None:
            return None
        if paused:
            return PlayerStatus.PAUSED
        # core-idle is true while the stream is still being resolved or buffered
        if snapshot["core-idle"]:
            return PlayerStatus.BUFFERING
        return PlayerStatus.PLAYING

    # MediaPlayer commands

    def _send(self, *command: Any) -> None:
        if not send_mpv_command(self.socket_path, {"command": list(command)}):
            raise PlayerCommandError(f"mpv command failed: {command!r}")

    def load_track_by_id(self, track_id: str) -> None:
        url = YOUTUBE_WATCH_URL.format(video_id=track_id)
        self._send("loadfile", url, "replace")
        self._media_loaded = True
        self._end_reported = False
        self._last_status = None
        self._load_generation += 1
        self._time_pos = 0.0
        self._duration = 0.0

    def play(self) -> None:
        self._send("set_property", "pause", False)

    def pause(self) -> None:
        self._send("set_property", "pause", True)

    def seek_to(self, seconds: float) -> None:
        self._send("seek", float(seconds), "absolute")
        # Seeking back from the end clears eof-reached in keep-open mode
        self._end_reported = False

    def set_volume(self, volume: int) -> None:
        self.volume = volume
        self._send("set_property", "volume", volume)

    def get_current_time(self) -> float:
        return self._time_pos

    def get_duration(self) -> float:
        return self._duration
