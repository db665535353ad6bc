"""musicstream - YouTube-backed music streaming with accounts, playlists and a playback queue."""

__version__ = "1.0.0"
