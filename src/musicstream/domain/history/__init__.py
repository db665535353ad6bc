"""History domain - recently played tracks per user."""

from .crud import DEFAULT_RECENT_LIMIT, add_recently_played, get_recently_played

__all__ = ["DEFAULT_RECENT_LIMIT", "add_recently_played", "get_recently_played"]
