"""Search domain - finding playable tracks on YouTube."""

from .exceptions import SearchError, SearchNotConfiguredError, SearchRequestError
from .youtube import parse_iso8601_duration, search

__all__ = [
    "SearchError",
    "SearchNotConfiguredError",
    "SearchRequestError",
    "parse_iso8601_duration",
    "search",
]
