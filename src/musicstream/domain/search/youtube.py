"""
YouTube Data API v3 search.

Two requests per query: search.list finds music videos, then videos.list
fetches their durations. Results come back in search rank order.
"""

import re
from typing import Any

import requests
from loguru import logger

from musicstream.core.config import YouTubeConfig
from musicstream.domain.playback.models import Track

from .exceptions import SearchNotConfiguredError, SearchRequestError

API_BASE = "https://www.googleapis.com/youtube/v3"

_DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


def parse_iso8601_duration(value: str) -> int:
    """
    Convert a YouTube ISO-8601 duration to seconds.

    Examples:
        "PT4M13S" -> 253
        "PT1H2M" -> 3720
        "P0D" (live streams) -> 0
    """
    match = _DURATION_RE.match(value or "")
    if not match:
        return 0
    hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def _get(endpoint: str, params: dict[str, Any], config: YouTubeConfig) -> dict:
    url = f"{API_BASE}/{endpoint}"
    try:
        response = requests.get(
            url, params={**params, "key": config.api_key}, timeout=config.timeout_seconds
        )
        response.raise_for_status()
        return response.json()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logger.warning(f"YouTube {endpoint} request failed with HTTP {status}")
        raise SearchRequestError(
            f"YouTube {endpoint} request failed", status_code=status
        ) from e
    except requests.RequestException as e:
        logger.warning(f"YouTube {endpoint} request error: {e}")
        raise SearchRequestError(f"YouTube {endpoint} request error: {e}") from e
    except ValueError as e:
        raise SearchRequestError(f"YouTube {endpoint} returned invalid JSON") from e


def _thumbnail(snippet: dict[str, Any]) -> str:
    thumbnails = snippet.get("thumbnails") or {}
    for size in ("medium", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return url
    return ""


def search(query: str, config: YouTubeConfig) -> list[Track]:
    """
    Search YouTube for music videos.

    Args:
        query: Free-text search
        config: API key, result count and category

    Returns:
        Tracks in rank order (empty for a blank query)

    Raises:
        SearchNotConfiguredError: If no API key is set
        SearchRequestError: If either API call fails
    """
    query = (query or "").strip()
    if not query:
        return []
    if not config.api_key:
        raise SearchNotConfiguredError("YouTube API key is not configured")

    data = _get(
        "search",
        {
            "part": "snippet",
            "q": query,
            "type": "video",
            "videoCategoryId": config.category_id,
            "maxResults": config.max_results,
        },
        config,
    )

    items = [
        item
        for item in data.get("items", [])
        if (item.get("id") or {}).get("videoId")
    ]
    if not items:
        return []

    video_ids = [item["id"]["videoId"] for item in items]
    details = _get(
        "videos",
        {"part": "contentDetails", "id": ",".join(video_ids)},
        config,
    )
    durations = {
        video["id"]: parse_iso8601_duration(
            (video.get("contentDetails") or {}).get("duration", "")
        )
        for video in details.get("items", [])
    }

    tracks = []
    for item in items:
        video_id = item["id"]["videoId"]
        snippet = item.get("snippet") or {}
        tracks.append(
            Track(
                id=video_id,
                title=snippet.get("title", ""),
                artist=snippet.get("channelTitle", ""),
                thumbnail=_thumbnail(snippet),
                duration=durations.get(video_id, 0),
            )
        )

    logger.debug(f"YouTube search '{query}' returned {len(tracks)} tracks")
    return tracks
