"""
Recently played history.

Every reported playback appends a row; listing returns the newest rows
first, capped at the configured limit.
"""

import uuid
from typing import Any

from loguru import logger

from musicstream.core.database import get_db_connection
from musicstream.domain.playback.models import Track
from musicstream.domain.playlists.crud import validate_track

DEFAULT_RECENT_LIMIT = 20


def add_recently_played(user_id: str, track: Track) -> dict[str, Any]:
    """Record that a user started playing a track.

    Raises:
        ValidationError: If the track is incomplete
    """
    validate_track(track, require_media=False)
    entry_id = str(uuid.uuid4())
    with get_db_connection() as conn:
        conn.execute(
            """
            INSERT INTO recently_played
                (id, user_id, youtube_id, title, artist, thumbnail, duration)
            VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
            (
                entry_id,
                user_id,
                track.id,
                track.title,
                track.artist,
                track.thumbnail,
                track.duration,
            ),
        )
        conn.commit()
        cursor = conn.execute("SELECT * FROM recently_played WHERE id = ?", (entry_id,))
        row = dict(cursor.fetchone())

    logger.debug(f"Recorded play of {track.id} for user {user_id}")
    return row


def get_recently_played(
    user_id: str, limit: int = DEFAULT_RECENT_LIMIT
) -> list[dict[str, Any]]:
    """Get a user's most recent plays, newest first."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            """
            SELECT * FROM recently_played
            WHERE user_id = ?
            ORDER BY played_at DESC, rowid DESC
            LIMIT ?
        """,
            (user_id, limit),
        )
        return [dict(row) for row in cursor.fetchall()]
