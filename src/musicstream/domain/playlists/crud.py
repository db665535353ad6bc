"""
Playlist management for musicstream
Functional approach with explicit ownership checks
"""

import uuid
from typing import Any, Optional

from loguru import logger

from musicstream.core.database import get_db_connection
from musicstream.core.exceptions import (
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from musicstream.domain.playback.models import Track

# Columns callers may change through update_playlist
UPDATABLE_FIELDS = ("name", "description", "cover_url", "is_public")


def _playlist_from_row(row) -> dict[str, Any]:
    playlist = dict(row)
    playlist["is_public"] = bool(playlist["is_public"])
    return playlist


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Playlist name is required")
    return name


def validate_track(track: Track, require_media: bool = True) -> Track:
    """
    Check a client-supplied track before storing it.

    Args:
        track: Track to check
        require_media: Also require a thumbnail URL and a positive duration.
            Played tracks (live streams, search hits without artwork) may
            have neither, so history passes False.

    Raises:
        ValidationError: If a text field is blank, the thumbnail is not an
            http(s) URL or the duration is out of range
    """
    for field_name in ("id", "title", "artist"):
        if not (getattr(track, field_name) or "").strip():
            raise ValidationError(f"Track {field_name} is required")

    if track.thumbnail or require_media:
        if not track.thumbnail.startswith(("http://", "https://")):
            raise ValidationError("Track thumbnail must be a URL")
    if track.duration < 0 or (require_media and track.duration == 0):
        raise ValidationError("Track duration must be positive")
    return track


def track_from_row(row) -> Track:
    """Build a playable Track from a playlist_tracks or recently_played row."""
    return Track(
        id=row["youtube_id"],
        title=row["title"],
        artist=row["artist"],
        thumbnail=row["thumbnail"],
        duration=row["duration"],
    )


def create_playlist(
    user_id: str,
    name: str,
    description: Optional[str] = None,
    cover_url: Optional[str] = None,
    is_public: bool = False,
) -> dict[str, Any]:
    """
    Create a new playlist owned by a user.

    Args:
        user_id: Owner
        name: Non-empty playlist name
        description: Optional description
        cover_url: Optional cover image URL
        is_public: Whether other users may view it

    Returns:
        The created playlist

    Raises:
        ValidationError: If the name is empty
    """
    name = _clean_name(name)
    playlist_id = str(uuid.uuid4())

    with get_db_connection() as conn:
        conn.execute(
            """
            INSERT INTO playlists (id, user_id, name, description, cover_url, is_public)
            VALUES (?, ?, ?, ?, ?, ?)
        """,
            (playlist_id, user_id, name, description, cover_url, int(is_public)),
        )
        conn.commit()

    logger.info(f"Created playlist '{name}' ({playlist_id}) for user {user_id}")
    return get_playlist_by_id(playlist_id)


def get_playlist_by_id(playlist_id: str) -> Optional[dict[str, Any]]:
    with get_db_connection() as conn:
        cursor = conn.execute("SELECT * FROM playlists WHERE id = ?", (playlist_id,))
        row = cursor.fetchone()
        return _playlist_from_row(row) if row else None


def get_user_playlists(user_id: str) -> list[dict[str, Any]]:
    """Get a user's playlists, newest first."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            """
            SELECT * FROM playlists
            WHERE user_id = ?
            ORDER BY created_at DESC, rowid DESC
        """,
            (user_id,),
        )
        return [_playlist_from_row(row) for row in cursor.fetchall()]


def get_viewable_playlist(playlist_id: str, user_id: str) -> dict[str, Any]:
    """
    Fetch a playlist the user may read: their own, or any public one.

    Raises:
        NotFoundError: If the playlist does not exist
        PermissionDeniedError: If it is private and owned by someone else
    """
    playlist = get_playlist_by_id(playlist_id)
    if not playlist:
        raise NotFoundError("Playlist not found")
    if playlist["user_id"] != user_id and not playlist["is_public"]:
        raise PermissionDeniedError("Access denied")
    return playlist


def get_owned_playlist(playlist_id: str, user_id: str) -> dict[str, Any]:
    """
    Fetch a playlist the user may modify.

    Raises:
        NotFoundError: If the playlist does not exist
        PermissionDeniedError: If the user is not the owner
    """
    playlist = get_playlist_by_id(playlist_id)
    if not playlist:
        raise NotFoundError("Playlist not found")
    if playlist["user_id"] != user_id:
        raise PermissionDeniedError("Access denied")
    return playlist


def update_playlist(playlist_id: str, **fields: Any) -> Optional[dict[str, Any]]:
    """
    Update playlist fields. Only provided (non-None) fields change.

    Returns:
        Updated playlist, or None if it does not exist

    Raises:
        ValidationError: If name is provided but empty, or a field is unknown
    """
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    updates = {key: value for key, value in fields.items() if value is not None}
    if "name" in updates:
        updates["name"] = _clean_name(updates["name"])
    if "is_public" in updates:
        updates["is_public"] = int(bool(updates["is_public"]))

    assignments = "".join(f"{column} = ?, " for column in updates)
    with get_db_connection() as conn:
        cursor = conn.execute(
            f"UPDATE playlists SET {assignments}updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (*updates.values(), playlist_id),
        )
        conn.commit()
        if cursor.rowcount == 0:
            return None

    return get_playlist_by_id(playlist_id)


def touch_playlist(playlist_id: str) -> None:
    """Bump updated_at after the track list changes."""
    with get_db_connection() as conn:
        conn.execute(
            "UPDATE playlists SET updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (playlist_id,),
        )
        conn.commit()


def delete_playlist(playlist_id: str) -> bool:
    """Delete a playlist and its tracks. Returns True if it existed."""
    with get_db_connection() as conn:
        cursor = conn.execute("DELETE FROM playlists WHERE id = ?", (playlist_id,))
        conn.commit()
        deleted = cursor.rowcount > 0

    if deleted:
        logger.info(f"Deleted playlist {playlist_id}")
    return deleted


def get_playlist_tracks(playlist_id: str) -> list[dict[str, Any]]:
    """Get a playlist's tracks in position order."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            """
            SELECT * FROM playlist_tracks
            WHERE playlist_id = ?
            ORDER BY position ASC, added_at ASC
        """,
            (playlist_id,),
        )
        return [dict(row) for row in cursor.fetchall()]


def add_track_to_playlist(
    playlist_id: str, track: Track, position: Optional[int] = None
) -> dict[str, Any]:
    """
    Append a track to a playlist.

    Args:
        playlist_id: Target playlist
        track: Track to store (track.id is the YouTube video id)
        position: Explicit position, defaults to one past the current maximum

    Returns:
        The stored playlist track row

    Raises:
        ValidationError: If the track is incomplete
    """
    validate_track(track)
    track_row_id = str(uuid.uuid4())

    with get_db_connection() as conn:
        if position is None:
            cursor = conn.execute(
                "SELECT MAX(position) AS max_pos FROM playlist_tracks WHERE playlist_id = ?",
                (playlist_id,),
            )
            max_pos = cursor.fetchone()["max_pos"]
            position = 0 if max_pos is None else max_pos + 1

        conn.execute(
            """
            INSERT INTO playlist_tracks
                (id, playlist_id, youtube_id, title, artist, thumbnail, duration, position)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                track_row_id,
                playlist_id,
                track.id,
                track.title,
                track.artist,
                track.thumbnail,
                track.duration,
                position,
            ),
        )
        conn.execute(
            "UPDATE playlists SET updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (playlist_id,),
        )
        conn.commit()

        cursor = conn.execute(
            "SELECT * FROM playlist_tracks WHERE id = ?", (track_row_id,)
        )
        row = dict(cursor.fetchone())

    logger.debug(f"Added {track.id} to playlist {playlist_id} at position {position}")
    return row


def remove_track_from_playlist(playlist_id: str, track_row_id: str) -> bool:
    """
    Remove one stored track from a playlist.

    The row must belong to the given playlist; otherwise nothing is removed.

    Returns:
        True if a row was removed
    """
    with get_db_connection() as conn:
        cursor = conn.execute(
            "DELETE FROM playlist_tracks WHERE id = ? AND playlist_id = ?",
            (track_row_id, playlist_id),
        )
        removed = cursor.rowcount > 0
        if removed:
            conn.execute(
                "UPDATE playlists SET updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (playlist_id,),
            )
        conn.commit()

    return removed
