"""Playlists domain - user-owned, optionally public track lists."""

from .crud import (
    add_track_to_playlist,
    create_playlist,
    delete_playlist,
    get_owned_playlist,
    get_playlist_by_id,
    get_playlist_tracks,
    get_user_playlists,
    get_viewable_playlist,
    remove_track_from_playlist,
    touch_playlist,
    track_from_row,
    update_playlist,
    validate_track,
)

__all__ = [
    "add_track_to_playlist",
    "create_playlist",
    "delete_playlist",
    "get_owned_playlist",
    "get_playlist_by_id",
    "get_playlist_tracks",
    "get_user_playlists",
    "get_viewable_playlist",
    "remove_track_from_playlist",
    "touch_playlist",
    "track_from_row",
    "update_playlist",
    "validate_track",
]
