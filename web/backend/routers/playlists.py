"""Playlist and playlist track endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from musicstream.core.exceptions import MusicStreamError
from musicstream.domain.playlists import (
    add_track_to_playlist,
    create_playlist,
    delete_playlist,
    get_owned_playlist,
    get_playlist_tracks,
    get_user_playlists,
    get_viewable_playlist,
    remove_track_from_playlist,
    update_playlist,
)

from ..deps import get_current_user_id, http_error
from ..schemas import (
    CreatePlaylistRequest,
    PlaylistResponse,
    PlaylistTrackResponse,
    StoredTrackRequest,
    SuccessResponse,
    UpdatePlaylistRequest,
)

router = APIRouter()


@router.get("/playlists", response_model=list[PlaylistResponse])
def list_playlists(user_id: str = Depends(get_current_user_id)):
    """Get the current user's playlists, newest first."""
    return get_user_playlists(user_id)


@router.post("/playlists", response_model=PlaylistResponse)
def create(
    request: CreatePlaylistRequest,
    user_id: str = Depends(get_current_user_id),
):
    try:
        return create_playlist(
            user_id,
            request.name,
            description=request.description,
            cover_url=request.cover_url,
            is_public=request.is_public,
        )
    except MusicStreamError as e:
        raise http_error(e) from e


@router.get("/playlists/{playlist_id}", response_model=PlaylistResponse)
def get_playlist(playlist_id: str, user_id: str = Depends(get_current_user_id)):
    """Get one playlist. Public playlists are readable by any user."""
    try:
        return get_viewable_playlist(playlist_id, user_id)
    except MusicStreamError as e:
        raise http_error(e) from e


@router.patch("/playlists/{playlist_id}", response_model=PlaylistResponse)
def update(
    playlist_id: str,
    request: UpdatePlaylistRequest,
    user_id: str = Depends(get_current_user_id),
):
    try:
        get_owned_playlist(playlist_id, user_id)
        playlist = update_playlist(
            playlist_id, **request.model_dump(exclude_none=True)
        )
    except MusicStreamError as e:
        raise http_error(e) from e

    if playlist is None:
        raise HTTPException(status_code=404, detail="Playlist not found")
    return playlist


@router.delete("/playlists/{playlist_id}", response_model=SuccessResponse)
def delete(playlist_id: str, user_id: str = Depends(get_current_user_id)):
    try:
        get_owned_playlist(playlist_id, user_id)
    except MusicStreamError as e:
        raise http_error(e) from e

    delete_playlist(playlist_id)
    return SuccessResponse()


@router.get(
    "/playlists/{playlist_id}/tracks", response_model=list[PlaylistTrackResponse]
)
def list_tracks(playlist_id: str, user_id: str = Depends(get_current_user_id)):
    """Get a playlist's tracks in position order."""
    try:
        get_viewable_playlist(playlist_id, user_id)
    except MusicStreamError as e:
        raise http_error(e) from e

    return get_playlist_tracks(playlist_id)


@router.post("/playlists/{playlist_id}/tracks", response_model=PlaylistTrackResponse)
def add_track(
    playlist_id: str,
    request: StoredTrackRequest,
    user_id: str = Depends(get_current_user_id),
):
    try:
        get_owned_playlist(playlist_id, user_id)
        return add_track_to_playlist(
            playlist_id, request.to_track(), position=request.position
        )
    except MusicStreamError as e:
        raise http_error(e) from e


@router.delete(
    "/playlists/{playlist_id}/tracks/{track_id}", response_model=SuccessResponse
)
def remove_track(
    playlist_id: str,
    track_id: str,
    user_id: str = Depends(get_current_user_id),
):
    try:
        get_owned_playlist(playlist_id, user_id)
    except MusicStreamError as e:
        raise http_error(e) from e

    if not remove_track_from_playlist(playlist_id, track_id):
        raise HTTPException(status_code=404, detail="Track not found in playlist")
    return SuccessResponse()
