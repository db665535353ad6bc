"""Recently played endpoints."""

from fastapi import APIRouter, Depends

from musicstream.core.config import Config
from musicstream.core.exceptions import MusicStreamError
from musicstream.domain.history import add_recently_played, get_recently_played

from ..deps import get_config, get_current_user_id, http_error
from ..schemas import RecentlyPlayedResponse, StoredTrackRequest

router = APIRouter()


@router.get("/recently-played", response_model=list[RecentlyPlayedResponse])
def list_recently_played(
    user_id: str = Depends(get_current_user_id),
    config: Config = Depends(get_config),
):
    """Get the newest plays for the current user."""
    return get_recently_played(user_id, limit=config.history.recent_limit)


@router.post("/recently-played", response_model=RecentlyPlayedResponse)
def record_play(
    request: StoredTrackRequest,
    user_id: str = Depends(get_current_user_id),
):
    try:
        return add_recently_played(user_id, request.to_track())
    except MusicStreamError as e:
        raise http_error(e) from e
