from typing import Optional

from fastapi import Cookie, HTTPException, Request

from musicstream.core.config import Config
from musicstream.core.exceptions import (
    AuthenticationError,
    ConflictError,
    MusicStreamError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from musicstream.domain.accounts import get_session_user_id, get_user
from musicstream.domain.playback import PlayerSession

SESSION_COOKIE = "session_token"

_STATUS_CODES = {
    ValidationError: 400,
    ConflictError: 400,
    AuthenticationError: 401,
    PermissionDeniedError: 403,
    NotFoundError: 404,
}


def http_error(error: MusicStreamError) -> HTTPException:
    """Translate a domain error into the matching HTTP error."""
    for error_type, status_code in _STATUS_CODES.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def get_config(request: Request) -> Config:
    """FastAPI dependency for the configuration the app was built with."""
    return request.app.state.config


def get_current_user_id(
    session_token: Optional[str] = Cookie(default=None),
) -> str:
    """Require a logged-in user."""
    user_id = get_session_user_id(session_token)
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_id


def get_current_user(
    session_token: Optional[str] = Cookie(default=None),
) -> dict:
    user_id = get_current_user_id(session_token)
    user = get_user(user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def get_player_session(request: Request) -> PlayerSession:
    """The app's playback session; 503 when no media player is available."""
    session = getattr(request.app.state, "player_session", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Player is not available")
    return session
