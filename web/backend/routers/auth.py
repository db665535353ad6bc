"""Registration, login and session endpoints."""

from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Response
from loguru import logger

from musicstream.core.config import Config
from musicstream.core.exceptions import MusicStreamError
from musicstream.domain.accounts import (
    authenticate,
    create_session,
    create_user,
    delete_session,
)

from ..deps import SESSION_COOKIE, get_config, get_current_user, http_error
from ..schemas import LoginRequest, RegisterRequest, SuccessResponse, UserResponse

router = APIRouter()


def _start_session(response: Response, user_id: str, config: Config) -> None:
    ttl_days = config.server.session_ttl_days
    token = create_session(user_id, ttl_days=ttl_days)
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=ttl_days * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=config.server.cookie_secure,
    )


@router.post("/auth/register", response_model=UserResponse)
def register(
    request: RegisterRequest,
    response: Response,
    config: Config = Depends(get_config),
):
    """Create an account and log it in."""
    try:
        user = create_user(request.username, request.email, request.password)
    except MusicStreamError as e:
        raise http_error(e) from e

    _start_session(response, user["id"], config)
    return user


@router.post("/auth/login", response_model=UserResponse)
def login(
    request: LoginRequest,
    response: Response,
    config: Config = Depends(get_config),
):
    try:
        user = authenticate(request.email, request.password)
    except MusicStreamError as e:
        logger.info(f"Failed login for {request.email}")
        raise http_error(e) from e

    _start_session(response, user["id"], config)
    return user


@router.post("/auth/logout", response_model=SuccessResponse)
def logout(
    response: Response,
    session_token: Optional[str] = Cookie(default=None),
):
    delete_session(session_token)
    response.delete_cookie(SESSION_COOKIE)
    return SuccessResponse()


@router.get("/auth/me", response_model=UserResponse)
def me(user: dict = Depends(get_current_user)):
    return user
