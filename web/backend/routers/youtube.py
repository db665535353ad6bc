"""YouTube search endpoint for musicstream Web API."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from loguru import logger

from musicstream.core.config import Config
from musicstream.domain.search import (
    SearchNotConfiguredError,
    SearchRequestError,
    search,
)

from ..deps import get_config, get_current_user_id
from ..schemas import TrackModel

router = APIRouter()


@router.get("/youtube/search", response_model=list[TrackModel])
def search_youtube(
    q: Optional[str] = None,
    user_id: str = Depends(get_current_user_id),
    config: Config = Depends(get_config),
):
    """
    Search YouTube for music videos.

    Raises:
        HTTPException: 401 without a session, 400 without a query, 503 when
            no API key is configured, 502 when YouTube fails
    """
    if not q or not q.strip():
        raise HTTPException(status_code=400, detail="Query is required")

    try:
        tracks = search(q, config.youtube)
    except SearchNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    except SearchRequestError as e:
        logger.exception(f"YouTube search failed for '{q}'")
        raise HTTPException(status_code=502, detail="Failed to search YouTube") from e

    return [track.to_dict() for track in tracks]
