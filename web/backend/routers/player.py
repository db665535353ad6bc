"""Player router driving the server-side playback session.

Every endpoint is async so controller transitions and the adapter's
player commands run on the event loop that owns the session's timers.
"""

from fastapi import APIRouter, Depends
from loguru import logger

from musicstream.domain.playback import PlayerSession

from ..deps import get_current_user_id, get_player_session
from ..schemas import (
    MuteRequest,
    PlayerStateResponse,
    PlayRequest,
    QueueRequest,
    SeekRequest,
    VolumeRequest,
)

router = APIRouter()


@router.get("/player", response_model=PlayerStateResponse)
async def get_state(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    return session.snapshot()


@router.post("/player/play", response_model=PlayerStateResponse)
async def play(
    request: PlayRequest,
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    """Play a track, optionally replacing the queue."""
    # Plays are attributed to whoever started them
    session.listener_user_id = user_id
    queue = [item.to_track() for item in request.queue] if request.queue else None
    logger.info(f"Play {request.track.id} for user {user_id}")
    session.controller.play(request.track.to_track(), queue)
    return session.snapshot()


@router.post("/player/pause", response_model=PlayerStateResponse)
async def pause(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.pause()
    return session.snapshot()


@router.post("/player/resume", response_model=PlayerStateResponse)
async def resume(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.resume()
    return session.snapshot()


@router.post("/player/toggle", response_model=PlayerStateResponse)
async def toggle_play(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.toggle_play()
    return session.snapshot()


@router.post("/player/next", response_model=PlayerStateResponse)
async def next_track(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.play_next()
    return session.snapshot()


@router.post("/player/previous", response_model=PlayerStateResponse)
async def previous_track(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.play_previous()
    return session.snapshot()


@router.post("/player/queue", response_model=PlayerStateResponse)
async def add_to_queue(
    request: QueueRequest,
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.add_to_queue(request.track.to_track())
    return session.snapshot()


@router.post("/player/clear", response_model=PlayerStateResponse)
async def clear_queue(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.clear_queue()
    return session.snapshot()


@router.post("/player/shuffle", response_model=PlayerStateResponse)
async def toggle_shuffle(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.toggle_shuffle()
    return session.snapshot()


@router.post("/player/repeat", response_model=PlayerStateResponse)
async def toggle_repeat(
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.toggle_repeat()
    return session.snapshot()


@router.post("/player/volume", response_model=PlayerStateResponse)
async def set_volume(
    request: VolumeRequest,
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.set_volume(request.volume)
    return session.snapshot()


@router.post("/player/seek", response_model=PlayerStateResponse)
async def seek(
    request: SeekRequest,
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    session.controller.seek_to(request.seconds)
    return session.snapshot()


@router.post("/player/mute", response_model=PlayerStateResponse)
async def mute(
    request: MuteRequest,
    user_id: str = Depends(get_current_user_id),
    session: PlayerSession = Depends(get_player_session),
):
    if request.muted is None:
        session.toggle_mute()
    else:
        session.set_muted(request.muted)
    return session.snapshot()
