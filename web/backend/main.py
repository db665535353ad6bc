from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from musicstream.core.config import Config, load_config
from musicstream.core.database import init_database, set_database_path
from musicstream.core.output import setup_logging_from_config
from musicstream.domain.accounts import purge_expired_sessions
from musicstream.domain.history import add_recently_played
from musicstream.domain.playback import (
    AsyncioScheduler,
    PlayerSession,
    check_mpv_available,
    create_mpv_session,
)
from web.backend.routers import auth, history, player, playlists, users, youtube


def _create_player_session(config: Config) -> Optional[PlayerSession]:
    """Build the mpv-backed session, or None when playback is unavailable."""
    if not config.player.enabled:
        logger.info("Server-side player disabled in configuration")
        return None
    if not check_mpv_available():
        logger.warning("mpv not found on PATH; player endpoints will return 503")
        return None

    return create_mpv_session(
        AsyncioScheduler(),
        history_sink=add_recently_played,
        socket_path=config.player.mpv_socket_path,
        volume=config.player.volume,
        poll_interval=config.player.poll_interval_ms / 1000,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: Config = app.state.config
    set_database_path(config.database.path)
    init_database()
    purge_expired_sessions()

    if not hasattr(app.state, "player_session"):
        app.state.player_session = _create_player_session(config)

    yield

    session = app.state.player_session
    if session is not None:
        session.close()
        logger.info("Player session closed")


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Build the API app. Without a config, one is loaded from disk."""
    if config is None:
        config = load_config()
        setup_logging_from_config(config.logging)

    app = FastAPI(title="musicstream Web API", version="1.0.0", lifespan=lifespan)
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(users.router, prefix="/api", tags=["users"])
    app.include_router(playlists.router, prefix="/api", tags=["playlists"])
    app.include_router(history.router, prefix="/api", tags=["history"])
    app.include_router(youtube.router, prefix="/api", tags=["youtube"])
    app.include_router(player.router, prefix="/api", tags=["player"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


app = create_app()
