"""
SQLite database operations for musicstream
"""

import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import get_data_dir

# Database schema version for migrations
SCHEMA_VERSION = 2

_configured_path: Optional[Path] = None


def set_database_path(path: Optional[str]) -> None:
    """Point the store at a configured file (None restores the default)."""
    global _configured_path
    _configured_path = Path(path).expanduser() if path else None


def get_database_path() -> Path:
    """Get the path to the SQLite database file.

    MUSICSTREAM_DB_PATH wins over the configured path, which wins over
    the data directory default.
    """
    env_path = os.environ.get("MUSICSTREAM_DB_PATH")
    if env_path:
        return Path(env_path).expanduser()
    if _configured_path is not None:
        return _configured_path
    return get_data_dir() / "musicstream.db"


@contextmanager
def get_db_connection():
    """Get a database connection with proper cleanup and concurrency support."""
    db_path = get_database_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_path, timeout=30.0)
    conn.row_factory = sqlite3.Row  # Enable dict-like access

    # Cascade deletes rely on FK enforcement, which SQLite disables per connection
    conn.execute("PRAGMA foreign_keys = ON")
    conn.execute("PRAGMA journal_mode=WAL")

    try:
        yield conn
    finally:
        conn.close()


def migrate_database(conn, current_version: int) -> None:
    """Migrate database from current_version to latest schema."""
    if current_version < 2:
        # v1 -> v2: server-side login sessions
        conn.execute("""
            CREATE TABLE IF NOT EXISTS user_sessions (
                token TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                expires_at TIMESTAMP NOT NULL,
                FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
            )
        """)
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_user_sessions_user ON user_sessions (user_id)"
        )
        conn.commit()


def init_database() -> None:
    """Initialize the database with required tables."""
    with get_db_connection() as conn:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id TEXT PRIMARY KEY,
                username TEXT UNIQUE NOT NULL,
                email TEXT UNIQUE NOT NULL,
                password TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS playlists (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                name TEXT NOT NULL,
                description TEXT,
                cover_url TEXT,
                is_public INTEGER NOT NULL DEFAULT 0, -- 0 = private, 1 = public
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS playlist_tracks (
                id TEXT PRIMARY KEY,
                playlist_id TEXT NOT NULL,
                youtube_id TEXT NOT NULL,
                title TEXT NOT NULL,
                artist TEXT NOT NULL,
                thumbnail TEXT NOT NULL,
                duration INTEGER NOT NULL, -- seconds
                position INTEGER NOT NULL,
                added_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (playlist_id) REFERENCES playlists (id) ON DELETE CASCADE
            )
        """)

        conn.execute("""
            CREATE TABLE IF NOT EXISTS recently_played (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                youtube_id TEXT NOT NULL,
                title TEXT NOT NULL,
                artist TEXT NOT NULL,
                thumbnail TEXT NOT NULL,
                duration INTEGER NOT NULL,
                played_at TIMESTAMP DEFAULT (STRFTIME('%Y-%m-%d %H:%M:%f', 'now')),
                FOREIGN KEY (user_id) REFERENCES users (id) ON DELETE CASCADE
            )
        """)

        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_playlists_user ON playlists (user_id, created_at)"
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_playlist_tracks_playlist ON playlist_tracks (playlist_id, position)"
        )
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_recently_played_user ON recently_played (user_id, played_at)"
        )

        cursor = conn.execute("SELECT MAX(version) AS version FROM schema_version")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 1

        if current_version < SCHEMA_VERSION:
            logger.info(
                f"Migrating database from v{current_version} to v{SCHEMA_VERSION}"
            )
            migrate_database(conn, current_version)

        conn.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (SCHEMA_VERSION,),
        )
        conn.commit()
