"""
Login sessions stored server-side and referenced by an opaque cookie token.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from loguru import logger

from musicstream.core.database import get_db_connection

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_session(user_id: str, ttl_days: int = 30) -> str:
    """Start a session for a user and return its token."""
    token = secrets.token_urlsafe(32)
    expires_at = (_now() + timedelta(days=ttl_days)).strftime(TIMESTAMP_FORMAT)
    with get_db_connection() as conn:
        conn.execute(
            "INSERT INTO user_sessions (token, user_id, expires_at) VALUES (?, ?, ?)",
            (token, user_id, expires_at),
        )
        conn.commit()
    return token


def get_session_user_id(token: Optional[str]) -> Optional[str]:
    """Resolve a token to its user, dropping it if expired."""
    if not token:
        return None

    with get_db_connection() as conn:
        cursor = conn.execute(
            "SELECT user_id, expires_at FROM user_sessions WHERE token = ?", (token,)
        )
        row = cursor.fetchone()
        if not row:
            return None

        expires_at = datetime.strptime(row["expires_at"], TIMESTAMP_FORMAT).replace(
            tzinfo=timezone.utc
        )
        if expires_at <= _now():
            conn.execute("DELETE FROM user_sessions WHERE token = ?", (token,))
            conn.commit()
            return None

        return row["user_id"]


def delete_session(token: Optional[str]) -> None:
    if not token:
        return
    with get_db_connection() as conn:
        conn.execute("DELETE FROM user_sessions WHERE token = ?", (token,))
        conn.commit()


def purge_expired_sessions() -> int:
    """Remove expired sessions. Returns the number removed."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            "DELETE FROM user_sessions WHERE expires_at <= ?",
            (_now().strftime(TIMESTAMP_FORMAT),),
        )
        conn.commit()
        removed = cursor.rowcount
    if removed:
        logger.debug(f"Purged {removed} expired sessions")
    return removed
