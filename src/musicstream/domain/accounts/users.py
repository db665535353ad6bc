"""
User accounts: registration, credential checks and profile updates.
"""

import re
import sqlite3
import uuid
from typing import Any, Optional

import bcrypt
from loguru import logger

from musicstream.core.database import get_db_connection
from musicstream.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

BCRYPT_ROUNDS = 12
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72  # bcrypt input limit

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Columns safe to return to clients
_PUBLIC_COLUMNS = "id, username, email, created_at"


def hash_password(password: str) -> str:
    """Hash a password with bcrypt; the salt is embedded in the result."""
    hashed = bcrypt.hashpw(
        password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    )
    return hashed.decode("utf-8")


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long password
        return False


def _conflict_from(
    error: sqlite3.IntegrityError, email_message: str, username_message: str
) -> ConflictError:
    """Map a UNIQUE violation that slipped past the pre-checks."""
    if "users.email" in str(error):
        return ConflictError(email_message)
    return ConflictError(username_message)


def validate_username(username: str) -> str:
    username = (username or "").strip()
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(
            f"Username must be at least {MIN_USERNAME_LENGTH} characters"
        )
    return username


def validate_email(email: str) -> str:
    email = (email or "").strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email")
    return email


def validate_password(password: str) -> str:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def _public(row) -> Optional[dict[str, Any]]:
    return dict(row) if row else None


def get_user(user_id: str) -> Optional[dict[str, Any]]:
    """Get a user by ID without the password hash."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE id = ?", (user_id,)
        )
        return _public(cursor.fetchone())


def get_user_by_email(email: str) -> Optional[dict[str, Any]]:
    """Get a user by email without the password hash."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE email = ?",
            (email.strip().lower(),),
        )
        return _public(cursor.fetchone())


def get_user_by_username(username: str) -> Optional[dict[str, Any]]:
    """Get a user by username without the password hash."""
    with get_db_connection() as conn:
        cursor = conn.execute(
            f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE username = ?",
            (username.strip(),),
        )
        return _public(cursor.fetchone())


def _get_password_hash(user_id: str) -> Optional[str]:
    with get_db_connection() as conn:
        cursor = conn.execute("SELECT password FROM users WHERE id = ?", (user_id,))
        row = cursor.fetchone()
        return row["password"] if row else None


def create_user(username: str, email: str, password: str) -> dict[str, Any]:
    """
    Register a new user.

    Args:
        username: At least 3 characters, unique
        email: Valid address, unique (stored lowercased)
        password: At least 6 characters, stored hashed

    Returns:
        The new user without the password hash

    Raises:
        ValidationError: If a field is invalid
        ConflictError: If the email or username is already registered
    """
    username = validate_username(username)
    email = validate_email(email)
    validate_password(password)

    if get_user_by_email(email):
        raise ConflictError("Email already registered")
    if get_user_by_username(username):
        raise ConflictError("Username already exists")

    user_id = str(uuid.uuid4())
    password_hash = hash_password(password)
    with get_db_connection() as conn:
        try:
            conn.execute(
                "INSERT INTO users (id, username, email, password) VALUES (?, ?, ?, ?)",
                (user_id, username, email, password_hash),
            )
        except sqlite3.IntegrityError as e:
            raise _conflict_from(
                e, "Email already registered", "Username already exists"
            ) from e
        conn.commit()

    logger.info(f"Registered user {username} ({user_id})")
    return get_user(user_id)


def authenticate(email: str, password: str) -> dict[str, Any]:
    """
    Check credentials.

    Raises:
        AuthenticationError: If the email is unknown or the password is wrong
    """
    with get_db_connection() as conn:
        cursor = conn.execute(
            "SELECT id, password FROM users WHERE email = ?",
            ((email or "").strip().lower(),),
        )
        row = cursor.fetchone()

    if not row or not verify_password(password or "", row["password"]):
        raise AuthenticationError("Incorrect email or password")

    return get_user(row["id"])


def update_user(
    user_id: str,
    username: Optional[str] = None,
    email: Optional[str] = None,
    current_password: Optional[str] = None,
    new_password: Optional[str] = None,
) -> dict[str, Any]:
    """
    Update profile fields. Only provided fields change.

    Changing the password requires the current password.

    Raises:
        NotFoundError: If the user does not exist
        ValidationError: If a field is invalid or current_password is missing
        AuthenticationError: If current_password is wrong
        ConflictError: If the new email or username belongs to someone else
    """
    if not get_user(user_id):
        raise NotFoundError("User not found")

    updates: dict[str, Any] = {}

    if new_password:
        validate_password(new_password)
        if not current_password:
            raise ValidationError("Current password is required to change password")
        stored = _get_password_hash(user_id)
        if not stored or not verify_password(current_password, stored):
            raise AuthenticationError("Current password is incorrect")
        updates["password"] = hash_password(new_password)

    if email:
        email = validate_email(email)
        existing = get_user_by_email(email)
        if existing and existing["id"] != user_id:
            raise ConflictError("Email already in use")
        updates["email"] = email

    if username:
        username = validate_username(username)
        existing = get_user_by_username(username)
        if existing and existing["id"] != user_id:
            raise ConflictError("Username already in use")
        updates["username"] = username

    if updates:
        assignments = ", ".join(f"{column} = ?" for column in updates)
        with get_db_connection() as conn:
            try:
                conn.execute(
                    f"UPDATE users SET {assignments} WHERE id = ?",
                    (*updates.values(), user_id),
                )
            except sqlite3.IntegrityError as e:
                raise _conflict_from(
                    e, "Email already in use", "Username already in use"
                ) from e
            conn.commit()
        logger.info(f"Updated user {user_id}: {', '.join(sorted(updates))}")

    return get_user(user_id)


def delete_user(user_id: str) -> bool:
    """Delete a user; playlists, tracks, history and sessions cascade."""
    with get_db_connection() as conn:
        cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        conn.commit()
        return cursor.rowcount > 0
