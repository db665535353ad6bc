"""Accounts domain - users, password hashing and login sessions."""

from .sessions import (
    create_session,
    delete_session,
    get_session_user_id,
    purge_expired_sessions,
)
from .users import (
    authenticate,
    create_user,
    delete_user,
    get_user,
    get_user_by_email,
    get_user_by_username,
    hash_password,
    update_user,
    verify_password,
)

__all__ = [
    "authenticate",
    "create_user",
    "delete_user",
    "get_user",
    "get_user_by_email",
    "get_user_by_username",
    "hash_password",
    "update_user",
    "verify_password",
    "create_session",
    "delete_session",
    "get_session_user_id",
    "purge_expired_sessions",
]
