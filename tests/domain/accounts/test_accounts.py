"""Tests for user registration, authentication, profile updates and sessions."""

from unittest.mock import patch

import pytest

from musicstream.core.database import get_db_connection
from musicstream.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from musicstream.domain.accounts import (
    authenticate,
    create_session,
    create_user,
    delete_session,
    delete_user,
    get_session_user_id,
    get_user,
    hash_password,
    purge_expired_sessions,
    update_user,
    verify_password,
)


class TestPasswords:
    def test_hash_round_trip(self):
        stored = hash_password("hunter22")

        assert stored.startswith("$2b$")
        assert "hunter22" not in stored
        assert verify_password("hunter22", stored) is True
        assert verify_password("hunter23", stored) is False

    def test_salts_differ(self):
        assert hash_password("same-password") != hash_password("same-password")

    def test_malformed_hash_never_verifies(self):
        assert verify_password("anything", "not-a-hash") is False
        assert verify_password("anything", "pbkdf2_sha256$x$salt$digest") is False
        assert verify_password("anything", "") is False

    def test_overlong_password_rejected(self, temp_db):
        with pytest.raises(ValidationError):
            create_user("alice", "alice@example.com", "x" * 73)


class TestRegistration:
    def test_create_user_hides_password(self, temp_db):
        user = create_user("alice", "Alice@Example.com", "secret123")

        assert user["username"] == "alice"
        assert user["email"] == "alice@example.com"
        assert "password" not in user
        assert get_user(user["id"]) == user

    def test_password_is_stored_hashed(self, temp_db):
        user = create_user("alice", "alice@example.com", "secret123")

        with get_db_connection() as conn:
            stored = conn.execute(
                "SELECT password FROM users WHERE id = ?", (user["id"],)
            ).fetchone()["password"]

        assert stored != "secret123"
        assert verify_password("secret123", stored)

    @pytest.mark.parametrize(
        "username, email, password",
        [
            ("al", "al@example.com", "secret123"),
            ("alice", "not-an-email", "secret123"),
            ("alice", "alice@example.com", "12345"),
        ],
    )
    def test_invalid_fields_rejected(self, temp_db, username, email, password):
        with pytest.raises(ValidationError):
            create_user(username, email, password)

    def test_duplicate_email_rejected(self, user):
        with pytest.raises(ConflictError, match="Email"):
            create_user("someone-else", "listener@example.com", "secret123")

    def test_unique_violation_after_checks_is_a_conflict(self, user):
        """Two registrations racing past the lookups hit the UNIQUE index."""
        with patch(
            "musicstream.domain.accounts.users.get_user_by_email", return_value=None
        ):
            with pytest.raises(ConflictError, match="Email"):
                create_user("someone-else", "listener@example.com", "secret123")

        with patch(
            "musicstream.domain.accounts.users.get_user_by_username", return_value=None
        ):
            with pytest.raises(ConflictError, match="Username"):
                create_user("listener", "fresh@example.com", "secret123")

    def test_duplicate_username_rejected(self, user):
        with pytest.raises(ConflictError, match="Username"):
            create_user("listener", "new@example.com", "secret123")


class TestAuthentication:
    def test_valid_credentials(self, user):
        assert authenticate("LISTENER@example.com", "secret123")["id"] == user["id"]

    @pytest.mark.parametrize(
        "email, password",
        [("listener@example.com", "wrong-pass"), ("nobody@example.com", "secret123")],
    )
    def test_bad_credentials(self, user, email, password):
        with pytest.raises(AuthenticationError):
            authenticate(email, password)


class TestProfileUpdate:
    def test_update_username_and_email(self, user):
        updated = update_user(user["id"], username="renamed", email="new@example.com")

        assert updated["username"] == "renamed"
        assert updated["email"] == "new@example.com"

    def test_keeping_own_values_is_not_a_conflict(self, user):
        updated = update_user(
            user["id"], username="listener", email="listener@example.com"
        )
        assert updated["username"] == "listener"

    def test_taken_username_rejected(self, user, other_user):
        with pytest.raises(ConflictError):
            update_user(user["id"], username=other_user["username"])

    def test_taken_email_rejected(self, user, other_user):
        with pytest.raises(ConflictError):
            update_user(user["id"], email=other_user["email"])

    def test_unique_violation_on_update_is_a_conflict(self, user, other_user):
        with patch(
            "musicstream.domain.accounts.users.get_user_by_username", return_value=None
        ):
            with pytest.raises(ConflictError, match="Username already in use"):
                update_user(user["id"], username=other_user["username"])

        assert get_user(user["id"])["username"] == "listener"

    def test_password_change_requires_current_password(self, user):
        with pytest.raises(ValidationError):
            update_user(user["id"], new_password="brand-new")

        with pytest.raises(AuthenticationError):
            update_user(user["id"], current_password="wrong", new_password="brand-new")

        update_user(user["id"], current_password="secret123", new_password="brand-new")

        assert authenticate("listener@example.com", "brand-new")["id"] == user["id"]

    def test_failed_update_changes_nothing(self, user, other_user):
        with pytest.raises(ConflictError):
            update_user(user["id"], username="fresh-name", email=other_user["email"])

        assert get_user(user["id"])["username"] == "listener"

    def test_unknown_user(self, temp_db):
        with pytest.raises(NotFoundError):
            update_user("missing", username="whoever")


class TestSessions:
    def test_session_resolves_to_user(self, user):
        token = create_session(user["id"])

        assert get_session_user_id(token) == user["id"]

    def test_missing_or_unknown_token(self, temp_db):
        assert get_session_user_id(None) is None
        assert get_session_user_id("no-such-token") is None

    def test_delete_session(self, user):
        token = create_session(user["id"])

        delete_session(token)

        assert get_session_user_id(token) is None

    def test_expired_session_is_dropped(self, user):
        token = create_session(user["id"], ttl_days=-1)

        assert get_session_user_id(token) is None
        with get_db_connection() as conn:
            row = conn.execute(
                "SELECT 1 FROM user_sessions WHERE token = ?", (token,)
            ).fetchone()
        assert row is None

    def test_purge_expired_sessions(self, user):
        create_session(user["id"], ttl_days=-1)
        live = create_session(user["id"])

        assert purge_expired_sessions() == 1
        assert get_session_user_id(live) == user["id"]

    def test_deleting_user_removes_sessions(self, user):
        token = create_session(user["id"])

        assert delete_user(user["id"]) is True

        assert get_session_user_id(token) is None

