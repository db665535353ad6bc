"""Shared fixtures: isolated config/data dirs and a fresh SQLite database."""

import random

import pytest

from musicstream.core.database import init_database, set_database_path
from musicstream.domain.accounts import create_user
from musicstream.domain.playback import Track
from tests.fakes import FakePlayer, ManualScheduler


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep config, data and the database inside the test's tmp dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("MUSICSTREAM_DB_PATH", raising=False)
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
    # Minimum bcrypt cost keeps user fixtures fast
    monkeypatch.setattr("musicstream.domain.accounts.users.BCRYPT_ROUNDS", 4)
    set_database_path(None)
    yield
    set_database_path(None)


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Create a temporary database with the full schema."""
    db_path = tmp_path / "musicstream-test.db"
    monkeypatch.setenv("MUSICSTREAM_DB_PATH", str(db_path))
    init_database()
    return db_path


@pytest.fixture
def user(temp_db) -> dict:
    return create_user("listener", "listener@example.com", "secret123")


@pytest.fixture
def other_user(temp_db) -> dict:
    return create_user("stranger", "stranger@example.com", "secret456")


@pytest.fixture
def tracks() -> list[Track]:
    """Three tracks A, B, C with ids 1, 2, 3."""
    return [
        Track("1", "Song A", "Artist A", "https://i.ytimg.com/vi/1/mqdefault.jpg", 200),
        Track("2", "Song B", "Artist B", "https://i.ytimg.com/vi/2/mqdefault.jpg", 180),
        Track("3", "Song C", "Artist C", "https://i.ytimg.com/vi/3/mqdefault.jpg", 240),
    ]


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer(current_time=0.0, duration=200.0)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
