"""Pytest configuration for backend tests.

Importing web.backend.main builds the module-level app from the on-disk
config, so XDG dirs point at a scratch directory before anything imports it.
"""

import os
import tempfile

_scratch = tempfile.mkdtemp(prefix="musicstream-web-tests-")
os.environ.setdefault("XDG_CONFIG_HOME", os.path.join(_scratch, "config"))
os.environ.setdefault("XDG_DATA_HOME", os.path.join(_scratch, "data"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from musicstream.core.config import Config, PlayerConfig, YouTubeConfig  # noqa: E402
from musicstream.core.database import set_database_path  # noqa: E402
from musicstream.domain.history import add_recently_played  # noqa: E402
from musicstream.domain.playback import PlayerSession, Ready  # noqa: E402
from tests.fakes import FakePlayer, ManualScheduler  # noqa: E402
from web.backend.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr("musicstream.domain.accounts.users.BCRYPT_ROUNDS", 4)


@pytest.fixture
def config() -> Config:
    return Config(
        player=PlayerConfig(enabled=False),
        youtube=YouTubeConfig(api_key="test-key"),
    )


@pytest.fixture
def app(tmp_path, monkeypatch, config):
    monkeypatch.setenv("MUSICSTREAM_DB_PATH", str(tmp_path / "web-test.db"))
    set_database_path(None)
    return create_app(config)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def _register(client: TestClient, username: str, email: str, password: str = "secret123"):
    response = client.post(
        "/api/auth/register",
        json={"username": username, "email": email, "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def register():
    """Register a user through the API; the client keeps the session cookie."""
    return _register


@pytest.fixture
def logged_in(client) -> dict:
    """Register and log in a user on the shared client."""
    return _register(client, "listener", "listener@example.com")


@pytest.fixture
def second_client(app, client):
    """Another browser session against the same app and database."""
    other = TestClient(app)
    _register(other, "stranger", "stranger@example.com")
    return other


@pytest.fixture
def fake_player() -> FakePlayer:
    return FakePlayer(duration=200.0)


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def player_client(app, fake_player, manual_scheduler):
    """Client whose app drives a ready fake player instead of mpv."""
    session = PlayerSession(
        fake_player, manual_scheduler, history_sink=add_recently_played
    )
    session.adapter.handle(Ready())
    app.state.player_session = session
    with TestClient(app) as test_client:
        yield test_client
