"""Tests for the musicstream command line entry point."""

import sys
from unittest.mock import patch

import pytest

from musicstream import cli
from musicstream.core.database import get_database_path
from musicstream.domain.playback import Track
from musicstream.domain.search import SearchRequestError


def run_main(*argv: str) -> int:
    with patch.object(sys, "argv", ["musicstream", *argv]):
        with pytest.raises(SystemExit) as exc_info:
            cli.main()
    return exc_info.value.code


def test_no_subcommand_prints_help(capsys):
    assert run_main() == 1
    assert "serve" in capsys.readouterr().out


def test_init_db_creates_database(tmp_path, monkeypatch, capsys):
    db_path = tmp_path / "cli.db"
    monkeypatch.setenv("MUSICSTREAM_DB_PATH", str(db_path))

    assert run_main("init-db") == 0

    assert db_path.exists()
    assert get_database_path() == db_path
    assert str(db_path) in capsys.readouterr().out


def test_search_prints_tracks(capsys):
    track = Track("abc123", "Song", "Band", "https://example.com/t.jpg", 125)

    with patch("musicstream.domain.search.search", return_value=[track]) as mock_search:
        assert run_main("search", "lo", "fi") == 0

    assert mock_search.call_args[0][0] == "lo fi"
    assert "abc123  2:05  Band - Song" in capsys.readouterr().out


def test_search_failure_exits_nonzero(capsys):
    with patch(
        "musicstream.domain.search.search", side_effect=SearchRequestError("down")
    ):
        assert run_main("search", "anything") == 1

    assert "Search failed" in capsys.readouterr().err


def test_serve_runs_uvicorn():
    with patch("uvicorn.run") as mock_run:
        assert run_main("serve", "--port", "9001") == 0

    args, kwargs = mock_run.call_args
    assert args[0] == "web.backend.main:app"
    assert kwargs["port"] == 9001
    assert kwargs["host"] == "0.0.0.0"
