"""Tests for the one-shot HistoryReporter."""

from unittest.mock import MagicMock

from musicstream.domain.playback import HistoryReporter


def test_records_once_until_reset(tracks):
    recorder = MagicMock()
    reporter = HistoryReporter(recorder)

    assert reporter.on_playing(tracks[0]) is True
    assert reporter.on_playing(tracks[0]) is False
    recorder.assert_called_once_with(tracks[0])

    reporter.reset()
    assert reporter.on_playing(tracks[1]) is True
    assert recorder.call_count == 2


def test_no_track_is_not_recorded():
    recorder = MagicMock()
    reporter = HistoryReporter(recorder)

    assert reporter.on_playing(None) is False
    assert reporter.reported is False
    recorder.assert_not_called()


def test_failing_recorder_is_contained_and_not_retried(tracks):
    """A broken history store must not block playback or fire on every resume."""
    recorder = MagicMock(side_effect=RuntimeError("db down"))
    reporter = HistoryReporter(recorder)

    assert reporter.on_playing(tracks[0]) is True
    assert reporter.on_playing(tracks[0]) is False
    assert reporter.reported is True
    recorder.assert_called_once()
