"""Tests for PlaybackController queue navigation and play state."""

import pytest

from musicstream.domain.playback import (
    PlaybackController,
    PlaybackState,
    RepeatMode,
    Track,
)


class RecordingListener:
    def __init__(self):
        self.changes: list[tuple[PlaybackState, PlaybackState]] = []
        self.seeks: list[float] = []

    def on_state_changed(self, previous, current):
        self.changes.append((previous, current))

    def on_seek(self, seconds):
        self.seeks.append(seconds)


class ExplodingListener:
    def on_state_changed(self, previous, current):
        raise RuntimeError("listener broke")

    def on_seek(self, seconds):
        raise RuntimeError("listener broke")


@pytest.fixture
def controller(rng) -> PlaybackController:
    return PlaybackController(rng=rng)


def _with_repeat(controller: PlaybackController, mode: RepeatMode) -> None:
    while controller.repeat != mode:
        controller.toggle_repeat()


class TestPlay:
    def test_play_with_queue_sets_index_of_track(self, controller, tracks):
        controller.play(tracks[1], tracks)

        assert controller.current_track == tracks[1]
        assert controller.current_index == 1
        assert controller.is_playing is True
        assert controller.queue == tuple(tracks)

    def test_play_track_missing_from_queue_falls_back_to_zero(
        self, controller, tracks
    ):
        """current_track and queue[0] disagree here; the fallback is logged."""
        stray = Track("99", "Stray", "Nobody")

        controller.play(stray, tracks)

        assert controller.current_index == 0
        assert controller.current_track == stray
        assert controller.queue[0] != stray

    def test_play_without_queue_on_empty_controller_queues_track(
        self, controller, tracks
    ):
        controller.play(tracks[0])

        assert controller.queue == (tracks[0],)
        assert controller.current_index == 0
        assert controller.is_playing is True

    def test_play_with_empty_queue_queues_track(self, controller, tracks):
        controller.play(tracks[0], [])

        assert controller.queue == (tracks[0],)
        assert controller.current_index == 0
        assert controller.is_playing is True

        controller.pause()
        assert controller.is_playing is False

    def test_play_without_queue_selects_already_queued_track(
        self, controller, tracks
    ):
        controller.play(tracks[0], tracks)

        controller.play(tracks[2])

        assert controller.current_index == 2
        assert controller.queue == tuple(tracks)

    def test_play_without_queue_inserts_unknown_track_after_current(
        self, controller, tracks
    ):
        extra = Track("4", "Song D", "Artist D")
        controller.play(tracks[0], tracks)

        controller.play(extra)

        assert controller.queue == (tracks[0], extra, tracks[1], tracks[2])
        assert controller.current_index == 1
        assert controller.queue[controller.current_index] == controller.current_track


class TestPauseResume:
    def test_pause_and_resume_toggle_is_playing_only(self, controller, tracks):
        controller.play(tracks[1], tracks)

        controller.pause()
        assert controller.is_playing is False
        assert controller.current_index == 1

        controller.resume()
        assert controller.is_playing is True
        assert controller.current_index == 1

    def test_pause_and_resume_are_noops_on_empty_queue(self, controller):
        controller.resume()
        assert controller.is_playing is False

        controller.pause()
        assert controller.state == PlaybackState()

    def test_toggle_play(self, controller, tracks):
        controller.play(tracks[0], tracks)

        controller.toggle_play()
        assert controller.is_playing is False

        controller.toggle_play()
        assert controller.is_playing is True


class TestPlayNext:
    def test_repeat_none_advances_then_stops_at_last_index(self, controller, tracks):
        controller.play(tracks[0], tracks)

        for expected in range(1, len(tracks)):
            controller.play_next()
            assert controller.current_index == expected
            assert controller.is_playing is True

        controller.play_next()
        assert controller.is_playing is False
        assert controller.current_index == len(tracks) - 1
        assert controller.current_track == tracks[-1]

    def test_scenario_three_tracks_repeat_none(self, controller, tracks):
        controller.play(tracks[0], tracks)
        assert controller.current_index == 0

        controller.play_next()
        controller.play_next()
        assert controller.current_index == 2
        assert controller.is_playing is True

        controller.play_next()
        assert controller.is_playing is False
        assert controller.current_index == 2

    def test_repeat_all_wraps_from_last_index(self, controller, tracks):
        _with_repeat(controller, RepeatMode.ALL)
        controller.play(tracks[2], tracks)

        controller.play_next()

        assert controller.current_index == 0
        assert controller.current_track == tracks[0]
        assert controller.is_playing is True

    def test_repeat_one_keeps_index(self, controller, tracks):
        _with_repeat(controller, RepeatMode.ONE)
        controller.play(tracks[1], tracks)
        controller.pause()

        for _ in range(5):
            controller.play_next()
            assert controller.current_index == 1
            assert controller.is_playing is True

    def test_empty_queue_is_noop(self, controller):
        controller.play_next()
        assert controller.state == PlaybackState()


class TestPlayPrevious:
    def test_clamps_at_zero_without_repeat_all(self, controller, tracks):
        controller.play(tracks[0], tracks)
        controller.pause()

        controller.play_previous()
        controller.play_previous()

        assert controller.current_index == 0
        assert controller.current_track == tracks[0]
        assert controller.is_playing is True

    def test_wraps_to_last_with_repeat_all(self, controller, tracks):
        _with_repeat(controller, RepeatMode.ALL)
        controller.play(tracks[0], tracks)

        controller.play_previous()

        assert controller.current_index == len(tracks) - 1
        assert controller.current_track == tracks[-1]

    def test_steps_back_one(self, controller, tracks):
        controller.play(tracks[2], tracks)

        controller.play_previous()

        assert controller.current_index == 1


class TestQueueEditing:
    def test_add_to_queue_appends_without_moving_current(self, controller, tracks):
        controller.play(tracks[1], tracks)
        before = controller.state
        extra = Track("4", "Song D", "Artist D")

        controller.add_to_queue(extra)

        assert len(controller.queue) == len(before.queue) + 1
        assert controller.queue[-1] == extra
        assert controller.current_index == before.current_index
        assert controller.current_track == before.current_track
        assert controller.is_playing == before.is_playing

    def test_add_to_queue_when_empty_selects_track_without_playing(
        self, controller, tracks
    ):
        controller.add_to_queue(tracks[0])

        assert controller.queue == (tracks[0],)
        assert controller.current_track == tracks[0]
        assert controller.is_playing is False

    def test_resume_after_clear_and_add_plays_new_track(self, controller, tracks):
        controller.play(tracks[0], [tracks[0]])
        controller.clear_queue()

        controller.add_to_queue(tracks[1])
        controller.resume()

        assert controller.is_playing is True
        assert controller.current_track == tracks[1]
        assert controller.queue[controller.current_index] == controller.current_track

        controller.add_to_queue(tracks[2])
        controller.play_next()
        assert controller.current_track == tracks[2]

    def test_clear_queue_stops_playback_and_keeps_track_for_display(
        self, controller, tracks
    ):
        controller.play(tracks[1], tracks)

        controller.clear_queue()

        assert controller.queue == ()
        assert controller.current_index == 0
        assert controller.is_playing is False
        assert controller.current_track == tracks[1]

        controller.resume()
        assert controller.is_playing is False


class TestShuffle:
    def test_shuffle_visits_every_other_index_once_then_stops(
        self, controller, tracks
    ):
        queue = tracks + [Track(str(i), f"Song {i}", "Artist") for i in range(4, 9)]
        controller.toggle_shuffle()
        controller.play(queue[0], queue)

        visited = [controller.current_index]
        for _ in range(len(queue) - 1):
            controller.play_next()
            assert controller.is_playing is True
            visited.append(controller.current_index)

        assert sorted(visited) == list(range(len(queue)))

        last = controller.current_index
        controller.play_next()
        assert controller.is_playing is False
        assert controller.current_index == last

    def test_shuffle_with_repeat_all_deals_a_new_pass(self, controller, tracks):
        _with_repeat(controller, RepeatMode.ALL)
        controller.toggle_shuffle()
        controller.play(tracks[0], tracks)

        for _ in range(len(tracks) * 3):
            previous = controller.current_index
            controller.play_next()
            assert controller.is_playing is True
            assert controller.current_index != previous

    def test_toggle_shuffle_off_restores_linear_advance(self, controller, tracks):
        controller.play(tracks[0], tracks)
        controller.toggle_shuffle()
        assert controller.shuffle is True

        controller.toggle_shuffle()
        controller.play_next()

        assert controller.shuffle is False
        assert controller.current_index == 1

    def test_track_added_while_shuffled_is_reached(self, controller, tracks):
        controller.toggle_shuffle()
        controller.play(tracks[0], tracks)
        extra = Track("4", "Song D", "Artist D")
        controller.add_to_queue(extra)

        seen = set()
        for _ in range(len(tracks)):
            controller.play_next()
            seen.add(controller.current_track.id)

        assert "4" in seen


class TestRepeatAndVolume:
    def test_toggle_repeat_cycles_and_returns_after_three(self, controller):
        original = controller.repeat

        controller.toggle_repeat()
        assert controller.repeat == RepeatMode.ALL
        controller.toggle_repeat()
        assert controller.repeat == RepeatMode.ONE
        controller.toggle_repeat()

        assert controller.repeat == original == RepeatMode.NONE

    @pytest.mark.parametrize(
        "requested, expected", [(55, 55), (-10, 0), (150, 100), (0, 0)]
    )
    def test_set_volume_is_clamped(self, controller, requested, expected):
        controller.set_volume(requested)
        assert controller.volume == expected


class TestListeners:
    def test_listener_sees_previous_and_current(self, controller, tracks):
        listener = RecordingListener()
        controller.subscribe(listener)

        controller.play(tracks[0], tracks)

        previous, current = listener.changes[-1]
        assert previous.current_track is None
        assert current.current_track == tracks[0]

    def test_seek_is_clamped_and_forwarded(self, controller, tracks):
        listener = RecordingListener()
        controller.subscribe(listener)
        controller.play(tracks[0], tracks)

        controller.seek_to(42.5)
        controller.seek_to(-3)

        assert listener.seeks == [42.5, 0.0]

    def test_failing_listener_does_not_block_others_or_state(
        self, controller, tracks
    ):
        recorder = RecordingListener()
        controller.subscribe(ExplodingListener())
        controller.subscribe(recorder)

        controller.play(tracks[0], tracks)
        controller.seek_to(10)

        assert controller.current_track == tracks[0]
        assert len(recorder.changes) == 1
        assert recorder.seeks == [10.0]

    def test_unsubscribed_listener_is_not_called(self, controller, tracks):
        listener = RecordingListener()
        controller.subscribe(listener)
        controller.unsubscribe(listener)

        controller.play(tracks[0], tracks)

        assert listener.changes == []
