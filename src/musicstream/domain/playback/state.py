"""
Pure playback state transitions.

Every function takes a PlaybackState and returns a new one; nothing here
raises or touches the media player. Indices are clamped so that
current_index stays inside the queue whenever the queue is non-empty.
"""

import random
from typing import Optional, Sequence

from loguru import logger

from .models import PlaybackState, RepeatMode, Track

MIN_VOLUME = 0
MAX_VOLUME = 100


_default_rng = random.Random()


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else _default_rng


def new_shuffle_order(
    length: int, exclude: Optional[int] = None, rng: Optional[random.Random] = None
) -> tuple[int, ...]:
    """Random permutation of queue indices, optionally leaving one out.

    Args:
        length: Queue length
        exclude: Index to leave out (normally the track already playing)
        rng: Random source, injectable for tests

    Returns:
        Tuple of indices in the order they will be played
    """
    indices = [i for i in range(length) if i != exclude]
    _rng(rng).shuffle(indices)
    return tuple(indices)


def find_track_index(queue: Sequence[Track], track_id: str) -> Optional[int]:
    """Get the position (0-based) of a track id in a queue, or None."""
    for i, track in enumerate(queue):
        if track.id == track_id:
            return i
    return None


def play(
    state: PlaybackState,
    track: Track,
    queue: Optional[Sequence[Track]] = None,
    rng: Optional[random.Random] = None,
) -> PlaybackState:
    """Start playing a track, optionally replacing the queue.

    With a queue, the index is the position of the track in it. A track that
    is not in the supplied queue falls back to index 0 and is logged, since
    current_track and queue[0] then disagree.

    Without a queue (or with an empty one), a track already queued becomes
    current in place; an unknown track is inserted right after the current
    one so the index always points at the playing track.
    """
    if queue:
        new_queue = tuple(queue)
        index = find_track_index(new_queue, track.id)
        if index is None:
            logger.warning(
                f"Track {track.id} not found in supplied queue of {len(new_queue)}, "
                "falling back to index 0"
            )
            index = 0
        order = (
            new_shuffle_order(len(new_queue), exclude=index, rng=rng)
            if state.shuffle
            else ()
        )
        return state._replace(
            current_track=track,
            is_playing=True,
            queue=new_queue,
            current_index=index,
            shuffle_order=order,
        )

    index = find_track_index(state.queue, track.id)
    if index is not None:
        return state._replace(
            current_track=track,
            is_playing=True,
            current_index=index,
            shuffle_order=tuple(i for i in state.shuffle_order if i != index),
        )

    if not state.queue:
        return state._replace(
            current_track=track,
            is_playing=True,
            queue=(track,),
            current_index=0,
            shuffle_order=(),
        )

    insert_at = state.current_index + 1
    new_queue = state.queue[:insert_at] + (track,) + state.queue[insert_at:]
    # Indices at or after the insertion point move down by one
    order = tuple(i + 1 if i >= insert_at else i for i in state.shuffle_order)
    return state._replace(
        current_track=track,
        is_playing=True,
        queue=new_queue,
        current_index=insert_at,
        shuffle_order=order,
    )


def pause(state: PlaybackState) -> PlaybackState:
    """Stop playback without touching the queue."""
    if not state.has_current:
        return state
    return state._replace(is_playing=False)


def resume(state: PlaybackState) -> PlaybackState:
    """Resume playback of the current track."""
    if not state.has_current:
        return state
    return state._replace(is_playing=True)


def play_next(
    state: PlaybackState, rng: Optional[random.Random] = None
) -> PlaybackState:
    """Advance the queue under the repeat and shuffle policy.

    - repeat one replays the current index
    - shuffle consumes shuffle_order; an exhausted order is regenerated
      under repeat all and stops playback otherwise
    - linear mode wraps to 0 under repeat all and otherwise stops on the
      last track without moving the index past the end
    """
    if not state.queue:
        return state

    length = len(state.queue)

    if state.repeat == RepeatMode.ONE:
        next_index = state.current_index
    elif state.shuffle:
        order = state.shuffle_order
        if not order:
            if state.repeat != RepeatMode.ALL:
                return state._replace(is_playing=False)
            exclude = state.current_index if length > 1 else None
            order = new_shuffle_order(length, exclude=exclude, rng=rng)
        next_index, remaining = order[0], order[1:]
        return state._replace(
            current_index=next_index,
            current_track=state.queue[next_index],
            is_playing=True,
            shuffle_order=remaining,
        )
    else:
        next_index = state.current_index + 1
        if next_index >= length:
            if state.repeat != RepeatMode.ALL:
                return state._replace(is_playing=False)
            next_index = 0

    return state._replace(
        current_index=next_index,
        current_track=state.queue[next_index],
        is_playing=True,
    )


def play_previous(state: PlaybackState) -> PlaybackState:
    """Step back one track; below 0 wraps under repeat all, else clamps to 0."""
    if not state.queue:
        return state

    prev_index = state.current_index - 1
    if prev_index < 0:
        prev_index = len(state.queue) - 1 if state.repeat == RepeatMode.ALL else 0

    return state._replace(
        current_index=prev_index,
        current_track=state.queue[prev_index],
        is_playing=True,
        shuffle_order=tuple(i for i in state.shuffle_order if i != prev_index),
    )


def add_to_queue(
    state: PlaybackState, track: Track, rng: Optional[random.Random] = None
) -> PlaybackState:
    """Append a track; index and play state are unchanged.

    Appending to an empty queue also makes the track current (still stopped),
    so a later resume plays queue[0] rather than a track that was cleared.
    """
    if not state.queue:
        return state._replace(
            queue=(track,), current_index=0, current_track=track, shuffle_order=()
        )

    new_index = len(state.queue)
    order = state.shuffle_order
    if state.shuffle:
        slot = _rng(rng).randrange(len(order) + 1)
        order = order[:slot] + (new_index,) + order[slot:]
    return state._replace(queue=state.queue + (track,), shuffle_order=order)


def clear_queue(state: PlaybackState) -> PlaybackState:
    """Empty the queue and stop playback; the last track stays for display."""
    return state._replace(
        queue=(), current_index=0, shuffle_order=(), is_playing=False
    )


def toggle_shuffle(
    state: PlaybackState, rng: Optional[random.Random] = None
) -> PlaybackState:
    """Flip shuffle; turning it on deals a fresh order of the other tracks."""
    if state.shuffle:
        return state._replace(shuffle=False, shuffle_order=())

    exclude = state.current_index if state.queue else None
    return state._replace(
        shuffle=True,
        shuffle_order=new_shuffle_order(len(state.queue), exclude=exclude, rng=rng),
    )


def toggle_repeat(state: PlaybackState) -> PlaybackState:
    """Cycle repeat none -> all -> one -> none."""
    return state._replace(repeat=state.repeat.next())


def set_volume(state: PlaybackState, volume: int) -> PlaybackState:
    """Set volume clamped to 0-100."""
    return state._replace(volume=max(MIN_VOLUME, min(MAX_VOLUME, int(volume))))


def clamp_seek_position(seconds: float) -> float:
    """Seek targets are absolute and never negative."""
    return max(0.0, float(seconds))
