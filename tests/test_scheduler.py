from __future__ import annotations

import pytest

from globemap.scheduler import Debouncer, FrameLoop


def test_frame_fires_after_one_interval():
    loop = FrameLoop(frame_interval_ms=10)
    seen = []
    loop.request_frame(seen.append)
    loop.advance(9)
    assert seen == []
    loop.advance(1)
    assert seen == [10.0]
    assert loop.idle


def test_frames_requested_together_share_a_frame():
    loop = FrameLoop(frame_interval_ms=10)
    seen = []
    loop.request_frame(lambda now: seen.append(("a", now)))
    loop.request_frame(lambda now: seen.append(("b", now)))
    loop.run_until_idle()
    assert seen == [("a", 10.0), ("b", 10.0)]
    assert loop.frames_run == 1


def test_timer_runs_before_frame_due_at_same_time():
    loop = FrameLoop(frame_interval_ms=10)
    order = []
    loop.request_frame(lambda now: order.append("frame"))
    loop.call_later(10, lambda: order.append("timer"))
    loop.run_until_idle()
    assert order == ["timer", "frame"]


def test_cancelled_timer_does_not_fire():
    loop = FrameLoop()
    fired = []
    handle = loop.call_later(50, lambda: fired.append(True))
    handle.cancel()
    assert loop.idle
    loop.advance(100)
    assert fired == []


def test_run_until_idle_guards_against_endless_animation():
    loop = FrameLoop()

    def forever(now: float) -> None:
        loop.request_frame(forever)

    loop.request_frame(forever)
    with pytest.raises(RuntimeError):
        loop.run_until_idle(max_steps=50)


def test_frame_interval_must_be_positive():
    with pytest.raises(ValueError):
        FrameLoop(frame_interval_ms=0)


def test_debouncer_coalesces_bursts():
    loop = FrameLoop()
    calls = []
    debounced = Debouncer(loop, 200, lambda: calls.append(loop.now()))
    for _ in range(5):
        debounced()
        loop.advance(50)
    assert calls == []
    assert debounced.pending
    loop.advance(150)
    assert calls == [400.0]
    assert not debounced.pending
