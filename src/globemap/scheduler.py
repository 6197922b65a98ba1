"""Cooperative frame scheduling on a virtual millisecond clock."""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

_LOGGER = logging.getLogger("globemap.scheduler")

FrameCallback = Callable[[float], None]


@dataclass(order=True, slots=True)
class TimerHandle:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class FrameLoop:
    """Single-threaded host loop: animation frames plus one-shot timers.

    Time only moves through `advance` / `run_until_idle`, so a run is fully
    deterministic. Frame callbacks receive the frame timestamp in ms.
    """

    def __init__(self, frame_interval_ms: float = 1000.0 / 60.0, start_ms: float = 0.0) -> None:
        if frame_interval_ms <= 0:
            raise ValueError("frame_interval_ms must be > 0")
        self.frame_interval_ms = float(frame_interval_ms)
        self._now = float(start_ms)
        self._frame_callbacks: list[FrameCallback] = []
        self._next_frame_at: float | None = None
        self._timers: list[TimerHandle] = []
        self._seq = itertools.count()
        self.frames_run = 0

    def now(self) -> float:
        return self._now

    def request_frame(self, callback: FrameCallback) -> None:
        self._frame_callbacks.append(callback)
        if self._next_frame_at is None:
            self._next_frame_at = self._now + self.frame_interval_ms

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(due=self._now + max(float(delay_ms), 0.0), seq=next(self._seq), callback=callback)
        heapq.heappush(self._timers, handle)
        return handle

    @property
    def idle(self) -> bool:
        return not self._frame_callbacks and not any(not timer.cancelled for timer in self._timers)

    def advance(self, ms: float) -> None:
        """Move the clock forward, firing every timer and frame that falls due."""
        target = self._now + max(float(ms), 0.0)
        while True:
            due = self._next_due()
            if due is None or due > target:
                break
            self._run_next(due)
        self._now = target

    def run_until_idle(self, max_steps: int = 100_000) -> None:
        steps = 0
        while True:
            due = self._next_due()
            if due is None:
                return
            steps += 1
            if steps > max_steps:
                raise RuntimeError(f"Frame loop still busy after {max_steps} steps")
            self._run_next(due)

    def _next_due(self) -> float | None:
        while self._timers and self._timers[0].cancelled:
            heapq.heappop(self._timers)
        candidates = []
        if self._timers:
            candidates.append(self._timers[0].due)
        if self._next_frame_at is not None:
            candidates.append(self._next_frame_at)
        return min(candidates) if candidates else None

    def _run_next(self, due: float) -> None:
        self._now = max(self._now, due)
        if self._timers and self._timers[0].due <= due:
            timer = heapq.heappop(self._timers)
            timer.callback()
            return
        callbacks = self._frame_callbacks
        self._frame_callbacks = []
        self._next_frame_at = None
        self.frames_run += 1
        for callback in callbacks:
            callback(self._now)


class Debouncer:
    """Coalesce bursts of calls into one call after `wait_ms` of quiescence."""

    def __init__(self, loop: FrameLoop, wait_ms: float, fn: Callable[[], Any]) -> None:
        self.loop = loop
        self.wait_ms = float(wait_ms)
        self.fn = fn
        self._pending: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.cancelled

    def __call__(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
        self._pending = self.loop.call_later(self.wait_ms, self._fire)

    def _fire(self) -> None:
        self._pending = None
        _LOGGER.debug("Debounce window of %.0f ms elapsed; running %s", self.wait_ms, self.fn)
        self.fn()
