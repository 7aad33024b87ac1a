"""
Clock sources for frame timestamps.

All timing in the tracker is expressed in integer milliseconds. Components
never read the system clock themselves; the FrameProcessor asks its clock
once per frame and passes the value down.
"""
from __future__ import annotations

import time


class MonotonicClock:
    def now_ms(self) -> int:
        return int(time.perf_counter_ns() // 1_000_000)


class ManualClock:
    """Clock driven by hand, for replays and tests."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = int(start_ms)

    def now_ms(self) -> int:
        return self._now

    def set(self, ms: int) -> None:
        self._now = int(ms)

    def advance(self, ms: int) -> int:
        self._now += int(ms)
        return self._now
