"""
Single-consumer handoff between a detection thread and the tracker core.

The landmarker callback runs on its own thread and calls offer(); the thread
that owns the FrameProcessor calls drain() or get(). The queue is bounded and
drops the oldest pending result when full, so a slow consumer always works
on recent frames instead of building up lag.
"""
from __future__ import annotations

import logging
import queue
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class FrameHandoff:
    def __init__(self, maxsize: int = 2) -> None:
        self._q: queue.Queue = queue.Queue(maxsize=max(1, int(maxsize)))
        self.dropped = 0

    def offer(self, item: Any) -> None:
        while True:
            try:
                self._q.put_nowait(item)
                return
            except queue.Full:
                try:
                    self._q.get_nowait()
                    self.dropped += 1
                    logger.debug("Dropped stale frame (total %d)", self.dropped)
                except queue.Empty:
                    pass

    def get(self, timeout: Optional[float] = None) -> Optional[Any]:
        try:
            return self._q.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self, handle: Callable[[Any], Any]) -> int:
        """Hand every pending item to handle(), in arrival order."""
        n = 0
        while True:
            try:
                item = self._q.get_nowait()
            except queue.Empty:
                return n
            handle(item)
            n += 1

    def pending(self) -> int:
        return self._q.qsize()
