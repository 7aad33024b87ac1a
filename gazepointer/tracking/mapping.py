"""
Calibration-rect mapping and cursor tracking.

CursorTracker maps a gaze sample through the calibrated range into screen
pixels and smooths the result. The X axis is mirrored for a front camera:
a larger corner ratio means the eye moved toward the user's left.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple

from gazepointer.tracking.geometry import GazeSample
from gazepointer.tracking.smoothing import AdaptiveSmoother


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2.0, self.height / 2.0


@dataclass(frozen=True)
class CalibrationRect:
    """Bounding box of the gaze signal, in gaze units (not pixels)."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def from_sample(cls, g: GazeSample) -> "CalibrationRect":
        return cls(g.x, g.x, g.y, g.y)

    def include(self, g: GazeSample) -> "CalibrationRect":
        return CalibrationRect(
            min(self.min_x, g.x),
            max(self.max_x, g.x),
            min(self.min_y, g.y),
            max(self.max_y, g.y),
        )

    def widened(self, min_span: float = 0.01, pad: float = 0.1) -> "CalibrationRect":
        """Return a copy where any axis narrower than min_span gets max += pad."""
        rect = self
        if rect.max_x == rect.min_x or abs(rect.max_x - rect.min_x) < min_span:
            rect = replace(rect, max_x=rect.max_x + pad)
        if rect.max_y == rect.min_y or abs(rect.max_y - rect.min_y) < min_span:
            rect = replace(rect, max_y=rect.max_y + pad)
        return rect

    def normalize(self, g: GazeSample, low: float = -0.1, high: float = 1.1) -> Tuple[float, float]:
        nx = (g.x - self.min_x) / (self.max_x - self.min_x)
        ny = (g.y - self.min_y) / (self.max_y - self.min_y)
        return max(low, min(high, nx)), max(low, min(high, ny))


@dataclass(frozen=True)
class CursorState:
    x: float = 0.0
    y: float = 0.0


class CursorTracker:
    def __init__(
        self,
        smoother: Optional[AdaptiveSmoother] = None,
        low: float = -0.1,
        high: float = 1.1,
        degenerate_span: float = 0.01,
        degenerate_pad: float = 0.1,
    ) -> None:
        if low >= high:
            raise ValueError("low bound must be below high bound")
        if degenerate_span <= 0:
            raise ValueError("degenerate_span must be positive")
        if degenerate_pad <= 0:
            raise ValueError("degenerate_pad must be positive")
        self.smoother = smoother if smoother is not None else AdaptiveSmoother()
        self.low = float(low)
        self.high = float(high)
        self.degenerate_span = float(degenerate_span)
        self.degenerate_pad = float(degenerate_pad)
        self.state = CursorState()
        self.last_target: Optional[Tuple[float, float]] = None

    def reset(self) -> None:
        self.smoother.reset()
        self.state = CursorState()
        self.last_target = None

    def target_for(self, gaze: GazeSample, rect: CalibrationRect, viewport: Viewport) -> Tuple[float, float]:
        """Unsmoothed screen target for a gaze sample."""
        rect = rect.widened(self.degenerate_span, self.degenerate_pad)
        nx, ny = rect.normalize(gaze, self.low, self.high)
        return (1.0 - nx) * viewport.width, ny * viewport.height

    def update(self, gaze: GazeSample, rect: CalibrationRect, viewport: Viewport) -> CursorState:
        target = self.target_for(gaze, rect, viewport)
        self.last_target = target
        x, y = self.smoother.apply(target)
        self.state = CursorState(x, y)
        return self.state
