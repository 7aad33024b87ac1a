"""
Gaze signal extraction from face mesh landmarks.

Two interchangeable strategies turn one frame of landmarks into a GazeSample:

- CornerRatioExtractor: iris x projected onto the eye-corner segment (0.0 at
  the first corner, 1.0 at the second), robust to head translation and
  rotation. Y is the raw iris y because eyelid motion during blinks makes a
  lid-relative ratio unstable.
- RawIrisExtractor: raw iris (x, y) in image coordinates.

Both average the two eyes and return None when the frame cannot produce a
finite sample.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GazeSample:
    x: float
    y: float


@dataclass(frozen=True)
class EyeLandmarks:
    """Face mesh indices used for gaze. 468/473 are the refined iris centers.

    Corner pairs are ordered so that both eye ratios grow in the same image
    direction.
    """

    left_inner: int = 362
    left_outer: int = 263
    left_iris: int = 473
    right_inner: int = 33
    right_outer: int = 133
    right_iris: int = 468

    def left(self) -> Tuple[int, int, int]:
        return self.left_inner, self.left_outer, self.left_iris

    def right(self) -> Tuple[int, int, int]:
        return self.right_inner, self.right_outer, self.right_iris


class GazeExtractor(Protocol):
    def compute_gaze(self, landmarks: Sequence[Any]) -> Optional[GazeSample]:
        ...


def _point(landmarks: Sequence[Any], index: int) -> Optional[np.ndarray]:
    if index < 0 or index >= len(landmarks):
        return None
    pt = landmarks[index]
    xy = np.array([float(pt.x), float(pt.y)], dtype=float)
    if not np.all(np.isfinite(xy)):
        return None
    return xy


class CornerRatioExtractor:
    def __init__(self, indices: EyeLandmarks = EyeLandmarks(), min_eye_span: float = 1e-6) -> None:
        self.indices = indices
        self.min_eye_span = float(min_eye_span)

    def _eye(self, landmarks: Sequence[Any], idx: Tuple[int, int, int]) -> Optional[Tuple[float, float]]:
        inner = _point(landmarks, idx[0])
        outer = _point(landmarks, idx[1])
        iris = _point(landmarks, idx[2])
        if inner is None or outer is None or iris is None:
            return None
        span = outer[0] - inner[0]
        if abs(span) < self.min_eye_span:
            return None
        return float((iris[0] - inner[0]) / span), float(iris[1])

    def compute_gaze(self, landmarks: Sequence[Any]) -> Optional[GazeSample]:
        if landmarks is None or len(landmarks) == 0:
            return None
        eyes = [
            e
            for e in (self._eye(landmarks, self.indices.left()), self._eye(landmarks, self.indices.right()))
            if e is not None
        ]
        if not eyes:
            logger.debug("No usable eye geometry in frame")
            return None
        arr = np.array(eyes, dtype=float)
        x, y = arr.mean(axis=0)
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return GazeSample(float(x), float(y))


class RawIrisExtractor:
    def __init__(self, indices: EyeLandmarks = EyeLandmarks()) -> None:
        self.indices = indices

    def compute_gaze(self, landmarks: Sequence[Any]) -> Optional[GazeSample]:
        if landmarks is None or len(landmarks) == 0:
            return None
        irises = [
            p
            for p in (_point(landmarks, self.indices.left_iris), _point(landmarks, self.indices.right_iris))
            if p is not None
        ]
        if not irises:
            return None
        x, y = np.mean(np.stack(irises, axis=0), axis=0)
        return GazeSample(float(x), float(y))


STRATEGIES = {
    "corner_ratio": CornerRatioExtractor,
    "raw_iris": RawIrisExtractor,
}


def make_extractor(name: str, indices: EyeLandmarks = EyeLandmarks()) -> GazeExtractor:
    try:
        cls = STRATEGIES[name]
    except KeyError:
        raise ValueError(f"unknown gaze strategy: {name!r}") from None
    return cls(indices=indices)
