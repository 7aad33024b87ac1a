from __future__ import annotations

import math
from typing import Tuple


class AdaptiveSmoother:
    """Single-pole exponential smoother with a distance-dependent gain.

    alpha = clamp(distance / reference_px, min_alpha, max_alpha)

    Small moves (jitter while fixating) get min_alpha and are damped hard,
    large saccades get up to max_alpha and follow with little lag.
    State starts at origin and is only cleared by reset().
    """

    def __init__(self, reference_px: float = 300.0, min_alpha: float = 0.05, max_alpha: float = 0.6) -> None:
        if reference_px <= 0:
            raise ValueError("reference_px must be positive")
        if not (0.0 <= min_alpha <= max_alpha <= 1.0):
            raise ValueError("alpha bounds must satisfy 0 <= min_alpha <= max_alpha <= 1")
        self.reference_px = float(reference_px)
        self.min_alpha = float(min_alpha)
        self.max_alpha = float(max_alpha)
        self._state: Tuple[float, float] = (0.0, 0.0)

    def reset(self) -> None:
        self._state = (0.0, 0.0)

    @property
    def state(self) -> Tuple[float, float]:
        return self._state

    def alpha_for(self, distance: float) -> float:
        a = float(distance) / self.reference_px
        if a != a:  # NaN
            return self.min_alpha
        return max(self.min_alpha, min(self.max_alpha, a))

    def apply(self, target: Tuple[float, float]) -> Tuple[float, float]:
        tx, ty = float(target[0]), float(target[1])
        sx, sy = self._state
        alpha = self.alpha_for(math.hypot(tx - sx, ty - sy))
        self._state = (sx + (tx - sx) * alpha, sy + (ty - sy) * alpha)
        return self._state
