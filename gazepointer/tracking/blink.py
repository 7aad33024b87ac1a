"""
Blink detection from face blendshape scores.

The blink score is the mean of the eyeBlinkLeft / eyeBlinkRight blendshapes.
Above the threshold the eyes count as closed; holding them closed for longer
than hold_ms activates the click. Opening the eyes cancels both at once, so
the click lasts exactly as long as the hold.

Blendshapes may arrive as:
- a sequence of categories with .score (and usually .category_name)
- a mapping of category name -> score
- None when the model produced nothing this frame
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClickState:
    is_blinking: bool = False
    blink_start_ms: Optional[int] = None
    is_click_active: bool = False


class BlendshapeIndex:
    """Resolve blink category positions by name, once per model load.

    Falls back to fixed positions when the categories carry no names.
    """

    def __init__(
        self,
        left_name: str = "eyeBlinkLeft",
        right_name: str = "eyeBlinkRight",
        left_index: int = 9,
        right_index: int = 10,
    ) -> None:
        self.left_name = left_name
        self.right_name = right_name
        self.fallback = (int(left_index), int(right_index))
        self._resolved: Optional[Tuple[int, int]] = None

    def reset(self) -> None:
        self._resolved = None

    @property
    def resolved(self) -> Optional[Tuple[int, int]]:
        return self._resolved

    def _resolve(self, shapes: Sequence[Any]) -> Tuple[int, int]:
        names = [getattr(s, "category_name", None) for s in shapes]
        if self.left_name in names and self.right_name in names:
            self._resolved = (names.index(self.left_name), names.index(self.right_name))
        else:
            logger.warning(
                "Blendshape names unavailable, using positions %d/%d", self.fallback[0], self.fallback[1]
            )
            self._resolved = self.fallback
        return self._resolved

    def scores(self, blendshapes: Any) -> Tuple[float, float]:
        """Return (left, right) blink scores, 0.0 for anything missing."""
        if blendshapes is None:
            return 0.0, 0.0
        if isinstance(blendshapes, Mapping):
            return (
                float(blendshapes.get(self.left_name, 0.0)),
                float(blendshapes.get(self.right_name, 0.0)),
            )
        if len(blendshapes) == 0:
            return 0.0, 0.0
        idx = self._resolved if self._resolved is not None else self._resolve(blendshapes)
        if max(idx) >= len(blendshapes):
            return 0.0, 0.0
        return float(blendshapes[idx[0]].score), float(blendshapes[idx[1]].score)


class BlinkDetector:
    def __init__(
        self,
        threshold: float = 0.6,
        hold_ms: int = 1200,
        index: Optional[BlendshapeIndex] = None,
    ) -> None:
        if hold_ms <= 0:
            raise ValueError("hold_ms must be positive")
        self.threshold = float(threshold)
        self.hold_ms = int(hold_ms)
        self.index = index if index is not None else BlendshapeIndex()
        self.state = ClickState()

    def reset(self) -> None:
        self.state = ClickState()

    def blink_score(self, blendshapes: Any) -> float:
        left, right = self.index.scores(blendshapes)
        return (left + right) / 2.0

    def update(self, blendshapes: Any, now_ms: int) -> ClickState:
        score = self.blink_score(blendshapes)
        st = self.state
        if score > self.threshold:
            if not st.is_blinking:
                self.state = ClickState(is_blinking=True, blink_start_ms=int(now_ms), is_click_active=False)
            elif st.blink_start_ms is not None and now_ms - st.blink_start_ms > self.hold_ms:
                self.state = ClickState(True, st.blink_start_ms, True)
        elif st.is_blinking or st.is_click_active:
            self.state = ClickState()
        return self.state

    def hold_progress(self, now_ms: int) -> float:
        st = self.state
        if not st.is_blinking or st.blink_start_ms is None:
            return 0.0
        frac = (now_ms - st.blink_start_ms) / float(self.hold_ms)
        return max(0.0, min(1.0, frac))
