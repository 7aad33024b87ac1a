"""
Five-point timed calibration.

The user looks at the center and then at each corner in turn. Each stage
lasts stage_ms; samples are only recorded once sample_fraction of that time
has passed, giving the eye time to land on the target. The running min/max
of the recorded samples becomes the CalibrationRect the cursor maps through.

Stage order: CENTER -> TOP_LEFT -> TOP_RIGHT -> BOTTOM_RIGHT -> BOTTOM_LEFT -> FINISHED
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from gazepointer.tracking.geometry import GazeSample
from gazepointer.tracking.mapping import CalibrationRect, Viewport

logger = logging.getLogger(__name__)


class CalibrationStage(enum.Enum):
    CENTER = "center"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM_LEFT = "bottom_left"
    FINISHED = "finished"


STAGE_ORDER = [
    CalibrationStage.CENTER,
    CalibrationStage.TOP_LEFT,
    CalibrationStage.TOP_RIGHT,
    CalibrationStage.BOTTOM_RIGHT,
    CalibrationStage.BOTTOM_LEFT,
    CalibrationStage.FINISHED,
]

INSTRUCTIONS: Dict[CalibrationStage, str] = {
    CalibrationStage.CENTER: "Look at the center",
    CalibrationStage.TOP_LEFT: "Look at the top-left dot",
    CalibrationStage.TOP_RIGHT: "Look at the top-right dot",
    CalibrationStage.BOTTOM_RIGHT: "Look at the bottom-right dot",
    CalibrationStage.BOTTOM_LEFT: "Look at the bottom-left dot",
    CalibrationStage.FINISHED: "Calibration complete",
}

# Used when a calibration run finished without recording anything.
FALLBACK_RECT = CalibrationRect(0.0, 1.0, 0.0, 1.0)


@dataclass(frozen=True)
class CalibrationTick:
    stage: CalibrationStage
    target: Optional[Tuple[float, float]]
    instruction: str
    progress: float
    rect: Optional[CalibrationRect]


def target_point(stage: CalibrationStage, viewport: Viewport, padding: float = 150.0) -> Optional[Tuple[float, float]]:
    w, h = float(viewport.width), float(viewport.height)
    if stage is CalibrationStage.CENTER:
        return viewport.center
    if stage is CalibrationStage.TOP_LEFT:
        return (padding, padding)
    if stage is CalibrationStage.TOP_RIGHT:
        return (w - padding, padding)
    if stage is CalibrationStage.BOTTOM_RIGHT:
        return (w - padding, h - padding)
    if stage is CalibrationStage.BOTTOM_LEFT:
        return (padding, h - padding)
    return None


class CalibrationController:
    def __init__(
        self,
        stage_ms: int = 2000,
        sample_fraction: float = 0.5,
        padding: float = 150.0,
        degenerate_span: float = 0.01,
        degenerate_pad: float = 0.1,
    ) -> None:
        if stage_ms <= 0:
            raise ValueError("stage_ms must be positive")
        if not (0.0 <= sample_fraction < 1.0):
            raise ValueError("sample_fraction must be in [0, 1)")
        if degenerate_span <= 0:
            raise ValueError("degenerate_span must be positive")
        if degenerate_pad <= 0:
            raise ValueError("degenerate_pad must be positive")
        self.stage_ms = int(stage_ms)
        self.sample_fraction = float(sample_fraction)
        self.padding = float(padding)
        self.degenerate_span = float(degenerate_span)
        self.degenerate_pad = float(degenerate_pad)
        self.reset()

    def reset(self) -> None:
        self.stage = CalibrationStage.CENTER
        self.stage_start_ms: Optional[int] = None
        self._rect: Optional[CalibrationRect] = None
        self._frozen: Optional[CalibrationRect] = None

    @property
    def finished(self) -> bool:
        return self.stage is CalibrationStage.FINISHED

    @property
    def rect(self) -> Optional[CalibrationRect]:
        return self._frozen if self._frozen is not None else self._rect

    def calibrated_rect(self) -> Optional[CalibrationRect]:
        return self._frozen

    def progress(self, now_ms: int) -> float:
        if self.finished:
            return 1.0
        if self.stage_start_ms is None:
            return 0.0
        return max(0.0, min(1.0, (now_ms - self.stage_start_ms) / float(self.stage_ms)))

    def _fold(self, gaze: GazeSample) -> None:
        if self._rect is None:
            self._rect = CalibrationRect.from_sample(gaze)
        else:
            self._rect = self._rect.include(gaze)

    def _freeze(self) -> None:
        rect = self._rect
        if rect is None:
            logger.warning("Calibration recorded no samples, falling back to %s", FALLBACK_RECT)
            rect = FALLBACK_RECT
        self._frozen = rect.widened(self.degenerate_span, self.degenerate_pad)
        logger.info("Calibration complete: %s", self._frozen)

    def _advance(self) -> None:
        nxt = STAGE_ORDER[STAGE_ORDER.index(self.stage) + 1]
        logger.info("Calibration stage %s -> %s", self.stage.name, nxt.name)
        self.stage = nxt
        self.stage_start_ms = None
        if nxt is CalibrationStage.FINISHED:
            self._freeze()

    def tick(self, gaze: GazeSample, now_ms: int, viewport: Viewport) -> CalibrationTick:
        if not self.finished:
            if self.stage_start_ms is None:
                self.stage_start_ms = int(now_ms)
            elapsed = now_ms - self.stage_start_ms
            if self.stage_ms * self.sample_fraction < elapsed <= self.stage_ms:
                self._fold(gaze)
            elif elapsed > self.stage_ms:
                self._advance()
        return CalibrationTick(
            stage=self.stage,
            target=target_point(self.stage, viewport, self.padding),
            instruction=INSTRUCTIONS[self.stage],
            progress=self.progress(now_ms),
            rect=self.rect,
        )
