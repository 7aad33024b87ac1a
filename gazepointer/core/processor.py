"""
Per-frame orchestration.

FrameProcessor owns one tracker's worth of state (calibration, cursor,
click) and turns each landmark frame into an immutable FrameSnapshot for the
renderer. Frames are processed one at a time on a single thread; nothing is
buffered between frames.

Frame flow:
  landmarks -> gaze sample -> blink/click update
            -> calibration tick (until FINISHED) or cursor update (after)
            -> snapshot
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Optional, Sequence, Tuple

from gazepointer.calibration.stages import FALLBACK_RECT, INSTRUCTIONS, CalibrationController, CalibrationStage
from gazepointer.control.click import ClickStateMachine
from gazepointer.core.clock import MonotonicClock
from gazepointer.core.frames import first_face
from gazepointer.core.settings import TrackerSettings
from gazepointer.tracking.blink import BlendshapeIndex, BlinkDetector
from gazepointer.tracking.geometry import CornerRatioExtractor, GazeExtractor, make_extractor
from gazepointer.tracking.mapping import CursorTracker, Viewport
from gazepointer.tracking.smoothing import AdaptiveSmoother

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameSnapshot:
    stage: CalibrationStage
    instruction: str
    target: Optional[Tuple[float, float]] = None
    cursor: Optional[Tuple[float, float]] = None
    calibration_progress: float = 0.0
    click_active: bool = False
    is_blinking: bool = False
    hold_progress: float = 0.0
    click_started: bool = False
    face_detected: bool = False
    timestamp_ms: Optional[int] = None

    @property
    def position(self) -> Optional[Tuple[float, float]]:
        return self.cursor if self.cursor is not None else self.target

    @property
    def calibrating(self) -> bool:
        return self.stage is not CalibrationStage.FINISHED


class FrameProcessor:
    def __init__(
        self,
        extractor: Optional[GazeExtractor] = None,
        calibration: Optional[CalibrationController] = None,
        cursor: Optional[CursorTracker] = None,
        click: Optional[ClickStateMachine] = None,
        clock: Any = None,
    ) -> None:
        self.extractor = extractor if extractor is not None else CornerRatioExtractor()
        self.calibration = calibration if calibration is not None else CalibrationController()
        self.cursor = cursor if cursor is not None else CursorTracker()
        self.click = click if click is not None else ClickStateMachine()
        self.clock = clock if clock is not None else MonotonicClock()
        self._last: Optional[FrameSnapshot] = None

    @classmethod
    def from_settings(cls, settings: TrackerSettings, clock: Any = None) -> "FrameProcessor":
        left_name, right_name = settings.blink_names()
        left_idx, right_idx = settings.blink_indices()
        low, high = settings.mapping_bounds()
        min_alpha, max_alpha = settings.smoothing_alpha_bounds()
        return cls(
            extractor=make_extractor(settings.geometry_strategy()),
            calibration=CalibrationController(
                stage_ms=settings.calibration_stage_ms(),
                sample_fraction=settings.calibration_sample_fraction(),
                padding=settings.calibration_padding(),
                degenerate_span=settings.degenerate_span(),
                degenerate_pad=settings.degenerate_pad(),
            ),
            cursor=CursorTracker(
                smoother=AdaptiveSmoother(settings.smoothing_reference_px(), min_alpha, max_alpha),
                low=low,
                high=high,
                degenerate_span=settings.degenerate_span(),
                degenerate_pad=settings.degenerate_pad(),
            ),
            click=ClickStateMachine(
                BlinkDetector(
                    threshold=settings.blink_threshold(),
                    hold_ms=settings.blink_hold_ms(),
                    index=BlendshapeIndex(left_name, right_name, left_idx, right_idx),
                )
            ),
            clock=clock,
        )

    @property
    def last_snapshot(self) -> Optional[FrameSnapshot]:
        return self._last

    def _idle_snapshot(self) -> FrameSnapshot:
        stage = self.calibration.stage
        return FrameSnapshot(stage=stage, instruction=INSTRUCTIONS[stage])

    def process(
        self,
        landmarks: Sequence[Any],
        blendshapes: Any,
        viewport: Viewport,
        now_ms: Optional[int] = None,
    ) -> FrameSnapshot:
        now = int(now_ms) if now_ms is not None else self.clock.now_ms()
        gaze = self.extractor.compute_gaze(landmarks) if landmarks is not None else None
        if gaze is None:
            logger.debug("No face at %d ms, keeping previous state", now)
            prev = self._last if self._last is not None else self._idle_snapshot()
            return replace(prev, face_detected=False, click_started=False)

        click = self.click.update(blendshapes, now)
        target = cursor = None
        if not self.calibration.finished:
            tick = self.calibration.tick(gaze, now, viewport)
            stage, instruction, target, progress = tick.stage, tick.instruction, tick.target, tick.progress
        else:
            rect = self.calibration.calibrated_rect()
            if rect is None:
                rect = FALLBACK_RECT
            st = self.cursor.update(gaze, rect, viewport)
            cursor = (st.x, st.y)
            stage, instruction, progress = CalibrationStage.FINISHED, INSTRUCTIONS[CalibrationStage.FINISHED], 1.0

        self._last = FrameSnapshot(
            stage=stage,
            instruction=instruction,
            target=target,
            cursor=cursor,
            calibration_progress=progress,
            click_active=click.is_click_active,
            is_blinking=click.is_blinking,
            hold_progress=click.hold_progress,
            click_started=click.click_started,
            face_detected=True,
            timestamp_ms=now,
        )
        return self._last

    def process_result(self, result: Any, viewport: Viewport, now_ms: Optional[int] = None) -> FrameSnapshot:
        landmarks, blendshapes = first_face(result)
        return self.process(landmarks, blendshapes, viewport, now_ms)

    def recalibrate(self) -> None:
        logger.info("Recalibration requested")
        self.calibration.reset()
        self._last = None

    def clear(self) -> None:
        """Reset calibration, cursor and click state. Call between frames only."""
        logger.info("Tracker state cleared")
        self.calibration.reset()
        self.cursor.reset()
        self.click.reset()
        self._last = None
