"""
Blink-hold click.

ClickStateMachine wraps a BlinkDetector and reports what a renderer or an
OS click injector needs: whether the click is active, how far along the hold
is (for a growing progress ring), and whether the click became active on
this very frame.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from gazepointer.tracking.blink import BlinkDetector


@dataclass(frozen=True)
class ClickStatus:
    is_click_active: bool = False
    is_blinking: bool = False
    hold_progress: float = 0.0
    click_started: bool = False


class ClickStateMachine:
    def __init__(self, detector: Optional[BlinkDetector] = None) -> None:
        self.detector = detector if detector is not None else BlinkDetector()
        self.status = ClickStatus()

    def reset(self) -> None:
        self.detector.reset()
        self.status = ClickStatus()

    @property
    def is_click_active(self) -> bool:
        return self.detector.state.is_click_active

    def update(self, blendshapes: Any, now_ms: int) -> ClickStatus:
        was_active = self.status.is_click_active
        st = self.detector.update(blendshapes, now_ms)
        self.status = ClickStatus(
            is_click_active=st.is_click_active,
            is_blinking=st.is_blinking,
            hold_progress=self.detector.hold_progress(now_ms),
            click_started=st.is_click_active and not was_active,
        )
        return self.status
