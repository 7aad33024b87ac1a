"""
Settings manager for gazepointer.

Loads/saves JSON settings from gazepointer/settings.json (or an explicit path)
and exposes typed accessors. Only tuning constants live here; calibration
results are kept in memory and never written.
"""
from __future__ import annotations

import copy
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    "geometry": {"strategy": "corner_ratio"},
    "blink": {
        "threshold": 0.6,
        "hold_ms": 1200,
        "left_name": "eyeBlinkLeft",
        "right_name": "eyeBlinkRight",
        "left_index": 9,
        "right_index": 10,
    },
    "calibration": {"stage_ms": 2000, "sample_fraction": 0.5, "padding": 150.0},
    "mapping": {"low": -0.1, "high": 1.1, "degenerate_span": 0.01, "degenerate_pad": 0.1},
    "smoothing": {"reference_px": 300.0, "min_alpha": 0.05, "max_alpha": 0.6},
}


class TrackerSettings:
    def __init__(self, path: Optional[str] = None) -> None:
        if path is None:
            here = os.path.dirname(os.path.abspath(__file__))
            path = os.path.join(os.path.dirname(here), "settings.json")
        self.path = path
        self.data: Dict[str, Any] = {}
        self.load()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackerSettings":
        inst = cls.__new__(cls)
        inst.path = None
        inst.data = copy.deepcopy(data)
        return inst

    def load(self) -> None:
        if not os.path.exists(self.path):
            self.data = copy.deepcopy(DEFAULTS)
            return
        with open(self.path, "r", encoding="utf-8") as f:
            self.data = json.load(f)

    def save(self) -> None:
        if self.path is None:
            raise RuntimeError("settings were not loaded from a file")
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, indent=2)

    # Lookup helpers ------------------------------------------------------
    def _get(self, section: str, key: str) -> Any:
        sec = self.data.get(section, {})
        if not isinstance(sec, dict):
            sec = {}
        return sec.get(key, DEFAULTS[section][key])

    def _float(self, section: str, key: str) -> float:
        v = self._get(section, key)
        try:
            return float(v)
        except (TypeError, ValueError):
            logger.warning("Bad value for %s.%s: %r, using default", section, key, v)
            return float(DEFAULTS[section][key])

    def _int(self, section: str, key: str) -> int:
        v = self._get(section, key)
        try:
            return int(v)
        except (TypeError, ValueError):
            logger.warning("Bad value for %s.%s: %r, using default", section, key, v)
            return int(DEFAULTS[section][key])

    def set(self, section: str, key: str, value: Any) -> None:
        self.data.setdefault(section, {})[key] = value

    # Geometry ------------------------------------------------------------
    def geometry_strategy(self) -> str:
        return str(self._get("geometry", "strategy"))

    # Blink ---------------------------------------------------------------
    def blink_threshold(self) -> float:
        return self._float("blink", "threshold")

    def blink_hold_ms(self) -> int:
        return self._int("blink", "hold_ms")

    def blink_names(self) -> tuple[str, str]:
        return str(self._get("blink", "left_name")), str(self._get("blink", "right_name"))

    def blink_indices(self) -> tuple[int, int]:
        return self._int("blink", "left_index"), self._int("blink", "right_index")

    # Calibration ---------------------------------------------------------
    def calibration_stage_ms(self) -> int:
        return self._int("calibration", "stage_ms")

    def calibration_sample_fraction(self) -> float:
        return self._float("calibration", "sample_fraction")

    def calibration_padding(self) -> float:
        return self._float("calibration", "padding")

    # Mapping -------------------------------------------------------------
    def mapping_bounds(self) -> tuple[float, float]:
        return self._float("mapping", "low"), self._float("mapping", "high")

    def degenerate_span(self) -> float:
        return self._float("mapping", "degenerate_span")

    def degenerate_pad(self) -> float:
        return self._float("mapping", "degenerate_pad")

    # Smoothing -----------------------------------------------------------
    def smoothing_reference_px(self) -> float:
        return self._float("smoothing", "reference_px")

    def smoothing_alpha_bounds(self) -> tuple[float, float]:
        return self._float("smoothing", "min_alpha"), self._float("smoothing", "max_alpha")
