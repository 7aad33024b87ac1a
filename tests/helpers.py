from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from gazepointer.tracking.geometry import EyeLandmarks


@dataclass
class Pt:
    x: float
    y: float
    z: float = 0.0


@dataclass
class Category:
    score: float
    category_name: Optional[str] = None


def face(
    left_ratio: float = 0.5,
    right_ratio: float = 0.5,
    iris_y: float = 0.5,
    left_span: float = 0.1,
    right_span: float = 0.1,
    idx: EyeLandmarks = EyeLandmarks(),
) -> List[Pt]:
    """478-point face mesh with only the eye points filled in."""
    pts = [Pt(0.5, 0.5) for _ in range(478)]
    pts[idx.left_inner] = Pt(0.55, 0.4)
    pts[idx.left_outer] = Pt(0.55 + left_span, 0.4)
    pts[idx.left_iris] = Pt(0.55 + left_ratio * left_span, iris_y)
    pts[idx.right_inner] = Pt(0.30, 0.4)
    pts[idx.right_outer] = Pt(0.30 + right_span, 0.4)
    pts[idx.right_iris] = Pt(0.30 + right_ratio * right_span, iris_y)
    return pts


def blink_shapes(score: float, named: bool = True) -> List[Category]:
    """52 ARKit-style categories with both blink entries at `score`."""
    names = ["_neutral", "browDownLeft", "browDownRight", "browInnerUp", "browOuterUpLeft",
             "browOuterUpRight", "cheekPuff", "cheekSquintLeft", "cheekSquintRight",
             "eyeBlinkLeft", "eyeBlinkRight"]
    names += [f"shape{i}" for i in range(len(names), 52)]
    out = []
    for n in names:
        s = score if n in ("eyeBlinkLeft", "eyeBlinkRight") else 0.0
        out.append(Category(s, n if named else None))
    return out
