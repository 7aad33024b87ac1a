import math

import pytest

from gazepointer.tracking.geometry import (
    CornerRatioExtractor,
    EyeLandmarks,
    GazeSample,
    RawIrisExtractor,
    make_extractor,
)

from helpers import Pt, face


def test_corner_ratio_averages_both_eyes():
    g = CornerRatioExtractor().compute_gaze(face(left_ratio=0.2, right_ratio=0.6, iris_y=0.45))
    assert g.x == pytest.approx(0.4)
    assert g.y == pytest.approx(0.45)


def test_corner_ratio_ignores_head_translation():
    a = face(left_ratio=0.3, right_ratio=0.3)
    b = [Pt(p.x + 0.1, p.y) for p in a]
    ex = CornerRatioExtractor()
    assert ex.compute_gaze(a).x == pytest.approx(ex.compute_gaze(b).x)


def test_degenerate_corners_are_finite():
    ex = CornerRatioExtractor()
    g = ex.compute_gaze(face(left_ratio=0.25, left_span=0.0, right_ratio=0.75))
    assert math.isfinite(g.x) and math.isfinite(g.y)
    assert g.x == pytest.approx(0.75)


def test_both_eyes_degenerate_gives_none():
    g = CornerRatioExtractor().compute_gaze(face(left_span=0.0, right_span=0.0))
    assert g is None


def test_empty_or_short_landmarks():
    ex = CornerRatioExtractor()
    assert ex.compute_gaze([]) is None
    assert ex.compute_gaze([Pt(0.5, 0.5)] * 100) is None


def test_non_finite_point_drops_eye():
    pts = face(left_ratio=0.1, right_ratio=0.9)
    pts[EyeLandmarks().left_iris] = Pt(float("nan"), 0.5)
    g = CornerRatioExtractor().compute_gaze(pts)
    assert g.x == pytest.approx(0.9)


def test_raw_iris_strategy():
    pts = face(left_ratio=0.5, right_ratio=0.5, iris_y=0.42)
    g = RawIrisExtractor().compute_gaze(pts)
    assert g.x == pytest.approx((0.60 + 0.35) / 2)
    assert g.y == pytest.approx(0.42)


def test_make_extractor():
    assert isinstance(make_extractor("corner_ratio"), CornerRatioExtractor)
    assert isinstance(make_extractor("raw_iris"), RawIrisExtractor)
    with pytest.raises(ValueError):
        make_extractor("pupil_glint")


def test_gaze_sample_is_frozen():
    g = GazeSample(0.1, 0.2)
    with pytest.raises(Exception):
        g.x = 0.3  # type: ignore[misc]
