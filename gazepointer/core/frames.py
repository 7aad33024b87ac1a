"""
Adapters from face-landmarker output to the inputs FrameProcessor takes.

Works with the MediaPipe Tasks FaceLandmarkerResult shape without importing
mediapipe: `face_landmarks` is a list of faces (each a list of landmarks with
.x/.y/.z), `face_blendshapes` is a list of faces (each a list of categories
with .category_name/.score). Only the first face is used.
"""
from __future__ import annotations

from typing import Any, Optional, Sequence, Tuple


def first_face(result: Any) -> Tuple[Sequence[Any], Optional[Sequence[Any]]]:
    if result is None:
        return [], None
    faces = getattr(result, "face_landmarks", None) or []
    landmarks = faces[0] if len(faces) > 0 else []
    shapes = getattr(result, "face_blendshapes", None) or []
    blendshapes = shapes[0] if len(shapes) > 0 else None
    return landmarks, blendshapes
