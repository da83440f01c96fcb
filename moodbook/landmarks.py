"""
Facial landmark acquisition with MediaPipe FaceMesh.

The mesh returns 468 points in image-normalized coordinates (origin top-left).
We pick the mouth / eye / eyebrow regions out of it and re-normalize every
point to the face bounding box with the origin at the bottom-left, which is
the frame the mood thresholds were tuned in.

MediaPipe is imported lazily so tests can monkeypatch sys.modules['mediapipe'].
"""
from __future__ import annotations
from typing import Optional, Sequence, Tuple
import logging

import cv2
import numpy as np

from moodbook.models import LandmarkSet

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# FaceMesh indices per region (left/right are the subject's)
# -----------------------------------------------------------------------------
# inner lips: left corner, upper lip, lower lip, right corner
MOUTH_IDX = (78, 82, 13, 312, 14, 87, 308)
# corner, top, top, corner, bottom, bottom -> [1] and [5] face each other
LEFT_EYE_IDX = (362, 385, 387, 263, 373, 380)
RIGHT_EYE_IDX = (33, 160, 158, 133, 153, 144)
# inner -> outer
LEFT_BROW_IDX = (336, 296, 334, 293, 300)
RIGHT_BROW_IDX = (107, 66, 105, 63, 70)

MESH_POINTS = 468


def landmarks_from_mesh(points: Sequence[Tuple[float, float]]) -> Optional[LandmarkSet]:
    """
    Convert a FaceMesh point list into a LandmarkSet.

    Args:
        points: (x, y) image-normalized coordinates, FaceMesh order.

    Returns:
        LandmarkSet in face-box coordinates, or None if the mesh is incomplete
        or degenerate.
    """
    if len(points) < MESH_POINTS:
        logger.debug(f"[landmarks] incomplete mesh: {len(points)} points")
        return None

    coords = np.asarray(points, dtype=float)[:, :2]
    minx, miny = coords.min(axis=0)
    maxx, maxy = coords.max(axis=0)
    width, height = maxx - minx, maxy - miny
    if width <= 0 or height <= 0:
        logger.debug("[landmarks] degenerate face box")
        return None

    def region(idx):
        pts = coords[list(idx)]
        xs = (pts[:, 0] - minx) / width
        ys = 1.0 - (pts[:, 1] - miny) / height
        return [{"x": float(x), "y": float(y)} for x, y in zip(xs, ys)]

    return LandmarkSet(
        mouth=region(MOUTH_IDX),
        left_eye=region(LEFT_EYE_IDX),
        right_eye=region(RIGHT_EYE_IDX),
        left_eyebrow=region(LEFT_BROW_IDX),
        right_eyebrow=region(RIGHT_BROW_IDX),
    )


def face_box_from_mesh(points: Sequence[Tuple[float, float]], frame_w: int, frame_h: int) -> dict:
    """Pixel bounding box {x,y,w,h} of the mesh on a frame."""
    coords = np.asarray(points, dtype=float)[:, :2]
    minx, miny = coords.min(axis=0)
    maxx, maxy = coords.max(axis=0)
    return {
        "x": int(minx * frame_w),
        "y": int(miny * frame_h),
        "w": int((maxx - minx) * frame_w),
        "h": int((maxy - miny) * frame_h),
    }


class LandmarkDetector:
    """Most-prominent-face landmark extraction for BGR frames."""
    def __init__(self,
                 static_image_mode: bool = False,
                 min_detection_confidence: float = 0.5,
                 min_tracking_confidence: float = 0.5):
        self.static_image_mode = static_image_mode
        self.min_detection_confidence = float(min_detection_confidence)
        self.min_tracking_confidence = float(min_tracking_confidence)
        self._mesh = None
        self.last_box: Optional[dict] = None

    @classmethod
    def from_settings(cls, settings, static_image_mode: bool = False) -> "LandmarkDetector":
        return cls(
            static_image_mode=static_image_mode,
            min_detection_confidence=settings.MIN_DETECTION_CONFIDENCE,
            min_tracking_confidence=settings.MIN_TRACKING_CONFIDENCE,
        )

    def _ensure_mesh(self):
        if self._mesh is None:
            import mediapipe as mp
            self._mesh = mp.solutions.face_mesh.FaceMesh(
                static_image_mode=self.static_image_mode,
                max_num_faces=1,
                refine_landmarks=False,
                min_detection_confidence=self.min_detection_confidence,
                min_tracking_confidence=self.min_tracking_confidence,
            )
            logger.debug(f"[landmarks] FaceMesh ready static={self.static_image_mode}")
        return self._mesh

    def detect(self, frame: np.ndarray) -> Optional[LandmarkSet]:
        """Return the landmark set of the most prominent face, or None."""
        mesh = self._ensure_mesh()
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = mesh.process(rgb)
        faces = getattr(results, "multi_face_landmarks", None) or []
        if not faces or not faces[0].landmark:
            self.last_box = None
            return None
        points = [(p.x, p.y) for p in faces[0].landmark]
        H, W = frame.shape[:2]
        self.last_box = face_box_from_mesh(points, W, H)
        return landmarks_from_mesh(points)

    def close(self) -> None:
        if self._mesh is not None:
            self._mesh.close()
            self._mesh = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
