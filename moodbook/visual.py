
"""Visualization helpers for the live mood window.

- draw_mood_overlay: draw the mood label + caption in the mood color, optional landmark dots,
  or a "Scanning..." banner before the first result is available

Hershey fonts only cover ASCII, so emoji and other non-ASCII glyphs are dropped from drawn text.
"""
from __future__ import annotations
import cv2
import numpy as np
from typing import Optional, Tuple

from moodbook.models import LandmarkSet, MoodResult
from moodbook.presentation import COLOR_BGR, SCANNING_TEXT

SCANNING_COLOR: Tuple[int, int, int] = (200, 200, 200)
LANDMARK_COLOR: Tuple[int, int, int] = (255, 255, 0)


def _ascii(text: str) -> str:
    out = text.replace("…", "...")
    return out.encode("ascii", errors="ignore").decode("ascii").strip()


def draw_mood_overlay(frame: np.ndarray,
                      result: Optional[MoodResult] = None,
                      landmarks: Optional[LandmarkSet] = None,
                      face_box: Optional[dict] = None) -> np.ndarray:
    """Draw the current mood on a frame.

    Args:
        frame: BGR image
        result: latest mood result, or None while scanning
        landmarks: optional landmark set to plot; needs face_box ({x,y,w,h} in pixels)
            to map face-box coordinates back onto the frame
        face_box: pixel box the landmark coordinates are relative to

    Returns:
        Annotated copy of the frame
    """
    out = frame.copy()
    h, w = out.shape[:2]

    if result is None:
        cv2.putText(out, _ascii(SCANNING_TEXT), (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 1.0, SCANNING_COLOR, 2, cv2.LINE_AA)
        return out

    color = COLOR_BGR.get(result.color, SCANNING_COLOR)
    label = result.label.value
    if not result.face_detected:
        label += " (no face)"
    cv2.putText(out, label, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 1.0, color, 2, cv2.LINE_AA)
    cv2.putText(out, _ascii(result.caption), (10, max(0, h - 15)), cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 1, cv2.LINE_AA)

    if landmarks is not None and face_box:
        bx, by = int(face_box.get("x", 0)), int(face_box.get("y", 0))
        bw, bh = int(face_box.get("w", 0)), int(face_box.get("h", 0))
        regions = (landmarks.mouth, landmarks.left_eye, landmarks.right_eye,
                   landmarks.left_eyebrow, landmarks.right_eyebrow)
        for pts in regions:
            for p in pts:
                # face-box coords have y pointing up
                px = int(bx + p.x * bw)
                py = int(by + (1.0 - p.y) * bh)
                if 0 <= px < w and 0 <= py < h:
                    cv2.circle(out, (px, py), 2, LANDMARK_COLOR, -1)

    return out
