"""
Rule-based mood classification from facial landmark geometry.

The rules are evaluated in a fixed order and the first match wins:
Sleepy -> Happy -> Laugh -> Shock, with Sad as the fallback.
A missing face (or a landmark set with too few points) is classified as Sad.
"""
from __future__ import annotations
from typing import Optional

from moodbook.geometry import angle_between, distance, vertical_distance
from moodbook.models import LandmarkSet, MoodFeatures, MoodLabel

# -----------------------------------------------------------------------------
# Minimum points per region
# -----------------------------------------------------------------------------
MIN_MOUTH_POINTS = 4
MIN_EYE_POINTS = 6
MIN_BROW_POINTS = 2

# -----------------------------------------------------------------------------
# Decision thresholds
# -----------------------------------------------------------------------------
SLEEPY_MOUTH_RATIO = 0.6
SLEEPY_EYE_MAX = 0.12
HAPPY_MOUTH_RATIO = 0.35
HAPPY_EYE_MAX = 0.18
LAUGH_MOUTH_RATIO = 0.5
SHOCK_BROW_SLOPE = 15.0        # degrees
SHOCK_EYE_MIN = 0.25

NO_FACE_MOOD = MoodLabel.SAD


def is_classifiable(landmarks: Optional[LandmarkSet]) -> bool:
    if landmarks is None:
        return False
    return (
        len(landmarks.mouth) >= MIN_MOUTH_POINTS
        and len(landmarks.left_eye) >= MIN_EYE_POINTS
        and len(landmarks.right_eye) >= MIN_EYE_POINTS
        and len(landmarks.left_eyebrow) >= MIN_BROW_POINTS
        and len(landmarks.right_eyebrow) >= MIN_BROW_POINTS
    )


def compute_features(landmarks: LandmarkSet) -> MoodFeatures:
    """
    Derive the geometric quantities the rules operate on.

    Args:
        landmarks: A landmark set that satisfies ``is_classifiable``.

    Returns:
        MoodFeatures
    """
    mouth = landmarks.mouth
    n = len(mouth)
    top_lip = mouth[n // 3]
    bottom_lip = mouth[(n * 2) // 3]

    mouth_width = distance(mouth[0], mouth[-1])
    mouth_height = distance(top_lip, bottom_lip)
    mouth_ratio = mouth_height / mouth_width if mouth_width > 0 else 0.0

    return MoodFeatures(
        mouth_width=mouth_width,
        mouth_height=mouth_height,
        mouth_ratio=mouth_ratio,
        top_lip=top_lip,
        bottom_lip=bottom_lip,
        left_eye_open=vertical_distance(landmarks.left_eye[1], landmarks.left_eye[5]),
        right_eye_open=vertical_distance(landmarks.right_eye[1], landmarks.right_eye[5]),
        brow_slope=angle_between(landmarks.left_eyebrow[0], landmarks.left_eyebrow[-1]),
    )


def classify_features(f: MoodFeatures) -> MoodLabel:
    left, right = f.left_eye_open, f.right_eye_open

    if f.mouth_ratio > SLEEPY_MOUTH_RATIO and left < SLEEPY_EYE_MAX and right < SLEEPY_EYE_MAX:
        return MoodLabel.SLEEPY
    if (f.mouth_ratio > HAPPY_MOUTH_RATIO and f.top_lip.y > f.bottom_lip.y
            and left < HAPPY_EYE_MAX and right < HAPPY_EYE_MAX):
        return MoodLabel.HAPPY
    if f.mouth_ratio > LAUGH_MOUTH_RATIO and f.top_lip.y < f.bottom_lip.y:
        return MoodLabel.LAUGH
    if f.brow_slope > SHOCK_BROW_SLOPE and left > SHOCK_EYE_MIN and right > SHOCK_EYE_MIN:
        return MoodLabel.SHOCK
    return MoodLabel.SAD


def classify(landmarks: Optional[LandmarkSet]) -> MoodLabel:
    """
    Classify a face into a mood label.

    ``None`` (no face) and landmark sets below the minimum point counts both
    yield Sad.
    """
    if not is_classifiable(landmarks):
        return NO_FACE_MOOD
    return classify_features(compute_features(landmarks))
