"""
Mood sampling from frames and video files.
"""
# moodbook/sampling.py
from __future__ import annotations
from typing import List, Optional, Tuple
import logging
import cv2
import numpy as np

from moodbook.config import Settings
from moodbook.landmarks import LandmarkDetector
from moodbook.models import LandmarkSet, MoodEntry, MoodResult
from moodbook.mood import classify, is_classifiable
from moodbook.presentation import describe

logger = logging.getLogger(__name__)

def classify_frame(
    detector: LandmarkDetector,
    frame: np.ndarray,
    ts: Optional[float] = None,
) -> Tuple[MoodResult, Optional[LandmarkSet]]:
    """
    Detect landmarks on one frame and classify the mood.

    Detector failures and landmark sets with too few points are treated as
    "no face" (which classifies as Sad with face_detected=False).

    Returns:
      (result, landmarks) where landmarks is None when no usable face was found
    """
    try:
        landmarks = detector.detect(frame)
    except Exception:
        logger.exception("[sampling] landmark detection failed; treating as no face")
        landmarks = None

    if landmarks is not None and not is_classifiable(landmarks):
        logger.debug("[sampling] landmark set below minimum point counts; treating as no face")
        landmarks = None

    label = classify(landmarks)
    return describe(label, face_detected=landmarks is not None, ts=ts), landmarks


def analyze_moods_from_video(
    video_path: str,
    settings: Settings,
    detector: Optional[LandmarkDetector] = None,
) -> Tuple[List[MoodEntry], float]:
    """
    Sample one frame every MOOD_INTERVAL seconds of video time and classify it.

    Returns:
      (mood_log, fps)
    """
    logger.debug(f"[sampling] open video: {video_path}")
    cap = cv2.VideoCapture(video_path)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open video: {video_path}")

    fps = cap.get(cv2.CAP_PROP_FPS) or 25.0
    interval_frames = max(1, int(fps * float(settings.MOOD_INTERVAL)))
    logger.debug(f"[sampling] fps={fps} interval_frames={interval_frames}")

    own_detector = detector is None
    if own_detector:
        detector = LandmarkDetector.from_settings(settings)

    mood_log: List[MoodEntry] = []
    frame_index = 0
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break

            if frame_index % interval_frames == 0:
                timestamp = round(frame_index / fps, 2)
                result, _ = classify_frame(detector, frame, ts=timestamp)
                logger.debug(f"[sampling] t={timestamp}s mood={result.label.value} face={result.face_detected}")
                mood_log.append(MoodEntry(time=timestamp, mood=result.label, face_detected=result.face_detected))

            frame_index += 1
    finally:
        cap.release()
        if own_detector:
            detector.close()

    logger.debug(f"[sampling] finished; entries={len(mood_log)}")
    return mood_log, float(fps)
