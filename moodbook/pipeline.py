# moodbook/pipeline.py
from __future__ import annotations
from collections import Counter
from typing import Dict, List, Optional, Tuple
import logging
import os

import cv2
import numpy as np

from moodbook.config import Settings
from moodbook.landmarks import LandmarkDetector
from moodbook.models import MoodEntry, MoodFeatures, MoodResult
from moodbook.mood import compute_features
from moodbook.sampling import analyze_moods_from_video, classify_frame

logger = logging.getLogger(__name__)

def classify_image_bytes(
    data: bytes,
    settings: Settings,
    detector: Optional[LandmarkDetector] = None,
) -> Tuple[MoodResult, Optional[MoodFeatures]]:
    """
    Decode an encoded image (PNG/JPEG/...) and classify the face in it.

    Raises:
        ValueError: the bytes are not a decodable image.
    """
    frame = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR) if data else None
    if frame is None:
        raise ValueError("Could not decode image")
    logger.debug(f"[pipeline] classify_image_bytes shape={frame.shape}")

    if detector is None:
        with LandmarkDetector.from_settings(settings, static_image_mode=True) as det:
            result, landmarks = classify_frame(det, frame)
    else:
        result, landmarks = classify_frame(detector, frame)

    features = compute_features(landmarks) if landmarks is not None else None
    return result, features

def summarize_timeline(entries: List[MoodEntry]) -> Dict:
    """Count moods over a timeline and pick the most frequent one."""
    counts = Counter(e.mood.value for e in entries)
    dominant = counts.most_common(1)[0][0] if counts else None
    return {
        "samples": len(entries),
        "mood_counts": dict(counts),
        "dominant_mood": dominant,
        "no_face_samples": sum(1 for e in entries if not e.face_detected),
    }

def analyze_video_pipeline(
    video_path: str,
    settings: Settings,
    detector: Optional[LandmarkDetector] = None,
) -> Dict:
    """
    Sample moods over a recorded video and summarize them.
    """
    if not os.path.exists(video_path):
        raise FileNotFoundError(f"Video not found: {video_path}")

    logger.debug(f"[pipeline] analyze_video_pipeline start video_path={video_path}")
    mood_log, fps = analyze_moods_from_video(video_path, settings, detector=detector)

    payload = {
        "fps": fps,
        "interval": float(settings.MOOD_INTERVAL),
        "mood_timeline": [e.model_dump(mode="json") for e in mood_log],
        "summary": summarize_timeline(mood_log),
    }
    logger.debug("[pipeline] analyze_video_pipeline finished successfully")
    return payload
