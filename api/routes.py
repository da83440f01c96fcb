"""
REST endpoints for mood classification.
"""
from fastapi import APIRouter, UploadFile, File, HTTPException, Form
from fastapi.responses import JSONResponse
import logging

from moodbook.config import Settings
from moodbook.live import LiveMoodAnalyzer
from moodbook.models import ClassifyResponse, LandmarksRequest, LiveStatus
from moodbook.mood import classify, compute_features, is_classifiable
from moodbook.pipeline import analyze_video_pipeline, classify_image_bytes
from moodbook.presentation import describe

import math
import tempfile
import shutil
import os


router = APIRouter()
settings = Settings()
live_analyzer = LiveMoodAnalyzer(settings)
logger = logging.getLogger(__name__)


@router.post("/mood/landmarks", response_model=ClassifyResponse)
async def mood_from_landmarks(body: LandmarksRequest):
    """
    Classify an already-extracted landmark set.

    A null or under-populated landmark set is treated as "no face" and
    classified as Sad with face_detected=false.
    """
    landmarks = body.landmarks if is_classifiable(body.landmarks) else None
    label = classify(landmarks)
    features = compute_features(landmarks) if landmarks is not None else None
    logger.debug(f"[api] /mood/landmarks mood={label.value} face={landmarks is not None}")
    return ClassifyResponse(result=describe(label, face_detected=landmarks is not None), features=features)


@router.post("/mood/image", response_model=ClassifyResponse)
def mood_from_image(file: UploadFile = File(...)):
    """
    Classify the most prominent face of an uploaded image.

    Args:
        file: Uploaded image file (PNG/JPEG).

    Returns:
        ClassifyResponse: Mood result plus derived features when a face was found.
    """
    logger.debug(f"[api] /mood/image filename={file.filename}")
    data = file.file.read()
    try:
        result, features = classify_image_bytes(data, settings)
    except ValueError as e:
        logger.warning(f"[api] /mood/image rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("[api] classify_image_bytes failed")
        raise HTTPException(status_code=500, detail=str(e))
    return ClassifyResponse(result=result, features=features)


@router.post("/analyze/video")
def analyze_video(
    file: UploadFile = File(...),
    mood_interval: float | None = Form(None),
):
    """
    Sample moods over an uploaded video.

    Args:
        file: Uploaded video file.
        mood_interval: Optional override for seconds between mood samples.

    Returns:
        JSONResponse: Mood timeline and summary.
    """
    logger.debug(f"[api] /analyze/video filename={file.filename} mood_interval={mood_interval}")
    run_settings = settings
    if mood_interval is not None:
        if not math.isfinite(mood_interval) or mood_interval <= 0:
            raise HTTPException(status_code=400, detail="mood_interval must be a positive number of seconds")
        run_settings = settings.model_copy(update={"MOOD_INTERVAL": float(mood_interval)})

    # Save to temp file
    try:
        suffix = os.path.splitext(file.filename or "")[1] or ".mp4"
        with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as tmp:
            shutil.copyfileobj(file.file, tmp)
            tmp_path = tmp.name
    except Exception as e:
        logger.exception("[api] upload save failed")
        raise HTTPException(status_code=400, detail=f"Upload failed: {e}")

    try:
        logger.debug(f"[api] starting analyze_video_pipeline tmp_path={tmp_path}")
        payload = analyze_video_pipeline(tmp_path, run_settings)
        logger.debug("[api] analyze_video_pipeline completed")
        return JSONResponse(payload)
    except FileNotFoundError as e:
        logger.exception("[api] analyze_video_pipeline file not found")
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.exception("[api] analyze_video_pipeline failed")
        raise HTTPException(status_code=500, detail=str(e))
    finally:
        try:
            os.unlink(tmp_path)
        except Exception:
            logger.warning(f"[api] failed to cleanup tmp file: {tmp_path}")


@router.post("/live/start")
def live_start():
    if not live_analyzer.start():
        return {"status": "already_running"}
    return {"status": "started"}

@router.get("/live/status", response_model=LiveStatus)
async def live_status():
    return live_analyzer.status()

@router.post("/live/stop")
def live_stop():
    if not live_analyzer.stop():
        return {"status": "not_running"}
    return {"status": "stopped"}
