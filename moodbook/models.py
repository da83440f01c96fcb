"""
Pydantic data models for landmarks, moods and API IO.
"""
from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

class Point2D(BaseModel):
    """Normalized (x, y) point; y grows upwards from the bottom of the face box."""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float

class LandmarkSet(BaseModel):
    mouth: List[Point2D] = Field(default_factory=list)
    left_eye: List[Point2D] = Field(default_factory=list)
    right_eye: List[Point2D] = Field(default_factory=list)
    left_eyebrow: List[Point2D] = Field(default_factory=list)
    right_eyebrow: List[Point2D] = Field(default_factory=list)

    @field_validator("mouth", "left_eye", "right_eye", "left_eyebrow", "right_eyebrow", mode="before")
    @classmethod
    def _pairs_to_points(cls, v):
        # accept [[x, y], ...] as well as [{"x":..,"y":..}, ...]
        if not isinstance(v, (list, tuple)):
            return v
        return [
            {"x": p[0], "y": p[1]} if isinstance(p, (list, tuple)) and len(p) == 2 else p
            for p in v
        ]

class MoodLabel(str, Enum):
    SLEEPY = "Sleepy"
    HAPPY = "Happy"
    SAD = "Sad"
    SHOCK = "Shock"
    LAUGH = "Laugh"

class MoodFeatures(BaseModel):
    mouth_width: float
    mouth_height: float
    mouth_ratio: float
    top_lip: Point2D
    bottom_lip: Point2D
    left_eye_open: float
    right_eye_open: float
    brow_slope: float

class MoodResult(BaseModel):
    label: MoodLabel
    emoji: str
    color: str
    caption: str
    face_detected: bool = True
    ts: Optional[float] = None

class MoodEntry(BaseModel):
    time: float
    mood: MoodLabel
    face_detected: bool = True

class LandmarksRequest(BaseModel):
    landmarks: Optional[LandmarkSet] = None

class ClassifyResponse(BaseModel):
    result: MoodResult
    features: Optional[MoodFeatures] = None



# live model


class LiveSnapshot(BaseModel):
    ts: float
    mood: MoodResult

class LiveStatus(BaseModel):
    running: bool
    started_at: float | None = None
    last_snapshot: LiveSnapshot | None = None
