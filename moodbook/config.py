"""
Configuration for mood capture and classification.
"""
from pydantic import BaseModel
import logging
import os

class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.
    """
    CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
    MOOD_INTERVAL: float = float(os.getenv("MOOD_INTERVAL", "2.0"))
    MIN_DETECTION_CONFIDENCE: float = float(os.getenv("MIN_DETECTION_CONFIDENCE", "0.5"))
    MIN_TRACKING_CONFIDENCE: float = float(os.getenv("MIN_TRACKING_CONFIDENCE", "0.5"))
    LOG_LEVEL: str = (os.getenv("LOG_LEVEL", "DEBUG") or "DEBUG")

    def __init__(self, **data):
        super().__init__(**data)
        # Normalize LOG_LEVEL: strip extra words, upper-case, validate
        level = (self.LOG_LEVEL or "").strip()
        level = level.split()[0].upper() if level else "INFO"
        if not isinstance(logging.getLevelName(level), int):
            level = "INFO"
        object.__setattr__(self, "LOG_LEVEL", level)
