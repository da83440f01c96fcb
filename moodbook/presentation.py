"""
Static emoji / color / caption tables for mood labels.
"""
from __future__ import annotations
import time
from typing import Dict, Optional, Tuple

from moodbook.models import MoodLabel, MoodResult

SCANNING_TEXT = "Scanning…"

MOOD_EMOJI: Dict[MoodLabel, str] = {
    MoodLabel.SLEEPY: "😴",
    MoodLabel.HAPPY: "😄",
    MoodLabel.SAD: "😢",
    MoodLabel.SHOCK: "😲",
    MoodLabel.LAUGH: "😆",
}

MOOD_COLOR: Dict[MoodLabel, str] = {
    MoodLabel.SLEEPY: "gray",
    MoodLabel.HAPPY: "green",
    MoodLabel.SAD: "blue",
    MoodLabel.SHOCK: "yellow",
    MoodLabel.LAUGH: "orange",
}

MOOD_CAPTION: Dict[MoodLabel, str] = {
    MoodLabel.SLEEPY: "Yawn… maybe take a nap after coding 😴",
    MoodLabel.HAPPY: "Smile bright! Your code looks awesome 😄",
    MoodLabel.SAD: "Don't worry, even bugs have debugging days 🐛",
    MoodLabel.SHOCK: "Whoa! Did someone merge a PR without conflicts? 😱",
    MoodLabel.LAUGH: "Haha! Coding can be fun when it works 😆",
}

# OpenCV draws in BGR
COLOR_BGR: Dict[str, Tuple[int, int, int]] = {
    "gray": (128, 128, 128),
    "green": (0, 200, 0),
    "blue": (255, 0, 0),
    "yellow": (0, 255, 255),
    "orange": (0, 165, 255),
}


def describe(label: MoodLabel, face_detected: bool = True, ts: Optional[float] = None) -> MoodResult:
    """Attach emoji, color and caption to a label."""
    return MoodResult(
        label=label,
        emoji=MOOD_EMOJI[label],
        color=MOOD_COLOR[label],
        caption=MOOD_CAPTION[label],
        face_detected=face_detected,
        ts=time.time() if ts is None else ts,
    )
