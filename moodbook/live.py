# moodbook/live.py
"""
Live (real-time) mood capture.

Reads webcam frames locally and classifies the most prominent face at most
once every MOOD_INTERVAL seconds, however fast the camera delivers frames.
Each classification is pushed to subscribers as a MoodResult and kept as the
latest LiveSnapshot.

This module also provides a live overlay window (run_live_overlay) that draws:
- Mood label + caption in the mood color
- Landmark dots of the last classified face
- "Scanning..." until the first classification
"""

from __future__ import annotations

import inspect
import logging
import threading
import time
import weakref
from typing import Callable, Dict, Optional

import cv2

from moodbook.config import Settings
from moodbook.landmarks import LandmarkDetector
from moodbook.models import LiveSnapshot, LiveStatus, MoodResult
from moodbook.sampling import classify_frame
from moodbook.visual import draw_mood_overlay

logger = logging.getLogger(__name__)

WINDOW_TITLE = "MoodBook Live (q to quit)"
READ_RETRY_SEC = 0.1           # Back-off after a failed camera read
LOOP_SLEEP_SEC = 0.01          # Idle time between frames


# -----------------------------------------------------------------------------
# Throttling and result fan-out
# -----------------------------------------------------------------------------
class MoodThrottle:
    """Let one tick through per interval; the first tick comes one interval after start."""
    def __init__(self, interval: float, started_at: Optional[float] = None):
        self.interval = float(interval)
        self.last = time.monotonic() if started_at is None else float(started_at)

    def ready(self, now: Optional[float] = None) -> bool:
        now = time.monotonic() if now is None else now
        if now - self.last > self.interval:
            self.last = now
            return True
        return False


class Subscription:
    """Handle returned by MoodPublisher.subscribe; cancel() detaches the callback."""
    def __init__(self, publisher: "MoodPublisher", key: int):
        self._publisher = weakref.ref(publisher)
        self._key = key

    @property
    def active(self) -> bool:
        pub = self._publisher()
        return pub is not None and pub.has(self._key)

    def cancel(self) -> None:
        pub = self._publisher()
        if pub is not None:
            pub.remove(self._key)


def _strong_ref(callback):
    def ref():
        return callback
    return ref


class MoodPublisher:
    """
    Fan out MoodResults to subscribers.

    Bound methods are held through weakref.WeakMethod so a subscription never
    keeps its owner alive; once the owner is collected the callback is skipped
    and pruned. Plain functions are held as given.
    """
    def __init__(self):
        self._subs: Dict[int, Callable[[], Optional[Callable[[MoodResult], None]]]] = {}
        self._next_key = 0
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[MoodResult], None]) -> Subscription:
        if inspect.ismethod(callback):
            ref = weakref.WeakMethod(callback)
        else:
            ref = _strong_ref(callback)
        with self._lock:
            key = self._next_key
            self._next_key += 1
            self._subs[key] = ref
        return Subscription(self, key)

    def has(self, key: int) -> bool:
        with self._lock:
            return key in self._subs

    def remove(self, key: int) -> None:
        with self._lock:
            self._subs.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subs)

    def publish(self, result: MoodResult) -> int:
        """Deliver to every live subscriber; returns the number of deliveries."""
        with self._lock:
            items = list(self._subs.items())
        delivered = 0
        dead = []
        for key, ref in items:
            cb = ref()
            if cb is None:
                dead.append(key)
                continue
            try:
                cb(result)
                delivered += 1
            except Exception:
                logger.exception(f"[live] subscriber {key} failed")
        if dead:
            with self._lock:
                for key in dead:
                    self._subs.pop(key, None)
            logger.debug(f"[live] pruned {len(dead)} dead subscriber(s)")
        return delivered


# -----------------------------------------------------------------------------
# LiveMoodAnalyzer: background capture thread (no UI overlay)
# -----------------------------------------------------------------------------
class LiveMoodAnalyzer:
    """Periodic mood classification from the webcam with subscriber fan-out."""
    def __init__(self, settings: Settings, detector: Optional[LandmarkDetector] = None):
        self.s = settings
        self._detector = detector
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._snap_lock = threading.Lock()
        self._last_snapshot: Optional[LiveSnapshot] = None
        self._started_at: Optional[float] = None
        self.publisher = MoodPublisher()

    # ---- lifecycle ----
    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> bool:
        # a loop that outlived stop(timeout) still owns the camera
        if self.running:
            return False
        self._stop = threading.Event()
        self._started_at = time.time()
        self._thread = threading.Thread(target=self._video_loop, args=(self._stop,),
                                        name="moodbook-live", daemon=True)
        self._thread.start()
        logger.debug(f"[live] started camera={self.s.CAMERA_INDEX} interval={self.s.MOOD_INTERVAL}s")
        return True

    def stop(self, timeout: Optional[float] = 2.0) -> bool:
        if not self.running:
            return False
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        logger.debug("[live] stopped")
        return True

    def status(self) -> LiveStatus:
        with self._snap_lock:
            snap = self._last_snapshot
        return LiveStatus(running=self.running, started_at=self._started_at, last_snapshot=snap)

    def subscribe(self, callback: Callable[[MoodResult], None]) -> Subscription:
        return self.publisher.subscribe(callback)

    # ---- per-tick work ----
    def process_frame(self, detector: LandmarkDetector, frame) -> MoodResult:
        """Classify one frame, record the snapshot and notify subscribers."""
        now = time.time()
        result, _ = classify_frame(detector, frame, ts=now)
        with self._snap_lock:
            self._last_snapshot = LiveSnapshot(ts=now, mood=result)
        logger.debug(f"[live] mood={result.label.value} face={result.face_detected}")
        self.publisher.publish(result)
        return result

    # ---- loop ----
    def _video_loop(self, stop: threading.Event):
        cap = cv2.VideoCapture(self.s.CAMERA_INDEX)
        if not cap.isOpened():
            logger.error(f"[live] could not open camera index {self.s.CAMERA_INDEX}")
            stop.set()
            return

        own_detector = self._detector is None
        detector = self._detector or LandmarkDetector.from_settings(self.s)
        throttle = MoodThrottle(self.s.MOOD_INTERVAL)
        try:
            while not stop.is_set():
                ok, frame = cap.read()
                if not ok:
                    stop.wait(READ_RETRY_SEC)
                    continue
                if throttle.ready():
                    self.process_frame(detector, frame)
                stop.wait(LOOP_SLEEP_SEC)
        finally:
            cap.release()
            if own_detector:
                detector.close()


# -----------------------------------------------------------------------------
# Live camera overlay
# -----------------------------------------------------------------------------
def run_live_overlay(settings: Settings,
                     camera_index: Optional[int] = None,
                     detector: Optional[LandmarkDetector] = None) -> None:
    """
    Open webcam, classify the mood every MOOD_INTERVAL seconds and draw it.

    Press 'q' to quit.
    """
    cam_idx = settings.CAMERA_INDEX if camera_index is None else camera_index
    cap = cv2.VideoCapture(cam_idx)
    if not cap.isOpened():
        raise RuntimeError(f"Could not open camera index {cam_idx}")

    own_detector = detector is None
    if own_detector:
        detector = LandmarkDetector.from_settings(settings)

    throttle = MoodThrottle(settings.MOOD_INTERVAL)
    result: Optional[MoodResult] = None
    landmarks = None
    face_box = None
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                break

            if throttle.ready():
                result, landmarks = classify_frame(detector, frame, ts=time.time())
                face_box = getattr(detector, "last_box", None) if landmarks is not None else None
                logger.debug(f"[live] overlay mood={result.label.value} face={result.face_detected}")

            annotated = draw_mood_overlay(frame, result, landmarks, face_box)
            cv2.imshow(WINDOW_TITLE, annotated)

            if (cv2.waitKey(1) & 0xFF) == ord("q"):
                break
    finally:
        cap.release()
        cv2.destroyAllWindows()
        if own_detector:
            detector.close()
