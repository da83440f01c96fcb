import math
import types
import pytest

from moodbook.models import LandmarkSet


def build_landmarks(mouth_width=0.30, top_y=0.26, bottom_y=0.24, eye_open=0.20, brow_slope=0.0,
                    right_eye_open=None):
    """Landmark set with controllable mouth/eye/brow geometry.

    The mouth has 7 points: index 0 and 6 are the corners, index 2 (7 // 3) is the
    top lip and index 4 ((7 * 2) // 3) the bottom lip, both at the same x.
    """
    half = mouth_width / 2.0
    mouth = [
        (0.5 - half, 0.25), (0.47, 0.27), (0.5, top_y), (0.53, 0.27),
        (0.5, bottom_y), (0.47, 0.23), (0.5 + half, 0.25),
    ]

    def eye(cx, opening):
        return [
            (cx - 0.06, 0.62), (cx - 0.02, 0.60 + opening), (cx + 0.02, 0.64),
            (cx + 0.06, 0.62), (cx + 0.02, 0.61), (cx - 0.02, 0.60),
        ]

    rad = math.radians(brow_slope)
    brow_start = (0.55, 0.75)
    brow_end = (brow_start[0] + 0.2 * math.cos(rad), brow_start[1] + 0.2 * math.sin(rad))
    left_brow = [brow_start, ((brow_start[0] + brow_end[0]) / 2, (brow_start[1] + brow_end[1]) / 2), brow_end]

    return LandmarkSet(
        mouth=mouth,
        left_eye=eye(0.7, eye_open),
        right_eye=eye(0.3, eye_open if right_eye_open is None else right_eye_open),
        left_eyebrow=left_brow,
        right_eyebrow=[(0.25, 0.75), (0.35, 0.76), (0.45, 0.75)],
    )


@pytest.fixture
def make_landmarks():
    return build_landmarks


class FakeDetector:
    """Stands in for LandmarkDetector; returns a fixed landmark set (or raises)."""
    def __init__(self, landmarks=None, error=None):
        self.landmarks = landmarks
        self.error = error
        self.calls = 0
        self.closed = False
        self.last_box = {"x": 2, "y": 2, "w": 20, "h": 20} if landmarks is not None else None

    def detect(self, frame):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.landmarks

    def close(self):
        self.closed = True


@pytest.fixture
def fake_detector():
    return FakeDetector


def fake_mediapipe(points):
    """Build a module-like namespace whose FaceMesh returns `points` for every frame."""
    created = []

    class FakeFaceMesh:
        def __init__(self, **kwargs):
            self.kwargs = kwargs
            self.closed = False
            created.append(self)

        def process(self, rgb):
            if points is None:
                return types.SimpleNamespace(multi_face_landmarks=None)
            face = types.SimpleNamespace(landmark=[types.SimpleNamespace(x=x, y=y) for x, y in points])
            return types.SimpleNamespace(multi_face_landmarks=[face])

        def close(self):
            self.closed = True

    mp = types.SimpleNamespace(solutions=types.SimpleNamespace(face_mesh=types.SimpleNamespace(FaceMesh=FakeFaceMesh)))
    return mp, created
