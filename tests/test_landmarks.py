
import sys
import numpy as np
import pytest

import moodbook.landmarks as lmk
from moodbook.models import MoodLabel
from moodbook.mood import classify, compute_features, is_classifiable
from conftest import fake_mediapipe


def make_mesh():
    """468 points at the centre of a 0.2..0.8 face box (image coords, y down)."""
    pts = [(0.5, 0.5)] * lmk.MESH_POINTS
    pts[0] = (0.2, 0.2)       # box top-left
    pts[1] = (0.8, 0.8)       # box bottom-right
    return pts


def smiling_mesh():
    pts = make_mesh()
    # inner lips in image coords: top lip above (smaller y) the bottom lip
    for i, xy in zip(lmk.MOUTH_IDX, [(0.40, 0.65), (0.45, 0.63), (0.50, 0.62), (0.55, 0.63),
                                       (0.50, 0.68), (0.45, 0.67), (0.60, 0.65)]):
        pts[i] = xy
    for idx, cx in ((lmk.LEFT_EYE_IDX, 0.62), (lmk.RIGHT_EYE_IDX, 0.38)):
        # [1] top lid, [5] bottom lid, 0.024 apart in the image -> 0.04 in the face box
        for i, xy in zip(idx, [(cx - 0.04, 0.40), (cx - 0.01, 0.388), (cx + 0.01, 0.39),
                               (cx + 0.04, 0.40), (cx + 0.01, 0.41), (cx - 0.01, 0.412)]):
            pts[i] = xy
    for idx, x0, step in ((lmk.LEFT_BROW_IDX, 0.55, 0.04), (lmk.RIGHT_BROW_IDX, 0.45, -0.04)):
        for k, i in enumerate(idx):
            pts[i] = (x0 + k * step, 0.33)
    return pts


def test_landmarks_from_mesh_normalizes_to_face_box():
    pts = make_mesh()
    pts[lmk.MOUTH_IDX[0]] = (0.2, 0.2)
    pts[lmk.MOUTH_IDX[-1]] = (0.8, 0.8)
    lm = lmk.landmarks_from_mesh(pts)
    assert is_classifiable(lm)
    assert len(lm.mouth) == len(lmk.MOUTH_IDX)
    assert len(lm.left_eye) == 6 and len(lm.right_eyebrow) == 5
    # image top-left becomes face-box (0, 1); bottom-right becomes (1, 0)
    assert (lm.mouth[0].x, lm.mouth[0].y) == pytest.approx((0.0, 1.0))
    assert (lm.mouth[-1].x, lm.mouth[-1].y) == pytest.approx((1.0, 0.0))
    assert (lm.left_eye[0].x, lm.left_eye[0].y) == pytest.approx((0.5, 0.5))


def test_image_top_lip_maps_above_bottom_lip():
    lm = lmk.landmarks_from_mesh(smiling_mesh())
    f = compute_features(lm)
    assert f.top_lip.y > f.bottom_lip.y
    assert f.mouth_ratio == pytest.approx((0.06 / 0.6) / (0.20 / 0.6))
    assert f.left_eye_open == pytest.approx(0.04)
    assert f.brow_slope == pytest.approx(0.0, abs=1e-9)
    assert classify(lm) == MoodLabel.SAD  # ratio 0.3 is below every mouth rule


def test_incomplete_or_degenerate_mesh():
    assert lmk.landmarks_from_mesh(make_mesh()[:100]) is None
    assert lmk.landmarks_from_mesh([(0.5, 0.5)] * lmk.MESH_POINTS) is None


def test_face_box_from_mesh():
    box = lmk.face_box_from_mesh(make_mesh(), 100, 50)
    assert box == {"x": 20, "y": 10, "w": 60, "h": 30}


def test_detector_with_fake_mediapipe(monkeypatch):
    mp, created = fake_mediapipe(smiling_mesh())
    monkeypatch.setitem(sys.modules, "mediapipe", mp)

    frame = np.zeros((50, 100, 3), dtype=np.uint8)
    with lmk.LandmarkDetector(static_image_mode=True, min_detection_confidence=0.7) as det:
        lm = det.detect(frame)
        assert lm is not None and is_classifiable(lm)
        assert det.last_box == {"x": 20, "y": 10, "w": 60, "h": 30}
        det.detect(frame)
    assert len(created) == 1  # mesh built once, lazily
    assert created[0].kwargs["max_num_faces"] == 1
    assert created[0].kwargs["static_image_mode"] is True
    assert created[0].kwargs["min_detection_confidence"] == 0.7
    assert created[0].closed


def test_detector_no_face(monkeypatch):
    mp, _ = fake_mediapipe(None)
    monkeypatch.setitem(sys.modules, "mediapipe", mp)
    det = lmk.LandmarkDetector()
    assert det.detect(np.zeros((20, 20, 3), dtype=np.uint8)) is None
    assert det.last_box is None
    det.close()
