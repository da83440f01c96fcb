
from moodbook.config import Settings

def test_Settings():
    s = Settings()
    assert s.MOOD_INTERVAL > 0
    assert 0.0 <= s.MIN_DETECTION_CONFIDENCE <= 1.0
    # override via env-like behavior (construct new instance)
    s2 = Settings(MOOD_INTERVAL=0.5, CAMERA_INDEX=2)
    assert s2.MOOD_INTERVAL == 0.5 and s2.CAMERA_INDEX == 2

def test_log_level_normalized():
    assert Settings(LOG_LEVEL="warning  # noisy").LOG_LEVEL == "WARNING"
    assert Settings(LOG_LEVEL="loud").LOG_LEVEL == "INFO"
    assert Settings(LOG_LEVEL="").LOG_LEVEL == "INFO"
