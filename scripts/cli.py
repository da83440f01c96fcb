"""
CLI to classify the mood of an image or a video -> JSON.
"""
from __future__ import annotations
import argparse, json, logging, math, os
from moodbook.config import Settings
from moodbook.pipeline import analyze_video_pipeline, classify_image_bytes

def main(argv=None):
    p = argparse.ArgumentParser()
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--image", help="Path to input image")
    src.add_argument("--video", help="Path to input video")
    p.add_argument("--interval", type=float, default=None, help="Seconds between video samples")
    p.add_argument("--out", default="output/mood.json", help="Path to output JSON")
    args = p.parse_args(argv)
    if args.interval is not None and (not math.isfinite(args.interval) or args.interval <= 0):
        p.error(f"--interval must be a positive number of seconds, got {args.interval}")

    settings = Settings()
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL, logging.INFO))
    if args.interval is not None:
        settings.MOOD_INTERVAL = args.interval

    if args.image:
        if not os.path.exists(args.image):
            p.error(f"image not found: {args.image}")
        with open(args.image, "rb") as f:
            mood, features = classify_image_bytes(f.read(), settings)
        result = {
            "result": mood.model_dump(mode="json"),
            "features": features.model_dump(mode="json") if features else None,
        }
    else:
        result = analyze_video_pipeline(args.video, settings)
    print(json.dumps(result, indent=2, ensure_ascii=False))

    # Also write to file
    out_dir = os.path.dirname(args.out)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(args.out, "w", encoding="utf-8") as f:
        json.dump(result, f, indent=2, ensure_ascii=False)
    print(f"✅ Mood written to {args.out}")

if __name__ == "__main__":
    main()
