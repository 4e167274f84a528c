"""
detector.py — Object detection behind a one-method interface.

Anything with a ``detect(frame_rgb) -> list[Detection]`` method can feed
the camera thread.  The production implementation wraps the MediaPipe
Tasks ObjectDetector (EfficientDet-Lite0, trained on COCO, which knows
"bird").  StaticDetector returns fixed fixtures for tests.

The model file must exist in assets/ — run setup_model.py first.
"""

import os
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

import config as cfg


@dataclass(frozen=True)
class Detection:
    """One labelled box in frame pixel coordinates."""
    label: str
    bbox: Tuple[float, float, float, float]   # x, y, width, height
    score: float = 1.0

    @property
    def center(self) -> Tuple[float, float]:
        """Geometric centre of the bounding box."""
        x, y, w, h = self.bbox
        return x + w / 2, y + h / 2


@dataclass
class DetectionSnapshot:
    """Detections for one captured frame, plus the frame size they refer to."""
    detections: List[Detection]
    frame_size: Tuple[int, int]
    timestamp: float = field(default_factory=time.time)


def to_detections(result) -> List[Detection]:
    """
    Convert a MediaPipe ObjectDetectorResult into Detection objects.
    Detections without a category are skipped; the best category wins.
    """
    detections = []
    for det in getattr(result, "detections", None) or []:
        if not det.categories:
            continue
        best = max(det.categories, key=lambda c: c.score or 0.0)
        box = det.bounding_box
        detections.append(Detection(
            label=best.category_name,
            bbox=(float(box.origin_x), float(box.origin_y),
                  float(box.width), float(box.height)),
            score=float(best.score or 0.0),
        ))
    return detections


class MediaPipeDetector:
    """
    MediaPipe Tasks ObjectDetector in VIDEO mode.  detect() must be fed
    frames in capture order; timestamps are derived from a frame counter
    so they are strictly increasing.
    """

    def __init__(self, model_path=None, score_threshold=None, max_results=None):
        import mediapipe as mp
        from mediapipe.tasks.python import vision
        from mediapipe.tasks.python import BaseOptions

        if model_path is None:
            model_path = os.path.join(cfg.MODEL_DIR, cfg.MODEL_FILENAME)
        if not os.path.exists(model_path):
            raise FileNotFoundError(
                f"\n[ERROR] Model file not found at '{model_path}'.\n"
                f"Please run 'python setup_model.py' first to download it.\n"
            )

        options = vision.ObjectDetectorOptions(
            base_options=BaseOptions(model_asset_path=model_path),
            running_mode=vision.RunningMode.VIDEO,
            score_threshold=(cfg.DETECTION_SCORE_THRESHOLD if score_threshold is None
                             else score_threshold),
            max_results=cfg.DETECTION_MAX_RESULTS if max_results is None else max_results,
        )
        self._detector = vision.ObjectDetector.create_from_options(options)
        self._frame_count = 0
        self._mp = mp
        self.model_path = model_path
        print(f"[Detector] Loaded model: {model_path}")

    def detect(self, frame_rgb: np.ndarray) -> List[Detection]:
        mp_image = self._mp.Image(
            image_format=self._mp.ImageFormat.SRGB,
            data=np.ascontiguousarray(frame_rgb),
        )
        self._frame_count += 1
        timestamp_ms = int(self._frame_count * (1000 / cfg.TARGET_FPS))
        result = self._detector.detect_for_video(mp_image, timestamp_ms)
        return to_detections(result)

    def close(self):
        self._detector.close()


class StaticDetector:
    """Returns the same detections for every frame (or raises, if told to)."""

    def __init__(self, detections: Optional[Sequence[Detection]] = None,
                 error: Optional[Exception] = None):
        self.detections = list(detections or [])
        self.error = error
        self.calls = 0

    def detect(self, frame_rgb) -> List[Detection]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.detections)

    def close(self):
        pass
