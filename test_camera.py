import os
import subprocess
import sys
import tempfile
import unittest
from types import SimpleNamespace
from unittest import mock

import numpy as np

from camera import Camera
from detector import Detection, MediaPipeDetector, StaticDetector, to_detections


def blank_frame(w=640, h=480):
    return np.zeros((h, w, 3), dtype=np.uint8)


class TestToDetections(unittest.TestCase):
    def _mp_detection(self, name, score, x, y, w, h):
        return SimpleNamespace(
            categories=[SimpleNamespace(category_name=name, score=score)],
            bounding_box=SimpleNamespace(origin_x=x, origin_y=y, width=w, height=h),
        )

    def test_converts_mediapipe_result(self):
        result = SimpleNamespace(detections=[
            self._mp_detection("bird", 0.8, 10, 20, 30, 40),
            self._mp_detection("person", 0.6, 0, 0, 5, 5),
        ])
        dets = to_detections(result)
        self.assertEqual(len(dets), 2)
        self.assertEqual(dets[0].label, "bird")
        self.assertEqual(dets[0].bbox, (10.0, 20.0, 30.0, 40.0))
        self.assertAlmostEqual(dets[0].score, 0.8)
        self.assertEqual(dets[0].center, (25.0, 40.0))

    def test_best_category_wins_and_empty_is_skipped(self):
        det = SimpleNamespace(
            categories=[SimpleNamespace(category_name="kite", score=0.3),
                        SimpleNamespace(category_name="bird", score=0.7)],
            bounding_box=SimpleNamespace(origin_x=0, origin_y=0, width=2, height=2),
        )
        empty = SimpleNamespace(
            categories=[],
            bounding_box=SimpleNamespace(origin_x=0, origin_y=0, width=2, height=2),
        )
        dets = to_detections(SimpleNamespace(detections=[det, empty]))
        self.assertEqual([d.label for d in dets], ["bird"])

    def test_no_detections(self):
        self.assertEqual(to_detections(SimpleNamespace(detections=[])), [])


class TestCameraProcessing(unittest.TestCase):
    def setUp(self):
        self.birds = [Detection("bird", (100, 100, 50, 50), 0.9)]

    def test_not_ready_before_first_frame(self):
        cam = Camera(StaticDetector(self.birds))
        self.assertFalse(cam.is_ready())
        self.assertIsNone(cam.frame_size())
        self.assertIsNone(cam.get_frame())

    def test_publishes_frame_and_detections(self):
        cam = Camera(StaticDetector(self.birds))
        cam.process_frame(blank_frame(320, 240))
        self.assertTrue(cam.is_ready())
        self.assertEqual(cam.frame_size(), (320, 240))
        self.assertEqual(cam.get_frame().shape, (240, 320, 3))
        self.assertEqual(cam.get_detections(), self.birds)

    def test_requests_answered_by_next_frame_only(self):
        detector = StaticDetector(self.birds)
        cam = Camera(detector)
        cam.process_frame(blank_frame())
        self.assertEqual(cam.collect_snapshots(), [])

        cam.request_detection()
        cam.request_detection()
        self.assertEqual(cam.collect_snapshots(), [])

        cam.process_frame(blank_frame())
        snapshots = cam.collect_snapshots()
        self.assertEqual(len(snapshots), 2)
        self.assertEqual(snapshots[0].detections, self.birds)
        self.assertEqual(snapshots[0].frame_size, (640, 480))

        cam.process_frame(blank_frame())
        self.assertEqual(cam.collect_snapshots(), [])

    def test_detection_failure_is_swallowed(self):
        cam = Camera(StaticDetector(error=RuntimeError("model exploded")))
        cam.request_detection()

        detections = cam.process_frame(blank_frame())

        self.assertEqual(detections, [])
        self.assertTrue(cam.is_ready())
        snapshots = cam.collect_snapshots()
        self.assertEqual(len(snapshots), 1)
        self.assertEqual(snapshots[0].detections, [])

    def test_recovers_after_failure(self):
        detector = StaticDetector(self.birds, error=RuntimeError("flaky"))
        cam = Camera(detector)
        cam.process_frame(blank_frame())
        detector.error = None
        cam.process_frame(blank_frame())
        self.assertEqual(cam.get_detections(), self.birds)
        self.assertEqual(detector.calls, 2)

    def test_request_during_inference_waits_for_next_frame(self):
        birds = self.birds

        class FiringDetector:
            """Fires once while the first frame is being processed."""

            def __init__(self):
                self.camera = None
                self.calls = 0

            def detect(self, frame_rgb):
                self.calls += 1
                if self.calls == 1:
                    self.camera.request_detection()
                    return []
                return list(birds)

        detector = FiringDetector()
        cam = Camera(detector)
        detector.camera = cam

        cam.process_frame(blank_frame())
        self.assertEqual(cam.collect_snapshots(), [])

        cam.process_frame(blank_frame())
        snapshots = cam.collect_snapshots()
        self.assertEqual(len(snapshots), 1)
        self.assertEqual(snapshots[0].detections, birds)


class TestDetectorModule(unittest.TestCase):
    def test_fixtures_do_not_need_mediapipe(self):
        here = os.path.dirname(os.path.abspath(__file__))
        out = subprocess.run(
            [sys.executable, "-c",
             "import sys, detector, camera; print('mediapipe' in sys.modules)"],
            cwd=here, capture_output=True, text=True, check=True,
        )
        self.assertEqual(out.stdout.strip(), "False")

    def test_explicit_zero_threshold_is_kept(self):
        vision = mock.MagicMock()
        tasks_python = mock.MagicMock(vision=vision)
        fake_mp = mock.MagicMock()
        fake_modules = {
            "mediapipe": fake_mp,
            "mediapipe.tasks": mock.MagicMock(python=tasks_python),
            "mediapipe.tasks.python": tasks_python,
            "mediapipe.tasks.python.vision": vision,
        }
        with tempfile.NamedTemporaryFile(suffix=".tflite") as model, \
                mock.patch.dict(sys.modules, fake_modules):
            det = MediaPipeDetector(model_path=model.name,
                                    score_threshold=0.0, max_results=0)
            det.detect(blank_frame())

        kwargs = vision.ObjectDetectorOptions.call_args.kwargs
        self.assertEqual(kwargs["score_threshold"], 0.0)
        self.assertEqual(kwargs["max_results"], 0)
        fake_mp.Image.assert_called_once()


if __name__ == "__main__":
    unittest.main()
