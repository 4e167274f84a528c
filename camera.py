"""
camera.py — Threaded webcam capture + object detection.

Runs as a daemon thread so camera I/O and model inference never stall
the render loop.  Every captured frame is passed through the detector;
the latest frame and detections sit in a lock-protected shared buffer.

Fire requests are answered from the next frame processed after the
request, never from a cached result.  Each answered request becomes one
DetectionSnapshot on a queue that the main thread drains, so the beam
registry is only ever touched from the main thread.
"""

import queue
import threading
import time

import cv2

import config as cfg
from detector import DetectionSnapshot


class Camera:
    """
    Threaded camera that continuously captures frames, runs the
    detector, and exposes the latest frame / detections via
    thread-safe getters.
    """

    def __init__(self, detector, index=None):
        self.detector = detector
        self.index = cfg.CAMERA_INDEX if index is None else index

        # ── Shared state (protected by lock) ──
        self._lock = threading.Lock()
        self._frame = None                # latest RGB frame
        self._frame_size = None           # (width, height)
        self._detections = []
        self._pending_requests = 0

        # Answered fire requests, drained by the main thread
        self._snapshots = queue.Queue()

        self._running = False
        self._thread = None
        self._error_count = 0
        self.error = None

    # ────────────────────────────────────────────────────────────
    # Public API (called from main thread)
    # ────────────────────────────────────────────────────────────

    def start(self):
        """Launch the capture thread."""
        self._running = True
        self._thread = threading.Thread(target=self._capture_loop, daemon=True)
        self._thread.start()

    def stop(self):
        """Signal the capture thread to stop and wait briefly for it."""
        self._running = False
        if self._thread is not None:
            self._thread.join(timeout=1.0)

    def is_ready(self):
        """True once at least one frame has been captured."""
        with self._lock:
            return self._frame is not None

    def frame_size(self):
        """(width, height) of the latest frame, or None before the first."""
        with self._lock:
            return self._frame_size

    def get_frame(self):
        """Return a copy of the latest RGB frame (or None)."""
        with self._lock:
            return self._frame.copy() if self._frame is not None else None

    def get_detections(self):
        """Detections for the latest processed frame."""
        with self._lock:
            return list(self._detections)

    def request_detection(self):
        """Ask for the detections of the next processed frame."""
        with self._lock:
            self._pending_requests += 1

    def collect_snapshots(self):
        """Drain every answered request without blocking."""
        snapshots = []
        while True:
            try:
                snapshots.append(self._snapshots.get_nowait())
            except queue.Empty:
                return snapshots

    # ────────────────────────────────────────────────────────────
    # Per-frame processing (capture thread, or directly from tests)
    # ────────────────────────────────────────────────────────────

    def process_frame(self, frame_bgr):
        """
        Run the detector on one BGR frame and publish the results.
        A detector failure is logged and treated as "nothing detected";
        requests waiting on this frame are answered with an empty
        snapshot rather than retried.
        """
        if cfg.CAMERA_MIRROR:
            frame_bgr = cv2.flip(frame_bgr, 1)

        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        h, w = frame_rgb.shape[:2]

        # Only requests made before inference starts belong to this frame
        with self._lock:
            pending = self._pending_requests
            self._pending_requests = 0

        try:
            detections = self.detector.detect(frame_rgb)
            self._error_count = 0
        except Exception as e:
            self._error_count += 1
            # Log infrequently to avoid spamming console
            if self._error_count % cfg.DETECTION_ERROR_LOG_EVERY == 1:
                print(f"[Camera] Detection failed: {e}")
            detections = []

        with self._lock:
            self._frame = frame_rgb
            self._frame_size = (w, h)
            self._detections = detections

        for _ in range(pending):
            self._snapshots.put(DetectionSnapshot(list(detections), (w, h)))

        return detections

    # ────────────────────────────────────────────────────────────
    # Capture loop (runs in daemon thread)
    # ────────────────────────────────────────────────────────────

    def _open(self):
        cap = cv2.VideoCapture(self.index)
        cap.set(cv2.CAP_PROP_FRAME_WIDTH, cfg.CAMERA_REQUEST_WIDTH)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, cfg.CAMERA_REQUEST_HEIGHT)
        cap.set(cv2.CAP_PROP_BUFFERSIZE, 1)
        return cap

    def _capture_loop(self):
        """
        Continuously capture frames from the webcam and process them
        until stop() is called.
        """
        cap = self._open()
        if not cap.isOpened():
            self.error = f"Could not open camera {self.index}"
            print(f"[Camera] ERROR: {self.error}")

        while self._running:
            ret, frame = cap.read()
            if not ret:
                # Camera disconnected — wait and retry
                time.sleep(cfg.CAMERA_RETRY_DELAY)
                cap.release()
                cap = self._open()
                continue

            self.error = None
            self.process_frame(frame)

        # Cleanup
        cap.release()
        try:
            self.detector.close()
        except Exception as e:
            print(f"[Camera] Detector close failed: {e}")
