"""
config.py — Central configuration for Bird Laser.

Every tunable parameter lives here so whoever runs the toy can adjust
the camera, the detector and the look of the beams without touching
the animation code.
"""

# ─── Display ───────────────────────────────────────────────────────
GAME_TITLE = "BIRD LASER"
# Fallback overlay size until the camera reports its real frame size.
INTERNAL_WIDTH = 640
INTERNAL_HEIGHT = 480
# Output window resolution. PyGame scales overlay→display.
DISPLAY_WIDTH = 1280
DISPLAY_HEIGHT = 960
FULLSCREEN = False
TARGET_FPS = 60
BACKGROUND_COLOR = (0, 0, 0)

# ─── Camera ────────────────────────────────────────────────────────
CAMERA_INDEX = 0                  # 0 = default webcam
CAMERA_MIRROR = False             # Rear-facing by default, no flip
CAMERA_REQUEST_WIDTH = 640        # Best effort; the real size is read back
CAMERA_REQUEST_HEIGHT = 480
CAMERA_RETRY_DELAY = 0.5          # Seconds before reopening a dead camera
SHOW_CAMERA_PREVIEW = True        # Draw the live frame under the overlay

# ─── Detector (MediaPipe Tasks ObjectDetector) ─────────────────────
MODEL_DIR = "assets"
MODEL_FILENAME = "efficientdet_lite0.tflite"
MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/"
    "object_detector/efficientdet_lite0/float16/latest/"
    "efficientdet_lite0.tflite"
)
DETECTION_SCORE_THRESHOLD = 0.35
DETECTION_MAX_RESULTS = 10
TRACKED_LABEL = "bird"
DETECTION_ERROR_LOG_EVERY = 300   # Log every Nth consecutive failure

# ─── Beam animation ────────────────────────────────────────────────
PROGRESS_STEP = 0.04              # Reaches 1.0 in 25 ticks
PULSE_STEP = 0.3
BEAM_BASE_WIDTH = 3
BEAM_PULSE_AMPLITUDE = 2
# Gradient along origin→tip: (offset, RGB, opacity multiplier)
BEAM_GRADIENT_STOPS = (
    (0.0, (0, 255, 0), 1.0),
    (0.5, (100, 255, 100), 0.8),
    (1.0, (255, 255, 255), 0.5),
)
BEAM_GRADIENT_SEGMENTS = 12       # pygame has no gradient stroke
BEAM_GLOW_COLOR = (0, 255, 0)     # "lime"
BEAM_GLOW_WIDTH = 8               # Extra pixels around the core stroke
BEAM_GLOW_ALPHA = 0.25            # Glow opacity relative to beam opacity

# ─── Hit effect ────────────────────────────────────────────────────
HIT_SPARK_COUNT = 8
HIT_SPARK_MIN_LENGTH = 8.0
HIT_SPARK_MAX_LENGTH = 16.0
HIT_SPARK_COLOR = (0, 255, 0, 153)   # rgba(0, 255, 0, 0.6)
HIT_SPARK_WIDTH = 2
HIT_GLOW_COLOR = (0, 255, 0, 50)
HIT_GLOW_WIDTH = 6

# ─── HUD ───────────────────────────────────────────────────────────
COLOR_DETECTION_BOX = (0, 255, 0)    # "lime"
DETECTION_BOX_WIDTH = 3
DETECTION_LABEL_SIZE = 16
COLOR_HUD_TEXT = (255, 255, 255)
COLOR_HUD_HINT = (0, 255, 0)
HINT_TEXT = "SPACE / CLICK to fire"
WAITING_TEXT = "WAITING FOR CAMERA"
SHOW_DETECTION_BOXES = True

# ─── Debug ─────────────────────────────────────────────────────────
DEBUG_FPS = False                 # Show FPS + beam count

# ─── Audio ─────────────────────────────────────────────────────────
ENABLE_AUDIO = True
AUDIO_VOLUME = 0.5                # Master volume (0.0 - 1.0)
