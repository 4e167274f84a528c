"""
main.py — Entry point for Bird Laser.

This file initializes PyGame, starts the camera thread, and runs the
render loop.  Every tick:

  1. Handle input (fire, toggles, quit)
  2. Spawn beams for fire requests the camera has answered
  3. Resize the overlay if the camera frame size changed
  4. Clear → camera preview → detection boxes
  5. Advance + draw every beam (bursts for arrivals)
  6. HUD, scale to display, flip, enforce frame rate

Controls:
  Space / left click  — Fire at every bird in view
  B                   — Toggle detection boxes
  F                   — Toggle FPS / beam counter
  Escape              — Exit
"""

import sys
import time

import numpy as np
import pygame

import config as cfg
from camera import Camera
from detector import MediaPipeDetector
from hud import HUD
from laser import BeamRegistry
from trigger import TriggerController


def main():
    # ══════════════════════════════════════════════════════════════
    # INITIALIZATION
    # ══════════════════════════════════════════════════════════════

    # Fails fast with a setup hint if the model is missing
    detector = MediaPipeDetector()

    pygame.init()

    flags = pygame.HWSURFACE | pygame.DOUBLEBUF
    if cfg.FULLSCREEN:
        flags |= pygame.FULLSCREEN
    display = pygame.display.set_mode((cfg.DISPLAY_WIDTH, cfg.DISPLAY_HEIGHT), flags)
    pygame.display.set_caption(cfg.GAME_TITLE)

    # Overlay surface, re-created to match the camera frame size
    overlay = pygame.Surface((cfg.INTERNAL_WIDTH, cfg.INTERNAL_HEIGHT), pygame.SRCALPHA)

    clock = pygame.time.Clock()

    camera = Camera(detector)
    registry = BeamRegistry()
    trigger = TriggerController(registry, camera)
    hud = HUD()

    sounds = _load_sounds()

    show_fps = cfg.DEBUG_FPS
    show_boxes = cfg.SHOW_DETECTION_BOXES

    camera.start()
    print("[Bird Laser] Camera thread started.")
    print("[Bird Laser] Press SPACE or click to fire, Escape to exit.")

    # ══════════════════════════════════════════════════════════════
    # RENDER LOOP
    # ══════════════════════════════════════════════════════════════

    running = True
    while running:
        # ── Input ──
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    trigger.fire()
                    _play_sound(sounds, "zap")
                elif event.key == pygame.K_f:
                    show_fps = not show_fps
                elif event.key == pygame.K_b:
                    show_boxes = not show_boxes

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                trigger.fire()
                _play_sound(sounds, "zap")

        # ── Answered fire requests become beams ──
        trigger.poll()

        # ── Match the overlay to the frame ──
        frame_size = camera.frame_size()
        if frame_size is not None:
            overlay = _ensure_surface(overlay, frame_size)

        overlay.fill(cfg.BACKGROUND_COLOR)

        if not camera.is_ready():
            hud.render_waiting(overlay, camera.error)
        else:
            if cfg.SHOW_CAMERA_PREVIEW:
                frame = camera.get_frame()
                if frame is not None:
                    overlay.blit(_frame_to_surface(frame), (0, 0))

            detections = camera.get_detections()
            if show_boxes:
                hud.render_detections(overlay, detections)

        # ── Beams + bursts ──
        hits = registry.advance_and_render(overlay)
        if hits:
            _play_sound(sounds, "hit")

        # ── HUD ──
        hud.render_hint(overlay)
        if show_fps:
            hud.render_debug(overlay, clock.get_fps(), registry.count(),
                             len(camera.get_detections()))

        _scale_and_flip(overlay, display)
        clock.tick(cfg.TARGET_FPS)

    # ══════════════════════════════════════════════════════════════
    # CLEANUP
    # ══════════════════════════════════════════════════════════════
    print("[Bird Laser] Shutting down...")
    camera.stop()
    pygame.quit()
    sys.exit(0)


# ══════════════════════════════════════════════════════════════════
# Helper functions
# ══════════════════════════════════════════════════════════════════

def _ensure_surface(surface, size):
    """Return `surface` if it already has `size`, else a fresh one."""
    if surface.get_size() == tuple(size):
        return surface
    return pygame.Surface(size, pygame.SRCALPHA)


def _frame_to_surface(frame_rgb):
    """Convert an (H, W, 3) RGB array to a PyGame Surface."""
    return pygame.surfarray.make_surface(np.ascontiguousarray(frame_rgb.swapaxes(0, 1)))


def _scale_and_flip(overlay, display):
    """
    Scale the overlay up to the display resolution and present it.
    """
    scaled = pygame.transform.scale(
        overlay,
        (cfg.DISPLAY_WIDTH, cfg.DISPLAY_HEIGHT),
    )
    display.fill(cfg.BACKGROUND_COLOR)
    display.blit(scaled, (0, 0))
    pygame.display.flip()


def _load_sounds():
    """
    Generate the zap / hit effects.  Returns a dict of sound objects,
    or an empty dict if audio is disabled or the mixer is unavailable.
    """
    sounds = {}
    if not cfg.ENABLE_AUDIO:
        return sounds

    try:
        pygame.mixer.init()
        sample_rate = 22050

        # Zap: fast downward sweep
        zap_duration = 0.18
        t = np.arange(int(sample_rate * zap_duration)) / sample_rate
        freq = 1800 - (t / zap_duration) * 1400
        phase = 2 * np.pi * np.cumsum(freq) / sample_rate
        envelope = np.clip(1.0 - t / zap_duration, 0, 1)
        zap = 14000 * envelope * np.sin(phase)
        sounds["zap"] = _make_sound(zap, cfg.AUDIO_VOLUME * 0.5)

        # Hit: short noisy crackle
        hit_duration = 0.12
        t = np.arange(int(sample_rate * hit_duration)) / sample_rate
        envelope = np.clip(1.0 - t / hit_duration, 0, 1) ** 2
        hit = 12000 * envelope * (
            np.sin(2 * np.pi * 220 * t) + 0.6 * np.random.uniform(-1, 1, len(t))
        )
        sounds["hit"] = _make_sound(hit, cfg.AUDIO_VOLUME * 0.6)

        print(f"[Audio] Loaded {len(sounds)} procedural sounds.")

    except Exception as e:
        print(f"[Audio] Could not initialize sounds: {e}")
        sounds = {}

    return sounds


def _make_sound(samples, volume):
    """Mono float samples → pygame Sound matching the mixer's channel count."""
    buf = np.clip(samples, -32768, 32767).astype(np.int16)
    init = pygame.mixer.get_init()
    channels = init[2] if init else 1
    if channels > 1:
        buf = np.repeat(buf[:, None], channels, axis=1)
    sound = pygame.sndarray.make_sound(np.ascontiguousarray(buf))
    sound.set_volume(volume)
    return sound


def _play_sound(sounds, name):
    """Play a sound by name if it exists. Never crashes."""
    try:
        if name in sounds:
            sounds[name].play()
    except pygame.error as e:
        print(f"[Audio] Could not play '{name}': {e}")


# ══════════════════════════════════════════════════════════════════
# Entry point
# ══════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n[Bird Laser] Interrupted by user.")
        pygame.quit()
        sys.exit(0)
    except FileNotFoundError as e:
        print(e)
        pygame.quit()
        sys.exit(1)
    except Exception as e:
        print(f"\n[Bird Laser] Fatal error: {e}")
        import traceback
        traceback.print_exc()
        # Save crash log for post-mortem debugging
        try:
            with open("crash.log", "a") as f:
                import datetime
                f.write(f"\n{'='*60}\n")
                f.write(f"Crash at {datetime.datetime.now()}\n")
                traceback.print_exc(file=f)
        except OSError:
            pass
        pygame.quit()
        sys.exit(1)
