"""
hud.py — Overlay text and detection boxes.

Renders: a lime box + label around every tracked detection, the fire
hint, the "waiting for camera" notice, and the debug counters.

Fonts are loaded once at init and reused every frame.
"""

import math
import time
import pygame

import config as cfg


class HUD:
    """
    Draws overlay UI elements on top of the render surface.
    Each method draws onto the passed-in surface.
    """

    def __init__(self):
        # Must be safe to call before pygame.init() in tests
        pygame.font.init()

        self.font_label = pygame.font.SysFont("sans", cfg.DETECTION_LABEL_SIZE)
        self.font_medium = pygame.font.SysFont("arial", 28, bold=True)
        self.font_small = pygame.font.SysFont("arial", 20)

    # ────────────────────────────────────────────────────────────
    # Detection boxes
    # ────────────────────────────────────────────────────────────

    def render_detections(self, surface, detections, label=None):
        """
        Stroke every detection with the tracked label and write the label
        just above its box (inside, when the box touches the top edge).
        Returns how many boxes were drawn.
        """
        if label is None:
            label = cfg.TRACKED_LABEL
        drawn = 0
        for det in detections:
            if det.label != label:
                continue
            x, y, w, h = det.bbox
            rect = pygame.Rect(int(x), int(y), int(w), int(h))
            pygame.draw.rect(surface, cfg.COLOR_DETECTION_BOX, rect,
                             cfg.DETECTION_BOX_WIDTH)

            text_y = y - 5 if y > 10 else y + 15
            rendered = self.font_label.render(det.label, True, cfg.COLOR_DETECTION_BOX)
            # Baseline placement: text sits on text_y
            surface.blit(rendered, (int(x), int(text_y) - rendered.get_height()))
            drawn += 1
        return drawn

    # ────────────────────────────────────────────────────────────
    # Status text
    # ────────────────────────────────────────────────────────────

    def render_waiting(self, surface, error=None):
        """Shown until the first camera frame arrives."""
        pulse = (math.sin(time.time() * 3.0) + 1) / 2
        alpha = int(120 + pulse * 135)
        self._draw_text_centered(surface, cfg.WAITING_TEXT, self.font_medium,
                                 cfg.COLOR_HUD_TEXT, y=surface.get_height() // 2 - 14,
                                 alpha=alpha)
        if error:
            self._draw_text_centered(surface, error, self.font_small,
                                     (255, 80, 80), y=surface.get_height() // 2 + 24)

    def render_hint(self, surface):
        self._draw_text(surface, cfg.HINT_TEXT, self.font_small, cfg.COLOR_HUD_HINT,
                        x=surface.get_width() // 2, y=surface.get_height() - 28,
                        center_x=True, alpha=160)

    # ────────────────────────────────────────────────────────────
    # Debug overlay
    # ────────────────────────────────────────────────────────────

    def render_debug(self, surface, fps, beam_count, detection_count):
        """FPS, beams in flight and current detections (toggled with F)."""
        texts = [
            f"FPS: {fps:.0f}",
            f"Beams: {beam_count}",
            f"Detections: {detection_count}",
        ]
        for i, t in enumerate(texts):
            self._draw_text(surface, t, self.font_small, (0, 255, 0),
                            x=10, y=10 + i * 20)

    # ────────────────────────────────────────────────────────────
    # Text drawing helpers
    # ────────────────────────────────────────────────────────────

    def _draw_text(self, surface, text, font, color, x, y,
                   center_x=False, alpha=255):
        """Draw text at a specific position with optional alignment."""
        rendered = font.render(text, True, color)
        if alpha < 255:
            rendered.set_alpha(alpha)
        rect = rendered.get_rect()
        if center_x:
            rect.centerx = x
        else:
            rect.left = x
        rect.top = y
        surface.blit(rendered, rect)

    def _draw_text_centered(self, surface, text, font, color, y, alpha=255):
        """Draw text horizontally centered at a given y coordinate."""
        self._draw_text(surface, text, font, color,
                        x=surface.get_width() // 2, y=y, center_x=True, alpha=alpha)
