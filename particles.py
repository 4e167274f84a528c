"""
particles.py — One-shot hit burst.

When a beam reaches its target a ring of short sparks is drawn radiating
from the impact point.  The burst is drawn on the tick the beam arrives
and is not animated afterwards, so nothing here keeps state between
calls: each burst samples fresh angles and lengths.

Angles and lengths are sampled as NumPy vectors in one call each.
"""

from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pygame

import config as cfg


@dataclass(frozen=True)
class Spark:
    angle: float                  # radians, [0, 2π)
    length: float                 # [HIT_SPARK_MIN_LENGTH, HIT_SPARK_MAX_LENGTH)
    start: Tuple[float, float]
    end: Tuple[float, float]


def generate_burst(x, y, rng=None) -> List[Spark]:
    """
    Sample HIT_SPARK_COUNT sparks around (x, y).  Pass a seeded
    numpy Generator as `rng` for reproducible bursts.
    """
    rng = rng if rng is not None else np.random.default_rng()
    n = cfg.HIT_SPARK_COUNT

    angles = rng.uniform(0.0, 2 * np.pi, n)
    lengths = rng.uniform(cfg.HIT_SPARK_MIN_LENGTH, cfg.HIT_SPARK_MAX_LENGTH, n)
    ends_x = x + np.cos(angles) * lengths
    ends_y = y + np.sin(angles) * lengths

    return [
        Spark(float(a), float(d), (float(x), float(y)), (float(ex), float(ey)))
        for a, d, ex, ey in zip(angles, lengths, ends_x, ends_y)
    ]


def render_burst(surface, sparks):
    """Draw sparks as thin translucent green strokes over a soft glow."""
    if not sparks:
        return

    burst_surf = pygame.Surface(surface.get_size(), pygame.SRCALPHA)

    # Glow first so the core stroke sits on top
    for s in sparks:
        pygame.draw.line(burst_surf, cfg.HIT_GLOW_COLOR, s.start, s.end,
                         cfg.HIT_GLOW_WIDTH)
    for s in sparks:
        pygame.draw.line(burst_surf, cfg.HIT_SPARK_COLOR, s.start, s.end,
                         cfg.HIT_SPARK_WIDTH)

    surface.blit(burst_surf, (0, 0))


def burst(surface, position, rng=None) -> List[Spark]:
    """Generate a burst at `position` and draw it (if a surface is given)."""
    sparks = generate_burst(position[0], position[1], rng=rng)
    if surface is not None:
        render_burst(surface, sparks)
    return sparks
