"""
laser.py — Laser beam system.

Each fire event launches one beam per detected bird.  A beam travels
from a fixed origin (bottom-centre of the overlay) toward its target:

  1. every tick progress grows by PROGRESS_STEP and pulse by PULSE_STEP
  2. the visible stroke runs from the origin to the interpolated tip,
     fading out (opacity = 1 - progress) and pulsing in width
  3. once progress reaches 1 the beam bursts at its tip and is removed

The BeamRegistry owns every beam.  Rendering is optional so the state
machine can be driven without a display.
"""

import math

import pygame

import config as cfg
import particles


# ────────────────────────────────────────────────────────────
# Gradient helpers
# ────────────────────────────────────────────────────────────

def gradient_color(t, opacity, stops=None):
    """
    RGBA colour at fraction `t` (0 = origin, 1 = tip) of a beam whose
    overall opacity is `opacity`.  Colours and opacity multipliers are
    linearly interpolated between the two surrounding stops.
    """
    if stops is None:
        stops = cfg.BEAM_GRADIENT_STOPS
    t = min(1.0, max(0.0, t))

    lo = stops[0]
    hi = stops[-1]
    for a, b in zip(stops, stops[1:]):
        if a[0] <= t <= b[0]:
            lo, hi = a, b
            break

    span = hi[0] - lo[0]
    k = (t - lo[0]) / span if span > 0 else 0.0
    rgb = tuple(int(round(c0 + (c1 - c0) * k)) for c0, c1 in zip(lo[1], hi[1]))
    mult = lo[2] + (hi[2] - lo[2]) * k
    alpha = int(round(255 * max(0.0, min(1.0, opacity * mult))))
    return (*rgb, alpha)


# ────────────────────────────────────────────────────────────
# Beam
# ────────────────────────────────────────────────────────────

class Beam:
    """
    One laser shot.  Origin and target are fixed at spawn; progress and
    pulse are derived from the number of ticks survived, so progress is
    exactly ticks * step (25 ticks of 0.04 land on 1.0, not 0.9999...).
    """

    def __init__(self, origin, target, step=None, pulse_step=None):
        self._origin = (float(origin[0]), float(origin[1]))
        self._target = (float(target[0]), float(target[1]))
        self.step = cfg.PROGRESS_STEP if step is None else step
        self.pulse_step = cfg.PULSE_STEP if pulse_step is None else pulse_step
        self.ticks = 0

    @property
    def origin(self):
        return self._origin

    @property
    def target(self):
        return self._target

    @property
    def progress(self):
        return self.ticks * self.step

    @property
    def pulse(self):
        return self.ticks * self.pulse_step

    @property
    def position(self):
        """Tip of the beam: origin + (target - origin) * progress."""
        p = self.progress
        ox, oy = self._origin
        tx, ty = self._target
        return ox + (tx - ox) * p, oy + (ty - oy) * p

    @property
    def opacity(self):
        return 1 - self.progress

    @property
    def width(self):
        return cfg.BEAM_BASE_WIDTH + cfg.BEAM_PULSE_AMPLITUDE * math.sin(self.pulse)

    @property
    def arrived(self):
        return self.progress >= 1

    def advance(self):
        """One tick of travel.  Returns True once the beam has arrived."""
        self.ticks += 1
        return self.arrived

    def __repr__(self):
        return (f"Beam(origin={self._origin}, target={self._target}, "
                f"progress={self.progress:.2f})")


def render_beam(surface, beam):
    """
    Draw the beam from its origin to its current tip: a wide lime glow
    underneath, then the core stroke split into segments so its colour
    can follow the green → pale green → white gradient.
    """
    ox, oy = beam.origin
    x, y = beam.position
    opacity = max(0.0, beam.opacity)
    width = max(1, int(round(beam.width)))

    glow_surf = pygame.Surface(surface.get_size(), pygame.SRCALPHA)

    # Glow
    glow_alpha = int(255 * cfg.BEAM_GLOW_ALPHA * opacity)
    if glow_alpha > 0:
        pygame.draw.line(glow_surf, (*cfg.BEAM_GLOW_COLOR, glow_alpha),
                         (ox, oy), (x, y), width + cfg.BEAM_GLOW_WIDTH)

    # Core
    n = cfg.BEAM_GRADIENT_SEGMENTS
    for i in range(n):
        t0 = i / n
        t1 = (i + 1) / n
        start = (ox + (x - ox) * t0, oy + (y - oy) * t0)
        end = (ox + (x - ox) * t1, oy + (y - oy) * t1)
        color = gradient_color((t0 + t1) / 2, opacity)
        pygame.draw.line(glow_surf, color, start, end, width)

    surface.blit(glow_surf, (0, 0))


# ────────────────────────────────────────────────────────────
# Beam Registry
# ────────────────────────────────────────────────────────────

class BeamRegistry:
    """
    Owns all in-flight beams, in spawn order.

    Usage:
        reg = BeamRegistry()
        reg.spawn((320, 480), (200, 100))
        hits = reg.advance_and_render(surface)   # once per tick
    """

    def __init__(self):
        self._beams = []

    def spawn(self, origin, target):
        beam = Beam(origin, target)
        self._beams.append(beam)
        return beam

    def advance_and_render(self, surface=None, rng=None):
        """
        Advance every beam by one tick and draw it.  Beams that arrive
        burst at their tip and are dropped.  Survivors are collected into
        a new list, so removing one beam never shifts the beams still to
        be processed in this pass.

        Returns the hit positions of beams retired this tick.
        """
        survivors = []
        hits = []

        for beam in self._beams:
            arrived = beam.advance()
            if surface is not None:
                render_beam(surface, beam)
            if arrived:
                pos = beam.position
                particles.burst(surface, pos, rng=rng)
                hits.append(pos)
            else:
                survivors.append(beam)

        self._beams = survivors
        return hits

    def count(self):
        return len(self._beams)

    def clear(self):
        self._beams.clear()

    def __len__(self):
        return len(self._beams)

    def __iter__(self):
        return iter(list(self._beams))
