import math
import os
import unittest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pygame

import config as cfg
from particles import burst, generate_burst, render_burst


class TestHitBurst(unittest.TestCase):
    def test_always_eight_sparks_in_range(self):
        rng = np.random.default_rng(7)
        for _ in range(200):
            sparks = generate_burst(100.0, 50.0, rng=rng)
            self.assertEqual(len(sparks), cfg.HIT_SPARK_COUNT)
            for s in sparks:
                self.assertGreaterEqual(s.angle, 0.0)
                self.assertLess(s.angle, 2 * math.pi)
                self.assertGreaterEqual(s.length, cfg.HIT_SPARK_MIN_LENGTH)
                self.assertLess(s.length, cfg.HIT_SPARK_MAX_LENGTH)
                self.assertEqual(s.start, (100.0, 50.0))

    def test_end_points_follow_angle_and_length(self):
        for s in generate_burst(10, 20, rng=np.random.default_rng(3)):
            dx = s.end[0] - s.start[0]
            dy = s.end[1] - s.start[1]
            self.assertAlmostEqual(math.hypot(dx, dy), s.length, places=6)
            self.assertAlmostEqual(math.atan2(dy, dx) % (2 * math.pi), s.angle, places=6)

    def test_distribution_is_uniform_enough(self):
        rng = np.random.default_rng(11)
        angles = []
        lengths = []
        for _ in range(2000):
            for s in generate_burst(0, 0, rng=rng):
                angles.append(s.angle)
                lengths.append(s.length)
        angles = np.array(angles)
        lengths = np.array(lengths)

        self.assertAlmostEqual(angles.mean(), math.pi, delta=0.1)
        self.assertAlmostEqual(lengths.mean(), 12.0, delta=0.1)
        # Every quadrant gets roughly a quarter of the sparks
        counts, _ = np.histogram(angles, bins=4, range=(0, 2 * math.pi))
        for c in counts:
            self.assertAlmostEqual(c / len(angles), 0.25, delta=0.02)

    def test_bursts_are_independent(self):
        a = generate_burst(0, 0)
        b = generate_burst(0, 0)
        self.assertNotEqual([s.angle for s in a], [s.angle for s in b])

    def test_render_draws_around_impact(self):
        surface = pygame.Surface((200, 200), pygame.SRCALPHA)
        sparks = burst(surface, (100, 100), rng=np.random.default_rng(5))
        self.assertEqual(len(sparks), cfg.HIT_SPARK_COUNT)

        alpha = pygame.surfarray.array_alpha(surface)
        self.assertGreater(int(alpha[100, 100]), 0)
        # Nothing beyond the longest spark plus its glow
        far = cfg.HIT_SPARK_MAX_LENGTH + cfg.HIT_GLOW_WIDTH + 2
        self.assertEqual(int(alpha[int(100 + far):, :].max()), 0)
        self.assertEqual(int(alpha[:, int(100 + far):].max()), 0)

    def test_burst_without_surface(self):
        sparks = burst(None, (5, 5))
        self.assertEqual(len(sparks), cfg.HIT_SPARK_COUNT)

    def test_render_nothing(self):
        surface = pygame.Surface((20, 20), pygame.SRCALPHA)
        render_burst(surface, [])
        self.assertEqual(int(pygame.surfarray.array_alpha(surface).max()), 0)


if __name__ == "__main__":
    unittest.main()
