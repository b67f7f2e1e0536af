"""
Drawing surface: colors, primitives and blend modes.
"""
import sys
import unittest
from pathlib import Path

import numpy as np

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from promptreel.graphics import Canvas, parse_color


def _solid(width, height, value):
    c = Canvas(width, height)
    c.pixels[...] = value
    return c


class TestParseColor(unittest.TestCase):

    def test_hex(self):
        self.assertEqual(parse_color("#0ea5e9"), (14, 165, 233))

    def test_css4_hsl_with_deg(self):
        self.assertEqual(parse_color("hsl(0deg 100% 50%)"), (255, 0, 0))
        self.assertEqual(parse_color("hsl(120deg 100% 25%)"), (0, 128, 0))

    def test_comma_hsl_still_works(self):
        self.assertEqual(parse_color("hsl(240, 100%, 50%)"), (0, 0, 255))

    def test_bad_color_raises(self):
        with self.assertRaises(ValueError):
            parse_color("not-a-color")


class TestGradient(unittest.TestCase):

    def test_vertical_four_stops(self):
        c = Canvas(8, 100)
        c.fill_vertical_gradient(("#ff0000", "#00ff00", "#0000ff", "#ffffff"), (0.0, 0.4, 0.75, 1.0))
        np.testing.assert_allclose(c.pixels[0, 0], (1.0, 0.0, 0.0), atol=0.02)
        np.testing.assert_allclose(c.pixels[40, 3], (0.0, 1.0, 0.0), atol=0.02)
        np.testing.assert_allclose(c.pixels[99, 7], (1.0, 1.0, 1.0), atol=0.03)
        # Every column is identical
        self.assertTrue(np.all(c.pixels == c.pixels[:, :1]))

    def test_replaces_contents(self):
        c = _solid(4, 4, 0.3)
        c.fill_vertical_gradient(("#000000",) * 4, (0.0, 0.4, 0.75, 1.0))
        self.assertEqual(float(c.pixels.max()), 0.0)


class TestBlendModes(unittest.TestCase):

    def _one(self, backdrop, color, blend, alpha=1.0):
        c = _solid(2, 2, backdrop)
        c.fill_rect(0, 0, 2, 2, color, alpha, blend=blend)
        return float(c.pixels[0, 0, 0])

    def test_normal_alpha(self):
        self.assertAlmostEqual(self._one(0.0, (1.0, 1.0, 1.0), "normal", alpha=0.5), 0.5, places=5)

    def test_screen(self):
        self.assertAlmostEqual(self._one(0.5, (0.5, 0.5, 0.5), "screen"), 0.75, places=5)

    def test_lighter_is_additive_and_clamped(self):
        self.assertAlmostEqual(self._one(0.2, (0.3, 0.3, 0.3), "lighter"), 0.5, places=5)
        self.assertAlmostEqual(self._one(0.8, (1.0, 1.0, 1.0), "lighter", alpha=0.5), 1.0, places=5)

    def test_difference(self):
        self.assertAlmostEqual(self._one(0.5, (0.2, 0.2, 0.2), "difference"), 0.3, places=5)

    def test_overlay_keys_off_backdrop(self):
        self.assertAlmostEqual(self._one(0.25, (1.0, 1.0, 1.0), "overlay"), 0.5, places=5)
        self.assertAlmostEqual(self._one(0.75, (0.0, 0.0, 0.0), "overlay"), 0.5, places=5)

    def test_unknown_mode(self):
        c = Canvas(2, 2)
        with self.assertRaises(ValueError):
            c.fill_rect(0, 0, 1, 1, "#ffffff", blend="multiply-ish")


class TestPrimitives(unittest.TestCase):

    def test_circle(self):
        c = Canvas(21, 21)
        c.fill_circle(10.5, 10.5, 3, "#ffffff")
        self.assertAlmostEqual(float(c.pixels[10, 10, 0]), 1.0, places=5)
        self.assertEqual(float(c.pixels[0, 0, 0]), 0.0)
        self.assertEqual(float(c.pixels[10, 16, 0]), 0.0)

    def test_circle_off_canvas_is_noop(self):
        c = Canvas(10, 10)
        c.fill_circle(-50, -50, 3, "#ffffff")
        c.fill_circle(5, 5, 0, "#ffffff")
        self.assertEqual(float(c.pixels.max()), 0.0)

    def test_polygon(self):
        c = Canvas(20, 20)
        c.fill_polygon([(0, 10), (20, 10), (20, 20), (0, 20)], "#ffffff")
        self.assertEqual(float(c.pixels[15, 5, 0]), 1.0)
        self.assertEqual(float(c.pixels[2, 5, 0]), 0.0)

    def test_polygon_partially_outside(self):
        c = Canvas(20, 20)
        c.fill_polygon([(-10, -10), (30, -10), (30, 5), (-10, 5)], "#ffffff", alpha=0.4, blend="screen")
        self.assertAlmostEqual(float(c.pixels[2, 10, 0]), 0.4, places=5)
        self.assertEqual(float(c.pixels[15, 10, 0]), 0.0)

    def test_line(self):
        c = Canvas(20, 12)
        c.stroke_line((2, 5.5), (18, 5.5), "#ffffff", width=1.5)
        self.assertGreater(float(c.pixels[5, 10, 0]), 0.5)
        self.assertEqual(float(c.pixels[0, 10, 0]), 0.0)
        self.assertEqual(float(c.pixels[11, 10, 0]), 0.0)

    def test_rect_clips(self):
        c = Canvas(4, 4)
        c.fill_rect(3.6, 3.2, 2, 2, "#ffffff")
        self.assertEqual(float(c.pixels[3, 3, 0]), 1.0)
        self.assertEqual(float(c.pixels[0, 0, 0]), 0.0)

    def test_to_rgb(self):
        c = _solid(5, 3, 1.0)
        frame = c.to_rgb()
        self.assertEqual(frame.shape, (3, 5, 3))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertEqual(int(frame.max()), 255)

    def test_clear(self):
        c = _solid(3, 3, 0.7)
        c.clear()
        self.assertEqual(float(c.pixels.max()), 0.0)
