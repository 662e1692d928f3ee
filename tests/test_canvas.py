"""
test_canvas.py
Unit tests for Surface sizing, reallocation and clearing.
"""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from canvas import Surface
from strokes import StrokeRenderer, Tool
import unittest
import numpy as np

RED = (255, 0, 0, 255)


class TestSurface(unittest.TestCase):
    def setUp(self):
        self.surface = Surface(100, 100)
        self.surface.buffer[10:20, 10:20] = RED

    def test_physical_size_is_floored(self):
        surface = Surface(100.5, 50.3, 1.5)
        self.assertEqual(surface.physical_size, (150, 75))
        self.assertEqual(surface.buffer.shape, (75, 150, 4))

    def test_scale_change_preserves_content(self):
        old = self.surface.buffer
        self.assertTrue(self.surface.set_scale_factor(2))
        self.assertIsNot(self.surface.buffer, old)
        self.assertEqual(self.surface.physical_size, (200, 200))
        # Logical (15, 15) now lives at physical (30, 30).
        self.assertEqual(tuple(self.surface.buffer[30, 30]), RED)
        self.assertEqual(self.surface.buffer[5, 5, 3], 0)
        self.assertEqual(self.surface.buffer[60, 60, 3], 0)

    def test_scale_decrease_preserves_content(self):
        surface = Surface(100, 100, 2)
        renderer = StrokeRenderer(surface)
        renderer.draw_segment((10, 50), (90, 50), Tool.PEN, (0, 0, 0), 1)
        self.assertTrue(surface.set_scale_factor(1))
        self.assertEqual(surface.physical_size, (100, 100))
        alpha = surface.buffer[..., 3]
        # Ink stays on logical row 50 along the whole path.
        self.assertTrue(alpha[49:51, 20:80].any(axis=0).all())
        self.assertFalse(alpha[:45].any())
        self.assertFalse(alpha[55:].any())

    def test_grow_height_keeps_content(self):
        self.assertTrue(self.surface.grow_height(50))
        self.assertEqual(self.surface.height, 150)
        self.assertEqual(self.surface.physical_size, (100, 150))
        self.assertEqual(tuple(self.surface.buffer[15, 15]), RED)
        self.assertFalse(self.surface.buffer[100:, :, 3].any())

    def test_width_shrink_clips(self):
        self.surface.buffer[10:20, 80:90] = RED
        self.assertTrue(self.surface.set_logical_width(50))
        self.assertEqual(self.surface.physical_size, (50, 100))
        self.assertEqual(self.surface.height, 100)
        self.assertEqual(int(self.surface.buffer[..., 3].astype(bool).sum()), 100)

    def test_invalid_configuration_is_ignored(self):
        buffer = self.surface.buffer
        self.assertFalse(self.surface.set_scale_factor(0))
        self.assertFalse(self.surface.set_scale_factor(-2))
        self.assertFalse(self.surface.set_logical_width(-5))
        self.assertFalse(self.surface.grow_height(0))
        self.assertFalse(self.surface.resize(0.001, 1))
        self.assertFalse(self.surface.set_scale_factor(float('nan')))
        self.assertFalse(self.surface.set_scale_factor(float('inf')))
        self.assertFalse(self.surface.set_logical_width(float('inf')))
        self.assertFalse(self.surface.grow_height(float('nan')))
        self.assertFalse(self.surface.resize(float('nan'), 2))
        self.assertIs(self.surface.buffer, buffer)
        self.assertEqual((self.surface.width, self.surface.height, self.surface.scale), (100, 100, 1))

    def test_unallocated_surface(self):
        surface = Surface(0, 10)
        self.assertFalse(surface.ready)
        self.assertEqual(surface.physical_size, (0, 0))
        surface.clear()
        self.assertTrue(surface.set_logical_width(20))
        self.assertTrue(surface.ready)
        self.assertEqual(surface.physical_size, (20, 10))

    def test_clear_keeps_size(self):
        self.surface.set_scale_factor(2)
        self.surface.clear()
        self.assertFalse(self.surface.buffer.any())
        self.assertEqual(self.surface.physical_size, (200, 200))
        self.assertEqual(self.surface.scale, 2)

    def test_to_physical(self):
        self.surface.set_scale_factor(1.5)
        point = self.surface.to_physical((10, 4))
        self.assertAlmostEqual(point.x, 15)
        self.assertAlmostEqual(point.y, 6)

    def test_resize_reallocates_once(self):
        self.assertTrue(self.surface.resize(60, 2))
        self.assertEqual(self.surface.physical_size, (120, 200))
        self.assertEqual(tuple(self.surface.buffer[30, 30]), RED)
        self.assertEqual(self.surface.buffer.dtype, np.uint8)


if __name__ == "__main__":
    unittest.main()
