"""
Tests for padding border generation.
"""

import unittest

from ..model import PaddingMode
from ..processing.bleed import BleedGenerator, DEBUG_PADDING_COLOR, bleed_regions
from ..utils.surface import TRANSPARENT
from .helpers import BLUE, GREEN, RED, WHITE, make_sprite, quadrant_sprite


class TestBleedRegions(unittest.TestCase):
    """Test border rectangle layout."""

    def test_regions_tile_the_border(self):
        w, h, p = 5, 3, 2
        covered = set()
        for _, (x, y, rw, rh) in bleed_regions(w, h, p):
            for yy in range(y, y + rh):
                for xx in range(x, x + rw):
                    self.assertNotIn((xx, yy), covered)
                    covered.add((xx, yy))

        border = {
            (x, y)
            for y in range(h + 2 * p)
            for x in range(w + 2 * p)
            if not (p <= x < p + w and p <= y < p + h)
        }
        self.assertEqual(covered, border)


class TestBleedGenerator(unittest.TestCase):
    """Test padded candidate generation."""

    def test_bleed_solid_sprite(self):
        """4x4 red sprite with 2px bleed becomes an all red 8x8 surface."""
        generator = BleedGenerator(2, PaddingMode.BLEED)

        candidate = generator.generate(make_sprite(4, 4, RED))

        self.assertEqual((candidate.width, candidate.height), (8, 8))
        self.assertEqual(candidate.surface.read_pixels(), bytes(RED) * 64)

    def test_inset_matches_source(self):
        sprite = quadrant_sprite()
        candidate = BleedGenerator(3).generate(sprite)

        inset = candidate.surface.crop((3, 3, 2, 2))
        self.assertEqual(inset.read_pixels(), sprite.surface.read_pixels())

    def test_bleed_replicates_edges_and_corners(self):
        candidate = BleedGenerator(1, PaddingMode.BLEED).generate(quadrant_sprite())
        surface = candidate.surface

        self.assertEqual(surface.size, (4, 4))
        # Corners
        self.assertEqual(surface.getpixel(0, 0), RED)
        self.assertEqual(surface.getpixel(3, 0), GREEN)
        self.assertEqual(surface.getpixel(0, 3), BLUE)
        self.assertEqual(surface.getpixel(3, 3), WHITE)
        # Top and bottom edges
        self.assertEqual(surface.getpixel(1, 0), RED)
        self.assertEqual(surface.getpixel(2, 0), GREEN)
        self.assertEqual(surface.getpixel(1, 3), BLUE)
        self.assertEqual(surface.getpixel(2, 3), WHITE)
        # Left and right edges
        self.assertEqual(surface.getpixel(0, 1), RED)
        self.assertEqual(surface.getpixel(0, 2), BLUE)
        self.assertEqual(surface.getpixel(3, 1), GREEN)
        self.assertEqual(surface.getpixel(3, 2), WHITE)

    def test_alpha_padding_is_transparent(self):
        candidate = BleedGenerator(2, PaddingMode.ALPHA).generate(make_sprite(4, 4, RED))
        surface = candidate.surface

        self.assertEqual(surface.getpixel(0, 0), TRANSPARENT)
        self.assertEqual(surface.getpixel(3, 1), TRANSPARENT)
        self.assertEqual(surface.getpixel(7, 7), TRANSPARENT)
        self.assertEqual(surface.crop((2, 2, 4, 4)).read_pixels(), bytes(RED) * 16)

    def test_debug_padding_is_flat_color(self):
        candidate = BleedGenerator(1, PaddingMode.DEBUG).generate(make_sprite(2, 3, BLUE))
        surface = candidate.surface

        self.assertEqual(surface.size, (4, 5))
        for x in range(4):
            self.assertEqual(surface.getpixel(x, 0), DEBUG_PADDING_COLOR)
            self.assertEqual(surface.getpixel(x, 4), DEBUG_PADDING_COLOR)
        self.assertEqual(surface.getpixel(1, 1), BLUE)

    def test_zero_padding_is_plain_copy(self):
        sprite = quadrant_sprite()
        for mode in PaddingMode:
            candidate = BleedGenerator(0, mode).generate(sprite)
            self.assertEqual(candidate.surface.size, sprite.surface.size)
            self.assertEqual(candidate.surface.read_pixels(), sprite.surface.read_pixels())

    def test_generation_is_repeatable(self):
        generator = BleedGenerator(3, PaddingMode.BLEED)
        sprite = quadrant_sprite()

        first = generator.generate(sprite).surface.read_pixels()
        second = generator.generate(sprite).surface.read_pixels()

        self.assertEqual(first, second)

    def test_generate_all_sort_keys(self):
        sprites = [make_sprite(2, 2), make_sprite(3, 3), make_sprite(4, 4)]

        candidates = BleedGenerator(1).generate_all(sprites)

        self.assertEqual([c.sort_key for c in candidates], [0, 1, 2])
        self.assertEqual([c.width for c in candidates], [4, 5, 6])

    def test_mode_from_string(self):
        self.assertEqual(BleedGenerator(1, "debug").mode, PaddingMode.DEBUG)

    def test_negative_padding_rejected(self):
        with self.assertRaises(ValueError):
            BleedGenerator(-1)


if __name__ == '__main__':
    unittest.main()
