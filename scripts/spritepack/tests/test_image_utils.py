"""
Tests for image file helpers and the Pillow surface.
"""

import shutil
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from ..utils.image import ImageUtils, base_sprite_name, load_surface, rename_with_ext, save_surface
from ..utils.surface import PillowSurface, TRANSPARENT
from .helpers import BLUE, RED, quadrant_sprite


class TestSpriteNaming(unittest.TestCase):
    """Test file name handling."""

    def test_base_sprite_name(self):
        self.assertEqual(base_sprite_name("hero.png"), "hero")
        self.assertEqual(base_sprite_name("art/hero.walk.png"), "hero")
        self.assertEqual(base_sprite_name(Path("a") / "b" / "coin.tga"), "coin")
        self.assertEqual(base_sprite_name("noext"), "noext")
        self.assertEqual(base_sprite_name(".hidden"), ".hidden")

    def test_rename_with_ext(self):
        self.assertEqual(rename_with_ext("sheet.png", "tga"), "sheet.tga")
        self.assertEqual(rename_with_ext("sheet.tar.gz", "json"), "sheet.json")
        self.assertEqual(rename_with_ext("sheet", "png"), "sheet")


class TestImageFiles(unittest.TestCase):
    """Test decoding and encoding surfaces."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_save_and_load_surface(self):
        surface = quadrant_sprite().surface
        for fmt in ("PNG", "TGA", "BMP"):
            path = self.temp_dir / f"quad.{fmt.lower()}"

            save_surface(surface, path, fmt)
            loaded = load_surface(path)

            self.assertIsNotNone(loaded)
            self.assertEqual(loaded.read_pixels(), surface.read_pixels())

    def test_unsupported_format(self):
        with self.assertRaises(ValueError):
            save_surface(PillowSurface.create(2, 2), self.temp_dir / "x.gif", "GIF")

    def test_load_from_bytes(self):
        path = self.temp_dir / "red.png"
        Image.new('RGBA', (3, 2), RED).save(path)

        image = ImageUtils.load_image(path.read_bytes())

        self.assertEqual(image.size, (3, 2))

    def test_load_invalid(self):
        with self.assertRaises(ValueError):
            ImageUtils.load_image(b"garbage")
        with self.assertRaises(ValueError):
            ImageUtils.load_image(42)
        self.assertIsNone(load_surface(self.temp_dir / "missing.png"))


class TestPillowSurface(unittest.TestCase):
    """Test surface primitives."""

    def test_fill_rect_overwrites(self):
        surface = PillowSurface.create(4, 4)
        surface.fill_rect((0, 0, 4, 4), RED)
        surface.fill_rect((1, 1, 2, 2), TRANSPARENT)

        self.assertEqual(surface.getpixel(0, 0), RED)
        self.assertEqual(surface.getpixel(1, 1), TRANSPARENT)

    def test_blit_stretches(self):
        src = PillowSurface(Image.new('RGBA', (1, 1), BLUE))
        surface = PillowSurface.create(4, 4)

        surface.blit(src, (0, 0, 1, 1), (1, 1, 3, 2))

        self.assertEqual(surface.getpixel(0, 0), TRANSPARENT)
        self.assertEqual(surface.getpixel(1, 1), BLUE)
        self.assertEqual(surface.getpixel(3, 2), BLUE)
        self.assertEqual(surface.getpixel(3, 3), TRANSPARENT)

    def test_clear(self):
        surface = PillowSurface(Image.new('RGBA', (2, 2), RED))
        surface.clear()
        self.assertEqual(surface.read_pixels(), bytes(4 * 4))

    def test_rgb_input_converted(self):
        surface = PillowSurface(Image.new('RGB', (1, 1), (1, 2, 3)))
        self.assertEqual(surface.getpixel(0, 0), (1, 2, 3, 255))


if __name__ == '__main__':
    unittest.main()
