"""
Shared builders for in-memory sprites and candidates.
"""

from PIL import Image

from ..model import PackedCandidate, Sprite
from ..utils.surface import PillowSurface


RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)


def make_sprite(width: int, height: int, color=RED, name: str = "sprite") -> Sprite:
    """Solid color sprite."""
    return Sprite(PillowSurface(Image.new('RGBA', (width, height), color)), name)


def make_candidate(width: int, height: int, sort_key: int = 0) -> PackedCandidate:
    """Candidate with a blank surface of the given size."""
    return PackedCandidate(PillowSurface.create(width, height), sort_key)


def make_candidates(sizes) -> list:
    return [make_candidate(w, h, i) for i, (w, h) in enumerate(sizes)]


def quadrant_sprite() -> Sprite:
    """2x2 sprite: red, green on top; blue, white below."""
    image = Image.new('RGBA', (2, 2))
    image.putpixel((0, 0), RED)
    image.putpixel((1, 0), GREEN)
    image.putpixel((0, 1), BLUE)
    image.putpixel((1, 1), WHITE)
    return Sprite(PillowSurface(image), "quadrants")
