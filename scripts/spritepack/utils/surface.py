"""
Render surface abstraction used by the packing core.

The core only needs to create blank RGBA targets, copy (and stretch) a
region of one surface onto another with alpha blending, fill regions and
read pixels back. Pillow provides the concrete implementation.
"""

from abc import ABC, abstractmethod
from typing import Tuple

from PIL import Image


RectTuple = Tuple[int, int, int, int]
Color = Tuple[int, int, int, int]

TRANSPARENT: Color = (0, 0, 0, 0)


class Surface(ABC):
    """Abstract RGBA render target."""

    @property
    @abstractmethod
    def width(self) -> int:
        pass

    @property
    @abstractmethod
    def height(self) -> int:
        pass

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @abstractmethod
    def clear(self, color: Color = TRANSPARENT) -> None:
        """Reset every pixel to the given color."""
        pass

    @abstractmethod
    def fill_rect(self, rect: RectTuple, color: Color) -> None:
        """Overwrite a region with a flat color (no blending)."""
        pass

    @abstractmethod
    def blit(self, src: 'Surface', src_rect: RectTuple, dst_rect: RectTuple) -> None:
        """
        Copy src_rect of src into dst_rect of this surface.

        The region is stretched when the two rectangles differ in size and
        alpha-blended over the existing destination pixels.
        """
        pass

    @abstractmethod
    def read_pixels(self) -> bytes:
        """Return the raw RGBA buffer, row-major, top row first."""
        pass


class PillowSurface(Surface):
    """Surface backed by a Pillow RGBA image."""

    def __init__(self, image: Image.Image):
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        self._image = image

    @classmethod
    def create(cls, width: int, height: int) -> 'PillowSurface':
        """Create a blank transparent surface."""
        return cls(Image.new('RGBA', (width, height), TRANSPARENT))

    def to_image(self) -> Image.Image:
        return self._image.copy()

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def clear(self, color: Color = TRANSPARENT) -> None:
        self._image.paste(color, (0, 0, self.width, self.height))

    def fill_rect(self, rect: RectTuple, color: Color) -> None:
        x, y, w, h = rect
        if w <= 0 or h <= 0:
            return
        self._image.paste(color, (x, y, x + w, y + h))

    def blit(self, src: Surface, src_rect: RectTuple, dst_rect: RectTuple) -> None:
        sx, sy, sw, sh = src_rect
        dx, dy, dw, dh = dst_rect
        if sw <= 0 or sh <= 0 or dw <= 0 or dh <= 0:
            return

        region = _as_image(src).crop((sx, sy, sx + sw, sy + sh))
        if (sw, sh) != (dw, dh):
            region = region.resize((dw, dh), Image.Resampling.NEAREST)

        self._image.alpha_composite(region, dest=(dx, dy))

    def read_pixels(self) -> bytes:
        return self._image.tobytes()

    def getpixel(self, x: int, y: int) -> Color:
        return self._image.getpixel((x, y))

    def crop(self, rect: RectTuple) -> 'PillowSurface':
        x, y, w, h = rect
        return PillowSurface(self._image.crop((x, y, x + w, y + h)))

    def __repr__(self) -> str:
        return f"PillowSurface({self.width}x{self.height})"


def _as_image(surface: Surface) -> Image.Image:
    if isinstance(surface, PillowSurface):
        return surface._image
    return Image.frombytes('RGBA', surface.size, surface.read_pixels())
