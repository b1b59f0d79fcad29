"""
Image decode/encode helpers sitting at the edge of the packing core.
"""

import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .surface import PillowSurface, Surface


logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {
    'PNG': 'png',
    'TGA': 'tga',
    'BMP': 'bmp',
}


class ImageUtils:
    """Utility class for common image loading and saving operations."""

    @staticmethod
    def load_image(data: Union[bytes, str, Path, Image.Image]) -> Image.Image:
        """
        Load image from various sources.

        Args:
            data: Image data as bytes, file path, or PIL Image

        Returns:
            PIL Image object

        Raises:
            ValueError: If data cannot be loaded as image
        """
        if isinstance(data, Image.Image):
            return data
        elif isinstance(data, bytes):
            try:
                image = Image.open(io.BytesIO(data))
                image.load()
                return image
            except Exception as e:
                raise ValueError(f"Cannot load image from bytes: {e}")
        elif isinstance(data, (str, Path)):
            try:
                with Image.open(data) as image:
                    image.load()
                    return image.copy()
            except Exception as e:
                raise ValueError(f"Cannot load image from path '{data}': {e}")
        else:
            raise ValueError(f"Unsupported image data type: {type(data)}")

    @staticmethod
    def save_image(image: Image.Image, path: Union[str, Path], format: str = 'PNG', **kwargs) -> None:
        """
        Save image to file in one of the supported atlas texture formats.

        Args:
            image: Image to save
            path: Output file path
            format: Image format (PNG, TGA or BMP)
            **kwargs: Additional save parameters
        """
        format = format.upper()
        if format not in IMAGE_EXTENSIONS:
            raise ValueError(f"Unsupported texture format: {format}")

        save_kwargs = {}
        if format == 'PNG':
            save_kwargs['compress_level'] = kwargs.pop('compress_level', 6)
        save_kwargs.update(kwargs)

        image.save(path, format=format, **save_kwargs)

    @staticmethod
    def ensure_rgba(image: Image.Image) -> Image.Image:
        """Convert image to RGBA mode if not already."""
        if image.mode != 'RGBA':
            return image.convert('RGBA')
        return image


def base_sprite_name(filename: Union[str, Path]) -> str:
    """
    Sprite display name for a file: the base name up to its first dot.

    A name starting with a dot is kept whole.
    """
    name = str(filename).replace('\\', '/').rsplit('/', 1)[-1]
    dot = name.find('.')
    if dot > 0:
        name = name[:dot]
    return name


def rename_with_ext(filename: str, ext: str) -> str:
    """Replace everything after the first dot of filename with ext."""
    dot = filename.find('.')
    if dot > 0:
        return filename[:dot + 1] + ext
    return filename


def load_surface(path: Union[str, Path]) -> Optional[PillowSurface]:
    """Decode an image file into an RGBA surface, or None if unreadable."""
    try:
        image = ImageUtils.ensure_rgba(ImageUtils.load_image(path))
    except ValueError as e:
        logger.warning(str(e))
        return None
    return PillowSurface(image)


def save_surface(surface: Surface, path: Union[str, Path], format: str = 'PNG') -> None:
    """Encode a surface's pixels to disk."""
    if isinstance(surface, PillowSurface):
        image = surface.to_image()
    else:
        image = Image.frombytes('RGBA', surface.size, surface.read_pixels())
    ImageUtils.save_image(image, path, format)
    logger.debug(f"Wrote {surface.width}x{surface.height} {format} texture to {path}")
