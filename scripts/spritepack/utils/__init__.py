"""
Utility modules for render surfaces and image file handling.
"""

from .surface import Surface, PillowSurface, TRANSPARENT
from .image import ImageUtils, base_sprite_name, rename_with_ext, load_surface, save_surface

__all__ = [
    "Surface",
    "PillowSurface",
    "TRANSPARENT",
    "ImageUtils",
    "base_sprite_name",
    "rename_with_ext",
    "load_surface",
    "save_surface",
]
