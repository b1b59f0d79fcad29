"""
spritepack: sprite atlas packer

Packs independently sized sprites into power-of-two texture atlases with
bleed padding, and exports their layout (pixel or normalized rectangles plus
animation frame sequences) as text or JSON for renderers.
"""

__version__ = "0.1.0"

from .model import Sprite, Animation, PaddingMode, ImageFormat, Quad
from .config import AtlasOptions, ProjectConfig, ConfigError
from .atlas import Atlas
from .project import Project
from .processing.bleed import BleedGenerator
from .processing.packer import AtlasPacker, PackingError
from .processing.exporter import TextAtlasExporter, JsonAtlasExporter, ExportError

__all__ = [
    "Sprite",
    "Animation",
    "PaddingMode",
    "ImageFormat",
    "Quad",
    "AtlasOptions",
    "ProjectConfig",
    "ConfigError",
    "Atlas",
    "Project",
    "BleedGenerator",
    "AtlasPacker",
    "PackingError",
    "TextAtlasExporter",
    "JsonAtlasExporter",
    "ExportError",
]
