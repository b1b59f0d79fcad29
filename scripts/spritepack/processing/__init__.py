"""
Packing core: padding generation, rectangle packing, composition, export and validation.
"""

from .bleed import BleedGenerator, DEBUG_PADDING_COLOR
from .packer import AtlasPacker, PackingError, next_power_of_two, is_power_of_two, MAX_CANDIDATES
from .compositor import AtlasCompositor, compute_quads, flip_y
from .exporter import (
    AtlasExporter,
    TextAtlasExporter,
    JsonAtlasExporter,
    ExportSnapshot,
    ExportError,
    EXPORTERS,
    get_exporter,
)
from .validator import AtlasValidator

__all__ = [
    "BleedGenerator",
    "DEBUG_PADDING_COLOR",
    "AtlasPacker",
    "PackingError",
    "next_power_of_two",
    "is_power_of_two",
    "MAX_CANDIDATES",
    "AtlasCompositor",
    "compute_quads",
    "flip_y",
    "AtlasExporter",
    "TextAtlasExporter",
    "JsonAtlasExporter",
    "ExportSnapshot",
    "ExportError",
    "EXPORTERS",
    "get_exporter",
    "AtlasValidator",
]
