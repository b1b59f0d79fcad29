"""
Configuration management for sprite packing projects.
Supports TOML and JSON project files with validation and environment overrides.
"""

import os
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import toml

from .model import DEFAULT_FRAME_TIME, ImageFormat, PaddingMode
from .processing.exporter import EXPORTERS
from .utils.image import rename_with_ext


ENV_PREFIX = "SPRITEPACK_"

ENV_VARS = [
    ("SPRITEPACK_PADDING", "Padding in pixels around each sprite", "2"),
    ("SPRITEPACK_PADDING_MODE", "Padding fill: bleed, alpha or debug", "bleed"),
    ("SPRITEPACK_IMAGE_FORMAT", "Texture format: png, tga or bmp", "png"),
    ("SPRITEPACK_EXPORTER", "Layout format: atlas, txt or json", "json"),
    ("SPRITEPACK_SQUARE_TEXTURE", "Force a square texture (true/false)", "false"),
    ("SPRITEPACK_NORMALIZE", "Normalized sprite coordinates (true/false)", "false"),
    ("SPRITEPACK_Y_UP", "Origin at the bottom left corner (true/false)", "false"),
]


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass
class AtlasOptions:
    """Per-atlas packing and export options."""

    # Outputs
    output_file: str = "untitled.atlas"
    output_image: str = "untitled.png"
    image_format: ImageFormat = ImageFormat.PNG
    exporter: str = "atlas"

    # Padding in pixels around each sprite
    padding: int = 0
    padding_mode: PaddingMode = PaddingMode.BLEED

    # Pad the atlas so its width equals its height
    square_texture: bool = False

    # Sprite rects between (0, 0) and (1, 1) instead of pixel coordinates
    normalize: bool = False

    # (0, 0) at the bottom left corner instead of the top left
    y_up: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base: Optional["AtlasOptions"] = None) -> "AtlasOptions":
        """
        Create options from a dictionary, starting from base (or defaults).

        Raises:
            ConfigError: If an enumerated value is not recognised
        """
        options = AtlasOptions(**vars(base)) if base else cls()

        try:
            if 'output_file' in data:
                options.output_file = str(data['output_file'])
            if 'output_image' in data:
                options.output_image = str(data['output_image'])
            if 'image_format' in data:
                options.image_format = ImageFormat.parse(data['image_format'])
            if 'exporter' in data:
                options.exporter = str(data['exporter'])
            if 'padding' in data:
                options.padding = int(data['padding'])
            if 'padding_mode' in data:
                options.padding_mode = PaddingMode.parse(data['padding_mode'])
        except (ValueError, IndexError) as e:
            raise ConfigError(f"Invalid atlas option: {e}")

        for flag in ('square_texture', 'normalize', 'y_up'):
            if flag in data:
                setattr(options, flag, _parse_bool(data[flag]))

        return options

    def to_dict(self) -> Dict[str, Any]:
        return {
            'output_file': self.output_file,
            'output_image': self.output_image,
            'image_format': self.image_format.value,
            'exporter': self.exporter,
            'padding': self.padding,
            'padding_mode': self.padding_mode.value,
            'square_texture': self.square_texture,
            'normalize': self.normalize,
            'y_up': self.y_up,
        }

    @classmethod
    def default(cls) -> "AtlasOptions":
        """Create default options with environment variable overrides."""
        return cls._apply_env_overrides(cls())

    @classmethod
    def _apply_env_overrides(cls, options: "AtlasOptions") -> "AtlasOptions":
        """Apply SPRITEPACK_* environment variables to options."""
        overrides = {}
        for key in ('padding', 'padding_mode', 'image_format', 'exporter',
                    'square_texture', 'normalize', 'y_up'):
            value = os.getenv(ENV_PREFIX + key.upper())
            if value:
                overrides[key] = value

        options = cls.from_dict(overrides, base=options)

        # Default output names follow an overridden format
        if 'image_format' in overrides:
            options.output_image = rename_with_ext(options.output_image, options.image_format.extension)
        if 'exporter' in overrides:
            options.output_file = rename_with_ext(options.output_file, options.exporter)

        return options

    def validate(self) -> List[str]:
        """Validate options and return list of errors."""
        errors = []

        if self.padding < 0:
            errors.append("padding must be a non-negative integer")

        if self.exporter not in EXPORTERS:
            errors.append(f"exporter must be one of {', '.join(sorted(EXPORTERS))}")

        if not isinstance(self.image_format, ImageFormat):
            errors.append("image_format must be PNG, TGA or BMP")

        if not isinstance(self.padding_mode, PaddingMode):
            errors.append("padding_mode must be bleed, alpha or debug")

        if not self.output_file:
            errors.append("output_file cannot be empty")

        if not self.output_image:
            errors.append("output_image cannot be empty")

        return errors


@dataclass
class AnimationConfig:
    """Animation group as listed in a project file."""
    name: str
    frame_time: float = DEFAULT_FRAME_TIME
    # Sprite paths (as listed under the atlas) or sprite indices
    frames: List[Union[str, int]] = field(default_factory=list)


@dataclass
class AtlasConfig:
    """One atlas entry of a project file."""
    options: AtlasOptions = field(default_factory=AtlasOptions)
    sprites: List[str] = field(default_factory=list)
    animations: List[AnimationConfig] = field(default_factory=list)


@dataclass
class ProjectConfig:
    """A project: the atlases to build and where sprite paths are rooted."""
    atlases: List[AtlasConfig] = field(default_factory=list)
    base_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ProjectConfig":
        """Load a project from a TOML or JSON file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Project file not found: {config_path}")

        if config_path.suffix.lower() == '.toml':
            data = cls._load_toml(config_path)
        elif config_path.suffix.lower() == '.json':
            data = cls._load_json(config_path)
        else:
            raise ConfigError(f"Unsupported project format: {config_path.suffix}")

        return cls._from_dict(data, config_path.resolve().parent)

    @classmethod
    def _load_toml(cls, config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'r') as f:
                return toml.load(f)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_path}: {e}")

    @classmethod
    def _load_json(cls, config_path: Path) -> Dict[str, Any]:
        try:
            with open(config_path, 'r') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}")

    @classmethod
    def _from_dict(cls, data: Dict[str, Any], base_dir: Path) -> "ProjectConfig":
        """Create project configuration from dictionary."""
        defaults = AtlasOptions.default()
        atlases = []

        for entry in data.get('atlas', []):
            if not isinstance(entry, dict):
                raise ConfigError("Each [[atlas]] entry must be a table")

            options = AtlasOptions.from_dict(entry, base=defaults)
            sprites = [str(s) for s in entry.get('sprites', [])]

            animations = []
            for anim in entry.get('animations', []):
                if 'name' not in anim:
                    raise ConfigError("Animation entries require a name")
                animations.append(AnimationConfig(
                    name=str(anim['name']),
                    frame_time=float(anim.get('frame_time', DEFAULT_FRAME_TIME)),
                    frames=list(anim.get('frames', [])),
                ))

            atlases.append(AtlasConfig(options, sprites, animations))

        return cls(atlases=atlases, base_dir=base_dir)

    def to_dict(self) -> Dict[str, Any]:
        entries = []
        for atlas in self.atlases:
            entry = atlas.options.to_dict()
            entry['sprites'] = list(atlas.sprites)
            if atlas.animations:
                entry['animations'] = [
                    {'name': a.name, 'frame_time': a.frame_time, 'frames': list(a.frames)}
                    for a in atlas.animations
                ]
            entries.append(entry)
        return {'atlas': entries}

    def save(self, config_path: Union[str, Path]) -> None:
        """Write the project as TOML."""
        with open(config_path, 'w') as f:
            toml.dump(self.to_dict(), f)

    def resolve(self, path: str) -> Path:
        """Resolve a path listed in the project against the project directory."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.base_dir / candidate

    def validate(self) -> List[str]:
        """Validate every atlas entry and return list of errors."""
        errors = []

        if not self.atlases:
            errors.append("project does not define any atlas")

        for index, atlas in enumerate(self.atlases):
            prefix = f"atlas[{index}]"
            errors.extend(f"{prefix}: {e}" for e in atlas.options.validate())

            for anim in atlas.animations:
                if anim.frame_time < 0:
                    errors.append(f"{prefix}: animation '{anim.name}' has a negative frame_time")
                for frame in anim.frames:
                    if isinstance(frame, int):
                        if not 0 <= frame < len(atlas.sprites):
                            errors.append(f"{prefix}: animation '{anim.name}' frame {frame} out of range")
                    elif frame not in atlas.sprites:
                        errors.append(f"{prefix}: animation '{anim.name}' frame '{frame}' is not a listed sprite")

        return errors


class ConfigError(Exception):
    """Exception raised for invalid project configuration."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
