"""
Atlas coordinator: owns sprites, animation groups, options and the packed texture.

Any change to sprites, groups or options marks the packed state stale; the
next render() regenerates every candidate, re-packs and recomposites the
texture from scratch.
"""

import copy
import logging
from pathlib import Path
from typing import Callable, List, Optional, Union

from .config import AtlasOptions, ConfigError
from .model import (
    DEFAULT_ANIMATION_NAME,
    Animation,
    PackedCandidate,
    PackResult,
    Quad,
    Sprite,
)
from .processing.bleed import BleedGenerator
from .processing.compositor import AtlasCompositor, compute_quads
from .processing.exporter import ExportError, ExportSnapshot, get_exporter
from .processing.packer import AtlasPacker, PackingError
from .utils.image import base_sprite_name, load_surface, rename_with_ext, save_surface
from .utils.surface import PillowSurface, Surface


logger = logging.getLogger(__name__)


class Atlas:
    """A single packed texture plus its sprite and animation metadata."""

    def __init__(self, options: Optional[AtlasOptions] = None,
                 surface_factory: Callable[[int, int], Surface] = PillowSurface.create):
        self.options = options or AtlasOptions()
        self.surface_factory = surface_factory

        self.sprites: List[Sprite] = []
        self.animations: List[Animation] = [Animation(DEFAULT_ANIMATION_NAME)]

        # Result of the last successful pack
        self.width = 0
        self.height = 0
        self.texture: Optional[Surface] = None

        self._candidates: List[PackedCandidate] = []
        self._result: Optional[PackResult] = None
        self._stale = True

    @property
    def is_stale(self) -> bool:
        return self._stale

    def invalidate(self) -> None:
        """Drop the packed state; the next render rebuilds it."""
        self._candidates = []
        self._result = None
        self._stale = True

    # Sprites

    def add_sprite(self, sprite: Sprite, animation: int = 0) -> bool:
        """Append a sprite and add it as the last frame of a group."""
        if not 0 <= animation < len(self.animations):
            logger.error(f"Cannot add sprite '{sprite.display_name}': no animation group {animation}")
            return False

        self.animations[animation].frames.append(len(self.sprites))
        self.sprites.append(sprite)
        self.invalidate()
        return True

    def load_sprite(self, path: Union[str, Path], animation: int = 0) -> bool:
        """Decode an image file and append it as a sprite."""
        surface = load_surface(path)
        if surface is None:
            return False

        try:
            sprite = Sprite(surface, base_sprite_name(path), str(path))
        except ValueError as e:
            logger.warning(f"Skipping {path}: {e}")
            return False

        return self.add_sprite(sprite, animation)

    def remove_sprite(self, index: int) -> bool:
        """
        Remove a sprite and every frame referencing it.

        Frame indices above the removed one shift down by one in every group.
        """
        if not 0 <= index < len(self.sprites):
            return False

        del self.sprites[index]
        for anim in self.animations:
            anim.frames = [f - 1 if f > index else f for f in anim.frames if f != index]

        self.invalidate()
        return True

    # Animation groups

    def add_animation(self, name: str = "untitled_anim", frame_time: Optional[float] = None) -> int:
        """Append an empty group and return its index."""
        if frame_time is None:
            frame_time = self.animations[-1].frame_time
        self.animations.append(Animation(name, frame_time))
        return len(self.animations) - 1

    def remove_animation(self, index: int) -> bool:
        """Remove a group along with the sprites it holds; group 0 is permanent."""
        if not 0 < index < len(self.animations):
            return False

        for sprite_index in sorted(set(self.animations[index].frames), reverse=True):
            self.remove_sprite(sprite_index)

        del self.animations[index]
        self.invalidate()
        return True

    def move_frame(self, animation: int, position: int, offset: int) -> bool:
        """Swap a frame with the one offset positions away in the same group."""
        if not 0 <= animation < len(self.animations):
            return False

        frames = self.animations[animation].frames
        target = position + offset
        if not (0 <= position < len(frames) and 0 <= target < len(frames)):
            return False

        frames[position], frames[target] = frames[target], frames[position]
        return True

    def set_frames(self, animation: int, frames: List[int]) -> bool:
        """Replace the frame list of a group with valid sprite indices."""
        if not 0 <= animation < len(self.animations):
            return False
        if any(not 0 <= f < len(self.sprites) for f in frames):
            return False

        self.animations[animation].frames = list(frames)
        return True

    # Options

    def set_options(self, **changes) -> None:
        """
        Update options; the packed state becomes stale.

        Changing the image format or exporter renames the matching output
        path's extension.

        Raises:
            ConfigError: If a value is invalid; options are left unchanged
        """
        unknown = set(changes) - set(vars(self.options))
        if unknown:
            raise ConfigError(f"Unknown atlas options: {', '.join(sorted(unknown))}")

        updated = AtlasOptions.from_dict(changes, base=self.options)

        if 'image_format' in changes and 'output_image' not in changes:
            updated.output_image = rename_with_ext(updated.output_image, updated.image_format.extension)
        if 'exporter' in changes and 'output_file' not in changes:
            updated.output_file = rename_with_ext(updated.output_file, updated.exporter)

        errors = updated.validate()
        if errors:
            raise ConfigError("; ".join(errors))

        if updated != self.options:
            self.options = updated
            self.invalidate()

    # Packing

    def render(self) -> bool:
        """
        Regenerate candidates, pack them and composite the texture.

        Returns:
            False if packing failed, True otherwise
        """
        if not self.sprites:
            return True

        bleed = BleedGenerator(self.options.padding, self.options.padding_mode, self.surface_factory)
        candidates = bleed.generate_all(self.sprites)

        try:
            result = AtlasPacker(self.options.square_texture).pack(candidates)
        except PackingError as e:
            logger.error(e.message)
            self.invalidate()
            return False

        compositor = AtlasCompositor(self.surface_factory)
        self.texture = compositor.composite(self.texture, candidates, result)
        self.width, self.height = result.size

        self._candidates = candidates
        self._result = result
        self._stale = False
        return True

    def packed_result(self) -> Optional[PackResult]:
        """Packing result of the current state, rendering if stale."""
        if self._stale and not self.render():
            return None
        return self._result

    def candidates(self) -> List[PackedCandidate]:
        if self._stale:
            self.render()
        return list(self._candidates)

    def quads(self) -> List[Quad]:
        """Sprite rectangles in insertion order, following the output options."""
        result = self.packed_result()
        if result is None:
            return []

        return compute_quads(self._candidates, result, self.options.padding,
                             normalize=self.options.normalize, y_up=self.options.y_up)

    # Export

    def snapshot(self) -> Optional[ExportSnapshot]:
        """Capture what the exporters need, or None if nothing is packed."""
        if not self.sprites:
            return None

        quads = self.quads()
        if not quads or self.texture is None:
            return None

        return ExportSnapshot(
            texture=self.options.output_image,
            names=[s.display_name for s in self.sprites],
            quads=quads,
            animations=copy.deepcopy(self.animations),
            normalize=self.options.normalize,
        )

    def export(self, base_dir: Optional[Union[str, Path]] = None) -> bool:
        """
        Re-render, then write the texture and the layout file.

        Nothing is left on disk when either write fails.

        Args:
            base_dir: Directory relative output paths are resolved against

        Returns:
            True if both files were written
        """
        if not self.render():
            return False

        snapshot = self.snapshot()
        if snapshot is None:
            logger.error(f"Nothing to export for {self.options.output_file}: atlas has no sprites")
            return False

        layout_path = self._resolve(self.options.output_file, base_dir)
        image_path = self._resolve(self.options.output_image, base_dir)

        # Layout is rendered first and written last so a failure leaves no files
        try:
            exporter = get_exporter(self.options.exporter)
            content = exporter.render(snapshot)
        except ExportError as e:
            logger.error(e.message)
            return False

        image_existed = image_path.exists()
        try:
            save_surface(self.texture, image_path, self.options.image_format.name)
        except (OSError, ValueError) as e:
            logger.error(f"Cannot write texture '{image_path}': {e}")
            if not image_existed:
                image_path.unlink(missing_ok=True)
            return False

        try:
            exporter.write_content(content, layout_path)
        except ExportError as e:
            logger.error(e.message)
            image_path.unlink(missing_ok=True)
            return False

        logger.info(f"Exported {self.width}x{self.height} atlas to {layout_path} and {image_path}")
        return True

    @staticmethod
    def _resolve(path: str, base_dir: Optional[Union[str, Path]]) -> Path:
        result = Path(path)
        if base_dir is not None and not result.is_absolute():
            result = Path(base_dir) / result
        return result

    def __repr__(self) -> str:
        return (f"Atlas({self.options.output_file!r}, sprites={len(self.sprites)}, "
                f"animations={len(self.animations) - 1}, size={self.width}x{self.height})")
