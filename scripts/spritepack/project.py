"""
Projects: a set of atlases built from a project file.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from .atlas import Atlas
from .config import AnimationConfig, AtlasConfig, AtlasOptions, ProjectConfig


logger = logging.getLogger(__name__)


class Project:
    """Atlases loaded from (and saved to) a project file."""

    def __init__(self, atlases: Optional[List[Atlas]] = None, base_dir: Optional[Path] = None):
        self.atlases: List[Atlas] = atlases if atlases is not None else []
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    @classmethod
    def empty(cls) -> "Project":
        """Project holding a single empty atlas with default options."""
        return cls([Atlas(AtlasOptions.default())])

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Project":
        """
        Load a project file and decode every listed sprite.

        Sprites that cannot be decoded are skipped with a warning, along with
        any animation frame that refers to them.

        Raises:
            FileNotFoundError: If the project file does not exist
            ConfigError: If the project file is malformed
        """
        config = ProjectConfig.from_file(path)
        project = cls(base_dir=config.base_dir)

        for atlas_config in config.atlases:
            project.atlases.append(project._build_atlas(config, atlas_config))

        logger.info(f"Loaded {len(project.atlases)} atlases from {path}")
        return project

    def _build_atlas(self, config: ProjectConfig, atlas_config: AtlasConfig) -> Atlas:
        atlas = Atlas(atlas_config.options)

        # First group listing a sprite owns it; the rest stay in the default group
        owner: Dict[str, int] = {}
        for group, anim in enumerate(atlas_config.animations, start=1):
            atlas.add_animation(anim.name, anim.frame_time)
            for frame in anim.frames:
                key = self._frame_key(frame, atlas_config.sprites)
                if key is not None:
                    owner.setdefault(key, group)

        loaded: Dict[str, int] = {}
        for sprite_path in atlas_config.sprites:
            if sprite_path in loaded:
                continue
            if atlas.load_sprite(config.resolve(sprite_path), owner.get(sprite_path, 0)):
                loaded[sprite_path] = len(atlas.sprites) - 1
            else:
                logger.warning(f"Could not load sprite {sprite_path}")

        for group, anim in enumerate(atlas_config.animations, start=1):
            frames = []
            for frame in anim.frames:
                key = self._frame_key(frame, atlas_config.sprites)
                if key in loaded:
                    frames.append(loaded[key])
            atlas.set_frames(group, frames)

        return atlas

    @staticmethod
    def _frame_key(frame: Union[str, int], sprites: List[str]) -> Optional[str]:
        if isinstance(frame, int):
            return sprites[frame] if 0 <= frame < len(sprites) else None
        return frame

    def to_config(self) -> ProjectConfig:
        """Describe the current atlases as a project configuration."""
        config = ProjectConfig(base_dir=self.base_dir)

        for atlas in self.atlases:
            paths = [self._relative(sprite.filename or sprite.display_name) for sprite in atlas.sprites]
            animations = [
                AnimationConfig(anim.name, anim.frame_time, [paths[f] for f in anim.frames])
                for anim in atlas.animations[1:]
            ]
            config.atlases.append(AtlasConfig(atlas.options, paths, animations))

        return config

    def _relative(self, path: str) -> str:
        try:
            return Path(os.path.relpath(path, self.base_dir)).as_posix()
        except ValueError:
            # Different drive on Windows
            return Path(path).as_posix()

    def save(self, path: Union[str, Path]) -> None:
        """Write the project file as TOML."""
        self.to_config().save(path)
        logger.info(f"Saved project to {path}")

    def export_all(self) -> bool:
        """
        Export every atlas; all are attempted even after a failure.

        Returns:
            True if every atlas exported successfully
        """
        ok = True
        for atlas in self.atlases:
            ok = atlas.export(self.base_dir) and ok
        return ok
