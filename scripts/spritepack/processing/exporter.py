"""
Serialization of packed atlases into text and JSON layout files.
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, TemplateSyntaxError

from ..model import Animation, Quad


logger = logging.getLogger(__name__)


@dataclass
class ExportSnapshot:
    """Everything an exporter reads, captured after a successful composite."""
    texture: str
    names: List[str]
    quads: List[Quad]
    animations: List[Animation] = field(default_factory=list)
    normalize: bool = False

    def __post_init__(self):
        if len(self.names) != len(self.quads):
            raise ValueError(f"{len(self.names)} sprite names for {len(self.quads)} quads")

    @property
    def exported_animations(self) -> List[Animation]:
        """Animation groups written to files; the default group is skipped."""
        return self.animations[1:]

    def value(self, v: float) -> Union[int, float]:
        """Coordinate as written: float when normalized, else truncated int."""
        return float(v) if self.normalize else int(v)


class AtlasExporter(ABC):
    """Base class for layout file writers."""

    @abstractmethod
    def serialize(self, snapshot: ExportSnapshot) -> str:
        """Render the complete file content."""
        pass

    def render(self, snapshot: ExportSnapshot) -> str:
        """
        Serialize a snapshot without touching the filesystem.

        Raises:
            ExportError: If serialization fails
        """
        try:
            return self.serialize(snapshot)
        except Exception as e:
            raise ExportError(f"Failed to serialize atlas: {e}")

    @staticmethod
    def write_content(content: str, path: Union[str, Path]) -> None:
        """
        Write rendered layout content as UTF-8.

        A partially written file is removed again on failure.

        Raises:
            ExportError: If the file cannot be written
        """
        path = Path(path)
        existed = path.exists()
        try:
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            if not existed:
                path.unlink(missing_ok=True)
            raise ExportError(f"Cannot write atlas file '{path}': {e}")

    def write(self, snapshot: ExportSnapshot, path: Union[str, Path]) -> None:
        """
        Serialize and write the layout file.

        The content is rendered in full before the file is opened, so a
        rendering failure leaves nothing on disk.

        Raises:
            ExportError: If rendering or writing fails
        """
        self.write_content(self.render(snapshot), path)
        logger.info(f"Wrote {len(snapshot.names)} sprites to {path}")


class TextAtlasExporter(AtlasExporter):
    """Line-oriented layout format rendered from a Jinja2 template."""

    TEMPLATE_NAME = "atlas.txt.j2"

    def __init__(self, template_dir: Optional[Union[str, Path]] = None):
        if template_dir is None:
            template_dir = Path(__file__).parent.parent / "templates"

        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False
        )

    def serialize(self, snapshot: ExportSnapshot) -> str:
        template_vars = self._template_vars(snapshot)

        try:
            template = self.env.get_template(self.TEMPLATE_NAME)
            return template.render(**template_vars)
        except (TemplateNotFound, TemplateSyntaxError) as e:
            logger.warning(f"Atlas template unavailable ({e}), using built-in format")
            return self._serialize_builtin(template_vars)

    def _template_vars(self, snapshot: ExportSnapshot) -> Dict[str, Any]:
        def fmt(v: float) -> str:
            value = snapshot.value(v)
            return f"{value:f}" if isinstance(value, float) else str(value)

        sprites = [
            {"name": name, "x": fmt(q.x), "y": fmt(q.y), "w": fmt(q.w), "h": fmt(q.h)}
            for name, q in zip(snapshot.names, snapshot.quads)
        ]
        animations = [
            {"name": anim.name, "frames": list(anim.frames)}
            for anim in snapshot.exported_animations
        ]
        return {"texture": snapshot.texture, "sprites": sprites, "animations": animations}

    def _serialize_builtin(self, template_vars: Dict[str, Any]) -> str:
        """Built-in rendering matching the default template."""
        sprites = template_vars["sprites"]
        animations = template_vars["animations"]

        lines = [f"i {template_vars['texture']} {len(sprites)}"]
        for s in sprites:
            lines.append(f"s {s['name']} {s['x']} {s['y']} {s['w']} {s['h']}")
        for anim in animations:
            lines.append(f"a {anim['name']} {len(anim['frames'])}")
        for anim in animations:
            for position, frame in enumerate(anim['frames']):
                lines.append(f"f {anim['name']} {position} {frame}")

        return "\n".join(lines) + "\n"


class JsonAtlasExporter(AtlasExporter):
    """JSON layout format."""

    def to_dict(self, snapshot: ExportSnapshot) -> Dict[str, Any]:
        sprites = [
            {
                "name": name,
                "x": snapshot.value(q.x),
                "y": snapshot.value(q.y),
                "w": snapshot.value(q.w),
                "h": snapshot.value(q.h),
            }
            for name, q in zip(snapshot.names, snapshot.quads)
        ]
        animations = {anim.name: list(anim.frames) for anim in snapshot.exported_animations}

        return {
            "texture": snapshot.texture,
            "sprites": sprites,
            "animations": animations,
        }

    def serialize(self, snapshot: ExportSnapshot) -> str:
        return json.dumps(self.to_dict(snapshot), indent=2) + "\n"


EXPORTERS: Dict[str, Type[AtlasExporter]] = {
    "atlas": TextAtlasExporter,
    "txt": TextAtlasExporter,
    "json": JsonAtlasExporter,
}


def get_exporter(name: str) -> AtlasExporter:
    """Instantiate the exporter registered under name."""
    try:
        return EXPORTERS[name]()
    except KeyError:
        raise ExportError(f"Unknown exporter '{name}', expected one of {sorted(EXPORTERS)}")


class ExportError(Exception):
    """Exception raised when an atlas cannot be exported."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
