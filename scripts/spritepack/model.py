"""
Data model shared by the bleed generator, packer, compositor and exporters.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .utils.surface import Surface


DEFAULT_ANIMATION_NAME = "<none>"
DEFAULT_FRAME_TIME = 0.1


class PaddingMode(Enum):
    """How the padding border around each sprite is filled."""
    BLEED = "bleed"
    ALPHA = "alpha"
    DEBUG = "debug"

    @classmethod
    def parse(cls, value) -> 'PaddingMode':
        """Accept an enum member, its name, its value or its index."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return list(cls)[value]
        return cls(str(value).strip().lower())


class ImageFormat(Enum):
    """Texture encodings supported for the packed atlas."""
    PNG = "png"
    TGA = "tga"
    BMP = "bmp"

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value) -> 'ImageFormat':
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return list(cls)[value]
        return cls(str(value).strip().lower())


@dataclass
class Rectangle:
    """Integer rectangle in surface pixel space."""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def contains(self, other: 'Rectangle') -> bool:
        """Check if another rectangle lies fully inside this one."""
        return (self.x <= other.x and self.y <= other.y and
                other.right <= self.right and other.bottom <= self.bottom)

    def intersects(self, other: 'Rectangle') -> bool:
        """Check if this rectangle intersects with another."""
        return not (self.right <= other.x or other.right <= self.x or
                    self.bottom <= other.y or other.bottom <= self.y)


@dataclass
class Quad:
    """Reported sprite rectangle, in pixels or normalized coordinates."""
    x: float
    y: float
    w: float
    h: float


@dataclass
class Sprite:
    """A decoded source image and its naming."""
    surface: Surface
    display_name: str
    filename: Optional[str] = None

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"sprite '{self.display_name}' has zero area: {self.width}x{self.height}"
            )

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height


@dataclass
class PackedCandidate:
    """A sprite wrapped with its padding border, ready for packing."""
    surface: Surface
    sort_key: int

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass
class Placement:
    """Offset assigned to one candidate by a packing run."""
    candidate_index: int
    x: int
    y: int


@dataclass
class PackResult:
    """Container size and one placement per candidate, in candidate order."""
    width: int
    height: int
    placements: List[Placement] = field(default_factory=list)
    retries: int = 0

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass
class Animation:
    """Named, ordered run of sprite indices sharing a frame duration."""
    name: str
    frame_time: float = DEFAULT_FRAME_TIME
    frames: List[int] = field(default_factory=list)

    @property
    def fps(self) -> Optional[int]:
        """Frames per second, when the frame time is below one second."""
        if 0.0 < self.frame_time < 1.0:
            return int(1.0 / self.frame_time)
        return None
