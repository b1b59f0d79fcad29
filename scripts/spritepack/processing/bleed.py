"""
Padding border generation around sprites before packing.
"""

import logging
from typing import Callable, List, Tuple

from ..model import PackedCandidate, PaddingMode, Sprite
from ..utils.surface import PillowSurface, Surface, TRANSPARENT


logger = logging.getLogger(__name__)

DEBUG_PADDING_COLOR = (255, 255, 0, 255)

RectTuple = Tuple[int, int, int, int]


def bleed_regions(width: int, height: int, padding: int) -> List[Tuple[RectTuple, RectTuple]]:
    """
    Source/destination rectangle pairs for the padding border.

    Sources are 1 pixel corners and 1 pixel thick edges of a width x height
    sprite; destinations are the matching p x p corner blocks and p thick
    edge strips of the padded surface.
    """
    w, h, p = width, height, padding
    return [
        # Corners
        ((0, 0, 1, 1), (0, 0, p, p)),
        ((w - 1, 0, 1, 1), (w + p, 0, p, p)),
        ((w - 1, h - 1, 1, 1), (w + p, h + p, p, p)),
        ((0, h - 1, 1, 1), (0, h + p, p, p)),
        # Edges
        ((0, 0, w, 1), (p, 0, w, p)),
        ((w - 1, 0, 1, h), (w + p, p, p, h)),
        ((0, h - 1, w, 1), (p, h + p, w, p)),
        ((0, 0, 1, h), (0, p, p, h)),
    ]


class BleedGenerator:
    """Wraps sprites in a padding border so atlas seams filter cleanly."""

    def __init__(self, padding: int = 0, mode: PaddingMode = PaddingMode.BLEED,
                 surface_factory: Callable[[int, int], Surface] = PillowSurface.create):
        if padding < 0:
            raise ValueError(f"padding cannot be negative, got {padding}")
        self.padding = padding
        self.mode = PaddingMode.parse(mode)
        self.surface_factory = surface_factory

    def generate(self, sprite: Sprite, sort_key: int = 0) -> PackedCandidate:
        """
        Build the padded working surface for one sprite.

        The result measures (w + 2p, h + 2p) with the sprite copied into
        the inset rectangle (p, p, w, h).
        """
        p = self.padding
        w, h = sprite.width, sprite.height

        surface = self.surface_factory(w + 2 * p, h + 2 * p)
        surface.clear(TRANSPARENT)

        if p > 0:
            for src_rect, dst_rect in bleed_regions(w, h, p):
                if self.mode == PaddingMode.BLEED:
                    surface.blit(sprite.surface, src_rect, dst_rect)
                elif self.mode == PaddingMode.ALPHA:
                    surface.fill_rect(dst_rect, TRANSPARENT)
                else:
                    surface.fill_rect(dst_rect, DEBUG_PADDING_COLOR)

        surface.blit(sprite.surface, (0, 0, w, h), (p, p, w, h))
        return PackedCandidate(surface=surface, sort_key=sort_key)

    def generate_all(self, sprites: List[Sprite]) -> List[PackedCandidate]:
        """Generate candidates for every sprite, keyed by insertion order."""
        candidates = [self.generate(sprite, index) for index, sprite in enumerate(sprites)]
        logger.debug(f"Generated {len(candidates)} candidates with {self.padding}px "
                     f"{self.mode.value} padding")
        return candidates
