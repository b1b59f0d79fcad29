"""
Composition of packed candidates into the atlas texture and quad reporting.
"""

import logging
from typing import Callable, List, Optional, Sequence

from ..model import PackedCandidate, PackResult, Quad
from ..utils.surface import PillowSurface, Surface, TRANSPARENT


logger = logging.getLogger(__name__)


class AtlasCompositor:
    """Copies padded candidates into the container at their placements."""

    def __init__(self, surface_factory: Callable[[int, int], Surface] = PillowSurface.create):
        self.surface_factory = surface_factory

    def composite(self, container: Optional[Surface], candidates: Sequence[PackedCandidate],
                  result: PackResult) -> Surface:
        """
        Draw every candidate into the container.

        The container is reused when its size already matches the packing
        result and replaced otherwise.
        """
        if container is None or container.size != result.size:
            logger.debug(f"Creating {result.width}x{result.height} container")
            container = self.surface_factory(result.width, result.height)

        container.clear(TRANSPARENT)

        for placement in result.placements:
            candidate = candidates[placement.candidate_index]
            w, h = candidate.width, candidate.height
            container.blit(candidate.surface, (0, 0, w, h), (placement.x, placement.y, w, h))

        return container


def flip_y(quad: Quad, container_height: float) -> Quad:
    """Mirror a quad vertically so y measures from the bottom edge."""
    return Quad(quad.x, container_height - quad.y - quad.h, quad.w, quad.h)


def compute_quads(candidates: Sequence[PackedCandidate], result: PackResult, padding: int,
                  normalize: bool = False, y_up: bool = False) -> List[Quad]:
    """
    Sprite rectangles inside the atlas, in sprite insertion order.

    Padding is stripped from each placement; the y flip is applied before
    normalization.
    """
    by_sprite = sorted(result.placements, key=lambda p: candidates[p.candidate_index].sort_key)
    quads = []

    for placement in by_sprite:
        candidate = candidates[placement.candidate_index]
        quad = Quad(
            float(placement.x + padding),
            float(placement.y + padding),
            float(candidate.width - 2 * padding),
            float(candidate.height - 2 * padding),
        )
        if y_up:
            quad = flip_y(quad, result.height)
        if normalize:
            quad = Quad(quad.x / result.width, quad.y / result.height,
                        quad.w / result.width, quad.h / result.height)
        quads.append(quad)

    return quads
