"""
Greedy rectangle packing of padded sprite candidates into one container.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..model import PackedCandidate, PackResult, Placement


logger = logging.getLogger(__name__)

MAX_CANDIDATES = 512
MAX_RETRIES = 512


def next_power_of_two(n: int) -> int:
    """Find the next power of two greater than or equal to n."""
    if n <= 0:
        return 1

    # Check if n is already a power of two
    if n & (n - 1) == 0:
        return n

    return 1 << n.bit_length()


def is_power_of_two(n: int) -> bool:
    """Check if number is a power of two."""
    return n > 0 and (n & (n - 1)) == 0


class AtlasPacker:
    """
    Places candidates into a power-of-two container using an occupancy mask.

    Candidates are placed largest area first; each one takes the first free
    position scanning rows top to bottom and columns left to right. When a
    candidate does not fit, the attempt is discarded and packing restarts
    from size estimation with a taller size hint.
    """

    def __init__(self, square_texture: bool = False,
                 max_candidates: int = MAX_CANDIDATES,
                 max_retries: int = MAX_RETRIES):
        self.square_texture = square_texture
        self.max_candidates = max_candidates
        self.max_retries = max_retries

    def estimate_size(self, candidates: Sequence[PackedCandidate],
                      size_hint: int = 0, retry_count: int = 0) -> Tuple[int, int]:
        """
        Approximate power-of-two container size for the candidates.

        The estimate assumes the rectangles pack without wasted space;
        size_hint is raised by the caller until everything fits.
        """
        if not candidates:
            return (0, 0)

        area = sum(c.width * c.height for c in candidates)
        max_w = max(c.width for c in candidates)
        max_h = max(c.height for c in candidates)

        a = math.isqrt(area)
        if a * a < area:
            a += 1

        w = next_power_of_two(max(a, max_w))
        h = next_power_of_two(max(a, size_hint, max_h))

        # Height decides the side of a square container
        if self.square_texture:
            return (h, h)

        if retry_count == 0:
            # Try to use half the width
            if w == h and (w // 2) * h >= area:
                w //= 2

            # Try half the height, which undoes a width halving that
            # wasted more space than it saved
            if w != h and w * (h // 2) >= area:
                h //= 2

        return (w, h)

    def pack(self, candidates: Sequence[PackedCandidate],
             size_hint: int = 0, retry_count: int = 0) -> PackResult:
        """
        Pack every candidate into a single container.

        Args:
            candidates: Padded candidates, in sprite insertion order
            size_hint: Minimum container height to start from
            retry_count: Number of attempts already made

        Returns:
            PackResult whose placements follow candidate order

        Raises:
            PackingError: If there are too many candidates or the retry
                limit is exhausted
        """
        if len(candidates) > self.max_candidates:
            raise PackingError(
                f"Too many sprites to pack: {len(candidates)} (limit {self.max_candidates})"
            )

        if not candidates:
            return PackResult(0, 0, [], retry_count)

        # Largest area first; sorted() is stable so ties keep insertion order
        order = sorted(range(len(candidates)), key=lambda i: -candidates[i].area)

        while True:
            if retry_count > self.max_retries:
                raise PackingError(
                    f"Gave up packing {len(candidates)} sprites after {self.max_retries} retries"
                )

            width, height = self.estimate_size(candidates, size_hint, retry_count)
            placements = self._try_pack(candidates, order, width, height)

            if placements is not None:
                logger.debug(f"Packed {len(candidates)} candidates into {width}x{height} "
                             f"after {retry_count} retries")
                return PackResult(width, height, placements, retry_count)

            logger.debug(f"Candidates overflow {width}x{height}, retrying with height > {height}")
            size_hint = height + 1
            retry_count += 1

    def _try_pack(self, candidates: Sequence[PackedCandidate], order: List[int],
                  width: int, height: int) -> Optional[List[Placement]]:
        """Single packing attempt; None when some candidate does not fit."""
        mask = np.zeros((height, width), dtype=bool)
        placements: List[Optional[Placement]] = [None] * len(candidates)

        for index in order:
            candidate = candidates[index]
            position = self._find_position(mask, candidate.width, candidate.height)
            if position is None:
                return None

            x, y = position
            mask[y:y + candidate.height, x:x + candidate.width] = True
            placements[index] = Placement(index, x, y)

        return placements

    @staticmethod
    def _find_position(mask: np.ndarray, w: int, h: int) -> Optional[Tuple[int, int]]:
        """
        First free top-left position for a w x h rectangle, or None.

        A position is a candidate when the mask is clear at all four corners
        of the rectangle; it is accepted after a check of the whole region.
        """
        height, width = mask.shape
        columns = width - w + 1
        if columns <= 0:
            return None

        for y in range(0, height - h + 1):
            top = mask[y]
            bottom = mask[y + h - 1]
            corners = top[:columns] | top[w - 1:] | bottom[:columns] | bottom[w - 1:]

            for x in np.flatnonzero(~corners):
                x = int(x)
                if not mask[y:y + h, x:x + w].any():
                    return (x, y)

        return None


class PackingError(Exception):
    """Exception raised when candidates cannot be packed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
