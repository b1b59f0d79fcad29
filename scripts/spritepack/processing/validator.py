"""
Consistency checks for packing results.
"""

from typing import List, Sequence

from ..model import PackedCandidate, PackResult, Rectangle
from .packer import is_power_of_two


class AtlasValidator:
    """Validator for packed layouts."""

    def __init__(self, power_of_two: bool = False):
        """
        Args:
            power_of_two: Also require power-of-two container dimensions
        """
        self.power_of_two = power_of_two

    def validate_dimensions(self, result: PackResult) -> List[str]:
        """
        Validate container dimensions.

        Returns:
            List of validation error messages
        """
        errors = []
        width, height = result.size

        if width <= 0 or height <= 0:
            errors.append(f"Atlas has invalid dimensions: {width}x{height}")
            return errors

        if self.power_of_two:
            if not is_power_of_two(width):
                errors.append(f"Atlas width {width} is not a power of two")
            if not is_power_of_two(height):
                errors.append(f"Atlas height {height} is not a power of two")

        return errors

    def validate_placements(self, candidates: Sequence[PackedCandidate],
                            result: PackResult) -> List[str]:
        """
        Validate that every candidate is placed once, inside the container,
        without overlapping any other candidate.

        Returns:
            List of validation error messages
        """
        errors = []
        container = Rectangle(0, 0, result.width, result.height)

        seen = [p.candidate_index for p in result.placements]
        missing = sorted(set(range(len(candidates))) - set(seen))
        if missing:
            errors.append(f"Candidates without placement: {missing}")
        if len(seen) != len(set(seen)):
            errors.append("Some candidates are placed more than once")

        rects = []
        for placement in result.placements:
            if not 0 <= placement.candidate_index < len(candidates):
                errors.append(f"Placement refers to unknown candidate {placement.candidate_index}")
                continue

            candidate = candidates[placement.candidate_index]
            rect = Rectangle(placement.x, placement.y, candidate.width, candidate.height)

            if not container.contains(rect):
                errors.append(
                    f"Candidate {placement.candidate_index} at ({rect.x}, {rect.y}) "
                    f"size {rect.width}x{rect.height} extends beyond "
                    f"{result.width}x{result.height} atlas"
                )
            rects.append((placement.candidate_index, rect))

        for i, (index_a, rect_a) in enumerate(rects):
            for index_b, rect_b in rects[i + 1:]:
                if rect_a.intersects(rect_b):
                    errors.append(f"Candidates {index_a} and {index_b} overlap")

        return errors

    def validate_layout(self, candidates: Sequence[PackedCandidate],
                        result: PackResult) -> List[str]:
        """Run every layout check and return all error messages."""
        all_errors = []
        if candidates:
            all_errors.extend(self.validate_dimensions(result))
        all_errors.extend(self.validate_placements(candidates, result))
        return all_errors
