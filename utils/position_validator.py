"""
Free-cell lookup by bounded random retry.
"""

import random
from typing import Iterable, Optional

from utils.math_utils import Position
from utils import math_utils


class PositionValidator:
    """
    Validates and generates positions on a board of fixed size.

    Free cells are found by sampling random cells until one is not occupied.
    The search is bounded: when every attempt lands on an occupied cell the
    caller gets ``None`` and must apply its own fallback.
    """

    def __init__(self, width: int, height: int, rng: Optional[random.Random] = None):
        self.width = width
        self.height = height
        self.rng = rng or random.Random()

    def generate_valid_position(
        self,
        occupied_positions: Iterable[Position] = (),
        max_attempts: Optional[int] = None
    ) -> Optional[Position]:
        """
        Find a cell not present in ``occupied_positions``.

        Args:
            occupied_positions: Cells that must not be returned
            max_attempts: Number of random draws before giving up
                (defaults to the number of cells on the board)

        Returns:
            A free position, or None if every attempt hit an occupied cell.
        """
        occupied = set(occupied_positions)
        attempts = self.width * self.height if max_attempts is None else max_attempts

        for _ in range(attempts):
            position = math_utils.random_position(self.width, self.height, self.rng)
            if position not in occupied:
                return position

        return None

    def centered_position(self) -> Position:
        return math_utils.board_center(self.width, self.height)
