"""
Apple entity - the single piece of food on the board.
"""

import logging
from typing import Iterable

from .constants import Position
from utils.math_utils import random_position
from utils.position_validator import PositionValidator

logger = logging.getLogger(__name__)


class Apple:
    """
    A single apple. Respawns on a free cell when eaten.

    Attributes:
        position: current (x, y) of the apple
        validator: free-cell lookup for the board
    """

    def __init__(self, validator: PositionValidator):
        self.validator = validator
        self.position: Position = random_position(validator.width, validator.height, validator.rng)

    def respawn(self, occupied_positions: Iterable[Position] = ()) -> None:
        """
        Move the apple to a cell not in ``occupied_positions``.

        When the bounded search finds nothing (board nearly full) the apple is
        dropped on an unchecked random cell.
        """
        position = self.validator.generate_valid_position(occupied_positions)
        if position is None:
            position = random_position(self.validator.width, self.validator.height, self.validator.rng)
            logger.warning("No free cell found for apple, placing it unchecked at %s", position)
        self.position = position

    def is_at_position(self, position: Position) -> bool:
        return self.position == position

    def __repr__(self):
        return f"<Apple position={self.position}>"
