"""
Snake entity for the game engine.
"""

from collections import deque
from typing import List

from .constants import UP, Direction, Position
from utils.math_utils import wrap_position


class Snake:
    """
    Represents the snake on a toroidal board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        direction: unit step applied to the head on every move
        width, height: board dimensions used to wrap the head
    """

    def __init__(self, initial_position: Position, width: int, height: int):
        self.width = width
        self.height = height
        self.positions = deque([initial_position])
        self.direction: Direction = UP

    @property
    def head(self) -> Position:
        """Return the head position (first element)."""
        return self.positions[0]

    @property
    def segments(self) -> List[Position]:
        """Copy of the body, head first."""
        return list(self.positions)

    @property
    def length(self) -> int:
        return len(self.positions)

    def set_direction(self, direction: Direction) -> None:
        """
        Change heading. Turning straight back into the neck is ignored while the
        snake has more than one segment.
        """
        if len(self.positions) > 1:
            opposite = (-self.direction[0], -self.direction[1])
            if direction == opposite:
                return
        self.direction = direction

    def move(self) -> Position:
        """
        Advance one cell in the current direction.

        Returns:
            The tail cell vacated by this move (needed by ``grow``).
        """
        hx, hy = self.head
        dx, dy = self.direction
        self.positions.appendleft(wrap_position((hx + dx, hy + dy), self.width, self.height))
        return self.positions.pop()

    def grow(self, tail_position: Position) -> None:
        """Re-attach a tail cell previously returned by ``move``."""
        self.positions.append(tail_position)

    def check_self_collision(self) -> bool:
        head = self.head
        return any(segment == head for segment in list(self.positions)[1:])

    def occupies_position(self, position: Position) -> bool:
        return position in self.positions

    def teleport_to(self, position: Position) -> None:
        """Move the head in place; the rest of the body stays where it is."""
        self.positions[0] = position

    def reset(self, initial_position: Position) -> None:
        self.positions = deque([initial_position])
        self.direction = UP

    def __repr__(self):
        return f"<Snake head={self.head}, length={self.length}, direction={self.direction}>"
