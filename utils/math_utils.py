"""
Grid and position math shared by the entities, the validator and the engine.

All helpers are pure apart from the ones that draw from a random source; those
take an optional ``rng`` so callers (and tests) can inject a seeded
``random.Random``.
"""

import random
from typing import Optional, Tuple

Position = Tuple[int, int]


def random_position(width: int, height: int, rng: Optional[random.Random] = None) -> Position:
    """Return a uniformly sampled cell on a ``width`` x ``height`` board."""
    rng = rng or random
    return (rng.randrange(width), rng.randrange(height))


def manhattan_distance(pos1: Position, pos2: Position) -> int:
    return abs(pos1[0] - pos2[0]) + abs(pos1[1] - pos2[1])


def positions_equal(pos1: Position, pos2: Position) -> bool:
    return pos1[0] == pos2[0] and pos1[1] == pos2[1]


def is_in_range(center: Position, target: Position, radius: int) -> bool:
    """
    Check whether ``target`` lies inside the square of side ``2 * radius + 1``
    centred on ``center`` (Chebyshev distance, not Euclidean).
    """
    return abs(center[0] - target[0]) <= radius and abs(center[1] - target[1]) <= radius


def wrap_position(position: Position, width: int, height: int) -> Position:
    """
    Wrap a position around the board edges (toroidal board).

    Python's modulo always carries the sign of the divisor, so the result is
    inside ``[0, width) x [0, height)`` for any integer input.
    """
    return ((position[0] + width) % width, (position[1] + height) % height)


def should_happen(probability: float, rng: Optional[random.Random] = None) -> bool:
    """Bernoulli draw: True with the given probability (0 to 1)."""
    rng = rng or random
    return rng.random() < probability


def board_center(width: int, height: int) -> Position:
    return (width // 2, height // 2)


def total_cells(width: int, height: int) -> int:
    return width * height
