"""
PowerUp entity - a power-up lying on the board together with its strategy.
"""

import time
from typing import Optional

from domain.constants import Position
from domain.game_state import PowerUpMarker
from .base import PowerUpContext, PowerUpStrategy


class PowerUp:
    """
    A power-up on the board.

    Attributes:
        position: cell the power-up occupies
        type: power-up type name (e.g. "magnet")
        created_at: wall clock time (ms) of the spawn
        strategy: behaviour applied when the snake eats it
    """

    def __init__(
        self,
        position: Position,
        power_up_type: str,
        strategy: PowerUpStrategy,
        created_at: Optional[float] = None
    ):
        self.position = position
        self.type = power_up_type
        self.strategy = strategy
        self.created_at = created_at if created_at is not None else time.time() * 1000

    def apply(self, context: PowerUpContext) -> None:
        self.strategy.apply(context)

    def remove(self, context: PowerUpContext) -> None:
        self.strategy.remove(context)

    def get_duration(self) -> int:
        return self.strategy.get_duration()

    def to_marker(self) -> PowerUpMarker:
        """Immutable view used in game state snapshots."""
        return PowerUpMarker(position=self.position, type=self.type, created_at=self.created_at)

    def __repr__(self):
        return f"<PowerUp type={self.type}, position={self.position}, duration={self.get_duration()}>"
