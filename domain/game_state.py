"""
GameState entity - an immutable snapshot of the game at a point in time.
"""

from dataclasses import dataclass
from typing import Tuple

from .constants import Position


@dataclass(frozen=True)
class PowerUpMarker:
    """A power-up lying on the board, as seen by the renderer."""
    position: Position
    type: str
    created_at: float


@dataclass(frozen=True)
class ActivePowerUp:
    """
    A timed effect currently in force.

    Attributes:
        type: power-up type name
        start_time: clock reading (ms) when the effect was applied
        duration: effect length in ms
    """
    type: str
    start_time: float
    duration: int

    def remaining(self, now_ms: float) -> float:
        return self.duration - (now_ms - self.start_time)

    def is_blinking(self, now_ms: float, threshold: float) -> bool:
        """True while the effect is inside the last ``threshold`` share of its duration."""
        remaining = self.remaining(now_ms)
        return 0 < remaining <= self.duration * threshold


@dataclass(frozen=True)
class GameState:
    """
    A snapshot of the game handed to the renderer.

    Attributes:
        snake: body cells, head first
        apple: apple position
        score: current score
        power_ups: power-ups lying on the board
        active_power_ups: effects currently in force
        is_paused: game is paused
        is_game_over: snake crashed into itself
    """
    snake: Tuple[Position, ...]
    apple: Position
    score: int = 0
    power_ups: Tuple[PowerUpMarker, ...] = ()
    active_power_ups: Tuple[ActivePowerUp, ...] = ()
    is_paused: bool = False
    is_game_over: bool = False

    @property
    def head(self) -> Position:
        return self.snake[0]

    def __repr__(self):
        return (
            f"<GameState score={self.score}, length={len(self.snake)}, apple={self.apple}, "
            f"power_ups={[p.type for p in self.power_ups]}, "
            f"active={[p.type for p in self.active_power_ups]}, "
            f"paused={self.is_paused}, game_over={self.is_game_over}>"
        )
