"""
Authoritative game state store.

The engine is the only writer. Readers get frozen ``GameState`` snapshots that
share nothing mutable with the store.
"""

from typing import Any, Iterable, List, Optional

from domain.constants import Position
from domain.game_state import ActivePowerUp, GameState, PowerUpMarker

DEFAULT_SNAKE: List[Position] = [(10, 10)]
DEFAULT_APPLE: Position = (5, 5)


class GameStateService:
    """
    Holds snake, apple, score, power-ups and the paused/game-over flags.

    Mutators copy their inputs; ``get_state`` copies out.
    """

    def __init__(self, initial_state: Optional[GameState] = None):
        self._snake: List[Position] = list(DEFAULT_SNAKE)
        self._apple: Position = DEFAULT_APPLE
        self._score = 0
        self._power_ups: List[PowerUpMarker] = []
        self._active_power_ups: List[ActivePowerUp] = []
        self._paused = False
        self._game_over = False

        if initial_state is not None:
            self._load(initial_state)

    def get_state(self) -> GameState:
        return GameState(
            snake=tuple(self._snake),
            apple=self._apple,
            score=self._score,
            power_ups=tuple(self._power_ups),
            active_power_ups=tuple(self._active_power_ups),
            is_paused=self._paused,
            is_game_over=self._game_over,
        )

    def update_snake(self, snake: Iterable[Position]) -> None:
        self._snake = [tuple(segment) for segment in snake]

    def update_apple(self, position: Position) -> None:
        self._apple = tuple(position)

    def update_score(self, score: int) -> None:
        """Set the score, never below zero."""
        self._score = max(0, score)

    def increment_score(self, points: int) -> None:
        self._score += points

    def update_power_ups(self, power_ups: Iterable[Any]) -> None:
        """
        Replace the on-board power-ups. Accepts ``PowerUpMarker`` values or any
        object with a ``to_marker()`` method.
        """
        self._power_ups = [
            p if isinstance(p, PowerUpMarker) else p.to_marker()
            for p in power_ups
        ]

    def update_active_power_ups(self, active_power_ups: Iterable[ActivePowerUp]) -> None:
        self._active_power_ups = list(active_power_ups)

    def add_active_power_up(self, power_up_type: str, duration: int, start_time: float) -> None:
        """Record a running effect; an existing record of the same type is replaced."""
        self._active_power_ups = [p for p in self._active_power_ups if p.type != power_up_type]
        self._active_power_ups.append(ActivePowerUp(power_up_type, start_time, duration))

    def remove_active_power_up(self, power_up_type: str) -> None:
        self._active_power_ups = [p for p in self._active_power_ups if p.type != power_up_type]

    def set_game_over(self, is_game_over: bool) -> None:
        self._game_over = is_game_over

    def set_paused(self, is_paused: bool) -> None:
        self._paused = is_paused

    def is_game_over(self) -> bool:
        return self._game_over

    def is_paused(self) -> bool:
        return self._paused

    def reset(self, **overrides: Any) -> None:
        """
        Rebuild the whole state from defaults, then apply ``overrides``
        (any ``GameState`` field name, e.g. ``snake=[...]``, ``apple=(1, 2)``).
        """
        unknown = set(overrides) - set(GameState.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown game state fields: {sorted(unknown)}")

        defaults = dict(snake=tuple(DEFAULT_SNAKE), apple=DEFAULT_APPLE)
        defaults.update(overrides)
        self._load(GameState(**defaults))

    def _load(self, state: GameState) -> None:
        self.update_snake(state.snake)
        self.update_apple(state.apple)
        self._score = state.score
        self.update_power_ups(state.power_ups)
        self.update_active_power_ups(state.active_power_ups)
        self._paused = state.is_paused
        self._game_over = state.is_game_over
