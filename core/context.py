"""
Adapter that exposes a narrow slice of the engine to power-ups and cheats.
"""

import logging
from typing import TYPE_CHECKING, Tuple

from config.defaults import TELEPORT_FALLBACK_RANDOM
from domain.constants import VALID_RANGES
from utils import math_utils

if TYPE_CHECKING:
    from .game_engine import GameEngine

logger = logging.getLogger(__name__)


class EngineContext:
    """
    Implements ``PowerUpContext`` (and the cheat extensions) on top of a
    ``GameEngine``. Strategies receive this object, never the engine.
    """

    def __init__(self, engine: "GameEngine"):
        self._engine = engine

    # --- eating range ---

    def set_range(self, range_policy: str) -> None:
        if range_policy not in VALID_RANGES:
            raise ValueError(f"Unknown range policy '{range_policy}'")
        self._engine.range_policy = range_policy

    def get_range(self) -> str:
        return self._engine.range_policy

    # --- tick interval ---

    def get_update_time(self) -> int:
        return self._engine.update_time

    def set_update_time(self, milliseconds: int) -> None:
        """Change the tick interval; a running tick loop is restarted with it."""
        engine = self._engine
        engine.update_time = milliseconds
        if engine.is_loop_running():
            engine.stop_game_loop()
            engine.start_game_loop()
        logger.debug("Tick interval set to %sms", milliseconds)

    # --- look ---

    def get_background_icon(self) -> str:
        return self._engine.background_icon

    def set_background_icon(self, icon: str) -> None:
        self._engine.background_icon = icon

    def get_icon(self, icon_type: str) -> str:
        return getattr(self._engine.config.icons, icon_type)

    def redraw(self) -> None:
        self._engine.force_render()

    # --- scoring ---

    def get_score_per_apple(self) -> int:
        return self._engine.score_per_apple

    def set_score_per_apple(self, score: int) -> None:
        self._engine.score_per_apple = score

    # --- flags ---

    def set_invincible(self, invincible: bool) -> None:
        self._engine.invincible = invincible

    def is_invincible(self) -> bool:
        return self._engine.invincible

    def set_game_frozen(self, frozen: bool) -> None:
        self._engine.frozen = frozen

    def is_game_frozen(self) -> bool:
        return self._engine.frozen

    # --- board ---

    def get_board_dimensions(self) -> Tuple[int, int]:
        board = self._engine.config.board
        return board.width, board.height

    def teleport_snake(self) -> None:
        """
        Move the snake's head to a random free cell. When none is found the
        configured fallback applies: stay put, or jump to an unchecked cell.
        """
        engine = self._engine
        width, height = self.get_board_dimensions()
        occupied = engine.occupied_positions()

        position = engine.validator.generate_valid_position(
            occupied, max_attempts=max(100, math_utils.total_cells(width, height))
        )
        if position is None:
            if engine.config.game.teleport_fallback == TELEPORT_FALLBACK_RANDOM:
                position = math_utils.random_position(width, height, engine.rng)
            else:
                position = engine.snake.head
            logger.warning("No free cell for teleport, falling back to %s", position)

        engine.snake.teleport_to(position)
        engine.sync_state()
        logger.info("Snake teleported to %s", position)

    # --- game over controls (cheats) ---

    def is_game_over(self) -> bool:
        return self._engine.state.is_game_over()

    def set_game_over(self, game_over: bool) -> None:
        self._engine.state.set_game_over(game_over)

    def resume_game(self) -> None:
        self._engine.resume()
