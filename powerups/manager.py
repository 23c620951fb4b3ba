"""
Spawning and tracking of power-ups on the board.
"""

import logging
import random
from typing import Dict, Iterable, List, Optional

import schedule

from config.defaults import DEFAULT_POWER_UP_DURATION, PowerUpSettings
from domain.constants import Position
from utils import math_utils
from utils.position_validator import PositionValidator
from .power_up import PowerUp
from .strategy_registry import create_strategy

logger = logging.getLogger(__name__)


def create_power_up(
    position: Position,
    power_up_type: str,
    scheduler: schedule.Scheduler,
    duration: Optional[int] = None
) -> PowerUp:
    """Build a power-up with a fresh strategy for its type."""
    if duration is None:
        duration = DEFAULT_POWER_UP_DURATION
    return PowerUp(position, power_up_type, create_strategy(power_up_type, duration, scheduler))


class PowerUpManager:
    """
    Keeps the power-ups that are currently lying on the board.

    At most one power-up per type is tracked at any time.
    """

    def __init__(
        self,
        config: Dict[str, PowerUpSettings],
        validator: PositionValidator,
        scheduler: schedule.Scheduler
    ):
        self.config = config
        self.validator = validator
        self.scheduler = scheduler
        self._power_ups: List[PowerUp] = []

    def generate_random_power_ups(self, occupied_positions: Iterable[Position] = ()) -> List[PowerUp]:
        """
        Roll every enabled power-up type against its probability and place the
        winners on free cells.

        The returned power-ups are not tracked yet; pass them to ``add_power_up``.
        Cells used by earlier placements are excluded for later ones.
        """
        occupied = list(occupied_positions)
        new_power_ups: List[PowerUp] = []

        for power_up_type, settings in self.config.items():
            if not settings.enabled or not math_utils.should_happen(settings.probability, self.validator.rng):
                continue

            position = self.validator.generate_valid_position(occupied)
            if position is None:
                logger.warning("No free cell for %s power-up, skipping spawn", power_up_type)
                continue

            new_power_ups.append(create_power_up(position, power_up_type, self.scheduler, settings.duration))
            occupied.append(position)

        return new_power_ups

    def add_power_up(self, power_up: PowerUp) -> None:
        if any(p.type == power_up.type for p in self._power_ups):
            return
        self._power_ups.append(power_up)
        logger.debug("Spawned %s at %s", power_up.type, power_up.position)

    def remove_power_up(self, power_up_type: str) -> Optional[PowerUp]:
        for index, power_up in enumerate(self._power_ups):
            if power_up.type == power_up_type:
                return self._power_ups.pop(index)
        return None

    def find_power_up_at_position(self, position: Position) -> Optional[PowerUp]:
        for power_up in self._power_ups:
            if math_utils.positions_equal(power_up.position, position):
                return power_up
        return None

    def find_power_up_in_range(self, center: Position, radius: int) -> Optional[PowerUp]:
        """First tracked power-up within ``radius`` (Chebyshev) of ``center``."""
        for power_up in self._power_ups:
            if math_utils.is_in_range(center, power_up.position, radius):
                return power_up
        return None

    def get_active_power_ups(self) -> List[PowerUp]:
        return list(self._power_ups)

    def get_positions(self) -> List[Position]:
        return [p.position for p in self._power_ups]

    def clear_all_power_ups(self) -> None:
        self._power_ups = []
