"""
Registry of power-up strategies.

Maps power-up type names (e.g. 'magnet', 'teleport') to factories that build a
fresh strategy for one spawned power-up. To add a power-up, define its effect
in strategies.py and register it in TIMED_EFFECTS or INSTANT_EFFECTS there;
it shows up here automatically.
"""

from typing import Callable, Dict, List

import schedule

from domain.constants import (
    MAGNET, SLOW_MOTION, BONUS, INVINCIBILITY, TELEPORT, BOOST, FREEZE,
)
from .base import InstantStrategy, PowerUpStrategy, TimedStrategy
from .strategies import INSTANT_EFFECTS, TIMED_EFFECTS

StrategyFactory = Callable[[int, schedule.Scheduler], PowerUpStrategy]


def _timed_factory(name: str) -> StrategyFactory:
    effect = TIMED_EFFECTS[name]
    return lambda duration, scheduler: TimedStrategy(effect, duration, scheduler)


def _instant_factory(name: str) -> StrategyFactory:
    effect = INSTANT_EFFECTS[name]
    # Instant power-ups ignore the configured duration
    return lambda duration, scheduler: InstantStrategy(name, effect)


# Registry: maps power-up type -> callable that builds its strategy
STRATEGY_FACTORIES: Dict[str, StrategyFactory] = {
    **{name: _timed_factory(name) for name in TIMED_EFFECTS},
    **{name: _instant_factory(name) for name in INSTANT_EFFECTS},
}

# Canonical list of available power-up types
AVAILABLE_POWER_UPS = list(STRATEGY_FACTORIES.keys())

DESCRIPTIONS = {
    MAGNET: "Eat apples and power-ups near the head, not just under it",
    SLOW_MOTION: "Slows the game down by 200ms per tick",
    BONUS: "15 points per apple and a flashing background",
    INVINCIBILITY: "Biting your own tail does not end the game",
    BOOST: "Speeds the game up by 100ms per tick (30ms floor)",
    FREEZE: "Stops the snake while the board keeps rendering",
    TELEPORT: "Moves the head to a random free cell",
}


def get_strategy_factory(power_up_type: str) -> StrategyFactory:
    """
    Get the strategy factory for a power-up type.

    Args:
        power_up_type: One of AVAILABLE_POWER_UPS.

    Returns:
        Callable taking (duration_ms, scheduler) and returning a strategy.

    Raises:
        ValueError: If power_up_type is not recognized.
    """
    if power_up_type not in STRATEGY_FACTORIES:
        available = ", ".join(AVAILABLE_POWER_UPS)
        raise ValueError(
            f"Unknown power-up '{power_up_type}'. Available power-ups: {available}"
        )

    return STRATEGY_FACTORIES[power_up_type]


def create_strategy(power_up_type: str, duration: int, scheduler: schedule.Scheduler) -> PowerUpStrategy:
    return get_strategy_factory(power_up_type)(duration, scheduler)


def list_power_ups() -> List[dict]:
    """
    Return metadata about all available power-ups.

    Returns:
        List of dicts with 'key', 'kind' and 'description' for each power-up.
    """
    return [
        {
            "key": name,
            "kind": "timed" if name in TIMED_EFFECTS else "instant",
            "description": DESCRIPTIONS.get(name, ""),
        }
        for name in AVAILABLE_POWER_UPS
    ]
