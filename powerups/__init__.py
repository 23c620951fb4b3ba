"""
Power-ups: strategies, the strategy registry and the on-board manager.
"""

from .base import PowerUpContext, PowerUpStrategy, TimedEffect, TimedStrategy, InstantStrategy
from .power_up import PowerUp
from .strategy_registry import AVAILABLE_POWER_UPS, create_strategy, get_strategy_factory, list_power_ups
from .manager import PowerUpManager, create_power_up

__all__ = [
    'PowerUpContext',
    'PowerUpStrategy',
    'TimedEffect',
    'TimedStrategy',
    'InstantStrategy',
    'PowerUp',
    'AVAILABLE_POWER_UPS',
    'create_strategy',
    'get_strategy_factory',
    'list_power_ups',
    'PowerUpManager',
    'create_power_up',
]
