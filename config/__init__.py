"""
Game configuration: defaults, a fluent builder and environment overrides.
"""

from .defaults import (
    DEFAULT_CONFIG,
    DEFAULT_SPEEDS,
    ASCII_ICONS,
    BoardConfig,
    GameSettings,
    PowerUpSettings,
    IconsConfig,
    GameConfig,
)
from .builder import GameConfigBuilder, resolve_update_time

__all__ = [
    'DEFAULT_CONFIG',
    'DEFAULT_SPEEDS',
    'ASCII_ICONS',
    'BoardConfig',
    'GameSettings',
    'PowerUpSettings',
    'IconsConfig',
    'GameConfig',
    'GameConfigBuilder',
    'resolve_update_time',
]
