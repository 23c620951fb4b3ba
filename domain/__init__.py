"""
Domain entities for the terminal snake game.

This module contains the core game entities that are independent of
infrastructure concerns (terminal, timers, configuration).
"""

from .constants import UP, DOWN, LEFT, RIGHT, VALID_DIRECTIONS, REGULAR, EXPANDED, POWER_UP_TYPES
from .snake import Snake
from .apple import Apple
from .game_state import GameState, PowerUpMarker, ActivePowerUp

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_DIRECTIONS', 'REGULAR', 'EXPANDED', 'POWER_UP_TYPES',
    'Snake',
    'Apple',
    'GameState',
    'PowerUpMarker',
    'ActivePowerUp',
]
