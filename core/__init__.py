"""
The game engine and the context it hands to power-ups.
"""

from .context import EngineContext
from .game_engine import GameEngine

__all__ = [
    'EngineContext',
    'GameEngine',
]
