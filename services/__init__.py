"""
Services around the game loop: state store, rendering, input and cheats.
"""

from .game_state_service import GameStateService
from .render_service import RenderService
from .input_service import InputService
from .cheat_service import CheatService

__all__ = [
    'GameStateService',
    'RenderService',
    'InputService',
    'CheatService',
]
