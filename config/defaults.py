"""
Default configuration for the game.

Everything a game session needs is captured in one ``GameConfig`` value. Use
``config.builder.GameConfigBuilder`` to derive variations instead of mutating
``DEFAULT_CONFIG`` in place.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from domain.constants import (
    MAGNET, SLOW_MOTION, BONUS, INVINCIBILITY, TELEPORT, BOOST, FREEZE,
)

# Tick interval per difficulty tier, in milliseconds
DEFAULT_SPEEDS: Dict[str, int] = {
    "easy": 1000,
    "medium": 250,
    "high": 70,
}
CUSTOM_DIFFICULTY = "custom"
VALID_DIFFICULTIES = set(DEFAULT_SPEEDS) | {CUSTOM_DIFFICULTY}

# What teleport does when no free cell is found
TELEPORT_FALLBACK_CURRENT_HEAD = "current_head"
TELEPORT_FALLBACK_RANDOM = "random"
VALID_TELEPORT_FALLBACKS = {TELEPORT_FALLBACK_CURRENT_HEAD, TELEPORT_FALLBACK_RANDOM}

# How much the snake grows when it eats an apple and a power-up on the same tick
GROWTH_CUMULATIVE = "cumulative"
GROWTH_SINGLE = "single"
VALID_GROWTH_POLICIES = {GROWTH_CUMULATIVE, GROWTH_SINGLE}

DEFAULT_POWER_UP_DURATION = 2000


@dataclass
class BoardConfig:
    width: int = 20
    height: int = 20


@dataclass
class GameSettings:
    difficulty: str = "easy"
    score_per_apple: int = 5
    expanded_range: int = 1
    update_time: Optional[int] = None  # only used with the "custom" difficulty
    allow_cheats: bool = False
    teleport_fallback: str = TELEPORT_FALLBACK_CURRENT_HEAD
    same_tick_growth: str = GROWTH_CUMULATIVE


@dataclass
class PowerUpSettings:
    enabled: bool = False
    probability: float = 0.0
    duration: Optional[int] = None


@dataclass
class IconsConfig:
    background: str = "⬜️"
    snake: str = "🐍"
    apple: str = "🍎"
    magnet: str = "🧲"
    slowMotion: str = "🧊"
    bonus: str = "🍐"
    invincibility: str = "👻"
    teleport: str = "🕳️"
    boost: str = "⚡"
    freeze: str = "❄️"
    bonus_background: str = "🟦"
    cheat_background: str = "🟨"


# Two characters per cell so the board stays square in a plain terminal
ASCII_ICONS = IconsConfig(
    background=". ",
    snake="[]",
    apple="()",
    magnet="MG",
    slowMotion="SL",
    bonus="$$",
    invincibility="IV",
    teleport="TP",
    boost=">>",
    freeze="**",
    bonus_background=": ",
    cheat_background="~ ",
)


def _default_power_ups() -> Dict[str, PowerUpSettings]:
    return {
        MAGNET: PowerUpSettings(enabled=False, probability=0.4, duration=2000),
        SLOW_MOTION: PowerUpSettings(enabled=False, probability=0.2, duration=2000),
        BONUS: PowerUpSettings(enabled=False, probability=0.5, duration=2000),
        INVINCIBILITY: PowerUpSettings(enabled=False, probability=0.15, duration=3000),
        BOOST: PowerUpSettings(enabled=False, probability=0.25, duration=2500),
        TELEPORT: PowerUpSettings(enabled=False, probability=0.2, duration=0),
        FREEZE: PowerUpSettings(enabled=False, probability=0.3, duration=1500),
    }


@dataclass
class GameConfig:
    board: BoardConfig = field(default_factory=BoardConfig)
    game: GameSettings = field(default_factory=GameSettings)
    power_ups: Dict[str, PowerUpSettings] = field(default_factory=_default_power_ups)
    icons: IconsConfig = field(default_factory=IconsConfig)


DEFAULT_CONFIG = GameConfig()
