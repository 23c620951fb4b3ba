"""
Fluent builder for game configurations.
"""

import copy
from dataclasses import fields
from typing import Any, Dict, Optional

from .defaults import (
    DEFAULT_CONFIG,
    DEFAULT_SPEEDS,
    CUSTOM_DIFFICULTY,
    VALID_DIFFICULTIES,
    VALID_TELEPORT_FALLBACKS,
    VALID_GROWTH_POLICIES,
    GameConfig,
    IconsConfig,
)


class GameConfigBuilder:
    """
    Builds ``GameConfig`` values starting from ``DEFAULT_CONFIG``.

    Every setter returns the builder so calls can be chained; ``build()`` hands
    out a deep copy, so one builder can produce several independent configs.
    Invalid values raise ValueError.
    """

    def __init__(self, base: Optional[GameConfig] = None):
        self.config = copy.deepcopy(base or DEFAULT_CONFIG)

    def set_difficulty(self, difficulty: str) -> "GameConfigBuilder":
        if difficulty not in VALID_DIFFICULTIES:
            available = ", ".join(sorted(VALID_DIFFICULTIES))
            raise ValueError(f"Unknown difficulty '{difficulty}'. Available: {available}")
        self.config.game.difficulty = difficulty
        return self

    def set_board_size(self, width: int, height: int) -> "GameConfigBuilder":
        if width < 1 or height < 1:
            raise ValueError(f"Board size must be positive, got {width}x{height}")
        self.config.board.width = width
        self.config.board.height = height
        return self

    def set_score_per_apple(self, score: int) -> "GameConfigBuilder":
        self.config.game.score_per_apple = score
        return self

    def set_update_time(self, milliseconds: int) -> "GameConfigBuilder":
        """Set the tick interval used by the "custom" difficulty."""
        if milliseconds <= 0:
            raise ValueError(f"Update time must be positive, got {milliseconds}")
        self.config.game.update_time = milliseconds
        return self

    def enable_power_up(self, power_up_type: str, enabled: bool = True) -> "GameConfigBuilder":
        self._power_up(power_up_type).enabled = enabled
        return self

    def enable_all_power_ups(self) -> "GameConfigBuilder":
        for settings in self.config.power_ups.values():
            settings.enabled = True
        return self

    def set_power_up_probability(self, power_up_type: str, probability: float) -> "GameConfigBuilder":
        self._power_up(power_up_type).probability = max(0.0, min(1.0, probability))
        return self

    def set_power_up_duration(self, power_up_type: str, duration: int) -> "GameConfigBuilder":
        self._power_up(power_up_type).duration = max(0, duration)
        return self

    def set_icon(self, icon_type: str, icon: str) -> "GameConfigBuilder":
        if not hasattr(self.config.icons, icon_type):
            raise ValueError(f"Unknown icon '{icon_type}'")
        setattr(self.config.icons, icon_type, icon)
        return self

    def set_icons(self, icons: IconsConfig) -> "GameConfigBuilder":
        self.config.icons = copy.deepcopy(icons)
        return self

    def set_expanded_range(self, radius: int) -> "GameConfigBuilder":
        self.config.game.expanded_range = max(1, radius)
        return self

    def allow_cheats(self, allowed: bool = True) -> "GameConfigBuilder":
        self.config.game.allow_cheats = allowed
        return self

    def set_teleport_fallback(self, policy: str) -> "GameConfigBuilder":
        if policy not in VALID_TELEPORT_FALLBACKS:
            raise ValueError(f"Unknown teleport fallback '{policy}'")
        self.config.game.teleport_fallback = policy
        return self

    def set_same_tick_growth(self, policy: str) -> "GameConfigBuilder":
        if policy not in VALID_GROWTH_POLICIES:
            raise ValueError(f"Unknown growth policy '{policy}'")
        self.config.game.same_tick_growth = policy
        return self

    def build(self) -> GameConfig:
        return copy.deepcopy(self.config)

    def _power_up(self, power_up_type: str):
        if power_up_type not in self.config.power_ups:
            available = ", ".join(self.config.power_ups)
            raise ValueError(f"Unknown power-up '{power_up_type}'. Available: {available}")
        return self.config.power_ups[power_up_type]

    @classmethod
    def from_partial_config(cls, partial: Dict[str, Any]) -> "GameConfigBuilder":
        """
        Create a builder from a nested dict shaped like ``GameConfig``.

        Missing sections and keys keep their defaults, e.g.
        ``{"board": {"width": 30}, "power_ups": {"magnet": {"enabled": True}}}``.
        """
        builder = cls()

        board = partial.get("board") or {}
        if board:
            builder.set_board_size(
                board.get("width", builder.config.board.width),
                board.get("height", builder.config.board.height),
            )

        game = partial.get("game") or {}
        if "difficulty" in game:
            builder.set_difficulty(game["difficulty"])
        if "score_per_apple" in game:
            builder.set_score_per_apple(game["score_per_apple"])
        if game.get("update_time"):
            builder.set_update_time(game["update_time"])
        if "expanded_range" in game:
            builder.set_expanded_range(game["expanded_range"])
        if "allow_cheats" in game:
            builder.allow_cheats(game["allow_cheats"])
        if "teleport_fallback" in game:
            builder.set_teleport_fallback(game["teleport_fallback"])
        if "same_tick_growth" in game:
            builder.set_same_tick_growth(game["same_tick_growth"])

        for power_up_type, values in (partial.get("power_ups") or {}).items():
            if values.get("enabled") is not None:
                builder.enable_power_up(power_up_type, values["enabled"])
            if values.get("probability") is not None:
                builder.set_power_up_probability(power_up_type, values["probability"])
            if values.get("duration") is not None:
                builder.set_power_up_duration(power_up_type, values["duration"])

        icon_names = {f.name for f in fields(IconsConfig)}
        for icon_type, icon in (partial.get("icons") or {}).items():
            if icon_type in icon_names:
                builder.set_icon(icon_type, icon)

        return builder


def resolve_update_time(config: GameConfig) -> int:
    """Tick interval (ms) for the configured difficulty."""
    if config.game.difficulty != CUSTOM_DIFFICULTY:
        return DEFAULT_SPEEDS[config.game.difficulty]
    return config.game.update_time or DEFAULT_SPEEDS["easy"]
