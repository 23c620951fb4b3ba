"""
Strategy shapes for power-up effects.

A strategy is anything with ``apply(context)``, ``remove(context)`` and
``get_duration()``. Two concrete shapes cover every power-up:

- ``TimedStrategy`` wraps a ``TimedEffect`` (apply + restore pair) and undoes it
  automatically once its duration has elapsed.
- ``InstantStrategy`` wraps a one-shot function and has nothing to undo.

Strategies only see the game through ``PowerUpContext``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Tuple

import schedule

from utils.timers import TimerRegistry

logger = logging.getLogger(__name__)


class PowerUpContext(Protocol):
    """
    The slice of game state a power-up may read or change.

    Implemented by the engine's context adapter; strategies never get the
    engine itself.
    """

    def set_range(self, range_policy: str) -> None: ...

    def get_update_time(self) -> int: ...

    def set_update_time(self, milliseconds: int) -> None: ...

    def get_background_icon(self) -> str: ...

    def set_background_icon(self, icon: str) -> None: ...

    def get_icon(self, icon_type: str) -> str: ...

    def get_score_per_apple(self) -> int: ...

    def set_score_per_apple(self, score: int) -> None: ...

    def set_invincible(self, invincible: bool) -> None: ...

    def is_invincible(self) -> bool: ...

    def set_game_frozen(self, frozen: bool) -> None: ...

    def is_game_frozen(self) -> bool: ...

    def teleport_snake(self) -> None: ...

    def get_board_dimensions(self) -> Tuple[int, int]: ...

    def redraw(self) -> None: ...


class PowerUpStrategy(Protocol):
    def apply(self, context: PowerUpContext) -> None: ...

    def remove(self, context: PowerUpContext) -> None: ...

    def get_duration(self) -> int: ...


@dataclass(frozen=True)
class TimedEffect:
    """
    Apply/restore pair for a timed power-up.

    Attributes:
        name: power-up type the effect belongs to
        apply: mutates the context and returns whatever ``restore`` needs
            (captured once, at apply time); may register timers on the
            registry it receives
        restore: puts the captured values back
    """
    name: str
    apply: Callable[[PowerUpContext, TimerRegistry], Dict[str, Any]]
    restore: Callable[[PowerUpContext, Dict[str, Any]], None]


class TimedStrategy:
    """
    Runs a ``TimedEffect`` for ``duration`` milliseconds.

    Every timer the effect needs (the expiry timeout, the bonus flashing
    interval) lives on the strategy's own registry, so ``remove`` can drop them
    all at once. ``remove`` may be called any number of times; only the first
    call after ``apply`` restores anything.
    """

    def __init__(self, effect: TimedEffect, duration: int, scheduler: schedule.Scheduler):
        self.effect = effect
        self.duration = duration
        self.timers = TimerRegistry(scheduler, name=effect.name)
        self._saved: Optional[Dict[str, Any]] = None

    @property
    def is_active(self) -> bool:
        return self._saved is not None

    def apply(self, context: PowerUpContext) -> None:
        if self.is_active:
            return
        self._saved = self.effect.apply(context, self.timers) or {}
        logger.debug("Applied %s for %sms", self.effect.name, self.duration)

        if self.duration > 0:
            self.timers.set_timeout(lambda: self.remove(context), self.duration)

    def remove(self, context: PowerUpContext) -> None:
        self.timers.clear_all()
        if not self.is_active:
            return
        saved, self._saved = self._saved, None
        self.effect.restore(context, saved)
        logger.debug("Removed %s", self.effect.name)

    def get_duration(self) -> int:
        return self.duration


class InstantStrategy:
    """One-shot effect with no duration and nothing to undo."""

    def __init__(self, name: str, effect: Callable[[PowerUpContext], None]):
        self.name = name
        self.effect = effect

    def apply(self, context: PowerUpContext) -> None:
        self.effect(context)
        logger.debug("Applied instant %s", self.name)

    def remove(self, context: PowerUpContext) -> None:
        return None

    def get_duration(self) -> int:
        return 0
