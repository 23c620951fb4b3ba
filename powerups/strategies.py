"""
The power-up effects.

Each timed effect is an (apply, restore) pair: ``apply`` changes the context
and returns the values ``restore`` has to put back. Values are captured once,
when the effect starts.
"""

from typing import Any, Dict

from domain.constants import (
    MAGNET, SLOW_MOTION, BONUS, INVINCIBILITY, TELEPORT, BOOST, FREEZE,
    REGULAR, EXPANDED,
    SLOW_MOTION_DELAY_MS, BOOST_STEP_MS, MIN_UPDATE_TIME_MS, BONUS_SCORE_PER_APPLE,
)
from utils.timers import TimerRegistry
from .base import PowerUpContext, TimedEffect


# --- magnet: eat anything within the expanded range of the head ---

def _apply_magnet(context: PowerUpContext, timers: TimerRegistry) -> Dict[str, Any]:
    context.set_range(EXPANDED)
    return {}


def _restore_magnet(context: PowerUpContext, saved: Dict[str, Any]) -> None:
    context.set_range(REGULAR)


# --- slow motion: longer tick interval ---

def _apply_slow_motion(context: PowerUpContext, timers: TimerRegistry) -> Dict[str, Any]:
    original = context.get_update_time()
    context.set_update_time(original + SLOW_MOTION_DELAY_MS)
    return {"update_time": original}


# --- boost: shorter tick interval, never below the floor ---

def _apply_boost(context: PowerUpContext, timers: TimerRegistry) -> Dict[str, Any]:
    original = context.get_update_time()
    context.set_update_time(max(MIN_UPDATE_TIME_MS, original - BOOST_STEP_MS))
    return {"update_time": original}


def _restore_update_time(context: PowerUpContext, saved: Dict[str, Any]) -> None:
    context.set_update_time(saved["update_time"])


# --- bonus: more points per apple, flashing background ---

def _apply_bonus(context: PowerUpContext, timers: TimerRegistry) -> Dict[str, Any]:
    original_icon = context.get_background_icon()
    flash_icon = context.get_icon("bonus_background")
    saved = {
        "background_icon": original_icon,
        "score_per_apple": context.get_score_per_apple(),
    }

    context.set_score_per_apple(BONUS_SCORE_PER_APPLE)

    def _flash():
        current = context.get_background_icon()
        context.set_background_icon(original_icon if current == flash_icon else flash_icon)
        context.redraw()

    timers.set_interval(_flash, context.get_update_time())
    return saved


def _restore_bonus(context: PowerUpContext, saved: Dict[str, Any]) -> None:
    context.set_background_icon(saved["background_icon"])
    context.set_score_per_apple(saved["score_per_apple"])
    context.redraw()


# --- invincibility: self collisions are ignored ---

def _apply_invincibility(context: PowerUpContext, timers: TimerRegistry) -> Dict[str, Any]:
    context.set_invincible(True)
    return {}


def _restore_invincibility(context: PowerUpContext, saved: Dict[str, Any]) -> None:
    context.set_invincible(False)


# --- freeze: ticks render but do not simulate ---

def _apply_freeze(context: PowerUpContext, timers: TimerRegistry) -> Dict[str, Any]:
    context.set_game_frozen(True)
    return {}


def _restore_freeze(context: PowerUpContext, saved: Dict[str, Any]) -> None:
    context.set_game_frozen(False)


# --- teleport (instant) ---

def teleport(context: PowerUpContext) -> None:
    context.teleport_snake()


TIMED_EFFECTS: Dict[str, TimedEffect] = {
    MAGNET: TimedEffect(MAGNET, _apply_magnet, _restore_magnet),
    SLOW_MOTION: TimedEffect(SLOW_MOTION, _apply_slow_motion, _restore_update_time),
    BONUS: TimedEffect(BONUS, _apply_bonus, _restore_bonus),
    INVINCIBILITY: TimedEffect(INVINCIBILITY, _apply_invincibility, _restore_invincibility),
    BOOST: TimedEffect(BOOST, _apply_boost, _restore_update_time),
    FREEZE: TimedEffect(FREEZE, _apply_freeze, _restore_freeze),
}

INSTANT_EFFECTS = {
    TELEPORT: teleport,
}
