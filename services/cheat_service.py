"""
Cheat codes.

Toggle cheats switch an effect on and, on the next use of the same code, off
again, restoring what they changed. Instant cheats just run once.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol

from domain.constants import EXPANDED, REGULAR, MIN_UPDATE_TIME_MS, SLOW_MOTION_DELAY_MS
from powerups.base import PowerUpContext

logger = logging.getLogger(__name__)

ACTIVATED = "activated"
DEACTIVATED = "deactivated"
INSTANT = "instant"
UNKNOWN = "unknown"

LOOT_SCORE_PER_APPLE = 25


class CheatContext(PowerUpContext, Protocol):
    """Power-up context plus the game-over controls the revive cheat needs."""

    def is_game_over(self) -> bool: ...

    def set_game_over(self, game_over: bool) -> None: ...

    def resume_game(self) -> None: ...


@dataclass(frozen=True)
class Cheat:
    """
    Attributes:
        id: canonical code, shared by all aliases
        apply: turns the cheat on; returns values ``remove`` needs later
        remove: turns it off again (toggles only)
    """
    id: str
    apply: Callable[[CheatContext], Optional[Dict[str, Any]]]
    remove: Optional[Callable[[CheatContext, Dict[str, Any]], None]] = None

    @property
    def instant(self) -> bool:
        return self.remove is None


def normalize(code: str) -> str:
    return re.sub(r"[^A-Z0-9]", "", code.strip().upper())


# --- toggles ---

def _god_mode_on(ctx: CheatContext) -> Dict[str, Any]:
    ctx.set_invincible(True)
    return {}


def _god_mode_off(ctx: CheatContext, saved: Dict[str, Any]) -> None:
    ctx.set_invincible(False)


def _zoomies_on(ctx: CheatContext) -> Dict[str, Any]:
    original = ctx.get_update_time()
    ctx.set_update_time(max(MIN_UPDATE_TIME_MS, original // 2))
    return {"update_time": original}


def _chill_on(ctx: CheatContext) -> Dict[str, Any]:
    original = ctx.get_update_time()
    ctx.set_update_time(original + SLOW_MOTION_DELAY_MS)
    return {"update_time": original}


def _restore_update_time(ctx: CheatContext, saved: Dict[str, Any]) -> None:
    ctx.set_update_time(saved["update_time"])


def _loot_on(ctx: CheatContext) -> Dict[str, Any]:
    saved = {
        "score_per_apple": ctx.get_score_per_apple(),
        "background_icon": ctx.get_background_icon(),
    }
    ctx.set_score_per_apple(LOOT_SCORE_PER_APPLE)
    ctx.set_background_icon(ctx.get_icon("cheat_background"))
    ctx.redraw()
    return saved


def _loot_off(ctx: CheatContext, saved: Dict[str, Any]) -> None:
    ctx.set_score_per_apple(saved["score_per_apple"])
    ctx.set_background_icon(saved["background_icon"])
    ctx.redraw()


def _magneto_on(ctx: CheatContext) -> Dict[str, Any]:
    ctx.set_range(EXPANDED)
    return {}


def _magneto_off(ctx: CheatContext, saved: Dict[str, Any]) -> None:
    ctx.set_range(REGULAR)


def _freeze_on(ctx: CheatContext) -> Dict[str, Any]:
    ctx.set_game_frozen(True)
    return {}


def _freeze_off(ctx: CheatContext, saved: Dict[str, Any]) -> None:
    ctx.set_game_frozen(False)


# --- one-shots ---

def _yeet(ctx: CheatContext) -> None:
    ctx.teleport_snake()
    ctx.redraw()


def _revive(ctx: CheatContext) -> None:
    if not ctx.is_game_over():
        return
    ctx.set_game_over(False)
    ctx.teleport_snake()
    ctx.resume_game()
    ctx.redraw()


class CheatService:
    """
    Looks up codes and keeps track of which toggle cheats are on.

    Usage:
        cheats = CheatService()
        outcome = cheats.execute("godmode", context)  # "activated"
    """

    def __init__(self):
        self.cheats: Dict[str, Cheat] = {}
        self._active: Dict[str, Dict[str, Any]] = {}

        self.register(["SNEKGODMODE", "GODMODE"], _god_mode_on, _god_mode_off)
        self.register(["ZOOMIES"], _zoomies_on, _restore_update_time)
        self.register(["CHILLPILL", "CHILL"], _chill_on, _restore_update_time)
        self.register(["GIMMELOOT", "LOOT"], _loot_on, _loot_off)
        self.register(["MAGNETO"], _magneto_on, _magneto_off)
        self.register(["FREEZE", "ICEAGE"], _freeze_on, _freeze_off)
        self.register(["YEETME", "YEET-ME", "YEET"], _yeet)
        self.register(["ILLBEBACK", "ILL-BE-BACK", "TERMINATOR"], _revive)
        self.register(["NUKECHEATS", "NUKE", "RESETCHEATS"], self._nuke)

    def register(self, codes: List[str], apply, remove=None) -> None:
        """Register a cheat under every code in ``codes``; the first one is its id."""
        cheat = Cheat(id=normalize(codes[0]), apply=apply, remove=remove)
        for code in codes:
            self.cheats[normalize(code)] = cheat

    def has(self, code: str) -> bool:
        return normalize(code) in self.cheats

    def get_codes(self) -> List[str]:
        return list(self.cheats.keys())

    def active_cheats(self) -> List[str]:
        return list(self._active.keys())

    def execute(self, code: str, context: CheatContext) -> str:
        """
        Run or toggle a cheat.

        Returns:
            "activated", "deactivated", "instant" or "unknown"
        """
        cheat = self.cheats.get(normalize(code))
        if cheat is None:
            logger.info("Unknown cheat code: %s", code)
            return UNKNOWN

        if cheat.instant:
            cheat.apply(context)
            logger.info("Cheat %s used", cheat.id)
            return INSTANT

        if cheat.id in self._active:
            cheat.remove(context, self._active.pop(cheat.id))
            logger.info("Cheat %s deactivated", cheat.id)
            return DEACTIVATED

        self._active[cheat.id] = cheat.apply(context) or {}
        logger.info("Cheat %s activated", cheat.id)
        return ACTIVATED

    def reset(self, context: Optional[CheatContext] = None) -> None:
        """
        Turn every active toggle off. Without a context the toggles are just
        forgotten (the caller restores the game settings itself).
        """
        active, self._active = self._active, {}
        if context is None:
            return
        # Undo in reverse order so stacked interval changes unwind correctly
        for cheat_id, saved in reversed(list(active.items())):
            self.cheats[cheat_id].remove(context, saved)

    def _nuke(self, context: CheatContext) -> None:
        self.reset(context)
        context.redraw()
