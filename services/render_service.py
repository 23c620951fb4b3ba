"""
Terminal renderer.

Frames are built as plain strings first and only written out when they differ
from the previous one. Output goes to a curses window when one is given,
otherwise to a text stream using ANSI cursor codes.
"""

import curses
import logging
import sys
import time
from dataclasses import asdict, replace
from typing import Callable, Iterable, Optional, TextIO

from config.defaults import BoardConfig, IconsConfig
from domain.constants import BLINK_THRESHOLD, Position
from domain.game_state import ActivePowerUp, GameState

logger = logging.getLogger(__name__)

CURSOR_HOME = "\x1b[H"
CLEAR_SCREEN = "\x1b[H\x1b[2J"

# Icons of expiring power-ups alternate every this many milliseconds
ICON_BLINK_PERIOD_MS = 250


def _now_ms() -> float:
    return time.time() * 1000


class RenderService:
    def __init__(
        self,
        board: BoardConfig,
        icons: IconsConfig,
        screen=None,
        stream: Optional[TextIO] = None,
        clock: Callable[[], float] = _now_ms
    ):
        self.board = board
        self.icons = icons
        self.screen = screen
        self.stream = stream if stream is not None else sys.stdout
        self.clock = clock
        self.previous_frame = ""
        self.is_first_render = True
        self.overlay_message = ""

    def render(self, state: GameState) -> bool:
        """
        Draw ``state`` if its frame differs from the last one drawn.

        Returns:
            True if anything was written.
        """
        frame = self.build_frame(state)
        if not self.is_first_render and frame == self.previous_frame:
            return False

        if self.is_first_render:
            self._clear()
            self.is_first_render = False
        else:
            self._home()

        self._write(frame)
        self.previous_frame = frame
        return True

    def force_render(self, state: GameState) -> None:
        self.previous_frame = ""
        self.is_first_render = True
        self.render(state)

    def update_icons(self, icons: IconsConfig) -> None:
        self.icons = replace(self.icons, **asdict(icons))

    def set_overlay_message(self, message: str) -> None:
        self.overlay_message = message or ""

    # --- frame building ---

    def build_frame(self, state: GameState) -> str:
        return self.build_board(state) + self.build_ui(state)

    def build_board(self, state: GameState) -> str:
        rows = []
        for y in range(self.board.height):
            rows.append("".join(self.cell_icon((x, y), state) for x in range(self.board.width)))
        return "\n".join(rows) + "\n"

    def cell_icon(self, position: Position, state: GameState) -> str:
        """Apple wins over power-ups, which win over the snake."""
        if tuple(state.apple) == tuple(position):
            return self.icons.apple

        for marker in state.power_ups:
            if tuple(marker.position) == tuple(position):
                return self._icon_for(marker.type)

        if tuple(position) in state.snake:
            return self.icons.snake

        return self.icons.background

    def build_ui(self, state: GameState) -> str:
        width = self.board.width * 2
        text = f"🏆 {state.score} - 📏 {len(state.snake)}"
        icons = self.active_power_ups_display(state.active_power_ups)
        spacing = max(1, width - len(text) - len(icons))

        ui = "\n" + text + " " * spacing + icons + "\n"
        if self.overlay_message:
            ui += self._centered(self.overlay_message) + "\n"
        ui += self.build_status(state)
        return ui

    def active_power_ups_display(self, active_power_ups: Iterable[ActivePowerUp]) -> str:
        now = self.clock()
        shown = []
        for active in active_power_ups:
            if active.is_blinking(now, BLINK_THRESHOLD):
                visible = int(now // ICON_BLINK_PERIOD_MS) % 2 == 0
                shown.append(self._icon_for(active.type) if visible else " ")
            else:
                shown.append(self._icon_for(active.type))
        return " ".join(shown)

    def build_status(self, state: GameState) -> str:
        blank = " " * (self.board.width * 2)
        if state.is_game_over:
            lines = [self._centered("GAME OVER"), self._centered("Press r to restart or q to quit")]
        elif state.is_paused:
            lines = [self._centered("PAUSED"), blank]
        else:
            lines = [blank, blank]
        return "\n" + "\n".join(lines) + "\n"

    def _centered(self, message: str) -> str:
        padding = max(0, (self.board.width * 2 - len(message)) // 2)
        return " " * padding + message

    def _icon_for(self, icon_type: str) -> str:
        return getattr(self.icons, icon_type, "?")

    # --- output ---

    def _clear(self) -> None:
        if self.screen is not None:
            self.screen.erase()
        else:
            self.stream.write(CLEAR_SCREEN)

    def _home(self) -> None:
        if self.screen is None:
            self.stream.write(CURSOR_HOME)

    def _write(self, frame: str) -> None:
        if self.screen is None:
            self.stream.write(frame)
            self.stream.flush()
            return

        for row, line in enumerate(frame.split("\n")):
            try:
                self.screen.addstr(row, 0, line)
                self.screen.clrtoeol()
            except curses.error:
                # Window smaller than the frame; the rest does not fit
                logger.debug("Frame clipped at row %s", row)
                break
        self.screen.refresh()
