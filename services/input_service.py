"""
Keyboard input over curses.

The window is put in non-blocking mode and drained by ``poll()`` from the
engine's run loop. Keys are dispatched to registered handlers by name
("space", "r", "q", ...). Typing "/" opens a command line that collects
characters until Enter (submit) or Escape (cancel).
"""

import curses
import logging
from typing import Callable, Dict, Optional

from domain.constants import Direction, UP, DOWN, LEFT, RIGHT

logger = logging.getLogger(__name__)

KEY_ESCAPE = 27
KEY_BACKSPACES = (curses.KEY_BACKSPACE, 127, 8)
KEY_ENTERS = (curses.KEY_ENTER, 10, 13)
COMMAND_PREFIX = "/"

MOVEMENT_KEYS: Dict[int, Direction] = {
    curses.KEY_UP: UP,
    curses.KEY_DOWN: DOWN,
    curses.KEY_LEFT: LEFT,
    curses.KEY_RIGHT: RIGHT,
    ord("w"): UP,
    ord("s"): DOWN,
    ord("a"): LEFT,
    ord("d"): RIGHT,
}

KEY_NAMES: Dict[int, str] = {
    ord(" "): "space",
    KEY_ESCAPE: "escape",
}


def key_name(key: int) -> Optional[str]:
    """Handler name for a curses key code, or None for keys without one."""
    if key in KEY_NAMES:
        return KEY_NAMES[key]
    if 0 <= key < 256 and chr(key).isprintable():
        return chr(key).lower()
    return None


class InputService:
    def __init__(self, screen):
        self.screen = screen
        self.key_handlers: Dict[str, Callable[[], None]] = {}
        self.movement_handler: Optional[Callable[[Direction], None]] = None
        self.command_handler: Optional[Callable[[str], None]] = None
        self.buffer_handler: Optional[Callable[[Optional[str]], None]] = None
        self.command_buffer: Optional[str] = None
        self.is_initialized = False

    def initialize(self) -> None:
        if self.is_initialized:
            return
        self.screen.nodelay(True)
        self.screen.keypad(True)
        self.is_initialized = True

    def on_key_press(self, name: str, handler: Callable[[], None]) -> None:
        self.key_handlers[name] = handler

    def on_movement(self, handler: Callable[[Direction], None]) -> None:
        self.movement_handler = handler

    def on_command(self, handler: Callable[[str], None]) -> None:
        """``handler`` receives the typed command text (without the "/")."""
        self.command_handler = handler

    def on_command_buffer(self, handler: Callable[[Optional[str]], None]) -> None:
        """``handler`` receives the text typed so far, or None once the line closes."""
        self.buffer_handler = handler

    @property
    def is_typing_command(self) -> bool:
        return self.command_buffer is not None

    def poll(self) -> int:
        """
        Dispatch every key waiting in the window.

        Returns:
            Number of keys read.
        """
        if not self.is_initialized:
            return 0

        count = 0
        while True:
            key = self.screen.getch()
            if key == -1:
                return count
            count += 1
            self.handle_key(key)

    def handle_key(self, key: int) -> None:
        if self.is_typing_command:
            self._handle_command_key(key)
            return

        if key == ord(COMMAND_PREFIX) and self.command_handler is not None:
            self._set_buffer("")
            return

        if key in MOVEMENT_KEYS and self.movement_handler is not None:
            self.movement_handler(MOVEMENT_KEYS[key])
            return

        name = key_name(key)
        handler = self.key_handlers.get(name) if name else None
        if handler is not None:
            handler()

    def clear_handlers(self) -> None:
        self.key_handlers.clear()
        self.movement_handler = None
        self.command_handler = None
        self.buffer_handler = None

    def destroy(self) -> None:
        if self.is_initialized:
            try:
                self.screen.nodelay(False)
            except curses.error:
                logger.debug("Window already released")
        self.clear_handlers()
        self.command_buffer = None
        self.is_initialized = False

    def _handle_command_key(self, key: int) -> None:
        if key in KEY_ENTERS:
            command = self.command_buffer
            self._set_buffer(None)
            if command and self.command_handler is not None:
                logger.debug("Command submitted: %s", command)
                self.command_handler(command)
        elif key == KEY_ESCAPE:
            self._set_buffer(None)
        elif key in KEY_BACKSPACES:
            self._set_buffer(self.command_buffer[:-1])
        elif 0 <= key < 256 and chr(key).isprintable():
            self._set_buffer(self.command_buffer + chr(key))

    def _set_buffer(self, text: Optional[str]) -> None:
        self.command_buffer = text
        if self.buffer_handler is not None:
            self.buffer_handler(text)
