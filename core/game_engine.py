"""
Game engine: owns the board entities, the tick loop and every timer.

Everything runs on one thread. Timers are jobs on a single
``schedule.Scheduler`` which ``run()`` drains together with keyboard input.
"""

import copy
import logging
import random
import time
from dataclasses import replace
from typing import Callable, Dict, List, Optional

import schedule

from config.builder import resolve_update_time
from config.defaults import DEFAULT_CONFIG, GROWTH_SINGLE, GameConfig
from domain.apple import Apple
from domain.constants import BLINK_INTERVAL_MS, BLINK_THRESHOLD, REGULAR, Direction, Position
from domain.snake import Snake
from powerups.manager import PowerUpManager
from powerups.power_up import PowerUp
from services.cheat_service import ACTIVATED, DEACTIVATED, INSTANT, UNKNOWN, CheatService
from services.game_state_service import GameStateService
from utils import math_utils
from utils.position_validator import PositionValidator
from utils.timers import TimerRegistry
from .context import EngineContext

logger = logging.getLogger(__name__)

# How long the run loop sleeps between scheduler passes
POLL_INTERVAL_SECONDS = 0.01
# How long a cheat outcome stays on screen
OVERLAY_DURATION_MS = 1500

CHEAT_MESSAGES = {
    ACTIVATED: "CHEAT ON: {code}",
    DEACTIVATED: "CHEAT OFF: {code}",
    INSTANT: "CHEAT: {code}",
    UNKNOWN: "Unknown code: {code}",
}


def _now_ms() -> float:
    return time.time() * 1000


class GameEngine:
    """
    Runs one game session.

    States:
      - Running: the tick loop and blink timer are scheduled
      - Paused: both are cancelled until ``toggle_pause`` resumes the game
      - GameOver: the snake bit itself; only restart and quit do anything

    Collaborators are injected so tests can drive the engine headless:
    ``renderer`` and ``input_service`` may be None, ``scheduler``, ``clock``
    and ``rng`` replace the real timer queue, wall clock and randomness.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        renderer=None,
        input_service=None,
        scheduler: Optional[schedule.Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = copy.deepcopy(config or DEFAULT_CONFIG)
        self.renderer = renderer
        self.input_service = input_service
        self.scheduler = scheduler or schedule.Scheduler()
        self.clock = clock or _now_ms
        self.rng = rng or random.Random()

        board = self.config.board
        self.validator = PositionValidator(board.width, board.height, self.rng)
        self.snake = Snake(self.validator.centered_position(), board.width, board.height)
        self.apple = Apple(self.validator)
        self.apple.respawn(self.snake.segments)
        self.power_up_manager = PowerUpManager(self.config.power_ups, self.validator, self.scheduler)

        self.state = GameStateService()
        self.state.reset(snake=self.snake.segments, apple=self.apple.position)

        self.cheats = CheatService()
        self.context = EngineContext(self)

        # Runtime settings power-ups and cheats may change
        self.update_time = resolve_update_time(self.config)
        self.range_policy = REGULAR
        self.score_per_apple = self.config.game.score_per_apple
        self.background_icon = self.config.icons.background
        self.invincible = False
        self.frozen = False

        self.loop_timers = TimerRegistry(self.scheduler, name="game-loop")
        self.blink_timers = TimerRegistry(self.scheduler, name="blink")
        self.expiry_timers = TimerRegistry(self.scheduler, name="expiry")
        self.overlay_timers = TimerRegistry(self.scheduler, name="overlay")
        self._tick_job: Optional[schedule.Job] = None
        self._blink_job: Optional[schedule.Job] = None
        self._expiry_jobs: Dict[str, schedule.Job] = {}
        self._running_effects: Dict[str, PowerUp] = {}
        self.previous_blink_state = False

        self.is_running = False
        self._input_ready = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Enter the Running state and schedule the tick loop."""
        self._setup_input()
        self.state.set_game_over(False)
        self.state.set_paused(False)
        self.is_running = True

        self.start_game_loop()
        self.force_render()
        logger.info(
            "Game started: %sx%s board, %sms per tick",
            self.config.board.width, self.config.board.height, self.update_time
        )

    def run(self) -> None:
        """Drain input and timers until ``stop`` is called."""
        while self.is_running:
            if self.input_service is not None:
                self.input_service.poll()
            self.scheduler.run_pending()
            time.sleep(POLL_INTERVAL_SECONDS)

    def toggle_pause(self) -> None:
        if self.state.is_game_over():
            return

        if self.state.is_paused():
            self.resume()
        else:
            self.state.set_paused(True)
            self.stop_game_loop()
            logger.info("Game paused")
        self.force_render()

    def resume(self) -> None:
        self.state.set_paused(False)
        self.start_game_loop()
        logger.info("Game resumed")

    def restart(self) -> None:
        """Reset the board and every runtime setting, then start again."""
        self.stop_game_loop()
        self._remove_running_effects()
        self.cheats.reset()
        self.overlay_timers.clear_all()

        self.snake.reset(self.validator.centered_position())
        self.apple.respawn(self.snake.segments)
        self.power_up_manager.clear_all_power_ups()
        self.state.reset(snake=self.snake.segments, apple=self.apple.position)

        self._reset_runtime_settings()
        if self.renderer is not None:
            self.renderer.set_overlay_message("")

        logger.info("Game restarted")
        self.start()

    def stop(self) -> None:
        """Cancel every timer, undo running effects and release the keyboard."""
        self.stop_game_loop()
        self._remove_running_effects()
        self.overlay_timers.clear_all()
        if self.input_service is not None:
            self.input_service.destroy()
            self._input_ready = False
        self.is_running = False
        logger.info("Game stopped with score %s", self.state.get_state().score)

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def start_game_loop(self) -> None:
        """Schedule the tick and blink timers; no-op when already scheduled."""
        if self._tick_job is None:
            self._tick_job = self.loop_timers.set_interval(self.tick, self.update_time)
        if self._blink_job is None:
            self._blink_job = self.blink_timers.set_interval(self.check_blink, BLINK_INTERVAL_MS)

    def stop_game_loop(self) -> None:
        self.loop_timers.clear_all()
        self.blink_timers.clear_all()
        self._tick_job = None
        self._blink_job = None

    def is_loop_running(self) -> bool:
        return self._tick_job is not None

    def check_blink(self) -> None:
        """Redraw while an effect is about to run out, and once more after."""
        now = self.clock()
        blinking = any(
            active.is_blinking(now, BLINK_THRESHOLD)
            for active in self.state.get_state().active_power_ups
        )
        if blinking or self.previous_blink_state:
            self.force_render()
        self.previous_blink_state = blinking

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> None:
        if self.state.is_paused() or self.state.is_game_over():
            return

        if self.frozen:
            self.render()
            return

        tail = self.snake.move()

        if not self.invincible and self.snake.check_self_collision():
            self._game_over()
            return

        ate_apple = False
        if self._is_in_range(self.apple.position):
            self._eat_apple(tail)
            ate_apple = True

        power_up = self._find_power_up()
        if power_up is not None:
            grow = not (ate_apple and self.config.game.same_tick_growth == GROWTH_SINGLE)
            self._eat_power_up(power_up, tail, grow)

        self.sync_state()
        self.render()

    def _eat_apple(self, tail: Position) -> None:
        self.snake.grow(tail)
        self.state.increment_score(self.score_per_apple)

        self.apple.respawn(self.snake.segments + self.power_up_manager.get_positions())
        for power_up in self.power_up_manager.generate_random_power_ups(self.occupied_positions()):
            self.power_up_manager.add_power_up(power_up)

    def _eat_power_up(self, power_up: PowerUp, tail: Position, grow: bool = True) -> None:
        if grow:
            self.snake.grow(tail)

        duration = power_up.get_duration()
        if duration > 0:
            # Eating a type whose effect is still running restarts it
            self._expire_effect(power_up.type)
            self.state.add_active_power_up(power_up.type, duration, self.clock())
            self._running_effects[power_up.type] = power_up
            self._expiry_jobs[power_up.type] = self.expiry_timers.set_timeout(
                lambda: self._on_effect_expired(power_up), duration
            )

        power_up.apply(self.context)
        self.power_up_manager.remove_power_up(power_up.type)
        logger.info("Snake ate %s power-up (%sms)", power_up.type, duration)

    def _on_effect_expired(self, power_up: PowerUp) -> None:
        if self._running_effects.get(power_up.type) is not power_up:
            return
        self._expiry_jobs.pop(power_up.type, None)
        self._expire_effect(power_up.type)
        logger.debug("%s effect expired", power_up.type)
        self.sync_state()
        self.render()

    def _expire_effect(self, power_up_type: str) -> None:
        """Undo a running effect of ``power_up_type`` and drop its record."""
        job = self._expiry_jobs.pop(power_up_type, None)
        if job is not None:
            self.expiry_timers.cancel(job)
        running = self._running_effects.pop(power_up_type, None)
        if running is not None:
            running.remove(self.context)
        self.state.remove_active_power_up(power_up_type)

    def _remove_running_effects(self) -> None:
        for power_up_type in list(self._running_effects):
            self._expire_effect(power_up_type)
        self.expiry_timers.clear_all()
        self._expiry_jobs.clear()

    def _game_over(self) -> None:
        self.state.set_game_over(True)
        self.stop_game_loop()
        self.sync_state()
        self.force_render()
        logger.info(
            "Game over: score %s, length %s", self.state.get_state().score, self.snake.length
        )

    def _is_in_range(self, position: Position) -> bool:
        if self.range_policy == REGULAR:
            return math_utils.positions_equal(self.snake.head, position)
        return math_utils.is_in_range(self.snake.head, position, self.config.game.expanded_range)

    def _find_power_up(self) -> Optional[PowerUp]:
        if self.range_policy == REGULAR:
            return self.power_up_manager.find_power_up_at_position(self.snake.head)
        return self.power_up_manager.find_power_up_in_range(
            self.snake.head, self.config.game.expanded_range
        )

    def occupied_positions(self) -> List[Position]:
        """Cells taken by the snake, the apple and power-ups on the board."""
        return self.snake.segments + [self.apple.position] + self.power_up_manager.get_positions()

    def sync_state(self) -> None:
        self.state.update_snake(self.snake.segments)
        self.state.update_apple(self.apple.position)
        self.state.update_power_ups(self.power_up_manager.get_active_power_ups())

    def _reset_runtime_settings(self) -> None:
        self.update_time = resolve_update_time(self.config)
        self.range_policy = REGULAR
        self.score_per_apple = self.config.game.score_per_apple
        self.background_icon = self.config.icons.background
        self.invincible = False
        self.frozen = False
        self.previous_blink_state = False

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def change_direction(self, direction: Direction) -> None:
        if self.state.is_paused() or self.state.is_game_over():
            return
        self.snake.set_direction(direction)

    def execute_cheat(self, code: str) -> str:
        """
        Run a cheat code and show the outcome as an overlay message.

        Returns:
            The cheat outcome ("activated", "deactivated", "instant", "unknown").
        """
        if not self.config.game.allow_cheats:
            logger.warning("Cheat code ignored, cheats are disabled")
            return UNKNOWN

        outcome = self.cheats.execute(code, self.context)
        self.show_message(CHEAT_MESSAGES[outcome].format(code=code.strip().upper()))
        return outcome

    def show_message(self, message: str, duration_ms: int = OVERLAY_DURATION_MS) -> None:
        if self.renderer is None:
            return
        self.overlay_timers.clear_all()
        self.renderer.set_overlay_message(message)
        self.force_render()
        self.overlay_timers.set_timeout(self.clear_message, duration_ms)

    def clear_message(self) -> None:
        if self.renderer is None:
            return
        self.renderer.set_overlay_message("")
        self.force_render()

    def _show_command_buffer(self, text: Optional[str]) -> None:
        if self.renderer is None:
            return
        self.overlay_timers.clear_all()
        self.renderer.set_overlay_message("" if text is None else "/" + text)
        self.force_render()

    def _setup_input(self) -> None:
        if self.input_service is None or self._input_ready:
            return

        self.input_service.initialize()
        self.input_service.on_movement(self.change_direction)
        self.input_service.on_key_press("space", self.toggle_pause)
        self.input_service.on_key_press("r", self.restart)
        self.input_service.on_key_press("q", self.stop)
        if self.config.game.allow_cheats:
            self.input_service.on_command(self.execute_cheat)
            self.input_service.on_command_buffer(self._show_command_buffer)
        self._input_ready = True

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> None:
        if self.renderer is None:
            return
        self.renderer.update_icons(self._current_icons())
        self.renderer.render(self.state.get_state())

    def force_render(self) -> None:
        if self.renderer is None:
            return
        self.renderer.update_icons(self._current_icons())
        self.renderer.force_render(self.state.get_state())

    def _current_icons(self):
        return replace(self.config.icons, background=self.background_icon)
