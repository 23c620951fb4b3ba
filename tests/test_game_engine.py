"""
Tests for core/game_engine.py and core/context.py.

The engine runs headless here: the renderer and input service are mocks, the
scheduler is private to each test and the clock only moves when told to.
"""

import os
import sys
from collections import deque
from unittest.mock import MagicMock, patch

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.builder import GameConfigBuilder
from config.defaults import GROWTH_SINGLE, TELEPORT_FALLBACK_RANDOM
from core.game_engine import GameEngine
from domain.constants import (
    UP, LEFT, RIGHT, REGULAR, EXPANDED,
    MAGNET, SLOW_MOTION, BONUS, INVINCIBILITY, TELEPORT, BOOST, FREEZE,
)
from powerups.manager import create_power_up


@pytest.fixture
def renderer():
    return MagicMock()


@pytest.fixture
def input_service():
    return MagicMock()


@pytest.fixture
def make_engine(scheduler, clock, rng, renderer, input_service):
    def _build(builder=None):
        config = (builder or GameConfigBuilder()).build()
        return GameEngine(
            config=config,
            renderer=renderer,
            input_service=input_service,
            scheduler=scheduler,
            clock=clock,
            rng=rng,
        )
    return _build


@pytest.fixture
def engine(make_engine):
    game = make_engine()
    game.start()
    # Keep the apple out of the snake's way unless a test moves it
    game.apple.position = (0, 0)
    game.sync_state()
    return game


def place_power_up(engine, position, power_up_type, duration=2000):
    power_up = create_power_up(position, power_up_type, engine.scheduler, duration)
    engine.power_up_manager.add_power_up(power_up)
    return power_up


def coil_snake(engine):
    """A snake that bites itself on its next move to the right."""
    engine.snake.positions = deque([(10, 10), (10, 11), (11, 11), (11, 10), (11, 9)])
    engine.snake.direction = RIGHT


class TestStartAndMovement:
    """Scenario A: 20x20 board, snake at (10, 10) heading up."""

    def test_initial_snake(self, make_engine):
        engine = make_engine()
        assert engine.snake.segments == [(10, 10)]
        assert engine.snake.direction == UP

    def test_apple_not_on_snake(self, make_engine):
        engine = make_engine()
        assert engine.apple.position != (10, 10)

    def test_tick_moves_snake(self, engine):
        """One tick moves the head from (10, 10) to (10, 9)."""
        engine.tick()
        assert engine.state.get_state().snake == ((10, 9),)

    def test_start_schedules_tick_and_blink(self, engine):
        assert engine.is_loop_running()
        tags = {tag for job in engine.scheduler.jobs for tag in job.tags}
        assert any(tag.startswith("game-loop") for tag in tags)
        assert any(tag.startswith("blink") for tag in tags)

    def test_start_is_idempotent_for_timers(self, engine):
        """Starting an already running loop does not add jobs."""
        jobs_before = len(engine.scheduler.jobs)
        engine.start_game_loop()
        assert len(engine.scheduler.jobs) == jobs_before

    def test_tick_job_drives_simulation(self, engine, fire_jobs):
        fire_jobs("game-loop")
        assert engine.snake.head == (10, 9)

    def test_start_registers_input(self, engine, input_service):
        input_service.initialize.assert_called_once()
        input_service.on_movement.assert_called_once_with(engine.change_direction)
        registered = {c.args[0] for c in input_service.on_key_press.call_args_list}
        assert {"space", "r", "q"} <= registered
        input_service.on_command.assert_not_called()

    def test_start_renders(self, engine, renderer):
        renderer.force_render.assert_called()

    def test_change_direction(self, engine):
        engine.change_direction(LEFT)
        engine.tick()
        assert engine.snake.head == (9, 10)

    def test_update_time_follows_difficulty(self, make_engine):
        assert make_engine(GameConfigBuilder().set_difficulty("medium")).update_time == 250
        assert make_engine(GameConfigBuilder().set_difficulty("high")).update_time == 70
        custom = GameConfigBuilder().set_difficulty("custom").set_update_time(123)
        assert make_engine(custom).update_time == 123


class TestEatingApples:
    """Scenario B: apple directly ahead is eaten."""

    def test_apple_eaten(self, engine):
        """Score goes up by 5, the snake grows and the apple moves."""
        engine.apple.position = (10, 9)
        engine.tick()

        state = engine.state.get_state()
        assert state.score == 5
        assert state.snake == ((10, 9), (10, 10))
        assert state.apple not in state.snake

    def test_apple_out_of_reach_in_regular_range(self, engine):
        """A diagonal neighbour is not eaten without the magnet."""
        engine.apple.position = (11, 8)
        engine.tick()
        assert engine.state.get_state().score == 0

    def test_eating_rolls_power_up_spawns(self, make_engine):
        builder = GameConfigBuilder().enable_power_up(MAGNET).set_power_up_probability(MAGNET, 1.0)
        engine = make_engine(builder)
        engine.start()
        engine.apple.position = (10, 9)
        engine.tick()

        [marker] = engine.state.get_state().power_ups
        assert marker.type == MAGNET
        assert marker.position not in engine.state.get_state().snake
        assert marker.position != engine.apple.position

    def test_custom_score_per_apple(self, make_engine):
        engine = make_engine(GameConfigBuilder().set_score_per_apple(9))
        engine.start()
        engine.apple.position = (10, 9)
        engine.tick()
        assert engine.state.get_state().score == 9


class TestMagnet:
    """Scenario C: magnet expands the eating range and reverts automatically."""

    def test_magnet_eats_power_up_in_range(self, engine):
        place_power_up(engine, (10, 9), MAGNET)
        engine.tick()
        assert engine.range_policy == EXPANDED

        # Diagonal neighbour of the next head (10, 8)
        place_power_up(engine, (11, 7), BONUS)
        engine.tick()
        assert engine.score_per_apple == 15
        assert engine.power_up_manager.get_active_power_ups() == []

    def test_magnet_eats_apple_in_range(self, engine):
        place_power_up(engine, (10, 9), MAGNET)
        engine.tick()
        engine.apple.position = (9, 7)
        engine.tick()
        assert engine.state.get_state().score == 5

    def test_magnet_reverts_after_duration(self, engine, fire_jobs):
        place_power_up(engine, (10, 9), MAGNET)
        engine.tick()
        assert [p.type for p in engine.state.get_state().active_power_ups] == [MAGNET]

        fire_jobs("expiry")

        assert engine.range_policy == REGULAR
        assert engine.state.get_state().active_power_ups == ()

    def test_strategy_timer_also_reverts(self, engine, fire_jobs):
        """The strategy's own expiry timer restores the range too."""
        place_power_up(engine, (10, 9), MAGNET)
        engine.tick()
        fire_jobs(MAGNET)
        assert engine.range_policy == REGULAR


class TestFreeze:
    """Scenario D: freeze suspends simulation but keeps rendering."""

    def test_frozen_ticks_render_without_moving(self, engine, renderer, fire_jobs):
        place_power_up(engine, (10, 9), FREEZE, duration=1500)
        engine.tick()
        assert engine.frozen

        head = engine.snake.head
        engine.apple.position = (10, 8)
        renderer.render.reset_mock()
        engine.tick()
        engine.tick()

        assert engine.snake.head == head
        assert engine.state.get_state().score == 0
        assert renderer.render.call_count == 2

        fire_jobs("expiry")
        assert not engine.frozen
        engine.tick()
        assert engine.snake.head == (10, 8)


class TestCollisions:
    """Scenario E: self-collision with and without invincibility."""

    def test_self_collision_ends_game(self, engine):
        coil_snake(engine)
        engine.tick()

        assert engine.state.is_game_over()
        assert engine.state.get_state().is_game_over
        assert not engine.is_loop_running()
        assert engine.scheduler.jobs == []

    def test_invincibility_prevents_game_over(self, engine):
        engine.context.set_invincible(True)
        coil_snake(engine)
        engine.tick()
        assert not engine.state.is_game_over()
        assert engine.is_loop_running()

    def test_invincibility_power_up(self, engine, fire_jobs):
        place_power_up(engine, (10, 9), INVINCIBILITY, duration=3000)
        engine.tick()
        assert engine.invincible
        fire_jobs("expiry")
        assert not engine.invincible

    def test_game_over_ignores_ticks_and_movement(self, engine):
        coil_snake(engine)
        engine.tick()
        segments = engine.snake.segments

        engine.tick()
        engine.change_direction(UP)

        assert engine.snake.segments == segments
        assert engine.snake.direction == RIGHT

    def test_game_over_ignores_pause(self, engine):
        coil_snake(engine)
        engine.tick()
        engine.toggle_pause()
        assert not engine.state.is_paused()


class TestPause:
    def test_pause_cancels_timers(self, engine, renderer):
        renderer.force_render.reset_mock()
        engine.toggle_pause()

        assert engine.state.is_paused()
        assert not engine.is_loop_running()
        assert engine.scheduler.jobs == []
        renderer.force_render.assert_called_once()

    def test_paused_tick_does_nothing(self, engine):
        engine.toggle_pause()
        engine.tick()
        assert engine.snake.head == (10, 10)

    def test_resume_recreates_timers(self, engine):
        engine.toggle_pause()
        engine.toggle_pause()
        assert not engine.state.is_paused()
        assert engine.is_loop_running()
        assert len(engine.scheduler.jobs) == 2

    def test_movement_ignored_while_paused(self, engine):
        engine.toggle_pause()
        engine.change_direction(LEFT)
        assert engine.snake.direction == UP


class TestPowerUpEffects:
    """Effects routed through the engine context."""

    def test_slow_motion_restarts_tick_with_new_interval(self, engine):
        place_power_up(engine, (10, 9), SLOW_MOTION)
        engine.tick()

        assert engine.update_time == 1200
        tick_jobs = [j for j in engine.scheduler.jobs if any(str(t).startswith("game-loop") for t in j.tags)]
        assert len(tick_jobs) == 1
        assert tick_jobs[0].interval == pytest.approx(1.2)

    def test_boost_and_restore(self, engine, fire_jobs):
        place_power_up(engine, (10, 9), BOOST, duration=2500)
        engine.tick()
        assert engine.update_time == 900
        fire_jobs("expiry")
        assert engine.update_time == 1000

    def test_bonus_changes_score_per_apple(self, engine):
        place_power_up(engine, (10, 9), BONUS)
        engine.tick()
        engine.apple.position = (10, 8)
        engine.tick()
        assert engine.state.get_state().score == 15

    def test_teleport_moves_head_to_free_cell(self, engine):
        place_power_up(engine, (10, 9), TELEPORT)
        engine.tick()

        head = engine.snake.head
        assert head != (10, 9)
        assert head != engine.apple.position
        assert engine.state.get_state().active_power_ups == ()
        assert engine.state.get_state().snake[0] == head

    def test_power_up_grows_snake(self, engine):
        place_power_up(engine, (10, 9), MAGNET)
        engine.tick()
        assert engine.snake.length == 2

    def test_power_up_removed_from_board(self, engine):
        place_power_up(engine, (10, 9), MAGNET)
        engine.tick()
        assert engine.state.get_state().power_ups == ()

    def test_re_eating_running_type_restarts_effect(self, engine, clock):
        """A second slow motion restores the first before applying."""
        place_power_up(engine, (10, 9), SLOW_MOTION)
        engine.tick()
        clock.advance(500)
        place_power_up(engine, (10, 8), SLOW_MOTION)
        engine.tick()

        assert engine.update_time == 1200
        [active] = engine.state.get_state().active_power_ups
        assert active.start_time == clock.now

    def test_same_tick_growth_cumulative(self, engine):
        engine.apple.position = (10, 9)
        place_power_up(engine, (10, 9), MAGNET)
        engine.tick()
        assert engine.snake.length == 3

    def test_same_tick_growth_single(self, make_engine):
        engine = make_engine(GameConfigBuilder().set_same_tick_growth(GROWTH_SINGLE))
        engine.start()
        engine.apple.position = (10, 9)
        place_power_up(engine, (10, 9), MAGNET)
        engine.tick()
        assert engine.snake.length == 2


class TestTeleportFallback:
    def _fill_board(self, engine):
        engine.validator.generate_valid_position = MagicMock(return_value=None)

    def test_fallback_keeps_current_head(self, engine):
        self._fill_board(engine)
        engine.context.teleport_snake()
        assert engine.snake.head == (10, 10)

    def test_fallback_random(self, make_engine):
        engine = make_engine(GameConfigBuilder().set_teleport_fallback(TELEPORT_FALLBACK_RANDOM))
        self._fill_board(engine)
        with patch("core.context.math_utils.random_position", return_value=(3, 3)):
            engine.context.teleport_snake()
        assert engine.snake.head == (3, 3)

    def test_teleport_search_is_bounded(self, engine):
        engine.validator.generate_valid_position = MagicMock(return_value=(1, 1))
        engine.context.teleport_snake()
        assert engine.validator.generate_valid_position.call_args.kwargs["max_attempts"] == 400


class TestBlink:
    def test_blink_forces_render_in_last_quarter(self, engine, renderer, clock):
        place_power_up(engine, (10, 9), MAGNET, duration=2000)
        engine.tick()

        renderer.force_render.reset_mock()
        engine.check_blink()
        renderer.force_render.assert_not_called()

        clock.advance(1600)
        engine.check_blink()
        assert renderer.force_render.call_count == 1
        assert engine.previous_blink_state

    def test_renders_once_more_when_blinking_stops(self, engine, renderer, clock):
        place_power_up(engine, (10, 9), MAGNET, duration=2000)
        engine.tick()
        clock.advance(1600)
        engine.check_blink()

        clock.advance(1000)
        renderer.force_render.reset_mock()
        engine.check_blink()
        engine.check_blink()

        assert renderer.force_render.call_count == 1
        assert not engine.previous_blink_state


class TestRestartAndStop:
    def test_restart_resets_everything(self, engine, clock):
        place_power_up(engine, (10, 9), SLOW_MOTION)
        engine.tick()
        engine.context.set_invincible(True)
        engine.context.set_game_frozen(True)
        engine.context.set_background_icon("X")
        place_power_up(engine, (0, 5), BONUS)

        engine.restart()

        state = engine.state.get_state()
        assert state.snake == ((10, 10),)
        assert state.score == 0
        assert state.power_ups == ()
        assert state.active_power_ups == ()
        assert not state.is_game_over and not state.is_paused
        assert engine.update_time == 1000
        assert engine.range_policy == REGULAR
        assert not engine.invincible
        assert not engine.frozen
        assert engine.background_icon == engine.config.icons.background
        assert engine.is_loop_running()

    def test_restart_leaves_game_over(self, engine):
        coil_snake(engine)
        engine.tick()
        engine.restart()
        assert not engine.state.is_game_over()
        assert engine.is_loop_running()

    def test_restart_does_not_leak_timers(self, engine):
        place_power_up(engine, (10, 9), BONUS)
        engine.tick()
        engine.restart()
        # Only the fresh tick and blink timers remain
        assert len(engine.scheduler.jobs) == 2

    def test_stop_cancels_all_timers(self, engine, input_service):
        place_power_up(engine, (10, 9), BONUS)
        engine.tick()
        engine.stop()

        assert engine.scheduler.jobs == []
        assert not engine.is_running
        assert engine.score_per_apple == 5
        input_service.destroy.assert_called_once()

    def test_run_loop_exits_after_stop(self, engine, input_service):
        input_service.poll.side_effect = lambda: engine.stop()
        with patch("core.game_engine.time.sleep"):
            engine.run()
        assert not engine.is_running


class TestCheats:
    @pytest.fixture
    def cheat_engine(self, make_engine):
        engine = make_engine(GameConfigBuilder().allow_cheats())
        engine.start()
        return engine

    def test_command_handler_registered(self, cheat_engine, input_service):
        input_service.on_command.assert_called_once_with(cheat_engine.execute_cheat)

    def test_cheats_disabled(self, engine):
        assert engine.execute_cheat("godmode") == "unknown"
        assert not engine.invincible

    def test_godmode_toggle(self, cheat_engine, renderer):
        assert cheat_engine.execute_cheat("godmode") == "activated"
        assert cheat_engine.invincible
        renderer.set_overlay_message.assert_called_with("CHEAT ON: GODMODE")
        assert cheat_engine.execute_cheat("GODMODE") == "deactivated"
        assert not cheat_engine.invincible

    def test_overlay_clears_after_timeout(self, cheat_engine, renderer, fire_jobs):
        cheat_engine.execute_cheat("zoomies")
        fire_jobs("overlay")
        renderer.set_overlay_message.assert_called_with("")

    def test_zoomies_restarts_loop(self, cheat_engine):
        cheat_engine.execute_cheat("zoomies")
        assert cheat_engine.update_time == 500
        assert cheat_engine.is_loop_running()

    def test_revive_from_game_over(self, cheat_engine):
        coil_snake(cheat_engine)
        cheat_engine.tick()
        assert cheat_engine.state.is_game_over()

        assert cheat_engine.execute_cheat("ill-be-back") == "instant"

        assert not cheat_engine.state.is_game_over()
        assert cheat_engine.is_loop_running()

    def test_restart_forgets_cheats(self, cheat_engine):
        cheat_engine.execute_cheat("loot")
        cheat_engine.restart()
        assert cheat_engine.score_per_apple == 5
        assert cheat_engine.cheats.active_cheats() == []
