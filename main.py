"""
Terminal snake with power-ups.

    python main.py --difficulty medium --all-power-ups
    python main.py --power-ups magnet,bonus --cheats --ascii
"""

import argparse
import curses
import logging
import random
import sys
from typing import List, Optional

from config.builder import GameConfigBuilder
from config.defaults import ASCII_ICONS, CUSTOM_DIFFICULTY, VALID_DIFFICULTIES, GameConfig
from config.settings import env_flag, env_overrides, load_environment, log_settings, parse_power_up_list
from core.game_engine import GameEngine
from powerups.strategy_registry import list_power_ups
from services.input_service import InputService
from services.render_service import RenderService

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Play snake in the terminal, with optional power-ups and cheat codes."
    )
    parser.add_argument("--difficulty", type=str, choices=sorted(VALID_DIFFICULTIES),
                        help="Speed tier (easy, medium, high) or custom with --update-time")
    parser.add_argument("--width", type=int, help="Board width in cells")
    parser.add_argument("--height", type=int, help="Board height in cells")
    parser.add_argument("--score-per-apple", type=int, help="Points for each apple")
    parser.add_argument("--update-time", type=int,
                        help="Tick interval in milliseconds (implies --difficulty custom)")
    parser.add_argument("--power-ups", type=str,
                        help="Comma separated power-ups to enable (e.g. 'magnet,bonus')")
    parser.add_argument("--all-power-ups", action="store_true", help="Enable every power-up")
    parser.add_argument("--ascii", action="store_true", help="Plain ASCII glyphs instead of emoji")
    parser.add_argument("--cheats", action="store_true", help="Allow cheat codes (type / then the code)")
    parser.add_argument("--seed", type=int, help="Seed for reproducible spawns")
    parser.add_argument("--log-file", type=str, help="Log file path (the terminal is used by the game)")
    parser.add_argument("--log-level", type=str, help="Logging level (DEBUG, INFO, ...)")
    parser.add_argument("--list-power-ups", action="store_true",
                        help="Print the available power-ups and exit")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GameConfig:
    """
    Defaults, then ``SNAKE_*`` environment variables, then command line flags.

    Raises:
        ValueError: On unknown power-ups, difficulties or invalid sizes.
    """
    builder = GameConfigBuilder.from_partial_config(env_overrides())

    if args.width or args.height:
        builder.set_board_size(
            args.width or builder.config.board.width,
            args.height or builder.config.board.height,
        )
    if args.difficulty:
        builder.set_difficulty(args.difficulty)
    if args.update_time:
        builder.set_update_time(args.update_time)
        if not args.difficulty:
            builder.set_difficulty(CUSTOM_DIFFICULTY)
    if args.score_per_apple is not None:
        builder.set_score_per_apple(args.score_per_apple)

    for power_up_type in parse_power_up_list(args.power_ups):
        builder.enable_power_up(power_up_type)
    if args.all_power_ups:
        builder.enable_all_power_ups()

    if args.cheats:
        builder.allow_cheats()
    if args.ascii or env_flag("ASCII"):
        builder.set_icons(ASCII_ICONS)

    return builder.build()


def setup_logging(args: argparse.Namespace) -> None:
    settings = log_settings()
    level_name = (args.log_level or settings["level"]).upper()
    logging.basicConfig(
        filename=args.log_file or settings["file"],
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def play(screen, config: GameConfig, seed: Optional[int] = None) -> int:
    """Run one session inside a curses window. Returns the final score."""
    try:
        curses.curs_set(0)
    except curses.error:
        logger.debug("Terminal cannot hide the cursor")

    engine = GameEngine(
        config=config,
        renderer=RenderService(config.board, config.icons, screen=screen),
        input_service=InputService(screen),
        rng=random.Random(seed),
    )
    engine.start()
    try:
        engine.run()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        if engine.is_running:
            engine.stop()

    return engine.state.get_state().score


def main(argv: Optional[List[str]] = None) -> int:
    load_environment()
    args = parse_args(argv)

    if args.list_power_ups:
        for info in list_power_ups():
            print(f"{info['key']:<14} {info['kind']:<8} {info['description']}")
        return 0

    setup_logging(args)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.info("Starting game with config: %s", config)
    score = curses.wrapper(play, config, args.seed)
    print(f"Final score: {score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
