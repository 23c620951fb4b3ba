"""
Environment overrides for the game configuration.

Values are read from the process environment after ``load_dotenv()`` has merged
a local ``.env`` file. Command line flags win over anything set here.

    SNAKE_DIFFICULTY=medium
    SNAKE_BOARD_WIDTH=30
    SNAKE_BOARD_HEIGHT=20
    SNAKE_SCORE_PER_APPLE=10
    SNAKE_UPDATE_TIME=120          # implies SNAKE_DIFFICULTY=custom
    SNAKE_POWER_UPS=magnet,bonus   # or "all"
    SNAKE_ALLOW_CHEATS=true
    SNAKE_ASCII=true
    SNAKE_LOG_FILE=snake.log
    SNAKE_LOG_LEVEL=INFO
"""

import logging
import os
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from domain.constants import POWER_UP_TYPES

logger = logging.getLogger(__name__)

ENV_PREFIX = "SNAKE_"
DEFAULT_LOG_FILE = "snake.log"
DEFAULT_LOG_LEVEL = "INFO"

_TRUTHY = {"1", "true", "yes", "on"}


def load_environment(dotenv_path: Optional[str] = None) -> None:
    """Merge a .env file into ``os.environ`` without overriding real variables."""
    load_dotenv(dotenv_path)


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool = False) -> bool:
    value = env(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def env_int(name: str) -> Optional[int]:
    value = env(name)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s%s=%r: not an integer", ENV_PREFIX, name, value)
        return None


def parse_power_up_list(raw: Optional[str]) -> List[str]:
    """
    Parse a comma separated power-up list; "all" selects every type.

    Raises:
        ValueError: If a name is not a known power-up type.
    """
    if not raw:
        return []
    names = [name.strip() for name in raw.split(",") if name.strip()]
    if any(name.lower() == "all" for name in names):
        return list(POWER_UP_TYPES)
    unknown = [name for name in names if name not in POWER_UP_TYPES]
    if unknown:
        available = ", ".join(POWER_UP_TYPES)
        raise ValueError(f"Unknown power-up(s) {unknown}. Available: {available}")
    return names


def env_overrides() -> Dict[str, Any]:
    """
    Build a partial config dict (see ``GameConfigBuilder.from_partial_config``)
    from ``SNAKE_*`` environment variables.
    """
    partial: Dict[str, Any] = {"board": {}, "game": {}, "power_ups": {}}

    width = env_int("BOARD_WIDTH")
    height = env_int("BOARD_HEIGHT")
    if width:
        partial["board"]["width"] = width
    if height:
        partial["board"]["height"] = height

    difficulty = env("DIFFICULTY")
    if difficulty:
        partial["game"]["difficulty"] = difficulty.strip().lower()

    score = env_int("SCORE_PER_APPLE")
    if score is not None:
        partial["game"]["score_per_apple"] = score

    update_time = env_int("UPDATE_TIME")
    if update_time:
        partial["game"]["update_time"] = update_time
        partial["game"].setdefault("difficulty", "custom")

    if env("ALLOW_CHEATS") is not None:
        partial["game"]["allow_cheats"] = env_flag("ALLOW_CHEATS")

    for power_up_type in parse_power_up_list(env("POWER_UPS")):
        partial["power_ups"][power_up_type] = {"enabled": True}

    return partial


def log_settings() -> Dict[str, str]:
    return {
        "file": env("LOG_FILE", DEFAULT_LOG_FILE),
        "level": env("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    }
