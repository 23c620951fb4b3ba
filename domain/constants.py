"""
Game constants for the terminal snake game.
"""

from typing import Tuple

Position = Tuple[int, int]
Direction = Tuple[int, int]

# Movement directions (screen coordinates, y grows downwards)
UP: Direction = (0, -1)
DOWN: Direction = (0, 1)
LEFT: Direction = (-1, 0)
RIGHT: Direction = (1, 0)
VALID_DIRECTIONS = {UP, DOWN, LEFT, RIGHT}

# Range policies
REGULAR = "regular"
EXPANDED = "expanded"
VALID_RANGES = {REGULAR, EXPANDED}

# Power-up types
MAGNET = "magnet"
SLOW_MOTION = "slowMotion"
BONUS = "bonus"
INVINCIBILITY = "invincibility"
TELEPORT = "teleport"
BOOST = "boost"
FREEZE = "freeze"
POWER_UP_TYPES = (MAGNET, SLOW_MOTION, BONUS, INVINCIBILITY, TELEPORT, BOOST, FREEZE)

# Effect tuning
SLOW_MOTION_DELAY_MS = 200
BOOST_STEP_MS = 100
MIN_UPDATE_TIME_MS = 30
BONUS_SCORE_PER_APPLE = 15

# Render cadence for the "about to expire" indicator
BLINK_INTERVAL_MS = 125
BLINK_THRESHOLD = 0.25
