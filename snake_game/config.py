"""
Tuning constants and runtime options for the snake game.

Tweak GRID_SIZE / TILE_SIZE to change the board, SPEED_MIN_MS / SPEED_MAX_MS
to change how fast the slowest and fastest settings play.
"""
import re
from dataclasses import dataclass

# ----------------------------- Board ------------------------------------- #
GRID_SIZE = 20                                # 20x20 cells
TILE_SIZE = 24                                # pixels per cell
BOARD_PX = GRID_SIZE * TILE_SIZE
PANEL_W = 220                                 # side panel (score, leaderboard)
WINDOW_W, WINDOW_H = BOARD_PX + PANEL_W, BOARD_PX
FPS = 60                                      # render rate; logic uses the tick clock

START_SNAKE = [(8, 10), (7, 10), (6, 10)]     # head first

# ----------------------------- Speed ------------------------------------- #
SPEED_MIN_MS = 70                             # interval at the fastest setting
SPEED_MAX_MS = 220                            # interval at the slowest setting
SPEED_SLIDER_MIN = 1
SPEED_SLIDER_MAX = 10
SPEED_DEFAULT = 5
SPEED_LABELS = [
    "Snail",
    "Leisurely",
    "Slow",
    "Steady",
    "Medium",
    "Brisk",
    "Quick",
    "Fast",
    "Swift",
    "Lightning",
]

# ----------------------------- Obstacles / scores ------------------------ #
OBSTACLE_LIMIT_MAX = 100
OBSTACLE_LIMIT_DEFAULT = 20
LEADERBOARD_SIZE = 5
DEFAULT_PLAYER_NAME = "Player"

# Persistence keys
HIGH_SCORE_KEY = "snake-game-high-score"
LEADERBOARD_KEY = "snake-game-leaderboard"
STORE_PATH = "snake_game_store.json"

# Colors (R, G, B)
BG       = (15, 23, 42)
GRID     = (30, 41, 59)
SNAKE    = (16, 185, 129)
HEAD     = (110, 231, 183)
FOOD     = (248, 113, 113)
OBSTACLE = (99, 102, 241)
TEXT     = (240, 240, 240)
TEXT_DIM = (148, 163, 184)
UI_DIM   = (0, 0, 0, 150)                     # translucent overlay

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def clamp(x, lo, hi):
    return max(lo, min(hi, x))


def sanitize_obstacle_limit(raw):
    """
    Turn a user-supplied obstacle limit into an int in [0, OBSTACLE_LIMIT_MAX].

    Strings are read like a text field: the leading integer counts
    ("12abc" -> 12), anything non-numeric becomes 0.
    """
    if isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if raw != raw or raw in (float("inf"), float("-inf")):
            return 0
        value = int(raw)
    elif isinstance(raw, str):
        match = _LEADING_INT.match(raw)
        if not match:
            return 0
        value = int(match.group(1))
    else:
        return 0
    if value < 0:
        return 0
    return min(value, OBSTACLE_LIMIT_MAX)


def normalize_player_name(raw):
    """Trimmed name, or the default name when nothing usable was typed."""
    if raw is None:
        return DEFAULT_PLAYER_NAME
    return str(raw).strip() or DEFAULT_PLAYER_NAME


def clamp_speed(value):
    try:
        value = int(value)
    except (TypeError, ValueError):
        return SPEED_DEFAULT
    return clamp(value, SPEED_SLIDER_MIN, SPEED_SLIDER_MAX)


def speed_label(value):
    index = value - SPEED_SLIDER_MIN
    if 0 <= index < len(SPEED_LABELS):
        return SPEED_LABELS[index]
    return "Medium"


@dataclass
class GameConfig:
    speed_value: int = SPEED_DEFAULT
    obstacles_enabled: bool = False
    obstacle_limit: int = OBSTACLE_LIMIT_DEFAULT
    player_name: str = DEFAULT_PLAYER_NAME

    def __post_init__(self):
        self.speed_value = clamp_speed(self.speed_value)
        self.obstacles_enabled = bool(self.obstacles_enabled)
        self.obstacle_limit = sanitize_obstacle_limit(self.obstacle_limit)
        self.player_name = normalize_player_name(self.player_name)
