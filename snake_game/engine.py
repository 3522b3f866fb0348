"""
Snake simulation core.

A GameState holds everything one play session owns (snake, direction,
food, obstacles, score). step() advances it by exactly one cell and
reports what happened; it never touches the screen, the clock or storage.
"""
import enum
import logging
import random
from collections import deque
from dataclasses import dataclass, field

from .config import START_SNAKE
from .grid import Grid
from .placement import NoSpaceAvailable, place_food, place_obstacles

logger = logging.getLogger(__name__)

# Directions as unit vectors; y grows downwards like screen coordinates.
UP = (0, -1)
DOWN = (0, 1)
LEFT = (-1, 0)
RIGHT = (1, 0)
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)


class StepResult(enum.Enum):
    CONTINUE = "continue"
    ATE = "ate"
    HIT_WALL = "hit_wall"
    HIT_SELF = "hit_self"
    HIT_OBSTACLE = "hit_obstacle"
    WON = "won"

    @property
    def terminal(self):
        return self not in (StepResult.CONTINUE, StepResult.ATE)


def add(a, b):
    return (a[0] + b[0], a[1] + b[1])


def opposite(a, b):
    """True if direction a is the opposite of direction b."""
    return a[0] == -b[0] and a[1] == -b[1]


@dataclass
class GameState:
    snake: deque
    direction: tuple = RIGHT
    pending_direction: tuple = None
    food: tuple = None
    obstacles: frozenset = frozenset()
    score: int = 0
    high_score: int = 0
    grid: Grid = field(default_factory=Grid)

    def __post_init__(self):
        self.snake = deque(self.snake)
        if not self.snake:
            raise ValueError("a snake needs at least one segment")
        if self.pending_direction is None:
            self.pending_direction = self.direction

    @property
    def head(self):
        return self.snake[0]

    def occupied(self):
        """Cells food may not be placed on."""
        return set(self.snake) | self.obstacles


def new_game(grid=None, high_score=0, obstacle_limit=None, rng=random):
    """
    Fresh state: three-segment snake heading right, optional obstacles,
    then food on a free cell.
    """
    state = GameState(
        snake=START_SNAKE,
        direction=RIGHT,
        high_score=high_score,
        grid=grid if grid is not None else Grid(),
    )
    if obstacle_limit is not None:
        state.obstacles = place_obstacles(state.grid, state.snake, obstacle_limit, rng)
    # A fresh board always has room for food; let NoSpaceAvailable surface if not.
    state.food = place_food(state.grid, state.occupied(), rng)
    return state


def request_direction(state, direction):
    """
    Queue a turn for the next step.

    A request that would reverse the direction of the last step is dropped,
    so the previous pending direction stays. Returns True if accepted.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"not a cardinal unit vector: {direction!r}")
    if opposite(direction, state.direction):
        logger.debug("dropped reversing turn %s while heading %s", direction, state.direction)
        return False
    state.pending_direction = direction
    return True


def regenerate_obstacles(state, limit, rng=random):
    """
    Replace the obstacle set wholesale (limit None clears it) and move the
    food if an obstacle landed on it. Raises NoSpaceAvailable when the food
    has nowhere left to go.
    """
    if limit is None:
        state.obstacles = frozenset()
        return state.obstacles
    state.obstacles = place_obstacles(state.grid, state.snake, limit, rng)
    if state.food is not None and state.food in state.obstacles:
        state.food = None
        state.food = place_food(state.grid, state.occupied(), rng)
    return state.obstacles


def step(state, rng=random):
    """Advance the snake one cell and return the StepResult."""
    state.direction = state.pending_direction
    new_head = add(state.head, state.direction)

    if not state.grid.in_bounds(new_head):
        return StepResult.HIT_WALL

    # The tail has not moved yet, so stepping onto it is a collision too.
    if new_head in list(state.snake)[1:]:
        return StepResult.HIT_SELF

    if new_head in state.obstacles:
        return StepResult.HIT_OBSTACLE

    state.snake.appendleft(new_head)

    if new_head != state.food:
        state.snake.pop()
        return StepResult.CONTINUE

    state.score += 1
    if state.score > state.high_score:
        state.high_score = state.score
    state.food = None
    try:
        state.food = place_food(state.grid, state.occupied(), rng)
    except NoSpaceAvailable:
        return StepResult.WON
    return StepResult.ATE
