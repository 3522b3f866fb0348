"""
Random placement of food and obstacles on free cells.

Both functions take the random source explicitly so a seeded
random.Random gives reproducible boards.
"""
import logging
import random

from .config import sanitize_obstacle_limit

logger = logging.getLogger(__name__)


class NoSpaceAvailable(Exception):
    """Raised when the board has no free cell left for food (the player won)."""


def place_food(grid, occupied, rng=random):
    """Pick a free cell uniformly at random; raise NoSpaceAvailable if none."""
    free = grid.free_cells(occupied)
    if not free:
        raise NoSpaceAvailable("no free cell left for food")
    return free[rng.randrange(len(free))]


def place_obstacles(grid, snake_cells, target_count, rng=random):
    """
    Build a fresh obstacle set of min(target_count, free) cells.

    Only the snake is excluded: old obstacles are being replaced wholesale,
    so their cells are fair game again.
    """
    target = sanitize_obstacle_limit(target_count)
    free = grid.free_cells(set(snake_cells))
    rng.shuffle(free)
    obstacles = frozenset(free[:target])
    logger.debug("placed %d obstacles (requested %d)", len(obstacles), target)
    return obstacles
