#!/usr/bin/env python3
"""
Snake: grid snake with obstacles, a speed setting, high score and a local
leaderboard.

Controls
- Arrow keys / WASD: move
- Space / Enter: start or resume
- P or click on the board: pause / resume
- R: restart            F: give up          N: edit player name (Enter to save)
- + / -: speed          O: obstacles on/off      [ / ]: obstacle limit -/+5
- Esc or window close: quit

Requirements
- Python 3.8+
- pygame 2.x  ->  pip install pygame
"""
import argparse
import logging
import random
import sys

# Try to import pygame with a friendly error if missing.
try:
    import pygame
except ImportError:
    print("This game requires the 'pygame' package.\n"
          "Install it with:\n\n    pip install pygame\n")
    sys.exit(1)

from . import engine
from .config import (
    BOARD_PX, FPS, OBSTACLE_LIMIT_DEFAULT, SPEED_DEFAULT, STORE_PATH,
    WINDOW_H, WINDOW_W, GameConfig,
)
from .render import PygameRenderer
from .session import GameSession
from .storage import JsonFileStore

logger = logging.getLogger(__name__)

KEY_TO_DIR = {
    pygame.K_UP:    engine.UP,
    pygame.K_w:     engine.UP,
    pygame.K_DOWN:  engine.DOWN,
    pygame.K_s:     engine.DOWN,
    pygame.K_LEFT:  engine.LEFT,
    pygame.K_a:     engine.LEFT,
    pygame.K_RIGHT: engine.RIGHT,
    pygame.K_d:     engine.RIGHT,
}
SPEED_UP_KEYS = (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS)
SPEED_DOWN_KEYS = (pygame.K_MINUS, pygame.K_KP_MINUS)
LIMIT_STEP = 5
NAME_MAX_LEN = 16


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play snake.")
    parser.add_argument("--name", default="", help="name recorded on the leaderboard")
    parser.add_argument("--speed", type=int, default=SPEED_DEFAULT, help="speed setting, 1 (slow) to 10 (fast)")
    parser.add_argument("--obstacles", action="store_true", help="start with obstacles enabled")
    parser.add_argument("--obstacle-limit", default=str(OBSTACLE_LIMIT_DEFAULT), help="number of obstacles, 0-100")
    parser.add_argument("--store", default=STORE_PATH, help="file holding high score and leaderboard")
    parser.add_argument("--seed", type=int, default=None, help="seed for food and obstacle placement")
    parser.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ...")
    return parser.parse_args(argv)


class NameEntry:
    """
    Inline editor for the player name.

    While active it swallows key presses: printable characters are
    appended, Backspace deletes, Enter commits through
    session.set_player_name and Esc cancels.
    """

    def __init__(self, max_len=NAME_MAX_LEN):
        self.max_len = max_len
        self.active = False
        self.text = ""

    def begin(self, current=""):
        self.active = True
        self.text = current

    def handle(self, session, key, char=""):
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            session.set_player_name(self.text)
            logger.info("player name set to %s", session.config.player_name)
            self.active = False
        elif key == pygame.K_ESCAPE:
            self.active = False
        elif key == pygame.K_BACKSPACE:
            self.text = self.text[:-1]
        elif char and char.isprintable() and len(self.text) < self.max_len:
            self.text += char


def handle_key(session, key, name_entry=None):
    """Apply one key press to the session. Returns False when the player quits."""
    if key == pygame.K_ESCAPE:
        return False
    if key == pygame.K_n and name_entry is not None:
        name_entry.begin(session.config.player_name)
    elif key in KEY_TO_DIR:
        session.request_direction(KEY_TO_DIR[key])
    elif key == pygame.K_p:
        session.toggle_pause()
    elif key in (pygame.K_SPACE, pygame.K_RETURN):
        session.start()
    elif key == pygame.K_r:
        session.restart()
    elif key == pygame.K_f:
        session.forfeit()
    elif key in SPEED_UP_KEYS:
        session.set_speed(session.config.speed_value + 1)
    elif key in SPEED_DOWN_KEYS:
        session.set_speed(session.config.speed_value - 1)
    elif key == pygame.K_o:
        session.set_obstacles_enabled(not session.config.obstacles_enabled)
    elif key == pygame.K_LEFTBRACKET:
        session.set_obstacle_limit(session.config.obstacle_limit - LIMIT_STEP)
    elif key == pygame.K_RIGHTBRACKET:
        session.set_obstacle_limit(session.config.obstacle_limit + LIMIT_STEP)
    return True


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    config = GameConfig(
        speed_value=args.speed,
        obstacles_enabled=args.obstacles,
        obstacle_limit=args.obstacle_limit,
        player_name=args.name,
    )

    pygame.init()
    screen = pygame.display.set_mode((WINDOW_W, WINDOW_H))
    pygame.display.set_caption("Snake | Arrow keys/WASD | P: Pause | R: Restart | Esc: Quit")
    clock = pygame.time.Clock()

    session = GameSession(
        store=JsonFileStore(args.store),
        config=config,
        renderer=PygameRenderer(screen),
        rng=random.Random(args.seed),
    )
    logger.info("store at %s, high score %d", args.store, session.high_score)

    name_entry = NameEntry()
    running = True
    while running:
        clock.tick(FPS)
        dirty = False
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if name_entry.active:
                    name_entry.handle(session, event.key, event.unicode)
                elif not handle_key(session, event.key, name_entry):
                    running = False
                session.renderer.name_draft = name_entry.text if name_entry.active else None
                dirty = True
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos
                if x < BOARD_PX and y < BOARD_PX:
                    session.click()
                    dirty = True

        # Steps render themselves; redraw here only for state changes from input.
        if session.on_frame(pygame.time.get_ticks()) is None and dirty:
            session.renderer.render(session)

    pygame.quit()


if __name__ == "__main__":
    main()
