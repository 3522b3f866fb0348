"""
Game session state machine.

    IDLE --start--> RUNNING <--pause/resume--> PAUSED
    RUNNING/PAUSED --collision, win or forfeit--> ENDED
    any --reset--> IDLE

The host loop calls GameSession.on_frame(now_ms) as often as it likes
(every rendered frame). A step only runs once the tick interval has
elapsed, so frame rate and game speed are independent. Direction input is
queued and consumed on the next tick.
"""
import enum
import logging
import random
import time
from collections import deque

from . import engine
from . import leaderboard as lb
from . import storage
from .config import (
    SPEED_MAX_MS,
    SPEED_MIN_MS,
    SPEED_SLIDER_MAX,
    SPEED_SLIDER_MIN,
    GameConfig,
    clamp_speed,
    normalize_player_name,
    sanitize_obstacle_limit,
    speed_label,
)
from .placement import NoSpaceAvailable

logger = logging.getLogger(__name__)

IDLE_MESSAGE = "Press Start or click the board to begin"
PAUSED_MESSAGE = "Paused - press P, click the board, or Start to resume"
FORFEIT_MESSAGE = "You gave up."
END_MESSAGES = {
    engine.StepResult.HIT_WALL: "You hit the wall!",
    engine.StepResult.HIT_SELF: "You ran into yourself!",
    engine.StepResult.HIT_OBSTACLE: "You hit an obstacle!",
    engine.StepResult.WON: "You win! No space left.",
}


class SessionState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


def speed_to_interval_ms(value, lo=SPEED_SLIDER_MIN, hi=SPEED_SLIDER_MAX):
    """Linear map: lo -> SPEED_MAX_MS (slow), hi -> SPEED_MIN_MS (fast)."""
    ratio = (value - lo) / ((hi - lo) or 1)
    return SPEED_MAX_MS - ratio * (SPEED_MAX_MS - SPEED_MIN_MS)


class TickClock:
    """
    Elapsed-time gate for the repeating tick.

    poll(now) answers "should a step run now?". Nothing fires while the
    clock is cancelled.
    """

    def __init__(self):
        self.armed = False
        self._anchor = None
        self._fire_now = False

    def start(self):
        """Arm the clock; the first poll fires."""
        self.armed = True
        self._fire_now = True
        self._anchor = None

    def cancel(self):
        self.armed = False
        self._fire_now = False
        self._anchor = None

    def restart_window(self):
        """Forget elapsed time; the next full interval starts at the next poll."""
        self._fire_now = False
        self._anchor = None

    def force(self):
        """Make the next poll fire regardless of elapsed time."""
        if self.armed:
            self._fire_now = True

    def poll(self, now, interval):
        if not self.armed:
            return False
        if self._fire_now:
            self._fire_now = False
            self._anchor = now
            return True
        if self._anchor is None:
            self._anchor = now
            return False
        if now - self._anchor >= interval:
            self._anchor = now
            return True
        return False


class GameSession:
    def __init__(self, store=None, config=None, renderer=None, rng=None, wall_clock=None):
        self.store = store if store is not None else storage.MemoryStore()
        self.config = config or GameConfig()
        self.renderer = renderer
        self.rng = rng or random.Random()
        self.wall_clock = wall_clock or (lambda: time.time() * 1000.0)

        self.high_score = storage.load_high_score(self.store)
        self.leaderboard = storage.load_leaderboard(self.store)
        self.clock = TickClock()
        self.commands = deque()
        self.state = SessionState.IDLE
        self.game = None
        self.last_result = None
        self.message = ""
        self._recorded = False
        self.reset()

    # ------------------------------ queries ------------------------------ #
    @property
    def interval_ms(self):
        return speed_to_interval_ms(self.config.speed_value)

    @property
    def speed_label(self):
        return speed_label(self.config.speed_value)

    @property
    def overlay_visible(self):
        return self.state is not SessionState.RUNNING

    @property
    def can_restart(self):
        return self.state is SessionState.ENDED

    # --------------------------- transitions ----------------------------- #
    def reset(self):
        """Throw away the current game and set up a fresh one in IDLE."""
        self.clock.cancel()
        self.commands.clear()
        limit = self.config.obstacle_limit if self.config.obstacles_enabled else None
        self.game = engine.new_game(high_score=self.high_score, obstacle_limit=limit, rng=self.rng)
        self.last_result = None
        self._recorded = False
        self.state = SessionState.IDLE
        self.message = IDLE_MESSAGE
        logger.info("session reset")
        self._render()

    def start(self):
        if self.state is SessionState.IDLE:
            self.state = SessionState.RUNNING
            self.clock.start()
            self.message = ""
            logger.info("session started")
        elif self.state is SessionState.PAUSED:
            self._resume()
        else:
            logger.debug("start ignored in state %s", self.state.value)

    def restart(self):
        self.reset()
        self.start()

    def toggle_pause(self):
        if self.state is SessionState.RUNNING:
            self.state = SessionState.PAUSED
            self.message = PAUSED_MESSAGE
            logger.info("session paused")
        elif self.state is SessionState.PAUSED:
            self._resume()
        else:
            logger.debug("pause ignored in state %s", self.state.value)

    def click(self):
        """Board click: start, resume, pause or (after the end) restart."""
        if self.state is SessionState.IDLE:
            self.start()
        elif self.state is SessionState.ENDED:
            self.restart()
        else:
            self.toggle_pause()

    def forfeit(self):
        if self.state in (SessionState.RUNNING, SessionState.PAUSED):
            self._end(None, FORFEIT_MESSAGE)

    def _resume(self):
        self.state = SessionState.RUNNING
        self.message = ""
        self.clock.restart_window()
        logger.info("session resumed")

    def _end(self, result, message):
        self.clock.cancel()
        self.commands.clear()
        self.state = SessionState.ENDED
        self.last_result = result
        self.message = message
        logger.info("session ended (%s) with score %d",
                    result.value if result else "forfeit", self.game.score)
        if self.game.score > 0 and not self._recorded:
            self._recorded = True
            self.record_score(self.game.score)

    # ------------------------------- input ------------------------------- #
    def request_direction(self, direction):
        """Queue a direction for the next tick; dropped while paused or after the end."""
        if self.state in (SessionState.PAUSED, SessionState.ENDED):
            logger.debug("direction %s ignored in state %s", direction, self.state.value)
            return False
        if tuple(direction) not in engine.DIRECTIONS:
            logger.debug("ignoring invalid direction %r", direction)
            return False
        self.commands.append(tuple(direction))
        return True

    def _drain_commands(self):
        while self.commands:
            engine.request_direction(self.game, self.commands.popleft())

    # --------------------------- configuration --------------------------- #
    def set_speed(self, value):
        self.config.speed_value = clamp_speed(value)
        # Apply the new speed right away instead of waiting out the old interval.
        if self.state is SessionState.RUNNING:
            self.clock.force()

    def set_player_name(self, raw):
        self.config.player_name = normalize_player_name(raw)

    def set_obstacles_enabled(self, enabled):
        self.config.obstacles_enabled = bool(enabled)
        self._refresh_obstacles()

    def set_obstacle_limit(self, raw):
        self.config.obstacle_limit = sanitize_obstacle_limit(raw)
        if self.config.obstacles_enabled:
            self._refresh_obstacles()
        return self.config.obstacle_limit

    def _refresh_obstacles(self):
        limit = self.config.obstacle_limit if self.config.obstacles_enabled else None
        try:
            engine.regenerate_obstacles(self.game, limit, self.rng)
        except NoSpaceAvailable:
            self._end(engine.StepResult.WON, END_MESSAGES[engine.StepResult.WON])
        self._render()

    # ------------------------------- ticking ----------------------------- #
    def on_frame(self, now_ms):
        """
        Host-loop callback. Runs at most one step and returns its result,
        or None when no step was due.
        """
        if self.state is not SessionState.RUNNING:
            return None
        if not self.clock.poll(now_ms, self.interval_ms):
            return None
        return self.tick()

    def tick(self):
        """Run exactly one simulation step."""
        self._drain_commands()
        result = engine.step(self.game, self.rng)
        logger.debug("step -> %s (score %d)", result.value, self.game.score)
        if self.game.high_score > self.high_score:
            self.high_score = self.game.high_score
            storage.save_high_score(self.store, self.high_score)
        if result.terminal:
            self._end(result, END_MESSAGES[result])
        self._render()
        return result

    # ---------------------------- leaderboard ---------------------------- #
    def record_score(self, score):
        entry = lb.LeaderboardEntry(
            name=normalize_player_name(self.config.player_name),
            score=score,
            timestamp=self.wall_clock(),
        )
        self.leaderboard = lb.insert(self.leaderboard, entry)
        storage.save_leaderboard(self.store, self.leaderboard)
        logger.info("recorded %s: %d", entry.name, entry.score)
        return entry

    def _render(self):
        if self.renderer is not None:
            self.renderer.render(self)
