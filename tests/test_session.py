import math

import pytest

from snake_game.config import HIGH_SCORE_KEY, LEADERBOARD_KEY, GameConfig
from snake_game.engine import DOWN, LEFT, RIGHT, UP, GameState, StepResult
from snake_game.grid import Grid
from snake_game.session import (
    FORFEIT_MESSAGE, IDLE_MESSAGE, PAUSED_MESSAGE, GameSession, SessionState, TickClock,
    speed_to_interval_ms,
)
from snake_game.storage import MemoryStore


def put_game(session, snake, direction, food=(15, 15), **kwargs):
    session.game = GameState(snake=snake, direction=direction, food=food,
                             high_score=session.high_score, **kwargs)
    return session.game


class TestSpeedMapping:
    def test_end_points(self):
        """Slowest setting is 220ms, fastest is 70ms."""
        assert speed_to_interval_ms(1, 1, 10) == 220
        assert speed_to_interval_ms(10, 1, 10) == 70

    def test_monotonic(self):
        """A higher setting never gives a longer interval."""
        values = [speed_to_interval_ms(v, 1, 10) for v in range(1, 11)]
        assert values == sorted(values, reverse=True)

    def test_degenerate_range(self):
        """min == max does not divide by zero."""
        assert speed_to_interval_ms(3, 3, 3) == 220


class TestTickClock:
    def test_idle_clock_never_fires(self):
        """An unarmed clock never fires."""
        clock = TickClock()
        assert clock.poll(10_000, 100) is False

    def test_first_poll_fires_then_waits(self):
        """After start the first poll fires, later ones wait a full interval."""
        clock = TickClock()
        clock.start()
        assert clock.poll(0, 100) is True
        assert clock.poll(99, 100) is False
        assert clock.poll(100, 100) is True
        assert clock.poll(150, 100) is False

    def test_restart_window_waits_full_interval(self):
        """After a window restart the next step is a full interval away."""
        clock = TickClock()
        clock.start()
        clock.poll(0, 100)
        clock.restart_window()
        assert clock.poll(500, 100) is False
        assert clock.poll(599, 100) is False
        assert clock.poll(600, 100) is True

    def test_force_fires_immediately(self):
        """force() makes the next poll fire."""
        clock = TickClock()
        clock.start()
        clock.poll(0, 100)
        clock.force()
        assert clock.poll(1, 100) is True

    def test_cancel_stops(self):
        """A cancelled clock ignores force() and elapsed time."""
        clock = TickClock()
        clock.start()
        clock.cancel()
        clock.force()
        assert clock.poll(1_000, 100) is False


class TestTransitions:
    def test_starts_idle(self, session, renderer):
        """A new session is idle, shows the start message and has been drawn."""
        assert session.state is SessionState.IDLE
        assert session.message == IDLE_MESSAGE
        assert session.overlay_visible
        renderer.render.assert_called_with(session)

    def test_idle_does_not_tick(self, session):
        """No steps run before start."""
        head = session.game.head
        assert session.on_frame(10_000) is None
        assert session.game.head == head

    def test_start_runs_first_step_immediately(self, session):
        """Starting begins ticking; the first frame steps."""
        session.start()
        assert session.state is SessionState.RUNNING
        assert session.on_frame(0) is not None
        assert session.game.head == (9, 10)

    def test_steps_follow_interval(self, session):
        """Frames inside the interval do nothing."""
        session.start()
        session.on_frame(0)
        interval = session.interval_ms
        assert session.on_frame(interval - 1) is None
        assert session.on_frame(interval) is not None

    def test_pause_and_resume(self, session):
        """Paused frames do nothing; resuming waits a fresh interval."""
        session.start()
        session.on_frame(0)
        session.toggle_pause()
        assert session.state is SessionState.PAUSED
        assert session.message == PAUSED_MESSAGE
        head = session.game.head
        assert session.on_frame(5_000) is None
        assert session.game.head == head

        session.toggle_pause()
        assert session.state is SessionState.RUNNING
        assert session.on_frame(6_000) is None
        assert session.on_frame(6_000 + session.interval_ms - 1) is None
        assert session.on_frame(6_000 + math.ceil(session.interval_ms)) is not None

    def test_start_resumes_from_pause(self, session):
        """start() while paused resumes."""
        session.start()
        session.toggle_pause()
        session.start()
        assert session.state is SessionState.RUNNING

    def test_pause_ignored_when_idle(self, session):
        """Pause does nothing before the game starts."""
        session.toggle_pause()
        assert session.state is SessionState.IDLE

    def test_wall_ends_session(self, session):
        """A wall hit ends the session and stops the clock."""
        session.start()
        put_game(session, [(0, 5), (1, 5), (2, 5)], LEFT)
        assert session.tick() is StepResult.HIT_WALL
        assert session.state is SessionState.ENDED
        assert session.last_result is StepResult.HIT_WALL
        assert session.message == "You hit the wall!"
        assert list(session.game.snake) == [(0, 5), (1, 5), (2, 5)]
        assert session.on_frame(100_000) is None
        assert session.can_restart

    def test_start_ignored_after_end(self, session):
        """An ended session only leaves ENDED through reset."""
        session.start()
        put_game(session, [(0, 5), (1, 5)], LEFT)
        session.tick()
        session.start()
        assert session.state is SessionState.ENDED

    def test_reset_builds_fresh_game(self, session):
        """Reset returns to idle with a new snake and zero score."""
        session.start()
        put_game(session, [(0, 5), (1, 5)], LEFT, score=4)
        session.tick()
        session.reset()
        assert session.state is SessionState.IDLE
        assert session.game.score == 0
        assert list(session.game.snake) == [(8, 10), (7, 10), (6, 10)]
        assert session.last_result is None

    def test_restart(self, session):
        """Restart resets and starts in one go."""
        session.start()
        session.on_frame(0)
        session.restart()
        assert session.state is SessionState.RUNNING
        assert session.game.head == (8, 10)

    def test_click_cycle(self, session):
        """Board clicks start, pause, resume and restart after the end."""
        session.click()
        assert session.state is SessionState.RUNNING
        session.click()
        assert session.state is SessionState.PAUSED
        session.click()
        assert session.state is SessionState.RUNNING
        put_game(session, [(0, 5), (1, 5)], LEFT)
        session.tick()
        session.click()
        assert session.state is SessionState.RUNNING
        assert session.game.score == 0

    def test_forfeit(self, session):
        """Giving up ends a running game."""
        session.start()
        session.forfeit()
        assert session.state is SessionState.ENDED
        assert session.message == FORFEIT_MESSAGE
        assert session.last_result is None


class TestInput:
    def test_direction_applied_on_tick(self, session):
        """Queued directions take effect on the next step."""
        session.start()
        session.request_direction(UP)
        assert session.game.direction == RIGHT
        session.tick()
        assert session.game.head == (8, 9)

    def test_reversal_dropped(self, session):
        """A reversal is dropped and the snake keeps heading down into itself."""
        session.start()
        put_game(session, [(5, 5), (5, 6), (5, 7)], DOWN)
        session.request_direction(UP)
        assert session.tick() is StepResult.HIT_SELF
        assert session.game.direction == DOWN

    def test_ignored_while_paused(self, session):
        """Direction input is dropped while paused."""
        session.start()
        session.toggle_pause()
        assert session.request_direction(UP) is False
        assert not session.commands

    def test_turn_before_start_drives_first_step(self, session):
        """A turn pressed while idle is kept and used by the first step."""
        assert session.request_direction(UP) is True
        session.start()
        session.on_frame(0)
        assert session.game.head == (8, 9)

    def test_ignored_after_end(self, session):
        """Direction input is dropped once the game has ended."""
        session.start()
        put_game(session, [(0, 5), (1, 5)], LEFT)
        session.tick()
        assert session.request_direction(UP) is False
        assert not session.commands

    def test_invalid_vector_ignored(self, session):
        """Non-cardinal vectors never reach the engine."""
        session.start()
        assert session.request_direction((1, 1)) is False


class TestScoring:
    def test_high_score_persisted_on_eat(self, session, store):
        """Eating past the high score stores it immediately."""
        session.start()
        put_game(session, [(8, 10), (7, 10)], RIGHT, food=(9, 10))
        assert session.tick() is StepResult.ATE
        assert session.high_score == 1
        assert store.get(HIGH_SCORE_KEY) == "1"

    def test_high_score_loaded(self, renderer, rng):
        """A stored high score is picked up at start-up."""
        session = GameSession(store=MemoryStore({HIGH_SCORE_KEY: "17"}), renderer=renderer, rng=rng)
        assert session.high_score == 17
        assert session.game.high_score == 17

    def test_score_recorded_once(self, session, store):
        """A finished game with points lands on the leaderboard exactly once."""
        session.config.player_name = "Ada"
        session.start()
        put_game(session, [(0, 5), (1, 5)], LEFT, score=3)
        session.tick()
        session.forfeit()
        session.on_frame(10**6)
        assert [(e.name, e.score) for e in session.leaderboard] == [("Ada", 3)]
        assert '"Ada"' in store.get(LEADERBOARD_KEY)

    def test_zero_score_not_recorded(self, session, store):
        """Games ending on zero points are not recorded."""
        session.start()
        put_game(session, [(0, 5), (1, 5)], LEFT)
        session.tick()
        assert session.leaderboard == []
        assert store.get(LEADERBOARD_KEY) is None

    def test_reset_midgame_not_recorded(self, session):
        """Restarting a running game discards its score."""
        session.start()
        put_game(session, [(8, 10), (7, 10)], RIGHT, score=9)
        session.restart()
        assert session.leaderboard == []

    def test_win_ends_session(self, session):
        """Eating the last free cell wins."""
        session.start()
        put_game(session, [(1, 1), (1, 0), (0, 0)], LEFT, food=(0, 1), grid=Grid(size=2))
        assert session.tick() is StepResult.WON
        assert session.state is SessionState.ENDED
        assert session.message == "You win! No space left."
        assert session.leaderboard[0].score == 1


class TestConfiguration:
    def test_speed_change_forces_tick(self, session):
        """Changing speed while running steps on the next frame."""
        session.start()
        session.on_frame(0)
        session.set_speed(9)
        assert session.interval_ms == pytest.approx(speed_to_interval_ms(9))
        assert session.on_frame(1) is not None

    def test_speed_clamped(self, session):
        """Speed stays inside the slider range."""
        session.set_speed(99)
        assert session.config.speed_value == 10
        assert session.speed_label == "Lightning"

    def test_obstacle_toggle(self, session, renderer):
        """Enabling obstacles places them; disabling clears them."""
        renderer.reset_mock()
        session.set_obstacles_enabled(True)
        game = session.game
        assert len(game.obstacles) == session.config.obstacle_limit
        assert not game.obstacles & set(game.snake)
        assert game.food not in game.obstacles
        renderer.render.assert_called_once_with(session)
        session.set_obstacles_enabled(False)
        assert session.game.obstacles == frozenset()

    def test_limit_change_regenerates_when_enabled(self, session):
        """A new limit rebuilds the obstacle set only while obstacles are on."""
        assert session.set_obstacle_limit("35") == 35
        assert session.game.obstacles == frozenset()
        session.set_obstacles_enabled(True)
        assert session.set_obstacle_limit("abc") == 0
        assert session.game.obstacles == frozenset()
        session.set_obstacle_limit(500)
        assert len(session.game.obstacles) == 100

    def test_obstacles_survive_reset(self, rng, renderer):
        """Reset regenerates obstacles when they are enabled."""
        config = GameConfig(obstacles_enabled=True, obstacle_limit=12)
        session = GameSession(config=config, renderer=renderer, rng=rng)
        assert len(session.game.obstacles) == 12
        session.reset()
        assert len(session.game.obstacles) == 12

    def test_no_room_after_regeneration_wins(self, session):
        """Obstacles that leave no room for food end the game as a win."""
        put_game(session, [(0, 0)], RIGHT, food=(2, 2), grid=Grid(size=3))
        session.config.obstacles_enabled = True
        session.set_obstacle_limit(8)
        assert session.state is SessionState.ENDED
        assert session.last_result is StepResult.WON

    def test_player_name_normalized(self, session):
        """Blank names fall back to the default."""
        session.set_player_name("   ")
        assert session.config.player_name == "Player"
        session.set_player_name("  Grace ")
        assert session.config.player_name == "Grace"
