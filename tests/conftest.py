import os
import random
import sys
from unittest.mock import Mock

import pytest

# Make the package importable without installing it
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from snake_game.config import GameConfig
from snake_game.session import GameSession
from snake_game.storage import MemoryStore


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def renderer():
    return Mock()


@pytest.fixture
def session(store, renderer, rng):
    clock = iter(range(1000, 100000, 10))
    return GameSession(
        store=store,
        config=GameConfig(),
        renderer=renderer,
        rng=rng,
        wall_clock=lambda: next(clock),
    )
