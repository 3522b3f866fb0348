"""
String key-value persistence for the high score and leaderboard.

JsonFileStore keeps everything in one small JSON object on disk; a
missing or broken file just means "nothing saved yet".
"""
import json
import logging
import os
from abc import ABC, abstractmethod

from . import leaderboard as lb
from .config import HIGH_SCORE_KEY, LEADERBOARD_KEY

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key):
        """Stored string for key, or None."""

    @abstractmethod
    def set(self, key, value):
        """Store a string value under key."""


class MemoryStore(KeyValueStore):
    def __init__(self, data=None):
        self.data = dict(data or {})

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = str(value)


class JsonFileStore(KeyValueStore):
    def __init__(self, path):
        self.path = path
        self._data = self._read()

    def _read(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("could not read %s (%s); starting fresh", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("%s does not hold a JSON object; starting fresh", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = str(value)
        try:
            with open(self.path, "w") as f:
                json.dump(self._data, f)
        except OSError as e:
            logger.warning("could not save %s: %s", self.path, e)


def load_high_score(store):
    raw = store.get(HIGH_SCORE_KEY)
    if raw is None:
        return 0
    try:
        return max(0, int(raw))
    except (TypeError, ValueError):
        logger.warning("ignoring stored high score %r", raw)
        return 0


def save_high_score(store, score):
    store.set(HIGH_SCORE_KEY, str(int(score)))


def load_leaderboard(store):
    return lb.loads(store.get(LEADERBOARD_KEY))


def save_leaderboard(store, entries):
    store.set(LEADERBOARD_KEY, lb.dumps(entries))
