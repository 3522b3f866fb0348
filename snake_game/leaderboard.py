"""
Local top-N leaderboard.

Entries are ranked by score (highest first); on equal scores the earlier
timestamp wins. Stored as a JSON array of {name, score, timestamp}.
"""
import json
import logging
from dataclasses import asdict, dataclass

from .config import LEADERBOARD_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    score: int
    timestamp: float


def _rank(entry):
    return (-entry.score, entry.timestamp)


def insert(leaderboard, entry, size=LEADERBOARD_SIZE):
    """Return a new leaderboard with 'entry' ranked in and the tail cut to 'size'."""
    ranked = sorted(list(leaderboard) + [entry], key=_rank)
    return ranked[:size]


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_entry(raw):
    if not isinstance(raw, dict):
        return None
    name, score = raw.get("name"), raw.get("score")
    if not isinstance(name, str) or not _is_number(score) or score < 0:
        return None
    timestamp = raw.get("timestamp", 0)
    if not _is_number(timestamp):
        return None
    return LeaderboardEntry(name=name, score=score, timestamp=timestamp)


def loads(text, size=LEADERBOARD_SIZE):
    """
    Parse a stored leaderboard.

    Anything unreadable yields an empty board; malformed entries are
    dropped one by one rather than discarding the rest.
    """
    if not text:
        return []
    try:
        data = json.loads(text)
    except (TypeError, ValueError):
        logger.warning("stored leaderboard is not valid JSON; starting empty")
        return []
    if not isinstance(data, list):
        logger.warning("stored leaderboard is not a list; starting empty")
        return []
    entries = [e for e in (_parse_entry(raw) for raw in data) if e is not None]
    if len(entries) != len(data):
        logger.warning("dropped %d malformed leaderboard entries", len(data) - len(entries))
    return entries[:size]


def dumps(leaderboard):
    return json.dumps([asdict(entry) for entry in leaderboard])
