"""Difficulty weights used to pick the next word."""

import logging
from datetime import datetime

from .config import (
    BASELINE_DIFFICULTY, CORRECT_DISCOUNT, MAX_CORRECT_DISCOUNT,
    INCORRECT_PENALTY, RECENCY_BOOST_PER_DAY, MAX_RECENCY_BOOST, MIN_DIFFICULTY
)

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1)
SECONDS_PER_DAY = 60 * 60 * 24


def calculate_difficulty(correct_count: int, incorrect_count: int,
                         last_seen: datetime | None, now: datetime) -> float:
    """Turn a word's answer history into a selection weight.

    Unseen words weigh 1.0. Correct answers shrink the weight by 15% each
    (at most 90%), mistakes grow it by 30% each, and every day since the word
    was last seen adds 10% up to a 3x multiplier. The result is never below 0.05.
    """
    if correct_count + incorrect_count == 0:
        return BASELINE_DIFFICULTY

    difficulty = 1.0
    difficulty *= 1 - min(correct_count * CORRECT_DISCOUNT, MAX_CORRECT_DISCOUNT)
    difficulty *= 1 + incorrect_count * INCORRECT_PENALTY

    days_since = max(0.0, (now - (last_seen or EPOCH)).total_seconds() / SECONDS_PER_DAY)
    difficulty *= 1 + min(days_since * RECENCY_BOOST_PER_DAY, MAX_RECENCY_BOOST)

    return max(difficulty, MIN_DIFFICULTY)


def word_difficulty(storage, word_id: int, direction: str, now: datetime | None = None) -> float:
    """Weight for a (word, direction) pair; 1.0 if its stats cannot be read."""
    now = now or datetime.now()
    try:
        stat = storage.get_stat(word_id, direction)
        return calculate_difficulty(stat.correct_count, stat.incorrect_count, stat.last_seen, now)
    except Exception as e:
        logger.error(f"Error calculating word difficulty for {word_id}/{direction}: {e}")
        return BASELINE_DIFFICULTY
