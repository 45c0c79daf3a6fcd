"""Weighted-random selection of the next word to practise."""

import logging
import random
from datetime import datetime

from .config import DIRECTIONS
from .difficulty import word_difficulty
from .models import NextWord

logger = logging.getLogger(__name__)


def weighted_choice(items: list, weights: list[float], rng: random.Random):
    """Roulette-wheel pick. Returns (index, item), or (None, None) for no items.

    Walks the list subtracting weights from a uniform draw in [0, total) and
    returns the first item that brings it to <= 0. If float drift lets the walk
    run off the end, the first item is returned.
    """
    if not items:
        return None, None

    total = sum(weights)
    r = rng.random() * total
    for index, (item, weight) in enumerate(zip(items, weights)):
        r -= weight
        if r <= 0:
            return index, item

    logger.warning(f"Weighted walk exhausted {len(items)} candidates, falling back to first")
    return 0, items[0]


class WordSelector:
    """Picks the next (word, direction) pair, favouring difficult words."""

    def __init__(self, storage, rng: random.Random | None = None):
        self.storage = storage
        self.rng = rng or random.Random()

    def get_candidates(self, enabled_categories, enabled_directions) -> list[tuple]:
        """All (word, direction) pairs eligible for practice, in id then direction order."""
        directions = [d for d in DIRECTIONS if d in set(enabled_directions)]
        if not enabled_categories or not directions:
            return []

        words = self.storage.list_words(sorted(set(enabled_categories)))
        words = sorted(words, key=lambda w: w.id)
        return [(word, direction) for word in words for direction in directions]

    def select_next(self, enabled_categories, enabled_directions,
                    now: datetime | None = None) -> NextWord | None:
        """Draw the next word, or None when nothing is eligible."""
        if not enabled_categories or not enabled_directions:
            return None

        candidates = self.get_candidates(enabled_categories, enabled_directions)
        if not candidates:
            return None

        now = now or datetime.now()
        weights = [word_difficulty(self.storage, word.id, direction, now)
                   for word, direction in candidates]

        index, (word, direction) = weighted_choice(candidates, weights, self.rng)
        return NextWord(word, direction, weights[index])
