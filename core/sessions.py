"""Daily practice statistics."""

import logging
from datetime import date, timedelta
from typing import Callable

from .config import DEFAULT_HISTORY_DAYS, MS_PER_MINUTE
from .models import SessionStat
from .utils import round_half_up

logger = logging.getLogger(__name__)


def elapsed_minutes(elapsed_ms) -> int:
    """Whole minutes for an answer's elapsed time, never negative."""
    return max(0, round_half_up((elapsed_ms or 0) / MS_PER_MINUTE))


class SessionTracker:
    """Aggregates answers into one SessionStat per server-local calendar day."""

    def __init__(self, storage, today: Callable[[], date] | None = None):
        self.storage = storage
        self._today = today or date.today

    def today(self) -> date:
        return self._today()

    def record(self, is_correct: bool, elapsed_ms: int = 0) -> SessionStat:
        """Add one answer to today's totals and return the updated record."""
        today = self.today()
        delta = SessionStat(
            today,
            correct_answers=1 if is_correct else 0,
            incorrect_answers=0 if is_correct else 1,
            total_time_minutes=elapsed_minutes(elapsed_ms),
            words_practiced=1
        )
        self.storage.upsert_session_stat(delta)
        logger.info(f"Updated session stats for {today}: +{delta.correct_answers} correct, "
                    f"+{delta.incorrect_answers} incorrect, +{delta.total_time_minutes} min")
        return self.today_stats()

    def today_stats(self) -> SessionStat:
        """Today's totals, zeroed if nothing was practised yet."""
        today = self.today()
        return self.storage.get_session_stat(today) or SessionStat(today)

    def history(self, days: int = DEFAULT_HISTORY_DAYS) -> list[SessionStat]:
        """Records from the last `days` days, newest first."""
        since = self.today() - timedelta(days=days)
        return self.storage.get_session_history(since)

    @staticmethod
    def summary(history: list[SessionStat]) -> dict:
        days = len(history)
        if days == 0:
            return {'total_days': 0, 'average_correct': 0, 'average_incorrect': 0,
                    'total_time_minutes': 0}
        return {
            'total_days': days,
            'average_correct': round_half_up(sum(s.correct_answers for s in history) / days),
            'average_incorrect': round_half_up(sum(s.incorrect_answers for s in history) / days),
            'total_time_minutes': sum(s.total_time_minutes for s in history)
        }

    def consolidate(self) -> list[dict]:
        """Merge duplicate daily records left behind by racing writers."""
        logger.info("Starting session statistics cleanup...")
        details = self.storage.consolidate_session_stats()
        logger.info(f"Found {len(details)} dates with duplicate entries")
        for detail in details:
            logger.info(f"Consolidated {detail['duplicate_count']} entries for {detail['session_date']}")
        return details
