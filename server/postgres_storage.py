"""PostgreSQL storage implementation."""

import json
import logging
import os
from datetime import date, datetime

import psycopg2
from psycopg2.errors import UniqueViolation
from psycopg2.extras import RealDictCursor

from core.interfaces import DuplicateWordError, Storage
from core.models import SessionStat, Word, WordStat
from core.config import LANGUAGES

logger = logging.getLogger(__name__)


class PostgresStorage(Storage):
    """PostgreSQL-based storage implementation."""

    def __init__(self, config_file: str = None, db_url: str = None):
        self.config_file = config_file or os.path.expanduser('~/.config/slovicka/config.json')
        self.db_url = db_url or os.environ.get(
            'DATABASE_URL',
            'postgresql://localhost:5432/slovicka'
        )
        self._conn = None
        self._initialized = False

    @property
    def conn(self):
        """Lazy connection initialization."""
        if self._conn is None or self._conn.closed:
            self._conn = psycopg2.connect(self.db_url)
            if not self._initialized:
                self._init_db()
                self._initialized = True
        return self._conn

    def _init_db(self):
        """Create tables if they don't exist."""
        with self._conn.cursor() as cur:
            cur.execute("""
                CREATE TABLE IF NOT EXISTS words (
                    id SERIAL PRIMARY KEY,
                    slovak VARCHAR(255) NOT NULL,
                    english VARCHAR(255) NOT NULL,
                    category VARCHAR(100) NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE (slovak, english)
                )
            """)
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_words_category ON words(category)
            """)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS synonyms (
                    id SERIAL PRIMARY KEY,
                    word_id INTEGER NOT NULL REFERENCES words(id) ON DELETE CASCADE,
                    language VARCHAR(20) NOT NULL,
                    synonym VARCHAR(255) NOT NULL
                )
            """)
            cur.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_synonyms_unique
                ON synonyms(word_id, language, LOWER(synonym))
            """)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS user_statistics (
                    word_id INTEGER NOT NULL REFERENCES words(id) ON DELETE CASCADE,
                    direction VARCHAR(10) NOT NULL,
                    correct_count INTEGER NOT NULL DEFAULT 0,
                    incorrect_count INTEGER NOT NULL DEFAULT 0,
                    last_seen TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (word_id, direction)
                )
            """)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS session_statistics (
                    id SERIAL PRIMARY KEY,
                    session_date DATE NOT NULL,
                    correct_answers INTEGER NOT NULL DEFAULT 0,
                    incorrect_answers INTEGER NOT NULL DEFAULT 0,
                    total_time_minutes INTEGER NOT NULL DEFAULT 0,
                    words_practiced INTEGER NOT NULL DEFAULT 0,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            cur.execute("""
                CREATE TABLE IF NOT EXISTS user_preferences (
                    user_id VARCHAR(255) NOT NULL,
                    preference_key VARCHAR(255) NOT NULL,
                    preference_value JSONB,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (user_id, preference_key)
                )
            """)
        self._conn.commit()

        # Older databases may hold duplicate daily rows; merge them before
        # the unique index that the atomic upsert relies on is created.
        self._consolidate(self._conn)
        with self._conn.cursor() as cur:
            cur.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS idx_session_statistics_date
                ON session_statistics(session_date)
            """)
        self._conn.commit()

    def close(self):
        """Close the database connection."""
        if self._conn and not self._conn.closed:
            self._conn.close()

    def load_config(self) -> dict:
        if not os.path.exists(self.config_file):
            raise FileNotFoundError(
                f"Config file not found at {self.config_file}\n"
                f'Please create it with: {{"gemini_api_key": "YOUR_API_KEY_HERE"}}'
            )
        with open(self.config_file, 'r') as f:
            return json.load(f)

    # Words and synonyms

    def _load_synonyms(self, cur, word_ids: list[int]) -> dict:
        synonyms = {word_id: {language: [] for language in LANGUAGES} for word_id in word_ids}
        if not word_ids:
            return synonyms
        cur.execute("""
            SELECT word_id, language, synonym FROM synonyms
            WHERE word_id = ANY(%s)
            ORDER BY id
        """, (word_ids,))
        for row in cur.fetchall():
            synonyms[row['word_id']].setdefault(row['language'], []).append(row['synonym'])
        return synonyms

    def list_words(self, categories: list[str] | None = None) -> list[Word]:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                if categories is None:
                    cur.execute("SELECT id, slovak, english, category FROM words ORDER BY id")
                else:
                    cur.execute("""
                        SELECT id, slovak, english, category FROM words
                        WHERE category = ANY(%s)
                        ORDER BY id
                    """, (list(categories),))
                rows = cur.fetchall()
                synonyms = self._load_synonyms(cur, [row['id'] for row in rows])
                return [Word(row['id'], row['slovak'], row['english'], row['category'],
                             synonyms[row['id']]) for row in rows]
        except Exception as e:
            logger.error(f"Error listing words: {e}")
            self.conn.rollback()
            raise

    def get_word(self, word_id: int) -> Word | None:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    "SELECT id, slovak, english, category FROM words WHERE id = %s",
                    (word_id,)
                )
                row = cur.fetchone()
                if not row:
                    return None
                synonyms = self._load_synonyms(cur, [word_id])
                return Word(row['id'], row['slovak'], row['english'], row['category'],
                            synonyms[word_id])
        except Exception as e:
            logger.error(f"Error getting word {word_id}: {e}")
            self.conn.rollback()
            raise

    def _insert_synonyms(self, cur, word_id: int, synonyms: dict | None) -> None:
        for language in LANGUAGES:
            for synonym in (synonyms or {}).get(language) or []:
                cur.execute("""
                    INSERT INTO synonyms (word_id, language, synonym)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (word_id, language, (LOWER(synonym))) DO NOTHING
                """, (word_id, language, synonym.strip()))

    def add_word(self, slovak: str, english: str, category: str,
                 synonyms: dict | None = None) -> int:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO words (slovak, english, category)
                    VALUES (%s, %s, %s)
                    RETURNING id
                """, (slovak, english, category))
                word_id = cur.fetchone()[0]
                self._insert_synonyms(cur, word_id, synonyms)
            self.conn.commit()
            return word_id
        except UniqueViolation:
            self.conn.rollback()
            raise DuplicateWordError(f"Word {slovak}/{english} already exists")
        except Exception as e:
            logger.error(f"Error adding word: {e}")
            self.conn.rollback()
            raise

    def update_word(self, word_id: int, updates: dict) -> bool:
        fields = [field for field in ('slovak', 'english', 'category') if updates.get(field)]
        try:
            with self.conn.cursor() as cur:
                assignments = ', '.join([f"{field} = %s" for field in fields] +
                                        ['updated_at = CURRENT_TIMESTAMP'])
                cur.execute(
                    f"UPDATE words SET {assignments} WHERE id = %s",
                    [updates[field] for field in fields] + [word_id]
                )
                if cur.rowcount == 0:
                    self.conn.rollback()
                    return False
                if updates.get('synonyms') is not None:
                    cur.execute("DELETE FROM synonyms WHERE word_id = %s", (word_id,))
                    self._insert_synonyms(cur, word_id, updates['synonyms'])
            self.conn.commit()
            return True
        except UniqueViolation:
            self.conn.rollback()
            raise DuplicateWordError(f"Word {updates.get('slovak')}/{updates.get('english')} already exists")
        except Exception as e:
            logger.error(f"Error updating word {word_id}: {e}")
            self.conn.rollback()
            raise

    def delete_word(self, word_id: int) -> int:
        try:
            with self.conn.cursor() as cur:
                cur.execute("DELETE FROM words WHERE id = %s", (word_id,))
                deleted = cur.rowcount
            self.conn.commit()
            return deleted
        except Exception as e:
            logger.error(f"Error deleting word {word_id}: {e}")
            self.conn.rollback()
            raise

    def get_synonyms(self, word_id: int, language: str) -> list[str]:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    SELECT synonym FROM synonyms
                    WHERE word_id = %s AND language = %s
                    ORDER BY id
                """, (word_id, language))
                return [row[0] for row in cur.fetchall()]
        except Exception as e:
            logger.error(f"Error getting synonyms: {e}")
            self.conn.rollback()
            raise

    def add_synonym(self, word_id: int, language: str, synonym: str) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO synonyms (word_id, language, synonym)
                    VALUES (%s, %s, %s)
                    ON CONFLICT (word_id, language, (LOWER(synonym))) DO NOTHING
                """, (word_id, language, synonym.strip()))
                inserted = cur.rowcount > 0
            self.conn.commit()
            return inserted
        except Exception as e:
            logger.error(f"Error adding synonym: {e}")
            self.conn.rollback()
            raise

    def delete_synonym(self, word_id: int, language: str, synonym: str) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    DELETE FROM synonyms
                    WHERE word_id = %s AND language = %s AND LOWER(synonym) = LOWER(%s)
                """, (word_id, language, synonym.strip()))
                deleted = cur.rowcount > 0
            self.conn.commit()
            return deleted
        except Exception as e:
            logger.error(f"Error deleting synonym: {e}")
            self.conn.rollback()
            raise

    # Word statistics

    def get_stat(self, word_id: int, direction: str) -> WordStat:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT correct_count, incorrect_count, last_seen
                    FROM user_statistics
                    WHERE word_id = %s AND direction = %s
                """, (word_id, direction))
                row = cur.fetchone()
                if row:
                    return WordStat(word_id, direction, row['correct_count'],
                                    row['incorrect_count'], row['last_seen'])
                return WordStat(word_id, direction)
        except Exception as e:
            logger.error(f"Error getting word stats: {e}")
            self.conn.rollback()
            raise

    def upsert_stat(self, word_id: int, direction: str, is_correct: bool,
                    seen_at: datetime) -> None:
        correct = 1 if is_correct else 0
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO user_statistics
                        (word_id, direction, correct_count, incorrect_count, last_seen, updated_at)
                    VALUES (%s, %s, %s, %s, %s, CURRENT_TIMESTAMP)
                    ON CONFLICT (word_id, direction) DO UPDATE SET
                        correct_count = user_statistics.correct_count + EXCLUDED.correct_count,
                        incorrect_count = user_statistics.incorrect_count + EXCLUDED.incorrect_count,
                        last_seen = EXCLUDED.last_seen,
                        updated_at = CURRENT_TIMESTAMP
                """, (word_id, direction, correct, 1 - correct, seen_at))
            self.conn.commit()
        except Exception as e:
            logger.error(f"Error updating word stats: {e}")
            self.conn.rollback()
            raise

    def get_all_user_stats(self) -> list[dict]:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT
                        us.word_id,
                        w.slovak,
                        w.english,
                        w.category,
                        us.direction,
                        us.correct_count,
                        us.incorrect_count,
                        us.last_seen,
                        ROUND(
                            CASE
                                WHEN (us.correct_count + us.incorrect_count) = 0 THEN 0
                                ELSE (us.correct_count * 100.0) / (us.correct_count + us.incorrect_count)
                            END, 1
                        )::float AS success_rate
                    FROM user_statistics us
                    JOIN words w ON us.word_id = w.id
                    WHERE us.correct_count > 0 OR us.incorrect_count > 0
                    ORDER BY us.incorrect_count - us.correct_count DESC
                """)
                rows = [dict(row) for row in cur.fetchall()]
                for row in rows:
                    if row['last_seen'] is not None:
                        row['last_seen'] = row['last_seen'].isoformat()
                return rows
        except Exception as e:
            logger.error(f"Error getting user stats: {e}")
            self.conn.rollback()
            raise

    def get_category_stats(self) -> list[dict]:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT
                        w.category,
                        COUNT(DISTINCT w.id) AS word_count,
                        COUNT(DISTINCT s.word_id) AS words_with_synonyms
                    FROM words w
                    LEFT JOIN synonyms s ON w.id = s.word_id
                    GROUP BY w.category
                    ORDER BY w.category
                """)
                return [dict(row) for row in cur.fetchall()]
        except Exception as e:
            logger.error(f"Error getting category stats: {e}")
            self.conn.rollback()
            raise

    # Session statistics

    @staticmethod
    def _session_from_row(row: dict) -> SessionStat:
        return SessionStat(row['session_date'], row['correct_answers'], row['incorrect_answers'],
                           row['total_time_minutes'], row['words_practiced'])

    def get_session_stat(self, session_date: date) -> SessionStat | None:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT session_date, correct_answers, incorrect_answers,
                           total_time_minutes, words_practiced
                    FROM session_statistics
                    WHERE session_date = %s
                """, (session_date,))
                row = cur.fetchone()
                return self._session_from_row(row) if row else None
        except Exception as e:
            logger.error(f"Error getting session stats: {e}")
            self.conn.rollback()
            raise

    def upsert_session_stat(self, delta: SessionStat) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO session_statistics
                        (session_date, correct_answers, incorrect_answers,
                         total_time_minutes, words_practiced)
                    VALUES (%s, %s, %s, %s, %s)
                    ON CONFLICT (session_date) DO UPDATE SET
                        correct_answers = session_statistics.correct_answers + EXCLUDED.correct_answers,
                        incorrect_answers = session_statistics.incorrect_answers + EXCLUDED.incorrect_answers,
                        total_time_minutes = session_statistics.total_time_minutes + EXCLUDED.total_time_minutes,
                        words_practiced = session_statistics.words_practiced + EXCLUDED.words_practiced,
                        updated_at = CURRENT_TIMESTAMP
                """, (delta.session_date, delta.correct_answers, delta.incorrect_answers,
                      delta.total_time_minutes, delta.words_practiced))
            self.conn.commit()
        except Exception as e:
            logger.error(f"Error updating session stats: {e}")
            self.conn.rollback()
            raise

    def get_session_history(self, since: date) -> list[SessionStat]:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT session_date, correct_answers, incorrect_answers,
                           total_time_minutes, words_practiced
                    FROM session_statistics
                    WHERE session_date >= %s
                    ORDER BY session_date DESC
                """, (since,))
                return [self._session_from_row(row) for row in cur.fetchall()]
        except Exception as e:
            logger.error(f"Error getting session history: {e}")
            self.conn.rollback()
            raise

    def _consolidate(self, conn) -> list[dict]:
        """Merge duplicate daily rows in one transaction."""
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT
                        session_date,
                        SUM(correct_answers)::int AS total_correct,
                        SUM(incorrect_answers)::int AS total_incorrect,
                        SUM(total_time_minutes)::int AS total_time,
                        SUM(words_practiced)::int AS total_words,
                        COUNT(*)::int AS duplicate_count
                    FROM session_statistics
                    GROUP BY session_date
                    HAVING COUNT(*) > 1
                    ORDER BY session_date
                """)
                duplicates = [dict(row) for row in cur.fetchall()]
                for duplicate in duplicates:
                    cur.execute(
                        "DELETE FROM session_statistics WHERE session_date = %s",
                        (duplicate['session_date'],)
                    )
                    cur.execute("""
                        INSERT INTO session_statistics
                            (session_date, correct_answers, incorrect_answers,
                             total_time_minutes, words_practiced)
                        VALUES (%s, %s, %s, %s, %s)
                    """, (duplicate['session_date'], duplicate['total_correct'],
                          duplicate['total_incorrect'], duplicate['total_time'],
                          duplicate['total_words']))
            conn.commit()
        except Exception as e:
            logger.error(f"Error consolidating session stats: {e}")
            conn.rollback()
            raise
        for duplicate in duplicates:
            duplicate['session_date'] = duplicate['session_date'].isoformat()
        return duplicates

    def consolidate_session_stats(self) -> list[dict]:
        return self._consolidate(self.conn)

    # Preferences

    def get_preferences(self, user_id: str = "default") -> dict:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute("""
                    SELECT preference_key, preference_value
                    FROM user_preferences
                    WHERE user_id = %s
                """, (user_id,))
                return {row['preference_key']: row['preference_value'] for row in cur.fetchall()}
        except Exception as e:
            logger.error(f"Error loading preferences: {e}")
            self.conn.rollback()
            raise

    def set_preference(self, key: str, value, user_id: str = "default") -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO user_preferences (user_id, preference_key, preference_value, updated_at)
                    VALUES (%s, %s, %s, CURRENT_TIMESTAMP)
                    ON CONFLICT (user_id, preference_key)
                    DO UPDATE SET preference_value = EXCLUDED.preference_value,
                                  updated_at = CURRENT_TIMESTAMP
                """, (user_id, key, json.dumps(value)))
            self.conn.commit()
        except Exception as e:
            logger.error(f"Error saving preference: {e}")
            self.conn.rollback()
            raise
