"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod
from datetime import date, datetime

from .models import SessionStat, Word, WordStat


class DuplicateWordError(Exception):
    """Raised when a word pair already exists in storage."""


class ValidationOracle(ABC):
    """Abstract base class for the AI translation validator."""

    @abstractmethod
    def validate(self, source_text: str, target_language: str, known_translation: str,
                 candidate_text: str, existing_synonyms: list[str]) -> dict:
        """Judge a candidate translation.

        Returns {valid: bool, confidence: float in [0, 1], explanation: str}.
        Implementations fail closed: any error yields valid=False.
        """
        pass


class Storage(ABC):
    """Abstract base class for vocabulary, statistics and preference storage."""

    @abstractmethod
    def load_config(self) -> dict:
        """Load configuration. Returns config dict."""
        pass

    # Words and synonyms

    @abstractmethod
    def list_words(self, categories: list[str] | None = None) -> list[Word]:
        """List words (with synonyms) ordered by id, optionally filtered by category."""
        pass

    @abstractmethod
    def get_word(self, word_id: int) -> Word | None:
        """Get a single word with synonyms, or None."""
        pass

    @abstractmethod
    def add_word(self, slovak: str, english: str, category: str,
                 synonyms: dict | None = None) -> int:
        """Insert a word and its synonyms atomically. Returns the new id.
        Raises DuplicateWordError if the pair exists."""
        pass

    @abstractmethod
    def update_word(self, word_id: int, updates: dict) -> bool:
        """Update slovak/english/category; replace synonyms if 'synonyms' given.
        Returns False if the word does not exist."""
        pass

    @abstractmethod
    def delete_word(self, word_id: int) -> int:
        """Delete a word with its synonyms and stats. Returns number of words deleted."""
        pass

    @abstractmethod
    def get_synonyms(self, word_id: int, language: str) -> list[str]:
        """Get synonyms of a word in one language."""
        pass

    @abstractmethod
    def add_synonym(self, word_id: int, language: str, synonym: str) -> bool:
        """Add a synonym unless an equal one (case-insensitive) exists.
        Returns True if a row was inserted."""
        pass

    @abstractmethod
    def delete_synonym(self, word_id: int, language: str, synonym: str) -> bool:
        """Remove a synonym (case-insensitive). Returns True if one was removed."""
        pass

    # Word statistics

    @abstractmethod
    def get_stat(self, word_id: int, direction: str) -> WordStat:
        """Get stats for a word and direction; zero counts if never answered."""
        pass

    @abstractmethod
    def upsert_stat(self, word_id: int, direction: str, is_correct: bool,
                    seen_at: datetime) -> None:
        """Atomically add one answer to the stats and set last_seen."""
        pass

    @abstractmethod
    def get_all_user_stats(self) -> list[dict]:
        """Per (word, direction) stats joined with word text, hardest first."""
        pass

    @abstractmethod
    def get_category_stats(self) -> list[dict]:
        """Per category {category, word_count, words_with_synonyms}."""
        pass

    # Session statistics

    @abstractmethod
    def get_session_stat(self, session_date: date) -> SessionStat | None:
        """Get the record for a date, or None."""
        pass

    @abstractmethod
    def upsert_session_stat(self, delta: SessionStat) -> None:
        """Atomically insert the delta or add it to the record of its date."""
        pass

    @abstractmethod
    def get_session_history(self, since: date) -> list[SessionStat]:
        """Records on or after a date, newest first."""
        pass

    @abstractmethod
    def consolidate_session_stats(self) -> list[dict]:
        """Collapse duplicate records per date into one summed record.

        Runs atomically. Returns one detail dict per repaired date:
        {session_date, total_correct, total_incorrect, total_time, total_words, duplicate_count}.
        """
        pass

    # Preferences

    @abstractmethod
    def get_preferences(self, user_id: str = "default") -> dict:
        """Get all preferences of a user."""
        pass

    @abstractmethod
    def set_preference(self, key: str, value, user_id: str = "default") -> None:
        """Store a JSON-serialisable preference value."""
        pass
