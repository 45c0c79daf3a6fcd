"""Domain models for slovicka application."""

from datetime import date, datetime

from .config import LANGUAGES, SOURCE_LANGUAGE
from .utils import success_rate, source_language_for, target_language_for


def _parse_datetime(value) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _parse_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


class Word:
    """A Slovak/English word pair with its synonyms."""

    def __init__(self, id: int, slovak: str, english: str, category: str,
                 synonyms: dict | None = None):
        self.id = id
        self.slovak = slovak
        self.english = english
        self.category = category
        self.synonyms = {language: [] for language in LANGUAGES}
        if synonyms:
            for language in LANGUAGES:
                self.synonyms[language] = list(synonyms.get(language) or [])

    def text(self, language: str) -> str:
        """The word as written in the given language."""
        return self.slovak if language == SOURCE_LANGUAGE else self.english

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'slovak': self.slovak,
            'english': self.english,
            'category': self.category,
            'synonyms': {language: list(items) for language, items in self.synonyms.items()}
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Word':
        return cls(data['id'], data['slovak'], data['english'], data['category'],
                   data.get('synonyms'))


class WordStat:
    """Answer history of one word in one direction."""

    def __init__(self, word_id: int, direction: str, correct_count: int = 0,
                 incorrect_count: int = 0, last_seen: datetime | None = None):
        self.word_id = word_id
        self.direction = direction
        self.correct_count = correct_count
        self.incorrect_count = incorrect_count
        self.last_seen = last_seen

    @property
    def total(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def success_rate(self) -> float:
        return success_rate(self.correct_count, self.incorrect_count)

    def to_dict(self) -> dict:
        return {
            'word_id': self.word_id,
            'direction': self.direction,
            'correct_count': self.correct_count,
            'incorrect_count': self.incorrect_count,
            'last_seen': self.last_seen.isoformat() if self.last_seen else None
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WordStat':
        return cls(
            data['word_id'],
            data['direction'],
            data.get('correct_count', 0),
            data.get('incorrect_count', 0),
            _parse_datetime(data.get('last_seen'))
        )


class SessionStat:
    """Practice totals for one calendar day.

    Also used as the delta passed to Storage.upsert_session_stat, where each
    field is added to the stored record for the same date.
    """

    def __init__(self, session_date: date, correct_answers: int = 0,
                 incorrect_answers: int = 0, total_time_minutes: int = 0,
                 words_practiced: int = 0):
        self.session_date = session_date
        self.correct_answers = correct_answers
        self.incorrect_answers = incorrect_answers
        self.total_time_minutes = total_time_minutes
        self.words_practiced = words_practiced

    @property
    def success_rate(self) -> float:
        return success_rate(self.correct_answers, self.incorrect_answers)

    def add(self, other: 'SessionStat') -> None:
        """Accumulate another record's counters into this one."""
        self.correct_answers += other.correct_answers
        self.incorrect_answers += other.incorrect_answers
        self.total_time_minutes += other.total_time_minutes
        self.words_practiced += other.words_practiced

    def to_dict(self) -> dict:
        return {
            'session_date': self.session_date.isoformat(),
            'correct_answers': self.correct_answers,
            'incorrect_answers': self.incorrect_answers,
            'total_time_minutes': self.total_time_minutes,
            'words_practiced': self.words_practiced,
            'success_rate': self.success_rate
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'SessionStat':
        return cls(
            _parse_date(data['session_date']),
            data.get('correct_answers', 0),
            data.get('incorrect_answers', 0),
            data.get('total_time_minutes', 0),
            data.get('words_practiced', 0)
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, SessionStat):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return (f"SessionStat({self.session_date}, correct={self.correct_answers}, "
                f"incorrect={self.incorrect_answers}, minutes={self.total_time_minutes}, "
                f"words={self.words_practiced})")


class NextWord:
    """A word rendered as a prompt for one translation direction."""

    def __init__(self, word: Word, direction: str, difficulty: float):
        self.word = word
        self.direction = direction
        self.difficulty = difficulty

    @property
    def question(self) -> str:
        return self.word.text(source_language_for(self.direction))

    @property
    def answer(self) -> str:
        return self.word.text(self.target_language)

    @property
    def target_language(self) -> str:
        return target_language_for(self.direction)

    def to_dict(self) -> dict:
        return {
            'id': self.word.id,
            'question': self.question,
            'answer': self.answer,
            'direction': self.direction,
            'category': self.word.category,
            'target_language': self.target_language,
            'difficulty': self.difficulty,
            'original_word': {
                'slovak': self.word.slovak,
                'english': self.word.english
            }
        }
