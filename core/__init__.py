from .models import Word, WordStat, SessionStat, NextWord
from .interfaces import Storage, ValidationOracle, DuplicateWordError
from .utils import normalize_text, target_language_for
from .difficulty import calculate_difficulty, word_difficulty
from .answers import build_correct_answers, is_correct, check_answer
from .selector import WordSelector, weighted_choice
from .sessions import SessionTracker
from .synonyms import SynonymLearner
from .config import (
    LANGUAGES, DIRECTIONS, DIRECTION_SK_EN, DIRECTION_EN_SK,
    DEFAULT_USER, VALIDATION_CONFIDENCE_THRESHOLD
)

__all__ = [
    'Word', 'WordStat', 'SessionStat', 'NextWord',
    'Storage', 'ValidationOracle', 'DuplicateWordError',
    'normalize_text', 'target_language_for',
    'calculate_difficulty', 'word_difficulty',
    'build_correct_answers', 'is_correct', 'check_answer',
    'WordSelector', 'weighted_choice',
    'SessionTracker', 'SynonymLearner',
    'LANGUAGES', 'DIRECTIONS', 'DIRECTION_SK_EN', 'DIRECTION_EN_SK',
    'DEFAULT_USER', 'VALIDATION_CONFIDENCE_THRESHOLD'
]
