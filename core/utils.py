"""Utility functions for slovicka application."""

import math
import re
import unicodedata

from .config import DIRECTION_SK_EN, SOURCE_LANGUAGE, TARGET_LANGUAGE

_COMBINING_MARKS = re.compile('[\u0300-\u036f]')


def normalize_text(text: str | None) -> str:
    """Lower-case, trim and strip diacritics so 'Ľúbiť ' compares equal to 'lubit'."""
    if not text:
        return ''
    text = text.lower().strip()
    return _COMBINING_MARKS.sub('', unicodedata.normalize('NFD', text))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def target_language_for(direction: str) -> str:
    """Language the user must answer in for a direction."""
    return TARGET_LANGUAGE if direction == DIRECTION_SK_EN else SOURCE_LANGUAGE


def source_language_for(direction: str) -> str:
    """Language the prompt is shown in for a direction."""
    return SOURCE_LANGUAGE if direction == DIRECTION_SK_EN else TARGET_LANGUAGE


def other_language(language: str) -> str:
    return TARGET_LANGUAGE if language == SOURCE_LANGUAGE else SOURCE_LANGUAGE


def format_group_name(key: str) -> str:
    """'food_and-drink' -> 'Food and drink'."""
    if not key:
        return key
    return key[0].upper() + re.sub(r'[_-]', ' ', key[1:])


def success_rate(correct: int, incorrect: int) -> float:
    """Percentage of correct answers rounded to one decimal, 0 when nothing was answered."""
    total = correct + incorrect
    if total == 0:
        return 0
    return round(correct * 100.0 / total, 1)
