"""Configuration constants for slovicka application."""

DEFAULT_USER = 'default'

# Languages and translation directions
SOURCE_LANGUAGE = 'slovak'
TARGET_LANGUAGE = 'english'
LANGUAGES = (SOURCE_LANGUAGE, TARGET_LANGUAGE)

DIRECTION_SK_EN = 'sk-en'
DIRECTION_EN_SK = 'en-sk'
DIRECTIONS = (DIRECTION_SK_EN, DIRECTION_EN_SK)  # Canonical enumeration order

DEFAULT_CATEGORY = 'basic'

# Difficulty scoring
BASELINE_DIFFICULTY = 1.0       # Weight of a word that was never answered
CORRECT_DISCOUNT = 0.15         # Each correct answer removes 15% of the weight
MAX_CORRECT_DISCOUNT = 0.9      # ...but never more than 90%
INCORRECT_PENALTY = 0.3         # Each mistake adds 30%
RECENCY_BOOST_PER_DAY = 0.1     # +10% per day since last seen
MAX_RECENCY_BOOST = 2           # Capped at a 3x multiplier
MIN_DIFFICULTY = 0.05           # Every word keeps a nonzero probability

# AI validation
VALIDATION_CONFIDENCE_THRESHOLD = 0.7
DEFAULT_ORACLE_CONFIDENCE = 0.8  # Used when the model omits confidence
ORACLE_TIMEOUT_SECONDS = 15

# Session statistics
MS_PER_MINUTE = 60000
DEFAULT_HISTORY_DAYS = 7

DEFAULT_PREFERENCES = {
    'translation_directions': {
        'slovak_to_english': True,
        'english_to_slovak': False
    },
    'enabled_groups': {
        DEFAULT_CATEGORY: True
    }
}
