"""Seed vocabulary and the category view over stored words."""

from .config import DEFAULT_CATEGORY
from .utils import format_group_name

# Slovak to English seed vocabulary by category.
# Each item: (slovak, english, {'slovak': [...], 'english': [...]})
SEED_VOCABULARY = {
    'basic': [
        ('áno', 'yes', {}),
        ('nie', 'no', {}),
        ('ďakujem', 'thank you', {'english': ['thanks']}),
        ('prosím', 'please', {}),
        ('ahoj', 'hello', {'slovak': ['čau'], 'english': ['hi']}),
        ('dobrý deň', 'good day', {'english': ['good afternoon']}),
        ('dovidenia', 'goodbye', {'english': ['bye']}),
        ('prepáčte', 'excuse me', {'english': ['sorry']}),
        ('voda', 'water', {}),
        ('chlieb', 'bread', {}),
    ],
    'animals': [
        ('pes', 'dog', {}),
        ('mačka', 'cat', {}),
        ('vták', 'bird', {}),
        ('ryba', 'fish', {}),
        ('kôň', 'horse', {}),
        ('krava', 'cow', {}),
        ('prasa', 'pig', {'slovak': ['ošípaná']}),
        ('myš', 'mouse', {}),
        ('medveď', 'bear', {}),
    ],
    'family': [
        ('matka', 'mother', {'slovak': ['mama'], 'english': ['mom']}),
        ('otec', 'father', {'slovak': ['ocko'], 'english': ['dad']}),
        ('brat', 'brother', {}),
        ('sestra', 'sister', {}),
        ('syn', 'son', {}),
        ('dcéra', 'daughter', {}),
        ('starý otec', 'grandfather', {'slovak': ['dedko'], 'english': ['grandpa']}),
        ('stará mama', 'grandmother', {'slovak': ['babka'], 'english': ['grandma']}),
    ],
    'verbs': [
        ('ľúbiť', 'to love', {'slovak': ['milovať'], 'english': ['love']}),
        ('jesť', 'to eat', {'english': ['eat']}),
        ('piť', 'to drink', {'english': ['drink']}),
        ('spať', 'to sleep', {'english': ['sleep']}),
        ('čítať', 'to read', {'english': ['read']}),
        ('písať', 'to write', {'english': ['write']}),
        ('hovoriť', 'to speak', {'slovak': ['rozprávať'], 'english': ['speak', 'talk']}),
    ],
}


def get_seed_data() -> list[dict]:
    """Flatten the seed vocabulary into {category, slovak, english, synonyms} dicts."""
    items = []
    for category, words in SEED_VOCABULARY.items():
        for slovak, english, synonyms in words:
            items.append({
                'category': category,
                'slovak': slovak,
                'english': english,
                'synonyms': {
                    'slovak': list(synonyms.get('slovak', [])),
                    'english': list(synonyms.get('english', []))
                }
            })
    return items


def group_words(words) -> dict:
    """Group words by category for the client.

    Returns {category: {name, enabled, words: [word dicts]}}, categories and
    words in alphabetical order. Only the default category starts enabled.
    """
    groups = {}
    for word in sorted(words, key=lambda w: (w.category, w.slovak)):
        if word.category not in groups:
            groups[word.category] = {
                'name': format_group_name(word.category),
                'enabled': word.category == DEFAULT_CATEGORY,
                'words': []
            }
        groups[word.category]['words'].append({
            'id': word.id,
            'slovak': word.slovak,
            'english': word.english,
            'synonyms': {language: list(items) for language, items in word.synonyms.items()}
        })
    return groups
