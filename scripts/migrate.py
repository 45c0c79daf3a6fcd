#!/usr/bin/env python3
"""Create the schema, import vocabulary and set default preferences.

Words come from dictionary/*.json files (one file per category, each a list
of {slovak, english, synonyms: {slovak: [], english: []}}). When there is no
dictionary folder the built-in seed vocabulary is imported instead.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_PREFERENCES, DEFAULT_USER
from core.interfaces import DuplicateWordError
from core.vocabulary import get_seed_data
from server.file_storage import FileStorage

logger = logging.getLogger(__name__)


def load_dictionary(dictionary_dir: Path) -> list[dict]:
    """Read dictionary/*.json files into {category, slovak, english, synonyms} items."""
    items = []
    for path in sorted(dictionary_dir.glob('*.json')):
        category = path.stem
        try:
            words = json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.error(f"Error reading {path.name}: {e}")
            continue
        for word in words:
            items.append({
                'category': category,
                'slovak': word.get('slovak'),
                'english': word.get('english'),
                'synonyms': word.get('synonyms') or {}
            })
        print(f"Read {len(words)} words from {path.name}")
    return items


def import_words(storage, items: list[dict]) -> tuple[int, int]:
    """Add words to storage. Returns (imported, skipped)."""
    imported = 0
    skipped = 0
    for item in items:
        if not item['slovak'] or not item['english']:
            logger.warning(f"Skipping invalid word: {item}")
            skipped += 1
            continue
        try:
            storage.add_word(item['slovak'], item['english'], item['category'], item['synonyms'])
            imported += 1
        except DuplicateWordError:
            skipped += 1
    return imported, skipped


def set_default_preferences(storage, user_id: str = DEFAULT_USER) -> None:
    existing = storage.get_preferences(user_id)
    for key, value in DEFAULT_PREFERENCES.items():
        if key not in existing:
            storage.set_preference(key, value, user_id)


def get_storage(storage_type: str):
    if storage_type == 'file':
        return FileStorage()
    from server.postgres_storage import PostgresStorage
    return PostgresStorage()


def main():
    parser = argparse.ArgumentParser(description='Initialise the slovicka database')
    parser.add_argument(
        '--storage',
        default=os.environ.get('SLOVICKA_STORAGE', 'postgres'),
        choices=['postgres', 'file'],
        help='Storage backend (default: $SLOVICKA_STORAGE or postgres)'
    )
    parser.add_argument(
        '--dictionary',
        default=str(Path(__file__).parent.parent / 'dictionary'),
        help='Folder with <category>.json word lists'
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    storage = get_storage(args.storage)

    dictionary_dir = Path(args.dictionary)
    if dictionary_dir.is_dir():
        print(f"Migrating words from {dictionary_dir}...")
        items = load_dictionary(dictionary_dir)
    else:
        print("Dictionary folder not found, importing built-in seed vocabulary")
        items = get_seed_data()

    imported, skipped = import_words(storage, items)

    print("Setting default preferences...")
    set_default_preferences(storage)

    stats = storage.get_category_stats()
    print("\n=== Migration Summary ===")
    print(f"Words imported: {imported} (skipped {skipped})")
    print(f"Words in database: {sum(s['word_count'] for s in stats)}")
    print(f"Categories: {len(stats)}")
    print("=========================\n")

    if hasattr(storage, 'close'):
        storage.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
