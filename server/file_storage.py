"""File-based storage implementation."""

import json
import logging
import os
import tempfile
import threading
from datetime import date, datetime

from core.interfaces import DuplicateWordError, Storage
from core.models import SessionStat, Word, WordStat
from core.config import LANGUAGES

logger = logging.getLogger(__name__)

STATE_FILE_NAME = 'slovicka_data.json'


def _empty_data() -> dict:
    return {
        'next_word_id': 1,
        'words': [],
        'synonyms': [],
        'word_stats': [],
        'session_stats': [],
        'preferences': {}
    }


class FileStorage(Storage):
    """Keeps all data in a single JSON file.

    Every mutation is a read-modify-write under a lock followed by an atomic
    file replace, so a failed write leaves the previous file intact.
    """

    def __init__(self, config_file: str = None, state_dir: str = None):
        self.config_file = config_file or os.path.expanduser('~/.config/slovicka/config.json')
        # Project root is one level up from server/
        project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.state_dir = state_dir or os.environ.get('SLOVICKA_STATE_DIR', project_root)
        self.data_file = os.path.join(self.state_dir, STATE_FILE_NAME)
        self._lock = threading.Lock()

    def load_config(self) -> dict:
        if not os.path.exists(self.config_file):
            raise FileNotFoundError(
                f"Config file not found at {self.config_file}\n"
                f'Please create it with: {{"gemini_api_key": "YOUR_API_KEY_HERE"}}'
            )
        with open(self.config_file, 'r') as f:
            return json.load(f)

    def _load(self) -> dict:
        if not os.path.exists(self.data_file):
            return _empty_data()
        with open(self.data_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
        for key, value in _empty_data().items():
            data.setdefault(key, value)
        return data

    def _save(self, data: dict) -> None:
        os.makedirs(self.state_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.state_dir, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.data_file)
        except Exception:
            os.unlink(tmp_path)
            raise

    def _read(self) -> dict:
        with self._lock:
            return self._load()

    def _word_from_row(self, row: dict, synonyms: list[dict]) -> Word:
        word_synonyms = {language: [] for language in LANGUAGES}
        for s in synonyms:
            if s['word_id'] == row['id']:
                word_synonyms[s['language']].append(s['synonym'])
        return Word(row['id'], row['slovak'], row['english'], row['category'], word_synonyms)

    # Words and synonyms

    def list_words(self, categories: list[str] | None = None) -> list[Word]:
        data = self._read()
        rows = data['words']
        if categories is not None:
            rows = [row for row in rows if row['category'] in categories]
        return [self._word_from_row(row, data['synonyms'])
                for row in sorted(rows, key=lambda r: r['id'])]

    def get_word(self, word_id: int) -> Word | None:
        data = self._read()
        for row in data['words']:
            if row['id'] == word_id:
                return self._word_from_row(row, data['synonyms'])
        return None

    def _insert_synonyms(self, data: dict, word_id: int, synonyms: dict | None) -> None:
        for language in LANGUAGES:
            for synonym in (synonyms or {}).get(language) or []:
                self._insert_synonym(data, word_id, language, synonym)

    def _insert_synonym(self, data: dict, word_id: int, language: str, synonym: str) -> bool:
        synonym = synonym.strip()
        for s in data['synonyms']:
            if (s['word_id'] == word_id and s['language'] == language
                    and s['synonym'].lower() == synonym.lower()):
                return False
        data['synonyms'].append({'word_id': word_id, 'language': language, 'synonym': synonym})
        return True

    def add_word(self, slovak: str, english: str, category: str,
                 synonyms: dict | None = None) -> int:
        with self._lock:
            data = self._load()
            for row in data['words']:
                if row['slovak'] == slovak and row['english'] == english:
                    raise DuplicateWordError(f"Word {slovak}/{english} already exists")
            word_id = data['next_word_id']
            data['next_word_id'] = word_id + 1
            data['words'].append({
                'id': word_id,
                'slovak': slovak,
                'english': english,
                'category': category
            })
            self._insert_synonyms(data, word_id, synonyms)
            self._save(data)
        return word_id

    def update_word(self, word_id: int, updates: dict) -> bool:
        with self._lock:
            data = self._load()
            row = next((r for r in data['words'] if r['id'] == word_id), None)
            if row is None:
                return False
            for field in ('slovak', 'english', 'category'):
                if updates.get(field):
                    row[field] = updates[field]
            if updates.get('synonyms') is not None:
                data['synonyms'] = [s for s in data['synonyms'] if s['word_id'] != word_id]
                self._insert_synonyms(data, word_id, updates['synonyms'])
            self._save(data)
        return True

    def delete_word(self, word_id: int) -> int:
        with self._lock:
            data = self._load()
            before = len(data['words'])
            data['words'] = [r for r in data['words'] if r['id'] != word_id]
            deleted = before - len(data['words'])
            if deleted:
                data['synonyms'] = [s for s in data['synonyms'] if s['word_id'] != word_id]
                data['word_stats'] = [s for s in data['word_stats'] if s['word_id'] != word_id]
                self._save(data)
        return deleted

    def get_synonyms(self, word_id: int, language: str) -> list[str]:
        data = self._read()
        return [s['synonym'] for s in data['synonyms']
                if s['word_id'] == word_id and s['language'] == language]

    def add_synonym(self, word_id: int, language: str, synonym: str) -> bool:
        with self._lock:
            data = self._load()
            inserted = self._insert_synonym(data, word_id, language, synonym)
            if inserted:
                self._save(data)
        return inserted

    def delete_synonym(self, word_id: int, language: str, synonym: str) -> bool:
        with self._lock:
            data = self._load()
            target = synonym.strip().lower()
            kept = [s for s in data['synonyms']
                    if not (s['word_id'] == word_id and s['language'] == language
                            and s['synonym'].lower() == target)]
            removed = len(kept) != len(data['synonyms'])
            if removed:
                data['synonyms'] = kept
                self._save(data)
        return removed

    # Word statistics

    def get_stat(self, word_id: int, direction: str) -> WordStat:
        data = self._read()
        for row in data['word_stats']:
            if row['word_id'] == word_id and row['direction'] == direction:
                return WordStat.from_dict(row)
        return WordStat(word_id, direction)

    def upsert_stat(self, word_id: int, direction: str, is_correct: bool,
                    seen_at: datetime) -> None:
        with self._lock:
            data = self._load()
            row = next((r for r in data['word_stats']
                        if r['word_id'] == word_id and r['direction'] == direction), None)
            if row is None:
                row = WordStat(word_id, direction).to_dict()
                data['word_stats'].append(row)
            row['correct_count'] += 1 if is_correct else 0
            row['incorrect_count'] += 0 if is_correct else 1
            row['last_seen'] = seen_at.isoformat()
            self._save(data)

    def get_all_user_stats(self) -> list[dict]:
        data = self._read()
        words = {row['id']: row for row in data['words']}
        rows = []
        for row in data['word_stats']:
            word = words.get(row['word_id'])
            stat = WordStat.from_dict(row)
            if word is None or stat.total == 0:
                continue
            rows.append({
                'word_id': stat.word_id,
                'slovak': word['slovak'],
                'english': word['english'],
                'category': word['category'],
                'direction': stat.direction,
                'correct_count': stat.correct_count,
                'incorrect_count': stat.incorrect_count,
                'last_seen': row.get('last_seen'),
                'success_rate': stat.success_rate
            })
        rows.sort(key=lambda r: r['incorrect_count'] - r['correct_count'], reverse=True)
        return rows

    def get_category_stats(self) -> list[dict]:
        data = self._read()
        with_synonyms = {s['word_id'] for s in data['synonyms']}
        categories = {}
        for row in data['words']:
            entry = categories.setdefault(row['category'], {
                'category': row['category'], 'word_count': 0, 'words_with_synonyms': 0
            })
            entry['word_count'] += 1
            if row['id'] in with_synonyms:
                entry['words_with_synonyms'] += 1
        return [categories[key] for key in sorted(categories)]

    # Session statistics

    @staticmethod
    def _session_row(stat: SessionStat) -> dict:
        row = stat.to_dict()
        del row['success_rate']
        return row

    def get_session_stat(self, session_date: date) -> SessionStat | None:
        data = self._read()
        for row in data['session_stats']:
            if row['session_date'] == session_date.isoformat():
                return SessionStat.from_dict(row)
        return None

    def upsert_session_stat(self, delta: SessionStat) -> None:
        with self._lock:
            data = self._load()
            key = delta.session_date.isoformat()
            index = next((i for i, r in enumerate(data['session_stats'])
                          if r['session_date'] == key), None)
            if index is None:
                stat = SessionStat(delta.session_date)
                data['session_stats'].append({})
                index = len(data['session_stats']) - 1
            else:
                stat = SessionStat.from_dict(data['session_stats'][index])
            stat.add(delta)
            data['session_stats'][index] = self._session_row(stat)
            self._save(data)

    def get_session_history(self, since: date) -> list[SessionStat]:
        data = self._read()
        stats = [SessionStat.from_dict(row) for row in data['session_stats']]
        stats = [s for s in stats if s.session_date >= since]
        return sorted(stats, key=lambda s: s.session_date, reverse=True)

    def consolidate_session_stats(self) -> list[dict]:
        with self._lock:
            data = self._load()
            by_date = {}
            for row in data['session_stats']:
                by_date.setdefault(row['session_date'], []).append(SessionStat.from_dict(row))

            details = []
            consolidated = []
            for key in sorted(by_date):
                rows = by_date[key]
                merged = SessionStat(rows[0].session_date)
                for stat in rows:
                    merged.add(stat)
                if len(rows) > 1:
                    details.append({
                        'session_date': key,
                        'total_correct': merged.correct_answers,
                        'total_incorrect': merged.incorrect_answers,
                        'total_time': merged.total_time_minutes,
                        'total_words': merged.words_practiced,
                        'duplicate_count': len(rows)
                    })
                consolidated.append(self._session_row(merged))

            if details:
                data['session_stats'] = consolidated
                self._save(data)
        return details

    # Preferences

    def get_preferences(self, user_id: str = "default") -> dict:
        data = self._read()
        return dict(data['preferences'].get(user_id, {}))

    def set_preference(self, key: str, value, user_id: str = "default") -> None:
        with self._lock:
            data = self._load()
            data['preferences'].setdefault(user_id, {})[key] = value
            self._save(data)
