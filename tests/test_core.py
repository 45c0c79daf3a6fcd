"""Unit tests for slovicka core module."""

import random
import unittest
from datetime import date, datetime, timedelta

from core.models import NextWord, SessionStat, Word, WordStat
from core.interfaces import DuplicateWordError, Storage, ValidationOracle
from core.utils import format_group_name, normalize_text, round_half_up, target_language_for
from core.difficulty import calculate_difficulty, word_difficulty
from core.answers import build_correct_answers, check_answer, is_correct
from core.selector import WordSelector, weighted_choice
from core.sessions import SessionTracker, elapsed_minutes
from core.synonyms import SynonymLearner
from core.vocabulary import get_seed_data, group_words
from core.config import LANGUAGES, MIN_DIFFICULTY


# ============================================================================
# Mock Implementations
# ============================================================================

class MockOracle(ValidationOracle):
    """Mock validation oracle for testing."""

    def __init__(self):
        self.responses = []
        self.validate_calls = []

    def set_response(self, valid: bool, confidence: float = 0.9, explanation: str = 'ok'):
        """Queue a validation response."""
        self.responses.append({'valid': valid, 'confidence': confidence, 'explanation': explanation})

    def validate(self, source_text, target_language, known_translation,
                 candidate_text, existing_synonyms) -> dict:
        self.validate_calls.append((source_text, target_language, known_translation,
                                    candidate_text, list(existing_synonyms)))
        if self.responses:
            return self.responses.pop(0)
        return {'valid': False, 'confidence': 0.0, 'explanation': 'Default rejection'}


class FailingOracle(ValidationOracle):
    """Oracle that is always unreachable."""

    def validate(self, source_text, target_language, known_translation,
                 candidate_text, existing_synonyms) -> dict:
        raise ConnectionError("oracle unreachable")


class MalformedOracle(ValidationOracle):
    """Oracle that returns garbage."""

    def validate(self, source_text, target_language, known_translation,
                 candidate_text, existing_synonyms):
        return "definitely valid"


class MockStorage(Storage):
    """In-memory storage for testing.

    Session records are kept in a plain list so duplicates can be seeded.
    """

    def __init__(self):
        self.config = {'gemini_api_key': 'test-api-key'}
        self.words = {}
        self.synonyms = []  # (word_id, language, synonym)
        self.stats = {}
        self.sessions = []
        self.preferences = {}
        self.next_id = 1
        self.fail_stats = False

    def load_config(self) -> dict:
        return self.config

    def _word(self, word_id: int) -> Word:
        row = self.words[word_id]
        synonyms = {language: [s for w, l, s in self.synonyms if w == word_id and l == language]
                    for language in LANGUAGES}
        return Word(word_id, row['slovak'], row['english'], row['category'], synonyms)

    def list_words(self, categories=None) -> list[Word]:
        return [self._word(word_id) for word_id in sorted(self.words)
                if categories is None or self.words[word_id]['category'] in categories]

    def get_word(self, word_id: int) -> Word | None:
        return self._word(word_id) if word_id in self.words else None

    def add_word(self, slovak, english, category, synonyms=None) -> int:
        for row in self.words.values():
            if row['slovak'] == slovak and row['english'] == english:
                raise DuplicateWordError(slovak)
        word_id = self.next_id
        self.next_id += 1
        self.words[word_id] = {'slovak': slovak, 'english': english, 'category': category}
        for language, items in (synonyms or {}).items():
            for synonym in items:
                self.add_synonym(word_id, language, synonym)
        return word_id

    def update_word(self, word_id, updates) -> bool:
        if word_id not in self.words:
            return False
        for field in ('slovak', 'english', 'category'):
            if updates.get(field):
                self.words[word_id][field] = updates[field]
        return True

    def delete_word(self, word_id) -> int:
        return 1 if self.words.pop(word_id, None) else 0

    def get_synonyms(self, word_id, language) -> list[str]:
        return [s for w, l, s in self.synonyms if w == word_id and l == language]

    def add_synonym(self, word_id, language, synonym) -> bool:
        synonym = synonym.strip()
        for w, l, s in self.synonyms:
            if w == word_id and l == language and s.lower() == synonym.lower():
                return False
        self.synonyms.append((word_id, language, synonym))
        return True

    def delete_synonym(self, word_id, language, synonym) -> bool:
        before = len(self.synonyms)
        self.synonyms = [(w, l, s) for w, l, s in self.synonyms
                         if not (w == word_id and l == language and s.lower() == synonym.lower())]
        return len(self.synonyms) != before

    def set_stat(self, word_id, direction, correct, incorrect, last_seen):
        self.stats[(word_id, direction)] = WordStat(word_id, direction, correct, incorrect, last_seen)

    def get_stat(self, word_id, direction) -> WordStat:
        if self.fail_stats:
            raise RuntimeError("database is locked")
        return self.stats.get((word_id, direction), WordStat(word_id, direction))

    def upsert_stat(self, word_id, direction, is_correct, seen_at) -> None:
        stat = self.stats.setdefault((word_id, direction), WordStat(word_id, direction))
        stat.correct_count += 1 if is_correct else 0
        stat.incorrect_count += 0 if is_correct else 1
        stat.last_seen = seen_at

    def get_all_user_stats(self) -> list[dict]:
        return []

    def get_category_stats(self) -> list[dict]:
        return []

    def get_session_stat(self, session_date):
        for stat in self.sessions:
            if stat.session_date == session_date:
                return SessionStat.from_dict(stat.to_dict())
        return None

    def upsert_session_stat(self, delta) -> None:
        for stat in self.sessions:
            if stat.session_date == delta.session_date:
                stat.add(delta)
                return
        stat = SessionStat(delta.session_date)
        stat.add(delta)
        self.sessions.append(stat)

    def get_session_history(self, since):
        return sorted([s for s in self.sessions if s.session_date >= since],
                      key=lambda s: s.session_date, reverse=True)

    def consolidate_session_stats(self) -> list[dict]:
        by_date = {}
        for stat in self.sessions:
            by_date.setdefault(stat.session_date, []).append(stat)
        details = []
        merged_list = []
        for session_date, stats in by_date.items():
            merged = SessionStat(session_date)
            for stat in stats:
                merged.add(stat)
            merged_list.append(merged)
            if len(stats) > 1:
                details.append({'session_date': session_date.isoformat(),
                                'total_correct': merged.correct_answers,
                                'total_incorrect': merged.incorrect_answers,
                                'total_time': merged.total_time_minutes,
                                'total_words': merged.words_practiced,
                                'duplicate_count': len(stats)})
        self.sessions = merged_list
        return details

    def get_preferences(self, user_id="default") -> dict:
        return dict(self.preferences.get(user_id, {}))

    def set_preference(self, key, value, user_id="default") -> None:
        self.preferences.setdefault(user_id, {})[key] = value


NOW = datetime(2024, 5, 20, 12, 0, 0)


# ============================================================================
# Test Cases
# ============================================================================

class TestNormalizeText(unittest.TestCase):
    """Tests for normalize_text utility function."""

    def test_strips_diacritics_case_and_whitespace(self):
        self.assertEqual(normalize_text("Ľúbiť "), "lubit")
        self.assertEqual(normalize_text("Ľúbiť "), normalize_text("lubit"))

    def test_slovak_letters(self):
        self.assertEqual(normalize_text("Mačka"), "macka")
        self.assertEqual(normalize_text("  Kôň "), "kon")
        self.assertEqual(normalize_text("dcéra"), "dcera")

    def test_empty_and_none(self):
        self.assertEqual(normalize_text(""), "")
        self.assertEqual(normalize_text(None), "")

    def test_plain_text_unchanged(self):
        self.assertEqual(normalize_text("thank you"), "thank you")


class TestUtils(unittest.TestCase):

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(1.5), 2)
        self.assertEqual(round_half_up(1.49), 1)

    def test_target_language_for(self):
        self.assertEqual(target_language_for('sk-en'), 'english')
        self.assertEqual(target_language_for('en-sk'), 'slovak')

    def test_format_group_name(self):
        self.assertEqual(format_group_name('basic'), 'Basic')
        self.assertEqual(format_group_name('food_and-drink'), 'Food and drink')


class TestCalculateDifficulty(unittest.TestCase):
    """Tests for the difficulty weight formula."""

    def test_unseen_word_is_baseline(self):
        self.assertEqual(calculate_difficulty(0, 0, None, NOW), 1.0)
        self.assertEqual(calculate_difficulty(0, 0, NOW - timedelta(days=100), NOW), 1.0)

    def test_one_correct_answer_today(self):
        self.assertAlmostEqual(calculate_difficulty(1, 0, NOW, NOW), 0.85)

    def test_one_incorrect_answer_today(self):
        self.assertAlmostEqual(calculate_difficulty(0, 1, NOW, NOW), 1.3)

    def test_mixed_history_with_recency(self):
        # 0.7 * 1.3 * 2.0
        last_seen = NOW - timedelta(days=10)
        self.assertAlmostEqual(calculate_difficulty(2, 1, last_seen, NOW), 1.82)

    def test_correct_discount_capped_at_ninety_percent(self):
        self.assertAlmostEqual(calculate_difficulty(6, 0, NOW, NOW), 0.1)
        self.assertAlmostEqual(calculate_difficulty(50, 0, NOW, NOW), 0.1)

    def test_recency_boost_capped_at_three_times(self):
        self.assertAlmostEqual(calculate_difficulty(1, 0, NOW - timedelta(days=20), NOW), 2.55)
        self.assertAlmostEqual(calculate_difficulty(1, 0, NOW - timedelta(days=400), NOW), 2.55)

    def test_missing_last_seen_counts_from_epoch(self):
        self.assertAlmostEqual(calculate_difficulty(1, 0, None, NOW), 2.55)

    def test_future_last_seen_counts_as_today(self):
        self.assertAlmostEqual(calculate_difficulty(0, 1, NOW + timedelta(days=3), NOW), 1.3)

    def test_more_correct_never_increases_weight(self):
        last_seen = NOW - timedelta(days=2)
        for incorrect in range(4):
            previous = None
            for correct in range(1, 12):
                score = calculate_difficulty(correct, incorrect, last_seen, NOW)
                if previous is not None:
                    self.assertLessEqual(score, previous)
                    if correct <= 6:
                        self.assertLess(score, previous)
                previous = score

    def test_more_incorrect_increases_weight(self):
        last_seen = NOW - timedelta(days=1)
        for correct in range(5):
            scores = [calculate_difficulty(correct, i, last_seen, NOW) for i in range(1, 10)]
            for lower, higher in zip(scores, scores[1:]):
                self.assertLess(lower, higher)

    def test_never_below_floor(self):
        for correct in range(0, 30, 3):
            for incorrect in range(0, 5):
                for days in (0, 1, 5, 50):
                    score = calculate_difficulty(correct, incorrect, NOW - timedelta(days=days), NOW)
                    self.assertGreaterEqual(score, MIN_DIFFICULTY)


class TestWordDifficulty(unittest.TestCase):

    def test_uses_stored_stats(self):
        storage = MockStorage()
        storage.set_stat(1, 'sk-en', 0, 1, NOW)
        self.assertAlmostEqual(word_difficulty(storage, 1, 'sk-en', NOW), 1.3)

    def test_missing_stats_is_baseline(self):
        self.assertEqual(word_difficulty(MockStorage(), 42, 'en-sk', NOW), 1.0)

    def test_storage_error_falls_back_to_baseline(self):
        storage = MockStorage()
        storage.fail_stats = True
        self.assertEqual(word_difficulty(storage, 1, 'sk-en', NOW), 1.0)


class TestAnswerMatching(unittest.TestCase):
    """Tests for answer matching with synonyms and diacritics."""

    def test_case_and_whitespace_insensitive(self):
        self.assertTrue(is_correct("Mačka", ["mačka"]))
        self.assertTrue(is_correct("  MAČKA  ", ["mačka"]))

    def test_diacritic_insensitive(self):
        self.assertTrue(is_correct("macka", ["mačka"]))
        self.assertTrue(is_correct("lubit", ["ľúbiť"]))

    def test_wrong_answer(self):
        self.assertFalse(is_correct("pes", ["mačka"]))

    def test_empty_answer_never_matches(self):
        self.assertFalse(is_correct("", ["mačka"]))
        self.assertFalse(is_correct("   ", ["mačka"]))
        self.assertFalse(is_correct(None, ["mačka"]))

    def test_build_correct_answers_includes_both_forms(self):
        answers = build_correct_answers("Mačka", ["Mačička"])
        self.assertEqual(answers, ["mačka", "macka", "mačička", "macicka"])

    def test_build_correct_answers_deduplicates(self):
        answers = build_correct_answers("cat", ["Cat", " cat "])
        self.assertEqual(answers, ["cat"])

    def test_check_answer_accepts_synonym(self):
        storage = MockStorage()
        word_id = storage.add_word('ďakujem', 'thank you', 'basic', {'english': ['thanks']})

        result = check_answer(storage, word_id, 'Thanks', 'english')

        self.assertTrue(result['correct'])
        self.assertFalse(result['needs_validation'])
        self.assertIn('thanks', result['correct_answers'])

    def test_check_answer_mismatch_needs_validation(self):
        storage = MockStorage()
        word_id = storage.add_word('ďakujem', 'thank you', 'basic')

        result = check_answer(storage, word_id, 'cheers', 'english')

        self.assertFalse(result['correct'])
        self.assertTrue(result['needs_validation'])
        self.assertEqual(result['user_answer'], 'cheers')

    def test_check_answer_without_oracle_needs_no_validation(self):
        storage = MockStorage()
        word_id = storage.add_word('ďakujem', 'thank you', 'basic')

        result = check_answer(storage, word_id, 'cheers', 'english', validation_enabled=False)

        self.assertFalse(result['needs_validation'])

    def test_check_answer_reverse_direction_without_accents(self):
        storage = MockStorage()
        word_id = storage.add_word('ďakujem', 'thank you', 'basic')

        result = check_answer(storage, word_id, 'dakujem', 'slovak')

        self.assertTrue(result['correct'])

    def test_check_answer_unknown_word(self):
        self.assertIsNone(check_answer(MockStorage(), 99, 'cat', 'english'))


class SequenceRandom(random.Random):
    """Random source returning preset values."""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


class TestWeightedChoice(unittest.TestCase):

    def test_empty(self):
        self.assertEqual(weighted_choice([], [], random.Random(1)), (None, None))

    def test_walk_picks_by_cumulative_weight(self):
        items = ['a', 'b', 'c']
        weights = [1.0, 2.0, 1.0]
        # total 4: r=0.8 -> a, r=2.4 -> b, r=3.6 -> c
        self.assertEqual(weighted_choice(items, weights, SequenceRandom([0.2])), (0, 'a'))
        self.assertEqual(weighted_choice(items, weights, SequenceRandom([0.6])), (1, 'b'))
        self.assertEqual(weighted_choice(items, weights, SequenceRandom([0.9])), (2, 'c'))

    def test_zero_draw_picks_first(self):
        self.assertEqual(weighted_choice(['a', 'b'], [1.0, 1.0], SequenceRandom([0.0])), (0, 'a'))

    def test_exhausted_walk_falls_back_to_first(self):
        # A draw outside [0, 1) overshoots the total, exercising the fallback
        self.assertEqual(weighted_choice(['a', 'b'], [1.0, 3.0], SequenceRandom([1.5])), (0, 'a'))

    def test_distribution_follows_weights(self):
        rng = random.Random(1234)
        counts = {'a': 0, 'b': 0}
        for _ in range(4000):
            _, item = weighted_choice(['a', 'b'], [1.0, 3.0], rng)
            counts[item] += 1
        ratio = counts['b'] / counts['a']
        self.assertGreater(ratio, 2.5)
        self.assertLess(ratio, 3.5)


class TestWordSelector(unittest.TestCase):
    """Tests for weighted next-word selection."""

    def setUp(self):
        self.storage = MockStorage()
        self.cat_id = self.storage.add_word('mačka', 'cat', 'animals')
        self.dog_id = self.storage.add_word('pes', 'dog', 'animals')
        self.yes_id = self.storage.add_word('áno', 'yes', 'basic')

    def test_no_categories_returns_none(self):
        selector = WordSelector(self.storage, random.Random(1))
        self.assertIsNone(selector.select_next(set(), {'sk-en', 'en-sk'}))

    def test_no_directions_returns_none(self):
        selector = WordSelector(self.storage, random.Random(1))
        self.assertIsNone(selector.select_next({'animals'}, set()))

    def test_unknown_category_returns_none(self):
        selector = WordSelector(self.storage, random.Random(1))
        self.assertIsNone(selector.select_next({'verbs'}, {'sk-en'}))

    def test_candidates_cross_product_in_order(self):
        selector = WordSelector(self.storage)
        candidates = selector.get_candidates({'animals'}, {'en-sk', 'sk-en'})
        self.assertEqual(
            [(word.id, direction) for word, direction in candidates],
            [(self.cat_id, 'sk-en'), (self.cat_id, 'en-sk'),
             (self.dog_id, 'sk-en'), (self.dog_id, 'en-sk')]
        )

    def test_only_enabled_categories_are_selected(self):
        selector = WordSelector(self.storage, random.Random(7))
        for _ in range(50):
            selected = selector.select_next({'basic'}, {'sk-en'}, now=NOW)
            self.assertEqual(selected.word.id, self.yes_id)
            self.assertEqual(selected.direction, 'sk-en')

    def test_rendering_depends_on_direction(self):
        selector = WordSelector(self.storage, random.Random(7))

        sk_en = selector.select_next({'basic'}, {'sk-en'}, now=NOW).to_dict()
        self.assertEqual(sk_en['question'], 'áno')
        self.assertEqual(sk_en['answer'], 'yes')
        self.assertEqual(sk_en['target_language'], 'english')

        en_sk = selector.select_next({'basic'}, {'en-sk'}, now=NOW).to_dict()
        self.assertEqual(en_sk['question'], 'yes')
        self.assertEqual(en_sk['answer'], 'áno')
        self.assertEqual(en_sk['target_language'], 'slovak')
        self.assertEqual(en_sk['category'], 'basic')
        self.assertEqual(en_sk['original_word'], {'slovak': 'áno', 'english': 'yes'})
        self.assertEqual(en_sk['difficulty'], 1.0)

    def test_difficult_words_are_picked_more_often(self):
        # cat unseen -> 1.0, dog with 5 mistakes today -> 2.5
        self.storage.set_stat(self.dog_id, 'sk-en', 0, 5, NOW)
        selector = WordSelector(self.storage, random.Random(99))

        counts = {self.cat_id: 0, self.dog_id: 0}
        for _ in range(4000):
            selected = selector.select_next({'animals'}, {'sk-en'}, now=NOW)
            counts[selected.word.id] += 1

        ratio = counts[self.dog_id] / counts[self.cat_id]
        self.assertGreater(ratio, 2.0)
        self.assertLess(ratio, 3.0)

    def test_stat_errors_do_not_block_selection(self):
        self.storage.fail_stats = True
        selector = WordSelector(self.storage, random.Random(3))
        selected = selector.select_next({'animals'}, {'sk-en'}, now=NOW)
        self.assertIsInstance(selected, NextWord)
        self.assertEqual(selected.difficulty, 1.0)


class TestSessionTracker(unittest.TestCase):
    """Tests for daily session statistics."""

    def setUp(self):
        self.storage = MockStorage()
        self.day = date(2024, 5, 20)
        self.tracker = SessionTracker(self.storage, today=lambda: self.day)

    def test_elapsed_minutes(self):
        self.assertEqual(elapsed_minutes(60000), 1)
        self.assertEqual(elapsed_minutes(29999), 0)
        self.assertEqual(elapsed_minutes(90000), 2)
        self.assertEqual(elapsed_minutes(150000), 3)
        self.assertEqual(elapsed_minutes(-5000), 0)
        self.assertEqual(elapsed_minutes(None), 0)

    def test_first_answer_creates_record(self):
        stats = self.tracker.record(True, 0)
        self.assertEqual(stats, SessionStat(self.day, 1, 0, 0, 1))

    def test_two_answers_accumulate(self):
        self.tracker.record(True, 60000)
        stats = self.tracker.record(False, 120000)

        self.assertEqual(stats.correct_answers, 1)
        self.assertEqual(stats.incorrect_answers, 1)
        self.assertEqual(stats.total_time_minutes, 3)
        self.assertEqual(stats.words_practiced, 2)
        self.assertEqual(len(self.storage.sessions), 1)

    def test_repeat_words_still_count_as_practiced(self):
        for _ in range(3):
            self.tracker.record(True, 0)
        self.assertEqual(self.tracker.today_stats().words_practiced, 3)

    def test_new_day_gets_new_record(self):
        self.tracker.record(True, 0)
        self.day = date(2024, 5, 21)
        stats = self.tracker.record(False, 0)
        self.assertEqual(stats, SessionStat(date(2024, 5, 21), 0, 1, 0, 1))
        self.assertEqual(len(self.storage.sessions), 2)

    def test_today_stats_defaults_to_zero(self):
        self.assertEqual(self.tracker.today_stats(), SessionStat(self.day))

    def test_history_and_summary(self):
        self.storage.sessions = [
            SessionStat(date(2024, 5, 20), 3, 1, 5, 4),
            SessionStat(date(2024, 5, 18), 2, 2, 10, 4),
            SessionStat(date(2024, 4, 1), 9, 9, 9, 18),
        ]
        history = self.tracker.history(7)

        self.assertEqual([s.session_date for s in history], [date(2024, 5, 20), date(2024, 5, 18)])
        self.assertEqual(SessionTracker.summary(history), {
            'total_days': 2,
            'average_correct': 3,   # 2.5 rounds up
            'average_incorrect': 2,  # 1.5 rounds up
            'total_time_minutes': 15
        })

    def test_summary_empty(self):
        self.assertEqual(SessionTracker.summary([])['total_days'], 0)

    def test_consolidate_merges_duplicates(self):
        self.storage.sessions = [
            SessionStat(self.day, 2, 1, 0, 3),
            SessionStat(self.day, 0, 3, 0, 3),
        ]

        details = self.tracker.consolidate()

        self.assertEqual(len(self.storage.sessions), 1)
        merged = self.storage.sessions[0]
        self.assertEqual(merged.correct_answers, 2)
        self.assertEqual(merged.incorrect_answers, 4)
        self.assertEqual(details[0]['duplicate_count'], 2)

    def test_consolidate_without_duplicates_is_noop(self):
        self.tracker.record(True, 0)
        self.assertEqual(self.tracker.consolidate(), [])
        self.assertEqual(len(self.storage.sessions), 1)


class TestSynonymLearner(unittest.TestCase):
    """Tests for learning synonyms through the oracle."""

    def setUp(self):
        self.storage = MockStorage()
        word_id = self.storage.add_word('ďakujem', 'thank you', 'basic', {'english': ['thanks']})
        self.word = self.storage.get_word(word_id)
        self.oracle = MockOracle()
        self.learner = SynonymLearner(self.storage, self.oracle)

    def test_confident_valid_answer_is_added(self):
        self.oracle.set_response(True, 0.9, 'Common informal form')

        result = self.learner.try_learn(self.word, 'english', '  Cheers ')

        self.assertTrue(result['accepted'])
        self.assertTrue(result['added_as_synonym'])
        self.assertEqual(result['explanation'], 'Common informal form')
        self.assertIn('Cheers', self.storage.get_synonyms(self.word.id, 'english'))

    def test_oracle_receives_context(self):
        self.oracle.set_response(True, 0.9)

        self.learner.try_learn(self.word, 'english', 'cheers')

        self.assertEqual(self.oracle.validate_calls[0],
                         ('ďakujem', 'english', 'thank you', 'cheers', ['thanks']))

    def test_reverse_direction_context(self):
        self.oracle.set_response(False, 0.9)

        self.learner.try_learn(self.word, 'slovak', 'vďaka')

        self.assertEqual(self.oracle.validate_calls[0][:3], ('thank you', 'slovak', 'ďakujem'))

    def test_threshold_is_inclusive(self):
        self.oracle.set_response(True, 0.7)
        self.assertTrue(self.learner.try_learn(self.word, 'english', 'cheers')['accepted'])

    def test_low_confidence_is_rejected(self):
        self.oracle.set_response(True, 0.69)

        result = self.learner.try_learn(self.word, 'english', 'cheers')

        self.assertFalse(result['accepted'])
        self.assertEqual(self.storage.get_synonyms(self.word.id, 'english'), ['thanks'])

    def test_invalid_answer_is_rejected(self):
        self.oracle.set_response(False, 0.95, 'Means something else')

        result = self.learner.try_learn(self.word, 'english', 'please')

        self.assertFalse(result['accepted'])
        self.assertEqual(result['explanation'], 'Means something else')

    def test_existing_synonym_is_not_duplicated(self):
        self.oracle.set_response(True, 0.9)

        result = self.learner.try_learn(self.word, 'english', 'THANKS')

        self.assertTrue(result['accepted'])
        self.assertEqual(self.storage.get_synonyms(self.word.id, 'english'), ['thanks'])

    def test_failing_oracle_never_raises(self):
        learner = SynonymLearner(self.storage, FailingOracle())

        result = learner.try_learn(self.word, 'english', 'cheers')

        self.assertFalse(result['accepted'])
        self.assertIn('unreachable', result['explanation'])

    def test_malformed_oracle_response_is_rejected(self):
        learner = SynonymLearner(self.storage, MalformedOracle())
        self.assertFalse(learner.try_learn(self.word, 'english', 'cheers')['accepted'])

    def test_without_oracle(self):
        learner = SynonymLearner(self.storage, None)

        result = learner.try_learn(self.word, 'english', 'cheers')

        self.assertFalse(learner.enabled)
        self.assertFalse(result['accepted'])

    def test_judge_leaves_storage_alone(self):
        self.oracle.set_response(True, 0.9)

        judgement = self.learner.judge(self.word, 'english', 'cheers', ['thanks'])

        self.assertTrue(judgement['accepted'])
        self.assertEqual(self.storage.get_synonyms(self.word.id, 'english'), ['thanks'])

        result = self.learner.learn(self.word, 'english', 'cheers', judgement)
        self.assertTrue(result['added_as_synonym'])
        self.assertEqual(self.storage.get_synonyms(self.word.id, 'english'), ['thanks', 'cheers'])

    def test_blank_answer_skips_oracle(self):
        result = self.learner.try_learn(self.word, 'english', '   ')
        self.assertFalse(result['accepted'])
        self.assertEqual(self.oracle.validate_calls, [])


class TestModels(unittest.TestCase):

    def test_word_text(self):
        word = Word(1, 'pes', 'dog', 'animals')
        self.assertEqual(word.text('slovak'), 'pes')
        self.assertEqual(word.text('english'), 'dog')
        self.assertEqual(word.synonyms, {'slovak': [], 'english': []})

    def test_word_stat_from_dict(self):
        stat = WordStat.from_dict({'word_id': 1, 'direction': 'sk-en', 'correct_count': 3,
                                   'incorrect_count': 1, 'last_seen': '2024-05-20T12:00:00'})
        self.assertEqual(stat.last_seen, NOW)
        self.assertEqual(stat.success_rate, 75.0)

    def test_session_stat_success_rate(self):
        self.assertEqual(SessionStat(date(2024, 5, 20), 1, 2).success_rate, 33.3)
        self.assertEqual(SessionStat(date(2024, 5, 20)).success_rate, 0)


class TestVocabulary(unittest.TestCase):

    def test_seed_data_shape(self):
        items = get_seed_data()
        self.assertTrue(any(item['category'] == 'basic' for item in items))
        for item in items:
            self.assertEqual(set(item), {'category', 'slovak', 'english', 'synonyms'})

    def test_seed_pairs_are_unique(self):
        pairs = [(item['slovak'], item['english']) for item in get_seed_data()]
        self.assertEqual(len(pairs), len(set(pairs)))

    def test_group_words(self):
        words = [
            Word(2, 'pes', 'dog', 'animals'),
            Word(1, 'áno', 'yes', 'basic', {'english': ['yeah']}),
        ]
        groups = group_words(words)

        self.assertEqual(list(groups), ['animals', 'basic'])
        self.assertEqual(groups['animals']['name'], 'Animals')
        self.assertFalse(groups['animals']['enabled'])
        self.assertTrue(groups['basic']['enabled'])
        self.assertEqual(groups['basic']['words'][0]['synonyms']['english'], ['yeah'])


if __name__ == '__main__':
    unittest.main()
