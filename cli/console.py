"""Console UI for slovicka application."""

import time

from core.config import DEFAULT_PREFERENCES
from cli.api_client import SlovickaAPIClient


class DrillState:
    """Client-side state of one drill session."""

    def __init__(self, enabled_groups: dict = None, translation_directions: dict = None):
        self.enabled_groups = dict(enabled_groups or DEFAULT_PREFERENCES['enabled_groups'])
        self.translation_directions = dict(
            translation_directions or DEFAULT_PREFERENCES['translation_directions'])
        self.current_word = None
        self.started_at = None
        self.last_result = None
        self.session_stats = None
        self.answered = 0

    def apply_preferences(self, preferences: dict) -> None:
        if preferences.get('enabled_groups'):
            self.enabled_groups = dict(preferences['enabled_groups'])
        if preferences.get('translation_directions'):
            self.translation_directions = dict(preferences['translation_directions'])

    def override(self, groups: list[str] | None = None, direction: str | None = None) -> None:
        """Apply command line choices on top of the stored preferences."""
        if groups:
            self.enabled_groups = {group: True for group in groups}
        if direction:
            self.translation_directions = {
                'slovak_to_english': direction in ('sk-en', 'both'),
                'english_to_slovak': direction in ('en-sk', 'both')
            }

    def start_word(self, response: dict, now: float) -> bool:
        """Load a next-word response. Returns False if no words are available."""
        if response.get('no_words_available'):
            self.current_word = None
            return False
        self.current_word = response['next_word']
        self.started_at = now
        self.last_result = None
        return True

    def elapsed_ms(self, now: float) -> int:
        if self.started_at is None:
            return 0
        return max(0, int((now - self.started_at) * 1000))

    def finish_word(self, result: dict, session_stats: dict) -> None:
        self.last_result = result
        self.session_stats = session_stats
        self.answered += 1


class ConsoleUI:
    """Console user interface for slovicka application."""

    def __init__(self, client: SlovickaAPIClient, clock=time.monotonic):
        self.client = client
        self.clock = clock
        self.state = DrillState()

    def print_question(self, word: dict):
        arrow = 'SK -> EN' if word['direction'] == 'sk-en' else 'EN -> SK'
        print('\n' + '=' * 40)
        print(f"[{word['category']}] {arrow}")
        print(f"\n>>> {word['question']}")

    def print_result(self, result: dict, word: dict):
        print('-' * 40)
        if result['correct']:
            print('Correct!')
        else:
            print(f"Wrong. Expected: {word['answer']}")
            if result.get('correct_answers'):
                print(f"Accepted answers: {', '.join(result['correct_answers'])}")
        print('-' * 40)

    def print_session_stats(self, stats: dict):
        if not stats:
            return
        print(f"Today: {stats['correct_answers']} correct, {stats['incorrect_answers']} incorrect, "
              f"{stats['words_practiced']} words, {stats['total_time_minutes']} min "
              f"({stats['success_rate']}%)")

    def ask_validation(self, word: dict, answer: str) -> dict | None:
        """Offer AI validation for an unmatched answer. Returns the validation result or None."""
        choice = input('Not an exact match. Ask AI if it is still valid? [y/N] ').strip().lower()
        if choice != 'y':
            return None
        print('Validating translation...')
        try:
            validation = self.client.validate_translation(word['id'], answer, word['target_language'])
        except Exception as e:
            print(f"Error validating translation: {e}")
            return None
        print(validation.get('explanation', ''))
        if validation.get('valid'):
            print(f'"{answer}" was added as a synonym.')
        return validation

    def practice_word(self) -> bool:
        """Run one question. Returns False when the user wants to quit."""
        state = self.state
        try:
            response = self.client.get_next_word(state.enabled_groups, state.translation_directions)
        except Exception as e:
            print(f"Error getting next word: {e}")
            return False

        if not state.start_word(response, self.clock()):
            print('No words available. Enable some word groups or directions.')
            return False

        word = state.current_word
        self.print_question(word)

        answer = ''
        while not answer:
            answer = input('==> ').strip()
        if answer.lower() == 'exit':
            return False

        try:
            result = self.client.check_answer(word['id'], answer, word['target_language'])
        except Exception as e:
            print(f"Error checking answer: {e}")
            return False
        is_correct = result['correct']
        if not is_correct and result.get('needs_validation'):
            validation = self.ask_validation(word, answer)
            if validation and validation.get('valid'):
                is_correct = True
                result['correct'] = True

        self.print_result(result, word)
        try:
            recorded = self.client.record_answer(word['id'], word['direction'], is_correct,
                                                 state.elapsed_ms(self.clock()))
        except Exception as e:
            print(f"Error recording answer: {e}")
            return False
        state.finish_word(result, recorded['session_stats'])
        self.print_session_stats(state.session_stats)
        return True

    def print_history(self, days: int):
        """Print the session history of the last `days` days."""
        try:
            stats = self.client.get_session_stats(days)
        except Exception as e:
            print(f"Error getting session stats: {e}")
            return
        print(f"\n=== Last {days} days ===")
        if not stats['history']:
            print('No practice yet.')
        for day in stats['history']:
            print(f"{day['session_date']}: {day['correct_answers']} correct, "
                  f"{day['incorrect_answers']} incorrect, {day['total_time_minutes']} min")
        summary = stats['summary']
        print(f"Days practised: {summary['total_days']}, "
              f"avg correct {summary['average_correct']}, avg incorrect {summary['average_incorrect']}, "
              f"total {summary['total_time_minutes']} min")

    def run(self, groups: list[str] | None = None, direction: str | None = None):
        """Run the main application loop."""
        try:
            self.client.health_check()
            print(f"Connected to slovicka server at {self.client.base_url}")
        except Exception:
            print(f"Error: Cannot connect to server at {self.client.base_url}")
            print("Make sure the server is running: python run_server.py")
            return

        try:
            self.state.apply_preferences(self.client.get_preferences())
        except Exception as e:
            print(f"Could not load preferences, using defaults: {e}")
        self.state.override(groups, direction)

        print('\nStarting Slovak-English vocabulary practice!')
        print('Type the translation, or "exit" to quit.\n')

        while self.practice_word():
            pass

        print(f'Goodbye! You answered {self.state.answered} words.')
