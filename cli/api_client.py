"""REST API client for slovicka server."""

import requests


class SlovickaAPIClient:
    """Client for communicating with the slovicka REST API."""

    def __init__(self, base_url: str = "http://localhost:8000", user_id: str = "default",
                 timeout: float = 30):
        self.base_url = base_url.rstrip('/')
        self.user_id = user_id
        self.timeout = timeout
        self.session = requests.Session()

    def _get(self, endpoint: str, params: dict = None) -> dict:
        """Make a GET request."""
        response = self.session.get(f"{self.base_url}{endpoint}", params=params or {},
                                    timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def _post(self, endpoint: str, data: dict) -> dict:
        """Make a POST request."""
        response = self.session.post(f"{self.base_url}{endpoint}", json=data,
                                     timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def health_check(self) -> dict:
        """Check if the server is running."""
        return self._get("/api/health")

    def get_word_groups(self) -> dict:
        return self._get("/api/word-groups")

    def get_preferences(self) -> dict:
        return self._get("/api/preferences", {'user_id': self.user_id})

    def set_preference(self, key: str, value) -> dict:
        return self._post("/api/preferences", {'key': key, 'value': value, 'user_id': self.user_id})

    def get_next_word(self, enabled_groups: dict, translation_directions: dict) -> dict:
        """Get the next word; {'no_words_available': True} when nothing is enabled."""
        return self._post("/api/next-word", {
            'enabled_groups': enabled_groups,
            'translation_directions': translation_directions
        })

    def check_answer(self, word_id: int, user_answer: str, target_language: str) -> dict:
        return self._post("/api/check-answer", {
            'word_id': word_id,
            'user_answer': user_answer,
            'target_language': target_language
        })

    def validate_translation(self, word_id: int, user_answer: str, target_language: str) -> dict:
        """Ask the AI to validate an unmatched answer."""
        return self._post("/api/validate-translation", {
            'word_id': word_id,
            'user_answer': user_answer,
            'target_language': target_language
        })

    def record_answer(self, word_id: int, direction: str, is_correct: bool, time_taken: int) -> dict:
        return self._post("/api/record-answer", {
            'word_id': word_id,
            'direction': direction,
            'is_correct': is_correct,
            'time_taken': time_taken
        })

    def get_session_stats(self, days: int = 7) -> dict:
        return self._get("/api/session-stats", {'days': days})
