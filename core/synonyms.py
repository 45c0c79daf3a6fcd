"""Learning new synonyms from answers confirmed by the validation oracle."""

import logging

from .config import VALIDATION_CONFIDENCE_THRESHOLD
from .models import Word
from .utils import other_language

logger = logging.getLogger(__name__)

ORACLE_DISABLED_MESSAGE = (
    'Translation validation is not enabled. '
    'Set GEMINI_API_KEY or add gemini_api_key to ~/.config/slovicka/config.json.'
)


class SynonymLearner:
    """Asks the oracle about unmatched answers and stores the accepted ones."""

    def __init__(self, storage, oracle=None):
        self.storage = storage
        self.oracle = oracle

    @property
    def enabled(self) -> bool:
        return self.oracle is not None

    def _rejected(self, explanation: str, confidence: float = 0.0) -> dict:
        return {
            'accepted': False,
            'added_as_synonym': False,
            'explanation': explanation,
            'confidence': confidence
        }

    def _ask_oracle(self, word: Word, target_language: str, candidate: str,
                    existing_synonyms: list[str]) -> tuple[bool, float, str]:
        try:
            result = self.oracle.validate(
                word.text(other_language(target_language)),
                target_language,
                word.text(target_language),
                candidate,
                existing_synonyms
            )
            valid = result.get('valid') is True
            confidence = float(result.get('confidence') or 0.0)
            explanation = str(result.get('explanation') or '')
        except Exception as e:
            logger.error(f"Error validating translation '{candidate}' for word {word.id}: {e}")
            return False, 0.0, f"Error validating translation: {e}"
        return valid, confidence, explanation

    def judge(self, word: Word, target_language: str, user_answer: str,
              existing_synonyms: list[str]) -> dict:
        """Ask the oracle about an unmatched answer without touching storage.

        Returns {accepted, explanation, confidence}. Oracle problems never
        raise; they reject the answer.
        """
        if not self.enabled:
            return self._rejected(ORACLE_DISABLED_MESSAGE)

        candidate = (user_answer or '').strip()
        if not candidate:
            return self._rejected('Empty answer')

        valid, confidence, explanation = self._ask_oracle(
            word, target_language, candidate, existing_synonyms)

        if not (valid and confidence >= VALIDATION_CONFIDENCE_THRESHOLD):
            logger.info(f"Translation '{candidate}' for word {word.id} rejected "
                        f"(valid={valid}, confidence={confidence})")
            return self._rejected(explanation, confidence)

        return {'accepted': True, 'explanation': explanation, 'confidence': confidence}

    def learn(self, word: Word, target_language: str, user_answer: str, judgement: dict) -> dict:
        """Store an accepted answer as a synonym. Returns the full result."""
        if not judgement['accepted']:
            return self._rejected(judgement['explanation'], judgement['confidence'])

        candidate = user_answer.strip()
        inserted = self.storage.add_synonym(word.id, target_language, candidate)
        if inserted:
            logger.info(f"Added new synonym '{candidate}' for word {word.id} in {target_language}")
        else:
            logger.info(f"Synonym '{candidate}' already exists for word {word.id}")
        return {
            'accepted': True,
            'added_as_synonym': True,
            'explanation': judgement['explanation'],
            'confidence': judgement['confidence']
        }

    def try_learn(self, word: Word, target_language: str, user_answer: str,
                  existing_synonyms: list[str] | None = None) -> dict:
        """Validate an unmatched answer and keep it as a synonym when the oracle agrees.

        Returns {accepted, added_as_synonym, explanation, confidence}.
        """
        if existing_synonyms is None:
            existing_synonyms = self.storage.get_synonyms(word.id, target_language)
        judgement = self.judge(word, target_language, user_answer, existing_synonyms)
        return self.learn(word, target_language, user_answer, judgement)
