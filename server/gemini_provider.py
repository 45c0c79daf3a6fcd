"""Gemini AI provider implementation."""

import json
import logging
import time
import google.generativeai as genai

from core.interfaces import ValidationOracle
from core.config import (
    SOURCE_LANGUAGE, DEFAULT_ORACLE_CONFIDENCE, ORACLE_TIMEOUT_SECONDS
)

logger = logging.getLogger(__name__)


class GeminiProvider(ValidationOracle):
    """Validates free-text translations with a Gemini model."""

    def __init__(self, api_key: str, model_name: str = 'gemini-2.0-flash',
                 timeout: float = ORACLE_TIMEOUT_SECONDS):
        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name)
        self.model_name = model_name
        self.timeout = timeout

    def _execute(self, prompt: str) -> tuple[str, int]:
        start_time = time.time()
        response = self.model.generate_content(
            prompt,
            generation_config={
                'temperature': 0.3,
                'max_output_tokens': 500,
                'response_mime_type': 'application/json'
            },
            request_options={'timeout': self.timeout}
        )
        end_time = time.time()
        ms = int((end_time - start_time) * 1000)
        return (response.text, ms)

    def _sanitize_judgement(self, judgement: str) -> str:
        return judgement[judgement.find('{'):judgement.rfind('}')+1]

    def _parse_judgement(self, response: str) -> dict:
        """Turn the model's JSON answer into {valid, confidence, explanation}."""
        result = json.loads(self._sanitize_judgement(response))
        if not isinstance(result, dict):
            raise ValueError(f"Expected a JSON object, got {type(result).__name__}")

        confidence = result.get('confidence')
        if not isinstance(confidence, (int, float)) or isinstance(confidence, bool):
            confidence = DEFAULT_ORACLE_CONFIDENCE

        return {
            'valid': result.get('isValid') is True,
            'confidence': max(0.0, min(1.0, float(confidence))),
            'explanation': str(result.get('explanation', ''))
        }

    def validate(self, source_text: str, target_language: str, known_translation: str,
                 candidate_text: str, existing_synonyms: list[str]) -> dict:
        target_lang = target_language.capitalize()
        source_lang = 'English' if target_language == SOURCE_LANGUAGE else 'Slovak'
        synonyms_text = (f"Known synonyms for this word: {', '.join(existing_synonyms)}."
                         if existing_synonyms else '')

        prompt = f"""
            You are a bilingual {source_lang}-{target_lang} language expert.
            Your task is to determine if a translation is valid.

            I'm translating from {source_lang} to {target_lang}.

            The {source_lang} word is: "{source_text}"
            The known correct {target_lang} translation is: "{known_translation}"
            {synonyms_text}

            The user provided this translation: "{candidate_text}"

            Is the user's translation a valid alternative translation or synonym for
            "{source_text}" in {target_lang}? Please consider:
            1. Meaning - does it convey the same meaning?
            2. Usage - would it be used in the same context?
            3. Formality - is it appropriate for the same situations?

            Respond with a JSON object with these fields:
            - isValid (boolean): true if it's a valid translation, false otherwise
            - explanation (string): brief explanation of your reasoning
            - confidence (number): your confidence in this assessment from 0 to 1

            Only provide the JSON response with no other text.
        """
        response = None
        try:
            response, ms = self._execute(prompt)
            judgement = self._parse_judgement(response)
            logger.info(f"Translation validation for \"{candidate_text}\": "
                        f"{'Valid' if judgement['valid'] else 'Invalid'} "
                        f"(confidence {judgement['confidence']}, {ms}ms)")
            return judgement
        except Exception as e:
            logger.error(f"Error validating translation with Gemini: {e}")
            if response is not None:
                logger.error(f"Raw response:\n{response}")
            return {
                'valid': False,
                'confidence': 0.0,
                'explanation': f"Error validating translation: {e}"
            }
