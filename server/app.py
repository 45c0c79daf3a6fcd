"""FastAPI server for slovicka application."""

import asyncio
import logging
import os
import random
from datetime import datetime
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel

from core.answers import check_answer, get_correct_answers, is_correct
from core.config import (
    LANGUAGES, DIRECTIONS, DIRECTION_SK_EN, DIRECTION_EN_SK,
    DEFAULT_USER, DEFAULT_HISTORY_DAYS
)
from core.difficulty import word_difficulty
from core.interfaces import DuplicateWordError, Storage, ValidationOracle
from core.selector import WordSelector
from core.sessions import SessionTracker
from core.synonyms import SynonymLearner
from core.vocabulary import group_words

from server.gemini_provider import GeminiProvider
from server.file_storage import FileStorage
from server.postgres_storage import PostgresStorage

logger = logging.getLogger(__name__)


# Pydantic models for API
class SynonymsModel(BaseModel):
    slovak: list[str] = []
    english: list[str] = []


class TranslationDirections(BaseModel):
    slovak_to_english: bool = True
    english_to_slovak: bool = False


class NextWordRequest(BaseModel):
    enabled_groups: dict[str, bool]
    translation_directions: TranslationDirections


class AnswerRequest(BaseModel):
    word_id: int
    user_answer: str
    target_language: str


class RecordAnswerRequest(BaseModel):
    word_id: int
    direction: str
    is_correct: bool
    time_taken: int = 0


class WordRequest(BaseModel):
    slovak: str
    english: str
    category: str
    synonyms: Optional[SynonymsModel] = None


class WordUpdateRequest(BaseModel):
    slovak: Optional[str] = None
    english: Optional[str] = None
    category: Optional[str] = None
    synonyms: Optional[SynonymsModel] = None


class SynonymRequest(BaseModel):
    language: str
    synonym: str


class ImportWordsRequest(BaseModel):
    words: list[dict]
    category: str


class PreferenceRequest(BaseModel):
    key: str
    value: Any = None
    user_id: str = DEFAULT_USER


# Global state (in production, use proper DI)
storage: Storage = None
oracle: ValidationOracle = None
rng = random.Random()


def get_selector() -> WordSelector:
    return WordSelector(storage, rng)


def get_tracker() -> SessionTracker:
    return SessionTracker(storage)


def get_learner() -> SynonymLearner:
    return SynonymLearner(storage, oracle)


def require_text(value: str, field: str) -> str:
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail=f"Missing required field: {field}")
    return value


def require_language(language: str) -> str:
    if language not in LANGUAGES:
        raise HTTPException(status_code=400, detail=f"Invalid language. Must be one of: {', '.join(LANGUAGES)}")
    return language


def require_direction(direction: str) -> str:
    if direction not in DIRECTIONS:
        raise HTTPException(status_code=400, detail=f"Invalid direction. Must be {' or '.join(DIRECTIONS)}")
    return direction


app = FastAPI(title="Slovicka API", description="Slovak-English vocabulary drill API")


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    """Last-resort handler; hides details when SLOVICKA_ENV=production."""
    logger.error(f"Unhandled error on {request.url.path}: {type(exc).__name__}: {exc}")
    content = {"detail": "Internal server error"}
    if os.environ.get('SLOVICKA_ENV') != 'production':
        content["error"] = f"{type(exc).__name__}: {exc}"
    return JSONResponse(status_code=500, content=content)


@app.on_event("startup")
async def startup():
    """Initialize storage and the validation oracle on startup."""
    global storage, oracle

    if storage is None:
        # Use PostgreSQL by default, set SLOVICKA_STORAGE=file to use file storage
        storage_type = os.environ.get('SLOVICKA_STORAGE', 'postgres')
        if storage_type == 'file':
            storage = FileStorage()
            logger.info("Using file storage")
        else:
            storage = PostgresStorage()
            logger.info("Using PostgreSQL storage")

    if oracle is None:
        # Get API key from environment variable first, then fall back to config file
        api_key = os.environ.get('GEMINI_API_KEY')
        if not api_key:
            try:
                config = storage.load_config()
                api_key = config.get('gemini_api_key')
            except FileNotFoundError:
                pass

        if api_key:
            model_name = os.environ.get('GEMINI_MODEL', 'gemini-2.0-flash')
            oracle = GeminiProvider(api_key, model_name=model_name)
            logger.info(f"Validation oracle initialized: {model_name}")
        else:
            logger.warning("GEMINI_API_KEY not set and no config file found. "
                           "Translation validation will not work.")


@app.on_event("shutdown")
async def shutdown():
    if hasattr(storage, 'close'):
        storage.close()


@app.get("/")
async def root():
    """Redirect root to the API docs."""
    return RedirectResponse(url="/docs")


@app.get("/api/health")
async def health():
    return {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "storage": type(storage).__name__ if storage else None,
        "oracle": oracle is not None
    }


# Word groups & practice

@app.get("/api/word-groups")
async def get_word_groups():
    """All words grouped by category, with synonyms."""
    try:
        return group_words(storage.list_words())
    except Exception as e:
        logger.error(f"Error fetching word groups: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch word groups")


@app.post("/api/next-word")
async def next_word(request: NextWordRequest):
    """Pick the next word to practise, weighted by difficulty."""
    categories = [key for key, enabled in request.enabled_groups.items() if enabled]
    directions = []
    if request.translation_directions.slovak_to_english:
        directions.append(DIRECTION_SK_EN)
    if request.translation_directions.english_to_slovak:
        directions.append(DIRECTION_EN_SK)

    try:
        selected = get_selector().select_next(categories, directions)
    except Exception as e:
        logger.error(f"Error getting next word: {e}")
        raise HTTPException(status_code=500, detail="Failed to get next word")

    if selected is None:
        return {"no_words_available": True}
    return {"next_word": selected.to_dict()}


@app.post("/api/check-answer")
async def check_answer_endpoint(request: AnswerRequest):
    """Check an answer against the translation and its synonyms."""
    require_text(request.user_answer, 'user_answer')
    require_language(request.target_language)

    try:
        result = check_answer(storage, request.word_id, request.user_answer,
                              request.target_language, validation_enabled=oracle is not None)
    except Exception as e:
        logger.error(f"Error checking answer: {e}")
        raise HTTPException(status_code=500, detail="Failed to check answer")

    if result is None:
        raise HTTPException(status_code=404, detail="Word not found")
    return result


@app.post("/api/validate-translation")
async def validate_translation(request: AnswerRequest):
    """Ask the AI whether an unmatched answer is valid; keep it as a synonym if so."""
    require_text(request.user_answer, 'user_answer')
    require_language(request.target_language)

    try:
        word = storage.get_word(request.word_id)
        if word is None:
            raise HTTPException(status_code=404, detail="Word not found")

        correct_answers = get_correct_answers(storage, word, request.target_language)
        if is_correct(request.user_answer, correct_answers):
            return {
                "valid": True,
                "added_as_synonym": False,
                "explanation": "The answer already matches a known translation.",
                "correct_answers": correct_answers
            }

        learner = get_learner()
        synonyms = storage.get_synonyms(word.id, request.target_language)
        # Oracle requests are slow network calls; keep them off the event loop
        loop = asyncio.get_event_loop()
        judgement = await loop.run_in_executor(
            None,
            lambda: learner.judge(word, request.target_language, request.user_answer, synonyms)
        )
        result = learner.learn(word, request.target_language, request.user_answer, judgement)
        if not result['accepted']:
            return {
                "valid": False,
                "added_as_synonym": False,
                "explanation": result['explanation']
            }

        return {
            "valid": True,
            "added_as_synonym": result['added_as_synonym'],
            "explanation": result['explanation'],
            "correct_answers": get_correct_answers(storage, word, request.target_language)
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error validating translation: {e}")
        raise HTTPException(status_code=500, detail="Failed to validate translation")


@app.post("/api/record-answer")
async def record_answer(request: RecordAnswerRequest):
    """Record an answer in the word and session statistics."""
    require_direction(request.direction)
    logger.info(f"Recording answer: word_id={request.word_id}, "
                f"direction={request.direction}, correct={request.is_correct}")

    try:
        if storage.get_word(request.word_id) is None:
            raise HTTPException(status_code=404, detail="Word not found")
        storage.upsert_stat(request.word_id, request.direction, request.is_correct, datetime.now())
        session_stats = get_tracker().record(request.is_correct, request.time_taken)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error recording answer: {e}")
        raise HTTPException(status_code=500, detail="Failed to record answer")

    return {
        "message": "Answer recorded successfully",
        "word_id": request.word_id,
        "direction": request.direction,
        "correct": request.is_correct,
        "session_stats": session_stats.to_dict()
    }


@app.get("/api/word-difficulty/{word_id}/{direction}")
async def get_word_difficulty(word_id: int, direction: str):
    """Current selection weight of a word in one direction."""
    require_direction(direction)
    return {
        "difficulty": word_difficulty(storage, word_id, direction),
        "word_id": word_id,
        "direction": direction
    }


# Statistics

@app.get("/api/session-stats")
async def get_session_stats(days: int = DEFAULT_HISTORY_DAYS):
    """Today's totals plus recent history."""
    if days <= 0:
        days = DEFAULT_HISTORY_DAYS
    try:
        tracker = get_tracker()
        today = tracker.today_stats()
        history = tracker.history(days)
    except Exception as e:
        logger.error(f"Error fetching session stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch session statistics")

    return {
        "today": today.to_dict(),
        "history": [stat.to_dict() for stat in history],
        "summary": SessionTracker.summary(history)
    }


@app.get("/api/user-stats")
async def get_user_stats():
    try:
        return storage.get_all_user_stats()
    except Exception as e:
        logger.error(f"Error fetching user stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch user statistics")


@app.get("/api/stats")
async def get_stats():
    """Word counts per category."""
    try:
        return storage.get_category_stats()
    except Exception as e:
        logger.error(f"Error fetching database stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch statistics")


@app.post("/api/cleanup-session-stats")
async def cleanup_session_stats():
    """Merge duplicate daily session records."""
    try:
        details = get_tracker().consolidate()
    except Exception as e:
        logger.error(f"Error during cleanup: {e}")
        raise HTTPException(status_code=500, detail="Failed to cleanup session statistics")

    return {
        "message": "Session statistics cleanup completed",
        "consolidated_dates": len(details),
        "details": details
    }


# Words & synonyms

@app.post("/api/words", status_code=201)
async def add_word(request: WordRequest):
    require_text(request.slovak, 'slovak')
    require_text(request.english, 'english')
    require_text(request.category, 'category')
    synonyms = request.synonyms.model_dump() if request.synonyms else {}

    try:
        word_id = storage.add_word(request.slovak.strip(), request.english.strip(),
                                   request.category.strip(), synonyms)
    except DuplicateWordError:
        raise HTTPException(status_code=409, detail="Word already exists")
    except Exception as e:
        logger.error(f"Error adding word: {e}")
        raise HTTPException(status_code=500, detail="Failed to add word")

    return {
        "id": word_id,
        "message": "Word added successfully",
        "word": {
            "slovak": request.slovak,
            "english": request.english,
            "category": request.category,
            "synonyms": synonyms
        }
    }


@app.put("/api/words/{word_id}")
async def update_word(word_id: int, request: WordUpdateRequest):
    updates = request.model_dump(exclude_none=True)
    try:
        updated = storage.update_word(word_id, updates)
    except DuplicateWordError:
        raise HTTPException(status_code=409, detail="Word already exists")
    except Exception as e:
        logger.error(f"Error updating word: {e}")
        raise HTTPException(status_code=500, detail="Failed to update word")

    if not updated:
        raise HTTPException(status_code=404, detail="Word not found")
    return {"message": "Word updated successfully"}


@app.delete("/api/words/{word_id}")
async def delete_word(word_id: int):
    try:
        deleted = storage.delete_word(word_id)
    except Exception as e:
        logger.error(f"Error deleting word: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete word")

    if deleted == 0:
        raise HTTPException(status_code=404, detail="Word not found")
    return {"message": "Word deleted successfully", "deleted_count": deleted}


@app.get("/api/words/{word_id}/synonyms")
async def get_synonyms(word_id: int, language: str):
    require_language(language)
    if storage.get_word(word_id) is None:
        raise HTTPException(status_code=404, detail="Word not found")
    return {"word_id": word_id, "language": language,
            "synonyms": storage.get_synonyms(word_id, language)}


@app.post("/api/words/{word_id}/synonyms", status_code=201)
async def add_synonym(word_id: int, request: SynonymRequest):
    require_language(request.language)
    require_text(request.synonym, 'synonym')
    if storage.get_word(word_id) is None:
        raise HTTPException(status_code=404, detail="Word not found")
    added = storage.add_synonym(word_id, request.language, request.synonym)
    return {"added": added, "synonyms": storage.get_synonyms(word_id, request.language)}


@app.delete("/api/words/{word_id}/synonyms")
async def delete_synonym(word_id: int, language: str, synonym: str):
    require_language(language)
    if not storage.delete_synonym(word_id, language, synonym):
        raise HTTPException(status_code=404, detail="Synonym not found")
    return {"message": "Synonym deleted successfully"}


@app.post("/api/import-words")
async def import_words(request: ImportWordsRequest):
    """Bulk import words into one category; bad entries are counted, not fatal."""
    require_text(request.category, 'category')
    imported = 0
    errors = 0
    error_details = []

    for word in request.words:
        slovak = word.get('slovak')
        english = word.get('english')
        if not slovak or not english:
            errors += 1
            error_details.append(f"Invalid word: {word}")
            continue
        try:
            storage.add_word(slovak, english, request.category, word.get('synonyms') or {})
            imported += 1
        except Exception as e:
            errors += 1
            error_details.append(f"Failed to import {slovak}/{english}: {e}")

    return {
        "message": "Bulk import completed",
        "imported": imported,
        "errors": errors,
        "error_details": error_details[:10]
    }


# Preferences

@app.get("/api/preferences")
async def get_preferences(user_id: str = DEFAULT_USER):
    try:
        return storage.get_preferences(user_id or DEFAULT_USER)
    except Exception as e:
        logger.error(f"Error fetching preferences: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch preferences")


@app.post("/api/preferences")
async def set_preference(request: PreferenceRequest):
    require_text(request.key, 'key')
    try:
        storage.set_preference(request.key, request.value, request.user_id or DEFAULT_USER)
    except Exception as e:
        logger.error(f"Error saving preference: {e}")
        raise HTTPException(status_code=500, detail="Failed to save preference")
    return {"message": "Preference saved successfully"}


def create_app():
    """Factory function for creating the app (useful for testing)."""
    return app
