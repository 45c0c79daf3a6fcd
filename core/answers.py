"""Answer checking against translations and synonyms."""

from .utils import normalize_text


def build_correct_answers(main_answer: str | None, synonyms: list[str]) -> list[str]:
    """Accepted answers in both lower-cased and diacritic-free form, first-seen order."""
    answers = []
    for text in [main_answer, *synonyms]:
        if not text:
            continue
        for form in (text.lower().strip(), normalize_text(text)):
            if form and form not in answers:
                answers.append(form)
    return answers


def is_correct(user_answer: str | None, candidates: list[str]) -> bool:
    """True if the answer matches any candidate ignoring case, whitespace and accents."""
    if not user_answer or not user_answer.strip():
        return False
    normalized = normalize_text(user_answer)
    if normalized in {normalize_text(c) for c in candidates}:
        return True
    raw = user_answer.lower().strip()
    return raw in {c.lower().strip() for c in candidates if c}


def get_correct_answers(storage, word, target_language: str) -> list[str]:
    """All accepted answers for a word in the target language."""
    synonyms = storage.get_synonyms(word.id, target_language)
    return build_correct_answers(word.text(target_language), synonyms)


def check_answer(storage, word_id: int, user_answer: str, target_language: str,
                 validation_enabled: bool = True) -> dict | None:
    """Check a typed answer for a word. Returns None if the word does not exist."""
    word = storage.get_word(word_id)
    if word is None:
        return None

    correct_answers = get_correct_answers(storage, word, target_language)
    correct = is_correct(user_answer, correct_answers)
    return {
        'correct': correct,
        'correct_answers': correct_answers,
        'user_answer': user_answer,
        'needs_validation': not correct and validation_enabled
    }
