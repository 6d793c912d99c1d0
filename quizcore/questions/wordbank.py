"""
Word bank (cloze) question handler.

Blanks are embedded in the question body as placeholders; every blank is
worth one unit. The student answer maps blank id -> chosen word.
"""

from typing import Any

from loguru import logger

from quizcore.models import Question, QuestionType, WordBankQuestion

from . import register
from .base import UnitScore, ValidationIssue, error, shared_fields


def unique_blank_ids(question: WordBankQuestion) -> list[str]:
    """Body blank ids in order, each once."""
    return list(dict.fromkeys(question.blank_ids))


def _choices(answer: Any) -> dict[str, str]:
    if not isinstance(answer, dict):
        return {}
    return {str(k): v for k, v in answer.items() if isinstance(v, str)}


@register(QuestionType.WORDBANK)
class WordBankHandler:
    """Handler for cloze questions with a shared word bank."""

    def default(self, base: Question) -> WordBankQuestion:
        return WordBankQuestion(**shared_fields(base), bank=[], correct_answers={})

    def validate(self, question: WordBankQuestion) -> list[ValidationIssue]:
        issues = []
        if not question.text.strip():
            issues.append(error("Question text is empty"))

        body_ids = question.blank_ids
        blank_ids = unique_blank_ids(question)
        if not blank_ids:
            issues.append(error("Add at least one blank"))
        if len(body_ids) != len(blank_ids):
            issues.append(error("A blank appears more than once in the text"))

        if not question.bank:
            issues.append(error("Word bank is empty"))
        elif not all(word.strip() for word in question.bank):
            issues.append(error("Word bank contains an empty word"))

        for number, blank_id in enumerate(blank_ids, 1):
            expected = question.correct_answers.get(blank_id, "")
            if not expected.strip():
                issues.append(error(f"Blank {number} has no correct answer"))
            elif expected not in question.bank:
                logger.warning(
                    f"Question {question.id}: blank {blank_id} answer {expected!r} is not in the bank"
                )
                issues.append(error(f"Blank {number} answer '{expected}' is not in the word bank"))

        for blank_id in question.correct_answers:
            if blank_id not in blank_ids:
                issues.append(error(f"Answer recorded for missing blank '{blank_id}'"))

        return issues

    def units(self, question: WordBankQuestion) -> int:
        return len(unique_blank_ids(question))

    def score(self, question: WordBankQuestion, answer: Any) -> UnitScore:
        choices = _choices(answer)
        blank_ids = unique_blank_ids(question)
        earned = 0
        for blank_id in blank_ids:
            chosen = choices.get(blank_id, "")
            if chosen and chosen == question.correct_answers.get(blank_id):
                earned += 1
        return UnitScore(earned, len(blank_ids))

    def is_attempted(self, question: WordBankQuestion, answer: Any) -> bool:
        choices = _choices(answer)
        return all(choices.get(blank_id, "").strip() for blank_id in unique_blank_ids(question))

    def load_answer(self, question: WordBankQuestion, raw: Any) -> dict[str, str] | None:
        if not isinstance(raw, dict):
            return None
        return {str(k): str(v) for k, v in raw.items() if v is not None}
