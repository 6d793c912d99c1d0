"""
Free-text question handler.

Answers are compared case-insensitively after trimming; there is no credit
for near misses.
"""

from typing import Any

from quizcore.models import Question, QuestionType, TextQuestion

from . import register
from .base import UnitScore, ValidationIssue, error, points_issues, shared_fields


def normalize(value: str) -> str:
    return value.strip().lower()


@register(QuestionType.TEXT)
class TextHandler:
    """Handler for free-text questions."""

    def default(self, base: Question) -> TextQuestion:
        return TextQuestion(**shared_fields(base), correct_answer="")

    def validate(self, question: TextQuestion) -> list[ValidationIssue]:
        issues = []
        if not question.text.strip():
            issues.append(error("Question text is empty"))
        if not question.correct_answer.strip():
            issues.append(error("Correct answer is empty"))
        issues.extend(points_issues(question))
        return issues

    def units(self, question: TextQuestion) -> int:
        return question.points

    def score(self, question: TextQuestion, answer: Any) -> UnitScore:
        correct = (
            self.is_attempted(question, answer)
            and normalize(answer) == normalize(question.correct_answer)
        )
        return UnitScore(question.points if correct else 0, question.points)

    def is_attempted(self, question: TextQuestion, answer: Any) -> bool:
        return isinstance(answer, str) and bool(answer.strip())

    def load_answer(self, question: TextQuestion, raw: Any) -> str | None:
        if raw is None:
            return None
        return str(raw)
