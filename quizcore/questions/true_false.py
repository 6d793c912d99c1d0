"""
True/False question handler.
"""

from typing import Any

from quizcore.models import Question, QuestionType, TrueFalseQuestion

from . import register
from .base import UnitScore, ValidationIssue, error, points_issues, shared_fields


@register(QuestionType.TRUE_FALSE)
class TrueFalseHandler:
    """Handler for true/false statements."""

    def default(self, base: Question) -> TrueFalseQuestion:
        return TrueFalseQuestion(**shared_fields(base), correct_answer=True)

    def validate(self, question: TrueFalseQuestion) -> list[ValidationIssue]:
        issues = []
        if not question.text.strip():
            issues.append(error("Statement text is empty"))
        if not isinstance(question.correct_answer, bool):
            issues.append(error("Correct answer must be true or false"))
        issues.extend(points_issues(question))
        return issues

    def units(self, question: TrueFalseQuestion) -> int:
        return question.points

    def score(self, question: TrueFalseQuestion, answer: Any) -> UnitScore:
        correct = isinstance(answer, bool) and answer == question.correct_answer
        return UnitScore(question.points if correct else 0, question.points)

    def is_attempted(self, question: TrueFalseQuestion, answer: Any) -> bool:
        # False is a real answer
        return isinstance(answer, bool)

    def load_answer(self, question: TrueFalseQuestion, raw: Any) -> bool | None:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            lowered = raw.strip().lower()
            if lowered in ("true", "t"):
                return True
            if lowered in ("false", "f"):
                return False
        return None
