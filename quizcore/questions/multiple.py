"""
Multiple choice question handler.

One correct option out of an ordered list. The student answer is the
selected option index.
"""

from typing import Any

from config import get_settings
from quizcore.models import MultipleChoiceQuestion, Question, QuestionType

from . import register
from .base import UnitScore, ValidationIssue, error, is_index, points_issues, shared_fields


@register(QuestionType.MULTIPLE)
class MultipleChoiceHandler:
    """Handler for single-answer multiple choice questions."""

    def default(self, base: Question) -> MultipleChoiceQuestion:
        count = get_settings().default_option_count
        return MultipleChoiceQuestion(**shared_fields(base), options=[""] * count, correct_answer=0)

    def validate(self, question: MultipleChoiceQuestion) -> list[ValidationIssue]:
        issues = []
        if not question.text.strip():
            issues.append(error("Question text is empty"))

        min_options = get_settings().min_options
        if len(question.options) < min_options:
            issues.append(error(f"At least {min_options} options are required"))
        if not all(option.strip() for option in question.options):
            issues.append(error("Every option must be filled in"))

        if not is_index(question.correct_answer) or not (
            0 <= question.correct_answer < len(question.options)
        ):
            issues.append(error("Correct option is not one of the options"))

        issues.extend(points_issues(question))
        return issues

    def units(self, question: MultipleChoiceQuestion) -> int:
        return question.points

    def score(self, question: MultipleChoiceQuestion, answer: Any) -> UnitScore:
        correct = is_index(answer) and answer == question.correct_answer
        return UnitScore(question.points if correct else 0, question.points)

    def is_attempted(self, question: MultipleChoiceQuestion, answer: Any) -> bool:
        # Any selection counts, right or wrong
        return is_index(answer)

    def load_answer(self, question: MultipleChoiceQuestion, raw: Any) -> int | None:
        if raw is None or isinstance(raw, bool):
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None
