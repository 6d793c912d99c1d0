"""
Multi-select question handler.

Several options may be correct. The student answer is the list of selected
indices; credit is all-or-nothing on the exact set.
"""

from typing import Any

from config import get_settings
from quizcore.models import MultiSelectQuestion, Question, QuestionType

from . import register
from .base import UnitScore, ValidationIssue, error, is_index, points_issues, shared_fields


def _selection(answer: Any) -> set[int] | None:
    if not isinstance(answer, (list, tuple, set, frozenset)):
        return None
    return {i for i in answer if is_index(i)}


@register(QuestionType.MULTI_SELECT)
class MultiSelectHandler:
    """Handler for multiple-correct-answer questions."""

    def default(self, base: Question) -> MultiSelectQuestion:
        count = get_settings().default_option_count
        return MultiSelectQuestion(**shared_fields(base), options=[""] * count, correct_answers=[])

    def validate(self, question: MultiSelectQuestion) -> list[ValidationIssue]:
        issues = []
        if not question.text.strip():
            issues.append(error("Question text is empty"))

        min_options = get_settings().min_options
        if len(question.options) < min_options:
            issues.append(error(f"At least {min_options} options are required"))
        if not all(option.strip() for option in question.options):
            issues.append(error("Every option must be filled in"))

        if not question.correct_answers:
            issues.append(error("Mark at least one correct option"))
        elif any(
            not is_index(i) or not 0 <= i < len(question.options)
            for i in question.correct_answers
        ):
            issues.append(error("A correct option is not one of the options"))

        issues.extend(points_issues(question))
        return issues

    def units(self, question: MultiSelectQuestion) -> int:
        return question.points

    def score(self, question: MultiSelectQuestion, answer: Any) -> UnitScore:
        selected = _selection(answer)
        correct = bool(selected) and selected == set(question.correct_answers)
        return UnitScore(question.points if correct else 0, question.points)

    def is_attempted(self, question: MultiSelectQuestion, answer: Any) -> bool:
        return bool(_selection(answer))

    def load_answer(self, question: MultiSelectQuestion, raw: Any) -> list[int] | None:
        if raw is None:
            return None
        if not isinstance(raw, (list, tuple)):
            raw = [raw]
        selected = []
        for item in raw:
            if isinstance(item, bool):
                continue
            try:
                selected.append(int(item))
            except (TypeError, ValueError):
                continue
        return selected
