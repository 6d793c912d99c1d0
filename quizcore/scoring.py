"""
Scoring engine.

Pure functions: a test's questions plus a student's answers in, earned and
maximum points out. The maximum is structural (one unit per simple question,
blank or pair, summed through audio sub-questions) and does not depend on
what the student answered.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from collections.abc import Mapping, Sequence
from typing import Any

from config import get_settings
from quizcore.models import Question
from quizcore.questions import get_handler
from quizcore.questions.base import UnitScore

Answers = Mapping[int, Any] | Sequence[Any]


@dataclass
class ScoreResult:
    """Test-level score with the per-question breakdown."""
    earned: int = 0
    max: int = 0
    per_question: list[UnitScore] = field(default_factory=list)

    @property
    def graded(self) -> bool:
        """False for a test without scorable units."""
        return self.max > 0

    @property
    def percentage(self) -> float | None:
        return percentage(self.earned, self.max)


def answer_at(answers: Answers | None, index: int) -> Any:
    """Answer of question `index` (0-based), or None when missing."""
    if answers is None:
        return None
    if isinstance(answers, Mapping):
        return answers.get(index)
    if 0 <= index < len(answers):
        return answers[index]
    return None


def score_question(question: Question, answer: Any) -> UnitScore:
    return get_handler(question.type).score(question, answer)


def max_points(questions: Sequence[Question]) -> int:
    """Structural point count of a list of questions."""
    return sum(get_handler(q.type).units(q) for q in questions)


def score(questions: Sequence[Question], answers: Answers | None) -> ScoreResult:
    """
    Score a submission.

    Args:
        questions: Questions of the test, in order
        answers: Student answers keyed by 0-based question index

    Returns:
        ScoreResult with earned/max totals; an empty test scores 0/0
    """
    result = ScoreResult()
    for index, question in enumerate(questions):
        unit = score_question(question, answer_at(answers, index))
        result.per_question.append(unit)
        result.earned += unit.earned
        result.max += unit.max
    return result


def percentage(earned: int, maximum: int, decimals: int | None = None) -> float | None:
    """
    earned / maximum as a percentage.

    Returns None for maximum == 0 (ungraded) instead of dividing by zero.
    """
    if maximum <= 0:
        return None
    if decimals is None:
        decimals = get_settings().percentage_decimals
    return round(earned / maximum * 100, decimals)
