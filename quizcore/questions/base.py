"""
Base protocol and types for question handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from quizcore.models import Question


@dataclass
class UnitScore:
    """Points earned on one question out of its structural maximum."""
    earned: int
    max: int

    @property
    def correct(self) -> bool:
        return self.max > 0 and self.earned == self.max

    def __add__(self, other: UnitScore) -> UnitScore:
        return UnitScore(self.earned + other.earned, self.max + other.max)


class Severity(str, Enum):
    ERROR = "error"  # blocks saving
    WARNING = "warning"  # logged, saving allowed


@dataclass
class ValidationIssue:
    """One authoring problem, keyed by 1-based question/sub-question number."""
    message: str
    severity: Severity = Severity.ERROR
    question_index: int | None = None
    sub_index: int | None = None

    @property
    def location(self) -> str:
        if self.question_index is None:
            return "Test"
        if self.sub_index is None:
            return f"Question {self.question_index}"
        return f"Question {self.question_index}.{self.sub_index}"

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


def error(message: str) -> ValidationIssue:
    return ValidationIssue(message, Severity.ERROR)


def warning(message: str) -> ValidationIssue:
    return ValidationIssue(message, Severity.WARNING)


class QuestionHandler(Protocol):
    """Protocol for question kind handlers."""

    def default(self, base: Question) -> Question:
        """Fresh question of this kind keeping id, text, image and section of `base`."""
        ...

    def validate(self, question: Question) -> list[ValidationIssue]:
        """Authoring completeness issues. Empty list when ready to save."""
        ...

    def units(self, question: Question) -> int:
        """Scorable units this question adds to the test maximum."""
        ...

    def score(self, question: Question, answer: Any) -> UnitScore:
        """Earned and maximum points for a (possibly missing) answer."""
        ...

    def is_attempted(self, question: Question, answer: Any) -> bool:
        """Whether the answer is present enough to allow submission."""
        ...

    def load_answer(self, question: Question, raw: Any) -> Any:
        """Student answer from its stored (JSON) form."""
        ...


def shared_fields(question: Question) -> dict[str, Any]:
    """Fields every kind keeps across a type change."""
    return {
        "id": question.id,
        "text": question.text,
        "image": question.image,
        "section_id": question.section_id,
    }


def is_index(value: Any) -> bool:
    """Option index check that refuses booleans (bool is an int subclass)."""
    return isinstance(value, int) and not isinstance(value, bool)


def points_issues(question: Any) -> list[ValidationIssue]:
    if not is_index(question.points) or question.points < 1:
        return [error("Point weight must be a positive whole number")]
    return []
