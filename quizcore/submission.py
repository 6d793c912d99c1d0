"""
Submission checks and the submission record.

Before a test is handed in, every question must be attempted: a selection
for choice and true/false questions, non-blank text, a word in every blank,
every left item paired, and every audio sub-question attempted on its own
terms. The check reports which question numbers are missing, never which
answers are wrong.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from loguru import logger

from quizcore.models import Question, Test, answers_to_dict
from quizcore.questions import get_handler
from quizcore.scoring import Answers, answer_at, percentage, score


@dataclass
class CompletenessReport:
    """1-based numbers of the questions that still need an answer."""
    incomplete: list[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.incomplete


@dataclass
class SubmissionRecord:
    """What is stored for one finished attempt."""
    student_id: str
    test_id: str
    answers: dict[int, Any]
    score: int
    max_score: int
    percentage: float | None  # None when the test has no scorable units
    timed_out: bool = False
    submitted_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def graded(self) -> bool:
        return self.percentage is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "studentId": self.student_id,
            "testId": self.test_id,
            "answers": answers_to_dict(self.answers),
            "score": self.score,
            "maxScore": self.max_score,
            "percentage": self.percentage,
            "graded": self.graded,
            "timedOut": self.timed_out,
            "submittedAt": self.submitted_at,
        }


@dataclass
class SubmissionResult:
    accepted: bool
    incomplete: list[int] = field(default_factory=list)
    record: SubmissionRecord | None = None


def is_question_complete(question: Question, answer: Any) -> bool:
    return get_handler(question.type).is_attempted(question, answer)


def check_completeness(questions: Sequence[Question], answers: Answers | None) -> CompletenessReport:
    """Find the questions (1-based) without a usable answer."""
    report = CompletenessReport()
    for index, question in enumerate(questions):
        if not is_question_complete(question, answer_at(answers, index)):
            report.incomplete.append(index + 1)
    return report


def load_answers(questions: Sequence[Question], raw: Mapping[str, Any] | None) -> dict[int, Any]:
    """
    Student answers from their stored form.

    Keys are 0-based question indices (strings in JSON); entries for
    indices outside the test are dropped.
    """
    answers: dict[int, Any] = {}
    for key, value in (raw or {}).items():
        try:
            index = int(key)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring answer with non-numeric key {key!r}")
            continue
        if not 0 <= index < len(questions):
            logger.warning(f"Ignoring answer for question index {index} outside the test")
            continue
        question = questions[index]
        answers[index] = get_handler(question.type).load_answer(question, value)
    return answers


def submit(
    test: Test,
    student_id: str,
    answers: Mapping[int, Any] | None,
    timed_out: bool = False,
) -> SubmissionResult:
    """
    Finalize an attempt.

    Args:
        test: The test being taken
        student_id: Who is submitting
        answers: Answers keyed by 0-based question index
        timed_out: Time limit expired; hand in whatever is there

    Returns:
        SubmissionResult; rejected with the incomplete question numbers unless
        complete or timed out
    """
    answers = dict(answers or {})
    if not timed_out:
        completeness = check_completeness(test.questions, answers)
        if not completeness.ok:
            logger.info(
                f"Submission of test {test.id} by {student_id} blocked: "
                f"questions {completeness.incomplete} incomplete"
            )
            return SubmissionResult(accepted=False, incomplete=completeness.incomplete)

    result = score(test.questions, answers)
    record = SubmissionRecord(
        student_id=student_id,
        test_id=test.id,
        answers=copy.deepcopy(answers),
        score=result.earned,
        max_score=result.max,
        percentage=percentage(result.earned, result.max),
        timed_out=timed_out,
    )
    logger.info(
        f"Test {test.id} submitted by {student_id}: {record.score}/{record.max_score}"
        + (" (time limit reached)" if timed_out else "")
    )
    return SubmissionResult(accepted=True, record=record)
