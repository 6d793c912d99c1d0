"""
Save-time validation of questions and tests.

Problems come back as a ValidationReport, never as exceptions. Issues with
severity ERROR block saving; WARNING issues (duplicate matching right values,
repeated question ids) are logged and let the test be saved.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from loguru import logger

from quizcore.models import Question, Test
from quizcore.questions import get_handler
from quizcore.questions.base import Severity, ValidationIssue, error, warning

VISIBILITY_SCOPES = ("all", "group")

__all__ = [
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "validate_question",
    "validate_test",
]


@dataclass
class ValidationReport:
    """All authoring issues of a test, in question order."""
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def ok(self) -> bool:
        """True when nothing blocks saving."""
        return not self.errors

    def messages(self) -> list[str]:
        return [str(issue) for issue in self.issues]

    def for_question(self, index: int) -> list[ValidationIssue]:
        """Issues of one question (1-based), sub-question issues included."""
        return [i for i in self.issues if i.question_index == index]


def validate_question(question: Question, index: int | None = None) -> list[ValidationIssue]:
    """
    Authoring issues of one question.

    Args:
        question: Question to check
        index: 1-based position in its test, stamped on each issue
    """
    issues = get_handler(question.type).validate(question)
    for issue in issues:
        issue.question_index = index
    return issues


def validate_test(test: Test) -> ValidationReport:
    """Check a whole test before it is saved."""
    report = ValidationReport()

    if not test.title.strip():
        report.issues.append(error("Test title is empty"))
    if not test.questions:
        report.issues.append(error("Add at least one question"))
    if test.visible_for not in VISIBILITY_SCOPES:
        report.issues.append(error(f"Unknown visibility scope '{test.visible_for}'"))
    elif test.visible_for == "group" and not test.group_id:
        report.issues.append(error("Choose a group for a group-only test"))
    if test.time_limit is not None and test.time_limit <= 0:
        report.issues.append(error("Time limit must be a positive number of minutes"))

    id_counts = Counter(q.id for q in test.questions)
    for question_id, count in id_counts.items():
        if count > 1:
            report.issues.append(warning(f"Question id '{question_id}' is used {count} times"))

    section_ids = {s.id for s in test.sections}
    for number, question in enumerate(test.questions, 1):
        report.issues.extend(validate_question(question, number))
        if question.section_id and question.section_id not in section_ids:
            issue = error(f"Unknown reading section '{question.section_id}'")
            issue.question_index = number
            report.issues.append(issue)

    for issue in report.warnings:
        logger.warning(f"Test {test.id}: {issue}")
    if report.errors:
        logger.debug(f"Test {test.id}: {len(report.errors)} validation errors")
    return report
