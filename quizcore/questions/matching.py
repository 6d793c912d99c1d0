"""
Matching question handler.

Each pair is worth one unit. The student answer is the finalized matching
state (see quizcore.matching). When it carries committed pairs, earned points
are re-derived from the question so a stale correct flag or matchedCount
cannot earn credit. An answer holding only matchedCount (no pairs) earns that
count, capped at the number of pairs, and counts as attempted when the count
reaches the total.
"""

from collections import Counter
from typing import Any

from loguru import logger

from config import get_settings
from quizcore.models import MatchingAnswer, MatchingQuestion, Question, QuestionType

from . import register
from .base import UnitScore, ValidationIssue, error, shared_fields, warning


def committed_pairs(answer: MatchingAnswer) -> dict[str, str]:
    """Latest committed right value per left value."""
    return {pair.left: pair.right for pair in answer.pairs}


@register(QuestionType.MATCHING)
class MatchingHandler:
    """Handler for matching questions."""

    def default(self, base: Question) -> MatchingQuestion:
        return MatchingQuestion(**shared_fields(base), pairs=[])

    def validate(self, question: MatchingQuestion) -> list[ValidationIssue]:
        issues = []
        if not question.text.strip():
            issues.append(error("Question text is empty"))

        min_pairs = get_settings().min_matching_pairs
        if len(question.pairs) < min_pairs:
            issues.append(error(f"At least {min_pairs} pairs are required"))

        for number, pair in enumerate(question.pairs, 1):
            if not pair.left.strip() or not pair.right.strip():
                issues.append(error(f"Pair {number} is missing a side"))

        lefts = Counter(p.left for p in question.pairs if p.left.strip())
        for left, count in lefts.items():
            if count > 1:
                issues.append(error(f"Left item '{left}' is used by {count} pairs"))

        rights = Counter(p.right for p in question.pairs if p.right.strip())
        for right, count in rights.items():
            if count > 1:
                logger.warning(f"Question {question.id}: right item {right!r} repeats {count} times")
                issues.append(warning(f"Right item '{right}' appears {count} times; matching is ambiguous"))

        return issues

    def units(self, question: MatchingQuestion) -> int:
        return len(question.pairs)

    def score(self, question: MatchingQuestion, answer: Any) -> UnitScore:
        total = len(question.pairs)
        if not isinstance(answer, MatchingAnswer):
            return UnitScore(0, total)
        if not answer.pairs:
            return UnitScore(max(0, min(answer.matched_count, total)), total)
        earned = sum(
            1 for left, right in committed_pairs(answer).items()
            if question.is_correct_pair(left, right)
        )
        return UnitScore(min(earned, total), total)

    def is_attempted(self, question: MatchingQuestion, answer: Any) -> bool:
        if not isinstance(answer, MatchingAnswer):
            return False
        if not answer.pairs:
            return answer.matched_count >= len(question.pairs)
        lefts = set(question.lefts)
        paired = {left for left in committed_pairs(answer) if left in lefts}
        return len(paired) == len(lefts)

    def load_answer(self, question: MatchingQuestion, raw: Any) -> MatchingAnswer | None:
        if isinstance(raw, MatchingAnswer):
            return raw
        if not isinstance(raw, dict):
            return None
        answer = MatchingAnswer.from_dict(raw)
        if not answer.total:
            answer.total = len(question.pairs)
        return answer
