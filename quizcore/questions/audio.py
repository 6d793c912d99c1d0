"""
Audio (composite) question handler.

An audio question has no answer of its own: it owns a recording and an
ordered list of sub-questions, each scored and checked by its own handler.
"""

from typing import Any

from quizcore.models import AudioAnswer, AudioQuestion, Question, QuestionType

from . import get_handler, register
from .base import UnitScore, ValidationIssue, error, shared_fields


def sub_answer(answer: Any, index: int) -> Any:
    if isinstance(answer, AudioAnswer):
        return answer.get(index)
    return None


@register(QuestionType.AUDIO)
class AudioHandler:
    """Handler for audio questions with nested sub-questions."""

    def default(self, base: Question) -> AudioQuestion:
        return AudioQuestion(**shared_fields(base), audio=None, sub_questions=[])

    def validate(self, question: AudioQuestion) -> list[ValidationIssue]:
        issues = []
        if not question.audio:
            issues.append(error("Audio file is missing"))
        if not question.sub_questions:
            issues.append(error("Add at least one sub-question"))

        for number, sub in enumerate(question.sub_questions, 1):
            if sub.type == QuestionType.AUDIO:
                issue = error("Audio questions cannot contain audio questions")
                issue.sub_index = number
                issues.append(issue)
                continue
            for issue in get_handler(sub.type).validate(sub):
                issue.sub_index = number
                issues.append(issue)
        return issues

    def units(self, question: AudioQuestion) -> int:
        return sum(get_handler(sub.type).units(sub) for sub in question.sub_questions)

    def score(self, question: AudioQuestion, answer: Any) -> UnitScore:
        total = UnitScore(0, 0)
        for index, sub in enumerate(question.sub_questions):
            total += get_handler(sub.type).score(sub, sub_answer(answer, index))
        return total

    def is_attempted(self, question: AudioQuestion, answer: Any) -> bool:
        return all(
            get_handler(sub.type).is_attempted(sub, sub_answer(answer, index))
            for index, sub in enumerate(question.sub_questions)
        )

    def load_answer(self, question: AudioQuestion, raw: Any) -> AudioAnswer | None:
        if isinstance(raw, AudioAnswer):
            return raw
        if not isinstance(raw, dict):
            return None
        stored = raw.get("subAnswers", raw)
        sub_answers = {}
        for key, value in (stored or {}).items():
            try:
                index = int(key)
            except (TypeError, ValueError):
                continue
            if 0 <= index < len(question.sub_questions):
                sub = question.sub_questions[index]
                sub_answers[index] = get_handler(sub.type).load_answer(sub, value)
        return AudioAnswer(sub_answers=sub_answers)
