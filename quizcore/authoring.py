"""
Authoring operations for questions and tests.

Every function returns an updated copy and leaves its input untouched, so an
editor can diff the result against what it is showing.

Covers:
- new_question / change_type: variant defaults and type conversion
- Choice options: set / add / remove / mark correct
- Matching pairs: add / update / remove (ids from a per-question counter)
- Audio sub-questions: add / replace / remove (no audio inside audio)
- Test aggregate: add / update / remove / move questions
"""

from __future__ import annotations

import copy
from dataclasses import replace
from typing import Any

from loguru import logger

from config import get_settings
from quizcore.cloze import strip_blanks
from quizcore.errors import NestedAudioError, UnknownPairError
from quizcore.models import (
    AudioQuestion,
    MatchingPair,
    MatchingQuestion,
    MultiSelectQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    Test,
    WordBankQuestion,
    coerce_type,
    highest_counter,
)
from quizcore.questions import get_handler

ChoiceQuestion = MultipleChoiceQuestion | MultiSelectQuestion


# =============================================================================
# Question kinds
# =============================================================================


def new_question(question_type: str | QuestionType, **shared: Any) -> Question:
    """
    Fresh question of the given kind.

    Args:
        question_type: Kind tag ("multiple", "wordbank", ...)
        **shared: Optional shared fields (id, text, image, section_id)
    """
    blank = Question(**shared)
    return get_handler(question_type).default(blank)


def change_type(question: Question, question_type: str | QuestionType) -> Question:
    """
    Convert a question to another kind.

    Shared fields (id, text, image, section) survive; fields specific to the
    old kind are discarded. Blank placeholders are flattened when leaving the
    wordbank kind since no other kind knows about them.
    """
    target = coerce_type(question_type)
    if question.type == target:
        return copy.deepcopy(question)

    base = copy.deepcopy(question)
    if isinstance(question, WordBankQuestion):
        base.text = strip_blanks(question.text)

    converted = get_handler(target).default(base)
    logger.debug(f"Question {question.id}: {question.type.value} -> {target.value}")
    return converted


# =============================================================================
# Choice options
# =============================================================================


def _require_choice(question: Question) -> None:
    if not isinstance(question, (MultipleChoiceQuestion, MultiSelectQuestion)):
        raise TypeError(f"Expected a choice question, got {type(question).__name__}")


def set_option(question: ChoiceQuestion, index: int, value: str) -> ChoiceQuestion:
    _require_choice(question)
    updated = copy.deepcopy(question)
    updated.options[index] = value
    return updated


def add_option(question: ChoiceQuestion, value: str = "") -> ChoiceQuestion:
    _require_choice(question)
    updated = copy.deepcopy(question)
    updated.options.append(value)
    return updated


def remove_option(question: ChoiceQuestion, index: int) -> ChoiceQuestion:
    """
    Remove an option and re-index the correct answer(s).

    A single-choice question whose correct option is removed falls back to
    the first option; a multi-select question just loses that index.
    """
    _require_choice(question)
    updated = copy.deepcopy(question)
    del updated.options[index]

    def shift(i: int) -> int:
        return i - 1 if i > index else i

    if isinstance(updated, MultipleChoiceQuestion):
        if updated.correct_answer == index:
            updated.correct_answer = 0
        else:
            updated.correct_answer = shift(updated.correct_answer)
    else:
        updated.correct_answers = [shift(i) for i in updated.correct_answers if i != index]
    return updated


def set_correct_option(question: MultipleChoiceQuestion, index: int) -> MultipleChoiceQuestion:
    if not isinstance(question, MultipleChoiceQuestion):
        raise TypeError(f"Expected a multiple choice question, got {type(question).__name__}")
    return replace(question, options=list(question.options), correct_answer=index)


def toggle_correct_option(question: MultiSelectQuestion, index: int) -> MultiSelectQuestion:
    """Mark or unmark one option as correct."""
    if not isinstance(question, MultiSelectQuestion):
        raise TypeError(f"Expected a multi-select question, got {type(question).__name__}")
    updated = copy.deepcopy(question)
    if index in updated.correct_answers:
        updated.correct_answers.remove(index)
    else:
        updated.correct_answers = sorted([*updated.correct_answers, index])
    return updated


# =============================================================================
# Matching pairs
# =============================================================================


def _require_matching(question: Question) -> None:
    if not isinstance(question, MatchingQuestion):
        raise TypeError(f"Expected a matching question, got {type(question).__name__}")


def _pair_index(question: MatchingQuestion, pair_id: str) -> int:
    for i, pair in enumerate(question.pairs):
        if pair.id == pair_id:
            return i
    raise UnknownPairError(pair_id)


def add_pair(
    question: MatchingQuestion,
    left: str = "",
    right: str = "",
    left_image: str | None = None,
    right_image: str | None = None,
) -> tuple[MatchingQuestion, str]:
    """
    Append a pair with a fresh id.

    Returns:
        (updated question, new pair id)
    """
    _require_matching(question)
    updated = copy.deepcopy(question)
    in_use = [p.id for p in updated.pairs]
    updated.pair_counter = max(updated.pair_counter, highest_counter(in_use)) + 1
    pair_id = f"{get_settings().pair_id_prefix}{updated.pair_counter}"
    updated.pairs.append(
        MatchingPair(
            id=pair_id,
            left=left,
            right=right,
            left_image=left_image,
            right_image=right_image,
        )
    )
    return updated, pair_id


def update_pair(question: MatchingQuestion, pair_id: str, **changes: Any) -> MatchingQuestion:
    """Change left, right, left_image or right_image of one pair."""
    _require_matching(question)
    allowed = {"left", "right", "left_image", "right_image"}
    unknown = set(changes) - allowed
    if unknown:
        raise TypeError(f"Unknown pair fields: {sorted(unknown)}")

    index = _pair_index(question, pair_id)
    updated = copy.deepcopy(question)
    updated.pairs[index] = replace(updated.pairs[index], **changes)
    return updated


def remove_pair(question: MatchingQuestion, pair_id: str) -> MatchingQuestion:
    """Delete a pair. Its id is not handed out again."""
    _require_matching(question)
    index = _pair_index(question, pair_id)
    updated = copy.deepcopy(question)
    del updated.pairs[index]
    return updated


# =============================================================================
# Audio sub-questions
# =============================================================================


def _require_audio(question: Question) -> None:
    if not isinstance(question, AudioQuestion):
        raise TypeError(f"Expected an audio question, got {type(question).__name__}")


def _require_not_audio(sub: Question) -> None:
    if sub.type == QuestionType.AUDIO:
        raise NestedAudioError("Audio questions cannot contain audio questions")


def add_sub_question(question: AudioQuestion, sub: Question) -> AudioQuestion:
    _require_audio(question)
    _require_not_audio(sub)
    updated = copy.deepcopy(question)
    updated.sub_questions.append(copy.deepcopy(sub))
    return updated


def replace_sub_question(question: AudioQuestion, index: int, sub: Question) -> AudioQuestion:
    _require_audio(question)
    _require_not_audio(sub)
    updated = copy.deepcopy(question)
    updated.sub_questions[index] = copy.deepcopy(sub)
    return updated


def remove_sub_question(question: AudioQuestion, index: int) -> AudioQuestion:
    _require_audio(question)
    updated = copy.deepcopy(question)
    del updated.sub_questions[index]
    return updated


# =============================================================================
# Test aggregate
# =============================================================================


def add_question(test: Test, question: Question) -> Test:
    updated = copy.deepcopy(test)
    updated.questions.append(copy.deepcopy(question))
    return updated


def update_question(test: Test, index: int, question: Question) -> Test:
    updated = copy.deepcopy(test)
    updated.questions[index] = copy.deepcopy(question)
    return updated


def remove_question(test: Test, index: int) -> Test:
    updated = copy.deepcopy(test)
    del updated.questions[index]
    return updated


def move_question(test: Test, from_index: int, to_index: int) -> Test:
    """Move a question; the others keep their relative order."""
    updated = copy.deepcopy(test)
    question = updated.questions.pop(from_index)
    updated.questions.insert(to_index, question)
    return updated
