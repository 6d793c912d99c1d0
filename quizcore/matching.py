"""
Click-to-pair state machine for matching questions.

The student clicks an item in the left column, then one in the right column,
to commit a pair. Transitions are pure: `click()` returns a new state and,
when the last open left item gets paired, a QuestionComplete event.

The right column is shown in a random order fixed once per attempt, so the
layout does not move between clicks.
"""

from __future__ import annotations

import copy
import random
from dataclasses import dataclass, field, replace
from enum import Enum

from loguru import logger

from config import get_settings
from quizcore.errors import MatchingStateError
from quizcore.models import MatchedPair, MatchingAnswer, MatchingQuestion


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


@dataclass
class MatchingState:
    """Interactive state of one matching question during one attempt."""

    question_id: str
    right_order: list[str]  # cached display permutation of the right values
    active_left: str | None = None
    active_right: str | None = None
    matched_pairs: list[MatchedPair] = field(default_factory=list)
    # Reserved for a lock-on-mistake mode; no transition sets it
    error_pair: MatchedPair | None = None
    completed: bool = False  # completion already signalled this attempt

    @property
    def correct_count(self) -> int:
        return sum(1 for pair in self.matched_pairs if pair.correct)

    def pair_for_left(self, left: str) -> MatchedPair | None:
        for pair in self.matched_pairs:
            if pair.left == left:
                return pair
        return None

    def is_right_matched(self, right: str) -> bool:
        return any(pair.right == right for pair in self.matched_pairs)

    def to_answer(self, total: int) -> MatchingAnswer:
        """Snapshot as a student answer."""
        return MatchingAnswer(
            pairs=copy.deepcopy(self.matched_pairs),
            matched_count=self.correct_count,
            total=total,
        )


@dataclass
class QuestionComplete:
    """Emitted when every left item of the question has been paired."""
    question_id: str
    matched_count: int
    total: int
    pairs: list[MatchedPair]

    def to_answer(self) -> MatchingAnswer:
        return MatchingAnswer(
            pairs=copy.deepcopy(self.pairs),
            matched_count=self.matched_count,
            total=self.total,
        )


def start(question: MatchingQuestion, seed: int | None = None) -> MatchingState:
    """
    Fresh state for a new attempt.

    Args:
        question: The matching question being answered
        seed: Shuffle seed; falls back to the matching_shuffle_seed setting

    Returns:
        State with nothing selected and a fixed right-column order
    """
    if seed is None:
        seed = get_settings().matching_shuffle_seed
    rng = random.Random(seed)
    rights = question.rights
    return MatchingState(question_id=question.id, right_order=rng.sample(rights, len(rights)))


def click(
    question: MatchingQuestion,
    state: MatchingState,
    side: Side | str,
    value: str,
) -> tuple[MatchingState, QuestionComplete | None]:
    """
    Apply one click and return the new state plus an optional completion event.

    Raises:
        MatchingStateError: state belongs to another question, or the side or
            value is not part of this question
    """
    if state.question_id != question.id:
        raise MatchingStateError(
            f"State for question {state.question_id} used with question {question.id}"
        )
    try:
        side = Side(side)
    except ValueError:
        raise MatchingStateError(f"Unknown side: {side!r}") from None

    if side is Side.LEFT:
        if value not in question.lefts:
            raise MatchingStateError(f"{value!r} is not a left item of question {question.id}")
        return _click_left(state, value), None

    if value not in question.rights:
        raise MatchingStateError(f"{value!r} is not a right item of question {question.id}")
    return _click_right(question, state, value)


def _click_left(state: MatchingState, value: str) -> MatchingState:
    if state.pair_for_left(value) is not None:
        logger.debug(f"matching {state.question_id}: unpair {value!r}")
        return replace(
            state,
            matched_pairs=[p for p in state.matched_pairs if p.left != value],
            active_left=None,
            active_right=None,
        )
    if state.active_left == value:
        return replace(state, active_left=None)
    return replace(state, active_left=value)


def _click_right(
    question: MatchingQuestion,
    state: MatchingState,
    value: str,
) -> tuple[MatchingState, QuestionComplete | None]:
    if state.active_left is None:
        if state.active_right == value:
            return replace(state, active_right=None), None
        if state.is_right_matched(value):
            # Absorbing: a matched right item is only released from its left side
            return state, None
        return replace(state, active_right=value), None

    left = state.active_left
    correct = question.is_correct_pair(left, value)
    before = len(state.matched_pairs)
    matched = [p for p in state.matched_pairs if p.left != left]
    matched.append(MatchedPair(left=left, right=value, correct=correct))
    logger.debug(f"matching {state.question_id}: commit {left!r} -> {value!r} (correct={correct})")

    new_state = replace(state, matched_pairs=matched, active_left=None, active_right=None)

    total = len(question.pairs)
    event = None
    if not state.completed and before == total - 1 and len(matched) == total:
        new_state.completed = True
        event = QuestionComplete(
            question_id=question.id,
            matched_count=new_state.correct_count,
            total=total,
            pairs=copy.deepcopy(matched),
        )
    return new_state, event


class MatchingSession:
    """
    Convenience wrapper holding the question and its current state.

    Keeps the latest answer snapshot so a caller can read it after any click.
    """

    def __init__(self, question: MatchingQuestion, seed: int | None = None):
        self.question = question
        self.state = start(question, seed=seed)
        self.events: list[QuestionComplete] = []

    @property
    def right_order(self) -> list[str]:
        return list(self.state.right_order)

    @property
    def answer(self) -> MatchingAnswer:
        return self.state.to_answer(len(self.question.pairs))

    def click(self, side: Side | str, value: str) -> QuestionComplete | None:
        self.state, event = click(self.question, self.state, side, value)
        if event is not None:
            self.events.append(event)
        return event
