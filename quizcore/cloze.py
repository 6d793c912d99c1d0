"""
Cloze blank registry for word bank questions.

Keeps the blank placeholders in a question body and the `correct_answers`
map in step: inserting or removing a blank updates both, and bank edits
never touch the blanks. A blank left pointing at a word that is no longer in
the bank is reported by save-time validation, not repaired here.

Every operation returns an updated copy; the input question is not modified.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Union

from loguru import logger

from config import get_settings
from quizcore.errors import UnknownBlankError
from quizcore.models import BLANK_PATTERN, WordBankQuestion, blank_placeholder, highest_counter

# Value of the "no selection" entry that heads every dropdown
NO_SELECTION = ""


@dataclass
class TextSegment:
    """Plain text between blanks."""
    text: str


@dataclass
class BlankDropdown:
    """One blank as shown to the student."""
    blank_id: str
    number: int  # 1-based position among the blanks
    options: list[str]  # NO_SELECTION followed by the bank, in bank order
    selected: str = NO_SELECTION


ClozeToken = Union[TextSegment, BlankDropdown]


def _require_wordbank(question: WordBankQuestion) -> None:
    if not isinstance(question, WordBankQuestion):
        raise TypeError(f"Expected a wordbank question, got {type(question).__name__}")


def blank_ids(question: WordBankQuestion) -> list[str]:
    """Blank ids in the order they appear in the body."""
    _require_wordbank(question)
    return question.blank_ids


def strip_blanks(text: str, marker: str = "___") -> str:
    """Replace every placeholder with a neutral marker."""
    return BLANK_PATTERN.sub(marker, text or "")


def _safe_position(text: str, position: int) -> int:
    """Clamp to the body and move out of any placeholder the position falls inside."""
    position = max(0, min(position, len(text)))
    for match in BLANK_PATTERN.finditer(text):
        if match.start() < position < match.end():
            return match.end()
    return position


def insert_blank(question: WordBankQuestion, position: int) -> tuple[WordBankQuestion, str]:
    """
    Insert a new blank into the body.

    Args:
        question: Word bank question being edited
        position: Character offset in the body text

    Returns:
        (updated question, new blank id)
    """
    _require_wordbank(question)
    updated = copy.deepcopy(question)
    # Constructed questions may hold ids their counter never issued
    in_use = updated.blank_ids + list(updated.correct_answers)
    updated.blank_counter = max(updated.blank_counter, highest_counter(in_use)) + 1
    blank_id = f"{get_settings().blank_id_prefix}{updated.blank_counter}"

    text = updated.text or ""
    position = _safe_position(text, position)
    updated.text = text[:position] + blank_placeholder(blank_id) + text[position:]
    updated.correct_answers[blank_id] = ""

    logger.debug(f"Question {question.id}: inserted blank {blank_id} at {position}")
    return updated, blank_id


def remove_blank(question: WordBankQuestion, blank_id: str) -> WordBankQuestion:
    """Remove a blank's placeholder and its answer entry."""
    _require_wordbank(question)
    if blank_id not in question.blank_ids and blank_id not in question.correct_answers:
        raise UnknownBlankError(blank_id)

    updated = copy.deepcopy(question)
    updated.text = updated.text.replace(blank_placeholder(blank_id), "")
    updated.correct_answers.pop(blank_id, None)
    logger.debug(f"Question {question.id}: removed blank {blank_id}")
    return updated


def set_blank_answer(question: WordBankQuestion, blank_id: str, word: str) -> WordBankQuestion:
    """
    Record the correct word for one blank.

    The word does not have to be in the bank yet; save-time validation checks
    the final state.
    """
    _require_wordbank(question)
    if blank_id not in question.blank_ids:
        raise UnknownBlankError(blank_id)

    updated = copy.deepcopy(question)
    updated.correct_answers[blank_id] = word
    return updated


def set_bank_word(
    question: WordBankQuestion,
    word: str,
    index: int | None = None,
) -> WordBankQuestion:
    """
    Add a word to the bank, or replace the word at `index`.

    Blank words are ignored. Duplicates are allowed.
    """
    _require_wordbank(question)
    word = word.strip()
    if not word:
        return copy.deepcopy(question)

    updated = copy.deepcopy(question)
    if index is None:
        updated.bank.append(word)
    else:
        updated.bank[index] = word
    return updated


def remove_bank_word(question: WordBankQuestion, word: str) -> WordBankQuestion:
    """
    Remove the first occurrence of `word` from the bank.

    Blanks whose correct answer is that word keep it.
    """
    _require_wordbank(question)
    updated = copy.deepcopy(question)
    if word in updated.bank:
        updated.bank.remove(word)

    orphaned = [b for b, w in updated.correct_answers.items() if w == word and w not in updated.bank]
    if orphaned:
        logger.warning(
            f"Question {question.id}: blanks {orphaned} now point at {word!r}, which left the bank"
        )
    return updated


def update_body(question: WordBankQuestion, text: str) -> WordBankQuestion:
    """
    Replace the body text and reconcile the answer map with it.

    Answers of placeholders that disappeared are dropped, new placeholders get
    empty answers, and the counter moves past any id seen so ids stay unique.
    """
    _require_wordbank(question)
    updated = copy.deepcopy(question)
    updated.text = text

    present = updated.blank_ids
    updated.correct_answers = {
        blank_id: question.correct_answers.get(blank_id, "") for blank_id in dict.fromkeys(present)
    }
    updated.blank_counter = max(question.blank_counter, highest_counter(present))
    return updated


def render_for_student(
    question: WordBankQuestion,
    student_answers: dict[str, str] | None = None,
) -> list[ClozeToken]:
    """
    Split the body into text segments and blank dropdowns.

    Each dropdown offers NO_SELECTION followed by the bank in bank order, and
    is pre-selected with the student's earlier choice when that choice is one
    of the offered words.
    """
    _require_wordbank(question)
    student_answers = student_answers or {}
    options = [NO_SELECTION, *question.bank]

    tokens: list[ClozeToken] = []
    last_end = 0
    for number, match in enumerate(BLANK_PATTERN.finditer(question.text or ""), 1):
        if match.start() > last_end:
            tokens.append(TextSegment(question.text[last_end:match.start()]))

        blank_id = match.group(1)
        chosen = student_answers.get(blank_id, NO_SELECTION)
        tokens.append(
            BlankDropdown(
                blank_id=blank_id,
                number=number,
                options=list(options),
                selected=chosen if chosen in options else NO_SELECTION,
            )
        )
        last_end = match.end()

    if last_end < len(question.text or ""):
        tokens.append(TextSegment(question.text[last_end:]))
    return tokens
