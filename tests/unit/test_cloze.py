"""
Unit tests for the cloze blank registry.

Every placeholder in the body has exactly one answer entry and vice versa,
and blank ids are never handed out twice.
"""

import pytest

from quizcore.cloze import (
    NO_SELECTION,
    BlankDropdown,
    TextSegment,
    blank_ids,
    insert_blank,
    remove_bank_word,
    remove_blank,
    render_for_student,
    set_bank_word,
    set_blank_answer,
    strip_blanks,
    update_body,
)
from quizcore.errors import UnknownBlankError
from quizcore.models import TextQuestion, WordBankQuestion


def assert_in_step(question: WordBankQuestion):
    """Body placeholders and answer keys are the same set, without repeats."""
    ids = question.blank_ids
    assert len(ids) == len(set(ids))
    assert set(ids) == set(question.correct_answers)


class TestInsertBlank:
    """Test adding blanks to a body."""

    def test_insert_into_empty_question(self):
        question = WordBankQuestion(text="Fill: ")
        updated, blank_id = insert_blank(question, len(question.text))

        assert blank_id == "b1"
        assert updated.text == "Fill: {{blank:b1}}"
        assert updated.correct_answers == {"b1": ""}
        assert updated.blank_counter == 1
        assert_in_step(updated)

    def test_input_not_modified(self, wordbank_question):
        before = wordbank_question.to_dict()
        insert_blank(wordbank_question, 0)
        assert wordbank_question.to_dict() == before

    def test_position_inside_placeholder_moves_past_it(self, wordbank_question):
        # offset 7 falls inside "{{blank:b1}}"
        updated, blank_id = insert_blank(wordbank_question, 7)
        assert "{{blank:b1}}{{blank:b3}}" in updated.text
        assert_in_step(updated)

    def test_position_clamped(self, wordbank_question):
        updated, blank_id = insert_blank(wordbank_question, 1000)
        assert updated.text.endswith("{{blank:%s}}" % blank_id)

    def test_ids_never_reused(self, wordbank_question):
        removed = remove_blank(wordbank_question, "b2")
        updated, blank_id = insert_blank(removed, 0)
        assert blank_id == "b3"

    def test_constructed_question_ids_not_reused(self):
        """A question built with b1 but a zero counter still gets a fresh id."""
        question = WordBankQuestion(text="The {{blank:b1}} sat.", bank=["cat"], correct_answers={"b1": "cat"})
        updated, blank_id = insert_blank(question, 0)

        assert blank_id == "b2"
        assert updated.correct_answers == {"b2": "", "b1": "cat"}
        assert updated.text.count("{{blank:b1}}") == 1
        assert_in_step(updated)

    def test_orphan_answer_id_not_reused(self):
        question = WordBankQuestion(text="Fill ", correct_answers={"b4": "dog"})
        _, blank_id = insert_blank(question, 0)
        assert blank_id == "b5"

    def test_requires_wordbank(self):
        with pytest.raises(TypeError):
            insert_blank(TextQuestion(text="x"), 0)


class TestRemoveBlank:
    """Test removing blanks."""

    def test_remove_drops_placeholder_and_answer(self, wordbank_question):
        updated = remove_blank(wordbank_question, "b1")
        assert updated.text == "The  sat on the {{blank:b2}}."
        assert updated.correct_answers == {"b2": "mat"}
        assert updated.blank_counter == 2
        assert_in_step(updated)

    def test_remove_orphan_answer(self, wordbank_question):
        wordbank_question.correct_answers["b5"] = "dog"
        updated = remove_blank(wordbank_question, "b5")
        assert "b5" not in updated.correct_answers

    def test_unknown_blank(self, wordbank_question):
        with pytest.raises(UnknownBlankError):
            remove_blank(wordbank_question, "b9")


class TestBlankAnswers:
    """Test correct answers and the word bank."""

    def test_set_blank_answer(self, wordbank_question):
        updated = set_blank_answer(wordbank_question, "b2", "dog")
        assert updated.correct_answers["b2"] == "dog"
        assert wordbank_question.correct_answers["b2"] == "mat"

    def test_set_answer_for_unknown_blank(self, wordbank_question):
        with pytest.raises(UnknownBlankError):
            set_blank_answer(wordbank_question, "b7", "dog")

    def test_add_and_replace_bank_word(self, wordbank_question):
        added = set_bank_word(wordbank_question, " rug ")
        assert added.bank == ["cat", "mat", "dog", "rug"]

        replaced = set_bank_word(added, "hat", index=2)
        assert replaced.bank == ["cat", "mat", "hat", "rug"]

    def test_blank_bank_word_ignored(self, wordbank_question):
        assert set_bank_word(wordbank_question, "   ").bank == ["cat", "mat", "dog"]

    def test_removing_bank_word_leaves_blanks(self, wordbank_question):
        updated = remove_bank_word(wordbank_question, "mat")
        assert updated.bank == ["cat", "dog"]
        assert updated.correct_answers == {"b1": "cat", "b2": "mat"}
        assert_in_step(updated)


class TestUpdateBody:
    """Test replacing the body text."""

    def test_reconciles_answers(self, wordbank_question):
        updated = update_body(wordbank_question, "A {{blank:b2}} and {{blank:b4}}")
        assert updated.correct_answers == {"b2": "mat", "b4": ""}
        assert updated.blank_counter == 4
        assert_in_step(updated)

    def test_strip_blanks(self, wordbank_question):
        assert strip_blanks(wordbank_question.text) == "The ___ sat on the ___."

    def test_blank_ids_in_body_order(self):
        question = WordBankQuestion(text="{{blank:b2}} then {{blank:b1}}")
        assert blank_ids(question) == ["b2", "b1"]


class TestRenderForStudent:
    """Test the student view of a cloze question."""

    def test_tokens(self, wordbank_question):
        tokens = render_for_student(wordbank_question)
        assert tokens == [
            TextSegment("The "),
            BlankDropdown("b1", 1, ["", "cat", "mat", "dog"], NO_SELECTION),
            TextSegment(" sat on the "),
            BlankDropdown("b2", 2, ["", "cat", "mat", "dog"], NO_SELECTION),
            TextSegment("."),
        ]

    def test_previous_choice_selected(self, wordbank_question):
        tokens = render_for_student(wordbank_question, {"b1": "dog", "b2": "gone"})
        dropdowns = [t for t in tokens if isinstance(t, BlankDropdown)]
        assert [d.selected for d in dropdowns] == ["dog", NO_SELECTION]

    def test_distractors_offered_to_every_blank(self, wordbank_question):
        dropdowns = [t for t in render_for_student(wordbank_question) if isinstance(t, BlankDropdown)]
        assert all("dog" in d.options for d in dropdowns)
