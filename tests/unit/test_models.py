"""
Unit tests for the question model and its stored document form.
"""

import pytest

from quizcore.errors import UnknownQuestionTypeError
from quizcore.models import (
    AudioAnswer,
    AudioQuestion,
    MatchedPair,
    MatchingAnswer,
    MatchingQuestion,
    MultipleChoiceQuestion,
    QuestionType,
    Test,
    TrueFalseQuestion,
    WordBankQuestion,
    answers_to_dict,
    coerce_type,
    question_from_dict,
)
from quizcore.questions import get_handler


class TestQuestionDocuments:
    """Test conversion between questions and their stored documents."""

    def test_test_document_survives_reload(self, sample_test):
        reloaded = Test.from_dict(sample_test.to_dict())
        assert reloaded == sample_test

    def test_camel_case_keys(self, wordbank_question, multiple_question):
        multiple_question.section_id = "s1"
        assert multiple_question.to_dict()["sectionId"] == "s1"
        assert multiple_question.to_dict()["correctAnswer"] == 1

        data = wordbank_question.to_dict()
        assert data["type"] == "wordbank"
        assert data["correctAnswers"] == {"b1": "cat", "b2": "mat"}
        assert data["blankCounter"] == 2

    def test_audio_sub_questions_keep_kind(self, audio_question):
        data = audio_question.to_dict()
        assert [q["type"] for q in data["subQuestions"]] == ["multiple", "text"]

        reloaded = question_from_dict(data)
        assert isinstance(reloaded, AudioQuestion)
        assert isinstance(reloaded.sub_questions[0], MultipleChoiceQuestion)

    def test_missing_type_defaults_to_multiple(self):
        question = question_from_dict({"text": "Pick one", "options": ["a", "b"]})
        assert question.type == QuestionType.MULTIPLE

    def test_unknown_type_raises(self):
        with pytest.raises(UnknownQuestionTypeError):
            question_from_dict({"type": "essay", "text": "Discuss"})

    def test_coerce_type_is_lenient_on_case(self):
        assert coerce_type(" TrueFalse ") == QuestionType.TRUE_FALSE

    def test_true_false_string_answer(self):
        question = question_from_dict({"type": "truefalse", "text": "x", "correctAnswer": "false"})
        assert isinstance(question, TrueFalseQuestion)
        assert question.correct_answer is False

    def test_generated_id_when_missing(self):
        question = question_from_dict({"type": "text", "text": "x"})
        assert question.id

    def test_points_default_only_when_absent(self):
        assert question_from_dict({"type": "text", "text": "x"}).points == 1
        assert question_from_dict({"type": "text", "text": "x", "points": None}).points == 1

    def test_zero_points_kept_for_validation(self):
        question = question_from_dict({"type": "truefalse", "text": "x", "points": 0})
        assert question.points == 0
        assert get_handler(question.type).validate(question)[0].message == (
            "Point weight must be a positive whole number"
        )


class TestCountersOnLoad:
    """Blank and pair counters never fall behind the ids already in use."""

    def test_blank_counter_from_body(self):
        question = WordBankQuestion.from_dict({
            "type": "wordbank",
            "text": "A {{blank:b7}} and {{blank:b3}}",
            "bank": ["x"],
            "correctAnswers": {"b7": "x", "b3": "x"},
        })
        assert question.blank_counter == 7
        assert question.blank_ids == ["b7", "b3"]

    def test_stored_counter_wins_when_higher(self):
        question = WordBankQuestion.from_dict({
            "type": "wordbank",
            "text": "A {{blank:b2}}",
            "correctAnswers": {"b2": "x"},
            "blankCounter": 9,
        })
        assert question.blank_counter == 9

    def test_pair_counter_from_ids(self):
        question = MatchingQuestion.from_dict({
            "type": "matching",
            "pairs": [{"id": "p4", "left": "a", "right": "1"}],
        })
        assert question.pair_counter == 4

    def test_legacy_pairs_get_fresh_ids(self):
        question = MatchingQuestion.from_dict({
            "type": "matching",
            "pairs": [
                {"id": "p2", "left": "a", "right": "1"},
                {"left": "b", "right": "2"},
                {"left": "c", "right": "3"},
            ],
        })
        assert [p.id for p in question.pairs] == ["p2", "p3", "p4"]
        assert question.pair_counter == 4


class TestTest:
    """Test the test aggregate."""

    def test_section_lookup(self, sample_test):
        assert sample_test.section("s1").title == "Reading"
        assert sample_test.section("missing") is None

    def test_defaults(self):
        test = Test.from_dict({"title": "Empty"})
        assert test.questions == []
        assert test.visible_for == "all"
        assert test.time_limit is None


class TestAnswerDocuments:
    """Test the plain form of student answers."""

    def test_answers_to_dict(self):
        answers = {
            2: MatchingAnswer(pairs=[MatchedPair("a", "1", True)], matched_count=1, total=2),
            0: 1,
            1: AudioAnswer({1: "paris", 0: [0, 2]}),
        }
        data = answers_to_dict(answers)
        assert list(data) == ["0", "1", "2"]
        assert data["1"] == {"subAnswers": {"0": [0, 2], "1": "paris"}}
        assert data["2"] == {
            "matchedPairs": [{"left": "a", "right": "1", "correct": True}],
            "matchedCount": 1,
            "total": 2,
        }
