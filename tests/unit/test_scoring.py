"""
Unit tests for the scoring engine.
"""

import pytest

from quizcore.models import (
    AudioAnswer,
    AudioQuestion,
    MatchedPair,
    MatchingAnswer,
    MultipleChoiceQuestion,
    TrueFalseQuestion,
)
from quizcore.scoring import answer_at, max_points, percentage, score


class TestScenarios:
    """Worked examples of whole submissions."""

    def test_wordbank_partial(self, wordbank_question):
        result = score([wordbank_question], {0: {"b1": "cat", "b2": "dog"}})
        assert (result.earned, result.max) == (1, 2)

    def test_matching_complete(self, matching_question):
        answer = MatchingAnswer(
            pairs=[MatchedPair("1+1", "2", True), MatchedPair("2+2", "4", True)],
            matched_count=2,
            total=2,
        )
        result = score([matching_question], {0: answer})
        assert (result.earned, result.max) == (2, 2)

    def test_audio_sums_sub_questions(self, audio_question):
        result = score([audio_question], {0: AudioAnswer({0: 1, 1: "Paris "})})
        assert (result.earned, result.max) == (2, 2)

    def test_empty_test(self):
        result = score([], {})
        assert (result.earned, result.max) == (0, 0)
        assert result.graded is False
        assert result.percentage is None


class TestStructuralMaximum:
    """The maximum depends on the questions only."""

    def test_max_independent_of_answers(self, sample_test):
        empty = score(sample_test.questions, {})
        some = score(sample_test.questions, {0: 1, 1: "paris", 3: {"b1": "cat"}})
        assert empty.max == some.max == max_points(sample_test.questions)

    def test_unit_counts(self, sample_test):
        # multiple, text, truefalse, 2 blanks, 2 pairs, 2 audio subs
        assert max_points(sample_test.questions) == 9

    def test_weighted_simple_question(self, multiple_question):
        multiple_question.points = 5
        assert score([multiple_question], {0: 1}).earned == 5
        assert max_points([multiple_question]) == 5


class TestProperties:
    """Bounds, additivity and monotonicity."""

    def test_earned_never_exceeds_max(self, sample_test):
        answers = {
            0: 1,
            1: "paris",
            2: False,
            3: {"b1": "cat", "b2": "mat", "b9": "dog"},
            4: MatchingAnswer(
                pairs=[
                    MatchedPair("1+1", "2", True),
                    MatchedPair("2+2", "4", True),
                    MatchedPair("2+2", "4", True),
                ],
                matched_count=3,
                total=2,
            ),
            5: AudioAnswer({0: 1, 1: "paris"}),
        }
        result = score(sample_test.questions, answers)
        assert result.earned == result.max == 9
        assert result.percentage == 100.0
        assert all(0 <= q.earned <= q.max for q in result.per_question)

    def test_audio_is_additive(self, audio_question):
        subs = audio_question.sub_questions
        answer = AudioAnswer({0: 2, 1: "paris"})
        composite = score([audio_question], {0: answer})
        separate = score(subs, {0: 2, 1: "paris"})
        assert (composite.earned, composite.max) == (separate.earned, separate.max)

    def test_fixing_an_answer_never_lowers_score(self, sample_test):
        wrong = {0: 0, 1: "rome", 2: True}
        fixed = {**wrong, 1: "paris"}
        assert score(sample_test.questions, fixed).earned >= score(sample_test.questions, wrong).earned

    def test_answers_as_list(self, multiple_question, text_question):
        result = score([multiple_question, text_question], [1, "PARIS"])
        assert result.earned == 2

    def test_per_question_breakdown(self, multiple_question, text_question):
        result = score([multiple_question, text_question], {1: "paris"})
        assert [(q.earned, q.max) for q in result.per_question] == [(0, 1), (1, 1)]


class TestPercentage:
    """Test turning scores into percentages."""

    def test_zero_maximum_is_ungraded(self):
        assert percentage(0, 0) is None

    def test_rounding(self):
        assert percentage(1, 3) == 33.33
        assert percentage(2, 3, decimals=0) == 67.0

    def test_full_marks(self):
        assert percentage(9, 9) == 100.0


class TestAnswerAt:
    """Test looking up answers by question index."""

    @pytest.mark.parametrize(
        "answers,expected",
        [
            (None, None),
            ({}, None),
            ({2: "x"}, "x"),
            (["a", "b", "x"], "x"),
            (["a"], None),
        ],
    )
    def test_lookup(self, answers, expected):
        assert answer_at(answers, 2) == expected


def test_nested_audio_from_storage_still_scores():
    """An audio sub-question inside audio (rejected when authoring) scores recursively."""
    inner = AudioQuestion(
        audio="inner.mp3",
        sub_questions=[TrueFalseQuestion(text="x", correct_answer=True)],
    )
    outer = AudioQuestion(
        audio="outer.mp3",
        sub_questions=[MultipleChoiceQuestion(options=["a", "b"], correct_answer=0), inner],
    )
    result = score([outer], {0: AudioAnswer({0: 0, 1: AudioAnswer({0: True})})})
    assert (result.earned, result.max) == (2, 2)
