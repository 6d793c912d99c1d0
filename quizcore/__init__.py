"""
quizcore - quiz assessment engine.

Question model, cloze blank registry, matching state machine, scoring and
submission checks for tests made of multiple choice, multi-select, free
text, true/false, word bank, matching and composite audio questions.
"""

from quizcore.models import (
    AudioAnswer,
    AudioQuestion,
    MatchedPair,
    MatchingAnswer,
    MatchingPair,
    MatchingQuestion,
    MultiSelectQuestion,
    MultipleChoiceQuestion,
    Question,
    QuestionType,
    Section,
    Test,
    TextQuestion,
    TrueFalseQuestion,
    WordBankQuestion,
    question_from_dict,
)
from quizcore.scoring import ScoreResult, percentage, score
from quizcore.submission import check_completeness, load_answers, submit
from quizcore.validation import ValidationReport, validate_test

__version__ = "1.0.0"

__all__ = [
    "AudioAnswer",
    "AudioQuestion",
    "MatchedPair",
    "MatchingAnswer",
    "MatchingPair",
    "MatchingQuestion",
    "MultiSelectQuestion",
    "MultipleChoiceQuestion",
    "Question",
    "QuestionType",
    "ScoreResult",
    "Section",
    "Test",
    "TextQuestion",
    "TrueFalseQuestion",
    "ValidationReport",
    "WordBankQuestion",
    "check_completeness",
    "load_answers",
    "percentage",
    "question_from_dict",
    "score",
    "submit",
    "validate_test",
]
