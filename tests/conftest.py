"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from quizcore.models import (  # noqa: E402
    AudioQuestion,
    MatchingPair,
    MatchingQuestion,
    MultiSelectQuestion,
    MultipleChoiceQuestion,
    Section,
    Test,
    TextQuestion,
    TrueFalseQuestion,
    WordBankQuestion,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def multiple_question():
    """Capital of France, correct option index 1."""
    return MultipleChoiceQuestion(
        id="q-multiple",
        text="What is the capital of France?",
        options=["Berlin", "Paris", "Madrid", "Rome"],
        correct_answer=1,
    )


@pytest.fixture
def multi_select_question():
    return MultiSelectQuestion(
        id="q-multi",
        text="Which of these are prime?",
        options=["2", "4", "5", "9"],
        correct_answers=[0, 2],
    )


@pytest.fixture
def text_question():
    return TextQuestion(id="q-text", text="Capital of France?", correct_answer="paris")


@pytest.fixture
def true_false_question():
    return TrueFalseQuestion(id="q-tf", text="The earth is flat.", correct_answer=False)


@pytest.fixture
def wordbank_question():
    """Two blanks, three bank words (one distractor)."""
    return WordBankQuestion(
        id="q-cloze",
        text="The {{blank:b1}} sat on the {{blank:b2}}.",
        bank=["cat", "mat", "dog"],
        correct_answers={"b1": "cat", "b2": "mat"},
        blank_counter=2,
    )


@pytest.fixture
def matching_question():
    return MatchingQuestion(
        id="q-match",
        text="Match the sums",
        pairs=[
            MatchingPair(id="p1", left="1+1", right="2"),
            MatchingPair(id="p2", left="2+2", right="4"),
        ],
        pair_counter=2,
    )


@pytest.fixture
def audio_question():
    """Recording with a multiple choice and a text sub-question."""
    return AudioQuestion(
        id="q-audio",
        text="Listen and answer",
        audio="audio/paris.mp3",
        sub_questions=[
            MultipleChoiceQuestion(
                id="q-audio-1",
                text="Which city is mentioned?",
                options=["London", "Paris", "Rome"],
                correct_answer=1,
            ),
            TextQuestion(id="q-audio-2", text="Type the city", correct_answer="paris"),
        ],
    )


@pytest.fixture
def sample_test(
    multiple_question,
    text_question,
    true_false_question,
    wordbank_question,
    matching_question,
    audio_question,
):
    """A valid test using every main question kind."""
    multiple_question.section_id = "s1"
    return Test(
        id="test-001",
        title="Geography basics",
        description="Warm-up quiz",
        questions=[
            multiple_question,
            text_question,
            true_false_question,
            wordbank_question,
            matching_question,
            audio_question,
        ],
        sections=[Section(id="s1", title="Reading", passage="Paris is the capital of France.")],
        time_limit=30,
    )
