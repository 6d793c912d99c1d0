"""
Question kind handlers for the assessment engine.

Each question kind (multiple, text, wordbank, matching, etc.) has its own module with:
- default(): Fresh instance of the kind, keeping the shared fields
- validate(): Authoring completeness issues
- units(): Scorable units contributed to the maximum
- score(): Earned/maximum points for a student answer
- is_attempted(): Whether an answer is present enough to submit
- load_answer(): Student answer from its stored form
"""

from typing import TYPE_CHECKING

from quizcore.errors import UnknownQuestionTypeError
from quizcore.models import QuestionType, coerce_type

if TYPE_CHECKING:
    from .base import QuestionHandler


# Handler registry - populated by @register decorator
HANDLERS: dict[QuestionType, "QuestionHandler"] = {}


def register(question_type: QuestionType):
    """Decorator to register a question handler."""
    def decorator(cls):
        HANDLERS[question_type] = cls()
        return cls
    return decorator


def get_handler(question_type: str | QuestionType) -> "QuestionHandler":
    """Get the handler for a question kind, raising for unknown kinds."""
    handler = HANDLERS.get(coerce_type(question_type))
    if handler is None:
        raise UnknownQuestionTypeError(f"No handler registered for {question_type!r}")
    return handler


# Import handlers to trigger registration
from . import multiple
from . import multi_select
from . import text
from . import true_false
from . import wordbank
from . import matching
from . import audio

__all__ = [
    "HANDLERS",
    "QuestionType",
    "get_handler",
    "register",
]
