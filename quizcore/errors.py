"""
Exceptions for programmer errors in the assessment core.

Expected user states (incomplete answers, unfinished authoring) are reported
as values by the validation and submission modules, never raised.
"""


class QuizCoreError(Exception):
    """Base class for all quizcore errors."""
    pass


class UnknownQuestionTypeError(QuizCoreError, ValueError):
    """Raised when a question carries a type tag with no registered handler."""
    pass


class NestedAudioError(QuizCoreError, ValueError):
    """Raised when an audio question is placed inside another audio question."""
    pass


class UnknownBlankError(QuizCoreError, KeyError):
    """Raised when a cloze operation names a blank the question does not have."""
    pass


class UnknownPairError(QuizCoreError, KeyError):
    """Raised when a pair operation names a pair the question does not have."""
    pass


class MatchingStateError(QuizCoreError, ValueError):
    """Raised when a matching transition gets an unknown side, value or question."""
    pass
