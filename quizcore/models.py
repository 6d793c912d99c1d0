"""
Question model for the assessment engine.

Design:
- QuestionType: closed set of question kinds (the `type` tag on the wire)
- Question: common fields shared by every kind
- One dataclass per kind carrying its correct-answer shape
- MatchingAnswer / AudioAnswer: structured student answers
- Test / Section: the aggregate exchanged with the persistence boundary

Dict conversion uses the camelCase keys of the stored documents
(correctAnswer, sectionId, subQuestions, ...).
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from config import get_settings
from quizcore.errors import UnknownQuestionTypeError

# Cloze placeholder embedded in a wordbank body: {{blank:b3}}
BLANK_PATTERN = re.compile(r"\{\{blank:([A-Za-z0-9_-]+)\}\}")

_TRAILING_NUMBER = re.compile(r"(\d+)$")


class QuestionType(str, Enum):
    """Supported question kinds."""
    MULTIPLE = "multiple"
    MULTI_SELECT = "multiple_multiple"
    TEXT = "text"
    TRUE_FALSE = "truefalse"
    WORDBANK = "wordbank"
    MATCHING = "matching"
    AUDIO = "audio"


def new_question_id() -> str:
    return uuid.uuid4().hex[:12]


def blank_placeholder(blank_id: str) -> str:
    """Body marker for one blank."""
    return "{{blank:%s}}" % blank_id


def highest_counter(ids: list[str]) -> int:
    """Largest trailing number among identifiers like b7 or p12 (0 if none)."""
    highest = 0
    for item in ids:
        match = _TRAILING_NUMBER.search(item or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return highest


def _points(data: Mapping[str, Any]) -> int:
    """Stored point weight; 1 only when the key is absent or null."""
    raw = data.get("points")
    return 1 if raw is None else int(raw)


# =============================================================================
# Questions
# =============================================================================


@dataclass
class Question:
    """Fields shared by every question kind."""

    id: str = field(default_factory=new_question_id)
    text: str = ""
    image: str | None = None  # opaque reference, never dereferenced
    section_id: str | None = None  # reading passage shared by several questions

    type = None  # set by each kind

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type.value,
            "id": self.id,
            "text": self.text,
        }
        if self.image:
            data["image"] = self.image
        if self.section_id:
            data["sectionId"] = self.section_id
        data.update(self._fields_to_dict())
        return data

    def _fields_to_dict(self) -> dict[str, Any]:
        return {}

    @classmethod
    def _fields_from_dict(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        return {}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Question":
        return cls(
            id=str(data.get("id") or new_question_id()),
            text=data.get("text") or "",
            image=data.get("image") or None,
            section_id=data.get("sectionId") or None,
            **cls._fields_from_dict(data),
        )


@dataclass
class MultipleChoiceQuestion(Question):
    """Single correct option out of an ordered list."""

    options: list[str] = field(default_factory=list)
    correct_answer: int = 0
    points: int = 1

    type = QuestionType.MULTIPLE

    def _fields_to_dict(self) -> dict[str, Any]:
        return {
            "options": list(self.options),
            "correctAnswer": self.correct_answer,
            "points": self.points,
        }

    @classmethod
    def _fields_from_dict(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "options": [str(o) for o in data.get("options") or []],
            "correct_answer": int(data.get("correctAnswer") or 0),
            "points": _points(data),
        }


@dataclass
class MultiSelectQuestion(Question):
    """Several correct options; credit only for the exact set."""

    options: list[str] = field(default_factory=list)
    correct_answers: list[int] = field(default_factory=list)
    points: int = 1

    type = QuestionType.MULTI_SELECT

    def _fields_to_dict(self) -> dict[str, Any]:
        return {
            "options": list(self.options),
            "correctAnswers": list(self.correct_answers),
            "points": self.points,
        }

    @classmethod
    def _fields_from_dict(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "options": [str(o) for o in data.get("options") or []],
            "correct_answers": [int(i) for i in data.get("correctAnswers") or []],
            "points": _points(data),
        }


@dataclass
class TextQuestion(Question):
    """Free-form answer compared case-insensitively after trimming."""

    correct_answer: str = ""
    points: int = 1

    type = QuestionType.TEXT

    def _fields_to_dict(self) -> dict[str, Any]:
        return {"correctAnswer": self.correct_answer, "points": self.points}

    @classmethod
    def _fields_from_dict(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "correct_answer": str(data.get("correctAnswer") or ""),
            "points": _points(data),
        }


@dataclass
class TrueFalseQuestion(Question):
    correct_answer: bool = True
    points: int = 1

    type = QuestionType.TRUE_FALSE

    def _fields_to_dict(self) -> dict[str, Any]:
        return {"correctAnswer": self.correct_answer, "points": self.points}

    @classmethod
    def _fields_from_dict(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        raw = data.get("correctAnswer", True)
        if isinstance(raw, str):
            raw = raw.strip().lower() == "true"
        return {
            "correct_answer": bool(raw),
            "points": _points(data),
        }


@dataclass
class WordBankQuestion(Question):
    """
    Cloze question: blanks embedded in `text`, one shared word bank.

    `correct_answers` maps blank id -> expected word. `blank_counter` is the
    number of blank ids ever issued; ids are never reused after deletion.
    """

    bank: list[str] = field(default_factory=list)
    correct_answers: dict[str, str] = field(default_factory=dict)
    blank_counter: int = 0

    type = QuestionType.WORDBANK

    @property
    def blank_ids(self) -> list[str]:
        """Blank ids in body order."""
        return BLANK_PATTERN.findall(self.text or "")

    def _fields_to_dict(self) -> dict[str, Any]:
        return {
            "bank": list(self.bank),
            "correctAnswers": dict(self.correct_answers),
            "blankCounter": self.blank_counter,
        }

    @classmethod
    def _fields_from_dict(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        answers = {str(k): str(v or "") for k, v in (data.get("correctAnswers") or {}).items()}
        body_ids = BLANK_PATTERN.findall(data.get("text") or "")
        counter = max(
            int(data.get("blankCounter") or 0),
            highest_counter(body_ids + list(answers)),
        )
        return {
            "bank": [str(w) for w in data.get("bank") or []],
            "correct_answers": answers,
            "blank_counter": counter,
        }


@dataclass
class MatchingPair:
    """Author-defined correct association between a left and a right item."""

    id: str
    left: str = ""
    right: str = ""
    left_image: str | None = None
    right_image: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "left": self.left, "right": self.right}
        if self.left_image:
            data["leftImage"] = self.left_image
        if self.right_image:
            data["rightImage"] = self.right_image
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], fallback_id: str) -> "MatchingPair":
        return cls(
            id=str(data.get("id") or fallback_id),
            left=str(data.get("left") or ""),
            right=str(data.get("right") or ""),
            left_image=data.get("leftImage") or None,
            right_image=data.get("rightImage") or None,
        )


@dataclass
class MatchingQuestion(Question):
    """Ordered pairs; the right values also form the shuffled display pool."""

    pairs: list[MatchingPair] = field(default_factory=list)
    pair_counter: int = 0

    type = QuestionType.MATCHING

    @property
    def lefts(self) -> list[str]:
        return [p.left for p in self.pairs]

    @property
    def rights(self) -> list[str]:
        return [p.right for p in self.pairs]

    def is_correct_pair(self, left: str, right: str) -> bool:
        return any(p.left == left and p.right == right for p in self.pairs)

    def _fields_to_dict(self) -> dict[str, Any]:
        return {
            "pairs": [p.to_dict() for p in self.pairs],
            "pairCounter": self.pair_counter,
        }

    @classmethod
    def _fields_from_dict(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        raw_pairs = data.get("pairs") or []
        stored = [str(p.get("id")) for p in raw_pairs if p.get("id")]
        counter = max(int(data.get("pairCounter") or 0), highest_counter(stored))
        prefix = get_settings().pair_id_prefix
        pairs = []
        for raw in raw_pairs:
            if not raw.get("id"):
                # Legacy documents without pair ids get fresh ones
                counter += 1
            pairs.append(MatchingPair.from_dict(raw, fallback_id=f"{prefix}{counter}"))
        return {"pairs": pairs, "pair_counter": counter}


@dataclass
class AudioQuestion(Question):
    """Composite: a recording plus sub-questions of any non-audio kind."""

    audio: str | None = None
    sub_questions: list[Question] = field(default_factory=list)

    type = QuestionType.AUDIO

    def _fields_to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"subQuestions": [q.to_dict() for q in self.sub_questions]}
        if self.audio:
            data["audio"] = self.audio
        return data

    @classmethod
    def _fields_from_dict(cls, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "audio": data.get("audio") or None,
            "sub_questions": [question_from_dict(q) for q in data.get("subQuestions") or []],
        }


QUESTION_CLASSES: dict[QuestionType, type[Question]] = {
    QuestionType.MULTIPLE: MultipleChoiceQuestion,
    QuestionType.MULTI_SELECT: MultiSelectQuestion,
    QuestionType.TEXT: TextQuestion,
    QuestionType.TRUE_FALSE: TrueFalseQuestion,
    QuestionType.WORDBANK: WordBankQuestion,
    QuestionType.MATCHING: MatchingQuestion,
    QuestionType.AUDIO: AudioQuestion,
}


def coerce_type(value: str | QuestionType) -> QuestionType:
    """Resolve a type tag, raising for unknown kinds."""
    if isinstance(value, QuestionType):
        return value
    try:
        return QuestionType(str(value).strip().lower())
    except ValueError:
        raise UnknownQuestionTypeError(f"Unknown question type: {value!r}") from None


def question_from_dict(data: Mapping[str, Any]) -> Question:
    """Build the right Question subclass from its stored document."""
    question_type = coerce_type(data.get("type", QuestionType.MULTIPLE.value))
    return QUESTION_CLASSES[question_type].from_dict(data)


# =============================================================================
# Student answers
# =============================================================================
# Plain values for the simple kinds:
#   multiple -> int, multiple_multiple -> list[int], text -> str,
#   truefalse -> bool, wordbank -> dict[blank_id, word]


@dataclass
class MatchedPair:
    """One committed left/right pairing and whether it is correct."""
    left: str
    right: str
    correct: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"left": self.left, "right": self.right, "correct": self.correct}


@dataclass
class MatchingAnswer:
    """
    Finalized matching state.

    matched_count counts the committed pairs flagged correct; total is the
    question's pair count.
    """
    pairs: list[MatchedPair] = field(default_factory=list)
    matched_count: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "matchedPairs": [p.to_dict() for p in self.pairs],
            "matchedCount": self.matched_count,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MatchingAnswer":
        pairs = [
            MatchedPair(
                left=str(p.get("left", "")),
                right=str(p.get("right", "")),
                correct=bool(p.get("correct", False)),
            )
            for p in data.get("matchedPairs") or []
        ]
        return cls(
            pairs=pairs,
            matched_count=int(data.get("matchedCount") or 0),
            total=int(data.get("total") or 0),
        )


@dataclass
class AudioAnswer:
    """Answers to an audio question's sub-questions, keyed by sub-question index."""
    sub_answers: dict[int, Any] = field(default_factory=dict)

    def get(self, index: int) -> Any:
        return self.sub_answers.get(index)


def answer_to_dict(answer: Any) -> Any:
    """Plain (JSON-ready) form of a student answer."""
    if isinstance(answer, MatchingAnswer):
        return answer.to_dict()
    if isinstance(answer, AudioAnswer):
        return {
            "subAnswers": {
                str(i): answer_to_dict(a) for i, a in sorted(answer.sub_answers.items())
            }
        }
    if isinstance(answer, dict):
        return dict(answer)
    if isinstance(answer, (list, tuple)):
        return list(answer)
    return answer


def answers_to_dict(answers: Mapping[int, Any]) -> dict[str, Any]:
    return {str(i): answer_to_dict(a) for i, a in sorted(answers.items())}


# =============================================================================
# Test aggregate
# =============================================================================


@dataclass
class Section:
    """Reading passage shared by several questions."""
    id: str
    title: str = ""
    passage: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "passage": self.passage}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Section":
        return cls(
            id=str(data.get("id") or new_question_id()),
            title=data.get("title") or "",
            passage=data.get("passage") or "",
        )


@dataclass
class Test:
    """A test as stored: ordered questions plus metadata."""

    __test__ = False  # not a pytest test class

    id: str = field(default_factory=new_question_id)
    title: str = ""
    description: str = ""
    questions: list[Question] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    time_limit: int | None = None  # minutes
    visible_for: str = "all"  # 'all' or 'group'
    group_id: str | None = None

    def section(self, section_id: str) -> Section | None:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "questions": [q.to_dict() for q in self.questions],
            "sections": [s.to_dict() for s in self.sections],
            "timeLimit": self.time_limit,
            "visibleFor": self.visible_for,
            "groupId": self.group_id,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Test":
        time_limit = data.get("timeLimit")
        return cls(
            id=str(data.get("id") or new_question_id()),
            title=data.get("title") or "",
            description=data.get("description") or "",
            questions=[question_from_dict(q) for q in data.get("questions") or []],
            sections=[Section.from_dict(s) for s in data.get("sections") or []],
            time_limit=int(time_limit) if time_limit not in (None, "") else None,
            visible_for=data.get("visibleFor") or "all",
            group_id=data.get("groupId") or None,
        )
