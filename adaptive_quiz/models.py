from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


class QuizMode(str, Enum):
    EXPERT = "expert"
    CLASSIC = "classic"


class AnswerType(str, Enum):
    INTEGER = "integer"
    DECIMAL = "decimal"
    STRING = "string"


class ChoiceOutcome(str, Enum):
    CORRECT = "correct"
    CHOSEN_WRONG = "chosen_wrong"
    OTHER = "other"


_WHITESPACE = re.compile(r"\s+")


def format_decimal(value: float) -> str:
    """Fixed two-decimal rendering, rounding half away from zero."""
    quantized = Decimal(repr(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if quantized == 0:
        # avoid "-0.00"
        quantized = abs(quantized)
    return f"{quantized:.2f}"


def _normalize(text: str) -> str:
    return _WHITESPACE.sub("", text).lower()


@dataclass(frozen=True)
class Answer:
    """
    Canonical answer of a question.

    Only the field matching `answer_type` is meaningful. Use the `integer`,
    `decimal` and `string` constructors rather than building it directly.

    String answers are compared with all whitespace removed and lower-cased,
    so "(x-3)/4" and " (X - 3)/4 " are the same answer. Two strings that only
    differ in spacing or case can therefore never be told apart; that
    looseness is intentional.
    """

    answer_type: AnswerType
    int_value: int = 0
    decimal_value: float = 0.0
    string_value: str = ""

    @classmethod
    def integer(cls, value: int) -> "Answer":
        return cls(answer_type=AnswerType.INTEGER, int_value=int(value))

    @classmethod
    def decimal(cls, value: float) -> "Answer":
        return cls(answer_type=AnswerType.DECIMAL, decimal_value=float(value))

    @classmethod
    def string(cls, value: str) -> "Answer":
        return cls(answer_type=AnswerType.STRING, string_value=str(value))

    @property
    def value(self) -> int | float | str:
        if self.answer_type == AnswerType.INTEGER:
            return self.int_value
        if self.answer_type == AnswerType.DECIMAL:
            return self.decimal_value
        return self.string_value

    def canonical_text(self) -> str:
        if self.answer_type == AnswerType.INTEGER:
            return str(self.int_value)
        if self.answer_type == AnswerType.DECIMAL:
            return format_decimal(self.decimal_value)
        return self.string_value

    def is_correct(self, submitted: str) -> bool:
        if self.answer_type == AnswerType.STRING:
            return _normalize(submitted) == _normalize(self.string_value)
        return submitted.strip() == self.canonical_text()


@dataclass
class Question:
    """
    Represents a single generated question.

    - `prompt`: text shown to the user, may contain math markup (e.g. "7 + 8")
    - `answer`: the typed canonical answer
    - `contextual_distractors`: wrong answers built from the same operands,
      modelled on mistakes a learner would make
    - `level` / `archetype`: which tier and template produced it
    - `meta`: operands and intermediate values for logging/analytics
    """

    prompt: str
    answer: Answer
    contextual_distractors: list[str] = field(default_factory=list)
    level: int = 1
    archetype: str = ""
    meta: dict | None = None
