from __future__ import annotations

import operator
import random
from dataclasses import dataclass
from typing import Callable

from .models import Answer, Question
from .registry import archetype


@dataclass
class _OpConfig:
    symbol: str
    func: Callable[[int, int], int]


# Prompts use typographic symbols; answers and distractors stay ASCII.
_OPS = {
    "+": _OpConfig("+", operator.add),
    "-": _OpConfig("−", operator.sub),
    "*": _OpConfig("×", operator.mul),
    "/": _OpConfig("÷", operator.floordiv),
}


def _texts(*values: int) -> list[str]:
    return [str(v) for v in values]


def _binary(a: int, op: str, b: int, distractors: list[str]) -> Question:
    cfg = _OPS[op]
    return Question(
        prompt=f"{a} {cfg.symbol} {b}",
        answer=Answer.integer(cfg.func(a, b)),
        contextual_distractors=distractors,
        meta={"operands": [a, b], "operator": op},
    )


# Level 1: basic arithmetic


@archetype(1, 0, "addition")
def addition(rng: random.Random) -> Question:
    a = rng.randint(5, 49)
    b = rng.randint(5, 49)
    total = a + b
    return _binary(a, "+", b, _texts(a - b, total - 1, total + 1, a * 2))


@archetype(1, 1, "subtraction")
def subtraction(rng: random.Random) -> Question:
    a = rng.randint(20, 98)
    b = rng.randint(5, a - 1)
    diff = a - b
    return _binary(a, "-", b, _texts(a + b, diff - 1, diff + 1, b - a))


@archetype(1, 2, "multiplication")
def multiplication(rng: random.Random) -> Question:
    a = rng.randint(2, 14)
    b = rng.randint(2, 14)
    product = a * b
    return _binary(a, "*", b, _texts(a + b, product - a, product + a, product + b))


@archetype(1, 3, "division")
def division(rng: random.Random) -> Question:
    """Dividend is built as divisor × quotient, so it always divides evenly."""
    divisor = rng.randint(2, 11)
    quotient = rng.randint(2, 11)
    dividend = divisor * quotient
    return _binary(
        dividend, "/", divisor, _texts(quotient + 1, quotient - 1, dividend, divisor)
    )


# Level 2: advanced arithmetic


@archetype(2, 0, "two_step")
def two_step(rng: random.Random) -> Question:
    a = rng.randint(2, 9)
    b = rng.randint(2, 9)
    c = rng.randint(1, 9)
    return Question(
        prompt=f"{a} × {b} + {c}",
        answer=Answer.integer(a * b + c),
        contextual_distractors=_texts(a * (b + c), a * b - c, a + b + c, a * b),
        meta={"operands": [a, b, c], "operator": "*+"},
    )


@archetype(2, 1, "order_of_operations")
def order_of_operations(rng: random.Random) -> Question:
    a = rng.randint(2, 7)
    b = rng.randint(2, 7)
    c = rng.randint(1, 9)
    # reading left to right instead of multiplying first is the classic slip
    return Question(
        prompt=f"{a} + {b} × {c}",
        answer=Answer.integer(a + b * c),
        contextual_distractors=_texts((a + b) * c, a * b + c, a + b + c, b * c),
        meta={"operands": [a, b, c], "operator": "+*"},
    )


@archetype(2, 2, "squares")
def squares(rng: random.Random) -> Question:
    a = rng.randint(3, 14)
    square = a * a
    return Question(
        prompt=f"{a}²",
        answer=Answer.integer(square),
        contextual_distractors=_texts(a * 2, square - a, square + a, (a - 1) * (a - 1)),
        meta={"operands": [a], "operator": "^2"},
    )


@archetype(2, 3, "negative_numbers")
def negative_numbers(rng: random.Random) -> Question:
    a = rng.randint(5, 19)
    b = rng.randint(5, 19)
    diff = a - b
    return _binary(a, "-", b, _texts(b - a, abs(diff), a + b) + ["0"])
