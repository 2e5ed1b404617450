"""
Four-tier classic quiz.

Prompts are LaTeX so they can be handed to a renderer as-is. Questions carry
no contextual distractors; choices come from the generic distractor pool.
"""

from __future__ import annotations

import random

from .models import Answer, Question, QuizMode
from .registry import archetype


@archetype(1, 0, "multiplication", mode=QuizMode.CLASSIC)
def multiplication(rng: random.Random) -> Question:
    a = rng.randint(2, 14)
    b = rng.randint(2, 14)
    return Question(
        prompt=f"{a} \\times {b}",
        answer=Answer.integer(a * b),
        meta={"operands": [a, b], "operator": "*"},
    )


@archetype(2, 0, "linear_equation", mode=QuizMode.CLASSIC)
def linear_equation(rng: random.Random) -> Question:
    x = rng.randint(2, 9)
    a = rng.randint(2, 5)
    b = rng.randint(1, 9)
    c = a * x + b
    return Question(
        prompt=f"\\text{{Solve for }} x\\text{{: }} {a}x + {b} = {c}",
        answer=Answer.integer(x),
        meta={"a": a, "b": b, "c": c, "x": x},
    )


@archetype(3, 0, "square_root", mode=QuizMode.CLASSIC)
def square_root(rng: random.Random) -> Question:
    x = rng.randint(2, 7)
    return Question(
        prompt=f"Solve: x = \\sqrt{{{x * x}}}",
        answer=Answer.integer(x),
        meta={"x": x, "c": x * x},
    )


@archetype(4, 0, "exponential_equation", mode=QuizMode.CLASSIC)
def exponential_equation(rng: random.Random) -> Question:
    x = rng.randint(2, 5)
    return Question(
        prompt=f"Solve: 2^{{x}} = {2**x}",
        answer=Answer.integer(x),
        meta={"x": x, "value": 2**x},
    )
