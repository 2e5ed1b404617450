from __future__ import annotations

import random

from .models import Answer, Question
from .registry import archetype


def _texts(*values: int) -> list[str]:
    return [str(v) for v in values]


def _monomial(coef: int, exponent: int) -> str:
    if exponent == 0:
        return str(coef)
    if exponent == 1:
        return f"{coef}x"
    return f"{coef}x^{exponent}"


# Level 7: functions


@archetype(7, 0, "function_evaluation")
def function_evaluation(rng: random.Random) -> Question:
    a = rng.randint(2, 7)
    b = rng.randint(1, 9)
    x = rng.randint(1, 5)
    return Question(
        prompt=f"If f(x) = {a}x + {b}, find f({x})",
        answer=Answer.integer(a * x + b),
        contextual_distractors=_texts(a * x, a + b, x + b, a * (x + b)),
        meta={"a": a, "b": b, "x": x},
    )


@archetype(7, 1, "composition")
def composition(rng: random.Random) -> Question:
    a = rng.randint(2, 5)
    x = rng.randint(1, 4)
    return Question(
        prompt=f"If f(x) = {a}x and g(x) = x + 1, find f(g({x}))",
        answer=Answer.integer(a * (x + 1)),
        contextual_distractors=_texts(a * x + 1, a + x + 1, a * x, (a + 1) * x),
        meta={"a": a, "x": x},
    )


@archetype(7, 2, "inverse_function")
def inverse_function(rng: random.Random) -> Question:
    a = rng.randint(2, 7)
    b = rng.randint(1, 9)
    return Question(
        prompt=f"Inverse of f(x) = {a}x + {b}",
        answer=Answer.string(f"(x-{b})/{a}"),
        contextual_distractors=[
            f"x/{a}+{b}",
            f"({a}x-{b})",
            f"{a}x+{b}",
            f"x-{b}",
            f"(x+{b})/{a}",
        ],
        meta={"a": a, "b": b},
    )


# Level 8: precalculus


@archetype(8, 0, "exponential_equation")
def exponential_equation(rng: random.Random) -> Question:
    x = rng.randint(2, 4)
    value = 2**x
    return Question(
        prompt=f"Solve: 2^x = {value}",
        answer=Answer.integer(x),
        contextual_distractors=_texts(x - 1, x + 1, value, value // 2),
        meta={"x": x, "value": value},
    )


_TRIG_TABLE = {
    "sin(0°)": "0",
    "sin(90°)": "1",
    "cos(0°)": "1",
    "cos(90°)": "0",
    "tan(45°)": "1",
}
_TRIG_VALUES = ["0", "1", "-1", "0.5", "√2"]


@archetype(8, 1, "trig_values")
def trig_values(rng: random.Random) -> Question:
    prompt = rng.choice(sorted(_TRIG_TABLE))
    value = _TRIG_TABLE[prompt]
    return Question(
        prompt=prompt,
        answer=Answer.string(value),
        contextual_distractors=[v for v in _TRIG_VALUES if v != value],
        meta={"expression": prompt},
    )


@archetype(8, 2, "arithmetic_sequence")
def arithmetic_sequence(rng: random.Random) -> Question:
    a = rng.randint(2, 7)
    d = rng.randint(2, 5)
    n = rng.randint(3, 6)
    term = a + (n - 1) * d
    return Question(
        prompt=f"Arithmetic sequence: a_1 = {a}, d = {d}. Find a_{n}",
        answer=Answer.integer(term),
        contextual_distractors=_texts(a + n * d, a * n, term - d, a + d * d),
        meta={"a": a, "d": d, "n": n},
    )


# Level 9: calculus I


@archetype(9, 0, "power_rule")
def power_rule(rng: random.Random) -> Question:
    a = rng.randint(2, 7)
    n = rng.randint(2, 5)
    return Question(
        prompt=f"d/dx ({a}x^{n})",
        answer=Answer.string(_monomial(a * n, n - 1)),
        contextual_distractors=[
            _monomial(a, n),
            _monomial(a * n, 1),
            _monomial(n, n - 1),
            _monomial(a, n + 1),
            _monomial(a * n, n),
        ],
        meta={"a": a, "n": n},
    )


@archetype(9, 1, "derivative_of_square")
def derivative_of_square(rng: random.Random) -> Question:
    a = rng.randint(2, 5)
    return Question(
        prompt=f"d/dx ({a}x²)",
        answer=Answer.string(f"{2 * a}x"),
        contextual_distractors=[f"{a}x", str(2 * a), f"{a}x²", "0"],
        meta={"a": a},
    )


@archetype(9, 2, "basic_integral")
def basic_integral(rng: random.Random) -> Question:
    a = rng.randint(2, 7)
    return Question(
        prompt=f"∫ {a}x dx",
        answer=Answer.string(f"{a}x²/2+C"),
        contextual_distractors=[f"{a}x+C", f"{a}x³+C", "x²+C", f"{a}x²+C", f"{a}x²/2"],
        meta={"a": a},
    )


# Level 10: advanced calculus


@archetype(10, 0, "chain_rule")
def chain_rule(rng: random.Random) -> Question:
    a = rng.randint(2, 5)
    b = rng.randint(2, 5)
    inner = f"({b}x+1)"
    return Question(
        prompt=f"d/dx ({a}{inner}²)",
        answer=Answer.string(f"{2 * a * b}{inner}"),
        contextual_distractors=[
            f"{a * b}x",
            f"{a}{inner}",
            f"{a * b}{inner}",
            f"{2 * a}{inner}",
        ],
        meta={"a": a, "b": b},
    )


@archetype(10, 1, "limit_at_infinity")
def limit_at_infinity(rng: random.Random) -> Question:
    a = rng.randint(2, 7)
    return Question(
        prompt=f"lim(x→∞) {a}/x",
        answer=Answer.string("0"),
        contextual_distractors=["∞", "undefined", str(-a), str(a)],
        meta={"a": a},
    )


@archetype(10, 2, "definite_integral")
def definite_integral(rng: random.Random) -> Question:
    a = rng.randint(2, 5)
    upper = rng.randint(2, 5)
    return Question(
        prompt=f"∫ from 0 to {upper} {a} dx",
        answer=Answer.integer(a * upper),
        contextual_distractors=_texts(
            a * upper * upper // 2, a * upper + upper, a, 2 * a * upper
        ),
        meta={"a": a, "upper": upper},
    )
