from __future__ import annotations

import logging
import random

from .models import Answer, Question
from .registry import MAX_RESAMPLE_ATTEMPTS, archetype

LOGGER = logging.getLogger(__name__)


def _texts(*values: int) -> list[str]:
    return [str(v) for v in values]


def _signed(value: int) -> str:
    # handle cases for signs, e.g. "+ 4" / "− 4"
    if value >= 0:
        return f"+ {value}"
    return f"− {abs(value)}"


def _pair(first: int, second: int) -> str:
    return f"{first},{second}"


# Level 3: pre-algebra


@archetype(3, 0, "one_step_equation")
def one_step_equation(rng: random.Random) -> Question:
    x = rng.randint(2, 19)
    b = rng.randint(1, 14)
    result = x + b
    return Question(
        prompt=f"Solve: x + {b} = {result}",
        answer=Answer.integer(x),
        contextual_distractors=_texts(result + b, result, x - b, b),
        meta={"x": x, "b": b, "result": result},
    )


@archetype(3, 1, "two_step_equation")
def two_step_equation(rng: random.Random) -> Question:
    x = rng.randint(2, 14)
    a = rng.randint(2, 7)
    b = rng.randint(1, 9)
    result = a * x + b
    return Question(
        prompt=f"Solve: {a}x + {b} = {result}",
        answer=Answer.integer(x),
        contextual_distractors=_texts(result - b, result // a, (result + b) // a, a),
        meta={"x": x, "a": a, "b": b, "result": result},
    )


@archetype(3, 2, "fraction_equation")
def fraction_equation(rng: random.Random) -> Question:
    """
    (n/d)x = r with integer x and r.

    Operands are resampled until n·x is a multiple of d. After
    MAX_RESAMPLE_ATTEMPTS misses x is forced to a multiple of d, which always
    divides evenly.
    """
    for _ in range(MAX_RESAMPLE_ATTEMPTS):
        num = rng.randint(1, 4)
        denom = rng.randint(2, 5)
        x = rng.randint(2, 11)
        if (num * x) % denom == 0:
            break
    else:
        LOGGER.debug("fraction_equation: resampling exhausted, using x multiple of %d", denom)
        x = denom * rng.randint(1, 2)

    result = (num * x) // denom
    return Question(
        prompt=f"Solve: ({num}/{denom})x = {result}",
        answer=Answer.integer(x),
        contextual_distractors=_texts(result + 1, result - 1, result * num, num * x + denom),
        meta={"num": num, "denom": denom, "x": x, "result": result},
    )


@archetype(3, 3, "distributive_property")
def distributive_property(rng: random.Random) -> Question:
    a = rng.randint(2, 5)
    b = rng.randint(1, 9)
    c = rng.randint(1, 9)
    return Question(
        prompt=f"{a}({b} + {c})",
        answer=Answer.integer(a * b + a * c),
        contextual_distractors=_texts(a * (b - c), a * b * c, a + b + c, a * b + c),
        meta={"operands": [a, b, c]},
    )


# Level 4: algebra I


@archetype(4, 0, "multi_step_equation")
def multi_step_equation(rng: random.Random) -> Question:
    x = rng.randint(2, 11)
    a = rng.randint(2, 5)
    b = rng.randint(1, 7)
    c = rng.randint(1, 7)
    # right-hand side r − c collapses to a·x + b
    result = a * x + b + c
    return Question(
        prompt=f"Solve: {a}x + {b} = {result} − {c}",
        answer=Answer.integer(x),
        contextual_distractors=_texts(
            result - b - c, (result - b) // a, (result - b + c) // a, x + 1
        ),
        meta={"x": x, "a": a, "b": b, "c": c, "result": result},
    )


@archetype(4, 1, "variables_both_sides")
def variables_both_sides(rng: random.Random) -> Question:
    x = rng.randint(2, 9)
    a = rng.randint(3, 7)
    b = rng.randint(1, a - 1)
    # ax = bx + c  →  (a − b)x = c
    c = (a - b) * x
    return Question(
        prompt=f"Solve: {a}x = {b}x + {c}",
        answer=Answer.integer(x),
        contextual_distractors=_texts(c // a, c // b, a - b, c),
        meta={"x": x, "a": a, "b": b, "c": c},
    )


@archetype(4, 2, "substitution")
def substitution(rng: random.Random) -> Question:
    x = rng.randint(2, 7)
    y = rng.randint(2, 7)
    return Question(
        prompt=f"If y = {y} and x + y = {x + y}, find x",
        answer=Answer.integer(x),
        contextual_distractors=_texts(y, x + y, x - 1, x + 1),
        meta={"x": x, "y": y},
    )


@archetype(4, 3, "inequality")
def inequality(rng: random.Random) -> Question:
    x = rng.randint(3, 14)
    a = rng.randint(2, 5)
    bound = a * (x - 1)
    return Question(
        prompt=f"Smallest integer x with {a}x > {bound}",
        answer=Answer.integer(x),
        contextual_distractors=_texts(x - 1, x + 1, bound, (a * x) // (a + 1)),
        meta={"x": x, "a": a, "bound": bound},
    )


# Level 5: algebra II


@archetype(5, 0, "exponent_rules")
def exponent_rules(rng: random.Random) -> Question:
    base = rng.randint(2, 5)
    b = rng.randint(2, 4)
    c = rng.randint(2, 4)
    return Question(
        prompt=f"Simplify: {base}^{b} × {base}^{c} = {base}^?",
        answer=Answer.integer(b + c),
        contextual_distractors=_texts(b * c, b - c, b) + [f"{base}^{b * c}"],
        meta={"base": base, "b": b, "c": c},
    )


@archetype(5, 1, "factoring")
def factoring(rng: random.Random) -> Question:
    a, b = sorted((rng.randint(2, 7), rng.randint(2, 7)))
    total = a + b
    product = a * b
    return Question(
        prompt=f"Factor x² + {total}x + {product}: (x+?)(x+?)",
        answer=Answer.string(_pair(a, b)),
        contextual_distractors=[
            _pair(total, product),
            _pair(a, a),
            _pair(b, b),
            _pair(product, total),
        ],
        meta={"a": a, "b": b, "sum": total, "product": product},
    )


@archetype(5, 2, "rational_expression")
def rational_expression(rng: random.Random) -> Question:
    a = rng.randint(2, 7)
    b = rng.randint(2, 7)
    return Question(
        prompt=f"Simplify: ({a}x / {b}) × {b}",
        answer=Answer.string(f"{a}x"),
        contextual_distractors=[f"{a * b}x", f"{a + b}x", str(a), "1"],
        meta={"a": a, "b": b},
    )


# Level 6: quadratics


@archetype(6, 0, "perfect_square")
def perfect_square(rng: random.Random) -> Question:
    x = rng.randint(2, 11)
    c = x * x
    return Question(
        prompt=f"Solve for x > 0: x² = {c}",
        answer=Answer.integer(x),
        contextual_distractors=_texts(x + 1, x - 1, c // 2, x * 2),
        meta={"x": x, "c": c},
    )


@archetype(6, 1, "vertex_form")
def vertex_form(rng: random.Random) -> Question:
    h = rng.randint(1, 7)
    k = rng.randint(1, 9)
    return Question(
        prompt=f"Vertex of (x−{h})² + {k}",
        answer=Answer.string(_pair(h, k)),
        contextual_distractors=[_pair(-h, k), _pair(k, h), _pair(h * h, k), str(h + k)],
        meta={"h": h, "k": k},
    )


@archetype(6, 2, "quadratic_roots")
def quadratic_roots(rng: random.Random) -> Question:
    root1, root2 = sorted((rng.randint(1, 5), rng.randint(1, 5)))
    b = -(root1 + root2)
    c = root1 * root2
    return Question(
        prompt=f"Roots of x² {_signed(b)}x {_signed(c)}",
        answer=Answer.string(_pair(root1, root2)),
        contextual_distractors=[
            _pair(root1 + 1, root2),
            _pair(root1, root2 + 1),
            _pair(b, c),
            _pair(-root1, -root2),
        ],
        meta={"roots": [root1, root2], "b": b, "c": c},
    )
