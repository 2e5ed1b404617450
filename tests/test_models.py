from __future__ import annotations

import pytest

from adaptive_quiz.models import Answer, AnswerType, format_decimal


def test_integer_answer_matches_trimmed_decimal_string() -> None:
    answer = Answer.integer(15)
    assert answer.answer_type == AnswerType.INTEGER
    assert answer.canonical_text() == "15"
    assert answer.is_correct("15")
    assert answer.is_correct("  15 ")
    assert not answer.is_correct("015")
    assert not answer.is_correct("+15")
    assert not answer.is_correct("15.0")


def test_negative_integer_requires_sign() -> None:
    answer = Answer.integer(-1)
    assert answer.canonical_text() == "-1"
    assert answer.is_correct("-1")
    assert not answer.is_correct("1")


@pytest.mark.parametrize(
    "value, expected",
    [
        (1.5, "1.50"),
        (2.675, "2.68"),
        (0.125, "0.13"),
        (-0.125, "-0.13"),
        (-0.001, "0.00"),
        (3, "3.00"),
    ],
)
def test_format_decimal_rounds_half_away_from_zero(value: float, expected: str) -> None:
    assert format_decimal(value) == expected


def test_decimal_answer_compares_two_place_rendering() -> None:
    answer = Answer.decimal(0.5)
    assert answer.canonical_text() == "0.50"
    assert answer.is_correct("0.50")
    assert not answer.is_correct("0.5")
    assert not answer.is_correct(".50")


def test_string_answer_ignores_whitespace_and_case() -> None:
    answer = Answer.string("(x-3)/4")
    assert answer.is_correct(" (X - 3)/4 ")
    assert answer.is_correct("(x-3)/4")
    assert not answer.is_correct("(x+3)/4")
    assert answer.canonical_text() == "(x-3)/4"


def test_string_answer_looseness_is_textual_only() -> None:
    # "2,3" and "2, 3" collapse to the same text; "3,2" does not
    answer = Answer.string("2,3")
    assert answer.is_correct("2, 3")
    assert not answer.is_correct("3,2")


def test_answer_is_immutable() -> None:
    answer = Answer.integer(4)
    with pytest.raises(AttributeError):
        answer.int_value = 5  # type: ignore[misc]
    assert answer.value == 4
