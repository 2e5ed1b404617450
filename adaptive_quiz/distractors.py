from __future__ import annotations

import logging
import random
from typing import Iterable

from .models import Answer, AnswerType, format_decimal

LOGGER = logging.getLogger(__name__)

_GENERIC_STRINGS = ["x", "2x", "x²", "1", "0", "-x"]


class DistractorGenerator:
    """
    Generic wrong answers derived only from the answer's type and value.

    `generate` draws at most `max_attempts` random candidates. A candidate is
    rejected if it is already in `exclude` or would be judged correct. When
    every draw collides a deterministic perturbation is returned instead, so
    the call always terminates with a fresh value.
    """

    def __init__(self, seed: int | None = None, max_attempts: int = 50) -> None:
        self._rng = random.Random(seed)
        self.max_attempts = max_attempts

    def _integer_candidate(self, value: int) -> str:
        variations = [
            value + self._rng.randint(1, 4),
            value - self._rng.randint(1, 4),
            value * 2,
            # truncating halve, never below 1
            max(1, int(value / 2)),
            -value,
        ]
        return str(self._rng.choice(variations))

    def _decimal_candidate(self, value: float) -> str:
        return format_decimal(value + self._rng.uniform(-2.0, 2.0))

    def _string_candidate(self, value: str) -> str:
        pool = list(_GENERIC_STRINGS)
        if "x" in value:
            pool.append(value.replace("x", ""))
            pool.append(value.replace("x", "x²"))
        if not value.endswith("+C"):
            pool.append(value + "+C")
        return self._rng.choice(pool)

    def candidate(self, answer: Answer) -> str:
        if answer.answer_type == AnswerType.INTEGER:
            return self._integer_candidate(answer.int_value)
        if answer.answer_type == AnswerType.DECIMAL:
            return self._decimal_candidate(answer.decimal_value)
        return self._string_candidate(answer.string_value)

    def _fallback(self, answer: Answer, exclude: set[str]) -> str:
        step = 0
        while True:
            step += 1
            if answer.answer_type == AnswerType.INTEGER:
                text = str(answer.int_value + 4 + step)
            elif answer.answer_type == AnswerType.DECIMAL:
                text = format_decimal(answer.decimal_value + 2.0 + step / 100)
            else:
                text = f"{answer.string_value} + {step}"
            if text not in exclude and not answer.is_correct(text):
                return text

    def generate(self, answer: Answer, exclude: Iterable[str] = ()) -> str:
        taken = set(exclude)
        for _ in range(self.max_attempts):
            text = self.candidate(answer)
            if text and text not in taken and not answer.is_correct(text):
                return text
        LOGGER.debug(
            "no fresh distractor for %r after %d draws, using fallback",
            answer.canonical_text(),
            self.max_attempts,
        )
        return self._fallback(answer, taken)

    def fill(self, answer: Answer, choices: list[str], size: int) -> list[str]:
        """Pad `choices` in place with generic distractors up to `size`."""
        while len(choices) < size:
            choices.append(self.generate(answer, choices))
        return choices
