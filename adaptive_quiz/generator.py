from __future__ import annotations

import hashlib
import logging
import random
from collections import Counter
from typing import List

# imported for their registrations
from . import arithmetic_generator, calculus_generator, classic_generator, equation_generator  # noqa: F401
from .models import Question, QuizMode
from .registry import archetypes_for, clamp_level, get_archetype

LOGGER = logging.getLogger(__name__)


class QualityController:
    """
    Keeps batches free of repeated prompts.

    Tracks:
    - Generated prompts (deduplication)
    - Archetype distribution
    - Level distribution
    """

    def __init__(self, max_retries: int = 50) -> None:
        self.max_retries = max_retries
        self._generated_hashes: set[str] = set()
        self._archetype_counts: Counter[str] = Counter()
        self._level_counts: Counter[int] = Counter()

    def _hash_item(self, item: Question) -> str:
        """Generate a hash for deduplication based on prompt."""
        return hashlib.md5(item.prompt.encode()).hexdigest()

    def accept_item(self, item: Question) -> bool:
        return self._hash_item(item) not in self._generated_hashes

    def register_item(self, item: Question) -> None:
        self._generated_hashes.add(self._hash_item(item))
        self._archetype_counts[item.archetype] += 1
        self._level_counts[item.level] += 1

    def reset(self) -> None:
        self._generated_hashes.clear()
        self._archetype_counts.clear()
        self._level_counts.clear()

    def get_stats(self) -> dict:
        return {
            "total_generated": len(self._generated_hashes),
            "archetype_distribution": dict(self._archetype_counts),
            "level_distribution": dict(self._level_counts),
        }


class MathQuizGenerator:
    """
    High-level API to generate questions for a difficulty level.

    Each level owns a handful of archetypes; `generate_one` picks one of
    them uniformly. Levels outside the mode's range are clamped.

    Usage:

    ```python
    gen = MathQuizGenerator(seed=42)
    question = gen.generate_one(level=3)
    # question.prompt -> string to show in UI
    # question.answer.canonical_text() -> correct choice
    ```
    """

    def __init__(
        self,
        seed: int | None = None,
        mode: QuizMode = QuizMode.EXPERT,
        enable_quality_control: bool = True,
        quality_max_retries: int = 50,
    ) -> None:
        self.mode = QuizMode(mode)
        self._rng = random.Random(seed)
        self._quality_control = QualityController(max_retries=quality_max_retries) if enable_quality_control else None

    def generate_one(self, level: int, archetype_index: int | None = None) -> Question:
        level = clamp_level(level, self.mode)
        if archetype_index is None:
            chosen = self._rng.choice(archetypes_for(level, self.mode))
        else:
            chosen = get_archetype(level, archetype_index, self.mode)
        question = chosen.generate(self._rng)
        LOGGER.debug("level %d %s: %s", level, chosen.name, question.prompt)
        return question

    def generate_batch(self, level: int, n: int) -> List[Question]:
        """
        Generate up to `n` questions with distinct prompts.

        Low levels have a small problem space, so the batch can come back
        shorter than requested once `n * max_retries` attempts are spent.
        """
        if n <= 0:
            return []

        if self._quality_control is None:
            return [self.generate_one(level) for _ in range(n)]

        items: List[Question] = []
        max_total_attempts = n * self._quality_control.max_retries
        attempts = 0
        while len(items) < n and attempts < max_total_attempts:
            attempts += 1
            item = self.generate_one(level)
            if self._quality_control.accept_item(item):
                self._quality_control.register_item(item)
                items.append(item)

        if len(items) < n:
            LOGGER.info("batch for level %d stopped at %d of %d unique questions", level, len(items), n)
        return items

    def reset_quality_control(self) -> None:
        """Reset the quality control tracking (useful for new sessions)."""
        if self._quality_control:
            self._quality_control.reset()

    def get_quality_stats(self) -> dict | None:
        if self._quality_control:
            return self._quality_control.get_stats()
        return None
