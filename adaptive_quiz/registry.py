from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from .models import Question, QuizMode


ArchetypeFunc = Callable[[random.Random], Question]

# Attempts an archetype may spend on rejection sampling before it switches to
# operands that are valid by construction.
MAX_RESAMPLE_ATTEMPTS = 20

LEVEL_NAMES: Dict[QuizMode, Dict[int, str]] = {
    QuizMode.EXPERT: {
        1: "Basic Arithmetic",
        2: "Advanced Arithmetic",
        3: "Pre-Algebra",
        4: "Algebra I",
        5: "Algebra II",
        6: "Quadratics",
        7: "Functions",
        8: "Precalculus",
        9: "Calculus I",
        10: "Advanced Calculus",
    },
    QuizMode.CLASSIC: {
        1: "Arithmetic",
        2: "Algebra",
        3: "Quadratics",
        4: "Precalculus",
    },
}


@dataclass(frozen=True)
class Archetype:
    mode: QuizMode
    level: int
    index: int
    name: str
    func: ArchetypeFunc

    def generate(self, rng: random.Random) -> Question:
        question = self.func(rng)
        question.level = self.level
        question.archetype = self.name
        return question


_REGISTRY: Dict[Tuple[QuizMode, int, int], Archetype] = {}


def archetype(level: int, index: int, name: str, mode: QuizMode = QuizMode.EXPERT):
    """Register a question template under (mode, level, index)."""

    def decorator(func: ArchetypeFunc) -> ArchetypeFunc:
        key = (mode, level, index)
        if key in _REGISTRY:
            raise ValueError(f"Archetype already registered for {key}")
        if level not in LEVEL_NAMES[mode]:
            raise ValueError(f"Level {level} does not exist in {mode.value} mode")
        _REGISTRY[key] = Archetype(mode=mode, level=level, index=index, name=name, func=func)
        return func

    return decorator


def max_level(mode: QuizMode) -> int:
    return max(LEVEL_NAMES[mode])


def clamp_level(level: int, mode: QuizMode) -> int:
    """Out-of-range levels snap to the nearest valid tier."""
    return min(max(int(level), 1), max_level(mode))


def level_name(level: int, mode: QuizMode = QuizMode.EXPERT) -> str:
    return LEVEL_NAMES[mode][clamp_level(level, mode)]


def archetypes_for(level: int, mode: QuizMode = QuizMode.EXPERT) -> List[Archetype]:
    level = clamp_level(level, mode)
    found = [a for (m, lvl, _), a in _REGISTRY.items() if m == mode and lvl == level]
    return sorted(found, key=lambda a: a.index)


def get_archetype(level: int, index: int, mode: QuizMode = QuizMode.EXPERT) -> Archetype:
    try:
        return _REGISTRY[(mode, level, index)]
    except KeyError:
        raise ValueError(f"No archetype {index} at level {level} ({mode.value})") from None


def all_archetypes() -> List[Archetype]:
    return sorted(_REGISTRY.values(), key=lambda a: (a.mode.value, a.level, a.index))
