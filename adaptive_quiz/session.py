from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import List, Sequence

from .config import QuizConfig
from .distractors import DistractorGenerator
from .generator import MathQuizGenerator
from .models import Answer, ChoiceOutcome, Question
from .registry import clamp_level, level_name, max_level

LOGGER = logging.getLogger(__name__)


@dataclass
class SessionState:
    difficulty_level: int = 1
    streak: int = 0
    total_correct: int = 0
    total_attempted: int = 0
    # guards against duplicate submit events for one question
    has_answered: bool = False


@dataclass(frozen=True)
class QuestionView:
    prompt: str
    choices: List[str]
    difficulty_level: int
    level_name: str


@dataclass(frozen=True)
class SubmitResult:
    correct: bool
    selected: str
    canonical_answer: str
    outcomes: List[ChoiceOutcome]
    leveled_up: bool
    new_difficulty: int
    feedback: str


@dataclass(frozen=True)
class SessionStats:
    accuracy: float
    difficulty_level: int
    streak: int
    total_correct: int
    total_attempted: int
    level_name: str


def build_choice_set(
    question: Question,
    distractors: DistractorGenerator,
    size: int,
    rng: random.Random,
) -> List[str]:
    """
    Correct answer first, then contextual distractors, then generic ones.

    Duplicates and anything the answer would accept as correct are skipped,
    so the canonical rendering appears exactly once. The result is shuffled.
    """
    answer = question.answer
    choices = [answer.canonical_text()]
    for text in question.contextual_distractors:
        if len(choices) >= size:
            break
        if text in choices or answer.is_correct(text):
            continue
        choices.append(text)

    distractors.fill(answer, choices, size)
    rng.shuffle(choices)
    return choices


def classify_choices(answer: Answer, choices: Sequence[str], selected: str) -> List[ChoiceOutcome]:
    """The correct choice is always CORRECT, even when the user picked it."""
    outcomes = []
    for text in choices:
        if answer.is_correct(text):
            outcomes.append(ChoiceOutcome.CORRECT)
        elif text == selected:
            outcomes.append(ChoiceOutcome.CHOSEN_WRONG)
        else:
            outcomes.append(ChoiceOutcome.OTHER)
    return outcomes


class QuizSession:
    """
    Adaptive quiz controller.

    Owns the session state and the current question. Every public method
    takes the session lock, so one instance can be shared between request
    handlers.

    Usage:

    ```python
    session = QuizSession(QuizConfig(seed=7))
    view = session.current_question()
    result = session.submit_answer(view.choices[0])
    session.advance()
    ```
    """

    def __init__(
        self,
        config: QuizConfig | None = None,
        generator: MathQuizGenerator | None = None,
        distractors: DistractorGenerator | None = None,
        initial_difficulty: int = 1,
    ) -> None:
        self.config = config or QuizConfig()
        seed = self.config.seed
        # use different seeds derived from base seed so results are reproducible
        self._generator = generator or MathQuizGenerator(
            seed=None if seed is None else seed + 1,
            mode=self.config.mode,
            enable_quality_control=False,
        )
        self._distractors = distractors or DistractorGenerator(
            seed=None if seed is None else seed + 2,
            max_attempts=self.config.max_distractor_attempts,
        )
        self._shuffle_rng = random.Random(None if seed is None else seed + 3)
        self._lock = threading.RLock()

        self.mode = self._generator.mode
        self.state = SessionState(difficulty_level=clamp_level(initial_difficulty, self.mode))
        self.feedback = ""
        self._question: Question | None = None
        self._choices: List[str] = []
        self._last_result: SubmitResult | None = None
        self.next_question()

    @property
    def question(self) -> Question:
        return self._question

    @property
    def choices(self) -> List[str]:
        return list(self._choices)

    def _view(self) -> QuestionView:
        return QuestionView(
            prompt=self._question.prompt,
            choices=list(self._choices),
            difficulty_level=self.state.difficulty_level,
            level_name=level_name(self.state.difficulty_level, self.mode),
        )

    def next_question(self) -> QuestionView:
        with self._lock:
            self._question = self._generator.generate_one(self.state.difficulty_level)
            self._choices = build_choice_set(
                self._question,
                self._distractors,
                self.config.choice_count,
                self._shuffle_rng,
            )
            self.state.has_answered = False
            self.feedback = ""
            self._last_result = None
            return self._view()

    def start_session(self, initial_difficulty: int = 1) -> QuestionView:
        with self._lock:
            self.state = SessionState(difficulty_level=clamp_level(initial_difficulty, self.mode))
            LOGGER.info("session started at level %d (%s)", self.state.difficulty_level, self.mode.value)
            return self.next_question()

    def current_question(self) -> QuestionView:
        with self._lock:
            return self._view()

    def _resolve_choice(self, choice: str | int) -> str:
        if isinstance(choice, int) and not isinstance(choice, bool):
            if not 0 <= choice < len(self._choices):
                raise ValueError(f"Choice index {choice} out of range 0..{len(self._choices) - 1}")
            return self._choices[choice]
        return str(choice)

    def submit_answer(self, choice: str | int) -> SubmitResult:
        """
        Evaluate a choice, given as its text or its index.

        A second submission for the same question is ignored: statistics stay
        untouched and the first result is returned again.
        """
        with self._lock:
            if self.state.has_answered:
                LOGGER.debug("ignoring repeated submission %r", choice)
                return self._last_result
            selected = self._resolve_choice(choice)

            state = self.state
            answer = self._question.answer
            state.total_attempted += 1
            correct = answer.is_correct(selected)
            if correct:
                state.streak += 1
                state.total_correct += 1
                feedback = "Correct!"
            else:
                state.streak = 0
                feedback = f"Wrong. Correct answer: {answer.canonical_text()}"

            outcomes = classify_choices(answer, self._choices, selected)

            leveled_up = False
            if state.streak >= self.config.level_up_streak and state.difficulty_level < max_level(self.mode):
                state.difficulty_level += 1
                state.streak = 0
                leveled_up = True
                name = level_name(state.difficulty_level, self.mode)
                feedback += f"\nDifficulty Increased! Now at {name}"
                LOGGER.info("level up to %d (%s)", state.difficulty_level, name)

            state.has_answered = True
            self.feedback = feedback
            self._last_result = SubmitResult(
                correct=correct,
                selected=selected,
                canonical_answer=answer.canonical_text(),
                outcomes=outcomes,
                leveled_up=leveled_up,
                new_difficulty=state.difficulty_level,
                feedback=feedback,
            )
            return self._last_result

    def advance(self) -> QuestionView:
        return self.next_question()

    def reset_progress(self) -> QuestionView:
        with self._lock:
            self.state = SessionState()
            LOGGER.info("progress reset")
            return self.next_question()

    def accuracy(self) -> float:
        with self._lock:
            if self.state.total_attempted == 0:
                return 0.0
            return self.state.total_correct / self.state.total_attempted

    def get_stats(self) -> SessionStats:
        with self._lock:
            return SessionStats(
                accuracy=self.accuracy(),
                difficulty_level=self.state.difficulty_level,
                streak=self.state.streak,
                total_correct=self.state.total_correct,
                total_attempted=self.state.total_attempted,
                level_name=level_name(self.state.difficulty_level, self.mode),
            )
