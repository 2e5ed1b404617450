from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor

import pytest

from adaptive_quiz.config import QuizConfig
from adaptive_quiz.distractors import DistractorGenerator
from adaptive_quiz.models import Answer, ChoiceOutcome, Question, QuizMode
from adaptive_quiz.registry import all_archetypes
from adaptive_quiz.session import QuizSession, build_choice_set, classify_choices


def _correct(session: QuizSession) -> str:
    return session.question.answer.canonical_text()


def _wrong(session: QuizSession) -> str:
    answer = session.question.answer
    return next(c for c in session.choices if not answer.is_correct(c))


def _answer_correctly(session: QuizSession, times: int) -> None:
    for _ in range(times):
        session.submit_answer(_correct(session))
        session.advance()


@pytest.fixture()
def session() -> QuizSession:
    return QuizSession(QuizConfig(seed=12))


@pytest.mark.parametrize("archetype", all_archetypes(), ids=lambda a: f"{a.mode.value}-{a.level}-{a.name}")
def test_choice_set_has_correct_answer_exactly_once(archetype) -> None:
    rng = random.Random(archetype.index + 10 * archetype.level)
    distractors = DistractorGenerator(seed=1)
    for _ in range(60):
        question = archetype.generate(rng)
        choices = build_choice_set(question, distractors, 5, rng)
        assert len(choices) == 5
        assert len(set(choices)) == 5
        assert choices.count(question.answer.canonical_text()) == 1
        assert sum(question.answer.is_correct(c) for c in choices) == 1


def test_choice_set_prefers_contextual_distractors_and_dedups() -> None:
    question = Question(
        prompt="7 + 8",
        answer=Answer.integer(15),
        contextual_distractors=["-1", "14", "16", "14", "15 "],
    )
    choices = build_choice_set(question, DistractorGenerator(seed=0), 5, random.Random(0))
    assert {"15", "-1", "14", "16"} <= set(choices)
    assert len(set(choices)) == 5
    assert "15 " not in choices


def test_choice_set_truncates_extra_contextual_distractors() -> None:
    question = Question(
        prompt="q",
        answer=Answer.integer(1),
        contextual_distractors=["2", "3", "4", "5", "6", "7"],
    )
    choices = build_choice_set(question, DistractorGenerator(seed=0), 5, random.Random(0))
    assert sorted(choices) == ["1", "2", "3", "4", "5"]


def test_classification_marks_correct_and_chosen_wrong() -> None:
    answer = Answer.integer(15)
    choices = ["14", "15", "16", "-1", "30"]
    assert classify_choices(answer, choices, "16") == [
        ChoiceOutcome.OTHER,
        ChoiceOutcome.CORRECT,
        ChoiceOutcome.CHOSEN_WRONG,
        ChoiceOutcome.OTHER,
        ChoiceOutcome.OTHER,
    ]
    # when the user is right only the correct choice is highlighted
    assert classify_choices(answer, choices, "15").count(ChoiceOutcome.CHOSEN_WRONG) == 0


def test_new_session_has_question_and_zero_accuracy(session: QuizSession) -> None:
    view = session.current_question()
    assert view.prompt
    assert len(view.choices) == 5
    assert view.difficulty_level == 1
    assert view.level_name == "Basic Arithmetic"
    assert session.accuracy() == 0.0
    assert session.get_stats().total_attempted == 0


def test_three_correct_answers_level_up(session: QuizSession) -> None:
    results = []
    for _ in range(3):
        results.append(session.submit_answer(_correct(session)))
        session.advance()

    assert [r.leveled_up for r in results] == [False, False, True]
    assert results[-1].new_difficulty == 2
    assert "Difficulty Increased! Now at Advanced Arithmetic" in results[-1].feedback
    stats = session.get_stats()
    assert stats.difficulty_level == 2
    assert stats.streak == 0
    assert stats.total_correct == 3
    assert stats.total_attempted == 3
    assert stats.accuracy == 1.0


def test_wrong_answer_resets_streak(session: QuizSession) -> None:
    _answer_correctly(session, 2)
    result = session.submit_answer(_wrong(session))
    assert not result.correct
    assert result.feedback == f"Wrong. Correct answer: {result.canonical_answer}"
    assert session.state.streak == 0
    assert session.state.difficulty_level == 1
    session.advance()
    _answer_correctly(session, 2)
    assert session.state.difficulty_level == 1
    _answer_correctly(session, 1)
    assert session.state.difficulty_level == 2


def test_level_up_fires_once_per_three_correct(session: QuizSession) -> None:
    _answer_correctly(session, 9)
    assert session.state.difficulty_level == 4
    assert session.state.streak == 0


def test_difficulty_stops_at_max_level() -> None:
    session = QuizSession(QuizConfig(seed=3), initial_difficulty=10)
    _answer_correctly(session, 4)
    assert session.state.difficulty_level == 10
    assert session.state.streak == 4


def test_classic_mode_caps_at_four() -> None:
    session = QuizSession(QuizConfig(seed=3, mode=QuizMode.CLASSIC), initial_difficulty=3)
    _answer_correctly(session, 6)
    assert session.state.difficulty_level == 4
    assert session.get_stats().level_name == "Precalculus"


def test_accuracy_tracks_submissions(session: QuizSession) -> None:
    for correct in [True, False, True, True, False]:
        session.submit_answer(_correct(session) if correct else _wrong(session))
        session.advance()
    assert session.accuracy() == 3 / 5


def test_double_submission_only_counts_first(session: QuizSession) -> None:
    first = session.submit_answer(_wrong(session))
    second = session.submit_answer(_correct(session))
    assert second is first
    assert session.state.total_attempted == 1
    assert session.state.total_correct == 0
    assert session.state.streak == 0


def test_repeated_submission_with_bad_index_returns_first_result(session: QuizSession) -> None:
    first = session.submit_answer(0)
    assert session.submit_answer(99) is first
    assert session.state.total_attempted == 1


def test_submit_by_index(session: QuizSession) -> None:
    index = session.choices.index(_correct(session))
    result = session.submit_answer(index)
    assert result.correct
    assert result.outcomes[index] == ChoiceOutcome.CORRECT


def test_submit_index_out_of_range(session: QuizSession) -> None:
    with pytest.raises(ValueError):
        session.submit_answer(7)
    assert session.state.total_attempted == 0


def test_advance_replaces_question_and_clears_answered(session: QuizSession) -> None:
    session.submit_answer(_correct(session))
    assert session.state.has_answered
    assert session.feedback == "Correct!"
    session.advance()
    assert not session.state.has_answered
    assert session.feedback == ""
    result = session.submit_answer(_correct(session))
    assert session.state.total_attempted == 2
    assert result.correct


def test_reset_progress(session: QuizSession) -> None:
    _answer_correctly(session, 4)
    view = session.reset_progress()
    assert view.difficulty_level == 1
    stats = session.get_stats()
    assert (stats.streak, stats.total_correct, stats.total_attempted) == (0, 0, 0)
    assert stats.accuracy == 0.0


@pytest.mark.parametrize("level, expected", [(0, 1), (-5, 1), (4, 4), (25, 10)])
def test_start_session_clamps_difficulty(session: QuizSession, level: int, expected: int) -> None:
    _answer_correctly(session, 1)
    view = session.start_session(level)
    assert view.difficulty_level == expected
    assert session.get_stats().total_attempted == 0


class _FixedGenerator:
    mode = QuizMode.EXPERT

    def generate_one(self, level: int) -> Question:
        return Question(
            prompt="Inverse of f(x) = 4x + 3",
            answer=Answer.string("(x-3)/4"),
            contextual_distractors=["x/4+3", "(4x-3)", "4x+3", "x-3"],
            level=level,
        )


def test_string_answer_submitted_with_spacing_is_correct() -> None:
    session = QuizSession(QuizConfig(seed=1), generator=_FixedGenerator())
    assert "(x-3)/4" in session.choices
    result = session.submit_answer(" (X - 3)/4 ")
    assert result.correct
    assert result.outcomes.count(ChoiceOutcome.CORRECT) == 1
    assert ChoiceOutcome.CHOSEN_WRONG not in result.outcomes


def test_concurrent_submissions_count_once(session: QuizSession) -> None:
    choice = _correct(session)
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: session.submit_answer(choice), range(32)))
    assert all(r is results[0] for r in results)
    assert session.state.total_attempted == 1
    assert session.state.total_correct == 1
