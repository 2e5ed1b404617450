from __future__ import annotations

import threading
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from uuid import UUID, uuid4

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field, model_validator

from adaptive_quiz import ChoiceOutcome, MathQuizGenerator, QuizConfig, QuizMode, QuizSession, load_config
from adaptive_quiz.rendering import CodecogsRenderer, NullRenderer, PromptRenderer


app = FastAPI(title="Adaptive Math Quiz Service")


@dataclass
class _SessionRecord:
    session: QuizSession
    image_path: Optional[str] = None

    def image_ready(self, prompt: str, path: Path) -> None:
        # a late render for an old question must not replace the current one
        if self.session.question.prompt == prompt:
            self.image_path = str(path)


# --- In-memory session store ---
_sessions: dict[UUID, _SessionRecord] = {}
_sessions_lock = threading.Lock()


@lru_cache(maxsize=1)
def get_settings() -> QuizConfig:
    return load_config()


def get_renderer(settings: QuizConfig = Depends(get_settings)) -> PromptRenderer:
    if not settings.render_prompts:
        return NullRenderer()
    return CodecogsRenderer(
        settings.render_dir,
        dpi=settings.render_dpi,
        background=settings.render_background,
    )


class GenerateRequest(BaseModel):
    level: int = 1
    n: int = Field(default=10, ge=1, le=100)
    mode: QuizMode = QuizMode.EXPERT


class QuestionItemResponse(BaseModel):
    prompt: str
    answer: str
    answerType: str
    level: int
    archetype: str
    distractors: List[str]


class StartSessionRequest(BaseModel):
    initial_difficulty: int = 1
    mode: Optional[QuizMode] = None


class QuestionResponse(BaseModel):
    session_id: UUID
    prompt: str
    choices: List[str]
    difficulty_level: int
    level_name: str
    image_path: Optional[str] = None


class AnswerRequest(BaseModel):
    choice: Optional[str] = None
    choice_index: Optional[int] = None

    @model_validator(mode="after")
    def exactly_one(self) -> "AnswerRequest":
        if (self.choice is None) == (self.choice_index is None):
            raise ValueError("Provide exactly one of 'choice' or 'choice_index'")
        return self


class AnswerResponse(BaseModel):
    correct: bool
    canonical_answer: str
    outcomes: List[ChoiceOutcome]
    leveled_up: bool
    new_difficulty: int
    feedback: str


class StatsResponse(BaseModel):
    accuracy: float
    difficulty_level: int
    streak: int
    total_correct: int
    total_attempted: int
    level_name: str


def _get_record(session_id: UUID) -> _SessionRecord:
    with _sessions_lock:
        record = _sessions.get(session_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Quiz session not found")
    return record


def _question_response(session_id: UUID, record: _SessionRecord) -> QuestionResponse:
    view = record.session.current_question()
    return QuestionResponse(
        session_id=session_id,
        prompt=view.prompt,
        choices=view.choices,
        difficulty_level=view.difficulty_level,
        level_name=view.level_name,
        image_path=record.image_path,
    )


def _schedule_render(record: _SessionRecord, renderer: PromptRenderer, background_tasks: BackgroundTasks) -> None:
    record.image_path = None
    prompt = record.session.question.prompt
    background_tasks.add_task(renderer.render, prompt, lambda path: record.image_ready(prompt, path))


@app.post("/generate", response_model=List[QuestionItemResponse])
def generate_questions(body: GenerateRequest) -> List[QuestionItemResponse]:
    generator = MathQuizGenerator(mode=body.mode)
    items = generator.generate_batch(level=body.level, n=body.n)
    return [
        QuestionItemResponse(
            prompt=i.prompt,
            answer=i.answer.canonical_text(),
            answerType=i.answer.answer_type.value,
            level=i.level,
            archetype=i.archetype,
            distractors=i.contextual_distractors,
        )
        for i in items
    ]


@app.post("/sessions", response_model=QuestionResponse)
def start_session(
    body: StartSessionRequest,
    background_tasks: BackgroundTasks,
    settings: QuizConfig = Depends(get_settings),
    renderer: PromptRenderer = Depends(get_renderer),
) -> QuestionResponse:
    config = settings if body.mode is None else settings.model_copy(update={"mode": body.mode})
    session = QuizSession(config, initial_difficulty=body.initial_difficulty)
    session_id = uuid4()
    record = _SessionRecord(session=session)
    with _sessions_lock:
        _sessions[session_id] = record
    _schedule_render(record, renderer, background_tasks)
    return _question_response(session_id, record)


@app.get("/sessions/{session_id}/question", response_model=QuestionResponse)
def current_question(session_id: UUID) -> QuestionResponse:
    return _question_response(session_id, _get_record(session_id))


@app.post("/sessions/{session_id}/answer", response_model=AnswerResponse)
def submit_answer(session_id: UUID, body: AnswerRequest) -> AnswerResponse:
    record = _get_record(session_id)
    choice = body.choice if body.choice is not None else body.choice_index
    try:
        result = record.session.submit_answer(choice)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return AnswerResponse(
        correct=result.correct,
        canonical_answer=result.canonical_answer,
        outcomes=result.outcomes,
        leveled_up=result.leveled_up,
        new_difficulty=result.new_difficulty,
        feedback=result.feedback,
    )


@app.post("/sessions/{session_id}/advance", response_model=QuestionResponse)
def advance(
    session_id: UUID,
    background_tasks: BackgroundTasks,
    renderer: PromptRenderer = Depends(get_renderer),
) -> QuestionResponse:
    record = _get_record(session_id)
    record.session.advance()
    _schedule_render(record, renderer, background_tasks)
    return _question_response(session_id, record)


@app.post("/sessions/{session_id}/reset", response_model=QuestionResponse)
def reset_progress(
    session_id: UUID,
    background_tasks: BackgroundTasks,
    renderer: PromptRenderer = Depends(get_renderer),
) -> QuestionResponse:
    record = _get_record(session_id)
    record.session.reset_progress()
    _schedule_render(record, renderer, background_tasks)
    return _question_response(session_id, record)


@app.get("/sessions/{session_id}/stats", response_model=StatsResponse)
def get_stats(session_id: UUID) -> StatsResponse:
    stats = _get_record(session_id).session.get_stats()
    return StatsResponse(
        accuracy=stats.accuracy,
        difficulty_level=stats.difficulty_level,
        streak=stats.streak,
        total_correct=stats.total_correct,
        total_attempted=stats.total_attempted,
        level_name=stats.level_name,
    )


@app.delete("/sessions/{session_id}")
def end_session(session_id: UUID) -> dict:
    with _sessions_lock:
        record = _sessions.pop(session_id, None)
    if record is None:
        raise HTTPException(status_code=404, detail="Quiz session not found")
    return {"status": "deleted", "session_id": str(session_id)}


@app.get("/health")
def health() -> dict:
    with _sessions_lock:
        count = len(_sessions)
    return {"status": "ok", "sessions": count}
