"""
Typed settings for quiz sessions and the HTTP service.

Defaults reproduce the standard game: five choices per question and a level
up after three consecutive correct answers.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .models import QuizMode

CONFIG_ENV_VAR = "ADAPTIVE_QUIZ_CONFIG"


class QuizConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    mode: QuizMode = QuizMode.EXPERT
    choice_count: int = Field(default=5, ge=2, le=10, description="Number of answer choices per question.")
    level_up_streak: int = Field(default=3, ge=1, description="Consecutive correct answers needed to level up.")
    max_distractor_attempts: int = Field(default=50, ge=1)
    seed: Optional[int] = None
    render_prompts: bool = False
    render_dpi: int = Field(default=300, ge=50, le=1200)
    render_background: str = "transparent"
    render_dir: Optional[Path] = None

    @field_validator("mode", mode="before")
    @classmethod
    def lower_mode(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @classmethod
    def from_yaml(cls, path: Path | str) -> "QuizConfig":
        path = Path(path)
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Quiz config at {path} must be a mapping")
        return cls.model_validate(data)


def load_config(path: Path | str | None = None) -> QuizConfig:
    """Load settings from `path`, then $ADAPTIVE_QUIZ_CONFIG, else defaults."""
    candidate = path or os.environ.get(CONFIG_ENV_VAR)
    if not candidate:
        return QuizConfig()
    return QuizConfig.from_yaml(candidate)
