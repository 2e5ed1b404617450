from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from adaptive_quiz.config import CONFIG_ENV_VAR, QuizConfig, load_config
from adaptive_quiz.models import QuizMode


def test_defaults_match_standard_game() -> None:
    config = QuizConfig()
    assert config.mode == QuizMode.EXPERT
    assert config.choice_count == 5
    assert config.level_up_streak == 3
    assert config.max_distractor_attempts == 50
    assert config.render_prompts is False


def test_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "quiz.yaml"
    path.write_text("mode: Classic\nchoice_count: 4\nseed: 9\n", encoding="utf-8")
    config = QuizConfig.from_yaml(path)
    assert config.mode == QuizMode.CLASSIC
    assert config.choice_count == 4
    assert config.seed == 9


def test_empty_yaml_gives_defaults(tmp_path: Path) -> None:
    path = tmp_path / "quiz.yaml"
    path.write_text("", encoding="utf-8")
    assert QuizConfig.from_yaml(path) == QuizConfig()


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "quiz.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        QuizConfig.from_yaml(path)


@pytest.mark.parametrize(
    "payload",
    [
        {"choice_count": 1},
        {"level_up_streak": 0},
        {"mode": "impossible"},
        {"unknown_key": True},
    ],
)
def test_invalid_settings_raise(payload: dict) -> None:
    with pytest.raises(ValidationError):
        QuizConfig.model_validate(payload)


def test_load_config_reads_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "quiz.yaml"
    path.write_text("level_up_streak: 2\n", encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
    assert load_config().level_up_streak == 2


def test_load_config_without_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    assert load_config() == QuizConfig()
