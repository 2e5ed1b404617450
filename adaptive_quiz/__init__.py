from .models import Answer, AnswerType, ChoiceOutcome, Question, QuizMode
from .generator import MathQuizGenerator
from .distractors import DistractorGenerator
from .config import QuizConfig, load_config
from .session import QuestionView, QuizSession, SessionStats, SubmitResult

__all__ = [
    "Answer",
    "AnswerType",
    "ChoiceOutcome",
    "Question",
    "QuizMode",
    "MathQuizGenerator",
    "DistractorGenerator",
    "QuizConfig",
    "load_config",
    "QuestionView",
    "QuizSession",
    "SessionStats",
    "SubmitResult",
]
