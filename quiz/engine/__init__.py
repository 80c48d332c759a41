"""Quiz Engines - Logica de negocios."""

from .evaluator import AnswerEvaluator, lexical_overlap_score, parse_judgment
from .lifecycle import QuizLifecycle
from .parser import ParseResult, QuestionSetParser
from .quiz_engine import AnswerOutcome, GenerationResult, QuizEngine
from .scoring_engine import QuizScoringEngine, round_half_up

__all__ = [
    "AnswerEvaluator",
    "AnswerOutcome",
    "GenerationResult",
    "ParseResult",
    "QuestionSetParser",
    "QuizEngine",
    "QuizLifecycle",
    "QuizScoringEngine",
    "lexical_overlap_score",
    "parse_judgment",
    "round_half_up",
]
