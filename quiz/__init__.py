"""Quiz Module - Geracao e avaliacao de quizzes a partir de documentos.

Arquitetura:
- models/: Enums, Schemas Pydantic, Errors, QuizState
- prompts/: Templates e builder de prompts
- llm/: CompletionClient (HTTP e Claude Agent SDK) e LLMClientFactory
- engine/: QuestionSetParser, AnswerEvaluator, QuizLifecycle, QuizEngine
- storage/: QuizStore e AgentFSContentStore (AgentFS)
- router.py: FastAPI endpoints
"""

from .config import QuizSettings
from .engine import AnswerEvaluator, QuestionSetParser, QuizEngine, QuizLifecycle, QuizScoringEngine
from .llm import LLMClientFactory
from .models import Answer, Question, QuizConfiguration, QuizDifficulty, QuizState, QuizStatus
from .storage import AgentFSContentStore, QuizStore

__all__ = [
    # Config
    "QuizSettings",
    # Models
    "QuizDifficulty",
    "QuizStatus",
    "QuizConfiguration",
    "Question",
    "Answer",
    "QuizState",
    # Engines
    "QuizEngine",
    "QuestionSetParser",
    "AnswerEvaluator",
    "QuizLifecycle",
    "QuizScoringEngine",
    # LLM
    "LLMClientFactory",
    # Storage
    "QuizStore",
    "AgentFSContentStore",
]
