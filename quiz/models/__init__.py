"""Quiz Models - Enums, Schemas, Errors e State."""

from .enums import (
    CompletionErrorKind,
    EvaluationMethod,
    QuestionType,
    QuizDifficulty,
    QuizStatus,
    ShortfallPolicy,
)
from .errors import (
    DuplicateAnswerError,
    InvalidTransitionError,
    QuestionNotFoundError,
    QuizConfigurationError,
    QuizError,
    QuizNotFoundError,
)
from .schemas import (
    MAX_QUESTIONS_PER_TYPE,
    MAX_TOTAL_QUESTIONS,
    QUESTION_MARKS,
    Answer,
    AnswerSubmission,
    BatchAnswerRequest,
    Evaluation,
    GenerateQuizRequest,
    GenerateQuizResponse,
    Question,
    QuestionStatusResponse,
    QuizAnswerRequest,
    QuizAnswerResponse,
    QuizConfiguration,
    QuizResultsResponse,
    QuizStatsResponse,
    QuizSummary,
    RecentPerformance,
    validate_configuration,
)
from .state import ParseState, QuestionDraft, QuizState

__all__ = [
    # Enums
    "CompletionErrorKind",
    "EvaluationMethod",
    "QuestionType",
    "QuizDifficulty",
    "QuizStatus",
    "ShortfallPolicy",
    # Errors
    "QuizError",
    "QuizConfigurationError",
    "InvalidTransitionError",
    "QuizNotFoundError",
    "QuestionNotFoundError",
    "DuplicateAnswerError",
    # Schemas
    "MAX_TOTAL_QUESTIONS",
    "MAX_QUESTIONS_PER_TYPE",
    "QUESTION_MARKS",
    "QuizConfiguration",
    "Question",
    "Answer",
    "Evaluation",
    "validate_configuration",
    "GenerateQuizRequest",
    "GenerateQuizResponse",
    "QuizAnswerRequest",
    "QuizAnswerResponse",
    "AnswerSubmission",
    "BatchAnswerRequest",
    "QuestionStatusResponse",
    "QuizSummary",
    "QuizResultsResponse",
    "QuizStatsResponse",
    "RecentPerformance",
    # State
    "QuizState",
    "QuestionDraft",
    "ParseState",
]
