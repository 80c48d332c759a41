"""Quiz Schemas - Modelos Pydantic de dominio e request/response."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, ValidationError, computed_field, field_validator, model_validator

from .enums import EvaluationMethod, QuestionType, QuizDifficulty, QuizStatus
from .errors import QuizConfigurationError

# Limites de configuracao (mantem prompt e resposta com tamanho controlado)
MAX_TOTAL_QUESTIONS = 30
MAX_QUESTIONS_PER_TYPE = 20

# Pontuacao fixa por tipo de questao
QUESTION_MARKS: dict[QuestionType, int] = {
    QuestionType.MCQ: 1,
    QuestionType.SAQ: 3,
    QuestionType.LAQ: 5,
}

# Chaves das alternativas de multipla escolha
OPTION_KEYS = ("1", "2", "3", "4")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# DOMINIO
# =============================================================================


class QuizConfiguration(BaseModel):
    """Configuracao pedida pelo usuario para gerar um quiz."""

    name: str = Field(..., description="Nome do quiz")
    difficulty: QuizDifficulty = Field(default=QuizDifficulty.MEDIUM, description="Nivel de dificuldade")
    mcq_count: int = Field(default=0, ge=0, le=MAX_QUESTIONS_PER_TYPE, description="Questoes de multipla escolha")
    saq_count: int = Field(default=0, ge=0, le=MAX_QUESTIONS_PER_TYPE, description="Questoes de resposta curta")
    laq_count: int = Field(default=0, ge=0, le=MAX_QUESTIONS_PER_TYPE, description="Questoes de resposta longa")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Quiz name is required")
        return value

    @model_validator(mode="after")
    def _check_total(self) -> "QuizConfiguration":
        total = self.total_questions
        if total < 1:
            raise ValueError("At least one question type must be selected")
        if total > MAX_TOTAL_QUESTIONS:
            raise ValueError(f"Total questions cannot exceed {MAX_TOTAL_QUESTIONS}")
        return self

    @property
    def total_questions(self) -> int:
        return self.mcq_count + self.saq_count + self.laq_count

    def count_for(self, question_type: QuestionType) -> int:
        """Quantidade pedida para um tipo de questao."""
        return {
            QuestionType.MCQ: self.mcq_count,
            QuestionType.SAQ: self.saq_count,
            QuestionType.LAQ: self.laq_count,
        }[question_type]


def validate_configuration(
    data: "QuizConfiguration | dict", max_total: int | None = None
) -> QuizConfiguration:
    """Valida configuracao e converte erros em QuizConfigurationError.

    Args:
        data: Configuracao ja construida ou dict com os campos
        max_total: Limite total opcional mais restritivo que MAX_TOTAL_QUESTIONS

    Returns:
        QuizConfiguration validada

    Raises:
        QuizConfigurationError: Se algum campo ou o total for invalido
    """
    if isinstance(data, QuizConfiguration):
        config = data
    else:
        try:
            config = QuizConfiguration.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            message = str(first.get("msg", "Invalid quiz configuration"))
            raise QuizConfigurationError(message.removeprefix("Value error, ")) from e

    if max_total is not None and config.total_questions > max_total:
        raise QuizConfigurationError(f"Total questions cannot exceed {max_total}")

    return config


class Question(BaseModel):
    """Questao gerada e validada. `marks` deriva sempre do tipo."""

    ordinal: int = Field(..., ge=1, description="Posicao 1-based na ordem de geracao")
    question_type: QuestionType = Field(..., description="Tipo da questao")
    text: str = Field(..., min_length=1, description="Enunciado")
    options: dict[str, str] | None = Field(default=None, description="Alternativas 1-4 (apenas MCQ)")
    reference_answer: str = Field(..., min_length=1, description="Resposta de referencia")
    correct_option_number: int | None = Field(default=None, ge=1, le=4, description="Opcao correta (apenas MCQ)")
    explanation: str = Field(..., min_length=1, description="Explicacao da resposta")

    @computed_field
    @property
    def marks(self) -> int:
        return QUESTION_MARKS[self.question_type]

    @model_validator(mode="after")
    def _check_options(self) -> "Question":
        if self.question_type == QuestionType.MCQ:
            if self.options is None or tuple(sorted(self.options)) != OPTION_KEYS:
                raise ValueError("MCQ must have exactly 4 options keyed '1'..'4'")
            if self.correct_option_number is None:
                raise ValueError("MCQ requires correct_option_number")
        else:
            if self.options is not None or self.correct_option_number is not None:
                raise ValueError(f"{self.question_type.name} must not carry options")
        return self


class Answer(BaseModel):
    """Resposta persistida de um usuario para uma questao."""

    quiz_id: str = Field(..., description="ID do quiz")
    question_id: int = Field(..., ge=1, description="Ordinal da questao respondida")
    user_answer: str = Field(..., description="Texto da resposta (numero da opcao para MCQ)")
    is_correct: bool = Field(..., description="Se a resposta foi considerada correta")
    marks_obtained: int = Field(..., ge=0, description="0 ou a pontuacao da questao")
    similarity_score: int | None = Field(default=None, ge=0, le=100, description="0-100 para SAQ/LAQ")
    evaluation_method: EvaluationMethod = Field(..., description="Estrategia usada na avaliacao")
    feedback: str = Field(default="", description="Explicacao do julgamento (se houver)")
    answered_at: datetime = Field(default_factory=_utcnow)


class Evaluation(BaseModel):
    """Veredito produzido pelo AnswerEvaluator."""

    is_correct: bool
    marks_obtained: int = Field(..., ge=0)
    similarity_score: int = Field(..., ge=0, le=100)
    method: EvaluationMethod
    feedback: str = ""

    @property
    def degraded(self) -> bool:
        """True quando o veredito veio do fallback lexical."""
        return self.method == EvaluationMethod.LEXICAL


# =============================================================================
# REQUEST / RESPONSE
# =============================================================================


class GenerateQuizRequest(BaseModel):
    """Request para geracao de quiz."""

    # Validada por validate_configuration no engine (erro -> 400)
    configuration: dict[str, Any] = Field(..., description="Configuracao do quiz (QuizConfiguration)")
    document_ids: list[str] = Field(..., min_length=1, description="Documentos de origem do conteudo")


class GenerateQuizResponse(BaseModel):
    """Response com quiz gerado."""

    quiz_id: str = Field(..., description="ID unico do quiz")
    status: QuizStatus = Field(..., description="Status apos a geracao")
    total_marks: int = Field(..., description="Pontuacao maxima")
    requested_questions: int = Field(..., description="Total pedido na configuracao")
    generated_questions: int = Field(..., description="Total de questoes validas")
    shortfall: bool = Field(..., description="Se vieram menos questoes que o pedido")
    questions: list[Question] = Field(..., description="Lista de questoes")


class QuizAnswerRequest(BaseModel):
    """Request para avaliar uma resposta."""

    quiz_id: str = Field(..., description="ID do quiz")
    question_id: int = Field(..., ge=1, description="Ordinal da questao")
    user_answer: str = Field(..., description="Resposta do usuario")


class AnswerSubmission(BaseModel):
    """Uma resposta dentro de um lote."""

    question_id: int = Field(..., ge=1)
    user_answer: str


class BatchAnswerRequest(BaseModel):
    """Request para avaliar varias respostas do mesmo quiz."""

    quiz_id: str = Field(..., description="ID do quiz")
    answers: list[AnswerSubmission] = Field(..., min_length=1, description="Respostas a avaliar")


class QuizAnswerResponse(BaseModel):
    """Response da avaliacao de resposta."""

    question_id: int = Field(..., description="Ordinal da questao")
    is_correct: bool = Field(..., description="Se a resposta esta correta")
    marks_obtained: int = Field(..., description="Pontos ganhos (0 se errado)")
    similarity_score: int | None = Field(None, description="Similaridade 0-100 (SAQ/LAQ)")
    evaluation_method: EvaluationMethod = Field(..., description="Estrategia usada")
    feedback: str = Field(default="", description="Explicacao do julgamento")
    reference_answer: str = Field(..., description="Resposta de referencia")
    explanation: str = Field(..., description="Explicacao da resposta correta")


class QuestionStatusResponse(BaseModel):
    """Se uma questao especifica ja foi respondida."""

    quiz_id: str
    question_id: int
    answered: bool = Field(..., description="Se existe resposta persistida")
    answer: Answer | None = Field(None, description="Resposta se existir")


class QuizSummary(BaseModel):
    """Resumo de um quiz para listagens."""

    quiz_id: str
    name: str
    difficulty: QuizDifficulty
    status: QuizStatus
    total_marks: int
    percentage: int | None = None
    created_at: datetime
    completed_at: datetime | None = None


class QuizResultsResponse(BaseModel):
    """Response com resultado final."""

    quiz_id: str = Field(..., description="ID do quiz")
    name: str = Field(..., description="Nome do quiz")
    status: QuizStatus = Field(..., description="Status atual")
    total_questions: int = Field(..., description="Total de questoes")
    answered_questions: int = Field(..., description="Questoes respondidas")
    correct_answers: int = Field(..., description="Respostas corretas")
    total_marks: int = Field(..., description="Pontuacao maxima")
    marks_obtained: int | None = Field(None, description="Pontuacao obtida (apos conclusao)")
    percentage: int | None = Field(None, description="Percentual (apos conclusao)")
    completed_at: datetime | None = Field(None, description="Data de conclusao")
    breakdown: dict[str, dict[str, int]] = Field(..., description="Analise por tipo de questao")
    answers: list[Answer] = Field(default_factory=list, description="Respostas persistidas")


class QuizStatsResponse(BaseModel):
    """Estatisticas agregadas dos quizzes do usuario."""

    total_quizzes: int = 0
    total_questions_attempted: int = 0
    average_percentage: float | None = None
    total_marks_obtained: int = 0
    total_possible_marks: int = 0


class RecentPerformance(BaseModel):
    """Desempenho de um quiz concluido."""

    quiz_id: str
    name: str
    percentage: int
    completed_at: datetime
