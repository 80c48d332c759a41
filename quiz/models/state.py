"""Quiz State - Registro do quiz e estado intermediario do parser."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .enums import QuestionType, QuizStatus
from .schemas import OPTION_KEYS, Question, QuizConfiguration


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class QuizState:
    """Estado completo de um quiz.

    Attributes:
        quiz_id: ID unico do quiz
        configuration: Configuracao usada na geracao
        document_ids: Documentos de origem do conteudo
        questions: Dict de perguntas (ordinal -> Question)
        status: Estado atual do ciclo de vida
        total_marks: Pontuacao maxima (fixa a partir de READY)
        marks_obtained: Pontuacao obtida (definida apenas em COMPLETED)
        percentage: Percentual final (definido apenas em COMPLETED)
        error: Motivo da falha de geracao (quiz permanece em GENERATING)
        created_at: Criacao do quiz
        completed_at: Conclusao do quiz
    """

    quiz_id: str
    configuration: QuizConfiguration
    document_ids: list[str] = field(default_factory=list)
    questions: dict[int, Question] = field(default_factory=dict)
    status: QuizStatus = QuizStatus.GENERATING
    total_marks: int = 0
    marks_obtained: int | None = None
    percentage: int | None = None
    error: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @property
    def failed(self) -> bool:
        """Geracao falhou (GENERATING com erro registrado)."""
        return self.status == QuizStatus.GENERATING and self.error is not None

    def ordered_questions(self) -> list[Question]:
        """Perguntas em ordem de geracao."""
        return [self.questions[k] for k in sorted(self.questions)]

    def get_question(self, question_id: int) -> Question | None:
        return self.questions.get(question_id)

    def to_dict(self) -> dict[str, Any]:
        """Converte para dicionario JSON-compativel (para persistencia)."""
        return {
            "quiz_id": self.quiz_id,
            "configuration": self.configuration.model_dump(mode="json"),
            "document_ids": list(self.document_ids),
            "questions": {str(k): v.model_dump(mode="json") for k, v in self.questions.items()},
            "status": self.status.value,
            "total_marks": self.total_marks,
            "marks_obtained": self.marks_obtained,
            "percentage": self.percentage,
            "error": self.error,
            "created_at": self.created_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuizState":
        """Cria instancia a partir de dicionario."""
        questions = {}
        for k, v in data.get("questions", {}).items():
            questions[int(k)] = v if isinstance(v, Question) else Question.model_validate(v)

        return cls(
            quiz_id=data["quiz_id"],
            configuration=QuizConfiguration.model_validate(data["configuration"]),
            document_ids=data.get("document_ids", []),
            questions=questions,
            status=QuizStatus(data.get("status", QuizStatus.GENERATING.value)),
            total_marks=data.get("total_marks", 0),
            marks_obtained=data.get("marks_obtained"),
            percentage=data.get("percentage"),
            error=data.get("error"),
            created_at=_parse_datetime(data.get("created_at")) or datetime.now(timezone.utc),
            completed_at=_parse_datetime(data.get("completed_at")),
        )


@dataclass
class QuestionDraft:
    """Questao sendo acumulada pelo parser (ainda nao validada)."""

    question_type: QuestionType
    ordinal: int
    text: str = ""
    options: dict[str, str] = field(default_factory=dict)
    reference_answer: str = ""
    correct_option_number: int | None = None
    explanation: str = ""

    def is_valid(self) -> bool:
        """Portao de validade: campos obrigatorios e 4 alternativas para MCQ."""
        if not (self.text and self.reference_answer and self.explanation):
            return False
        if self.question_type == QuestionType.MCQ:
            if tuple(sorted(self.options)) != OPTION_KEYS:
                return False
            # Resposta degradada (sem numero de opcao resolvido) nao e gradavel
            if self.correct_option_number is None:
                return False
        return True

    def to_question(self, ordinal: int) -> Question:
        is_mcq = self.question_type == QuestionType.MCQ
        return Question(
            ordinal=ordinal,
            question_type=self.question_type,
            text=self.text,
            options=dict(self.options) if is_mcq else None,
            reference_answer=self.reference_answer,
            correct_option_number=self.correct_option_number if is_mcq else None,
            explanation=self.explanation,
        )


@dataclass
class ParseState:
    """Estado explicito do scan linha-a-linha do parser.

    Attributes:
        current: Questao aberta (None antes do primeiro marcador)
        counts: Questoes abertas por tipo (limitadas pela configuracao)
        next_ordinal: Proximo ordinal provisorio
        overflow: Marcador acima do limite visto; linhas de campo seguintes sao ignoradas
        drafts: Questoes ja fechadas
    """

    current: QuestionDraft | None = None
    counts: dict[QuestionType, int] = field(default_factory=lambda: {t: 0 for t in QuestionType})
    next_ordinal: int = 1
    overflow: bool = False
    drafts: list[QuestionDraft] = field(default_factory=list)

    def open(self, question_type: QuestionType, text: str) -> QuestionDraft:
        """Fecha a questao atual e abre uma nova."""
        self.flush()
        self.current = QuestionDraft(question_type=question_type, ordinal=self.next_ordinal, text=text)
        self.counts[question_type] += 1
        self.next_ordinal += 1
        self.overflow = False
        return self.current

    def flush(self) -> None:
        """Move a questao atual para a lista de drafts."""
        if self.current is not None:
            self.drafts.append(self.current)
            self.current = None
