"""Quiz Lifecycle - Maquina de estados do quiz.

GENERATING -> READY -> IN_PROGRESS -> COMPLETED (linear, sem retorno).
As transicoes sao puras: recebem e devolvem QuizState, sem I/O.
"""

import logging
import uuid
from datetime import datetime, timezone

from ..models.enums import QuizStatus
from ..models.errors import InvalidTransitionError
from ..models.schemas import Answer, Question, QuizConfiguration
from ..models.state import QuizState
from .scoring_engine import QuizScoringEngine

logger = logging.getLogger(__name__)

EMPTY_GENERATION_ERROR = "Completion service returned no valid questions"


class QuizLifecycle:
    """Transicoes de estado e congelamento do resultado final.

    Example:
        >>> lifecycle = QuizLifecycle()
        >>> state = lifecycle.start_generation(config, ["doc-1"])
        >>> lifecycle.on_generated(state, questions)
        True
        >>> state.status
        <QuizStatus.READY: 'ready'>
    """

    def __init__(self, scoring: QuizScoringEngine | None = None):
        self.scoring = scoring or QuizScoringEngine()

    def start_generation(
        self,
        config: QuizConfiguration,
        document_ids: list[str] | None = None,
        quiz_id: str | None = None,
    ) -> QuizState:
        """Aloca um quiz novo em GENERATING."""
        state = QuizState(
            quiz_id=quiz_id or str(uuid.uuid4())[:8],
            configuration=config,
            document_ids=list(document_ids or []),
        )
        logger.info(f"[Quiz {state.quiz_id}] Criado em GENERATING")
        return state

    def on_generated(self, state: QuizState, questions: list[Question]) -> bool:
        """Aplica o resultado da geracao.

        Args:
            state: Quiz em GENERATING
            questions: Questoes validas retornadas pelo parser

        Returns:
            True se o quiz foi promovido a READY; False se a lista veio vazia
            (quiz permanece em GENERATING com erro registrado)

        Raises:
            InvalidTransitionError: Se o quiz nao estiver em GENERATING
        """
        self._require(state, QuizStatus.GENERATING, "on_generated")

        if not questions:
            self.fail_generation(state, EMPTY_GENERATION_ERROR)
            return False

        state.questions = {q.ordinal: q for q in questions}
        state.total_marks = self.scoring.total_marks(questions)
        state.status = QuizStatus.READY
        state.error = None
        logger.info(
            f"[Quiz {state.quiz_id}] READY com {len(questions)} questoes ({state.total_marks} pontos)"
        )
        return True

    def fail_generation(self, state: QuizState, reason: str) -> QuizState:
        """Registra falha de geracao; o quiz permanece em GENERATING."""
        self._require(state, QuizStatus.GENERATING, "fail_generation")
        state.error = reason
        logger.warning(f"[Quiz {state.quiz_id}] Falha na geracao: {reason}")
        return state

    def on_first_interaction(self, state: QuizState) -> QuizState:
        """READY -> IN_PROGRESS (idempotente se ja estiver em IN_PROGRESS)."""
        if state.status == QuizStatus.IN_PROGRESS:
            return state
        self._require(state, QuizStatus.READY, "start")
        state.status = QuizStatus.IN_PROGRESS
        logger.info(f"[Quiz {state.quiz_id}] IN_PROGRESS")
        return state

    def complete(
        self, state: QuizState, answers: list[Answer], now: datetime | None = None
    ) -> QuizState:
        """Finaliza a tentativa e congela pontuacao e percentual.

        Os pontos sao recalculados a partir das respostas persistidas,
        nunca acumulados incrementalmente.

        Args:
            state: Quiz em IN_PROGRESS
            answers: Todas as respostas persistidas do quiz
            now: Momento da conclusao (default: agora, UTC)

        Raises:
            InvalidTransitionError: Fora de IN_PROGRESS ou com total_marks = 0
        """
        self._require(state, QuizStatus.IN_PROGRESS, "complete")
        if state.total_marks <= 0:
            raise InvalidTransitionError(state.quiz_id, state.status.value, "complete (total_marks = 0)")

        marks = self.scoring.sum_marks([a for a in answers if a.quiz_id == state.quiz_id])
        state.marks_obtained = marks
        state.percentage = self.scoring.calculate_percentage(marks, state.total_marks)
        state.completed_at = now or datetime.now(timezone.utc)
        state.status = QuizStatus.COMPLETED
        logger.info(
            f"[Quiz {state.quiz_id}] COMPLETED: {marks}/{state.total_marks} ({state.percentage}%)"
        )
        return state

    @staticmethod
    def _require(state: QuizState, expected: QuizStatus, action: str) -> None:
        if state.status != expected:
            raise InvalidTransitionError(state.quiz_id, state.status.value, action)
