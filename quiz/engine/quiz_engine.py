"""Quiz Engine - Orquestracao de geracao, avaliacao e conclusao."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from ..config import QuizSettings
from ..llm.client import CompletionClient
from ..models.enums import CompletionErrorKind, QuestionType, QuizStatus, ShortfallPolicy
from ..models.errors import DuplicateAnswerError, InvalidTransitionError, QuestionNotFoundError
from ..models.schemas import (
    Answer,
    AnswerSubmission,
    Evaluation,
    Question,
    QuizConfiguration,
    QuizResultsResponse,
    QuizStatsResponse,
    QuizSummary,
    RecentPerformance,
    validate_configuration,
)
from ..models.state import QuizState
from ..prompts.builder import build_generation_prompt
from ..storage.content_store import ContentStore
from ..storage.quiz_store import QuizStore
from .evaluator import AnswerEvaluator
from .lifecycle import QuizLifecycle
from .parser import QuestionSetParser
from .scoring_engine import QuizScoringEngine

logger = logging.getLogger(__name__)

NO_CONTENT_ERROR = "No completed content available for the selected documents"
RECENT_LIMIT = 3


@dataclass
class GenerationResult:
    """Resultado tipado de uma tentativa de geracao.

    Attributes:
        success: Se o quiz chegou a READY
        quiz_id: ID do quiz criado (mesmo em falha)
        state: Estado persistido apos a tentativa
        questions: Questoes validas (vazia em falha)
        requested_count: Total pedido na configuracao
        shortfall: Se vieram menos questoes validas que o pedido
        error: Motivo da falha
        error_kind: Tipo da falha do servico de completion (se houver)
    """

    success: bool
    quiz_id: str
    state: QuizState
    questions: list[Question] = field(default_factory=list)
    requested_count: int = 0
    shortfall: bool = False
    error: str | None = None
    error_kind: CompletionErrorKind | None = None


@dataclass
class AnswerOutcome:
    """Resposta persistida junto da questao e do veredito."""

    question: Question
    answer: Answer
    evaluation: Evaluation


class QuizEngine:
    """Engine principal de quiz.

    Stateless entre chamadas: todo estado vive no QuizStore. Colaboradores
    (store, conteudo, completion) sao injetados, permitindo fakes em testes.

    Example:
        >>> engine = QuizEngine(store, content_store, client)
        >>> result = await engine.generate_quiz(config, ["doc-1"])
        >>> outcome = await engine.submit_answer(result.quiz_id, 1, "2")
        >>> state = await engine.complete_quiz(result.quiz_id)
    """

    def __init__(
        self,
        store: QuizStore,
        content_store: ContentStore,
        completion_client: CompletionClient,
        settings: QuizSettings | None = None,
        parser: QuestionSetParser | None = None,
        evaluator: AnswerEvaluator | None = None,
        lifecycle: QuizLifecycle | None = None,
        scoring: QuizScoringEngine | None = None,
    ):
        self.store = store
        self.content_store = content_store
        self.client = completion_client
        self.settings = settings or QuizSettings()
        self.parser = parser or QuestionSetParser()
        self.scoring = scoring or QuizScoringEngine()
        self.lifecycle = lifecycle or QuizLifecycle(self.scoring)
        self.evaluator = evaluator or AnswerEvaluator(
            completion_client,
            saq_threshold=self.settings.saq_threshold,
            laq_threshold=self.settings.laq_threshold,
            timeout=self.settings.completion_timeout,
        )

    # =========================================================================
    # GENERATION
    # =========================================================================

    async def generate_quiz(
        self, config: QuizConfiguration | dict, document_ids: list[str]
    ) -> GenerationResult:
        """Gera um quiz a partir dos documentos selecionados.

        A configuracao e validada antes de qualquer chamada externa.

        Args:
            config: Configuracao (modelo ou dict)
            document_ids: Documentos de origem

        Returns:
            GenerationResult com o quiz em READY ou a falha registrada

        Raises:
            QuizConfigurationError: Se a configuracao for invalida
        """
        config = validate_configuration(config, max_total=self.settings.max_total_questions)

        content = await self.content_store.get_completed_text(document_ids)
        if not content.strip():
            state = self.lifecycle.start_generation(config, document_ids)
            self.lifecycle.fail_generation(state, NO_CONTENT_ERROR)
            await self.store.save_state(state)
            return GenerationResult(
                success=False,
                quiz_id=state.quiz_id,
                state=state,
                requested_count=config.total_questions,
                error=NO_CONTENT_ERROR,
            )

        return await self.generate_from_content(config, content, document_ids)

    async def generate_from_content(
        self,
        config: QuizConfiguration | dict,
        content: str,
        document_ids: list[str] | None = None,
    ) -> GenerationResult:
        """Gera um quiz a partir de texto ja concatenado.

        O quiz e persistido em GENERATING antes da chamada de completion;
        se a chamada for cancelada ele permanece em GENERATING.
        """
        config = validate_configuration(config, max_total=self.settings.max_total_questions)
        state = self.lifecycle.start_generation(config, document_ids)
        await self.store.save_state(state)

        prompt = build_generation_prompt(content, config, self.settings.max_content_length)
        logger.info(f"[Quiz {state.quiz_id}] Gerando {config.total_questions} questoes")

        completion = await self.client.complete(prompt, timeout=self.settings.completion_timeout)
        if not completion.ok:
            return await self._fail(state, completion.error.describe(), completion.error.kind)

        parsed = self.parser.parse(completion.text, config)

        if parsed.shortfall and self.settings.shortfall_policy == ShortfallPolicy.REJECT and parsed.questions:
            reason = f"Expected {parsed.requested} questions, got {len(parsed.questions)}"
            return await self._fail(state, reason, shortfall=True)

        if not self.lifecycle.on_generated(state, parsed.questions):
            await self.store.save_state(state)
            return GenerationResult(
                success=False,
                quiz_id=state.quiz_id,
                state=state,
                requested_count=parsed.requested,
                shortfall=True,
                error=state.error,
            )

        await self.store.save_state(state)
        return GenerationResult(
            success=True,
            quiz_id=state.quiz_id,
            state=state,
            questions=parsed.questions,
            requested_count=parsed.requested,
            shortfall=parsed.shortfall,
        )

    async def _fail(
        self,
        state: QuizState,
        reason: str,
        kind: CompletionErrorKind | None = None,
        shortfall: bool = False,
    ) -> GenerationResult:
        self.lifecycle.fail_generation(state, reason)
        await self.store.save_state(state)
        return GenerationResult(
            success=False,
            quiz_id=state.quiz_id,
            state=state,
            requested_count=state.configuration.total_questions,
            shortfall=shortfall,
            error=reason,
            error_kind=kind,
        )

    # =========================================================================
    # ATTEMPT
    # =========================================================================

    async def get_quiz(self, quiz_id: str) -> QuizState:
        return await self.store.require_state(quiz_id)

    async def start_quiz(self, quiz_id: str) -> QuizState:
        """Inicio explicito da tentativa (READY -> IN_PROGRESS)."""
        state = await self.store.require_state(quiz_id)
        if state.status != QuizStatus.IN_PROGRESS:
            self.lifecycle.on_first_interaction(state)
            await self.store.save_state(state)
        return state

    def _require_answerable(self, state: QuizState, question_id: int) -> Question:
        if state.status not in (QuizStatus.READY, QuizStatus.IN_PROGRESS):
            raise InvalidTransitionError(state.quiz_id, state.status.value, "submit_answer")
        question = state.get_question(question_id)
        if question is None:
            raise QuestionNotFoundError(state.quiz_id, question_id)
        return question

    async def submit_answer(self, quiz_id: str, question_id: int, user_answer: str) -> AnswerOutcome:
        """Avalia e persiste a resposta de uma questao.

        A primeira resposta move o quiz de READY para IN_PROGRESS.

        Raises:
            QuizNotFoundError: Quiz inexistente
            QuestionNotFoundError: Questao inexistente no quiz
            DuplicateAnswerError: Questao ja respondida
            InvalidTransitionError: Quiz em GENERATING ou COMPLETED
        """
        state = await self.store.require_state(quiz_id)
        question = self._require_answerable(state, question_id)

        if await self.store.get_answer(quiz_id, question_id) is not None:
            raise DuplicateAnswerError(quiz_id, question_id)

        return await self._evaluate_and_save(state, question, user_answer)

    async def _evaluate_and_save(
        self, state: QuizState, question: Question, user_answer: str
    ) -> AnswerOutcome:
        evaluation = await self.evaluator.evaluate(question, user_answer)
        is_mcq = question.question_type == QuestionType.MCQ

        answer = Answer(
            quiz_id=state.quiz_id,
            question_id=question.ordinal,
            user_answer=user_answer,
            is_correct=evaluation.is_correct,
            marks_obtained=evaluation.marks_obtained,
            similarity_score=None if is_mcq else evaluation.similarity_score,
            evaluation_method=evaluation.method,
            feedback=evaluation.feedback,
        )
        await self.store.save_answer(answer)

        if state.status == QuizStatus.READY:
            self.lifecycle.on_first_interaction(state)
            await self.store.save_state(state)

        logger.info(
            f"[Quiz {state.quiz_id}] Questao {question.ordinal}: "
            f"{'correta' if answer.is_correct else 'incorreta'} ({evaluation.method.value})"
        )
        return AnswerOutcome(question=question, answer=answer, evaluation=evaluation)

    async def evaluate_batch(
        self, quiz_id: str, submissions: list[AnswerSubmission]
    ) -> list[AnswerOutcome]:
        """Avalia varias respostas em sequencia.

        Todas as submissoes sao validadas antes da primeira avaliacao.
        Entre chamadas ao servico de completion ha uma pausa de
        `settings.batch_delay` segundos.
        """
        state = await self.store.require_state(quiz_id)

        seen: set[int] = set()
        questions = []
        for submission in submissions:
            question = self._require_answerable(state, submission.question_id)
            if submission.question_id in seen or await self.store.get_answer(quiz_id, submission.question_id):
                raise DuplicateAnswerError(quiz_id, submission.question_id)
            seen.add(submission.question_id)
            questions.append(question)

        outcomes = []
        called_completion = False
        for question, submission in zip(questions, submissions, strict=True):
            needs_completion = question.question_type != QuestionType.MCQ
            if needs_completion and called_completion and self.settings.batch_delay > 0:
                await asyncio.sleep(self.settings.batch_delay)
            outcomes.append(await self._evaluate_and_save(state, question, submission.user_answer))
            called_completion = called_completion or needs_completion

        return outcomes

    async def is_question_answered(self, quiz_id: str, question_id: int) -> Answer | None:
        """Resposta persistida da questao, se houver."""
        await self.store.require_state(quiz_id)
        return await self.store.get_answer(quiz_id, question_id)

    # =========================================================================
    # COMPLETION & RESULTS
    # =========================================================================

    async def complete_quiz(self, quiz_id: str) -> QuizState:
        """Finaliza o quiz; pontos recalculados das respostas persistidas."""
        state = await self.store.require_state(quiz_id)
        answers = await self.store.list_answers(quiz_id)
        self.lifecycle.complete(state, answers)
        await self.store.save_state(state)
        return state

    async def get_results(self, quiz_id: str) -> QuizResultsResponse:
        state = await self.store.require_state(quiz_id)
        answers = await self.store.list_answers(quiz_id)
        questions = state.ordered_questions()

        return QuizResultsResponse(
            quiz_id=state.quiz_id,
            name=state.configuration.name,
            status=state.status,
            total_questions=len(questions),
            answered_questions=len(answers),
            correct_answers=sum(1 for a in answers if a.is_correct),
            total_marks=state.total_marks,
            marks_obtained=state.marks_obtained,
            percentage=state.percentage,
            completed_at=state.completed_at,
            breakdown=self.scoring.calculate_breakdown(questions, answers),
            answers=answers,
        )

    async def get_user_stats(self) -> QuizStatsResponse:
        """Estatisticas agregadas.

        total_quizzes e total_questions_attempted contam todos os quizzes;
        media e somas de pontos consideram apenas quizzes concluidos.
        """
        states = await self.store.list_states()
        completed = [s for s in states if s.status == QuizStatus.COMPLETED]

        attempted = 0
        for state in states:
            attempted += len(await self.store.answered_question_ids(state.quiz_id))

        average = None
        if completed:
            average = round(sum(s.percentage or 0 for s in completed) / len(completed), 1)

        return QuizStatsResponse(
            total_quizzes=len(states),
            total_questions_attempted=attempted,
            average_percentage=average,
            total_marks_obtained=sum(s.marks_obtained or 0 for s in completed),
            total_possible_marks=sum(s.total_marks for s in completed),
        )

    async def get_recent_performance(self, limit: int = RECENT_LIMIT) -> list[RecentPerformance]:
        """Ultimos quizzes concluidos, mais recente primeiro."""
        completed = [
            s for s in await self.store.list_states() if s.status == QuizStatus.COMPLETED
        ]
        completed.sort(key=lambda s: s.completed_at, reverse=True)

        return [
            RecentPerformance(
                quiz_id=s.quiz_id,
                name=s.configuration.name,
                percentage=s.percentage,
                completed_at=s.completed_at,
            )
            for s in completed[:limit]
        ]

    # =========================================================================
    # LISTING
    # =========================================================================

    async def list_quizzes(self) -> list[QuizSummary]:
        """Resumo de todos os quizzes, mais recente primeiro."""
        states = await self.store.list_states()
        states.sort(key=lambda s: s.created_at, reverse=True)
        return [
            QuizSummary(
                quiz_id=s.quiz_id,
                name=s.configuration.name,
                difficulty=s.configuration.difficulty,
                status=s.status,
                total_marks=s.total_marks,
                percentage=s.percentage,
                created_at=s.created_at,
                completed_at=s.completed_at,
            )
            for s in states
        ]

    async def delete_quiz(self, quiz_id: str) -> bool:
        return await self.store.delete_quiz(quiz_id)
