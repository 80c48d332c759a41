"""Quiz Router - Endpoints FastAPI."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

import app_state

from .engine.quiz_engine import AnswerOutcome, QuizEngine
from .models.enums import CompletionErrorKind
from .models.errors import (
    DuplicateAnswerError,
    InvalidTransitionError,
    QuestionNotFoundError,
    QuizConfigurationError,
    QuizNotFoundError,
)
from .models.schemas import (
    BatchAnswerRequest,
    GenerateQuizRequest,
    GenerateQuizResponse,
    QuestionStatusResponse,
    QuizAnswerRequest,
    QuizAnswerResponse,
    QuizResultsResponse,
    QuizStatsResponse,
    QuizSummary,
    RecentPerformance,
)
from .models.state import QuizState
from .storage.content_store import AgentFSContentStore
from .storage.quiz_store import QuizStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])

# Falhas de completion que indicam servico externo indisponivel
_UPSTREAM_KINDS = {
    CompletionErrorKind.UPSTREAM_ERROR,
    CompletionErrorKind.TIMEOUT,
    CompletionErrorKind.UNREACHABLE,
    CompletionErrorKind.UNAUTHORIZED,
}


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


async def get_quiz_engine() -> QuizEngine:
    """Dependency para obter QuizEngine configurado."""
    agentfs = await app_state.get_agentfs()
    return QuizEngine(
        store=QuizStore(agentfs),
        content_store=AgentFSContentStore(agentfs),
        completion_client=app_state.get_completion_client(),
        settings=app_state.get_settings(),
    )


def _not_found(e: QuizNotFoundError | QuestionNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


def _conflict(e: DuplicateAnswerError | InvalidTransitionError) -> HTTPException:
    return HTTPException(status_code=409, detail=str(e))


def _answer_response(outcome: AnswerOutcome) -> QuizAnswerResponse:
    return QuizAnswerResponse(
        question_id=outcome.answer.question_id,
        is_correct=outcome.answer.is_correct,
        marks_obtained=outcome.answer.marks_obtained,
        similarity_score=outcome.answer.similarity_score,
        evaluation_method=outcome.answer.evaluation_method,
        feedback=outcome.answer.feedback,
        reference_answer=outcome.question.reference_answer,
        explanation=outcome.question.explanation,
    )


def _quiz_payload(state: QuizState) -> dict:
    return {
        "quiz_id": state.quiz_id,
        "name": state.configuration.name,
        "difficulty": state.configuration.difficulty.value,
        "status": state.status.value,
        "total_marks": state.total_marks,
        "marks_obtained": state.marks_obtained,
        "percentage": state.percentage,
        "error": state.error,
        "document_ids": state.document_ids,
        "questions": [q.model_dump(mode="json") for q in state.ordered_questions()],
    }


# =============================================================================
# GENERATION
# =============================================================================


@router.post("/generate", response_model=GenerateQuizResponse)
async def generate_quiz(
    request: GenerateQuizRequest,
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Gera um quiz a partir dos documentos selecionados.

    - Concatena o texto ja extraido dos documentos (status completed)
    - Uma unica chamada ao servico de completion
    - Retorna apenas questoes validas, com indicador de shortfall
    """
    try:
        result = await engine.generate_quiz(request.configuration, request.document_ids)
    except QuizConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not result.success:
        if result.error_kind in _UPSTREAM_KINDS:
            raise HTTPException(status_code=502, detail=f"Quiz {result.quiz_id}: {result.error}")
        raise HTTPException(status_code=422, detail=f"Quiz {result.quiz_id}: {result.error}")

    logger.info(f"[Quiz {result.quiz_id}] Gerado com {len(result.questions)} questoes")

    return GenerateQuizResponse(
        quiz_id=result.quiz_id,
        status=result.state.status,
        total_marks=result.state.total_marks,
        requested_questions=result.requested_count,
        generated_questions=len(result.questions),
        shortfall=result.shortfall,
        questions=result.questions,
    )


# =============================================================================
# LISTING & STATS
# =============================================================================


@router.get("/list", response_model=list[QuizSummary])
async def list_quizzes(engine: QuizEngine = Depends(get_quiz_engine)):
    """Lista todos os quizzes (mais recente primeiro)."""
    return await engine.list_quizzes()


@router.get("/stats", response_model=QuizStatsResponse)
async def get_stats(engine: QuizEngine = Depends(get_quiz_engine)):
    """Estatisticas agregadas dos quizzes."""
    return await engine.get_user_stats()


@router.get("/recent", response_model=list[RecentPerformance])
async def get_recent(engine: QuizEngine = Depends(get_quiz_engine)):
    """Desempenho dos ultimos 3 quizzes concluidos."""
    return await engine.get_recent_performance()


# =============================================================================
# ANSWERS
# =============================================================================


@router.post("/answer", response_model=QuizAnswerResponse)
async def submit_answer(
    request: QuizAnswerRequest,
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Avalia e persiste uma resposta.

    - MCQ: comparacao do numero da opcao
    - SAQ/LAQ: julgamento de similaridade (fallback lexical se indisponivel)
    - Uma resposta por questao; re-submissao retorna 409
    """
    try:
        outcome = await engine.submit_answer(request.quiz_id, request.question_id, request.user_answer)
    except (QuizNotFoundError, QuestionNotFoundError) as e:
        raise _not_found(e)
    except (DuplicateAnswerError, InvalidTransitionError) as e:
        raise _conflict(e)

    return _answer_response(outcome)


@router.post("/answers/batch", response_model=list[QuizAnswerResponse])
async def submit_batch(
    request: BatchAnswerRequest,
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Avalia varias respostas do mesmo quiz em sequencia."""
    try:
        outcomes = await engine.evaluate_batch(request.quiz_id, request.answers)
    except (QuizNotFoundError, QuestionNotFoundError) as e:
        raise _not_found(e)
    except (DuplicateAnswerError, InvalidTransitionError) as e:
        raise _conflict(e)

    return [_answer_response(o) for o in outcomes]


# =============================================================================
# QUIZ
# =============================================================================


@router.get("/{quiz_id}")
async def get_quiz(quiz_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    """Retorna quiz com questoes e status."""
    try:
        state = await engine.get_quiz(quiz_id)
    except QuizNotFoundError as e:
        raise _not_found(e)
    return _quiz_payload(state)


@router.post("/{quiz_id}/start")
async def start_quiz(quiz_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    """Inicio explicito da tentativa (READY -> IN_PROGRESS)."""
    try:
        state = await engine.start_quiz(quiz_id)
    except QuizNotFoundError as e:
        raise _not_found(e)
    except InvalidTransitionError as e:
        raise _conflict(e)
    return {"quiz_id": state.quiz_id, "status": state.status.value}


@router.get("/{quiz_id}/answers/{question_id}", response_model=QuestionStatusResponse)
async def get_answer_status(
    quiz_id: str,
    question_id: int,
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Verifica se a questao ja foi respondida."""
    try:
        answer = await engine.is_question_answered(quiz_id, question_id)
    except QuizNotFoundError as e:
        raise _not_found(e)
    return QuestionStatusResponse(
        quiz_id=quiz_id,
        question_id=question_id,
        answered=answer is not None,
        answer=answer,
    )


@router.post("/{quiz_id}/complete", response_model=QuizResultsResponse)
async def complete_quiz(quiz_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    """Finaliza o quiz e congela pontuacao e percentual."""
    try:
        await engine.complete_quiz(quiz_id)
    except QuizNotFoundError as e:
        raise _not_found(e)
    except InvalidTransitionError as e:
        raise _conflict(e)
    return await engine.get_results(quiz_id)


@router.get("/{quiz_id}/results", response_model=QuizResultsResponse)
async def get_results(quiz_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    """Resultado com respostas e analise por tipo de questao."""
    try:
        return await engine.get_results(quiz_id)
    except QuizNotFoundError as e:
        raise _not_found(e)


@router.delete("/{quiz_id}")
async def delete_quiz(quiz_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    """Remove quiz e respostas."""
    if not await engine.delete_quiz(quiz_id):
        raise HTTPException(status_code=404, detail=f"Quiz {quiz_id} nao encontrado")
    return {"quiz_id": quiz_id, "deleted": True}
