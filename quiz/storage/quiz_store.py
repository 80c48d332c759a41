"""Quiz Store - Abstracao sobre AgentFS para persistencia de quiz."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agentfs_sdk import AgentFS

from ..models.errors import DuplicateAnswerError, QuizNotFoundError
from ..models.schemas import Answer
from ..models.state import QuizState

logger = logging.getLogger(__name__)


class QuizStore:
    """Abstracao sobre AgentFS para persistencia de quiz.

    Gerencia o armazenamento de quizzes e respostas no KV store do AgentFS.
    A existencia da chave de resposta e o ponto de unicidade do par
    (quiz_id, question_id).

    Estrutura de chaves:
        - quiz:{quiz_id}:state -> Estado completo do quiz (QuizState)
        - quiz:{quiz_id}:answers:{question_id} -> Resposta persistida (Answer)

    Example:
        >>> store = QuizStore(agentfs)
        >>> await store.save_state(state)
        >>> loaded = await store.load_state(state.quiz_id)
    """

    KEY_PREFIX = "quiz"

    def __init__(self, agentfs: AgentFS):
        """Inicializa store com instancia do AgentFS.

        Args:
            agentfs: Instancia configurada do AgentFS
        """
        self.agentfs = agentfs

    def _state_key(self, quiz_id: str) -> str:
        return f"{self.KEY_PREFIX}:{quiz_id}:state"

    def _answers_prefix(self, quiz_id: str) -> str:
        return f"{self.KEY_PREFIX}:{quiz_id}:answers:"

    def _answer_key(self, quiz_id: str, question_id: int) -> str:
        return f"{self._answers_prefix(quiz_id)}{question_id}"

    @staticmethod
    def _entry_key(entry) -> str:
        return entry.get("key", "") if isinstance(entry, dict) else str(entry)

    # =========================================================================
    # QUIZ
    # =========================================================================

    async def save_state(self, state: QuizState) -> None:
        """Persiste estado completo no KV store."""
        await self.agentfs.kv.set(self._state_key(state.quiz_id), state.to_dict())
        logger.debug(f"Quiz state salvo: {state.quiz_id} ({state.status.value})")

    async def load_state(self, quiz_id: str) -> QuizState | None:
        """Carrega estado do KV store.

        Returns:
            QuizState se encontrado, None caso contrario
        """
        data = await self.agentfs.kv.get(self._state_key(quiz_id))
        if not data:
            logger.debug(f"Quiz nao encontrado: {quiz_id}")
            return None
        return QuizState.from_dict(data)

    async def require_state(self, quiz_id: str) -> QuizState:
        """Carrega estado ou levanta QuizNotFoundError."""
        state = await self.load_state(quiz_id)
        if state is None:
            raise QuizNotFoundError(quiz_id)
        return state

    async def list_quizzes(self) -> list[str]:
        """Lista todos os quiz IDs armazenados."""
        entries = await self.agentfs.kv.list(prefix=f"{self.KEY_PREFIX}:")

        quiz_ids = set()
        for entry in entries:
            parts = self._entry_key(entry).split(":")
            if len(parts) >= 3 and parts[2] == "state":
                quiz_ids.add(parts[1])

        return sorted(quiz_ids)

    async def list_states(self) -> list[QuizState]:
        """Carrega o estado de todos os quizzes armazenados."""
        states = []
        for quiz_id in await self.list_quizzes():
            state = await self.load_state(quiz_id)
            if state is not None:
                states.append(state)
        return states

    async def delete_quiz(self, quiz_id: str) -> bool:
        """Remove quiz e respostas do store.

        Returns:
            True se o quiz existia
        """
        existed = await self.agentfs.kv.get(self._state_key(quiz_id)) is not None

        for entry in await self.agentfs.kv.list(prefix=self._answers_prefix(quiz_id)):
            await self.agentfs.kv.delete(self._entry_key(entry))
        await self.agentfs.kv.delete(self._state_key(quiz_id))

        logger.info(f"Quiz deletado: {quiz_id}")
        return existed

    # =========================================================================
    # ANSWERS
    # =========================================================================

    async def save_answer(self, answer: Answer) -> None:
        """Persiste resposta; no maximo uma por (quiz_id, question_id).

        Raises:
            DuplicateAnswerError: Se ja existir resposta para a questao
        """
        key = self._answer_key(answer.quiz_id, answer.question_id)
        if await self.agentfs.kv.get(key) is not None:
            raise DuplicateAnswerError(answer.quiz_id, answer.question_id)

        await self.agentfs.kv.set(key, answer.model_dump(mode="json"))
        logger.debug(f"Resposta salva: {answer.quiz_id} questao {answer.question_id}")

    async def get_answer(self, quiz_id: str, question_id: int) -> Answer | None:
        data = await self.agentfs.kv.get(self._answer_key(quiz_id, question_id))
        if not data:
            return None
        return Answer.model_validate(data)

    async def list_answers(self, quiz_id: str) -> list[Answer]:
        """Todas as respostas persistidas do quiz, ordenadas por questao."""
        answers = []
        for entry in await self.agentfs.kv.list(prefix=self._answers_prefix(quiz_id)):
            data = await self.agentfs.kv.get(self._entry_key(entry))
            if data:
                answers.append(Answer.model_validate(data))
        return sorted(answers, key=lambda a: a.question_id)

    async def answered_question_ids(self, quiz_id: str) -> list[int]:
        return [a.question_id for a in await self.list_answers(quiz_id)]
