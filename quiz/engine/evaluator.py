"""Answer Evaluator - Correcao de respostas com fallback lexical."""

import logging
import re
from dataclasses import dataclass

from ..llm.client import CompletionClient
from ..models.enums import EvaluationMethod, QuestionType
from ..models.schemas import Evaluation, Question
from ..prompts.builder import build_similarity_prompt
from .scoring_engine import round_half_up

logger = logging.getLogger(__name__)

DEFAULT_SAQ_THRESHOLD = 90
DEFAULT_LAQ_THRESHOLD = 75

# Linhas da gramatica do julgamento; texto livre da explicacao nao conta
SCORE_PATTERN = re.compile(
    r"^\s*\**\s*similarity\s+score\s*\**\s*[:=]?\s*\**\s*(\d{1,3})", re.IGNORECASE | re.MULTILINE
)
VERDICT_PATTERN = re.compile(
    r"^\s*\**\s*is\s+correct\s*\**\s*[:=]?\s*\**\s*(yes|no)\b", re.IGNORECASE | re.MULTILINE
)
EXPLANATION_PATTERN = re.compile(r"^\s*explanation\s*:\s*(.+)$", re.IGNORECASE | re.MULTILINE)
OPTION_NUMBER_PATTERN = re.compile(r"^(\d+)")

# Tokens com ate este tamanho sao ignorados no fallback
MIN_TOKEN_LENGTH = 2


@dataclass(frozen=True)
class Judgment:
    """Julgamento extraido da resposta do servico de completion."""

    score: int
    is_correct: bool
    explanation: str = ""


def parse_judgment(text: str, threshold: int) -> Judgment | None:
    """Extrai score e veredito de uma resposta de similaridade.

    Args:
        text: Resposta do servico
        threshold: Limite usado quando so o score estiver presente

    Returns:
        Judgment, ou None se nem score nem veredito forem encontrados
    """
    score_match = SCORE_PATTERN.search(text)
    verdict_match = VERDICT_PATTERN.search(text)

    if score_match is None and verdict_match is None:
        return None

    explanation_match = EXPLANATION_PATTERN.search(text)
    explanation = explanation_match.group(1).strip() if explanation_match else ""

    verdict = None
    if verdict_match is not None:
        verdict = verdict_match.group(1).lower() == "yes"

    if score_match is not None:
        score = max(0, min(100, int(score_match.group(1))))
        if verdict is None:
            verdict = score >= threshold
    else:
        score = 100 if verdict else 0

    return Judgment(score=score, is_correct=verdict, explanation=explanation)


def _tokens(text: str) -> list[str]:
    return [token for token in text.lower().split() if len(token) > MIN_TOKEN_LENGTH]


def lexical_overlap_score(user_answer: str, reference_answer: str) -> int:
    """Score 0-100 por sobreposicao de tokens.

    Conta tokens da resposta do usuario presentes na referencia e divide
    pelo maior numero de tokens entre as duas. Sem tokens -> 0.
    """
    user_tokens = _tokens(user_answer or "")
    reference_tokens = _tokens(reference_answer or "")

    denominator = max(len(user_tokens), len(reference_tokens))
    if denominator == 0:
        return 0

    reference_set = set(reference_tokens)
    matches = sum(1 for token in user_tokens if token in reference_set)
    return max(0, min(100, round_half_up(matches / denominator * 100)))


class AnswerEvaluator:
    """Avaliador de respostas por tipo de questao.

    - MCQ: comparacao exata do numero da opcao (sem chamadas externas)
    - SAQ/LAQ: julgamento do servico de completion, com fallback lexical
      em qualquer falha (erro do servico ou julgamento malformado)

    O avaliador nao guarda estado entre chamadas e nunca propaga falhas
    do servico de completion.

    Example:
        >>> evaluator = AnswerEvaluator(client)
        >>> evaluation = await evaluator.evaluate(question, "2")
        >>> evaluation.is_correct
        True
    """

    def __init__(
        self,
        client: CompletionClient,
        saq_threshold: int = DEFAULT_SAQ_THRESHOLD,
        laq_threshold: int = DEFAULT_LAQ_THRESHOLD,
        timeout: float | None = None,
    ):
        self.client = client
        self.saq_threshold = saq_threshold
        self.laq_threshold = laq_threshold
        self.timeout = timeout

    def threshold_for(self, question_type: QuestionType) -> int:
        """Limite de similaridade (%) para o tipo de questao."""
        if question_type == QuestionType.SAQ:
            return self.saq_threshold
        if question_type == QuestionType.LAQ:
            return self.laq_threshold
        raise ValueError(f"Tipo sem avaliacao por similaridade: {question_type}")

    async def evaluate(self, question: Question, user_answer: str) -> Evaluation:
        """Avalia uma resposta.

        Args:
            question: Questao respondida
            user_answer: Texto da resposta (numero da opcao para MCQ)

        Returns:
            Evaluation com veredito, pontos e score de similaridade

        Raises:
            TypeError: Se user_answer nao for str
        """
        if not isinstance(user_answer, str):
            raise TypeError("user_answer deve ser str")

        if question.question_type == QuestionType.MCQ:
            return self.evaluate_mcq(question, user_answer)

        return await self._evaluate_similarity(question, user_answer)

    def evaluate_mcq(self, question: Question, user_answer: str) -> Evaluation:
        match = OPTION_NUMBER_PATTERN.match(user_answer.strip())
        selected = int(match.group(1)) if match else None
        is_correct = selected is not None and selected == question.correct_option_number

        if is_correct:
            feedback = question.explanation
        else:
            feedback = f"A resposta correta era a opcao {question.correct_option_number}."

        return Evaluation(
            is_correct=is_correct,
            marks_obtained=question.marks if is_correct else 0,
            similarity_score=100 if is_correct else 0,
            method=EvaluationMethod.EXACT,
            feedback=feedback,
        )

    async def _evaluate_similarity(self, question: Question, user_answer: str) -> Evaluation:
        threshold = self.threshold_for(question.question_type)
        prompt = build_similarity_prompt(
            user_answer=user_answer,
            reference_answer=question.reference_answer,
            question=question.text,
            threshold_percent=threshold,
        )

        result = await self.client.complete(prompt, timeout=self.timeout)

        if result.ok:
            judgment = parse_judgment(result.text, threshold)
            if judgment is not None:
                return Evaluation(
                    is_correct=judgment.is_correct,
                    marks_obtained=question.marks if judgment.is_correct else 0,
                    similarity_score=judgment.score,
                    method=EvaluationMethod.COMPLETION,
                    feedback=judgment.explanation,
                )
            logger.warning(f"Julgamento malformado para questao {question.ordinal}, usando fallback")
        else:
            logger.warning(
                f"Completion indisponivel na avaliacao da questao {question.ordinal}: "
                f"{result.error.describe()}"
            )

        return self.evaluate_lexical(question, user_answer, threshold)

    def evaluate_lexical(self, question: Question, user_answer: str, threshold: int) -> Evaluation:
        score = lexical_overlap_score(user_answer, question.reference_answer)
        is_correct = score >= threshold
        return Evaluation(
            is_correct=is_correct,
            marks_obtained=question.marks if is_correct else 0,
            similarity_score=score,
            method=EvaluationMethod.LEXICAL,
            feedback=f"Avaliacao por sobreposicao de palavras ({score}% de similaridade).",
        )
