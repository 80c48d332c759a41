"""Prompt Builder - Renderizacao dos prompts de geracao e avaliacao.

Funcoes puras e deterministicas: mesma entrada, mesmo prompt.
"""

from ..models.schemas import QuizConfiguration
from .templates import (
    MAX_CONTENT_LENGTH,
    OUTPUT_GRAMMAR,
    QUIZ_GENERATION_PROMPT,
    SIMILARITY_PROMPT,
    TRUNCATION_MARKER,
)


def _require_str(name: str, value: object) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} deve ser str, recebido {type(value).__name__}")
    return value


def truncate_content(content: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    """Corta o conteudo pelo numero de caracteres, anexando "..." se cortado."""
    _require_str("content", content)
    if max_length < 1:
        raise ValueError("max_length deve ser >= 1")
    if len(content) > max_length:
        return content[:max_length] + TRUNCATION_MARKER
    return content


def build_generation_prompt(
    content: str,
    config: QuizConfiguration,
    max_content_length: int = MAX_CONTENT_LENGTH,
) -> str:
    """Renderiza o prompt de geracao de questoes.

    Args:
        content: Texto de origem (concatenado dos documentos)
        config: Configuracao do quiz (contagens por tipo e dificuldade)
        max_content_length: Limite de caracteres do conteudo

    Returns:
        Prompt com a gramatica de saida e as contagens pedidas
    """
    if not isinstance(config, QuizConfiguration):
        raise TypeError("config deve ser QuizConfiguration")

    return QUIZ_GENERATION_PROMPT.format(
        content=truncate_content(content, max_content_length),
        difficulty=config.difficulty.value,
        mcq_count=config.mcq_count,
        saq_count=config.saq_count,
        laq_count=config.laq_count,
        grammar=OUTPUT_GRAMMAR,
    )


def build_similarity_prompt(
    user_answer: str,
    reference_answer: str,
    question: str,
    threshold_percent: int,
) -> str:
    """Renderiza o prompt de julgamento de similaridade.

    O threshold entra no texto do prompt, permitindo politicas diferentes
    por tipo de questao (SAQ=90, LAQ=75) sem alterar o template.
    """
    _require_str("user_answer", user_answer)
    _require_str("reference_answer", reference_answer)
    _require_str("question", question)
    if isinstance(threshold_percent, bool) or not isinstance(threshold_percent, int):
        raise TypeError("threshold_percent deve ser int")
    if not 0 <= threshold_percent <= 100:
        raise ValueError("threshold_percent deve estar entre 0 e 100")

    return SIMILARITY_PROMPT.format(
        question=question,
        reference_answer=reference_answer,
        user_answer=user_answer,
        threshold=threshold_percent,
    )
