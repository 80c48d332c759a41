"""Quiz Enums - Tipos de questao, dificuldade e status."""

from enum import Enum


class QuizDifficulty(str, Enum):
    """Niveis de dificuldade do quiz."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuestionType(str, Enum):
    """Tipos de questao suportados."""

    MCQ = "mcq"  # Multipla escolha - 1 ponto
    SAQ = "saq"  # Resposta curta - 3 pontos
    LAQ = "laq"  # Resposta longa - 5 pontos

    @property
    def marker(self) -> str:
        """Marcador de linha usado na gramatica de geracao (ex: "MCQ:")."""
        return f"{self.name}:"


class QuizStatus(str, Enum):
    """Estados do ciclo de vida de um quiz (ordem linear)."""

    GENERATING = "generating"
    READY = "ready"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class CompletionErrorKind(str, Enum):
    """Motivos de falha de uma chamada ao servico de completion."""

    UNAUTHORIZED = "unauthorized"
    UPSTREAM_ERROR = "upstream_error"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"


class EvaluationMethod(str, Enum):
    """Estrategia que produziu o veredito de uma resposta."""

    EXACT = "exact"  # MCQ - comparacao do numero da opcao
    COMPLETION = "completion"  # Julgamento do servico de completion
    LEXICAL = "lexical"  # Fallback por sobreposicao de tokens


class ShortfallPolicy(str, Enum):
    """Politica quando o parser retorna menos questoes que o pedido."""

    ACCEPT = "accept"  # Aceita o subconjunto valido
    REJECT = "reject"  # Falha a geracao inteira
