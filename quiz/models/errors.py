"""Quiz Errors - Excecoes do dominio de quiz.

Falhas externas (servico de completion, parse) viram resultados tipados;
estas excecoes cobrem entradas invalidas e transicoes ilegais.
"""


class QuizError(Exception):
    """Erro base do modulo de quiz."""


class QuizConfigurationError(QuizError, ValueError):
    """Configuracao de quiz invalida (rejeitada antes de qualquer chamada externa)."""


class InvalidTransitionError(QuizError):
    """Transicao de estado nao permitida no ciclo de vida do quiz."""

    def __init__(self, quiz_id: str, current: str, action: str):
        self.quiz_id = quiz_id
        self.current = current
        self.action = action
        super().__init__(f"Quiz {quiz_id}: '{action}' nao permitido no estado '{current}'")


class QuizNotFoundError(QuizError, LookupError):
    """Quiz inexistente no store."""

    def __init__(self, quiz_id: str):
        self.quiz_id = quiz_id
        super().__init__(f"Quiz {quiz_id} nao encontrado")


class QuestionNotFoundError(QuizError, LookupError):
    """Questao inexistente no quiz."""

    def __init__(self, quiz_id: str, question_id: int):
        self.quiz_id = quiz_id
        self.question_id = question_id
        super().__init__(f"Questao {question_id} nao encontrada no quiz {quiz_id}")


class DuplicateAnswerError(QuizError):
    """Ja existe resposta para o par (quiz_id, question_id)."""

    def __init__(self, quiz_id: str, question_id: int):
        self.quiz_id = quiz_id
        self.question_id = question_id
        super().__init__(f"Questao {question_id} do quiz {quiz_id} ja foi respondida")
