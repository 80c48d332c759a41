# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# Centraliza mocks, fixtures e configuracoes comuns
# =============================================================================

import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

# =============================================================================
# FIXTURES DE AMBIENTE
# =============================================================================


@pytest.fixture
def clean_env():
    """Limpa variaveis de ambiente para testes isolados."""
    with patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def quiz_settings():
    """QuizSettings deterministico (sem pausa entre avaliacoes)."""
    from quiz.config import QuizSettings

    return QuizSettings(api_key="hf_test_key_123", batch_delay=0.0)


# =============================================================================
# FIXTURES DO AGENTFS
# =============================================================================


@pytest.fixture
def mock_agentfs():
    """Mock completo do AgentFS."""
    mock = MagicMock()

    # KV Store
    mock.kv = AsyncMock()
    mock.kv.get = AsyncMock(return_value=None)
    mock.kv.set = AsyncMock()
    mock.kv.delete = AsyncMock()
    mock.kv.list = AsyncMock(return_value=[])

    # Lifecycle
    mock.close = AsyncMock()

    return mock


@pytest.fixture
def mock_agentfs_with_data():
    """Mock do AgentFS com KV em memoria."""
    mock = MagicMock()
    _storage = {}

    async def mock_get(key):
        return _storage.get(key)

    async def mock_set(key, value):
        _storage[key] = value

    async def mock_delete(key):
        _storage.pop(key, None)

    async def mock_list(prefix=""):
        return [{"key": k} for k in _storage if k.startswith(prefix)]

    mock.kv = AsyncMock()
    mock.kv.get = mock_get
    mock.kv.set = mock_set
    mock.kv.delete = mock_delete
    mock.kv.list = mock_list
    mock._storage = _storage

    mock.close = AsyncMock()

    return mock


# =============================================================================
# FIXTURES DO COMPLETION CLIENT
# =============================================================================


class FakeCompletionClient:
    """CompletionClient em memoria.

    Cada chamada consome o proximo resultado; o ultimo se repete.
    Strings viram CompletionResult.success. Com `judgment`, prompts de
    similaridade recebem sempre esse resultado.
    """

    def __init__(self, *results, judgment=None):
        self.results = list(results)
        self.judgment = judgment
        self.prompts = []
        self.timeouts = []

    async def complete(self, prompt, timeout=None):
        from quiz.llm.client import CompletionResult
        from quiz.models.enums import CompletionErrorKind

        self.prompts.append(prompt)
        self.timeouts.append(timeout)

        if self.judgment is not None and "STUDENT'S ANSWER" in prompt:
            result = self.judgment
        elif not self.results:
            return CompletionResult.failure(CompletionErrorKind.UNREACHABLE)
        else:
            result = self.results.pop(0) if len(self.results) > 1 else self.results[0]

        if isinstance(result, str):
            return CompletionResult.success(result)
        return result

    @property
    def calls(self) -> int:
        return len(self.prompts)


@pytest.fixture
def fake_completion():
    """Classe FakeCompletionClient (instanciar com os resultados desejados)."""
    return FakeCompletionClient


@pytest.fixture
def failing_completion():
    """Client que sempre falha com timeout."""
    from quiz.llm.client import CompletionResult
    from quiz.models.enums import CompletionErrorKind

    return FakeCompletionClient(CompletionResult.failure(CompletionErrorKind.TIMEOUT))


# =============================================================================
# FIXTURES DE DADOS DO QUIZ
# =============================================================================


@pytest.fixture
def sample_config():
    """Configuracao com uma questao de cada tipo."""
    from quiz.models.schemas import QuizConfiguration

    return QuizConfiguration(name="Biology Basics", difficulty="easy", mcq_count=1, saq_count=1, laq_count=1)


@pytest.fixture
def generation_text():
    """Resposta de geracao valida para sample_config."""
    return """MCQ: What is 2+2?
Options: 1) 3 2) 4 3) 5 4) 6
Answer: 2
Explanation: Basic addition.

SAQ: What does photosynthesis produce?
Answer: Glucose and oxygen
Explanation: Plants convert light into chemical energy stored as glucose.

LAQ: Explain the water cycle.
Answer: Water evaporates, condenses into clouds and returns to the surface as precipitation.
Explanation: The cycle moves water continuously between the surface and the atmosphere.
"""


@pytest.fixture
def sample_questions():
    """Questoes validas (MCQ, SAQ, LAQ)."""
    from quiz.models.enums import QuestionType
    from quiz.models.schemas import Question

    return [
        Question(
            ordinal=1,
            question_type=QuestionType.MCQ,
            text="What is 2+2?",
            options={"1": "3", "2": "4", "3": "5", "4": "6"},
            reference_answer="4",
            correct_option_number=2,
            explanation="Basic addition.",
        ),
        Question(
            ordinal=2,
            question_type=QuestionType.SAQ,
            text="What does photosynthesis produce?",
            reference_answer="photosynthesis converts light energy into chemical energy",
            explanation="Plants store energy as glucose.",
        ),
        Question(
            ordinal=3,
            question_type=QuestionType.LAQ,
            text="Explain the water cycle.",
            reference_answer="water evaporates condenses into clouds and returns as precipitation",
            explanation="The cycle moves water between surface and atmosphere.",
        ),
    ]


@pytest.fixture
def sample_quiz_state(sample_config, sample_questions):
    """Quiz em READY com sample_questions."""
    from quiz.models.enums import QuizStatus
    from quiz.models.state import QuizState

    return QuizState(
        quiz_id="test-123",
        configuration=sample_config,
        document_ids=["doc-1"],
        questions={q.ordinal: q for q in sample_questions},
        status=QuizStatus.READY,
        total_marks=9,
    )


@pytest.fixture
def judgment_text():
    """Julgamento de similaridade bem formado (correto)."""
    return "Similarity Score: 92\nExplanation: Covers the key idea.\nIs Correct: YES"
