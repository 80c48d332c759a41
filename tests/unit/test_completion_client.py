# =============================================================================
# TESTES - Completion Client Module
# =============================================================================
# Testes unitarios para o client HTTP chat-completions (httpx.MockTransport)
# =============================================================================

import json

import httpx
import pytest


def _client(handler, api_key="hf_test"):
    from quiz.llm.client import ChatCompletionClient

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ChatCompletionClient(
        api_key=api_key,
        api_url="https://router.example.test/v1/chat/completions",
        model="test-model",
        timeout=5.0,
        http_client=http_client,
    )


def _ok(text):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})


class TestChatCompletionSuccess:
    """Testes para o caminho feliz."""

    @pytest.mark.asyncio
    async def test_returns_text(self):
        """Extrai choices[0].message.content."""
        result = await _client(lambda request: _ok("MCQ: hello")).complete("prompt")

        assert result.ok is True
        assert result.text == "MCQ: hello"
        assert result.error is None

    @pytest.mark.asyncio
    async def test_request_payload(self):
        """Uma unica mensagem user com o prompt e bearer token."""
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            captured["auth"] = request.headers["Authorization"]
            return _ok("ok")

        await _client(handler).complete("Generate questions")

        assert captured["body"] == {
            "model": "test-model",
            "messages": [{"role": "user", "content": "Generate questions"}],
            "stream": False,
        }
        assert captured["auth"] == "Bearer hf_test"


class TestChatCompletionFailures:
    """Testes para falhas tipadas (nunca excecao)."""

    @pytest.mark.asyncio
    async def test_missing_key(self):
        """Sem credencial: UNAUTHORIZED sem chamada de rede."""
        from quiz.models.enums import CompletionErrorKind

        calls = []

        def handler(request):
            calls.append(request)
            return _ok("x")

        result = await _client(handler, api_key=None).complete("prompt")

        assert result.error.kind == CompletionErrorKind.UNAUTHORIZED
        assert calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_rejected_key(self, status):
        """401/403: UNAUTHORIZED."""
        from quiz.models.enums import CompletionErrorKind

        result = await _client(lambda request: httpx.Response(status, text="denied")).complete("p")

        assert result.error.kind == CompletionErrorKind.UNAUTHORIZED
        assert result.error.status == status

    @pytest.mark.asyncio
    async def test_upstream_error(self):
        """Status >= 400: UPSTREAM_ERROR com status e corpo."""
        from quiz.models.enums import CompletionErrorKind

        result = await _client(lambda request: httpx.Response(503, text="overloaded")).complete("p")

        assert result.ok is False
        assert result.error.kind == CompletionErrorKind.UPSTREAM_ERROR
        assert result.error.status == 503
        assert result.error.body == "overloaded"
        assert "503" in result.error.describe()

    @pytest.mark.asyncio
    async def test_timeout(self):
        """Timeout de rede: TIMEOUT."""
        from quiz.models.enums import CompletionErrorKind

        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        result = await _client(handler).complete("p")

        assert result.error.kind == CompletionErrorKind.TIMEOUT

    @pytest.mark.asyncio
    async def test_unreachable(self):
        """Falha de conexao: UNREACHABLE."""
        from quiz.models.enums import CompletionErrorKind

        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = await _client(handler).complete("p")

        assert result.error.kind == CompletionErrorKind.UNREACHABLE

    @pytest.mark.asyncio
    async def test_corrupt_encoding(self):
        """Content-Encoding corrompido: UPSTREAM_ERROR, nunca excecao."""
        from quiz.models.enums import CompletionErrorKind

        def handler(request):
            raise httpx.DecodingError("bad gzip", request=request)

        result = await _client(handler).complete("p")

        assert result.ok is False
        assert result.error.kind == CompletionErrorKind.UPSTREAM_ERROR
        assert "bad gzip" in result.error.body

    @pytest.mark.asyncio
    async def test_too_many_redirects(self):
        """Qualquer RequestError vira resultado tipado."""
        from quiz.models.enums import CompletionErrorKind

        def handler(request):
            raise httpx.TooManyRedirects("loop", request=request)

        result = await _client(handler).complete("p")

        assert result.error.kind == CompletionErrorKind.UPSTREAM_ERROR

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="not json"),
            httpx.Response(200, json={"error": "model loading"}),
            httpx.Response(200, json={"choices": []}),
            httpx.Response(200, json={"choices": [{"message": {"content": None}}]}),
        ],
    )
    async def test_malformed_body(self, response):
        """Corpo inesperado: UPSTREAM_ERROR."""
        from quiz.models.enums import CompletionErrorKind

        result = await _client(lambda request: response).complete("p")

        assert result.error.kind == CompletionErrorKind.UPSTREAM_ERROR

    @pytest.mark.asyncio
    async def test_non_string_prompt_raises(self):
        """Prompt nao-str e defeito de programacao."""
        with pytest.raises(TypeError):
            await _client(lambda request: _ok("x")).complete(None)

    def test_error_body_truncated(self):
        """Corpo de erro guardado com no maximo 500 caracteres."""
        from quiz.llm.client import CompletionResult
        from quiz.models.enums import CompletionErrorKind

        result = CompletionResult.failure(CompletionErrorKind.UPSTREAM_ERROR, 500, "e" * 2000)

        assert len(result.error.body) == 500


class TestLLMClientFactory:
    """Testes para a factory de clients."""

    def test_default_is_http_client(self):
        """Provedor default cria ChatCompletionClient com as settings."""
        from quiz.config import QuizSettings
        from quiz.llm.client import ChatCompletionClient, CompletionClient
        from quiz.llm.factory import LLMClientFactory

        client = LLMClientFactory(QuizSettings(api_key="k", completion_timeout=12.0)).create_client()

        assert isinstance(client, ChatCompletionClient)
        assert isinstance(client, CompletionClient)
        assert client.api_key == "k"
        assert client.timeout == 12.0

    def test_claude_provider(self):
        """Provedor claude cria client do Claude Agent SDK."""
        from quiz.config import QuizSettings
        from quiz.llm.agent_client import ClaudeAgentCompletionClient
        from quiz.llm.factory import LLMClientFactory

        client = LLMClientFactory(QuizSettings(completion_provider="claude", claude_model="sonnet")).create_client()

        assert isinstance(client, ClaudeAgentCompletionClient)
        assert client.model == "sonnet"

    def test_unknown_provider(self):
        """Provedor desconhecido levanta ValueError."""
        from quiz.config import QuizSettings
        from quiz.llm.factory import LLMClientFactory

        with pytest.raises(ValueError):
            LLMClientFactory(QuizSettings(completion_provider="other")).create_client()
