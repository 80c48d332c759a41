"""LLM Client Factory - Criacao do CompletionClient a partir da configuracao."""

import httpx

from ..config import QuizSettings
from .client import ChatCompletionClient, CompletionClient


class LLMClientFactory:
    """Factory para criar CompletionClient com diferentes provedores.

    Centraliza a criacao dos clients usados pelo quiz, permitindo:
    - Configuracao consistente de timeout e credenciais
    - Selecao do provedor (endpoint HTTP ou Claude Agent SDK)

    Example:
        >>> factory = LLMClientFactory(QuizSettings.from_env())
        >>> client = factory.create_client()
        >>> result = await client.complete("Generate...")
    """

    HUGGINGFACE = "huggingface"
    CLAUDE = "claude"

    def __init__(self, settings: QuizSettings | None = None):
        self.settings = settings or QuizSettings()

    def create_http_client(self, http_client: httpx.AsyncClient | None = None) -> ChatCompletionClient:
        """Cria client HTTP chat-completions (router Hugging Face por default)."""
        return ChatCompletionClient(
            api_key=self.settings.api_key,
            api_url=self.settings.completion_url,
            model=self.settings.completion_model,
            timeout=self.settings.completion_timeout,
            http_client=http_client,
        )

    def create_claude_client(self) -> CompletionClient:
        """Cria client sobre o Claude Agent SDK."""
        from .agent_client import ClaudeAgentCompletionClient

        return ClaudeAgentCompletionClient(
            model=self.settings.claude_model,
            timeout=self.settings.completion_timeout,
        )

    def create_client(self) -> CompletionClient:
        """Cria o client do provedor configurado.

        Raises:
            ValueError: Se o provedor configurado nao for suportado
        """
        provider = self.settings.completion_provider
        if provider == self.HUGGINGFACE:
            return self.create_http_client()
        if provider == self.CLAUDE:
            return self.create_claude_client()
        raise ValueError(f"Provedor de completion desconhecido: {provider}")
