"""Completion Client - Chamada unica ao servico de completion.

Contrato:
    - Uma tentativa por chamada, sem retry
    - Limitada por timeout (do chamador ou default do client)
    - Falhas do servico viram CompletionResult com erro, nunca excecao
    - Apenas erros de programacao (prompt nao-str) levantam excecao
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from ..models.enums import CompletionErrorKind

logger = logging.getLogger(__name__)

# Tamanho maximo do corpo de erro guardado no resultado
MAX_ERROR_BODY = 500


@dataclass(frozen=True)
class CompletionError:
    """Motivo da falha de uma chamada de completion."""

    kind: CompletionErrorKind
    status: int | None = None
    body: str = ""

    def describe(self) -> str:
        if self.kind == CompletionErrorKind.UPSTREAM_ERROR:
            return f"Completion service error {self.status}: {self.body}".strip()
        if self.kind == CompletionErrorKind.UNAUTHORIZED:
            return "Completion service credential missing or rejected"
        if self.kind == CompletionErrorKind.TIMEOUT:
            return "Completion service timed out"
        return "Completion service unreachable"


@dataclass(frozen=True)
class CompletionResult:
    """Resultado tipado: `text` quando ok, `error` quando falhou."""

    text: str | None = None
    error: CompletionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> CompletionResult:
        return cls(text=text)

    @classmethod
    def failure(
        cls, kind: CompletionErrorKind, status: int | None = None, body: str = ""
    ) -> CompletionResult:
        return cls(error=CompletionError(kind=kind, status=status, body=body[:MAX_ERROR_BODY]))


@runtime_checkable
class CompletionClient(Protocol):
    """Interface de qualquer client de completion usado pelo quiz."""

    async def complete(self, prompt: str, timeout: float | None = None) -> CompletionResult:
        ...


def _check_prompt(prompt: object) -> str:
    if not isinstance(prompt, str):
        raise TypeError(f"prompt deve ser str, recebido {type(prompt).__name__}")
    return prompt


class ChatCompletionClient:
    """Client HTTP para endpoint chat-completions compativel com OpenAI.

    Envia uma unica mensagem `user` com o prompt renderizado.

    Example:
        >>> client = ChatCompletionClient(api_key="hf_...")
        >>> result = await client.complete("Generate...")
        >>> if result.ok:
        ...     print(result.text)
    """

    DEFAULT_TIMEOUT = 60.0

    def __init__(
        self,
        api_key: str | None,
        api_url: str,
        model: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Inicializa client.

        Args:
            api_key: Bearer token do servico (None -> UNAUTHORIZED em toda chamada)
            api_url: URL do endpoint chat-completions
            model: Modelo a usar
            timeout: Timeout default (s) por chamada
            http_client: AsyncClient compartilhado (opcional, usado em testes)
        """
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self._http_client = http_client

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
        }

    async def _post(self, client: httpx.AsyncClient, prompt: str, timeout: float) -> httpx.Response:
        return await client.post(
            self.api_url,
            json=self._payload(prompt),
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
        )

    async def complete(self, prompt: str, timeout: float | None = None) -> CompletionResult:
        """Executa uma chamada de completion.

        Args:
            prompt: Prompt renderizado
            timeout: Timeout (s) desta chamada; default do client se None

        Returns:
            CompletionResult com texto ou motivo da falha
        """
        _check_prompt(prompt)

        if not self.api_key:
            logger.error("Completion API key nao configurada (HF_API_KEY)")
            return CompletionResult.failure(CompletionErrorKind.UNAUTHORIZED)

        effective_timeout = timeout if timeout is not None else self.timeout

        try:
            if self._http_client is not None:
                response = await self._post(self._http_client, prompt, effective_timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, prompt, effective_timeout)
        except httpx.TimeoutException:
            logger.warning(f"Completion timeout apos {effective_timeout}s")
            return CompletionResult.failure(CompletionErrorKind.TIMEOUT)
        except httpx.TransportError as e:
            logger.warning(f"Completion service inacessivel: {e}")
            return CompletionResult.failure(CompletionErrorKind.UNREACHABLE, body=str(e))
        except httpx.RequestError as e:
            # DecodingError, TooManyRedirects: o servico respondeu algo inutilizavel
            logger.warning(f"Resposta invalida do completion service: {e}")
            return CompletionResult.failure(CompletionErrorKind.UPSTREAM_ERROR, body=str(e))

        if response.status_code in (401, 403):
            return CompletionResult.failure(
                CompletionErrorKind.UNAUTHORIZED, status=response.status_code, body=response.text
            )
        if response.status_code >= 400:
            logger.warning(f"Completion service retornou {response.status_code}")
            return CompletionResult.failure(
                CompletionErrorKind.UPSTREAM_ERROR, status=response.status_code, body=response.text
            )

        return self._extract_text(response)

    def _extract_text(self, response: httpx.Response) -> CompletionResult:
        """Extrai choices[0].message.content da resposta."""
        try:
            data = response.json()
        except ValueError:
            return CompletionResult.failure(
                CompletionErrorKind.UPSTREAM_ERROR, status=response.status_code, body=response.text
            )

        if isinstance(data, dict) and data.get("error"):
            return CompletionResult.failure(
                CompletionErrorKind.UPSTREAM_ERROR,
                status=response.status_code,
                body=str(data["error"]),
            )

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return CompletionResult.failure(
                CompletionErrorKind.UPSTREAM_ERROR, status=response.status_code, body=response.text
            )

        if not isinstance(text, str):
            return CompletionResult.failure(
                CompletionErrorKind.UPSTREAM_ERROR, status=response.status_code, body=response.text
            )

        logger.debug(f"Completion ok ({len(text)} chars)")
        return CompletionResult.success(text)
