"""Claude Agent Client - Completion via `query` do Claude Agent SDK."""

import asyncio
import logging

from claude_agent_sdk import ClaudeAgentOptions, ClaudeSDKError, CLIConnectionError, ProcessError
from claude_agent_sdk import query as sdk_query

from ..models.enums import CompletionErrorKind
from .client import CompletionResult, _check_prompt

logger = logging.getLogger(__name__)

QUIZ_SYSTEM_PROMPT = (
    "You are a quiz generation and grading assistant. "
    "Follow the requested output format exactly, with no additional text."
)


class ClaudeAgentCompletionClient:
    """Client de completion sobre o Claude Agent SDK.

    Cada chamada abre uma consulta nova (sem contexto multi-turn) e
    concatena o texto dos blocos retornados.

    Example:
        >>> client = ClaudeAgentCompletionClient(model="haiku")
        >>> result = await client.complete("Generate...")
    """

    DEFAULT_TIMEOUT = 120.0

    def __init__(
        self,
        model: str = "haiku",
        system_prompt: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.model = model
        self.system_prompt = system_prompt or QUIZ_SYSTEM_PROMPT
        self.timeout = timeout

    def _options(self) -> ClaudeAgentOptions:
        return ClaudeAgentOptions(
            model=self.model,
            system_prompt=self.system_prompt,
            max_turns=1,
        )

    async def _collect(self, prompt: str) -> str:
        text = ""
        async for message in sdk_query(prompt=prompt, options=self._options()):
            if hasattr(message, "content") and isinstance(message.content, list):
                for block in message.content:
                    if hasattr(block, "text"):
                        text += block.text
        return text

    async def complete(self, prompt: str, timeout: float | None = None) -> CompletionResult:
        """Executa uma consulta e retorna o texto agregado."""
        _check_prompt(prompt)
        effective_timeout = timeout if timeout is not None else self.timeout

        try:
            text = await asyncio.wait_for(self._collect(prompt), timeout=effective_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Claude Agent SDK timeout apos {effective_timeout}s")
            return CompletionResult.failure(CompletionErrorKind.TIMEOUT)
        except CLIConnectionError as e:
            logger.warning(f"Claude CLI indisponivel: {e}")
            return CompletionResult.failure(CompletionErrorKind.UNREACHABLE, body=str(e))
        except ProcessError as e:
            return CompletionResult.failure(
                CompletionErrorKind.UPSTREAM_ERROR,
                status=getattr(e, "exit_code", None),
                body=getattr(e, "stderr", None) or str(e),
            )
        except ClaudeSDKError as e:
            return CompletionResult.failure(CompletionErrorKind.UPSTREAM_ERROR, body=str(e))

        if not text.strip():
            return CompletionResult.failure(CompletionErrorKind.UPSTREAM_ERROR, body="empty response")

        return CompletionResult.success(text)
