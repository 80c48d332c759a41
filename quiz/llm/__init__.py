"""Quiz LLM - Clients de completion e factory."""

from .client import ChatCompletionClient, CompletionClient, CompletionError, CompletionResult
from .factory import LLMClientFactory

__all__ = [
    "ChatCompletionClient",
    "CompletionClient",
    "CompletionError",
    "CompletionResult",
    "LLMClientFactory",
]
