"""Core module - shared state and helper functions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from quiz.config import QuizSettings
from quiz.llm.client import CompletionClient
from quiz.llm.factory import LLMClientFactory

if TYPE_CHECKING:
    from agentfs_sdk import AgentFS

logger = logging.getLogger(__name__)

# =============================================================================
# GLOBAL INSTANCES
# =============================================================================

settings: Optional[QuizSettings] = None
agentfs: Optional[AgentFS] = None
completion_client: Optional[CompletionClient] = None


def get_settings() -> QuizSettings:
    """Get QuizSettings (loaded once from environment / .env)."""
    global settings
    if settings is None:
        settings = QuizSettings.from_env()
    return settings


async def get_agentfs() -> AgentFS:
    """Get AgentFS instance (opened lazily)."""
    global agentfs
    if agentfs is None:
        from agentfs_sdk import AgentFS, AgentFSOptions

        agentfs_id = get_settings().agentfs_id
        agentfs = await AgentFS.open(AgentFSOptions(id=agentfs_id))
        logger.info(f"AgentFS aberto: {agentfs_id}")
    return agentfs


def get_completion_client() -> CompletionClient:
    """Get CompletionClient for the configured provider."""
    global completion_client
    if completion_client is None:
        current = get_settings()
        completion_client = LLMClientFactory(current).create_client()
        logger.info(f"Completion provider: {current.completion_provider}")
    return completion_client


async def cleanup():
    """Cleanup resources on shutdown."""
    global agentfs, completion_client
    completion_client = None
    if agentfs is not None:
        try:
            await agentfs.close()
            logger.info("AgentFS closed")
        except Exception as e:
            logger.warning(f"Error closing agentfs: {e}")
        agentfs = None
