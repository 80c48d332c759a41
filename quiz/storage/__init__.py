"""Quiz Storage - Persistencia via AgentFS."""

from .content_store import AgentFSContentStore, ContentStore
from .quiz_store import QuizStore

__all__ = ["QuizStore", "ContentStore", "AgentFSContentStore"]
