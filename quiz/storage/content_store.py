"""Content Store - Texto extraido dos documentos de origem."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from agentfs_sdk import AgentFS

logger = logging.getLogger(__name__)

COMPLETED_STATUS = "completed"
CONTENT_HEADER = "--- Content from {file_name} ---"


@runtime_checkable
class ContentStore(Protocol):
    """Fonte do texto ja extraido dos documentos."""

    async def get_completed_text(self, document_ids: list[str]) -> str:
        ...


def join_documents(documents: list[dict]) -> str:
    """Concatena documentos com cabecalho por arquivo.

    Apenas documentos com status "completed" e texto nao vazio entram.
    """
    sections = []
    for document in documents:
        if document.get("status") != COMPLETED_STATUS:
            continue
        text = (document.get("extracted_text") or "").strip()
        if not text:
            continue
        file_name = document.get("file_name") or document.get("document_id", "document")
        sections.append(f"{CONTENT_HEADER.format(file_name=file_name)}\n{text}")
    return "\n\n".join(sections)


class AgentFSContentStore:
    """Content store sobre o KV do AgentFS.

    Estrutura de chaves:
        - content:{document_id} -> {file_name, extracted_text, status}

    Example:
        >>> store = AgentFSContentStore(agentfs)
        >>> await store.save_document("doc-1", "notes.pdf", "Photosynthesis...")
        >>> text = await store.get_completed_text(["doc-1"])
    """

    KEY_PREFIX = "content"

    def __init__(self, agentfs: AgentFS):
        self.agentfs = agentfs

    def _key(self, document_id: str) -> str:
        return f"{self.KEY_PREFIX}:{document_id}"

    async def save_document(
        self,
        document_id: str,
        file_name: str,
        extracted_text: str,
        status: str = COMPLETED_STATUS,
    ) -> None:
        """Registra texto extraido de um documento."""
        await self.agentfs.kv.set(
            self._key(document_id),
            {
                "document_id": document_id,
                "file_name": file_name,
                "extracted_text": extracted_text,
                "status": status,
            },
        )

    async def get_completed_text(self, document_ids: list[str]) -> str:
        """Texto concatenado dos documentos com status completed (na ordem pedida)."""
        documents = []
        for document_id in document_ids:
            data = await self.agentfs.kv.get(self._key(document_id))
            if not data:
                logger.warning(f"Documento sem conteudo: {document_id}")
                continue
            documents.append(data)

        text = join_documents(documents)
        logger.debug(f"Conteudo de {len(documents)} documentos ({len(text)} chars)")
        return text
