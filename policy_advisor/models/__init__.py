"""Policy advisor domain models; re-exports all public model classes.

    - document.py      — uploaded documents, their lifecycle and chunks
    - conversation.py  — conversations, messages and answer sources
    - rag.py           — search hits, answers, ingestion results, index status
"""

from __future__ import annotations

from policy_advisor.models.conversation import (
    Conversation,
    Message,
    MessageRole,
    NewMessage,
    Source,
)
from policy_advisor.models.document import (
    Document,
    DocumentChunk,
    DocumentStatus,
    NewDocument,
    NewDocumentChunk,
)
from policy_advisor.models.rag import (
    ConnectionTestResult,
    DocumentRef,
    IngestionResult,
    RAGResponse,
    RetrievedChunk,
    VectorStatus,
)

__all__ = [
    # document
    "Document",
    "DocumentChunk",
    "DocumentStatus",
    "NewDocument",
    "NewDocumentChunk",
    # conversation
    "Conversation",
    "Message",
    "MessageRole",
    "NewMessage",
    "Source",
    # rag
    "ConnectionTestResult",
    "DocumentRef",
    "IngestionResult",
    "RAGResponse",
    "RetrievedChunk",
    "VectorStatus",
]
