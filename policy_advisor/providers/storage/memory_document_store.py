"""In-memory document store.

Dict-backed implementation of :class:`IDocumentStore` for development,
tests and single-process deployments.  Contents are lost on restart.

Identifiers come from ``itertools.count`` and every mutation runs under a
single ``asyncio.Lock``, so concurrent tasks never observe a half-applied
change or collide on an id.
"""

from __future__ import annotations

import asyncio
import itertools
from datetime import datetime, timezone

import structlog

from policy_advisor.interfaces.document_store import IDocumentStore
from policy_advisor.models.conversation import Conversation, Message, NewMessage
from policy_advisor.models.document import (
    Document,
    DocumentChunk,
    DocumentStatus,
    NewDocument,
    NewDocumentChunk,
)
from policy_advisor.utils.errors import InvalidTransitionError, NotFoundError

logger = structlog.get_logger(logger_name=__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemoryDocumentStore(IDocumentStore):
    """Process-local document, chunk and conversation storage."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._documents: dict[int, Document] = {}
        self._chunks: dict[int, list[DocumentChunk]] = {}
        self._conversations: dict[str, Conversation] = {}
        self._messages: dict[int, list[Message]] = {}

        self._document_ids = itertools.count(1)
        self._chunk_ids = itertools.count(1)
        self._conversation_ids = itertools.count(1)
        self._message_ids = itertools.count(1)

    # -- Documents ------------------------------------------------------

    async def create_document(self, document: NewDocument) -> Document:
        async with self._lock:
            record = Document(
                id=next(self._document_ids),
                filename=document.filename,
                original_name=document.original_name,
                mime_type=document.mime_type,
                size=document.size,
                status=DocumentStatus.PROCESSING,
                uploaded_at=_utcnow(),
            )
            self._documents[record.id] = record
            self._chunks[record.id] = []
        logger.debug("document_created", document_id=record.id, filename=record.filename)
        return record

    async def get_document(self, document_id: int) -> Document | None:
        return self._documents.get(document_id)

    async def list_documents(self) -> list[Document]:
        return [self._documents[key] for key in sorted(self._documents)]

    async def list_ready_documents(self) -> list[Document]:
        return [doc for doc in await self.list_documents() if doc.is_ready]

    async def mark_ready(self, document_id: int, chunk_count: int) -> Document:
        async with self._lock:
            current = self._require_processing(document_id)
            updated = current.model_copy(
                update={
                    "status": DocumentStatus.READY,
                    "chunk_count": chunk_count,
                    "processed_at": _utcnow(),
                }
            )
            self._documents[document_id] = updated
        return updated

    async def mark_error(self, document_id: int, error_message: str) -> Document:
        async with self._lock:
            current = self._require_processing(document_id)
            updated = current.model_copy(
                update={"status": DocumentStatus.ERROR, "error_message": error_message}
            )
            self._documents[document_id] = updated
        return updated

    async def delete_document(self, document_id: int) -> bool:
        async with self._lock:
            removed = self._documents.pop(document_id, None)
            chunks = self._chunks.pop(document_id, [])
        if removed is not None:
            logger.debug("document_deleted", document_id=document_id, chunks_removed=len(chunks))
        return removed is not None

    def _require_processing(self, document_id: int) -> Document:
        """Return the document if it may still transition.  Caller holds the lock."""
        current = self._documents.get(document_id)
        if current is None:
            raise NotFoundError(f"Document {document_id} not found", provider_name="memory")
        if current.status.is_terminal:
            raise InvalidTransitionError(
                f"Document {document_id} is already {current.status.value}",
                provider_name="memory",
            )
        return current

    # -- Chunks ---------------------------------------------------------

    async def create_chunk(self, chunk: NewDocumentChunk) -> DocumentChunk:
        async with self._lock:
            if chunk.document_id not in self._documents:
                raise NotFoundError(
                    f"Document {chunk.document_id} not found", provider_name="memory"
                )
            record = DocumentChunk(id=next(self._chunk_ids), **chunk.model_dump())
            self._chunks[chunk.document_id].append(record)
        return record

    async def get_chunks(self, document_id: int) -> list[DocumentChunk]:
        return sorted(self._chunks.get(document_id, []), key=lambda c: c.chunk_index)

    # -- Conversations --------------------------------------------------

    async def create_conversation(self, session_id: str, language: str) -> Conversation:
        async with self._lock:
            existing = self._conversations.get(session_id)
            if existing is not None:
                return existing
            record = Conversation(
                id=next(self._conversation_ids),
                session_id=session_id,
                language=language,
                created_at=_utcnow(),
            )
            self._conversations[session_id] = record
            self._messages[record.id] = []
        return record

    async def get_conversation(self, session_id: str) -> Conversation | None:
        return self._conversations.get(session_id)

    async def create_message(self, message: NewMessage) -> Message:
        async with self._lock:
            if message.conversation_id not in self._messages:
                raise NotFoundError(
                    f"Conversation {message.conversation_id} not found",
                    provider_name="memory",
                )
            record = Message(
                id=next(self._message_ids),
                timestamp=_utcnow(),
                **message.model_dump(),
            )
            self._messages[message.conversation_id].append(record)
        return record

    async def get_messages(self, conversation_id: int) -> list[Message]:
        return sorted(
            self._messages.get(conversation_id, []),
            key=lambda m: (m.timestamp, m.id),
        )

    def get_provider_name(self) -> str:
        return "memory"
