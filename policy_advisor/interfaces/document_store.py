"""Abstract base class for persistence of documents, chunks and conversations.

Repository-pattern contract: the ingestion pipeline, the vector index and
the conversation service depend on this interface only, never on a
storage backend.  Implementations must allocate identifiers atomically
under concurrent creation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from policy_advisor.models.conversation import Conversation, Message, NewMessage
from policy_advisor.models.document import (
    Document,
    DocumentChunk,
    NewDocument,
    NewDocumentChunk,
)


# Concrete implementations: MemoryDocumentStore, SQLiteDocumentStore
# Located in: policy_advisor/providers/storage/
class IDocumentStore(ABC):
    """Contract for document, chunk, conversation and message storage."""

    async def initialize(self) -> None:
        """Prepare the backend (create tables, ...).  No-op by default."""

    # -- Documents ------------------------------------------------------

    @abstractmethod
    async def create_document(self, document: NewDocument) -> Document:
        """Create a document in PROCESSING status and return it."""

    @abstractmethod
    async def get_document(self, document_id: int) -> Document | None:
        """Return the document, or ``None`` if it does not exist."""

    @abstractmethod
    async def list_documents(self) -> list[Document]:
        """Return every document ordered by id."""

    @abstractmethod
    async def list_ready_documents(self) -> list[Document]:
        """Return READY documents ordered by id."""

    @abstractmethod
    async def mark_ready(self, document_id: int, chunk_count: int) -> Document:
        """Move a PROCESSING document to READY.

        Sets ``chunk_count`` and ``processed_at``.

        Raises
        ------
        NotFoundError
            If the document does not exist (e.g. deleted mid-ingestion).
        InvalidTransitionError
            If the document is already in a terminal status.
        """

    @abstractmethod
    async def mark_error(self, document_id: int, error_message: str) -> Document:
        """Move a PROCESSING document to ERROR with *error_message*.

        Raises the same errors as :meth:`mark_ready`.
        """

    @abstractmethod
    async def delete_document(self, document_id: int) -> bool:
        """Delete the document and all of its chunks.

        Returns ``True`` if a document was removed.
        """

    # -- Chunks ---------------------------------------------------------

    @abstractmethod
    async def create_chunk(self, chunk: NewDocumentChunk) -> DocumentChunk:
        """Persist one chunk.

        Raises
        ------
        NotFoundError
            If the owning document no longer exists.
        """

    @abstractmethod
    async def get_chunks(self, document_id: int) -> list[DocumentChunk]:
        """Return the document's chunks ordered by ``chunk_index``."""

    # -- Conversations --------------------------------------------------

    @abstractmethod
    async def create_conversation(self, session_id: str, language: str) -> Conversation:
        """Create a conversation; returns the existing one if *session_id* is taken."""

    @abstractmethod
    async def get_conversation(self, session_id: str) -> Conversation | None:
        """Return the conversation for *session_id*, or ``None``."""

    @abstractmethod
    async def create_message(self, message: NewMessage) -> Message:
        """Append a message, stamping it with the current time.

        Raises
        ------
        NotFoundError
            If the conversation does not exist.
        """

    @abstractmethod
    async def get_messages(self, conversation_id: int) -> list[Message]:
        """Return the conversation's messages in ascending timestamp order."""

    # -------------------------------------------------------------------

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"memory"``."""
