"""Document and chunk models for the policy knowledge base.

A :class:`Document` is the record of one uploaded file and its ingestion
lifecycle; :class:`DocumentChunk` is one embedded text window belonging to
it.  Both are frozen Pydantic v2 models: stores hand out new copies
(``model_copy(update=...)``) instead of mutating records in place.

Lifecycle::

    processing ──► ready   (chunk_count, processed_at set)
         │
         └──────► error   (error_message set)

``ready`` and ``error`` are terminal.  Only the ingestion pipeline moves a
document between statuses, and only out of ``processing``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DocumentStatus(str, Enum):
    """Ingestion lifecycle status of a :class:`Document`."""

    PROCESSING = "processing"
    READY = "ready"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not DocumentStatus.PROCESSING


class Document(BaseModel):
    """An uploaded document and the state of its ingestion."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Store-assigned identifier.")
    filename: str = Field(description="Stored filename (timestamp-prefixed).")
    original_name: str = Field(description="Filename as uploaded by the user.")
    mime_type: str = Field(description="MIME type reported at upload.")
    size: int = Field(ge=0, description="Payload size in bytes.")
    status: DocumentStatus = Field(default=DocumentStatus.PROCESSING)
    # Populated iff status is READY.
    chunk_count: int | None = Field(default=None, ge=0)
    # Populated iff status is ERROR.
    error_message: str | None = Field(default=None)
    uploaded_at: datetime = Field(description="When the document record was created.")
    processed_at: datetime | None = Field(
        default=None, description="When the document reached READY."
    )

    @property
    def is_ready(self) -> bool:
        return self.status is DocumentStatus.READY


class NewDocument(BaseModel):
    """Fields supplied by the caller when creating a :class:`Document`."""

    model_config = ConfigDict(frozen=True)

    filename: str
    original_name: str
    mime_type: str
    size: int = Field(ge=0)


class DocumentChunk(BaseModel):
    """One chunk of a document's text with its persisted embedding.

    ``embedding`` holds the vector JSON-encoded, exactly as persisted, so a
    damaged value surfaces at search time (where it is skipped) rather than
    at load time.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Store-assigned identifier.")
    document_id: int = Field(description="Owning document.")
    chunk_index: int = Field(ge=0, description="Position in extraction order, 0..n-1.")
    content: str = Field(description="The chunk's text.")
    embedding: str | None = Field(
        default=None, description="JSON-encoded embedding vector."
    )
    metadata: dict[str, Any] | None = Field(
        default=None, description="Optional positional hints, e.g. page and section."
    )


class NewDocumentChunk(BaseModel):
    """Fields supplied by the pipeline when persisting a :class:`DocumentChunk`."""

    model_config = ConfigDict(frozen=True)

    document_id: int
    chunk_index: int = Field(ge=0)
    content: str
    embedding: str | None = None
    metadata: dict[str, Any] | None = None
