"""Retrieval-side models: search hits, answers, ingestion results, index status.

RAG (retrieval-augmented generation) in this project:

    1. INGESTION: uploaded files are extracted to text and split into
       overlapping ~1000-character chunks.
    2. EMBEDDING: each chunk becomes a fixed-length vector.
    3. STORAGE: chunks and their vectors are persisted with the document.
    4. RETRIEVAL: a query vector is compared against every chunk of every
       READY document (cosine similarity, top-k).
    5. GENERATION: the best chunks become the context of a grounded prompt;
       the answer is returned with its sources.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from policy_advisor.models.conversation import Source
from policy_advisor.models.document import DocumentChunk


class DocumentRef(BaseModel):
    """Lightweight reference to the document that owns a retrieved chunk."""

    model_config = ConfigDict(frozen=True)

    id: int
    original_name: str
    filename: str


class RetrievedChunk(BaseModel):
    """A chunk returned from a vector-index search with its score."""

    model_config = ConfigDict(frozen=True)

    chunk: DocumentChunk
    similarity: float = Field(description="Cosine similarity between query and chunk.")
    document: DocumentRef | None = None

    def to_source(self) -> Source:
        return Source(
            document_id=self.chunk.document_id,
            document_name=self.document.original_name if self.document else "Unknown Document",
            chunk_index=self.chunk.chunk_index,
            # Raw cosine can be negative; attributions report 0..1.
            similarity=min(1.0, max(0.0, self.similarity)),
            metadata=self.chunk.metadata,
        )


class RAGResponse(BaseModel):
    """Answer produced by the retrieval orchestrator."""

    model_config = ConfigDict(frozen=True)

    content: str
    sources: list[Source] = Field(default_factory=list)


class IngestionResult(BaseModel):
    """Outcome of one ingestion pipeline run."""

    model_config = ConfigDict(frozen=True)

    document_id: int
    status: Literal["ready", "error", "deleted"]
    chunks_created: int = Field(default=0, ge=0)
    error_message: str | None = None
    ingestion_time: float = Field(default=0.0, ge=0.0, description="Wall-clock seconds.")


class VectorStatus(BaseModel):
    """Summary of what is currently searchable."""

    model_config = ConfigDict(frozen=True)

    document_count: int = Field(default=0, ge=0, description="READY documents.")
    embedding_count: int = Field(default=0, ge=0, description="Chunks across READY documents.")
    last_updated: datetime | None = Field(
        default=None, description="Latest processed_at among READY documents."
    )
    status: Literal["ready", "empty"] = "empty"


class ConnectionTestResult(BaseModel):
    """Outcome of a one-message round trip to the generation provider."""

    model_config = ConfigDict(frozen=True)

    success: bool
    model: str
    provider: str
    error: str | None = None
