"""Exact cosine-similarity search by linear scan over the document store.

Every query compares the query vector against every chunk of every READY
document.  That is O(total chunks) per query and fine for a policy corpus
of a few thousand chunks; an approximate index can replace this class
behind :class:`IVectorStoreProvider` without touching callers.

Vectors are persisted JSON-encoded on the chunk rows, so the index has no
state of its own: READY filtering, cascading deletes and restarts all
follow the document store.
"""

from __future__ import annotations

import json
import math

import structlog

from policy_advisor.interfaces.document_store import IDocumentStore
from policy_advisor.interfaces.vector_store_provider import ChunkVector, IVectorStoreProvider
from policy_advisor.models.document import DocumentChunk, NewDocumentChunk
from policy_advisor.models.rag import DocumentRef, RetrievedChunk, VectorStatus
from policy_advisor.utils.errors import SearchCorruptionError

logger = structlog.get_logger(logger_name=__name__)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Return ``dot(a, b) / (|a| * |b|)``.

    Returns ``0.0`` (never NaN, never an error) when the lengths differ,
    either vector is empty, or either magnitude is zero.
    """
    if len(a) != len(b) or not a:
        return 0.0
    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def decode_vector(chunk: DocumentChunk) -> list[float]:
    """Parse a chunk's stored embedding.

    Raises
    ------
    SearchCorruptionError
        If the embedding is missing, not JSON, or not a list of numbers.
    """
    if chunk.embedding is None:
        raise SearchCorruptionError(f"Chunk {chunk.id} has no embedding")
    try:
        vector = json.loads(chunk.embedding)
    except json.JSONDecodeError as exc:
        raise SearchCorruptionError(f"Chunk {chunk.id} embedding is not valid JSON") from exc
    if not isinstance(vector, list) or not all(
        isinstance(x, (int, float)) and not isinstance(x, bool) for x in vector
    ):
        raise SearchCorruptionError(f"Chunk {chunk.id} embedding is not a numeric list")
    return [float(x) for x in vector]


class LinearScanVectorStore(IVectorStoreProvider):
    """Brute-force vector index over chunks held by an :class:`IDocumentStore`."""

    def __init__(self, document_store: IDocumentStore) -> None:
        self._store = document_store

    async def add_chunks(self, document_id: int, chunks: list[ChunkVector]) -> int:
        # Sequential on purpose: chunk_index order must match list order.
        for index, item in enumerate(chunks):
            await self._store.create_chunk(
                NewDocumentChunk(
                    document_id=document_id,
                    chunk_index=index,
                    content=item.content,
                    embedding=json.dumps(item.vector),
                    metadata=item.metadata,
                )
            )
        logger.debug("chunks_indexed", document_id=document_id, chunk_count=len(chunks))
        return len(chunks)

    async def search(self, query_vector: list[float], top_k: int = 5) -> list[RetrievedChunk]:
        if top_k <= 0:
            return []

        scored: list[RetrievedChunk] = []
        skipped = 0
        # Ready documents come back ordered by id and chunks by chunk_index,
        # so the stable sort below breaks ties in insertion order.
        for document in await self._store.list_ready_documents():
            ref = DocumentRef(
                id=document.id,
                original_name=document.original_name,
                filename=document.filename,
            )
            for chunk in await self._store.get_chunks(document.id):
                try:
                    vector = decode_vector(chunk)
                except SearchCorruptionError as exc:
                    skipped += 1
                    logger.warning(
                        "chunk_vector_unreadable",
                        document_id=chunk.document_id,
                        chunk_index=chunk.chunk_index,
                        error=str(exc),
                    )
                    continue
                scored.append(
                    RetrievedChunk(
                        chunk=chunk,
                        similarity=cosine_similarity(query_vector, vector),
                        document=ref,
                    )
                )

        scored.sort(key=lambda r: r.similarity, reverse=True)
        results = scored[:top_k]
        logger.debug(
            "vector_search",
            candidates=len(scored),
            skipped=skipped,
            returned=len(results),
            top_similarity=results[0].similarity if results else None,
        )
        return results

    async def get_stats(self) -> VectorStatus:
        ready = await self._store.list_ready_documents()
        embedding_count = sum(doc.chunk_count or 0 for doc in ready)
        processed = [doc.processed_at for doc in ready if doc.processed_at is not None]
        return VectorStatus(
            document_count=len(ready),
            embedding_count=embedding_count,
            last_updated=max(processed) if processed else None,
            status="ready" if ready else "empty",
        )

    def get_provider_name(self) -> str:
        return "linear-scan"
