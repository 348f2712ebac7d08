"""Abstract base class for the similarity-search index.

The retrieval orchestrator only sees this contract.  The default
implementation is a full linear scan (exact cosine similarity over every
eligible chunk); an approximate nearest-neighbour structure can replace it
without touching callers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from policy_advisor.models.rag import RetrievedChunk, VectorStatus


@dataclass(frozen=True)
class ChunkVector:
    """A chunk ready to be indexed.

    Attributes
    ----------
    content:
        The chunk's text.
    vector:
        Its embedding.
    metadata:
        Optional positional hints (page, section).
    """

    content: str
    vector: list[float]
    metadata: dict[str, Any] | None = None


# Concrete implementation: LinearScanVectorStore (policy_advisor/providers/vector_store/)
class IVectorStoreProvider(ABC):
    """Contract for indexing chunk vectors and answering top-k queries.

    Visibility rule: only chunks whose owning document is READY are
    eligible for :meth:`search`.  A document's chunk set is therefore
    published all at once by the READY transition, never piecemeal.
    """

    @abstractmethod
    async def add_chunks(self, document_id: int, chunks: list[ChunkVector]) -> int:
        """Persist *chunks* for *document_id* with indices ``0..n-1`` in list order.

        Returns
        -------
        int
            Number of chunks stored.

        Raises
        ------
        policy_advisor.utils.errors.NotFoundError
            If the document was deleted before or during indexing.
        """

    @abstractmethod
    async def search(self, query_vector: list[float], top_k: int = 5) -> list[RetrievedChunk]:
        """Return at most *top_k* chunks by descending cosine similarity.

        Ties keep insertion order (document id, then chunk index).  Chunks
        whose stored vector cannot be decoded are skipped and logged.
        """

    @abstractmethod
    async def get_stats(self) -> VectorStatus:
        """Return document/embedding counts derived from READY documents."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"linear-scan"``."""
