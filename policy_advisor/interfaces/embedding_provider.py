"""Abstract base class for text-embedding service providers.

Defines the contract for turning text into fixed-length vectors.  The
default implementation is a deterministic hash-based stand-in; a genuine
semantic model (OpenAI-compatible embeddings API) can replace it without
any other component changing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations:
#   HashEmbeddingProvider   — deterministic 384-dim placeholder (default)
#   OpenAIEmbeddingProvider — OpenAI-compatible embeddings endpoint
# Located in: policy_advisor/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by ingestion and retrieval.

    Vectors produced here are persisted with each chunk and compared by
    :class:`~policy_advisor.interfaces.vector_store_provider.IVectorStoreProvider`
    at query time, so one provider instance must be used for both sides.
    """

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Returns
        -------
        list[list[float]]
            Vectors corresponding positionally to *texts*, each of length
            :meth:`get_dimension`.

        Raises
        ------
        policy_advisor.utils.errors.EmbeddingProviderError
            If the provider is unavailable, unauthenticated, out of quota
            or rate limited.  ``reason`` tells which.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Generate an embedding vector for one text (e.g. a search query)."""

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the vector length; constant for the provider's lifetime."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"hash-embedding-384"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured (no network call)."""
