"""Embedding provider implementations.

Two implementations of IEmbeddingProvider:
    1. HashEmbeddingProvider   — deterministic 384-dim vectors from a rolling
       hash of the text.  Default; offline and reproducible.
    2. OpenAIEmbeddingProvider — OpenAI-compatible embeddings endpoint.

main.py picks one from ``EMBEDDING_PROVIDER`` ("hash" | "openai").
"""

from policy_advisor.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from policy_advisor.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["HashEmbeddingProvider", "OpenAIEmbeddingProvider"]
