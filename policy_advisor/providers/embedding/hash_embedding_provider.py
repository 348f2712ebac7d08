"""Deterministic hash-based embedding provider.

A stand-in for a semantic embedding model: identical text always maps to
a bit-identical vector, with no network access and no model drift, which
keeps retrieval reproducible in tests and offline deployments.

Formula (D = 384 by default)::

    h = 0
    for ch in text:
        h = int32(h * 31 + ord(ch))
    v[i] = sin(h + i) * cos(h * i)      for i in 0..D-1

The vectors carry no semantic meaning: similar texts do not get similar
vectors.  Swap in :class:`OpenAIEmbeddingProvider` for real retrieval.
"""

from __future__ import annotations

import math

from policy_advisor.interfaces.embedding_provider import IEmbeddingProvider

_DEFAULT_DIMENSION = 384


def _int32(value: int) -> int:
    """Wrap *value* to a signed 32-bit integer."""
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def text_hash(text: str) -> int:
    """Return the 32-bit polynomial rolling hash (base 31) of *text*."""
    h = 0
    for ch in text:
        h = _int32(h * 31 + ord(ch))
    return h


class HashEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider computing vectors from a rolling hash of the text."""

    def __init__(self, dimension: int = _DEFAULT_DIMENSION) -> None:
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self._dimension = dimension

    def embed_text(self, text: str) -> list[float]:
        """Synchronously compute the vector for *text*."""
        h = text_hash(text)
        return [math.sin(h + i) * math.cos(h * i) for i in range(self._dimension)]

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return [self.embed_text(text) for text in texts]

    async def embed_single(self, text: str) -> list[float]:
        return self.embed_text(text)

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return f"hash-embedding-{self._dimension}"

    def is_available(self) -> bool:
        return True
