"""Shared pytest fixtures for the policy advisor test suite."""

from __future__ import annotations

from typing import Any

import pytest

from policy_advisor.config.settings import Settings
from policy_advisor.interfaces.embedding_provider import IEmbeddingProvider
from policy_advisor.interfaces.llm_provider import ChatMessage, ILLMProvider
from policy_advisor.providers.cache.memory_cache import MemoryCacheProvider
from policy_advisor.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from policy_advisor.providers.extraction.registry import TextExtractorRegistry
from policy_advisor.providers.storage.memory_document_store import MemoryDocumentStore
from policy_advisor.providers.vector_store.linear_scan_provider import LinearScanVectorStore
from policy_advisor.services.ingestion.chunker import TextChunker
from policy_advisor.services.ingestion.ingestion_service import IngestionService
from policy_advisor.services.rag_service import RAGService
from policy_advisor.services.translation_service import TranslationService
from policy_advisor.utils.errors import EmbeddingProviderError, LLMError

# ---------------------------------------------------------------------------
# Mock providers
# ---------------------------------------------------------------------------


class MockLLMProvider(ILLMProvider):
    """Scripted generation provider that records every call.

    ``replies`` are returned in order (the last one repeats).  An
    ``Exception`` instance in the list is raised instead of returned.
    """

    def __init__(self, replies: list[Any] | None = None, available: bool = True) -> None:
        self.replies = list(replies or ["Mock answer."])
        self.calls: list[dict[str, Any]] = []
        self._available = available

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        temperature: float = 0.3,
        max_tokens: int = 1000,
    ) -> str:
        self.calls.append(
            {
                "messages": messages,
                "model": model,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    def get_model_name(self) -> str:
        return "mock-model"

    def get_provider_name(self) -> str:
        return "mock-llm"

    def is_available(self) -> bool:
        return self._available

    async def validate_credentials(self) -> bool:
        return self._available


class FailingLLMProvider(MockLLMProvider):
    """Every call fails with an LLMError."""

    def __init__(self, message: str = "upstream unavailable") -> None:
        super().__init__(replies=[LLMError(message, provider_name="mock-llm")])


class MockEmbeddingProvider(IEmbeddingProvider):
    """Returns a fixed vector per known text, else a hash embedding."""

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        dimension: int = 8,
        fail_on: str | None = None,
    ) -> None:
        self._vectors = vectors or {}
        self._fallback = HashEmbeddingProvider(dimension=dimension)
        self._dimension = dimension
        self._fail_on = fail_on
        self.embedded: list[str] = []

    async def embed(self, texts: list[str]) -> list[list[float]]:
        return [await self.embed_single(text) for text in texts]

    async def embed_single(self, text: str) -> list[float]:
        self.embedded.append(text)
        if self._fail_on is not None and self._fail_on in text:
            raise EmbeddingProviderError("embedding refused", provider_name="mock-embedding")
        if text in self._vectors:
            return list(self._vectors[text])
        return self._fallback.embed_text(text)

    def get_dimension(self) -> int:
        return self._dimension

    def get_provider_name(self) -> str:
        return "mock-embedding"

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings() -> Settings:
    """Settings pinned to offline backends regardless of the local .env."""
    return Settings(
        openai_api_key="sk-test",
        embedding_provider="hash",
        embedding_dimension=64,
        storage_backend="memory",
        chunk_size=1000,
        chunk_overlap=200,
        retrieval_top_k=5,
        app_env="testing",
    )


@pytest.fixture
def document_store() -> MemoryDocumentStore:
    return MemoryDocumentStore()


@pytest.fixture
def vector_store(document_store: MemoryDocumentStore) -> LinearScanVectorStore:
    return LinearScanVectorStore(document_store)


@pytest.fixture
def embedding_provider() -> HashEmbeddingProvider:
    return HashEmbeddingProvider(dimension=64)


@pytest.fixture
def mock_llm() -> MockLLMProvider:
    return MockLLMProvider()


@pytest.fixture
def translation_service(mock_llm: MockLLMProvider) -> TranslationService:
    return TranslationService(llm_provider=mock_llm, cache=MemoryCacheProvider())


@pytest.fixture
def ingestion_service(
    document_store: MemoryDocumentStore,
    vector_store: LinearScanVectorStore,
    embedding_provider: HashEmbeddingProvider,
) -> IngestionService:
    return IngestionService(
        document_store=document_store,
        vector_store=vector_store,
        embedding_provider=embedding_provider,
        extractors=TextExtractorRegistry(),
        chunker=TextChunker(chunk_size=1000, overlap=200),
    )


@pytest.fixture
def rag_service(
    vector_store: LinearScanVectorStore,
    embedding_provider: HashEmbeddingProvider,
    mock_llm: MockLLMProvider,
    translation_service: TranslationService,
) -> RAGService:
    return RAGService(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        llm_provider=mock_llm,
        translation_service=translation_service,
        top_k=5,
    )


@pytest.fixture
def sample_policy_text() -> str:
    """Roughly 2500 characters of sentence-delimited policy prose."""
    sentence = "Employees must submit remote work requests to their manager in advance. "
    return (sentence * 35).strip()
