"""Public interface definitions for all external service providers.

Every backend the policy advisor talks to (generation model, embedding
model, vector index, persistence, text extraction, cache) is reached
through the abstract base classes defined here.  Concrete adapters live in
``policy_advisor/providers/`` and are wired together in
``policy_advisor/main.py``; tests inject fakes implementing the same
contracts.

CONCRETE PROVIDER MAP:
    Interface               →  Concrete implementations
    ─────────────────────────────────────────────────────────────────
    ILLMProvider            →  OpenAILLMProvider
    IEmbeddingProvider      →  HashEmbeddingProvider, OpenAIEmbeddingProvider
    IVectorStoreProvider    →  LinearScanVectorStore
    IDocumentStore          →  MemoryDocumentStore, SQLiteDocumentStore
    ITextExtractor          →  PlainTextExtractor, PDFTextExtractor,
                               WordTextExtractor
    ICacheProvider          →  MemoryCacheProvider
"""

from policy_advisor.interfaces.cache_provider import ICacheProvider
from policy_advisor.interfaces.document_store import IDocumentStore
from policy_advisor.interfaces.embedding_provider import IEmbeddingProvider
from policy_advisor.interfaces.llm_provider import ChatMessage, ILLMProvider
from policy_advisor.interfaces.text_extractor import ITextExtractor
from policy_advisor.interfaces.vector_store_provider import ChunkVector, IVectorStoreProvider

__all__ = [
    "ChatMessage",
    "ChunkVector",
    "ICacheProvider",
    "IDocumentStore",
    "IEmbeddingProvider",
    "ILLMProvider",
    "ITextExtractor",
    "IVectorStoreProvider",
]
