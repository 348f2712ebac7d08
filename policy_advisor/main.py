"""Policy advisor FastAPI application entry point.

Wires together providers, services, and routes.  Configuration comes from
``config/config.yaml`` overlaid with ``.env`` / environment variables; the
built components are attached to ``app.state`` for the route dependencies.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from policy_advisor import __version__
from policy_advisor.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from policy_advisor.api.routes import router as api_router
from policy_advisor.config.loader import build_settings
from policy_advisor.config.settings import Settings
from policy_advisor.interfaces.document_store import IDocumentStore
from policy_advisor.interfaces.embedding_provider import IEmbeddingProvider
from policy_advisor.interfaces.llm_provider import ILLMProvider
from policy_advisor.providers.cache.memory_cache import MemoryCacheProvider
from policy_advisor.providers.embedding.hash_embedding_provider import HashEmbeddingProvider
from policy_advisor.providers.embedding.openai_embedding_provider import (
    OpenAIEmbeddingProvider,
)
from policy_advisor.providers.extraction.registry import TextExtractorRegistry
from policy_advisor.providers.llm.openai_provider import OpenAILLMProvider
from policy_advisor.providers.storage.memory_document_store import MemoryDocumentStore
from policy_advisor.providers.storage.sqlite_document_store import SQLiteDocumentStore
from policy_advisor.providers.vector_store.linear_scan_provider import LinearScanVectorStore
from policy_advisor.services.conversation_service import ConversationService
from policy_advisor.services.ingestion.chunker import TextChunker
from policy_advisor.services.ingestion.ingestion_service import IngestionService
from policy_advisor.services.rag_service import RAGService
from policy_advisor.services.translation_service import TranslationService
from policy_advisor.utils.errors import ConfigurationError
from policy_advisor.utils.logging import configure_logging, get_logger

settings = build_settings()
configure_logging(log_level=settings.log_level, json_output=settings.is_production)

logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Provider factories
# ---------------------------------------------------------------------------


def _build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider:
    kind = app_settings.embedding_provider.lower()
    if kind == "hash":
        return HashEmbeddingProvider(dimension=app_settings.embedding_dimension)
    if kind == "openai":
        return OpenAIEmbeddingProvider(app_settings)
    raise ConfigurationError(f"Unknown embedding provider '{app_settings.embedding_provider}'")


def _build_document_store(app_settings: Settings) -> IDocumentStore:
    backend = app_settings.storage_backend.lower()
    if backend == "memory":
        return MemoryDocumentStore()
    if backend == "sqlite":
        return SQLiteDocumentStore(app_settings.sqlite_db_path)
    raise ConfigurationError(f"Unknown storage backend '{app_settings.storage_backend}'")


def build_services(
    app_settings: Settings,
    llm_provider: ILLMProvider | None = None,
) -> dict[str, Any]:
    """Construct every provider and service from *app_settings*.

    *llm_provider* replaces the OpenAI-compatible client when given.
    Returns a dict whose keys become attributes on ``app.state``.
    """
    document_store = _build_document_store(app_settings)
    vector_store = LinearScanVectorStore(document_store)
    embedding_provider = _build_embedding_provider(app_settings)
    llm_provider = llm_provider or OpenAILLMProvider(app_settings)
    cache = MemoryCacheProvider(ttl=app_settings.translation_cache_ttl)

    translation_service = TranslationService(
        llm_provider=llm_provider,
        model=app_settings.translation_model,
        base_language=app_settings.base_language,
        cache=cache,
        cache_ttl=app_settings.translation_cache_ttl,
    )
    rag_service = RAGService(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        llm_provider=llm_provider,
        translation_service=translation_service,
        top_k=app_settings.retrieval_top_k,
        model=app_settings.llm_model,
    )
    ingestion_service = IngestionService(
        document_store=document_store,
        vector_store=vector_store,
        embedding_provider=embedding_provider,
        extractors=TextExtractorRegistry(),
        chunker=TextChunker(app_settings.chunk_size, app_settings.chunk_overlap),
        max_upload_bytes=app_settings.max_upload_bytes,
        embedding_concurrency=app_settings.embedding_concurrency,
    )
    conversation_service = ConversationService(document_store, rag_service)

    provider_registry = {
        "llm": llm_provider.is_available(),
        "llm_provider": llm_provider.get_provider_name(),
        "embedding": embedding_provider.get_provider_name(),
        "storage": document_store.get_provider_name(),
        "vector_store": vector_store.get_provider_name(),
    }

    return {
        "settings": app_settings,
        "document_store": document_store,
        "vector_store": vector_store,
        "embedding_provider": embedding_provider,
        "llm_provider": llm_provider,
        "cache": cache,
        "translation_service": translation_service,
        "rag_service": rag_service,
        "ingestion_service": ingestion_service,
        "conversation_service": conversation_service,
        "provider_registry": provider_registry,
    }


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(
    app_settings: Settings | None = None,
    components: dict[str, Any] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    app_settings:
        Settings to build from; defaults to the module-level settings.
    components:
        Prebuilt components (as returned by :func:`build_services`).  When
        given, nothing is built at startup.
    """
    active_settings = app_settings or settings

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # type: ignore[no-untyped-def]
        built = components if components is not None else build_services(active_settings)
        for key, value in built.items():
            setattr(application.state, key, value)

        await built["document_store"].initialize()
        logger.info(
            "app_startup",
            version=__version__,
            providers=built.get("provider_registry", {}),
        )

        yield

        await built["ingestion_service"].drain()
        logger.info("app_shutdown")

    application = FastAPI(
        title=active_settings.app_title,
        version=__version__,
        lifespan=_lifespan,
    )

    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "policy_advisor.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=not settings.is_production,
    )
