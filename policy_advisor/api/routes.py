"""FastAPI API routes for the policy advisor.

Thin adapter over the services: every handler resolves its collaborators
from ``app.state`` via ``Depends`` (``Annotated`` pattern) and lets domain
errors propagate to :class:`ErrorHandlingMiddleware`.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                                   Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/documents                             GET     List documents
# /api/documents/upload                      POST    Upload (multipart "document")
# /api/documents/{id}                        GET     Poll one document's status
# /api/documents/{id}                        DELETE  Delete document + chunks
# /api/vector-status                         GET     Searchable corpus summary
# /api/conversations                         POST    Create (or fetch) a conversation
# /api/conversations/{session_id}            GET     Fetch a conversation
# /api/conversations/{session_id}/messages   GET     List messages (oldest first)
# /api/conversations/{session_id}/messages   POST    Ask a question
# /api/settings/test-connection              POST    Check the generation provider
# /api/health                                GET     Health check
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, Request, UploadFile

from policy_advisor import __version__
from policy_advisor.api.schemas import (
    ConnectionTestResponse,
    CreateConversationRequest,
    DeleteResponse,
    ErrorResponse,
    HealthResponse,
    MessageExchangeResponse,
    PostMessageRequest,
)
from policy_advisor.interfaces.document_store import IDocumentStore
from policy_advisor.interfaces.vector_store_provider import IVectorStoreProvider
from policy_advisor.models.conversation import Conversation, Message
from policy_advisor.models.document import Document
from policy_advisor.models.rag import VectorStatus
from policy_advisor.services.conversation_service import ConversationService
from policy_advisor.services.ingestion.ingestion_service import IngestionService
from policy_advisor.services.rag_service import RAGService
from policy_advisor.utils.errors import NotFoundError
from policy_advisor.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api")


# ---------------------------------------------------------------------------
# Dependency helpers. Read the objects built in main.py off app.state.
# ---------------------------------------------------------------------------


def _get_document_store(request: Request) -> IDocumentStore:
    return request.app.state.document_store


def _get_vector_store(request: Request) -> IVectorStoreProvider:
    return request.app.state.vector_store


def _get_ingestion_service(request: Request) -> IngestionService:
    return request.app.state.ingestion_service


def _get_rag_service(request: Request) -> RAGService:
    return request.app.state.rag_service


def _get_conversation_service(request: Request) -> ConversationService:
    return request.app.state.conversation_service


DocumentStoreDep = Annotated[IDocumentStore, Depends(_get_document_store)]
VectorStoreDep = Annotated[IVectorStoreProvider, Depends(_get_vector_store)]
IngestionDep = Annotated[IngestionService, Depends(_get_ingestion_service)]
RAGDep = Annotated[RAGService, Depends(_get_rag_service)]
ConversationDep = Annotated[ConversationService, Depends(_get_conversation_service)]

_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@router.get("/documents", response_model=list[Document], summary="List uploaded documents")
async def list_documents(store: DocumentStoreDep) -> list[Document]:
    return await store.list_documents()


@router.post(
    "/documents/upload",
    response_model=Document,
    responses=_ERRORS,
    summary="Upload a policy document for ingestion",
)
async def upload_document(
    ingestion: IngestionDep,
    document: Annotated[UploadFile, File()],
) -> Document:
    """Create the document and return it in ``processing`` status.

    Ingestion continues in the background; poll ``GET /documents/{id}``.
    """
    data = await document.read()
    return await ingestion.submit(
        original_name=document.filename or "",
        mime_type=document.content_type or "",
        data=data,
    )


@router.get(
    "/documents/{document_id}",
    response_model=Document,
    responses=_ERRORS,
    summary="Get one document's ingestion status",
)
async def get_document(document_id: int, store: DocumentStoreDep) -> Document:
    document = await store.get_document(document_id)
    if document is None:
        raise NotFoundError(f"Document {document_id} not found")
    return document


@router.delete(
    "/documents/{document_id}",
    response_model=DeleteResponse,
    responses=_ERRORS,
    summary="Delete a document and its chunks",
)
async def delete_document(
    document_id: int,
    store: DocumentStoreDep,
    ingestion: IngestionDep,
) -> DeleteResponse:
    if not await store.delete_document(document_id):
        raise NotFoundError(f"Document {document_id} not found")
    ingestion.forget(document_id)
    _logger.info("document_deleted", document_id=document_id)
    return DeleteResponse(success=True)


@router.get("/vector-status", response_model=VectorStatus, summary="Searchable corpus summary")
async def vector_status(vector_store: VectorStoreDep) -> VectorStatus:
    return await vector_store.get_stats()


# ---------------------------------------------------------------------------
# Conversations
# ---------------------------------------------------------------------------


@router.post(
    "/conversations",
    response_model=Conversation,
    responses=_ERRORS,
    summary="Create a conversation (returns the existing one for a known session)",
)
async def create_conversation(
    body: CreateConversationRequest,
    conversations: ConversationDep,
) -> Conversation:
    return await conversations.get_or_create(body.session_id, body.language)


@router.get(
    "/conversations/{session_id}",
    response_model=Conversation,
    responses=_ERRORS,
    summary="Get a conversation",
)
async def get_conversation(session_id: str, conversations: ConversationDep) -> Conversation:
    return await conversations.get(session_id)


@router.get(
    "/conversations/{session_id}/messages",
    response_model=list[Message],
    responses=_ERRORS,
    summary="List a conversation's messages, oldest first",
)
async def list_messages(session_id: str, conversations: ConversationDep) -> list[Message]:
    return await conversations.list_messages(session_id)


@router.post(
    "/conversations/{session_id}/messages",
    response_model=MessageExchangeResponse,
    responses=_ERRORS,
    summary="Ask a question in a conversation",
)
async def post_message(
    session_id: str,
    body: PostMessageRequest,
    conversations: ConversationDep,
) -> MessageExchangeResponse:
    user_message, assistant_message = await conversations.post_message(
        session_id, body.content, body.language
    )
    return MessageExchangeResponse(
        user_message=user_message,
        assistant_message=assistant_message,
    )


# ---------------------------------------------------------------------------
# Settings / health
# ---------------------------------------------------------------------------


@router.post(
    "/settings/test-connection",
    response_model=ConnectionTestResponse,
    summary="Check that the generation provider accepts the configured credentials",
)
async def test_connection(rag: RAGDep) -> ConnectionTestResponse:
    result = await rag.test_connection()
    return ConnectionTestResponse(**result.model_dump())


@router.get("/health", response_model=HealthResponse, summary="Application health check")
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability."""
    providers: dict = dict(getattr(request.app.state, "provider_registry", {}))

    vector_store = getattr(request.app.state, "vector_store", None)
    if vector_store is not None:
        stats = await vector_store.get_stats()
        providers["documents_ready"] = stats.document_count
        providers["embeddings"] = stats.embedding_count

    status = "healthy" if providers.get("llm", False) else "degraded"
    return HealthResponse(status=status, version=__version__, providers=providers)
