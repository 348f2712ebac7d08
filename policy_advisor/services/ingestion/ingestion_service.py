"""Orchestrator for the document ingestion pipeline.

Pipeline stages: **extract -> chunk -> embed -> store -> publish**.

:meth:`IngestionService.submit` validates an upload, creates the Document
in ``processing`` status and returns it at once; the pipeline then runs as
a background ``asyncio`` task.  Completion is observed by polling the
Document (``ready`` or ``error``) or by awaiting
:meth:`IngestionService.wait_for_ingestion`.

Every failure ends in ``mark_error`` with the cause recorded on the
Document.  Chunks persisted before a failure stay in the store but never
become searchable, because the vector index only reads READY documents.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING

import structlog

from policy_advisor.interfaces.vector_store_provider import ChunkVector
from policy_advisor.models.document import Document, NewDocument
from policy_advisor.models.rag import IngestionResult
from policy_advisor.services.ingestion.chunker import TextChunker
from policy_advisor.utils.concurrency import throttled_gather
from policy_advisor.utils.errors import (
    ExtractionError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

if TYPE_CHECKING:
    from policy_advisor.interfaces.document_store import IDocumentStore
    from policy_advisor.interfaces.embedding_provider import IEmbeddingProvider
    from policy_advisor.interfaces.vector_store_provider import IVectorStoreProvider
    from policy_advisor.providers.extraction.registry import TextExtractorRegistry

logger = structlog.get_logger(logger_name=__name__)

ACCEPTED_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
        "text/markdown",
    }
)

_DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
_CHUNKS_PER_PAGE = 3


def chunk_metadata(index: int) -> dict[str, int]:
    """Approximate positional hints for the chunk at *index*."""
    return {"page": index // _CHUNKS_PER_PAGE + 1, "section": index}


class IngestionService:
    """Drives uploaded documents from ``processing`` to ``ready`` or ``error``.

    Parameters
    ----------
    document_store:
        Persistence for documents and their status transitions.
    vector_store:
        Index the embedded chunks are written to.
    embedding_provider:
        Generates one vector per chunk.
    extractors:
        MIME-type lookup for text extraction.
    chunker:
        Splits extracted text into overlapping windows.
    max_upload_bytes:
        Largest accepted payload.
    embedding_concurrency:
        Upper bound on simultaneous embedding calls per document.
    """

    def __init__(
        self,
        document_store: IDocumentStore,
        vector_store: IVectorStoreProvider,
        embedding_provider: IEmbeddingProvider,
        extractors: TextExtractorRegistry,
        chunker: TextChunker | None = None,
        max_upload_bytes: int = _DEFAULT_MAX_UPLOAD_BYTES,
        embedding_concurrency: int = 4,
    ) -> None:
        self._documents = document_store
        self._vector_store = vector_store
        self._embedding_provider = embedding_provider
        self._extractors = extractors
        self._chunker = chunker or TextChunker()
        self._max_upload_bytes = max_upload_bytes
        self._embedding_concurrency = embedding_concurrency

        self._tasks: dict[int, asyncio.Task[IngestionResult]] = {}
        self._results: dict[int, IngestionResult] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate_upload(self, original_name: str, mime_type: str, size: int) -> None:
        """Reject uploads that must not enter the pipeline.

        Raises
        ------
        ValidationError
            Missing name, empty payload, payload over the size limit, or a
            MIME type outside :data:`ACCEPTED_MIME_TYPES`.
        """
        if not original_name:
            raise ValidationError("No file uploaded")
        if size <= 0:
            raise ValidationError("Uploaded file is empty")
        if size > self._max_upload_bytes:
            limit_mb = self._max_upload_bytes / (1024 * 1024)
            raise ValidationError(f"File too large. Maximum size is {limit_mb:g}MB.")
        if mime_type not in ACCEPTED_MIME_TYPES:
            raise ValidationError(
                "Invalid file type. Only PDF, DOC, DOCX, plain text and Markdown files are allowed."
            )

    async def submit(self, original_name: str, mime_type: str, data: bytes) -> Document:
        """Validate, create the Document and start ingestion in the background.

        Returns the Document in ``processing`` status without waiting for
        the pipeline.
        """
        self.validate_upload(original_name, mime_type, len(data))
        document = await self._documents.create_document(
            NewDocument(
                filename=f"{int(time.time() * 1000)}-{original_name}",
                original_name=original_name,
                mime_type=mime_type,
                size=len(data),
            )
        )
        logger.info(
            "document_submitted",
            document_id=document.id,
            original_name=original_name,
            mime_type=mime_type,
            size=len(data),
        )
        self.begin_ingestion(document.id, data)
        return document

    def begin_ingestion(self, document_id: int, data: bytes) -> asyncio.Task[IngestionResult]:
        """Schedule :meth:`ingest` as a task and return it.

        The task is tracked until it finishes so callers can await it
        through :meth:`wait_for_ingestion` or :meth:`drain`.
        """
        task = asyncio.create_task(
            self.ingest(document_id, data), name=f"ingest-document-{document_id}"
        )
        self._tasks[document_id] = task
        task.add_done_callback(lambda t: self._on_task_done(document_id, t))
        return task

    async def ingest(self, document_id: int, data: bytes) -> IngestionResult:
        """Run the full pipeline for *document_id* and record the outcome.

        Never raises for pipeline failures: they are written to the
        Document and returned as an ``error`` result.
        """
        start = time.monotonic()
        try:
            document = await self._documents.get_document(document_id)
            if document is None:
                raise NotFoundError(f"Document {document_id} not found")
            if document.status.is_terminal:
                raise InvalidTransitionError(
                    f"Document {document_id} is already {document.status.value}"
                )

            chunk_count = await self._run_pipeline(document, data)
            await self._documents.mark_ready(document_id, chunk_count)
        except NotFoundError:
            logger.info("ingestion_document_deleted", document_id=document_id)
            return self._record(
                IngestionResult(
                    document_id=document_id,
                    status="deleted",
                    ingestion_time=time.monotonic() - start,
                )
            )
        except Exception as exc:
            return await self._fail(document_id, exc, start)

        elapsed = time.monotonic() - start
        logger.info(
            "ingestion_complete",
            document_id=document_id,
            chunk_count=chunk_count,
            elapsed_s=round(elapsed, 3),
        )
        return self._record(
            IngestionResult(
                document_id=document_id,
                status="ready",
                chunks_created=chunk_count,
                ingestion_time=elapsed,
            )
        )

    async def wait_for_ingestion(self, document_id: int) -> IngestionResult | None:
        """Return the outcome of *document_id*'s pipeline, waiting if still running.

        Returns ``None`` if no ingestion was started for it in this process.
        """
        task = self._tasks.get(document_id)
        if task is not None:
            return await asyncio.shield(task)
        return self._results.get(document_id)

    async def drain(self) -> None:
        """Wait for every in-flight ingestion task to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _run_pipeline(self, document: Document, data: bytes) -> int:
        """Extract, chunk, embed and persist.  Returns the number of chunks."""
        # Step 1: extract.
        text = await self._extractors.extract(data, document.mime_type)
        if not text.strip():
            raise ExtractionError("Document contains no extractable text")

        # Step 2: chunk.
        chunks = self._chunker.chunk(text)
        if not chunks:
            raise ExtractionError("Document produced no text chunks")

        # Step 3: embed concurrently; gather keeps input order.
        vectors = await throttled_gather(
            [self._embedding_provider.embed_single(chunk) for chunk in chunks],
            limit=self._embedding_concurrency,
        )

        # Step 4: persist sequentially so chunk_index follows chunk order.
        return await self._vector_store.add_chunks(
            document.id,
            [
                ChunkVector(content=content, vector=vector, metadata=chunk_metadata(index))
                for index, (content, vector) in enumerate(zip(chunks, vectors))
            ],
        )

    async def _fail(self, document_id: int, exc: Exception, start: float) -> IngestionResult:
        error_message = str(exc) or type(exc).__name__
        logger.error(
            "ingestion_failed",
            document_id=document_id,
            error_type=type(exc).__name__,
            error=error_message,
        )
        try:
            await self._documents.mark_error(document_id, error_message)
        except NotFoundError:
            logger.info("ingestion_document_deleted", document_id=document_id)
            status = "deleted"
        except InvalidTransitionError as transition_exc:
            logger.warning(
                "ingestion_status_already_terminal",
                document_id=document_id,
                error=str(transition_exc),
            )
            status = "error"
        else:
            status = "error"
        return self._record(
            IngestionResult(
                document_id=document_id,
                status=status,
                error_message=error_message,
                ingestion_time=time.monotonic() - start,
            )
        )

    def _record(self, result: IngestionResult) -> IngestionResult:
        self._results[result.document_id] = result
        return result

    def _on_task_done(self, document_id: int, task: asyncio.Task[IngestionResult]) -> None:
        if self._tasks.get(document_id) is task:
            del self._tasks[document_id]
        if not task.cancelled() and task.exception() is not None:
            # ingest() converts failures into results; anything here escaped it.
            logger.error(
                "ingestion_task_crashed",
                document_id=document_id,
                error=str(task.exception()),
            )

    def forget(self, document_id: int) -> None:
        """Drop the recorded outcome for a deleted document."""
        self._results.pop(document_id, None)
