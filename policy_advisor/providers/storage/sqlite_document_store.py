"""SQLite-backed document store.

Persists documents, chunks, conversations and messages to a local SQLite
database (default ``data/policy_advisor.db``) using ``aiosqlite`` for async
I/O.  Identifiers are ``AUTOINCREMENT`` keys, chunks and messages are
removed with their parent through ``ON DELETE CASCADE``, and metadata /
sources are stored as JSON text.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from policy_advisor.interfaces.document_store import IDocumentStore
from policy_advisor.models.conversation import (
    Conversation,
    Message,
    MessageRole,
    NewMessage,
    Source,
)
from policy_advisor.models.document import (
    Document,
    DocumentChunk,
    DocumentStatus,
    NewDocument,
    NewDocumentChunk,
)
from policy_advisor.utils.errors import InvalidTransitionError, NotFoundError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/policy_advisor.db")

_CREATE_TABLES_SQL = [
    """\
CREATE TABLE IF NOT EXISTS documents (
    id             INTEGER PRIMARY KEY AUTOINCREMENT,
    filename       TEXT    NOT NULL,
    original_name  TEXT    NOT NULL,
    mime_type      TEXT    NOT NULL,
    size           INTEGER NOT NULL,
    status         TEXT    NOT NULL DEFAULT 'processing',
    chunk_count    INTEGER,
    error_message  TEXT,
    uploaded_at    TEXT    NOT NULL,
    processed_at   TEXT
);
""",
    """\
CREATE TABLE IF NOT EXISTS document_chunks (
    id           INTEGER PRIMARY KEY AUTOINCREMENT,
    document_id  INTEGER NOT NULL REFERENCES documents(id) ON DELETE CASCADE,
    chunk_index  INTEGER NOT NULL,
    content      TEXT    NOT NULL,
    embedding    TEXT,
    metadata     TEXT,
    UNIQUE(document_id, chunk_index)
);
""",
    """\
CREATE TABLE IF NOT EXISTS conversations (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id  TEXT    NOT NULL UNIQUE,
    language    TEXT    NOT NULL DEFAULT 'en',
    created_at  TEXT    NOT NULL
);
""",
    """\
CREATE TABLE IF NOT EXISTS messages (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    conversation_id    INTEGER NOT NULL REFERENCES conversations(id) ON DELETE CASCADE,
    role               TEXT    NOT NULL,
    content            TEXT    NOT NULL,
    original_language  TEXT    NOT NULL,
    sources            TEXT,
    timestamp          TEXT    NOT NULL
);
""",
]

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_chunks_document ON document_chunks(document_id, chunk_index);",
    "CREATE INDEX IF NOT EXISTS idx_documents_status ON documents(status);",
    "CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages(conversation_id, timestamp);",
]

_DOCUMENT_COLUMNS = (
    "id, filename, original_name, mime_type, size, status, chunk_count, "
    "error_message, uploaded_at, processed_at"
)


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _row_to_document(row: aiosqlite.Row) -> Document:
    return Document(
        id=row["id"],
        filename=row["filename"],
        original_name=row["original_name"],
        mime_type=row["mime_type"],
        size=row["size"],
        status=DocumentStatus(row["status"]),
        chunk_count=row["chunk_count"],
        error_message=row["error_message"],
        uploaded_at=datetime.fromisoformat(row["uploaded_at"]),
        processed_at=datetime.fromisoformat(row["processed_at"]) if row["processed_at"] else None,
    )


def _row_to_chunk(row: aiosqlite.Row) -> DocumentChunk:
    return DocumentChunk(
        id=row["id"],
        document_id=row["document_id"],
        chunk_index=row["chunk_index"],
        content=row["content"],
        embedding=row["embedding"],
        metadata=json.loads(row["metadata"]) if row["metadata"] else None,
    )


def _row_to_conversation(row: aiosqlite.Row) -> Conversation:
    return Conversation(
        id=row["id"],
        session_id=row["session_id"],
        language=row["language"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _row_to_message(row: aiosqlite.Row) -> Message:
    sources: list[Source] | None = None
    if row["sources"] is not None:
        sources = [Source(**item) for item in json.loads(row["sources"])]
    return Message(
        id=row["id"],
        conversation_id=row["conversation_id"],
        role=MessageRole(row["role"]),
        content=row["content"],
        original_language=row["original_language"],
        sources=sources,
        timestamp=datetime.fromisoformat(row["timestamp"]),
    )


def _dump_json(value: Any) -> str | None:
    return json.dumps(value) if value is not None else None


class SQLiteDocumentStore(IDocumentStore):
    """SQLite-backed document, chunk and conversation persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    def _connect(self) -> aiosqlite.Connection:
        return aiosqlite.connect(str(self._db_path))

    @staticmethod
    async def _prepare(db: aiosqlite.Connection) -> None:
        db.row_factory = aiosqlite.Row
        # Foreign keys are per-connection in SQLite and off by default.
        await db.execute("PRAGMA foreign_keys = ON")

    async def initialize(self) -> None:
        """Create tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connect() as db:
            await self._prepare(db)
            for table_sql in _CREATE_TABLES_SQL:
                await db.execute(table_sql)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("document_db_initialized", path=str(self._db_path))

    # -- Documents ------------------------------------------------------

    async def create_document(self, document: NewDocument) -> Document:
        async with self._connect() as db:
            await self._prepare(db)
            cursor = await db.execute(
                "INSERT INTO documents (filename, original_name, mime_type, size, status, uploaded_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    document.filename,
                    document.original_name,
                    document.mime_type,
                    document.size,
                    DocumentStatus.PROCESSING.value,
                    _utcnow(),
                ),
            )
            await db.commit()
            document_id = cursor.lastrowid
            row = await self._fetch_document(db, document_id)
        logger.debug("document_created", document_id=document_id, filename=document.filename)
        return _row_to_document(row)

    @staticmethod
    async def _fetch_document(db: aiosqlite.Connection, document_id: int) -> aiosqlite.Row | None:
        cursor = await db.execute(
            f"SELECT {_DOCUMENT_COLUMNS} FROM documents WHERE id = ?", (document_id,)
        )
        return await cursor.fetchone()

    async def get_document(self, document_id: int) -> Document | None:
        async with self._connect() as db:
            await self._prepare(db)
            row = await self._fetch_document(db, document_id)
        return _row_to_document(row) if row else None

    async def list_documents(self) -> list[Document]:
        async with self._connect() as db:
            await self._prepare(db)
            cursor = await db.execute(f"SELECT {_DOCUMENT_COLUMNS} FROM documents ORDER BY id")
            rows = await cursor.fetchall()
        return [_row_to_document(r) for r in rows]

    async def list_ready_documents(self) -> list[Document]:
        async with self._connect() as db:
            await self._prepare(db)
            cursor = await db.execute(
                f"SELECT {_DOCUMENT_COLUMNS} FROM documents WHERE status = ? ORDER BY id",
                (DocumentStatus.READY.value,),
            )
            rows = await cursor.fetchall()
        return [_row_to_document(r) for r in rows]

    async def mark_ready(self, document_id: int, chunk_count: int) -> Document:
        return await self._transition(
            document_id,
            "status = ?, chunk_count = ?, processed_at = ?",
            (DocumentStatus.READY.value, chunk_count, _utcnow()),
        )

    async def mark_error(self, document_id: int, error_message: str) -> Document:
        return await self._transition(
            document_id,
            "status = ?, error_message = ?",
            (DocumentStatus.ERROR.value, error_message),
        )

    async def _transition(self, document_id: int, assignments: str, params: tuple) -> Document:
        """Apply *assignments* only while the document is still processing."""
        async with self._connect() as db:
            await self._prepare(db)
            cursor = await db.execute(
                f"UPDATE documents SET {assignments} WHERE id = ? AND status = ?",
                (*params, document_id, DocumentStatus.PROCESSING.value),
            )
            await db.commit()
            updated = cursor.rowcount > 0
            row = await self._fetch_document(db, document_id)
        if row is None:
            raise NotFoundError(f"Document {document_id} not found", provider_name="sqlite")
        if not updated:
            raise InvalidTransitionError(
                f"Document {document_id} is already {row['status']}",
                provider_name="sqlite",
            )
        return _row_to_document(row)

    async def delete_document(self, document_id: int) -> bool:
        async with self._connect() as db:
            await self._prepare(db)
            cursor = await db.execute("DELETE FROM documents WHERE id = ?", (document_id,))
            await db.commit()
            deleted = cursor.rowcount > 0
        if deleted:
            logger.debug("document_deleted", document_id=document_id)
        return deleted

    # -- Chunks ---------------------------------------------------------

    async def create_chunk(self, chunk: NewDocumentChunk) -> DocumentChunk:
        async with self._connect() as db:
            await self._prepare(db)
            # Existence check and insert share one write transaction, so a
            # concurrent delete cannot slip in between and orphan the chunk.
            await db.execute("BEGIN IMMEDIATE")
            if await self._fetch_document(db, chunk.document_id) is None:
                await db.rollback()
                raise NotFoundError(
                    f"Document {chunk.document_id} not found", provider_name="sqlite"
                )
            cursor = await db.execute(
                "INSERT INTO document_chunks (document_id, chunk_index, content, embedding, metadata) "
                "VALUES (?, ?, ?, ?, ?)",
                (
                    chunk.document_id,
                    chunk.chunk_index,
                    chunk.content,
                    chunk.embedding,
                    _dump_json(chunk.metadata),
                ),
            )
            await db.commit()
            chunk_id = cursor.lastrowid
        return DocumentChunk(id=chunk_id, **chunk.model_dump())

    async def get_chunks(self, document_id: int) -> list[DocumentChunk]:
        async with self._connect() as db:
            await self._prepare(db)
            cursor = await db.execute(
                "SELECT id, document_id, chunk_index, content, embedding, metadata "
                "FROM document_chunks WHERE document_id = ? ORDER BY chunk_index",
                (document_id,),
            )
            rows = await cursor.fetchall()
        return [_row_to_chunk(r) for r in rows]

    # -- Conversations --------------------------------------------------

    async def create_conversation(self, session_id: str, language: str) -> Conversation:
        async with self._connect() as db:
            await self._prepare(db)
            await db.execute(
                "INSERT INTO conversations (session_id, language, created_at) VALUES (?, ?, ?) "
                "ON CONFLICT(session_id) DO NOTHING",
                (session_id, language, _utcnow()),
            )
            await db.commit()
            cursor = await db.execute(
                "SELECT id, session_id, language, created_at FROM conversations WHERE session_id = ?",
                (session_id,),
            )
            row = await cursor.fetchone()
        return _row_to_conversation(row)

    async def get_conversation(self, session_id: str) -> Conversation | None:
        async with self._connect() as db:
            await self._prepare(db)
            cursor = await db.execute(
                "SELECT id, session_id, language, created_at FROM conversations WHERE session_id = ?",
                (session_id,),
            )
            row = await cursor.fetchone()
        return _row_to_conversation(row) if row else None

    async def create_message(self, message: NewMessage) -> Message:
        sources = (
            [s.model_dump() for s in message.sources] if message.sources is not None else None
        )
        timestamp = _utcnow()
        async with self._connect() as db:
            await self._prepare(db)
            try:
                cursor = await db.execute(
                    "INSERT INTO messages "
                    "(conversation_id, role, content, original_language, sources, timestamp) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        message.conversation_id,
                        message.role.value,
                        message.content,
                        message.original_language,
                        _dump_json(sources),
                        timestamp,
                    ),
                )
            except aiosqlite.IntegrityError as exc:
                raise NotFoundError(
                    f"Conversation {message.conversation_id} not found",
                    provider_name="sqlite",
                ) from exc
            await db.commit()
            message_id = cursor.lastrowid
        return Message(
            id=message_id,
            timestamp=datetime.fromisoformat(timestamp),
            **message.model_dump(),
        )

    async def get_messages(self, conversation_id: int) -> list[Message]:
        async with self._connect() as db:
            await self._prepare(db)
            cursor = await db.execute(
                "SELECT id, conversation_id, role, content, original_language, sources, timestamp "
                "FROM messages WHERE conversation_id = ? ORDER BY timestamp, id",
                (conversation_id,),
            )
            rows = await cursor.fetchall()
        return [_row_to_message(r) for r in rows]

    def get_provider_name(self) -> str:
        return "sqlite"
