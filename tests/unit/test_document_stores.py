"""Contract tests run against both document store backends (memory, SQLite)."""

from __future__ import annotations

from pathlib import Path

import pytest

from policy_advisor.interfaces.document_store import IDocumentStore
from policy_advisor.models.conversation import MessageRole, NewMessage, Source
from policy_advisor.models.document import DocumentStatus, NewDocument, NewDocumentChunk
from policy_advisor.providers.storage.memory_document_store import MemoryDocumentStore
from policy_advisor.providers.storage.sqlite_document_store import SQLiteDocumentStore
from policy_advisor.utils.errors import InvalidTransitionError, NotFoundError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _open_store(backend: str, tmp_path: Path) -> IDocumentStore:
    store: IDocumentStore
    if backend == "memory":
        store = MemoryDocumentStore()
    else:
        store = SQLiteDocumentStore(tmp_path / "nested" / "policy.db")
    await store.initialize()
    return store


def _new_document(name: str = "handbook.txt") -> NewDocument:
    return NewDocument(
        filename=f"1700000000000-{name}",
        original_name=name,
        mime_type="text/plain",
        size=1234,
    )


def _new_chunk(document_id: int, index: int) -> NewDocumentChunk:
    return NewDocumentChunk(
        document_id=document_id,
        chunk_index=index,
        content=f"chunk {index}",
        embedding="[0.1, 0.2]",
        metadata={"page": index // 3 + 1, "section": index},
    )


@pytest.fixture(params=["memory", "sqlite"])
def backend(request: pytest.FixtureRequest) -> str:
    return request.param


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


class TestDocuments:
    @pytest.mark.asyncio
    async def test_create_starts_processing(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        document = await store.create_document(_new_document())

        assert document.status is DocumentStatus.PROCESSING
        assert document.chunk_count is None
        assert document.processed_at is None
        assert document.original_name == "handbook.txt"
        assert await store.get_document(document.id) == document

    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        assert await store.get_document(999) is None

    @pytest.mark.asyncio
    async def test_ids_are_unique_and_listed_in_order(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        first = await store.create_document(_new_document("a.txt"))
        second = await store.create_document(_new_document("b.txt"))

        assert first.id != second.id
        assert [d.id for d in await store.list_documents()] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_mark_ready(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        document = await store.create_document(_new_document())

        ready = await store.mark_ready(document.id, 3)

        assert ready.status is DocumentStatus.READY
        assert ready.chunk_count == 3
        assert ready.processed_at is not None
        assert [d.id for d in await store.list_ready_documents()] == [document.id]

    @pytest.mark.asyncio
    async def test_mark_error(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        document = await store.create_document(_new_document())

        failed = await store.mark_error(document.id, "could not read file")

        assert failed.status is DocumentStatus.ERROR
        assert failed.error_message == "could not read file"
        assert await store.list_ready_documents() == []

    @pytest.mark.asyncio
    async def test_terminal_status_cannot_change(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        document = await store.create_document(_new_document())
        await store.mark_ready(document.id, 1)

        with pytest.raises(InvalidTransitionError):
            await store.mark_error(document.id, "late failure")
        with pytest.raises(InvalidTransitionError):
            await store.mark_ready(document.id, 2)

        current = await store.get_document(document.id)
        assert current.status is DocumentStatus.READY
        assert current.chunk_count == 1

    @pytest.mark.asyncio
    async def test_transition_of_missing_document(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        with pytest.raises(NotFoundError):
            await store.mark_ready(42, 1)
        with pytest.raises(NotFoundError):
            await store.mark_error(42, "gone")

    @pytest.mark.asyncio
    async def test_delete_cascades_to_chunks(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        document = await store.create_document(_new_document())
        for index in range(3):
            await store.create_chunk(_new_chunk(document.id, index))

        assert await store.delete_document(document.id) is True

        assert await store.get_document(document.id) is None
        assert await store.get_chunks(document.id) == []
        assert await store.delete_document(document.id) is False


# ---------------------------------------------------------------------------
# Chunks
# ---------------------------------------------------------------------------


class TestChunks:
    @pytest.mark.asyncio
    async def test_chunks_round_trip_in_index_order(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        document = await store.create_document(_new_document())
        for index in (0, 1, 2):
            await store.create_chunk(_new_chunk(document.id, index))

        chunks = await store.get_chunks(document.id)

        assert [c.chunk_index for c in chunks] == [0, 1, 2]
        assert chunks[2].metadata == {"page": 1, "section": 2}
        assert chunks[0].embedding == "[0.1, 0.2]"

    @pytest.mark.asyncio
    async def test_chunk_for_missing_document(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        with pytest.raises(NotFoundError):
            await store.create_chunk(_new_chunk(77, 0))


# ---------------------------------------------------------------------------
# Conversations and messages
# ---------------------------------------------------------------------------


class TestConversations:
    @pytest.mark.asyncio
    async def test_create_is_idempotent_per_session(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        first = await store.create_conversation("session-1", "es")
        again = await store.create_conversation("session-1", "fr")

        assert again.id == first.id
        assert again.language == "es"
        assert await store.get_conversation("session-1") == first
        assert await store.get_conversation("unknown") is None

    @pytest.mark.asyncio
    async def test_messages_in_chronological_order(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        conversation = await store.create_conversation("session-2", "en")
        source = Source(
            document_id=1,
            document_name="handbook.txt",
            chunk_index=0,
            similarity=0.87,
            metadata={"page": 1, "section": 0},
        )

        await store.create_message(
            NewMessage(
                conversation_id=conversation.id,
                role=MessageRole.USER,
                content="How many vacation days?",
                original_language="en",
            )
        )
        await store.create_message(
            NewMessage(
                conversation_id=conversation.id,
                role=MessageRole.ASSISTANT,
                content="25 days.",
                original_language="en",
                sources=[source],
            )
        )

        messages = await store.get_messages(conversation.id)

        assert [m.role for m in messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert messages[0].sources is None
        assert messages[1].sources == [source]
        assert messages[0].timestamp <= messages[1].timestamp

    @pytest.mark.asyncio
    async def test_message_for_missing_conversation(self, backend: str, tmp_path: Path) -> None:
        store = await _open_store(backend, tmp_path)
        with pytest.raises(NotFoundError):
            await store.create_message(
                NewMessage(
                    conversation_id=404,
                    role=MessageRole.USER,
                    content="hello",
                    original_language="en",
                )
            )


class TestProviderNames:
    def test_names(self, tmp_path: Path) -> None:
        assert MemoryDocumentStore().get_provider_name() == "memory"
        assert SQLiteDocumentStore(tmp_path / "x.db").get_provider_name() == "sqlite"


class TestSQLitePersistence:
    @pytest.mark.asyncio
    async def test_data_survives_reopen(self, tmp_path: Path) -> None:
        path = tmp_path / "persist.db"
        store = SQLiteDocumentStore(path)
        await store.initialize()
        document = await store.create_document(_new_document())
        await store.create_chunk(_new_chunk(document.id, 0))
        await store.mark_ready(document.id, 1)

        reopened = SQLiteDocumentStore(path)
        await reopened.initialize()

        restored = await reopened.get_document(document.id)
        assert restored.status is DocumentStatus.READY
        assert len(await reopened.get_chunks(document.id)) == 1
