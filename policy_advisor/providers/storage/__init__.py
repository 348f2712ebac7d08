"""Document store implementations.

Two implementations of IDocumentStore:
    - MemoryDocumentStore — dicts guarded by one asyncio.Lock (default).
    - SQLiteDocumentStore — aiosqlite, survives restarts.

main.py picks one from ``STORAGE_BACKEND`` ("memory" | "sqlite").
"""

from policy_advisor.providers.storage.memory_document_store import MemoryDocumentStore
from policy_advisor.providers.storage.sqlite_document_store import SQLiteDocumentStore

__all__ = ["MemoryDocumentStore", "SQLiteDocumentStore"]
