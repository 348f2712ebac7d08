"""Vector store provider implementations.

LinearScanVectorStore is the sole implementation: exact cosine similarity
over every chunk of every READY document, with vectors persisted on the
chunk rows of the document store.

To swap in an approximate nearest-neighbour index, create a new class
implementing IVectorStoreProvider and register it in main.py.
"""

from policy_advisor.providers.vector_store.linear_scan_provider import LinearScanVectorStore

__all__ = ["LinearScanVectorStore"]
