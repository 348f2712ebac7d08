"""Document ingestion pipeline for the policy knowledge base.

Orchestrates the full pipeline: **extract -> chunk -> embed -> store -> publish**.

1. **Extract** (providers/extraction/) -- a TextExtractor chosen by MIME type
   turns the uploaded bytes into text.

2. **Chunk** (chunker.py / TextChunker) -- splits the text into ~1000-character
   overlapping windows, preferring to cut after a sentence or line end.

3. **Embed** (via IEmbeddingProvider) -- one vector per chunk, computed
   concurrently under a semaphore.

4. **Store** (via IVectorStoreProvider) -- chunks persisted in order with
   contiguous chunk indices.

5. **Publish** -- the Document moves to READY, which makes its chunks
   visible to search.  Any failure moves it to ERROR instead.
"""

from policy_advisor.services.ingestion.chunker import TextChunker
from policy_advisor.services.ingestion.ingestion_service import (
    ACCEPTED_MIME_TYPES,
    IngestionService,
)

__all__ = [
    "ACCEPTED_MIME_TYPES",
    "IngestionService",
    "TextChunker",
]
