"""Abstract base class for turning uploaded bytes into plain text.

One implementation per supported format family (plain text, PDF, Word).
The ingestion pipeline selects an extractor by MIME type through
:class:`~policy_advisor.providers.extraction.TextExtractorRegistry`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: PlainTextExtractor, PDFTextExtractor, WordTextExtractor
# Located in: policy_advisor/providers/extraction/
class ITextExtractor(ABC):
    """Contract for format-specific text extraction."""

    @abstractmethod
    def supports(self, mime_type: str) -> bool:
        """Return ``True`` if this extractor handles *mime_type*."""

    @abstractmethod
    async def extract(self, data: bytes, mime_type: str) -> str:
        """Return the text content of *data*.

        Raises
        ------
        policy_advisor.utils.errors.ExtractionError
            If the bytes cannot be read as this format.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"plain-text"``."""
