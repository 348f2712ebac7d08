"""MIME-type lookup over the registered text extractors."""

from __future__ import annotations

from policy_advisor.interfaces.text_extractor import ITextExtractor
from policy_advisor.providers.extraction.placeholder_extractors import (
    PDFTextExtractor,
    WordTextExtractor,
)
from policy_advisor.providers.extraction.plain_text_extractor import PlainTextExtractor
from policy_advisor.utils.errors import ExtractionError


class TextExtractorRegistry:
    """Ordered list of extractors; the first one supporting a MIME type wins."""

    def __init__(self, extractors: list[ITextExtractor] | None = None) -> None:
        self._extractors: list[ITextExtractor] = (
            list(extractors)
            if extractors is not None
            else [PlainTextExtractor(), PDFTextExtractor(), WordTextExtractor()]
        )

    def for_mime_type(self, mime_type: str) -> ITextExtractor:
        """Return the extractor for *mime_type*.

        Raises
        ------
        ExtractionError
            If no registered extractor supports *mime_type*.
        """
        for extractor in self._extractors:
            if extractor.supports(mime_type):
                return extractor
        raise ExtractionError(f"No text extractor for MIME type '{mime_type}'")

    async def extract(self, data: bytes, mime_type: str) -> str:
        return await self.for_mime_type(mime_type).extract(data, mime_type)
