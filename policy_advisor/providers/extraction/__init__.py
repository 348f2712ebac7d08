"""Text extractor implementations and the MIME-type registry.

    - PlainTextExtractor — strict UTF-8 decode (text/plain, text/markdown)
    - PDFTextExtractor   — placeholder, returns a fixed sample policy
    - WordTextExtractor  — placeholder, returns a fixed sample policy

The PDF and Word variants are extension points: a real parser can replace
either one behind ITextExtractor without touching the ingestion pipeline.
"""

from policy_advisor.providers.extraction.placeholder_extractors import (
    PDFTextExtractor,
    WordTextExtractor,
)
from policy_advisor.providers.extraction.plain_text_extractor import PlainTextExtractor
from policy_advisor.providers.extraction.registry import TextExtractorRegistry

__all__ = [
    "PDFTextExtractor",
    "PlainTextExtractor",
    "TextExtractorRegistry",
    "WordTextExtractor",
]
