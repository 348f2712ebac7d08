"""Plain-text extractor: decodes uploaded bytes as UTF-8."""

from __future__ import annotations

from policy_advisor.interfaces.text_extractor import ITextExtractor
from policy_advisor.utils.errors import ExtractionError

_TEXT_MIME_TYPES = frozenset({"text/plain", "text/markdown"})


class PlainTextExtractor(ITextExtractor):
    """Strict UTF-8 decoding; a leading byte-order mark is dropped."""

    def supports(self, mime_type: str) -> bool:
        return mime_type in _TEXT_MIME_TYPES

    async def extract(self, data: bytes, mime_type: str) -> str:
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ExtractionError(
                message=f"Document is not valid UTF-8 text (byte {exc.start})",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "plain-text"
