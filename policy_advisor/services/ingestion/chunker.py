"""Text chunking with overlapping character windows.

Splits extracted document text into windows of at most ``chunk_size``
characters, each sharing ``overlap`` characters with the previous one so a
sentence that straddles a boundary is fully contained in at least one
chunk.

Where possible a window is cut just after the last sentence terminator
(``.``) or newline inside it, so chunks tend to end on a full sentence.
A breakpoint in the first half of the window is ignored: cutting there
would produce a chunk much shorter than the window size.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(logger_name=__name__)

_BREAK_CHARS = (".", "\n")


class TextChunker:
    """Splits text into overlapping, trimmed, non-empty chunks.

    Parameters
    ----------
    chunk_size:
        Maximum characters per window (default 1000).
    overlap:
        Characters shared by consecutive windows (default 200).  Must
        satisfy ``0 <= overlap < chunk_size``.

    Raises
    ------
    ValueError
        If ``chunk_size`` or ``overlap`` is out of range.
    """

    def __init__(self, chunk_size: int = 1000, overlap: int = 200) -> None:
        self._validate(chunk_size, overlap)
        self._chunk_size = chunk_size
        self._overlap = overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def overlap(self) -> int:
        return self._overlap

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def chunk(
        self,
        text: str,
        chunk_size: int | None = None,
        overlap: int | None = None,
    ) -> list[str]:
        """Split *text* into overlapping windows.

        Parameters
        ----------
        text:
            The full text to chunk.
        chunk_size, overlap:
            Per-call overrides of the constructor values.

        Returns
        -------
        list[str]
            Chunks in text order, each stripped of surrounding whitespace.
            Empty or whitespace-only input returns an empty list.
        """
        size = self._chunk_size if chunk_size is None else chunk_size
        step_back = self._overlap if overlap is None else overlap
        self._validate(size, step_back)

        chunks: list[str] = []
        start = 0
        length = len(text)
        while start < length:
            end = min(start + size, length)
            if end >= length:
                chunks.append(text[start:].strip())
                break

            breakpoint_ = max(text.rfind(ch, start, end) for ch in _BREAK_CHARS)
            if breakpoint_ > start + size * 0.5:
                chunks.append(text[start : breakpoint_ + 1].strip())
                next_start = breakpoint_ + 1 - step_back
            else:
                chunks.append(text[start:end].strip())
                next_start = end - step_back

            # A large overlap after an early breakpoint could move the window
            # backwards; fall back to the raw boundary so the scan progresses.
            if next_start <= start:
                next_start = end - step_back
            start = next_start

        result = [c for c in chunks if c]
        logger.debug(
            "chunking_complete",
            num_chunks=len(result),
            text_length=length,
            chunk_size=size,
            overlap=step_back,
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate(chunk_size: int, overlap: int) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        if overlap < 0 or overlap >= chunk_size:
            raise ValueError(
                f"overlap must satisfy 0 <= overlap < chunk_size, got {overlap} (chunk_size={chunk_size})"
            )
