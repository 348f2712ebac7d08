"""Unit tests for the TextChunker: overlapping, sentence-aware text windows."""

from __future__ import annotations

import pytest

from policy_advisor.services.ingestion.chunker import TextChunker


def _make_chunker(chunk_size: int = 1000, overlap: int = 200) -> TextChunker:
    return TextChunker(chunk_size=chunk_size, overlap=overlap)


class TestBasicChunking:
    def test_short_text_is_single_chunk(self) -> None:
        chunks = _make_chunker().chunk("Annual leave is 25 days.")
        assert chunks == ["Annual leave is 25 days."]

    def test_empty_and_whitespace_text(self) -> None:
        chunker = _make_chunker()
        assert chunker.chunk("") == []
        assert chunker.chunk("   \n\t  ") == []

    def test_policy_text_produces_three_chunks(self, sample_policy_text: str) -> None:
        chunks = _make_chunker().chunk(sample_policy_text)
        assert len(chunks) == 3

    def test_chunks_respect_size_limit(self, sample_policy_text: str) -> None:
        for chunk in _make_chunker(chunk_size=300, overlap=50).chunk(sample_policy_text):
            assert 0 < len(chunk) <= 300

    def test_chunk_count_decreases_with_larger_size(self, sample_policy_text: str) -> None:
        small = _make_chunker(chunk_size=200, overlap=20).chunk(sample_policy_text)
        large = _make_chunker(chunk_size=1000, overlap=100).chunk(sample_policy_text)
        assert len(small) > len(large)


class TestBreakpoints:
    def test_cuts_after_sentence_terminator(self, sample_policy_text: str) -> None:
        chunks = _make_chunker().chunk(sample_policy_text)
        for chunk in chunks[:-1]:
            assert chunk.endswith(".")

    def test_cuts_at_newline(self) -> None:
        text = ("x" * 70 + "\n") * 3
        chunks = _make_chunker(chunk_size=100, overlap=10).chunk(text)
        assert chunks[0] == "x" * 70

    def test_early_breakpoint_is_ignored(self) -> None:
        # Only terminator sits in the first half of the window.
        text = "Short. " + "y" * 300
        chunks = _make_chunker(chunk_size=100, overlap=10).chunk(text)
        assert len(chunks[0]) == 100

    def test_text_without_breakpoints_uses_fixed_windows(self) -> None:
        text = "z" * 250
        chunks = _make_chunker(chunk_size=100, overlap=20).chunk(text)
        assert [len(c) for c in chunks] == [100, 100, 90]


class TestOverlap:
    def test_consecutive_chunks_share_text(self, sample_policy_text: str) -> None:
        chunks = _make_chunker(chunk_size=400, overlap=100).chunk(sample_policy_text)
        for previous, current in zip(chunks, chunks[1:]):
            tail = previous[-40:]
            assert tail in current

    def test_every_sentence_is_covered(self, sample_policy_text: str) -> None:
        chunks = _make_chunker(chunk_size=300, overlap=100).chunk(sample_policy_text)
        joined = " ".join(chunks)
        assert "Employees must submit remote work requests" in joined
        assert chunks[-1].endswith("in advance.")

    def test_per_call_overrides(self, sample_policy_text: str) -> None:
        chunker = _make_chunker()
        assert len(chunker.chunk(sample_policy_text, chunk_size=200, overlap=0)) > 3


def _reassemble(chunks: list[str], overlap: int) -> str:
    return chunks[0] + "".join(chunk[overlap:] for chunk in chunks[1:])


class TestReconstruction:
    def test_raw_windows_rebuild_text(self) -> None:
        text = "z" * 2500
        chunks = _make_chunker(chunk_size=1000, overlap=200).chunk(text)

        assert [len(c) for c in chunks] == [1000, 1000, 900]
        assert _reassemble(chunks, 200) == text

    def test_sentence_windows_rebuild_text(self) -> None:
        # 70-char sentences; every window start lands on a letter, so trimming
        # removes nothing and the spaces inside sentences survive.
        sentence = ("Policy text " * 7)[:69] + "."
        text = sentence * 36
        chunks = _make_chunker(chunk_size=1000, overlap=200).chunk(text)

        assert len(chunks) == 3
        assert len(chunks[0]) == 980
        assert all(c.endswith(".") for c in chunks)
        assert _reassemble(chunks, 200) == text


class TestValidation:
    @pytest.mark.parametrize(
        ("chunk_size", "overlap"),
        [(0, 0), (-5, 0), (100, 100), (100, 150), (100, -1)],
    )
    def test_invalid_configuration_rejected(self, chunk_size: int, overlap: int) -> None:
        with pytest.raises(ValueError):
            TextChunker(chunk_size=chunk_size, overlap=overlap)

    def test_invalid_override_rejected(self) -> None:
        with pytest.raises(ValueError):
            _make_chunker().chunk("text", chunk_size=50, overlap=60)

    def test_properties(self) -> None:
        chunker = _make_chunker(chunk_size=500, overlap=50)
        assert chunker.chunk_size == 500
        assert chunker.overlap == 50
