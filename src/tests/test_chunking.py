"""
Tests for chunk building.
"""

import pytest

from bilingual_srt.chunking import build_chunks


def _blocks(n: int) -> list[str]:
    return [f"{i}\n00:00:00,000 --> 00:00:01,000\nline {i}" for i in range(1, n + 1)]


def _flatten(chunks) -> list[str]:
    return [b for c in chunks for b in c.blocks]


@pytest.mark.parametrize("n", [1, 49, 50, 51, 99, 100, 101, 149, 150, 237])
def test_chunks_partition_blocks(n):
    """Chunks keep every block exactly once, in source order, and respect the minimum."""
    blocks = _blocks(n)
    chunks = build_chunks(blocks, 50)

    assert _flatten(chunks) == blocks
    assert [c.index for c in chunks] == list(range(len(chunks)))
    if len(chunks) > 1:
        assert all(c.size >= 50 for c in chunks)


def test_exact_minimum_gives_one_chunk():
    chunks = build_chunks(_blocks(50), 50)
    assert [c.size for c in chunks] == [50]


def test_undersized_tail_is_merged():
    """2M - 1 blocks become one chunk, not M and M - 1."""
    chunks = build_chunks(_blocks(99), 50)
    assert [c.size for c in chunks] == [99]


def test_120_blocks():
    """Runs of 50, 50, 20 -> the trailing 20 joins the second chunk."""
    chunks = build_chunks(_blocks(120), 50)
    assert [c.size for c in chunks] == [50, 70]


def test_small_file_single_chunk():
    """Fewer blocks than the minimum still yields one chunk."""
    chunks = build_chunks(_blocks(7), 50)
    assert [c.size for c in chunks] == [7]


def test_empty_and_invalid():
    assert build_chunks([], 50) == []
    with pytest.raises(ValueError):
        build_chunks(_blocks(3), 0)


def test_chunk_text_joins_blocks_with_blank_line():
    chunks = build_chunks(["a\nb", "c"], 5)
    assert chunks[0].text == "a\nb\n\nc"
