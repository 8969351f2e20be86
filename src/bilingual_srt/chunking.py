"""
Grouping subtitle blocks into chunks for translation requests.
"""

import logging

from .models import Chunk

logger = logging.getLogger("bilingual_srt")


def build_chunks(blocks: list[str], min_blocks: int = 50) -> list[Chunk]:
    """
    Pack blocks into consecutive chunks of ``min_blocks`` each.

    A short trailing run is merged into the chunk before it, so every chunk
    holds at least ``min_blocks`` blocks. The only exception is a file with
    fewer blocks than that, which yields a single smaller chunk.
    """
    if min_blocks < 1:
        raise ValueError(f"min_blocks must be >= 1, got {min_blocks}")

    runs: list[list[str]] = [
        list(blocks[i : i + min_blocks]) for i in range(0, len(blocks), min_blocks)
    ]
    if len(runs) > 1 and len(runs[-1]) < min_blocks:
        tail = runs.pop()
        logger.debug(f"Merging trailing run of {len(tail)} blocks into the previous chunk")
        runs[-1].extend(tail)

    return [Chunk(index=i, blocks=tuple(run)) for i, run in enumerate(runs)]
