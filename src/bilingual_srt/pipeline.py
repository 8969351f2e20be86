"""
Pipeline orchestration: split, chunk, translate, reassemble, write.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path

from openai import AsyncOpenAI
from tqdm.asyncio import tqdm

from .chunking import build_chunks
from .config import TranslatorConfig
from .errors import ConfigurationError
from .models import Chunk, PipelineResult
from .srt_utils import derive_output_path, read_subtitle_text, split_blocks, write_output
from .translation import create_client, translate_chunk

logger = logging.getLogger("bilingual_srt")

TranslateFunc = Callable[[Chunk], Awaitable[str]]


def _log_dropped(chunk: Chunk, total: int, error: Exception) -> None:
    logger.error(f"--- FAILED TO PROCESS CHUNK {chunk.index + 1} of {total} ---")
    logger.error(f"This chunk had {chunk.size} blocks ({error}).")
    logger.error("This chunk will be skipped. The final file may be incomplete.")


async def _translate_sequential(
    chunks: list[Chunk], translate: TranslateFunc, result: PipelineResult
) -> None:
    for chunk in chunks:
        logger.info(
            f"- Processing chunk {chunk.index + 1} of {len(chunks)} (contains {chunk.size} blocks)"
        )
        try:
            translated = await translate(chunk)
        except ConfigurationError:
            raise
        except Exception as e:
            _log_dropped(chunk, len(chunks), e)
            result.dropped.append(chunk.index)
            continue
        result.parts.append(translated.strip())


async def _translate_concurrent(
    chunks: list[Chunk], translate: TranslateFunc, result: PipelineResult, max_concurrent: int
) -> None:
    """Bounded fan-out; results land in per-chunk slots and are merged in order."""
    semaphore = asyncio.Semaphore(max_concurrent)
    slots: list[str | None] = [None] * len(chunks)

    async def process_single(pos: int, chunk: Chunk) -> None:
        async with semaphore:
            logger.info(
                f"- Processing chunk {chunk.index + 1} of {len(chunks)} "
                f"(contains {chunk.size} blocks)"
            )
            try:
                slots[pos] = (await translate(chunk)).strip()
            except ConfigurationError:
                raise
            except Exception as e:
                _log_dropped(chunk, len(chunks), e)

    tasks = [asyncio.ensure_future(process_single(pos, c)) for pos, c in enumerate(chunks)]
    try:
        for done in tqdm.as_completed(tasks, desc="Translating chunks"):
            await done
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    for chunk, text in zip(chunks, slots):
        if text is None:
            result.dropped.append(chunk.index)
        else:
            result.parts.append(text)


async def translate_chunks(
    chunks: list[Chunk], translate: TranslateFunc, *, max_concurrent: int = 1
) -> PipelineResult:
    """
    Translate every chunk and collect the successful outputs in source order.

    A chunk whose translation raises is logged and dropped; the run keeps
    going. With ``max_concurrent == 1`` the next chunk is only dispatched
    once the previous one has finished.
    """
    result = PipelineResult(total_chunks=len(chunks))
    if max_concurrent <= 1:
        await _translate_sequential(chunks, translate, result)
    else:
        await _translate_concurrent(chunks, translate, result, max_concurrent)
    return result


async def run_pipeline(
    config: TranslatorConfig,
    input_path: str | Path,
    *,
    client: AsyncOpenAI | None = None,
) -> Path:
    """Translate a subtitle file end to end and return the output path."""
    config.require_api_key()
    if client is None:
        client = create_client(config)

    logger.info(f"1. Reading SRT file from: {input_path}")
    raw = read_subtitle_text(input_path)

    blocks = split_blocks(raw)
    logger.info(f"2. Sliced the file into {len(blocks)} blocks.")

    chunks = build_chunks(blocks, config.min_blocks_per_chunk)
    logger.info(
        f"3. Prepared {len(chunks)} chunk(s) for translation "
        f"(each >= {config.min_blocks_per_chunk} blocks where possible)."
    )

    async def translate(chunk: Chunk) -> str:
        return await translate_chunk(client, chunk.text, config, chunk_index=chunk.index)

    result = await translate_chunks(chunks, translate, max_concurrent=config.max_concurrent)

    output_path = derive_output_path(input_path, config.language_tag)
    logger.info(f"4. All blocks processed. Writing bilingual SRT to: {output_path}")
    write_output(output_path, result.text)

    if not result.complete:
        dropped = ", ".join(str(i + 1) for i in result.dropped)
        logger.warning(
            f"{len(result.dropped)} of {result.total_chunks} chunk(s) were dropped "
            f"(chunk {dropped}); the output is incomplete."
        )
    return output_path
