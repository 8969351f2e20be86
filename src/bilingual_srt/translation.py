"""
Chunk translation through the OpenAI Responses API, with per-attempt
timeouts and exponential backoff between retries.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from openai import AsyncOpenAI

from .config import TranslatorConfig
from .errors import ConfigurationError, ResponseParseError
from .models import TranslationAttempt

logger = logging.getLogger("bilingual_srt")

AI_PROMPT = """This is a partial subtitle file. Convert it into a bilingual version (English + Chinese).

Keep all English lines exactly as they are.
Add the Chinese translation directly under each English line.
For translation, you don't need to follow the English line breaks rigidly - merge or split as needed so the Chinese reads naturally.
The timing does not need to match every English phrase precisely; prioritize accurate and coherent meaning.
Reply ONLY with the updated subtitle file content. No explanations, no greetings."""


def build_prompt(chunk_text: str) -> str:
    return f"{AI_PROMPT}\n\n{chunk_text}"


def attempt_timeout(attempt: int, base_seconds: float) -> float:
    """Timeout budget for a 1-based attempt: 1x, 2x, 3x ... the base."""
    return base_seconds * attempt


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Delay after a failed 1-based attempt: 1s, 2s, 4s ..."""
    return base_delay * 2 ** (attempt - 1)


def _field(obj: Any, name: str) -> Any:
    """Read ``name`` from an SDK model or a plain dict."""
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _fragment_text(fragment: Any) -> str:
    if isinstance(fragment, str):
        return fragment
    text = _field(fragment, "text")
    return text if isinstance(text, str) else ""


def extract_output_text(response: Any) -> Optional[str]:
    """Responses API convenience field with all output text concatenated."""
    text = _field(response, "output_text")
    return text if isinstance(text, str) else None


def extract_output_items(response: Any) -> Optional[str]:
    """Responses API ``output`` items, each with a list of content fragments."""
    items = _field(response, "output")
    if not isinstance(items, list):
        return None
    pieces: list[str] = []
    for item in items:
        if isinstance(item, str):
            pieces.append(item)
            continue
        content = _field(item, "content")
        # reasoning items carry no content
        if isinstance(content, list):
            pieces.extend(_fragment_text(c) for c in content)
    return "".join(pieces) or None


def extract_choices(response: Any) -> Optional[str]:
    """Legacy chat-completions shape: ``choices[0].message.content``."""
    choices = _field(response, "choices")
    if not choices:
        return None
    message = _field(choices[0], "message")
    if isinstance(message, str):
        return message
    content = _field(message, "content") if message is not None else None
    if isinstance(content, list):
        return "".join(_fragment_text(c) for c in content)
    return content if isinstance(content, str) else None


RESPONSE_EXTRACTORS: tuple[Callable[[Any], Optional[str]], ...] = (
    extract_output_text,
    extract_output_items,
    extract_choices,
)


def extract_text(response: Any) -> str:
    """Return text from the first extractor that finds any, else raise."""
    for extractor in RESPONSE_EXTRACTORS:
        text = extractor(response)
        if text and text.strip():
            return text
    raise ResponseParseError("Invalid response format from OpenAI. No text found.")


def create_client(config: TranslatorConfig) -> AsyncOpenAI:
    """Async OpenAI client with SDK-level retries disabled (we retry ourselves)."""
    return AsyncOpenAI(api_key=config.require_api_key(), max_retries=0)


def _preview(chunk_text: str, limit: int = 120) -> str:
    lines = [ln for ln in chunk_text.splitlines() if ln.strip()]
    if not lines:
        return ""
    # lines[1] is the timestamp of the first block; lines[0] is its index
    return (lines[1] if len(lines) > 1 else lines[0])[:limit]


async def translate_chunk(
    client: AsyncOpenAI,
    chunk_text: str,
    config: TranslatorConfig,
    *,
    max_retries: int | None = None,
    chunk_index: int = 0,
    attempts: list[TranslationAttempt] | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> str:
    """
    Translate one chunk, retrying on any failure.

    Each attempt is cancelled once its timeout (base * attempt number)
    elapses. Between failed attempts we wait ``backoff_delay(attempt)``.
    When every attempt fails the last error is re-raised.

    Args:
        client: AsyncOpenAI client (or anything with ``responses.create``)
        chunk_text: Blocks of the chunk joined by blank lines
        config: Model, base timeout and retry settings
        max_retries: Total number of attempts (defaults to config.max_retries)
        chunk_index: Used for logging and attempt records only
        attempts: Optional list that receives one record per attempt
        sleep: Awaitable used for backoff waits

    Returns:
        Raw response text, not trimmed
    """
    config.require_api_key()
    if client is None:
        raise ConfigurationError("OpenAI client is not initialized (missing OPENAI_API_KEY)")

    total = config.max_retries if max_retries is None else max_retries
    if total < 1:
        raise ValueError(f"max_retries must be >= 1, got {total}")

    preview = _preview(chunk_text)
    for attempt in range(1, total + 1):
        record = TranslationAttempt(
            chunk_index=chunk_index,
            attempt=attempt,
            timeout=attempt_timeout(attempt, config.timeout_seconds),
        )
        if attempts is not None:
            attempts.append(record)

        logger.info(
            f"  - Calling OpenAI ({config.model}) for chunk preview: \"{preview}...\" "
            f"(Attempt {attempt}, timeout {record.timeout:g}s)"
        )
        try:
            response = await asyncio.wait_for(
                client.responses.create(model=config.model, input=build_prompt(chunk_text)),
                timeout=record.timeout,
            )
            text = extract_text(response)
        except Exception as e:
            record.outcome = "failed"
            record.error = str(e) or type(e).__name__
            logger.warning(f"  - Attempt {attempt} failed: {record.error}")
            if isinstance(e, asyncio.TimeoutError):
                logger.warning(
                    f"    The request was cancelled after {record.timeout:g}s. "
                    "Increase OPENAI_TIMEOUT_MS or reduce chunk size if this recurs."
                )
            status = getattr(e, "status_code", None)
            if status is not None:
                logger.warning(f"    Remote returned HTTP {status}")
            logger.debug("    Error details", exc_info=e)

            if attempt < total:
                delay = backoff_delay(attempt, config.backoff_base)
                logger.info(f"  - Retrying in {delay:g}s...")
                await sleep(delay)
                continue
            logger.error(f"  - All {total} attempts failed for this chunk.")
            raise

        record.outcome = "success"
        return text

    # unreachable: the loop either returns or re-raises
    raise RuntimeError("Failed to get translation after all retries.")
