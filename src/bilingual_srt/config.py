"""
Runtime configuration, read once from the environment at startup.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigurationError

logger = logging.getLogger("bilingual_srt")

DEFAULT_MODEL = "gpt-5-mini-2025-08-07"
DEFAULT_TIMEOUT_MS = 240_000  # 4 minutes per attempt (1x, 2x, 3x on retries)
DEFAULT_MIN_BLOCKS_PER_CHUNK = 50
DEFAULT_MAX_RETRIES = 3
DEFAULT_MAX_CONCURRENT = 1
DEFAULT_LANGUAGE_TAG = "zh-CN"


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = (env.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default
    if value < 1:
        logger.warning(f"Ignoring {name}={raw!r}: must be positive, using {default}")
        return default
    return value


@dataclass(frozen=True)
class TranslatorConfig:
    """
    Settings shared by the translation client and the pipeline.

    Built once in the CLI and passed down explicitly; nothing below the CLI
    reads the environment.
    """

    api_key: str = ""
    model: str = DEFAULT_MODEL
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    min_blocks_per_chunk: int = DEFAULT_MIN_BLOCKS_PER_CHUNK
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_base: float = 1.0  # seconds
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    language_tag: str = DEFAULT_LANGUAGE_TAG

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TranslatorConfig":
        """
        Build a config from environment variables.

        Recognized: OPENAI_API_KEY (or OPENAI_KEY), OPENAI_MODEL,
        OPENAI_TIMEOUT_MS, MIN_BLOCKS_PER_CHUNK, MAX_RETRIES, MAX_CONCURRENT,
        OUTPUT_LANGUAGE_TAG.
        """
        env = os.environ if environ is None else environ
        api_key = (env.get("OPENAI_API_KEY") or env.get("OPENAI_KEY") or "").strip()
        return cls(
            api_key=api_key,
            model=(env.get("OPENAI_MODEL") or "").strip() or DEFAULT_MODEL,
            timeout_ms=_positive_int(env, "OPENAI_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
            min_blocks_per_chunk=_positive_int(
                env, "MIN_BLOCKS_PER_CHUNK", DEFAULT_MIN_BLOCKS_PER_CHUNK
            ),
            max_retries=_positive_int(env, "MAX_RETRIES", DEFAULT_MAX_RETRIES),
            max_concurrent=_positive_int(env, "MAX_CONCURRENT", DEFAULT_MAX_CONCURRENT),
            language_tag=(env.get("OUTPUT_LANGUAGE_TAG") or "").strip() or DEFAULT_LANGUAGE_TAG,
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                "OpenAI API key is not set. Put OPENAI_API_KEY (or OPENAI_KEY) in .env "
                'or export it in your shell, e.g. `export OPENAI_API_KEY="your_key"`.'
            )
        return self.api_key
