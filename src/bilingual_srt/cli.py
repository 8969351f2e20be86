"""
Command-line interface for the bilingual subtitle pipeline.
"""

import argparse
import asyncio
import dataclasses
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from .config import TranslatorConfig
from .errors import ConfigurationError
from .pipeline import run_pipeline

logger = logging.getLogger("bilingual_srt")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    ap = argparse.ArgumentParser(
        prog="bilingual-srt",
        description="Turn an English SRT file into a bilingual English + Chinese one",
    )
    ap.add_argument("input", help="Path to the input .srt file")

    # Overrides for values normally taken from the environment / .env
    ap.add_argument("--model", default=None, help="OpenAI model (env: OPENAI_MODEL)")
    ap.add_argument(
        "--timeout-ms",
        type=int,
        default=None,
        help="Base timeout per attempt in ms, multiplied by the attempt number (env: OPENAI_TIMEOUT_MS)",
    )
    ap.add_argument(
        "--min-blocks",
        type=int,
        default=None,
        help="Minimum subtitle blocks per request (env: MIN_BLOCKS_PER_CHUNK)",
    )
    ap.add_argument(
        "--max-retries", type=int, default=None, help="Attempts per chunk (env: MAX_RETRIES)"
    )
    ap.add_argument(
        "--max-concurrent",
        type=int,
        default=None,
        help="Chunks translated in parallel; 1 keeps strict order (env: MAX_CONCURRENT)",
    )
    ap.add_argument(
        "--language-tag",
        default=None,
        help="Tag inserted in the output file name (env: OUTPUT_LANGUAGE_TAG)",
    )

    # Logging
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return ap.parse_args(argv)


def load_environment() -> None:
    """Load .env from the project root if present, else let dotenv search for one."""
    project_root = Path(__file__).parent.parent.parent
    env_path = project_root / ".env"
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()


def build_config(args: argparse.Namespace) -> TranslatorConfig:
    config = TranslatorConfig.from_env()
    overrides = {
        "model": args.model,
        "timeout_ms": args.timeout_ms,
        "min_blocks_per_chunk": args.min_blocks,
        "max_retries": args.max_retries,
        "max_concurrent": args.max_concurrent,
        "language_tag": args.language_tag,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    for name in ("timeout_ms", "min_blocks_per_chunk", "max_retries", "max_concurrent"):
        if name in overrides and overrides[name] < 1:
            raise ConfigurationError(f"{name.replace('_', '-')} must be a positive integer")
    return dataclasses.replace(config, **overrides)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_environment()
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = build_config(args)
        output_path = asyncio.run(run_pipeline(config, args.input))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except FileNotFoundError as e:
        if Path(args.input).exists():
            logger.error(f"An unrecoverable error occurred: {e}")
        else:
            logger.error(f"Error: The file was not found at \"{args.input}\". Please check the path.")
        return 1
    except Exception as e:
        logger.error(f"An unrecoverable error occurred: {e}")
        logger.debug("Traceback", exc_info=e)
        return 1

    logger.info(f"Done (bilingual subs) -> {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
