"""
SRT block splitting, reading and writing.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger("bilingual_srt")

# Two or more consecutive line breaks (LF, CRLF or a lone CR). A CRLF pair
# never counts as two breaks; a line of spaces inside an entry is not a boundary.
_EOL = r"(?:\r?\n|\r(?!\n))"
_BLOCK_SPLIT_RE = re.compile(rf"{_EOL}{_EOL}\s*")


def split_blocks(raw: str) -> list[str]:
    """Split raw SRT content into trimmed, non-empty blocks on blank lines."""
    return [b.strip() for b in _BLOCK_SPLIT_RE.split(raw.strip()) if b.strip()]


def read_subtitle_text(path: str | Path) -> str:
    """Read a subtitle file as UTF-8 (a leading BOM is dropped)."""
    with open(path, encoding="utf-8-sig") as f:
        return f.read()


def derive_output_path(input_path: str | Path, language_tag: str = "zh-CN") -> Path:
    """movie.srt -> movie.zh-CN.srt, in the same directory."""
    src = Path(input_path)
    suffix = src.suffix or ".srt"
    return src.with_name(f"{src.stem}.{language_tag}{suffix}")


def write_output(path: str | Path, text: str) -> None:
    """Write the assembled subtitle text, trimmed of surrounding whitespace."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(text.strip())
