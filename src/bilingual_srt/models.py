"""
Data models for the bilingual subtitle pipeline.
"""

from dataclasses import dataclass, field

BLOCK_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class Chunk:
    """A batch of consecutive subtitle blocks sent in one request."""

    index: int  # 0-based position in the run
    blocks: tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.blocks)

    @property
    def text(self) -> str:
        return BLOCK_SEPARATOR.join(self.blocks)


@dataclass
class TranslationAttempt:
    """One try at translating a chunk, bounded by its own timeout."""

    chunk_index: int
    attempt: int  # 1-based
    timeout: float  # seconds
    outcome: str = "pending"  # pending | success | failed
    error: str | None = None


@dataclass
class PipelineResult:
    """Translated chunk texts in source order plus the chunks that were dropped."""

    total_chunks: int
    parts: list[str] = field(default_factory=list)
    dropped: list[int] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(part + BLOCK_SEPARATOR for part in self.parts)

    @property
    def complete(self) -> bool:
        return not self.dropped
