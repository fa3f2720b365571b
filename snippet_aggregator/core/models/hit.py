"""Search hit domain models."""
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_SCORE = 1.0
UNKNOWN_FILE = "Unknown file"
NO_CONTENT = "No content available"


@dataclass(frozen=True)
class ScoredSpan:
    """Normalized code span from a single vector-store hit."""
    score: float
    file_path: str
    start_line: int
    end_line: int
    code_chunk: str
    has_line_range: bool = False

    @classmethod
    def from_hit(cls, hit: Mapping[str, Any]) -> "ScoredSpan":
        """Build a span from a raw hit, applying payload defaults.

        Args:
            hit: Raw hit with optional ``score`` and ``payload`` keys.

        Returns:
            Normalized span. The raw hit is left untouched.
        """
        payload = hit.get("payload") or {}
        score = hit.get("score")
        start_line = payload.get("startLine")
        end_line = payload.get("endLine")

        return cls(
            score=DEFAULT_SCORE if score is None else float(score),
            file_path=payload.get("filePath") or UNKNOWN_FILE,
            start_line=start_line or 0,
            end_line=end_line or 0,
            code_chunk=payload.get("codeChunk") or NO_CONTENT,
            has_line_range=start_line is not None and end_line is not None,
        )

    @property
    def line_range(self) -> tuple[int, int]:
        return self.start_line, self.end_line


@dataclass(frozen=True)
class FileGroup:
    """All spans that share a file path, in input order."""
    file_path: str
    spans: tuple[ScoredSpan, ...]


@dataclass(frozen=True)
class DedupedGroup:
    """Spans of one file surviving deduplication."""
    file_path: str
    spans: tuple[ScoredSpan, ...]
    raw_count: int
    average_score: float

    @property
    def duplicates_removed(self) -> int:
        """Number of spans dropped by deduplication."""
        return self.raw_count - len(self.spans)


@dataclass(frozen=True)
class Report:
    """Aggregated, file-grouped search report."""
    total_hits: int
    file_count: int
    groups: tuple[DedupedGroup, ...]
    text: str

    @property
    def content(self) -> list[dict]:
        """Content blocks consumed by display and transport layers."""
        return [{"type": "text", "text": self.text}]

    def to_dict(self) -> dict:
        return {"content": self.content}
