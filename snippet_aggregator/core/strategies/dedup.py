
import logging
from abc import ABC, abstractmethod

from ..models.hit import ScoredSpan

logger = logging.getLogger(__name__)


class DedupStrategy(ABC):
    """Base class for per-file span deduplication."""

    @abstractmethod
    def apply(self, spans: list[ScoredSpan]) -> list[ScoredSpan]:
        """Return surviving spans in their input order."""
        ...


class ContainmentDedupStrategy(DedupStrategy):
    """Drop spans whose line range lies inside another span's range.

    Spans with exactly the same range never eliminate each other, so
    identical-range duplicates are all kept.
    """

    def apply(self, spans: list[ScoredSpan]) -> list[ScoredSpan]:
        """Filter out contained spans.

        Args:
            spans: Spans of a single file, sorted by start line.

        Returns:
            Spans not contained in any other span of the list.
        """
        if len(spans) < 2:
            return list(spans)

        surviving = [
            span
            for i, span in enumerate(spans)
            if not self._is_contained(i, spans)
        ]

        if len(surviving) < len(spans):
            logger.debug(
                f"Containment dedup: {len(spans)} → {len(surviving)} "
                f"({spans[0].file_path})"
            )

        return surviving

    @staticmethod
    def _is_contained(index: int, spans: list[ScoredSpan]) -> bool:
        current = spans[index]
        for j, other in enumerate(spans):
            if j == index:
                continue
            if (
                other.start_line <= current.start_line
                and other.end_line >= current.end_line
                and other.line_range != current.line_range
            ):
                return True
        return False
