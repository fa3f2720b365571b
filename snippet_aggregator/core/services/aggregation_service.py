"""Aggregation service - group, dedupe and render search hits."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from ..models.hit import DedupedGroup, FileGroup, Report, ScoredSpan
from ..strategies.dedup import ContainmentDedupStrategy, DedupStrategy

logger = logging.getLogger(__name__)

SNIPPET_SEPARATOR = "\n" + "─" * 5 + "\n"
CODE_FENCE = "```"


class ResultAggregator:
    """Turns a flat list of scored hits into a file-grouped report."""

    def __init__(self, dedup_strategy: Optional[DedupStrategy] = None):
        """Initialize aggregator.

        Args:
            dedup_strategy: Per-file deduplication, containment by default.
        """
        self._dedup_strategy = dedup_strategy or ContainmentDedupStrategy()

    def aggregate(
        self,
        hits: Optional[Iterable[Mapping[str, Any]]],
        collection_label: str,
    ) -> Report:
        """Aggregate raw hits into a report.

        Args:
            hits: Raw hits with ``score`` and ``payload``. May be empty.
            collection_label: Collection name shown in the report text.

        Returns:
            Report with the rendered summary.
        """
        spans = [ScoredSpan.from_hit(hit) for hit in hits or ()]

        if not spans:
            return Report(
                total_hits=0,
                file_count=0,
                groups=(),
                text=f'No results found in Qdrant collection: "{collection_label}"',
            )

        groups = tuple(
            self._dedupe(group) for group in self._group_by_file(spans)
        )

        total = len(spans)
        file_count = len(groups)
        header = (
            f"Found {total} result{_plural(total)} "
            f"in {file_count} file{_plural(file_count)} "
            f'from Qdrant collection: "{collection_label}"'
        )
        blocks = "\n".join(self._render_group(group) for group in groups)

        logger.info(
            f"Aggregated {total} hits into {file_count} files "
            f'from collection "{collection_label}"'
        )

        return Report(
            total_hits=total,
            file_count=file_count,
            groups=groups,
            text=f"{header}\n\n{blocks}",
        )

    def _group_by_file(self, spans: list[ScoredSpan]) -> list[FileGroup]:
        """Group spans by file path, keeping first-seen path order."""
        by_path: dict[str, list[ScoredSpan]] = {}
        for span in spans:
            by_path.setdefault(span.file_path, []).append(span)

        return [
            FileGroup(file_path=path, spans=tuple(items))
            for path, items in by_path.items()
        ]

    def _dedupe(self, group: FileGroup) -> DedupedGroup:
        """Sort a group by start line and drop duplicate spans."""
        ordered = sorted(group.spans, key=lambda span: span.start_line)
        surviving = self._dedup_strategy.apply(ordered)

        average = (
            sum(span.score for span in surviving) / len(surviving)
            if surviving
            else 0.0
        )
        logger.debug(
            f"{group.file_path}: avg score {average:.3f} "
            f"{[span.score for span in surviving]}"
        )

        return DedupedGroup(
            file_path=group.file_path,
            spans=tuple(surviving),
            raw_count=len(group.spans),
            average_score=average,
        )

    def _render_group(self, group: DedupedGroup) -> str:
        """Render one file block with header and fenced snippets."""
        snippet_info = (
            f" | {len(group.spans)} snippets" if len(group.spans) > 1 else ""
        )
        duplicate_info = (
            f" ({group.duplicates_removed} duplicates removed)"
            if group.duplicates_removed > 0
            else ""
        )
        chunks = SNIPPET_SEPARATOR.join(
            f"{_line_label(span)}\n{span.code_chunk}" for span in group.spans
        )

        return (
            f"File: `{group.file_path}` | Avg Score: {group.average_score:.3f}"
            f"{snippet_info}{duplicate_info}\n"
            f"{CODE_FENCE}\n{chunks}\n{CODE_FENCE}\n"
        )


def _line_label(span: ScoredSpan) -> str:
    if not span.has_line_range:
        return ""
    return f" (L{span.start_line}-{span.end_line})"


def _plural(count: int) -> str:
    return "" if count == 1 else "s"
