"""Span deduplication strategies."""
from .dedup import DedupStrategy, ContainmentDedupStrategy

__all__ = [
    "DedupStrategy",
    "ContainmentDedupStrategy",
]
