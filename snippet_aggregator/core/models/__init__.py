"""Domain models."""
from .hit import ScoredSpan, FileGroup, DedupedGroup, Report

__all__ = [
    "ScoredSpan",
    "FileGroup",
    "DedupedGroup",
    "Report",
]
