"""Core business services."""
from .aggregation_service import ResultAggregator
from .search_service import SearchService

__all__ = [
    "ResultAggregator",
    "SearchService",
]
