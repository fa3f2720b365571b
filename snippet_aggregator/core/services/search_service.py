"""Search service - query the vector store and aggregate the hits."""

import logging
from typing import Any, Callable, Optional

from ..models.hit import Report
from ..protocols.embedder import EmbedderProtocol
from ..protocols.vector_store import VectorStoreProtocol
from .aggregation_service import ResultAggregator

logger = logging.getLogger(__name__)


class SearchService:
    """Runs health check, query and aggregation against one collection."""

    def __init__(
        self,
        vector_store: VectorStoreProtocol,
        embedder: EmbedderProtocol,
        aggregator: ResultAggregator,
        search_limit: int = 10,
        max_search_results: int = 50,
        min_score: float = 0.4,
        scroll_limit: int = 1000,
        query_prefix: str = "search_codebase: ",
    ):
        """Initialize search service.

        Args:
            vector_store: Vector store.
            embedder: Query embedding service.
            aggregator: Hit aggregator.
            search_limit: Default number of results to fetch.
            max_search_results: Upper bound for a requested limit.
            min_score: Default minimum similarity score.
            scroll_limit: Default number of points to scroll.
            query_prefix: Prefix added to queries before embedding.
        """
        self._vector_store = vector_store
        self._embedder = embedder
        self._aggregator = aggregator
        self._search_limit = search_limit
        self._max_search_results = max_search_results
        self._min_score = min_score
        self._scroll_limit = scroll_limit
        self._query_prefix = query_prefix

    def scroll(self, limit: Optional[int] = None) -> Report:
        """Aggregate stored points without a query.

        Args:
            limit: Override number of points.

        Returns:
            Report over the scrolled points.
        """
        limit = limit or self._scroll_limit
        return self._run(lambda: self._vector_store.scroll(limit=limit))

    def search(
        self,
        query: str,
        limit: Optional[int] = None,
        min_score: Optional[float] = None,
        path_filters: Optional[list[str]] = None,
    ) -> Report:
        """Semantic search over the collection.

        Args:
            query: Search query.
            limit: Override number of results.
            min_score: Override minimum score.
            path_filters: File path patterns to restrict results.

        Returns:
            Report over the matching hits.
        """
        query = query.strip()
        if not query:
            raise ValueError("Query cannot be empty.")

        limit = min(limit or self._search_limit, self._max_search_results)
        min_score = self._min_score if min_score is None else min_score

        def fetch() -> list[dict[str, Any]]:
            query_vector = self._embedder.encode(f"{self._query_prefix}{query}").tolist()
            return self._vector_store.search(
                query_vector=query_vector,
                limit=limit,
                min_score=min_score,
                path_filters=path_filters,
            )

        report = self._run(fetch)
        logger.info(f"Search: {report.total_hits}/{limit} hits for '{query[:50]}'")
        return report

    def _run(self, fetch: Callable[[], list[dict[str, Any]]]) -> Report:
        collection = self._vector_store.collection_name

        if not self._vector_store.health_check():
            logger.warning(f"Qdrant health check failed, querying '{collection}' anyway")

        try:
            hits = fetch()
        except Exception as e:
            logger.error(f"Query against '{collection}' failed: {e}")
            hits = []

        return self._aggregator.aggregate(hits, collection)
