"""Vector store protocol for dependency injection."""
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class VectorStoreProtocol(Protocol):
    """Protocol for a read-only vector store."""

    @property
    def collection_name(self) -> str:
        """Name of the queried collection."""
        ...

    def health_check(self) -> bool:
        """Check whether the store is reachable and healthy."""
        ...

    def scroll(self, limit: int = 1000) -> list[dict[str, Any]]:
        """Fetch stored points without a query vector.

        Args:
            limit: Maximum number of points to return.

        Returns:
            Raw hits with ``payload`` (and no ``score``).
        """
        ...

    def search(
        self,
        query_vector: list[float],
        limit: int = 10,
        min_score: Optional[float] = None,
        path_filters: Optional[list[str]] = None,
    ) -> list[dict[str, Any]]:
        """Search by vector.

        Args:
            query_vector: Query embedding.
            limit: Number of results to return.
            min_score: Minimum similarity score.
            path_filters: File path patterns, any of which may match.

        Returns:
            Raw hits with ``score`` and ``payload``.
        """
        ...
