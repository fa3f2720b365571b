import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

REQUIRED_PAYLOAD_KEYS = ("filePath", "codeChunk", "startLine", "endLine")
SEARCH_PAYLOAD_FIELDS = [*REQUIRED_PAYLOAD_KEYS, "pathSegments"]
SCROLL_PAGE_SIZE = 250


class QdrantVectorStore:
    """Read-only vector store using the Qdrant REST API."""

    def __init__(
        self,
        collection_name: str,
        host: str = "localhost",
        port: int = 6333,
        https: bool = False,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
    ):
        """Initialize Qdrant client.

        Args:
            collection_name: Collection to query.
            host: Qdrant host.
            port: Qdrant REST port.
            https: Use HTTPS.
            api_key: API key sent in the ``api-key`` header.
            timeout: Request timeout in seconds.
        """
        scheme = "https" if https else "http"
        self._base_url = f"{scheme}://{host}:{port}"
        self._collection_name = collection_name
        self._timeout = timeout
        self._headers = {"api-key": api_key} if api_key else {}

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def _points_url(self) -> str:
        return f"{self._base_url}/collections/{self._collection_name}/points"

    def health_check(self) -> bool:
        """Return True if Qdrant answers the health probe with 200."""
        try:
            resp = requests.get(
                f"{self._base_url}/healthz",
                headers=self._headers,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"Qdrant unreachable at {self._base_url}: {e}")
            return False

        if resp.status_code != 200:
            logger.warning(f"Qdrant health check failed: {resp.status_code} {resp.text}")
            return False
        return True

    def scroll(self, limit: int = 1000) -> list[dict[str, Any]]:
        """Page through stored points until ``limit`` are collected."""
        points: list[dict[str, Any]] = []
        offset = None

        while len(points) < limit:
            body: dict[str, Any] = {
                "limit": min(SCROLL_PAGE_SIZE, limit - len(points)),
                "with_payload": True,
                "with_vector": False,
            }
            if offset is not None:
                body["offset"] = offset

            result = self._post(f"{self._points_url}/scroll", body)
            points.extend(result.get("points", []))

            offset = result.get("next_page_offset")
            if offset is None:
                break

        logger.info(f"Scroll: {len(points)} points from '{self._collection_name}'")
        return points

    def search(
        self,
        query_vector: list[float],
        limit: int = 10,
        min_score: Optional[float] = None,
        path_filters: Optional[list[str]] = None,
    ) -> list[dict[str, Any]]:
        """Search by vector, dropping points with incomplete payloads."""
        body: dict[str, Any] = {
            "query": query_vector,
            "limit": limit,
            "params": {"hnsw_ef": 128, "exact": False},
            "with_payload": {"include": SEARCH_PAYLOAD_FIELDS},
        }
        if min_score is not None:
            body["score_threshold"] = min_score
        if path_filters:
            body["filter"] = {
                "should": [
                    {"key": "filePath", "match": {"text": pattern.replace("\\", "/")}}
                    for pattern in path_filters
                ]
            }

        result = self._post(f"{self._points_url}/query", body)
        points = [p for p in result.get("points", []) if _has_valid_payload(p)]

        logger.info(
            f"Search: {len(points)} points from '{self._collection_name}' "
            f"(limit={limit}, min_score={min_score})"
        )
        return points

    def _post(self, url: str, body: dict[str, Any]) -> dict[str, Any]:
        resp = requests.post(url, json=body, headers=self._headers, timeout=self._timeout)
        resp.raise_for_status()
        return resp.json().get("result") or {}


def _has_valid_payload(point: dict[str, Any]) -> bool:
    payload = point.get("payload")
    if not payload:
        return False
    return all(key in payload for key in REQUIRED_PAYLOAD_KEYS)
