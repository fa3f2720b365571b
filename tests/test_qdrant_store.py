# tests/test_qdrant_store.py

from unittest.mock import MagicMock, patch

import pytest
import requests
from snippet_aggregator.infrastructure.vector_stores.qdrant_store import QdrantVectorStore

MODULE = "snippet_aggregator.infrastructure.vector_stores.qdrant_store.requests"


def _response(result=None, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = {"result": result, "status": "ok"}
    return resp


def _point(path="a.ts", score=0.9):
    return {
        "id": 1,
        "score": score,
        "payload": {"filePath": path, "codeChunk": "x", "startLine": 1, "endLine": 2},
    }


@pytest.fixture
def store():
    return QdrantVectorStore(collection_name="ws-abc", host="qdrant", port=6333, timeout=5)


def test_health_check_ok(store):
    with patch(f"{MODULE}.get", return_value=_response(status_code=200)) as get:
        assert store.health_check() is True
    assert get.call_args.args[0] == "http://qdrant:6333/healthz"


def test_health_check_bad_status(store):
    with patch(f"{MODULE}.get", return_value=_response(status_code=503)):
        assert store.health_check() is False


def test_health_check_connection_error(store):
    with patch(f"{MODULE}.get", side_effect=requests.ConnectionError("refused")):
        assert store.health_check() is False


def test_api_key_header_sent():
    store = QdrantVectorStore(collection_name="c", api_key="secret", https=True)
    with patch(f"{MODULE}.get", return_value=_response()) as get:
        store.health_check()

    assert get.call_args.args[0] == "https://localhost:6333/healthz"
    assert get.call_args.kwargs["headers"] == {"api-key": "secret"}


def test_search_request_shape(store):
    with patch(f"{MODULE}.post", return_value=_response({"points": [_point()]})) as post:
        hits = store.search([0.1, 0.2], limit=7, min_score=0.4, path_filters=["src\\core"])

    assert hits == [_point()]
    url = post.call_args.args[0]
    body = post.call_args.kwargs["json"]
    assert url == "http://qdrant:6333/collections/ws-abc/points/query"
    assert body["query"] == [0.1, 0.2]
    assert body["limit"] == 7
    assert body["score_threshold"] == 0.4
    assert body["params"] == {"hnsw_ef": 128, "exact": False}
    assert body["filter"] == {
        "should": [{"key": "filePath", "match": {"text": "src/core"}}]
    }
    assert "pathSegments" in body["with_payload"]["include"]


def test_search_without_filters(store):
    with patch(f"{MODULE}.post", return_value=_response({"points": []})) as post:
        store.search([0.1], limit=3)

    body = post.call_args.kwargs["json"]
    assert "filter" not in body
    assert "score_threshold" not in body


def test_search_drops_incomplete_payloads(store):
    incomplete = {"id": 2, "score": 0.5, "payload": {"filePath": "b.ts"}}
    missing = {"id": 3, "score": 0.5, "payload": None}
    with patch(f"{MODULE}.post", return_value=_response({"points": [_point(), incomplete, missing]})):
        hits = store.search([0.1])

    assert hits == [_point()]


def test_search_http_error_propagates(store):
    resp = _response()
    resp.raise_for_status.side_effect = requests.HTTPError("404")
    with patch(f"{MODULE}.post", return_value=resp):
        with pytest.raises(requests.HTTPError):
            store.search([0.1])


def test_scroll_follows_pages(store):
    pages = [
        _response({"points": [_point("a.ts")], "next_page_offset": 42}),
        _response({"points": [_point("b.ts")], "next_page_offset": None}),
    ]
    with patch(f"{MODULE}.post", side_effect=pages) as post:
        points = store.scroll(limit=1000)

    assert [p["payload"]["filePath"] for p in points] == ["a.ts", "b.ts"]
    first, second = (c.kwargs["json"] for c in post.call_args_list)
    assert post.call_args_list[0].args[0] == "http://qdrant:6333/collections/ws-abc/points/scroll"
    assert first["with_vector"] is False
    assert "offset" not in first
    assert second["offset"] == 42


def test_scroll_stops_at_limit(store):
    page = _response({"points": [_point(), _point()], "next_page_offset": 7})
    with patch(f"{MODULE}.post", return_value=page) as post:
        points = store.scroll(limit=2)

    assert len(points) == 2
    assert post.call_count == 1
    assert post.call_args.kwargs["json"]["limit"] == 2


def test_scroll_empty_result(store):
    with patch(f"{MODULE}.post", return_value=_response(None)):
        assert store.scroll() == []


def test_collection_name(store):
    assert store.collection_name == "ws-abc"
