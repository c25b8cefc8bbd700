from __future__ import annotations

import asyncio
import json

import pytest

from prowling.search import prowlarr_client
from prowling.search.types import DownloadClient, SearchResult


class _FakeResponseCtx:
    def __init__(self, *, status: int = 200, payload=None, body: str | None = None, reason: str = "OK") -> None:
        self.status = status
        self.reason = reason
        self._payload = payload
        self._body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def json(self, content_type=None):
        if self._body is not None:
            return json.loads(self._body)
        return self._payload

    async def text(self) -> str:
        if self._body is not None:
            return self._body
        return json.dumps(self._payload)


class _FakeSession:
    def __init__(self, responses: list[_FakeResponseCtx]) -> None:
        self._responses = responses
        self.calls: list[tuple[str, str, dict]] = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append((method, str(url), kwargs))
        idx = min(len(self.calls) - 1, len(self._responses) - 1)
        return self._responses[idx]

    async def close(self) -> None:
        self.closed = True


class _RaisingSession(_FakeSession):
    def __init__(self, exc: BaseException) -> None:
        super().__init__([])
        self._exc = exc

    def request(self, method, url, **kwargs):
        self.calls.append((method, str(url), kwargs))
        raise self._exc


class _FakeLog:
    def api_request(self, *_args, **_kwargs) -> None:
        return None

    def api_response(self, *_args, **_kwargs) -> None:
        return None


def _adapter(monkeypatch: pytest.MonkeyPatch, session: _FakeSession) -> prowlarr_client.ProwlarrServiceAdapter:
    adapter = prowlarr_client.ProwlarrServiceAdapter("http://prowlarr.local:9696/", "secret")

    async def _fake_ensure_session():
        return session

    monkeypatch.setattr(adapter, "_ensure_session", _fake_ensure_session)
    monkeypatch.setattr(prowlarr_client.logger, "get_logger", lambda: _FakeLog())
    return adapter


def test_build_query_string_repeats_list_keys_and_encodes_scalars() -> None:
    query = prowlarr_client.build_query_string(
        {"query": "the matrix & more", "type": "search", "categories": [2000, 5000], "indexerIds": [1, 7]}
    )

    assert query == "query=the%20matrix%20%26%20more&type=search&categories=2000&categories=5000&indexerIds=1&indexerIds=7"


def test_build_query_string_leaves_uri_component_safe_characters() -> None:
    assert prowlarr_client.build_query_string({"query": "it's (ok)!~*"}) == "query=it's%20(ok)!~*"


def test_headers_carry_api_key_and_user_agent() -> None:
    adapter = prowlarr_client.ProwlarrServiceAdapter("http://prowlarr.local", "secret")

    headers = adapter._get_headers()

    assert headers["X-Api-Key"] == "secret"
    assert headers["User-Agent"].startswith("Prowling/")


def test_adapter_requires_server_url() -> None:
    with pytest.raises(ValueError, match="required"):
        prowlarr_client.ProwlarrServiceAdapter("", "secret")


def test_search_builds_repeated_params_and_parses_results(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = [
        {
            "title": "Ubuntu 22.04",
            "indexer": "Linux Tracker",
            "protocol": "Torrent",
            "size": 4_000_000_000,
            "seeders": 12,
            "leechers": 3,
            "publishDate": "2024-01-01T00:00:00Z",
            "categories": [{"id": 4000, "name": "PC"}],
            "magnetUrl": "magnet:?xt=urn:btih:abc",
            "indexerId": 7,
        }
    ]
    session = _FakeSession([_FakeResponseCtx(payload=payload)])
    adapter = _adapter(monkeypatch, session)

    results = asyncio.run(adapter.search("ubuntu lts", [2000, 5000], [1, 2]))

    method, url, kwargs = session.calls[0]
    assert method == "GET"
    assert url == (
        "http://prowlarr.local:9696/api/v1/search?query=ubuntu%20lts&type=search"
        "&categories=2000&categories=5000&indexerIds=1&indexerIds=2"
    )
    assert kwargs["timeout"].total == prowlarr_client.SEARCH_TIMEOUT_SECONDS
    assert results == [
        SearchResult(
            title="Ubuntu 22.04",
            indexer="Linux Tracker",
            protocol="torrent",
            size=4_000_000_000,
            seeders=12,
            leechers=3,
            publish_date="2024-01-01T00:00:00Z",
            categories=(4000,),
            magnet_url="magnet:?xt=urn:btih:abc",
            indexer_id=7,
        )
    ]


def test_search_without_categories_omits_the_param(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession([_FakeResponseCtx(payload=[])])
    adapter = _adapter(monkeypatch, session)

    assert asyncio.run(adapter.search("debian", None, [])) == []
    assert session.calls[0][1].endswith("/api/v1/search?query=debian&type=search")


def test_search_400_raises_search_error_with_hint(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession([_FakeResponseCtx(status=400, body="Bad query", reason="Bad Request")])
    adapter = _adapter(monkeypatch, session)

    with pytest.raises(prowlarr_client.SearchError) as exc_info:
        asyncio.run(adapter.search("x"))

    assert exc_info.value.status == 400
    assert exc_info.value.user_hint() == prowlarr_client.INVALID_SEARCH_HINT
    assert "400 Bad Request: Bad query" in str(exc_info.value)


def test_server_error_has_no_hint(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession([_FakeResponseCtx(status=500, body="", reason="Internal Server Error")])
    adapter = _adapter(monkeypatch, session)

    with pytest.raises(prowlarr_client.SearchError) as exc_info:
        asyncio.run(adapter.search("x"))

    assert exc_info.value.user_hint() is None
    assert str(exc_info.value) == "500 Internal Server Error (HTTP 500)"


def test_network_failure_maps_to_connection_error(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _RaisingSession(prowlarr_client.aiohttp.ClientConnectionError("refused"))
    adapter = _adapter(monkeypatch, session)

    with pytest.raises(prowlarr_client.ProwlarrConnectionError, match="refused") as exc_info:
        asyncio.run(adapter.check_status())

    assert exc_info.value.status is None


def test_timeout_maps_to_search_error(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = _adapter(monkeypatch, _RaisingSession(asyncio.TimeoutError()))

    with pytest.raises(prowlarr_client.SearchError, match="timed out"):
        asyncio.run(adapter.search("slow"))


def test_invalid_json_maps_to_error(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = _adapter(monkeypatch, _FakeSession([_FakeResponseCtx(body="<html>")]))

    with pytest.raises(prowlarr_client.ProwlarrConnectionError, match="Invalid JSON"):
        asyncio.run(adapter.check_status())


def test_status_with_unexpected_shape_raises_connection_error(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = _adapter(monkeypatch, _FakeSession([_FakeResponseCtx(payload=["not", "a", "dict"])]))

    with pytest.raises(prowlarr_client.ProwlarrConnectionError, match="Unexpected response") as exc_info:
        asyncio.run(adapter.check_status())

    assert isinstance(exc_info.value, prowlarr_client.GatewayError)
    assert exc_info.value.status is None


def test_list_indexers_parses_priority(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = [{"id": 1, "name": "Alpha", "priority": 25}, {"id": 2, "name": "Beta"}]
    session = _FakeSession([_FakeResponseCtx(payload=payload)])
    adapter = _adapter(monkeypatch, session)

    indexers = asyncio.run(adapter.list_indexers())

    assert [(i.id, i.name, i.priority) for i in indexers] == [(1, "Alpha", 25), (2, "Beta", 0)]
    assert session.calls[0][1] == "http://prowlarr.local:9696/api/v1/indexer"


def test_list_indexers_rejects_unexpected_shape(monkeypatch: pytest.MonkeyPatch) -> None:
    adapter = _adapter(monkeypatch, _FakeSession([_FakeResponseCtx(payload={"records": []})]))

    with pytest.raises(prowlarr_client.ProwlarrConnectionError, match="Unexpected response"):
        asyncio.run(adapter.list_indexers())


def test_list_download_clients_reads_enable_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    payload = [
        {"id": 3, "name": "SAB", "enable": False, "protocol": "usenet"},
        {"id": 4, "name": "qBit", "enable": True, "protocol": "torrent"},
    ]
    adapter = _adapter(monkeypatch, _FakeSession([_FakeResponseCtx(payload=payload)]))

    clients = asyncio.run(adapter.list_download_clients())

    assert clients == [
        DownloadClient(id=3, name="SAB", enabled=False, protocol="usenet"),
        DownloadClient(id=4, name="qBit", enabled=True, protocol="torrent"),
    ]


def test_send_to_download_client_posts_release(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession([_FakeResponseCtx(payload={"guid": "g-1"})])
    adapter = _adapter(monkeypatch, session)
    result = SearchResult(
        title="Ubuntu",
        indexer="Linux Tracker",
        protocol="torrent",
        download_url="http://prowlarr.local/dl/1",
        guid="g-1",
        indexer_id=7,
    )

    asyncio.run(adapter.send_to_download_client(result, DownloadClient(id=4, name="qBit")))

    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url == "http://prowlarr.local:9696/api/v1/release"
    assert kwargs["json"] == {
        "title": "Ubuntu",
        "downloadUrl": "http://prowlarr.local/dl/1",
        "magnetUrl": None,
        "protocol": "torrent",
        "guid": "g-1",
        "indexerId": 7,
        "downloadClientId": 4,
    }


def test_send_to_download_client_failure_raises_action_error(monkeypatch: pytest.MonkeyPatch) -> None:
    session = _FakeSession([_FakeResponseCtx(status=404, body="no such client", reason="Not Found")])
    adapter = _adapter(monkeypatch, session)
    result = SearchResult(title="Ubuntu", indexer="x", protocol="torrent", download_url="http://x/1")

    with pytest.raises(prowlarr_client.ActionError) as exc_info:
        asyncio.run(adapter.send_to_download_client(result, DownloadClient(id=9, name="gone")))

    assert exc_info.value.status == 404
    assert exc_info.value.user_hint() is None


@pytest.mark.asyncio
async def test_close_is_idempotent_without_session() -> None:
    adapter = prowlarr_client.ProwlarrServiceAdapter("http://prowlarr.local", "secret")

    await adapter.close()
    await adapter.close()

    assert adapter._session is None
