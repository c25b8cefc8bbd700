"""Prowlarr REST adapter: status, indexers, search and release grabs."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence
from urllib.parse import quote

import aiohttp
from yarl import URL

from prowling import logger
from prowling.__version__ import __version__
from prowling.search.payloads import expect_dict, expect_list_of_dicts
from prowling.search.types import DownloadClient, Indexer, SearchResult

DEFAULT_USER_AGENT = f"Prowling/{__version__}"
DEFAULT_TIMEOUT_SECONDS = 15
SEARCH_TIMEOUT_SECONDS = 120
INVALID_SEARCH_HINT = "Invalid search parameters. Please try again with different criteria."

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


class GatewayError(Exception):
    """A single request to an external service failed."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def user_hint(self) -> str | None:
        if self.status == 400:
            return INVALID_SEARCH_HINT
        return None

    def __str__(self) -> str:
        if self.status is not None:
            return f"{self.message} (HTTP {self.status})"
        return self.message


class ProwlarrConnectionError(GatewayError):
    """The status handshake or indexer listing failed."""


class SearchError(GatewayError):
    """A search request failed."""


class ActionError(GatewayError):
    """Forwarding a release to a download client failed."""


def build_query_string(params: Mapping[str, Any]) -> str:
    """
    Serialize query params the way the Prowlarr search endpoint expects.

    List values repeat the bare key (``categories=2000&categories=5000``) and
    are emitted verbatim; scalars are percent-encoded.
    """
    parts: list[str] = []
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            parts.extend(f"{key}={item}" for item in value)
        else:
            parts.append(f"{key}={quote(str(value), safe=_URI_COMPONENT_SAFE)}")
    return "&".join(parts)


class ProwlarrServiceAdapter:
    """Thin async adapter over the Prowlarr v1 API."""

    def __init__(self, server_url: str, api_key: str, timeout: int = DEFAULT_TIMEOUT_SECONDS):
        if not server_url:
            raise ValueError("Prowlarr server URL is required.")
        self.base_url = server_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None
        self._session_lock = asyncio.Lock()

    async def check_status(self) -> Dict[str, Any]:
        """GET /api/v1/system/status."""
        data = await self._request("GET", "/api/v1/system/status", error_cls=ProwlarrConnectionError)
        try:
            return expect_dict(data, "system status")
        except ValueError as exc:
            raise ProwlarrConnectionError(f"Unexpected response: {exc}") from exc

    async def list_indexers(self) -> list[Indexer]:
        data = await self._request("GET", "/api/v1/indexer", error_cls=ProwlarrConnectionError)
        return [Indexer.from_payload(item) for item in self._guard_list(data, "indexer list", ProwlarrConnectionError)]

    async def list_download_clients(self) -> list[DownloadClient]:
        data = await self._request("GET", "/api/v1/downloadclient", error_cls=GatewayError)
        return [DownloadClient.from_payload(item) for item in self._guard_list(data, "download client list", GatewayError)]

    async def search(
        self,
        query: str,
        categories: Optional[Sequence[int]] = None,
        indexer_ids: Iterable[int] = (),
    ) -> list[SearchResult]:
        """Search across indexers via GET /api/v1/search."""
        params: Dict[str, Any] = {"query": query, "type": "search"}
        if categories:
            params["categories"] = list(categories)
        ids = list(indexer_ids)
        if ids:
            params["indexerIds"] = ids
        data = await self._request(
            "GET",
            "/api/v1/search",
            query_string=build_query_string(params),
            error_cls=SearchError,
            timeout=SEARCH_TIMEOUT_SECONDS,
        )
        return [SearchResult.from_payload(item) for item in self._guard_list(data, "search results", SearchError)]

    async def send_to_download_client(self, result: SearchResult, client: DownloadClient) -> Any:
        """Ask Prowlarr to grab a release and push it to one of its download clients."""
        payload = {
            "title": result.title,
            "downloadUrl": result.download_url,
            "magnetUrl": result.magnet_url,
            "protocol": result.protocol,
            "guid": result.guid,
            "indexerId": result.indexer_id,
            "downloadClientId": client.id,
        }
        return await self._request("POST", "/api/v1/release", json_body=payload, error_cls=ActionError)

    @staticmethod
    def _guard_list(data: Any, context: str, error_cls: type[GatewayError]) -> list[dict]:
        try:
            return expect_list_of_dicts(data, context)
        except ValueError as exc:
            raise error_cls(f"Unexpected response: {exc}") from exc

    async def _request(
        self,
        method: str,
        path: str,
        *,
        query_string: str | None = None,
        json_body: Dict[str, Any] | None = None,
        error_cls: type[GatewayError] = GatewayError,
        timeout: int | None = None,
    ) -> Any:
        raw_url = f"{self.base_url}{path}"
        if query_string:
            raw_url = f"{raw_url}?{query_string}"
        log = logger.get_logger()
        log.api_request(method, raw_url, json_body)
        request_start = time.time()

        session = await self._ensure_session()
        request_kwargs: Dict[str, Any] = {}
        if json_body is not None:
            request_kwargs["json"] = json_body
        if timeout is not None:
            request_kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)
        try:
            async with session.request(method, URL(raw_url, encoded=True), **request_kwargs) as response:
                if not 200 <= response.status < 300:
                    text = await response.text()
                    detail = text.strip()[:200]
                    message = f"{response.status} {response.reason or ''}".strip()
                    if detail:
                        message = f"{message}: {detail}"
                    raise error_cls(message, status=response.status)
                data = await response.json(content_type=None) if response.status != 204 else None
                elapsed_ms = (time.time() - request_start) * 1000
                log.api_response(response.status, data, elapsed_ms)
                return data
        except GatewayError:
            raise
        except asyncio.TimeoutError as exc:
            raise error_cls(f"Request to {self.base_url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise error_cls(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise error_cls(f"Invalid JSON from {path}: {exc}") from exc

    async def _ensure_session(self) -> aiohttp.ClientSession:
        session = self._session
        if session is not None and not session.closed:
            return session

        async with self._session_lock:
            session = self._session
            if session is None or session.closed:
                self._session = aiohttp.ClientSession(
                    headers=self._get_headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                )
            return self._session

    def _get_headers(self) -> Dict[str, str]:
        return {"X-Api-Key": self.api_key, "User-Agent": DEFAULT_USER_AGENT}

    async def close(self) -> None:
        """Close any open connections."""
        async with self._session_lock:
            session = self._session
            self._session = None
        if session is not None and not session.closed:
            await session.close()
