"""qBittorrent WebUI adapter used to open magnet/torrent URLs externally."""

from __future__ import annotations

import asyncio
import time

import aiohttp

from prowling import logger
from prowling.search.prowlarr_client import DEFAULT_TIMEOUT_SECONDS, DEFAULT_USER_AGENT, ActionError

QBITTORRENT_TIPS = (
    "Tip: Make sure qBittorrent WebUI is enabled and the URL is correct.",
    "You may need to login to qBittorrent WebUI first in your browser.",
)


class QBittorrentAdapter:
    """Posts URLs to ``/api/v2/torrents/add`` as a form field."""

    def __init__(self, webui_url: str, timeout: int = DEFAULT_TIMEOUT_SECONDS):
        if not webui_url:
            raise ValueError("qBittorrent WebUI URL is required.")
        self.base_url = webui_url.rstrip("/")
        self.timeout = timeout

    async def add_urls(self, url: str) -> str:
        endpoint = f"{self.base_url}/api/v2/torrents/add"
        log = logger.get_logger()
        log.api_request("POST", endpoint, {"urls": url})
        request_start = time.time()
        try:
            async with aiohttp.ClientSession(
                headers={"User-Agent": DEFAULT_USER_AGENT},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as session:
                async with session.post(endpoint, data={"urls": url}) as response:
                    body = (await response.text()).strip()
                    if not 200 <= response.status < 300:
                        raise ActionError(f"qBittorrent rejected the request: {body or response.reason}", status=response.status)
                    # The WebUI answers 200 "Fails." when it could not add anything.
                    if body.lower().startswith("fails"):
                        raise ActionError("qBittorrent could not add the torrent", status=response.status)
                    log.api_response(response.status, {"body": body}, (time.time() - request_start) * 1000)
                    return body
        except ActionError:
            raise
        except asyncio.TimeoutError as exc:
            raise ActionError(f"Request to {self.base_url} timed out") from exc
        except aiohttp.ClientError as exc:
            raise ActionError(str(exc) or type(exc).__name__) from exc
