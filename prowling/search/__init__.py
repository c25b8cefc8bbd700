"""Prowlarr search: gateway adapters, result model, sorting and rendering."""

from .actions import ActionChoice, ItemAction, available_actions
from .prowlarr_client import (
    ActionError,
    GatewayError,
    ProwlarrConnectionError,
    ProwlarrServiceAdapter,
    SearchError,
    build_query_string,
)
from .qbittorrent_client import QBittorrentAdapter
from .sorting import SORT_OPTIONS, filter_results, sort_results
from .types import DownloadClient, Indexer, SearchResult

__all__ = [
    "ActionChoice",
    "ActionError",
    "DownloadClient",
    "GatewayError",
    "Indexer",
    "ItemAction",
    "ProwlarrConnectionError",
    "ProwlarrServiceAdapter",
    "QBittorrentAdapter",
    "SORT_OPTIONS",
    "SearchError",
    "SearchResult",
    "available_actions",
    "build_query_string",
    "filter_results",
    "sort_results",
]
