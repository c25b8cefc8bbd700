"""Shared data structures for Prowlarr search results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

PROTOCOL_TORRENT = "torrent"
PROTOCOL_USENET = "usenet"


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def _category_ids(raw: Any) -> Tuple[int, ...]:
    """Prowlarr returns category objects ({"id": 2000, ...}); bare ids are accepted too."""
    if not isinstance(raw, list):
        return ()
    ids: list[int] = []
    for item in raw:
        value = item.get("id") if isinstance(item, dict) else item
        parsed = _optional_int(value)
        if parsed is not None:
            ids.append(parsed)
    return tuple(ids)


@dataclass(frozen=True)
class SearchResult:
    """One release returned by the aggregator. Never mutated after parsing."""

    title: str
    indexer: str
    protocol: str
    size: Optional[int] = None
    seeders: Optional[int] = None
    leechers: Optional[int] = None
    publish_date: Optional[str] = None
    categories: Tuple[int, ...] = ()
    download_url: Optional[str] = None
    magnet_url: Optional[str] = None
    guid: Optional[str] = None
    info_url: Optional[str] = None
    comment_url: Optional[str] = None
    indexer_id: Optional[int] = None
    quality: Any = None
    download_volume_factor: Any = None
    upload_volume_factor: Any = None
    description: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def is_usenet(self) -> bool:
        return self.protocol == PROTOCOL_USENET

    @property
    def is_torrent(self) -> bool:
        return self.protocol == PROTOCOL_TORRENT

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SearchResult":
        return cls(
            title=str(payload.get("title") or ""),
            indexer=str(payload.get("indexer") or ""),
            protocol=str(payload.get("protocol") or "").lower(),
            size=_optional_int(payload.get("size")),
            seeders=_optional_int(payload.get("seeders")),
            leechers=_optional_int(payload.get("leechers")),
            publish_date=_optional_str(payload.get("publishDate")),
            categories=_category_ids(payload.get("categories")),
            download_url=_optional_str(payload.get("downloadUrl")),
            magnet_url=_optional_str(payload.get("magnetUrl")),
            guid=_optional_str(payload.get("guid")),
            info_url=_optional_str(payload.get("infoUrl")),
            comment_url=_optional_str(payload.get("commentUrl")),
            indexer_id=_optional_int(payload.get("indexerId")),
            quality=payload.get("quality"),
            download_volume_factor=payload.get("downloadVolumeFactor"),
            upload_volume_factor=payload.get("uploadVolumeFactor"),
            description=_optional_str(payload.get("description")),
            metadata=dict(payload),
        )


@dataclass(frozen=True)
class Indexer:
    """An upstream search source registered with Prowlarr."""

    id: int
    name: str
    priority: int = 0

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Indexer":
        return cls(
            id=_optional_int(payload.get("id")) or 0,
            name=str(payload.get("name") or ""),
            priority=_optional_int(payload.get("priority")) or 0,
        )


@dataclass(frozen=True)
class DownloadClient:
    """A download client configured inside Prowlarr."""

    id: int
    name: str
    enabled: bool = True
    protocol: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "DownloadClient":
        return cls(
            id=_optional_int(payload.get("id")) or 0,
            name=str(payload.get("name") or ""),
            enabled=bool(payload.get("enable", payload.get("enabled", True))),
            protocol=_optional_str(payload.get("protocol")),
        )
