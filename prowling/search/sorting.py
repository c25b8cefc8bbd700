"""Reordering and filtering of search result sequences."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Sequence

from prowling.search.types import Indexer, SearchResult

SORT_OPTIONS: tuple[tuple[str, str], ...] = (
    ("title_asc", "Title (A-Z)"),
    ("title_desc", "Title (Z-A)"),
    ("seeders_desc", "Seeders (High to Low)"),
    ("seeders_asc", "Seeders (Low to High)"),
    ("size_desc", "Size (Large to Small)"),
    ("size_asc", "Size (Small to Large)"),
    ("date_desc", "Date (Newest First)"),
    ("date_asc", "Date (Oldest First)"),
    ("protocol", "Protocol (Usenet/Torrent)"),
    ("indexer_priority_desc", "Indexer Priority (High to Low)"),
    ("indexer_priority_asc", "Indexer Priority (Low to High)"),
)
SORT_KEYS = frozenset(key for key, _ in SORT_OPTIONS)


def parse_publish_date(value: Optional[str]) -> float:
    """Epoch seconds for an ISO-8601 timestamp; 0.0 when missing or unparseable."""
    if not value:
        return 0.0
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def priority_lookup(indexers: Iterable[Indexer]) -> dict[str, int]:
    lookup: dict[str, int] = {}
    for indexer in indexers:
        lookup.setdefault(indexer.name, indexer.priority)
    return lookup


def _sort_key(sort_by: str, indexers: Sequence[Indexer]) -> tuple[Callable[[SearchResult], object], bool]:
    field, _, direction = sort_by.rpartition("_")
    descending = direction == "desc"
    if sort_by == "protocol":
        return (lambda r: 0 if r.is_usenet else 1), False
    if field == "title":
        return (lambda r: (r.title.casefold(), r.title)), descending
    if field == "seeders":
        return (lambda r: r.seeders or 0), descending
    if field == "size":
        return (lambda r: r.size or 0), descending
    if field == "date":
        return (lambda r: parse_publish_date(r.publish_date)), descending
    if field == "indexer_priority":
        priorities = priority_lookup(indexers)
        return (lambda r: priorities.get(r.indexer, 0)), descending
    raise ValueError(f"Unknown sort order '{sort_by}'")


def sort_results(
    results: Sequence[SearchResult],
    sort_by: str,
    indexers: Sequence[Indexer] = (),
) -> tuple[SearchResult, ...]:
    """
    Return a new tuple ordered by ``sort_by``.

    Equal keys keep their incoming order (``sorted`` is stable, also with
    ``reverse=True``), so there is no secondary key.
    """
    if sort_by not in SORT_KEYS:
        raise ValueError(f"Unknown sort order '{sort_by}'")
    key, descending = _sort_key(sort_by, indexers)
    return tuple(sorted(results, key=key, reverse=descending))


def filter_results(original: Sequence[SearchResult], query: str) -> Optional[tuple[SearchResult, ...]]:
    """
    Titles containing ``query`` case-insensitively, taken from ``original``.

    Returns None for a blank query so callers can leave the view untouched.
    """
    if not query.strip():
        return None
    term = query.casefold()
    return tuple(result for result in original if term in result.title.casefold())
