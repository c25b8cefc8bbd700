"""Text and table rendering of search results for the terminal."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from rich import box
from rich.table import Table
from rich.text import Text

from prowling.search.sorting import parse_publish_date, priority_lookup
from prowling.search.types import Indexer, SearchResult

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")
NOT_AVAILABLE = "Not available"


def format_size(size: int | None) -> str:
    if not size or size < 0:
        return "Unknown"
    value = float(size)
    for unit in SIZE_UNITS[:-1]:
        if value < 1024:
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} {SIZE_UNITS[-1]}"


def protocol_badge(result: SearchResult) -> Text:
    if result.is_usenet:
        return Text("⚡NZB", style="blue")
    if result.seeders and result.seeders > 0:
        return Text(f"⚡{result.seeders}", style="green")
    return Text("Unkn", style="yellow")


def indexer_priority(indexers: Sequence[Indexer], name: str) -> int:
    return priority_lookup(indexers).get(name, 0)


def format_published(value: str | None) -> str:
    timestamp = parse_publish_date(value)
    # Prowlarr sends DateTime.MinValue ("0001-01-01T00:00:00Z") for unknown dates.
    if timestamp <= 0:
        return "Unknown"
    try:
        return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, OverflowError, OSError):
        return "Unknown"


def format_result_row(result: SearchResult, indexers: Sequence[Indexer]) -> Text:
    """Single-line ``title | indexer (priority) | size | badge`` rendering."""
    separator = Text(" | ", style="dim")
    return Text.assemble(
        Text(result.title, style="green"),
        separator,
        Text(f"{result.indexer} ({indexer_priority(indexers, result.indexer)})", style="blue"),
        separator,
        Text(format_size(result.size), style="yellow"),
        separator,
        protocol_badge(result),
    )


def build_results_table(
    results: Sequence[SearchResult],
    indexers: Sequence[Indexer],
    *,
    start: int = 0,
    title: str | None = None,
    density: str = "normal",
) -> Table:
    priorities = priority_lookup(indexers)
    table = Table(
        title=title,
        box=None if density == "compact" else box.SIMPLE_HEAD,
        show_lines=density == "comfortable",
        padding=(0, 1),
    )
    table.add_column("#", style="cyan", justify="right", no_wrap=True)
    table.add_column("Title", style="green")
    table.add_column("Indexer", style="blue", no_wrap=True)
    table.add_column("Size", style="yellow", justify="right", no_wrap=True)
    table.add_column("Proto", no_wrap=True)
    for offset, result in enumerate(results, start=start + 1):
        table.add_row(
            str(offset),
            Text(result.title),
            f"{result.indexer} ({priorities.get(result.indexer, 0)})",
            format_size(result.size),
            protocol_badge(result),
        )
    return table


def _count(value: int | None) -> str:
    return "Unknown" if value is None else str(value)


def detail_lines(result: SearchResult) -> list[tuple[str, Text]]:
    categories = ", ".join(str(category) for category in result.categories) or "Unknown"
    lines: list[tuple[str, Text]] = [
        ("Title", Text(result.title, style="white")),
        ("Size", Text(format_size(result.size), style="yellow")),
        ("Indexer", Text(result.indexer, style="blue")),
        ("Protocol", Text(result.protocol or "Unknown", style="magenta")),
        ("Category", Text(categories, style="magenta")),
    ]
    if result.is_torrent:
        lines.append(("Seeders", Text(_count(result.seeders), style="green")))
        lines.append(("Leechers", Text(_count(result.leechers), style="red")))
    lines.append(("Published", Text(format_published(result.publish_date), style="white")))
    return lines


def _or_missing(value: object) -> str:
    if value is None or value == "":
        return NOT_AVAILABLE
    return str(value)


def extended_detail_lines(result: SearchResult) -> list[tuple[str, str]]:
    if result.is_torrent:
        magnet = _or_missing(result.magnet_url)
    else:
        magnet = "Not applicable for Usenet"
    return [
        ("Guid", _or_missing(result.guid)),
        ("InfoUrl", _or_missing(result.info_url)),
        ("CommentUrl", _or_missing(result.comment_url)),
        ("DownloadUrl", _or_missing(result.download_url)),
        ("MagnetUrl", magnet),
        ("Quality", _or_missing(result.quality)),
        ("IndexerId", _or_missing(result.indexer_id)),
        ("DownloadVolumeFactor", _or_missing(result.download_volume_factor)),
        ("UploadVolumeFactor", _or_missing(result.upload_volume_factor)),
    ]
