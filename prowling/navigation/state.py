"""Explicit navigation state: menu states, the results view and its snapshot stack."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from prowling.config import ProwlingConfig
from prowling.search.sorting import filter_results, sort_results
from prowling.search.types import DownloadClient, Indexer, SearchResult


class MenuState(Enum):
    MAIN_MENU = "main_menu"
    CATEGORY_SELECT = "category_select"
    QUERY_INPUT = "query_input"
    RESULTS_LIST = "results_list"
    ITEM_DETAIL = "item_detail"
    SETTINGS_MENU = "settings_menu"
    EXIT = "exit"


@dataclass(frozen=True)
class ResultsSnapshot:
    results: tuple[SearchResult, ...]
    displayed: tuple[SearchResult, ...]
    is_filtered: bool
    page: int = 0


@dataclass
class ResultsView:
    """
    The full result sequence of the latest search plus what is on screen.

    ``results`` is never reordered; ``displayed`` is always a permutation or
    subset of it.
    """

    results: tuple[SearchResult, ...] = ()
    displayed: tuple[SearchResult, ...] = ()
    is_filtered: bool = False
    page: int = 0

    def load(self, results: Sequence[SearchResult]) -> None:
        self.results = tuple(results)
        self.displayed = self.results
        self.is_filtered = False
        self.page = 0

    def sort(self, sort_by: str, indexers: Sequence[Indexer] = ()) -> None:
        self.displayed = sort_results(self.displayed, sort_by, indexers)
        self.page = 0

    def filter(self, query: str) -> Optional[tuple[SearchResult, ...]]:
        """Apply a title filter; the view is left unchanged on a blank query or no match."""
        matches = filter_results(self.results, query)
        if matches:
            self.displayed = matches
            self.is_filtered = True
            self.page = 0
        return matches

    def show_all(self) -> None:
        self.displayed = self.results
        self.is_filtered = False
        self.page = 0

    def page_count(self, page_size: int) -> int:
        if not self.displayed:
            return 1
        return (len(self.displayed) + page_size - 1) // page_size

    def page_items(self, page_size: int) -> tuple[int, tuple[SearchResult, ...]]:
        """Start offset and rows of the current page (page index clamped)."""
        self.page = max(0, min(self.page, self.page_count(page_size) - 1))
        start = self.page * page_size
        return start, self.displayed[start:start + page_size]

    def snapshot(self) -> ResultsSnapshot:
        return ResultsSnapshot(self.results, self.displayed, self.is_filtered, self.page)

    def restore(self, snapshot: ResultsSnapshot) -> None:
        self.results = snapshot.results
        self.displayed = snapshot.displayed
        self.is_filtered = snapshot.is_filtered
        self.page = snapshot.page

    def clear(self) -> None:
        self.load(())


@dataclass
class NavigationStack:
    _items: list[ResultsSnapshot] = field(default_factory=list)

    def push(self, snapshot: ResultsSnapshot) -> None:
        self._items.append(snapshot)

    def pop(self) -> Optional[ResultsSnapshot]:
        if not self._items:
            return None
        return self._items.pop()

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)


@dataclass
class SessionState:
    """Everything one interactive run owns; passed to every menu handler."""

    config: ProwlingConfig
    indexers: list[Indexer] = field(default_factory=list)
    download_client: Optional[DownloadClient] = None
    categories: Optional[list[int]] = None
    view: ResultsView = field(default_factory=ResultsView)
    stack: NavigationStack = field(default_factory=NavigationStack)
    selected: Optional[SearchResult] = None

    @property
    def indexer_ids(self) -> list[int]:
        return [indexer.id for indexer in self.indexers]

    def open_item(self, result: SearchResult) -> None:
        self.stack.push(self.view.snapshot())
        self.selected = result

    def close_item(self) -> None:
        snapshot = self.stack.pop()
        if snapshot is not None:
            self.view.restore(snapshot)
        self.selected = None

    def reset_to_main(self) -> None:
        """Drop navigation history; configuration and indexers are kept."""
        self.stack.clear()
        self.selected = None
        self.categories = None
        self.view.clear()
