#!/usr/bin/env python3
"""
cli.py - Entry point for PROWLING - interactive Prowlarr search client
"""

try:
    import asyncio
    import sys
    import time
    from contextlib import nullcontext
    from pathlib import Path
    from typing import Awaitable, Callable, Optional, TypeVar

    from rich.markup import escape
    from rich.panel import Panel
    from rich.text import Text

    from . import logger
    from .config import ProwlingConfig, load_config, resolve_config_path
    from .logger import ProwlingLogger
    from .navigation.state import MenuState, SessionState
    from .prompts import (
        console,
        theme_style,
        ui_error,
        ui_info,
        ui_menu,
        ui_pause,
        ui_prompt,
        ui_prompt_yesno,
        ui_success,
        ui_warn,
    )
    from .search.actions import ItemAction, available_actions, external_client_url
    from .search.formatters import build_results_table, detail_lines, extended_detail_lines, format_result_row
    from .search.prowlarr_client import GatewayError, ProwlarrServiceAdapter
    from .search.qbittorrent_client import QBITTORRENT_TIPS, QBittorrentAdapter
    from .search.sorting import SORT_OPTIONS
    from .search.types import DownloadClient, Indexer, SearchResult
    from .settings.menu import persist_config, run_settings_menu
except ImportError as e:
    print(f"Error: Missing required dependency: {e}")
    print("Please install required dependencies: pip install -e .")
    sys.exit(1)

_T = TypeVar("_T")
_CLI_SESSION_START_MONOTONIC = time.monotonic()

ADULT_CATEGORIES: tuple[int, ...] = (
    6000, 100051, 126537, 100007, 6060, 100015, 6050, 6070, 6080, 6090, 100017, 100018, 100019, 100020,
)
MAIN_MENU_OPTIONS: tuple[tuple[str, str], ...] = (
    ("S", "🔍 Search"),
    ("T", "⚙️ Settings"),
    ("Q", "✕ Exit"),
)


def _reset_cli_session_timer() -> None:
    global _CLI_SESSION_START_MONOTONIC
    _CLI_SESSION_START_MONOTONIC = time.monotonic()


def _format_elapsed_runtime(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3_600:
        return f"{seconds / 60:.1f}m"
    if seconds < 86_400:
        return f"{seconds / 3_600:.1f}h"
    return f"{seconds / 86_400:.1f}d"


def _ui_goodbye_with_elapsed() -> None:
    elapsed = max(0.0, time.monotonic() - _CLI_SESSION_START_MONOTONIC)
    console.print(f"\n[yellow]Goodbye! ⚐[/yellow]  Elapsed {_format_elapsed_runtime(elapsed)}\n")


def _themed(config: ProwlingConfig, role: str, message: str) -> str:
    style = theme_style(getattr(config.theme, role, None))
    return f"[{style}]{message}[/{style}]"


def _status(session: SessionState, message: str):
    if session.config.settings.enable_animations:
        return console.status(message, spinner="dots")
    console.print(f"[grey50]{message}[/grey50]")
    return nullcontext()


def _notify(session: SessionState) -> None:
    settings = session.config.settings
    if settings.enable_notifications and settings.notification_sound:
        console.bell()


def _run_prowlarr(
    config: ProwlingConfig,
    operation: Callable[[ProwlarrServiceAdapter], Awaitable[_T]],
) -> _T:
    async def _runner() -> _T:
        adapter = ProwlarrServiceAdapter(config.server_url, config.api_key)
        try:
            return await operation(adapter)
        finally:
            await adapter.close()

    return asyncio.run(_runner())


async def _load_connection(adapter: ProwlarrServiceAdapter) -> tuple[list[Indexer], Optional[DownloadClient]]:
    await adapter.check_status()
    indexers = await adapter.list_indexers()
    try:
        clients = await adapter.list_download_clients()
    except GatewayError as exc:
        logger.warning(f"Could not load download clients: {exc}")
        clients = []
    enabled = [client for client in clients if client.enabled]
    return indexers, (enabled[0] if enabled else None)


def connect(session: SessionState) -> None:
    """Status handshake plus indexer/download-client load. Raises GatewayError."""
    with _status(session, "Connecting to Prowlarr..."):
        indexers, download_client = _run_prowlarr(session.config, _load_connection)
    session.indexers = indexers
    session.download_client = download_client
    ui_success(f"Connected to Prowlarr - loaded {len(indexers)} indexers")
    if download_client is not None:
        ui_info(f"Download client: {escape(download_client.name)}")


def _refresh_connection(session: SessionState) -> None:
    try:
        connect(session)
    except GatewayError as exc:
        ui_error(f"Failed to connect: {escape(str(exc))}")
        ui_warn("Settings saved, but connection failed. Please check the URL and API key.")


def _ensure_credentials(config: ProwlingConfig) -> None:
    if config.has_credentials:
        return
    changed = False
    while not config.server_url.startswith("http"):
        if config.server_url:
            ui_warn("URL must start with http:// or https://")
        config.server_url = ui_prompt("⊡ Enter Prowlarr server URL (e.g. http://localhost:9696)").strip()
        changed = True
    while not config.api_key:
        config.api_key = ui_prompt("⚿ Enter your Prowlarr API key", password=True).strip()
        if not config.api_key:
            ui_warn("API key cannot be empty")
        changed = True
    if changed and persist_config(config):
        ui_success("Configuration saved")


def _render_banner(config: ProwlingConfig) -> None:
    console.print(Panel(
        "[bold white]⚲ Prowling - Prowlarr Search Client[/bold white]",
        border_style=theme_style(config.theme.primary),
        expand=False,
    ))


def _handle_main_menu(session: SessionState) -> MenuState:
    choice = ui_menu(_themed(session.config, "highlight", "⚇ Main Menu:"), MAIN_MENU_OPTIONS, default="S")
    if choice == "Q":
        return MenuState.EXIT
    if choice == "T":
        return MenuState.SETTINGS_MENU
    if choice == "S":
        return MenuState.CATEGORY_SELECT
    return MenuState.MAIN_MENU


def _category_options(session: SessionState) -> list[tuple[str, str, Optional[list[int]]]]:
    options: list[tuple[str, str, Optional[list[int]]]] = [
        ("1", "⚓ Movies", [2000]),
        ("2", "⚔ TV Shows", [5000]),
    ]
    if session.config.settings.show_adult_content:
        options.append(("3", "⚠ Adult Content", list(ADULT_CATEGORIES)))
    options.append(("A", "⊡ All Categories", None))
    return options


def _handle_category_select(session: SessionState) -> MenuState:
    categories = _category_options(session)
    menu = [(key, label) for key, label, _ in categories] + [("B", "← Back")]
    choice = ui_menu(_themed(session.config, "highlight", "⚇ Select a category to search:"), menu, default="A")
    if choice is None:
        return MenuState.CATEGORY_SELECT
    if choice == "B":
        return MenuState.MAIN_MENU
    session.categories = next(value for key, _, value in categories if key == choice)
    return MenuState.QUERY_INPUT


def _handle_query_input(session: SessionState) -> MenuState:
    query = ui_prompt('⚲ Enter search query (or "back" to return)').strip()
    if query.lower() == "back":
        return MenuState.MAIN_MENU
    if query.lower() == "exit":
        return MenuState.EXIT
    if not query:
        ui_warn("Search query cannot be empty.")
        return MenuState.QUERY_INPUT

    try:
        with _status(session, "Searching across indexers..."):
            results = _run_prowlarr(
                session.config,
                lambda adapter: adapter.search(query, session.categories, session.indexer_ids),
            )
    except GatewayError as exc:
        ui_error(f"Search failed: {escape(str(exc))}")
        hint = exc.user_hint()
        if hint:
            console.print(f"[red]{hint}[/red]")
        ui_pause()
        return MenuState.CATEGORY_SELECT

    ui_success(f"Search completed - Found {len(results)} results")
    _notify(session)
    if not results:
        ui_warn("No results found 😕")
        return MenuState.MAIN_MENU

    session.stack.clear()
    session.view.load(results)
    session.view.sort(session.config.settings.default_sort_order, session.indexers)
    return MenuState.RESULTS_LIST


def _render_results_page(session: SessionState) -> tuple[int, int]:
    view = session.view
    page_size = session.config.settings.results_per_page
    start, rows = view.page_items(page_size)
    title = "Select an item from filtered results" if view.is_filtered else "Select an item to view details"
    console.print(build_results_table(
        rows,
        session.indexers,
        start=start,
        title=title,
        density=session.config.settings.display_density,
    ))
    pages = view.page_count(page_size)
    console.print(f"[grey50]Page {view.page + 1}/{pages} · {len(view.displayed)} of {len(view.results)} results[/grey50]")
    return view.page, pages


def _results_menu(session: SessionState, page: int, pages: int) -> list[tuple[str, str]]:
    options: list[tuple[str, str]] = [("#", "Select an item by number")]
    if page + 1 < pages:
        options.append(("N", "→ Next page"))
    if page > 0:
        options.append(("P", "← Previous page"))
    options.append(("F", "🔍 Search within results"))
    options.append(("O", "⚡ Sort results"))
    if session.view.is_filtered:
        options.append(("A", "↺ Show all results"))
    options.append(("B", "← Back to search"))
    return options


def _handle_results_list(session: SessionState) -> MenuState:
    view = session.view
    page, pages = _render_results_page(session)
    options = _results_menu(session, page, pages)
    console.print()
    for key, label in options:
        console.print(f"  [cyan]\\[{key}][/cyan] {label}")
    answer = ui_prompt("⚟ Choice", default="B").strip()
    choice = answer.upper()

    if answer.isdigit():
        index = int(answer) - 1
        if 0 <= index < len(view.displayed):
            session.open_item(view.displayed[index])
            return MenuState.ITEM_DETAIL
        ui_warn(f"Pick a number between 1 and {len(view.displayed)}.")
    elif choice == "N" and page + 1 < pages:
        view.page += 1
    elif choice == "P" and page > 0:
        view.page -= 1
    elif choice == "O":
        _prompt_sort(session)
    elif choice == "F":
        _prompt_filter(session)
    elif choice == "A" and view.is_filtered:
        view.show_all()
    elif choice == "B":
        session.stack.clear()
        view.clear()
        return MenuState.CATEGORY_SELECT
    else:
        ui_warn("Unknown choice. Please select a listed option.")
    return MenuState.RESULTS_LIST


def _prompt_sort(session: SessionState) -> None:
    options = [(str(idx), label) for idx, (_key, label) in enumerate(SORT_OPTIONS, start=1)]
    choice = ui_menu("⚡ Sort results by:", options, default="3")
    if choice is None:
        return
    sort_by = SORT_OPTIONS[int(choice) - 1][0]
    session.view.sort(sort_by, session.indexers)


def _prompt_filter(session: SessionState) -> None:
    term = ui_prompt("🔍 Enter search term", default="")
    matches = session.view.filter(term)
    if matches is None:
        return
    if not matches:
        ui_warn("No matches found in current results 😕")
        ui_pause()
        return
    ui_success(f"Found {len(matches)} matching results")


def _render_item_details(session: SessionState, result: SearchResult) -> None:
    console.print(Panel(
        "[bold white]⚏ Item Details[/bold white]",
        border_style=theme_style(session.config.theme.primary),
        expand=False,
    ))
    console.print(format_result_row(result, session.indexers))
    for label, value in detail_lines(result):
        console.print(Text.assemble((f"{label}: ", "bold"), value))
    if session.config.settings.show_extended_info:
        _print_extended_details(result)


def _print_extended_details(result: SearchResult) -> None:
    console.print(Text("\nTechnical Information:", style="bold"))
    for label, value in extended_detail_lines(result):
        console.print(Text.assemble((f"{label}: ", "bold"), (value, "white")))
    if result.description:
        console.print(Text("\nDescription:", style="bold"))
        console.print(Text(result.description, style="white"))


def _show_extended_details(result: SearchResult) -> None:
    console.print(Panel("[bold white]⚲ Extended Details[/bold white]", border_style="cyan", expand=False))
    _print_extended_details(result)
    ui_pause()


def _show_url(label: str, url: Optional[str]) -> None:
    console.print(f"\n[cyan]{label}:[/cyan]")
    console.print(Text(url or "Not available", style="white"))
    ui_pause()


def _confirm_forward(session: SessionState, result: SearchResult, target: str) -> bool:
    if not session.config.settings.confirm_downloads:
        return True
    return ui_prompt_yesno(f"Send '{escape(result.title)}' to {escape(target)}?", default_yes=True)


def _open_in_qbittorrent(session: SessionState, result: SearchResult) -> None:
    url = external_client_url(result)
    if not session.config.qbittorrent_url:
        ui_error("qBittorrent URL not configured")
    elif not url:
        ui_error("No valid URL available for this item")
    elif _confirm_forward(session, result, "qBittorrent"):
        adapter = QBittorrentAdapter(session.config.qbittorrent_url)
        try:
            with _status(session, "Sending to qBittorrent..."):
                asyncio.run(adapter.add_urls(url))
        except GatewayError as exc:
            ui_error(f"Failed to send to qBittorrent: {escape(str(exc))}")
            for tip in QBITTORRENT_TIPS:
                console.print(f"[yellow]{tip}[/yellow]")
        else:
            ui_success("Sent to qBittorrent")
            _notify(session)
    ui_pause()


def _send_to_download_client(session: SessionState, result: SearchResult) -> None:
    client = session.download_client
    if client is None:
        ui_error("No download client configured")
    elif _confirm_forward(session, result, client.name or "download client"):
        try:
            with _status(session, "Sending to download client..."):
                _run_prowlarr(session.config, lambda adapter: adapter.send_to_download_client(result, client))
        except GatewayError as exc:
            ui_error(f"Failed to send to download client: {escape(str(exc))}")
        else:
            ui_success("Sent to download client")
            _notify(session)
    ui_pause()


def _handle_item_detail(session: SessionState) -> MenuState:
    result = session.selected
    if result is None:
        return MenuState.RESULTS_LIST
    _render_item_details(session, result)
    choices = available_actions(
        result,
        external_client_configured=bool(session.config.qbittorrent_url),
        download_client_available=session.download_client is not None,
    )
    options = [(str(idx), choice.label) for idx, choice in enumerate(choices, start=1)]
    picked = ui_menu(_themed(session.config, "success", "⚡ What would you like to do?"), options)
    if picked is None:
        return MenuState.ITEM_DETAIL
    action = choices[int(picked) - 1].action

    if action is ItemAction.COPY_DOWNLOAD_URL:
        _show_url("NZB URL" if result.is_usenet else "Torrent URL", result.download_url)
    elif action is ItemAction.COPY_MAGNET_URL:
        _show_url("Magnet URL", result.magnet_url)
    elif action is ItemAction.OPEN_EXTERNAL_CLIENT:
        _open_in_qbittorrent(session, result)
    elif action is ItemAction.SEND_TO_DOWNLOAD_CLIENT:
        _send_to_download_client(session, result)
    elif action is ItemAction.MORE_INFO:
        _show_extended_details(result)
    elif action is ItemAction.BACK:
        session.close_item()
        return MenuState.RESULTS_LIST
    elif action is ItemAction.MAIN_MENU:
        session.reset_to_main()
        return MenuState.MAIN_MENU
    return MenuState.ITEM_DETAIL


def _handle_settings_menu(session: SessionState) -> MenuState:
    run_settings_menu(session, _refresh_connection)
    return MenuState.MAIN_MENU


STATE_HANDLERS: dict[MenuState, Callable[[SessionState], MenuState]] = {
    MenuState.MAIN_MENU: _handle_main_menu,
    MenuState.CATEGORY_SELECT: _handle_category_select,
    MenuState.QUERY_INPUT: _handle_query_input,
    MenuState.RESULTS_LIST: _handle_results_list,
    MenuState.ITEM_DETAIL: _handle_item_detail,
    MenuState.SETTINGS_MENU: _handle_settings_menu,
}


def run_navigation(session: SessionState, state: MenuState = MenuState.MAIN_MENU) -> None:
    """
    Drive the menu state machine until EXIT.

    Ctrl+C below the main menu drops navigation history and returns to the
    main menu; at the main menu it propagates so the caller can exit.
    """
    while state is not MenuState.EXIT:
        try:
            state = STATE_HANDLERS[state](session)
        except KeyboardInterrupt:
            if state is MenuState.MAIN_MENU:
                raise
            console.print("\n[cyan]Going back to main menu...[/cyan]\n")
            session.reset_to_main()
            state = MenuState.MAIN_MENU


def _configure_logger(config: ProwlingConfig) -> None:
    if not (config.debug or config.log_file):
        return
    log_file = Path(config.log_file).expanduser() if config.log_file else None
    logger.set_logger(ProwlingLogger(log_file=log_file, debug=config.debug))


def main():
    """Entry point"""
    _reset_cli_session_timer()
    try:
        config = load_config(resolve_config_path())
        _configure_logger(config)
        _ensure_credentials(config)
        session = SessionState(config=config)
        try:
            connect(session)
        except GatewayError as exc:
            ui_error(f"Failed to connect: {escape(str(exc))}")
            sys.exit(1)

        _render_banner(config)
        run_navigation(session)
        _ui_goodbye_with_elapsed()
        sys.exit(0)
    except KeyboardInterrupt:
        _ui_goodbye_with_elapsed()
        sys.exit(0)
    except Exception as e:
        ui_error(f"Fatal error: {escape(str(e))}")
        sys.exit(1)
    finally:
        logger.get_logger().close()


if __name__ == "__main__":
    main()
