"""Which actions a selected result supports, derived from its populated fields."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from prowling.search.types import SearchResult


class ItemAction(str, Enum):
    COPY_DOWNLOAD_URL = "copy_download_url"
    COPY_MAGNET_URL = "copy_magnet_url"
    OPEN_EXTERNAL_CLIENT = "open_external_client"
    SEND_TO_DOWNLOAD_CLIENT = "send_to_download_client"
    MORE_INFO = "more_info"
    BACK = "back"
    MAIN_MENU = "main_menu"


@dataclass(frozen=True)
class ActionChoice:
    action: ItemAction
    label: str


def available_actions(
    result: SearchResult,
    *,
    external_client_configured: bool,
    download_client_available: bool,
) -> tuple[ActionChoice, ...]:
    choices: list[ActionChoice] = []
    if result.download_url:
        label = "⚡ Copy NZB URL" if result.is_usenet else "⚟ Copy torrent URL"
        choices.append(ActionChoice(ItemAction.COPY_DOWNLOAD_URL, label))

    if result.magnet_url:
        choices.append(ActionChoice(ItemAction.COPY_MAGNET_URL, "⚲ Copy magnet URL"))
        if external_client_configured:
            choices.append(ActionChoice(ItemAction.OPEN_EXTERNAL_CLIENT, "⚓ Open in qBittorrent"))
    elif result.download_url and result.is_torrent and external_client_configured:
        choices.append(ActionChoice(ItemAction.OPEN_EXTERNAL_CLIENT, "⚓ Open in qBittorrent"))

    if download_client_available and (result.download_url or result.magnet_url):
        choices.append(ActionChoice(ItemAction.SEND_TO_DOWNLOAD_CLIENT, "📥 Send to download client"))

    choices.extend(
        (
            ActionChoice(ItemAction.MORE_INFO, "⚲ View more details"),
            ActionChoice(ItemAction.BACK, "← Back to results"),
            ActionChoice(ItemAction.MAIN_MENU, "⌂ Back to main menu"),
        )
    )
    return tuple(choices)


def external_client_url(result: SearchResult) -> str | None:
    """Magnet preferred over the torrent file URL."""
    return result.magnet_url or result.download_url
