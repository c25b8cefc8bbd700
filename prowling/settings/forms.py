"""Declarative settings forms: which config fields each settings sub-menu edits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from prowling.config import THEME_COLORS, ProwlingConfig, ThemeConfig, UISettings

FieldKind = Literal["bool", "int", "choice", "text", "url", "password", "info"]
FieldTarget = Literal["connection", "theme", "settings"]


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: FieldKind
    target: FieldTarget = "settings"
    prompt: str = ""
    choices: tuple[tuple[str, str], ...] = ()
    minimum: int = 0
    maximum: int = 0
    optional: bool = False
    info: tuple[str, ...] = ()


@dataclass(frozen=True)
class SettingsForm:
    key: str
    title: str
    description: str
    fields: tuple[FieldSpec, ...]


DEFAULT_SORT_CHOICES: tuple[tuple[str, str], ...] = (
    ("title_asc", "Title (A-Z)"),
    ("title_desc", "Title (Z-A)"),
    ("seeders_desc", "Seeders (High to Low)"),
    ("seeders_asc", "Seeders (Low to High)"),
    ("size_desc", "Size (Large to Small)"),
    ("size_asc", "Size (Small to Large)"),
    ("date_desc", "Date (Newest First)"),
    ("date_asc", "Date (Oldest First)"),
)

KEYBOARD_SHORTCUTS: tuple[str, ...] = (
    "Available shortcuts:",
    "- Ctrl+S: Quick search",
    "- Ctrl+D: Download selected item",
    "- Ctrl+R: Refresh results",
    "- Ctrl+H: View search history",
    "- Ctrl+F: Filter results",
)

_NOT_CUSTOMIZABLE = (
    "These shortcuts are currently not customizable.",
    "This feature will be available in a future update.",
)

THEME_ROLE_LABELS: tuple[tuple[str, str], ...] = (
    ("primary", "Primary Color (Headers, Borders)"),
    ("secondary", "Secondary Color (Subtitles, Info)"),
    ("success", "Success Color (Confirmations)"),
    ("error", "Error Color (Error Messages)"),
    ("warning", "Warning Color (Warnings, Alerts)"),
    ("info", "Info Color (Information Messages)"),
    ("highlight", "Highlight Color (Selected Items)"),
)

_COLOR_CHOICES = tuple((color, color) for color in THEME_COLORS)

SETTINGS_FORMS: tuple[SettingsForm, ...] = (
    SettingsForm(
        "connection",
        "🔌 Connection Settings",
        "Configure connection to Prowlarr and other services.",
        (
            FieldSpec("server_url", "Prowlarr Server URL", "url", "connection", "Enter Prowlarr server URL"),
            FieldSpec("api_key", "Prowlarr API Key", "password", "connection", "Enter Prowlarr API key"),
            FieldSpec(
                "qbittorrent_url",
                "qBittorrent WebUI URL",
                "url",
                "connection",
                "Enter qBittorrent WebUI URL (leave empty to disable)",
                optional=True,
            ),
        ),
    ),
    SettingsForm(
        "theme",
        "🎨 Theme Colors",
        "Select colors for different elements of the application.",
        tuple(
            FieldSpec(role, label, "choice", "theme", f"Choose a color for {role}", choices=_COLOR_CHOICES)
            for role, label in THEME_ROLE_LABELS
        ),
    ),
    SettingsForm(
        "ui",
        "🖥️ UI Preferences",
        "Adjust how the application interface behaves.",
        (
            FieldSpec("page_size", "Page Size (Items per page in menus)", "int", minimum=1, maximum=100),
            FieldSpec("results_per_page", "Results Per Page (Search results)", "int", minimum=1, maximum=100),
            FieldSpec("show_extended_info", "Show Extended Info by Default", "bool",
                      prompt="Show extended information by default?"),
        ),
    ),
    SettingsForm(
        "download",
        "📥 Download Settings",
        "Configure how downloads are handled.",
        (
            FieldSpec("default_download_dir", "Default Download Directory", "text",
                      prompt="Enter default download directory", optional=True),
            FieldSpec("confirm_downloads", "Confirm Downloads", "bool", prompt="Confirm before downloading?"),
        ),
    ),
    SettingsForm(
        "search",
        "🔍 Search Preferences",
        "Configure how search results are displayed and sorted.",
        (
            FieldSpec("default_sort_order", "Default Sort Order", "choice",
                      prompt="Select default sort order", choices=DEFAULT_SORT_CHOICES),
            FieldSpec("show_adult_content", "Show Adult Content", "bool", prompt="Enable adult content?"),
            FieldSpec("auto_refresh_results", "Auto-Refresh Results", "bool", prompt="Enable auto-refresh results?"),
        ),
    ),
    SettingsForm(
        "appearance",
        "👁️ Appearance Settings",
        "Configure how the application looks and feels.",
        (
            FieldSpec(
                "display_density",
                "Display Density",
                "choice",
                prompt="Select display density",
                choices=(
                    ("compact", "Compact - Show more items with less spacing"),
                    ("normal", "Normal - Balanced spacing"),
                    ("comfortable", "Comfortable - More spacing between items"),
                ),
            ),
            FieldSpec("enable_animations", "Enable Animations", "bool", prompt="Enable UI animations?"),
            FieldSpec(
                "display_mode",
                "Display Mode",
                "choice",
                prompt="Select display mode",
                choices=(("auto", "Auto - Follow system settings"), ("light", "Light Mode"), ("dark", "Dark Mode")),
            ),
        ),
    ),
    SettingsForm(
        "keyboard",
        "⌨️ Keyboard Shortcuts",
        "Configure keyboard shortcuts for faster navigation.",
        (
            FieldSpec("enable_keyboard_shortcuts", "Enable Keyboard Shortcuts", "bool",
                      prompt="Enable keyboard shortcuts?", info=KEYBOARD_SHORTCUTS),
            FieldSpec("search_shortcuts", "Configure Search Shortcuts", "info",
                      info=("Search Shortcuts", *_NOT_CUSTOMIZABLE)),
            FieldSpec("navigation_shortcuts", "Configure Navigation Shortcuts", "info",
                      info=("Navigation Shortcuts", *_NOT_CUSTOMIZABLE)),
        ),
    ),
    SettingsForm(
        "notifications",
        "🔔 Notification Settings",
        "Configure how and when notifications appear.",
        (
            FieldSpec("enable_notifications", "Enable Notifications", "bool", prompt="Enable notifications?"),
            FieldSpec("notification_sound", "Notification Sound", "bool", prompt="Enable notification sounds?"),
            FieldSpec(
                "notification_types",
                "Notification Types",
                "info",
                info=(
                    "Notification Types",
                    "Search Complete, Download Started, Download Complete and Error Notifications are always on.",
                    "This feature will be expanded in a future update.",
                ),
            ),
        ),
    ),
    SettingsForm(
        "performance",
        "⚡ Performance Settings",
        "Configure application performance and caching.",
        (
            FieldSpec("cache_results", "Enable Result Caching", "bool", prompt="Enable result caching?"),
            FieldSpec("cache_duration", "Cache Duration (minutes)", "int",
                      prompt="Enter cache duration in minutes", minimum=1, maximum=1440),
            FieldSpec("auto_save_search_history", "Auto-Save Search History", "bool",
                      prompt="Enable auto-save search history?"),
            FieldSpec("max_search_history", "Max Search History Items", "int",
                      prompt="Enter maximum number of search history items to save", minimum=0, maximum=100),
        ),
    ),
)

FORMS_BY_KEY: dict[str, SettingsForm] = {form.key: form for form in SETTINGS_FORMS}


def _target(config: ProwlingConfig, field: FieldSpec) -> Any:
    if field.target == "connection":
        return config
    if field.target == "theme":
        return config.theme
    return config.settings


def current_value(config: ProwlingConfig, field: FieldSpec) -> Any:
    if field.kind == "info":
        return None
    return getattr(_target(config, field), field.name)


def validate_value(field: FieldSpec, value: Any) -> str | None:
    """Error message for an invalid value, or None when it may be stored."""
    if field.kind in ("url", "text", "password"):
        text = str(value or "")
        if not text:
            if field.optional:
                return None
            return f"{field.label} cannot be empty"
        if field.kind == "url" and not text.startswith("http"):
            return "URL must start with http:// or https://"
        return None
    if field.kind == "int":
        if isinstance(value, bool) or not isinstance(value, int):
            return "Please enter a whole number"
        if not field.minimum <= value <= field.maximum:
            return f"Please enter a number between {field.minimum} and {field.maximum}"
        return None
    if field.kind == "choice":
        if value not in {key for key, _ in field.choices}:
            return f"Unsupported value '{value}'"
        return None
    if field.kind == "bool":
        return None if isinstance(value, bool) else "Expected yes or no"
    return f"{field.label} is not editable"


def apply_value(config: ProwlingConfig, field: FieldSpec, value: Any) -> None:
    error = validate_value(field, value)
    if error:
        raise ValueError(error)
    setattr(_target(config, field), field.name, value)


def reset_to_defaults(config: ProwlingConfig) -> None:
    """Restore theme and UI settings; connection details are kept."""
    config.theme = ThemeConfig()
    config.settings = UISettings()
