"""
config.py - Configuration model and JSON store for Prowling
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from prowling import logger

CONFIG_FILENAME = "config.json"

SortOrder = Literal[
    "title_asc",
    "title_desc",
    "seeders_desc",
    "seeders_asc",
    "size_desc",
    "size_asc",
    "date_desc",
    "date_asc",
    "protocol",
    "indexer_priority_desc",
    "indexer_priority_asc",
]
DisplayDensity = Literal["compact", "normal", "comfortable"]
DisplayMode = Literal["auto", "light", "dark"]

THEME_COLORS: tuple[str, ...] = ("black", "red", "green", "yellow", "blue", "magenta", "cyan", "white", "gray")


class ConfigError(Exception):
    """Raised when the configuration file cannot be written."""


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class ThemeConfig(_CamelModel):
    """Color identifier for each named UI role."""

    primary: str = "cyan"
    secondary: str = "yellow"
    success: str = "green"
    error: str = "red"
    warning: str = "yellow"
    info: str = "blue"
    highlight: str = "magenta"


class UISettings(_CamelModel):
    page_size: int = Field(default=15, description="Items per page in menus")
    default_sort_order: SortOrder = "seeders_desc"
    default_download_dir: str = ""
    show_adult_content: bool = True
    show_extended_info: bool = False
    confirm_downloads: bool = True
    auto_refresh_results: bool = False
    results_per_page: int = Field(default=30, description="Rows per page in the results list")
    display_density: DisplayDensity = "normal"
    enable_notifications: bool = True
    notification_sound: bool = True
    enable_keyboard_shortcuts: bool = True
    auto_save_search_history: bool = True
    max_search_history: int = 20
    enable_animations: bool = True
    display_mode: DisplayMode = "auto"
    cache_results: bool = True
    cache_duration: int = Field(default=30, description="Minutes")

    @field_validator("page_size", "results_per_page")
    @classmethod
    def _positive_page(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number")
        return value


class ProwlingConfig(_CamelModel):
    server_url: str = ""
    api_key: str = ""
    qbittorrent_url: str = ""
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    settings: UISettings = Field(default_factory=UISettings)
    debug: bool = False
    log_file: str = ""
    config_path: Optional[Path] = Field(default=None, exclude=True)

    @property
    def has_credentials(self) -> bool:
        return bool(self.server_url.startswith("http") and self.api_key)

    def to_payload(self) -> dict:
        """JSON-ready mapping with the on-disk camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude={"config_path"})


def default_config(config_path: Optional[Path] = None) -> ProwlingConfig:
    return ProwlingConfig(config_path=config_path)


def resolve_config_path() -> Path:
    cwd_candidate = Path.cwd() / CONFIG_FILENAME
    if cwd_candidate.exists():
        return cwd_candidate

    repo_root = Path(__file__).resolve().parent.parent
    if (repo_root / "prowling.py").exists() or (repo_root / "pyproject.toml").exists():
        return repo_root / CONFIG_FILENAME
    return cwd_candidate


def load_config(config_path: Path) -> ProwlingConfig:
    """Load configuration from a JSON file, falling back to defaults."""

    if not config_path.exists():
        return default_config(config_path)

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError(f"root must be an object, got {type(raw).__name__}")
        # Saved sections are merged over the defaults one level deep.
        merged = default_config().to_payload()
        for key, value in raw.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = {**merged[key], **value}
            else:
                merged[key] = value
        config = ProwlingConfig.model_validate(merged)
    except (OSError, ValueError, ValidationError) as exc:
        logger.warning(f"Could not load config file {config_path} ({exc}). Using default settings.")
        return default_config(config_path)

    config.config_path = config_path
    return config


def save_config(config: ProwlingConfig, config_path: Optional[Path] = None) -> Path:
    """Write the configuration as indented JSON. Raises ConfigError on failure."""
    path = config_path or config.config_path
    if path is None:
        raise ConfigError("No configuration path set")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(config.to_payload(), indent=4) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to save configuration: {exc}") from exc
    config.config_path = path
    return path
