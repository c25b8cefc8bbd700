from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from prowling import config as config_module
from prowling.config import ConfigError, ProwlingConfig, UISettings, load_config, save_config


class _FakeLogger:
    def __init__(self) -> None:
        self.warnings: list[str] = []

    def warning(self, msg: str) -> None:
        self.warnings.append(msg)


@pytest.fixture
def fake_logger(monkeypatch: pytest.MonkeyPatch) -> _FakeLogger:
    fake = _FakeLogger()
    monkeypatch.setattr(config_module.logger, "warning", fake.warning)
    return fake


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"

    config = load_config(path)

    assert config.server_url == ""
    assert config.theme.primary == "cyan"
    assert config.settings.default_sort_order == "seeders_desc"
    assert config.settings.results_per_page == 30
    assert config.config_path == path
    assert not config.has_credentials


def test_save_then_load_round_trips_camel_case_keys(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    config = ProwlingConfig(server_url="http://localhost:9696", api_key="abc")
    config.settings.results_per_page = 12
    config.settings.display_density = "compact"
    config.theme.primary = "magenta"

    save_config(config, path)
    raw = json.loads(path.read_text(encoding="utf-8"))
    loaded = load_config(path)

    assert raw["serverUrl"] == "http://localhost:9696"
    assert raw["settings"]["resultsPerPage"] == 12
    assert raw["qbittorrentUrl"] == ""
    assert "configPath" not in raw
    assert loaded.to_payload() == config.to_payload()
    assert loaded.has_credentials


def test_partial_sections_merge_over_defaults(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"theme": {"primary": "red"}, "settings": {"pageSize": 5}}), encoding="utf-8")

    config = load_config(path)

    assert config.theme.primary == "red"
    assert config.theme.secondary == "yellow"
    assert config.settings.page_size == 5
    assert config.settings.confirm_downloads is True


def test_unknown_keys_survive_a_save(tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"serverUrl": "http://x", "legacyFlag": 1, "settings": {"futureKnob": "on"}}))

    save_config(load_config(path))
    raw = json.loads(path.read_text(encoding="utf-8"))

    assert raw["legacyFlag"] == 1
    assert raw["settings"]["futureKnob"] == "on"


@pytest.mark.parametrize(
    "content",
    ["{not json", "[1, 2]", json.dumps({"settings": {"resultsPerPage": 0}})],
)
def test_unreadable_config_falls_back_to_defaults_with_warning(
    tmp_path: Path, fake_logger: _FakeLogger, content: str
) -> None:
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")

    config = load_config(path)

    assert config.to_payload() == ProwlingConfig().to_payload()
    assert config.config_path == path
    assert len(fake_logger.warnings) == 1
    assert "Using default settings" in fake_logger.warnings[0]


def test_save_failure_raises_config_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to save configuration"):
        save_config(ProwlingConfig(), blocker / "config.json")


def test_save_without_path_raises_config_error() -> None:
    with pytest.raises(ConfigError):
        save_config(ProwlingConfig())


def test_page_sizes_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        UISettings(results_per_page=0)
    with pytest.raises(ValidationError):
        UISettings.model_validate({"pageSize": -1})


def test_resolve_config_path_prefers_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "config.json").write_text("{}", encoding="utf-8")

    assert config_module.resolve_config_path().resolve() == (tmp_path / "config.json").resolve()


def test_credentials_need_http_url_and_key() -> None:
    assert not ProwlingConfig(server_url="localhost:9696", api_key="abc").has_credentials
    assert not ProwlingConfig(server_url="http://localhost:9696", api_key="").has_credentials
    assert ProwlingConfig(server_url="https://prowlarr.example", api_key="abc").has_credentials
