from __future__ import annotations

import pytest

from prowling import prompts


def _answers(monkeypatch: pytest.MonkeyPatch, *values: str) -> list[tuple[str, object]]:
    queue = list(values)
    asked: list[tuple[str, object]] = []

    def _fake_ask(label: str, default: object = None, **_kwargs) -> str:
        asked.append((label, default))
        return queue.pop(0)

    monkeypatch.setattr(prompts.Prompt, "ask", _fake_ask)
    return asked


def _capture(monkeypatch: pytest.MonkeyPatch) -> list[str]:
    lines: list[str] = []
    monkeypatch.setattr(prompts.console, "print", lambda msg="", *_args, **_kwargs: lines.append(str(msg)))
    return lines


def test_ui_info_warn_error_emit_prefixed_messages(monkeypatch: pytest.MonkeyPatch) -> None:
    lines = _capture(monkeypatch)

    prompts.ui_info("hello")
    prompts.ui_warn("careful")
    prompts.ui_error("boom")

    assert lines == [
        "[cyan][INFO][/cyan] hello",
        "[yellow][WARNING][/yellow] careful",
        "[red][ERROR][/red] boom",
    ]


def test_ui_prompt_with_and_without_default(monkeypatch: pytest.MonkeyPatch) -> None:
    asked = _answers(monkeypatch, "answer", "answer")

    assert prompts.ui_prompt("Label") == "answer"
    assert prompts.ui_prompt("Label2", default="X") == "answer"
    assert asked == [("Label", None), ("Label2", "X")]


def test_ui_prompt_password_hides_input(monkeypatch: pytest.MonkeyPatch) -> None:
    seen: dict[str, object] = {}

    def _fake_ask(label: str, **kwargs) -> str:
        seen.update(kwargs)
        return "secret"

    monkeypatch.setattr(prompts.Prompt, "ask", _fake_ask)

    assert prompts.ui_prompt("Key", password=True) == "secret"
    assert seen == {"password": True}


@pytest.mark.parametrize(
    ("raw", "default_yes", "expected"),
    [("y", False, True), ("no", True, False), ("", True, True), ("", False, False), ("maybe", False, False)],
)
def test_ui_prompt_yesno(monkeypatch: pytest.MonkeyPatch, raw: str, default_yes: bool, expected: bool) -> None:
    _answers(monkeypatch, raw)

    assert prompts.ui_prompt_yesno("Proceed?", default_yes=default_yes) is expected


def test_ui_prompt_int_retries_until_in_range(monkeypatch: pytest.MonkeyPatch) -> None:
    asked = _answers(monkeypatch, "abc", "500", "42")
    lines = _capture(monkeypatch)

    assert prompts.ui_prompt_int("Results per page", default=30, minimum=1, maximum=100) == 42
    assert len(asked) == 3
    assert asked[0] == ("Results per page", "30")
    assert lines.count("[yellow][WARNING][/yellow] Please enter a number between 1 and 100") == 2


def test_ui_menu_matches_keys_case_insensitively(monkeypatch: pytest.MonkeyPatch) -> None:
    _answers(monkeypatch, "q")
    lines = _capture(monkeypatch)

    choice = prompts.ui_menu("Main Menu:", [("S", "Search"), ("Q", "[exit]")], default="S")

    assert choice == "Q"
    assert lines[0] == "\nMain Menu:"
    assert lines[2] == "  [cyan]\\[Q][/cyan] \\[exit]"


def test_ui_menu_unknown_answer_warns_and_returns_none(monkeypatch: pytest.MonkeyPatch) -> None:
    _answers(monkeypatch, "zzz")
    lines = _capture(monkeypatch)

    assert prompts.ui_menu("Pick:", [("1", "One")]) is None
    assert lines[-1] == "[yellow][WARNING][/yellow] Unknown choice. Please select a listed option."


@pytest.mark.parametrize(
    ("color", "expected"),
    [("cyan", "cyan"), ("Gray", "grey50"), ("grey", "grey50"), ("", "default"), (None, "default"), ("nope", "default")],
)
def test_theme_style_maps_and_validates_colors(color: str | None, expected: str) -> None:
    assert prompts.theme_style(color) == expected
