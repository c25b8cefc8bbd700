"""Console and prompt helpers shared by the interactive menus."""

from __future__ import annotations

from typing import Sequence

from rich.color import Color, ColorParseError
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

console = Console()

# Theme colors that are not valid rich color names.
_COLOR_ALIASES = {"gray": "grey50", "grey": "grey50"}


def theme_style(color: str | None, fallback: str = "default") -> str:
    name = _COLOR_ALIASES.get((color or "").strip().lower(), (color or "").strip().lower())
    if not name:
        return fallback
    try:
        Color.parse(name)
    except ColorParseError:
        return fallback
    return name


def ui_info(message: str) -> None:
    console.print(f"[cyan][INFO][/cyan] {message}")


def ui_warn(message: str) -> None:
    console.print(f"[yellow][WARNING][/yellow] {message}")


def ui_error(message: str) -> None:
    console.print(f"[red][ERROR][/red] {message}")


def ui_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def ui_prompt(label: str, default: str | None = None, *, password: bool = False) -> str:
    if password:
        return Prompt.ask(label, password=True)
    if default is None:
        return Prompt.ask(label)
    return Prompt.ask(label, default=default)


def ui_pause(label: str = "Press Enter to go back") -> None:
    ui_prompt(label, default="")


def ui_prompt_yesno(
    label: str,
    *,
    default_yes: bool,
    allow_cancel: bool = False,
) -> bool:
    suffix = ("[Y/n" if default_yes else "[y/N") + (", c=cancel]" if allow_cancel else "]")

    choice = ui_prompt(f"{label} {suffix}", default="Y" if default_yes else "N").strip().lower()
    if not choice:
        return default_yes
    first = choice[0]
    if first == "y":
        return True
    if first == "n":
        return False
    if allow_cancel and first in {"c", "x"}:
        return False
    return default_yes


def ui_prompt_int(label: str, *, default: int, minimum: int, maximum: int) -> int:
    """Ask until the answer is an integer within ``minimum..maximum``."""
    while True:
        raw = ui_prompt(label, default=str(default)).strip()
        try:
            value = int(raw)
        except ValueError:
            value = None
        if value is not None and minimum <= value <= maximum:
            return value
        ui_warn(f"Please enter a number between {minimum} and {maximum}")


def ui_menu(
    title: str,
    options: Sequence[tuple[str, str]],
    *,
    default: str | None = None,
    prompt_label: str = "Choice",
) -> str | None:
    """Print ``[key] label`` lines and return the chosen key, or None for an unknown answer."""
    console.print(f"\n{title}")
    for key, label in options:
        console.print(f"  [cyan]\\[{escape(key)}][/cyan] {escape(label)}")
    answer = ui_prompt(prompt_label, default=default).strip().lower()
    for key, _label in options:
        if key.lower() == answer:
            return key
    ui_warn("Unknown choice. Please select a listed option.")
    return None
