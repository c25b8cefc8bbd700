"""Interactive settings menu: one flat get/set form per section."""

from __future__ import annotations

from typing import Any, Callable

from rich.markup import escape
from rich.panel import Panel

from prowling.config import ConfigError, ProwlingConfig, save_config
from prowling.navigation.state import SessionState
from prowling.prompts import (
    console,
    theme_style,
    ui_error,
    ui_menu,
    ui_pause,
    ui_prompt,
    ui_prompt_int,
    ui_prompt_yesno,
    ui_warn,
)
from prowling.settings.forms import (
    FORMS_BY_KEY,
    SETTINGS_FORMS,
    FieldSpec,
    SettingsForm,
    apply_value,
    current_value,
    reset_to_defaults,
    validate_value,
)

ConnectionCallback = Callable[[SessionState], None]
_RECONNECT_FIELDS = {"server_url", "api_key"}


def persist_config(config: ProwlingConfig) -> bool:
    try:
        save_config(config)
    except ConfigError as exc:
        ui_error(escape(str(exc)))
        return False
    return True


def _styled(config: ProwlingConfig, role: str, message: str) -> str:
    style = theme_style(getattr(config.theme, role, None))
    return f"[{style}]{message}[/{style}]"


def run_settings_menu(session: SessionState, on_connection_change: ConnectionCallback) -> None:
    config = session.config
    console.print(Panel(_styled(config, "primary", "[bold]⚙️ Settings Menu[/bold]"), expand=False))
    options = [(str(idx), form.title) for idx, form in enumerate(SETTINGS_FORMS, start=1)]
    options.extend([("R", "↺ Reset to Default Settings"), ("B", "← Back to Main Menu")])
    keys = {str(idx): form.key for idx, form in enumerate(SETTINGS_FORMS, start=1)}

    while True:
        choice = ui_menu("Select a setting to customize:", options, default="B")
        if choice is None:
            continue
        if choice == "B":
            return
        if choice == "R":
            _reset_settings(session)
            continue
        run_settings_form(session, FORMS_BY_KEY[keys[choice]], on_connection_change)


def _reset_settings(session: SessionState) -> None:
    if not ui_prompt_yesno("Are you sure you want to reset all settings to default?", default_yes=False):
        return
    reset_to_defaults(session.config)
    if persist_config(session.config):
        console.print(_styled(session.config, "success", "✓ Settings reset to default"))


def run_settings_form(
    session: SessionState,
    form: SettingsForm,
    on_connection_change: ConnectionCallback,
) -> None:
    config = session.config
    console.print(_styled(config, "info", f"\n📝 {form.title}"))
    console.print(_styled(config, "secondary", form.description))

    options = [(str(idx), field.label) for idx, field in enumerate(form.fields, start=1)]
    options.append(("B", "← Back to Settings Menu"))
    choice = ui_menu("Select a setting to customize:", options, default="B")
    if choice is None or choice == "B":
        return
    field = form.fields[int(choice) - 1]

    if field.kind == "info":
        for line in field.info:
            console.print(_styled(config, "secondary", line))
        ui_pause("Press Enter to continue")
        return

    previous = current_value(config, field)
    value = _ask_value(config, field)
    try:
        apply_value(config, field, value)
    except ValueError as exc:
        ui_warn(escape(str(exc)))
        ui_pause("Press Enter to continue")
        return

    if field.info and value is True:
        for line in field.info:
            console.print(_styled(config, "secondary", line))
    if field.target == "connection" and field.name in _RECONNECT_FIELDS and value != previous:
        on_connection_change(session)
    if persist_config(config):
        console.print(_styled(config, "success", f"✓ {field.label} updated successfully"))
    if field.target == "theme":
        _preview_theme(config)
    ui_pause("Press Enter to continue")


def _ask_value(config: ProwlingConfig, field: FieldSpec) -> Any:
    current = current_value(config, field)
    prompt = field.prompt or f"Enter new value for {field.label}"
    if field.kind == "bool":
        return ui_prompt_yesno(prompt, default_yes=bool(current))
    if field.kind == "int":
        return ui_prompt_int(prompt, default=int(current), minimum=field.minimum, maximum=field.maximum)
    if field.kind == "choice":
        while True:
            choice = ui_menu(f"{prompt}:", field.choices, default=str(current), prompt_label="Value")
            if choice is not None:
                return choice
    while True:
        if field.kind == "password":
            label = f"{prompt} (Enter keeps the current key)" if current else prompt
            value = ui_prompt(label, password=True).strip()
            # Empty answer keeps the stored key.
            if not value and current:
                return current
        else:
            value = ui_prompt(prompt, default=str(current or "")).strip()
        error = validate_value(field, value)
        if error is None:
            return value
        ui_warn(error)


def _preview_theme(config: ProwlingConfig) -> None:
    console.print(_styled(config, "info", "\nTheme Preview:"))
    for role, sample in (
        ("primary", "Primary Text"),
        ("secondary", "Secondary Text"),
        ("success", "Success Message"),
        ("error", "Error Message"),
        ("warning", "Warning Message"),
        ("info", "Info Message"),
        ("highlight", "Highlighted Item"),
    ):
        console.print(_styled(config, role, sample))
