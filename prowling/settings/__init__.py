"""Settings forms and the interactive settings menu."""

from .forms import FORMS_BY_KEY, SETTINGS_FORMS, FieldSpec, SettingsForm, apply_value, reset_to_defaults
from .menu import persist_config, run_settings_menu

__all__ = [
    "FORMS_BY_KEY",
    "SETTINGS_FORMS",
    "FieldSpec",
    "SettingsForm",
    "apply_value",
    "persist_config",
    "reset_to_defaults",
    "run_settings_menu",
]
