"""Navigation state for the interactive menus."""

from .state import MenuState, NavigationStack, ResultsSnapshot, ResultsView, SessionState

__all__ = [
    "MenuState",
    "NavigationStack",
    "ResultsSnapshot",
    "ResultsView",
    "SessionState",
]
