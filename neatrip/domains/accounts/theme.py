"""
Theme Preference - light, dark or follow the system.
"""

from __future__ import annotations

from enum import Enum

from neatrip.domains.base import CamelModel

STORAGE_KEY = "neatrip-theme"
DEFAULT_THEME = "system"
# Client hint carrying the browser's prefers-color-scheme
COLOR_SCHEME_HEADER = "Sec-CH-Prefers-Color-Scheme"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ThemePreference(CamelModel):
    theme: Theme = Theme.SYSTEM
    resolved_theme: Theme = Theme.LIGHT
    storage_key: str = STORAGE_KEY


class ThemeUpdate(CamelModel):
    theme: Theme


def resolve_theme(theme: Theme | str | None, system_hint: str | None = None) -> Theme:
    """An explicit choice wins; "system" follows the client hint, light by default."""
    choice = Theme(theme) if theme else Theme.SYSTEM
    if choice is not Theme.SYSTEM:
        return choice
    if system_hint and system_hint.strip().strip('"').lower() == "dark":
        return Theme.DARK
    return Theme.LIGHT


def theme_preference(theme: Theme | str | None, system_hint: str | None = None) -> ThemePreference:
    choice = Theme(theme) if theme else Theme.SYSTEM
    return ThemePreference(theme=choice, resolved_theme=resolve_theme(choice, system_hint))
