"""
Accounts Domain - Forms, passwords, sessions and theme preference.

This domain handles:
- Validating account, post and place forms
- Hashing and verifying passwords
- Encrypted session tokens carrying the signed-in user
- Resolving the light/dark theme
"""

from .forms import CreatePlaceForm, CreatePostForm, LoginForm, ProfileForm, RegisterForm
from .passwords import hash_password, verify_password
from .session import AuthState, SessionManager, SessionResult
from .theme import (
    COLOR_SCHEME_HEADER,
    STORAGE_KEY,
    Theme,
    ThemePreference,
    ThemeUpdate,
    resolve_theme,
    theme_preference,
)

__all__ = [
    "CreatePlaceForm",
    "CreatePostForm",
    "LoginForm",
    "ProfileForm",
    "RegisterForm",
    "hash_password",
    "verify_password",
    "AuthState",
    "SessionManager",
    "SessionResult",
    "COLOR_SCHEME_HEADER",
    "STORAGE_KEY",
    "Theme",
    "ThemePreference",
    "ThemeUpdate",
    "resolve_theme",
    "theme_preference",
]
