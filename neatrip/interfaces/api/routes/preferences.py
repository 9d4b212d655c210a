"""
Preference Routes - Light/dark theme.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header

from neatrip.domains.accounts import ThemePreference, ThemeUpdate, theme_preference
from neatrip.domains.social import SocialService, User
from neatrip.interfaces.api.auth import get_current_user_optional
from neatrip.interfaces.api.deps import get_social_service

router = APIRouter()


@router.get("/theme", response_model=ThemePreference)
async def get_theme(
    user: User | None = Depends(get_current_user_optional),
    color_scheme: Optional[str] = Header(None, alias="Sec-CH-Prefers-Color-Scheme"),
):
    """Stored theme for signed-in users, "system" otherwise, plus its resolution."""
    return theme_preference(user.theme if user else None, color_scheme)


@router.put("/theme", response_model=ThemePreference)
async def set_theme(
    update: ThemeUpdate,
    user: User | None = Depends(get_current_user_optional),
    color_scheme: Optional[str] = Header(None, alias="Sec-CH-Prefers-Color-Scheme"),
    social: SocialService = Depends(get_social_service),
):
    """Signed-in users keep the choice on their record; others get it echoed back."""
    if user is not None:
        await social.update_user(user.id, theme=update.theme.value)
    return theme_preference(update.theme, color_scheme)
