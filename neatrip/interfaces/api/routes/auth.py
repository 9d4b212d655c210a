"""
Auth Routes - Registration, login and the signed-in profile.

Successful login and profile updates return a fresh session token that
the client sends back as 'Authorization: Bearer <token>'.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from neatrip.adapters.analytics import AnalyticsTracker
from neatrip.config import AuthError
from neatrip.domains.accounts import (
    AuthState,
    LoginForm,
    ProfileForm,
    RegisterForm,
    SessionManager,
    hash_password,
    verify_password,
)
from neatrip.domains.base import CamelModel
from neatrip.domains.social import SocialService, User
from neatrip.interfaces.api.auth import get_current_user, get_session_token
from neatrip.interfaces.api.deps import get_session_manager, get_social_service, get_tracker

logger = logging.getLogger(__name__)

router = APIRouter()


class AuthResponse(CamelModel):
    token: str
    user: User


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    form: RegisterForm,
    social: SocialService = Depends(get_social_service),
    sessions: SessionManager = Depends(get_session_manager),
    tracker: AnalyticsTracker = Depends(get_tracker),
):
    """Create an account and sign it in. 409 if email or username is taken."""
    user = await social.create_user(
        email=form.email,
        name=form.name,
        username=form.username,
        password_hash=hash_password(form.password),
    )
    await tracker.track("user_registered", {"userId": user.id})
    return AuthResponse(token=sessions.login(user), user=user)


@router.post("/login", response_model=AuthResponse)
async def login(
    form: LoginForm,
    social: SocialService = Depends(get_social_service),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Exchange credentials for a session token. 401 on bad credentials."""
    user = await social.find_user_by_email(form.email)
    if user is None or not verify_password(form.password, user.password_hash):
        logger.info("Failed login for %s", form.email)
        raise AuthError("Invalid email or password")

    return AuthResponse(token=sessions.login(user), user=user)


@router.get("/me", response_model=User)
async def me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=AuthResponse)
async def update_me(
    form: ProfileForm,
    user: User = Depends(get_current_user),
    token: str | None = Depends(get_session_token),
    social: SocialService = Depends(get_social_service),
    sessions: SessionManager = Depends(get_session_manager),
):
    """Update the profile; only fields present in the body change."""
    changes = form.model_dump(exclude_unset=True)
    updated = await social.update_user(user.id, **changes)

    result = sessions.update(token, changes)
    return AuthResponse(token=result.token or sessions.login(updated), user=updated)


@router.post("/logout", response_model=AuthState)
async def logout(sessions: SessionManager = Depends(get_session_manager)):
    """Tokens are stateless; the client discards its copy."""
    return sessions.logout()
