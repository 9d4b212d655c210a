"""
Authentication Dependencies - Resolve the signed-in user from a session token.

Clients send the token issued at login in the Authorization header:
'Authorization: Bearer <token>'. The token is decrypted, then the user
is reloaded from the store so deleted accounts lose access at once.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header

from neatrip.config import AuthError, NotFoundError
from neatrip.domains.accounts import SessionManager
from neatrip.domains.social import SocialService, User
from neatrip.interfaces.api.deps import get_session_manager, get_social_service

logger = logging.getLogger(__name__)


def get_session_token(authorization: Optional[str] = Header(None)) -> str | None:
    """Extract the bearer token, or None when the header is absent."""
    if not authorization:
        return None

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError("Invalid authentication scheme")
    return parts[1]


async def get_current_user_optional(
    token: str | None = Depends(get_session_token),
    sessions: SessionManager = Depends(get_session_manager),
    social: SocialService = Depends(get_social_service),
) -> User | None:
    """
    Get the user if the request carries a valid session, None otherwise.

    Use this for endpoints that work with or without authentication.
    """
    state = sessions.restore(token)
    if state.user is None:
        return None

    try:
        return await social.get_user(state.user.id)
    except NotFoundError:
        logger.info("Session for deleted user %s", state.user.id)
        return None


async def get_current_user(
    token: str | None = Depends(get_session_token),
    user: User | None = Depends(get_current_user_optional),
) -> User:
    """
    Require an authenticated user.

    Raises:
        AuthError: No token, or the token is invalid or expired
    """
    if token is None:
        raise AuthError("Missing authentication header")
    if user is None:
        raise AuthError("Invalid or expired session")
    return user
