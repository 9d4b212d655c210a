"""
Authentication - Session tokens for signed-in users.

Flow:
    POST /api/auth/login → encrypted session token
    Later requests: 'Authorization: Bearer <token>' → current user
"""

from .deps import get_current_user, get_current_user_optional, get_session_token

__all__ = [
    "get_current_user",
    "get_current_user_optional",
    "get_session_token",
]
