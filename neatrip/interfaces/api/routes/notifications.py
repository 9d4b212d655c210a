"""
Notification Routes - The signed-in user's notifications.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from neatrip.domains.social import Notification, SocialService, User
from neatrip.interfaces.api.auth import get_current_user
from neatrip.interfaces.api.deps import get_social_service

router = APIRouter()


@router.get("", response_model=list[Notification])
async def list_notifications(
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    limit: int | None = Query(default=None, ge=1, le=100),
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    """Newest first."""
    return await social.list_notifications(user.id, unread_only=unread_only, limit=limit)


@router.post("/read-all")
async def mark_all_read(
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
) -> dict[str, int]:
    return {"updated": await social.mark_all_notifications_read(user.id)}


@router.post("/{notification_id}/read", response_model=Notification)
async def mark_read(
    notification_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    return await social.mark_notification_read(notification_id, user.id)
