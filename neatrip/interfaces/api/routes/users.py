"""
User Routes - Public profiles and follows.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from neatrip.domains.base import CamelModel
from neatrip.domains.social import SocialService, User, UserProfile
from neatrip.interfaces.api.auth import get_current_user, get_current_user_optional
from neatrip.interfaces.api.deps import get_social_service

router = APIRouter()


class FollowStatus(CamelModel):
    following: bool
    follower_count: int


@router.get("/{user_id}", response_model=UserProfile)
async def get_profile(
    user_id: str,
    viewer: User | None = Depends(get_current_user_optional),
    social: SocialService = Depends(get_social_service),
):
    """Profile with post, follower and following counts."""
    return await social.get_profile(user_id, viewer_id=viewer.id if viewer else None)


@router.post("/{user_id}/follow", response_model=FollowStatus)
async def follow(
    user_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    await social.follow_user(user.id, user_id)
    return FollowStatus(following=True, follower_count=await social.follower_count(user_id))


@router.delete("/{user_id}/follow", response_model=FollowStatus)
async def unfollow(
    user_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    await social.unfollow_user(user.id, user_id)
    return FollowStatus(following=False, follower_count=await social.follower_count(user_id))
