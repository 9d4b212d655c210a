"""
Post Routes - Feed, posts, likes, comments and shares.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import Field

from neatrip.domains.accounts import CreatePostForm
from neatrip.domains.base import CamelModel
from neatrip.domains.social import Comment, FeedPage, FeedPost, Share, SocialService, User
from neatrip.interfaces.api.auth import get_current_user, get_current_user_optional
from neatrip.interfaces.api.deps import get_social_service

router = APIRouter()


class CommentCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=2200)
    parent_id: str | None = None


class ShareCreate(CamelModel):
    platform: str = "link"


class LikeStatus(CamelModel):
    liked: bool
    like_count: int


@router.get("", response_model=FeedPage)
async def feed(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=50),
    author_id: str | None = Query(default=None, alias="authorId"),
    viewer: User | None = Depends(get_current_user_optional),
    social: SocialService = Depends(get_social_service),
):
    """Newest posts first. `hasMore` tells whether another page exists."""
    return await social.get_feed(
        viewer_id=viewer.id if viewer else None,
        page=page,
        limit=limit,
        author_id=author_id,
    )


@router.post("", response_model=FeedPost, status_code=status.HTTP_201_CREATED)
async def create_post(
    form: CreatePostForm,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    return await social.create_post(
        user.id,
        caption=form.caption,
        location=form.location,
        place_id=form.place_id,
        tags=form.tags,
        media_urls=form.media_urls,
        is_reel=form.is_reel,
    )


@router.get("/{post_id}", response_model=FeedPost)
async def get_post(
    post_id: str,
    viewer: User | None = Depends(get_current_user_optional),
    social: SocialService = Depends(get_social_service),
):
    return await social.get_post(post_id, viewer_id=viewer.id if viewer else None)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
) -> Response:
    """Authors only (403 otherwise). Removes likes, comments, shares and media."""
    await social.delete_post(post_id, user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/like", response_model=LikeStatus)
async def like_post(
    post_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    count = await social.like_post(user.id, post_id)
    return LikeStatus(liked=True, like_count=count)


@router.delete("/{post_id}/like", response_model=LikeStatus)
async def unlike_post(
    post_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    count = await social.unlike_post(user.id, post_id)
    return LikeStatus(liked=False, like_count=count)


@router.get("/{post_id}/comments", response_model=list[Comment])
async def list_comments(
    post_id: str,
    social: SocialService = Depends(get_social_service),
):
    """Oldest first, replies nested under their parent."""
    return await social.list_comments(post_id)


@router.post(
    "/{post_id}/comments", response_model=Comment, status_code=status.HTTP_201_CREATED
)
async def create_comment(
    post_id: str,
    body: CommentCreate,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    return await social.create_comment(user.id, post_id, body.content, body.parent_id)


@router.delete("/{post_id}/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    post_id: str,
    comment_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
) -> Response:
    await social.delete_comment(comment_id, user.id, post_id=post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{post_id}/share", response_model=Share, status_code=status.HTTP_201_CREATED)
async def share_post(
    post_id: str,
    body: ShareCreate | None = None,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
) -> Any:
    platform = body.platform if body else "link"
    return await social.share_post(user.id, post_id, platform)
