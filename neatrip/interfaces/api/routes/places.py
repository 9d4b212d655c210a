"""
Place Routes - Curated places and the user's saved list.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from neatrip.domains.accounts import CreatePlaceForm
from neatrip.domains.social import Place, PlaceCategory, SocialService, User
from neatrip.interfaces.api.auth import get_current_user, get_current_user_optional
from neatrip.interfaces.api.deps import get_social_service

router = APIRouter()


@router.get("", response_model=list[Place])
async def list_places(
    category: PlaceCategory | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    social: SocialService = Depends(get_social_service),
):
    """Newest first, optionally filtered by category."""
    return await social.list_places(category=category, limit=limit, offset=offset)


@router.post("", response_model=Place, status_code=status.HTTP_201_CREATED)
async def create_place(
    form: CreatePlaceForm,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    fields = form.model_dump(exclude={"name", "location", "category", "media_urls"})
    return await social.create_place(
        name=form.name,
        location=form.location,
        category=form.category,
        created_by=user.id,
        media_urls=form.media_urls,
        **fields,
    )


# Declared before /{place_id} so "saved" is not read as an id
@router.get("/saved", response_model=list[Place])
async def saved_places(
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
):
    return await social.list_saved_places(user.id)


@router.get("/{place_id}", response_model=Place)
async def get_place(
    place_id: str,
    viewer: User | None = Depends(get_current_user_optional),
    social: SocialService = Depends(get_social_service),
):
    return await social.get_place(place_id, viewer_id=viewer.id if viewer else None)


@router.post("/{place_id}/save", status_code=status.HTTP_204_NO_CONTENT)
async def save_place(
    place_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
) -> Response:
    await social.save_place(user.id, place_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{place_id}/save", status_code=status.HTTP_204_NO_CONTENT)
async def unsave_place(
    place_id: str,
    user: User = Depends(get_current_user),
    social: SocialService = Depends(get_social_service),
) -> Response:
    await social.unsave_place(user.id, place_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
