"""Favorites router for bookmarking animals."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.database import get_async_session
from petpal.dependencies import current_active_user
from petpal.models.animal import Animal
from petpal.models.favorite import Favorite
from petpal.models.user import User
from petpal.schemas.animal import AnimalRead
from petpal.schemas.favorite import FavoriteRead, FavoriteStatus
from petpal.services.favorite_service import favorite_service


router = APIRouter(
    prefix="/api/favorites",
    tags=["favorites"],
    responses={
        401: {"description": "Not authenticated"},
    }
)


@router.get("", response_model=List[FavoriteRead])
async def list_favorites(
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> List[Favorite]:
    """List the user's favorites with animal details, newest first."""
    return await favorite_service.get_favorites_by_user(session, user.id)


@router.get("/animals", response_model=List[AnimalRead])
async def list_favorite_animals(
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> List[Animal]:
    """List only the animals the user marked as favorite."""
    return await favorite_service.get_favorite_animals_for_user(session, user.id)


@router.get("/{animal_id}", response_model=FavoriteStatus)
async def get_favorite_status(
    animal_id: int,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> FavoriteStatus:
    """Report whether the animal is one of the user's favorites."""
    is_favorite = await favorite_service.is_favorite(session, user.id, animal_id)
    return FavoriteStatus(animal_id=animal_id, is_favorite=is_favorite)


@router.put("/{animal_id}", response_model=FavoriteStatus)
async def add_favorite(
    animal_id: int,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> FavoriteStatus:
    """Add an animal to the user's favorites. Adding it twice is harmless."""
    added = await favorite_service.add_favorite(session, user.id, animal_id)
    if not added:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Animal not found"
        )
    return FavoriteStatus(animal_id=animal_id, is_favorite=True)


@router.delete("/{animal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    animal_id: int,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> None:
    """Remove an animal from the user's favorites. No-op when it is not there."""
    await favorite_service.remove_favorite(session, user.id, animal_id)
