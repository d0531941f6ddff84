"""
Animals router for adoption listings.

This module provides:
- Public search of the animal directory with filters and sort order
- Listing of the authenticated user's own animals
- Creating a listing with an optional picture (multipart form)
- Owner-only deletion
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.config import Settings
from petpal.database import get_async_session
from petpal.dependencies import current_active_user
from petpal.models.animal import Animal
from petpal.models.user import User
from petpal.schemas.animal import AnimalCreate, AnimalRead, AnimalSearchParams
from petpal.services.animal_service import AnimalStateError, animal_service, annotate_images
from petpal.services.image_service import ImageService, ImageValidationError


logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/animals",
    tags=["animals"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Animal not found"},
    }
)


def get_image_service() -> ImageService:
    """Dependency to get ImageService instance."""
    settings = Settings()
    return ImageService(settings)


def animal_form(
    name: str = Form(...),
    category_id: int = Form(...),
    age: int = Form(0),
    gender: Optional[str] = Form(None),
    short_description: Optional[str] = Form(None),
    full_description: Optional[str] = Form(None),
) -> AnimalCreate:
    """Collect the multipart form fields into an AnimalCreate."""
    try:
        return AnimalCreate(
            name=name,
            category_id=category_id,
            age=age,
            gender=gender or None,
            short_description=short_description or None,
            full_description=full_description or None,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.get("", response_model=List[AnimalRead])
async def search_animals(
    params: AnimalSearchParams = Depends(),
    session: AsyncSession = Depends(get_async_session),
) -> List[Animal]:
    """
    Search the animal directory (public endpoint).

    **Query parameters (all optional):**
    - category_id: exact category
    - gender: exact gender; empty means any
    - min_age / max_age: inclusive age range
    - sort_by: name, age or category; anything else sorts by listing time
    - sort_dir: DESC (any case) for descending, otherwise ascending

    **Returns:** Matching animals with owner, category and base64 picture
    """
    return await animal_service.search(
        session,
        category_id=params.category_id,
        gender=params.gender,
        min_age=params.min_age,
        max_age=params.max_age,
        sort_by=params.sort_by,
        sort_dir=params.sort_dir,
    )


@router.get("/mine", response_model=List[AnimalRead])
async def list_my_animals(
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> List[Animal]:
    """List the authenticated user's animals, newest first."""
    return await animal_service.list_by_owner(session, user.id)


@router.get("/{animal_id}", response_model=AnimalRead)
async def get_animal(
    animal_id: int,
    session: AsyncSession = Depends(get_async_session),
) -> Animal:
    """Get one animal by id (public endpoint)."""
    animal = await animal_service.get_animal(session, animal_id)
    if animal is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Animal not found"
        )
    return animal


@router.post("", response_model=AnimalRead, status_code=status.HTTP_201_CREATED)
async def create_animal(
    animal_data: AnimalCreate = Depends(animal_form),
    image: Optional[UploadFile] = File(None),
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
    image_service: ImageService = Depends(get_image_service),
) -> Animal:
    """
    List a new animal for adoption.

    The animal is owned by the authenticated user and stamped with the
    current time.

    **Form fields:**
    - name (required), category_id (required)
    - age (default 0, not negative), gender, short_description, full_description
    - image: optional picture file (jpeg, png, gif or webp)

    **Returns:** The created listing
    """
    try:
        image_bytes = await image_service.read_upload(image)
    except ImageValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    animal = Animal(
        name=animal_data.name,
        age=animal_data.age,
        gender=animal_data.gender,
        short_description=animal_data.short_description,
        full_description=animal_data.full_description,
    )

    try:
        animal = await animal_service.save_animal(
            session, animal, user, animal_data.category_id, image_bytes
        )
    except AnimalStateError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    annotate_images([animal])
    return animal


@router.delete("/{animal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_animal(
    animal_id: int,
    user: User = Depends(current_active_user),
    session: AsyncSession = Depends(get_async_session),
) -> None:
    """
    Delete an animal owned by the authenticated user.

    Favorites and messages about the animal are removed with it. A missing
    animal and one owned by someone else get the same 404.
    """
    deleted = await animal_service.delete_if_owner(session, animal_id, user.id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Animal not found"
        )
