"""Categories router for the fixed list of animal kinds."""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.database import get_async_session
from petpal.models.category import Category
from petpal.schemas.category import CategoryRead
from petpal.services.animal_service import animal_service


router = APIRouter(
    prefix="/api/categories",
    tags=["categories"],
)


@router.get("", response_model=List[CategoryRead])
async def list_categories(
    session: AsyncSession = Depends(get_async_session),
) -> List[Category]:
    """List all categories ordered by name (public endpoint)."""
    return await animal_service.list_categories(session)
