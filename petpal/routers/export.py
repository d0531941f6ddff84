"""Export router serving the animal directory as XML."""
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.database import get_async_session
from petpal.services.animal_service import animal_service
from petpal.services.export_service import render_animals_xml


router = APIRouter(
    prefix="/export",
    tags=["export"],
)


@router.get("/animals.xml", response_class=Response)
async def export_animals_xml(
    session: AsyncSession = Depends(get_async_session),
) -> Response:
    """Export every animal, newest first, as an XML document (public endpoint)."""
    animals = await animal_service.list_all(session)
    return Response(
        content=render_animals_xml(animals),
        media_type="application/xml; charset=utf-8",
    )
