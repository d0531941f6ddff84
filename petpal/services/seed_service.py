"""Default category seeding."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from petpal.models.category import Category


logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES = ("Dogs", "Cats", "Birds", "Rodents", "Reptiles")


async def seed_default_categories(session: AsyncSession) -> int:
    """
    Insert the default categories when the table is empty.

    Returns:
        Number of categories inserted (0 when categories already exist)
    """
    result = await session.execute(select(func.count()).select_from(Category))
    count = result.scalar_one()
    if count:
        logger.info(f"Categories already exist ({count}), skipping seed")
        return 0

    try:
        session.add_all([Category(name=name) for name in DEFAULT_CATEGORIES])
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Inserted {len(DEFAULT_CATEGORIES)} default categories")
    return len(DEFAULT_CATEGORIES)
