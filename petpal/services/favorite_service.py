"""Favorites service: idempotent add/remove and listing of bookmarked animals."""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from petpal.models.animal import Animal
from petpal.models.favorite import Favorite
from petpal.models.user import User
from petpal.services.animal_service import annotate_images


logger = logging.getLogger(__name__)


class FavoriteService:
    """Service for managing a user's favorite animals."""

    async def _exists(self, db: AsyncSession, user_id: int, animal_id: int) -> bool:
        query = (
            select(Favorite.id)
            .where(Favorite.user_id == user_id, Favorite.animal_id == animal_id)
            .limit(1)
        )
        result = await db.execute(query)
        return result.first() is not None

    async def add_favorite(
        self, db: AsyncSession, user_id: Optional[int], animal_id: Optional[int]
    ) -> bool:
        """
        Mark an animal as a favorite of the user.

        Adding an existing pair is a no-op. When the user or the animal does
        not exist nothing is written and False is returned.

        Returns:
            True if the favorite exists after the call
        """
        user = await db.get(User, user_id) if user_id is not None else None
        animal = await db.get(Animal, animal_id) if animal_id is not None else None
        if user is None or animal is None:
            logger.warning(
                f"add_favorite skipped: user {user_id} or animal {animal_id} not found"
            )
            return False

        if await self._exists(db, user_id, animal_id):
            return True

        try:
            db.add(Favorite(
                user_id=user_id,
                animal_id=animal_id,
                timestamp=datetime.now(timezone.utc),
            ))
            await db.commit()
        except IntegrityError:
            # Lost a race against an identical insert; the constraint kept one row
            await db.rollback()
            logger.info(f"Favorite ({user_id}, {animal_id}) already added concurrently")
            return True
        except Exception:
            await db.rollback()
            raise

        logger.info(f"User {user_id} added animal {animal_id} to favorites")
        return True

    async def remove_favorite(
        self, db: AsyncSession, user_id: Optional[int], animal_id: Optional[int]
    ) -> None:
        """Remove every favorite row for the pair. No-op when there is none."""
        if user_id is None or animal_id is None:
            return

        try:
            result = await db.execute(
                delete(Favorite).where(
                    Favorite.user_id == user_id,
                    Favorite.animal_id == animal_id,
                )
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        if result.rowcount:
            logger.info(f"User {user_id} removed animal {animal_id} from favorites")

    async def is_favorite(
        self, db: AsyncSession, user_id: Optional[int], animal_id: Optional[int]
    ) -> bool:
        if user_id is None or animal_id is None:
            return False
        return await self._exists(db, user_id, animal_id)

    async def get_favorites_by_user(
        self, db: AsyncSession, user_id: Optional[int]
    ) -> List[Favorite]:
        """Return the user's favorites with animal details, newest first."""
        if user_id is None:
            return []

        query = (
            select(Favorite)
            .options(
                joinedload(Favorite.animal).joinedload(Animal.category),
                joinedload(Favorite.animal).joinedload(Animal.owner),
            )
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.timestamp.desc(), Favorite.id.desc())
        )
        result = await db.execute(query)
        favorites = list(result.scalars().all())

        annotate_images(favorite.animal for favorite in favorites)
        return favorites

    async def get_favorite_animals_for_user(
        self, db: AsyncSession, user_id: Optional[int]
    ) -> List[Animal]:
        """Return just the animals the user marked as favorite."""
        if user_id is None:
            return []

        query = (
            select(Animal)
            .join(Favorite, Favorite.animal_id == Animal.id)
            .options(joinedload(Animal.owner), joinedload(Animal.category))
            .where(Favorite.user_id == user_id)
            .order_by(Favorite.timestamp.desc(), Favorite.id.desc())
        )
        result = await db.execute(query)
        animals = list(result.scalars().all())

        annotate_images(animals)
        return animals


# Singleton instance
favorite_service = FavoriteService()
