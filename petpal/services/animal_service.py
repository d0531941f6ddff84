"""Animal directory service: categories, search, listing and ownership-scoped writes."""
import base64
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager, joinedload

from petpal.models.animal import Animal
from petpal.models.category import Category
from petpal.models.favorite import Favorite
from petpal.models.message import Message
from petpal.models.user import User
from petpal.services.image_service import drain_image


logger = logging.getLogger(__name__)


SORT_COLUMNS = {
    "name": Animal.name,
    "age": Animal.age,
    "category": Category.name,
    "timestamp": Animal.timestamp,
}
DEFAULT_SORT_BY = "timestamp"
DEFAULT_SORT_DIR = "DESC"


class AnimalStateError(ValueError):
    """Raised when an animal cannot be saved (no owner, unknown category)."""


def annotate_images(animals: Iterable[Animal]) -> None:
    """Set ``image_base64`` on each animal that has picture bytes."""
    for animal in animals:
        if animal.image_blob:
            animal.image_base64 = base64.b64encode(animal.image_blob).decode("ascii")
        else:
            animal.image_base64 = None


class AnimalService:
    """Service for reading and writing animal listings."""

    async def list_categories(self, db: AsyncSession) -> List[Category]:
        """Return all categories ordered by name."""
        result = await db.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def find_category(
        self, db: AsyncSession, category_id: Optional[int]
    ) -> Optional[Category]:
        if category_id is None:
            return None
        return await db.get(Category, category_id)

    async def get_animal(
        self, db: AsyncSession, animal_id: int, with_base64: bool = True
    ) -> Optional[Animal]:
        """Fetch one animal with owner and category, or None."""
        query = (
            select(Animal)
            .options(joinedload(Animal.owner), joinedload(Animal.category))
            .where(Animal.id == animal_id)
        )
        result = await db.execute(query)
        animal = result.scalar_one_or_none()
        if animal is not None and with_base64:
            annotate_images([animal])
        return animal

    async def search(
        self,
        db: AsyncSession,
        category_id: Optional[int] = None,
        gender: Optional[str] = None,
        min_age: Optional[int] = None,
        max_age: Optional[int] = None,
        sort_by: Optional[str] = DEFAULT_SORT_BY,
        sort_dir: Optional[str] = DEFAULT_SORT_DIR,
        with_base64: bool = True,
    ) -> List[Animal]:
        """
        Search animals by optional filters and sort order.

        Args:
            db: Database session
            category_id: Exact category match when given
            gender: Exact gender match when given and non-empty
            min_age: Inclusive lower age bound
            max_age: Inclusive upper age bound
            sort_by: One of name, age, category, timestamp; anything else
                sorts by timestamp
            sort_dir: DESC (any case) for descending; anything else is ascending
            with_base64: Annotate animals with their picture as base64

        Returns:
            Matching animals with owner and category loaded
        """
        query = (
            select(Animal)
            .join(Category, Animal.category_id == Category.id)
            .options(contains_eager(Animal.category), joinedload(Animal.owner))
        )

        if category_id is not None:
            query = query.where(Animal.category_id == category_id)
        if gender:
            query = query.where(Animal.gender == gender)
        if min_age is not None:
            query = query.where(Animal.age >= min_age)
        if max_age is not None:
            query = query.where(Animal.age <= max_age)

        sort_column = SORT_COLUMNS.get(sort_by or "", Animal.timestamp)
        descending = (sort_dir or "").upper() == "DESC"
        if descending:
            query = query.order_by(sort_column.desc(), Animal.id.desc())
        else:
            query = query.order_by(sort_column.asc(), Animal.id.asc())

        result = await db.execute(query)
        animals = list(result.scalars().all())

        if with_base64:
            annotate_images(animals)
        return animals

    async def save_animal(
        self,
        db: AsyncSession,
        animal: Animal,
        owner: Optional[User],
        category_id: Optional[int],
        image: Any = None,
    ) -> Animal:
        """
        Persist a new animal listing for ``owner``.

        The image (bytes, an upload, or a binary stream) is read completely
        before any database work, so a slow upload never holds a
        transaction open.

        Raises:
            AnimalStateError: owner missing, category missing or unknown
        """
        if owner is None:
            raise AnimalStateError("User is not logged in")
        if category_id is None:
            raise AnimalStateError("No category selected")

        image_bytes = await drain_image(image)

        category = await self.find_category(db, category_id)
        if category is None:
            raise AnimalStateError("Category not found")
        owner_row = await db.get(User, owner.id)
        if owner_row is None:
            raise AnimalStateError("Owner not found")

        animal.owner = owner_row
        animal.category = category
        animal.timestamp = datetime.now(timezone.utc)
        if image_bytes:
            animal.image_blob = image_bytes

        try:
            db.add(animal)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(f"Animal {animal.id} ({animal.name}) listed by user {owner_row.id}")
        return animal

    async def delete_if_owner(
        self,
        db: AsyncSession,
        animal_id: Optional[int],
        owner_id: Optional[int],
    ) -> bool:
        """
        Delete an animal if it belongs to ``owner_id``.

        Favorites and messages pointing at the animal are removed first, then
        the animal, all in one transaction. Returns False, touching nothing,
        when the animal is missing or owned by someone else.
        """
        if animal_id is None or owner_id is None:
            return False

        try:
            animal = await db.get(Animal, animal_id)
            if animal is None or animal.owner_id != owner_id:
                return False

            await db.execute(delete(Favorite).where(Favorite.animal_id == animal_id))
            await db.execute(delete(Message).where(Message.animal_id == animal_id))
            await db.delete(animal)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(f"Animal {animal_id} deleted by owner {owner_id}")
        return True

    async def list_by_owner(
        self,
        db: AsyncSession,
        owner_id: Optional[int],
        with_base64: bool = True,
    ) -> List[Animal]:
        """Return the owner's animals, newest first."""
        if owner_id is None:
            return []

        query = (
            select(Animal)
            .options(joinedload(Animal.owner), joinedload(Animal.category))
            .where(Animal.owner_id == owner_id)
            .order_by(Animal.timestamp.desc(), Animal.id.desc())
        )
        result = await db.execute(query)
        animals = list(result.scalars().all())

        if with_base64:
            annotate_images(animals)
        return animals

    async def list_all(self, db: AsyncSession) -> List[Animal]:
        """Return every animal, newest first, without picture annotation."""
        query = (
            select(Animal)
            .options(joinedload(Animal.owner), joinedload(Animal.category))
            .order_by(Animal.timestamp.desc(), Animal.id.desc())
        )
        result = await db.execute(query)
        return list(result.scalars().all())


# Singleton instance
animal_service = AnimalService()
