"""Unit tests for FavoriteService."""
import base64
from datetime import datetime, timezone

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from petpal.models.favorite import Favorite
from petpal.services.favorite_service import favorite_service


NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def rex(test_user, categories, make_animal):
    return await make_animal(test_user, categories["Dogs"], "Rex", image_blob=b"img")


@pytest.fixture
async def luna(other_user, categories, make_animal):
    return await make_animal(other_user, categories["Cats"], "Luna")


async def favorite_count(session) -> int:
    result = await session.execute(select(func.count()).select_from(Favorite))
    return result.scalar_one()


class TestAddFavorite:
    """Test adding favorites."""

    @pytest.mark.asyncio
    async def test_add(self, async_session, other_user, rex):
        assert await favorite_service.add_favorite(async_session, other_user.id, rex.id) is True

        assert await favorite_service.is_favorite(async_session, other_user.id, rex.id)

    @pytest.mark.asyncio
    async def test_add_twice_keeps_one_row(self, async_session, other_user, rex):
        await favorite_service.add_favorite(async_session, other_user.id, rex.id)
        assert await favorite_service.add_favorite(async_session, other_user.id, rex.id) is True

        assert await favorite_count(async_session) == 1

    @pytest.mark.asyncio
    async def test_add_missing_animal(self, async_session, other_user):
        assert await favorite_service.add_favorite(async_session, other_user.id, 9999) is False

        assert await favorite_count(async_session) == 0

    @pytest.mark.asyncio
    async def test_add_missing_user(self, async_session, rex):
        assert await favorite_service.add_favorite(async_session, 9999, rex.id) is False
        assert await favorite_service.add_favorite(async_session, None, rex.id) is False

        assert await favorite_count(async_session) == 0

    @pytest.mark.asyncio
    async def test_storage_rejects_duplicate_pair(self, async_session, other_user, rex):
        user_id, animal_id = other_user.id, rex.id
        async_session.add(Favorite(user_id=user_id, animal_id=animal_id, timestamp=NOW))
        await async_session.commit()

        async_session.add(Favorite(user_id=user_id, animal_id=animal_id, timestamp=NOW))
        with pytest.raises(IntegrityError):
            await async_session.commit()
        await async_session.rollback()

        assert await favorite_count(async_session) == 1

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_counts_as_added(
        self, async_session, other_user, rex, monkeypatch
    ):
        user_id, animal_id = other_user.id, rex.id

        async def never_exists(db, user_id, animal_id):
            return False

        monkeypatch.setattr(favorite_service, "_exists", never_exists)

        assert await favorite_service.add_favorite(async_session, user_id, animal_id) is True
        assert await favorite_service.add_favorite(async_session, user_id, animal_id) is True

        assert await favorite_count(async_session) == 1


class TestRemoveFavorite:
    """Test removing favorites."""

    @pytest.mark.asyncio
    async def test_remove(self, async_session, other_user, rex):
        await favorite_service.add_favorite(async_session, other_user.id, rex.id)

        await favorite_service.remove_favorite(async_session, other_user.id, rex.id)

        assert not await favorite_service.is_favorite(async_session, other_user.id, rex.id)

    @pytest.mark.asyncio
    async def test_remove_absent_is_noop(self, async_session, other_user, rex):
        await favorite_service.remove_favorite(async_session, other_user.id, rex.id)
        await favorite_service.remove_favorite(async_session, None, rex.id)

        assert await favorite_count(async_session) == 0

    @pytest.mark.asyncio
    async def test_is_favorite_with_none(self, async_session, rex):
        assert await favorite_service.is_favorite(async_session, None, rex.id) is False


class TestListFavorites:
    """Test favorite listings."""

    @pytest.mark.asyncio
    async def test_favorites_newest_first(self, async_session, test_user, rex, luna):
        await favorite_service.add_favorite(async_session, test_user.id, rex.id)
        await favorite_service.add_favorite(async_session, test_user.id, luna.id)

        favorites = await favorite_service.get_favorites_by_user(async_session, test_user.id)

        assert [favorite.animal.name for favorite in favorites] == ["Luna", "Rex"]
        assert favorites[1].animal.category.name == "Dogs"
        assert favorites[1].animal.image_base64 == base64.b64encode(b"img").decode("ascii")

    @pytest.mark.asyncio
    async def test_favorites_are_per_user(self, async_session, test_user, other_user, rex, luna):
        await favorite_service.add_favorite(async_session, test_user.id, rex.id)
        await favorite_service.add_favorite(async_session, other_user.id, luna.id)

        animals = await favorite_service.get_favorite_animals_for_user(async_session, other_user.id)

        assert [animal.name for animal in animals] == ["Luna"]
        assert animals[0].owner.username == "bob"

    @pytest.mark.asyncio
    async def test_favorites_for_none(self, async_session):
        assert await favorite_service.get_favorites_by_user(async_session, None) == []
        assert await favorite_service.get_favorite_animals_for_user(async_session, None) == []
