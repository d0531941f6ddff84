"""Favorite schemas for API responses."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from petpal.schemas.animal import AnimalRead


class FavoriteRead(BaseModel):
    """A bookmarked animal with the time it was bookmarked."""
    id: int
    user_id: int
    animal_id: int
    timestamp: Optional[datetime] = None
    animal: AnimalRead

    model_config = ConfigDict(from_attributes=True)


class FavoriteStatus(BaseModel):
    """Whether an animal is in the current user's favorites."""
    animal_id: int
    is_favorite: bool
